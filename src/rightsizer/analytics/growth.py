# src/rightsizer/analytics/growth.py
"""
Growth trend estimation using ordinary least squares over hours-since-start
"""

from typing import Sequence, Tuple

import numpy as np

from rightsizer.core.exceptions import InsufficientDataError
from rightsizer.models.usage import GrowthTrend, Sample

MIN_GROWTH_SAMPLES = 100
HOURS_PER_MONTH = 24.0 * 30.0
GROWING_RATE_PER_MONTH = 3.0


def linear_regression(x: Sequence[float], y: Sequence[float]) -> Tuple[float, float, float]:
    """Fit ``y = slope * x + intercept``.

    Returns ``(slope, intercept, r2)`` with r2 clamped to [0, 1]. Empty input
    gives ``(0, 0, 0)``; a constant x gives ``(0, mean(y), 0)``.
    """
    if len(x) == 0:
        return 0.0, 0.0, 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    mean_x = float(np.mean(xs))
    mean_y = float(np.mean(ys))

    dx = xs - mean_x
    dy = ys - mean_y
    denominator = float(np.sum(dx * dx))
    if denominator == 0:
        return 0.0, mean_y, 0.0

    slope = float(np.sum(dx * dy)) / denominator
    intercept = mean_y - slope * mean_x

    residuals = ys - (slope * xs + intercept)
    ss_res = float(np.sum(residuals * residuals))
    ss_tot = float(np.sum(dy * dy))

    r2 = 0.0 if ss_tot == 0 else 1.0 - ss_res / ss_tot
    r2 = min(max(r2, 0.0), 1.0)

    return slope, intercept, r2


def estimate_growth(samples: Sequence[Sample]) -> GrowthTrend:
    """Estimate the monthly growth rate and 3/6 month projections of a series.

    Raises:
        InsufficientDataError: fewer than 100 samples; ``error.trend`` holds a
            zero-valued ``GrowthTrend`` callers may fall back to.
    """
    if len(samples) < MIN_GROWTH_SAMPLES:
        raise InsufficientDataError(MIN_GROWTH_SAMPLES, len(samples), trend=GrowthTrend())

    start = samples[0].timestamp
    x = [(s.timestamp - start).total_seconds() / 3600.0 for s in samples]
    y = [s.value for s in samples]

    slope, intercept, r2 = linear_regression(x, y)
    current_avg = float(np.mean(y))

    rate_per_month = 0.0
    if current_avg > 0:
        rate_per_month = slope * HOURS_PER_MONTH / current_avg * 100.0

    last_hours = x[-1]
    predicted_3_month = slope * (last_hours + 24 * 90) + intercept
    predicted_6_month = slope * (last_hours + 24 * 180) + intercept

    # shrinking series project to the current average rather than below zero
    if predicted_3_month < 0:
        predicted_3_month = current_avg
    if predicted_6_month < 0:
        predicted_6_month = current_avg

    return GrowthTrend(
        rate_per_month=rate_per_month,
        confidence=r2,
        predicted_3_month=predicted_3_month,
        predicted_6_month=predicted_6_month,
        is_growing=rate_per_month > GROWING_RATE_PER_MONTH,
    )
