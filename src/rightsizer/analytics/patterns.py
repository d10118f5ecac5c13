# src/rightsizer/analytics/patterns.py
"""
Usage pattern classification - variability class and time-of-day shape
"""

from collections import defaultdict
from typing import Dict, List, Sequence

import numpy as np

from rightsizer.analytics.statistics import coefficient_of_variation, variation_of_values
from rightsizer.models.usage import PatternType, Sample, SeasonalPattern, UsagePattern

MIN_PATTERN_SAMPLES = 10
# two weeks of hourly points
MIN_SEASONAL_SAMPLES = 336

# (upper CV bound, pattern, confidence), first match wins
PATTERN_BANDS = (
    (0.15, PatternType.STEADY, 0.95),
    (0.35, PatternType.MODERATE, 0.85),
    (0.70, PatternType.SPIKY, 0.80),
    (float("inf"), PatternType.HIGHLY_VARIABLE, 0.75),
)

BUSINESS_HOURS = (9, 12, 15)
NIGHT_HOURS = (0, 3, 23)
BUSINESS_HOURS_RATIO = 1.5
STEADY_HOURLY_CV = 0.15


def classify_pattern(samples: Sequence[Sample]) -> UsagePattern:
    """Label a series by its coefficient of variation.

    Fewer than 10 samples yields an ``unknown`` pattern with zero confidence.
    """
    if len(samples) < MIN_PATTERN_SAMPLES:
        return UsagePattern(type=PatternType.UNKNOWN, variation=0.0, confidence=0.0)

    cv = coefficient_of_variation(samples)
    for upper, pattern_type, confidence in PATTERN_BANDS:
        if cv < upper:
            return UsagePattern(type=pattern_type, variation=cv, confidence=confidence)

    # only reachable for a NaN cv
    return UsagePattern(type=PatternType.UNKNOWN, variation=0.0, confidence=0.0)


def hourly_means(samples: Sequence[Sample]) -> List[float]:
    """Mean value per UTC hour of day; hours without data are 0."""
    by_hour: Dict[int, List[float]] = defaultdict(list)
    for sample in samples:
        by_hour[sample.timestamp.hour].append(sample.value)

    return [float(np.mean(by_hour[hour])) if by_hour.get(hour) else 0.0 for hour in range(24)]


def detect_seasonal_pattern(samples: Sequence[Sample]) -> SeasonalPattern:
    """Detect a business-hours, steady or variable time-of-day shape."""
    if len(samples) < MIN_SEASONAL_SAMPLES:
        return SeasonalPattern.INSUFFICIENT_DATA

    means = hourly_means(samples)
    business_avg = sum(means[h] for h in BUSINESS_HOURS) / len(BUSINESS_HOURS)
    night_avg = sum(means[h] for h in NIGHT_HOURS) / len(NIGHT_HOURS)

    if business_avg > night_avg * BUSINESS_HOURS_RATIO:
        return SeasonalPattern.BUSINESS_HOURS

    if variation_of_values(means) < STEADY_HOURLY_CV:
        return SeasonalPattern.STEADY

    return SeasonalPattern.VARIABLE
