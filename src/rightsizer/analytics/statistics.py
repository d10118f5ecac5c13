# src/rightsizer/analytics/statistics.py
"""
Statistics engine - percentile summaries and variability over usage samples
"""

from typing import Iterable, List, Sequence, Tuple

import numpy as np

from rightsizer.core.exceptions import EmptyInputError
from rightsizer.models.usage import PercentileSummary, Sample

# datetime.weekday(): Saturday=5, Sunday=6
WEEKEND_DAYS = (5, 6)


def percentiles_from_values(values: Iterable[float]) -> PercentileSummary:
    """Summarise a bag of values; order does not matter."""
    data = np.sort(np.asarray(list(values), dtype=float))
    if data.size == 0:
        raise EmptyInputError("values")

    # numpy's default "linear" method interpolates between the ranks
    # floor(r) and ceil(r) with r = p/100 * (n-1)
    p50, p90, p95, p99 = np.percentile(data, [50, 90, 95, 99])

    return PercentileSummary(
        average=float(np.mean(data)),
        p50=float(p50),
        p90=float(p90),
        p95=float(p95),
        p99=float(p99),
        peak=float(data[-1]),
        min=float(data[0]),
    )


def compute_percentiles(samples: Sequence[Sample]) -> PercentileSummary:
    """Compute average, P50/P90/P95/P99, peak and min of a sample set."""
    if not samples:
        raise EmptyInputError("samples")
    return percentiles_from_values(s.value for s in samples)


def coefficient_of_variation(samples: Sequence[Sample]) -> float:
    """Population standard deviation divided by the mean.

    Returns 0 for fewer than two samples or a zero mean.
    """
    return variation_of_values([s.value for s in samples])


def variation_of_values(values: Sequence[float]) -> float:
    """Coefficient of variation of bare values (population stddev / |mean|)."""
    if len(values) < 2:
        return 0.0

    data = np.asarray(values, dtype=float)
    mean = float(np.mean(data))
    if mean == 0:
        return 0.0

    return float(np.std(data)) / abs(mean)


def split_samples_by_weekday(samples: Sequence[Sample]) -> Tuple[List[Sample], List[Sample]]:
    """Partition samples into (weekday, weekend) by their UTC calendar day."""
    weekday: List[Sample] = []
    weekend: List[Sample] = []

    for sample in samples:
        if sample.timestamp.weekday() in WEEKEND_DAYS:
            weekend.append(sample)
        else:
            weekday.append(sample)

    return weekday, weekend
