"""Usage sample and derived statistics models."""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, List, Sequence

from pydantic import Field, field_validator

from .base_models import RightsizerBaseModel


class PatternType(str, Enum):
    """Usage variability classes derived from the coefficient of variation."""
    STEADY = "steady"
    MODERATE = "moderate"
    SPIKY = "spiky"
    HIGHLY_VARIABLE = "highly-variable"
    UNKNOWN = "unknown"


class SeasonalPattern(str, Enum):
    """Time-of-day usage shape."""
    BUSINESS_HOURS = "business-hours"
    STEADY = "steady"
    VARIABLE = "variable"
    INSUFFICIENT_DATA = "insufficient-data"


class Sample(RightsizerBaseModel):
    """A single usage observation (millicores for CPU, bytes for memory)."""

    timestamp: datetime
    value: float = Field(..., ge=0, allow_inf_nan=False)

    @field_validator('timestamp')
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class PercentileSummary(RightsizerBaseModel):
    """Distribution summary of a fixed sample set."""

    average: float
    p50: float
    p90: float
    p95: float
    p99: float
    peak: float
    min: float


class UsagePattern(RightsizerBaseModel):
    """Variability classification of a usage series."""

    type: PatternType = PatternType.UNKNOWN
    variation: float = Field(0.0, ge=0, description="Coefficient of variation")
    confidence: float = Field(0.0, ge=0, le=1)


class GrowthTrend(RightsizerBaseModel):
    """Linear growth estimate of a usage series."""

    rate_per_month: float = Field(0.0, description="Signed growth in percent per month")
    confidence: float = Field(0.0, ge=0, le=1, description="R² of the linear fit")
    predicted_3_month: float = 0.0
    predicted_6_month: float = 0.0
    is_growing: bool = False


def samples_from_series(series: Iterable[Sequence[Any]]) -> List[Sample]:
    """Build a timestamp-ordered sample list from ``(timestamp, value)`` pairs.

    Pairs with a missing, negative or non-finite value are dropped. Timestamps may be
    epoch seconds, ISO strings or datetimes.
    """
    samples: List[Sample] = []
    for ts, value in series:
        if value is None:
            continue
        try:
            fv = float(value)
        except (TypeError, ValueError):
            continue
        if not math.isfinite(fv) or fv < 0:
            continue
        samples.append(Sample(timestamp=ts, value=fv))
    samples.sort(key=lambda s: s.timestamp)
    return samples
