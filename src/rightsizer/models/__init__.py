from .base_models import *
from .usage import *
from .workload import *
from .recommendation import *
from .validation import *

__all__ = [
    "RightsizerBaseModel",
    "Sample",
    "PercentileSummary",
    "PatternType",
    "SeasonalPattern",
    "UsagePattern",
    "GrowthTrend",
    "samples_from_series",
    "WorkloadType",
    "Environment",
    "RiskLevel",
    "PodUsage",
    "AggregatedWorkloadObservation",
    "RecommendationType",
    "Rating",
    "Confidence",
    "CostInfo",
    "Recommendation",
    "validate_observation",
    "ensure_valid_request",
]
