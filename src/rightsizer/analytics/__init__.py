# src/rightsizer/analytics/__init__.py
"""
Rightsizing analytics - statistics, patterns, growth, policies and decisions
"""

from .statistics import (
    compute_percentiles,
    percentiles_from_values,
    coefficient_of_variation,
    split_samples_by_weekday,
)
from .patterns import classify_pattern, detect_seasonal_pattern
from .growth import estimate_growth, linear_regression
from .policies import (
    WorkloadPolicy,
    EnvironmentPolicy,
    PolicyTables,
    DEFAULT_POLICY_TABLES,
    combined_safety_buffer,
    min_data_days,
    normalize_environment,
    classify_environment,
)
from .cost import CostCalculator, monthly_cost
from .rightsizing import (
    PolicyThresholds,
    RightsizingPolicy,
    recommend,
    adjust_for_pattern,
    adjust_for_growth,
    calculate_confidence,
    build_pattern_info,
    rank_recommendations,
    summarize_recommendations,
)
from .aggregation import resolve_workload_owner, aggregate_pods, build_observation

__all__ = [
    "compute_percentiles",
    "percentiles_from_values",
    "coefficient_of_variation",
    "split_samples_by_weekday",
    "classify_pattern",
    "detect_seasonal_pattern",
    "estimate_growth",
    "linear_regression",
    "WorkloadPolicy",
    "EnvironmentPolicy",
    "PolicyTables",
    "DEFAULT_POLICY_TABLES",
    "combined_safety_buffer",
    "min_data_days",
    "normalize_environment",
    "classify_environment",
    "CostCalculator",
    "monthly_cost",
    "PolicyThresholds",
    "RightsizingPolicy",
    "recommend",
    "adjust_for_pattern",
    "adjust_for_growth",
    "calculate_confidence",
    "build_pattern_info",
    "rank_recommendations",
    "summarize_recommendations",
    "resolve_workload_owner",
    "aggregate_pods",
    "build_observation",
]
