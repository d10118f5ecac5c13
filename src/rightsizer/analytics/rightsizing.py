# src/rightsizer/analytics/rightsizing.py
"""
Rightsizing decision policy - turns an aggregated workload observation into a
RIGHT_SIZE, SCALE_DOWN or NO_ACTION recommendation with a cost delta
"""

from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Union
import structlog
from pydantic import Field

from rightsizer.analytics.cost import CostCalculator
from rightsizer.analytics.policies import DEFAULT_POLICY_TABLES, PolicyTables
from rightsizer.core.exceptions import InvalidRequestError
from rightsizer.core.utils import MIB
from rightsizer.models.base_models import RightsizerBaseModel
from rightsizer.models.recommendation import (
    Confidence,
    Rating,
    Recommendation,
    RecommendationType,
)
from rightsizer.models.usage import GrowthTrend, PatternType, UsagePattern
from rightsizer.models.validation import ensure_valid_request
from rightsizer.models.workload import AggregatedWorkloadObservation
from rightsizer.pricing.provider import CostInfoProvider

logger = structlog.get_logger(__name__)


class PolicyThresholds(RightsizerBaseModel):
    """Tunable constants of the decision policy."""

    idle_cpu_utilization: float = 0.05
    reduction_threshold_pct: float = 25.0
    min_monthly_savings: float = 1.0

    high_impact_savings: float = 50.0
    medium_impact_savings: float = 20.0
    high_risk_reduction_pct: float = 75.0
    medium_risk_reduction_pct: float = 50.0

    material_growth_rate: float = 5.0
    growth_hedge: float = 0.5

    min_buffer: float = 1.2
    max_buffer: float = 3.0
    steady_multiplier: float = 0.90
    moderate_multiplier: float = 1.0
    spiky_multiplier: float = 1.15
    highly_variable_multiplier: float = 1.25
    high_variation_cv: float = 0.5
    high_variation_multiplier: float = 1.10

    min_cpu_m: int = Field(10, ge=0)
    min_memory_bytes: int = Field(10 * MIB, ge=0)

    high_confidence_quality: float = 0.8
    medium_confidence_quality: float = 0.6

    def pattern_multiplier(self, pattern_type: PatternType) -> float:
        return {
            PatternType.STEADY: self.steady_multiplier,
            PatternType.MODERATE: self.moderate_multiplier,
            PatternType.SPIKY: self.spiky_multiplier,
            PatternType.HIGHLY_VARIABLE: self.highly_variable_multiplier,
        }.get(pattern_type, 1.0)


DEFAULT_THRESHOLDS = PolicyThresholds()


def adjust_for_pattern(buffer: float, pattern: UsagePattern,
                       thresholds: PolicyThresholds = DEFAULT_THRESHOLDS) -> float:
    """Scale a safety buffer by the CPU usage pattern, clamped to [1.2, 3.0]."""
    adjusted = buffer * thresholds.pattern_multiplier(pattern.type)

    if pattern.variation > thresholds.high_variation_cv:
        adjusted *= thresholds.high_variation_multiplier

    return min(max(adjusted, thresholds.min_buffer), thresholds.max_buffer)


def adjust_for_growth(value: int, growth: GrowthTrend,
                      thresholds: PolicyThresholds = DEFAULT_THRESHOLDS) -> int:
    """Add headroom for material growth: half the 3 month projection."""
    if not growth.is_growing or growth.rate_per_month <= thresholds.material_growth_rate:
        return value
    return value + int(growth.predicted_3_month * thresholds.growth_hedge)


def calculate_confidence(data_quality: float, has_sufficient_data: bool,
                         pattern_type: PatternType,
                         thresholds: PolicyThresholds = DEFAULT_THRESHOLDS) -> Confidence:
    if not has_sufficient_data:
        return Confidence.LOW
    if data_quality >= thresholds.high_confidence_quality and pattern_type == PatternType.STEADY:
        return Confidence.HIGH
    if data_quality >= thresholds.medium_confidence_quality:
        return Confidence.MEDIUM
    return Confidence.LOW


def build_pattern_info(cpu_pattern: UsagePattern, cpu_growth: GrowthTrend,
                       thresholds: PolicyThresholds = DEFAULT_THRESHOLDS) -> str:
    """Short display string such as ``"CPU: steady, Growing 12%/mo"``."""
    parts = []

    if cpu_pattern.type != PatternType.UNKNOWN:
        parts.append(f"CPU: {cpu_pattern.type.value}")

    if cpu_growth.is_growing and cpu_growth.rate_per_month > thresholds.material_growth_rate:
        parts.append(f"Growing {cpu_growth.rate_per_month:.0f}%/mo")

    if not parts:
        return "Insufficient data"

    return ", ".join(parts)


class RightsizingPolicy:
    """Multi-factor rightsizing decision policy.

    Stateless apart from its (immutable) tables and thresholds, so one instance
    can be shared across threads.
    """

    def __init__(self, tables: PolicyTables = DEFAULT_POLICY_TABLES,
                 thresholds: PolicyThresholds = DEFAULT_THRESHOLDS):
        self.tables = tables
        self.thresholds = thresholds
        self.logger = logger.bind(policy="rightsizing")

    def recommend(self, observation: AggregatedWorkloadObservation,
                  pricing: Union[CostInfoProvider, CostCalculator, None] = None) -> Recommendation:
        """Produce the recommendation for one workload."""
        calculator = pricing if isinstance(pricing, CostCalculator) else CostCalculator(pricing)
        t = self.thresholds
        obs = observation

        workload_policy = self.tables.workload_policy(obs.workload_type)
        confidence = calculate_confidence(obs.data_quality, obs.has_sufficient_data,
                                          obs.cpu_pattern.type, t)
        pattern_info = build_pattern_info(obs.cpu_pattern, obs.cpu_growth, t)

        base = dict(
            namespace=obs.namespace,
            name=obs.name,
            workload_type=obs.workload_type,
            environment=obs.environment,
            provider=calculator.provider_name,
            current_cpu_m=obs.requested_cpu_m,
            current_memory_bytes=obs.requested_memory_bytes,
            recommended_cpu_m=obs.requested_cpu_m,
            recommended_memory_bytes=obs.requested_memory_bytes,
            confidence=confidence,
            data_quality=obs.data_quality,
            has_sufficient_data=obs.has_sufficient_data,
            pattern_info=pattern_info,
        )
        workload_label = obs.workload_type.value
        env_label = obs.environment.value

        if obs.has_hpa:
            base["pattern_info"] = "HPA-managed"
            return self._finish(obs, RecommendationType.NO_ACTION, base,
                                f"Workload managed by HPA '{obs.hpa_name}' - autoscaler-managed, "
                                f"manual optimization not recommended",
                                impact=Rating.NOT_APPLICABLE, risk=Rating.NOT_APPLICABLE)

        if not workload_policy.optimize_enabled:
            return self._finish(obs, RecommendationType.NO_ACTION, base,
                                f"Workload type {workload_label} ({workload_policy.description}) "
                                f"- optimization disabled for safety",
                                impact=Rating.NOT_APPLICABLE,
                                risk=Rating(workload_policy.risk_level.value))

        try:
            ensure_valid_request(obs.requested_cpu_m, obs.requested_memory_bytes)
        except InvalidRequestError as e:
            base["confidence"] = Confidence.LOW
            return self._finish(obs, RecommendationType.NO_ACTION, base,
                                f"Invalid resource request ({e.field}={e.value}) "
                                f"- utilization cannot be computed",
                                impact=Rating.NOT_APPLICABLE, risk=Rating.NOT_APPLICABLE)

        cpu_util = obs.observed_cpu_m / obs.requested_cpu_m
        if cpu_util < t.idle_cpu_utilization:
            reason_parts = [f"Workload appears idle ({cpu_util * 100:.1f}% CPU utilization)"]
            if not obs.has_sufficient_data:
                min_days = self.tables.min_data_days(obs.workload_type, obs.environment)
                reason_parts.append(f"Limited historical data (<{min_days} days)")
            elif obs.cpu_pattern.type != PatternType.UNKNOWN:
                reason_parts.append(f"Pattern: {obs.cpu_pattern.type.value}")
            reason_parts.append(f"Workload: {workload_label}, Environment: {env_label}")

            base["recommended_cpu_m"] = 0
            base["recommended_memory_bytes"] = 0
            base["savings_monthly"] = calculator.monthly_cost(
                obs.requested_cpu_m, obs.requested_memory_bytes) * obs.replicas
            return self._finish(obs, RecommendationType.SCALE_DOWN, base,
                                " - ".join(reason_parts),
                                impact=Rating.HIGH,
                                risk=Rating(workload_policy.risk_level.value))

        buffer = adjust_for_pattern(
            self.tables.combined_safety_buffer(obs.workload_type, obs.environment),
            obs.cpu_pattern, t)

        rec_cpu = int(obs.observed_cpu_m * buffer)
        rec_mem = int(obs.observed_memory_bytes * buffer)
        if obs.has_sufficient_data:
            rec_cpu = adjust_for_growth(rec_cpu, obs.cpu_growth, t)
            rec_mem = adjust_for_growth(rec_mem, obs.memory_growth, t)
        rec_cpu = max(rec_cpu, t.min_cpu_m)
        rec_mem = max(rec_mem, t.min_memory_bytes)

        cpu_reduction = (obs.requested_cpu_m - rec_cpu) / obs.requested_cpu_m * 100
        mem_reduction = (obs.requested_memory_bytes - rec_mem) / obs.requested_memory_bytes * 100

        if cpu_reduction > t.reduction_threshold_pct or mem_reduction > t.reduction_threshold_pct:
            costs = calculator.workload_cost(obs.requested_cpu_m, obs.requested_memory_bytes,
                                             rec_cpu, rec_mem, obs.replicas)
            savings = costs["savings"]

            if savings < t.min_monthly_savings:
                return self._finish(obs, RecommendationType.NO_ACTION, base,
                                    f"Savings too small to justify change (${savings:.2f}/month) "
                                    f"- change overhead not worth minimal benefit",
                                    impact=Rating.NONE, risk=Rating.NONE)

            if savings > t.high_impact_savings:
                impact = Rating.HIGH
            elif savings > t.medium_impact_savings:
                impact = Rating.MEDIUM
            else:
                impact = Rating.LOW

            avg_reduction = (cpu_reduction + mem_reduction) / 2
            if avg_reduction > t.high_risk_reduction_pct:
                risk = Rating.HIGH
            elif avg_reduction > t.medium_risk_reduction_pct:
                risk = Rating.MEDIUM
            else:
                risk = Rating(workload_policy.risk_level.value)

            reason_parts = [
                f"Over-provisioned: CPU {cpu_reduction:.0f}% under-utilized, "
                f"Memory {mem_reduction:.0f}% under-utilized"
            ]
            if obs.has_sufficient_data:
                reason_parts.append(
                    f"Pattern: CPU {obs.cpu_pattern.type.value} (CV: {obs.cpu_pattern.variation:.2f})")
                if obs.cpu_growth.is_growing and obs.cpu_growth.rate_per_month > t.material_growth_rate:
                    reason_parts.append(f"Growing {obs.cpu_growth.rate_per_month:.1f}%/month")
            reason_parts.append(f"Workload: {workload_label}, Safety: {buffer:.1f}x, Env: {env_label}")

            base["recommended_cpu_m"] = rec_cpu
            base["recommended_memory_bytes"] = rec_mem
            base["savings_monthly"] = savings
            return self._finish(obs, RecommendationType.RIGHT_SIZE, base,
                                " | ".join(reason_parts), impact=impact, risk=risk)

        mem_util = obs.observed_memory_bytes / obs.requested_memory_bytes
        reason_parts = [
            "Resource allocation is appropriate",
            f"CPU utilization: {cpu_util * 100:.0f}%, Memory utilization: {mem_util * 100:.0f}%",
        ]
        if confidence == Confidence.HIGH and obs.cpu_pattern.type != PatternType.UNKNOWN:
            reason_parts.append(f"Pattern: {obs.cpu_pattern.type.value} (consistent)")

        return self._finish(obs, RecommendationType.NO_ACTION, base, " - ".join(reason_parts),
                            impact=Rating.NONE, risk=Rating.NONE)

    def _finish(self, obs: AggregatedWorkloadObservation, rec_type: RecommendationType,
                fields: Dict[str, Any], reason: str, impact: Rating, risk: Rating) -> Recommendation:
        if obs.context_note:
            reason = f"{reason} ({obs.context_note})"

        recommendation = Recommendation(type=rec_type, reason=reason, impact=impact, risk=risk, **fields)

        self.logger.debug(
            "Recommendation produced",
            workload=f"{obs.namespace}/{obs.name}",
            type=rec_type.value,
            savings=round(recommendation.savings_monthly, 2),
            confidence=recommendation.confidence.value
        )
        return recommendation


def recommend(observation: AggregatedWorkloadObservation,
              pricing: Union[CostInfoProvider, CostCalculator, None] = None) -> Recommendation:
    """Recommend with the default tables and thresholds."""
    return RightsizingPolicy().recommend(observation, pricing)


_TYPE_ORDER = {
    RecommendationType.SCALE_DOWN: 0,
    RecommendationType.RIGHT_SIZE: 0,
    RecommendationType.NO_ACTION: 1,
}


def rank_recommendations(recommendations: Iterable[Recommendation]) -> List[Recommendation]:
    """Actionable first, then by savings (highest first), then namespace/name."""
    return sorted(
        recommendations,
        key=lambda r: (_TYPE_ORDER[r.type], -r.savings_monthly, r.namespace, r.name)
    )


def summarize_recommendations(recommendations: Iterable[Recommendation],
                              currency: Optional[str] = None) -> Dict[str, Any]:
    """Counts per recommendation type and total monthly savings."""
    recs = list(recommendations)
    counts = Counter(r.type for r in recs)

    summary = {
        "total": len(recs),
        "right_size": counts.get(RecommendationType.RIGHT_SIZE, 0),
        "scale_down": counts.get(RecommendationType.SCALE_DOWN, 0),
        "no_action": counts.get(RecommendationType.NO_ACTION, 0),
        "total_monthly_savings": sum(r.savings_monthly for r in recs if r.is_actionable),
    }
    if currency:
        summary["currency"] = currency
    return summary
