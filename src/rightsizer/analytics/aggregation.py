# src/rightsizer/analytics/aggregation.py
"""
Observation aggregation - per-pod averaging and historical enrichment
"""

from typing import List, Optional, Sequence, Tuple
import structlog

from rightsizer.analytics.growth import estimate_growth
from rightsizer.analytics.patterns import classify_pattern
from rightsizer.analytics.policies import DEFAULT_POLICY_TABLES, PolicyTables
from rightsizer.analytics.statistics import compute_percentiles, split_samples_by_weekday
from rightsizer.core.exceptions import EmptyInputError, InsufficientDataError
from rightsizer.core.utils import MIB
from rightsizer.models.usage import GrowthTrend, Sample, UsagePattern
from rightsizer.models.workload import (
    AggregatedWorkloadObservation,
    Environment,
    PodUsage,
    WorkloadType,
)

logger = structlog.get_logger(__name__)

WEEKLY_SPLIT_THRESHOLD = 0.2


def resolve_workload_owner(kind: Optional[str], name: Optional[str]) -> Tuple[WorkloadType, str]:
    """Resolve a pod owner reference to its top-level workload.

    A ReplicaSet named ``<deployment>-<hash>`` resolves to the Deployment.
    """
    if not kind or not name:
        return WorkloadType.UNKNOWN, ""

    if kind == WorkloadType.REPLICA_SET.value:
        head, sep, _ = name.rpartition("-")
        if sep and head:
            return WorkloadType.DEPLOYMENT, head

    return WorkloadType(kind), name


def aggregate_pods(pods: Sequence[PodUsage]) -> Tuple[int, int, int, int]:
    """Integer means of (requested CPU, requested memory, observed CPU, observed memory)."""
    if not pods:
        raise EmptyInputError("pods")

    n = len(pods)
    return (
        sum(p.requested_cpu_m for p in pods) // n,
        sum(p.requested_memory_bytes for p in pods) // n,
        sum(p.observed_cpu_m for p in pods) // n,
        sum(p.observed_memory_bytes for p in pods) // n,
    )


def _peak_p95(samples: Sequence[Sample]) -> Tuple[float, float, float]:
    """(chosen P95, weekday P95, weekend P95); an empty bucket reports 0."""
    overall = compute_percentiles(samples).p95
    weekday, weekend = split_samples_by_weekday(samples)
    weekday_p95 = compute_percentiles(weekday).p95 if weekday else 0.0
    weekend_p95 = compute_percentiles(weekend).p95 if weekend else 0.0

    if weekday and weekend:
        return max(weekday_p95, weekend_p95), weekday_p95, weekend_p95
    return overall, weekday_p95, weekend_p95


def _differs(a: float, b: float) -> bool:
    if a <= 0 or b <= 0:
        return False
    return abs(a - b) / ((a + b) / 2) > WEEKLY_SPLIT_THRESHOLD


def _growth_or_zero(samples: Sequence[Sample]) -> Tuple[GrowthTrend, bool]:
    try:
        return estimate_growth(samples), True
    except InsufficientDataError as e:
        logger.debug("Growth trend unavailable", required=e.required, actual=e.actual)
        return e.trend, False


def span_days(samples: Sequence[Sample]) -> float:
    if len(samples) < 2:
        return 0.0
    return (samples[-1].timestamp - samples[0].timestamp).total_seconds() / 86400.0


def build_observation(namespace: str, name: str, workload_type, pods: Sequence[PodUsage], *,
                      environment=Environment.UNKNOWN,
                      hpa_name: Optional[str] = None,
                      cpu_samples: Optional[List[Sample]] = None,
                      memory_samples: Optional[List[Sample]] = None,
                      lookback_days: int = 7,
                      resolution_minutes: int = 5,
                      tables: PolicyTables = DEFAULT_POLICY_TABLES) -> AggregatedWorkloadObservation:
    """Build the decision-policy input for one workload.

    Without both sample series the instantaneous pod averages are used and the
    observation is flagged as lacking sufficient data.
    """
    req_cpu, req_mem, obs_cpu, obs_mem = aggregate_pods(pods)
    workload_type = WorkloadType(workload_type or WorkloadType.UNKNOWN)
    environment = Environment(environment or Environment.UNKNOWN)
    log = logger.bind(workload=f"{namespace}/{name}")

    fields = dict(
        namespace=namespace,
        name=name,
        workload_type=workload_type,
        environment=environment,
        requested_cpu_m=req_cpu,
        requested_memory_bytes=req_mem,
        observed_cpu_m=obs_cpu,
        observed_memory_bytes=obs_mem,
        replicas=len(pods),
        has_hpa=bool(hpa_name),
        hpa_name=hpa_name or "",
    )

    if not cpu_samples or not memory_samples:
        log.debug("No historical series, using instantaneous usage",
                  cpu_samples=len(cpu_samples or []), memory_samples=len(memory_samples or []))
        return AggregatedWorkloadObservation(**fields)

    cpu_samples = sorted(cpu_samples, key=lambda s: s.timestamp)
    memory_samples = sorted(memory_samples, key=lambda s: s.timestamp)

    cpu_p95, weekday_cpu, weekend_cpu = _peak_p95(cpu_samples)
    mem_p95, weekday_mem, weekend_mem = _peak_p95(memory_samples)

    cpu_pattern: UsagePattern = classify_pattern(cpu_samples)
    memory_pattern: UsagePattern = classify_pattern(memory_samples)
    cpu_growth, cpu_growth_ok = _growth_or_zero(cpu_samples)
    memory_growth, _ = _growth_or_zero(memory_samples)

    expected = lookback_days * 24 * 60 / resolution_minutes
    data_quality = min(1.0, len(cpu_samples) / expected) if expected > 0 else 0.0

    required_days = tables.min_data_days(workload_type, environment)
    has_sufficient_data = span_days(cpu_samples) >= required_days and cpu_growth_ok

    overall_cpu_p95 = compute_percentiles(cpu_samples).p95
    overall_mem_p95 = compute_percentiles(memory_samples).p95
    note = f"Based on {lookback_days}-day P95: CPU {overall_cpu_p95:.0f}m, Memory {overall_mem_p95 / MIB:.0f}Mi"
    if _differs(weekday_cpu, weekend_cpu):
        note += f" (Weekday: {weekday_cpu:.0f}m, Weekend: {weekend_cpu:.0f}m)"
    if _differs(weekday_mem, weekend_mem):
        note += f", Memory (Weekday: {weekday_mem / MIB:.0f}Mi, Weekend: {weekend_mem / MIB:.0f}Mi)"

    log.info(
        "Using historical analysis",
        lookback_days=lookback_days,
        cpu_samples=len(cpu_samples),
        memory_samples=len(memory_samples),
        data_quality=round(data_quality, 2),
        has_sufficient_data=has_sufficient_data
    )

    fields.update(
        observed_cpu_m=int(cpu_p95),
        observed_memory_bytes=int(mem_p95),
        cpu_pattern=cpu_pattern,
        memory_pattern=memory_pattern,
        cpu_growth=cpu_growth,
        memory_growth=memory_growth,
        data_quality=data_quality,
        has_sufficient_data=has_sufficient_data,
        context_note=note,
    )
    return AggregatedWorkloadObservation(**fields)
