# src/rightsizer/analytics/policies.py
"""
Workload and environment policy tables
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional

from rightsizer.models.base_models import RightsizerBaseModel
from rightsizer.models.workload import Environment, RiskLevel, WorkloadType

MIN_COMBINED_BUFFER = 1.2


class WorkloadPolicy(RightsizerBaseModel):
    """Sizing policy for a workload class."""

    safety_buffer: float
    min_data_days: int
    description: str
    risk_level: RiskLevel
    optimize_enabled: bool


class EnvironmentPolicy(RightsizerBaseModel):
    """Sizing policy for an environment class."""

    buffer_multiplier: float
    min_data_days: int
    risk_tolerance: RiskLevel
    description: str
    is_production: bool


WORKLOAD_POLICIES: Dict[WorkloadType, WorkloadPolicy] = {
    WorkloadType.DEPLOYMENT: WorkloadPolicy(
        safety_buffer=1.5, min_data_days=5, description="Stateless application",
        risk_level=RiskLevel.LOW, optimize_enabled=True,
    ),
    WorkloadType.STATEFUL_SET: WorkloadPolicy(
        safety_buffer=2.0, min_data_days=7, description="Stateful application (databases, queues)",
        risk_level=RiskLevel.MEDIUM, optimize_enabled=True,
    ),
    WorkloadType.DAEMON_SET: WorkloadPolicy(
        safety_buffer=2.5, min_data_days=7, description="Node-critical service (monitoring, logging)",
        risk_level=RiskLevel.HIGH, optimize_enabled=False,
    ),
    WorkloadType.JOB: WorkloadPolicy(
        safety_buffer=1.2, min_data_days=3, description="Batch job workload",
        risk_level=RiskLevel.LOW, optimize_enabled=True,
    ),
    WorkloadType.CRON_JOB: WorkloadPolicy(
        safety_buffer=1.2, min_data_days=3, description="Scheduled batch workload",
        risk_level=RiskLevel.LOW, optimize_enabled=True,
    ),
    WorkloadType.REPLICA_SET: WorkloadPolicy(
        safety_buffer=1.5, min_data_days=5, description="Standalone ReplicaSet",
        risk_level=RiskLevel.MEDIUM, optimize_enabled=True,
    ),
}

DEFAULT_WORKLOAD_POLICY = WorkloadPolicy(
    safety_buffer=2.0, min_data_days=7, description="Unknown workload type",
    risk_level=RiskLevel.HIGH, optimize_enabled=False,
)

ENVIRONMENT_POLICIES: Dict[Environment, EnvironmentPolicy] = {
    Environment.PRODUCTION: EnvironmentPolicy(
        buffer_multiplier=1.3, min_data_days=7, risk_tolerance=RiskLevel.LOW,
        description="Production environment - conservative optimization", is_production=True,
    ),
    Environment.STAGING: EnvironmentPolicy(
        buffer_multiplier=1.0, min_data_days=5, risk_tolerance=RiskLevel.MEDIUM,
        description="Staging environment - balanced optimization", is_production=False,
    ),
    Environment.DEVELOPMENT: EnvironmentPolicy(
        buffer_multiplier=0.85, min_data_days=3, risk_tolerance=RiskLevel.HIGH,
        description="Development environment - aggressive optimization", is_production=False,
    ),
    Environment.UNKNOWN: EnvironmentPolicy(
        buffer_multiplier=1.2, min_data_days=7, risk_tolerance=RiskLevel.MEDIUM,
        description="Unknown environment - cautious optimization", is_production=False,
    ),
}


class PolicyTables:
    """Read-only workload and environment lookup tables."""

    def __init__(self,
                 workload_policies: Optional[Mapping[WorkloadType, WorkloadPolicy]] = None,
                 environment_policies: Optional[Mapping[Environment, EnvironmentPolicy]] = None,
                 default_workload_policy: WorkloadPolicy = DEFAULT_WORKLOAD_POLICY,
                 min_combined_buffer: float = MIN_COMBINED_BUFFER):
        self._workloads = MappingProxyType(dict(workload_policies or WORKLOAD_POLICIES))
        self._environments = MappingProxyType(dict(environment_policies or ENVIRONMENT_POLICIES))
        self._default_workload = default_workload_policy
        self._min_combined_buffer = min_combined_buffer

        if Environment.UNKNOWN not in self._environments:
            raise ValueError("Environment table must define the 'unknown' row")

    @property
    def workloads(self) -> Mapping[WorkloadType, WorkloadPolicy]:
        return self._workloads

    @property
    def environments(self) -> Mapping[Environment, EnvironmentPolicy]:
        return self._environments

    def workload_policy(self, workload_type) -> WorkloadPolicy:
        """Policy for a workload class; unknown classes get the conservative default."""
        return self._workloads.get(WorkloadType(workload_type or WorkloadType.UNKNOWN),
                                   self._default_workload)

    def environment_policy(self, environment) -> EnvironmentPolicy:
        """Policy for an environment class; unknown classes get the 'unknown' row."""
        env = Environment(environment or Environment.UNKNOWN)
        return self._environments.get(env, self._environments[Environment.UNKNOWN])

    def combined_safety_buffer(self, workload_type, environment) -> float:
        """Workload buffer times environment multiplier, never below 1.2."""
        combined = (self.workload_policy(workload_type).safety_buffer
                    * self.environment_policy(environment).buffer_multiplier)
        return max(self._min_combined_buffer, combined)

    def min_data_days(self, workload_type, environment) -> int:
        return max(self.workload_policy(workload_type).min_data_days,
                   self.environment_policy(environment).min_data_days)


DEFAULT_POLICY_TABLES = PolicyTables()


def combined_safety_buffer(workload_type, environment) -> float:
    return DEFAULT_POLICY_TABLES.combined_safety_buffer(workload_type, environment)


def min_data_days(workload_type, environment) -> int:
    return DEFAULT_POLICY_TABLES.min_data_days(workload_type, environment)


_LABEL_ALIASES = {
    Environment.PRODUCTION: ("production", "prod", "prd"),
    Environment.STAGING: ("staging", "stage", "stg"),
    Environment.DEVELOPMENT: ("development", "dev", "test", "testing"),
}

_TIER_ALIASES = {
    Environment.PRODUCTION: ("prod", "production"),
    Environment.STAGING: ("staging", "stage"),
    Environment.DEVELOPMENT: ("dev", "development"),
}

# substring patterns, checked in this order
_NAME_PATTERNS = (
    (Environment.PRODUCTION, ("prod", "production", "prd")),
    (Environment.STAGING, ("staging", "stage", "stg", "uat")),
    (Environment.DEVELOPMENT, ("dev", "develop", "test", "sandbox", "demo")),
)


def normalize_environment(label: Optional[str]) -> Environment:
    """Map an environment label value to an Environment."""
    value = (label or "").strip().lower()
    for environment, aliases in _LABEL_ALIASES.items():
        if value in aliases:
            return environment
    return Environment.UNKNOWN


def classify_environment(namespace: str, labels: Optional[Mapping[str, str]] = None) -> Environment:
    """Classify a namespace from its labels, falling back to its name."""
    labels = labels or {}

    if "environment" in labels:
        return normalize_environment(labels["environment"])

    tier = labels.get("tier")
    if tier is not None:
        for environment, aliases in _TIER_ALIASES.items():
            if tier in aliases:
                return environment

    name = (namespace or "").lower()
    for environment, patterns in _NAME_PATTERNS:
        if any(pattern in name for pattern in patterns):
            return environment

    return Environment.UNKNOWN
