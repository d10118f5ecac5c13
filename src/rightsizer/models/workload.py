"""Workload, environment and observation models."""

from enum import Enum
from typing import Optional

from pydantic import Field

from .base_models import RightsizerBaseModel
from .usage import GrowthTrend, UsagePattern


class WorkloadType(str, Enum):
    """Kind of deployment unit owning the pods."""
    DEPLOYMENT = "Deployment"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"
    JOB = "Job"
    CRON_JOB = "CronJob"
    REPLICA_SET = "ReplicaSet"
    UNKNOWN = "Unknown"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class Environment(str, Enum):
    """Namespace environment class."""
    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class RiskLevel(str, Enum):
    """Risk posture of a workload or environment."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class PodUsage(RightsizerBaseModel):
    """Requested and observed resources of one pod container."""

    name: str
    container: str = ""
    requested_cpu_m: int = 0
    requested_memory_bytes: int = 0
    observed_cpu_m: int = Field(0, ge=0)
    observed_memory_bytes: int = Field(0, ge=0)


class AggregatedWorkloadObservation(RightsizerBaseModel):
    """One logical workload as seen by the decision policy.

    Requests and usages are the mean over the workload's pods; the averaging
    happens in ``rightsizer.analytics.aggregation`` before this object is
    built.
    """

    namespace: str
    name: str
    workload_type: WorkloadType = WorkloadType.UNKNOWN
    environment: Environment = Environment.UNKNOWN

    requested_cpu_m: int
    requested_memory_bytes: int
    observed_cpu_m: int = Field(0, ge=0)
    observed_memory_bytes: int = Field(0, ge=0)
    replicas: int = Field(1, ge=1)

    has_hpa: bool = False
    hpa_name: str = ""

    cpu_pattern: UsagePattern = Field(default_factory=UsagePattern)
    memory_pattern: UsagePattern = Field(default_factory=UsagePattern)
    cpu_growth: GrowthTrend = Field(default_factory=GrowthTrend)
    memory_growth: GrowthTrend = Field(default_factory=GrowthTrend)

    data_quality: float = Field(0.0, ge=0, le=1)
    has_sufficient_data: bool = False
    context_note: Optional[str] = None
