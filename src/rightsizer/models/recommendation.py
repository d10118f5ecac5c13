"""Recommendation and pricing models."""

from enum import Enum

from pydantic import Field

from .base_models import RightsizerBaseModel
from .workload import Environment, WorkloadType
from ..core.utils import MIB


class RecommendationType(str, Enum):
    """What the operator is advised to do."""
    RIGHT_SIZE = "RIGHT_SIZE"
    SCALE_DOWN = "SCALE_DOWN"
    NO_ACTION = "NO_ACTION"


class Rating(str, Enum):
    """Impact / risk rating attached to a recommendation."""
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    NOT_APPLICABLE = "N/A"


class Confidence(str, Enum):
    """How much the recommendation can be trusted."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class CostInfo(RightsizerBaseModel):
    """Monthly unit prices for compute resources."""

    provider: str = "default"
    region: str = "unknown"
    cpu_cost_per_core: float = Field(..., ge=0, description="Currency per core per month")
    memory_cost_per_gib: float = Field(..., ge=0, description="Currency per GiB per month")
    currency: str = "USD"


class Recommendation(RightsizerBaseModel):
    """Advisory sizing decision for one workload."""

    type: RecommendationType
    namespace: str
    name: str
    workload_type: WorkloadType = WorkloadType.UNKNOWN
    environment: Environment = Environment.UNKNOWN
    provider: str = "default"

    current_cpu_m: int = 0
    current_memory_bytes: int = 0
    recommended_cpu_m: int = 0
    recommended_memory_bytes: int = 0

    reason: str = ""
    savings_monthly: float = 0.0
    impact: Rating = Rating.NONE
    risk: Rating = Rating.NONE
    confidence: Confidence = Confidence.LOW
    data_quality: float = 0.0
    has_sufficient_data: bool = False
    pattern_info: str = ""

    @property
    def is_actionable(self) -> bool:
        return self.type != RecommendationType.NO_ACTION

    def describe(self) -> str:
        """Render the recommendation as an operator-facing text block."""
        header = f"[{self.impact.value}] {self.namespace}/{self.name}: {self.reason}"
        if self.type == RecommendationType.NO_ACTION:
            return header

        current = f"  Current: {self.current_cpu_m}m CPU, {self.current_memory_bytes // MIB}Mi memory"
        if self.type == RecommendationType.SCALE_DOWN:
            target = "  Recommendation: Scale to 0 replicas"
        else:
            target = (
                f"  Recommended: {self.recommended_cpu_m}m CPU, "
                f"{self.recommended_memory_bytes // MIB}Mi memory"
            )

        return "\n".join([
            header,
            current,
            target,
            f"  Savings: ${self.savings_monthly:.2f}/month ({self.provider} pricing)",
            f"  Risk: {self.risk.value}, Confidence: {self.confidence.value}",
        ])
