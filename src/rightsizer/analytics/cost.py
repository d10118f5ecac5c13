# src/rightsizer/analytics/cost.py
"""
Cost delta calculator - monthly cost of requested and recommended resources
"""

from typing import Dict, Optional
import structlog

from rightsizer.core.utils import GIB
from rightsizer.models.recommendation import CostInfo
from rightsizer.pricing.provider import CostInfoProvider
from rightsizer.pricing.static import DEFAULT_CPU_COST_PER_CORE, DEFAULT_MEMORY_COST_PER_GIB

logger = structlog.get_logger(__name__)

FALLBACK_COST_INFO = CostInfo(
    provider="default",
    region="unknown",
    cpu_cost_per_core=DEFAULT_CPU_COST_PER_CORE,
    memory_cost_per_gib=DEFAULT_MEMORY_COST_PER_GIB,
    currency="USD",
)


def monthly_cost(cpu_m: float, memory_bytes: float, cost_info: CostInfo) -> float:
    """Monthly cost of ``cpu_m`` millicores plus ``memory_bytes`` bytes."""
    return (cpu_m / 1000.0) * cost_info.cpu_cost_per_core + \
        (memory_bytes / GIB) * cost_info.memory_cost_per_gib


class CostCalculator:
    """Resolves unit prices through a provider and prices resource amounts.

    Provider failures never propagate: the fixed default rates are used instead.
    """

    def __init__(self, provider: Optional[CostInfoProvider] = None, region: Optional[str] = None):
        self.provider = provider
        self.region = region
        self.logger = logger.bind(calculator="cost")

    @property
    def provider_name(self) -> str:
        return self.provider.name if self.provider is not None else FALLBACK_COST_INFO.provider

    def cost_info(self) -> CostInfo:
        if self.provider is None:
            return FALLBACK_COST_INFO

        try:
            return self.provider.get_cost_info(self.region)
        except Exception as e:
            self.logger.warning(
                "Pricing provider failed, using default rates",
                provider=self.provider.name,
                error=str(e)
            )
            return FALLBACK_COST_INFO

    def monthly_cost(self, cpu_m: float, memory_bytes: float) -> float:
        return monthly_cost(cpu_m, memory_bytes, self.cost_info())

    def workload_cost(self, current_cpu_m: float, current_memory_bytes: float,
                      recommended_cpu_m: float, recommended_memory_bytes: float,
                      replicas: int = 1) -> Dict[str, float]:
        """Current, recommended and saved monthly cost across ``replicas`` pods."""
        cost_info = self.cost_info()
        current = monthly_cost(current_cpu_m, current_memory_bytes, cost_info) * replicas
        recommended = monthly_cost(recommended_cpu_m, recommended_memory_bytes, cost_info) * replicas

        return {
            "current": current,
            "recommended": recommended,
            "savings": current - recommended,
        }
