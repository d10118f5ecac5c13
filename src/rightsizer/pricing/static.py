"""Static published-rate pricing providers."""

from typing import Dict, Optional, Tuple

from rightsizer.models.recommendation import CostInfo
from .provider import CostInfoProvider

DEFAULT_CPU_COST_PER_CORE = 23.0
DEFAULT_MEMORY_COST_PER_GIB = 3.0

# provider -> (USD per core per month, USD per GiB per month)
STATIC_RATES: Dict[str, Tuple[float, float]] = {
    "default": (DEFAULT_CPU_COST_PER_CORE, DEFAULT_MEMORY_COST_PER_GIB),
    "aws": (33.0, 4.5),
    "azure": (35.0, 4.3),
    "gcp": (31.0, 4.2),
}

DEFAULT_REGIONS = {
    "aws": "us-east-1",
    "azure": "eastus",
    "gcp": "us-central1",
    "default": "unknown",
}


class StaticPricingProvider(CostInfoProvider):
    """Serves fixed monthly rates for one provider."""

    def __init__(self, name: str, cpu_cost_per_core: float, memory_cost_per_gib: float,
                 region: Optional[str] = None, currency: str = "USD"):
        super().__init__(name=name, region=region or DEFAULT_REGIONS.get(name, "unknown"))
        self.cpu_cost_per_core = cpu_cost_per_core
        self.memory_cost_per_gib = memory_cost_per_gib
        self.currency = currency

    def get_cost_info(self, region: Optional[str] = None) -> CostInfo:
        return CostInfo(
            provider=self.name,
            region=region or self.region,
            cpu_cost_per_core=self.cpu_cost_per_core,
            memory_cost_per_gib=self.memory_cost_per_gib,
            currency=self.currency,
        )


class DefaultPricingProvider(StaticPricingProvider):
    """Fallback pricing for on-prem or unrecognised clusters.

    A zero rate means "use the built-in default".
    """

    def __init__(self, cpu_cost_per_core: float = 0.0, memory_cost_per_gib: float = 0.0):
        super().__init__(
            name="default",
            cpu_cost_per_core=cpu_cost_per_core or DEFAULT_CPU_COST_PER_CORE,
            memory_cost_per_gib=memory_cost_per_gib or DEFAULT_MEMORY_COST_PER_GIB,
            region="unknown",
        )


class AWSPricingProvider(StaticPricingProvider):
    def __init__(self, region: Optional[str] = None):
        super().__init__("aws", *STATIC_RATES["aws"], region=region)


class AzurePricingProvider(StaticPricingProvider):
    def __init__(self, region: Optional[str] = None):
        super().__init__("azure", *STATIC_RATES["azure"], region=region)


class GCPPricingProvider(StaticPricingProvider):
    def __init__(self, region: Optional[str] = None):
        super().__init__("gcp", *STATIC_RATES["gcp"], region=region)
