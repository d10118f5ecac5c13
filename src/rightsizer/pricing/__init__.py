"""Pricing providers for monthly resource cost."""

from .provider import CostInfoProvider
from .static import (
    StaticPricingProvider,
    DefaultPricingProvider,
    AWSPricingProvider,
    AzurePricingProvider,
    GCPPricingProvider,
    STATIC_RATES,
)
from .cache import PriceCache
from .cached import CachedPricingProvider
from .factory import detect_provider, create_provider

__all__ = [
    "CostInfoProvider",
    "StaticPricingProvider",
    "DefaultPricingProvider",
    "AWSPricingProvider",
    "AzurePricingProvider",
    "GCPPricingProvider",
    "STATIC_RATES",
    "PriceCache",
    "CachedPricingProvider",
    "detect_provider",
    "create_provider",
]
