"""Pricing provider detection and factory."""

from typing import Mapping, Optional, Tuple
import structlog

from rightsizer.core.exceptions import ConfigurationException
from .cached import CachedPricingProvider
from .provider import CostInfoProvider
from .static import (
    AWSPricingProvider,
    AzurePricingProvider,
    DEFAULT_REGIONS,
    DefaultPricingProvider,
    GCPPricingProvider,
)

logger = structlog.get_logger(__name__)

PROVIDER_ID_PREFIXES = (
    ("azure://", "azure"),
    ("aws://", "aws"),
    ("gce://", "gcp"),
)

PROVIDER_NODE_LABELS = (
    ("kubernetes.azure.com/cluster", "azure"),
    ("eks.amazonaws.com/nodegroup", "aws"),
    ("cloud.google.com/gke-nodepool", "gcp"),
)

REGION_LABELS = (
    "topology.kubernetes.io/region",
    "failure-domain.beta.kubernetes.io/region",
)


def _region_from_labels(provider: str, labels: Mapping[str, str]) -> str:
    for label in REGION_LABELS:
        if label in labels:
            return labels[label]
    return DEFAULT_REGIONS[provider]


def detect_provider(provider_id: Optional[str] = None,
                    labels: Optional[Mapping[str, str]] = None) -> Tuple[str, str]:
    """Detect (provider, region) from a node's providerID and labels."""
    labels = labels or {}

    if provider_id:
        for prefix, provider in PROVIDER_ID_PREFIXES:
            if provider_id.startswith(prefix):
                return provider, _region_from_labels(provider, labels)

    for label, provider in PROVIDER_NODE_LABELS:
        if label in labels:
            return provider, _region_from_labels(provider, labels)

    return "default", "unknown"


def create_provider(settings, provider_id: Optional[str] = None,
                    labels: Optional[Mapping[str, str]] = None) -> CostInfoProvider:
    """Build the pricing provider for a scan.

    ``settings`` is a ``PricingSettings``; a configured provider wins over
    detection from node metadata.
    """
    if settings.provider:
        provider = settings.provider.strip().lower()
        region = settings.region
        if region == "unknown" and provider in DEFAULT_REGIONS:
            region = DEFAULT_REGIONS[provider]
    else:
        provider, region = detect_provider(provider_id, labels)

    if provider == "aws":
        inner = AWSPricingProvider(region)
    elif provider == "azure":
        inner = AzurePricingProvider(region)
    elif provider == "gcp":
        inner = GCPPricingProvider(region)
    elif provider == "default":
        inner = DefaultPricingProvider(settings.default_cpu_cost_per_core,
                                       settings.default_memory_cost_per_gib)
    else:
        raise ConfigurationException(f"Unknown pricing provider: {provider}", {"provider": provider})

    logger.info("Pricing provider selected", provider=inner.name, region=inner.region)

    return CachedPricingProvider(
        inner,
        ttl=settings.cache_ttl_hours * 3600,
        retries=settings.retry_attempts,
        backoff_factor=settings.retry_backoff_factor,
    )
