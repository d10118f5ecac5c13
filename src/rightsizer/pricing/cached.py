"""Caching, retrying wrapper around a pricing provider."""

from datetime import timedelta
from typing import Optional, Union

from rightsizer.core.exceptions import PricingException
from rightsizer.core.utils import retry_with_backoff
from rightsizer.models.recommendation import CostInfo
from .cache import PriceCache
from .provider import CostInfoProvider


class CachedPricingProvider(CostInfoProvider):
    """Caches an inner provider's answers and retries its failures."""

    def __init__(self, inner: CostInfoProvider,
                 ttl: Union[float, timedelta] = timedelta(hours=24),
                 retries: int = 3,
                 backoff_factor: float = 1.5,
                 max_wait: float = 60.0,
                 cache: Optional[PriceCache] = None):
        super().__init__(name=inner.name, region=inner.region)
        self.inner = inner
        self.cache = cache or PriceCache(ttl)
        self._fetch = retry_with_backoff(
            max_retries=max(1, retries),
            backoff_factor=backoff_factor,
            max_wait=max_wait,
        )(self._fetch_once)

    def _fetch_once(self, region: str) -> CostInfo:
        return self.inner.get_cost_info(region)

    def get_cost_info(self, region: Optional[str] = None) -> CostInfo:
        region = region or self.region
        key = f"{self.name}-{region}"

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            cost_info = self._fetch(region)
        except PricingException:
            raise
        except Exception as e:
            self.logger.error("Pricing lookup failed", region=region, error=str(e))
            raise PricingException(self.name, str(e), {"region": region})

        self.cache.set(key, cost_info)
        self.logger.debug("Cached pricing", key=key,
                          cpu_cost_per_core=cost_info.cpu_cost_per_core,
                          memory_cost_per_gib=cost_info.memory_cost_per_gib)
        return cost_info
