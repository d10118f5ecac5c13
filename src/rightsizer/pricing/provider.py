"""Base interface for all pricing providers."""

from abc import ABC, abstractmethod
from typing import Optional
import structlog

from rightsizer.models.recommendation import CostInfo

logger = structlog.get_logger(__name__)


class CostInfoProvider(ABC):
    """Abstract base class for sources of per-resource unit prices."""

    def __init__(self, name: Optional[str] = None, region: str = "unknown"):
        self._name = name or self.__class__.__name__
        self.region = region
        self.logger = logger.bind(provider=self._name)

    @property
    def name(self) -> str:
        """Short provider name used in recommendations and cache keys."""
        return self._name

    @abstractmethod
    def get_cost_info(self, region: Optional[str] = None) -> CostInfo:
        """Return monthly unit prices for a region (the provider's own when omitted)."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r}, region={self.region!r})"
