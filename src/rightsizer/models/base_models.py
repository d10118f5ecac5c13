"""Base models for common rightsizing data structures."""

from pydantic import BaseModel, ConfigDict


class RightsizerBaseModel(BaseModel):
    """Base model for all immutable value objects.

    Instances are frozen: once produced they are shared between the
    statistics, policy and presentation layers without copying.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
