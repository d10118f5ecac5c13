"""Validation utilities for rightsizing data models."""

from typing import List
import structlog

from rightsizer.core.exceptions import InvalidRequestError
from .workload import AggregatedWorkloadObservation

logger = structlog.get_logger(__name__)


def validate_observation(observation: AggregatedWorkloadObservation) -> List[str]:
    """Validate an observation and return validation errors."""
    errors = []

    if not observation.name:
        errors.append("Workload name is required")

    if observation.requested_cpu_m <= 0:
        errors.append(f"Requested CPU must be positive, got {observation.requested_cpu_m}m")

    if observation.requested_memory_bytes <= 0:
        errors.append(f"Requested memory must be positive, got {observation.requested_memory_bytes} bytes")

    if observation.has_hpa and not observation.hpa_name:
        errors.append("HPA flagged but no HPA name given")

    if observation.has_sufficient_data and observation.data_quality == 0:
        errors.append("Sufficient data claimed with zero data quality")

    if errors:
        logger.debug(
            "Observation failed validation",
            workload=f"{observation.namespace}/{observation.name}",
            errors=errors
        )

    return errors


def ensure_valid_request(requested_cpu_m: int, requested_memory_bytes: int) -> None:
    """Raise InvalidRequestError when requested resources cannot anchor utilization math."""
    if requested_cpu_m <= 0:
        raise InvalidRequestError("requested_cpu_m", requested_cpu_m, "must be greater than zero")
    if requested_memory_bytes <= 0:
        raise InvalidRequestError("requested_memory_bytes", requested_memory_bytes, "must be greater than zero")
