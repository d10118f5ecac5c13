"""
Test fixtures and configuration for pytest
"""
from datetime import datetime, timedelta, timezone

import pytest

from rightsizer.core.utils import GIB, MIB
from rightsizer.models.usage import Sample
from rightsizer.models.workload import AggregatedWorkloadObservation, Environment, WorkloadType

# 2024-01-01 is a Monday
START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def hourly_samples(values, start=START, step=timedelta(hours=1)):
    """Build samples one step apart starting at ``start``."""
    return [Sample(timestamp=start + i * step, value=float(v)) for i, v in enumerate(values)]


@pytest.fixture
def make_samples():
    """Factory fixture: make_samples(values, start=..., step=...)"""
    return hourly_samples


@pytest.fixture
def make_observation():
    """Factory for observations with sensible defaults (1 core / 1Gi requested)"""
    def _make(**overrides):
        fields = dict(
            namespace="shop",
            name="api",
            workload_type=WorkloadType.DEPLOYMENT,
            environment=Environment.STAGING,
            requested_cpu_m=1000,
            requested_memory_bytes=GIB,
            observed_cpu_m=200,
            observed_memory_bytes=256 * MIB,
        )
        fields.update(overrides)
        return AggregatedWorkloadObservation(**fields)
    return _make


@pytest.fixture
def steady_week(make_samples):
    """8 days of hourly CPU samples at a constant 100m"""
    return make_samples([100] * (8 * 24))
