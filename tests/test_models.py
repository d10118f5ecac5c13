"""
Tests for data models and validation
"""
import math
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from rightsizer.core.exceptions import InvalidRequestError
from rightsizer.core.utils import GIB, MIB
from rightsizer.models import (
    AggregatedWorkloadObservation,
    Environment,
    Rating,
    Recommendation,
    RecommendationType,
    Sample,
    UsagePattern,
    WorkloadType,
    ensure_valid_request,
    samples_from_series,
    validate_observation,
)


class TestSamples:

    def test_naive_timestamp_becomes_utc(self):
        sample = Sample(timestamp=datetime(2024, 1, 1, 12), value=1.0)
        assert sample.timestamp.tzinfo == timezone.utc

    def test_epoch_and_iso_timestamps(self):
        a = Sample(timestamp=1704067200, value=1.0)
        b = Sample(timestamp="2024-01-01T00:00:00Z", value=1.0)
        assert a.timestamp == b.timestamp

    def test_samples_are_frozen(self):
        sample = Sample(timestamp=1704067200, value=1.0)
        with pytest.raises(ValidationError):
            sample.value = 2.0

    @pytest.mark.parametrize("value", [-1.0, math.nan, math.inf, -math.inf])
    def test_rejects_negative_and_non_finite_values(self, value):
        with pytest.raises(ValidationError):
            Sample(timestamp=1704067200, value=value)

    def test_series_drops_negative_values(self):
        samples = samples_from_series([(1704067200, -5), (1704070800, 3)])
        assert [s.value for s in samples] == [3.0]

    def test_series_drops_missing_values_and_sorts(self):
        samples = samples_from_series([
            (1704070800, 2),
            (1704067200, 1),
            (1704074400, None),
            (1704078000, math.nan),
            (1704081600, "n/a"),
        ])
        assert [s.value for s in samples] == [1.0, 2.0]


class TestEnums:

    def test_unknown_workload_kind(self):
        assert WorkloadType("Rollout") == WorkloadType.UNKNOWN

    def test_unknown_environment(self):
        assert Environment("qa") == Environment.UNKNOWN

    def test_observation_coerces_strings(self):
        obs = AggregatedWorkloadObservation(namespace="ns", name="w", workload_type="StatefulSet",
                                            environment="production", requested_cpu_m=100,
                                            requested_memory_bytes=MIB)
        assert obs.workload_type == WorkloadType.STATEFUL_SET
        assert obs.environment == Environment.PRODUCTION


class TestObservationConstraints:

    def test_replicas_at_least_one(self):
        with pytest.raises(ValidationError):
            AggregatedWorkloadObservation(namespace="ns", name="w", requested_cpu_m=1,
                                          requested_memory_bytes=1, replicas=0)

    def test_data_quality_range(self):
        with pytest.raises(ValidationError):
            AggregatedWorkloadObservation(namespace="ns", name="w", requested_cpu_m=1,
                                          requested_memory_bytes=1, data_quality=1.5)

    def test_pattern_confidence_range(self):
        with pytest.raises(ValidationError):
            UsagePattern(confidence=2.0)


class TestValidation:

    def test_valid_observation(self, make_observation):
        assert validate_observation(make_observation()) == []

    def test_problems_reported(self, make_observation):
        errors = validate_observation(make_observation(requested_cpu_m=0, requested_memory_bytes=-1,
                                                       has_hpa=True))
        assert len(errors) == 3

    def test_ensure_valid_request(self):
        ensure_valid_request(100, MIB)

        with pytest.raises(InvalidRequestError) as exc_info:
            ensure_valid_request(0, MIB)
        assert exc_info.value.field == "requested_cpu_m"


class TestDescribe:
    """Operator-facing text rendering"""

    def test_no_action_is_one_line(self):
        rec = Recommendation(type=RecommendationType.NO_ACTION, namespace="ns", name="w",
                             reason="Resource allocation is appropriate", impact=Rating.NONE)
        assert rec.describe() == "[NONE] ns/w: Resource allocation is appropriate"

    def test_right_size_block(self):
        rec = Recommendation(type=RecommendationType.RIGHT_SIZE, namespace="ns", name="w",
                             provider="gcp", current_cpu_m=1000, current_memory_bytes=GIB,
                             recommended_cpu_m=300, recommended_memory_bytes=384 * MIB,
                             reason="Over-provisioned", savings_monthly=17.5,
                             impact=Rating.LOW, risk=Rating.MEDIUM)
        lines = rec.describe().splitlines()

        assert lines[0] == "[LOW] ns/w: Over-provisioned"
        assert lines[1] == "  Current: 1000m CPU, 1024Mi memory"
        assert lines[2] == "  Recommended: 300m CPU, 384Mi memory"
        assert lines[3] == "  Savings: $17.50/month (gcp pricing)"

    def test_scale_down_block(self):
        rec = Recommendation(type=RecommendationType.SCALE_DOWN, namespace="ns", name="w",
                             current_cpu_m=500, current_memory_bytes=512 * MIB, impact=Rating.HIGH)
        assert "Recommendation: Scale to 0 replicas" in rec.describe()
