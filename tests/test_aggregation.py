"""
Tests for observation aggregation
"""
import pytest

from rightsizer.analytics.aggregation import aggregate_pods, build_observation, resolve_workload_owner
from rightsizer.core.exceptions import EmptyInputError
from rightsizer.core.utils import GIB, MIB
from rightsizer.models.usage import PatternType
from rightsizer.models.workload import Environment, PodUsage, WorkloadType


def _pod(name, req_cpu=1000, req_mem=GIB, obs_cpu=200, obs_mem=256 * MIB):
    return PodUsage(name=name, requested_cpu_m=req_cpu, requested_memory_bytes=req_mem,
                    observed_cpu_m=obs_cpu, observed_memory_bytes=obs_mem)


class TestResolveWorkloadOwner:

    def test_replicaset_resolves_to_deployment(self):
        assert resolve_workload_owner("ReplicaSet", "checkout-7d9f8b6c5") == (WorkloadType.DEPLOYMENT, "checkout")

    def test_hyphenated_deployment_name(self):
        assert resolve_workload_owner("ReplicaSet", "my-api-server-5c4b") == (WorkloadType.DEPLOYMENT, "my-api-server")

    def test_replicaset_without_hash(self):
        assert resolve_workload_owner("ReplicaSet", "standalone") == (WorkloadType.REPLICA_SET, "standalone")

    def test_statefulset_passthrough(self):
        assert resolve_workload_owner("StatefulSet", "db") == (WorkloadType.STATEFUL_SET, "db")

    def test_missing_owner(self):
        assert resolve_workload_owner(None, None) == (WorkloadType.UNKNOWN, "")


class TestAggregatePods:

    def test_integer_means(self):
        pods = [_pod("a", obs_cpu=100), _pod("b", obs_cpu=201)]
        assert aggregate_pods(pods) == (1000, GIB, 150, 256 * MIB)

    def test_empty_raises(self):
        with pytest.raises(EmptyInputError):
            aggregate_pods([])


class TestBuildObservation:
    """Historical enrichment"""

    def test_without_series_uses_instantaneous_usage(self):
        obs = build_observation("shop", "api", WorkloadType.DEPLOYMENT, [_pod("a"), _pod("b")],
                                environment=Environment.STAGING, hpa_name="api-hpa")

        assert obs.observed_cpu_m == 200
        assert obs.replicas == 2
        assert obs.has_hpa is True
        assert obs.hpa_name == "api-hpa"
        assert obs.data_quality == 0
        assert obs.has_sufficient_data is False
        assert obs.context_note is None

    def test_steady_history(self, make_samples, steady_week):
        memory = make_samples([256 * MIB] * len(steady_week))
        obs = build_observation("shop", "api", WorkloadType.DEPLOYMENT, [_pod("a")],
                                environment=Environment.STAGING,
                                cpu_samples=steady_week, memory_samples=memory,
                                lookback_days=7, resolution_minutes=60)

        assert obs.observed_cpu_m == 100
        assert obs.observed_memory_bytes == 256 * MIB
        assert obs.cpu_pattern.type == PatternType.STEADY
        assert obs.cpu_growth.is_growing is False
        # 192 samples against 168 expected
        assert obs.data_quality == 1.0
        assert obs.has_sufficient_data is True
        assert obs.context_note == "Based on 7-day P95: CPU 100m, Memory 256Mi"

    def test_data_quality_ratio(self, make_samples, steady_week):
        memory = make_samples([MIB] * len(steady_week))
        obs = build_observation("shop", "api", WorkloadType.DEPLOYMENT, [_pod("a")],
                                cpu_samples=steady_week, memory_samples=memory,
                                lookback_days=7, resolution_minutes=5)

        assert obs.data_quality == pytest.approx(192 / 2016)

    def test_weekend_peak_wins(self, make_samples):
        """Weekend P95 is higher, so it drives observed usage and the note"""
        cpu_values = [200 if (i // 24) % 7 in (5, 6) else 100 for i in range(14 * 24)]
        cpu = make_samples(cpu_values)
        memory = make_samples([256 * MIB] * len(cpu_values))

        obs = build_observation("shop", "api", WorkloadType.DEPLOYMENT, [_pod("a")],
                                environment=Environment.STAGING,
                                cpu_samples=cpu, memory_samples=memory, lookback_days=14)

        assert obs.observed_cpu_m == 200
        assert "(Weekday: 100m, Weekend: 200m)" in obs.context_note
        assert "Memory (Weekday" not in obs.context_note

    def test_short_history_is_not_sufficient(self, make_samples):
        """Fewer than 100 samples: no growth trend, so not sufficient"""
        cpu = make_samples([100] * 50)
        memory = make_samples([MIB] * 50)

        obs = build_observation("shop", "api", WorkloadType.JOB, [_pod("a")],
                                cpu_samples=cpu, memory_samples=memory)

        assert obs.has_sufficient_data is False
        assert obs.cpu_growth.rate_per_month == 0

    def test_span_shorter_than_min_days(self, make_samples):
        """150 hourly samples span ~6 days, below production's 7"""
        cpu = make_samples([100] * 150)
        memory = make_samples([MIB] * 150)

        obs = build_observation("shop-prod", "api", WorkloadType.DEPLOYMENT, [_pod("a")],
                                environment=Environment.PRODUCTION,
                                cpu_samples=cpu, memory_samples=memory)

        assert obs.has_sufficient_data is False
