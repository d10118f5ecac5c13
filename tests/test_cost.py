"""
Tests for the cost delta calculator
"""
import pytest

from rightsizer.analytics.cost import FALLBACK_COST_INFO, CostCalculator, monthly_cost
from rightsizer.core.utils import GIB, MIB
from rightsizer.models.recommendation import CostInfo
from rightsizer.pricing.provider import CostInfoProvider
from rightsizer.pricing.static import AzurePricingProvider


class FailingProvider(CostInfoProvider):
    def get_cost_info(self, region=None):
        raise ConnectionError("timeout")


def test_monthly_cost_formula():
    info = CostInfo(cpu_cost_per_core=23.0, memory_cost_per_gib=3.0)

    assert monthly_cost(1000, GIB, info) == pytest.approx(26.0)
    assert monthly_cost(500, 512 * MIB, info) == pytest.approx(13.0)
    assert monthly_cost(0, 0, info) == 0


class TestCostCalculator:
    """Provider resolution and fallback"""

    def test_no_provider_uses_default_rates(self):
        calculator = CostCalculator()

        assert calculator.provider_name == "default"
        assert calculator.monthly_cost(2000, 2 * GIB) == pytest.approx(52.0)

    def test_provider_rates(self):
        calculator = CostCalculator(AzurePricingProvider("westeurope"))

        assert calculator.provider_name == "azure"
        assert calculator.cost_info().region == "westeurope"
        assert calculator.monthly_cost(1000, GIB) == pytest.approx(35.0 + 4.3)

    def test_failing_provider_falls_back(self):
        calculator = CostCalculator(FailingProvider(name="flaky"))

        assert calculator.cost_info() == FALLBACK_COST_INFO
        assert calculator.monthly_cost(1000, GIB) == pytest.approx(26.0)

    def test_workload_cost_scales_with_replicas(self):
        costs = CostCalculator().workload_cost(1000, GIB, 500, 512 * MIB, replicas=4)

        assert costs["current"] == pytest.approx(104.0)
        assert costs["recommended"] == pytest.approx(52.0)
        assert costs["savings"] == pytest.approx(52.0)
