"""
Tests for growth trend estimation
"""
import pytest

from rightsizer.analytics.growth import estimate_growth, linear_regression
from rightsizer.core.exceptions import InsufficientDataError
from rightsizer.models.usage import GrowthTrend


class TestLinearRegression:
    """OLS fit"""

    def test_perfect_line(self):
        slope, intercept, r2 = linear_regression([0, 1, 2, 3], [1, 3, 5, 7])

        assert slope == pytest.approx(2)
        assert intercept == pytest.approx(1)
        assert r2 == pytest.approx(1)

    def test_empty(self):
        assert linear_regression([], []) == (0, 0, 0)

    def test_constant_x(self):
        assert linear_regression([5, 5, 5], [1, 2, 3]) == (0, pytest.approx(2), 0)

    def test_constant_y_has_zero_r2(self):
        slope, intercept, r2 = linear_regression([0, 1, 2], [4, 4, 4])

        assert slope == 0
        assert intercept == pytest.approx(4)
        assert r2 == 0


class TestEstimateGrowth:
    """Monthly growth and projections"""

    def test_insufficient_data_carries_zero_trend(self, make_samples):
        with pytest.raises(InsufficientDataError) as exc_info:
            estimate_growth(make_samples([100] * 99))

        assert exc_info.value.trend == GrowthTrend()
        assert exc_info.value.required == 100
        assert exc_info.value.actual == 99

    def test_steady_series_is_not_growing(self, make_samples):
        trend = estimate_growth(make_samples([100 + i % 10 for i in range(2016)]))

        assert abs(trend.rate_per_month) < 1.0
        assert trend.is_growing is False

    def test_linear_ramp(self, make_samples):
        """0.0139 per hour on a ~114 average is ~8.8% per month"""
        values = [100 + 0.0139 * i for i in range(2016)]
        trend = estimate_growth(make_samples(values))
        avg = sum(values) / len(values)

        assert trend.rate_per_month == pytest.approx(0.0139 * 720 / avg * 100, rel=1e-6)
        assert trend.is_growing is True
        assert trend.confidence == pytest.approx(1.0)
        assert trend.predicted_3_month == pytest.approx(100 + 0.0139 * (2015 + 2160), rel=1e-6)
        assert trend.predicted_6_month == pytest.approx(100 + 0.0139 * (2015 + 4320), rel=1e-6)

    def test_negative_projection_falls_back_to_average(self, make_samples):
        values = [1000 - 5 * i for i in range(150)]
        trend = estimate_growth(make_samples(values))

        assert trend.rate_per_month < 0
        assert trend.is_growing is False
        assert trend.predicted_3_month == pytest.approx(627.5)
        assert trend.predicted_6_month == pytest.approx(627.5)

    def test_is_growing_threshold(self, make_samples):
        """A 2% monthly rate is below the 3% growing threshold"""
        slope = 0.02 * 100 / 720
        values = [100 + slope * (i - 1007.5) for i in range(2016)]
        trend = estimate_growth(make_samples(values))

        assert trend.rate_per_month == pytest.approx(2.0, rel=1e-6)
        assert trend.is_growing is False
