"""
Tests for the Atterberg limits engine.
"""

import math

import pytest
from soillab.core.atterberg import (
    AtterbergEngine, a_line, classify_plasticity, fine_grained_symbol
)
from soillab.core.models import LimitMethod, LiquidLimitSample, PlasticLimitSample


class TestAtterbergEngine:
    """Test liquid limit, plastic limit and plasticity index."""

    @pytest.fixture
    def engine(self):
        return AtterbergEngine()

    def test_multi_point_scenario(self, engine):
        """Three-point flow curve with a mean plastic limit of 36.5."""
        ll_samples = [
            LiquidLimitSample("15", "42.0"),
            LiquidLimitSample("25", "38.0"),
            LiquidLimitSample("35", "34.0"),
        ]
        pl_samples = [PlasticLimitSample("36.0"), PlasticLimitSample("37.0")]

        result, validation = engine.compute_limits(ll_samples, pl_samples)

        assert validation.is_valid
        assert result.method == LimitMethod.MULTI_POINT
        assert abs(result.liquid_limit - 38.0) < 1.0
        assert result.plastic_limit == pytest.approx(36.5)
        assert 0 < result.plasticity_index < 2.0
        assert result.classification.symbol == "ML"
        assert not result.is_non_plastic
        assert 0.9 < result.correlation_coefficient <= 1.0

    def test_best_fit_line_endpoints(self, engine):
        ll_samples = [LiquidLimitSample(n, 60 - 20 * math.log10(n)) for n in (12, 24, 36)]

        result, _ = engine.compute_limits(ll_samples, [PlasticLimitSample("20")])

        assert [p.blows for p in result.best_fit_line] == [10.0, 40.0]
        assert result.best_fit_line[0].water_content == pytest.approx(40.0)
        assert result.best_fit_line[1].water_content == pytest.approx(60 - 20 * math.log10(40))
        assert result.liquid_limit == pytest.approx(60 - 20 * math.log10(25))
        assert result.correlation_coefficient == pytest.approx(1.0)

    def test_one_point_method(self, engine):
        result, _ = engine.compute_limits([LiquidLimitSample("25", "40")], [PlasticLimitSample("22")])

        assert result.method == LimitMethod.ONE_POINT
        assert result.liquid_limit == pytest.approx(40.0)
        assert result.plasticity_index == pytest.approx(18.0)
        assert result.points == ()
        assert result.correlation_coefficient is None
        assert result.classification.confidence == pytest.approx(0.80)

    def test_one_point_correction_factor(self, engine):
        result, _ = engine.compute_limits([LiquidLimitSample("20", "50")], [PlasticLimitSample("25")])

        assert result.liquid_limit == pytest.approx(50 * (20 / 25) ** 0.121)

    def test_invalid_sample_aborts(self, engine):
        result, validation = engine.compute_limits(
            [LiquidLimitSample("0", "40")], [PlasticLimitSample("20")])

        assert result is None
        assert not validation.is_valid
        assert validation.first_error.code == "INVALID_BLOWS"
        assert validation.first_error.field == "ll[0].blows"

    def test_degenerate_flow_curve(self, engine):
        """Coincident blow counts cannot define a flow curve."""
        result, validation = engine.compute_limits(
            [LiquidLimitSample("25", "40"), LiquidLimitSample("25", "42")],
            [PlasticLimitSample("20")])

        assert result is None
        assert validation.is_valid

    def test_empty_lists(self, engine):
        result, _ = engine.compute_limits([], [PlasticLimitSample("20")])
        assert result is None

    def test_non_plastic(self, engine):
        result, _ = engine.compute_limits([LiquidLimitSample("25", "20")], [PlasticLimitSample("22")])

        assert result.is_non_plastic
        assert result.plasticity_index < 0

    def test_warnings_are_carried(self, engine):
        result, _ = engine.compute_limits(
            [LiquidLimitSample("8", "45"), LiquidLimitSample("30", "38")],
            [PlasticLimitSample("20")])

        assert "LOW_BLOWS" in [w.code for w in result.warnings]


class TestPlasticityChart:
    """Test A-line classification of fine-grained soils."""

    def test_a_line(self):
        assert a_line(20) == pytest.approx(0.0)
        assert a_line(50) == pytest.approx(21.9)

    @pytest.mark.parametrize("ll,pi,symbol", [
        (35, 20, "CL"),
        (35, 2, "ML"),
        (25, 5, "CL-ML"),
        (40, 10, "ML"),
        (60, 35, "CH"),
        (60, 15, "MH"),
    ])
    def test_symbols(self, ll, pi, symbol):
        assert fine_grained_symbol(ll, pi) == symbol

    def test_confidence_bonuses(self):
        classification = classify_plasticity(35, 20, blows=[15, 25, 35], r_squared=0.99)

        assert classification.confidence == pytest.approx(0.99)
        assert classification.description_ref == "desc_cl"


if __name__ == "__main__":
    pytest.main([__file__])
