"""
Tests for the Proctor compaction engine.
"""

import pytest
from soillab.core.models import ProctorDataPoint, ProctorTestParameters
from soillab.core.proctor import (
    ProctorEngine, make_proctor_point, moisture_range_for_compaction,
    zero_air_voids_density
)


def parabola_points(moistures, omc=12.0, mdd=1.90, steepness=0.004):
    """Points lying exactly on a compaction parabola."""
    points = []
    for mc in moistures:
        dry = mdd - steepness * (mc - omc) ** 2
        points.append(ProctorDataPoint.from_wet_density(mc, dry * (1 + mc / 100.0)))
    return points


class TestProctorEngine:
    """Test compaction curve fitting."""

    @pytest.fixture
    def engine(self):
        return ProctorEngine()

    def test_exact_parabola(self, engine):
        result = engine.calculate(parabola_points([8.0, 10.0, 12.0, 14.0, 16.0]))

        assert result.optimum_moisture_content == pytest.approx(12.0, abs=1e-4)
        assert result.max_dry_density == pytest.approx(1.90, abs=1e-6)
        assert result.ninety_five_percent_mdd == pytest.approx(0.95 * 1.90, abs=1e-6)
        assert result.coefficients[0] == pytest.approx(-0.004, abs=1e-8)
        assert result.warnings == ()

    def test_curves_are_sampled(self, engine):
        result = engine.calculate(parabola_points([8.0, 10.0, 12.0, 14.0, 16.0]))

        assert len(result.fitted_curve) == 101
        assert len(result.zav_curve) == 101
        assert result.fitted_curve[0][0] == pytest.approx(6.0)
        assert result.fitted_curve[-1][0] == pytest.approx(18.0)

    def test_points_sorted_by_moisture(self, engine):
        result = engine.calculate(parabola_points([14.0, 8.0, 12.0, 10.0]))

        assert [p.moisture_content for p in result.points] == [8.0, 10.0, 12.0, 14.0]

    def test_zav_curve_above_compaction_curve(self, engine):
        result = engine.calculate(parabola_points([8.0, 10.0, 12.0, 14.0, 16.0]), ProctorTestParameters(specific_gravity="2.70"))

        for (_, fitted), (_, zav) in zip(result.fitted_curve, result.zav_curve):
            assert zav > fitted
        assert result.specific_gravity == 2.70

    def test_default_specific_gravity(self, engine):
        result = engine.calculate(parabola_points([8.0, 12.0, 16.0]), ProctorTestParameters(specific_gravity=""))

        assert result.specific_gravity == 2.70

    def test_upward_curve_rejected(self, engine):
        points = [ProctorDataPoint.from_wet_density(mc, 1.8 + 0.004 * (mc - 12) ** 2)
                  for mc in (8.0, 12.0, 16.0)]

        assert engine.calculate(points) is None

    @pytest.mark.parametrize("slope", [0.0, 0.0007, -0.003, 0.0125, -0.02])
    def test_straight_line_has_no_maximum(self, engine, slope):
        points = [ProctorDataPoint(mc, 0.0, 1.6 + slope * mc) for mc in (8.0, 10.0, 12.0, 14.0, 16.0)]

        assert engine.calculate(points) is None

    def test_nearly_straight_line_has_no_maximum(self, engine):
        points = [ProctorDataPoint(mc, 0.0, 1.6 + 0.001 * mc - 1e-13 * mc ** 2)
                  for mc in (8.0, 10.0, 12.0, 14.0, 16.0)]

        assert engine.calculate(points) is None

    def test_too_few_points(self, engine):
        assert engine.calculate(parabola_points([10.0, 12.0])) is None

    def test_identical_moistures_are_singular(self, engine):
        points = [ProctorDataPoint.from_wet_density(12.0, d) for d in (2.0, 2.1, 2.2)]

        assert engine.calculate(points) is None

    def test_peak_at_end_warns(self, engine):
        result = engine.calculate(parabola_points([6.0, 8.0, 10.0, 11.0], omc=12.0))

        assert [w.code for w in result.warnings] == ["PEAK_NOT_DEFINED"]

    def test_field_compaction(self, engine):
        result = engine.calculate(parabola_points([8.0, 10.0, 12.0, 14.0, 16.0]))

        evaluated = engine.evaluate_field_compaction(result, "12", "95")

        assert evaluated.achievable_dry_density == pytest.approx(1.90, abs=1e-3)
        low, high = evaluated.compaction_band
        # 1.90 - 0.004 (w - 12)^2 = 0.95 * 1.90
        half_width = (0.05 * 1.90 / 0.004) ** 0.5
        assert low == pytest.approx(12.0 - half_width, abs=0.05)
        assert high == pytest.approx(12.0 + half_width, abs=0.05)

    def test_field_moisture_outside_curve(self, engine):
        result = engine.calculate(parabola_points([8.0, 10.0, 12.0, 14.0, 16.0]))

        evaluated = engine.evaluate_field_compaction(result, 40.0)

        assert evaluated.achievable_dry_density is None


class TestProctorHelpers:
    """Test point construction and reference curves."""

    def test_dry_density_derived_at_entry(self):
        point = ProctorDataPoint.from_wet_density(10.0, 2.2)

        assert point.dry_density == pytest.approx(2.0)

    def test_point_from_mould_masses(self):
        point, validation = make_proctor_point("10", "6138", "4250", "944")

        assert validation.is_valid
        assert point.wet_density == pytest.approx(2.0)
        assert point.dry_density == pytest.approx(2.0 / 1.1)

    def test_point_from_invalid_masses(self):
        point, validation = make_proctor_point("10", "4000", "4250", "944")

        assert point is None
        assert validation.first_error.code == "INVALID_WET_WEIGHT"

    def test_point_with_moisture_of_minus_100(self):
        point, validation = make_proctor_point("-100", "6138", "4250", "944")

        assert point is None
        assert validation.first_error.code == "INVALID_MOISTURE"

    def test_zero_air_voids(self):
        assert zero_air_voids_density(0.0, 2.7) == pytest.approx(2.7)
        assert zero_air_voids_density(10.0, 2.7) == pytest.approx(2.7 / 1.27)

    def test_band_needs_two_crossings(self):
        curve = [(8.0, 1.0), (10.0, 1.5), (12.0, 2.0)]

        assert moisture_range_for_compaction(curve, 2.0, 95) is None
        assert moisture_range_for_compaction([], 2.0, 95) is None


if __name__ == "__main__":
    pytest.main([__file__])
