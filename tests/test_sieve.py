"""
Tests for the sieve analysis engine.
"""

import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from soillab.core.models import ClassificationParameters, SampleType, Sieve, SieveReading
from soillab.core.sieve import (
    SieveAnalysisEngine, calculate_dx, fineness_modulus, gradation_coefficients,
    hazen_permeability, reconcile_cumulative
)


def soil_stack(weights):
    """Standard soil sieve stack with the given cumulative retained weights."""
    return [Sieve(s.name, s.opening, w) for s, w in zip(Sieve.standard_set(), weights)]


# 3", 2", 1.5", 1", 3/4", 1/2", 3/8", No.4, No.10, No.20, No.40, No.60, No.100, No.200, Pan
WELL_GRADED_SAND = soil_stack(
    ["0", "0", "0", "0", "20", "50", "80", "150", "300", "500", "680",
     "820", "920", "970", "1000"])

weight_entries = st.one_of(
    st.floats(min_value=0, max_value=5000, allow_nan=False),
    st.just(""),
    st.just("n/a"),
    st.floats(min_value=-100, max_value=-0.1),
)


class TestReconciliation:
    """Test reconciliation of cumulative retained weights."""

    def test_blank_and_decreasing_entries_carry_over(self):
        sieves = [Sieve("A", 10.0, "5"), Sieve("B", 5.0, ""), Sieve("C", 2.0, "3"),
                  Sieve("D", 1.0, "bad"), Sieve("E", 0.0, "12")]

        assert reconcile_cumulative(sieves) == (5.0, 5.0, 5.0, 5.0, 12.0)

    @given(st.lists(weight_entries, min_size=1, max_size=15))
    def test_cumulative_is_non_decreasing(self, entries):
        sieves = [Sieve(f"S{i}", 100.0 / (i + 1), w) for i, w in enumerate(entries)]

        cumulative = reconcile_cumulative(sieves)

        assert all(a <= b for a, b in zip(cumulative, cumulative[1:]))
        assert all(c >= 0 for c in cumulative)

    @settings(max_examples=50)
    @given(st.lists(weight_entries, min_size=15, max_size=15),
           st.one_of(st.just(""), st.floats(min_value=1, max_value=6000)))
    def test_percent_passing_bounded_and_non_increasing(self, entries, initial_weight):
        sieves = soil_stack(entries)
        params = ClassificationParameters(initial_weight=initial_weight)

        result = SieveAnalysisEngine().calculate(sieves, params, classify=False)

        if result is None:
            return
        passing = [r.percent_passing for r in result.sieves]
        assert all(0.0 <= p <= 100.0 for p in passing)
        assert all(a >= b for a, b in zip(passing, passing[1:]))


class TestSieveAnalysisEngine:
    """Test gradation results."""

    @pytest.fixture
    def engine(self):
        return SieveAnalysisEngine()

    def test_fractions(self, engine):
        result = engine.calculate(WELL_GRADED_SAND, classify=False)

        assert result.percent_gravel == pytest.approx(15.0)
        assert result.percent_sand == pytest.approx(82.0)
        assert result.percent_fines == pytest.approx(3.0)
        assert result.percent_gravel + result.percent_sand + result.percent_fines == pytest.approx(100.0)
        assert result.material_loss_percentage is None

    def test_characteristic_sizes(self, engine):
        result = engine.calculate(WELL_GRADED_SAND, classify=False)

        assert result.d10 < result.d30 < result.d60
        assert result.cu == pytest.approx(result.d60 / result.d10)
        assert result.cc == pytest.approx(result.d30 ** 2 / (result.d10 * result.d60))
        # 10% passing lies between No. 100 (8%) and No. 60 (18%)
        assert 0.150 < result.d10 < 0.250

    def test_classification_attached(self, engine):
        params = ClassificationParameters(liquid_limit="", plastic_limit="")

        result = engine.calculate(WELL_GRADED_SAND, params)

        assert result.classification.uscs.group_name.startswith("S")
        assert result.frost_susceptibility.band.value == "negligible"
        assert result.predicted_properties is None

    def test_predicted_properties_need_both_limits(self, engine):
        params = ClassificationParameters(liquid_limit="30", plastic_limit="18")

        result = engine.calculate(WELL_GRADED_SAND, params)

        assert result.predicted_properties is not None
        assert result.predicted_properties.predicted_cbr is not None

    def test_initial_weight_drives_percentages(self, engine):
        params = ClassificationParameters(initial_weight="1100")

        result = engine.calculate(WELL_GRADED_SAND, params, classify=False)

        assert result.material_loss_percentage == pytest.approx(100 / 1100 * 100)
        assert result.sieves[-1].percent_passing == pytest.approx(100 / 1100 * 100)
        assert "HIGH_MATERIAL_LOSS" in [w.code for w in result.warnings]

    def test_small_material_loss_has_no_warning(self, engine):
        params = ClassificationParameters(initial_weight="1010")

        result = engine.calculate(WELL_GRADED_SAND, params, classify=False)

        assert result.material_loss_percentage == pytest.approx(10 / 1010 * 100)
        assert "HIGH_MATERIAL_LOSS" not in [w.code for w in result.warnings]

    def test_zero_total_weight(self, engine):
        assert engine.calculate(soil_stack([""] * 15)) is None

    def test_ignored_and_decreasing_weight_warnings(self, engine):
        weights = ["0", "0", "0", "0", "20", "50", "-5", "150", "100", "500", "680",
                   "820", "920", "970", "1000"]

        result = engine.calculate(soil_stack(weights), classify=False)

        codes = [w.code for w in result.warnings]
        assert "IGNORED_WEIGHT" in codes
        assert "DECREASING_WEIGHT" in codes
        assert result.sieves[8].cumulative_retained == 150.0

    def test_missing_reference_sieves_pass_nothing(self, engine):
        sieves = [Sieve("A", 10.0, "100"), Sieve("B", 1.0, "600"), Sieve("Pan", 0.0, "1000")]

        result = engine.calculate(sieves, classify=False)

        assert result.percent_gravel == pytest.approx(100.0)
        assert result.percent_fines == 0.0

    def test_aggregate_stack(self, engine):
        stack = Sieve.standard_set(SampleType.AGGREGATE)

        assert stack[1].opening == 63.0
        assert stack[-1].name == "Pan"


class TestGradationHelpers:
    """Test Dx interpolation and gradation coefficients."""

    def readings(self, pairs):
        return [SieveReading(f"{o}", o, None, 0.0, p) for o, p in pairs]

    def test_dx_log_interpolation(self):
        readings = self.readings([(1.0, 100.0), (0.1, 0.0)])

        assert calculate_dx(readings, 50.0) == pytest.approx(10 ** -0.5)

    def test_dx_pan_bracket_is_undefined(self):
        readings = self.readings([(1.0, 100.0), (0.075, 20.0), (0.0, 0.0)])

        assert calculate_dx(readings, 10.0) is None

    def test_dx_flat_bracket(self):
        readings = self.readings([(2.0, 60.0), (1.0, 60.0), (0.5, 10.0)])

        assert calculate_dx(readings, 60.0) == pytest.approx(1.0)

    def test_coefficients_undefined_without_d10(self):
        assert gradation_coefficients(None, 0.5, 1.0) == (None, None)
        assert gradation_coefficients(0.1, 0.3, 0.6) == (pytest.approx(6.0), pytest.approx(1.5))

    def test_fineness_modulus(self):
        readings = self.readings([
            (4.75, 95.0), (2.36, 80.0), (1.18, 60.0), (0.6, 40.0), (0.3, 20.0), (0.15, 5.0),
        ])

        assert fineness_modulus(readings) == pytest.approx((5 + 20 + 40 + 60 + 80 + 95) / 100)

    def test_hazen_only_for_clean_uniform_sand(self):
        assert hazen_permeability(0.2, 90.0, 2.0, 3.0) == pytest.approx(4e-4)
        assert hazen_permeability(0.2, 90.0, 8.0, 3.0) is None
        assert hazen_permeability(0.2, 40.0, 2.0, 3.0) is None
        assert hazen_permeability(0.2, 90.0, 2.0, 8.0) is None
        assert hazen_permeability(None, 90.0, 2.0, 3.0) is None

    def test_hazen_coefficient_is_configurable(self):
        assert hazen_permeability(0.2, 90.0, 2.0, 3.0, coefficient=1.5) == pytest.approx(6e-4)

    def test_no_nan_in_results(self):
        result = SieveAnalysisEngine().calculate(WELL_GRADED_SAND, classify=False)

        for value in (result.d10, result.d30, result.d60, result.cu, result.cc):
            assert value is None or math.isfinite(value)


if __name__ == "__main__":
    pytest.main([__file__])
