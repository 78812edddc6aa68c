"""
Tests for gradation specification envelopes.
"""

import pytest
from soillab.core.models import SieveAnalysisResult, SieveReading, SpecificationStatus
from soillab.core.specifications import (
    PREDEFINED_SPECIFICATIONS, check_specification, create_custom_specification,
    get_specification
)


def gradation(pairs):
    return SieveAnalysisResult(
        sieves=tuple(SieveReading(str(o), o, None, 0.0, p) for o, p in pairs),
        percent_gravel=50.0, percent_sand=40.0, percent_fines=10.0,
        d10=None, d30=None, d60=None, cu=None, cc=None, fineness_modulus=0.0)


SUBBASE_GRADATION = [(50.0, 100.0), (25.0, 80.0), (4.75, 50.0), (0.425, 20.0), (0.075, 10.0)]


class TestPredefinedSpecifications:
    """Test the built-in envelopes."""

    def test_lookup(self):
        spec = get_specification('saudi_subbase')

        assert spec.name == 'spec_saudi_subbase'
        assert not spec.is_custom
        assert len(spec.limits) == 5

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            get_specification('no_such_spec')

    def test_limits_are_consistent(self):
        for spec in PREDEFINED_SPECIFICATIONS.values():
            for limit in spec.limits:
                assert 0 <= limit.min_passing <= limit.max_passing <= 100


class TestSpecificationCheck:
    """Test compliance of a gradation with an envelope."""

    def test_compliant(self):
        check = check_specification(gradation(SUBBASE_GRADATION), get_specification('saudi_subbase'))

        assert check.is_compliant
        assert all(item.status == SpecificationStatus.PASS for item in check.items)
        assert check.specification_name == 'spec_saudi_subbase'

    def test_out_of_envelope(self):
        pairs = SUBBASE_GRADATION[:-1] + [(0.075, 20.0)]

        check = check_specification(gradation(pairs), get_specification('saudi_subbase'))

        assert not check.is_compliant
        assert check.items[-1].status == SpecificationStatus.FAIL
        assert check.items[-1].percent_passing == 20.0

    def test_limits_are_inclusive(self):
        pairs = [(50.0, 100.0), (25.0, 60.0), (4.75, 70.0), (0.425, 10.0), (0.075, 15.0)]

        check = check_specification(gradation(pairs), get_specification('saudi_subbase'))

        assert check.is_compliant

    def test_missing_sieve_is_no_data(self):
        pairs = [p for p in SUBBASE_GRADATION if p[0] != 0.425]

        check = check_specification(gradation(pairs), get_specification('saudi_subbase'))

        assert not check.is_compliant
        no_data = [item for item in check.items if item.status == SpecificationStatus.NO_DATA]
        assert [item.sieve_opening for item in no_data] == [0.425]
        assert no_data[0].percent_passing is None


class TestCustomSpecification:
    """Test user-defined envelopes."""

    def test_valid(self):
        spec, validation = create_custom_specification(" Project fill ", [(4.75, "30", "60"), (0.075, "", "")])

        assert validation.is_valid
        assert spec.name == "Project fill"
        assert spec.is_custom
        assert spec.limits[1].min_passing == 0.0
        assert spec.limits[1].max_passing == 100.0

    def test_blank_name(self):
        spec, validation = create_custom_specification("  ", [(4.75, "30", "60")])

        assert spec is None
        assert validation.first_error.code == "SPEC_NAME_EMPTY"

    def test_unconstrained_envelope(self):
        spec, validation = create_custom_specification("Loose", [(4.75, "", ""), (0.075, "0", "100")])

        assert spec is None
        assert [e.code for e in validation.errors] == ["SPEC_LIMITS_EMPTY"]

    def test_no_limits(self):
        spec, validation = create_custom_specification("Empty", [])

        assert spec is None
        assert validation.first_error.code == "SPEC_LIMITS_EMPTY"

    def test_inverted_limit(self):
        spec, validation = create_custom_specification("Bad", [(4.75, "70", "30")])

        assert spec is None
        assert validation.first_error.code == "INVALID_LIMIT"
        assert validation.first_error.field == "limits[0]"


if __name__ == "__main__":
    pytest.main([__file__])
