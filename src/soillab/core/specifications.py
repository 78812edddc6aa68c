"""
Gradation specification envelopes and compliance checking.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from soillab.core.models import (
    SieveAnalysisResult, Specification, SpecificationCheck, SpecificationCheckItem,
    SpecificationLimit, SpecificationStatus
)
from soillab.core.parsing import parse_float_or
from soillab.core.validators import FieldError, ValidationResult
from soillab.utils.constants import FLOATING_POINT_TOLERANCE, SIEVE_OPENING_TOLERANCE

logger = logging.getLogger(__name__)


def _envelope(name: str, *limits: Tuple[float, float, float]) -> Specification:
    return Specification(name, tuple(SpecificationLimit(*limit) for limit in limits))


PREDEFINED_SPECIFICATIONS: Dict[str, Specification] = {
    'saudi_base_a': _envelope(
        'spec_saudi_base_a',
        (50.0, 100, 100), (37.5, 70, 95), (25.0, 55, 85), (4.75, 30, 55),
        (2.00, 20, 40), (0.425, 10, 25), (0.075, 5, 12)),
    'saudi_subbase': _envelope(
        'spec_saudi_subbase',
        (50.0, 100, 100), (25.0, 60, 100), (4.75, 35, 70), (0.425, 10, 30),
        (0.075, 5, 15)),
    'astm_c33_fine': _envelope(
        'spec_astm_c33_fine',
        (9.5, 100, 100), (4.75, 95, 100), (2.36, 80, 100), (1.18, 50, 85),
        (0.600, 25, 60), (0.300, 5, 30), (0.150, 0, 10)),
    'astm_c33_57': _envelope(
        'spec_astm_c33_57',
        (37.5, 100, 100), (25.0, 95, 100), (12.5, 25, 60), (4.75, 0, 10),
        (2.36, 0, 5)),
    'astm_c33_67': _envelope(
        'spec_astm_c33_67',
        (25.0, 100, 100), (19.0, 90, 100), (9.5, 20, 55), (4.75, 0, 10),
        (2.36, 0, 5)),
    'superpave_19': _envelope(
        'spec_superpave_19',
        (25.0, 100, 100), (19.0, 90, 100), (12.5, 90, 90), (2.36, 23, 49),
        (0.075, 2, 8)),
}


def get_specification(key: str) -> Specification:
    """Look up a predefined specification; raises ValueError for unknown keys."""
    try:
        return PREDEFINED_SPECIFICATIONS[key]
    except KeyError:
        raise ValueError(f"Unknown specification: {key}") from None


def create_custom_specification(name: str, limits: Sequence[Tuple[float, object, object]]
                                ) -> Tuple[Optional[Specification], ValidationResult]:
    """
    Build a user-defined specification.

    Args:
        name: Specification name
        limits: (sieve opening, min passing, max passing) entries; blank
            minimum and maximum default to 0 and 100

    Returns:
        Tuple of (specification or None, validation outcome). A blank name,
        an envelope that leaves every sieve at 0-100, or a minimum above its
        maximum is rejected.
    """
    errors: List[FieldError] = []
    if not name or not name.strip():
        errors.append(FieldError("SPEC_NAME_EMPTY", "Specification name is required.", "name"))

    parsed = []
    for index, (opening, min_text, max_text) in enumerate(limits):
        min_passing = parse_float_or(min_text, 0.0)
        max_passing = parse_float_or(max_text, 100.0)
        if min_passing > max_passing:
            errors.append(FieldError("INVALID_LIMIT", "Minimum passing exceeds maximum passing.",
                                     f"limits[{index}]"))
        parsed.append(SpecificationLimit(float(opening), min_passing, max_passing))

    if all(limit.min_passing == 0 and limit.max_passing == 100 for limit in parsed):
        errors.append(FieldError("SPEC_LIMITS_EMPTY", "At least one sieve must be constrained.",
                                 "limits"))

    validation = ValidationResult.from_issues(errors)
    if not validation.is_valid:
        return None, validation

    return Specification(name.strip(), tuple(parsed), is_custom=True), validation


def check_specification(result: SieveAnalysisResult,
                        specification: Specification) -> SpecificationCheck:
    """
    Compare a gradation against a specification envelope.

    Sieves named by the specification but absent from the analysis are
    reported as NO_DATA and make the gradation non-compliant.
    """
    items = []
    for limit in specification.limits:
        passing = result.passing_at(limit.sieve_opening, SIEVE_OPENING_TOLERANCE)
        if passing is None:
            status = SpecificationStatus.NO_DATA
        elif (limit.min_passing - FLOATING_POINT_TOLERANCE <= passing
              <= limit.max_passing + FLOATING_POINT_TOLERANCE):
            status = SpecificationStatus.PASS
        else:
            status = SpecificationStatus.FAIL
        items.append(SpecificationCheckItem(
            sieve_opening=limit.sieve_opening,
            percent_passing=passing,
            min_passing=limit.min_passing,
            max_passing=limit.max_passing,
            status=status
        ))

    check = SpecificationCheck(specification.name, tuple(items))
    logger.debug(f"Specification {specification.name}: "
                 f"{'compliant' if check.is_compliant else 'non-compliant'}")
    return check
