"""
Sieve analysis engine (ASTM D6913 / C136).

Reconciles the entered cumulative retained weights into a physically
consistent stack, derives percent passing, gradation fractions, the
characteristic sizes D10/D30/D60 and the gradation coefficients, and
optionally classifies the material.
"""

import dataclasses
import logging
import math
from typing import List, Optional, Sequence, Tuple

from soillab.core.classification import (
    classify_sieve_result, frost_susceptibility, predict_for_sieve_result
)
from soillab.core.models import (
    ClassificationParameters, Sieve, SieveAnalysisResult, SieveReading
)
from soillab.core.parsing import parse_float
from soillab.core.validators import SampleValidator, SeverityLevel, ValidationWarning
from soillab.utils.constants import (
    FINENESS_MODULUS_SIEVES, HAZEN_COEFFICIENT, HAZEN_MAX_CU, HAZEN_MAX_FINES,
    HAZEN_MIN_SAND, MATERIAL_LOSS_WARNING, NO200_OPENING, NO4_OPENING,
    SIEVE_OPENING_TOLERANCE
)

logger = logging.getLogger(__name__)


def reconcile_cumulative(sieves: Sequence[Sieve]) -> Tuple[float, ...]:
    """
    Reconcile entered cumulative retained weights, coarse to fine.

    An entry is adopted only if it is present and does not fall below the
    running cumulative weight; blank, malformed or decreasing entries carry
    the previous value. The output is therefore non-decreasing.

    Args:
        sieves: Sieve stack ordered from coarsest to finest

    Returns:
        Cumulative retained weight for each sieve
    """
    running = 0.0
    cumulative = []
    for sieve in sieves:
        weight = parse_float(sieve.retained_weight)
        if weight is not None and weight >= running:
            running = weight
        cumulative.append(running)
    return tuple(cumulative)


def passing_at(readings: Sequence[SieveReading], opening: float) -> float:
    """Percent passing a sieve of the given opening; 0 when the sieve is absent."""
    for reading in readings:
        if abs(reading.opening - opening) < SIEVE_OPENING_TOLERANCE:
            return reading.percent_passing
    return 0.0


def calculate_dx(readings: Sequence[SieveReading], percent: float) -> Optional[float]:
    """
    Particle size at which the given percentage passes.

    Interpolates log10(opening) linearly against percent passing, walking
    the stack from fine to coarse. A bracket whose finer side is the pan
    gives None; a flat bracket gives the finer opening.
    """
    fine_to_coarse = list(reversed(readings))
    for finer, coarser in zip(fine_to_coarse, fine_to_coarse[1:]):
        if finer.percent_passing <= percent <= coarser.percent_passing:
            if finer.opening <= 0:
                return None
            if coarser.percent_passing == finer.percent_passing or coarser.opening <= 0:
                return finer.opening

            log_d1 = math.log10(finer.opening)
            log_d2 = math.log10(coarser.opening)
            log_dx = log_d1 + (percent - finer.percent_passing) * (log_d2 - log_d1) / (
                coarser.percent_passing - finer.percent_passing)
            return 10 ** log_dx
    return None


def gradation_coefficients(d10: Optional[float], d30: Optional[float],
                           d60: Optional[float]) -> Tuple[Optional[float], Optional[float]]:
    """Coefficient of uniformity Cu and coefficient of curvature Cc."""
    cu = d60 / d10 if d10 and d60 is not None else None
    cc = d30 ** 2 / (d10 * d60) if d10 and d60 and d30 is not None else None
    return cu, cc


def fineness_modulus(readings: Sequence[SieveReading]) -> float:
    """Sum of cumulative percent retained on the standard fine aggregate sieves, over 100."""
    total = sum(100.0 - r.percent_passing for r in readings
                if any(abs(r.opening - o) < SIEVE_OPENING_TOLERANCE for o in FINENESS_MODULUS_SIEVES))
    return total / 100.0


def hazen_permeability(d10: Optional[float], percent_sand: float, percent_fines: float,
                       cu: Optional[float],
                       coefficient: float = HAZEN_COEFFICIENT) -> Optional[float]:
    """
    Hazen estimate k = C (D10/10)^2 in cm/s, D10 in mm.

    Only defined for clean uniform sands.
    """
    clean_sand = (percent_sand > HAZEN_MIN_SAND and percent_fines < HAZEN_MAX_FINES
                  and cu is not None and cu < HAZEN_MAX_CU)
    if not clean_sand or not d10 or d10 <= 0:
        return None
    return coefficient * (d10 / 10.0) ** 2


class SieveAnalysisEngine:
    """Gradation analysis of a sieve stack."""

    def __init__(self):
        self.validator = SampleValidator()

    def calculate(self, sieves: Sequence[Sieve],
                  params: Optional[ClassificationParameters] = None,
                  classify: bool = True,
                  hazen_coefficient: float = HAZEN_COEFFICIENT) -> Optional[SieveAnalysisResult]:
        """
        Run a sieve analysis.

        Args:
            sieves: Sieve stack ordered from coarsest to finest (pan last)
            params: Initial dry weight and Atterberg limits
            classify: Attach classification, frost susceptibility and
                predicted properties to the result
            hazen_coefficient: Empirical C of the Hazen formula

        Returns:
            SieveAnalysisResult, or None when the total weight is zero
        """
        params = params or ClassificationParameters()
        warnings: List[ValidationWarning] = []

        for sieve in sieves:
            check = self.validator.validate_sieve_weight(sieve.retained_weight)
            if not check.is_valid:
                warnings.append(ValidationWarning(
                    "IGNORED_WEIGHT", f"Entry on {sieve.name} ignored: {check.first_error.message}",
                    SeverityLevel.MEDIUM, sieve.name))

        cumulative = reconcile_cumulative(sieves)
        for sieve, value in zip(sieves, cumulative):
            weight = parse_float(sieve.retained_weight)
            if weight is not None and 0 <= weight < value:
                warnings.append(ValidationWarning(
                    "DECREASING_WEIGHT",
                    f"Cumulative weight on {sieve.name} is below the coarser sieve; carried over.",
                    SeverityLevel.LOW, sieve.name))

        sum_retained = cumulative[-1] if cumulative else 0.0
        initial_weight = parse_float(params.initial_weight)
        has_initial = initial_weight is not None and initial_weight > 0
        total_weight = initial_weight if has_initial else sum_retained

        if total_weight == 0:
            logger.debug("Sieve analysis has no weight to distribute")
            return None

        material_loss = None
        if has_initial:
            material_loss = (initial_weight - sum_retained) / initial_weight * 100.0
            if material_loss > MATERIAL_LOSS_WARNING:
                warnings.append(ValidationWarning(
                    "HIGH_MATERIAL_LOSS",
                    f"Material loss of {material_loss:.2f}% exceeds {MATERIAL_LOSS_WARNING}%.",
                    SeverityLevel.MEDIUM, "initial_weight"))

        readings = tuple(
            SieveReading(
                name=sieve.name,
                opening=sieve.opening,
                retained_weight=parse_float(sieve.retained_weight),
                cumulative_retained=value,
                percent_passing=min(max((total_weight - value) / total_weight * 100.0, 0.0), 100.0)
            )
            for sieve, value in zip(sieves, cumulative)
        )

        p4 = passing_at(readings, NO4_OPENING)
        p200 = passing_at(readings, NO200_OPENING)

        d10 = calculate_dx(readings, 10.0)
        d30 = calculate_dx(readings, 30.0)
        d60 = calculate_dx(readings, 60.0)
        cu, cc = gradation_coefficients(d10, d30, d60)

        percent_sand = p4 - p200
        result = SieveAnalysisResult(
            sieves=readings,
            percent_gravel=100.0 - p4,
            percent_sand=percent_sand,
            percent_fines=p200,
            d10=d10, d30=d30, d60=d60, cu=cu, cc=cc,
            fineness_modulus=fineness_modulus(readings),
            material_loss_percentage=material_loss,
            estimated_permeability=hazen_permeability(d10, percent_sand, p200, cu, hazen_coefficient),
            warnings=tuple(warnings)
        )

        logger.debug(f"Sieve analysis: gravel={result.percent_gravel:.1f}%, "
                     f"sand={result.percent_sand:.1f}%, fines={result.percent_fines:.1f}%")

        if classify:
            classification = classify_sieve_result(result, params)
            result = dataclasses.replace(
                result,
                classification=classification,
                frost_susceptibility=frost_susceptibility(result.percent_fines),
                predicted_properties=predict_for_sieve_result(
                    result, params, classification.uscs.group_name)
            )

        return result
