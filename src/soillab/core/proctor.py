"""
Proctor compaction engine (ASTM D698 / D1557).

Fits a parabola through the dry density / moisture content points to find
the maximum dry density (MDD) and optimum moisture content (OMC), and
samples the fitted and zero-air-voids curves for plotting.
"""

import dataclasses
import logging
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from soillab.core.curve_fitting import find_crossings, interpolate, quadratic_fit
from soillab.core.models import CurvePoint, ProctorDataPoint, ProctorResult, ProctorTestParameters
from soillab.core.parsing import parse_float, parse_float_or
from soillab.core.validators import (
    SampleValidator, SeverityLevel, ValidationResult, ValidationWarning
)
from soillab.utils.constants import (
    DEFAULT_REQUIRED_COMPACTION, DEFAULT_SPECIFIC_GRAVITY, FLOATING_POINT_TOLERANCE,
    MIN_PROCTOR_POINTS, NINETY_FIVE_PERCENT, PROCTOR_CURVE_MARGIN, PROCTOR_CURVE_SAMPLES,
    WATER_DENSITY
)

logger = logging.getLogger(__name__)


def make_proctor_point(moisture_content: Any, wet_soil_and_mold: Any, mold_weight: Any,
                       mold_volume: Any) -> Tuple[Optional[ProctorDataPoint], ValidationResult]:
    """
    Build a compaction point from mould masses.

    Args:
        moisture_content: Moisture content (%)
        wet_soil_and_mold: Mass of mould and compacted wet soil (g)
        mold_weight: Mass of the empty mould (g)
        mold_volume: Mould volume (cm3)

    Returns:
        Tuple of (point or None, validation outcome)
    """
    validation = SampleValidator().validate_proctor_point(
        moisture_content, wet_soil_and_mold, mold_weight, mold_volume)
    if not validation.is_valid:
        return None, validation

    wet_density = (parse_float(wet_soil_and_mold) - parse_float(mold_weight)) / parse_float(mold_volume)
    return ProctorDataPoint.from_wet_density(parse_float(moisture_content), wet_density), validation


def zero_air_voids_density(moisture_content: float, specific_gravity: float) -> float:
    """Dry density at full saturation, Gs rho_w / (1 + w Gs)."""
    w = moisture_content / 100.0
    return specific_gravity * WATER_DENSITY / (1 + w * specific_gravity)


def density_at_moisture(curve: Sequence[CurvePoint], moisture_content: float) -> Optional[float]:
    """Dry density read off a sampled curve; None outside its moisture range."""
    return interpolate(curve, moisture_content)


def moisture_range_for_compaction(curve: Sequence[CurvePoint], max_dry_density: float,
                                  required_compaction: float) -> Optional[Tuple[float, float]]:
    """
    Moisture band over which the curve reaches the required relative compaction.

    Returns (min, max) moisture when the target density is crossed at least
    twice, otherwise None.
    """
    if not curve:
        return None
    target = max_dry_density * required_compaction / 100.0
    crossings = find_crossings(curve, target)
    if len(crossings) < 2:
        return None
    return min(crossings), max(crossings)


class ProctorEngine:
    """Compaction curve fitting."""

    def calculate(self, points: Sequence[ProctorDataPoint],
                  params: Optional[ProctorTestParameters] = None) -> Optional[ProctorResult]:
        """
        Fit the compaction curve.

        Args:
            points: At least three compaction points
            params: Test parameters carrying the specific gravity

        Returns:
            ProctorResult, or None with fewer than three points, a singular
            fit, or a curve that does not open downward
        """
        params = params or ProctorTestParameters()

        if len(points) < MIN_PROCTOR_POINTS:
            logger.debug(f"Proctor fit needs {MIN_PROCTOR_POINTS} points, got {len(points)}")
            return None

        ordered = sorted(points, key=lambda p: p.moisture_content)
        moistures = [p.moisture_content for p in ordered]
        fit = quadratic_fit(moistures, [p.dry_density for p in ordered])
        if fit is None:
            logger.debug("Proctor fit failed: singular normal equations")
            return None

        omc = fit.vertex_x
        if fit.a >= -FLOATING_POINT_TOLERANCE or omc is None:
            logger.debug(f"Proctor fit is flat or opens upward (a={fit.a:.3e}); no maximum")
            return None
        mdd = fit.evaluate(omc)

        specific_gravity = parse_float_or(params.specific_gravity, DEFAULT_SPECIFIC_GRAVITY)
        sampled = np.linspace(moistures[0] - PROCTOR_CURVE_MARGIN,
                              moistures[-1] + PROCTOR_CURVE_MARGIN,
                              PROCTOR_CURVE_SAMPLES)
        fitted_curve = tuple((float(mc), fit.evaluate(float(mc))) for mc in sampled)
        zav_curve = tuple((float(mc), zero_air_voids_density(float(mc), specific_gravity))
                          for mc in sampled)

        warnings: List[ValidationWarning] = []
        densest = max(range(len(ordered)), key=lambda i: ordered[i].dry_density)
        if densest in (0, len(ordered) - 1):
            warnings.append(ValidationWarning(
                "PEAK_NOT_DEFINED",
                "Highest dry density is at the driest or wettest point; add points around the optimum.",
                SeverityLevel.MEDIUM))

        logger.debug(f"Proctor: MDD={mdd:.3f} g/cm3 at OMC={omc:.2f}%")

        return ProctorResult(
            points=tuple(ordered),
            max_dry_density=mdd,
            optimum_moisture_content=omc,
            fitted_curve=fitted_curve,
            zav_curve=zav_curve,
            ninety_five_percent_mdd=mdd * NINETY_FIVE_PERCENT,
            coefficients=(fit.a, fit.b, fit.c),
            specific_gravity=specific_gravity,
            warnings=tuple(warnings)
        )

    def evaluate_field_compaction(self, result: ProctorResult, field_moisture: Any,
                                  required_compaction: Any = DEFAULT_REQUIRED_COMPACTION
                                  ) -> ProctorResult:
        """
        Attach the dry density achievable at the field moisture and the
        moisture band meeting the required compaction.
        """
        required = parse_float_or(required_compaction, DEFAULT_REQUIRED_COMPACTION)
        moisture = parse_float(field_moisture)
        achievable = (density_at_moisture(result.fitted_curve, moisture)
                      if moisture is not None else None)
        band = moisture_range_for_compaction(result.fitted_curve, result.max_dry_density, required)
        return dataclasses.replace(result, achievable_dry_density=achievable, compaction_band=band)
