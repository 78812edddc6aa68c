"""
California Bearing Ratio engine (ASTM D1883).

Interpolates the load-penetration curve at 2.5 mm and 5.0 mm, applies the
zero-point correction to concave-upward curves, and derives strength
ratings and empirical design correlations from the final CBR.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from soillab.core.curve_fitting import interpolate
from soillab.core.models import (
    CBRCalculationResult, CBRDataPoint, CBRInsights, CBRMessage,
    CBRRecommendation, CBRTestParameters, CurveInterpretation,
    StrengthRating, ValueRange
)
from soillab.core.parsing import parse_float_or
from soillab.utils.color_schemes import get_rating_color
from soillab.utils.constants import (
    CBR_CONCAVITY_TOLERANCE, CBR_EARLY_STOP_PENETRATION, CBR_MIN_CORRECTION_OFFSET,
    CBR_PENETRATIONS, CBR_RATING_THRESHOLDS, DEFAULT_REF_LOAD_25, DEFAULT_REF_LOAD_50,
    PSI_PER_MPA, RESILIENT_MODULUS_BAND, RESILIENT_MODULUS_PSI_FACTOR,
    SHEAR_STRENGTH_BAND, SHEAR_STRENGTH_FACTOR, SHEAR_STRENGTH_MAX_CBR,
    SUBGRADE_MODULUS_FACTOR
)

logger = logging.getLogger(__name__)

RECOMMENDATIONS = {
    StrengthRating.EXCELLENT: CBRRecommendation.EXCELLENT,
    StrengthRating.VERY_GOOD: CBRRecommendation.EXCELLENT,
    StrengthRating.GOOD: CBRRecommendation.GOOD,
    StrengthRating.FAIR: CBRRecommendation.FAIR,
    StrengthRating.POOR: CBRRecommendation.POOR,
    StrengthRating.VERY_POOR: CBRRecommendation.VERY_POOR,
}


def _slope(p1: CBRDataPoint, p2: CBRDataPoint) -> Optional[float]:
    if p2.penetration <= p1.penetration:
        return None
    return (p2.load - p1.load) / (p2.penetration - p1.penetration)


def correct_curve(points: Sequence[CBRDataPoint],
                  concavity_tolerance: float = CBR_CONCAVITY_TOLERANCE
                  ) -> Optional[List[CBRDataPoint]]:
    """
    Apply the zero-point correction to a concave-upward load curve.

    The steepest segment is projected back to zero load; its intercept on
    the penetration axis becomes the corrected origin. A curve is treated
    as concave upward when its steepest segment is steeper than the
    initial segment by more than the tolerance, or when the initial
    segment does not rise. The tolerance keeps near-linear curves, whose
    segment slopes differ only by reading scatter, uncorrected.

    Args:
        points: Readings ordered by penetration
        concavity_tolerance: Relative slope increase marking concavity

    Returns:
        Shifted points, or None when no correction applies
    """
    if len(points) < 3:
        return None

    slopes = [(i, _slope(p1, p2)) for i, (p1, p2) in enumerate(zip(points, points[1:]))]
    slopes = [(i, s) for i, s in slopes if s is not None]
    if not slopes:
        return None

    initial_slope = slopes[0][1]
    max_index, max_slope = slopes[0]
    for index, slope in slopes[1:]:
        if slope > max_slope:
            max_index, max_slope = index, slope

    if max_slope <= 0:
        return None

    concave = initial_slope <= 0 or max_slope > initial_slope * (1 + concavity_tolerance)
    if not concave:
        return None

    anchor = points[max_index]
    offset = anchor.penetration - anchor.load / max_slope
    if offset <= CBR_MIN_CORRECTION_OFFSET:
        return None

    logger.debug(f"CBR zero correction: origin shifted by {offset:.3f} mm")
    return [CBRDataPoint(p.penetration - offset, p.load) for p in points]


def rate_strength(cbr: float) -> StrengthRating:
    """Quality rating for a CBR value."""
    for threshold, code in CBR_RATING_THRESHOLDS:
        if cbr >= threshold:
            return StrengthRating(code)
    return StrengthRating.VERY_POOR


def estimate_resilient_modulus(cbr: float,
                               band: Tuple[float, float] = RESILIENT_MODULUS_BAND) -> ValueRange:
    """Resilient modulus band in MPa from Mr(psi) = 1500 CBR."""
    mr_mpa = RESILIENT_MODULUS_PSI_FACTOR * cbr / PSI_PER_MPA
    return ValueRange(int(mr_mpa * band[0]), int(mr_mpa * band[1]), "MPa")


def estimate_shear_strength(cbr: float,
                            band: Tuple[float, float] = SHEAR_STRENGTH_BAND) -> ValueRange:
    """Undrained shear strength band in kPa; (0, 0) above the cohesive-soil range."""
    if cbr > SHEAR_STRENGTH_MAX_CBR:
        return ValueRange(0, 0, "kPa")
    su = SHEAR_STRENGTH_FACTOR * cbr
    return ValueRange(int(su * band[0]), int(su * band[1]), "kPa")


def interpret_curve(is_corrected: bool, points: Sequence[CBRDataPoint]) -> CurveInterpretation:
    if is_corrected:
        return CurveInterpretation.CORRECTED
    if points and points[-1].penetration < CBR_EARLY_STOP_PENETRATION:
        return CurveInterpretation.STOPPED_EARLY
    return CurveInterpretation.NORMAL


def analyze_cbr(cbr: float, is_corrected: bool,
                points: Sequence[CBRDataPoint]) -> CBRInsights:
    """Derive rating, correlations and curve interpretation for a final CBR."""
    rating = rate_strength(cbr)
    return CBRInsights(
        quality_rating=rating,
        rating_color=get_rating_color(rating.value),
        curve_interpretation=interpret_curve(is_corrected, points),
        resilient_modulus=estimate_resilient_modulus(cbr),
        shear_strength=estimate_shear_strength(cbr),
        recommendation=RECOMMENDATIONS[rating]
    )


def subgrade_modulus(cbr: float) -> float:
    """Modulus of subgrade reaction k (MN/m3), k = 10 CBR."""
    return max(SUBGRADE_MODULUS_FACTOR * cbr, 0.0)


class CBREngine:
    """CBR calculation from load-penetration readings."""

    def calculate(self, points: Sequence[CBRDataPoint],
                  params: Optional[CBRTestParameters] = None
                  ) -> Tuple[Optional[CBRCalculationResult], Optional[List[CBRDataPoint]]]:
        """
        Calculate CBR at the standard penetrations.

        Args:
            points: Load-penetration readings in any order
            params: Test parameters carrying the reference loads

        Returns:
            Tuple of (result, corrected points). Both are None when there
            are fewer than two readings, a reference load is not positive,
            or a standard penetration lies outside the readings. The second
            element is None when no correction was applied.
        """
        params = params or CBRTestParameters()

        if len(points) < 2:
            logger.debug("CBR calculation needs at least two readings")
            return None, None

        ref_25 = parse_float_or(params.ref_load_25, DEFAULT_REF_LOAD_25)
        ref_50 = parse_float_or(params.ref_load_50, DEFAULT_REF_LOAD_50)
        if ref_25 <= 0 or ref_50 <= 0:
            logger.debug(f"CBR reference loads must be positive: {ref_25}, {ref_50}")
            return None, None

        ordered = sorted(points, key=lambda p: p.penetration)
        corrected = correct_curve(ordered)
        working = corrected if corrected is not None else ordered

        curve = [(p.penetration, p.load) for p in working]
        load_25 = interpolate(curve, CBR_PENETRATIONS[0])
        load_50 = interpolate(curve, CBR_PENETRATIONS[1])
        if load_25 is None or load_50 is None:
            logger.debug("Standard penetrations fall outside the recorded readings")
            return None, None

        cbr_25 = load_25 / ref_25 * 100.0
        cbr_50 = load_50 / ref_50 * 100.0
        final_cbr = max(cbr_25, cbr_50)
        message = CBRMessage.RETEST_WARNING if cbr_50 > cbr_25 else CBRMessage.SUCCESS
        is_corrected = corrected is not None

        if message == CBRMessage.RETEST_WARNING:
            logger.info(f"CBR at 5.0 mm ({cbr_50:.1f}%) exceeds CBR at 2.5 mm "
                        f"({cbr_25:.1f}%); retest recommended")

        result = CBRCalculationResult(
            load_at_2_5=load_25,
            load_at_5_0=load_50,
            cbr_at_2_5=cbr_25,
            cbr_at_5_0=cbr_50,
            final_cbr=final_cbr,
            is_corrected=is_corrected,
            message=message,
            insights=analyze_cbr(final_cbr, is_corrected, ordered),
            subgrade_modulus=subgrade_modulus(final_cbr)
        )
        return result, corrected
