"""
Atterberg limits engine (ASTM D4318).

Computes the liquid limit from Casagrande cup readings (one-point or
multi-point flow curve), the plastic limit from thread rolling water
contents, and the plasticity index, then places the soil on the
plasticity chart.
"""

import logging
import math
from typing import Optional, Sequence, Tuple

from soillab.core.curve_fitting import log_linear_regression
from soillab.core.models import (
    AtterbergResult, FlowCurvePoint, LimitMethod, LiquidLimitSample,
    PlasticLimitSample, PlasticityClassification
)
from soillab.core.parsing import parse_float, parse_int
from soillab.core.validators import ValidationResult, validate_atterberg_samples
from soillab.utils.constants import (
    A_LINE_INTERCEPT_LL, A_LINE_SLOPE, CONFIDENCE_BASE, CONFIDENCE_BLOWS_BONUS,
    CONFIDENCE_FIT_BONUS, CONFIDENCE_POINTS_BONUS, CONFIDENCE_RANGE,
    FLOW_CURVE_PLOT_BLOWS, LL_REFERENCE_BLOWS, ONE_POINT_EXPONENT
)

logger = logging.getLogger(__name__)

# Plasticity chart descriptions, resolved by the display layer
PLASTICITY_DESCRIPTIONS = {
    'CL': 'desc_cl',
    'ML': 'desc_ml',
    'CL-ML': 'desc_cl_ml',
    'CH': 'desc_ch',
    'MH': 'desc_mh',
}


def a_line(liquid_limit: float) -> float:
    """Casagrande A-line: PI = 0.73 (LL - 20)."""
    return A_LINE_SLOPE * (liquid_limit - A_LINE_INTERCEPT_LL)


def fine_grained_symbol(liquid_limit: float, plasticity_index: float) -> str:
    """
    Group symbol of a fine-grained soil from its position on the plasticity chart.

    Args:
        liquid_limit: Liquid limit (%)
        plasticity_index: Plasticity index (%)

    Returns:
        One of CL, ML, CL-ML, CH, MH
    """
    a_line_pi = a_line(liquid_limit)

    if liquid_limit < 50:
        if plasticity_index > 7 and plasticity_index >= a_line_pi:
            return 'CL'
        if plasticity_index < 4 or plasticity_index < a_line_pi:
            return 'ML'
        return 'CL-ML'

    return 'CH' if plasticity_index >= a_line_pi else 'MH'


def classify_plasticity(liquid_limit: float, plasticity_index: float,
                        blows: Sequence[float] = (),
                        r_squared: Optional[float] = None) -> PlasticityClassification:
    """
    Classify a fine-grained soil and score the confidence of the result.

    Confidence starts at the base value and gains fixed increments for a
    well-populated flow curve, a tight fit, and a reading near 25 blows.
    """
    symbol = fine_grained_symbol(liquid_limit, plasticity_index)

    confidence = CONFIDENCE_BASE
    if len(blows) >= 3:
        confidence += CONFIDENCE_POINTS_BONUS
    if r_squared is not None and abs(r_squared) > 0.95:
        confidence += CONFIDENCE_FIT_BONUS
    if any(20 <= n <= 30 for n in blows):
        confidence += CONFIDENCE_BLOWS_BONUS

    low, high = CONFIDENCE_RANGE
    confidence = min(max(confidence, low), high)

    return PlasticityClassification(
        symbol=symbol,
        description_ref=PLASTICITY_DESCRIPTIONS[symbol],
        confidence=confidence
    )


class AtterbergEngine:
    """Liquid limit, plastic limit and plasticity index calculation."""

    def compute_limits(self, ll_samples: Sequence[LiquidLimitSample],
                       pl_samples: Sequence[PlasticLimitSample]
                       ) -> Tuple[Optional[AtterbergResult], ValidationResult]:
        """
        Compute Atterberg limits from laboratory readings.

        Args:
            ll_samples: Casagrande cup readings (blows, water content)
            pl_samples: Plastic limit water contents

        Returns:
            Tuple of (result or None, validation outcome). The result is
            None when validation fails, a sample list is empty, or the flow
            curve regression is degenerate.
        """
        validation = validate_atterberg_samples(ll_samples, pl_samples)
        if not validation.is_valid:
            logger.info(f"Atterberg calculation aborted: {validation.first_error.code} "
                        f"at {validation.first_error.field}")
            return None, validation

        if not ll_samples or not pl_samples:
            logger.debug("Atterberg calculation needs at least one LL and one PL sample")
            return None, validation

        readings = [(parse_int(s.blows), parse_float(s.water_content)) for s in ll_samples]
        pl_values = [parse_float(s.water_content) for s in pl_samples]
        plastic_limit = sum(pl_values) / len(pl_values)

        if len(readings) == 1:
            blows, water_content = readings[0]
            liquid_limit = water_content * (blows / LL_REFERENCE_BLOWS) ** ONE_POINT_EXPONENT
            method = LimitMethod.ONE_POINT
            points: Tuple[FlowCurvePoint, ...] = ()
            best_fit: Tuple[FlowCurvePoint, ...] = ()
            r_squared = None
        else:
            fit = log_linear_regression([b for b, _ in readings], [w for _, w in readings])
            if fit is None:
                logger.debug("Flow curve regression is degenerate; all blow counts coincide")
                return None, validation

            liquid_limit = fit.predict(math.log10(LL_REFERENCE_BLOWS))
            method = LimitMethod.MULTI_POINT
            points = tuple(FlowCurvePoint(float(b), w) for b, w in readings)
            best_fit = tuple(FlowCurvePoint(float(n), fit.predict(math.log10(n)))
                             for n in FLOW_CURVE_PLOT_BLOWS)
            r_squared = fit.r_squared

        plasticity_index = liquid_limit - plastic_limit
        classification = classify_plasticity(
            liquid_limit, plasticity_index, [p.blows for p in points], r_squared)

        logger.debug(f"Atterberg limits: LL={liquid_limit:.2f}, PL={plastic_limit:.2f}, "
                     f"PI={plasticity_index:.2f} ({classification.symbol})")

        result = AtterbergResult(
            liquid_limit=liquid_limit,
            plastic_limit=plastic_limit,
            plasticity_index=plasticity_index,
            method=method,
            points=points,
            classification=classification,
            best_fit_line=best_fit,
            correlation_coefficient=r_squared,
            is_non_plastic=plasticity_index <= 0,
            warnings=validation.warnings
        )
        return result, validation
