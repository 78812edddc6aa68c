"""
Soil classification by AASHTO M145 and USCS (ASTM D2487).

The AASHTO groups are an ordered table of guarded rules evaluated top to
bottom, with an explicit "Unknown" fallback. The module also provides frost
susceptibility bands, commentary and subgrade recommendation codes, and
empirical predictions of compaction and strength properties.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from soillab.core.atterberg import PLASTICITY_DESCRIPTIONS, a_line, fine_grained_symbol
from soillab.core.models import (
    AASHTOResult, ClassificationInput, ClassificationParameters, Commentary,
    FrostSusceptibility, FrostSusceptibilityResult, PredictedProperties,
    SieveAnalysisResult, SoilClassificationResult, SubgradeRecommendation,
    USCSResult
)
from soillab.core.parsing import parse_float
from soillab.utils.color_schemes import get_frost_color
from soillab.utils.constants import (
    FROST_BANDS, NO10_OPENING, NO40_OPENING, PREDICTED_CBR_RANGE,
    PREDICTED_MDD_COARSE_RANGE, PREDICTED_MDD_FINE_RANGE,
    PREDICTED_OMC_COARSE_RANGE, PREDICTED_OMC_FINE_RANGE
)

logger = logging.getLogger(__name__)

UNKNOWN_GROUP = "Unknown"


@dataclass(frozen=True)
class ClassificationRule:
    """A group name guarded by a predicate over the index properties."""
    group: str
    predicate: Callable[[ClassificationInput], bool]
    uses_group_index: bool = True

    def matches(self, soil: ClassificationInput) -> bool:
        return self.predicate(soil)


# Evaluated in order; the first matching rule wins
AASHTO_RULES: Tuple[ClassificationRule, ...] = (
    # Granular materials (35% or less passing 0.075 mm)
    ClassificationRule(
        "A-1-a",
        lambda s: (s.percent_fines <= 15 and s.passing_no40 <= 30
                   and s.passing_no10 <= 50 and s.plasticity_index <= 6),
        uses_group_index=False),
    ClassificationRule(
        "A-1-b",
        lambda s: s.percent_fines <= 25 and s.passing_no40 <= 50 and s.plasticity_index <= 6,
        uses_group_index=False),
    ClassificationRule(
        "A-3",
        lambda s: s.percent_fines <= 10 and s.passing_no40 > 50 and s.plasticity_index <= 0,
        uses_group_index=False),
    ClassificationRule(
        "A-2-4",
        lambda s: s.percent_fines <= 35 and s.liquid_limit <= 40 and s.plasticity_index <= 10),
    ClassificationRule(
        "A-2-5",
        lambda s: s.percent_fines <= 35 and s.liquid_limit > 40 and s.plasticity_index <= 10),
    ClassificationRule(
        "A-2-6",
        lambda s: s.percent_fines <= 35 and s.liquid_limit <= 40 and s.plasticity_index > 10),
    ClassificationRule(
        "A-2-7",
        lambda s: s.percent_fines <= 35 and s.liquid_limit > 40 and s.plasticity_index > 10),
    # Silt-clay materials (more than 35% passing 0.075 mm)
    ClassificationRule(
        "A-4",
        lambda s: s.percent_fines > 35 and s.liquid_limit <= 40 and s.plasticity_index <= 10),
    ClassificationRule(
        "A-5",
        lambda s: s.percent_fines > 35 and s.liquid_limit > 40 and s.plasticity_index <= 10),
    ClassificationRule(
        "A-6",
        lambda s: s.percent_fines > 35 and s.liquid_limit <= 40 and s.plasticity_index > 10),
    ClassificationRule(
        "A-7-5",
        lambda s: (s.percent_fines > 35 and s.liquid_limit > 40 and s.plasticity_index > 10
                   and s.plasticity_index <= s.liquid_limit - 30)),
    ClassificationRule(
        "A-7-6",
        lambda s: s.percent_fines > 35 and s.liquid_limit > 40 and s.plasticity_index > 10),
)

USCS_DESCRIPTIONS = {
    'GW': 'uscs_desc_gw',
    'GP': 'uscs_desc_gp',
    'GM': 'uscs_desc_gm',
    'GC': 'uscs_desc_gc',
    'SW': 'uscs_desc_sw',
    'SP': 'uscs_desc_sp',
    'SM': 'uscs_desc_sm',
    'SC': 'uscs_desc_sc',
}
USCS_DUAL_DESCRIPTION = 'uscs_desc_dual'


def group_index(percent_fines: float, liquid_limit: float, plasticity_index: float) -> int:
    """
    AASHTO group index, truncated to an integer and floored at zero.

    GI = (F - 35)(0.2 + 0.005(LL - 40)) + 0.01(F - 15)(PI - 10)
    """
    if liquid_limit == 0 or plasticity_index == 0:
        return 0
    gi = ((percent_fines - 35) * (0.2 + 0.005 * (liquid_limit - 40))
          + 0.01 * (percent_fines - 15) * (plasticity_index - 10))
    return int(max(gi, 0.0))


def classify_aashto(soil: ClassificationInput) -> AASHTOResult:
    """AASHTO M145 group and group index."""
    for rule in AASHTO_RULES:
        if rule.matches(soil):
            gi = (group_index(soil.percent_fines, soil.liquid_limit, soil.plasticity_index)
                  if rule.uses_group_index else 0)
            return AASHTOResult(rule.group, gi)

    logger.debug(f"No AASHTO group matches {soil}")
    return AASHTOResult(UNKNOWN_GROUP, None)


def _is_well_graded(cu: Optional[float], cc: Optional[float], min_cu: float) -> bool:
    cu = cu or 0.0
    cc = cc or 0.0
    return cu >= min_cu and 1.0 <= cc <= 3.0


def _has_clayey_fines(liquid_limit: float, plasticity_index: float) -> bool:
    # Non-plastic fines plot below the A-line whatever their LL
    return plasticity_index >= 4 and plasticity_index > a_line(liquid_limit)


def has_fines_component(symbol: str) -> bool:
    """
    Check if a USCS symbol carries a clay or silt component.

    True for fine-grained soils and for coarse soils with fines (GC, SM,
    SW-SC, ...); False for clean gravels and sands.
    """
    return 'C' in symbol or 'M' in symbol


def classify_uscs(soil: ClassificationInput) -> USCSResult:
    """
    USCS group symbol.

    Fine-grained soils (50% or more fines) use the plasticity chart. Coarse
    soils are gravel when gravel is at least the sand fraction; clean soils
    are graded by Cu and Cc, soils with more than 12% fines by the plasticity
    of the fines, and soils in between carry a dual symbol.
    """
    if soil.percent_fines >= 50:
        symbol = fine_grained_symbol(soil.liquid_limit, soil.plasticity_index)
        return USCSResult(symbol, PLASTICITY_DESCRIPTIONS[symbol])

    if soil.percent_gravel >= soil.percent_sand:
        prefix, min_cu = 'G', 4.0
    else:
        prefix, min_cu = 'S', 6.0

    graded = prefix + ('W' if _is_well_graded(soil.cu, soil.cc, min_cu) else 'P')
    with_fines = prefix + ('C' if _has_clayey_fines(soil.liquid_limit, soil.plasticity_index) else 'M')

    if soil.percent_fines < 5:
        return USCSResult(graded, USCS_DESCRIPTIONS[graded])
    if soil.percent_fines > 12:
        return USCSResult(with_fines, USCS_DESCRIPTIONS[with_fines])
    return USCSResult(f"{graded}-{with_fines}", USCS_DUAL_DESCRIPTION)


def frost_susceptibility(percent_fines: float) -> FrostSusceptibilityResult:
    """Frost susceptibility band from the fines content."""
    for limit, band in FROST_BANDS:
        if percent_fines <= limit:
            return FrostSusceptibilityResult(FrostSusceptibility(band), get_frost_color(band))
    band = FrostSusceptibility.VERY_HIGH
    return FrostSusceptibilityResult(band, get_frost_color(band.value))


def commentary_code(uscs_symbol: str, percent_sand: float, percent_fines: float) -> Commentary:
    if uscs_symbol.startswith(('GW', 'SW')):
        return Commentary.WELL_GRADED
    if uscs_symbol.startswith(('GP', 'SP')):
        return Commentary.POORLY_GRADED
    if 'H' in uscs_symbol:
        return Commentary.HIGH_PLASTICITY
    if percent_sand > 50 and percent_fines > 12:
        return Commentary.SANDY_FINES
    return Commentary.LOW_PLASTICITY


def recommendation_code(aashto_group: str) -> SubgradeRecommendation:
    """Subgrade suitability by AASHTO family."""
    if aashto_group.startswith(('A-1', 'A-3')):
        return SubgradeRecommendation.EXCELLENT
    if aashto_group.startswith('A-2'):
        return SubgradeRecommendation.GOOD
    if aashto_group.startswith(('A-4', 'A-5', 'A-6', 'A-7')):
        return SubgradeRecommendation.POOR
    return SubgradeRecommendation.GENERAL


def _clamp(value: float, bounds: Tuple[float, float]) -> float:
    return min(max(value, bounds[0]), bounds[1])


def predict_engineering_properties(uscs_symbol: str, liquid_limit: float,
                                   plasticity_index: float,
                                   percent_fines: float) -> PredictedProperties:
    """
    Estimate MDD, OMC and CBR from index properties.

    Soils with a clay or silt component and clean coarse soils use
    separate linear correlations, clamped to plausible ranges. CBR is only
    predicted for plastic soils.

    Args:
        uscs_symbol: USCS group symbol
        liquid_limit: Liquid limit (%)
        plasticity_index: Plasticity index (%)
        percent_fines: Percent passing 0.075 mm

    Returns:
        PredictedProperties (MDD in g/cm3, OMC and CBR in percent)
    """
    ll, pi = liquid_limit, plasticity_index

    if has_fines_component(uscs_symbol):
        omc = _clamp(2.4 + 0.6 * ll + 0.23 * pi, PREDICTED_OMC_FINE_RANGE)
        mdd = _clamp(2.14 - 0.007 * ll - 0.005 * pi, PREDICTED_MDD_FINE_RANGE)
    else:
        omc = _clamp(0.25 * ll + 0.15 * pi + 0.05 * percent_fines, PREDICTED_OMC_COARSE_RANGE)
        mdd = _clamp(2.25 - 0.002 * ll - 0.001 * pi - 0.008 * percent_fines,
                     PREDICTED_MDD_COARSE_RANGE)

    cbr = None
    if pi > 0:
        log_cbr = 2.4 - 1.8 * math.log10(pi) + 0.08 * mdd
        cbr = _clamp(10 ** log_cbr, PREDICTED_CBR_RANGE)

    return PredictedProperties(predicted_mdd=mdd, predicted_omc=omc, predicted_cbr=cbr)


def classify(soil: ClassificationInput) -> SoilClassificationResult:
    """Classify a soil by AASHTO and USCS, with commentary and recommendation."""
    aashto = classify_aashto(soil)
    uscs = classify_uscs(soil)
    logger.debug(f"Classified as AASHTO {aashto.group_name} (GI {aashto.group_index_label}), "
                 f"USCS {uscs.group_name}")
    return SoilClassificationResult(
        aashto=aashto,
        uscs=uscs,
        commentary=commentary_code(uscs.group_name, soil.percent_sand, soil.percent_fines),
        recommendation=recommendation_code(aashto.group_name)
    )


def classification_input(result: SieveAnalysisResult,
                         params: ClassificationParameters) -> ClassificationInput:
    """
    Index properties of a sieve result and its Atterberg limits.

    PI is LL - PL when both limits are positive and LL >= PL, otherwise 0.
    Missing 2.00 mm or 0.425 mm sieves count as 100% passing.
    """
    ll = parse_float(params.liquid_limit) or 0.0
    pl = parse_float(params.plastic_limit) or 0.0
    pi = ll - pl if ll > 0 and pl > 0 and ll >= pl else 0.0

    p10 = result.passing_at(NO10_OPENING)
    p40 = result.passing_at(NO40_OPENING)

    return ClassificationInput(
        liquid_limit=ll,
        plasticity_index=pi,
        percent_fines=result.percent_fines,
        percent_gravel=result.percent_gravel,
        percent_sand=result.percent_sand,
        cu=result.cu,
        cc=result.cc,
        passing_no10=100.0 if p10 is None else p10,
        passing_no40=100.0 if p40 is None else p40
    )


def classify_sieve_result(result: SieveAnalysisResult,
                          params: ClassificationParameters) -> SoilClassificationResult:
    return classify(classification_input(result, params))


def predict_for_sieve_result(result: SieveAnalysisResult, params: ClassificationParameters,
                             uscs_symbol: str) -> Optional[PredictedProperties]:
    """Predicted properties of a sieved soil; None unless both LL and PL are entered."""
    ll = parse_float(params.liquid_limit)
    pl = parse_float(params.plastic_limit)
    if ll is None or pl is None:
        return None
    return predict_engineering_properties(uscs_symbol, ll, ll - pl, result.percent_fines)
