"""
Aggregate quality tests: Los Angeles abrasion (ASTM C131) and flakiness
and elongation indices (BS 812-105).
"""

import logging
from typing import Optional

from soillab.core.models import FlakinessData, FlakinessResult, LAAbrasionData, LAAbrasionResult
from soillab.core.parsing import parse_float

logger = logging.getLogger(__name__)


class AggregateQualityEngine:
    """Durability and particle shape indices of coarse aggregate."""

    def calculate_la_abrasion(self, data: LAAbrasionData) -> Optional[LAAbrasionResult]:
        """
        Percentage loss in the Los Angeles machine.

        Returns None when a weight is missing, the initial weight is not
        positive, or the final weight exceeds it.
        """
        initial = parse_float(data.initial_weight)
        final = parse_float(data.final_weight)

        if initial is None or final is None or initial <= 0 or final > initial:
            logger.debug(f"Invalid LA abrasion weights: initial={initial}, final={final}")
            return None

        loss = initial - final
        return LAAbrasionResult(
            loss_weight=loss,
            percent_loss=loss / initial * 100.0,
            spec_limit=parse_float(data.spec_limit)
        )

    def calculate_flakiness(self, data: FlakinessData) -> Optional[FlakinessResult]:
        """Flakiness and elongation indices as percentages of the sample mass."""
        initial = parse_float(data.initial_weight)
        flaky = parse_float(data.flaky_weight)
        elongated = parse_float(data.elongated_weight)

        if initial is None or flaky is None or elongated is None or initial <= 0:
            return None

        return FlakinessResult(
            flakiness_index=flaky / initial * 100.0,
            elongation_index=elongated / initial * 100.0,
            flakiness_spec_limit=parse_float(data.flakiness_spec_limit),
            elongation_spec_limit=parse_float(data.elongation_spec_limit)
        )
