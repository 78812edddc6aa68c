"""
Calculation engine facade.

Dispatches a test type and its plain payload to the matching engine and
returns the result together with the validation outcome.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from soillab.core.aggregate_quality import AggregateQualityEngine
from soillab.core.atterberg import AtterbergEngine
from soillab.core.cbr import CBREngine
from soillab.core.field_density import RelativeDensityEngine, SandConeEngine
from soillab.core.models import TestType
from soillab.core.proctor import ProctorEngine
from soillab.core.serialization import export_bundle, load_inputs, to_serializable
from soillab.core.sieve import SieveAnalysisEngine
from soillab.core.specific_gravity import SpecificGravityEngine
from soillab.core.specifications import check_specification, get_specification
from soillab.core.validators import ValidationResult, validate_cbr_points
from soillab.utils.constants import DEFAULT_REQUIRED_COMPACTION

logger = logging.getLogger(__name__)


@dataclass
class CalculationOutcome:
    """Result of one dispatched calculation."""
    test_type: TestType
    result: Optional[Any]
    validation: ValidationResult
    inputs: Dict[str, Any] = field(default_factory=dict)
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.result is not None

    def to_bundle(self) -> Dict[str, Any]:
        """Serializable inputs, result and metadata for storage."""
        bundle = export_bundle(self.test_type, self.inputs, self.result)
        bundle['extras'] = to_serializable(self.extras)
        return bundle


class SoilLabEngine:
    """Main engine coordinating all test calculators."""

    def __init__(self):
        """Initialize the engine with all test calculators."""
        self.atterberg = AtterbergEngine()
        self.cbr = CBREngine()
        self.sieve = SieveAnalysisEngine()
        self.proctor = ProctorEngine()
        self.specific_gravity = SpecificGravityEngine()
        self.sand_cone = SandConeEngine()
        self.relative_density = RelativeDensityEngine()
        self.aggregate_quality = AggregateQualityEngine()

        self.handlers = {
            TestType.ATTERBERG: self._run_atterberg,
            TestType.CBR: self._run_cbr,
            TestType.SIEVE: self._run_sieve,
            TestType.PROCTOR: self._run_proctor,
            TestType.GS_FINE: self._run_gs_fine,
            TestType.GS_COARSE: self._run_gs_coarse,
            TestType.SAND_CONE: self._run_sand_cone,
            TestType.RELATIVE_DENSITY: self._run_relative_density,
            TestType.LA_ABRASION: self._run_la_abrasion,
            TestType.FLAKINESS: self._run_flakiness,
        }

    def available_tests(self) -> List[TestType]:
        return list(self.handlers)

    def calculate(self, test_type: Union[TestType, str], payload: Dict[str, Any]) -> CalculationOutcome:
        """
        Calculate a test from its payload.

        Args:
            test_type: Test type or its value (e.g. "cbr")
            payload: Plain payload dict

        Returns:
            CalculationOutcome; result is None when the payload is invalid
            or the data are insufficient

        Raises:
            ValueError: If the test type is unknown
        """
        try:
            test_type = TestType(test_type)
        except ValueError:
            raise ValueError(f"Unknown test type: {test_type}") from None

        inputs, validation = load_inputs(test_type, payload)
        if inputs is None:
            return CalculationOutcome(test_type, None, validation)

        outcome = CalculationOutcome(test_type, None, validation, inputs)
        self.handlers[test_type](outcome)

        if outcome.result is None:
            logger.info(f"{test_type.value} calculation produced no result")

        return outcome

    def _run_atterberg(self, outcome: CalculationOutcome):
        inputs = outcome.inputs
        outcome.result, engine_validation = self.atterberg.compute_limits(
            inputs['ll_samples'], inputs['pl_samples'])
        outcome.validation = outcome.validation.merge(engine_validation)

    def _run_cbr(self, outcome: CalculationOutcome):
        points = outcome.inputs['points']
        outcome.validation = outcome.validation.merge(validate_cbr_points(points))
        if not outcome.validation.is_valid:
            return
        outcome.result, corrected = self.cbr.calculate(points, outcome.inputs['params'])
        outcome.extras['corrected_points'] = corrected

    def _run_sieve(self, outcome: CalculationOutcome):
        inputs = outcome.inputs
        outcome.result = self.sieve.calculate(inputs['sieves'], inputs['params'])
        if outcome.result is not None and inputs['specification']:
            outcome.extras['specification_check'] = check_specification(
                outcome.result, get_specification(inputs['specification']))

    def _run_proctor(self, outcome: CalculationOutcome):
        inputs = outcome.inputs
        result = self.proctor.calculate(inputs['points'], inputs['params'])
        if result is not None and inputs['field_moisture'] is not None:
            required = inputs['required_compaction']
            if required is None:
                required = DEFAULT_REQUIRED_COMPACTION
            result = self.proctor.evaluate_field_compaction(result, inputs['field_moisture'], required)
        outcome.result = result

    def _run_gs_fine(self, outcome: CalculationOutcome):
        outcome.result = self.specific_gravity.calculate_fine_soil(outcome.inputs['data'])

    def _run_gs_coarse(self, outcome: CalculationOutcome):
        outcome.result = self.specific_gravity.calculate_coarse_soil(outcome.inputs['data'])

    def _run_sand_cone(self, outcome: CalculationOutcome):
        inputs = outcome.inputs
        outcome.result = self.sand_cone.calculate(
            inputs['calibration'], inputs['field'], inputs['proctor_mdd'])

    def _run_relative_density(self, outcome: CalculationOutcome):
        outcome.result = self.relative_density.calculate(outcome.inputs['data'])

    def _run_la_abrasion(self, outcome: CalculationOutcome):
        outcome.result = self.aggregate_quality.calculate_la_abrasion(outcome.inputs['data'])

    def _run_flakiness(self, outcome: CalculationOutcome):
        outcome.result = self.aggregate_quality.calculate_flakiness(outcome.inputs['data'])


# Global engine instance
soil_lab_engine = SoilLabEngine()
