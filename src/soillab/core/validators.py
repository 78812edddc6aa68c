"""
Validation of laboratory readings before they enter a calculation.

Validation problems are reported as structured values (code, message,
field) rather than exceptions; a result with errors means the calculation
must not run. Warnings are advisory and never block a calculation.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from soillab.core.parsing import parse_float, parse_int
from soillab.utils.constants import (
    BLOWS_WARNING_RANGE, LL_WATER_CONTENT_WARNING, PL_WATER_CONTENT_WARNING
)

logger = logging.getLogger(__name__)


class SeverityLevel(Enum):
    """Severity of an advisory warning."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class FieldError:
    """A validation error that blocks calculation."""
    code: str
    message: str
    field: str


@dataclass(frozen=True)
class ValidationWarning:
    """An advisory warning attached to otherwise acceptable input."""
    code: str
    message: str
    severity: SeverityLevel
    field: Optional[str] = None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one or more input records."""
    is_valid: bool = True
    warnings: Tuple[ValidationWarning, ...] = field(default_factory=tuple)
    errors: Tuple[FieldError, ...] = field(default_factory=tuple)

    @classmethod
    def from_issues(cls, errors: Iterable[FieldError],
                    warnings: Iterable[ValidationWarning] = ()) -> 'ValidationResult':
        errors = tuple(errors)
        return cls(is_valid=not errors, warnings=tuple(warnings), errors=errors)

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        """Combine two results; invalid if either is invalid."""
        return ValidationResult.from_issues(self.errors + other.errors,
                                            self.warnings + other.warnings)

    @property
    def first_error(self) -> Optional[FieldError]:
        return self.errors[0] if self.errors else None


class SampleValidator:
    """Validation rules for laboratory sample records."""

    def validate_liquid_limit_sample(self, blows: Any, water_content: Any) -> ValidationResult:
        """
        Validate a liquid limit (Casagrande cup) reading.

        Args:
            blows: Number of blows to close the groove
            water_content: Water content in percent

        Returns:
            ValidationResult with INVALID_BLOWS / INVALID_WC errors and
            LOW_BLOWS / HIGH_BLOWS / HIGH_WC warnings
        """
        errors: List[FieldError] = []
        warnings: List[ValidationWarning] = []

        blow_count = parse_int(blows)
        if blow_count is None or blow_count <= 0:
            errors.append(FieldError("INVALID_BLOWS", "Blows must be a positive integer.", "blows"))
        else:
            low, high = BLOWS_WARNING_RANGE
            if blow_count < low:
                warnings.append(ValidationWarning(
                    "LOW_BLOWS", "Blows count is very low.", SeverityLevel.MEDIUM, "blows"))
            if blow_count > high:
                warnings.append(ValidationWarning(
                    "HIGH_BLOWS", "Blows count is very high.", SeverityLevel.MEDIUM, "blows"))

        wc = parse_float(water_content)
        if wc is None or wc <= 0:
            errors.append(FieldError("INVALID_WC", "Water content must be a positive number.",
                                     "water_content"))
        elif wc > LL_WATER_CONTENT_WARNING:
            warnings.append(ValidationWarning(
                "HIGH_WC", "Water content is unusually high.", SeverityLevel.HIGH, "water_content"))

        return ValidationResult.from_issues(errors, warnings)

    def validate_plastic_limit_sample(self, water_content: Any) -> ValidationResult:
        """Validate a plastic limit thread water content."""
        errors: List[FieldError] = []
        warnings: List[ValidationWarning] = []

        wc = parse_float(water_content)
        if wc is None or wc <= 0:
            errors.append(FieldError("INVALID_WC", "Water content must be a positive number.",
                                     "water_content"))
        elif wc > PL_WATER_CONTENT_WARNING:
            warnings.append(ValidationWarning(
                "HIGH_PL_WC", "PL water content seems high.", SeverityLevel.LOW, "water_content"))

        return ValidationResult.from_issues(errors, warnings)

    def validate_cbr_point(self, penetration: Any, load: Any) -> ValidationResult:
        """Validate a CBR load-penetration reading."""
        errors = []
        pen = parse_float(penetration)
        if pen is None or pen < 0:
            errors.append(FieldError("INVALID_PENETRATION",
                                     "Penetration must be zero or a positive number.", "penetration"))
        value = parse_float(load)
        if value is None or value < 0:
            errors.append(FieldError("INVALID_LOAD", "Load must be zero or a positive number.", "load"))
        return ValidationResult.from_issues(errors)

    def validate_sieve_weight(self, retained_weight: Any) -> ValidationResult:
        """Validate a cumulative retained weight; blank is allowed."""
        if retained_weight is None or str(retained_weight).strip() == "":
            return ValidationResult()
        weight = parse_float(retained_weight)
        if weight is None or weight < 0:
            return ValidationResult.from_issues([FieldError(
                "INVALID_WEIGHT", "Retained weight must be zero or a positive number.",
                "retained_weight")])
        return ValidationResult()

    def validate_proctor_point(self, moisture_content: Any, wet_soil_and_mold: Any,
                               mold_weight: Any, mold_volume: Any) -> ValidationResult:
        """Validate the readings that define one compaction point."""
        errors = []
        moisture = parse_float(moisture_content)
        if moisture is None or moisture < 0:
            errors.append(FieldError("INVALID_MOISTURE",
                                     "Moisture content must be zero or a positive number.",
                                     "moisture_content"))
        wet = parse_float(wet_soil_and_mold)
        mold = parse_float(mold_weight)
        if wet is None:
            errors.append(FieldError("INVALID_WET_WEIGHT", "Wet soil and mold weight must be a number.",
                                     "wet_soil_and_mold"))
        if mold is None:
            errors.append(FieldError("INVALID_MOLD_WEIGHT", "Mold weight must be a number.",
                                     "mold_weight"))
        if wet is not None and mold is not None and wet <= mold:
            errors.append(FieldError("INVALID_WET_WEIGHT",
                                     "Wet soil and mold weight must exceed the mold weight.",
                                     "wet_soil_and_mold"))
        volume = parse_float(mold_volume)
        if volume is None or volume <= 0:
            errors.append(FieldError("INVALID_MOLD_VOLUME", "Mold volume must be a positive number.",
                                     "mold_volume"))
        return ValidationResult.from_issues(errors)


def validate_atterberg_samples(ll_samples, pl_samples) -> ValidationResult:
    """
    Validate complete liquid and plastic limit sample lists.

    Error fields are prefixed with the sample position, e.g. "ll[2].blows".
    """
    validator = SampleValidator()
    errors: List[FieldError] = []
    warnings: List[ValidationWarning] = []

    for index, sample in enumerate(ll_samples):
        result = validator.validate_liquid_limit_sample(sample.blows, sample.water_content)
        errors.extend(FieldError(e.code, e.message, f"ll[{index}].{e.field}") for e in result.errors)
        warnings.extend(result.warnings)

    for index, sample in enumerate(pl_samples):
        result = validator.validate_plastic_limit_sample(sample.water_content)
        errors.extend(FieldError(e.code, e.message, f"pl[{index}].{e.field}") for e in result.errors)
        warnings.extend(result.warnings)

    if errors:
        logger.debug(f"Atterberg samples rejected with {len(errors)} error(s)")

    return ValidationResult.from_issues(errors, warnings)


def validate_cbr_points(points) -> ValidationResult:
    """Validate load-penetration readings; error fields look like "points[1].load"."""
    validator = SampleValidator()
    errors: List[FieldError] = []

    for index, point in enumerate(points):
        result = validator.validate_cbr_point(point.penetration, point.load)
        errors.extend(FieldError(e.code, e.message, f"points[{index}].{e.field}") for e in result.errors)

    return ValidationResult.from_issues(errors)
