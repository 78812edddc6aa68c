"""
Field density tests: sand cone (ASTM D1556) and relative density of
cohesionless soils (ASTM D4253 / D4254).
"""

import logging
from typing import Optional

from soillab.core.models import (
    RelativeDensityData, RelativeDensityResult, SandConeCalibrationData,
    SandConeFieldData, SandConeResult
)
from soillab.core.parsing import parse_float, parse_float_or
from soillab.utils.constants import DEFAULT_REQUIRED_COMPACTION

logger = logging.getLogger(__name__)


class SandConeEngine:
    """In-place density by the sand cone method."""

    def calculate(self, calibration: SandConeCalibrationData, field: SandConeFieldData,
                  proctor_mdd: Optional[float] = None) -> Optional[SandConeResult]:
        """
        Calculate in-place density and relative compaction.

        Args:
            calibration: Sand bulk density (g/cm3) and sand filling the cone (g)
            field: Jar weights before and after, excavated wet soil weight,
                moisture content and required compaction
            proctor_mdd: Laboratory maximum dry density (g/cm3), if known

        Returns:
            SandConeResult, or None if a reading is missing or the sand
            density or hole volume is not positive
        """
        sand_density = parse_float(calibration.sand_density)
        cone_weight = parse_float(calibration.cone_weight)
        initial_weight = parse_float(field.initial_weight)
        final_weight = parse_float(field.final_weight)
        wet_soil_weight = parse_float(field.wet_soil_weight)
        moisture_content = parse_float(field.moisture_content)
        required = parse_float_or(field.required_compaction, DEFAULT_REQUIRED_COMPACTION)

        if None in (sand_density, cone_weight, initial_weight, final_weight,
                    wet_soil_weight, moisture_content):
            logger.debug("Sand cone test is missing a reading")
            return None
        if sand_density <= 0:
            logger.debug(f"Sand density must be positive, got {sand_density}")
            return None

        sand_in_hole = (initial_weight - final_weight) - cone_weight
        hole_volume = sand_in_hole / sand_density
        if hole_volume <= 0:
            logger.debug(f"Hole volume must be positive, got {hole_volume:.2f} cm3")
            return None

        moisture_factor = 1 + moisture_content / 100.0
        if moisture_factor <= 0:
            logger.debug(f"Moisture content must exceed -100%, got {moisture_content}")
            return None

        wet_density = wet_soil_weight / hole_volume
        dry_density = wet_density / moisture_factor

        compaction = None
        if proctor_mdd:
            compaction = dry_density / proctor_mdd * 100.0

        return SandConeResult(
            sand_in_hole_weight=sand_in_hole,
            hole_volume=hole_volume,
            wet_density=wet_density,
            dry_density=dry_density,
            proctor_mdd=proctor_mdd,
            compaction_percentage=compaction,
            required_compaction=required
        )


class RelativeDensityEngine:
    """Relative density from field dry unit weight and laboratory limits."""

    def calculate(self, data: RelativeDensityData) -> Optional[RelativeDensityResult]:
        """
        Dr = (gamma_d - gamma_min) / (gamma_max - gamma_min) * 100.

        All readings must be present and positive, and the maximum and
        minimum densities must differ.
        """
        values = [parse_float(v) for v in (
            data.wet_soil_and_container, data.container_weight, data.dry_soil_weight,
            data.volume, data.max_density, data.min_density, data.required_density)]

        if any(v is None or v <= 0 for v in values):
            logger.debug("Relative density test needs positive values for every reading")
            return None

        wet_and_container, container, dry_soil, volume, gamma_max, gamma_min, required = values
        if gamma_max == gamma_min:
            logger.debug("Maximum and minimum densities coincide")
            return None

        wet_soil = wet_and_container - container
        moisture = (wet_soil - dry_soil) / dry_soil * 100.0
        dry_unit_weight = dry_soil / volume
        relative_density = (dry_unit_weight - gamma_min) / (gamma_max - gamma_min) * 100.0

        if relative_density < required:
            logger.info(f"Relative density {relative_density:.1f}% is below the required {required}%")

        return RelativeDensityResult(
            moisture_content=moisture,
            dry_unit_weight=dry_unit_weight,
            relative_density=relative_density,
            required_density=required
        )
