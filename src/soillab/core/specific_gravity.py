"""
Specific gravity of soil solids (ASTM D854) and relative density and
absorption of coarse aggregate (ASTM C127).
"""

import logging
from typing import Optional

from soillab.core.models import GsCoarseSoilData, GsFineSoilData, GsResult
from soillab.core.parsing import parse_float, parse_float_or
from soillab.utils.constants import REFERENCE_TEMPERATURE, TEMPERATURE_CORRECTION_RATE

logger = logging.getLogger(__name__)


def temperature_correction(temperature: float) -> float:
    """Linear water density correction factor to 20 deg C."""
    return 1.0 - (temperature - REFERENCE_TEMPERATURE) * TEMPERATURE_CORRECTION_RATE


class SpecificGravityEngine:
    """Pycnometer and basket specific gravity calculations."""

    def calculate_fine_soil(self, data: GsFineSoilData) -> Optional[GsResult]:
        """
        Specific gravity of fine soil by water pycnometer.

        Gs(T) = Wd / (Wd + Wa - Wb), where Wd is the dry soil mass, Wa the
        water filling the pycnometer and Wb the water filling it around the
        soil. The value is corrected to 20 deg C.

        Args:
            data: Pycnometer masses (g) and test temperature (deg C)

        Returns:
            GsResult, or None if a mass is missing or the displaced water
            mass is zero
        """
        mass_pycnometer = parse_float(data.mass_pycnometer)
        mass_pycnometer_dry_soil = parse_float(data.mass_pycnometer_dry_soil)
        mass_pycnometer_soil_water = parse_float(data.mass_pycnometer_soil_water)
        mass_pycnometer_water = parse_float(data.mass_pycnometer_water)
        temperature = parse_float_or(data.temperature, REFERENCE_TEMPERATURE)

        if None in (mass_pycnometer, mass_pycnometer_dry_soil,
                    mass_pycnometer_soil_water, mass_pycnometer_water):
            logger.debug("Pycnometer test is missing a mass reading")
            return None

        mass_dry_soil = mass_pycnometer_dry_soil - mass_pycnometer
        mass_a = mass_pycnometer_water - mass_pycnometer
        mass_b = mass_pycnometer_soil_water - mass_pycnometer_dry_soil
        denominator = mass_dry_soil + mass_a - mass_b

        if denominator == 0:
            logger.debug("Pycnometer masses give zero displaced water")
            return None

        gs_at_temperature = mass_dry_soil / denominator
        k = temperature_correction(temperature)

        return GsResult(
            specific_gravity=gs_at_temperature * k,
            specific_gravity_at_temperature=gs_at_temperature,
            temperature_correction=k
        )

    def calculate_coarse_soil(self, data: GsCoarseSoilData) -> Optional[GsResult]:
        """Bulk (oven-dry) and SSD specific gravity and absorption of coarse aggregate."""
        mass_dry = parse_float(data.mass_dry)
        mass_ssd = parse_float(data.mass_ssd)
        mass_submerged = parse_float(data.mass_submerged)

        if mass_dry is None or mass_ssd is None or mass_submerged is None:
            return None

        displaced = mass_ssd - mass_submerged
        if displaced == 0 or mass_dry == 0:
            logger.debug("Coarse aggregate masses give a zero denominator")
            return None

        return GsResult(
            specific_gravity=mass_dry / displaced,
            specific_gravity_ssd=mass_ssd / displaced,
            absorption=(mass_ssd - mass_dry) / mass_dry * 100.0
        )
