"""
Tests for specific gravity calculations.
"""

import pytest
from soillab.core.models import GsCoarseSoilData, GsFineSoilData
from soillab.core.specific_gravity import SpecificGravityEngine, temperature_correction


def pycnometer_data(gs, temperature="20", mass_pycnometer=100.0, mass_dry_soil=50.0, mass_water=500.0):
    """Pycnometer masses consistent with a given specific gravity."""
    mass_with_soil = mass_pycnometer + mass_dry_soil
    return GsFineSoilData(
        pycnometer_number="7",
        mass_pycnometer=str(mass_pycnometer),
        mass_pycnometer_dry_soil=str(mass_with_soil),
        mass_pycnometer_soil_water=str(mass_with_soil + mass_water - mass_dry_soil / gs),
        mass_pycnometer_water=str(mass_pycnometer + mass_water),
        temperature=temperature
    )


class TestFineSoil:
    """Test the water pycnometer method."""

    @pytest.fixture
    def engine(self):
        return SpecificGravityEngine()

    def test_recovers_specific_gravity(self, engine):
        result = engine.calculate_fine_soil(pycnometer_data(2.65))

        assert result.specific_gravity == pytest.approx(2.65, abs=1e-9)
        assert result.specific_gravity_at_temperature == pytest.approx(2.65, abs=1e-9)
        assert result.temperature_correction == 1.0

    def test_temperature_correction_applied(self, engine):
        result = engine.calculate_fine_soil(pycnometer_data(2.65, temperature="25"))

        assert result.temperature_correction == pytest.approx(0.99875)
        assert result.specific_gravity == pytest.approx(2.65 * 0.99875, abs=1e-9)

    def test_blank_temperature_means_reference(self, engine):
        result = engine.calculate_fine_soil(pycnometer_data(2.70, temperature=""))

        assert result.temperature_correction == 1.0

    def test_missing_mass(self, engine):
        data = GsFineSoilData(mass_pycnometer="100", mass_pycnometer_dry_soil="150",
                              mass_pycnometer_soil_water="", mass_pycnometer_water="600")

        assert engine.calculate_fine_soil(data) is None

    def test_zero_displaced_water(self, engine):
        data = GsFineSoilData(mass_pycnometer="100", mass_pycnometer_dry_soil="150",
                              mass_pycnometer_soil_water="700", mass_pycnometer_water="600")

        assert engine.calculate_fine_soil(data) is None

    def test_correction_factor(self):
        assert temperature_correction(20.0) == 1.0
        assert temperature_correction(16.0) == pytest.approx(1.001)


class TestCoarseAggregate:
    """Test the basket method for coarse aggregate."""

    @pytest.fixture
    def engine(self):
        return SpecificGravityEngine()

    def test_bulk_ssd_and_absorption(self, engine):
        data = GsCoarseSoilData(mass_dry="2000", mass_ssd="2030", mass_submerged="1270")

        result = engine.calculate_coarse_soil(data)

        assert result.specific_gravity == pytest.approx(2000 / 760)
        assert result.specific_gravity_ssd == pytest.approx(2030 / 760)
        assert result.absorption == pytest.approx(1.5)
        assert result.temperature_correction is None

    def test_zero_denominator(self, engine):
        data = GsCoarseSoilData(mass_dry="2000", mass_ssd="1500", mass_submerged="1500")

        assert engine.calculate_coarse_soil(data) is None

    def test_missing_mass(self, engine):
        assert engine.calculate_coarse_soil(GsCoarseSoilData(mass_dry="2000")) is None


if __name__ == "__main__":
    pytest.main([__file__])
