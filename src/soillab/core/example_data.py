"""
Example data generators for every test type.

Each generator draws a realistic data set from a soil profile. Generators
take the random source explicitly so that examples are reproducible:

    rng = random.Random(42)
    example = generate_cbr_example(rng)
"""

import logging
import random
from dataclasses import dataclass
from typing import Tuple

from soillab.core.models import (
    CBRDataPoint, ClassificationParameters, FlakinessData, GsCoarseSoilData,
    GsFineSoilData, LAAbrasionData, LiquidLimitSample, PlasticLimitSample,
    ProctorDataPoint, ProctorTestParameters, ProctorTestType, RelativeDensityData,
    SampleType, SandConeCalibrationData, SandConeFieldData, Sieve
)

logger = logging.getLogger(__name__)


def _fmt(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}"


# --- Atterberg ---

@dataclass(frozen=True)
class ExampleAtterbergData:
    description_ref: str
    ll_samples: Tuple[LiquidLimitSample, ...]
    pl_samples: Tuple[PlasticLimitSample, ...]


# (description, LL range, PI range)
ATTERBERG_PROFILES = (
    ('example_desc_cl', (30, 50), (10, 22)),
    ('example_desc_ch', (55, 90), (30, 55)),
    ('example_desc_ml', (25, 45), (4, 10)),
)


def generate_atterberg_example(rng: random.Random) -> ExampleAtterbergData:
    description, ll_range, pi_range = rng.choice(ATTERBERG_PROFILES)
    target_ll = float(rng.randrange(*ll_range))
    target_pi = float(rng.randrange(*pi_range))
    target_pl = target_ll - target_pi

    blows = [15, 20, 28, 35]
    rng.shuffle(blows)
    ll_samples = tuple(
        LiquidLimitSample(str(n), _fmt(target_ll + (25 - n) * 0.4 + rng.uniform(-1, 1)))
        for n in blows[:3]
    )
    pl_samples = tuple(
        PlasticLimitSample(_fmt(target_pl + rng.uniform(-1, 1))) for _ in range(2)
    )
    return ExampleAtterbergData(description, ll_samples, pl_samples)


# --- CBR ---

@dataclass(frozen=True)
class ExampleCBRData:
    description_ref: str
    points: Tuple[CBRDataPoint, ...]


# (description, load range at 5.0 mm in kN, (penetration, load factor) shape)
CBR_PROFILES = (
    ('example_desc_cbr_good_subbase', (4.0, 16.0), (
        (0.0, 0.0), (0.5, 0.094), (1.0, 0.219), (1.5, 0.352), (2.0, 0.516),
        (2.5, 0.664), (3.0, 0.797), (4.0, 0.906), (5.0, 1.0), (7.5, 1.082),
        (10.0, 1.117), (12.5, 1.125))),
    ('example_desc_cbr_soft_clay', (0.5, 2.0), (
        (0.0, 0.0), (0.5, 0.3), (1.0, 0.5), (1.5, 0.65), (2.0, 0.78),
        (2.5, 0.88), (3.0, 0.92), (4.0, 0.96), (5.0, 1.0), (7.5, 1.04),
        (10.0, 1.06), (12.5, 1.08))),
    ('example_desc_cbr_correction', (2.0, 8.0), (
        (0.0, 0.0), (0.5, 0.1), (1.0, 0.2), (1.5, 0.45), (2.0, 0.7),
        (2.5, 0.85), (3.0, 0.9), (4.0, 0.95), (5.0, 1.0), (7.5, 1.05),
        (10.0, 1.08), (12.5, 1.1))),
)


def generate_cbr_example(rng: random.Random) -> ExampleCBRData:
    description, strength_range, shape = rng.choice(CBR_PROFILES)
    base_load = rng.uniform(*strength_range)

    points = []
    for penetration, factor in shape:
        ideal = base_load * factor
        load = max(0.0, ideal + ideal * rng.uniform(-0.04, 0.04))
        points.append(CBRDataPoint(penetration, load))
    return ExampleCBRData(description, tuple(points))


# --- Sieve analysis ---

@dataclass(frozen=True)
class ExampleSieveData:
    description_ref: str
    sieves: Tuple[Sieve, ...]
    params: ClassificationParameters


# (description, sample type, {opening: target percent passing}, LL, PL)
SIEVE_PROFILES = (
    ('example_desc_sieve_sw', SampleType.SOIL,
     {75.0: 100, 50.0: 100, 37.5: 100, 25.0: 100, 19.0: 98, 12.5: 95, 9.5: 92,
      4.75: 85, 2.00: 70, 0.850: 50, 0.425: 32, 0.250: 18, 0.150: 8, 0.075: 3},
     "", ""),
    ('example_desc_sieve_sc', SampleType.SOIL,
     {75.0: 100, 50.0: 100, 37.5: 100, 25.0: 100, 19.0: 100, 12.5: 98, 9.5: 96,
      4.75: 90, 2.00: 80, 0.850: 68, 0.425: 55, 0.250: 44, 0.150: 34, 0.075: 25},
     "32", "18"),
    ('example_desc_sieve_base', SampleType.AGGREGATE,
     {75.0: 100, 63.0: 100, 50.0: 100, 37.5: 85, 25.0: 70, 19.0: 62, 12.5: 52,
      9.5: 47, 4.75: 40, 2.36: 31, 1.18: 24, 0.600: 18, 0.300: 13, 0.150: 10,
      0.075: 8},
     "", ""),
)


def generate_sieve_example(rng: random.Random) -> ExampleSieveData:
    description, sample_type, targets, ll, pl = rng.choice(SIEVE_PROFILES)
    initial_weight = rng.uniform(1900.0, 2100.0)

    sieves = []
    cumulative = 0.0
    for sieve in Sieve.standard_set(sample_type):
        if sieve.opening <= 0:
            retained = initial_weight * rng.uniform(0.995, 1.0)
        else:
            passing = targets[sieve.opening] + rng.uniform(-1.0, 1.0)
            retained = initial_weight * (100.0 - min(max(passing, 0.0), 100.0)) / 100.0
        cumulative = max(cumulative, retained)
        sieves.append(Sieve(sieve.name, sieve.opening, _fmt(cumulative)))

    params = ClassificationParameters(
        liquid_limit=ll,
        plastic_limit=pl,
        initial_weight=_fmt(initial_weight),
        sample_type=sample_type
    )
    return ExampleSieveData(description, tuple(sieves), params)


# --- Proctor ---

@dataclass(frozen=True)
class ExampleProctorData:
    description_ref: str
    parameters: ProctorTestParameters
    points: Tuple[ProctorDataPoint, ...]


# (description, OMC %, MDD g/cm3, Gs)
PROCTOR_PROFILES = (
    ('example_desc_proctor_sc', 10.5, 2.12, "2.68"),
    ('example_desc_proctor_cl', 16.0, 1.85, "2.72"),
    ('example_desc_proctor_gw', 7.5, 2.25, "2.65"),
)


def generate_proctor_example(rng: random.Random) -> ExampleProctorData:
    description, omc, mdd, gs = rng.choice(PROCTOR_PROFILES)
    params = ProctorTestParameters(
        test_type=rng.choice([ProctorTestType.STANDARD, ProctorTestType.MODIFIED]),
        mold_weight=_fmt(4250.0 + rng.uniform(-5.0, 5.0)),
        mold_volume="944",
        specific_gravity=gs
    )

    points = []
    for offset in (-4.0, -2.0, 0.0, 2.0, 4.0):
        moisture = round(omc + offset + rng.uniform(-0.5, 0.5), 1)
        steepness = 0.005 + rng.uniform(-0.0005, 0.0005)
        dry_density = mdd - steepness * (moisture - omc) ** 2 + rng.uniform(-0.01, 0.01)
        wet_density = dry_density * (1 + moisture / 100.0)
        points.append(ProctorDataPoint(moisture, round(wet_density, 2), round(dry_density, 3)))

    points.sort(key=lambda p: p.moisture_content)
    return ExampleProctorData(description, params, tuple(points))


# --- Specific gravity ---

@dataclass(frozen=True)
class ExampleGsFineData:
    description_ref: str
    data: GsFineSoilData


@dataclass(frozen=True)
class ExampleGsCoarseData:
    description_ref: str
    data: GsCoarseSoilData


def generate_gs_fine_example(rng: random.Random) -> ExampleGsFineData:
    mass_pycnometer = rng.uniform(140.0, 150.0)
    mass_dry_soil = rng.uniform(50.0, 60.0)
    gs = rng.uniform(2.65, 2.75)
    mass_water = rng.uniform(350.0, 360.0)

    mass_pycnometer_dry_soil = mass_pycnometer + mass_dry_soil
    # Water around the soil: Wb = Wa - Wd / Gs
    mass_pycnometer_soil_water = (mass_pycnometer_dry_soil + mass_water - mass_dry_soil / gs
                                  + rng.uniform(-0.1, 0.1))

    return ExampleGsFineData('example_desc_gs_fine', GsFineSoilData(
        pycnometer_number=str(rng.randint(1, 19)),
        mass_pycnometer=_fmt(mass_pycnometer, 2),
        mass_pycnometer_dry_soil=_fmt(mass_pycnometer_dry_soil, 2),
        mass_pycnometer_soil_water=_fmt(mass_pycnometer_soil_water, 2),
        mass_pycnometer_water=_fmt(mass_pycnometer + mass_water, 2),
        temperature="20.0"
    ))


def generate_gs_coarse_example(rng: random.Random) -> ExampleGsCoarseData:
    mass_dry = rng.uniform(2000.0, 3000.0)
    absorption = rng.uniform(0.5, 2.0) / 100.0
    gs = rng.uniform(2.60, 2.70)

    mass_ssd = mass_dry * (1 + absorption)
    mass_submerged = mass_ssd - mass_dry / gs + rng.uniform(-0.5, 0.5)

    return ExampleGsCoarseData('example_desc_gs_coarse', GsCoarseSoilData(
        mass_dry=_fmt(mass_dry),
        mass_ssd=_fmt(mass_ssd),
        mass_submerged=_fmt(mass_submerged)
    ))


# --- Field density ---

@dataclass(frozen=True)
class ExampleSandConeData:
    description_ref: str
    calibration: SandConeCalibrationData
    field_data: SandConeFieldData
    proctor_mdd: float = 2.10


def generate_sand_cone_example(rng: random.Random) -> ExampleSandConeData:
    sand_density = 1.45
    calibration = SandConeCalibrationData(
        sand_density=_fmt(sand_density, 2),
        cone_weight=_fmt(1500.0 + rng.uniform(-50.0, 50.0))
    )

    mdd, omc, target_compaction = 2.10, 10.0, 97.0
    dry_density = mdd * target_compaction / 100.0 + rng.uniform(-0.01, 0.01)
    moisture = omc + rng.uniform(-1.0, 1.0)
    wet_density = dry_density * (1 + moisture / 100.0)

    hole_volume = 2000.0 + rng.uniform(-100.0, 100.0)
    sand_used = hole_volume * sand_density + float(calibration.cone_weight)
    initial_weight = 7000.0

    field_data = SandConeFieldData(
        initial_weight=_fmt(initial_weight),
        final_weight=_fmt(initial_weight - sand_used),
        wet_soil_weight=_fmt(wet_density * hole_volume),
        moisture_content=_fmt(moisture),
        required_compaction="95.0"
    )
    return ExampleSandConeData('example_desc_sand_cone', calibration, field_data, mdd)


@dataclass(frozen=True)
class ExampleRelativeDensityData:
    description_ref: str
    data: RelativeDensityData


def generate_relative_density_example(rng: random.Random) -> ExampleRelativeDensityData:
    gamma_min = rng.uniform(1.40, 1.50)
    gamma_max = gamma_min + rng.uniform(0.25, 0.35)
    target_dr = rng.uniform(55.0, 85.0)
    dry_unit_weight = gamma_min + target_dr / 100.0 * (gamma_max - gamma_min)

    volume = 944.0
    dry_soil = dry_unit_weight * volume
    moisture = rng.uniform(3.0, 8.0)
    container = rng.uniform(150.0, 250.0)

    return ExampleRelativeDensityData('example_desc_relative_density', RelativeDensityData(
        wet_soil_and_container=_fmt(container + dry_soil * (1 + moisture / 100.0), 2),
        container_weight=_fmt(container, 2),
        dry_soil_weight=_fmt(dry_soil, 2),
        volume=_fmt(volume),
        max_density=_fmt(gamma_max, 3),
        min_density=_fmt(gamma_min, 3),
        required_density="70"
    ))


# --- Aggregate quality ---

def generate_la_abrasion_example(rng: random.Random) -> LAAbrasionData:
    initial = 5000.0 + rng.uniform(-10.0, 10.0)
    loss = rng.uniform(1000.0, 1500.0)
    return LAAbrasionData(
        grading=rng.choice(["A", "B", "C", "D"]),
        initial_weight=_fmt(initial),
        final_weight=_fmt(initial - loss),
        spec_limit="40"
    )


def generate_flakiness_example(rng: random.Random) -> FlakinessData:
    return FlakinessData(
        initial_weight=_fmt(2000.0 + rng.uniform(-10.0, 10.0)),
        flaky_weight=_fmt(rng.uniform(200.0, 400.0)),
        elongated_weight=_fmt(rng.uniform(300.0, 500.0)),
        flakiness_spec_limit="35",
        elongation_spec_limit="35"
    )
