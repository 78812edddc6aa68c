"""
Data models for laboratory soil and aggregate testing.

This module defines the immutable input and result records exchanged with
the calculation engines, together with the enumerated selectors and the
message codes that the engines emit for the display layer.

Input records hold raw field values (strings or numbers) exactly as
entered; the engines parse them once at their boundary. Result records are
either complete or absent (None), never partially populated.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple, Union

from soillab.utils.constants import (
    DEFAULT_ELONGATION_SPEC_LIMIT, DEFAULT_FLAKINESS_SPEC_LIMIT, DEFAULT_LA_SPEC_LIMIT,
    DEFAULT_REQUIRED_COMPACTION, DEFAULT_SPECIFIC_GRAVITY, STANDARD_AGGREGATE_SIEVES,
    STANDARD_SOIL_SIEVES
)

FieldValue = Union[str, float, int, None]
CurvePoint = Tuple[float, float]


# --- Selectors ---

class TestType(Enum):
    """Laboratory and field tests handled by the engine."""
    ATTERBERG = "atterberg"
    CBR = "cbr"
    SIEVE = "sieve"
    PROCTOR = "proctor"
    GS_FINE = "gs_fine"
    GS_COARSE = "gs_coarse"
    SAND_CONE = "sand_cone"
    RELATIVE_DENSITY = "relative_density"
    LA_ABRASION = "la_abrasion"
    FLAKINESS = "flakiness"


class TestPurpose(Enum):
    """Pavement layer a CBR specimen is tested for."""
    SUBGRADE = "subgrade"
    SUBBASE = "subbase"
    BASE_COURSE = "base_course"


class SampleType(Enum):
    """Material tested in a sieve analysis; selects the sieve stack."""
    SOIL = "soil"
    AGGREGATE = "aggregate"


class ProctorTestType(Enum):
    """Compaction effort."""
    STANDARD = "standard"
    MODIFIED = "modified"


class LimitMethod(Enum):
    """Liquid limit determination method (ASTM D4318)."""
    ONE_POINT = "one_point"
    MULTI_POINT = "multi_point"


# --- Message codes ---

class CBRMessage(str, Enum):
    SUCCESS = "cbr_calc_success"
    RETEST_WARNING = "cbr_calc_warning_5mm"


class StrengthRating(str, Enum):
    EXCELLENT = "excellent"
    VERY_GOOD = "very_good"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    VERY_POOR = "very_poor"


class CurveInterpretation(str, Enum):
    CORRECTED = "cbr_interp_corrected"
    STOPPED_EARLY = "cbr_interp_stopped_early"
    NORMAL = "cbr_interp_normal"


class CBRRecommendation(str, Enum):
    EXCELLENT = "cbr_rec_excellent"
    GOOD = "cbr_rec_good"
    FAIR = "cbr_rec_fair"
    POOR = "cbr_rec_poor"
    VERY_POOR = "cbr_rec_very_poor"


class FrostSusceptibility(str, Enum):
    NEGLIGIBLE = "negligible"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


class Commentary(str, Enum):
    WELL_GRADED = "commentary_well_graded"
    POORLY_GRADED = "commentary_poorly_graded"
    HIGH_PLASTICITY = "commentary_high_plasticity"
    SANDY_FINES = "commentary_sandy_fines"
    LOW_PLASTICITY = "commentary_low_plasticity"


class SubgradeRecommendation(str, Enum):
    EXCELLENT = "rec_subgrade_excellent"
    GOOD = "rec_subgrade_good"
    POOR = "rec_subgrade_poor"
    GENERAL = "rec_general"


class SpecificationStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    NO_DATA = "no_data"


# --- Shared ---

@dataclass(frozen=True)
class TestInfo:
    """Free-text test metadata, carried through unchanged."""
    borehole_no: str = ""
    sample_no: str = ""
    sample_description: str = ""
    test_date: str = field(default_factory=lambda: date.today().isoformat())
    tested_by: str = ""
    checked_by: str = ""


@dataclass(frozen=True)
class ValueRange:
    """Integer estimate band; (0, 0) marks a correlation that does not apply."""
    lower: int
    upper: int
    unit: str

    @property
    def is_applicable(self) -> bool:
        return not (self.lower == 0 and self.upper == 0)


# --- Atterberg limits ---

@dataclass(frozen=True)
class LiquidLimitSample:
    """Casagrande cup reading."""
    blows: FieldValue = ""
    water_content: FieldValue = ""


@dataclass(frozen=True)
class PlasticLimitSample:
    """Plastic limit thread reading."""
    water_content: FieldValue = ""


@dataclass(frozen=True)
class FlowCurvePoint:
    blows: float
    water_content: float


@dataclass(frozen=True)
class PlasticityClassification:
    """Fine-grained soil symbol from the plasticity chart."""
    symbol: str
    description_ref: str
    confidence: float


@dataclass(frozen=True)
class AtterbergResult:
    """Liquid limit, plastic limit and plasticity index of a soil."""
    liquid_limit: float
    plastic_limit: float
    plasticity_index: float
    method: LimitMethod
    points: Tuple[FlowCurvePoint, ...]
    classification: PlasticityClassification
    best_fit_line: Tuple[FlowCurvePoint, ...] = ()
    correlation_coefficient: Optional[float] = None
    is_non_plastic: bool = False
    warnings: tuple = ()


# --- CBR ---

@dataclass(frozen=True)
class CBRDataPoint:
    penetration: float  # mm
    load: float  # kN


@dataclass(frozen=True)
class CBRTestParameters:
    test_info: TestInfo = field(default_factory=TestInfo)
    moisture_content: FieldValue = ""
    dry_density: FieldValue = ""
    surcharge_weight: FieldValue = "2.27"
    soaking_time: FieldValue = "4"
    ref_load_25: FieldValue = "13.34"
    ref_load_50: FieldValue = "20.01"
    proving_ring_factor: FieldValue = ""
    test_purpose: TestPurpose = TestPurpose.SUBGRADE


@dataclass(frozen=True)
class CBRInsights:
    quality_rating: StrengthRating
    rating_color: str
    curve_interpretation: CurveInterpretation
    resilient_modulus: ValueRange
    shear_strength: ValueRange
    recommendation: CBRRecommendation


@dataclass(frozen=True)
class CBRCalculationResult:
    load_at_2_5: float
    load_at_5_0: float
    cbr_at_2_5: float
    cbr_at_5_0: float
    final_cbr: float
    is_corrected: bool
    message: CBRMessage
    insights: CBRInsights
    subgrade_modulus: float  # MN/m3


# --- Sieve analysis and classification ---

@dataclass(frozen=True)
class Sieve:
    """
    A sieve in the stack and the cumulative weight retained on it, as entered.

    Derived values live on SieveReading, produced by the reconciliation pass.
    """
    name: str
    opening: float  # mm
    retained_weight: FieldValue = ""

    @classmethod
    def standard_set(cls, sample_type: SampleType = SampleType.SOIL) -> Tuple['Sieve', ...]:
        """Empty sieve stack, coarse to fine, for the given material."""
        table = STANDARD_SOIL_SIEVES if sample_type == SampleType.SOIL else STANDARD_AGGREGATE_SIEVES
        return tuple(cls(name, opening) for name, opening in table)


@dataclass(frozen=True)
class SieveReading:
    name: str
    opening: float
    retained_weight: Optional[float]
    cumulative_retained: float
    percent_passing: float


@dataclass(frozen=True)
class ClassificationParameters:
    liquid_limit: FieldValue = ""
    plastic_limit: FieldValue = ""
    initial_weight: FieldValue = ""
    sample_type: SampleType = SampleType.SOIL


@dataclass(frozen=True)
class ClassificationInput:
    """Index properties consumed by the AASHTO and USCS classifiers."""
    liquid_limit: float = 0.0
    plasticity_index: float = 0.0
    percent_fines: float = 0.0
    percent_gravel: float = 0.0
    percent_sand: float = 0.0
    cu: Optional[float] = None
    cc: Optional[float] = None
    passing_no10: float = 100.0
    passing_no40: float = 100.0


@dataclass(frozen=True)
class AASHTOResult:
    group_name: str
    group_index: Optional[int]

    @property
    def group_index_label(self) -> str:
        return "N/A" if self.group_index is None else str(self.group_index)


@dataclass(frozen=True)
class USCSResult:
    group_name: str
    description_ref: str


@dataclass(frozen=True)
class SoilClassificationResult:
    aashto: AASHTOResult
    uscs: USCSResult
    commentary: Commentary
    recommendation: SubgradeRecommendation


@dataclass(frozen=True)
class FrostSusceptibilityResult:
    band: FrostSusceptibility
    color: str


@dataclass(frozen=True)
class PredictedProperties:
    predicted_mdd: Optional[float] = None  # g/cm3
    predicted_omc: Optional[float] = None  # percent
    predicted_cbr: Optional[float] = None  # percent


@dataclass(frozen=True)
class SieveAnalysisResult:
    sieves: Tuple[SieveReading, ...]
    percent_gravel: float
    percent_sand: float
    percent_fines: float
    d10: Optional[float]
    d30: Optional[float]
    d60: Optional[float]
    cu: Optional[float]
    cc: Optional[float]
    fineness_modulus: float
    material_loss_percentage: Optional[float] = None
    estimated_permeability: Optional[float] = None  # cm/s
    warnings: tuple = ()
    classification: Optional[SoilClassificationResult] = None
    frost_susceptibility: Optional[FrostSusceptibilityResult] = None
    predicted_properties: Optional[PredictedProperties] = None

    def passing_at(self, opening: float, tolerance: float = 0.001) -> Optional[float]:
        """Percent passing the sieve with the given opening, if present."""
        for reading in self.sieves:
            if abs(reading.opening - opening) < tolerance:
                return reading.percent_passing
        return None


# --- Gradation specifications ---

@dataclass(frozen=True)
class SpecificationLimit:
    sieve_opening: float
    min_passing: float
    max_passing: float


@dataclass(frozen=True)
class Specification:
    name: str
    limits: Tuple[SpecificationLimit, ...]
    is_custom: bool = False


@dataclass(frozen=True)
class SpecificationCheckItem:
    sieve_opening: float
    percent_passing: Optional[float]
    min_passing: float
    max_passing: float
    status: SpecificationStatus


@dataclass(frozen=True)
class SpecificationCheck:
    specification_name: str
    items: Tuple[SpecificationCheckItem, ...]

    @property
    def is_compliant(self) -> bool:
        return all(item.status == SpecificationStatus.PASS for item in self.items)


# --- Proctor compaction ---

@dataclass(frozen=True)
class ProctorDataPoint:
    moisture_content: float  # percent
    wet_density: float  # g/cm3
    dry_density: float  # g/cm3

    @classmethod
    def from_wet_density(cls, moisture_content: float, wet_density: float) -> 'ProctorDataPoint':
        """Build a point, deriving dry density once at entry."""
        return cls(moisture_content, wet_density, wet_density / (1 + moisture_content / 100.0))


@dataclass(frozen=True)
class ProctorTestParameters:
    test_info: TestInfo = field(default_factory=TestInfo)
    test_type: ProctorTestType = ProctorTestType.STANDARD
    mold_weight: FieldValue = ""
    mold_volume: FieldValue = ""
    specific_gravity: FieldValue = str(DEFAULT_SPECIFIC_GRAVITY)


@dataclass(frozen=True)
class ProctorResult:
    points: Tuple[ProctorDataPoint, ...]
    max_dry_density: float
    optimum_moisture_content: float
    fitted_curve: Tuple[CurvePoint, ...]
    zav_curve: Tuple[CurvePoint, ...]
    ninety_five_percent_mdd: float
    coefficients: Tuple[float, float, float]
    specific_gravity: float
    warnings: tuple = ()
    achievable_dry_density: Optional[float] = None
    compaction_band: Optional[Tuple[float, float]] = None


# --- Specific gravity ---

@dataclass(frozen=True)
class GsFineSoilData:
    pycnometer_number: str = ""
    mass_pycnometer: FieldValue = ""
    mass_pycnometer_dry_soil: FieldValue = ""
    mass_pycnometer_soil_water: FieldValue = ""
    mass_pycnometer_water: FieldValue = ""
    temperature: FieldValue = "20"


@dataclass(frozen=True)
class GsCoarseSoilData:
    mass_dry: FieldValue = ""
    mass_ssd: FieldValue = ""
    mass_submerged: FieldValue = ""


@dataclass(frozen=True)
class GsResult:
    specific_gravity: float
    specific_gravity_at_temperature: Optional[float] = None
    temperature_correction: Optional[float] = None
    specific_gravity_ssd: Optional[float] = None
    absorption: Optional[float] = None


# --- Field density ---

@dataclass(frozen=True)
class SandConeCalibrationData:
    sand_density: FieldValue = ""  # g/cm3
    cone_weight: FieldValue = ""  # g of sand filling the cone


@dataclass(frozen=True)
class SandConeFieldData:
    initial_weight: FieldValue = ""  # jar + cone + sand before
    final_weight: FieldValue = ""  # jar + cone + sand after
    wet_soil_weight: FieldValue = ""
    moisture_content: FieldValue = ""
    required_compaction: FieldValue = DEFAULT_REQUIRED_COMPACTION


@dataclass(frozen=True)
class SandConeResult:
    sand_in_hole_weight: float
    hole_volume: float
    wet_density: float
    dry_density: float
    proctor_mdd: Optional[float]
    compaction_percentage: Optional[float]
    required_compaction: float

    @property
    def passes(self) -> Optional[bool]:
        if self.compaction_percentage is None:
            return None
        return self.compaction_percentage >= self.required_compaction


@dataclass(frozen=True)
class RelativeDensityData:
    wet_soil_and_container: FieldValue = ""
    container_weight: FieldValue = ""
    dry_soil_weight: FieldValue = ""
    volume: FieldValue = ""
    max_density: FieldValue = ""
    min_density: FieldValue = ""
    required_density: FieldValue = ""


@dataclass(frozen=True)
class RelativeDensityResult:
    moisture_content: float
    dry_unit_weight: float
    relative_density: float
    required_density: float

    @property
    def meets_requirement(self) -> bool:
        return self.relative_density >= self.required_density


# --- Aggregate quality ---

@dataclass(frozen=True)
class LAAbrasionData:
    grading: str = "A"
    initial_weight: FieldValue = ""
    final_weight: FieldValue = ""
    spec_limit: FieldValue = DEFAULT_LA_SPEC_LIMIT


@dataclass(frozen=True)
class LAAbrasionResult:
    loss_weight: float
    percent_loss: float
    spec_limit: Optional[float] = None

    @property
    def passes(self) -> Optional[bool]:
        if self.spec_limit is None:
            return None
        return self.percent_loss <= self.spec_limit


@dataclass(frozen=True)
class FlakinessData:
    initial_weight: FieldValue = ""
    flaky_weight: FieldValue = ""
    elongated_weight: FieldValue = ""
    flakiness_spec_limit: FieldValue = DEFAULT_FLAKINESS_SPEC_LIMIT
    elongation_spec_limit: FieldValue = DEFAULT_ELONGATION_SPEC_LIMIT


@dataclass(frozen=True)
class FlakinessResult:
    flakiness_index: float
    elongation_index: float
    flakiness_spec_limit: Optional[float] = None
    elongation_spec_limit: Optional[float] = None

    @property
    def flakiness_passes(self) -> Optional[bool]:
        if self.flakiness_spec_limit is None:
            return None
        return self.flakiness_index <= self.flakiness_spec_limit

    @property
    def elongation_passes(self) -> Optional[bool]:
        if self.elongation_spec_limit is None:
            return None
        return self.elongation_index <= self.elongation_spec_limit
