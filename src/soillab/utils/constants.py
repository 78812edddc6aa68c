"""
Application constants and configuration values.
"""

# Application information
APP_NAME = "SoilLab Engine"
APP_VERSION = "0.1.0"
APP_ORGANIZATION = "Geotechnical Engineering"

# Logging settings
LOG_FILE_NAME = "soillab.log"
LOG_MAX_SIZE = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Calculation tolerances
FLOATING_POINT_TOLERANCE = 1e-10
PIVOT_TOLERANCE = 1e-9
SIEVE_OPENING_TOLERANCE = 0.001  # mm

# Atterberg limits (ASTM D4318)
LL_REFERENCE_BLOWS = 25
ONE_POINT_EXPONENT = 0.121
FLOW_CURVE_PLOT_BLOWS = (10, 40)
BLOWS_WARNING_RANGE = (10, 40)
LL_WATER_CONTENT_WARNING = 120.0
PL_WATER_CONTENT_WARNING = 60.0
A_LINE_SLOPE = 0.73
A_LINE_INTERCEPT_LL = 20.0

CONFIDENCE_BASE = 0.80
CONFIDENCE_POINTS_BONUS = 0.10
CONFIDENCE_FIT_BONUS = 0.05
CONFIDENCE_BLOWS_BONUS = 0.05
CONFIDENCE_RANGE = (0.10, 0.99)

# CBR (ASTM D1883)
CBR_PENETRATIONS = (2.5, 5.0)  # mm
DEFAULT_REF_LOAD_25 = 13.34  # kN, crushed stone at 2.5 mm
DEFAULT_REF_LOAD_50 = 20.01  # kN, crushed stone at 5.0 mm
CBR_MIN_CORRECTION_OFFSET = 0.001  # mm
CBR_CONCAVITY_TOLERANCE = 0.15
CBR_EARLY_STOP_PENETRATION = 7.5  # mm

# Rating thresholds, highest first
CBR_RATING_THRESHOLDS = (
    (80.0, 'excellent'),
    (30.0, 'very_good'),
    (20.0, 'good'),
    (8.0, 'fair'),
    (4.0, 'poor'),
)

# Empirical correlations, kept as plain factors
RESILIENT_MODULUS_PSI_FACTOR = 1500.0
PSI_PER_MPA = 145.0
RESILIENT_MODULUS_BAND = (0.8, 1.2)
SHEAR_STRENGTH_FACTOR = 20.0  # kPa per CBR %
SHEAR_STRENGTH_BAND = (0.75, 1.25)
SHEAR_STRENGTH_MAX_CBR = 15.0
SUBGRADE_MODULUS_FACTOR = 10.0  # MN/m3 per CBR %

# Sieve analysis (ASTM D6913 / C136)
NO4_OPENING = 4.75
NO10_OPENING = 2.00
NO40_OPENING = 0.425
NO200_OPENING = 0.075
FINENESS_MODULUS_SIEVES = (4.75, 2.36, 1.18, 0.6, 0.3, 0.15)
MATERIAL_LOSS_WARNING = 2.0  # percent
HAZEN_COEFFICIENT = 1.0
HAZEN_MIN_SAND = 50.0
HAZEN_MAX_FINES = 5.0
HAZEN_MAX_CU = 6.0

STANDARD_SOIL_SIEVES = (
    ('3"', 75.0), ('2"', 50.0), ('1.5"', 37.5), ('1"', 25.0),
    ('3/4"', 19.0), ('1/2"', 12.5), ('3/8"', 9.5),
    ('No. 4', 4.75), ('No. 10', 2.00), ('No. 20', 0.850),
    ('No. 40', 0.425), ('No. 60', 0.250), ('No. 100', 0.150),
    ('No. 200', 0.075), ('Pan', 0.0),
)

STANDARD_AGGREGATE_SIEVES = (
    ('3"', 75.0), ('2.5"', 63.0), ('2"', 50.0), ('1.5"', 37.5),
    ('1"', 25.0), ('3/4"', 19.0), ('1/2"', 12.5), ('3/8"', 9.5),
    ('No. 4', 4.75), ('No. 8', 2.36), ('No. 16', 1.18),
    ('No. 30', 0.600), ('No. 50', 0.300), ('No. 100', 0.150),
    ('No. 200', 0.075), ('Pan', 0.0),
)

# Frost susceptibility bands on percent fines
FROST_BANDS = (
    (3.0, 'negligible'),
    (10.0, 'low'),
    (20.0, 'medium'),
    (35.0, 'high'),
)

# Predictive correlations: (lower, upper) clamps
PREDICTED_OMC_FINE_RANGE = (8.0, 35.0)
PREDICTED_MDD_FINE_RANGE = (1.6, 2.1)
PREDICTED_OMC_COARSE_RANGE = (5.0, 20.0)
PREDICTED_MDD_COARSE_RANGE = (1.8, 2.3)
PREDICTED_CBR_RANGE = (1.0, 100.0)

# Proctor (ASTM D698 / D1557)
MIN_PROCTOR_POINTS = 3
PROCTOR_CURVE_SAMPLES = 101
PROCTOR_CURVE_MARGIN = 2.0  # percent moisture
DEFAULT_SPECIFIC_GRAVITY = 2.70
NINETY_FIVE_PERCENT = 0.95
WATER_DENSITY = 1.0  # g/cm3

# Specific gravity (ASTM D854 / C127)
REFERENCE_TEMPERATURE = 20.0  # deg C
TEMPERATURE_CORRECTION_RATE = 0.00025

# Field density and aggregate quality
DEFAULT_REQUIRED_COMPACTION = 95.0
DEFAULT_LA_SPEC_LIMIT = 40.0
DEFAULT_FLAKINESS_SPEC_LIMIT = 35.0
DEFAULT_ELONGATION_SPEC_LIMIT = 35.0

# Standard test methods
ASTM_STANDARDS = {
    'atterberg': 'ASTM D4318 - Liquid Limit, Plastic Limit, and Plasticity Index of Soils',
    'cbr': 'ASTM D1883 - California Bearing Ratio of Laboratory-Compacted Soils',
    'sieve': 'ASTM D6913 - Particle-Size Distribution of Soils Using Sieve Analysis',
    'proctor': 'ASTM D698 / D1557 - Laboratory Compaction Characteristics of Soil',
    'gs_fine': 'ASTM D854 - Specific Gravity of Soil Solids by Water Pycnometer',
    'gs_coarse': 'ASTM C127 - Relative Density and Absorption of Coarse Aggregate',
    'sand_cone': 'ASTM D1556 - Density and Unit Weight of Soil in Place by Sand-Cone Method',
    'relative_density': 'ASTM D4253 / D4254 - Relative Density of Cohesionless Soils',
    'la_abrasion': 'ASTM C131 - Resistance to Degradation by Abrasion in the Los Angeles Machine',
    'flakiness': 'BS 812-105 - Flakiness and Elongation Indices',
}

CLASSIFICATION_STANDARDS = {
    'aashto': 'AASHTO M145',
    'uscs': 'ASTM D2487',
}

# Payload format versions
CURRENT_SCHEMA_VERSION = "1.0.0"
SUPPORTED_SCHEMA_VERSIONS = ["1.0.0"]
