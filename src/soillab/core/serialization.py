"""
Payload loading and record serialization.

Plain JSON-compatible payloads (as stored by the persistence service) are
validated against per-test JSON schemas and converted into the engine's
input records. Result and input records are converted back into plain
dictionaries for storage.
"""

import dataclasses
import logging
import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

import jsonschema
import numpy as np

from soillab.core.models import (
    CBRDataPoint, CBRTestParameters, ClassificationParameters, FlakinessData,
    GsCoarseSoilData, GsFineSoilData, LAAbrasionData, LiquidLimitSample,
    PlasticLimitSample, ProctorDataPoint, ProctorTestParameters, ProctorTestType,
    RelativeDensityData, SampleType, SandConeCalibrationData, SandConeFieldData,
    Sieve, TestInfo, TestPurpose, TestType
)
from soillab.core.specifications import PREDEFINED_SPECIFICATIONS
from soillab.core.validators import FieldError, ValidationResult
from soillab.utils.constants import (
    ASTM_STANDARDS, CURRENT_SCHEMA_VERSION, SUPPORTED_SCHEMA_VERSIONS
)

logger = logging.getLogger(__name__)

FIELD_VALUE_SCHEMA = {"type": ["string", "number", "null"]}
NUMBER_SCHEMA = {"type": "number"}
NON_NEGATIVE_SCHEMA = {"type": "number", "minimum": 0}

ENUM_FIELDS: Dict[str, Type[Enum]] = {
    'test_purpose': TestPurpose,
    'sample_type': SampleType,
    'test_type': ProctorTestType,
}


def to_serializable(value: Any) -> Any:
    """
    Convert a record (or any nesting of records) to JSON-compatible values.

    Dataclasses become dicts, enums their values, tuples lists; numpy
    scalars become Python numbers and non-finite floats None.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_serializable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_serializable(v) for v in value]
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def export_bundle(test_type: TestType, inputs: Dict[str, Any], result: Any) -> Dict[str, Any]:
    """Package inputs and result with export metadata for the persistence service."""
    return {
        'inputs': to_serializable(inputs),
        'result': to_serializable(result),
        'export_metadata': {
            'export_date': datetime.now().isoformat(),
            'schema_version': CURRENT_SCHEMA_VERSION,
            'test_type': test_type.value,
            'standard': ASTM_STANDARDS.get(test_type.value, ""),
        },
    }


# --- Schemas ---

def _record_schema(cls, required: Tuple[str, ...] = (),
                   overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Object schema for a record class; fields default to string-or-number."""
    overrides = overrides or {}
    properties = {}
    for f in dataclasses.fields(cls):
        if f.name in overrides:
            properties[f.name] = overrides[f.name]
        elif f.name in ENUM_FIELDS:
            properties[f.name] = {"enum": [member.value for member in ENUM_FIELDS[f.name]]}
        elif f.name == 'test_info':
            properties[f.name] = TEST_INFO_SCHEMA
        else:
            properties[f.name] = FIELD_VALUE_SCHEMA
    return {
        "type": "object",
        "properties": properties,
        "required": list(required),
        "additionalProperties": False,
    }


def _array_of(item_schema: Dict[str, Any], min_items: int = 0) -> Dict[str, Any]:
    return {"type": "array", "items": item_schema, "minItems": min_items}


def _payload_schema(properties: Dict[str, Any], required: Tuple[str, ...]) -> Dict[str, Any]:
    properties = dict(properties, schema_version={"type": "string"})
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": properties,
        "required": list(required),
        "additionalProperties": False,
    }


TEST_INFO_SCHEMA = {
    "type": "object",
    "properties": {f.name: {"type": "string"} for f in dataclasses.fields(TestInfo)},
    "additionalProperties": False,
}

PAYLOAD_SCHEMAS: Dict[TestType, Dict[str, Any]] = {
    TestType.ATTERBERG: _payload_schema({
        'test_info': TEST_INFO_SCHEMA,
        'll_samples': _array_of(_record_schema(LiquidLimitSample, ('blows', 'water_content'))),
        'pl_samples': _array_of(_record_schema(PlasticLimitSample, ('water_content',))),
    }, ('ll_samples', 'pl_samples')),
    TestType.CBR: _payload_schema({
        'points': _array_of(_record_schema(
            CBRDataPoint, ('penetration', 'load'),
            {'penetration': NON_NEGATIVE_SCHEMA, 'load': NON_NEGATIVE_SCHEMA})),
        'params': _record_schema(CBRTestParameters),
    }, ('points',)),
    TestType.SIEVE: _payload_schema({
        'sieves': _array_of(_record_schema(
            Sieve, ('name', 'opening'),
            {'name': {"type": "string"}, 'opening': {"type": "number", "minimum": 0}}), 1),
        'params': _record_schema(ClassificationParameters),
        'specification': {"enum": list(PREDEFINED_SPECIFICATIONS)},
    }, ('sieves',)),
    TestType.PROCTOR: _payload_schema({
        'points': _array_of(_record_schema(
            ProctorDataPoint, ('moisture_content', 'wet_density'),
            {'moisture_content': NON_NEGATIVE_SCHEMA,
             'wet_density': {"type": "number", "exclusiveMinimum": 0},
             'dry_density': NUMBER_SCHEMA})),
        'params': _record_schema(ProctorTestParameters),
        'field_moisture': FIELD_VALUE_SCHEMA,
        'required_compaction': FIELD_VALUE_SCHEMA,
    }, ('points',)),
    TestType.GS_FINE: _payload_schema({
        'data': _record_schema(GsFineSoilData),
    }, ('data',)),
    TestType.GS_COARSE: _payload_schema({
        'data': _record_schema(GsCoarseSoilData),
    }, ('data',)),
    TestType.SAND_CONE: _payload_schema({
        'calibration': _record_schema(SandConeCalibrationData),
        'field': _record_schema(SandConeFieldData),
        'proctor_mdd': {"type": ["number", "null"]},
    }, ('calibration', 'field')),
    TestType.RELATIVE_DENSITY: _payload_schema({
        'data': _record_schema(RelativeDensityData),
    }, ('data',)),
    TestType.LA_ABRASION: _payload_schema({
        'data': _record_schema(LAAbrasionData),
    }, ('data',)),
    TestType.FLAKINESS: _payload_schema({
        'data': _record_schema(FlakinessData),
    }, ('data',)),
}


# --- Loading ---

def build_record(cls, data: Optional[Dict[str, Any]]):
    """Instantiate a record class from a schema-validated dict."""
    if data is None:
        return cls()
    values = {}
    for f in dataclasses.fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        if f.name in ENUM_FIELDS:
            value = ENUM_FIELDS[f.name](value)
        elif f.name == 'test_info':
            value = TestInfo(**value)
        values[f.name] = value
    return cls(**values)


def _build_inputs(test_type: TestType, payload: Dict[str, Any]) -> Dict[str, Any]:
    if test_type == TestType.ATTERBERG:
        return {
            'll_samples': tuple(build_record(LiquidLimitSample, s) for s in payload['ll_samples']),
            'pl_samples': tuple(build_record(PlasticLimitSample, s) for s in payload['pl_samples']),
        }
    if test_type == TestType.CBR:
        return {
            'points': tuple(build_record(CBRDataPoint, p) for p in payload['points']),
            'params': build_record(CBRTestParameters, payload.get('params')),
        }
    if test_type == TestType.SIEVE:
        return {
            'sieves': tuple(build_record(Sieve, s) for s in payload['sieves']),
            'params': build_record(ClassificationParameters, payload.get('params')),
            'specification': payload.get('specification'),
        }
    if test_type == TestType.PROCTOR:
        points = tuple(
            ProctorDataPoint.from_wet_density(p['moisture_content'], p['wet_density'])
            for p in payload['points']
        )
        return {
            'points': points,
            'params': build_record(ProctorTestParameters, payload.get('params')),
            'field_moisture': payload.get('field_moisture'),
            'required_compaction': payload.get('required_compaction'),
        }
    if test_type == TestType.SAND_CONE:
        return {
            'calibration': build_record(SandConeCalibrationData, payload['calibration']),
            'field': build_record(SandConeFieldData, payload['field']),
            'proctor_mdd': payload.get('proctor_mdd'),
        }

    data_classes = {
        TestType.GS_FINE: GsFineSoilData,
        TestType.GS_COARSE: GsCoarseSoilData,
        TestType.RELATIVE_DENSITY: RelativeDensityData,
        TestType.LA_ABRASION: LAAbrasionData,
        TestType.FLAKINESS: FlakinessData,
    }
    return {'data': build_record(data_classes[test_type], payload['data'])}


def validate_payload(test_type: TestType, payload: Any) -> ValidationResult:
    """
    Validate a payload against the schema of its test type.

    Every schema violation is reported as a SCHEMA_VIOLATION error whose
    field is the JSON path of the offending value.
    """
    validator = jsonschema.Draft7Validator(PAYLOAD_SCHEMAS[test_type])
    errors = [
        FieldError("SCHEMA_VIOLATION", error.message, error.json_path)
        for error in sorted(validator.iter_errors(payload), key=lambda e: e.json_path)
    ]

    if isinstance(payload, dict):
        version = payload.get('schema_version', CURRENT_SCHEMA_VERSION)
        if version not in SUPPORTED_SCHEMA_VERSIONS:
            errors.append(FieldError("UNSUPPORTED_VERSION",
                                     f"Unsupported payload version: {version}", "$.schema_version"))

    return ValidationResult.from_issues(errors)


def load_inputs(test_type: TestType, payload: Any
                ) -> Tuple[Optional[Dict[str, Any]], ValidationResult]:
    """
    Convert a payload into engine input records.

    Args:
        test_type: Test the payload belongs to
        payload: Plain dict as produced by the persistence service

    Returns:
        Tuple of (input records keyed by argument name, or None; validation outcome)
    """
    validation = validate_payload(test_type, payload)
    if not validation.is_valid:
        logger.warning(f"Rejected {test_type.value} payload: "
                       f"{len(validation.errors)} schema error(s), first at "
                       f"{validation.first_error.field}")
        return None, validation

    return _build_inputs(test_type, payload), validation
