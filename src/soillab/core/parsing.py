"""
Tolerant numeric parsing for laboratory input fields.

Laboratory readings arrive as free text. Blank, malformed or non-finite
entries are treated as missing (None); parsing never raises.
"""

import math
from typing import Any, Optional


def parse_float(value: Any) -> Optional[float]:
    """
    Convert a field value to float.

    Args:
        value: String, number or None

    Returns:
        Parsed finite float, or None if the value is missing or malformed
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None

    if not math.isfinite(number):
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    """Convert a field value to int; "25" and 25.0 parse, "25.5" does not."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None

    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_float_or(value: Any, default: float) -> float:
    """Parse a field value, falling back to default when missing."""
    number = parse_float(value)
    return default if number is None else number
