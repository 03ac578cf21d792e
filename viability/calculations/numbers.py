"""
Numeric Input Normalization

Coerces raw field values (form strings, stored numbers, missing values)
into finite floats before they reach the calculators.
"""

import math
import re
from typing import Optional, Union

NumericInput = Optional[Union[int, float, str]]

# Leading float literal, as a browser's parseFloat reads it: trailing
# garbage is ignored, "Infinity" parses but is rejected as non-finite.
# Digits are ASCII only; leading whitespace may be any Unicode space.
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))"
)


def parse_number(value: NumericInput) -> float:
    """
    Parse a number or a locale-formatted string into a finite float.

    The first comma is read as a decimal separator, so "100,50" and "100.50"
    both give 100.5. There is no thousands-separator handling.

    Args:
        value: Number, string, or None

    Returns:
        The parsed value, or 0.0 when the input is missing, unparseable or
        not finite
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    if value is None or value == "":
        return 0.0

    match = _FLOAT_PREFIX.match(str(value).replace(",", ".", 1))
    if not match:
        return 0.0

    try:
        number = float(match.group(1).replace("Infinity", "inf"))
    except (ValueError, OverflowError):
        return 0.0

    return number if math.isfinite(number) else 0.0


def parse_optional_number(value: NumericInput) -> Optional[float]:
    """Like parse_number, but an empty field stays empty (None)."""
    if value is None or value == "":
        return None
    return parse_number(value)
