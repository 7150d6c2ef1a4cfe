"""
Numeric helpers for user-entered values.

Quantities and costs in the estimator come from free-text form fields and from
divisions over geometry that may be zero. These helpers keep NaN and infinity
out of every surfaced number:

- parse_double: text -> finite float, or None when blank/unparseable
- safe_number: non-finite -> 0.0
- debug_check_nan: same as safe_number, but logs the offending label
- safe_divide: division that returns 0.0 instead of raising or overflowing
"""

import logging
import math
from typing import Optional

logger = logging.getLogger(__name__)


def parse_double(text: Optional[str]) -> Optional[float]:
    """
    Parse a float from user-entered text.

    Surrounding whitespace is ignored and a comma is accepted as the decimal
    separator ("2,5" -> 2.5). Returns None for empty or unparseable input and
    for values that are not finite. Digit group underscores ("1_000") are not
    accepted.
    """
    if text is None:
        return None
    trimmed = text.strip()
    if not trimmed:
        return None

    if "_" in trimmed:
        return None

    normalized = trimmed.replace(",", ".")
    try:
        value = float(normalized)
    except ValueError:
        return None

    return value if math.isfinite(value) else None


# Older form code calls this name
safe_double = parse_double


def safe_number(value: Optional[float]) -> Optional[float]:
    """Return 0.0 for NaN/infinity, pass None through unchanged."""
    if value is None:
        return None
    return float(value) if math.isfinite(value) else 0.0


def debug_check_nan(value: float, label: str) -> float:
    """Sanitize a value, logging a warning when it had to be coerced."""
    if not math.isfinite(value):
        logger.warning(f"Invalid numeric value for {label}: {value}")
        return 0.0
    return float(value)


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 for a zero/NaN denominator or a non-finite result."""
    if denominator == 0 or math.isnan(denominator):
        return 0.0
    return safe_number(numerator / denominator)


def ceil_tolerant(value: float) -> float:
    """
    Round up, ignoring binary floating point noise.

    10 * 1.1 evaluates to 11.000000000000002 and must ceil to 11, not 12.
    Non-finite input gives 0.0.
    """
    if not math.isfinite(value):
        return 0.0
    return float(math.ceil(round(value, 9)))


def ceil_to_hundredths(value: float) -> float:
    """Round up to the nearest 0.01."""
    return ceil_tolerant(value * 100) / 100.0


def ceil_to_half(value: float) -> float:
    """Round up to the nearest 0.5 (paint is sold by the half gallon)."""
    return ceil_tolerant(value * 2) / 2.0
