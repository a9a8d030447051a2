"""Safe cell coercion for feed values.

This module converts raw CSV cells into integers, decimals, and dates.
Malformed, blank, or out-of-range cells degrade to a default instead of raising.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.constants import FEED_DATE_FORMATS

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
_DECIMAL_ZERO = Decimal(0)


def coerce_int(
    text: str | None,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Parse a base-10 integer cell.

    Args:
        text: Raw cell text.
        minimum: Smallest value the target column holds, if bounded.
        maximum: Largest value the target column holds, if bounded.

    Returns:
        Parsed integer, or 0 for blank, malformed, or out-of-range input.
    """
    value = _clean(text)
    if not value or not _INTEGER_PATTERN.match(value):
        return 0
    try:
        parsed = int(value)
    except ValueError:
        # Digit strings beyond the interpreter's int conversion limit.
        return 0
    if minimum is not None and parsed < minimum:
        return 0
    if maximum is not None and parsed > maximum:
        return 0
    return parsed


def coerce_decimal(text: str | None, numeric: tuple[int, int] | None = None) -> Decimal:
    """Parse a decimal cell.

    Args:
        text: Raw cell text such as ``4.33`` or ``N/A``.
        numeric: Optional ``(precision, scale)`` of the target column.

    Returns:
        Finite decimal value, or 0 for blank, malformed, non-finite, or
        out-of-range input.
    """
    value = _clean(text)
    if not value or "_" in value:
        return _DECIMAL_ZERO
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        return _DECIMAL_ZERO
    if not parsed.is_finite():
        return _DECIMAL_ZERO
    if numeric is not None and not _fits_numeric(parsed, *numeric):
        return _DECIMAL_ZERO
    return parsed


def coerce_date(text: str | None) -> date | None:
    """Parse a calendar date cell.

    Accepts ``YYYY-MM-DD`` plus the ``MM/DD/YY`` and ``MM/DD/YYYY`` forms
    that appear in catalog exports. Two-digit years follow ``strptime`` and
    land in 1969-2068, so ``01/28/13`` reads as 2013.

    Args:
        text: Raw cell text.

    Returns:
        Parsed date, or None for blank or malformed input.
    """
    value = _clean(text)
    if not value:
        return None
    for date_format in FEED_DATE_FORMATS:
        try:
            return datetime.strptime(value, date_format).date()
        except ValueError:
            continue
    return None


def _fits_numeric(value: Decimal, precision: int, scale: int) -> bool:
    """Check that a value survives storage in ``NUMERIC(precision, scale)``.

    The server rounds half away from zero to ``scale`` digits first, so
    ``99.995`` overflows ``NUMERIC(4, 2)``.
    """
    integer_digits = precision - scale
    if value.is_zero():
        return True
    if value.adjusted() >= integer_digits:
        return False
    rounded = value.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP)
    return abs(rounded) < Decimal(10) ** integer_digits


def _clean(text: str | None) -> str:
    if text is None:
        return ""
    return text.strip()
