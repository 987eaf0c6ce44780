"""Coercion of raw condition values into typed comparison values.

coerce_value() is total: malformed input degrades to a zero-ish default
instead of raising, so one bad custom rule cannot halt a generation pass.
A malformed number therefore becomes 0 and makes "bigger" true for any
positive field value.
"""

from __future__ import annotations

import logging
import math
import re

from cleanarr.core.datetime_utils import MIN_DATE, parse_iso_timestamp
from cleanarr.rules.types import FieldValue, ValueType

logger = logging.getLogger(__name__)

# Plain decimal literals only: no digit separators, nan or inf
_INT_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def _to_int(raw: str) -> int:
    text = raw.strip()
    if not _INT_PATTERN.fullmatch(text):
        logger.debug("Invalid day count %r, using 0", raw)
        return 0
    return int(text)


def _to_float(raw: str) -> float:
    text = raw.strip()
    value = float(text) if _FLOAT_PATTERN.fullmatch(text) else math.nan
    if not math.isfinite(value):
        logger.debug("Invalid number %r, using 0.0", raw)
        return 0.0
    return value


def _to_date(raw: str):
    try:
        return parse_iso_timestamp(raw)
    except (ValueError, OverflowError):
        logger.debug("Invalid date %r, using minimum date", raw)
        return MIN_DATE


def _to_bool(raw: str) -> bool:
    return raw.strip().casefold() == "true"


_COERCERS = {
    ValueType.CUSTOM_DAYS: _to_int,
    ValueType.CUSTOM_NUMBER: _to_float,
    ValueType.CUSTOM_DATE: _to_date,
    ValueType.CUSTOM_TEXT: lambda raw: raw,
    ValueType.BOOLEAN: _to_bool,
    ValueType.NULL: lambda raw: None,
}


def coerce_value(raw: str, value_type: str | None) -> FieldValue:
    """Convert a raw condition value according to its declared type.

    Args:
        raw: The value string exactly as configured.
        value_type: Symbolic value type name (e.g. "customDays").

    Returns:
        customDays -> int (0 on failure), customNumber -> float (0.0),
        customDate -> UTC datetime (MIN_DATE), customText -> raw,
        boolean -> bool (False), null -> None. Unknown types return raw.
    """
    kind = ValueType.lookup(value_type)
    if kind is None:
        return raw
    return _COERCERS[kind](raw)
