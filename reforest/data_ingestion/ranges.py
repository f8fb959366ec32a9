from __future__ import annotations

import math
import re
from typing import Any, NamedTuple

_DASHES = re.compile(r"[–—−]")
_CELSIUS = re.compile(r"°C", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_LEADING_FLOAT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_SCIENTIFIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)[eE][+-]?\d+$")


class ParsedRange(NamedTuple):
    min: float
    max: float
    valid: bool


INVALID_RANGE = ParsedRange(0.0, 0.0, False)


def parse_number(text: str) -> float | None:
    """Parse the leading number of ``text``, ignoring any trailing characters."""
    match = _LEADING_FLOAT.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def _normalize(raw_value: Any) -> str:
    cleaned = _CELSIUS.sub("", str(raw_value))
    cleaned = cleaned.replace("%", "")
    cleaned = _DASHES.sub("-", cleaned)
    return _WHITESPACE.sub("", cleaned)


def parse_range(raw_value: Any) -> ParsedRange:
    """
    Parse a tolerance cell such as ``"40-60%"``, ``"6.5–7.5"`` or ``"25°C"``.

    A single number yields a zero-width range. Range bounds may appear in
    either order. Missing, ``"N/A"`` and unparseable values yield an invalid
    range with both bounds at 0. Never raises.
    """
    if raw_value is None or isinstance(raw_value, bool):
        return INVALID_RANGE
    if isinstance(raw_value, (int, float)):
        if not math.isfinite(raw_value):
            return INVALID_RANGE
        value = float(raw_value)
        return ParsedRange(value, value, True)

    text = str(raw_value).strip()
    if not text or text.upper() == "N/A":
        return INVALID_RANGE

    cleaned = _normalize(text)

    # "1.5e-1" carries a hyphen but is a single value
    if _SCIENTIFIC.match(cleaned) or "-" not in cleaned:
        value = parse_number(cleaned)
        if value is None or not math.isfinite(value):
            return INVALID_RANGE
        return ParsedRange(value, value, True)

    parts = [p for p in cleaned.split("-") if p]
    if len(parts) != 2:
        return INVALID_RANGE

    low = parse_number(parts[0])
    high = parse_number(parts[1])
    if low is None or high is None or not (math.isfinite(low) and math.isfinite(high)):
        return INVALID_RANGE

    return ParsedRange(min(low, high), max(low, high), True)


def format_range(low: float, high: float, unit: str = "") -> str:
    """Render a range for display, e.g. ``"40.0-60.0%"``."""
    return f"{low:.1f}-{high:.1f}{unit}"
