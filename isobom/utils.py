from __future__ import annotations

import math
import re

# Plain decimal / scientific notation only. Rejects "inf", "nan", "1_000", hex.
_PLAIN_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_plain_number(text: str) -> int | float | None:
    """Return the numeric value of ``text`` if it is a plain number, else None.

    Integral values come back as ``int`` so that "12" and "12.0" both give 12.
    """
    if not _PLAIN_NUMBER.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def parse_leading_int(text: str) -> int | None:
    """Parse the integer prefix of ``text`` ("2 pcs" -> 2), or None."""
    match = _LEADING_INT.match(text)
    if match is None:
        return None
    return int(match.group(1))


def as_int(value: object, default: int = 1) -> int:
    """Coerce anything to an int, falling back to ``default``."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    text = "" if value is None else str(value).strip()
    number = parse_plain_number(text)
    if number is not None:
        return int(number)
    prefix = parse_leading_int(text)
    return default if prefix is None else prefix
