"""Text coercion for per-field persistence.

PartitionedStore writes each field as plain text and reads it back through
a coercer: a function from the stored text to a value. Callers may pass an
explicit schema of coercers; otherwise one is inferred from the type of the
field's current value.

The decoders mirror loose scripting-language conversions rather than strict
parsing:

- as_number: blank text is 0, unparseable text is NaN. "0x10" is 16 and
  "1_0" is NaN.
- as_bool: any non-empty text is True, so "false" decodes to True.
"""

from __future__ import annotations

import math
from typing import Callable

Coercer = Callable[[str], object]

SCALAR_TYPES = (str, int, float, bool, type(None))


def as_number(text: str) -> int | float:
    stripped = text.strip()
    if not stripped:
        return 0
    # No digit separators; unsigned 0x/0o/0b literals only.
    if "_" in stripped:
        return math.nan
    if stripped[:2].lower() in ("0x", "0o", "0b"):
        try:
            return int(stripped, 0)
        except ValueError:
            return math.nan
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        return float(stripped)
    except ValueError:
        return math.nan


def as_bool(text: str) -> bool:
    return text != ""


def as_text(text: str) -> str:
    return text


def infer_coercer(value: object) -> Coercer:
    """Pick a coercer from a value's runtime type."""
    # bool first: it is a subclass of int.
    if isinstance(value, bool):
        return as_bool
    if isinstance(value, (int, float)):
        return as_number
    return as_text


def to_text(value: object) -> str:
    """Plain-text form of a scalar, as written to a storage slot."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
