from __future__ import annotations

import math

# Canonical text of printable values: what print()/println() actually write.
_NULL = "null"


def to_text(value: object) -> str:
    if value is None:
        return _NULL
    # bool is an int subclass, so it must be matched first.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_text(value)
    if is_char_array(value):
        return "".join(value)  # type: ignore[arg-type]
    return str(value)


def is_char_array(value: object) -> bool:
    # A character array is a list/tuple whose items are all single characters.
    if not isinstance(value, (list, tuple)):
        return False
    return all(isinstance(item, str) and len(item) == 1 for item in value)


def _float_text(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    # repr is the shortest string that round-trips to the same float.
    return repr(value)
