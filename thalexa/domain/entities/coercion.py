"""
Helpers for reading loosely typed snapshot values.
"""

from typing import Any

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off", ""}


def as_bool(value: Any, default: bool = False) -> bool:
    """
    Read a stored flag.

    None means missing and yields the default. Strings such as "false"
    read as their meaning, not their truthiness.

    Raises:
        TypeError: If the value cannot be read as a flag
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
    raise TypeError(f"not a flag: {value!r}")
