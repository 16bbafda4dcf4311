from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no rendering or disk I/O; they
can be used across all layers of the editor.

Offsets handed to the editor by an input source are counted in *offset units*.
Browser-style hosts count UTF-16 code units, so ``"utf16"`` is the default;
``"codepoint"`` counts Python string indices directly.
"""

import logging
import uuid
from typing import Literal

__all__ = [
    "OffsetUnit",
    "generate_node_id",
    "unit_length",
    "unit_to_index",
    "index_to_unit",
    "clamp_offset",
]

logger = logging.getLogger(__name__)

OffsetUnit = Literal["utf16", "codepoint"]

_OFFSET_UNITS = ("utf16", "codepoint")


def generate_node_id() -> str:
    """Generate a globally unique id suitable for a text node."""
    return f"node-{uuid.uuid4()}"


def _check_unit(unit: str) -> None:
    if unit not in _OFFSET_UNITS:
        raise ValueError(f"Unsupported offset unit '{unit}' (expected one of {_OFFSET_UNITS})")


def _char_units(ch: str) -> int:
    # Astral characters take a surrogate pair in UTF-16
    return 2 if ord(ch) > 0xFFFF else 1


def unit_length(text: str, unit: OffsetUnit = "utf16") -> int:
    """Return the length of *text* measured in *unit*.

    >>> unit_length("abc")
    3
    >>> unit_length("a\\U0001F600")
    3
    >>> unit_length("a\\U0001F600", "codepoint")
    2
    """
    _check_unit(unit)
    if unit == "codepoint":
        return len(text)
    return sum(_char_units(ch) for ch in text)


def unit_to_index(text: str, offset: int, unit: OffsetUnit = "utf16") -> int:
    """Convert an *offset* in *unit* into a Python string index.

    The offset must already lie in ``[0, unit_length(text)]``. A UTF-16 offset
    pointing between the two halves of a surrogate pair snaps down to the
    start of that character.

    >>> unit_to_index("a\\U0001F600b", 3)
    2
    >>> unit_to_index("a\\U0001F600b", 2)
    1
    """
    _check_unit(unit)
    if unit == "codepoint":
        return offset
    units = 0
    for index, ch in enumerate(text):
        width = _char_units(ch)
        if units + width > offset:
            return index
        units += width
    return len(text)


def index_to_unit(text: str, index: int, unit: OffsetUnit = "utf16") -> int:
    """Convert a Python string *index* into an offset counted in *unit*."""
    return unit_length(text[:index], unit)


def clamp_offset(offset: int, length: int) -> int:
    """Clamp *offset* into ``[0, length]``."""
    if offset < 0:
        return 0
    if offset > length:
        return length
    return offset
