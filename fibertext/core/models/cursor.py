from __future__ import annotations

"""Cursor / selection value type.

A :class:`Cursor` has no identity of its own: every selection change or edit
produces a fresh instance. The direction is derived from the two endpoints
each time it is asked for.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from fibertext.core.models.text_node import TextNode, compare_position

__all__ = ["Cursor", "Direction"]


class Direction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True)
class Cursor:
    """Anchor/focus selection over a document tree.

    Attributes
    ----------
    anchor_node, anchor_offset
        Selection start, fixed when the gesture began.
    focus_node, focus_offset
        Selection end, following the pointer or typing.
    """
    anchor_node: TextNode
    anchor_offset: int
    focus_node: TextNode
    focus_offset: int

    @classmethod
    def collapsed_at(cls, node: TextNode, offset: int) -> Cursor:
        return cls(node, offset, node, offset)

    @property
    def is_collapsed(self) -> bool:
        return self.anchor_node is self.focus_node and self.anchor_offset == self.focus_offset

    @property
    def direction(self) -> Direction:
        """Forward when the anchor precedes the focus in document order."""
        if self.anchor_node is self.focus_node:
            if self.anchor_offset <= self.focus_offset:
                return Direction.FORWARD
            return Direction.BACKWARD
        if compare_position(self.anchor_node, self.focus_node) < 0:
            return Direction.FORWARD
        return Direction.BACKWARD

    def normalized(self) -> Tuple[TextNode, int, TextNode, int]:
        """Return ``(start_node, start_offset, end_node, end_offset)`` in document order."""
        if self.direction is Direction.FORWARD:
            return self.anchor_node, self.anchor_offset, self.focus_node, self.focus_offset
        return self.focus_node, self.focus_offset, self.anchor_node, self.anchor_offset

    def describe(self) -> Dict[str, Any]:
        """Plain mapping of ids and offsets, for logs and result details."""
        return {
            "anchor": self.anchor_node.id,
            "anchor_offset": self.anchor_offset,
            "focus": self.focus_node.id,
            "focus_offset": self.focus_offset,
            "direction": self.direction.value,
        }
