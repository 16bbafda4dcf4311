from __future__ import annotations

"""Editor exception classes.

Core model objects (nodes and the document tree) raise these exceptions.
The service and session layers catch them and turn them into explicit
result objects, so nothing escapes to a rendering surface or input source.
"""

from typing import Optional


class EditorError(Exception):
    """Base exception for all editor errors."""

    def __init__(self, message: str, node_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.node_id = node_id

    def __str__(self) -> str:
        if self.node_id:
            return f"[Node: {self.node_id}] {super().__str__()}"
        return super().__str__()


class NodeNotFoundError(EditorError):
    """Raised when a node id cannot be resolved in the document tree."""
    pass


class DuplicateNodeError(EditorError):
    """Raised when attaching a node whose id is already present in the tree."""
    pass


class InvalidOffsetError(EditorError, ValueError):
    """Raised when a text offset falls outside ``[0, length]`` of its node.

    Offsets reported by an input source must be clamped or rejected before
    they reach a node mutation.
    """

    def __init__(self, message: str, node_id: Optional[str] = None,
                 offset: Optional[int] = None, length: Optional[int] = None) -> None:
        super().__init__(message, node_id)
        self.offset = offset
        self.length = length


class TreeInvariantError(EditorError):
    """Raised when the document tree is found in an inconsistent state.

    This signals a defect (tree corruption), never a normal control-flow path.
    """
    pass
