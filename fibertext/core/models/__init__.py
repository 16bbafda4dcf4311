from __future__ import annotations

"""Shared data structures used across the fibertext core.

This package exposes the document tree, its nodes, the cursor value type and
the result objects returned by services. It is free of rendering and I/O code
so that the contained objects can be reused in any context (unit tests, CLI,
GUI hosts, etc.).
"""

from .text_node import TextNode, ancestors, compare_position, is_ancestor
from .document_tree import DocumentTree
from .cursor import Cursor, Direction
from .results import EditResult, OperationResult, SelectionResult
from .settings import EditorSettings
from .tree_view import NodeView

__all__ = [
    "TextNode",
    "DocumentTree",
    "Cursor",
    "Direction",
    "OperationResult",
    "EditResult",
    "SelectionResult",
    "EditorSettings",
    "NodeView",
    "ancestors",
    "compare_position",
    "is_ancestor",
]
