"""Top-level package for the fibertext document engine.

This package hosts a GUI-agnostic text document tree with cursor handling and
edit algorithms. Hosts (a browser bridge, a Tk widget, a terminal UI) should
only depend on the public API exposed here rather than importing internal
modules directly.
"""

from .core.models import Cursor, DocumentTree, TextNode
from .core.services import IntentKind
from .core.session import EditorSession

__all__: list[str] = [
    "Cursor",
    "DocumentTree",
    "EditorSession",
    "IntentKind",
    "TextNode",
]
