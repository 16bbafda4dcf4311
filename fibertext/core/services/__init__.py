from __future__ import annotations

"""Editing services (intents, selections).

Services are stateless apart from their settings; the document and cursor they
operate on are always passed in explicitly.
"""

from .edit_service import EditService, IntentKind  # noqa: F401
from .selection_service import SelectionService  # noqa: F401

__all__: list[str] = [
    "EditService",
    "IntentKind",
    "SelectionService",
]
