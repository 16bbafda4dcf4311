from __future__ import annotations

"""Editor session: one document tree, one cursor, one boundary API.

The session is the only object a host (input source, rendering surface) talks
to. It threads the current cursor through the editing services and replaces
it with the cursor each accepted operation returns. Nothing raises across
this boundary: every entry point returns a result object.

Sessions share no state. Each one owns its own tree, so any number of them can
coexist in a process.
"""

import logging
from typing import Any, Optional, Union

from fibertext.core.exceptions import EditorError, TreeInvariantError
from fibertext.core.models import (
    Cursor,
    DocumentTree,
    EditorSettings,
    EditResult,
    NodeView,
    OperationResult,
    SelectionResult,
    TextNode,
)
from fibertext.core.services import EditService, IntentKind, SelectionService

__all__ = ["EditorSession"]

logger = logging.getLogger(__name__)


class EditorSession:
    """Holds a :class:`DocumentTree` and the current :class:`Cursor`.

    Parameters
    ----------
    settings : EditorSettings, optional
        Behavioural settings. When omitted they are read from the ``editor``
        section of :class:`fibertext.config.ConfigManager`.
    """

    def __init__(self, settings: Optional[EditorSettings] = None) -> None:
        if settings is None:
            from fibertext.config import ConfigManager  # local import keeps models config-free

            settings = EditorSettings.from_config(ConfigManager().get_editor_config())
        self._settings = settings
        self._tree = DocumentTree(settings.root_id, settings.root_text)
        self._cursor = Cursor.collapsed_at(self._tree.root, 0)
        self._edit_service = EditService(settings)
        self._selection_service = SelectionService(settings.offset_unit)
        self._logger = logging.getLogger(f"{__name__}.EditorSession")
        self._logger.debug("EditorSession created root=%s unit=%s", settings.root_id, settings.offset_unit)

    @property
    def settings(self) -> EditorSettings:
        return self._settings

    @property
    def tree(self) -> DocumentTree:
        return self._tree

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    # -------------------------------------------------------------------------
    # Tree construction
    # -------------------------------------------------------------------------

    def attach_child(self, parent_id: str, node: TextNode) -> OperationResult:
        """Attach *node* as the last child of *parent_id*.

        ``details["order"]`` carries the order assigned to the node. With
        ``strict_invariants`` the tree is verified, without ancestor ordering,
        before anything is attached.
        """
        try:
            if self._settings.strict_invariants:
                self._tree.check_invariants(check_order=False)
            order = self._tree.attach_child_by_id(parent_id, node)
        except TreeInvariantError as exc:
            logger.error("Attach FAIL: invariant_violation parent=%s error=%s", parent_id, exc, exc_info=True)
            return OperationResult(False, "Document tree is inconsistent.", {"error": str(exc)})
        except EditorError as exc:
            logger.warning("Attach FAIL: parent=%s node=%s error=%s", parent_id, node.id, exc)
            return OperationResult(False, str(exc), {"parent_id": parent_id, "node_id": node.id})
        logger.debug("Attach OK: parent=%s node=%s order=%d", parent_id, node.id, order)
        return OperationResult(True, f"Attached '{node.id}'.", {"order": order, "node_id": node.id, "layer": node.layer})

    def add(self, parent_id: str, node_id: str, text: str = "") -> OperationResult:
        """Create a node with *node_id* and *text* and attach it under *parent_id*."""
        return self.attach_child(parent_id, TextNode(node_id, text))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def lookup(self, node_id: str) -> OperationResult:
        """Find a node by id; ``details["node"]`` holds it when found."""
        node = self._tree.find_by_id(node_id)
        if node is None:
            return OperationResult(False, f"Node not found for id '{node_id}'.", {"node_id": node_id})
        return OperationResult(True, "Node found.", {"node_id": node_id, "node": node})

    def get_tree(self) -> NodeView:
        """Return an immutable snapshot of the whole document."""
        return NodeView.from_node(self._tree.root)

    # -------------------------------------------------------------------------
    # Selection and intents
    # -------------------------------------------------------------------------

    def set_selection(
        self,
        anchor_id: str,
        anchor_offset: int,
        focus_id: str,
        focus_offset: int,
    ) -> SelectionResult:
        """Replace the cursor from an external selection report.

        On rejection the previous cursor stays in place.
        """
        result = self._selection_service.resolve(self._tree, anchor_id, anchor_offset, focus_id, focus_offset)
        if result.success and result.cursor is not None:
            self._cursor = result.cursor
        return result

    def apply_intent(
        self,
        kind: Union[IntentKind, str],
        payload: Any = None,
        cursor: Optional[Cursor] = None,
    ) -> EditResult:
        """Apply an edit intent against *cursor* (default: the session cursor).

        On success the returned cursor becomes the session cursor.
        """
        current = cursor if cursor is not None else self._cursor
        result = self._edit_service.apply_intent(self._tree, current, kind, payload)
        if result.success and result.cursor is not None:
            self._cursor = result.cursor
        self._logger.debug("Intent outcome: %s", EditService.describe_result(result))
        return result

    def insert_text(self, text: str) -> EditResult:
        return self.apply_intent(IntentKind.INSERT_TEXT, text)

    def delete_backward(self) -> EditResult:
        return self.apply_intent(IntentKind.DELETE_BACKWARD)
