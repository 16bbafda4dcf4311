from __future__ import annotations

"""Service layer applying edit intents to a document tree.

This module provides a UI-agnostic, testable service that turns edit intents
(insert text, delete backward) plus the current cursor into tree mutations
and a new cursor.

Scope and guarantees:
- Operates purely in-memory on a DocumentTree, no rendering and no I/O.
- Every check that can fail (node membership, offsets, common-ancestor
  resolution) runs before the first mutation, so a rejected intent leaves the
  tree untouched.
- Expected invalid requests return EditResult(success=False, ...) and never
  raise. Tree corruption is logged at ERROR level with a traceback.

Examples
--------
Basic usage:

    service = EditService()
    result = service.apply_intent(tree, cursor, "insert-text", "x")
    if result.success:
        cursor = result.cursor
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from fibertext.core.exceptions import EditorError, InvalidOffsetError, NodeNotFoundError, TreeInvariantError
from fibertext.core.models import Cursor, DocumentTree, EditorSettings, EditResult, TextNode
from fibertext.core.utils import index_to_unit, unit_to_index

__all__ = ["IntentKind", "EditService"]

logger = logging.getLogger(__name__)


class IntentKind(str, Enum):
    INSERT_TEXT = "insert-text"
    DELETE_BACKWARD = "delete-backward"


class EditService:
    """Encapsulates edit intents on a document tree.

    Design principles:
    - No rendering dependencies and no disk I/O.
    - No exceptions for expected invalid actions; return EditResult.
    - Order values are never renumbered; merges only move existing nodes.

    Notes
    -----
    Insert on a non-collapsed selection deletes the range first and inserts
    at the resulting collapsed point. Backspace at offset 0 merges the node
    into the node preceding it in document order (see
    :meth:`merge_with_previous`).
    """

    def __init__(self, settings: Optional[EditorSettings] = None) -> None:
        self._settings = settings or EditorSettings()
        self._unit = self._settings.offset_unit

    @property
    def settings(self) -> EditorSettings:
        return self._settings

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def apply_intent(
        self,
        tree: DocumentTree,
        cursor: Cursor,
        kind: Union[IntentKind, str],
        payload: Any = None,
    ) -> EditResult:
        """Apply one edit intent atomically and return the outcome.

        Parameters
        ----------
        tree : DocumentTree
            The document to mutate.
        cursor : Cursor
            The current cursor; it is not modified.
        kind : IntentKind or str
            ``"insert-text"`` or ``"delete-backward"``.
        payload : Any
            The literal text for ``insert-text``; ignored otherwise.
        """
        try:
            intent = IntentKind(kind)
        except ValueError:
            logger.warning("Edit FAIL: unsupported_intent kind=%s", kind)
            return EditResult(False, f"Unsupported intent '{kind}'.", {"allowed": [k.value for k in IntentKind]})

        logger.info("Edit: %s focus=%s offset=%s", intent.value, getattr(cursor.focus_node, "id", None), cursor.focus_offset)
        try:
            self._validate_cursor(tree, cursor)
            if intent is IntentKind.INSERT_TEXT:
                result = self.insert_text(tree, cursor, payload)
            else:
                result = self.delete_backward(tree, cursor)
            if result.success and not result.noop and self._settings.strict_invariants:
                tree.check_invariants(check_order=False)
        except TreeInvariantError as exc:
            logger.error("Edit FAIL: %s invariant_violation error=%s", intent.value, exc, exc_info=True)
            return EditResult(False, "Document tree is inconsistent.", {"error": str(exc), "reason": "invariant_violation"})
        except (NodeNotFoundError, InvalidOffsetError) as exc:
            logger.warning("Edit FAIL: %s rejected error=%s", intent.value, exc)
            return EditResult(False, str(exc), {"error": str(exc), "node_id": exc.node_id})
        except EditorError as exc:
            logger.error("Edit FAIL: %s error=%s", intent.value, exc, exc_info=True)
            return EditResult(False, f"{intent.value} failed.", {"error": str(exc)})

        if not result.success:
            logger.warning("Edit FAIL: %s %s", intent.value, result.message)
        elif result.noop:
            logger.info("Edit noop: %s %s", intent.value, result.message)
        else:
            logger.info(
                "Edit OK: %s changed=%s removed=%s",
                intent.value, ",".join(result.changed_node_ids), ",".join(result.removed_node_ids),
            )
        return result

    def insert_text(self, tree: DocumentTree, cursor: Cursor, text: Any) -> EditResult:
        """Insert *text* at the cursor, replacing any selected range first."""
        if not isinstance(text, str):
            return EditResult(False, "Insert payload must be a string.", {"payload_type": type(text).__name__})
        if not text:
            return EditResult(True, "Nothing to insert.", cursor.describe(), noop=True, cursor=cursor)

        changed: List[str] = []
        removed: Tuple[str, ...] = ()
        if not cursor.is_collapsed:
            deletion = self.delete_range(tree, cursor)
            if not deletion.success or deletion.cursor is None:
                return deletion
            cursor = deletion.cursor
            changed.extend(deletion.changed_node_ids)
            removed = deletion.removed_node_ids

        node = cursor.focus_node
        new_offset = node.insert_text(cursor.focus_offset, text, self._unit)
        if node.id not in changed:
            changed.append(node.id)
        new_cursor = Cursor.collapsed_at(node, new_offset)
        return EditResult(
            True,
            "Inserted text.",
            {"node_id": node.id, "inserted": len(text)},
            cursor=new_cursor,
            changed_node_ids=tuple(changed),
            removed_node_ids=removed,
        )

    def delete_backward(self, tree: DocumentTree, cursor: Cursor) -> EditResult:
        """Backspace: delete the selection, the previous character, or merge."""
        if not cursor.is_collapsed:
            return self.delete_range(tree, cursor)

        node = cursor.focus_node
        if cursor.focus_offset > 0:
            new_offset = node.delete_range(cursor.focus_offset, cursor.focus_offset, self._unit)
            return EditResult(
                True,
                "Deleted character.",
                {"node_id": node.id},
                cursor=Cursor.collapsed_at(node, new_offset),
                changed_node_ids=(node.id,),
            )
        return self.merge_with_previous(tree, cursor)

    def delete_range(self, tree: DocumentTree, cursor: Cursor) -> EditResult:
        """Delete the selected range and merge its boundary nodes.

        The earlier endpoint in document order survives: it keeps its text up
        to the start offset followed by the later endpoint's text after the
        end offset, and inherits the later endpoint's children together with
        every out-of-range child of removed ancestors. All other nodes in the
        range are removed. The cursor collapses onto the start point whichever
        way the selection ran.
        """
        start, start_offset, end, end_offset = cursor.normalized()
        if cursor.is_collapsed:
            return EditResult(True, "Empty selection.", cursor.describe(), noop=True, cursor=cursor)

        if start is end:
            new_offset = start.delete_range(start_offset, end_offset, self._unit)
            return EditResult(
                True,
                "Deleted range.",
                {"node_id": start.id, "nodes_in_range": 1},
                cursor=Cursor.collapsed_at(start, new_offset),
                changed_node_ids=(start.id,),
            )

        # Resolve everything before mutating
        nodes_in_range = tree.nodes_between(start, end)
        if not nodes_in_range or nodes_in_range[0] is not start or nodes_in_range[-1] is not end:
            raise TreeInvariantError(f"Range '{start.id}'..'{end.id}' resolved inconsistently", node_id=start.id)
        doomed = {id(n) for n in nodes_in_range[1:]}
        inherited = self._collect_inherited(end, doomed)
        head_index = unit_to_index(start.text, start_offset, self._unit)
        tail_index = unit_to_index(end.text, end_offset, self._unit)
        insert_at = next(
            (i for i, child in enumerate(start.children) if id(child) not in doomed),
            len(start.children),
        )

        start.text = start.text[:head_index] + end.text[tail_index:]
        for i, node in enumerate(inherited):
            tree.reparent(node, start, insert_at + i)

        removed: List[str] = []
        for node in nodes_in_range[1:]:
            parent = node.parent
            if parent is not None and id(parent) in doomed:
                continue
            removed.extend(tree.detach(node))

        new_cursor = Cursor.collapsed_at(start, index_to_unit(start.text, head_index, self._unit))
        return EditResult(
            True,
            "Deleted range.",
            {
                "node_id": start.id,
                "nodes_in_range": len(nodes_in_range),
                "inherited": [n.id for n in inherited],
            },
            cursor=new_cursor,
            changed_node_ids=(start.id,),
            removed_node_ids=tuple(removed),
        )

    def merge_with_previous(self, tree: DocumentTree, cursor: Cursor) -> EditResult:
        """Merge the cursor's node into the node before it in document order.

        The previous node is the parent for a first child, otherwise the
        deepest last descendant of the previous sibling. The node's text is
        appended to it and the node's children move so that document order is
        preserved: into the node's own slot when the previous node is its
        parent, after the previous node's (empty) child list otherwise.
        Nothing happens at the first content node, when the previous node is
        the root, or when merging is disabled in the settings.
        """
        node = cursor.focus_node
        if self._settings.backspace_at_node_start == "ignore":
            return EditResult(True, "Merge on backspace disabled.", cursor.describe(), noop=True, cursor=cursor)

        previous = tree.previous_in_document(node)
        if previous is None or previous is tree.root:
            return EditResult(True, "At document start.", cursor.describe(), noop=True, cursor=cursor)

        join_offset = previous.length(self._unit)
        children = list(node.children)

        previous.text = previous.text + node.text
        if previous is node.parent:
            slot = previous.children.index(node)
            for i, child in enumerate(children):
                tree.reparent(child, previous, slot + 1 + i)
        else:
            for child in children:
                tree.reparent(child, previous)
        removed = tree.detach(node)

        return EditResult(
            True,
            "Merged into previous node.",
            {"node_id": previous.id, "merged": node.id, "inherited": [c.id for c in children]},
            cursor=Cursor.collapsed_at(previous, join_offset),
            changed_node_ids=(previous.id,),
            removed_node_ids=tuple(removed),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _validate_cursor(self, tree: DocumentTree, cursor: Cursor) -> None:
        for label, node, offset in (
            ("anchor", cursor.anchor_node, cursor.anchor_offset),
            ("focus", cursor.focus_node, cursor.focus_offset),
        ):
            if node not in tree:
                raise NodeNotFoundError(f"Cursor {label} is not part of the document", node_id=getattr(node, "id", None))
            length = node.length(self._unit)
            if isinstance(offset, bool) or not isinstance(offset, int) or not 0 <= offset <= length:
                raise InvalidOffsetError(
                    f"Cursor {label} offset {offset!r} outside [0, {length}]",
                    node_id=node.id, offset=offset, length=length,
                )

    @staticmethod
    def _collect_inherited(end: TextNode, doomed: set) -> List[TextNode]:
        """Children that must survive the removal of *end* and its removed ancestors.

        Returned in document order: the end node's children first, then, for
        each removed ancestor walking outward, its children after the path.
        """
        inherited: List[TextNode] = list(end.children)
        path_child = end
        ancestor = end.parent
        while ancestor is not None and id(ancestor) in doomed:
            position = ancestor.children.index(path_child)
            inherited.extend(ancestor.children[position + 1:])
            path_child = ancestor
            ancestor = ancestor.parent
        return inherited

    @staticmethod
    def describe_result(result: EditResult) -> Dict[str, Any]:
        """Flatten *result* for journaling or diagnostics."""
        return {
            "status": result.status,
            "message": result.message,
            "cursor": result.cursor.describe() if result.cursor is not None else None,
            "changed": list(result.changed_node_ids),
            "removed": list(result.removed_node_ids),
        }
