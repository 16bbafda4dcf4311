from __future__ import annotations

"""Service resolving external selections into cursors.

An input source reports selections as ``(node-id, offset)`` pairs. This
service resolves both ids against a :class:`DocumentTree` and clamps the
offsets into each node's ``[0, length]``. A UTF-16 offset that falls inside
a surrogate pair snaps down to the start of that character. If either id is
unknown the change is rejected so the caller keeps its previous cursor.
"""

import logging
from typing import Any, Dict

from fibertext.core.models import Cursor, DocumentTree, SelectionResult, TextNode
from fibertext.core.utils import OffsetUnit, clamp_offset, index_to_unit, unit_to_index

__all__ = ["SelectionService"]

logger = logging.getLogger(__name__)


class SelectionService:
    """Builds :class:`Cursor` values from untrusted selection reports."""

    def __init__(self, offset_unit: OffsetUnit = "utf16") -> None:
        self._offset_unit: OffsetUnit = offset_unit

    def resolve(
        self,
        tree: DocumentTree,
        anchor_id: str,
        anchor_offset: int,
        focus_id: str,
        focus_offset: int,
    ) -> SelectionResult:
        """Resolve two ``(node-id, offset)`` pairs into a cursor.

        Returns a rejected result when either id is not in *tree* or an offset
        is not an integer. Out-of-range offsets and offsets inside a surrogate pair are
        adjusted and reported in ``details["clamped"]``.
        """
        anchor = tree.find_by_id(anchor_id)
        focus = tree.find_by_id(focus_id)
        missing = [nid for nid, node in ((anchor_id, anchor), (focus_id, focus)) if node is None]
        if missing:
            logger.warning("Selection FAIL: node_not_found ids=%s", ",".join(map(str, missing)))
            return SelectionResult(False, f"Node not found: {', '.join(map(str, missing))}", {"missing": missing})

        for value in (anchor_offset, focus_offset):
            if isinstance(value, bool) or not isinstance(value, int):
                logger.warning("Selection FAIL: invalid_offset value=%r", value)
                return SelectionResult(False, f"Invalid offset {value!r}.", {"offset": value})

        a_offset, a_clamped = self._clamp(anchor, anchor_offset)
        f_offset, f_clamped = self._clamp(focus, focus_offset)
        cursor = Cursor(anchor, a_offset, focus, f_offset)

        details: Dict[str, Any] = cursor.describe()
        clamped = [name for name, flag in (("anchor", a_clamped), ("focus", f_clamped)) if flag]
        if clamped:
            details["clamped"] = clamped
            logger.info("Selection clamped endpoints=%s", ",".join(clamped))
        logger.debug("Selection OK: %s", details)
        return SelectionResult(True, "Selection updated.", details, cursor=cursor)

    def _clamp(self, node: TextNode, offset: int):
        unit = self._offset_unit
        clamped = clamp_offset(offset, node.length(unit))
        snapped = index_to_unit(node.text, unit_to_index(node.text, clamped, unit), unit)
        return snapped, snapped != offset
