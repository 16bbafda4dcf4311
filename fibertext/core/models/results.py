from __future__ import annotations

"""Result objects returned across the editor boundary.

Every mutation entry point returns one of these instead of raising. A result
is in one of three states:

- applied:  ``success=True``  and ``noop=False``
- noop:     ``success=True``  and ``noop=True`` (valid request, nothing changed)
- rejected: ``success=False`` (lookup failure, invalid input, broken invariant)
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from fibertext.core.models.cursor import Cursor

__all__ = ["OperationResult", "EditResult", "SelectionResult"]


@dataclass(frozen=True)
class OperationResult:
    """Result of an editor operation.

    Attributes
    ----------
    success
        Whether the request was accepted.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    noop
        True when the request was valid but left the document unchanged.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None
    noop: bool = False

    @property
    def status(self) -> str:
        if not self.success:
            return "rejected"
        return "noop" if self.noop else "applied"


@dataclass(frozen=True)
class EditResult(OperationResult):
    """Result of applying an edit intent.

    ``cursor`` is the cursor after the edit (the unchanged cursor for no-ops,
    None when rejected). ``changed_node_ids`` lists nodes whose text or
    children changed; ``removed_node_ids`` lists nodes no longer in the tree.
    """
    cursor: Optional[Cursor] = None
    changed_node_ids: Tuple[str, ...] = ()
    removed_node_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SelectionResult(OperationResult):
    """Result of resolving an external selection into a :class:`Cursor`."""
    cursor: Optional[Cursor] = None
