from __future__ import annotations

"""Text-bearing tree node and document-position helpers.

A :class:`TextNode` owns its children; the ``parent`` link is a weak
reference used only for walking the ancestor chain. Offsets given to the
mutation methods are counted in an offset unit (see
:mod:`fibertext.core.utils`) and must lie in ``[0, length]``.
"""

import weakref
from typing import TYPE_CHECKING, Iterator, List, Optional

from fibertext.core.exceptions import InvalidOffsetError, TreeInvariantError
from fibertext.core.utils import OffsetUnit, generate_node_id, index_to_unit, unit_length, unit_to_index

if TYPE_CHECKING:
    from fibertext.core.models.document_tree import DocumentTree

__all__ = [
    "TextNode",
    "ancestors",
    "is_ancestor",
    "compare_position",
]


class TextNode:
    """A node holding a text buffer, tree-position metadata and children.

    Attributes
    ----------
    id
        Opaque identifier, unique within a tree and stable for the node's lifetime.
    text
        The node's text buffer.
    layer
        Depth in the tree; 0 for the root.
    order
        Attach sequence number handed out by the owning tree.
    children
        Owned child nodes in document order.
    is_root
        True for the sentinel root of a :class:`DocumentTree`; roots never attach elsewhere.
    """

    def __init__(self, id: Optional[str] = None, text: str = "") -> None:
        self.id: str = id or generate_node_id()
        self.text: str = text
        self.layer: int = 0
        self.order: int = 0
        self.children: List[TextNode] = []
        self.is_root: bool = False
        self._parent_ref: Optional[weakref.ReferenceType[TextNode]] = None

    def __repr__(self) -> str:
        return f"TextNode(id={self.id!r}, text={self.text!r}, layer={self.layer}, order={self.order})"

    # ------------------------------------------------------------------
    # Tree position
    # ------------------------------------------------------------------
    @property
    def parent(self) -> Optional[TextNode]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _set_parent(self, parent: Optional[TextNode]) -> None:
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    def first_child(self) -> Optional[TextNode]:
        return self.children[0] if self.children else None

    def last_child(self) -> Optional[TextNode]:
        return self.children[-1] if self.children else None

    def nth_child(self, n: int) -> Optional[TextNode]:
        if 0 <= n < len(self.children):
            return self.children[n]
        return None

    def iter_preorder(self) -> Iterator[TextNode]:
        """Traverse the subtree depth-first, yielding self then children."""
        stack: List[TextNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def attach_child(self, child: TextNode, tree: DocumentTree) -> int:
        """Attach *child* as last child through *tree* and return its order."""
        return tree.attach_child(self, child)

    def _adopt(self, child: TextNode, index: Optional[int] = None) -> None:
        """Link *child* under this node and relayer its subtree.

        Order values are left untouched; only the owning tree assigns them.
        """
        if index is None:
            self.children.append(child)
        else:
            self.children.insert(index, child)
        child._set_parent(self)
        child._relayer(self.layer + 1)

    def _relayer(self, layer: int) -> None:
        self.layer = layer
        for node in self.iter_preorder():
            for child in node.children:
                child.layer = node.layer + 1

    # ------------------------------------------------------------------
    # Text buffer
    # ------------------------------------------------------------------
    def length(self, unit: OffsetUnit = "utf16") -> int:
        """Length of the text buffer in *unit*."""
        return unit_length(self.text, unit)

    def _check_offset(self, offset: int, unit: OffsetUnit) -> None:
        size = self.length(unit)
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0 or offset > size:
            raise InvalidOffsetError(
                f"Offset {offset!r} outside [0, {size}]",
                node_id=self.id, offset=offset, length=size,
            )

    def insert_text(self, offset: int, text: str, unit: OffsetUnit = "utf16") -> int:
        """Splice *text* into the buffer at *offset*.

        Returns the offset immediately after the inserted text. A UTF-16
        offset inside a surrogate pair inserts before that character.
        """
        self._check_offset(offset, unit)
        index = unit_to_index(self.text, offset, unit)
        self.text = self.text[:index] + text + self.text[index:]
        return index_to_unit(self.text, index + len(text), unit)

    def delete_range(self, start_offset: int, end_offset: int, unit: OffsetUnit = "utf16") -> int:
        """Remove the span between two offsets given in either order.

        Equal offsets mean backspace: the single character before the offset
        is removed, or nothing at offset 0. Returns the offset at which the
        deletion happened.
        """
        self._check_offset(start_offset, unit)
        self._check_offset(end_offset, unit)
        lo, hi = sorted((start_offset, end_offset))
        hi_index = unit_to_index(self.text, hi, unit)
        if lo == hi:
            if hi_index == 0:
                return 0
            lo_index = hi_index - 1
        else:
            lo_index = unit_to_index(self.text, lo, unit)
        self.text = self.text[:lo_index] + self.text[hi_index:]
        return unit_length(self.text[:lo_index], unit)


# ----------------------------------------------------------------------
# Document position
# ----------------------------------------------------------------------

def ancestors(node: TextNode) -> List[TextNode]:
    """Return the inclusive ancestor chain of *node*, walking root-ward."""
    chain: List[TextNode] = []
    current: Optional[TextNode] = node
    while current is not None:
        chain.append(current)
        current = current.parent
    return chain


def is_ancestor(ancestor: TextNode, node: TextNode) -> bool:
    """Return True if *ancestor* is a strict ancestor of *node*."""
    current = node.parent
    while current is not None:
        if current is ancestor:
            return True
        current = current.parent
    return False


def compare_position(a: TextNode, b: TextNode) -> int:
    """Compare the document positions of two nodes of the same tree.

    Returns -1 when *a* comes first in pre-order, 1 when *b* does and 0 when
    they are the same node. The comparison only walks ancestor chains: an
    ancestor precedes its descendants, and otherwise the two branches are
    ordered by their position under the nearest common ancestor.
    """
    if a is b:
        return 0
    path_a = list(reversed(ancestors(a)))
    path_b = list(reversed(ancestors(b)))
    if path_a[0] is not path_b[0]:
        raise TreeInvariantError(f"Nodes '{a.id}' and '{b.id}' do not share a root")

    depth = 0
    limit = min(len(path_a), len(path_b))
    while depth < limit and path_a[depth] is path_b[depth]:
        depth += 1

    if depth == len(path_a):
        return -1
    if depth == len(path_b):
        return 1

    siblings = path_a[depth - 1].children
    try:
        index_a = siblings.index(path_a[depth])
        index_b = siblings.index(path_b[depth])
    except ValueError as exc:
        raise TreeInvariantError(
            f"Parent/child links broken below '{path_a[depth - 1].id}'",
            node_id=path_a[depth - 1].id,
        ) from exc
    return -1 if index_a < index_b else 1
