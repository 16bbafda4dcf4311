from __future__ import annotations

"""Document tree owning the node hierarchy.

The tree hands out ``order`` values from a monotonic counter at attach time,
keeps an id index for lookups, and answers the structural queries the edit
service needs: ancestor chains, common ancestors, ordered range enumeration
and the previous node in document order.

Counter values are never reused or compacted, so after removals or merges
``order`` is a creation sequence with gaps rather than a position index.
Position comparisons go through :func:`compare_position`.
"""

import logging
from typing import Dict, Iterator, List, Optional, Set

from fibertext.core.exceptions import (
    DuplicateNodeError,
    EditorError,
    NodeNotFoundError,
    TreeInvariantError,
)
from fibertext.core.models.text_node import TextNode, ancestors, compare_position, is_ancestor

__all__ = ["DocumentTree"]

logger = logging.getLogger(__name__)


class DocumentTree:
    """Owns a single root :class:`TextNode` and everything attached below it.

    Parameters
    ----------
    root_id : str, default="root"
        Identifier of the root sentinel node.
    root_text : str, default=""
        Text buffer of the root sentinel node.
    """

    def __init__(self, root_id: str = "root", root_text: str = "") -> None:
        self.root = TextNode(root_id, root_text)
        self.root.is_root = True
        self._node_count = 0
        self._index: Dict[str, TextNode] = {self.root.id: self.root}

    def __repr__(self) -> str:
        return f"DocumentTree(root={self.root.id!r}, nodes={len(self._index)}, node_count={self._node_count})"

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, node: object) -> bool:
        return isinstance(node, TextNode) and self._index.get(node.id) is node

    @property
    def node_count(self) -> int:
        """Running total of nodes ever attached (never decremented)."""
        return self._node_count

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def attach_child(self, parent: TextNode, child: TextNode) -> int:
        """Append *child* (and any subtree it carries) under *parent*.

        Every attached node receives the next counter value, in pre-order.
        Returns the order assigned to *child*.
        """
        if parent not in self:
            raise NodeNotFoundError(f"Parent '{parent.id}' is not part of this tree", node_id=parent.id)
        if child.is_root:
            raise EditorError(f"Node '{child.id}' is the root of a document tree", node_id=child.id)
        if child.parent is not None:
            raise EditorError(f"Node '{child.id}' is already attached", node_id=child.id)

        subtree = list(child.iter_preorder())
        seen: Set[str] = set()
        for node in subtree:
            if node.id in self._index or node.id in seen:
                raise DuplicateNodeError(f"Duplicate node id '{node.id}'", node_id=node.id)
            seen.add(node.id)

        parent._adopt(child)
        for node in subtree:
            self._node_count += 1
            node.order = self._node_count
            self._index[node.id] = node
        logger.debug("Attached node=%s parent=%s order=%d layer=%d", child.id, parent.id, child.order, child.layer)
        return child.order

    def attach_child_by_id(self, parent_id: str, child: TextNode) -> int:
        """Resolve *parent_id* and attach *child* under it."""
        parent = self.find_by_id(parent_id)
        if parent is None:
            raise NodeNotFoundError(f"Parent '{parent_id}' not found", node_id=parent_id)
        return self.attach_child(parent, child)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def find_by_id(self, node_id: str) -> Optional[TextNode]:
        """Return the node with *node_id*, or None if it is not in the tree."""
        return self._index.get(node_id)

    def iter_nodes(self) -> Iterator[TextNode]:
        """Iterate all nodes in document (pre-)order, root first."""
        return self.root.iter_preorder()

    def ancestors(self, node: TextNode) -> List[TextNode]:
        """Inclusive ancestor chain of *node*, walking root-ward."""
        if node not in self:
            raise NodeNotFoundError(f"Node '{node.id}' is not part of this tree", node_id=node.id)
        return ancestors(node)

    def common_ancestor(self, a: TextNode, b: TextNode) -> TextNode:
        """Return the nearest node that is an ancestor of (or equal to) both nodes.

        Raises TreeInvariantError when either node does not belong to this
        tree or the chains never meet; both mean the tree is corrupt.
        """
        for node in (a, b):
            if node not in self:
                raise TreeInvariantError(f"Node '{node.id}' is not part of this tree", node_id=node.id)

        seen = {id(n) for n in ancestors(a)}
        for candidate in ancestors(b):
            if id(candidate) in seen:
                return candidate
        raise TreeInvariantError(f"No common ancestor for '{a.id}' and '{b.id}'", node_id=a.id)

    def nodes_between(self, a: TextNode, b: TextNode) -> List[TextNode]:
        """Return every node from the earlier endpoint through the later one.

        The walk starts at the common ancestor and collects in pre-order from
        the moment the first endpoint is reached until the second one is
        reached (inclusive). The result is the same whichever endpoint is
        passed first. The root is only included when it is an endpoint.
        """
        if a is b:
            if a not in self:
                raise TreeInvariantError(f"Node '{a.id}' is not part of this tree", node_id=a.id)
            return [a]

        top = self.common_ancestor(a, b)
        start, end = (a, b) if compare_position(a, b) < 0 else (b, a)

        collected: List[TextNode] = []
        in_range = False
        stack: List[TextNode] = [top]
        while stack:
            node = stack.pop()
            if node is start:
                in_range = True
            if in_range:
                collected.append(node)
            if node is end:
                break
            stack.extend(reversed(node.children))

        if not collected or collected[-1] is not end:
            raise TreeInvariantError(f"Range '{start.id}'..'{end.id}' not found below '{top.id}'", node_id=top.id)
        if self.root not in (start, end):
            collected = [n for n in collected if n is not self.root]
        return collected

    def previous_in_document(self, node: TextNode) -> Optional[TextNode]:
        """Return the node visited immediately before *node* in pre-order.

        That is the parent for a first child, otherwise the deepest last
        descendant of the previous sibling. None for the root.
        """
        if node not in self:
            raise NodeNotFoundError(f"Node '{node.id}' is not part of this tree", node_id=node.id)
        parent = node.parent
        if parent is None:
            return None
        position = parent.children.index(node)
        if position == 0:
            return parent
        previous = parent.children[position - 1]
        while previous.children:
            previous = previous.children[-1]
        return previous

    # ------------------------------------------------------------------
    # Structural mutation
    # ------------------------------------------------------------------
    def reparent(self, node: TextNode, new_parent: TextNode, index: Optional[int] = None) -> None:
        """Move *node* (with its subtree) under *new_parent* at *index*.

        Order values are kept; layers are recomputed for the moved subtree.
        """
        if node is self.root:
            raise EditorError("The root node cannot be moved", node_id=node.id)
        if node not in self or new_parent not in self:
            raise NodeNotFoundError(f"Node '{node.id}' or '{new_parent.id}' is not part of this tree")
        if node is new_parent or is_ancestor(node, new_parent):
            raise EditorError(f"Cannot move '{node.id}' below its own subtree", node_id=node.id)
        old_parent = node.parent
        if old_parent is not None:
            old_parent.children.remove(node)
        new_parent._adopt(node, index)

    def detach(self, node: TextNode) -> List[str]:
        """Remove *node* and its subtree from the tree.

        Returns the ids of every removed node.
        """
        if node is self.root:
            raise EditorError("The root node cannot be removed", node_id=node.id)
        if node not in self:
            raise NodeNotFoundError(f"Node '{node.id}' is not part of this tree", node_id=node.id)
        parent = node.parent
        if parent is None:
            raise TreeInvariantError(f"Attached node '{node.id}' has no parent", node_id=node.id)
        parent.children.remove(node)
        node._set_parent(None)
        removed = []
        for member in node.iter_preorder():
            self._index.pop(member.id, None)
            removed.append(member.id)
        logger.debug("Detached node=%s subtree=%d", node.id, len(removed))
        return removed

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------
    def check_invariants(self, check_order: bool = True) -> None:
        """Verify parent links, layers, ancestor ordering and the id index.

        Ancestor ordering (``parent.order < child.order``) holds after every
        attach. Merges move subtrees without renumbering, so callers verifying
        a tree after edits pass ``check_order=False``.

        Raises TreeInvariantError on the first violation found.
        """
        root = self.root
        if root.parent is not None or root.layer != 0:
            raise TreeInvariantError("Root must have no parent and layer 0", node_id=root.id)

        visited = 0
        for node in self.iter_nodes():
            visited += 1
            if self._index.get(node.id) is not node:
                raise TreeInvariantError("Node missing from id index", node_id=node.id)
            for child in node.children:
                if child.parent is not node:
                    raise TreeInvariantError(f"Broken parent link under '{node.id}'", node_id=child.id)
                if child.layer != node.layer + 1:
                    raise TreeInvariantError(
                        f"Layer {child.layer} under parent layer {node.layer}", node_id=child.id
                    )
                if check_order and child.order <= node.order:
                    raise TreeInvariantError(
                        f"Order {child.order} not above parent order {node.order}", node_id=child.id
                    )
        if visited != len(self._index):
            raise TreeInvariantError(f"Id index holds {len(self._index)} nodes, tree holds {visited}")
