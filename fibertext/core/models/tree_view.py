from __future__ import annotations

"""Read-only snapshot of the document tree for rendering surfaces."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from fibertext.core.models.text_node import TextNode

__all__ = ["NodeView"]


@dataclass(frozen=True)
class NodeView:
    """Immutable copy of a node and its subtree."""
    id: str
    text: str
    layer: int
    order: int
    children: Tuple[NodeView, ...] = field(default_factory=tuple)

    @classmethod
    def from_node(cls, node: TextNode) -> NodeView:
        return cls(
            id=node.id,
            text=node.text,
            layer=node.layer,
            order=node.order,
            children=tuple(cls.from_node(child) for child in node.children),
        )

    def depth_first(self) -> Iterator[NodeView]:
        """Traverse the snapshot depth-first, yielding self then children."""
        yield self
        for child in self.children:
            yield from child.depth_first()

    def find(self, node_id: str) -> Optional[NodeView]:
        for view in self.depth_first():
            if view.id == node_id:
                return view
        return None

    def by_id(self) -> Dict[str, NodeView]:
        return {view.id: view for view in self.depth_first()}
