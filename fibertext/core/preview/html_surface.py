from __future__ import annotations

"""Reference rendering surface producing nested HTML markup.

This module is **read-only** with respect to the document: it consumes
:class:`NodeView` snapshots and the change lists returned by edits, and keeps
an ``lxml`` element tree that mirrors the document as nested
``<div id=…><p>text</p>…</div>`` blocks indented by layer.

Hosts with a real screen implement :class:`RenderingSurface` themselves; this
implementation serves tests, previews and server-side rendering.
"""

from typing import Iterable, Optional, Protocol

from lxml import etree as ET  # type: ignore

from fibertext.core.models import NodeView

__all__ = [
    "RenderingSurface",
    "HtmlSurface",
]

INDENT_PX = 20


class RenderingSurface(Protocol):
    """What the editor expects from whatever paints the document."""

    def render(self, view: NodeView) -> None:
        ...

    def update(self, view: NodeView, changed_ids: Iterable[str], removed_ids: Iterable[str]) -> None:
        ...


class HtmlSurface:
    """Keeps an ``lxml`` HTML tree in sync with the document.

    Parameters
    ----------
    container_id : str, default="app"
        Id of the editable container element wrapping the document.
    """

    def __init__(self, container_id: str = "app") -> None:
        self._container = ET.Element("div", id=container_id)
        self._container.set("contenteditable", "true")
        self._container.set("style", "white-space: pre-wrap")
        self.full_renders = 0

    @property
    def element(self) -> ET._Element:
        return self._container

    def render(self, view: NodeView) -> None:
        """Discard the current markup and paint *view* from scratch."""
        for child in list(self._container):
            self._container.remove(child)
        self._container.append(self._build(view))
        self.full_renders += 1

    def update(self, view: NodeView, changed_ids: Iterable[str], removed_ids: Iterable[str]) -> None:
        """Redraw only what an edit touched.

        Removed nodes are dropped first, then each changed node is rebuilt in
        place together with its subtree (children may have moved under it).
        Falls back to a full render when a changed node has no element yet.
        """
        for node_id in removed_ids:
            element = self.find(node_id)
            if element is not None and element.getparent() is not None:
                element.getparent().remove(element)

        lookup = view.by_id()
        for node_id in changed_ids:
            node_view = lookup.get(node_id)
            if node_view is None:
                continue
            element = self.find(node_id)
            if element is None or element.getparent() is None:
                self.render(view)
                return
            element.getparent().replace(element, self._build(node_view))

    def find(self, node_id: str) -> Optional[ET._Element]:
        matches = self._container.xpath(".//div[@id=$nid]", nid=node_id)
        return matches[0] if matches else None

    def text_of(self, node_id: str) -> Optional[str]:
        element = self.find(node_id)
        if element is None:
            return None
        paragraph = element.find("p")
        return (paragraph.text or "") if paragraph is not None else ""

    def to_html(self, *, pretty: bool = False) -> str:
        return ET.tostring(self._container, encoding="unicode", method="html", pretty_print=pretty)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build(self, view: NodeView) -> ET._Element:
        element = ET.Element("div", id=view.id)
        ET.SubElement(element, "p").text = view.text
        if view.layer > 0:
            element.set("style", f"margin-left: {view.layer * INDENT_PX}px")
        for child in view.children:
            element.append(self._build(child))
        return element
