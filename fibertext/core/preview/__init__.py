"""Rendering adapters for document snapshots."""

from .html_surface import HtmlSurface, RenderingSurface

__all__ = ["HtmlSurface", "RenderingSurface"]
