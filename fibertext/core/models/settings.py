"""Editor settings model.

Typed view over the ``editor`` configuration section loaded by
:class:`fibertext.config.ConfigManager`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

__all__ = ["EditorSettings"]

_BACKSPACE_MODES = ("merge_previous", "ignore")
_OFFSET_UNITS = ("utf16", "codepoint")


@dataclass(frozen=True)
class EditorSettings:
    """Behavioural switches for an editor session."""

    offset_unit: str = "utf16"
    root_id: str = "root"
    root_text: str = ""
    backspace_at_node_start: str = "merge_previous"
    strict_invariants: bool = False

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.offset_unit not in _OFFSET_UNITS:
            raise ValueError(f"offset_unit must be one of {_OFFSET_UNITS}, got {self.offset_unit!r}")
        if self.backspace_at_node_start not in _BACKSPACE_MODES:
            raise ValueError(
                f"backspace_at_node_start must be one of {_BACKSPACE_MODES}, got {self.backspace_at_node_start!r}"
            )
        if not self.root_id:
            raise ValueError("root_id cannot be empty")

    @classmethod
    def from_config(cls, data: Optional[Dict[str, Any]] = None) -> "EditorSettings":
        """Create settings from an ``editor`` configuration mapping.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        data = data or {}
        root = data.get("root") or {}
        kwargs: Dict[str, Any] = {}
        if "offset_unit" in data:
            kwargs["offset_unit"] = str(data["offset_unit"]).lower()
        if "backspace_at_node_start" in data:
            kwargs["backspace_at_node_start"] = str(data["backspace_at_node_start"]).lower()
        if "strict_invariants" in data:
            kwargs["strict_invariants"] = bool(data["strict_invariants"])
        if "id" in root:
            kwargs["root_id"] = str(root["id"])
        if "text" in root:
            kwargs["root_text"] = str(root["text"] or "")
        settings = cls(**kwargs)
        logger.debug("Editor settings: %s", settings)
        return settings
