from __future__ import annotations

"""Sample document used by demos and tests.

Builds the small two-branch document::

    root
    ├── c1   "child1"
    │   ├── c1.1   "child1.1"
    │   └── c1.2   "child1.2"
    │       └── c1.2.1   "child1.2.1"
    └── c2   "child2"
        └── c2.1   "child2.1"
"""

from typing import Optional, Tuple

from fibertext.core.models import EditorSettings, TextNode
from fibertext.core.session import EditorSession

__all__ = ["SAMPLE_STRUCTURE", "build_sample_session"]

# (parent id, node id, text) in attach order
SAMPLE_STRUCTURE: Tuple[Tuple[str, str, str], ...] = (
    ("root", "c1", "child1"),
    ("root", "c2", "child2"),
    ("c1", "c1.1", "child1.1"),
    ("c1", "c1.2", "child1.2"),
    ("c1.2", "c1.2.1", "child1.2.1"),
    ("c2", "c2.1", "child2.1"),
)


def build_sample_session(settings: Optional[EditorSettings] = None) -> EditorSession:
    """Return a fresh session holding the sample document.

    The root id of *settings* replaces ``"root"`` as the top-level parent.
    """
    session = EditorSession(settings or EditorSettings())
    root_id = session.tree.root.id
    for parent_id, node_id, text in SAMPLE_STRUCTURE:
        result = session.attach_child(root_id if parent_id == "root" else parent_id, TextNode(node_id, text))
        if not result.success:
            raise RuntimeError(f"Could not build sample document: {result.message}")
    return session
