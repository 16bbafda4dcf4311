"""Shared fixtures for the fibertext test-suite.

Every test runs against an isolated configuration directory so that user
overrides on the machine running the tests never leak in.
"""

from typing import Callable

import pytest

from fibertext.config import ConfigManager
from fibertext.core.models import DocumentTree, EditorSettings, TextNode
from fibertext.core.sample import build_sample_session
from fibertext.core.session import EditorSession


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config loader at an empty temp directory."""
    config_dir = tmp_path / "user_config"
    config_dir.mkdir()
    monkeypatch.setenv("FIBERTEXT_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def settings() -> EditorSettings:
    return EditorSettings(strict_invariants=True)


@pytest.fixture
def session(settings) -> EditorSession:
    """Session holding the sample document (root, c1, c1.1, c1.2, c1.2.1, c2, c2.1)."""
    return build_sample_session(settings)


@pytest.fixture
def tree(session) -> DocumentTree:
    return session.tree


@pytest.fixture
def node(tree) -> Callable[[str], TextNode]:
    def lookup(node_id: str) -> TextNode:
        found = tree.find_by_id(node_id)
        assert found is not None, f"missing node {node_id}"
        return found
    return lookup


@pytest.fixture
def build_tree():
    """Build a tree from ``(parent_id, node_id, text)`` triples in attach order."""
    def factory(structure, root_id: str = "root") -> DocumentTree:
        tree = DocumentTree(root_id)
        for parent_id, node_id, text in structure:
            tree.attach_child_by_id(parent_id, TextNode(node_id, text))
        return tree
    return factory


def assert_layers_consistent(tree: DocumentTree) -> None:
    for n in tree.iter_nodes():
        if n.parent is None:
            assert n is tree.root
            assert n.layer == 0
        else:
            assert n.layer == n.parent.layer + 1, n
            assert n in n.parent.children


@pytest.fixture
def check_layers():
    return assert_layers_consistent
