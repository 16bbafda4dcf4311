import pytest

from fibertext.core.models import Cursor, DocumentTree, EditorSettings, NodeView, TextNode
from fibertext.core.services import IntentKind
from fibertext.core.session import EditorSession


class TestTreeConstruction:

    def test_attach_child_reports_order(self):
        session = EditorSession(EditorSettings())
        result = session.attach_child("root", TextNode("a", "alpha"))
        assert result.success
        assert result.details["order"] == 1
        assert result.details["layer"] == 1
        assert session.add("a", "b", "beta").details["order"] == 2

    def test_attach_under_unknown_parent_is_rejected(self, session):
        result = session.attach_child("ghost", TextNode("x"))
        assert not result.success
        assert result.details["parent_id"] == "ghost"
        assert session.tree.find_by_id("x") is None

    def test_duplicate_id_is_rejected(self, session):
        result = session.add("root", "c1", "again")
        assert not result.success
        assert session.tree.node_count == 6

    def test_attach_after_merge_in_strict_mode(self):
        session = EditorSession(EditorSettings(strict_invariants=True))
        for parent_id, node_id in (("root", "a"), ("root", "b"), ("b", "b1"), ("a", "a1")):
            assert session.add(parent_id, node_id, node_id).success
        session.set_selection("b", 0, "b", 0)
        merge = session.delete_backward()
        assert merge.status == "applied"
        assert session.tree.find_by_id("b1").parent is session.tree.find_by_id("a1")

        result = session.add("root", "c", "c")
        assert result.status == "applied"
        assert result.details["order"] == 5
        session.tree.check_invariants(check_order=False)

    def test_strict_mode_rejection_leaves_tree_untouched(self, session, node):
        node("c1.1").layer = 7
        result = session.add("c2", "c2.2", "child2.2")
        assert not result.success
        assert session.tree.find_by_id("c2.2") is None
        assert session.tree.node_count == 6

    def test_root_of_another_tree_is_rejected(self, session):
        foreign = DocumentTree("other").root
        result = session.attach_child("c1", foreign)
        assert not result.success
        assert foreign.parent is None
        assert session.tree.find_by_id("other") is None


class TestQueries:

    def test_lookup_found(self, session, node):
        result = session.lookup("c1.2")
        assert result.success
        assert result.details["node"] is node("c1.2")

    def test_lookup_missing_is_distinguishable(self, session):
        result = session.lookup("ghost")
        assert not result.success
        assert result.status == "rejected"

    def test_get_tree_snapshot(self, session):
        view = session.get_tree()
        assert isinstance(view, NodeView)
        assert view.id == "root"
        assert [c.id for c in view.children] == ["c1", "c2"]
        c12 = view.find("c1.2")
        assert (c12.text, c12.layer) == ("child1.2", 2)
        assert [c.id for c in c12.children] == ["c1.2.1"]
        assert view.find("ghost") is None

    def test_snapshot_is_detached_from_later_edits(self, session):
        view = session.get_tree()
        session.set_selection("c1", 0, "c1", 0)
        session.insert_text("x")
        assert view.find("c1").text == "child1"
        assert session.get_tree().find("c1").text == "xchild1"


class TestSelection:

    def test_initial_cursor_is_root_start(self):
        session = EditorSession(EditorSettings())
        assert session.cursor == Cursor.collapsed_at(session.tree.root, 0)

    def test_set_selection_replaces_cursor(self, session, node):
        result = session.set_selection("c1.1", 8, "c1.2", 0)
        assert result.success
        assert session.cursor is result.cursor
        assert session.cursor.anchor_node is node("c1.1")

    def test_rejected_selection_keeps_previous_cursor(self, session):
        session.set_selection("c1", 2, "c1", 2)
        previous = session.cursor
        result = session.set_selection("c1", 0, "ghost", 0)
        assert not result.success
        assert session.cursor is previous


class TestIntents:

    def test_apply_intent_adopts_new_cursor(self, session, node):
        session.set_selection("c1", 0, "c1", 0)
        result = session.apply_intent("insert-text", "x")
        assert result.success
        assert session.cursor == Cursor.collapsed_at(node("c1"), 1)

    def test_explicit_cursor_overrides_session_cursor(self, session, node):
        result = session.apply_intent(IntentKind.DELETE_BACKWARD, cursor=Cursor.collapsed_at(node("c2"), 6))
        assert result.success
        assert node("c2").text == "child"
        assert session.cursor == Cursor.collapsed_at(node("c2"), 5)

    def test_rejected_intent_keeps_cursor(self, session):
        session.set_selection("c1", 1, "c1", 1)
        previous = session.cursor
        result = session.apply_intent("bold")
        assert not result.success
        assert session.cursor is previous

    def test_typing_sequence(self, session, node):
        session.set_selection("c2.1", 8, "c2.1", 8)
        for ch in "abc":
            session.insert_text(ch)
        session.delete_backward()
        assert node("c2.1").text == "child2.1ab"
        assert session.cursor.focus_offset == 10


def test_default_settings_come_from_config(isolated_config):
    (isolated_config / "editor.yml").write_text("offset_unit: codepoint\nroot:\n  text: doc\n", encoding="utf-8")
    session = EditorSession()
    assert session.settings.offset_unit == "codepoint"
    assert session.tree.root.id == "root"
    assert session.tree.root.text == "doc"


def test_sessions_share_no_state():
    first = EditorSession(EditorSettings())
    second = EditorSession(EditorSettings())
    first.add("root", "a", "alpha")
    assert second.tree.find_by_id("a") is None
    assert second.tree.node_count == 0


def test_invalid_settings_are_rejected():
    with pytest.raises(ValueError):
        EditorSettings(offset_unit="bytes")
    with pytest.raises(ValueError):
        EditorSettings(backspace_at_node_start="delete_everything")
