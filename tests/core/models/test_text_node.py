import weakref

import pytest

from fibertext.core.exceptions import InvalidOffsetError, TreeInvariantError
from fibertext.core.models import DocumentTree, TextNode, ancestors, compare_position, is_ancestor


EMOJI = "\U0001F600"


class TestInsertText:

    def test_insert_at_start(self):
        n = TextNode("c1", "child1")
        assert n.insert_text(0, "x") == 1
        assert n.text == "xchild1"

    def test_insert_in_middle_and_end(self):
        n = TextNode("n", "abc")
        assert n.insert_text(1, "XY") == 3
        assert n.text == "aXYbc"
        assert n.insert_text(5, "!") == 6
        assert n.text == "aXYbc!"

    @pytest.mark.parametrize("offset", [-1, 4, 100])
    def test_out_of_range_offset_is_rejected(self, offset):
        n = TextNode("n", "abc")
        with pytest.raises(InvalidOffsetError) as info:
            n.insert_text(offset, "x")
        assert info.value.node_id == "n"
        assert info.value.length == 3
        assert n.text == "abc"

    def test_astral_text_advances_two_utf16_units(self):
        n = TextNode("n", "ab")
        assert n.insert_text(1, EMOJI) == 3
        assert n.text == "a" + EMOJI + "b"
        assert n.length() == 4
        assert n.length("codepoint") == 3

    def test_offset_inside_surrogate_pair_inserts_before_character(self):
        n = TextNode("n", "a" + EMOJI + "b")
        assert n.insert_text(2, "x") == 2
        assert n.text == "ax" + EMOJI + "b"

    def test_returned_offset_lands_after_inserted_text(self):
        n = TextNode("n", EMOJI + EMOJI)
        assert n.insert_text(3, EMOJI) == 4
        assert n.text == EMOJI * 3
        assert n.insert_text(4, "z") == 5

    @pytest.mark.parametrize("offset", [True, False])
    def test_bool_offset_is_rejected(self, offset):
        n = TextNode("n", "abc")
        with pytest.raises(InvalidOffsetError):
            n.insert_text(offset, "x")
        with pytest.raises(InvalidOffsetError):
            n.delete_range(offset, 2)
        assert n.text == "abc"


class TestDeleteRange:

    def test_offsets_are_order_normalized(self):
        n = TextNode("n", "abcdef")
        assert n.delete_range(4, 1) == 1
        assert n.text == "aef"

    def test_forward_span(self):
        n = TextNode("n", "abcdef")
        assert n.delete_range(1, 4) == 1
        assert n.text == "aef"

    def test_equal_offsets_delete_previous_character(self):
        n = TextNode("n", "abcdef")
        assert n.delete_range(3, 3) == 2
        assert n.text == "abdef"

    def test_backspace_at_start_is_noop(self):
        n = TextNode("n", "abc")
        assert n.delete_range(0, 0) == 0
        assert n.text == "abc"

    def test_backspace_removes_whole_surrogate_pair(self):
        n = TextNode("n", "a" + EMOJI + "b")
        assert n.delete_range(3, 3) == 1
        assert n.text == "ab"

    def test_codepoint_unit(self):
        n = TextNode("n", "a" + EMOJI + "b")
        assert n.delete_range(2, 2, "codepoint") == 1
        assert n.text == "ab"

    def test_rejects_offsets_past_end(self):
        n = TextNode("n", "abc")
        with pytest.raises(InvalidOffsetError):
            n.delete_range(1, 9)
        assert n.text == "abc"


class TestTreePosition:

    def test_parent_is_weak_back_reference(self, node):
        child = node("c1.1")
        assert child.parent is node("c1")
        assert isinstance(child._parent_ref, weakref.ref)
        assert child in child.parent.children

    def test_root_has_no_parent(self, tree):
        assert tree.root.parent is None

    def test_child_accessors(self, node):
        c1 = node("c1")
        assert c1.first_child() is node("c1.1")
        assert c1.last_child() is node("c1.2")
        assert c1.nth_child(1) is node("c1.2")
        assert c1.nth_child(5) is None
        assert node("c1.1").first_child() is None

    def test_iter_preorder(self, tree):
        assert [n.id for n in tree.root.iter_preorder()] == [
            "root", "c1", "c1.1", "c1.2", "c1.2.1", "c2", "c2.1",
        ]

    def test_attach_child_through_node_uses_tree_counter(self):
        tree = DocumentTree()
        a = TextNode("a", "A")
        order = tree.root.attach_child(a, tree)
        assert order == 1
        assert a.parent is tree.root
        assert a.layer == 1
        assert tree.node_count == 1


class TestDocumentPosition:

    def test_ancestors_chain(self, node):
        assert [n.id for n in ancestors(node("c1.2.1"))] == ["c1.2.1", "c1.2", "c1", "root"]

    def test_is_ancestor(self, node):
        assert is_ancestor(node("c1"), node("c1.2.1"))
        assert not is_ancestor(node("c1.2.1"), node("c1"))
        assert not is_ancestor(node("c2"), node("c1.1"))
        assert not is_ancestor(node("c1"), node("c1"))

    def test_ancestor_precedes_descendant(self, node):
        assert compare_position(node("c1"), node("c1.2.1")) == -1
        assert compare_position(node("c1.2.1"), node("c1")) == 1

    def test_same_node(self, node):
        assert compare_position(node("c2"), node("c2")) == 0

    def test_cross_branch_uses_document_order_not_attach_order(self, node):
        # c1.1 was attached after c2, but comes before it in the document
        assert node("c1.1").order > node("c2").order
        assert compare_position(node("c1.1"), node("c2")) == -1
        assert compare_position(node("c2"), node("c1.1")) == 1

    def test_siblings(self, node):
        assert compare_position(node("c1.1"), node("c1.2")) == -1
        assert compare_position(node("c2.1"), node("c1.2.1")) == 1

    def test_nodes_from_different_trees(self, node):
        stranger = DocumentTree("other").root
        with pytest.raises(TreeInvariantError):
            compare_position(node("c1"), stranger)
