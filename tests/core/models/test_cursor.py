import dataclasses

import pytest

from fibertext.core.models import Cursor, Direction


def test_collapsed_cursor(node):
    cursor = Cursor.collapsed_at(node("c1"), 3)
    assert cursor.is_collapsed
    assert cursor.direction is Direction.FORWARD
    assert cursor.anchor_node is cursor.focus_node


def test_same_node_direction_follows_offsets(node):
    assert Cursor(node("c1"), 1, node("c1"), 4).direction is Direction.FORWARD
    assert Cursor(node("c1"), 4, node("c1"), 1).direction is Direction.BACKWARD
    assert not Cursor(node("c1"), 4, node("c1"), 1).is_collapsed


def test_cross_node_direction(node):
    assert Cursor(node("c1.1"), 8, node("c1.2"), 0).direction is Direction.FORWARD
    assert Cursor(node("c1.2"), 0, node("c1.1"), 8).direction is Direction.BACKWARD


def test_direction_does_not_depend_on_attach_order(node):
    # c2 was attached before c1.1 yet follows it in the document
    cursor = Cursor(node("c1.1"), 0, node("c2"), 0)
    assert cursor.direction is Direction.FORWARD


def test_normalized_swaps_backward_selection(node):
    cursor = Cursor(node("c2.1"), 3, node("c1.1"), 5)
    start, start_offset, end, end_offset = cursor.normalized()
    assert (start.id, start_offset, end.id, end_offset) == ("c1.1", 5, "c2.1", 3)


def test_cursor_is_immutable(node):
    cursor = Cursor.collapsed_at(node("c1"), 0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cursor.focus_offset = 2


def test_value_equality(node):
    assert Cursor.collapsed_at(node("c1"), 2) == Cursor(node("c1"), 2, node("c1"), 2)
    assert Cursor.collapsed_at(node("c1"), 2) != Cursor.collapsed_at(node("c2"), 2)


def test_describe(node):
    assert Cursor(node("c1.2"), 0, node("c1.1"), 8).describe() == {
        "anchor": "c1.2",
        "anchor_offset": 0,
        "focus": "c1.1",
        "focus_offset": 8,
        "direction": "backward",
    }
