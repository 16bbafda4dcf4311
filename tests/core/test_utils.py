import pytest

from fibertext.core.utils import (
    clamp_offset,
    generate_node_id,
    index_to_unit,
    unit_length,
    unit_to_index,
)

SMILE = "\U0001F600"


class TestUnitLength:
    """Lengths measured in UTF-16 code units and in code points."""

    def test_ascii_is_the_same_in_both_units(self):
        assert unit_length("child1") == 6
        assert unit_length("child1", "codepoint") == 6

    def test_astral_character_counts_twice_in_utf16(self):
        assert unit_length(f"a{SMILE}b") == 4
        assert unit_length(f"a{SMILE}b", "codepoint") == 3

    def test_bmp_non_ascii_counts_once(self):
        assert unit_length("é€") == 2

    def test_empty(self):
        assert unit_length("") == 0

    def test_unknown_unit_raises(self):
        with pytest.raises(ValueError):
            unit_length("abc", "bytes")


class TestUnitToIndex:

    def test_codepoint_is_identity(self):
        assert unit_to_index(f"a{SMILE}b", 2, "codepoint") == 2

    def test_utf16_offsets_after_surrogate_pair(self):
        text = f"a{SMILE}b"
        assert unit_to_index(text, 0) == 0
        assert unit_to_index(text, 1) == 1
        assert unit_to_index(text, 3) == 2
        assert unit_to_index(text, 4) == 3

    def test_mid_surrogate_snaps_down(self):
        assert unit_to_index(f"a{SMILE}b", 2) == 1

    def test_back_conversion(self):
        text = f"{SMILE}x{SMILE}"
        assert index_to_unit(text, 2) == 3
        assert index_to_unit(text, 2, "codepoint") == 2


@pytest.mark.parametrize(
    "offset, length, expected",
    [(-3, 5, 0), (0, 5, 0), (3, 5, 3), (5, 5, 5), (9, 5, 5), (4, 0, 0)],
)
def test_clamp_offset(offset, length, expected):
    assert clamp_offset(offset, length) == expected


def test_generate_node_id_is_unique():
    ids = {generate_node_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(i.startswith("node-") for i in ids)
