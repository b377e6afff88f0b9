"""Tests for single-pass text edits."""

import pytest

from termkit.glossary.editing import TextEdit, apply_edits

TEXT = "See [a]() and [b]() and [c]()."


def _edit(text, needle, replacement):
    start = text.index(needle)
    return TextEdit(start, start + len(needle), replacement)


class TestApplyEdits:
    """Test replacement against original offsets."""

    @pytest.mark.parametrize("replacement", ["A", "[a]()", "a much longer replacement"])
    def test_replacement_length_does_not_shift_later_edits(self, replacement):
        """Shorter, equal and longer replacements all leave later edits in place."""
        edits = [_edit(TEXT, "[a]()", replacement), _edit(TEXT, "[c]()", "C")]
        assert apply_edits(TEXT, edits) == f"See {replacement} and [b]() and C."

    def test_edits_in_any_order(self):
        edits = [_edit(TEXT, "[c]()", "3"), _edit(TEXT, "[a]()", "1"), _edit(TEXT, "[b]()", "2")]
        assert apply_edits(TEXT, edits) == "See 1 and 2 and 3."

    def test_no_edits(self):
        assert apply_edits(TEXT, []) == TEXT

    def test_adjacent_edits(self):
        assert apply_edits("abcd", [TextEdit(0, 2, "X"), TextEdit(2, 4, "Y")]) == "XY"

    def test_overlapping_edits_raise(self):
        with pytest.raises(ValueError, match="overlaps"):
            apply_edits("abcdef", [TextEdit(0, 3, "X"), TextEdit(2, 5, "Y")])

    def test_out_of_range_edit_raises(self):
        with pytest.raises(ValueError, match="out of range"):
            apply_edits("abc", [TextEdit(1, 10, "X")])

    def test_delta(self):
        assert TextEdit(0, 5, "ab").delta == -3
        assert TextEdit(0, 0, "ab").delta == 2
