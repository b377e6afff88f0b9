"""Text edits against an immutable source buffer.

Replacements are recorded with the offsets of the original text and the
output is assembled in a single pass, so earlier replacements never shift
the positions of later ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replace `text[start:end]` with `replacement`."""
    start: int
    end: int
    replacement: str

    @property
    def delta(self) -> int:
        """Length change caused by this edit."""
        return len(self.replacement) - (self.end - self.start)


def apply_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """
    Apply non-overlapping edits to the original text.

    Args:
        text: Original text; all offsets refer to it
        edits: Edits in any order

    Returns:
        The edited text

    Raises:
        ValueError: If an edit is out of range or two edits overlap

    Examples:
        >>> apply_edits("a [x] b [y]", [TextEdit(2, 5, "X"), TextEdit(8, 11, "[Y]!")])
        'a X b [Y]!'
    """
    ordered = sorted(edits, key=lambda e: (e.start, e.end))
    parts: List[str] = []
    cursor = 0
    for edit in ordered:
        if edit.start < cursor:
            raise ValueError(f"Edit at {edit.start}-{edit.end} overlaps a previous edit")
        if edit.start > edit.end or edit.end > len(text):
            raise ValueError(f"Edit at {edit.start}-{edit.end} is out of range")
        parts.append(text[cursor:edit.start])
        parts.append(edit.replacement)
        cursor = edit.end
    parts.append(text[cursor:])
    return "".join(parts)
