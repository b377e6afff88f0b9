"""Classification of how a term reference matches a terminology."""

from __future__ import annotations

from enum import StrEnum
from typing import List

from .interpreter import slugify
from .models import Entry, Terminology, TermReference


class MatchKind(StrEnum):
    """How many entries a reference matched.

    - EXACT: Exactly one entry; the reference can be converted
    - AMBIGUOUS: Two or more entries; needs a more specific reference
    - UNKNOWN: No entry; a fuzzy suggestion may be offered
    """

    EXACT = "exact"
    AMBIGUOUS = "ambiguous"
    UNKNOWN = "unknown"


def entry_matches_reference(entry: Entry, reference: TermReference, by_slug: bool = False) -> bool:
    """True if the entry's term or an altterm equals the reference id.

    With `by_slug`, terms are compared in slug form instead, so a reference
    derived from the showtext "Example Term" matches `term: Example Term`.
    """
    candidates = [entry.term, *(entry.altterms or [])]
    if by_slug:
        ref_slug = slugify(reference.id)
        return any(slugify(c) == ref_slug for c in candidates)
    return reference.id in candidates


def find_matching_entries(terminology: Terminology, reference: TermReference) -> List[Entry]:
    """Entries matching the reference literally, else those matching in slug form."""
    matches = [e for e in terminology.entries if entry_matches_reference(e, reference)]
    if matches:
        return matches
    return [e for e in terminology.entries if entry_matches_reference(e, reference, by_slug=True)]


def classify_matches(matches: List[Entry]) -> MatchKind:
    """Classify a match result.

    Args:
        matches: Entries that matched a reference

    Returns:
        MatchKind for the number of matches
    """
    if not matches:
        return MatchKind.UNKNOWN
    if len(matches) > 1:
        return MatchKind.AMBIGUOUS
    return MatchKind.EXACT


def distinct_sources(matches: List[Entry], default: str = "") -> List[str]:
    """Unique sources of the matched entries, in first-seen order."""
    sources: List[str] = []
    for entry in matches:
        source = entry.source or default
        if source not in sources:
            sources.append(source)
    return sources
