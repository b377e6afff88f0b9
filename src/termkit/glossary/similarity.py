"""Edit-distance similarity and fuzzy "did you mean" suggestions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .interpreter import slugify
from .models import Entry, Terminology, TermReference

# Average similarity a suggestion must exceed
SUGGESTION_THRESHOLD = 0.85


def levenshtein_distance(s1: str, s2: str) -> int:
    """Number of single-character edits turning one string into the other."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)
    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row
    return previous_row[-1]


def similarity_ratio(s1: str, s2: str) -> float:
    """Similarity in [0, 1]: 1 - distance / longer length.

    Examples:
        >>> similarity_ratio("tev2", "tev2")
        1.0
        >>> round(similarity_ratio("exmple-term", "example-term"), 3)
        0.917
    """
    longest = max(len(s1), len(s2))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(s1, s2) / longest


def term_similarity(reference_id: str, candidates: Iterable[str]) -> float:
    """Best similarity of a reference id against a set of terms."""
    best = 0.0
    for candidate in candidates:
        best = max(
            best,
            similarity_ratio(reference_id.lower(), candidate.lower()),
            similarity_ratio(slugify(reference_id), slugify(candidate)),
        )
    return best


@dataclass(frozen=True)
class Suggestion:
    term: str
    scopetag: str
    vsntag: str
    score: float

    def __str__(self) -> str:
        return f"{self.term}@{self.scopetag}:{self.vsntag}"


def suggest(
    reference: TermReference,
    terminology: Terminology,
    threshold: float = SUGGESTION_THRESHOLD,
) -> Optional[Suggestion]:
    """
    Find the entry a non-matching reference most likely meant.

    For each property (term, scopetag, vsntag) the best similarity over all
    entries is taken; the average of the three must exceed the threshold.

    Args:
        reference: The reference that matched no entry
        terminology: Terminology the reference was resolved against
        threshold: Minimum average similarity

    Returns:
        Suggestion for the best term match, or None
    """
    if not terminology.entries:
        return None

    info = terminology.info
    best_entry: Optional[Entry] = None
    best_term = -1.0
    best_scope = 0.0
    best_version = 0.0

    for entry in terminology.entries:
        score = term_similarity(reference.id, [entry.term, *(entry.altterms or [])])
        if score > best_term:
            best_term, best_entry = score, entry
        best_scope = max(best_scope, similarity_ratio(reference.scopetag or "", entry.scopetag or info.scopetag))
        best_version = max(best_version, similarity_ratio(reference.vsntag or "", info.vsntag))

    average = (best_term + best_scope + best_version) / 3
    if best_entry is None or average <= threshold:
        return None
    return Suggestion(
        term=best_entry.term,
        scopetag=best_entry.scopetag or info.scopetag,
        vsntag=info.vsntag,
        score=average,
    )
