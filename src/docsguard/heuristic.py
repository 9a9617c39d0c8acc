"""Heuristic matching of unlinked functions to unlinked documentation sections.

Suggestions are ranked by normalized edit-distance similarity between the
function name and the section's id or title. Nothing is applied here;
accepting a suggestion is up to the caller (see docsguard.scaffold).
"""

from __future__ import annotations

from typing import Sequence

from docsguard.config import DEFAULT_MIN_CONFIDENCE
from docsguard.models import CandidateLink, CodeEntity, DocSection


def levenshtein_distance(s1: str, s2: str) -> int:
    """Compute Levenshtein edit distance."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    prev_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        curr_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = prev_row[j + 1] + 1
            deletions = curr_row[j] + 1
            substitutions = prev_row[j] + (c1 != c2)
            curr_row.append(min(insertions, deletions, substitutions))
        prev_row = curr_row

    return prev_row[-1]


def similarity(a: str, b: str) -> float:
    """Normalized edit-distance similarity in [0, 1]; 1.0 means identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / longest


def normalize_name(name: str) -> str:
    """Lowercase and collapse `-`, `_` and `.` separators into single spaces."""
    for separator in "-_.":
        name = name.replace(separator, " ")
    return " ".join(name.lower().split())


def compute_confidence(function_name: str, section: DocSection) -> float:
    """Best similarity of a function name against a section's id and title."""
    fn_name = normalize_name(function_name)
    confidence = similarity(fn_name, normalize_name(section.id))
    if section.title:
        confidence = max(confidence, similarity(fn_name, normalize_name(section.title)))
    return confidence


def find_candidates(
    entities: Sequence[CodeEntity],
    sections: Sequence[DocSection],
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> list[CandidateLink]:
    """Propose at most one section for every function without a doc id.

    Only sections no function links to are considered. Ties keep the
    first section encountered. Results are sorted by descending confidence.
    """
    linked = {e.doc_id for e in entities if e.doc_id is not None}
    unlinked_sections = [s for s in sections if s.id not in linked]

    candidates: list[CandidateLink] = []
    for index, entity in enumerate(entities):
        if entity.doc_id is not None:
            continue

        best: CandidateLink | None = None
        for section in unlinked_sections:
            confidence = compute_confidence(entity.name, section)
            if confidence < min_confidence:
                continue
            if best is None or confidence > best.confidence:
                best = CandidateLink(
                    entity_index=index,
                    function_name=entity.name,
                    location=entity.location,
                    section_id=section.id,
                    section_title=section.display_name,
                    confidence=confidence,
                )

        if best is not None:
            candidates.append(best)

    # sorted() is stable, so equal confidences keep entity order
    return sorted(candidates, key=lambda c: c.confidence, reverse=True)
