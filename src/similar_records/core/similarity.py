"""Normalized edit-distance similarity and per-field weighting."""

from typing import Any, Dict

from rapidfuzz.distance import Levenshtein

from ..models.record import Record
from .exceptions import InvalidRecordError


def normalized_similarity(a: str, b: str) -> float:
    """
    Compute the normalized Levenshtein similarity of two strings.

    Distance is counted in Unicode code points, so multi-byte characters
    count as one edit.

    Args:
        a: First string
        b: Second string

    Returns:
        Similarity in [0.0, 1.0], 1.0 for identical strings
    """
    if a == b:
        return 1.0

    distance = Levenshtein.distance(a, b)
    return 1.0 - distance / max(len(a), len(b))


def compute_field_weights(record: Record) -> Dict[str, float]:
    """
    Weight each present field by its share of the record's characters.

    Absent fields are left out of the mapping; empty fields get 0.0.

    Args:
        record: Reference record, usually the query

    Returns:
        Mapping of field name to weight, summing to 1.0

    Raises:
        InvalidRecordError: If the record has no characters at all
    """
    counts = {field: len(text) for field, text in record.present_fields()}
    total_chars = sum(counts.values())

    if total_chars == 0:
        raise InvalidRecordError(f"{type(record).__name__} has no text to compare")

    return {field: count / total_chars for field, count in counts.items()}


def score_candidate(query: Record, weights: Dict[str, float], candidate: Any) -> float:
    """
    Score a candidate against the query using the query's field weights.

    Only the fields in ``weights`` are compared. A field the candidate lacks
    is compared against the empty string.

    Args:
        query: Query record
        weights: Field weights computed from the query
        candidate: Anything exposing ``get_text(field)``

    Returns:
        Weighted similarity in [0.0, 1.0]
    """
    score = 0.0
    for field, weight in weights.items():
        candidate_text = candidate.get_text(field) or ""
        score += weight * normalized_similarity(query.get_text(field) or "", candidate_text)

    # float sums can drift just past 1.0
    return min(score, 1.0)
