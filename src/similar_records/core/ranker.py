"""Sequential ranking and the partition/merge steps of parallel ranking."""

import math
import time
from typing import Any, List, Optional, Sequence

import numpy as np

from ..models.record import Record
from ..models.result import Match, RankingResult
from ..utils.validators import validate_top_n, validate_workers
from .cancellation import CancellationToken
from .similarity import compute_field_weights, score_candidate

# A candidate must score strictly above this to be reported.
RELEVANCE_THRESHOLD = 0.5


def rank(
    query: Record,
    candidates: Sequence[Any],
    top_n: int,
    cancel_token: Optional[CancellationToken] = None
) -> RankingResult:
    """
    Rank candidates by weighted similarity to the query.

    Args:
        query: Query record; its field lengths define the weights
        candidates: Records (or anything exposing ``get_text``) to score
        top_n: Maximum number of matches to return
        cancel_token: Checked up front and before every candidate

    Returns:
        Matches scoring above the relevance threshold, best first

    Raises:
        ValidationError: If top_n is invalid
        InvalidRecordError: If the query has no text
        RankingCancelledError: If the token fires while scoring
    """
    validate_top_n(top_n)

    start = time.perf_counter()
    weights = compute_field_weights(query)
    matches: List[Match] = []

    if cancel_token is not None:
        cancel_token.raise_if_cancelled()

    for candidate in candidates:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        score = score_candidate(query, weights, candidate)
        if score > RELEVANCE_THRESHOLD:
            matches.append(Match(candidate=candidate, score=score))

    matches.sort(key=lambda match: match.score, reverse=True)
    if len(matches) > top_n:
        matches = matches[:top_n]

    return RankingResult(
        matches=matches,
        process_time_ms=(time.perf_counter() - start) * 1000
    )


def partition(candidates: Sequence[Any], workers: int) -> List[Sequence[Any]]:
    """
    Split candidates into contiguous chunks, one per worker.

    Chunks hold ``ceil(len(candidates) / workers)`` items (the last may hold
    fewer), so there are never more chunks than workers.
    """
    validate_workers(workers)

    if not candidates:
        return []

    size = math.ceil(len(candidates) / workers)
    return [candidates[i:i + size] for i in range(0, len(candidates), size)]


def merge_partials(partials: Sequence[RankingResult], top_n: int) -> RankingResult:
    """
    Merge per-partition results into one ranking.

    The reported processing time is the mean of the partitions' times,
    since partitions run side by side.
    """
    matches = [match for partial in partials for match in partial.matches]
    matches.sort(key=lambda match: match.score, reverse=True)

    process_time_ms = 0.0
    if partials:
        process_time_ms = float(np.mean([partial.process_time_ms for partial in partials]))

    return RankingResult(matches=matches[:top_n], process_time_ms=process_time_ms)
