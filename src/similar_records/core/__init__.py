"""Core engine components for similar record ranking."""

from .engine import RankingEngine
from .cancellation import CancellationToken
from .ranker import RELEVANCE_THRESHOLD, merge_partials, partition, rank
from .similarity import compute_field_weights, normalized_similarity, score_candidate
from .store import RecordStore
from .exceptions import (
    SimilarRecordsError,
    ValidationError,
    InvalidRecordError,
    RankingCancelledError,
    RankingTimeoutError,
    PartitionError,
    StoreError
)

__all__ = [
    "RankingEngine",
    "CancellationToken",
    "RecordStore",
    "RELEVANCE_THRESHOLD",
    "rank",
    "partition",
    "merge_partials",
    "normalized_similarity",
    "compute_field_weights",
    "score_candidate",
    "SimilarRecordsError",
    "ValidationError",
    "InvalidRecordError",
    "RankingCancelledError",
    "RankingTimeoutError",
    "PartitionError",
    "StoreError"
]
