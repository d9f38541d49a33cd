"""
Similar Records

Weighted multi-field fuzzy matching for finding near-duplicate or related
records (blog posts, issue reports) in a corpus, ranked by normalized
Levenshtein similarity and scaled across worker threads.
"""

from .api.service import SimilarityService
from .core.cancellation import CancellationToken
from .core.engine import RankingEngine
from .core.ranker import RELEVANCE_THRESHOLD, rank
from .core.similarity import compute_field_weights, normalized_similarity, score_candidate
from .core.store import RecordStore
from .models.record import IssueFeatures, Post, Record, StoredRecord
from .models.result import Match, RankingResult, SimilarRecord

__version__ = "1.0.0"

__all__ = [
    "SimilarityService",
    "RankingEngine",
    "RecordStore",
    "CancellationToken",
    "RELEVANCE_THRESHOLD",
    "rank",
    "normalized_similarity",
    "compute_field_weights",
    "score_candidate",
    "Record",
    "Post",
    "IssueFeatures",
    "StoredRecord",
    "Match",
    "RankingResult",
    "SimilarRecord",
]
