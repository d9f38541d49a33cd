"""Data models for similar record ranking."""

from .record import (
    IssueFeatures,
    IssueFeaturesModel,
    Post,
    PostModel,
    Record,
    StoredRecord,
    RECORD_MODELS,
)
from .result import Match, RankingResult, SimilarRecord

__all__ = [
    "Record",
    "Post",
    "IssueFeatures",
    "StoredRecord",
    "PostModel",
    "IssueFeaturesModel",
    "RECORD_MODELS",
    "Match",
    "RankingResult",
    "SimilarRecord",
]
