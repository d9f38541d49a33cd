"""Ranking result data models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .record import Record


@dataclass
class Match:
    """
    Candidate paired with its similarity score.

    Attributes:
        candidate: The matched candidate (a record or a stored record)
        score: Weighted similarity score (0.0-1.0, higher is more similar)
    """
    candidate: Any
    score: float

    def __post_init__(self) -> None:
        """Validate match."""
        if not 0.0 <= self.score <= 1.0:
            raise ValueError("Score must be between 0.0 and 1.0")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        candidate = self.candidate
        if isinstance(candidate, Record):
            candidate = candidate.to_dict()
        elif hasattr(candidate, "record_id"):
            candidate = {"record_id": candidate.record_id, **candidate.record.to_dict()}
        return {"candidate": candidate, "score": round(self.score, 4)}


@dataclass
class RankingResult:
    """
    Ordered matches of one ranking call.

    Attributes:
        matches: Matches ordered by descending score
        process_time_ms: Time spent scoring, filtering and sorting, in milliseconds
    """
    matches: List[Match] = field(default_factory=list)
    process_time_ms: float = 0.0

    def __len__(self) -> int:
        return len(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "matches": [match.to_dict() for match in self.matches],
            "process_time_ms": round(self.process_time_ms, 3)
        }


@dataclass
class SimilarRecord:
    """
    Stored record found similar to a query.

    Attributes:
        record_id: Identifier of the stored record
        record: The stored record
        score: Similarity score (0.0-1.0, higher is more similar)
    """
    record_id: str
    record: Record
    score: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "record_id": self.record_id,
            "record": self.record.to_dict(),
            "score": round(self.score, 4)
        }
