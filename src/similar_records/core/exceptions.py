"""Custom exceptions for similar record ranking."""

from typing import Optional


class SimilarRecordsError(Exception):
    """Base exception for similar record operations."""
    pass


class ValidationError(SimilarRecordsError):
    """Exception raised during input validation."""
    pass


class InvalidRecordError(SimilarRecordsError):
    """Exception raised when a query record carries no usable text."""
    pass


class RankingCancelledError(SimilarRecordsError):
    """Exception raised when a ranking call is cancelled mid-operation."""
    pass


class RankingTimeoutError(RankingCancelledError):
    """Exception raised when a ranking call exceeds its timeout."""
    pass


class PartitionError(SimilarRecordsError):
    """Exception raised when one partition of a parallel ranking fails."""

    def __init__(self, message: str, partition_index: Optional[int] = None):
        super().__init__(message)
        self.partition_index = partition_index


class StoreError(SimilarRecordsError):
    """Exception raised during record store operations."""
    pass
