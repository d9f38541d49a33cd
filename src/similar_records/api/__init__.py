"""Service layer for similar record lookups."""

from .service import SimilarityService

__all__ = ["SimilarityService"]
