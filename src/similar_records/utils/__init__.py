"""Utility modules for similar record ranking."""

from .validators import coerce_record, validate_stored_record, validate_top_n, validate_workers
from .logging_config import setup_logging

__all__ = [
    "coerce_record",
    "validate_stored_record",
    "validate_top_n",
    "validate_workers",
    "setup_logging",
]
