"""Input validation utilities."""

from typing import Any, Mapping, Type, Union

import pydantic

from ..models.record import Record, StoredRecord, RECORD_MODELS
from ..core.exceptions import ValidationError


def validate_top_n(top_n: int) -> None:
    """
    Validate a result limit.

    Raises:
        ValidationError: If top_n is not a non-negative integer
    """
    if isinstance(top_n, bool) or not isinstance(top_n, int):
        raise ValidationError(f"top_n must be an integer, got {type(top_n).__name__}")

    if top_n < 0:
        raise ValidationError("top_n must not be negative")


def validate_workers(workers: int) -> None:
    """
    Validate a worker count hint.

    Raises:
        ValidationError: If workers is not a positive integer
    """
    if isinstance(workers, bool) or not isinstance(workers, int):
        raise ValidationError(f"Worker count must be an integer, got {type(workers).__name__}")

    if workers <= 0:
        raise ValidationError("Worker count must be positive")


def validate_stored_record(stored: StoredRecord) -> None:
    """
    Validate a record before it enters a store.

    Args:
        stored: Keyed record to validate

    Raises:
        ValidationError: If the record is invalid
    """
    if not isinstance(stored, StoredRecord):
        raise ValidationError("Invalid stored record type")

    if not stored.record_id or not stored.record_id.strip():
        raise ValidationError("Record ID is required")

    if not isinstance(stored.record, Record):
        raise ValidationError(f"Invalid record type: {type(stored.record).__name__}")

    if not stored.record.has_text():
        raise ValidationError(f"Record {stored.record_id} has no text")


def coerce_record(data: Union[Record, Mapping[str, Any]], record_type: Type[Record]) -> Record:
    """
    Turn a record or a field mapping into a record of ``record_type``.

    Mappings are checked with the pydantic model registered for the type.

    Raises:
        ValidationError: If the data cannot be turned into a record
    """
    if isinstance(data, Record):
        if not isinstance(data, record_type):
            raise ValidationError(
                f"Expected {record_type.__name__}, got {type(data).__name__}"
            )
        return data

    if not isinstance(data, Mapping):
        raise ValidationError(f"Cannot build a record from {type(data).__name__}")

    model = RECORD_MODELS.get(record_type)
    try:
        if model is None:
            return record_type.from_mapping(data)
        return model.model_validate(dict(data)).to_record()
    except (pydantic.ValidationError, ValueError, TypeError) as e:
        raise ValidationError(f"Record validation failed: {str(e)}") from e
