"""In-memory keyed record store."""

import logging
import threading
from typing import Dict, Iterable, List, Optional

from ..models.record import Record, StoredRecord
from ..utils.validators import validate_stored_record
from .exceptions import ValidationError

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Thread-safe mapping of record identifiers to records.

    Rankings read a snapshot taken under the lock, so writes made while a
    ranking runs never affect it.
    """

    def __init__(self, records: Optional[Iterable[StoredRecord]] = None):
        self._records: Dict[str, Record] = {}
        self._lock = threading.RLock()

        if records is not None:
            self.preload(records)

    def preload(self, records: Iterable[StoredRecord]) -> int:
        """
        Replace the store's contents, skipping invalid records.

        Args:
            records: Keyed records to load

        Returns:
            Number of records loaded
        """
        loaded: Dict[str, Record] = {}
        for stored in records:
            try:
                validate_stored_record(stored)
            except ValidationError as e:
                logger.warning(f"Skipping record: {str(e)}")
                continue
            loaded[stored.record_id] = stored.record

        with self._lock:
            self._records = loaded

        logger.info(f"Preloaded {len(loaded)} records")
        return len(loaded)

    def set_record(self, stored: StoredRecord) -> None:
        """
        Insert or replace a record.

        Raises:
            ValidationError: If the record has no identifier or no text
        """
        validate_stored_record(stored)
        with self._lock:
            self._records[stored.record_id] = stored.record

    def get_record(self, record_id: str) -> Optional[StoredRecord]:
        """Get a record by identifier, or None if it is not stored."""
        with self._lock:
            record = self._records.get(record_id)
        if record is None:
            return None
        return StoredRecord(record_id=record_id, record=record)

    def remove_record(self, record_id: str) -> bool:
        """Remove a record. Returns False if it was not stored."""
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def snapshot(self) -> List[StoredRecord]:
        """Copy the stored records in insertion order."""
        with self._lock:
            items = list(self._records.items())
        return [StoredRecord(record_id=record_id, record=record) for record_id, record in items]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return record_id in self._records
