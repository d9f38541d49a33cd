"""High-level API service for similar record lookups."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Iterable, List, Mapping, Optional, Sequence, Type, Union

from ..core.cancellation import CancellationToken
from ..core.engine import RankingEngine
from ..core.exceptions import RankingTimeoutError, SimilarRecordsError, StoreError
from ..core.store import RecordStore
from ..models.record import IssueFeatures, Record, StoredRecord
from ..models.result import RankingResult, SimilarRecord
from ..utils.logging_config import setup_logging
from ..utils.validators import coerce_record

logger = logging.getLogger(__name__)

RecordInput = Union[Record, Mapping[str, Any]]


class SimilarityService:
    """
    High-level service interface for finding similar records.

    Owns a ranking engine and a record store, and adds lifecycle management,
    timeouts and error reporting on top of them.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        default_top_n: int = 5,
        record_type: Type[Record] = IssueFeatures,
        timeout: Optional[float] = None,
        log_level: str = "INFO"
    ):
        """
        Initialize similarity service.

        Args:
            max_workers: Number of worker threads (defaults to the CPU count)
            default_top_n: Result limit used when a lookup gives none
            record_type: Record type kept in the store
            timeout: Default timeout in seconds for lookups (None = no timeout)
            log_level: Logging level
        """
        # Setup logging
        setup_logging(level=log_level)

        self.default_top_n = default_top_n
        self.record_type = record_type
        self.timeout = timeout

        self.engine = RankingEngine(max_workers=max_workers)
        self.store = RecordStore()

        self._initialized = False
        logger.info("Similarity service initialized")

    async def initialize(self, records: Optional[Iterable[StoredRecord]] = None) -> None:
        """
        Initialize the service and optionally preload records.

        Args:
            records: Keyed records to load into the store
        """
        if records is not None:
            self.store.preload(records)

        self._initialized = True
        logger.info(f"Service initialization complete with {len(self.store)} records")

    def set_record(self, record_id: str, record: RecordInput) -> None:
        """
        Insert or replace a stored record.

        Raises:
            ValidationError: If the record is invalid
        """
        self._check_initialized()
        self.store.set_record(
            StoredRecord(record_id=record_id, record=coerce_record(record, self.record_type))
        )
        logger.debug(f"Stored record: {record_id}")

    def get_record(self, record_id: str) -> Optional[StoredRecord]:
        """Get a stored record by identifier."""
        self._check_initialized()
        return self.store.get_record(record_id)

    def remove_record(self, record_id: str) -> bool:
        """Remove a stored record. Returns False if it was not stored."""
        self._check_initialized()
        removed = self.store.remove_record(record_id)
        if removed:
            logger.debug(f"Removed record: {record_id}")
        return removed

    async def find_similar(
        self,
        record: RecordInput,
        top_n: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> List[SimilarRecord]:
        """
        Find stored records similar to the given one.

        Args:
            record: Query record or field mapping
            top_n: Maximum results (defaults to default_top_n)
            cancel_token: Caller's cancellation token
            timeout: Timeout in seconds (defaults to the service timeout)

        Returns:
            Similar records ordered by descending score

        Raises:
            SimilarRecordsError: If the lookup fails, is cancelled or times out
        """
        self._check_initialized()
        query = coerce_record(record, self.record_type)
        limit = self.default_top_n if top_n is None else top_n

        result = await self._with_timeout(
            lambda token: self.engine.rank_parallel(query, self.store.snapshot(), limit, token),
            cancel_token,
            timeout
        )

        similar = [
            SimilarRecord(
                record_id=match.candidate.record_id,
                record=match.candidate.record,
                score=match.score
            )
            for match in result.matches
        ]
        logger.debug(f"Lookup returned {len(similar)} similar records")
        return similar

    async def rank(
        self,
        query: RecordInput,
        candidates: Sequence[Record],
        top_n: Optional[int] = None,
        parallel: bool = True,
        cancel_token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None,
        workers: Optional[int] = None
    ) -> RankingResult:
        """
        Rank a caller-supplied candidate list against a query.

        Args:
            query: Query record or field mapping of the candidates' type
            candidates: Candidate records
            top_n: Maximum matches (defaults to default_top_n)
            parallel: Whether to partition the candidates across workers
            cancel_token: Caller's cancellation token
            timeout: Timeout in seconds (defaults to the service timeout)
            workers: Partition count hint for the parallel form

        Returns:
            Ranking result
        """
        record_type = self.record_type
        if candidates and isinstance(candidates[0], Record):
            record_type = type(candidates[0])
        query_record = coerce_record(query, record_type)
        limit = self.default_top_n if top_n is None else top_n

        if parallel:
            return await self._with_timeout(
                lambda token: self.engine.rank_parallel(query_record, candidates, limit, token, workers),
                cancel_token,
                timeout
            )

        return await self._with_timeout(
            lambda token: self.engine.rank(query_record, candidates, limit, token),
            cancel_token,
            timeout
        )

    async def _with_timeout(self, run, cancel_token: Optional[CancellationToken], timeout: Optional[float]):
        """Run a ranking with a call-scoped token that fires on timeout."""
        timeout = self.timeout if timeout is None else timeout
        loop = asyncio.get_running_loop()

        with CancellationToken.linked(cancel_token) as token:
            handle = None
            if timeout is not None:
                handle = loop.call_later(
                    timeout,
                    token.cancel,
                    f"Ranking timed out after {timeout}s",
                    RankingTimeoutError
                )

            try:
                return await run(token)
            except SimilarRecordsError as e:
                logger.error(f"Ranking failed: {str(e)}")
                raise
            except Exception as e:
                logger.error(f"Ranking failed: {str(e)}")
                raise SimilarRecordsError(f"Ranking failed: {str(e)}") from e
            finally:
                if handle is not None:
                    handle.cancel()

    async def get_stats(self) -> Dict[str, Any]:
        """Get service and engine statistics."""
        self._check_initialized()

        return {
            'service': {
                'initialized': self._initialized,
                'record_type': self.record_type.__name__,
                'total_records': len(self.store),
                'default_top_n': self.default_top_n
            },
            'engine': self.engine.get_stats()
        }

    async def health_check(self) -> Dict[str, Any]:
        """Perform comprehensive health check."""
        if not self._initialized:
            return {
                'status': 'not_initialized',
                'message': 'Service not initialized'
            }

        return await self.engine.health_check()

    def _check_initialized(self) -> None:
        """Check if service is properly initialized."""
        if not self._initialized:
            raise StoreError("Service not initialized. Call initialize() first.")

    async def close(self) -> None:
        """Clean up resources and close the service."""
        await self.engine.close()
        self._initialized = False
        logger.info("Service closed successfully")

    @classmethod
    @asynccontextmanager
    async def create(
        cls,
        records: Optional[Iterable[StoredRecord]] = None,
        **kwargs
    ) -> AsyncIterator['SimilarityService']:
        """
        Create and manage service lifecycle with context manager.

        Args:
            records: Keyed records to preload
            **kwargs: Additional service configuration

        Yields:
            Initialized similarity service
        """
        service = cls(**kwargs)

        try:
            await service.initialize(records)
            yield service
        finally:
            await service.close()
