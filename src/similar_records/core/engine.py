"""Ranking engine running sequential and partitioned rankings on a thread pool."""

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

from ..models.record import Record
from ..models.result import RankingResult
from ..utils.validators import validate_top_n, validate_workers
from .cancellation import CancellationToken
from .exceptions import PartitionError, RankingCancelledError
from .ranker import merge_partials, partition, rank
from .similarity import compute_field_weights

logger = logging.getLogger(__name__)

_SIBLING_FAILED = "Sibling partition failed"
_TASK_CANCELLED = "Ranking task was cancelled"


class RankingEngine:
    """
    Fuzzy ranking engine for multi-field text records.

    Runs rankings in a worker pool so the event loop stays free, either as a
    single sequential pass or split into partitions scored side by side.
    """

    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize ranking engine.

        Args:
            max_workers: Number of worker threads (defaults to the CPU count)
        """
        if max_workers is None:
            max_workers = os.cpu_count() or 1
        validate_workers(max_workers)
        self.max_workers = max_workers

        self.executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="ranker"
        )

        # State tracking
        self._stats = {
            'total_rankings': 0,
            'parallel_rankings': 0,
            'cancelled_rankings': 0,
            'failed_rankings': 0,
            'avg_process_time_ms': 0.0
        }
        self._closed = False

        logger.info(f"Ranking engine initialized with {self.max_workers} workers")

    async def rank(
        self,
        query: Record,
        candidates: Sequence[Any],
        top_n: int,
        cancel_token: Optional[CancellationToken] = None
    ) -> RankingResult:
        """
        Rank candidates in one sequential pass on a worker thread.

        Args:
            query: Query record
            candidates: Candidates to score
            top_n: Maximum number of matches
            cancel_token: Caller's cancellation token

        Returns:
            Ranking result

        Raises:
            ValidationError: If top_n is invalid
            InvalidRecordError: If the query has no text
            RankingCancelledError: If cancelled before or while scoring
        """
        loop = asyncio.get_running_loop()

        with CancellationToken.linked(cancel_token) as token:
            try:
                result = await loop.run_in_executor(
                    self.executor, rank, query, list(candidates), top_n, token
                )
            except asyncio.CancelledError:
                # The worker keeps running unless its token fires
                token.cancel(_TASK_CANCELLED)
                self._stats['cancelled_rankings'] += 1
                raise
            except RankingCancelledError:
                self._stats['cancelled_rankings'] += 1
                raise
            except Exception:
                self._stats['failed_rankings'] += 1
                raise

        self._update_stats(result)
        logger.debug(
            f"Ranked {len(candidates)} candidates: {len(result)} matches "
            f"in {result.process_time_ms:.2f}ms"
        )
        return result

    async def rank_parallel(
        self,
        query: Record,
        candidates: Sequence[Any],
        top_n: int,
        cancel_token: Optional[CancellationToken] = None,
        workers: Optional[int] = None
    ) -> RankingResult:
        """
        Rank candidates split into partitions scored concurrently.

        Each partition is ranked on its own worker with the same query and
        top_n; the partial rankings are merged and truncated again.

        Args:
            query: Query record
            candidates: Candidates to score
            top_n: Maximum number of matches
            cancel_token: Caller's cancellation token
            workers: Number of partitions (defaults to max_workers)

        Returns:
            Ranking result whose processing time is the partitions' mean

        Raises:
            ValidationError: If top_n or workers is invalid
            InvalidRecordError: If the query has no text
            RankingCancelledError: If cancelled before or while scoring
            PartitionError: If any partition fails
        """
        with CancellationToken.linked(cancel_token) as token:
            try:
                validate_top_n(top_n)
                compute_field_weights(query)
                token.raise_if_cancelled()

                chunks = partition(
                    list(candidates), self.max_workers if workers is None else workers
                )
                if not chunks or top_n == 0:
                    return RankingResult()

                partials = await self._run_partitions(
                    query, chunks, top_n, token, cancel_token
                )
            except asyncio.CancelledError:
                token.cancel(_TASK_CANCELLED)
                self._stats['cancelled_rankings'] += 1
                raise
            except RankingCancelledError:
                self._stats['cancelled_rankings'] += 1
                raise
            except Exception:
                self._stats['failed_rankings'] += 1
                raise

        result = merge_partials(partials, top_n)
        self._stats['parallel_rankings'] += 1
        self._update_stats(result)

        logger.debug(
            f"Ranked {len(candidates)} candidates in {len(chunks)} partitions: "
            f"{len(result)} matches, {result.process_time_ms:.2f}ms per partition"
        )
        return result

    async def _run_partitions(
        self,
        query: Record,
        chunks: List[Sequence[Any]],
        top_n: int,
        token: CancellationToken,
        cancel_token: Optional[CancellationToken]
    ) -> List[RankingResult]:
        """Fan partitions out to the pool and wait for all of them."""
        loop = asyncio.get_running_loop()
        futures = [
            loop.run_in_executor(self.executor, rank, query, chunk, top_n, token)
            for chunk in chunks
        ]

        _, pending = await asyncio.wait(futures, return_when=asyncio.FIRST_EXCEPTION)
        if pending:
            # A partition failed: stop the others before collecting them
            token.cancel(_SIBLING_FAILED)
        outcomes = await asyncio.gather(*futures, return_exceptions=True)

        failures = [
            (index, outcome) for index, outcome in enumerate(outcomes)
            if isinstance(outcome, BaseException)
        ]
        if not failures:
            return list(outcomes)

        # Caller cancellation wins over failures it caused
        if cancel_token is not None and cancel_token.cancelled:
            cancel_token.raise_if_cancelled()

        index, error = next(
            (
                (index, outcome) for index, outcome in failures
                if not isinstance(outcome, RankingCancelledError) or token.reason != _SIBLING_FAILED
            ),
            failures[0]
        )
        if isinstance(error, RankingCancelledError):
            raise error

        raise PartitionError(
            f"Partition {index} of {len(chunks)} failed: {str(error)}",
            partition_index=index
        ) from error

    def _update_stats(self, result: RankingResult) -> None:
        """Update ranking performance statistics."""
        self._stats['total_rankings'] += 1

        # Update rolling average
        total_rankings = self._stats['total_rankings']
        current_avg = self._stats['avg_process_time_ms']
        self._stats['avg_process_time_ms'] = (
            (current_avg * (total_rankings - 1) + result.process_time_ms) / total_rankings
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics."""
        return {
            **self._stats,
            'max_workers': self.max_workers
        }

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check of the ranking engine."""
        return {
            'status': 'closed' if self._closed else 'healthy',
            'is_ready': not self._closed,
            'stats': self.get_stats(),
            'timestamp': asyncio.get_running_loop().time()
        }

    async def close(self) -> None:
        """Clean up resources."""
        if not self._closed:
            self.executor.shutdown(wait=True)
            self._closed = True
        logger.info("Ranking engine closed")
