"""Test sequential ranking and the partition/merge helpers."""

import pytest

from similar_records.core.cancellation import CancellationToken
from similar_records.core.exceptions import (
    InvalidRecordError,
    RankingCancelledError,
    ValidationError,
)
from similar_records.core.ranker import RELEVANCE_THRESHOLD, merge_partials, partition, rank
from similar_records.models.record import Post
from similar_records.models.result import Match, RankingResult


class TestRank:
    """Test the sequential ranker."""

    def test_finds_near_duplicate(self, source_post, candidate_posts):
        """The near-duplicate post ranks first and the unrelated one is dropped."""
        result = rank(source_post, candidate_posts, 1)

        assert len(result.matches) == 1
        assert result.matches[0].candidate.title == "Deno.kill on windows"
        assert result.matches[0].score > RELEVANCE_THRESHOLD

    def test_unrelated_post_is_filtered(self, source_post, candidate_posts):
        """Candidates at or below the threshold never appear."""
        result = rank(source_post, candidate_posts, 10)

        assert [m.candidate.title for m in result.matches] == ["Deno.kill on windows"]

    def test_score_exactly_at_threshold_is_excluded(self):
        """A candidate scoring exactly 0.5 is not similar enough."""
        query = Post(title="cat", content="dog")
        candidate = Post(title="cat", content="xyz")

        result = rank(query, [candidate], 5)

        assert result.matches == []

    def test_score_just_above_threshold_is_included(self):
        """A candidate scoring just over 0.5 is reported."""
        query = Post(title="a" * 101, content="")
        candidate = Post(title="a" * 51 + "b" * 50, content="")

        result = rank(query, [candidate], 5)

        assert len(result.matches) == 1
        assert result.matches[0].score == pytest.approx(51 / 101)

    def test_results_sorted_descending(self, graded_query, graded_posts):
        """Matches come back best first."""
        result = rank(graded_query, graded_posts, 10)
        scores = [match.score for match in result.matches]

        assert len(scores) == 10
        assert scores == sorted(scores, reverse=True)
        assert scores[0] == 1.0
        assert scores[-1] == pytest.approx(0.7)

    def test_top_n_truncates(self, graded_query, graded_posts):
        """Only the top_n best matches are returned."""
        result = rank(graded_query, graded_posts, 3)

        assert [m.score for m in result.matches] == pytest.approx([1.0, 29 / 30, 28 / 30])

    def test_result_length_is_min_of_top_n_and_matches(self, graded_query, graded_posts):
        """Asking for more than exists returns every match."""
        unrelated = [Post(title="zzz", content="qqq")] * 5

        result = rank(graded_query, graded_posts + unrelated, 50)

        assert len(result.matches) == 10

    def test_top_n_zero(self, graded_query, graded_posts):
        """A zero limit yields no matches."""
        assert rank(graded_query, graded_posts, 0).matches == []

    def test_negative_top_n(self, graded_query, graded_posts):
        """A negative limit is rejected."""
        with pytest.raises(ValidationError):
            rank(graded_query, graded_posts, -1)

    def test_invalid_query(self, candidate_posts):
        """A query without text is rejected before scoring."""
        with pytest.raises(InvalidRecordError):
            rank(Post(title="", content=""), candidate_posts, 5)

    def test_empty_candidates_score_low(self, graded_query):
        """Empty candidates are filtered out rather than rejected."""
        result = rank(graded_query, [Post(), Post(title="", content="")], 5)

        assert result.matches == []

    def test_empty_candidate_list(self, graded_query):
        """No candidates means no matches."""
        result = rank(graded_query, [], 5)

        assert result.matches == []
        assert result.process_time_ms >= 0.0

    def test_ties_keep_input_order(self):
        """Equal scores keep the order the candidates arrived in."""
        query = Post(title="abcd", content="")
        first = Post(title="abcx", content="one")
        second = Post(title="abcy", content="two")

        result = rank(query, [first, second], 5)

        assert [m.candidate for m in result.matches] == [first, second]

    def test_cancelled_before_scoring(self, graded_query, graded_posts):
        """A token fired up front stops the ranking with no result."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(RankingCancelledError):
            rank(graded_query, graded_posts, 3, token)

    def test_reports_processing_time(self, graded_query, graded_posts):
        """Processing time is measured in milliseconds."""
        result = rank(graded_query, graded_posts, 3)

        assert isinstance(result.process_time_ms, float)
        assert result.process_time_ms >= 0.0


class TestPartition:
    """Test splitting candidates into contiguous chunks."""

    def test_chunk_size_is_ceiling(self):
        """Chunks hold ceil(n / workers) items, order preserved."""
        chunks = partition(list(range(10)), 4)

        assert chunks == [[0, 1, 2], [3, 4, 5], [6, 7, 8], [9]]

    def test_never_more_chunks_than_workers(self):
        """Small inputs produce fewer chunks than workers."""
        assert partition([1, 2], 8) == [[1], [2]]
        assert partition(list(range(9)), 4) == [[0, 1, 2], [3, 4, 5], [6, 7, 8]]

    def test_single_worker(self):
        """One worker gets everything."""
        assert partition([1, 2, 3], 1) == [[1, 2, 3]]

    def test_empty_input(self):
        """Nothing to split yields no chunks."""
        assert partition([], 4) == []

    @pytest.mark.parametrize("workers", [0, -2, 1.5])
    def test_invalid_worker_count(self, workers):
        """Worker counts must be positive integers."""
        with pytest.raises(ValidationError):
            partition([1, 2, 3], workers)


class TestMergePartials:
    """Test merging partition results."""

    def test_merges_sorts_and_truncates(self):
        """Partial rankings are merged into one global top_n."""
        a, b, c, d = (Post(title=t) for t in "abcd")
        partials = [
            RankingResult(matches=[Match(a, 0.9), Match(b, 0.6)], process_time_ms=2.0),
            RankingResult(matches=[Match(c, 0.95), Match(d, 0.7)], process_time_ms=4.0),
        ]

        result = merge_partials(partials, 3)

        assert [m.candidate for m in result.matches] == [c, a, d]

    def test_processing_time_is_mean(self):
        """Reported time is the average over partitions, not the sum."""
        partials = [
            RankingResult(process_time_ms=2.0),
            RankingResult(process_time_ms=4.0),
            RankingResult(process_time_ms=9.0),
        ]

        assert merge_partials(partials, 5).process_time_ms == pytest.approx(5.0)

    def test_no_partials(self):
        """Merging nothing gives an empty result."""
        result = merge_partials([], 5)

        assert result.matches == []
        assert result.process_time_ms == 0.0
