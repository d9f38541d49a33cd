"""Pytest configuration and shared fixtures."""

import time
import pytest
from typing import List, Optional

from similar_records.api.service import SimilarityService
from similar_records.core.engine import RankingEngine
from similar_records.models.record import IssueFeatures, Post, StoredRecord


class ExplodingCandidate:
    """Candidate whose fields cannot be read."""

    def get_text(self, field: str) -> str:
        raise RuntimeError("boom")


class SlowCandidate:
    """Candidate that takes a while to read, for cancellation tests."""

    def __init__(self, text: str = "slow", delay: float = 0.01, reads: Optional[List[str]] = None):
        self.text = text
        self.delay = delay
        self.reads = reads

    def get_text(self, field: str) -> str:
        if self.reads is not None:
            self.reads.append(field)
        time.sleep(self.delay)
        return self.text


@pytest.fixture
def source_post() -> Post:
    """Create the post used as query in ranking tests."""
    return Post(
        title="Deno.kill not working on windows",
        content=(
            "Version: Deno 2.3.3\n"
            "OS: Windows 11\n\n"
            "Sending a SIGINT OS signal on windows like: Deno.kill(Deno.pid, 'SIGINT');\n"
            "Results in: TypeError: Windows only supports ctrl-c (SIGINT) and "
            "ctrl-break (SIGBREAK), but got SIGINT\n"
        )
    )


@pytest.fixture
def candidate_posts() -> List[Post]:
    """Create one near-duplicate and one unrelated post."""
    return [
        Post(
            title="Deno.kill on windows",
            content=(
                "Version: Deno 2.3.3\n"
                "OS: Windows 11\n\n"
                "Sending a SIGINT OS signal on windows like: Deno.kill(Deno.pid, 'SIGINT');\n"
                "Results in: TypeError: Windows only supports ctrl-c (SIGINT) and "
                "ctrl-break (SIGBREAK), but got SIGINT\n\n"
                "Same goes for SIGBREAK\n\n"
                "Registering event listeners with: "
                "Deno.addSignalListener('SIGINT', doSomething); Works correctly\n"
            )
        ),
        Post(
            title="denojs on termux like nodejs",
            content=(
                "We want a smooth download for Deno.js like Node.js, Python, etc., "
                "instead of downloading extra libraries on Termux. We seek a streamlined "
                "download process for Deno.js similar to that of Node.js and Python, "
                "rather than having to download additional libraries on Termux.\n"
            )
        ),
    ]


@pytest.fixture
def graded_posts() -> List[Post]:
    """Create ten posts drifting further from the graded query one step at a time."""
    title = "similar records ranking"
    content = "find near duplicate posts in a corpus"
    posts = [
        Post(
            title=title[:len(title) - i] + "x" * i,
            content=content[:len(content) - i] + "x" * i
        )
        for i in range(10)
    ]
    # Best matches last so that partitions see them out of order
    return list(reversed(posts))


@pytest.fixture
def graded_query() -> Post:
    """Create the query matching graded_posts[-1] exactly."""
    return Post(title="similar records ranking", content="find near duplicate posts in a corpus")


@pytest.fixture
def issue_records() -> List[StoredRecord]:
    """Create keyed issue reports."""
    return [
        StoredRecord(
            record_id="1",
            record=IssueFeatures(
                operation="Turn on the switch",
                expected_behavior="The device is turned on",
                actual_behavior="The device is not turned on"
            )
        ),
        StoredRecord(
            record_id="2",
            record=IssueFeatures(
                operation="Turn off the switch",
                phenomenon="The device remains turned on instead if being turned on"
            )
        ),
    ]


@pytest.fixture
def issue_query() -> IssueFeatures:
    """Create an issue report close to record 1."""
    return IssueFeatures(
        operation="Turn on the switch",
        expected_behavior="The device turns on",
        actual_behavior="The device does not turn on"
    )


@pytest.fixture
async def engine():
    """Create a ranking engine for testing."""
    engine = RankingEngine(max_workers=4)
    yield engine
    await engine.close()


@pytest.fixture
async def similarity_service(issue_records):
    """Create and initialize a service preloaded with issue records."""
    async with SimilarityService.create(
        records=issue_records,
        max_workers=4,
        log_level="WARNING"  # Reduce test output
    ) as service:
        yield service
