"""Generate sample issue reports and posts with planted near-duplicates."""

import json
import random
from typing import List, Tuple

from similar_records.models.record import IssueFeatures, Post, StoredRecord


DEVICES = [
    "smart plug", "ceiling light", "air purifier", "robot vacuum",
    "thermostat", "door lock", "humidifier", "garage opener"
]

ACTIONS = [
    ("Turn on the {device}", "The {device} is turned on"),
    ("Turn off the {device}", "The {device} is turned off"),
    ("Schedule the {device} for 7am", "The {device} starts at 7am"),
    ("Rename the {device} in the app", "The new name is shown"),
    ("Share the {device} with a family member", "The family member can control it"),
    ("Update the {device} firmware", "The update completes"),
]

FAILURES = [
    "Nothing happens",
    "The app shows a network error",
    "The {device} responds after about a minute",
    "The app crashes",
    "The {device} goes offline",
]


def generate_issue(rng: random.Random) -> IssueFeatures:
    """Generate one random issue report."""
    device = rng.choice(DEVICES)
    operation, expected = rng.choice(ACTIONS)
    failure = rng.choice(FAILURES).format(device=device)

    return IssueFeatures(
        operation=operation.format(device=device),
        phenomenon=failure if rng.random() < 0.5 else None,
        expected_behavior=expected.format(device=device),
        actual_behavior=failure
    )


def reword(issue: IssueFeatures) -> IssueFeatures:
    """Make a lightly reworded copy of an issue, as a second reporter would."""
    return IssueFeatures(
        operation=issue.operation,
        phenomenon=issue.phenomenon,
        expected_behavior=issue.expected_behavior.replace("is turned", "turns"),
        actual_behavior=issue.actual_behavior.rstrip(".") + " again"
    )


def generate_issues(count: int = 200, seed: int = 7) -> List[StoredRecord]:
    """Generate keyed issue reports."""
    rng = random.Random(seed)
    return [
        StoredRecord(record_id=f"ISSUE-{i + 1:04d}", record=generate_issue(rng))
        for i in range(count)
    ]


def generate_posts(count: int = 1000, seed: int = 7) -> Tuple[Post, List[Post]]:
    """
    Generate a query post and candidates containing a few edited copies of it.

    Returns:
        Tuple of (query, candidates)
    """
    rng = random.Random(seed)
    words = [
        "deno", "windows", "signal", "kill", "process", "node", "python",
        "termux", "download", "library", "error", "listener", "version"
    ]

    def sentence(length: int) -> str:
        return " ".join(rng.choice(words) for _ in range(length))

    query = Post(title=sentence(6), content=sentence(60))
    candidates = [Post(title=sentence(6), content=sentence(60)) for _ in range(count)]

    for edits in range(1, 4):
        position = rng.randrange(count)
        candidates[position] = Post(
            title=query.title,
            content=query.content + " " + sentence(edits * 2)
        )

    return query, candidates


if __name__ == "__main__":
    issues = generate_issues(count=5)
    print(json.dumps([
        {"record_id": stored.record_id, **stored.record.to_dict()} for stored in issues
    ], indent=2))
