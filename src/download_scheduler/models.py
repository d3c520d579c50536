"""Domain models for download work items and run accounting."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class FailureClass(str, Enum):
    """Normalized fetch failure classes used by retry policy."""

    UNREACHABLE = "unreachable"
    NOT_FOUND = "not_found"
    FETCH_FAILED = "fetch_failed"


class TaskOutcome(str, Enum):
    """Terminal state of one work item that did not fail the run."""

    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    MISSING = "missing"


@dataclass(frozen=True, slots=True)
class WorkItem:
    """One file to materialize under the destination root."""

    destination_path: str
    source_url: str
    identifier: str


@dataclass(slots=True)
class TaskResult:
    """Executor result for one work item."""

    item: WorkItem
    outcome: TaskOutcome
    attempts: int


@dataclass(slots=True)
class RunSummary:
    """Aggregate scheduler counters for CLI reporting."""

    processed: int = 0
    downloaded: int = 0
    skipped: int = 0
    missing: int = 0
    retried: int = 0

    def record(self, result: TaskResult) -> None:
        self.processed += 1
        if result.outcome == TaskOutcome.DOWNLOADED:
            self.downloaded += 1
        elif result.outcome == TaskOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.missing += 1
        self.retried += max(0, result.attempts - 1)

    @classmethod
    def merge(cls, summaries: Iterable[RunSummary]) -> RunSummary:
        total = cls()
        for summary in summaries:
            total.processed += summary.processed
            total.downloaded += summary.downloaded
            total.skipped += summary.skipped
            total.missing += summary.missing
            total.retried += summary.retried
        return total
