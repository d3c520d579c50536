"""Per-item download execution: identity check, fetch, write, commit."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from download_scheduler.http.fetcher import FetchError
from download_scheduler.models import TaskOutcome, TaskResult, WorkItem
from download_scheduler.retry_policy import RetryAction, decide_retry
from download_scheduler.storage.identity import IdentityStore
from download_scheduler.storage.paths import ensure_parents

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".part"


class Fetcher(Protocol):
    """Transport contract used by the executor."""

    def fetch(self, url: str) -> bytes:
        """Return the body of ``url`` or raise a ``FetchError`` subclass."""
        raise NotImplementedError


class TaskExecutor:
    """Runs one work item to completion, retrying transient network failures."""

    def __init__(  # noqa: PLR0913
        self,
        *,
        destination_root: Path,
        fetcher: Fetcher,
        identity_store: IdentityStore | None = None,
        ignore_missing_assets: bool = False,
        max_attempts: int = 3,
        retry_backoff_seconds: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.destination_root = destination_root
        self.fetcher = fetcher
        self.identity_store = identity_store or IdentityStore()
        self.ignore_missing_assets = ignore_missing_assets
        self.max_attempts = max_attempts
        self.retry_backoff_seconds = retry_backoff_seconds
        self._sleep = sleep

    def resolve_destination(self, item: WorkItem) -> Path:
        """Return the absolute destination for ``item`` inside the destination root."""

        relative = Path(item.destination_path)
        if relative.is_absolute():
            raise ValueError(f"Destination must be relative: {item.destination_path!r}")
        root = self.destination_root.resolve()
        destination = (root / relative).resolve()
        if destination == root or not destination.is_relative_to(root):
            raise ValueError(
                f"Destination escapes the destination root: {item.destination_path!r}",
            )
        return destination

    def run(self, item: WorkItem) -> TaskResult:
        destination = self.resolve_destination(item)
        if self.identity_store.is_up_to_date(destination, item.identifier):
            logger.info("File %s is already up-to-date.", item.destination_path)
            return TaskResult(item=item, outcome=TaskOutcome.SKIPPED, attempts=0)

        attempt = 0
        while True:
            attempt += 1
            try:
                self._download(item, destination)
            except FetchError as exc:
                decision = decide_retry(
                    failure_class=exc.failure_class,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    ignore_missing_assets=self.ignore_missing_assets,
                )
                if decision.action == RetryAction.RETRY:
                    logger.warning(
                        "Could not download %s, waiting %.1fs before retrying "
                        "(attempt #%d): %s %s",
                        item.destination_path,
                        self.retry_backoff_seconds,
                        attempt,
                        exc,
                        decision.reason,
                    )
                    self._sleep(self.retry_backoff_seconds)
                    continue
                if decision.action == RetryAction.SKIP:
                    logger.warning("Missing asset: %s. %s", item.destination_path, decision.reason)
                    return TaskResult(item=item, outcome=TaskOutcome.MISSING, attempts=attempt)
                logger.error("Giving up on %s: %s", item.destination_path, decision.reason)
                raise
            return TaskResult(item=item, outcome=TaskOutcome.DOWNLOADED, attempts=attempt)

    def _download(self, item: WorkItem, destination: Path) -> None:
        logger.info("Fetching %s", item.destination_path)
        content = self.fetcher.fetch(item.source_url)
        ensure_parents(destination)
        logger.info("Writing %s", item.destination_path)
        _write_bytes_atomic(destination, content)
        self.identity_store.commit(destination, item.identifier)


def _write_bytes_atomic(path: Path, content: bytes) -> None:
    tmp = tempfile.NamedTemporaryFile(  # noqa: SIM115
        dir=path.parent,
        prefix=f"{path.name}.",
        suffix=TEMP_SUFFIX,
        delete=False,
    )
    tmp_path = Path(tmp.name)
    try:
        with tmp:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
