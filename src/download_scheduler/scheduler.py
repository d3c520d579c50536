"""Fixed-size pool of worker lanes draining a shared download queue."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Iterable

from download_scheduler.config import SchedulerSettings
from download_scheduler.executor import Fetcher, TaskExecutor
from download_scheduler.http.fetcher import HttpFetcher
from download_scheduler.models import RunSummary, TaskResult, WorkItem

logger = logging.getLogger(__name__)

FollowupDiscoverer = Callable[[WorkItem, TaskResult], Iterable[WorkItem]]


class WorkQueue:
    """FIFO of work items; ``pop`` is an atomic claim shared by all lanes."""

    def __init__(self, items: Iterable[WorkItem] = ()) -> None:
        self._items: deque[WorkItem] = deque(items)
        self._lock = threading.Lock()

    def push(self, item: WorkItem) -> None:
        with self._lock:
            self._items.append(item)

    def pop(self) -> WorkItem | None:
        """Claim the front item, or return None when the queue is empty."""

        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class DownloadScheduler:
    """Runs ``parallelism`` lanes that each pop and execute items until the queue is empty.

    Items may be enqueued while a run is in progress, typically by the
    ``followups`` callback, which receives every finished item and returns the
    items it discovered. A run ends when every lane has observed an empty
    queue, so enqueues from outside the running lanes are not waited for.

    The first fatal error raised by any lane is re-raised from :meth:`start`
    after all lanes have joined. Lanes that are still busy finish their current
    item but claim nothing further; unclaimed items stay queued.
    """

    def __init__(
        self,
        settings: SchedulerSettings,
        *,
        fetcher: Fetcher | None = None,
        followups: FollowupDiscoverer | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        settings.validate()
        self.settings = settings
        self._owned_fetcher: HttpFetcher | None = None
        if fetcher is None:
            self._owned_fetcher = HttpFetcher(
                timeout_seconds=settings.timeout_seconds,
                proxy=settings.proxy,
                user_agent=settings.user_agent,
            )
            fetcher = self._owned_fetcher
        self._executor = TaskExecutor(
            destination_root=settings.destination_root,
            fetcher=fetcher,
            ignore_missing_assets=settings.ignore_missing_assets,
            max_attempts=settings.max_attempts,
            retry_backoff_seconds=settings.retry_backoff_seconds,
            sleep=sleep,
        )
        self._followups = followups
        self._queue = WorkQueue()
        self._abort = threading.Event()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def enqueue(self, item: WorkItem) -> None:
        self._queue.push(item)

    def start(self) -> RunSummary:
        """Drain the queue with ``parallelism`` lanes and block until all have ended."""

        self._abort.clear()
        lane_count = self.settings.parallelism
        summaries = [RunSummary() for _ in range(lane_count)]
        error_holder: list[Exception] = []
        lanes = [
            threading.Thread(
                target=self._lane,
                args=(summaries[index], error_holder),
                name=f"download-lane-{index + 1}",
                daemon=True,
            )
            for index in range(lane_count)
        ]
        logger.info("Starting %d download lanes for %d queued items", lane_count, self.pending)
        for lane in lanes:
            lane.start()
        for lane in lanes:
            lane.join()

        if error_holder:
            raise error_holder[0]
        summary = RunSummary.merge(summaries)
        logger.info(
            "Download run completed: processed=%d downloaded=%d skipped=%d missing=%d retried=%d",
            summary.processed,
            summary.downloaded,
            summary.skipped,
            summary.missing,
            summary.retried,
        )
        return summary

    def close(self) -> None:
        if self._owned_fetcher is not None:
            self._owned_fetcher.close()

    def __enter__(self) -> DownloadScheduler:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def _lane(self, summary: RunSummary, error_holder: list[Exception]) -> None:
        try:
            while not self._abort.is_set():
                item = self._queue.pop()
                if item is None:
                    return
                result = self._executor.run(item)
                summary.record(result)
                if self._followups is not None:
                    for followup in self._followups(item, result):
                        self.enqueue(followup)
        except Exception as exc:  # noqa: BLE001
            logger.error("Download lane %s failed: %s", threading.current_thread().name, exc)
            self._abort.set()
            error_holder.append(exc)
