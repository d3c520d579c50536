"""Per-item retry policy keyed on the failure class carried by fetch errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from download_scheduler.models import FailureClass


class RetryAction(str, Enum):
    """What the executor does after a failed attempt."""

    RETRY = "retry"
    SKIP = "skip"
    ABORT = "abort"


@dataclass(slots=True)
class RetryDecision:
    """Decision returned by retry policy."""

    action: RetryAction
    reason: str


def decide_retry(
    *,
    failure_class: FailureClass,
    attempt: int,
    max_attempts: int,
    ignore_missing_assets: bool,
) -> RetryDecision:
    """Decide the next step for an item whose attempt number ``attempt`` failed."""

    if failure_class == FailureClass.UNREACHABLE:
        if attempt < max_attempts:
            return RetryDecision(
                action=RetryAction.RETRY,
                reason=f"Transient network failure (attempt {attempt}/{max_attempts}).",
            )
        return RetryDecision(
            action=RetryAction.ABORT,
            reason=f"Transient network failure persisted after {attempt} attempts.",
        )
    if failure_class == FailureClass.NOT_FOUND:
        if ignore_missing_assets:
            return RetryDecision(action=RetryAction.SKIP, reason="Missing asset is tolerated.")
        return RetryDecision(action=RetryAction.ABORT, reason="Missing asset is not tolerated.")
    return RetryDecision(action=RetryAction.ABORT, reason="Failure class is not retryable.")
