from __future__ import annotations

import allure
import pytest

from download_scheduler.http.fetcher import (
    AssetNotFoundError,
    FetchFailedError,
    UnreachableError,
)
from download_scheduler.models import FailureClass
from download_scheduler.retry_policy import RetryAction, decide_retry

pytestmark = [
    allure.epic("Download Scheduler"),
    allure.feature("Retry Policy"),
]


def test_error_types_carry_their_failure_class() -> None:
    url = "https://example.com/a"
    assert UnreachableError(message="dns", url=url).failure_class == FailureClass.UNREACHABLE
    assert AssetNotFoundError(message="404", url=url, status_code=404).failure_class == (
        FailureClass.NOT_FOUND
    )
    assert FetchFailedError(message="500", url=url, status_code=500).failure_class == (
        FailureClass.FETCH_FAILED
    )


@pytest.mark.parametrize(
    ("failure_class", "attempt", "ignore_missing_assets", "expected"),
    [
        (FailureClass.UNREACHABLE, 1, False, RetryAction.RETRY),
        (FailureClass.UNREACHABLE, 2, False, RetryAction.RETRY),
        (FailureClass.UNREACHABLE, 3, False, RetryAction.ABORT),
        (FailureClass.UNREACHABLE, 3, True, RetryAction.ABORT),
        (FailureClass.NOT_FOUND, 1, True, RetryAction.SKIP),
        (FailureClass.NOT_FOUND, 1, False, RetryAction.ABORT),
        (FailureClass.FETCH_FAILED, 1, False, RetryAction.ABORT),
        (FailureClass.FETCH_FAILED, 1, True, RetryAction.ABORT),
    ],
)
def test_decision_table(
    failure_class: FailureClass,
    attempt: int,
    ignore_missing_assets: bool,
    expected: RetryAction,
) -> None:
    decision = decide_retry(
        failure_class=failure_class,
        attempt=attempt,
        max_attempts=3,
        ignore_missing_assets=ignore_missing_assets,
    )
    assert decision.action == expected
    assert decision.reason


def test_single_attempt_budget_never_retries() -> None:
    decision = decide_retry(
        failure_class=FailureClass.UNREACHABLE,
        attempt=1,
        max_attempts=1,
        ignore_missing_assets=False,
    )
    assert decision.action == RetryAction.ABORT
