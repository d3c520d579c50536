"""Shared test fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from download_scheduler.config import SchedulerSettings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep DOWNLOAD_SCHEDULER_* variables from the host out of every test."""
    for name in list(os.environ):
        if name.startswith("DOWNLOAD_SCHEDULER_"):
            monkeypatch.delenv(name)


@pytest.fixture()
def settings(tmp_path: Path) -> SchedulerSettings:
    return SchedulerSettings(destination_root=tmp_path / "dest", parallelism=2)
