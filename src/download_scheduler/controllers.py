"""Controllers for download CLI commands."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from download_scheduler.config import SchedulerSettings
from download_scheduler.manifest import load_manifest
from download_scheduler.scheduler import DownloadScheduler


@dataclass(slots=True)
class DownloadRunCommand:
    """CLI inputs for the download run command."""

    manifest_path: Path
    destination_root: Path | None = None
    proxy: str | None = None
    timeout_seconds: float | None = None
    parallelism: int | None = None
    ignore_missing_assets: bool | None = None


class DownloadCliController:
    """Coordinates download command execution."""

    def run(self, command: DownloadRunCommand) -> list[str]:
        settings = _effective_settings(command)
        settings.validate()
        items = load_manifest(command.manifest_path)

        with DownloadScheduler(settings) as scheduler:
            for item in items:
                scheduler.enqueue(item)
            summary = scheduler.start()

        return [
            "Download run completed: "
            f"dest={settings.destination_root} "
            f"parallelism={settings.parallelism} "
            f"processed={summary.processed} "
            f"downloaded={summary.downloaded} "
            f"skipped={summary.skipped} "
            f"missing={summary.missing} "
            f"retried={summary.retried}",
        ]


def _effective_settings(command: DownloadRunCommand) -> SchedulerSettings:
    settings = SchedulerSettings.from_env(destination_root=command.destination_root)
    overrides: dict[str, object] = {}
    if command.proxy is not None:
        overrides["proxy"] = command.proxy
    if command.timeout_seconds is not None:
        overrides["timeout_seconds"] = command.timeout_seconds
    if command.parallelism is not None:
        overrides["parallelism"] = command.parallelism
    if command.ignore_missing_assets is not None:
        overrides["ignore_missing_assets"] = command.ignore_missing_assets
    return replace(settings, **overrides)
