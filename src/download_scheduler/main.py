"""CLI entrypoint for download-scheduler."""

import logging
from pathlib import Path

import rich_click as click

from download_scheduler import __version__
from download_scheduler.controllers import DownloadCliController, DownloadRunCommand
from download_scheduler.http.fetcher import FetchError

click.rich_click.USE_MARKDOWN = True
DOWNLOAD_CONTROLLER = DownloadCliController()
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="download-scheduler")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity.",
)
def download_scheduler(log_level: str) -> None:
    """Download scheduler CLI."""

    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)


@download_scheduler.command("run")
@click.option(
    "--manifest",
    "manifest_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    required=True,
    help="JSON array or `.jsonl` file of entries with `filename`, `url` and `id`.",
)
@click.option(
    "--dest",
    "destination_root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Destination root directory. Defaults to DOWNLOAD_SCHEDULER_DEST.",
)
@click.option("--proxy", default=None, help="Proxy URL, for example http://127.0.0.1:3128.")
@click.option(
    "--timeout",
    "timeout_seconds",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Per-request timeout in seconds.",
)
@click.option(
    "--parallelism",
    type=click.IntRange(min=1),
    default=None,
    help="Number of concurrent download lanes.",
)
@click.option(
    "--ignore-missing-assets/--fail-on-missing-assets",
    default=None,
    help="Treat HTTP 404 responses as skippable missing assets.",
)
def run(  # noqa: PLR0913
    manifest_path: Path,
    destination_root: Path | None,
    proxy: str | None,
    timeout_seconds: float | None,
    parallelism: int | None,
    ignore_missing_assets: bool | None,
) -> None:
    """Download every manifest entry that is not already up-to-date."""

    try:
        lines = DOWNLOAD_CONTROLLER.run(
            DownloadRunCommand(
                manifest_path=manifest_path,
                destination_root=destination_root,
                proxy=proxy,
                timeout_seconds=timeout_seconds,
                parallelism=parallelism,
                ignore_missing_assets=ignore_missing_assets,
            ),
        )
    except (FetchError, OSError, ValueError) as error:
        raise click.ClickException(f"Download run failed: {error}") from error
    _emit_lines(lines)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    download_scheduler()
