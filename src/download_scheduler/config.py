"""Runtime configuration for the download scheduler."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_12_5) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/58.0.3029.110 Safari/537.36"
)
PROXY_SCHEMES = frozenset({"http", "https", "socks5", "socks5h"})


@dataclass(slots=True)
class SchedulerSettings:
    """Scheduler settings, fixed for the lifetime of one scheduler."""

    destination_root: Path = Path("downloads")
    proxy: str | None = None
    timeout_seconds: float = 30.0
    parallelism: int = 4
    ignore_missing_assets: bool = False
    max_attempts: int = 3
    retry_backoff_seconds: float = 5.0
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, destination_root: Path | None = None) -> SchedulerSettings:
        """Load settings from environment with sane defaults for local runs."""

        return cls(
            destination_root=destination_root
            or Path(os.getenv("DOWNLOAD_SCHEDULER_DEST", "downloads")),
            proxy=os.getenv("DOWNLOAD_SCHEDULER_PROXY", "").strip() or None,
            timeout_seconds=float(os.getenv("DOWNLOAD_SCHEDULER_TIMEOUT_SECONDS", "30.0")),
            parallelism=int(os.getenv("DOWNLOAD_SCHEDULER_PARALLELISM", "4")),
            ignore_missing_assets=_env_bool(
                "DOWNLOAD_SCHEDULER_IGNORE_MISSING_ASSETS",
                default=False,
            ),
            max_attempts=int(os.getenv("DOWNLOAD_SCHEDULER_MAX_ATTEMPTS", "3")),
            retry_backoff_seconds=float(
                os.getenv("DOWNLOAD_SCHEDULER_RETRY_BACKOFF_SECONDS", "5.0"),
            ),
            user_agent=os.getenv("DOWNLOAD_SCHEDULER_USER_AGENT", DEFAULT_USER_AGENT),
        )

    def validate(self) -> None:
        """Raise configuration error if any setting is out of range."""

        if self.parallelism < 1:
            raise ValueError("DOWNLOAD_SCHEDULER_PARALLELISM must be >= 1.")
        if self.timeout_seconds <= 0:
            raise ValueError("DOWNLOAD_SCHEDULER_TIMEOUT_SECONDS must be > 0.")
        if self.max_attempts < 1:
            raise ValueError("DOWNLOAD_SCHEDULER_MAX_ATTEMPTS must be >= 1.")
        if self.retry_backoff_seconds < 0:
            raise ValueError("DOWNLOAD_SCHEDULER_RETRY_BACKOFF_SECONDS must be >= 0.")
        if not self.user_agent.strip():
            raise ValueError("DOWNLOAD_SCHEDULER_USER_AGENT must not be empty.")
        if self.proxy is not None:
            _validate_proxy_url(self.proxy)


def _validate_proxy_url(value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in PROXY_SCHEMES or not parsed.netloc:
        raise ValueError(
            f"Invalid proxy URL: {value!r}. "
            "Expected an absolute http(s) or socks5(h) URL such as http://host:port.",
        )


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
