"""Sidecar identity markers recording which content version is on disk.

A destination ``P`` is accompanied by ``P.id`` holding the opaque identifier
of the content written to ``P``. The marker is a simple versioning scheme and
is compared for equality only; it says nothing about the integrity of ``P``.
"""

from __future__ import annotations

import logging
from pathlib import Path

MARKER_SUFFIX = ".id"
logger = logging.getLogger(__name__)


def marker_path(destination: Path) -> Path:
    return destination.with_name(destination.name + MARKER_SUFFIX)


class IdentityStore:
    """Reads and writes per-destination identity markers."""

    def is_up_to_date(self, destination: Path, identifier: str) -> bool:
        """Return True only if content and a marker equal to ``identifier`` exist."""

        marker = marker_path(destination)
        if not destination.is_file() or not marker.is_file():
            return False
        try:
            stored = marker.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Unreadable identity marker %s: %s", marker, exc)
            return False
        return stored == identifier

    def commit(self, destination: Path, identifier: str) -> None:
        """Record ``identifier`` for ``destination``; call after content is written."""

        marker_path(destination).write_text(identifier, encoding="utf-8")
