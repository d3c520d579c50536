"""Race-tolerant parent directory creation for destination files."""

from __future__ import annotations

from pathlib import Path


def ensure_parents(file_path: Path) -> None:
    """Create every missing ancestor directory of ``file_path``.

    Missing ancestors are collected walking upward from the immediate parent and
    created root-to-leaf. A directory appearing between the existence check and
    ``mkdir`` (another lane creating it) is not an error.
    """

    missing: list[Path] = []
    current = file_path.parent
    while not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent

    for directory in reversed(missing):
        try:
            directory.mkdir()
        except FileExistsError:
            continue
