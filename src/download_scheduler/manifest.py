"""Work-item manifests: a JSON array of entries, or JSON Lines for ``.jsonl`` files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from download_scheduler.models import WorkItem

_DESTINATION_KEYS = ("filename", "destination")
_IDENTIFIER_KEYS = ("id", "identifier")


def load_manifest(path: Path) -> list[WorkItem]:
    """Read work items from ``path``; malformed entries raise ``ValueError``."""

    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        entries = _parse_json_lines(text, path)
    else:
        try:
            entries = json.loads(text)
        except json.JSONDecodeError as error:
            raise ValueError(f"Invalid manifest JSON in {path}: {error}") from error
        if not isinstance(entries, list):
            raise ValueError(f"Manifest {path} must contain a JSON array of entries.")
    return [_parse_entry(entry, index=index) for index, entry in enumerate(entries)]


def _parse_json_lines(text: str, path: Path) -> list[Any]:
    entries: list[Any] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped:
            continue
        try:
            entries.append(json.loads(stripped))
        except json.JSONDecodeError as error:
            raise ValueError(
                f"Invalid manifest JSON in {path} at line {line_number}: {error}",
            ) from error
    return entries


def _parse_entry(entry: Any, *, index: int) -> WorkItem:
    if not isinstance(entry, dict):
        raise ValueError(f"Manifest entry #{index} must be an object, got {type(entry).__name__}.")
    destination = _first_string(entry, _DESTINATION_KEYS)
    url = _first_string(entry, ("url",))
    identifier = _first_string(entry, _IDENTIFIER_KEYS)
    missing = [
        name
        for name, value in (("filename", destination), ("url", url), ("id", identifier))
        if value is None
    ]
    if missing:
        raise ValueError(f"Manifest entry #{index} is missing {', '.join(missing)}.")
    return WorkItem(destination_path=destination, source_url=url, identifier=identifier)


def _first_string(entry: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None
