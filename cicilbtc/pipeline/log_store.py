"""Append-only JSON log at ``data/log.json``.

Layout::

    {
      "site_start": "2025-01-01",
      "entries": [ {"date": "2025-01-01", ...}, ... ]
    }

The document is read once and written once per run. Entries are kept in
ascending date order with at most one entry per date.
"""

import json
import os
import stat
import tempfile
from pathlib import Path

from cicilbtc.core.logger import logger
from cicilbtc.models.datatypes import LogDocument, LogEntry

DEFAULT_LOG_PATH = "data/log.json"
DEFAULT_FILE_MODE = 0o644


def load(path: str | Path = DEFAULT_LOG_PATH) -> LogDocument:
    """Read the log, or return an empty document if the file does not exist.

    Args:
        path: Location of ``log.json``.

    Returns:
        LogDocument: ``site_start`` may be ``None``; ``entries`` is always a list.
        Any other top-level keys are kept in ``extra`` and written back on save.

    Raises:
        json.JSONDecodeError: The file exists but is not valid JSON.
        ValueError: The JSON is not an object, or ``entries`` is not a list of objects.
    """
    log_path = Path(path)
    if not log_path.exists():
        logger.info(f"No log at {log_path}, starting a new one")
        return LogDocument(site_start=None, entries=[])

    with open(log_path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"{log_path}: expected a JSON object, got {type(raw).__name__}")

    entries = raw.get("entries") or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValueError(f"{log_path}: 'entries' must be a list of objects")

    return LogDocument(
        site_start=raw.get("site_start") or None,
        entries=list(entries),
        extra={k: v for k, v in raw.items() if k not in ("site_start", "entries")},
    )


def has_entry_for(document: LogDocument, date: str) -> bool:
    """True iff some entry's ``date`` equals ``date`` exactly."""
    return any(entry.get("date") == date for entry in document.entries)


def append(document: LogDocument, entry: LogEntry) -> None:
    """Add ``entry`` and restore ascending date order.

    Sets ``site_start`` to the entry date if it was unset.

    Raises:
        ValueError: An entry for that date already exists.
    """
    if has_entry_for(document, entry.date):
        raise ValueError(f"Log already has an entry for {entry.date}")

    document.entries.append(entry.to_dict())
    # YYYY-MM-DD sorts lexicographically in date order
    document.entries.sort(key=lambda e: e.get("date", ""))
    if not document.site_start:
        document.site_start = entry.date


def save(document: LogDocument, path: str | Path = DEFAULT_LOG_PATH) -> None:
    """Write the document as indented JSON with a trailing newline.

    The content goes to a temporary file in the same directory which then
    replaces ``path``, so the old file stays intact if writing fails. The
    file keeps its existing permissions; a new file gets ``0o644``.
    """
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(document.to_dict(), indent=2, ensure_ascii=False) + "\n"
    mode = stat.S_IMODE(log_path.stat().st_mode) if log_path.exists() else DEFAULT_FILE_MODE

    fd, tmp_name = tempfile.mkstemp(prefix=".log-", suffix=".json", dir=log_path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, log_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.info(f"Saved {len(document.entries)} entries to {log_path}")
