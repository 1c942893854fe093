"""
JSON file persistence for record collections.

Each collection lives in its own file holding a JSON array, pretty-printed with
two-space indentation. Writes go to a temporary file in the same directory and
are renamed over the target, so readers never see a half-written array.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """The backing file could not be read or written."""


def _backup_corrupt(path: Path) -> Path:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    backup = path.with_name(f"{path.stem}.corrupt-{stamp}{path.suffix}")
    os.replace(path, backup)
    return backup


def load_records(path: Path) -> list[dict]:
    """
    Read the array stored at ``path``.

    A missing file is an empty collection. A file that is not valid UTF-8 JSON
    holding a list is moved aside (``<stem>.corrupt-<timestamp>.json``) and the
    collection restarts empty. OS-level read errors raise PersistenceError.
    """
    path = Path(path)
    if not path.exists():
        return []
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise PersistenceError(f"Failed to read {path}: {exc}") from exc
    try:
        data = json.loads(raw.decode("utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    except ValueError as exc:
        try:
            backup = _backup_corrupt(path)
        except OSError as move_exc:
            raise PersistenceError(f"Corrupt file {path} could not be moved aside: {move_exc}") from move_exc
        logger.error("Corrupt data file %s (%s); moved to %s, starting empty", path, exc, backup)
        return []
    return data


def save_records(path: Path, records: list[dict]) -> None:
    """Atomically replace ``path`` with the serialized ``records``."""
    path = Path(path)
    payload = json.dumps(records, ensure_ascii=False, indent=2) + "\n"
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise PersistenceError(f"Failed to write {path}: {exc}") from exc
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
