"""Caller-side history of extraction results.

Stored as JSON in ``~/.coversnap/history.json`` (``COVERSNAP_HOME`` overrides
the directory). Most recent first, one entry per cover URL, at most
``MAX_ENTRIES``. Replaying an entry never touches the network.
"""

import fcntl
import json
import logging
import os
import time
from pathlib import Path
from typing import Optional

from .models import ExtractionResult

logger = logging.getLogger(__name__)

MAX_ENTRIES = 20


def _home() -> Path:
    env = os.getenv("COVERSNAP_HOME")
    return Path(env) if env else Path.home() / ".coversnap"


class HistoryStore:
    def __init__(self, path: Optional[Path] = None, limit: int = MAX_ENTRIES):
        self.path = Path(path) if path else _home() / "history.json"
        self.limit = limit
        self._data = self._load()

    def _load(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = json.loads(f.read() or "[]")
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load history: {e}")
            return []
        if not isinstance(data, list):
            return []
        return [d for d in data if isinstance(d, dict) and d.get("cover_url")]

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(json.dumps(self._data, ensure_ascii=False, indent=2))
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    # ── public API ──────────────────────────────────────────

    def add(self, result: ExtractionResult, timestamp: Optional[int] = None) -> None:
        entry = result.to_dict()
        entry["timestamp"] = timestamp if timestamp is not None else int(time.time() * 1000)
        rest = [d for d in self._data if d.get("cover_url") != result.cover_url]
        self._data = [entry, *rest][: self.limit]
        self._save()

    def entries(self) -> list[tuple[int, ExtractionResult]]:
        """``(timestamp, result)`` pairs, newest first."""
        return [(d.get("timestamp", 0), ExtractionResult.from_dict(d)) for d in self._data]

    def find(self, index: int) -> ExtractionResult:
        """1-based lookup, as printed by ``coversnap --history``."""
        if not 1 <= index <= len(self._data):
            raise IndexError(f"history has {len(self._data)} entries, no #{index}")
        return ExtractionResult.from_dict(self._data[index - 1])

    def clear(self) -> None:
        self._data = []
        if self.path.exists():
            self.path.unlink()

    def __len__(self) -> int:
        return len(self._data)
