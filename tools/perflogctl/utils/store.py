"""Append-only JSONL mirror of the log rows, for replay across restarts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from ..core.errors import ValidationError
from ..core.model import PerformanceLogEntry, parse_entry
from .paths import store_path


class LogStore:
    """
    Persist admitted rows to a named store with a soft row cap.

    The file may hold up to one and a half times ``max_entries`` lines
    before it is compacted back down to the newest ``max_entries``.
    Restoring always yields at most ``max_entries`` rows.
    """

    def __init__(self, name: str = "logs", max_entries: int = 200_000,
                 path: Optional[Path] = None) -> None:
        self.name = name
        self.max_entries = max_entries
        self.path = path or store_path(name)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._count = self._count_lines()

    def _count_lines(self) -> int:
        if not self.path.exists():
            return 0
        with self.path.open("r", encoding="utf-8", errors="replace") as fh:
            return sum(1 for line in fh if line.strip())

    def append(self, entry: PerformanceLogEntry) -> None:
        """Append one entry and compact the file if it grew too large."""
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")
        self._count += 1
        if self._count > self.max_entries + max(1, self.max_entries // 2):
            self._compact()

    def clear(self) -> None:
        """Truncate the store."""
        self.path.write_text("", encoding="utf-8")
        self._count = 0

    def load(self) -> List[PerformanceLogEntry]:
        """
        Read back the newest entries, oldest first.

        Lines that are not JSON or fail entry validation are skipped.
        """
        if not self.path.exists():
            return []
        entries = []
        with self.path.open("r", encoding="utf-8", errors="replace") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(parse_entry(json.loads(line)))
                except (json.JSONDecodeError, ValidationError):
                    continue
        return entries[-self.max_entries:]

    def _compact(self) -> None:
        """Drop the oldest lines so only max_entries remain."""
        with self.path.open("r", encoding="utf-8", errors="replace") as fh:
            lines = [line for line in fh if line.strip()]
        keep = lines[-self.max_entries:]
        with self.path.open("w", encoding="utf-8") as fh:
            fh.writelines(keep)
        self._count = len(keep)
