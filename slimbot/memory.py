"""File storage for long-term memory, append-only history and its cursors."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

_UINT = re.compile(r"\+?\d+")


@dataclass
class HistoryEntry:
    """One line of ``history.jsonl``."""

    cursor: int
    timestamp: str
    content: str

    @classmethod
    def from_dict(cls, data: Any) -> HistoryEntry:
        if not isinstance(data, dict):
            raise ValueError("history entry must be an object")
        cursor = data.get("cursor")
        timestamp = data.get("timestamp")
        content = data.get("content")
        if isinstance(cursor, bool) or not isinstance(cursor, int) or cursor < 0:
            raise ValueError("history entry cursor must be a non-negative integer")
        if not isinstance(timestamp, str) or not isinstance(content, str):
            raise ValueError("history entry timestamp and content must be strings")
        return cls(cursor=cursor, timestamp=timestamp, content=content)

    def to_dict(self) -> dict[str, Any]:
        return {"cursor": self.cursor, "timestamp": self.timestamp, "content": self.content}


def _read_text_or_empty(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def _read_uint(path: Path) -> int | None:
    text = _read_text_or_empty(path).strip()
    return int(text) if _UINT.fullmatch(text) else None


class MemoryStore:
    """Reads and writes the memory files of a workspace."""

    def __init__(self, workspace_dir: str | Path) -> None:
        self.workspace_dir = Path(workspace_dir)
        self.memory_dir = self.workspace_dir / "memory"
        self.memory_file = self.memory_dir / "MEMORY.md"
        self.history_file = self.memory_dir / "history.jsonl"
        self.cursor_file = self.memory_dir / ".cursor"
        self.dream_cursor_file = self.memory_dir / ".dream_cursor"
        self._cursor_cache: int | None = None
        self._dream_cursor_cache: int | None = None

    def init(self) -> None:
        """Ensure the memory directory exists."""
        self.memory_dir.mkdir(parents=True, exist_ok=True)

    # MEMORY.md (long-term facts)

    def read_memory(self) -> str:
        return _read_text_or_empty(self.memory_file)

    def write_memory(self, content: str) -> None:
        self.memory_file.write_text(content, encoding="utf-8")

    # SOUL.md and USER.md (workspace root)

    def read_soul(self) -> str:
        return _read_text_or_empty(self.workspace_dir / "SOUL.md")

    def write_soul(self, content: str) -> None:
        (self.workspace_dir / "SOUL.md").write_text(content, encoding="utf-8")

    def read_user(self) -> str:
        return _read_text_or_empty(self.workspace_dir / "USER.md")

    def write_user(self, content: str) -> None:
        (self.workspace_dir / "USER.md").write_text(content, encoding="utf-8")

    def get_memory_context(self) -> str:
        """Long-term memory formatted for the system prompt, or "" when empty."""
        long_term = self.read_memory()
        return f"## Long-term Memory\n{long_term}" if long_term else ""

    # history.jsonl (append-only)

    def append_history(self, entry: str) -> int:
        """Append an entry and return its auto-incrementing cursor."""
        cursor = self._next_cursor()
        record = HistoryEntry(
            cursor=cursor,
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M"),
            content=entry,
        )
        line = json.dumps(record.to_dict(), ensure_ascii=False, separators=(",", ":"))
        self.cursor_file.write_text(str(cursor), encoding="utf-8")
        self._cursor_cache = cursor
        with self.history_file.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
        return cursor

    def read_unprocessed_history(self, since_cursor: int) -> list[HistoryEntry]:
        """Entries whose cursor is greater than ``since_cursor``."""
        return [e for e in self.read_entries() if e.cursor > since_cursor]

    def read_recent_history(self, max_entries: int) -> list[HistoryEntry]:
        """All entries, keeping only the last ``max_entries`` when it is positive."""
        entries = self.read_entries()
        if 0 < max_entries < len(entries):
            return entries[-max_entries:]
        return entries

    def read_entries(self) -> list[HistoryEntry]:
        """Every well-formed entry of ``history.jsonl``; bad lines are skipped."""
        try:
            raw = self.history_file.read_bytes()
        except OSError:
            return []
        entries: list[HistoryEntry] = []
        for raw_line in raw.split(b"\n"):
            try:
                line = raw_line.decode("utf-8").strip()
            except UnicodeDecodeError:
                continue
            if not line:
                continue
            try:
                entries.append(HistoryEntry.from_dict(json.loads(line)))
            except ValueError:
                continue
        return entries

    # cursors

    def _next_cursor(self) -> int:
        if self._cursor_cache is not None:
            return self._cursor_cache + 1
        stored = _read_uint(self.cursor_file)
        if stored is not None:
            self._cursor_cache = stored
            return stored + 1
        entries = self.read_entries()
        cursor = entries[-1].cursor + 1 if entries else 1
        self._cursor_cache = cursor - 1
        return cursor

    def get_last_dream_cursor(self) -> int:
        if self._dream_cursor_cache is not None:
            return self._dream_cursor_cache
        stored = _read_uint(self.dream_cursor_file)
        if stored is not None:
            self._dream_cursor_cache = stored
            return stored
        entries = self.read_entries()
        cursor = entries[-1].cursor if entries else 0
        self._dream_cursor_cache = cursor
        return cursor

    def set_last_dream_cursor(self, cursor: int) -> None:
        self._dream_cursor_cache = cursor
        self.dream_cursor_file.write_text(str(cursor), encoding="utf-8")