"""Workspace bootstrap templates and skill files bundled with the agent."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

SKILLS_PREFIX = "skills/"


@dataclass(frozen=True)
class EmbeddedFile:
    """A bundled resource: its file name, its text and where it goes in the workspace."""

    name: str
    content: str
    dest: str


def _scan_dir(directory: Path, dest_prefix: str) -> list[EmbeddedFile]:
    if not directory.exists():
        return []
    entries: list[EmbeddedFile] = []
    for path in sorted(directory.iterdir()):
        if path.is_file():
            content = path.read_text(encoding="utf-8")
            entries.append(EmbeddedFile(path.name, content, f"{dest_prefix}{path.name}"))
        elif path.is_dir():
            entries.extend(_scan_dir(path, f"{dest_prefix}{path.name}/"))
    return entries


def scan_resources(
    templates_dir: str | Path, skills_dir: str | Path
) -> list[EmbeddedFile]:
    """Collect template files (workspace root) and skill files (``skills/``), sorted by name."""
    entries = _scan_dir(Path(templates_dir), "")
    entries.extend(_scan_dir(Path(skills_dir), SKILLS_PREFIX))
    entries.sort(key=lambda entry: entry.name)
    return entries


def read_if_modified(path: str | Path, template: str) -> str | None:
    """Return the file's content if it differs from ``template`` (ignoring surrounding
    whitespace); None if the file is missing, unreadable or unchanged."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    if content.strip() != template.strip():
        return content
    return None


def bootstrap_files(entries: Iterable[EmbeddedFile]) -> Iterator[tuple[str, str]]:
    """Yield ``(name, content)`` of the templates that go to the workspace root."""
    for entry in entries:
        if not entry.dest.startswith(SKILLS_PREFIX):
            yield entry.name, entry.content


def skill_files(entries: Iterable[EmbeddedFile]) -> Iterator[tuple[str, str, str]]:
    """Yield ``(name, content, dest)`` of the files that go under ``skills/``."""
    for entry in entries:
        if entry.dest.startswith(SKILLS_PREFIX):
            yield entry.name, entry.content, entry.dest


def get_template(entries: Iterable[EmbeddedFile], name: str) -> str | None:
    """Content of the first resource called ``name``, or None."""
    return next((entry.content for entry in entries if entry.name == name), None)