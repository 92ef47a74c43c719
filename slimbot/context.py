"""Assembly of the system prompt from workspace files, skills and memory."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from slimbot.bootstrap import EmbeddedFile, bootstrap_files, read_if_modified
from slimbot.memory import MemoryStore

FIXED_INTRO = (
    "You are SlimBot, an AI assistant. You can call tools to help the user complete tasks."
)
SECTION_SEPARATOR = "\n\n---\n\n"
RECENT_HISTORY_LIMIT = 50

_OPEN = "---\n"
_CLOSE = "\n---\n"


@dataclass
class SkillMeta:
    """Frontmatter fields and body of a skill file."""

    name: str
    description: str
    always: bool
    content: str


def parse_skill_frontmatter(content: str) -> SkillMeta | None:
    """Parse the ``---`` delimited frontmatter of a skill file.

    Returns None when the file does not open with ``---`` or never closes it.
    """
    if not content.startswith(_OPEN):
        return None
    rest = content[len(_OPEN):]
    end = rest.find(_CLOSE)
    if end < 0:
        return None
    front = rest[:end]
    body = rest[end + len(_CLOSE):]

    name = ""
    description = ""
    always = False
    for raw in front.split("\n"):
        line = raw.strip()
        if line.startswith("name:"):
            name = line[len("name:"):].strip()
        elif line.startswith("description:"):
            description = line[len("description:"):].strip()
        elif line.startswith("always:"):
            always = line[len("always:"):].strip() == "true"

    return SkillMeta(
        name=name or "unknown",
        description=description,
        always=always,
        content=body.strip(),
    )


class ContextBuilder:
    """Builds the system prompt for an agent run in one workspace."""

    def __init__(
        self,
        workspace_dir: str | Path,
        memory_store: MemoryStore,
        templates: Iterable[EmbeddedFile] = (),
    ) -> None:
        self.workspace_dir = Path(workspace_dir)
        self.memory_store = memory_store
        self.templates = list(templates)

    def build_system_prompt(self, channel_inject: str | None = None) -> str:
        """Join intro, changed bootstrap files, skills, memory, recent history and
        channel-provided text into one system prompt."""
        parts = [FIXED_INTRO]
        parts.extend(self._bootstrap_sections())
        parts.extend(self._skill_sections())

        memory_content = self.memory_store.get_memory_context()
        if memory_content:
            parts.append(memory_content)

        recent = self.memory_store.read_recent_history(RECENT_HISTORY_LIMIT)
        if recent:
            history_text = "\n".join(f"- [{e.timestamp}] {e.content}" for e in recent)
            parts.append(f"# Recent History\n\n{history_text}")

        if channel_inject:
            parts.append(channel_inject)

        return SECTION_SEPARATOR.join(parts)

    def _bootstrap_sections(self) -> list[str]:
        sections = []
        for filename, template in bootstrap_files(self.templates):
            content = read_if_modified(self.workspace_dir / filename, template)
            if content:
                sections.append(f"[{filename}] {content}")
        return sections

    def _skill_sections(self) -> list[str]:
        skills_dir = self.workspace_dir / "skills"
        if not skills_dir.exists():
            return []

        always_skills: list[str] = []
        available_skills: list[str] = []
        try:
            paths = sorted(skills_dir.iterdir())
        except OSError:
            paths = []
        for path in paths:
            if path.suffix != ".md" or not path.is_file():
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            if not content:
                continue
            meta = parse_skill_frontmatter(content)
            if meta is None:
                # Without frontmatter the whole file is loaded as an active skill.
                always_skills.append(f"[Skill: {path.stem}]\n{content}")
            elif meta.always:
                always_skills.append(meta.content)
            else:
                available_skills.append(f"- **{meta.name}**: {meta.description}")

        sections = []
        if always_skills:
            sections.append("# Active Skills\n\n" + SECTION_SEPARATOR.join(always_skills))
        if available_skills:
            listing = "\n".join(available_skills)
            sections.append(
                "# Available Skills\n\nThe following skills are available. "
                f"Use file_reader to load them when needed.\n{listing}"
            )
        return sections