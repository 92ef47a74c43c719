"""Resolution and sandbox validation of application file paths."""

from __future__ import annotations

from pathlib import Path


class PathError(Exception):
    """Raised when paths cannot be resolved or escape their sandbox."""


def _home() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


def expand_home(path: str) -> Path:
    """Expand a leading ``~`` or ``~/`` to the user's home directory."""
    if path == "~" or path.startswith("~/"):
        home = _home()
        if home is not None:
            return home / path.lstrip("~").lstrip("/")
    return Path(path)


def default_data_dir() -> Path:
    """``~/.slimbot``, or the current directory when there is no home."""
    home = _home()
    return home / ".slimbot" if home is not None else Path(".")


def _ensure_dir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PathError(f"Failed to create directory: {exc}") from exc
    try:
        return path.resolve(strict=True)
    except OSError as exc:
        raise PathError(f"Failed to canonicalize directory: {exc}") from exc


class PathManager:
    """Holds the resolved config file, data directory and workspace directory.

    Resolution priority:
    - data_dir: explicit > ``~/.slimbot``
    - workspace_dir: explicit > ``{data_dir}/workspace``
    - config_path: explicit (must exist) > ``{data_dir}/config.json``
    """

    def __init__(self, config_path: Path, data_dir: Path, workspace_dir: Path) -> None:
        self.config_path = config_path
        self.data_dir = data_dir
        self.workspace_dir = workspace_dir

    def __repr__(self) -> str:
        return (
            f"PathManager(config_path={self.config_path!r}, data_dir={self.data_dir!r}, "
            f"workspace_dir={self.workspace_dir!r})"
        )

    @classmethod
    def resolve(
        cls,
        config: str | None = None,
        data_dir: str | None = None,
        workspace_dir: str | None = None,
    ) -> PathManager:
        """Resolve, create and validate all application paths."""
        resolved_data = expand_home(data_dir) if data_dir is not None else default_data_dir()
        resolved_workspace = (
            Path(workspace_dir) if workspace_dir is not None else resolved_data / "workspace"
        )

        if config is not None:
            config_path = Path(config)
            if not config_path.exists():
                raise PathError(
                    f"Config file not found: {config_path} (use `setup` to create one)"
                )
        else:
            config_path = resolved_data / "config.json"

        data_abs = _ensure_dir(resolved_data)
        workspace_abs = _ensure_dir(resolved_workspace)

        if workspace_dir is not None and not workspace_abs.is_relative_to(data_abs):
            raise PathError(
                f"workspace_dir ({workspace_abs}) must be under data_dir ({data_abs})"
            )
        return cls(config_path, data_abs, workspace_abs)

    def session_dir(self) -> Path:
        return self.workspace_dir / "sessions"

    def skills_dir(self) -> Path:
        return self.workspace_dir / "skills"

    def memory_dir(self) -> Path:
        return self.workspace_dir / "memory"

    def tool_results_dir(self) -> Path:
        return self.workspace_dir / ".tool_results"

    def bootstrap_file(self, name: str) -> Path:
        return self.workspace_dir / name

    def validate_path_sandbox(self, user_path: str) -> Path:
        """Resolve ``user_path`` inside the workspace, rejecting any escape.

        A leading ``/`` is stripped, so absolute paths are taken relative to the
        workspace.
        """
        try:
            workspace_abs = self.workspace_dir.resolve(strict=True)
        except OSError as exc:
            raise PathError(
                f"Workspace directory does not exist or cannot be accessed: {exc}"
            ) from exc

        joined = workspace_abs / user_path.lstrip("/")

        try:
            resolved = joined.resolve(strict=True)
        except OSError:
            resolved = None
        if resolved is not None:
            if not resolved.is_relative_to(workspace_abs):
                raise PathError(f"Path escapes workspace directory: {user_path}")
            return resolved

        # The path does not exist yet: check its nearest existing ancestor.
        ancestor = joined
        while not ancestor.exists() and ancestor.parent != ancestor:
            ancestor = ancestor.parent

        try:
            ancestor_abs = ancestor.resolve(strict=True)
        except OSError as exc:
            raise PathError(f"Cannot resolve base directory for '{user_path}': {exc}") from exc

        if not ancestor_abs.is_relative_to(workspace_abs):
            raise PathError(f"Path escapes workspace directory: {user_path}")

        try:
            remaining = joined.relative_to(ancestor)
        except ValueError as exc:
            raise PathError(
                f"Cannot resolve path relative to workspace: {user_path}"
            ) from exc
        if ".." in remaining.parts:
            raise PathError(f"Path escapes workspace directory via '..': {user_path}")
        return joined