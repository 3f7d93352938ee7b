"""Workspace path helpers for :mod:`mdcomponents`."""

from __future__ import annotations

import shutil

from datetime import datetime, timezone
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable
from zipfile import ZIP_DEFLATED, ZipFile

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_WORKSPACE_DIRNAME",
    "WorkspacePaths",
    "resolve_workspace",
    "archive_workspace",
]

CONFIG_FILENAME = "mdcomponents.toml"
DEFAULT_WORKSPACE_DIRNAME = ".mdcomponents"


@dataclass(frozen=True, slots=True)
class WorkspacePaths:
    """Resolved locations for a workspace instance.

    Example:
        >>> from pathlib import Path
        >>> paths = WorkspacePaths(
        ...     workspace=Path("/tmp/mdc"),
        ...     config_file=Path("/tmp/mdc/mdcomponents.toml"),
        ...     logs_dir=Path("/tmp/mdc/logs"),
        ...     archives_dir=Path("/tmp/mdc/archives"),
        ... )
        >>> paths.components_dir("components").as_posix()
        '/tmp/mdc/components'
    """

    workspace: Path
    config_file: Path
    logs_dir: Path
    archives_dir: Path

    def iter_all(self) -> Iterable[Path]:
        """Yield every path managed directly by the workspace."""

        yield from (
            self.workspace,
            self.config_file,
            self.logs_dir,
            self.archives_dir,
        )

    def components_dir(self, folder: str | Path) -> Path:
        """Return the components folder, resolving relative names."""

        candidate = Path(folder).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.workspace / candidate


def resolve_workspace(
    *,
    workspace_override: Path | None = None,
    env_override: Path | None = None,
) -> WorkspacePaths:
    """Resolve canonical workspace locations.

    Args:
        workspace_override: Optional override provided by CLI flags.
        env_override: Optional override from ``MDCOMPONENTS_WORKSPACE``.

    Returns:
        Resolved workspace paths after precedence rules are applied.

    Raises:
        ValueError: If the resolved workspace points to a regular file.
    """

    base = (
        workspace_override
        or env_override
        or Path.home() / DEFAULT_WORKSPACE_DIRNAME
    )
    raw = Path(base).expanduser()
    if not raw.is_absolute():
        raw = Path.cwd() / raw
    workspace = raw.resolve(strict=False)

    if workspace.exists() and workspace.is_file():
        raise ValueError(f"Workspace file path not allowed: {workspace}")

    return WorkspacePaths(
        workspace=workspace,
        config_file=workspace / CONFIG_FILENAME,
        logs_dir=workspace / "logs",
        archives_dir=workspace / "archives",
    )


def _archive_name(archive_root: Path, timestamp: str) -> Path:
    suffix = 0
    while True:
        suffix_part = "" if suffix == 0 else f"-{suffix:02d}"
        candidate = archive_root / f"{timestamp}{suffix_part}.zip"
        if not candidate.exists():
            return candidate
        suffix += 1


def _write_to_zip(root: Path, path: Path, zf: ZipFile) -> None:
    relative = path.relative_to(root).as_posix()
    if path.is_dir():
        zf.writestr(relative.rstrip("/") + "/", "")
        for child in sorted(path.iterdir()):
            _write_to_zip(root, child, zf)
    else:
        zf.write(path, relative)


def archive_workspace(paths: WorkspacePaths) -> Path | None:
    """Move the workspace contents into a timestamped ZIP under ``archives``.

    Used by ``mdcomponents init --refresh`` before regenerating the layout.
    Component files are archived too, so a refresh never loses authored work.

    Args:
        paths: Workspace paths describing the current layout.

    Returns:
        The archive path when something was archived, otherwise ``None``.

    Raises:
        ValueError: If the workspace path exists but is not a directory.
    """

    workspace = paths.workspace
    if not workspace.exists():
        return None
    if not workspace.is_dir():
        raise ValueError(
            f"Workspace path '{workspace}' exists but is not a directory."
        )

    archive_root = paths.archives_dir
    archive_root.mkdir(parents=True, exist_ok=True)

    entries = [entry for entry in workspace.iterdir() if entry != archive_root]
    if not entries:
        if not any(archive_root.iterdir()):
            archive_root.rmdir()
        return None

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    archive_path = _archive_name(archive_root, timestamp)

    with ZipFile(archive_path, mode="w", compression=ZIP_DEFLATED) as zf:
        for entry in sorted(entries):
            _write_to_zip(workspace, entry, zf)

    for entry in entries:
        if entry.is_dir():
            shutil.rmtree(entry)
        else:
            entry.unlink()

    return archive_path
