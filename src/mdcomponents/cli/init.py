"""Helpers for the ``mdcomponents init`` command."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from mdcomponents.core.config import (
    AppConfig,
    DEFAULTS_RESOURCE_NAME,
    load_config,
    load_packaged_defaults,
    read_packaged_defaults_text,
    render_user_config,
)
from mdcomponents.core.paths import (
    WorkspacePaths,
    archive_workspace,
    resolve_workspace,
)
from mdcomponents.resources import iter_example_components


@dataclass(slots=True)
class InitResult:
    """Outcome of bootstrapping a workspace."""

    config: AppConfig
    components_dir: Path
    seeded: list[Path] = field(default_factory=list)
    archive: Path | None = None


def _ensure_directories(paths: WorkspacePaths) -> None:
    """Create the workspace directories if they are missing."""

    paths.workspace.mkdir(parents=True, exist_ok=True)
    paths.logs_dir.mkdir(parents=True, exist_ok=True)
    paths.archives_dir.mkdir(parents=True, exist_ok=True)


def seed_example_components(target: Path) -> list[Path]:
    """Write the packaged example components into ``target``.

    Existing files are left untouched.

    Returns:
        The files that were written.
    """

    target.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for filename, content in iter_example_components():
        destination = target / filename
        if destination.exists():
            continue
        destination.write_text(content, encoding="utf-8")
        written.append(destination)
    return written


def init_workspace(
    *,
    workspace: Path,
    refresh: bool = False,
    log_level: str | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    seed_examples: bool = True,
) -> InitResult:
    """Bootstrap the workspace directory and supporting artifacts.

    Example:
        >>> from pathlib import Path
        >>> result = init_workspace(workspace=Path("/tmp/mdcomponents-example"))
        >>> str(result.config.workspace).endswith("mdcomponents-example")
        True

    Args:
        workspace: Target directory for the workspace.
        refresh: Whether to archive an existing workspace before regenerating.
        log_level: Optional override for the configured logging level.
        env_overrides: Settings derived from ``MDCOMPONENTS_*`` variables.
        seed_examples: Whether a newly created components folder receives
            the packaged example components.

    Returns:
        The resolved configuration plus what was created.
    """

    paths = resolve_workspace(workspace_override=workspace)

    archive = archive_workspace(paths) if refresh else None

    _ensure_directories(paths)

    cli_overrides: dict[str, object] = {"workspace": str(paths.workspace)}
    if log_level:
        cli_overrides["log_level"] = log_level

    config = load_config(
        defaults=load_packaged_defaults(),
        env_config=env_overrides,
        cli_overrides=cli_overrides,
    )

    defaults_path = paths.workspace / DEFAULTS_RESOURCE_NAME
    if refresh or not defaults_path.exists():
        defaults_path.write_text(read_packaged_defaults_text(), encoding="utf-8")

    config_path = paths.config_file
    if refresh or not config_path.exists():
        config_path.write_text(render_user_config(config), encoding="utf-8")

    components_dir = config.components_dir(paths)
    is_new = not components_dir.exists()
    seeded: list[Path] = []
    if is_new and seed_examples:
        seeded = seed_example_components(components_dir)
    else:
        components_dir.mkdir(parents=True, exist_ok=True)

    return InitResult(
        config=config,
        components_dir=components_dir,
        seeded=seeded,
        archive=archive,
    )


__all__ = ["InitResult", "init_workspace", "seed_example_components"]
