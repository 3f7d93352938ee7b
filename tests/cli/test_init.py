"""Tests for :mod:`mdcomponents.cli.init`."""

from __future__ import annotations

import tomllib
from pathlib import Path
from zipfile import ZipFile

import tomlkit

from mdcomponents.cli.init import init_workspace, seed_example_components
from mdcomponents.core.config import DEFAULTS_RESOURCE_NAME
from mdcomponents.resources import iter_example_components


def test_init_workspace_writes_config_and_seeds_examples(tmp_path: Path) -> None:
    workspace = tmp_path / "workspace"

    result = init_workspace(workspace=workspace)

    config_path = workspace / "mdcomponents.toml"
    assert config_path.exists()
    assert (workspace / DEFAULTS_RESOURCE_NAME).exists()
    assert (workspace / "logs").is_dir()
    assert (workspace / "archives").is_dir()

    rendered = tomllib.loads(config_path.read_text(encoding="utf-8"))
    assert rendered["workspace"].endswith("workspace")
    assert rendered["log_level"] == "INFO"
    assert rendered["components"]["folder"] == "components"

    assert result.config.workspace == Path(rendered["workspace"])
    assert result.components_dir == workspace.resolve() / "components"
    assert sorted(path.name for path in result.seeded) == [
        name for name, _ in iter_example_components()
    ]
    assert result.archive is None


def test_init_workspace_without_examples_creates_empty_folder(
    tmp_path: Path,
) -> None:
    result = init_workspace(workspace=tmp_path / "ws", seed_examples=False)

    assert result.seeded == []
    assert result.components_dir.is_dir()
    assert list(result.components_dir.iterdir()) == []


def test_init_workspace_leaves_existing_components_alone(tmp_path: Path) -> None:
    workspace = tmp_path / "ws"
    first = init_workspace(workspace=workspace)
    button = first.components_dir / "button.md"
    button.write_text("---\nname: button\n---\n<b>mine</b>\n", encoding="utf-8")
    (first.components_dir / "card.md").unlink()

    second = init_workspace(workspace=workspace)

    assert second.seeded == []
    assert "<b>mine</b>" in button.read_text(encoding="utf-8")
    assert not (second.components_dir / "card.md").exists()


def test_seed_example_components_skips_existing_files(tmp_path: Path) -> None:
    target = tmp_path / "components"
    target.mkdir()
    (target / "badge.md").write_text("custom", encoding="utf-8")

    written = seed_example_components(target)

    assert "badge.md" not in {path.name for path in written}
    assert (target / "badge.md").read_text(encoding="utf-8") == "custom"
    assert (target / "button.md").exists()


def test_init_workspace_refresh_archives_and_reseeds(tmp_path: Path) -> None:
    workspace = tmp_path / "custom"
    init_workspace(workspace=workspace)
    config_path = workspace / "mdcomponents.toml"
    config_path.write_text('log_level = "ERROR"\n', encoding="utf-8")

    result = init_workspace(workspace=workspace, refresh=True, log_level="debug")

    rendered = tomllib.loads(config_path.read_text(encoding="utf-8"))
    assert rendered["log_level"] == "DEBUG"
    assert result.config.log_level == "DEBUG"
    assert result.seeded, "refresh should start from a fresh components folder"

    assert result.archive is not None
    assert result.archive.suffix == ".zip"
    with ZipFile(result.archive) as archive:
        names = archive.namelist()
    assert "mdcomponents.toml" in names
    assert "components/button.md" in names


def test_init_workspace_reuses_existing_config_without_refresh(
    tmp_path: Path,
) -> None:
    workspace = tmp_path / "workspace"
    init_workspace(workspace=workspace)

    config_path = workspace / "mdcomponents.toml"
    rendered = tomlkit.loads(config_path.read_text(encoding="utf-8"))
    rendered["log_level"] = "WARNING"
    config_path.write_text(tomlkit.dumps(rendered), encoding="utf-8")

    init_workspace(workspace=workspace)

    reread = tomlkit.loads(config_path.read_text(encoding="utf-8"))
    assert reread["log_level"] == "WARNING"


def test_init_workspace_applies_env_before_cli(tmp_path: Path) -> None:
    workspace = tmp_path / "workspace"
    init_workspace(workspace=workspace)

    from_env = init_workspace(
        workspace=workspace,
        env_overrides={"log_level": "warning"},
    )
    assert from_env.config.log_level == "WARNING"

    from_cli = init_workspace(
        workspace=workspace,
        env_overrides={"log_level": "warning"},
        log_level="debug",
    )
    assert from_cli.config.log_level == "DEBUG"
