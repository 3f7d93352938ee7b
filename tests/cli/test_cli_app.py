"""Integration tests for the Typer application exposed by :mod:`mdcomponents.cli`."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mdcomponents.cli import create_app
from mdcomponents.core.config import DEFAULTS_RESOURCE_NAME


def _workspace_env(tmp_path: Path) -> dict[str, str]:
    workspace = tmp_path / "workspace"
    return {
        "HOME": str(tmp_path),
        "MDCOMPONENTS_WORKSPACE": str(workspace),
    }


@pytest.fixture()
def runner() -> CliRunner:
    """Return a Typer CLI runner for invoking the application."""

    return CliRunner()


def test_cli_init_respects_env_and_outputs_status(
    runner: CliRunner,
    tmp_path: Path,
) -> None:
    env = _workspace_env(tmp_path)
    env["MDCOMPONENTS_LOG_LEVEL"] = "warning"

    app = create_app()
    result = runner.invoke(app, ["init"], env=env, catch_exceptions=False)

    assert result.exit_code == 0, result.output
    assert "Workspace initialized" in result.stdout
    assert "log level: WARNING" in result.stdout
    assert "Example components:" in result.stdout
    assert "  - button" in result.stdout

    workspace = Path(env["MDCOMPONENTS_WORKSPACE"])
    config_path = workspace / "mdcomponents.toml"

    assert config_path.exists()
    assert (workspace / DEFAULTS_RESOURCE_NAME).exists()
    assert (workspace / "logs").is_dir()
    assert (workspace / "components" / "card.md").exists()

    config = tomllib.loads(config_path.read_text(encoding="utf-8"))
    assert config["log_level"] == "WARNING"


def test_cli_init_no_examples_skips_seeding(
    runner: CliRunner,
    tmp_path: Path,
) -> None:
    env = _workspace_env(tmp_path)
    env["MDCOMPONENTS_LOG_LEVEL"] = "warning"

    result = runner.invoke(
        create_app(),
        ["init", "--no-examples"],
        env=env,
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "Example components:" not in result.stdout
    components = Path(env["MDCOMPONENTS_WORKSPACE"]) / "components"
    assert components.is_dir()
    assert list(components.iterdir()) == []


def test_cli_init_workspace_option_beats_env(
    runner: CliRunner,
    tmp_path: Path,
) -> None:
    env = _workspace_env(tmp_path)
    env["MDCOMPONENTS_LOG_LEVEL"] = "warning"
    target = tmp_path / "explicit"

    result = runner.invoke(
        create_app(),
        ["init", "--workspace", str(target), "--log-level", "error"],
        env=env,
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "log level: ERROR" in result.stdout
    assert (target / "mdcomponents.toml").exists()
    assert not Path(env["MDCOMPONENTS_WORKSPACE"]).exists()


def test_cli_init_rejects_file_workspace(
    runner: CliRunner,
    tmp_path: Path,
) -> None:
    env = _workspace_env(tmp_path)
    Path(env["MDCOMPONENTS_WORKSPACE"]).write_text("oops", encoding="utf-8")

    result = runner.invoke(create_app(), ["init"], env=env)

    assert result.exit_code == 1
    assert "Workspace error" in result.output


def test_cli_init_existing_workspace_note(
    runner: CliRunner,
    tmp_path: Path,
) -> None:
    env = _workspace_env(tmp_path)
    env["MDCOMPONENTS_LOG_LEVEL"] = "warning"

    app = create_app()
    first = runner.invoke(app, ["init"], env=env, catch_exceptions=False)
    assert first.exit_code == 0

    second = runner.invoke(app, ["init"], env=env, catch_exceptions=False)
    assert second.exit_code == 0
    assert "existing workspace detected" in second.output
    assert "Example components:" not in second.output


def test_cli_init_refresh_note(
    runner: CliRunner,
    tmp_path: Path,
) -> None:
    env = _workspace_env(tmp_path)
    env["MDCOMPONENTS_LOG_LEVEL"] = "warning"

    app = create_app()
    runner.invoke(app, ["init"], env=env, catch_exceptions=False)
    result = runner.invoke(
        app,
        ["init", "--refresh"],
        env=env,
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert "archived previous workspace before refresh" in result.output
    archives = Path(env["MDCOMPONENTS_WORKSPACE"]) / "archives"
    assert any(path.suffix == ".zip" for path in archives.iterdir())
