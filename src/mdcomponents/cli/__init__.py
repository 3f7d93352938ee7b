"""Command-line interface primitives for :mod:`mdcomponents`.

This module exposes the Typer application behind the ``mdcomponents`` console
script and wires the `init` command into the core workspace/bootstrap helpers.

Example:
    >>> import typer
    >>> from mdcomponents.cli import create_app
    >>> app = create_app()
    >>> isinstance(app, typer.Typer)
    True
"""

from __future__ import annotations

import os
from pathlib import Path

import typer

from mdcomponents.cli.component import create_component_app
from mdcomponents.cli.init import InitResult, init_workspace
from mdcomponents.core.config import (
    DEFAULTS_RESOURCE_NAME,
    ENV_LOG_LEVEL,
    ENV_WORKSPACE,
)
from mdcomponents.core.logging import configure_logging, get_logger
from mdcomponents.core.paths import CONFIG_FILENAME, resolve_workspace

_app_help = (
    "Reusable markdown components with scoped styles."
    "\n\n"
    "Use `mdcomponents init` to bootstrap a workspace and seed example "
    "components."
)


def _emit_workspace_summary(
    *,
    result: InitResult,
    refresh: bool,
    existing: bool,
) -> None:
    """Print a human-friendly summary of bootstrap results."""

    config = result.config
    typer.secho("Workspace initialized", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  workspace: {config.workspace}")
    typer.echo(f"  config: {config.workspace / CONFIG_FILENAME}")
    typer.echo(f"  defaults: packaged resource ({DEFAULTS_RESOURCE_NAME})")
    typer.echo(f"  components: {result.components_dir}")
    typer.echo(f"  log level: {config.log_level}")

    if existing and not refresh:
        typer.echo("  note: existing workspace detected; files left untouched")
    elif refresh:
        typer.echo("  note: archived previous workspace before refresh")

    if result.seeded:
        typer.echo("Example components:")
        for path in result.seeded:
            typer.echo(f"  - {path.stem}")


def create_app() -> "typer.Typer":
    """Return the Typer application powering the ``mdcomponents`` CLI.

    Example:
        >>> import typer
        >>> from mdcomponents.cli import create_app
        >>> cli = create_app()
        >>> isinstance(cli, typer.Typer)
        True

    Returns:
        A configured Typer application ready to be invoked by ``mdcomponents``.
    """

    app = typer.Typer(
        help=_app_help,
        no_args_is_help=True,
        rich_markup_mode="rich",
        invoke_without_command=False,
        cls=typer.core.TyperGroup,
    )

    app.add_typer(create_component_app(), name="component")

    @app.callback()
    def main_callback() -> None:
        """Top-level CLI callback ensuring subcommands are dispatched."""

        return None

    @app.command(
        "init",
        help="Bootstrap a workspace and seed configuration files.",
    )
    def init_command(
        workspace: Path | None = typer.Option(
            None,
            "--workspace",
            "-w",
            help=(
                "Override the workspace directory (defaults to "
                "$HOME/.mdcomponents or MDCOMPONENTS_WORKSPACE)."
            ),
        ),
        refresh: bool = typer.Option(
            False,
            "--refresh",
            help=(
                "Archive existing workspace contents before regenerating a "
                "clean layout."
            ),
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            "-l",
            help="Override the logging level (DEBUG/INFO/WARNING/ERROR).",
        ),
        no_examples: bool = typer.Option(
            False,
            "--no-examples",
            help="Do not seed the example components into a new folder.",
        ),
    ) -> None:
        """Initialize (or refresh) the local workspace.

        Example:
            >>> from typer.testing import CliRunner
            >>> runner = CliRunner()
            >>> app = create_app()
            >>> result = runner.invoke(app, ["init", "--help"])
            >>> result.exit_code
            0
        """

        env_workspace = os.environ.get(ENV_WORKSPACE)
        env_log_level = os.environ.get(ENV_LOG_LEVEL)

        env_workspace_path = (
            Path(env_workspace).expanduser() if env_workspace else None
        )

        try:
            paths = resolve_workspace(
                workspace_override=workspace,
                env_override=env_workspace_path,
            )
        except ValueError as exc:
            typer.secho(f"Workspace error: {exc}", fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc

        env_config = {"log_level": env_log_level} if env_log_level else None
        workspace_exists = paths.workspace.exists()

        try:
            result = init_workspace(
                workspace=paths.workspace,
                refresh=refresh,
                log_level=log_level,
                env_overrides=env_config,
                seed_examples=not no_examples,
            )
        except Exception as exc:  # pragma: no cover
            message = f"Failed to initialize workspace: {exc}"
            typer.secho(message, fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc

        config = result.config
        configure_logging(
            level=config.log_level,
            log_dir=config.workspace / "logs",
            debug=config.components.debug_mode,
        )
        logger = get_logger(__name__, command="init")
        logger.info(
            "init-complete",
            workspace=str(config.workspace),
            refresh=refresh,
            components=str(result.components_dir),
            seeded=[path.name for path in result.seeded],
        )

        _emit_workspace_summary(
            result=result,
            refresh=refresh,
            existing=workspace_exists,
        )

    return app


__all__ = ["create_app"]
