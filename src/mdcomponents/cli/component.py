"""Typer command group for inspecting and rendering components."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from mdcomponents.components import (
    ComponentDefinition,
    ComponentError,
    ComponentRegistry,
    ComponentService,
    DisplayMode,
    Element,
    RenderOptions,
    format_block,
    format_invocation,
    is_quotable,
    parse_invocation,
)
from mdcomponents.core.config import (
    AppConfig,
    ENV_WORKSPACE,
    ConfigError,
    env_overrides,
    load_workspace_config,
)
from mdcomponents.core.logging import Logger, configure_logging, get_logger
from mdcomponents.core.paths import WorkspacePaths, resolve_workspace


@dataclass(slots=True)
class ComponentCLIContext:
    """Shared context object carried across `mdcomponents component` commands."""

    paths: WorkspacePaths
    config: AppConfig
    registry: ComponentRegistry
    service: ComponentService
    logger: Logger


def _resolve_workspace_override(workspace: Path | None) -> WorkspacePaths:
    env_workspace = os.environ.get(ENV_WORKSPACE)
    env_override = Path(env_workspace).expanduser() if env_workspace else None
    return resolve_workspace(
        workspace_override=workspace,
        env_override=env_override,
    )


def _require_context(ctx: typer.Context) -> ComponentCLIContext:
    context = getattr(ctx, "obj", None)
    if not isinstance(context, ComponentCLIContext):
        typer.secho(
            "Internal error: component context not initialized.",
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)
    return context


def _handle_failure(
    context: ComponentCLIContext,
    *,
    action: str,
    error: Exception,
    component: str | None = None,
) -> None:
    typer.secho(f"{action} failed: {error}", fg=typer.colors.RED)
    log = context.logger.bind(action=action)
    payload: dict[str, object] = {"error": str(error)}
    if component is not None:
        payload["component"] = component
    log.error("component-command-failed", **payload)
    raise typer.Exit(code=1) from error


def _format_props(definition: ComponentDefinition) -> str:
    return ", ".join(
        f"{key}={value!r}" for key, value in definition.props.items()
    )


def create_component_app() -> typer.Typer:
    """Return the ``component`` command group."""

    component_app = typer.Typer(
        name="component",
        help="Inspect and render components (list, show, snippet, render, build).",
        no_args_is_help=True,
        invoke_without_command=False,
    )

    @component_app.callback()
    def configure_component_commands(
        ctx: typer.Context,
        workspace: Path | None = typer.Option(
            None,
            "--workspace",
            "-w",
            help=(
                "Override workspace directory (defaults to "
                "MDCOMPONENTS_WORKSPACE or ~/.mdcomponents)."
            ),
        ),
    ) -> None:
        try:
            paths = _resolve_workspace_override(workspace)
        except ValueError as exc:
            typer.secho(f"Workspace error: {exc}", fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc

        if not paths.config_file.exists():
            typer.secho(
                f"Workspace config not found at {paths.config_file}. "
                "Run `mdcomponents init` first.",
                fg=typer.colors.RED,
            )
            raise typer.Exit(code=1)

        env_config = env_overrides(os.environ)
        env_config.pop("workspace", None)
        try:
            config = load_workspace_config(paths, env_config=env_config)
        except ConfigError as exc:
            typer.secho(
                f"Failed to load workspace config: {exc}",
                fg=typer.colors.RED,
            )
            raise typer.Exit(code=1) from exc

        configure_logging(
            level=config.log_level,
            log_dir=paths.logs_dir,
            debug=config.components.debug_mode,
        )
        logger = get_logger(__name__, command="component")
        registry = ComponentRegistry(config.components_dir(paths))
        registry.load_directory()
        service = ComponentService(registry, config.components)

        ctx.obj = ComponentCLIContext(
            paths=paths,
            config=config,
            registry=registry,
            service=service,
            logger=logger,
        )

    @component_app.command(
        "list",
        help="List the components found in the components folder.",
    )
    def list_components(ctx: typer.Context) -> None:
        context = _require_context(ctx)
        definitions = context.registry.definitions()
        if not definitions:
            typer.echo(
                "No components found in "
                f"{context.config.components_dir(context.paths)}."
            )
            return

        table = Table(title="Components")
        table.add_column("name", style="cyan", no_wrap=True)
        table.add_column("description")
        table.add_column("props")
        table.add_column("source", overflow="fold")
        for definition in definitions:
            table.add_row(
                definition.name,
                definition.description,
                _format_props(definition),
                definition.source_path,
            )
        Console().print(table)

    @component_app.command(
        "show",
        help="Show a component's props, template, styles and script.",
    )
    def show_component(
        ctx: typer.Context,
        name: str = typer.Argument(..., metavar="NAME"),
    ) -> None:
        context = _require_context(ctx)
        try:
            definition = context.registry.require(name)
        except ComponentError as exc:
            _handle_failure(context, action="show", error=exc, component=name)
            return

        typer.secho(f"component: {definition.name}", fg=typer.colors.CYAN, bold=True)
        typer.echo(f"  description: {definition.description or '<none>'}")
        typer.echo(f"  source: {definition.source_path or '<memory>'}")
        if definition.props:
            typer.echo("  props:")
            for key, value in definition.props.items():
                typer.echo(f"    {key}: {value!r}")
        else:
            typer.echo("  props: <none>")
        typer.echo("  template:")
        typer.echo(definition.template)
        if definition.styles:
            typer.echo("  styles:")
            typer.echo(definition.styles)
        if definition.script:
            typer.echo("  script:")
            typer.echo(definition.script)

    @component_app.command(
        "snippet",
        help="Print an invocation snippet populated with the default props.",
    )
    def snippet(
        ctx: typer.Context,
        name: str = typer.Argument(..., metavar="NAME"),
        inline: bool = typer.Option(
            False,
            "--inline",
            help="Emit an inline ::name(...):: marker instead of a fenced block.",
        ),
    ) -> None:
        context = _require_context(ctx)
        try:
            definition = context.registry.require(name)
        except ComponentError as exc:
            _handle_failure(context, action="snippet", error=exc, component=name)
            return

        unquotable = [
            key for key, value in definition.props.items() if not is_quotable(value)
        ]
        if unquotable:
            typer.secho(
                "warning: default value of "
                f"{', '.join(unquotable)} mixes ' and \" and cannot be passed "
                "as an argument; edit the snippet by hand.",
                fg=typer.colors.YELLOW,
                err=True,
            )
            context.logger.bind(action="snippet").warning(
                "snippet-props-unquotable",
                component=definition.name,
                props=unquotable,
            )

        invocation = format_invocation(definition.name, definition.props)
        if inline:
            typer.echo(f"::{invocation}::")
        else:
            typer.echo(format_block(invocation))

    @component_app.command(
        "render",
        help="Render one or more invocations to HTML on stdout.",
    )
    def render_invocations(
        ctx: typer.Context,
        invocations: list[str] = typer.Argument(
            ...,
            metavar="INVOCATION...",
            help='Invocations such as \'button(text="Save")\'.',
        ),
        display_mode: DisplayMode | None = typer.Option(
            None,
            "--display-mode",
            "-m",
            case_sensitive=False,
            help="Override the configured display mode.",
        ),
        no_scripts: bool = typer.Option(
            False,
            "--no-scripts",
            help="Skip component scripts for this render.",
        ),
    ) -> None:
        context = _require_context(ctx)
        options = context.service.options(display_mode)
        if no_scripts:
            options = RenderOptions(
                enable_scripts=False,
                display_mode=options.display_mode,
            )

        for raw in invocations:
            invocation = parse_invocation(raw)
            if invocation is None:
                _handle_failure(
                    context,
                    action="render",
                    error=ValueError(f"Could not parse invocation {raw!r}"),
                )
                return
            try:
                context.registry.require(invocation.name)
            except ComponentError as exc:
                _handle_failure(
                    context,
                    action="render",
                    error=exc,
                    component=invocation.name,
                )
                return
            element = context.service.render_invocation(
                invocation,
                Element("div"),
                options=options,
            )
            typer.echo(element.to_html())

    @component_app.command(
        "build",
        help="Expand component blocks and inline markers in a markdown file.",
    )
    def build_document(
        ctx: typer.Context,
        source: Path = typer.Argument(
            ...,
            metavar="INPUT",
            exists=True,
            dir_okay=False,
            readable=True,
            help="Markdown document to expand.",
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write the expanded document here instead of stdout.",
        ),
    ) -> None:
        context = _require_context(ctx)
        try:
            markdown = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _handle_failure(context, action="build", error=exc)
            return

        rendered = context.service.render_document(markdown)
        if output is None:
            typer.echo(rendered, nl=False)
            return

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered, encoding="utf-8")
        context.logger.bind(action="build").info(
            "document-built",
            source=str(source),
            output=str(output),
        )
        typer.secho(f"Wrote {output}", fg=typer.colors.GREEN)

    return component_app


__all__ = ["ComponentCLIContext", "create_component_app"]
