"""Configuration models and loaders for :mod:`mdcomponents`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from pathlib import Path
from typing import Any, Mapping

import tomllib
import tomlkit
from pydantic import BaseModel, Field, ValidationError, field_validator

from mdcomponents.components.models import DisplayMode, RenderOptions
from mdcomponents.core.paths import DEFAULT_WORKSPACE_DIRNAME, WorkspacePaths
from mdcomponents.resources import get_resource

DEFAULTS_RESOURCE_NAME = "mdcomponents.defaults.toml"
ENV_WORKSPACE = "MDCOMPONENTS_WORKSPACE"
ENV_LOG_LEVEL = "MDCOMPONENTS_LOG_LEVEL"

SCRIPT_RUNTIMES: tuple[str, ...] = ("python", "embed")


class ConfigError(RuntimeError):
    """Raised when the workspace configuration cannot be read or validated."""


class ComponentSettings(BaseModel):
    """Settings controlling how components are discovered and rendered."""

    folder: str = Field(
        default="components",
        description=(
            "Folder holding component definitions; relative paths resolve "
            "against the workspace root."
        ),
    )
    live_reload: bool = Field(
        default=True,
        description="Reload changed component files before each render.",
    )
    enable_scripts: bool = Field(
        default=True,
        description="Whether component <script> bodies are executed.",
    )
    debug_mode: bool = Field(
        default=False,
        description="Force DEBUG logging for loading and rendering events.",
    )
    display_mode: DisplayMode = Field(
        default=DisplayMode.INLINE,
        description="Default container display mode: 'inline' or 'block'.",
    )
    script_runtime: str = Field(
        default="python",
        description=(
            "How scripts run: 'python' executes them in-process, 'embed' "
            "emits a browser <script> hook."
        ),
    )

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @field_validator("folder")
    @classmethod
    def _validate_folder(cls, value: str) -> str:
        return value or "components"

    @field_validator("script_runtime")
    @classmethod
    def _validate_runtime(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in SCRIPT_RUNTIMES:
            allowed = ", ".join(SCRIPT_RUNTIMES)
            raise ValueError(f"script_runtime must be one of: {allowed}.")
        return normalized

    def render_options(
        self,
        display_mode: DisplayMode | str | None = None,
    ) -> RenderOptions:
        """Return :class:`RenderOptions` derived from these settings.

        Example:
            >>> ComponentSettings(enable_scripts=False).render_options().enable_scripts
            False
        """

        mode = DisplayMode(display_mode) if display_mode else self.display_mode
        return RenderOptions(
            enable_scripts=self.enable_scripts,
            display_mode=mode,
        )


class AppConfig(BaseModel):
    """Root configuration for the :mod:`mdcomponents` application."""

    workspace: Path = Field(
        default_factory=lambda: Path.home() / DEFAULT_WORKSPACE_DIRNAME,
        description="Absolute path to the workspace root.",
    )
    log_level: str = Field(
        default="INFO",
        description="Default logging level for the application runtime.",
    )
    components: ComponentSettings = Field(
        default_factory=ComponentSettings,
        description="Component discovery and rendering settings.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("workspace")
    @classmethod
    def _expand_workspace(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    def components_dir(self, paths: WorkspacePaths | None = None) -> Path:
        """Return the resolved components folder."""

        folder = Path(self.components.folder).expanduser()
        if folder.is_absolute():
            return folder
        if paths is not None:
            return paths.components_dir(folder)
        return self.workspace / folder


def read_packaged_defaults_text() -> str:
    """Return the raw packaged defaults TOML content.

    Example:
        >>> read_packaged_defaults_text().startswith("#")
        True
    """

    return get_resource(DEFAULTS_RESOURCE_NAME).read_text(encoding="utf-8")


def load_packaged_defaults() -> dict[str, Any]:
    """Load the packaged defaults as a plain dictionary.

    Example:
        >>> load_packaged_defaults()["log_level"]
        'INFO'
    """

    return tomllib.loads(read_packaged_defaults_text())


def _deep_merge(
    base: Mapping[str, Any],
    overlay: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge ``overlay`` into ``base`` returning a new dict."""

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if (
            key in merged
            and isinstance(merged[key], MappingABC)
            and isinstance(value, MappingABC)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    *,
    defaults: Mapping[str, Any],
    user_config: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load configuration according to the precedence stack.

    Later layers win: defaults < user file < environment < CLI flags.

    Args:
        defaults: Packaged defaults shipped with the application.
        user_config: Parsed ``mdcomponents.toml`` content.
        env_config: Settings derived from environment variables.
        cli_overrides: Settings supplied via CLI flags.

    Returns:
        A validated :class:`AppConfig` instance.

    Raises:
        pydantic.ValidationError: If the merged payload is invalid.
    """

    stack: dict[str, Any] = dict(defaults)
    for layer in (user_config, env_config, cli_overrides):
        if layer:
            stack = _deep_merge(stack, layer)
    return AppConfig(**stack)


def env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Translate ``MDCOMPONENTS_*`` variables into a config layer.

    Example:
        >>> env_overrides({"MDCOMPONENTS_LOG_LEVEL": "debug"})
        {'log_level': 'debug'}
    """

    layer: dict[str, Any] = {}
    workspace = environ.get(ENV_WORKSPACE)
    if workspace:
        layer["workspace"] = workspace
    level = environ.get(ENV_LOG_LEVEL)
    if level:
        layer["log_level"] = level
    return layer


def load_workspace_config(
    paths: WorkspacePaths,
    *,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load the configuration stored in ``paths.config_file``.

    The workspace root always reflects ``paths`` so a config file copied
    between machines keeps working.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """

    user_data: dict[str, Any] | None = None
    if paths.config_file.exists():
        try:
            text = paths.config_file.read_text(encoding="utf-8")
            user_data = tomllib.loads(text)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(
                f"Could not read {paths.config_file}: {exc}"
            ) from exc

    overrides = dict(cli_overrides or {})
    overrides["workspace"] = str(paths.workspace)
    try:
        return load_config(
            defaults=load_packaged_defaults(),
            user_config=user_data,
            env_config=env_config,
            cli_overrides=overrides,
        )
    except ValidationError as exc:
        raise ConfigError(
            f"Invalid configuration in {paths.config_file}: {exc}"
        ) from exc


def render_user_config(
    config: AppConfig,
    *,
    include_comments: bool = True,
) -> str:
    """Render a ``mdcomponents.toml`` document for users to customize.

    Args:
        config: Configuration instance to serialize.
        include_comments: Whether to add explanatory comments.

    Returns:
        A TOML-formatted string ready to persist.
    """

    document = tomlkit.document()

    if include_comments:
        document.add(tomlkit.comment("Generated by mdcomponents init"))
        document.add(
            tomlkit.comment(
                "Precedence: CLI flags > env vars > mdcomponents.toml > defaults"
            )
        )
        document.add(tomlkit.comment("Environment overrides:"))
        document.add(tomlkit.comment(f"  {ENV_WORKSPACE}=/path/to/workspace"))
        document.add(tomlkit.comment(f"  {ENV_LOG_LEVEL}=info"))
        document.add(tomlkit.nl())

    document["workspace"] = str(config.workspace)
    document["log_level"] = config.log_level

    settings = config.components
    table = tomlkit.table()
    if include_comments:
        table.add(
            tomlkit.comment("Relative folders resolve against the workspace.")
        )
    table["folder"] = settings.folder
    table["live_reload"] = settings.live_reload
    table["enable_scripts"] = settings.enable_scripts
    table["debug_mode"] = settings.debug_mode
    table["display_mode"] = settings.display_mode.value
    table["script_runtime"] = settings.script_runtime
    document["components"] = table

    return tomlkit.dumps(document)


__all__ = [
    "AppConfig",
    "ComponentSettings",
    "ConfigError",
    "DEFAULTS_RESOURCE_NAME",
    "ENV_LOG_LEVEL",
    "ENV_WORKSPACE",
    "SCRIPT_RUNTIMES",
    "env_overrides",
    "load_config",
    "load_packaged_defaults",
    "load_workspace_config",
    "read_packaged_defaults_text",
    "render_user_config",
]
