"""Application state and configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from docforge.build.report import Reporter
from docforge.core.base import BaseConfig, BaseState
from docforge.core.log import Logger
from docforge.core.result import (
    BuildAttempt,
    BuildRequest,
    BuildResult,
    CleanupReport,
)
from docforge.core.yaml_settings import YamlWithIncludesSettingsSource
from docforge.install.strategy import InstallProfile

# Modules available for template substitution in YAML files
# Usage: {platformdirs.user_log_dir}, {os.getcwd}, {Path.home}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class BuildConfig(BaseConfig):
    """Document build configuration."""

    source: Path = Field(
        default=Path("main.tex"),
        description="Document root file to compile",
    )
    tool: str = Field(
        default="pdflatex",
        description="Compiler executable name, searched on PATH",
    )
    tool_path: Path | None = Field(
        default=None,
        description="Explicit compiler path; skips the PATH search",
    )
    tool_args: list[str] = Field(
        default_factory=lambda: ["-interaction=nonstopmode"],
        description="Arguments placed before the source file name",
    )
    search_paths: list[Path] = Field(
        default_factory=list,
        description="Extra directories searched when the tool is not on PATH",
    )
    output_dir: Path = Field(
        default=Path("output"),
        description="Directory receiving promoted artifacts",
    )
    label: str = Field(
        default="document",
        description="Identity prefix of promoted artifact names",
    )
    artifact_extension: str = Field(
        default="pdf",
        description="Extension of the compiler's output file",
    )
    max_attempts: int = Field(
        default=2,
        ge=1,
        description="Compiler runs allowed before giving up",
    )
    log_tail_lines: int = Field(
        default=20,
        ge=0,
        description="Compiler log lines shown when compilation fails",
    )
    transient_extensions: list[str] = Field(
        default_factory=lambda: ["aux", "log", "out"],
        description="Byproduct extensions removed during cleanup",
    )
    open_output: bool = Field(
        default=False,
        description="Open the output directory after a successful build",
    )
    openers: list[str] = Field(
        default_factory=lambda: ["xdg-open", "open", "explorer"],
        description="Commands tried, in order, to open the output directory",
    )

    def to_request(self, base_dir: Path) -> BuildRequest:
        """Freeze this configuration into a BuildRequest.

        Relative paths are resolved once, against base_dir.
        """
        def absolute(path: Path) -> Path:
            path = path.expanduser()
            return path if path.is_absolute() else base_dir / path

        return BuildRequest(
            source_path=absolute(self.source),
            tool=self.tool,
            tool_path=absolute(self.tool_path) if self.tool_path else None,
            tool_args=tuple(self.tool_args),
            output_directory=absolute(self.output_dir),
            max_attempts=self.max_attempts,
            label=self.label,
            artifact_extension=self.artifact_extension,
            log_tail_lines=self.log_tail_lines,
            transient_extensions=tuple(self.transient_extensions),
            search_paths=tuple(self.search_paths),
        )


class InstallConfig(BaseConfig):
    """LaTeX distribution installation configuration."""

    profile: InstallProfile = Field(
        default=InstallProfile.RECOMMENDED,
        description="Package set: basic, recommended, full, custom",
    )
    sudo: bool = Field(
        default=True,
        description="Prefix system package manager commands with sudo",
    )
    companion_tools: list[str] = Field(
        default_factory=lambda: [
            "latex", "xelatex", "lualatex", "bibtex", "tlmgr"
        ],
        description="Tools reported as available after installation",
    )
    extra_packages: list[str] = Field(
        default_factory=list,
        description="Packages installed with tlmgr when --extras is set",
    )
    smoke_test: bool = Field(
        default=True,
        description="Compile a test document after installation",
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance"
    )
    build: BuildConfig = Field(
        default_factory=BuildConfig,
        description="Document build settings"
    )
    install: InstallConfig = Field(
        default_factory=InstallConfig,
        description="LaTeX installation settings"
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "docforge"
        ),
        description=(
            "Root directory for log files "
            "(supports {platformdirs.*} templates)"
        ),
    )
    commands: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description=(
            "Command templates by package manager "
            "(apt, dnf, homebrew, ...), keys 'update' and 'install'"
        ),
    )

    @model_validator(mode='after')
    def _default_logger(self) -> 'Config':
        if self.logger is None:
            self.logger = Logger()
        return self

    def setup_logging(self) -> None:
        """Initialize the global logger from this configuration.

        Called by State once templates have been substituted, so
        log_root and file paths are final.
        """
        from docforge.core.log import setup_logger

        setup_logger(
            log_root=self.log_root,
            run_name=self.build.label,
            console=self.logger.console,
            otlp=self.logger.otlp,
            file=self.logger.file,
            logfire=self.logger.logfire,
        )

    def close(self):
        from docforge.core.log import logger
        if logger is not None:
            logger.close()

        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable during workflow execution)
# ============================================================

class BuildState(BaseState):
    """Build workflow runtime state."""

    request: BuildRequest | None = Field(
        default=None,
        description="Frozen request for this invocation",
    )
    tool: Path | None = Field(
        default=None,
        description="Resolved compiler path",
    )
    attempts: list[BuildAttempt] = Field(
        default_factory=list,
        description="Compiler runs so far, in order",
    )
    artifact: Path | None = Field(
        default=None,
        description="Promoted artifact path",
    )
    size_bytes: int | None = Field(
        default=None,
        description="Size of the promoted artifact",
    )
    error: Any = Field(
        default=None,
        description="Fatal error raised after compilation started",
    )
    result: BuildResult | None = Field(
        default=None,
        description="Terminal result, set by the cleanup stage",
    )
    cleanup: CleanupReport | None = Field(
        default=None,
        description="What the cleanup stage removed",
    )
    reporter: Any = Field(
        default_factory=Reporter,
        description="Operator message sink",
    )
    status: str = Field(
        default="pending",
        description=(
            "preflight, prepare_output, compiling, promoting, "
            "cleanup, done, failed"
        ),
    )


class InstallState(BaseState):
    """Install workflow runtime state."""

    profile: InstallProfile | None = Field(
        default=None,
        description="Profile requested on the command line",
    )
    reinstall: bool = Field(
        default=False,
        description="Install even if the compiler is already present",
    )
    extras: bool = Field(
        default=False,
        description="Install config.install.extra_packages with tlmgr",
    )
    platform: str = Field(
        default="",
        description="platform.system() of this machine",
    )
    package_manager: str | None = Field(
        default=None,
        description="Detected package manager",
    )
    smoke_test_passed: bool | None = Field(
        default=None,
        description="Result of the test compile, if one ran",
    )
    reporter: Any = Field(
        default_factory=Reporter,
        description="Operator message sink",
    )
    installed: bool = Field(
        default=False,
        description="Whether installer commands ran in this invocation",
    )
    version: str | None = Field(
        default=None,
        description="First line of the compiler's --version output",
    )
    available_tools: list[str] = Field(
        default_factory=list,
        description="Companion tools found after installation",
    )
    status: str = Field(
        default="pending",
        description="pending, installing, verified, failed",
    )


class Runtime(BaseModel):
    """All runtime state, one section per command."""

    build: BuildState = Field(
        default_factory=BuildState,
        description="Build workflow runtime state"
    )
    install: InstallState = Field(
        default_factory=InstallState,
        description="Install workflow runtime state"
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state; flows through every workflow.

    Sources, highest priority first: init arguments, YAML (with
    includes), .env, environment variables (DOCFORGE_ prefix, __ for
    nesting), secret files. The CLI layer is added by CliApp.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)"
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during workflow execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge "
            "(--include on CLI or include: in YAML files)"
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file="docforge.yaml",
        env_file=".env",
        env_prefix="DOCFORGE_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore'
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> "State":
        """Replace {a.b.c} templates in config, then start logging."""
        self._substitute_recursive(self.config)
        self.config.setup_logging()
        return self

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i in range(len(obj)):
                obj[i] = self._substitute_value(obj[i])

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            new = self._substitute_string(value)
            return value if new == value else new
        elif isinstance(value, Path):
            new = self._substitute_string(str(value))
            return value if new == str(value) else Path(new)
        elif isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def _substitute_string(self, value: str) -> str:
        """Replace {field.path} templates with field values.

        Examples:
            "{config.build.output_dir}/archive" -> "output/archive"
            "{platformdirs.user_log_dir}" -> "~/.local/state/docforge/log"
        """
        def replace_template(match):
            parts = match.group(1).split(".")

            if parts[0] in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[parts[0]]
                parts = parts[1:]
            else:
                obj = self

            try:
                for part in parts:
                    obj = getattr(obj, part)

                if callable(obj):
                    module = getattr(obj, "__module__", "") or ""
                    if module.startswith("platformdirs"):
                        obj = obj('docforge', appauthor=False)
                    else:
                        obj = obj()

                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return re.sub(r'\{([A-Za-z._]+)\}', replace_template, value)


__all__ = ["State", "Config", "BuildConfig", "InstallConfig"]
