"""Assertion settings loaded from YAML."""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path
from typing import TextIO

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from assertkit.errors import ConfigError
from assertkit.formatters import available_formatters, get_formatter
from assertkit.handler import AssertHandler, new_handler
from assertkit.options import (
    FileWriter,
    Option,
    no_exit,
    with_crash_on_failure,
    with_debug_mode,
    with_defer_mode,
    with_exit_func,
    with_formatter,
    with_panic_on_failure,
    with_quiet_mode,
    with_silent_mode,
    with_verbose_mode,
    with_writer,
)
from assertkit.verbose import setup_logger


class FailureAction(str, Enum):
    NONE = "none"
    EXIT = "exit"
    RAISE = "raise"


class AssertSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")
    formatter: str = "text"
    output: str = "stderr"
    on_failure: FailureAction = FailureAction.NONE
    defer: bool = False
    debug: bool = False
    verbose: bool = False
    log_file: str | None = None

    @field_validator("formatter")
    @classmethod
    def formatter_must_be_known(cls, v: str) -> str:
        if v not in available_formatters():
            raise ValueError(
                f"Unknown formatter {v!r}. Available: {', '.join(available_formatters())}"
            )
        return v

    @field_validator("output")
    @classmethod
    def expand_output(cls, v: str) -> str:
        """Expand ${VAR} and ${VAR:-default} references in file outputs."""
        try:
            return expandvars(v, nounset=True)
        except Exception as e:
            raise ValueError(f"output {v!r} references an unset variable: {e}") from e

    def resolve_writer(self) -> TextIO | FileWriter | None:
        """Resolve ``output``. Returns None for silent output.

        File outputs become a FileWriter, which opens the file on first
        write and is closed by the handler holding it.
        """
        if self.output == "stderr":
            return sys.stderr
        if self.output == "stdout":
            return sys.stdout
        if self.output == "silent":
            return None
        return FileWriter(self.output)

    def to_options(self) -> list[Option]:
        """The equivalent ordered list of modifiers."""
        options: list[Option] = [with_formatter(get_formatter(self.formatter))]

        writer = self.resolve_writer()
        options.append(with_writer(writer) if writer is not None else with_silent_mode())

        if self.on_failure is FailureAction.EXIT:
            options.append(with_crash_on_failure())
        elif self.on_failure is FailureAction.RAISE:
            options.append(with_panic_on_failure())
        else:
            options.append(with_exit_func(no_exit))

        options.append(with_defer_mode(self.defer))
        options.append(with_quiet_mode())
        if self.debug:
            options.append(with_debug_mode())
        if self.verbose:
            options.append(with_verbose_mode())
        return options


def load_settings(path: Path) -> AssertSettings:
    """Load and validate assertion settings from a YAML file."""
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    try:
        return AssertSettings(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}:\n{e}") from e


def handler_from_settings(settings: AssertSettings) -> AssertHandler:
    """Build a handler from settings, routing assertkit logs to log_file if set."""
    if settings.log_file:
        setup_logger(Path(expandvars(settings.log_file)), verbose=settings.verbose)
    return new_handler(*settings.to_options())
