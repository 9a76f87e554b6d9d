# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared utilities for CLI commands (logging, errors, root discovery)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Final

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from ..errors import RepoToolsError
from ..logging import MessageKind, emit
from ..workspace import locate_root

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Directory to start searching for paket.dependencies from."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji in CLI output."),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Print detailed traces."),
]
_LOG_FORMAT: Final[str] = "%(message)s"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False

    def fail(self, message: str) -> None:
        emit(MessageKind.FAIL, message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        emit(MessageKind.WARN, message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        emit(MessageKind.OK, message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        emit(MessageKind.INFO, message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout without styling."""

        typer.echo(message)

    def debug(self, message: str) -> None:
        """Print ``message`` on the logger console when ``--verbose`` is active."""

        if self.debug_enabled:
            text = Text("[debug] ", style="bold cyan")
            text.append(message, style="dim")
            self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    When ``debug`` is set, module loggers are routed through a Rich handler at
    ``DEBUG`` level so verbose traces reach the terminal.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger instance bound to a dedicated Rich console.
    """

    console = Console(no_color=no_color, highlight=False, soft_wrap=True)
    if debug:
        package_logger = logging.getLogger("repotools")
        package_logger.setLevel(logging.DEBUG)
        if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
            handler = RichHandler(console=console, show_path=False, show_time=False)
            handler.setFormatter(logging.Formatter(_LOG_FORMAT))
            package_logger.addHandler(handler)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


def resolve_root(start: Path, *, logger: CLILogger) -> Path:
    """Return the repository root above ``start`` or raise :class:`CLIError`."""

    try:
        return locate_root(start)
    except RepoToolsError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc


__all__ = [
    "CLIError",
    "CLILogger",
    "EMOJI_OPTION",
    "ROOT_OPTION",
    "VERBOSE_OPTION",
    "build_cli_logger",
    "resolve_root",
]
