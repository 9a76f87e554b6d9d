# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command printing shell snippets that toggle the tool directory on PATH."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ....errors import RepoToolsError
from ....models import ExportDirection, PathExportRequest, ShellDialect
from ....pathenv import build_path_snippets, emit_path_snippets, notice_line
from ...shared import EMOJI_OPTION, ROOT_OPTION, CLIError, build_cli_logger, resolve_root
from .services import list_commands, tool_directory


def rt_helper_command(
    direction: Annotated[
        ExportDirection,
        typer.Argument(help="Add the tool directory to PATH, remove it, or list its commands."),
    ] = ExportDirection.LIST,
    export: Annotated[
        ShellDialect | None,
        typer.Option("--export", help="Shell dialect of the emitted snippet."),
    ] = None,
    export_path: Annotated[
        Path | None,
        typer.Option("--export-path", help="Write the snippet to this file instead of stdout."),
    ] = None,
    group: Annotated[
        str | None,
        typer.Option("--group", "-g", help="Dependency group whose tool directory is used."),
    ] = None,
    root: ROOT_OPTION = Path("."),
    emoji: EMOJI_OPTION = True,
) -> None:
    """Emit PATH snippets for the repo tools directory.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    logger = build_cli_logger(emoji=emoji)
    request = PathExportRequest(direction=direction, dialect=export, destination=export_path)
    try:
        repo_root = resolve_root(root, logger=logger)
        directory = tool_directory(repo_root, group, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    if request.destination is None and directory.is_dir():
        logger.echo(notice_line(f"Found dir: {directory}", request.dialect))

    if request.direction is ExportDirection.LIST:
        for name in list_commands(directory):
            logger.echo(notice_line(name, request.dialect))

    try:
        emit_path_snippets(
            build_path_snippets(request, directory),
            request.destination,
            echo=logger.echo,
        )
    except RepoToolsError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc
    raise typer.Exit(code=0)


__all__ = ["rt_helper_command"]
