# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command printing repository locations."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...shared import EMOJI_OPTION, ROOT_OPTION, CLIError, build_cli_logger, resolve_root
from ..rt_helper.services import tool_directory


def info_command(
    repotools_dir: Annotated[
        bool,
        typer.Option("--repotools-dir", help="Print the main group's launcher directory when it exists."),
    ] = False,
    dependencies_dir: Annotated[
        bool,
        typer.Option("--dependencies-dir", help="Print the directory holding paket.dependencies."),
    ] = False,
    root: ROOT_OPTION = Path("."),
    emoji: EMOJI_OPTION = True,
) -> None:
    """Print the repository root or the repo tools directory."""

    logger = build_cli_logger(emoji=emoji)
    try:
        repo_root = resolve_root(root, logger=logger)
        if dependencies_dir:
            logger.echo(str(repo_root))
        elif repotools_dir:
            directory = tool_directory(repo_root, None, logger=logger)
            if directory.is_dir():
                logger.echo(str(directory))
        else:
            logger.info(f"Repository root: {repo_root}")
            logger.info(f"Repo tools directory: {tool_directory(repo_root, None, logger=logger)}")
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=0)


__all__ = ["info_command"]
