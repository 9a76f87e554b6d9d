# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command generating launcher scripts for repo tools."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...shared import (
    EMOJI_OPTION,
    ROOT_OPTION,
    VERBOSE_OPTION,
    CLIError,
    build_cli_logger,
    resolve_root,
)
from .services import emit_generation_summary, run_generation


def generate_command(
    root: ROOT_OPTION = Path("."),
    groups: Annotated[
        list[str] | None,
        typer.Option("--group", "-g", help="Only generate launchers for this group (repeatable)."),
    ] = None,
    bin_dir: Annotated[
        str | None,
        typer.Option("--bin-dir", help="Output directory relative to the repository root."),
    ] = None,
    preferred_runtime: Annotated[
        str | None,
        typer.Option(
            "--preferred-runtime",
            help="Runtime build to prefer when a tool ships several (net or netcoreapp).",
        ),
    ] = None,
    jobs: Annotated[
        int,
        typer.Option("--jobs", "-j", min=1, help="Worker threads used to write launchers."),
    ] = 1,
    verbose: VERBOSE_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Generate launcher scripts for every configured repo tool.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    logger = build_cli_logger(emoji=emoji, debug=verbose)
    try:
        repo_root = resolve_root(root, logger=logger)
        logger.debug(f"root={repo_root}")
        result = run_generation(
            repo_root,
            logger=logger,
            groups=groups or (),
            bin_dir=bin_dir,
            preferred_runtime=preferred_runtime,
            jobs=jobs,
        )
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    emit_generation_summary(result, logger=logger)
    raise typer.Exit(code=0)


__all__ = ["generate_command"]
