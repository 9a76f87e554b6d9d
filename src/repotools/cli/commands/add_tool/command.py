# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registering a repo tool package."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ....config import add_tool_to_config
from ....errors import RepoToolsError
from ....models import MAIN_GROUP_NAME
from ....workspace import CONFIG_FILENAME
from ...shared import (
    EMOJI_OPTION,
    ROOT_OPTION,
    VERBOSE_OPTION,
    CLIError,
    build_cli_logger,
    resolve_root,
)
from ..generate.services import emit_generation_summary, run_generation


def add_tool_command(
    package: Annotated[str, typer.Argument(help="Package id providing the tool.")],
    root: ROOT_OPTION = Path("."),
    group: Annotated[
        str,
        typer.Option("--group", "-g", help="Dependency group receiving the package."),
    ] = MAIN_GROUP_NAME,
    alias: Annotated[
        str | None,
        typer.Option("--alias", help="Command name exposed instead of the tool name."),
    ] = None,
    args: Annotated[
        list[str] | None,
        typer.Option("--arg", help="Default argument baked into the alias (repeatable)."),
    ] = None,
    no_install: Annotated[
        bool,
        typer.Option("--no-install", help="Only update the configuration file."),
    ] = False,
    verbose: VERBOSE_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Record a tool package in the configuration and regenerate launchers."""

    logger = build_cli_logger(emoji=emoji, debug=verbose)
    if args and not alias:
        logger.fail("--arg requires --alias")
        raise typer.Exit(code=2)
    try:
        repo_root = resolve_root(root, logger=logger)
        config_path = repo_root / CONFIG_FILENAME
        try:
            add_tool_to_config(config_path, package, group=group, alias=alias, args=args or ())
        except RepoToolsError as exc:
            logger.fail(str(exc))
            raise CLIError(str(exc)) from exc
        logger.ok(f"{config_path.name} updated with {package} ({group})")
        if no_install:
            raise typer.Exit(code=0)
        result = run_generation(repo_root, logger=logger, groups=[group])
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    emit_generation_summary(result, logger=logger)
    raise typer.Exit(code=0)


__all__ = ["add_tool_command"]
