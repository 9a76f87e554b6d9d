# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Repo tool registration CLI command package."""

from __future__ import annotations

import typer

from .command import add_tool_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the ``add-tool`` command on the provided Typer application.

    Args:
        app: Typer application receiving the command.
    """

    app.command("add-tool")(add_tool_command)
