# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Repository information CLI command package."""

from __future__ import annotations

import typer

from .command import info_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the ``info`` command on the provided Typer application.

    Args:
        app: Typer application receiving the command.
    """

    app.command("info")(info_command)
