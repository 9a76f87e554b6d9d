# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""PATH helper CLI command package."""

from __future__ import annotations

import typer

from .command import rt_helper_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the ``rt-helper`` command on the provided Typer application.

    Args:
        app: Typer application receiving the command.
    """

    app.command("rt-helper")(rt_helper_command)
