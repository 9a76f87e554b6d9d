# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Wrapper script generation CLI command package."""

from __future__ import annotations

import typer

from .command import generate_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the ``generate`` command on the provided Typer application.

    Args:
        app: Typer application receiving the command.
    """

    app.command("generate")(generate_command)
