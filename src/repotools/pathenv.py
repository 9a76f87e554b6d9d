# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell snippets adding or removing the tool directory from ``PATH``."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from .errors import ScriptWriteError
from .models import ExportDirection, PathExportRequest, ShellDialect


def notice_line(message: str, dialect: ShellDialect | None) -> str:
    """Return ``message`` formatted as an echo statement for ``dialect``."""

    if dialect is ShellDialect.CMD:
        return f"ECHO {message}"
    if dialect is ShellDialect.SH:
        return f"echo {message}"
    return message


def add_to_path_line(directory: Path, dialect: ShellDialect | None) -> str:
    if dialect is None:
        return ""
    if dialect is ShellDialect.CMD:
        return f'SET "PATH={directory};%PATH%"'
    return f'export PATH="{directory}:$PATH"'


def remove_from_path_line(directory: Path, dialect: ShellDialect | None) -> str:
    if dialect is None:
        return ""
    if dialect is ShellDialect.CMD:
        return f"CALL SET PATH=%%PATH:{directory};=%% "
    return f'export PATH="${{PATH//"{directory}:"/}}"'


def build_path_snippets(request: PathExportRequest, directory: Path) -> list[str]:
    """Return the lines implementing ``request`` for ``directory``.

    ``enable`` and ``disable`` produce a notice followed by the PATH mutation;
    without a dialect the notice is plain text and the mutation line is empty. ``list`` produces no
    lines. The directory does not need to exist.

    Args:
        request: Direction, dialect and destination of the export.
        directory: Tool directory to add or remove.

    Returns:
        list[str]: Snippet lines in emission order.
    """

    if request.direction is ExportDirection.ENABLE:
        return [
            notice_line(f"adding '{directory}' to PATH env var", request.dialect),
            add_to_path_line(directory, request.dialect),
        ]
    if request.direction is ExportDirection.DISABLE:
        return [
            notice_line(f"removing '{directory}' from PATH env var", request.dialect),
            remove_from_path_line(directory, request.dialect),
        ]
    return []


def emit_path_snippets(
    lines: Sequence[str],
    destination: Path | None,
    *,
    echo: Callable[[str], None] = print,
) -> None:
    """Print ``lines`` or write them to ``destination``, one per line.

    Args:
        lines: Snippet lines from :func:`build_path_snippets`.
        destination: Target file overwritten on every call; ``None`` prints.
        echo: Line printer used when no destination is given.

    Raises:
        ScriptWriteError: If the destination file cannot be written.
    """

    if destination is None:
        for line in lines:
            echo(line)
        return
    try:
        destination.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    except OSError as exc:
        raise ScriptWriteError(destination, exc.strerror or str(exc)) from exc


__all__ = [
    "add_to_path_line",
    "build_path_snippets",
    "emit_path_snippets",
    "notice_line",
    "remove_from_path_line",
]
