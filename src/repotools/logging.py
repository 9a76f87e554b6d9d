# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing status messages rendered through Rich.

Messages are printed to stdout. Colour is only applied when stdout is a
terminal; emoji prefixes are opt-in per call so the CLI can honour
``--no-emoji``.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import StrEnum
from functools import cache
from typing import Final

from rich.console import Console
from rich.text import Text


class MessageKind(StrEnum):
    """Severity of a status message."""

    INFO = "info"
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True, slots=True)
class _MessageStyle:
    style: str
    glyph: str


_STYLES: Final[dict[MessageKind, _MessageStyle]] = {
    MessageKind.INFO: _MessageStyle("cyan", "ℹ️"),
    MessageKind.OK: _MessageStyle("green", "✅"),
    MessageKind.WARN: _MessageStyle("yellow", "⚠️"),
    MessageKind.FAIL: _MessageStyle("red", "❌"),
}


def stdout_is_terminal() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def _console(color: bool, emoji: bool) -> Console:
    # file is left unset so the console follows sys.stdout when it is swapped
    return Console(
        color_system="auto" if color else None,
        force_terminal=color,
        no_color=not color,
        emoji=emoji,
        soft_wrap=True,
        highlight=False,
    )


def emit(kind: MessageKind, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` with the prefix and colour of ``kind``.

    Args:
        kind: Message severity.
        msg: Text to print.
        use_emoji: Prefix the message with the severity glyph.
        use_color: Force colour on or off; defaults to terminal detection.
    """

    spec = _STYLES[kind]
    color = stdout_is_terminal() if use_color is None else use_color
    text = Text(f"{spec.glyph} {msg}" if use_emoji else msg)
    if color:
        text.stylize(spec.style)
    _console(color, use_emoji).print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageKind.INFO, msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageKind.OK, msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageKind.WARN, msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageKind.FAIL, msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["MessageKind", "emit", "fail", "info", "ok", "stdout_is_terminal", "warn"]
