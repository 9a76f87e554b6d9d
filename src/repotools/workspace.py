# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the repository root holding the dependencies file."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Final

from .errors import RootNotFoundError

DEPENDENCIES_FILENAME: Final[str] = "paket.dependencies"
CONFIG_FILENAME: Final[str] = "paket.repotools.toml"
ROOT_MARKERS: Final[tuple[str, ...]] = (DEPENDENCIES_FILENAME, CONFIG_FILENAME)


def _iter_candidates(start: Path) -> Iterable[Path]:
    current = start
    while True:
        yield current
        if current.parent == current:
            break
        current = current.parent


def try_locate_root(start: Path) -> Path | None:
    """Return the closest directory at or above ``start`` holding a root marker."""

    origin = start.expanduser().resolve()
    if origin.is_file():
        origin = origin.parent
    for candidate in _iter_candidates(origin):
        if any((candidate / marker).is_file() for marker in ROOT_MARKERS):
            return candidate
    return None


def locate_root(start: Path) -> Path:
    """Return the repository root for ``start``.

    Raises:
        RootNotFoundError: If no directory above ``start`` holds a root marker.
    """

    root = try_locate_root(start)
    if root is None:
        raise RootNotFoundError(start)
    return root


__all__ = [
    "CONFIG_FILENAME",
    "DEPENDENCIES_FILENAME",
    "ROOT_MARKERS",
    "locate_root",
    "try_locate_root",
]
