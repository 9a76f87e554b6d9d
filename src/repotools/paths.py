# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typed path composition for launcher and manifest locations.

Every segment is derived from its semantic source (a group, a
framework moniker, a package or a literal) before joining, so callers never
rely on the runtime type of the operands to decide how a value is rendered.
"""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike
from pathlib import Path
from typing import Final, NewType

from .models import FrameworkMoniker, GroupName, PackageName

PathSegment = NewType("PathSegment", str)

PAKET_FILES_DIR: Final[str] = "paket-files"
BIN_DIR: Final[str] = "bin"
TOOL_DIR: Final[str] = "tool"
PACKAGES_DIR: Final[str] = "packages"
SUPPORT_PACKAGE_DIR: Final[str] = "paket"


def literal_segment(value: str | PathLike[str]) -> PathSegment:
    """Return a segment for a bare string, which may itself contain separators."""

    text = str(value)
    if not text:
        raise ValueError("path segments must not be empty")
    return PathSegment(text)


def group_segment(group: GroupName) -> PathSegment:
    return literal_segment(group.name)


def package_segment(package: PackageName) -> PathSegment:
    return literal_segment(package.name)


def framework_segment(moniker: FrameworkMoniker) -> PathSegment:
    return literal_segment(moniker.text)


def compose_path(base: Path, segments: Iterable[PathSegment]) -> Path:
    """Join ``segments`` onto ``base`` in order.

    Args:
        base: Directory the segments are appended to.
        segments: Ordered segments produced by the ``*_segment`` helpers.

    Returns:
        Path: Combined filesystem path.
    """

    result = base
    for segment in segments:
        result = result / segment
    return result


__all__ = [
    "BIN_DIR",
    "PACKAGES_DIR",
    "PAKET_FILES_DIR",
    "PathSegment",
    "SUPPORT_PACKAGE_DIR",
    "TOOL_DIR",
    "compose_path",
    "framework_segment",
    "group_segment",
    "literal_segment",
    "package_segment",
]
