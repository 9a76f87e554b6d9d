# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the repotools services."""

from __future__ import annotations

from pathlib import Path


class RepoToolsError(Exception):
    """Base class for failures raised by repotools services."""


class ConfigError(RepoToolsError):
    """Raised when configuration input is unreadable or invalid."""


class ManifestError(RepoToolsError):
    """Raised when a tool manifest cannot be parsed."""


class RootNotFoundError(RepoToolsError):
    """Raised when no dependencies file exists above the search directory."""

    def __init__(self, start: Path) -> None:
        super().__init__(f"Paket dependencies file not found in directory hierarchy of '{start}'")
        self.start = start


class ScriptWriteError(RepoToolsError):
    """Raised when a generated file cannot be written.

    Attributes:
        path: File that could not be written.
    """

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not write file {path}. Message: {reason}")
        self.path = path


__all__ = [
    "ConfigError",
    "ManifestError",
    "RepoToolsError",
    "RootNotFoundError",
    "ScriptWriteError",
]
