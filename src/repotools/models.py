# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value types describing resolved tool packages and generated launchers."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Final

from packaging.version import Version
from pydantic import BaseModel, ConfigDict, Field, field_validator

MAIN_GROUP_NAME: Final[str] = "Main"

_LEGACY_MONIKER_RE: Final[re.Pattern[str]] = re.compile(r"^net(?P<digits>\d{2,3})$", re.IGNORECASE)
_CORE_MONIKER_RE: Final[re.Pattern[str]] = re.compile(
    r"^netcoreapp(?P<version>\d+\.\d+)$",
    re.IGNORECASE,
)
_MODERN_MONIKER_RE: Final[re.Pattern[str]] = re.compile(
    r"^net(?P<version>\d+\.\d+)(?:-[a-z0-9.]+)?$",
    re.IGNORECASE,
)
_FIRST_MODERN_NET: Final[int] = 5


@dataclass(frozen=True, slots=True, eq=False)
class GroupName:
    """Name of a dependency group; compared case-insensitively."""

    name: str

    @property
    def is_main(self) -> bool:
        return self.name.casefold() == MAIN_GROUP_NAME.casefold()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroupName):
            return NotImplemented
        return self.name.casefold() == other.name.casefold()

    def __hash__(self) -> int:
        return hash(self.name.casefold())

    def __str__(self) -> str:
        return self.name


MAIN_GROUP: Final[GroupName] = GroupName(MAIN_GROUP_NAME)


@dataclass(frozen=True, slots=True, eq=False)
class PackageName:
    """Package identifier; compared case-insensitively like NuGet ids."""

    name: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageName):
            return NotImplemented
        return self.name.casefold() == other.name.casefold()

    def __hash__(self) -> int:
        return hash(self.name.casefold())

    def __str__(self) -> str:
        return self.name


class RuntimeVariant(StrEnum):
    """Runtime family a tool build targets."""

    NET = "net"
    NETCOREAPP = "netcoreapp"

    @property
    def cmd_host_prefix(self) -> str:
        """Return the launcher prefix used by the Windows batch script."""

        return "" if self is RuntimeVariant.NET else "dotnet "

    @property
    def sh_host_prefix(self) -> str:
        """Return the launcher prefix used by the POSIX shell script."""

        return "mono " if self is RuntimeVariant.NET else "dotnet "

    @property
    def executable_suffix(self) -> str:
        return ".exe" if self is RuntimeVariant.NET else ".dll"


@dataclass(frozen=True, slots=True)
class FrameworkMoniker:
    """Target framework folder name such as ``net461`` or ``netcoreapp2.1``."""

    text: str
    variant: RuntimeVariant
    version: Version

    @classmethod
    def parse(cls, text: str) -> FrameworkMoniker | None:
        """Return the moniker described by ``text`` or ``None`` when unsupported.

        Args:
            text: Folder name found below a package's ``tool`` directory.

        Returns:
            FrameworkMoniker | None: Parsed moniker, ``None`` for libraries-only
            targets (``netstandard``) and unknown names.
        """

        if match := _LEGACY_MONIKER_RE.match(text):
            version = Version(".".join(match.group("digits")))
            return cls(text=text, variant=RuntimeVariant.NET, version=version)
        if match := _CORE_MONIKER_RE.match(text):
            return cls(text=text, variant=RuntimeVariant.NETCOREAPP, version=Version(match.group("version")))
        if match := _MODERN_MONIKER_RE.match(text):
            version = Version(match.group("version"))
            if version.major >= _FIRST_MODERN_NET:
                return cls(text=text, variant=RuntimeVariant.NETCOREAPP, version=version)
        return None

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class ResolvedToolPackage:
    """A resolved package together with its install folder."""

    group: GroupName
    package: PackageName
    install_folder: Path


@dataclass(frozen=True, slots=True)
class GroupResolution:
    """Resolver output for one group: package name to install folder."""

    group: GroupName
    packages: Mapping[PackageName, Path]


@dataclass(frozen=True, slots=True)
class DiscoveredTool:
    """Executable found inside a package for a specific framework."""

    group: GroupName
    package: PackageName
    name: str
    moniker: FrameworkMoniker
    executable: Path

    @property
    def variant(self) -> RuntimeVariant:
        return self.moniker.variant


class AliasEntry(BaseModel):
    """Expose a tool under another name with baked-in leading arguments."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    args: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("key", "name")
    @classmethod
    def _require_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("alias key and name must not be empty")
        return stripped

    def matches_tool(self, tool_name: str) -> bool:
        return self.key.casefold() == tool_name.casefold()

    def matches_package(self, package: PackageName) -> bool:
        return self.key.casefold() == package.name.casefold()


@dataclass(frozen=True, slots=True)
class WrapperScriptPair:
    """Inputs needed to render the batch and shell launchers of one command."""

    output_directory: Path
    base_name: str
    target: Path
    variant: RuntimeVariant
    support_bin_dir: Path
    extra_args: tuple[str, ...] = field(default_factory=tuple)

    @property
    def cmd_path(self) -> Path:
        return self.output_directory / f"{self.base_name}.cmd"

    @property
    def sh_path(self) -> Path:
        return self.output_directory / self.base_name


@dataclass(frozen=True, slots=True)
class GroupManifestRow:
    """Manifest entry mapping a group to the directory holding its launchers."""

    group_name: str
    base_dir: Path


class ExportDirection(StrEnum):
    """Requested PATH mutation."""

    ENABLE = "enable"
    DISABLE = "disable"
    LIST = "list"


class ShellDialect(StrEnum):
    """Shell dialect used to render PATH snippets."""

    CMD = "cmd"
    SH = "sh"


@dataclass(frozen=True, slots=True)
class PathExportRequest:
    """Parameters of a PATH helper invocation."""

    direction: ExportDirection = ExportDirection.LIST
    dialect: ShellDialect | None = None
    destination: Path | None = None


def group_names(values: Sequence[str]) -> tuple[GroupName, ...]:
    """Return ``values`` converted to :class:`GroupName` without duplicates."""

    return tuple(dict.fromkeys(GroupName(value) for value in values))


__all__ = [
    "AliasEntry",
    "DiscoveredTool",
    "ExportDirection",
    "FrameworkMoniker",
    "GroupManifestRow",
    "GroupName",
    "GroupResolution",
    "MAIN_GROUP",
    "MAIN_GROUP_NAME",
    "PackageName",
    "PathExportRequest",
    "ResolvedToolPackage",
    "RuntimeVariant",
    "ShellDialect",
    "WrapperScriptPair",
    "group_names",
]
