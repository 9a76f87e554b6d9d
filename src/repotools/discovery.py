# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Enumerate the executables a resolved package ships per target framework."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .models import DiscoveredTool, FrameworkMoniker, GroupResolution, ResolvedToolPackage, RuntimeVariant
from .paths import TOOL_DIR, compose_path, framework_segment, literal_segment

LOGGER = logging.getLogger(__name__)

RUNTIME_CONFIG_SUFFIX: Final[str] = ".runtimeconfig.json"


@dataclass(frozen=True, slots=True)
class ToolCandidate:
    """Executable found below ``<package>/tool/<moniker>``."""

    name: str
    moniker: FrameworkMoniker
    executable: Path


def framework_folders(install_folder: Path) -> list[FrameworkMoniker]:
    """Return the recognised framework monikers below ``install_folder/tool``.

    Args:
        install_folder: Package install folder.

    Returns:
        list[FrameworkMoniker]: Monikers sorted by variant, then version descending.
    """

    tool_root = compose_path(install_folder, [literal_segment(TOOL_DIR)])
    if not tool_root.is_dir():
        return []
    monikers = [
        moniker
        for entry in tool_root.iterdir()
        if entry.is_dir() and (moniker := FrameworkMoniker.parse(entry.name)) is not None
    ]
    variants = list(RuntimeVariant)
    return sorted(monikers, key=lambda item: (variants.index(item.variant), _descending(item), item.text))


def _descending(moniker: FrameworkMoniker) -> tuple[int, ...]:
    return tuple(-part for part in moniker.version.release)


def _is_entry_point(path: Path, variant: RuntimeVariant) -> bool:
    if not path.is_file() or path.suffix.lower() != variant.executable_suffix:
        return False
    if variant is RuntimeVariant.NETCOREAPP:
        return path.with_name(f"{path.stem}{RUNTIME_CONFIG_SUFFIX}").is_file()
    return True


def discover_tools(install_folder: Path) -> Iterator[ToolCandidate]:
    """Yield one candidate per executable for every framework subfolder.

    Missing ``tool`` folders and unrecognised files yield nothing. The generator
    is lazy and may be re-created to restart the enumeration.

    Args:
        install_folder: Package install folder.

    Yields:
        ToolCandidate: Tool name (file stem), framework moniker and executable path.
    """

    for moniker in framework_folders(install_folder):
        folder = compose_path(install_folder, [literal_segment(TOOL_DIR), framework_segment(moniker)])
        for entry in sorted(folder.iterdir(), key=lambda item: item.name):
            if _is_entry_point(entry, moniker.variant):
                yield ToolCandidate(name=entry.stem, moniker=moniker, executable=entry)


def iter_resolved_packages(resolutions: Iterable[GroupResolution]) -> Iterator[ResolvedToolPackage]:
    """Yield resolved packages whose install folder exists, in resolver order."""

    for resolution in resolutions:
        for package, folder in resolution.packages.items():
            if not folder.is_dir():
                LOGGER.debug("skipping %s/%s: install folder %s not found", resolution.group, package, folder)
                continue
            yield ResolvedToolPackage(group=resolution.group, package=package, install_folder=folder)


def discover_package_tools(package: ResolvedToolPackage) -> Iterator[DiscoveredTool]:
    """Yield :class:`DiscoveredTool` entries for a resolved package."""

    for candidate in discover_tools(package.install_folder):
        yield DiscoveredTool(
            group=package.group,
            package=package.package,
            name=candidate.name,
            moniker=candidate.moniker,
            executable=candidate.executable,
        )


__all__ = [
    "RUNTIME_CONFIG_SUFFIX",
    "ToolCandidate",
    "discover_package_tools",
    "discover_tools",
    "framework_folders",
    "iter_resolved_packages",
]
