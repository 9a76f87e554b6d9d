# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Single synchronous pass turning resolved tool packages into launchers."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence, Set
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .config import RepoToolSettings
from .discovery import discover_package_tools, iter_resolved_packages
from .launchers import PersistResult, write_launchers
from .layout import (
    manifest_path,
    read_manifest,
    resolve_output_directory,
    support_bin_directory,
    write_manifest,
)
from .logging import warn
from .models import (
    AliasEntry,
    DiscoveredTool,
    GroupManifestRow,
    GroupName,
    GroupResolution,
    PackageName,
    WrapperScriptPair,
    group_names,
)
from .selection import select_tools

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlannedCommand:
    """A selected tool exposed under one command name."""

    group: GroupName
    tool: DiscoveredTool
    pair: WrapperScriptPair


@dataclass(slots=True)
class SynthesisResult:
    """Outcome of a synthesis pass."""

    commands: list[PlannedCommand] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)
    manifest_rows: list[GroupManifestRow] = field(default_factory=list)
    manifest: Path | None = None
    manifest_written: bool = False


def _aliases_for(
    tool: DiscoveredTool,
    aliases: Sequence[AliasEntry],
    tools_per_package: Counter[tuple[GroupName, PackageName]],
) -> list[AliasEntry]:
    by_tool = [alias for alias in aliases if alias.matches_tool(tool.name)]
    if by_tool:
        return by_tool
    if tools_per_package[(tool.group, tool.package)] != 1:
        return []
    return [alias for alias in aliases if alias.matches_package(tool.package)]


def _warn_shadowed_tools(
    discovered: Sequence[DiscoveredTool],
    selected: Sequence[DiscoveredTool],
    *,
    use_emoji: bool,
) -> None:
    providers: dict[tuple[GroupName, str], list[PackageName]] = {}
    for tool in discovered:
        packages = providers.setdefault((tool.group, tool.name), [])
        if tool.package not in packages:
            packages.append(tool.package)
    for tool in selected:
        packages = providers[(tool.group, tool.name)]
        if len(packages) > 1:
            names = ", ".join(str(package) for package in packages)
            warn(
                f"tool '{tool.name}' in group {tool.group} is provided by {names}; using {tool.package}",
                use_emoji=use_emoji,
            )


def plan_commands(
    tools: Iterable[DiscoveredTool],
    settings: RepoToolSettings,
    *,
    use_emoji: bool = False,
) -> list[PlannedCommand]:
    """Map selected tools to launcher pairs, applying aliases and layout.

    A tool matched by an alias is exposed only under the alias names. Command
    names are unique per output directory; later duplicates are skipped.

    Args:
        tools: Selected tools, one per ``(group, name)``.
        settings: Settings for the run.
        use_emoji: Emoji preference for warnings.

    Returns:
        list[PlannedCommand]: Commands in first-seen order.
    """

    root = settings.root
    selected = list(tools)
    tools_per_package = Counter((tool.group, tool.package) for tool in selected)
    support_bin_dir = support_bin_directory(root)
    seen: dict[tuple[Path, str], PlannedCommand] = {}
    planned: list[PlannedCommand] = []

    for tool in selected:
        output_directory = resolve_output_directory(root, tool.group, settings.bin_dir_for(tool.group))
        aliases = _aliases_for(tool, settings.aliases, tools_per_package)
        exposures = [(alias.name, alias.args) for alias in aliases] or [(tool.name, ())]
        for name, args in exposures:
            key = (output_directory, name.casefold())
            if key in seen:
                previous = seen[key]
                warn(
                    f"command '{name}' from {tool.package} ({tool.group}) clashes with "
                    f"{previous.tool.package} ({previous.group}) in {output_directory}; skipped",
                    use_emoji=use_emoji,
                )
                continue
            pair = WrapperScriptPair(
                output_directory=output_directory,
                base_name=name,
                target=tool.executable,
                variant=tool.variant,
                support_bin_dir=support_bin_dir,
                extra_args=tuple(args),
            )
            command = PlannedCommand(group=tool.group, tool=tool, pair=pair)
            seen[key] = command
            planned.append(command)
    return planned


def manifest_rows(commands: Iterable[PlannedCommand]) -> list[GroupManifestRow]:
    """Return one row per group that produced commands, in first-seen order."""

    rows: dict[GroupName, GroupManifestRow] = {}
    for command in commands:
        if command.group not in rows:
            rows[command.group] = GroupManifestRow(
                group_name=command.group.name,
                base_dir=command.pair.output_directory,
            )
    return list(rows.values())


def merge_manifest_rows(
    existing: Sequence[GroupManifestRow],
    fresh: Sequence[GroupManifestRow],
    refreshed: Set[GroupName],
) -> list[GroupManifestRow]:
    """Fold the rows of a filtered pass into an existing manifest.

    Existing rows keep their position. Rows of ``refreshed`` groups are replaced
    in place, or dropped when the group produced no commands this time. Groups
    that are new to the manifest are appended in ``fresh`` order.

    Args:
        existing: Rows read from the current manifest.
        fresh: Rows produced by the filtered pass.
        refreshed: Groups processed by the filtered pass.

    Returns:
        list[GroupManifestRow]: Merged rows.
    """

    by_group = {GroupName(row.group_name): row for row in fresh}
    merged: list[GroupManifestRow] = []
    placed: set[GroupName] = set()
    for row in existing:
        group = GroupName(row.group_name)
        if group not in refreshed:
            merged.append(row)
        elif group in by_group and group not in placed:
            merged.append(by_group[group])
            placed.add(group)
    merged.extend(row for group, row in by_group.items() if group not in placed)
    return merged


def _persist_all(
    commands: Sequence[PlannedCommand],
    *,
    jobs: int,
    posix_host: bool | None,
    use_emoji: bool,
) -> list[PersistResult]:
    pairs = [command.pair for command in commands]
    if jobs <= 1 or len(pairs) <= 1:
        return [write_launchers(pair, posix_host=posix_host, use_emoji=use_emoji) for pair in pairs]
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = [
            executor.submit(write_launchers, pair, posix_host=posix_host, use_emoji=use_emoji) for pair in pairs
        ]
        return [future.result() for future in futures]


def generate_wrapper_scripts(
    resolutions: Sequence[GroupResolution],
    settings: RepoToolSettings,
    *,
    group_filter: Sequence[str] | None = None,
    jobs: int = 1,
    posix_host: bool | None = None,
    use_emoji: bool = False,
) -> SynthesisResult:
    """Generate launchers for every tool in ``resolutions`` and write the manifest.

    Args:
        resolutions: Resolver output, groups in order with package install folders.
        settings: Settings captured for this run.
        group_filter: Optional group names to process; other groups keep their
            existing manifest rows.
        jobs: Worker threads used to persist launchers.
        posix_host: Whether to set executable bits; defaults to the current OS.
        use_emoji: Emoji preference for warnings.

    Returns:
        SynthesisResult: Commands generated and files written.

    Raises:
        ScriptWriteError: If a launcher or the manifest cannot be written. Files
            written earlier in the pass are left in place.
    """

    wanted = set(group_names(group_filter)) if group_filter else None
    active = [resolution for resolution in resolutions if wanted is None or resolution.group in wanted]
    LOGGER.debug(
        "Generating wrapper scripts for the following groups: %s",
        [str(resolution.group) for resolution in active],
    )

    discovered = [
        tool for package in iter_resolved_packages(active) for tool in discover_package_tools(package)
    ]
    selected = select_tools(discovered, settings.preference)
    _warn_shadowed_tools(discovered, selected, use_emoji=use_emoji)

    result = SynthesisResult(commands=plan_commands(selected, settings, use_emoji=use_emoji))
    for outcome in _persist_all(result.commands, jobs=jobs, posix_host=posix_host, use_emoji=use_emoji):
        result.written.extend(outcome.written)
        result.unchanged.extend(outcome.unchanged)

    destination = manifest_path(settings.root)
    rows = manifest_rows(result.commands)
    if wanted is not None:
        rows = merge_manifest_rows(read_manifest(destination), rows, wanted)
    result.manifest_rows = rows
    if rows or destination.exists():
        result.manifest = destination
        result.manifest_written = write_manifest(rows, destination)
    return result


__all__ = [
    "PlannedCommand",
    "SynthesisResult",
    "generate_wrapper_scripts",
    "manifest_rows",
    "merge_manifest_rows",
    "plan_commands",
]
