# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration for wrapper generation.

Settings come from three places: ``paket.repotools.toml`` (groups, packages,
aliases), the ``repotools_bin_dir`` option of ``paket.dependencies`` and the
command line or environment for the runtime preference.
"""

from __future__ import annotations

import re
import tomllib
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tomlkit.exceptions import ParseError
from tomlkit.items import AoT

from .errors import ConfigError
from .models import MAIN_GROUP, AliasEntry, GroupName, GroupResolution, PackageName
from .paths import PACKAGES_DIR, compose_path, group_segment, literal_segment, package_segment
from .selection import RuntimePreference
from .workspace import CONFIG_FILENAME, DEPENDENCIES_FILENAME

BIN_DIR_OPTION: Final[str] = "repotools_bin_dir"
_GROUP_LINE_RE: Final[re.Pattern[str]] = re.compile(r"^group\s+(?P<name>\S+)\s*$", re.IGNORECASE)
_OPTION_LINE_RE: Final[re.Pattern[str]] = re.compile(r"^(?P<key>[a-z_]+)\s*:\s*(?P<value>.*?)\s*$", re.IGNORECASE)


class GroupConfig(BaseModel):
    """Tool packages declared for one dependency group."""

    model_config = ConfigDict(extra="forbid")

    packages: list[str] = Field(default_factory=list)
    bin_dir: str | None = None
    install_folders: dict[str, str] = Field(default_factory=dict)


class RepoToolsConfig(BaseModel):
    """Validated contents of ``paket.repotools.toml``."""

    model_config = ConfigDict(extra="forbid")

    bin_dir: str | None = None
    preferred_runtime: str | None = None
    groups: dict[str, GroupConfig] = Field(default_factory=dict)
    aliases: list[AliasEntry] = Field(default_factory=list)

    def group_config(self, group: GroupName) -> GroupConfig | None:
        for name, config in self.groups.items():
            if GroupName(name) == group:
                return config
        return None


@dataclass(frozen=True, slots=True)
class DependenciesSettings:
    """Options read from ``paket.dependencies`` per group."""

    global_options: Mapping[str, str] = field(default_factory=dict)
    group_options: Mapping[GroupName, Mapping[str, str]] = field(default_factory=dict)

    def group_option(self, group: GroupName, key: str) -> str | None:
        """Return ``key`` from the ``group`` block; the main group has no block."""

        if group.is_main:
            return None
        return self.group_options.get(group, {}).get(key)


def read_dependencies_settings(path: Path) -> DependenciesSettings:
    """Parse ``key: value`` options from a ``paket.dependencies`` file.

    Lines before the first ``group`` statement belong to the main group.
    Package, source and comment lines are ignored.

    Args:
        path: Dependencies file; a missing file yields empty settings.

    Returns:
        DependenciesSettings: Options grouped by dependency group.

    Raises:
        ConfigError: If the file exists but cannot be read.
    """

    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return DependenciesSettings()
    except OSError as exc:
        raise ConfigError(f"Could not read {path}: {exc}") from exc

    global_options: dict[str, str] = {}
    group_options: dict[GroupName, dict[str, str]] = {}
    current = global_options
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(("//", "#")):
            continue
        if match := _GROUP_LINE_RE.match(line):
            group = GroupName(match.group("name"))
            current = global_options if group.is_main else group_options.setdefault(group, {})
            continue
        if match := _OPTION_LINE_RE.match(line):
            current[match.group("key").lower()] = match.group("value")
    return DependenciesSettings(global_options=global_options, group_options=group_options)


def load_config(path: Path) -> RepoToolsConfig:
    """Load and validate ``paket.repotools.toml``.

    Args:
        path: Configuration file; a missing file yields the defaults.

    Returns:
        RepoToolsConfig: Validated configuration.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """

    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError:
        return RepoToolsConfig()
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Could not read configuration {path}: {exc}") from exc
    return _validate(data, path)


def _validate(data: Mapping[str, Any], path: Path) -> RepoToolsConfig:
    try:
        return RepoToolsConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


@dataclass(frozen=True, slots=True)
class RepoToolSettings:
    """Everything a synthesis run needs besides the resolved packages."""

    root: Path
    config: RepoToolsConfig = field(default_factory=RepoToolsConfig)
    dependencies: DependenciesSettings = field(default_factory=DependenciesSettings)
    bin_dir_override: str | None = None
    preference: RuntimePreference = field(default_factory=RuntimePreference)

    @property
    def aliases(self) -> tuple[AliasEntry, ...]:
        return tuple(self.config.aliases)

    def bin_dir_for(self, group: GroupName) -> str | None:
        """Return the bin-dir override in effect for ``group``, if any.

        Command line beats group-level settings, which beat global settings.
        """

        group_config = self.config.group_config(group)
        for candidate in (
            self.bin_dir_override,
            group_config.bin_dir if group_config is not None else None,
            self.dependencies.group_option(group, BIN_DIR_OPTION),
            self.config.bin_dir,
            self.dependencies.global_options.get(BIN_DIR_OPTION),
        ):
            if candidate is not None and candidate.strip():
                return candidate.strip()
        return None


def load_settings(
    root: Path,
    *,
    bin_dir: str | None = None,
    preferred_runtime: str | None = None,
    env: Mapping[str, str] | None = None,
) -> RepoToolSettings:
    """Read configuration below ``root`` and capture the runtime preference.

    Args:
        root: Repository root.
        bin_dir: Command line bin-dir override.
        preferred_runtime: Command line runtime preference.
        env: Environment mapping used for ``PAKET_REPOTOOL_PREFERRED_RUNTIME``.

    Returns:
        RepoToolSettings: Settings for one synthesis run.
    """

    config = load_config(root / CONFIG_FILENAME)
    return RepoToolSettings(
        root=root,
        config=config,
        dependencies=read_dependencies_settings(root / DEPENDENCIES_FILENAME),
        bin_dir_override=bin_dir,
        preference=RuntimePreference.capture(
            explicit=preferred_runtime,
            configured=config.preferred_runtime,
            env=env,
        ),
    )


def default_install_folder(root: Path, group: GroupName, package: PackageName) -> Path:
    """Return ``packages/<name>`` for the main group, ``packages/<group>/<name>`` otherwise."""

    segments = [literal_segment(PACKAGES_DIR)]
    if not group.is_main:
        segments.append(group_segment(group))
    segments.append(package_segment(package))
    return compose_path(root, segments)


def config_to_resolutions(root: Path, config: RepoToolsConfig) -> list[GroupResolution]:
    """Return resolver-style group resolutions for the configured packages.

    Args:
        root: Repository root.
        config: Loaded configuration.

    Returns:
        list[GroupResolution]: Groups in declaration order.
    """

    resolutions: list[GroupResolution] = []
    for name, group_config in config.groups.items():
        group = GroupName(name)
        explicit = {PackageName(key): value for key, value in group_config.install_folders.items()}
        packages: dict[PackageName, Path] = {}
        for raw in group_config.packages:
            package = PackageName(raw)
            folder = explicit.get(package)
            packages[package] = (
                compose_path(root, [literal_segment(folder)])
                if folder is not None
                else default_install_folder(root, group, package)
            )
        resolutions.append(GroupResolution(group=group, packages=packages))
    return resolutions


def _child_table(container: MutableMapping[str, Any], key: str) -> MutableMapping[str, Any]:
    for existing_key in list(container.keys()):
        if existing_key.casefold() == key.casefold():
            value = container[existing_key]
            if not isinstance(value, MutableMapping):
                raise ConfigError(f"'{existing_key}' must be a table")
            return value
    container[key] = tomlkit.table()
    return container[key]


def add_tool_to_config(
    path: Path,
    package: str,
    *,
    group: str | None = None,
    alias: str | None = None,
    args: Sequence[str] = (),
) -> RepoToolsConfig:
    """Record ``package`` (and an optional alias) in the configuration file.

    The document is edited in place so comments and ordering survive.

    Args:
        path: Configuration file, created when missing.
        package: Package id providing the tool.
        group: Dependency group; defaults to the main group.
        alias: Exposed command name for the package's tool.
        args: Default arguments baked into the alias.

    Returns:
        RepoToolsConfig: Validated configuration after the edit.

    Raises:
        ConfigError: If the existing file is invalid or cannot be written.
    """

    try:
        document = tomlkit.parse(path.read_text(encoding="utf-8")) if path.exists() else tomlkit.document()
    except (OSError, ParseError) as exc:
        raise ConfigError(f"Could not read configuration {path}: {exc}") from exc

    group_table = _child_table(_child_table(document, "groups"), group or MAIN_GROUP.name)
    if "packages" not in group_table:
        group_table["packages"] = tomlkit.array()
    packages = group_table["packages"]
    if not isinstance(packages, list):
        raise ConfigError(f"'packages' in {path} must be an array")
    if all(PackageName(str(item)) != PackageName(package) for item in packages):
        packages.append(package)

    if alias:
        _upsert_alias(document, AliasEntry(key=package, name=alias, args=tuple(args)))

    config = _validate(document.unwrap(), path)
    try:
        path.write_text(tomlkit.dumps(document), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not write configuration {path}: {exc}") from exc
    return config


def _upsert_alias(document: tomlkit.TOMLDocument, entry: AliasEntry) -> None:
    if "aliases" not in document:
        document["aliases"] = tomlkit.aot()
    aliases = document["aliases"]
    if not isinstance(aliases, AoT):
        raise ConfigError("'aliases' must be an array of tables")
    for table in aliases:
        if str(table.get("name", "")) == entry.name:
            table["key"] = entry.key
            table["args"] = list(entry.args)
            return
    table = tomlkit.table()
    table["key"] = entry.key
    table["name"] = entry.name
    table["args"] = list(entry.args)
    aliases.append(table)


__all__ = [
    "BIN_DIR_OPTION",
    "DependenciesSettings",
    "GroupConfig",
    "RepoToolSettings",
    "RepoToolsConfig",
    "add_tool_to_config",
    "config_to_resolutions",
    "default_install_folder",
    "load_config",
    "load_settings",
    "read_dependencies_settings",
]
