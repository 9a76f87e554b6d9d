# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Choose which runtime build of a tool the generated launcher targets."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping, Set
from dataclasses import dataclass, field
from typing import Final

from .models import DiscoveredTool, FrameworkMoniker, GroupName, RuntimeVariant

PREFERRED_RUNTIME_ENV: Final[str] = "PAKET_REPOTOOL_PREFERRED_RUNTIME"
DEFAULT_PREFERENCE_ORDER: Final[tuple[RuntimeVariant, ...]] = (
    RuntimeVariant.NET,
    RuntimeVariant.NETCOREAPP,
)
_VARIANT_ALIASES: Final[dict[str, RuntimeVariant]] = {
    "net": RuntimeVariant.NET,
    "netfx": RuntimeVariant.NET,
    "framework": RuntimeVariant.NET,
    "netcoreapp": RuntimeVariant.NETCOREAPP,
    "netcore": RuntimeVariant.NETCOREAPP,
    "core": RuntimeVariant.NETCOREAPP,
    "dotnet": RuntimeVariant.NETCOREAPP,
}


def parse_runtime_override(raw: str | None) -> RuntimeVariant | None:
    """Map user supplied runtime text to a variant.

    Args:
        raw: Variant name, alias or framework moniker; blank means no override.

    Returns:
        RuntimeVariant | None: Matching variant, ``None`` when unrecognised.
    """

    if raw is None or not raw.strip():
        return None
    text = raw.strip().lower()
    if text in _VARIANT_ALIASES:
        return _VARIANT_ALIASES[text]
    moniker = FrameworkMoniker.parse(text)
    return moniker.variant if moniker is not None else None


@dataclass(frozen=True, slots=True)
class RuntimePreference:
    """Runtime preference captured once at the start of a synthesis run."""

    override: RuntimeVariant | None = None
    order: tuple[RuntimeVariant, ...] = field(default=DEFAULT_PREFERENCE_ORDER)

    @classmethod
    def capture(
        cls,
        *,
        explicit: str | None = None,
        configured: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> RuntimePreference:
        """Build a preference from CLI, environment and configuration inputs.

        Args:
            explicit: Value passed on the command line, highest precedence.
            configured: Value from the configuration file, lowest precedence.
            env: Environment mapping; defaults to :data:`os.environ`.

        Returns:
            RuntimePreference: Immutable preference for the run.
        """

        environment = os.environ if env is None else env
        for raw in (explicit, environment.get(PREFERRED_RUNTIME_ENV), configured):
            if raw is not None and raw.strip():
                return cls(override=parse_runtime_override(raw))
        return cls()


def select_variant(candidates: Set[RuntimeVariant], preference: RuntimePreference) -> RuntimeVariant:
    """Return the variant to use among ``candidates``.

    An override that is present among the candidates wins; otherwise the first
    candidate in the default order is used.

    Args:
        candidates: Non-empty set of variants available for one tool.
        preference: Captured runtime preference.

    Returns:
        RuntimeVariant: Selected variant.

    Raises:
        ValueError: If ``candidates`` is empty.
    """

    if not candidates:
        raise ValueError("cannot select a runtime variant from an empty candidate set")
    if preference.override is not None and preference.override in candidates:
        return preference.override
    for variant in preference.order:
        if variant in candidates:
            return variant
    return sorted(candidates)[0]


def _candidate_rank(tool: DiscoveredTool) -> tuple[tuple[int, ...], str, str]:
    return tuple(-part for part in tool.moniker.version.release), tool.moniker.text, str(tool.executable)


def select_tools(
    discovered: Iterable[DiscoveredTool],
    preference: RuntimePreference,
) -> list[DiscoveredTool]:
    """Collapse discovered variants to one tool per ``(group, name)``.

    Within the selected variant the highest framework version wins; ties break on
    the moniker text, then the executable path.

    Args:
        discovered: Tools as produced by discovery.
        preference: Captured runtime preference.

    Returns:
        list[DiscoveredTool]: Selected tools in first-seen ``(group, name)`` order.
    """

    buckets: dict[tuple[GroupName, str], list[DiscoveredTool]] = {}
    for tool in discovered:
        buckets.setdefault((tool.group, tool.name), []).append(tool)

    selected: list[DiscoveredTool] = []
    for candidates in buckets.values():
        variant = select_variant({tool.variant for tool in candidates}, preference)
        matching = [tool for tool in candidates if tool.variant is variant]
        selected.append(min(matching, key=_candidate_rank))
    return selected


__all__ = [
    "DEFAULT_PREFERENCE_ORDER",
    "PREFERRED_RUNTIME_ENV",
    "RuntimePreference",
    "parse_runtime_override",
    "select_tools",
    "select_variant",
]
