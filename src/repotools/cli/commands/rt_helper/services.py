# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helper services for the rt-helper CLI."""

from __future__ import annotations

from pathlib import Path

from ....config import load_settings
from ....errors import RepoToolsError
from ....launchers import CMD_SUFFIX
from ....layout import resolve_output_directory
from ....models import MAIN_GROUP, GroupName
from ...shared import CLIError, CLILogger


def tool_directory(root: Path, group: str | None, *, logger: CLILogger) -> Path:
    """Return the absolute launcher directory for ``group`` below ``root``.

    Raises:
        CLIError: If the configuration cannot be loaded.
    """

    target = GroupName(group) if group else MAIN_GROUP
    try:
        settings = load_settings(root)
    except RepoToolsError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    return resolve_output_directory(root, target, settings.bin_dir_for(target)).resolve()


def list_commands(directory: Path) -> list[str]:
    """Return the command names with a launcher pair in ``directory``."""

    if not directory.is_dir():
        return []
    return sorted(
        path.name
        for path in directory.iterdir()
        if path.is_file() and path.suffix != CMD_SUFFIX and path.with_name(f"{path.name}{CMD_SUFFIX}").is_file()
    )


__all__ = ["list_commands", "tool_directory"]
