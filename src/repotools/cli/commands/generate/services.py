# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helper services for the generate CLI."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path

from ....config import config_to_resolutions, load_settings
from ....errors import RepoToolsError
from ....synthesis import SynthesisResult, generate_wrapper_scripts
from ...shared import CLIError, CLILogger


def run_generation(
    root: Path,
    *,
    logger: CLILogger,
    groups: Sequence[str] = (),
    bin_dir: str | None = None,
    preferred_runtime: str | None = None,
    jobs: int = 1,
    env: Mapping[str, str] | None = None,
) -> SynthesisResult:
    """Load settings below ``root`` and run a synthesis pass.

    Args:
        root: Repository root containing the configuration files.
        logger: Logger used for user-facing messages.
        groups: Optional dependency groups to restrict generation to.
        bin_dir: Command line bin-dir override.
        preferred_runtime: Command line runtime preference.
        jobs: Worker threads used to persist launchers.
        env: Environment mapping; defaults to ``os.environ``.

    Returns:
        SynthesisResult: Commands generated and files written.

    Raises:
        CLIError: If configuration loading or script generation fails.
    """

    try:
        settings = load_settings(
            root,
            bin_dir=bin_dir,
            preferred_runtime=preferred_runtime,
            env=os.environ if env is None else env,
        )
        logger.debug(
            f"preferred_runtime={settings.preference.override or 'default'} groups={list(groups) or 'all'}"
        )
        return generate_wrapper_scripts(
            config_to_resolutions(root, settings.config),
            settings,
            group_filter=list(groups) or None,
            jobs=jobs,
            use_emoji=logger.use_emoji,
        )
    except RepoToolsError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc


def emit_generation_summary(result: SynthesisResult, *, logger: CLILogger) -> None:
    """Log the outcome of a synthesis pass.

    Args:
        result: Result returned by :func:`run_generation`.
        logger: Logger used to emit messages.
    """

    if not result.commands:
        logger.warn("No repo tools found in the configured packages")
    else:
        names = ", ".join(command.pair.base_name for command in result.commands)
        logger.ok(
            f"Generated {len(result.commands)} command(s): {names} "
            f"({len(result.written)} file(s) written, {len(result.unchanged)} unchanged)"
        )
    if result.manifest is not None:
        state = "updated" if result.manifest_written else "unchanged"
        logger.info(f"Manifest {state}: {result.manifest}")


__all__ = ["emit_generation_summary", "run_generation"]
