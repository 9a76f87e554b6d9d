# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render and persist the batch and POSIX launchers for a tool.

Both scripts are written for every tool regardless of the host platform so a
repository checkout can be used from either kind of shell. Rendering depends
only on the paths relative to the script location, the runtime host prefix and
the alias arguments, which keeps repeated runs byte-identical.
"""

from __future__ import annotations

import logging
import os
import shlex
import stat
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Final

from .errors import ScriptWriteError
from .logging import warn
from .models import RuntimeVariant, WrapperScriptPair
from .paths import BIN_DIR, PAKET_FILES_DIR, SUPPORT_PACKAGE_DIR, compose_path, literal_segment

LOGGER = logging.getLogger(__name__)

CMD_SUFFIX: Final[str] = ".cmd"
CMD_NEWLINE: Final[str] = "\r\n"
SH_NEWLINE: Final[str] = "\n"
SHEBANG: Final[str] = "#!/bin/sh"
EXECUTABLE_BITS: Final[int] = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
_CMD_SPECIAL_CHARS: Final[frozenset[str]] = frozenset('&|<>^,;=()"')


@dataclass(frozen=True, slots=True)
class LauncherParameters:
    """Location independent values shared by both render functions."""

    target_parts: tuple[str, ...]
    target_is_relative: bool
    support_bin_parts: tuple[str, ...]
    support_bin_is_relative: bool
    cmd_host_prefix: str
    sh_host_prefix: str
    default_args: tuple[str, ...] = field(default_factory=tuple)


@dataclass(slots=True)
class PersistResult:
    """Files touched while persisting a launcher pair."""

    written: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)


def _relative_parts(path: Path, start: Path) -> tuple[tuple[str, ...], bool]:
    """Return the components of ``path`` relative to ``start`` when possible."""

    try:
        relative = os.path.relpath(path, start)
    except ValueError:
        return (str(path),), False
    return PurePath(relative).parts, True


def launcher_parameters(pair: WrapperScriptPair) -> LauncherParameters:
    """Derive render parameters from ``pair``.

    Args:
        pair: Target executable, output location, variant and alias args.

    Returns:
        LauncherParameters: Values consumed by :func:`render_cmd` and :func:`render_sh`.
    """

    target_parts, target_is_relative = _relative_parts(pair.target, pair.output_directory)
    support_parts, support_is_relative = _relative_parts(pair.support_bin_dir, pair.output_directory)
    return LauncherParameters(
        target_parts=target_parts,
        target_is_relative=target_is_relative,
        support_bin_parts=support_parts,
        support_bin_is_relative=support_is_relative,
        cmd_host_prefix=pair.variant.cmd_host_prefix,
        sh_host_prefix=pair.variant.sh_host_prefix,
        default_args=tuple(pair.extra_args),
    )


def quote_cmd_argument(argument: str) -> str:
    """Quote ``argument`` for use inside a batch file."""

    escaped = argument.replace("%", "%%")
    if not escaped or any(char.isspace() or char in _CMD_SPECIAL_CHARS for char in escaped):
        return '"' + escaped.replace('"', '""') + '"'
    return escaped


def _join_lines(lines: Sequence[str], newline: str) -> str:
    return "".join(f"{line}{newline}" for line in lines)


def render_cmd(params: LauncherParameters) -> str:
    """Render the Windows batch launcher."""

    support_dir = "\\".join(params.support_bin_parts)
    if params.support_bin_is_relative:
        support_dir = f"%~dp0{support_dir}"
    target = "\\".join(params.target_parts)
    if params.target_is_relative:
        target = f"%~dp0{target}"
    arguments = [quote_cmd_argument(arg) for arg in params.default_args]
    invocation = " ".join([f'{params.cmd_host_prefix}"{target}"', *arguments, "%*"])
    lines = [
        "@ECHO OFF",
        "",
        f"set np={support_dir}",
        "",
        "REM expand to full path",
        'for %%a in ("%np%") do (',
        "    set nppath=%%~fa",
        ")",
        "",
        "REM add to PATH if not exists already",
        'echo %path%|find /i "%nppath%">nul  || set path=%nppath%;%path%',
        "",
        invocation,
    ]
    return _join_lines(lines, CMD_NEWLINE)


def render_sh(params: LauncherParameters) -> str:
    """Render the POSIX shell launcher."""

    target = "/".join(params.target_parts)
    if params.target_is_relative:
        target = f'$(dirname "$0")/{target}'
    arguments = [shlex.quote(arg) for arg in params.default_args]
    invocation = " ".join([f'{params.sh_host_prefix}"{target}"', *arguments, '"$@"'])
    return _join_lines([SHEBANG, "", invocation], SH_NEWLINE)


def render(pair: WrapperScriptPair) -> tuple[str, str]:
    """Return ``(cmd_text, sh_text)`` for ``pair``."""

    params = launcher_parameters(pair)
    return render_cmd(params), render_sh(params)


def _read_existing(path: Path) -> bytes | None:
    """Return the current bytes of ``path``; unreadable files count as absent."""

    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        LOGGER.debug("treating unreadable %s as changed: %s", path, exc)
        return None


def write_if_changed(path: Path, text: str) -> bool:
    """Write ``text`` to ``path`` unless the file already holds the same bytes.

    Args:
        path: Destination file; parent directories are created as needed.
        text: Content to persist, written without newline translation.

    Returns:
        bool: ``True`` when the file was written, ``False`` when skipped.

    Raises:
        ScriptWriteError: If the directory or file cannot be written.
    """

    payload = text.encode("utf-8")
    if _read_existing(path) == payload:
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    except OSError as exc:
        raise ScriptWriteError(path, exc.strerror or str(exc)) from exc
    return True


def ensure_executable(path: Path, *, use_emoji: bool = False) -> bool:
    """Add the executable bits to ``path`` when they are missing.

    Failures are reported as warnings because the script still runs through an
    explicit ``sh`` invocation.

    Returns:
        bool: ``True`` when the bits are present after the call.
    """

    try:
        mode = path.stat().st_mode
        if mode & EXECUTABLE_BITS == EXECUTABLE_BITS:
            return True
        LOGGER.debug("running chmod +x on '%s'", path)
        path.chmod(mode | EXECUTABLE_BITS)
    except OSError as exc:
        warn(f"chmod +x failed for '{path}' ({exc}), execute it manually", use_emoji=use_emoji)
        return False
    return True


def persist(
    output_directory: Path,
    base_name: str,
    cmd_text: str,
    sh_text: str,
    *,
    posix_host: bool | None = None,
    use_emoji: bool = False,
) -> PersistResult:
    """Persist a rendered launcher pair into ``output_directory``.

    Args:
        output_directory: Directory receiving ``<base_name>`` and ``<base_name>.cmd``.
        base_name: Command name exposed to users.
        cmd_text: Rendered batch script.
        sh_text: Rendered POSIX script.
        posix_host: Whether to set the executable bit; defaults to the current OS.
        use_emoji: Emoji preference for warnings.

    Returns:
        PersistResult: Paths written and paths left untouched.

    Raises:
        ScriptWriteError: If either file cannot be written.
    """

    result = PersistResult()
    is_posix = os.name != "nt" if posix_host is None else posix_host
    sh_path = output_directory / base_name
    cmd_path = output_directory / f"{base_name}{CMD_SUFFIX}"

    LOGGER.debug("generating wrapper script - %s", sh_path)
    (result.written if write_if_changed(sh_path, sh_text) else result.unchanged).append(sh_path)
    if is_posix:
        ensure_executable(sh_path, use_emoji=use_emoji)
    else:
        LOGGER.debug("chmod +x of '%s' skipped on windows, execute it manually if needed", sh_path)

    LOGGER.debug("generating wrapper script - %s", cmd_path)
    (result.written if write_if_changed(cmd_path, cmd_text) else result.unchanged).append(cmd_path)
    return result


def write_launchers(
    pair: WrapperScriptPair,
    *,
    posix_host: bool | None = None,
    use_emoji: bool = False,
) -> PersistResult:
    """Render ``pair`` and persist both scripts."""

    cmd_text, sh_text = render(pair)
    return persist(
        pair.output_directory,
        pair.base_name,
        cmd_text,
        sh_text,
        posix_host=posix_host,
        use_emoji=use_emoji,
    )


def write_self_wrapper(
    executable: Path,
    *,
    posix_host: bool | None = None,
    use_emoji: bool = False,
) -> PersistResult:
    """Write launchers next to the package manager's own executable.

    ``.paket/paket.exe`` produces ``.paket/paket.cmd`` and ``.paket/paket``,
    both running the legacy framework build.

    Args:
        executable: Path to the package manager executable.
        posix_host: Whether to set the executable bit; defaults to the current OS.
        use_emoji: Emoji preference for warnings.

    Returns:
        PersistResult: Paths written and paths left untouched.
    """

    output_directory = executable.parent
    support_bin_dir = compose_path(
        output_directory.parent,
        [literal_segment(PAKET_FILES_DIR), literal_segment(SUPPORT_PACKAGE_DIR), literal_segment(BIN_DIR)],
    )
    pair = WrapperScriptPair(
        output_directory=output_directory,
        base_name=executable.stem,
        target=executable,
        variant=RuntimeVariant.NET,
        support_bin_dir=support_bin_dir,
    )
    return write_launchers(pair, posix_host=posix_host, use_emoji=use_emoji)


__all__ = [
    "CMD_SUFFIX",
    "LauncherParameters",
    "PersistResult",
    "ensure_executable",
    "launcher_parameters",
    "persist",
    "quote_cmd_argument",
    "render",
    "render_cmd",
    "render_sh",
    "write_if_changed",
    "write_launchers",
    "write_self_wrapper",
]
