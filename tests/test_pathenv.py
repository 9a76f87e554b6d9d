# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for PATH helper snippets."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from repotools.errors import ScriptWriteError
from repotools.models import ExportDirection, PathExportRequest, ShellDialect
from repotools.pathenv import build_path_snippets, emit_path_snippets

DIRECTORY = Path("/repo/paket-files/bin")


@pytest.mark.parametrize(
    ("direction", "dialect", "expected"),
    [
        (
            ExportDirection.ENABLE,
            ShellDialect.CMD,
            ["ECHO adding '/repo/paket-files/bin' to PATH env var", 'SET "PATH=/repo/paket-files/bin;%PATH%"'],
        ),
        (
            ExportDirection.DISABLE,
            ShellDialect.CMD,
            [
                "ECHO removing '/repo/paket-files/bin' from PATH env var",
                "CALL SET PATH=%%PATH:/repo/paket-files/bin;=%% ",
            ],
        ),
        (
            ExportDirection.ENABLE,
            ShellDialect.SH,
            ["echo adding '/repo/paket-files/bin' to PATH env var", 'export PATH="/repo/paket-files/bin:$PATH"'],
        ),
        (
            ExportDirection.DISABLE,
            ShellDialect.SH,
            [
                "echo removing '/repo/paket-files/bin' from PATH env var",
                'export PATH="${PATH//"/repo/paket-files/bin:"/}"',
            ],
        ),
        (ExportDirection.ENABLE, None, ["adding '/repo/paket-files/bin' to PATH env var", ""]),
        (ExportDirection.DISABLE, None, ["removing '/repo/paket-files/bin' from PATH env var", ""]),
        (ExportDirection.LIST, ShellDialect.SH, []),
        (ExportDirection.LIST, None, []),
    ],
)
def test_build_path_snippets(
    direction: ExportDirection,
    dialect: ShellDialect | None,
    expected: list[str],
) -> None:
    request = PathExportRequest(direction=direction, dialect=dialect)
    assert build_path_snippets(request, DIRECTORY) == expected


def test_default_request_is_a_no_op_listing() -> None:
    assert build_path_snippets(PathExportRequest(), DIRECTORY) == []


def test_emit_path_snippets_prints_each_line() -> None:
    printed: list[str] = []
    emit_path_snippets(["one", "two"], None, echo=printed.append)
    assert printed == ["one", "two"]


def test_emit_path_snippets_overwrites_destination(tmp_path: Path) -> None:
    destination = tmp_path / "path.sh"
    destination.write_text("stale\nstale\nstale\n", encoding="utf-8")
    emit_path_snippets(["one", "two"], destination)
    assert destination.read_text(encoding="utf-8") == "one\ntwo\n"


def test_emit_path_snippets_write_failure(tmp_path: Path) -> None:
    destination = tmp_path / "missing" / "path.sh"
    with pytest.raises(ScriptWriteError):
        emit_path_snippets(["one"], destination)


@pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")
def test_sh_snippets_add_then_remove_directory(tmp_path: Path) -> None:
    directory = tmp_path / "paket-files" / "bin"
    enable = build_path_snippets(PathExportRequest(ExportDirection.ENABLE, ShellDialect.SH), directory)
    disable = build_path_snippets(PathExportRequest(ExportDirection.DISABLE, ShellDialect.SH), directory)
    script = "\n".join(['PATH="/usr/bin:/bin"', *enable, 'echo "$PATH"', *disable, 'echo "$PATH"'])

    completed = subprocess.run(["bash", "-c", script], capture_output=True, text=True, check=True)

    assert completed.stdout.splitlines() == [
        f"adding {directory} to PATH env var",
        f"{directory}:/usr/bin:/bin",
        f"removing {directory} from PATH env var",
        "/usr/bin:/bin",
    ]
