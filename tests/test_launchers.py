# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for launcher rendering and persistence."""

from __future__ import annotations

import os
import shutil
import stat
import subprocess
from pathlib import Path

import pytest

from repotools.errors import ScriptWriteError
from repotools.launchers import quote_cmd_argument, render, write_launchers, write_self_wrapper
from repotools.models import RuntimeVariant, WrapperScriptPair

posix_only = pytest.mark.skipif(os.name == "nt", reason="requires a POSIX shell")

CMD_PREAMBLE = (
    "@ECHO OFF\r\n"
    "\r\n"
    "set np=%~dp0..\\paket\\bin\r\n"
    "\r\n"
    "REM expand to full path\r\n"
    'for %%a in ("%np%") do (\r\n'
    "    set nppath=%%~fa\r\n"
    ")\r\n"
    "\r\n"
    "REM add to PATH if not exists already\r\n"
    'echo %path%|find /i "%nppath%">nul  || set path=%nppath%;%path%\r\n'
    "\r\n"
)


def _pair(
    root: Path,
    *,
    variant: RuntimeVariant = RuntimeVariant.NET,
    name: str = "fake",
    args: tuple[str, ...] = (),
) -> WrapperScriptPair:
    moniker = "net461" if variant is RuntimeVariant.NET else "netcoreapp2.1"
    return WrapperScriptPair(
        output_directory=root / "paket-files" / "bin",
        base_name=name,
        target=root / "packages" / "FAKE" / "tool" / moniker / f"fake{variant.executable_suffix}",
        variant=variant,
        support_bin_dir=root / "paket-files" / "paket" / "bin",
        extra_args=args,
    )


def test_render_legacy_framework_launchers(tmp_path: Path) -> None:
    cmd_text, sh_text = render(_pair(tmp_path))
    assert cmd_text == CMD_PREAMBLE + '"%~dp0..\\..\\packages\\FAKE\\tool\\net461\\fake.exe" %*\r\n'
    assert sh_text == '#!/bin/sh\n\nmono "$(dirname "$0")/../../packages/FAKE/tool/net461/fake.exe" "$@"\n'


def test_render_netcoreapp_launchers_use_dotnet_host(tmp_path: Path) -> None:
    cmd_text, sh_text = render(_pair(tmp_path, variant=RuntimeVariant.NETCOREAPP))
    assert cmd_text.endswith('\r\ndotnet "%~dp0..\\..\\packages\\FAKE\\tool\\netcoreapp2.1\\fake.dll" %*\r\n')
    assert sh_text.endswith('\ndotnet "$(dirname "$0")/../../packages/FAKE/tool/netcoreapp2.1/fake.dll" "$@"\n')


def test_render_places_alias_args_before_user_args(tmp_path: Path) -> None:
    cmd_text, sh_text = render(_pair(tmp_path, args=("run", "two words", "50%")))
    assert cmd_text.endswith('fake.exe" run "two words" 50%% %*\r\n')
    assert sh_text.endswith("fake.exe\" run 'two words' 50% \"$@\"\n")


def test_render_uses_absolute_paths_across_drives(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def different_drive(path: str, start: str | None = None) -> str:
        raise ValueError(f"path is on mount {path!r}, start on mount {start!r}")

    monkeypatch.setattr("repotools.launchers.os.path.relpath", different_drive)
    pair = _pair(tmp_path)

    cmd_text, sh_text = render(pair)

    assert f"set np={pair.support_bin_dir}\r\n" in cmd_text
    assert cmd_text.endswith(f'"{pair.target}" %*\r\n')
    assert "%~dp0" not in cmd_text
    assert sh_text.endswith(f'mono "{pair.target}" "$@"\n')


@pytest.mark.parametrize(
    ("argument", "expected"),
    [
        ("plain", "plain"),
        ("two words", '"two words"'),
        ("", '""'),
        ("a&b", '"a&b"'),
        ('say "hi"', '"say ""hi"""'),
        ("%HOME%", "%%HOME%%"),
    ],
)
def test_quote_cmd_argument(argument: str, expected: str) -> None:
    assert quote_cmd_argument(argument) == expected


def test_write_launchers_is_idempotent(tmp_path: Path) -> None:
    pair = _pair(tmp_path)
    first = write_launchers(pair, posix_host=False)
    assert first.written == [pair.sh_path, pair.cmd_path]
    assert first.unchanged == []

    stamp = 1_000_000_000
    for path in (pair.sh_path, pair.cmd_path):
        os.utime(path, (stamp, stamp))

    second = write_launchers(pair, posix_host=False)
    assert second.written == []
    assert second.unchanged == [pair.sh_path, pair.cmd_path]
    assert pair.sh_path.stat().st_mtime == stamp
    assert pair.cmd_path.stat().st_mtime == stamp


def test_write_launchers_writes_exact_bytes(tmp_path: Path) -> None:
    pair = _pair(tmp_path)
    write_launchers(pair, posix_host=False)
    cmd_text, sh_text = render(pair)
    assert pair.cmd_path.read_bytes() == cmd_text.encode("utf-8")
    assert pair.sh_path.read_bytes() == sh_text.encode("utf-8")
    assert b"\r\n" not in pair.sh_path.read_bytes()


def test_write_launchers_overwrites_stale_content(tmp_path: Path) -> None:
    pair = _pair(tmp_path)
    pair.output_directory.mkdir(parents=True)
    pair.sh_path.write_bytes(b"\x00corrupt")
    result = write_launchers(pair, posix_host=False)
    assert pair.sh_path in result.written
    assert pair.sh_path.read_text(encoding="utf-8").startswith("#!/bin/sh\n")


@posix_only
def test_write_launchers_sets_executable_bits(tmp_path: Path) -> None:
    pair = _pair(tmp_path)
    write_launchers(pair, posix_host=True)
    mode = pair.sh_path.stat().st_mode
    assert mode & stat.S_IXUSR
    assert mode & stat.S_IXOTH
    assert not pair.cmd_path.stat().st_mode & stat.S_IXUSR


def test_chmod_failure_is_a_warning(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    def _deny(self: Path, mode: int) -> None:
        raise PermissionError(1, "Operation not permitted")

    monkeypatch.setattr(Path, "chmod", _deny)
    pair = _pair(tmp_path)
    result = write_launchers(pair, posix_host=True)
    assert result.written == [pair.sh_path, pair.cmd_path]
    assert "chmod +x failed" in capsys.readouterr().out


def test_windows_host_skips_chmod(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[Path] = []
    monkeypatch.setattr(Path, "chmod", lambda self, mode: calls.append(self))
    write_launchers(_pair(tmp_path), posix_host=False)
    assert calls == []


def test_write_failure_raises_script_write_error(tmp_path: Path) -> None:
    blocker = tmp_path / "paket-files"
    blocker.write_text("not a directory", encoding="utf-8")
    pair = _pair(tmp_path)
    with pytest.raises(ScriptWriteError) as excinfo:
        write_launchers(pair, posix_host=False)
    assert excinfo.value.path == pair.sh_path
    assert str(excinfo.value).startswith(f"Could not write file {pair.sh_path}. Message: ")


def test_write_self_wrapper_targets_sibling_executable(tmp_path: Path) -> None:
    executable = tmp_path / ".paket" / "paket.exe"
    executable.parent.mkdir()
    executable.write_bytes(b"MZ")
    result = write_self_wrapper(executable, posix_host=False)
    sh_path = tmp_path / ".paket" / "paket"
    cmd_path = tmp_path / ".paket" / "paket.cmd"
    assert result.written == [sh_path, cmd_path]
    assert sh_path.read_text(encoding="utf-8").endswith('mono "$(dirname "$0")/paket.exe" "$@"\n')
    cmd_text = cmd_path.read_bytes().decode("utf-8")
    assert "set np=%~dp0..\\paket-files\\paket\\bin\r\n" in cmd_text
    assert cmd_text.endswith('"%~dp0paket.exe" %*\r\n')


@posix_only
@pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")
def test_sh_launcher_forwards_alias_args_then_user_args(tmp_path: Path) -> None:
    host_dir = tmp_path / "host"
    host_dir.mkdir()
    fake_mono = host_dir / "mono"
    fake_mono.write_text('#!/bin/sh\nshift\nfor arg in "$@"; do echo "$arg"; done\n', encoding="utf-8")
    fake_mono.chmod(0o755)

    pair = _pair(tmp_path, args=("a", "b"))
    write_launchers(pair, posix_host=True)
    env = {**os.environ, "PATH": f"{host_dir}{os.pathsep}{os.environ.get('PATH', '')}"}
    completed = subprocess.run(
        ["sh", str(pair.sh_path), "c", "d"],
        capture_output=True,
        text=True,
        env=env,
        check=True,
    )
    assert completed.stdout.splitlines() == ["a", "b", "c", "d"]
