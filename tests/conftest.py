# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

import pytest

from repotools.selection import PREFERRED_RUNTIME_ENV

PackageFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def _clear_runtime_preference(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(PREFERRED_RUNTIME_ENV, raising=False)


def build_package(install_folder: Path, frameworks: Mapping[str, Iterable[str]]) -> Path:
    """Create ``tool/<moniker>/<name>`` entry points below ``install_folder``.

    Names ending in ``.dll`` get a sibling ``runtimeconfig.json`` so they count
    as application entry points.
    """

    for moniker, files in frameworks.items():
        folder = install_folder / "tool" / moniker
        folder.mkdir(parents=True, exist_ok=True)
        for name in files:
            (folder / name).write_bytes(b"MZ")
            if name.endswith(".dll"):
                stem = name.removesuffix(".dll")
                (folder / f"{stem}.runtimeconfig.json").write_text("{}", encoding="utf-8")
    return install_folder


@pytest.fixture
def make_package(tmp_path: Path) -> PackageFactory:
    """Return a factory creating fake tool packages under ``tmp_path/packages``."""

    def factory(name: str, frameworks: Mapping[str, Iterable[str]], *, group: str | None = None) -> Path:
        base = tmp_path / "packages"
        if group is not None:
            base = base / group
        return build_package(base / name, frameworks)

    return factory


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Return a repository root holding an empty ``paket.dependencies``."""

    (tmp_path / "paket.dependencies").write_text("source https://api.nuget.org/v3/index.json\n", encoding="utf-8")
    return tmp_path
