# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for tool discovery inside installed packages."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from repotools.discovery import discover_tools, framework_folders, iter_resolved_packages
from repotools.models import MAIN_GROUP, GroupResolution, PackageName, RuntimeVariant


def test_framework_folders_sorted_by_variant_then_version(make_package: Callable[..., Path]) -> None:
    folder = make_package(
        "FAKE",
        {"net45": [], "netcoreapp2.1": [], "net461": [], "netcoreapp3.1": [], "netstandard2.0": []},
    )
    assert [moniker.text for moniker in framework_folders(folder)] == [
        "net461",
        "net45",
        "netcoreapp3.1",
        "netcoreapp2.1",
    ]


def test_discover_tools_keeps_only_entry_points(make_package: Callable[..., Path]) -> None:
    folder = make_package(
        "FAKE",
        {
            "net461": ["fake.exe", "FakeLib.dll"],
            "netcoreapp2.1": ["fake.dll", "FakeLib.dll"],
            "netstandard2.0": ["fake.dll"],
        },
    )
    (folder / "tool" / "net461" / "fake.exe.config").write_text("<configuration/>", encoding="utf-8")
    # a library without runtime config is not an application
    (folder / "tool" / "netcoreapp2.1" / "FakeLib.runtimeconfig.json").unlink()

    candidates = list(discover_tools(folder))

    assert [(item.name, item.moniker.variant) for item in candidates] == [
        ("fake", RuntimeVariant.NET),
        ("fake", RuntimeVariant.NETCOREAPP),
    ]
    assert candidates[1].executable == folder / "tool" / "netcoreapp2.1" / "fake.dll"


def test_discover_tools_without_tool_folder_yields_nothing(tmp_path: Path) -> None:
    (tmp_path / "lib" / "net461").mkdir(parents=True)
    assert list(discover_tools(tmp_path)) == []


def test_iter_resolved_packages_skips_missing_install_folders(make_package: Callable[..., Path], tmp_path: Path) -> None:
    present = make_package("FAKE", {"net461": ["fake.exe"]})
    resolution = GroupResolution(
        group=MAIN_GROUP,
        packages={PackageName("Missing"): tmp_path / "packages" / "Missing", PackageName("FAKE"): present},
    )
    packages = list(iter_resolved_packages([resolution]))
    assert [item.package for item in packages] == [PackageName("FAKE")]
    assert packages[0].install_folder == present
