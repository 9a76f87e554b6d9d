# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Output directory layout and the per-group tool manifest."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from pathlib import Path
from typing import Final

from .errors import ManifestError
from .launchers import write_if_changed
from .models import GroupManifestRow, GroupName
from .paths import BIN_DIR, PAKET_FILES_DIR, SUPPORT_PACKAGE_DIR, compose_path, group_segment, literal_segment

MANIFEST_FILENAME: Final[str] = "paket.repotools.csv"
MANIFEST_HEADER: Final[tuple[str, str]] = ("group_name", "base_dir")


def paket_files_root(root: Path) -> Path:
    return compose_path(root, [literal_segment(PAKET_FILES_DIR)])


def support_bin_directory(root: Path) -> Path:
    """Return ``<root>/paket-files/paket/bin`` which launchers prepend to ``PATH``."""

    return compose_path(paket_files_root(root), [literal_segment(SUPPORT_PACKAGE_DIR), literal_segment(BIN_DIR)])


def manifest_path(root: Path) -> Path:
    return compose_path(paket_files_root(root), [literal_segment(MANIFEST_FILENAME)])


def resolve_output_directory(root: Path, group: GroupName, bin_dir_override: str | None = None) -> Path:
    """Return the directory receiving launchers for ``group``.

    Args:
        root: Repository root holding the dependencies file.
        group: Dependency group the tools belong to.
        bin_dir_override: ``repotools_bin_dir`` setting relative to ``root``;
            replaces the ``paket-files/bin`` suffix for every group sharing it.

    Returns:
        Path: ``<root>/<override>`` when overridden, ``<root>/paket-files/bin``
        for the main group and ``<root>/paket-files/<group>/bin`` otherwise.
    """

    if bin_dir_override is not None and bin_dir_override.strip():
        return compose_path(root, [literal_segment(bin_dir_override.strip())])
    if group.is_main:
        return compose_path(paket_files_root(root), [literal_segment(BIN_DIR)])
    return compose_path(paket_files_root(root), [group_segment(group), literal_segment(BIN_DIR)])


def render_manifest(rows: Iterable[GroupManifestRow]) -> str:
    """Return the CSV text for ``rows`` preceded by the header line."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(MANIFEST_HEADER)
    for row in rows:
        writer.writerow((row.group_name, str(row.base_dir)))
    return buffer.getvalue()


def write_manifest(rows: Iterable[GroupManifestRow], destination: Path) -> bool:
    """Write the manifest to ``destination``.

    Returns:
        bool: ``True`` when the file content changed.

    Raises:
        ScriptWriteError: If the manifest cannot be written.
    """

    return write_if_changed(destination, render_manifest(rows))


def read_manifest(path: Path) -> list[GroupManifestRow]:
    """Return the rows stored in the manifest at ``path``.

    Args:
        path: Manifest file location.

    Returns:
        list[GroupManifestRow]: Rows in file order; empty when the file is missing.

    Raises:
        ManifestError: If the header is missing or a row is malformed.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except OSError as exc:
        raise ManifestError(f"Could not read manifest {path}: {exc}") from exc

    records = list(csv.reader(io.StringIO(text)))
    if not records or tuple(records[0]) != MANIFEST_HEADER:
        raise ManifestError(f"Manifest {path} does not start with '{','.join(MANIFEST_HEADER)}'")
    rows: list[GroupManifestRow] = []
    for line_number, record in enumerate(records[1:], start=2):
        if not record:
            continue
        if len(record) != len(MANIFEST_HEADER):
            raise ManifestError(f"Manifest {path} line {line_number}: expected 2 columns, found {len(record)}")
        rows.append(GroupManifestRow(group_name=record[0], base_dir=Path(record[1])))
    return rows


__all__ = [
    "MANIFEST_FILENAME",
    "MANIFEST_HEADER",
    "manifest_path",
    "paket_files_root",
    "read_manifest",
    "render_manifest",
    "resolve_output_directory",
    "support_bin_directory",
    "write_manifest",
]
