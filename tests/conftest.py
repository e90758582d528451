"""Shared test fixtures for strictdeps."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture()
def tmp_project(tmp_path: Path) -> Path:
    """Create an empty project root."""
    project = tmp_path / "proj"
    project.mkdir()
    return project


@pytest.fixture()
def write_tsconfig(tmp_project: Path) -> Callable[[dict[str, Any]], Path]:
    """Return a helper that writes ``tsconfig.json`` into the project root."""

    def _write(data: dict[str, Any]) -> Path:
        path = tmp_project / "tsconfig.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
