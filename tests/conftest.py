"""Shared fixtures for pgexplain tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from pgexplain.config import reset_config


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep user config files and PGEXPLAIN_* variables out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(workdir)
    for name in (
        "PGEXPLAIN_CONFIG_FILE",
        "PGEXPLAIN_FORMAT",
        "PGEXPLAIN_THRESHOLD",
        "PGEXPLAIN_INDEX_THRESHOLD",
        "PGEXPLAIN_RECOMMEND_INDEXES",
    ):
        monkeypatch.delenv(name, raising=False)

    reset_config()
    yield
    reset_config()


@pytest.fixture
def write_plan(tmp_path: Path):
    """Write plan text to a file and return its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
