"""Pytest configuration and shared fixtures for Strata tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_SRC_PATH = Path(__file__).resolve().parent.parent / "src"


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    if str(_SRC_PATH) not in sys.path:
        sys.path.insert(0, str(_SRC_PATH))


@pytest.fixture
def strata_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Config rooted in a per-test temporary directory."""
    from core.config import StrataConfig

    monkeypatch.delenv("STRATA_RANDOM_SEED", raising=False)
    monkeypatch.delenv("STRATA_URI_SCHEME", raising=False)
    monkeypatch.setenv("STRATA_DATA_ROOT", str(tmp_path / "data"))
    return StrataConfig.from_env()


@pytest.fixture
def id_records() -> list[dict[str, int]]:
    """One hundred records with ids 1..100."""
    return [{"id": index} for index in range(1, 101)]
