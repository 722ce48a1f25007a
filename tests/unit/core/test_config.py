"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import StrataConfig
from core.errors import StrataConfigError


def test_from_env_reads_data_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve data root from environment."""
    monkeypatch.setenv("STRATA_DATA_ROOT", "./.tmp-strata")

    config = StrataConfig.from_env()

    assert config.data_root.name == ".tmp-strata" and config.data_root.is_absolute()


def test_from_env_defaults_seed_to_none(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unset seed should leave splits entropy-seeded."""
    monkeypatch.delenv("STRATA_RANDOM_SEED", raising=False)

    config = StrataConfig.from_env()

    assert config.random_seed is None


def test_from_env_parses_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    """A numeric seed should be parsed into an int."""
    monkeypatch.setenv("STRATA_RANDOM_SEED", "42")

    config = StrataConfig.from_env()

    assert config.random_seed == 42


def test_from_env_raises_for_invalid_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric random seed."""
    monkeypatch.setenv("STRATA_RANDOM_SEED", "not-a-number")

    with pytest.raises(StrataConfigError):
        StrataConfig.from_env()


def test_from_env_raises_for_invalid_uri_scheme(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject URI schemes with separators."""
    monkeypatch.setenv("STRATA_URI_SCHEME", "bad://scheme")

    with pytest.raises(StrataConfigError):
        StrataConfig.from_env()
