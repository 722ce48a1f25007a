"""Runtime configuration model for Strata.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT, DEFAULT_URI_SCHEME
from core.errors import StrataConfigError


@dataclass(frozen=True)
class StrataConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for version catalogs and snapshots.
        random_seed: Optional default seed for SDK split calls.
        uri_scheme: Scheme used when building artifact locator URIs.
    """

    data_root: Path
    random_seed: int | None = None
    uri_scheme: str = DEFAULT_URI_SCHEME

    @classmethod
    def from_env(cls) -> "StrataConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            StrataConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("STRATA_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        random_seed_value = os.getenv("STRATA_RANDOM_SEED")
        uri_scheme_value = os.getenv("STRATA_URI_SCHEME", DEFAULT_URI_SCHEME)
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            random_seed=_parse_random_seed(random_seed_value),
            uri_scheme=_parse_uri_scheme(uri_scheme_value),
        )


def _parse_random_seed(raw_value: str | None) -> int | None:
    """Parse the optional random seed environment value.

    Args:
        raw_value: Raw string from environment, or None when unset.

    Returns:
        Parsed integer seed, or None for entropy-seeded splits.

    Raises:
        StrataConfigError: If value cannot be parsed into int.
    """
    if raw_value is None or not raw_value.strip():
        return None
    try:
        return int(raw_value)
    except ValueError as error:
        raise StrataConfigError(
            "Invalid STRATA_RANDOM_SEED value: "
            f"expected integer, got '{raw_value}'. "
            "Set STRATA_RANDOM_SEED to a numeric value or unset it."
        ) from error


def _parse_uri_scheme(raw_value: str) -> str:
    """Validate the artifact URI scheme value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Validated scheme.

    Raises:
        StrataConfigError: If the scheme is empty or not alphanumeric.
    """
    scheme = raw_value.strip()
    if not scheme or not scheme.replace("_", "").isalnum():
        raise StrataConfigError(
            f"Invalid STRATA_URI_SCHEME value '{raw_value}': "
            "expected a non-empty alphanumeric scheme such as 'strata'."
        )
    return scheme
