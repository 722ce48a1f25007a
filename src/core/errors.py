"""Strata exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class StrataError(Exception):
    """Base exception for all Strata failures."""


class StrataConfigError(StrataError):
    """Raised for invalid runtime configuration."""


class StrataInvalidArgumentError(StrataError):
    """Raised when caller input cannot be partitioned or versioned."""


class StrataNotFoundError(StrataError):
    """Raised when a dataset or version does not exist."""


class StrataSerializationError(StrataError):
    """Raised when content has no deterministic byte form."""


class StrataStoreError(StrataError):
    """Raised for version store IO and persistence failures."""


class StrataConcurrencyError(StrataStoreError):
    """Raised when a concurrent writer changed the catalog first."""


class StrataVersionExistsError(StrataConcurrencyError):
    """Raised when a version label is already recorded for a dataset."""
