"""Catalog and manifest persistence helpers.

This module isolates JSON catalog IO and atomic file replacement.
It keeps version store orchestration focused on business flow.
"""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
import tempfile
from typing import Any, cast

from core.constants import TEMP_DIR_PREFIX
from core.errors import StrataStoreError
from core.types import VersionRecord


def empty_catalog(dataset_name: str) -> dict[str, Any]:
    """Return a catalog payload for a dataset with no versions."""
    return {
        "dataset_name": dataset_name,
        "artifact_id": None,
        "revision": 0,
        "versions": [],
    }


def write_json_atomic(payload_path: Path, payload: object) -> None:
    """Write JSON to a temp file and atomically replace the target.

    Args:
        payload_path: Destination JSON path.
        payload: JSON-compatible payload.

    Raises:
        StrataStoreError: If the write or replace fails; the target is untouched.
    """
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=payload_path.parent,
            prefix=TEMP_DIR_PREFIX,
            suffix=".json",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(json.dumps(payload, indent=2) + "\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, payload_path)
    except (OSError, TypeError, ValueError) as error:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()
        raise StrataStoreError(
            f"Failed to write {payload_path}: {error}. "
            "Prior state was left intact; check permissions and disk space."
        ) from error


def read_catalog_file(catalog_path: Path, dataset_name: str) -> dict[str, Any]:
    """Read and validate a dataset catalog payload.

    Args:
        catalog_path: Catalog JSON path.
        dataset_name: Dataset identifier, used for the empty default.

    Returns:
        Parsed catalog object, or an empty catalog when missing.

    Raises:
        StrataStoreError: If the catalog exists but is invalid.
    """
    if not catalog_path.exists():
        return empty_catalog(dataset_name)
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise StrataStoreError(
            f"Failed to parse version catalog at {catalog_path}: {error.msg}. "
            "Restore the catalog from a backup."
        ) from error
    except OSError as error:
        raise StrataStoreError(
            f"Failed to read version catalog at {catalog_path}: {error}."
        ) from error
    if not isinstance(payload, dict) or not isinstance(payload.get("versions"), list):
        raise StrataStoreError(
            f"Failed to parse version catalog at {catalog_path}: "
            "expected an object with a versions list."
        )
    return payload


def catalog_revision(catalog: dict[str, Any]) -> int:
    """Return the catalog revision counter."""
    return int(catalog.get("revision", 0))


def catalog_entries(catalog: dict[str, Any]) -> list[dict[str, Any]]:
    """Return raw version entries in append order."""
    return cast(list[dict[str, Any]], catalog["versions"])


def version_record_from_dict(payload: dict[str, Any]) -> VersionRecord:
    """Deserialize one catalog entry.

    Args:
        payload: Catalog entry dictionary.

    Returns:
        Typed version record.

    Raises:
        StrataStoreError: If required fields are missing or malformed.
    """
    try:
        metadata = payload.get("metadata") or {}
        return VersionRecord(
            version=str(payload["version"]),
            content_hash=str(payload["hash"]),
            created_at=datetime.fromisoformat(str(payload["created_at"])),
            size=int(payload["size"]),
            metadata=dict(metadata),
            tags=tuple(str(tag) for tag in payload.get("tags", [])),
        )
    except (KeyError, TypeError, ValueError) as error:
        raise StrataStoreError(
            f"Invalid version catalog entry {payload!r}: {error}."
        ) from error
