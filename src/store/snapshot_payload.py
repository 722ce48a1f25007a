"""Snapshot serialization for versioned datasets.

This module writes and reads one version directory: a manifest with
dataset identity and layout, plus a JSONL file of records in order.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from core.constants import CANONICAL_FORMAT_VERSION, MANIFEST_FILE_NAME, RECORDS_FILE_NAME
from core.errors import StrataSerializationError, StrataStoreError
from core.types import Dataset, Record
from store.dataset_identity import dataset_size, list_splits


def write_snapshot(version_dir: Path, dataset: Dataset) -> None:
    """Persist a dataset snapshot into an existing directory.

    Args:
        version_dir: Directory receiving manifest and records files.
        dataset: Identified, hashed, and versioned dataset.

    Raises:
        StrataSerializationError: If records are not JSON-encodable.
        StrataStoreError: If writing fails.
    """
    layout = "records" if dataset.records is not None else "splits"
    manifest = {
        "format_version": CANONICAL_FORMAT_VERSION,
        "dataset_name": dataset.name,
        "version": dataset.version,
        "artifact_id": dataset.artifact_id,
        "content_hash": dataset.content_hash,
        "schema": dataset.schema,
        "metadata": dict(dataset.metadata),
        "layout": layout,
        "split_names": list_splits(dataset),
        "record_count": dataset_size(dataset),
    }
    lines = [_encode_line(row, line_number) for line_number, row in enumerate(_rows(dataset), 1)]
    try:
        (version_dir / MANIFEST_FILE_NAME).write_text(
            _encode_json(manifest, "snapshot manifest", indent=2) + "\n",
            encoding="utf-8",
        )
        (version_dir / RECORDS_FILE_NAME).write_text(
            "".join(line + "\n" for line in lines),
            encoding="utf-8",
        )
    except OSError as error:
        raise StrataStoreError(
            f"Failed to persist snapshot at {version_dir}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def read_snapshot(version_dir: Path) -> Dataset:
    """Load a dataset snapshot from a version directory.

    Args:
        version_dir: Snapshot version directory.

    Returns:
        Dataset with version, hash, and artifact id populated.

    Raises:
        StrataStoreError: If files are missing or invalid.
    """
    manifest = _read_manifest(version_dir)
    records_path = version_dir / RECORDS_FILE_NAME
    if not records_path.exists():
        raise StrataStoreError(
            f"Failed to load snapshot at {version_dir}: missing {RECORDS_FILE_NAME}."
        )
    flat_records: list[Record] = []
    split_records: dict[str, list[Record]] = {
        str(name): [] for name in manifest.get("split_names", [])
    }
    text = records_path.read_text(encoding="utf-8")
    for line_number, line in enumerate(text.splitlines(), 1):
        if not line.strip():
            continue
        row = _parse_json_line(records_path, line, line_number)
        split_name = row.get("split")
        if split_name is None:
            flat_records.append(row["record"])
        else:
            split_records.setdefault(str(split_name), []).append(row["record"])
    is_flat = manifest.get("layout") == "records"
    return Dataset(
        name=str(manifest["dataset_name"]),
        records=tuple(flat_records) if is_flat else None,
        splits={} if is_flat else {name: tuple(rows) for name, rows in split_records.items()},
        schema=manifest.get("schema"),
        metadata=dict(manifest.get("metadata") or {}),
        version=manifest.get("version"),
        content_hash=manifest.get("content_hash"),
        artifact_id=manifest.get("artifact_id"),
    )


def _rows(dataset: Dataset) -> list[dict[str, Any]]:
    """Return JSONL rows in persisted order."""
    if dataset.records is not None:
        return [{"split": None, "record": record} for record in dataset.records]
    return [
        {"split": split_name, "record": record}
        for split_name in list_splits(dataset)
        for record in dataset.splits[split_name]
    ]


def _encode_line(row: dict[str, Any], line_number: int) -> str:
    return _encode_json(row, f"record row {line_number}")


def _encode_json(payload: object, context: str, indent: int | None = None) -> str:
    """Encode JSON, rejecting values without a JSON form.

    Raises:
        StrataSerializationError: If payload cannot be encoded.
    """
    try:
        return json.dumps(
            payload,
            indent=indent,
            ensure_ascii=False,
            allow_nan=False,
            default=_mapping_as_dict,
        )
    except (TypeError, ValueError) as error:
        raise StrataSerializationError(
            f"Failed to serialize {context}: {error}. "
            "Snapshots accept JSON-compatible record values only."
        ) from error


def _mapping_as_dict(value: object) -> dict[str, Any]:
    """Encode non-dict mappings, which records may use, as JSON objects."""
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _read_manifest(version_dir: Path) -> dict[str, Any]:
    manifest_path = version_dir / MANIFEST_FILE_NAME
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError as error:
        raise StrataStoreError(
            f"Failed to load snapshot at {version_dir}: missing {MANIFEST_FILE_NAME}."
        ) from error
    except json.JSONDecodeError as error:
        raise StrataStoreError(
            f"Failed to parse snapshot manifest at {manifest_path}: {error.msg}."
        ) from error
    if not isinstance(payload, dict) or "dataset_name" not in payload:
        raise StrataStoreError(
            f"Invalid snapshot manifest at {manifest_path}: expected dataset_name."
        )
    return payload


def _parse_json_line(records_path: Path, line: str, line_number: int) -> dict[str, Any]:
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise StrataStoreError(
            f"Failed to parse snapshot payload at {records_path}:{line_number}: "
            f"{error.msg}. Recreate the dataset version."
        ) from error
    if not isinstance(payload, dict) or "record" not in payload:
        raise StrataStoreError(
            f"Failed to parse snapshot payload at {records_path}:{line_number}: "
            "expected an object with a record field."
        )
    return payload
