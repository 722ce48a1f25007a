"""Append-only version store for datasets.

This module persists immutable, content-addressed dataset versions.
Each dataset owns a ``versions.json`` catalog and one snapshot
directory per version label under the configured data root.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
import os
from pathlib import Path
import shutil
import tempfile
import threading
from typing import Any, Iterator, Mapping

from core.config import StrataConfig
from core.constants import (
    CATALOG_FILE_NAME,
    DATASETS_DIR_NAME,
    TEMP_DIR_PREFIX,
    VERSIONS_DIR_NAME,
)
from core.errors import (
    StrataConcurrencyError,
    StrataInvalidArgumentError,
    StrataNotFoundError,
    StrataStoreError,
    StrataVersionExistsError,
)
from core.logging_config import get_logger
from core.types import Dataset, MetadataChanges, VersionDiff, VersionRecord
from store.catalog_io import (
    catalog_entries,
    catalog_revision,
    read_catalog_file,
    version_record_from_dict,
    write_json_atomic,
)
from store.dataset_identity import dataset_size, ensure_artifact_id, with_hash
from store.snapshot_payload import read_snapshot, write_snapshot

_LOGGER = get_logger(__name__)
_REGISTRY_LOCK = threading.Lock()
_NAME_LOCKS: dict[tuple[Path, str], threading.Lock] = {}


class VersionStore:
    """Filesystem-backed store of immutable dataset versions.

    ``create_version`` calls for the same dataset name serialize on a
    per-name lock and append to the catalog with a revision check.
    Calls for different names never contend.
    """

    def __init__(self, config: StrataConfig) -> None:
        """Initialize version store from config.

        Args:
            config: Runtime configuration.
        """
        self._config = config
        self._datasets_root = config.data_root / DATASETS_DIR_NAME
        self._datasets_root.mkdir(parents=True, exist_ok=True)

    def create_version(self, dataset: Dataset, version_label: str) -> VersionRecord:
        """Record a new immutable version of a dataset.

        Args:
            dataset: Dataset whose content is versioned.
            version_label: New version label for the dataset name.

        Returns:
            Persisted version record.

        Raises:
            StrataInvalidArgumentError: If names are invalid or content is empty.
            StrataVersionExistsError: If the label is already recorded.
            StrataConcurrencyError: If another writer changed the catalog.
            StrataSerializationError: If content cannot be encoded.
            StrataStoreError: If persistence fails.
        """
        _validate_path_component(dataset.name, "dataset name")
        _validate_path_component(version_label, "version label")
        with _name_lock(self._datasets_root, dataset.name):
            dataset_root = self._dataset_root(dataset.name)
            catalog_path = dataset_root / CATALOG_FILE_NAME
            catalog = read_catalog_file(catalog_path, dataset.name)
            if _find_entry(catalog, version_label) is not None:
                raise StrataVersionExistsError(
                    f"Version '{version_label}' already exists for dataset '{dataset.name}'. "
                    "Versions are immutable; choose a new label."
                )
            identified = ensure_artifact_id(dataset, catalog.get("artifact_id"))
            versioned = replace(with_hash(identified), version=version_label)
            if versioned.content_hash is None:
                raise StrataInvalidArgumentError(
                    f"Dataset '{dataset.name}' has no records to version. "
                    "Populate records or splits before creating a version."
                )
            record = VersionRecord(
                version=version_label,
                content_hash=versioned.content_hash,
                created_at=datetime.now(timezone.utc),
                size=dataset_size(versioned),
                metadata=dict(versioned.metadata),
            )
            version_dir = _persist_snapshot(dataset_root / VERSIONS_DIR_NAME, versioned)
            try:
                self._append_catalog_entry(
                    catalog_path,
                    expected_revision=catalog_revision(catalog),
                    record=record,
                    artifact_id=str(versioned.artifact_id),
                )
            except StrataStoreError:
                shutil.rmtree(version_dir, ignore_errors=True)
                raise
        _LOGGER.info(
            "version_created",
            dataset_name=dataset.name,
            version=version_label,
            content_hash=record.content_hash,
            size=record.size,
        )
        return record

    def load_version(self, dataset_name: str, version_label: str) -> Dataset:
        """Load the snapshot stored for one version.

        Args:
            dataset_name: Dataset identifier.
            version_label: Version label.

        Returns:
            Snapshot dataset with version, hash, and artifact id.

        Raises:
            StrataNotFoundError: If the version does not exist.
            StrataStoreError: If the snapshot is unreadable.
        """
        _validate_path_component(dataset_name, "dataset name")
        _validate_path_component(version_label, "version label")
        version_dir = self._datasets_root / dataset_name / VERSIONS_DIR_NAME / version_label
        if not version_dir.is_dir():
            raise StrataNotFoundError(
                f"Version '{version_label}' not found for dataset '{dataset_name}'. "
                "Use list_versions to discover valid labels."
            )
        return read_snapshot(version_dir)

    def history(self, dataset_name: str) -> list[VersionRecord]:
        """Return version records newest first.

        Args:
            dataset_name: Dataset identifier.

        Returns:
            Version records ordered by creation time, newest first;
            empty for an unknown dataset.
        """
        _validate_path_component(dataset_name, "dataset name")
        catalog_path = self._datasets_root / dataset_name / CATALOG_FILE_NAME
        catalog = read_catalog_file(catalog_path, dataset_name)
        indexed = [
            (position, version_record_from_dict(entry))
            for position, entry in enumerate(catalog_entries(catalog))
        ]
        indexed.sort(key=lambda item: (item[1].created_at, item[0]), reverse=True)
        return [record for _, record in indexed]

    def list_versions(self, dataset_name: str) -> list[str]:
        """Return version labels newest first."""
        return [record.version for record in self.history(dataset_name)]

    def version_info(self, dataset_name: str, version_label: str) -> VersionRecord:
        """Return the record for one version.

        Raises:
            StrataNotFoundError: If the version does not exist.
        """
        for record in self.history(dataset_name):
            if record.version == version_label:
                return record
        raise StrataNotFoundError(
            f"Version '{version_label}' not found for dataset '{dataset_name}'. "
            "Use list_versions to discover valid labels."
        )

    def latest(self, dataset_name: str) -> VersionRecord | None:
        """Return the newest version record, or None without versions."""
        records = self.history(dataset_name)
        return records[0] if records else None

    def diff(self, dataset_name: str, version_a: str, version_b: str) -> VersionDiff:
        """Compare two versions of one dataset.

        Args:
            dataset_name: Dataset identifier.
            version_a: Baseline version label.
            version_b: Compared version label.

        Returns:
            Differences from ``version_a`` to ``version_b``.

        Raises:
            StrataNotFoundError: If either version does not exist.
        """
        record_a = self.version_info(dataset_name, version_a)
        record_b = self.version_info(dataset_name, version_b)
        return VersionDiff(
            version_a=version_a,
            version_b=version_b,
            hash_changed=record_a.content_hash != record_b.content_hash,
            size_delta=record_b.size - record_a.size,
            time_delta_seconds=(record_b.created_at - record_a.created_at).total_seconds(),
            metadata_changes=diff_metadata(record_a.metadata, record_b.metadata),
        )

    def tag(self, dataset_name: str, version_label: str, tag_label: str) -> VersionRecord:
        """Append a tag to one version.

        The read-modify-write holds the per-name lock, so a concurrent
        ``create_version`` in this process is never dropped from the
        catalog. Taggers in other processes still race on the tag list
        and the last writer wins. A version appended by another process
        between the read and the write aborts the tag instead.

        Args:
            dataset_name: Dataset identifier.
            version_label: Version label to tag.
            tag_label: Tag to append.

        Returns:
            Updated version record.

        Raises:
            StrataInvalidArgumentError: If the tag is empty.
            StrataNotFoundError: If the version does not exist.
            StrataConcurrencyError: If a version was appended meanwhile.
        """
        if not isinstance(tag_label, str) or not tag_label.strip():
            raise StrataInvalidArgumentError("Tag label must be a non-empty string.")
        _validate_path_component(dataset_name, "dataset name")
        catalog_path = self._datasets_root / dataset_name / CATALOG_FILE_NAME
        with _name_lock(self._datasets_root, dataset_name):
            catalog = read_catalog_file(catalog_path, dataset_name)
            entry = _find_entry(catalog, version_label)
            if entry is None:
                raise StrataNotFoundError(
                    f"Version '{version_label}' not found for dataset '{dataset_name}'. "
                    "Use list_versions to discover valid labels."
                )
            tags = [str(tag) for tag in entry.get("tags", [])]
            if tag_label not in tags:
                tags.append(tag_label)
            entry["tags"] = tags
            _ensure_no_new_versions(catalog_path, dataset_name, _entry_labels(catalog))
            catalog["revision"] = catalog_revision(catalog) + 1
            write_json_atomic(catalog_path, catalog)
        _LOGGER.info(
            "version_tagged",
            dataset_name=dataset_name,
            version=version_label,
            tag=tag_label,
        )
        return version_record_from_dict(entry)

    def _dataset_root(self, dataset_name: str) -> Path:
        """Return dataset root path and ensure base directories."""
        dataset_root = self._datasets_root / dataset_name
        (dataset_root / VERSIONS_DIR_NAME).mkdir(parents=True, exist_ok=True)
        return dataset_root

    def _append_catalog_entry(
        self,
        catalog_path: Path,
        expected_revision: int,
        record: VersionRecord,
        artifact_id: str,
    ) -> None:
        """Compare-and-append one entry to the dataset catalog.

        Raises:
            StrataConcurrencyError: If the catalog revision moved.
            StrataStoreError: If the write fails.
        """
        dataset_name = catalog_path.parent.name
        catalog = read_catalog_file(catalog_path, dataset_name)
        current_revision = catalog_revision(catalog)
        if current_revision != expected_revision:
            _LOGGER.warning(
                "version_create_conflict",
                dataset_name=dataset_name,
                version=record.version,
                expected_revision=expected_revision,
                current_revision=current_revision,
            )
            raise StrataConcurrencyError(
                f"Catalog for dataset '{dataset_name}' changed during create_version "
                f"(revision {expected_revision} -> {current_revision}). Retry the call."
            )
        catalog_entries(catalog).append(record.to_dict())
        catalog["artifact_id"] = catalog.get("artifact_id") or artifact_id
        catalog["revision"] = current_revision + 1
        write_json_atomic(catalog_path, catalog)


def diff_metadata(
    before: Mapping[str, Any],
    after: Mapping[str, Any],
) -> MetadataChanges:
    """Return key-level changes from one metadata mapping to another."""
    added = {key: after[key] for key in sorted(after) if key not in before}
    removed = {key: before[key] for key in sorted(before) if key not in after}
    changed = {
        key: (before[key], after[key])
        for key in sorted(before)
        if key in after and before[key] != after[key]
    }
    return MetadataChanges(added=added, removed=removed, changed=changed)


@contextmanager
def _name_lock(datasets_root: Path, dataset_name: str) -> Iterator[None]:
    """Hold the single-writer lock for one dataset name."""
    key = (datasets_root.resolve(), dataset_name)
    with _REGISTRY_LOCK:
        lock = _NAME_LOCKS.setdefault(key, threading.Lock())
    with lock:
        yield


def _persist_snapshot(versions_root: Path, dataset: Dataset) -> Path:
    """Write a snapshot to a temp directory and rename it into place.

    Args:
        versions_root: Dataset versions directory.
        dataset: Versioned dataset.

    Returns:
        Final snapshot directory.

    Raises:
        StrataStoreError: If the snapshot cannot be written or placed.
    """
    version_label = str(dataset.version)
    final_dir = versions_root / version_label
    if final_dir.exists():
        raise StrataStoreError(
            f"Snapshot directory {final_dir} exists without a catalog entry. "
            "Remove the orphaned directory before reusing this label."
        )
    try:
        temp_dir = Path(
            tempfile.mkdtemp(dir=versions_root, prefix=f"{TEMP_DIR_PREFIX}{version_label}-")
        )
    except OSError as error:
        raise StrataStoreError(
            f"Failed to create snapshot staging directory in {versions_root}: {error}."
        ) from error
    try:
        write_snapshot(temp_dir, dataset)
        os.rename(temp_dir, final_dir)
    except OSError as error:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise StrataStoreError(
            f"Failed to place snapshot at {final_dir}: {error}. Prior versions are intact."
        ) from error
    except Exception:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise
    return final_dir


def _find_entry(catalog: dict[str, Any], version_label: str) -> dict[str, Any] | None:
    for entry in catalog_entries(catalog):
        if entry.get("version") == version_label:
            return entry
    return None


def _validate_path_component(value: str, field_name: str) -> None:
    """Reject names that are empty or escape the dataset directory.

    Raises:
        StrataInvalidArgumentError: If the value is not a safe path component.
    """
    if not isinstance(value, str) or not value.strip():
        raise StrataInvalidArgumentError(f"Invalid {field_name} {value!r}: expected a non-empty string.")
    if "/" in value or "\\" in value or value.startswith("."):
        raise StrataInvalidArgumentError(
            f"Invalid {field_name} '{value}': must not contain path separators "
            "or start with '.'."
        )


def _entry_labels(catalog: dict[str, Any]) -> list[str]:
    return [str(entry.get("version")) for entry in catalog_entries(catalog)]


def _ensure_no_new_versions(
    catalog_path: Path,
    dataset_name: str,
    known_labels: list[str],
) -> None:
    """Fail if the catalog on disk lists versions not seen by the caller.

    Raises:
        StrataConcurrencyError: If another writer appended a version.
    """
    current_labels = _entry_labels(read_catalog_file(catalog_path, dataset_name))
    if current_labels != known_labels:
        _LOGGER.warning(
            "version_tag_conflict",
            dataset_name=dataset_name,
            known_versions=len(known_labels),
            current_versions=len(current_labels),
        )
        raise StrataConcurrencyError(
            f"Catalog for dataset '{dataset_name}' gained versions during tag. "
            "Retry the call so the new versions are kept."
        )
