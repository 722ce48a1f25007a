"""Dataset identity and collection helpers.

This module assigns stable artifact ids and exposes size, split,
and hash helpers over the two collection representations.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence
from uuid import uuid4

from core.types import Dataset, Record
from store.content_hash import compute_hash


def ensure_artifact_id(dataset: Dataset, artifact_id: str | None = None) -> Dataset:
    """Return the dataset with an artifact id, assigning one if missing.

    Args:
        dataset: Dataset to identify.
        artifact_id: Preferred id when the dataset has none.

    Returns:
        The same dataset when already identified, else an identified copy.
    """
    if dataset.artifact_id:
        return dataset
    return replace(dataset, artifact_id=artifact_id or str(uuid4()))


def with_hash(dataset: Dataset) -> Dataset:
    """Return a copy carrying a freshly computed content hash."""
    return replace(dataset, content_hash=compute_hash(dataset))


def dataset_size(dataset: Dataset) -> int:
    """Return the number of records across the populated representation."""
    if dataset.records is not None:
        return len(dataset.records)
    return sum(len(split_records) for split_records in dataset.splits.values())


def list_splits(dataset: Dataset) -> list[str]:
    """Return split names in sorted order."""
    return sorted(dataset.splits)


def get_split(dataset: Dataset, split_name: str) -> list[Record] | None:
    """Return records for one split, or None when absent."""
    split_records = dataset.splits.get(split_name)
    return None if split_records is None else list(split_records)


def put_split(dataset: Dataset, split_name: str, records: Sequence[Record]) -> Dataset:
    """Return a copy with one split added or replaced.

    Flat records are dropped because a dataset holds one representation.
    The stored hash is cleared since content changed.
    """
    splits = dict(dataset.splits)
    splits[split_name] = tuple(records)
    return replace(dataset, records=None, splits=splits, content_hash=None)


def all_records(dataset: Dataset) -> list[Record]:
    """Flatten the dataset into one record list.

    Named splits are concatenated in sorted split order.
    """
    if dataset.records is not None:
        return list(dataset.records)
    flattened: list[Record] = []
    for split_name in list_splits(dataset):
        flattened.extend(dataset.splits[split_name])
    return flattened


def derive_dataset(source: Dataset, records: Sequence[Record]) -> Dataset:
    """Build a flat derived dataset that does not alias source identity."""
    return replace(
        source,
        records=tuple(records),
        splits={},
        version=None,
        content_hash=None,
        artifact_id=None,
    )
