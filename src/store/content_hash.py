"""Content-addressed hashing over canonical record encodings.

This module fixes one versioned byte encoding for record collections
so logically equal content hashes identically on every run.

Canonical format v1:
    * header ``strata-canonical-v1\\n`` followed by compact UTF-8 JSON;
    * mapping keys sorted, split names sorted;
    * flat collections wrap as ``{"records": [...]}``, split
      collections as ``{"splits": {...}}``;
    * integral floats encode as integers, so ``1.0`` and ``1`` agree;
    * booleans stay booleans and tuples encode as lists;
    * NaN, infinities, non-string keys, and other types are rejected.
"""

from __future__ import annotations

import hashlib
import json
import math
from typing import Any, Mapping, Sequence, Union

from core.constants import CANONICAL_HEADER, HASH_ALGORITHM
from core.errors import StrataSerializationError
from core.types import Dataset, Record, SplitMapping

HashableContent = Union[Dataset, Sequence[Record], SplitMapping, None]


def compute_hash(content: HashableContent) -> str | None:
    """Compute the content hash of a collection.

    Args:
        content: Dataset, flat record sequence, or split mapping.

    Returns:
        64-character hex digest, or None for empty content.

    Raises:
        StrataSerializationError: If content has no canonical encoding.
    """
    encoded = canonical_bytes(content)
    if encoded is None:
        return None
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(encoded)
    return hasher.hexdigest()


def canonical_bytes(content: HashableContent) -> bytes | None:
    """Encode a collection into canonical bytes.

    Args:
        content: Dataset, flat record sequence, or split mapping.

    Returns:
        Canonical byte form, or None for empty content.

    Raises:
        StrataSerializationError: If content has no canonical encoding.
    """
    envelope = _content_envelope(content)
    if envelope is None:
        return None
    normalized = normalize_value(envelope, "$")
    try:
        body = json.dumps(
            normalized,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as error:
        raise StrataSerializationError(
            f"Failed to encode content canonically: {error}."
        ) from error
    return (CANONICAL_HEADER + body).encode("utf-8")


def normalize_value(value: Any, path: str) -> Any:
    """Normalize one value into its canonical JSON form.

    Args:
        value: Record value to normalize.
        path: JSON-path style location used in error messages.

    Returns:
        Canonical JSON-compatible value.

    Raises:
        StrataSerializationError: If the value has no canonical form.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise StrataSerializationError(
                f"Non-finite float {value!r} at {path} has no canonical encoding. "
                "Replace NaN and infinities before hashing."
            )
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, Mapping):
        normalized: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise StrataSerializationError(
                    f"Mapping key {key!r} at {path} is not a string. "
                    "Records must use string field names."
                )
            normalized[key] = normalize_value(item, f"{path}.{key}")
        return normalized
    if isinstance(value, (list, tuple)):
        return [normalize_value(item, f"{path}[{index}]") for index, item in enumerate(value)]
    raise StrataSerializationError(
        f"Unsupported value of type {type(value).__name__} at {path}. "
        "Use strings, numbers, booleans, null, mappings, or sequences."
    )


def _content_envelope(content: HashableContent) -> dict[str, Any] | None:
    """Wrap content in its layout envelope, or None when empty."""
    if content is None:
        return None
    if isinstance(content, Dataset):
        if content.records is not None:
            return _records_envelope(content.records)
        return _splits_envelope(content.splits)
    if isinstance(content, Mapping):
        return _splits_envelope(content)
    return _records_envelope(content)


def _records_envelope(records: Sequence[Record]) -> dict[str, Any] | None:
    rows = _record_list(records, "$.records")
    if not rows:
        return None
    return {"records": rows}


def _splits_envelope(splits: SplitMapping) -> dict[str, Any] | None:
    if not splits:
        return None
    return {"splits": {name: _record_list(splits[name], f"$.splits.{name}") for name in splits}}


def _record_list(records: Any, path: str) -> list[Record]:
    """Return records as a list, rejecting anything but a list or tuple of mappings.

    Raises:
        StrataSerializationError: If records is not a list or tuple of mappings.
    """
    if not isinstance(records, (list, tuple)):
        raise StrataSerializationError(
            f"Expected a list or tuple of records at {path}, got {type(records).__name__}. "
            "Wrap records in a list."
        )
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise StrataSerializationError(
                f"Record at {path}[{index}] is a {type(record).__name__}, not a mapping. "
                "Records must map field names to values."
            )
    return list(records)
