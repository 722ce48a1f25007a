"""Shared typed models.

This module defines immutable data models used by the split, store,
lineage, and SDK layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Sequence, Union

from core.errors import StrataInvalidArgumentError

RecordValue = Union[
    str,
    int,
    float,
    bool,
    None,
    Mapping[str, "RecordValue"],
    Sequence["RecordValue"],
]
Record = Mapping[str, RecordValue]
SplitMapping = Mapping[str, Sequence[Record]]


@dataclass(frozen=True)
class Dataset:
    """Named record collection with identity fields.

    Exactly one of ``records`` or ``splits`` carries content. A dataset
    with neither is empty.

    Attributes:
        name: Logical dataset identifier.
        records: Flat ordered records, or None when splits are used.
        splits: Split name to ordered records.
        schema: Optional schema tag, opaque to the core.
        metadata: Free-form dataset metadata.
        version: Version label once the dataset is versioned or loaded.
        content_hash: Stored content hash, if computed.
        artifact_id: Stable artifact identifier, assigned lazily.
    """

    name: str
    records: Sequence[Record] | None = None
    splits: SplitMapping = field(default_factory=dict)
    schema: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    version: str | None = None
    content_hash: str | None = None
    artifact_id: str | None = None

    def __post_init__(self) -> None:
        if self.records is not None and self.splits:
            raise StrataInvalidArgumentError(
                f"Dataset '{self.name}' has both flat records and named splits. "
                "Populate exactly one collection representation."
            )


@dataclass(frozen=True)
class VersionRecord:
    """Immutable version entry from a dataset history.

    Attributes:
        version: Version label.
        content_hash: Hex digest of the versioned content.
        created_at: UTC creation timestamp.
        size: Number of records in the version.
        metadata: Dataset metadata captured at creation.
        tags: Append-only tag labels.
    """

    version: str
    content_hash: str
    created_at: datetime
    size: int
    metadata: Mapping[str, Any] = field(default_factory=dict)
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        """Return the JSON-compatible catalog entry."""
        return {
            "version": self.version,
            "hash": self.content_hash,
            "created_at": self.created_at.isoformat(),
            "size": self.size,
            "metadata": dict(self.metadata),
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class MetadataChanges:
    """Key-level metadata differences between two versions.

    Attributes:
        added: Keys only present in the newer version with their values.
        removed: Keys only present in the older version with their values.
        changed: Keys present in both with (old, new) value pairs.
    """

    added: Mapping[str, Any] = field(default_factory=dict)
    removed: Mapping[str, Any] = field(default_factory=dict)
    changed: Mapping[str, tuple[Any, Any]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Return whether no metadata key differs."""
        return not (self.added or self.removed or self.changed)


@dataclass(frozen=True)
class VersionDiff:
    """Comparison of two versions of one dataset.

    Attributes:
        version_a: Baseline version label.
        version_b: Compared version label.
        hash_changed: Whether content hashes differ.
        size_delta: Size of ``version_b`` minus size of ``version_a``.
        time_delta_seconds: Seconds from ``version_a`` to ``version_b`` creation.
        metadata_changes: Metadata differences from ``version_a`` to ``version_b``.
    """

    version_a: str
    version_b: str
    hash_changed: bool
    size_delta: int
    time_delta_seconds: float
    metadata_changes: MetadataChanges


@dataclass(frozen=True)
class ArtifactRef:
    """External identity for a dataset or one of its versions.

    Attributes:
        artifact_id: Stable artifact identifier.
        artifact_type: Type tag such as ``dataset``.
        uri: Locator URI.
        checksum: Content hash, or None for empty content.
        metadata: Descriptive metadata for lineage consumers.
    """

    artifact_id: str
    artifact_type: str
    uri: str
    checksum: str | None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Return the plain payload for lineage collaborators."""
        return {
            "artifact_id": self.artifact_id,
            "type": self.artifact_type,
            "uri": self.uri,
            "checksum": self.checksum,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class ProvenanceEdge:
    """Directed derivation edge between two artifacts.

    Attributes:
        edge_id: Unique id for this recorded event.
        trace_id: Optional trace correlation id.
        source_type: Node type of the source artifact.
        source_id: Source artifact id.
        target_type: Node type of the target artifact.
        target_id: Target artifact id.
        relationship: Relationship label.
        metadata: Free-form edge metadata.
    """

    edge_id: str
    trace_id: str | None
    source_type: str
    source_id: str
    target_type: str
    target_id: str
    relationship: str
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Return the plain payload for lineage collaborators."""
        return {
            "id": self.edge_id,
            "trace_id": self.trace_id,
            "source_type": self.source_type,
            "source_id": self.source_id,
            "target_type": self.target_type,
            "target_id": self.target_id,
            "relationship": self.relationship,
            "metadata": dict(self.metadata),
        }
