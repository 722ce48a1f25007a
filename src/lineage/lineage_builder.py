"""Artifact references and provenance edges for datasets.

This module converts dataset and version identities into plain
``ArtifactRef`` and ``ProvenanceEdge`` values for lineage trackers.
"""

from __future__ import annotations

from typing import Any, Mapping, Union
from uuid import uuid4

from core.constants import (
    DATASET_ARTIFACT_TYPE,
    DEFAULT_EDGE_NODE_TYPE,
    DEFAULT_RELATIONSHIP,
    DEFAULT_URI_SCHEME,
)
from core.types import ArtifactRef, Dataset, ProvenanceEdge
from store.content_hash import compute_hash
from store.dataset_identity import dataset_size, ensure_artifact_id, list_splits
from store.version_store import VersionStore

LineageNode = Union[Dataset, ArtifactRef]


def artifact_ref(
    dataset: Dataset,
    artifact_type: str | None = None,
    uri: str | None = None,
    checksum: str | None = None,
    metadata: Mapping[str, Any] | None = None,
    uri_scheme: str = DEFAULT_URI_SCHEME,
) -> ArtifactRef:
    """Build the artifact reference for a dataset.

    Args:
        dataset: Dataset to reference; an artifact id is assigned if missing.
        artifact_type: Type tag override, ``dataset`` by default.
        uri: Locator override.
        checksum: Checksum override; defaults to the stored or a fresh hash.
        metadata: Metadata overrides merged over the defaults.
        uri_scheme: Scheme for the default locator.

    Returns:
        Artifact reference.
    """
    identified = ensure_artifact_id(dataset)
    if checksum is None:
        checksum = identified.content_hash or compute_hash(identified)
    return ArtifactRef(
        artifact_id=str(identified.artifact_id),
        artifact_type=artifact_type or DATASET_ARTIFACT_TYPE,
        uri=uri or dataset_uri(identified, uri_scheme),
        checksum=checksum,
        metadata={**_default_metadata(identified), **dict(metadata or {})},
    )


def provenance_edge(
    source: LineageNode,
    target: LineageNode,
    relationship: str = DEFAULT_RELATIONSHIP,
    metadata: Mapping[str, Any] | None = None,
    trace_id: str | None = None,
    source_type: str = DEFAULT_EDGE_NODE_TYPE,
    target_type: str = DEFAULT_EDGE_NODE_TYPE,
) -> ProvenanceEdge:
    """Build a directed edge recording that target derives from source.

    Every call yields a new edge id, so identical arguments record two
    distinct events.

    Args:
        source: Source dataset or artifact reference.
        target: Target dataset or artifact reference.
        relationship: Relationship label.
        metadata: Free-form edge metadata.
        trace_id: Optional trace correlation id.
        source_type: Node type for the source.
        target_type: Node type for the target.

    Returns:
        Provenance edge.
    """
    source_ref = _as_ref(source)
    target_ref = _as_ref(target)
    return ProvenanceEdge(
        edge_id=str(uuid4()),
        trace_id=trace_id,
        source_type=source_type,
        source_id=source_ref.artifact_id,
        target_type=target_type,
        target_id=target_ref.artifact_id,
        relationship=relationship,
        metadata=dict(metadata or {}),
    )


def version_artifact_ref(
    store: VersionStore,
    dataset_name: str,
    version_label: str,
    uri_scheme: str = DEFAULT_URI_SCHEME,
) -> ArtifactRef:
    """Build the artifact reference for one stored version.

    The checksum is the hash recorded at creation and the metadata
    carries the version's tags.

    Raises:
        StrataNotFoundError: If the version does not exist.
    """
    snapshot = store.load_version(dataset_name, version_label)
    record = store.version_info(dataset_name, version_label)
    return artifact_ref(
        snapshot,
        checksum=record.content_hash,
        metadata={"created_at": record.created_at.isoformat(), "tags": list(record.tags)},
        uri_scheme=uri_scheme,
    )


def dataset_uri(dataset: Dataset, uri_scheme: str = DEFAULT_URI_SCHEME) -> str:
    """Return ``<scheme>://<name>[/versions/<version>]`` for a dataset."""
    base = f"{uri_scheme}://{dataset.name}"
    if dataset.version:
        return f"{base}/versions/{dataset.version}"
    return base


def _default_metadata(dataset: Dataset) -> dict[str, Any]:
    return {
        "name": dataset.name,
        "version": dataset.version,
        "schema": dataset.schema,
        "size": dataset_size(dataset),
        "splits": list_splits(dataset),
        "dataset_metadata": dict(dataset.metadata),
    }


def _as_ref(node: LineageNode) -> ArtifactRef:
    if isinstance(node, ArtifactRef):
        return node
    return artifact_ref(node)
