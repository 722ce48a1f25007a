"""Public SDK surface for Strata.

This module provides a stable import path for curation users.
It re-exports the primary client, typed models, and core operations.
"""

from __future__ import annotations

from core.config import StrataConfig
from core.errors import (
    StrataConcurrencyError,
    StrataError,
    StrataInvalidArgumentError,
    StrataNotFoundError,
    StrataSerializationError,
    StrataStoreError,
)
from core.types import ArtifactRef, Dataset, ProvenanceEdge, VersionDiff, VersionRecord
from lineage.lineage_builder import artifact_ref, provenance_edge
from lineage.provenance_graph import find_cycle, lineage_payload
from split.partitioner import k_fold, three_way_split, two_way_split
from split.seeded_generator import SeededGenerator
from split.stratifier import stratified_two_way_split
from store.content_hash import compute_hash
from store.dataset_sdk import DatasetVersions, StrataClient
from store.version_store import VersionStore

__all__ = [
    "ArtifactRef",
    "Dataset",
    "DatasetVersions",
    "ProvenanceEdge",
    "SeededGenerator",
    "StrataClient",
    "StrataConcurrencyError",
    "StrataConfig",
    "StrataError",
    "StrataInvalidArgumentError",
    "StrataNotFoundError",
    "StrataSerializationError",
    "StrataStoreError",
    "VersionDiff",
    "VersionRecord",
    "VersionStore",
    "artifact_ref",
    "compute_hash",
    "find_cycle",
    "k_fold",
    "lineage_payload",
    "provenance_edge",
    "stratified_two_way_split",
    "three_way_split",
    "two_way_split",
]
