"""Python SDK for dataset curation.

This module exposes high-level APIs for splitting, hashing, versioning,
and lineage backed by the version store and runtime configuration.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping, Sequence

from core.config import StrataConfig
from core.constants import (
    DEFAULT_FOLD_COUNT,
    DEFAULT_LABEL_KEY,
    DEFAULT_RELATIONSHIP,
    DEFAULT_SPLIT_RATIO,
    DEFAULT_THREE_WAY_RATIOS,
)
from core.types import ArtifactRef, Dataset, ProvenanceEdge, VersionDiff, VersionRecord
from lineage.lineage_builder import (
    LineageNode,
    artifact_ref,
    provenance_edge,
    version_artifact_ref,
)
from split.dataset_splits import (
    k_fold_dataset,
    split_dataset,
    split_dataset_three,
    stratified_split_dataset,
)
from store.content_hash import HashableContent, compute_hash
from store.version_store import VersionStore


class StrataClient:
    """Primary SDK entry point for curation workflows.

    Split calls fall back to ``config.random_seed`` when no seed is
    given; with neither, shuffles draw from OS entropy.
    """

    def __init__(self, config: StrataConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or StrataConfig.from_env()
        self._store = VersionStore(self._config)

    @property
    def config(self) -> StrataConfig:
        """Return runtime configuration."""
        return self._config

    @property
    def store(self) -> VersionStore:
        """Return the backing version store."""
        return self._store

    def with_data_root(self, data_root: str) -> "StrataClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        return StrataClient(replace(self._config, data_root=resolved_root))

    def dataset(self, dataset_name: str) -> "DatasetVersions":
        """Get a version handle by dataset name."""
        return DatasetVersions(dataset_name, self._store, self._config)

    def split(
        self,
        dataset: Dataset,
        ratio: float = DEFAULT_SPLIT_RATIO,
        seed: int | None = None,
        shuffle: bool = True,
    ) -> tuple[Dataset, Dataset]:
        """Split a dataset into train and test datasets."""
        return split_dataset(dataset, ratio=ratio, seed=self._seed(seed), shuffle=shuffle)

    def split_three(
        self,
        dataset: Dataset,
        ratios: Sequence[float] = DEFAULT_THREE_WAY_RATIOS,
        seed: int | None = None,
        shuffle: bool = True,
    ) -> tuple[Dataset, Dataset, Dataset]:
        """Split a dataset into train, validation, and test datasets."""
        return split_dataset_three(dataset, ratios=ratios, seed=self._seed(seed), shuffle=shuffle)

    def k_fold(
        self,
        dataset: Dataset,
        k: int = DEFAULT_FOLD_COUNT,
        seed: int | None = None,
        shuffle: bool = True,
    ) -> list[tuple[Dataset, Dataset]]:
        """Build k cross-validation dataset pairs."""
        return k_fold_dataset(dataset, k=k, seed=self._seed(seed), shuffle=shuffle)

    def stratified_split(
        self,
        dataset: Dataset,
        label_key: str = DEFAULT_LABEL_KEY,
        ratio: float = DEFAULT_SPLIT_RATIO,
        seed: int | None = None,
    ) -> tuple[Dataset, Dataset]:
        """Split a dataset per label into train and test datasets."""
        return stratified_split_dataset(
            dataset,
            label_key=label_key,
            ratio=ratio,
            seed=self._seed(seed),
        )

    def compute_hash(self, content: HashableContent) -> str | None:
        """Return the content hash, or None for empty content."""
        return compute_hash(content)

    def create_version(self, dataset: Dataset, version_label: str) -> VersionRecord:
        """Record a new immutable version of a dataset."""
        return self._store.create_version(dataset, version_label)

    def artifact_ref(
        self,
        dataset: Dataset,
        metadata: Mapping[str, Any] | None = None,
    ) -> ArtifactRef:
        """Build an artifact reference using the configured URI scheme."""
        return artifact_ref(dataset, metadata=metadata, uri_scheme=self._config.uri_scheme)

    def edge(
        self,
        source: LineageNode,
        target: LineageNode,
        relationship: str = DEFAULT_RELATIONSHIP,
        metadata: Mapping[str, Any] | None = None,
        trace_id: str | None = None,
    ) -> ProvenanceEdge:
        """Build a provenance edge from source to target."""
        return provenance_edge(
            self._as_ref(source),
            self._as_ref(target),
            relationship=relationship,
            metadata=metadata,
            trace_id=trace_id,
        )

    def _as_ref(self, node: LineageNode) -> ArtifactRef:
        if isinstance(node, ArtifactRef):
            return node
        return self.artifact_ref(node)

    def _seed(self, seed: int | None) -> int | None:
        return self._config.random_seed if seed is None else seed


class DatasetVersions:
    """SDK handle over one dataset name's version history."""

    def __init__(self, dataset_name: str, store: VersionStore, config: StrataConfig) -> None:
        """Create dataset version handle.

        Args:
            dataset_name: Dataset identifier.
            store: Version store backend.
            config: Runtime configuration.
        """
        self._dataset_name = dataset_name
        self._store = store
        self._config = config

    @property
    def name(self) -> str:
        """Return dataset identifier."""
        return self._dataset_name

    def list_versions(self) -> list[str]:
        """List version labels newest first."""
        return self._store.list_versions(self._dataset_name)

    def history(self) -> list[VersionRecord]:
        """List version records newest first."""
        return self._store.history(self._dataset_name)

    def latest(self) -> VersionRecord | None:
        """Return the newest version record, if any."""
        return self._store.latest(self._dataset_name)

    def load(self, version_label: str) -> Dataset:
        """Load one version snapshot."""
        return self._store.load_version(self._dataset_name, version_label)

    def info(self, version_label: str) -> VersionRecord:
        """Return one version record."""
        return self._store.version_info(self._dataset_name, version_label)

    def diff(self, version_a: str, version_b: str) -> VersionDiff:
        """Compare two versions."""
        return self._store.diff(self._dataset_name, version_a, version_b)

    def tag(self, version_label: str, tag_label: str) -> VersionRecord:
        """Append a tag to one version."""
        return self._store.tag(self._dataset_name, version_label, tag_label)

    def artifact_ref(self, version_label: str) -> ArtifactRef:
        """Build the artifact reference for one stored version."""
        return version_artifact_ref(
            self._store,
            self._dataset_name,
            version_label,
            uri_scheme=self._config.uri_scheme,
        )
