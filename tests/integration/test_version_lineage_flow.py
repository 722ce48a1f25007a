"""Integration tests for split, version, and lineage workflows."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import StrataConfig
from core.types import Dataset
from lineage.provenance_graph import find_cycle, lineage_payload
from store.dataset_sdk import StrataClient


def _raw_dataset() -> Dataset:
    return Dataset(
        name="reviews",
        records=tuple(
            {"id": index, "text": f"review {index}", "label": "pos" if index % 3 else "neg"}
            for index in range(60)
        ),
        schema="review",
        metadata={"source": "integration"},
    )


def test_split_version_and_trace_lineage(tmp_path: Path) -> None:
    """Split outputs should version, reload, and link back to the raw dataset."""
    config = replace(StrataConfig.from_env(), data_root=tmp_path / "strata", random_seed=7)
    client = StrataClient(config)
    raw = _raw_dataset()
    raw_record = client.create_version(raw, "v1")

    train, test = client.stratified_split(raw)
    curated = Dataset(name="reviews-curated", splits={"train": train.records, "test": test.records})
    curated_record = client.create_version(curated, "v1")

    raw_ref = client.dataset("reviews").artifact_ref("v1")
    curated_ref = client.dataset("reviews-curated").artifact_ref("v1")
    edge = client.edge(raw_ref, curated_ref, relationship="split_from", metadata={"ratio": 0.8})
    payload = lineage_payload([raw_ref, curated_ref], [edge])
    reloaded = client.dataset("reviews-curated").load("v1")

    assert (
        client.compute_hash(reloaded) == curated_record.content_hash
        and raw_ref.checksum == raw_record.content_hash
        and curated_ref.artifact_id != raw_ref.artifact_id
        and len(reloaded.splits["train"]) + len(reloaded.splits["test"]) == 60
        and find_cycle([edge]) is None
        and set(payload["artifacts"]) == {raw_ref.artifact_id, curated_ref.artifact_id}
    )


def test_seeded_pipeline_is_reproducible_across_clients(tmp_path: Path) -> None:
    """Two clients with one seed should version identical content."""
    config = replace(StrataConfig.from_env(), random_seed=11)
    first = StrataClient(replace(config, data_root=tmp_path / "first"))
    second = StrataClient(replace(config, data_root=tmp_path / "second"))

    first_train, _ = first.split(_raw_dataset())
    second_train, _ = second.split(_raw_dataset())

    assert (
        first.create_version(first_train, "v1").content_hash
        == second.create_version(second_train, "v1").content_hash
    )
