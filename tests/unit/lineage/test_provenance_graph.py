"""Unit tests for provenance graph export and cycle detection."""

from __future__ import annotations

from core.types import ArtifactRef, ProvenanceEdge
from lineage.provenance_graph import find_cycle, lineage_payload


def _edge(source_id: str, target_id: str) -> ProvenanceEdge:
    return ProvenanceEdge(
        edge_id=f"{source_id}->{target_id}",
        trace_id=None,
        source_type="artifact",
        source_id=source_id,
        target_type="artifact",
        target_id=target_id,
        relationship="derived_from",
    )


def test_find_cycle_returns_none_for_dag() -> None:
    """A diamond-shaped graph has no cycle."""
    edges = [_edge("a", "b"), _edge("a", "c"), _edge("b", "d"), _edge("c", "d")]

    assert find_cycle(edges) is None


def test_find_cycle_reports_closed_path() -> None:
    """A back edge should be reported as a closed id path."""
    edges = [_edge("a", "b"), _edge("b", "c"), _edge("c", "a")]

    cycle = find_cycle(edges)

    assert cycle is not None and cycle[0] == cycle[-1] and set(cycle) == {"a", "b", "c"}


def test_find_cycle_detects_self_loop() -> None:
    """An artifact derived from itself is a cycle."""
    assert find_cycle([_edge("a", "a")]) == ["a", "a"]


def test_lineage_payload_is_plain_data() -> None:
    """Payload should key artifacts by id and list edges in order."""
    ref = ArtifactRef(artifact_id="a", artifact_type="dataset", uri="strata://a", checksum=None)

    payload = lineage_payload([ref], [_edge("a", "b")])

    assert payload == {
        "artifacts": {"a": ref.to_dict()},
        "edges": [_edge("a", "b").to_dict()],
    }
