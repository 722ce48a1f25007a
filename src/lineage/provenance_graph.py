"""Provenance graph export and acyclicity checks.

Edges must form a DAG, but edge construction does not enforce it.
These helpers let callers export a graph and check it themselves.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from core.types import ArtifactRef, ProvenanceEdge


def lineage_payload(
    refs: Iterable[ArtifactRef],
    edges: Iterable[ProvenanceEdge],
) -> dict[str, object]:
    """Return a JSON-compatible graph payload.

    Args:
        refs: Artifact references; later refs replace earlier ones by id.
        edges: Provenance edges in recorded order.

    Returns:
        Mapping with ``artifacts`` keyed by id and an ``edges`` list.
    """
    artifacts = {ref.artifact_id: ref.to_dict() for ref in refs}
    return {"artifacts": artifacts, "edges": [edge.to_dict() for edge in edges]}


def find_cycle(edges: Sequence[ProvenanceEdge]) -> list[str] | None:
    """Return one cycle as artifact ids, or None for a DAG.

    The returned path starts and ends on the same artifact id.
    """
    adjacency: dict[str, list[str]] = {}
    for edge in edges:
        adjacency.setdefault(edge.source_id, []).append(edge.target_id)
        adjacency.setdefault(edge.target_id, [])
    visiting: set[str] = set()
    done: set[str] = set()
    for root in adjacency:
        if root in done:
            continue
        cycle = _walk(root, adjacency, visiting, done, [])
        if cycle is not None:
            return cycle
    return None


def _walk(
    node: str,
    adjacency: dict[str, list[str]],
    visiting: set[str],
    done: set[str],
    path: list[str],
) -> list[str] | None:
    """Depth-first search that reports the first back edge."""
    visiting.add(node)
    path.append(node)
    for child in adjacency[node]:
        if child in visiting:
            return path[path.index(child):] + [child]
        if child not in done:
            cycle = _walk(child, adjacency, visiting, done, path)
            if cycle is not None:
                return cycle
    path.pop()
    visiting.discard(node)
    done.add(node)
    return None
