"""Unit tests for label-stratified splitting."""

from __future__ import annotations

import pytest

from core.errors import StrataInvalidArgumentError
from split.stratifier import group_by_label, label_distribution, stratified_two_way_split


def _labeled_records() -> list[dict[str, object]]:
    records: list[dict[str, object]] = []
    for index in range(100):
        records.append({"id": index, "label": "a" if index < 70 else "b"})
    return records


def test_stratified_split_preserves_label_ratio() -> None:
    """A 70/30 source should stay within 0.05 of 0.7 on both sides."""
    train, test = stratified_two_way_split(_labeled_records(), label_key="label", ratio=0.8, seed=42)
    train_share = dict(label_distribution(train))["a"]
    test_share = dict(label_distribution(test))["a"]

    assert abs(train_share - 0.7) <= 0.05 and abs(test_share - 0.7) <= 0.05


def test_stratified_split_sizes_per_group() -> None:
    """Each group should be split at the requested ratio."""
    train, test = stratified_two_way_split(_labeled_records(), ratio=0.8, seed=42)

    assert (len(train), len(test)) == (80, 20)


def test_stratified_split_is_reproducible() -> None:
    """Repeated calls with the same seed should be identical."""
    first = stratified_two_way_split(_labeled_records(), ratio=0.8, seed=42)
    second = stratified_two_way_split(_labeled_records(), ratio=0.8, seed=42)

    assert first == second


def test_stratified_split_shuffles_groups_in_lock_step() -> None:
    """Equal-sized groups should receive the same permutation."""
    records = [{"position": index % 10, "label": index // 10} for index in range(30)]

    train, _ = stratified_two_way_split(records, ratio=0.5, seed=4)
    per_group = [
        [record["position"] for record in train if record["label"] == label]
        for label in range(3)
    ]

    assert per_group[0] == per_group[1] == per_group[2]


def test_stratified_split_orders_groups_by_first_appearance() -> None:
    """Train output should list groups in the order labels first appear."""
    records = [{"label": "z"}, {"label": "a"}, {"label": "z"}, {"label": "a"}]

    train, _ = stratified_two_way_split(records, ratio=1.0, seed=1)

    assert [record["label"] for record in train] == ["z", "z", "a", "a"]


def test_stratified_split_rejects_missing_label() -> None:
    """Records without the label key should fail."""
    with pytest.raises(StrataInvalidArgumentError):
        stratified_two_way_split([{"label": "a"}, {"other": "b"}], seed=1)


def test_group_by_label_rejects_unhashable_label() -> None:
    """Labels must be hashable scalars."""
    with pytest.raises(StrataInvalidArgumentError):
        group_by_label([{"label": ["a"]}], "label")


def test_label_distribution_of_empty_collection() -> None:
    """No records should give an empty distribution."""
    assert label_distribution([]) == []


def test_group_by_label_keeps_booleans_apart_from_numbers() -> None:
    """True should not share a group with 1 or 1.0."""
    records = [{"label": True}, {"label": 1}, {"label": 1.0}, {"label": False}, {"label": 0}]

    groups = group_by_label(records, "label")

    sizes = [(label, len(group)) for label, group in groups]

    assert sizes == [(True, 1), (1, 2), (False, 1), (0, 1)] and [
        type(label) for label, _ in groups
    ] == [bool, int, bool, int]


def test_stratified_split_treats_boolean_labels_as_own_groups() -> None:
    """Each boolean and numeric label group should be split on its own."""
    records = [{"id": index, "label": True} for index in range(5)] + [
        {"id": index, "label": 1} for index in range(5, 10)
    ]

    train, test = stratified_two_way_split(records, ratio=0.8, seed=3)

    assert (
        sum(1 for record in train if record["label"] is True) == 4
        and len(train) == 8
        and len(test) == 2
    )
