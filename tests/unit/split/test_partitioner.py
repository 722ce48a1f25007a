"""Unit tests for two-way, three-way, and k-fold partitioning."""

from __future__ import annotations

import pytest

from core.errors import StrataInvalidArgumentError
from split.partitioner import k_fold, round_half_up, three_way_split, two_way_split
from split.seeded_generator import SeededGenerator


def _ids(records: list[dict[str, int]]) -> list[int]:
    return [record["id"] for record in records]


def test_two_way_split_without_shuffle_keeps_order(id_records) -> None:
    """Unshuffled 0.8 split of ids 1..100 should cut after id 80."""
    first, second = two_way_split(id_records, ratio=0.8, seed=42, shuffle=False)

    assert _ids(first) == list(range(1, 81)) and _ids(second) == list(range(81, 101))


@pytest.mark.parametrize("seed", [0, 1, 42, 2**40])
@pytest.mark.parametrize("ratio", [0.01, 0.33, 0.5, 0.8, 1.0])
def test_two_way_split_is_reproducible_and_total_preserving(id_records, seed, ratio) -> None:
    """Repeated seeded calls should match and preserve the total."""
    first_a, second_a = two_way_split(id_records, ratio=ratio, seed=seed)
    first_b, second_b = two_way_split(id_records, ratio=ratio, seed=seed)

    assert (
        first_a == first_b
        and second_a == second_b
        and len(first_a) + len(second_a) == len(id_records)
    )


def test_two_way_split_full_ratio_leaves_second_empty(id_records) -> None:
    """A ratio of 1.0 should put everything in the first part."""
    first, second = two_way_split(id_records, ratio=1.0, shuffle=False)

    assert len(first) == 100 and second == []


def test_two_way_split_rounds_half_up() -> None:
    """Half sizes should round up, unlike Python's round()."""
    first, second = two_way_split(list(range(5)), ratio=0.5, shuffle=False)

    assert (len(first), len(second)) == (3, 2)


def test_two_way_split_does_not_mutate_input(id_records) -> None:
    """Shuffled splits should leave the source sequence untouched."""
    snapshot = list(id_records)

    two_way_split(id_records, ratio=0.5, seed=3)

    assert id_records == snapshot


def test_two_way_split_uses_caller_generator(id_records) -> None:
    """A generator instance should give the same result as its seed."""
    via_seed = two_way_split(id_records, ratio=0.7, seed=11)
    via_generator = two_way_split(id_records, ratio=0.7, generator=SeededGenerator(11))

    assert via_seed == via_generator


@pytest.mark.parametrize("ratio", [0, 0.0, -0.1, 1.01, float("nan"), True, "0.5"])
def test_two_way_split_rejects_invalid_ratio(id_records, ratio) -> None:
    """Ratios must be numbers in (0, 1]."""
    with pytest.raises(StrataInvalidArgumentError):
        two_way_split(id_records, ratio=ratio)


def test_two_way_split_of_empty_collection() -> None:
    """Empty input should yield two empty parts."""
    assert two_way_split([], ratio=0.8, seed=1) == ([], [])


def test_round_half_up_boundaries() -> None:
    """Rounding should send halves up and keep exact values."""
    assert [round_half_up(value) for value in (0.0, 0.49, 0.5, 2.5, 3.0)] == [0, 0, 1, 3, 3]


def test_three_way_split_sizes_for_default_ratios(id_records) -> None:
    """Default ratios over 100 records should give 70/15/15."""
    train, validation, test = three_way_split(id_records, seed=5)

    assert (len(train), len(validation), len(test)) == (70, 15, 15)


def test_three_way_split_accepts_float_sum_boundary(id_records) -> None:
    """0.7 + 0.15 + 0.15 should pass despite binary float error."""
    parts = three_way_split(id_records, ratios=[0.7, 0.15, 0.15], shuffle=False)

    assert sum(len(part) for part in parts) == 100


def test_three_way_split_rejects_sum_below_one(id_records) -> None:
    """Ratios summing to 0.9 should fail."""
    with pytest.raises(StrataInvalidArgumentError):
        three_way_split(id_records, ratios=[0.5, 0.3, 0.1])


def test_three_way_split_rejects_sum_just_outside_tolerance(id_records) -> None:
    """A sum off by more than the tolerance should fail."""
    with pytest.raises(StrataInvalidArgumentError):
        three_way_split(id_records, ratios=[0.5, 0.3, 0.2 + 1e-6])


@pytest.mark.parametrize("ratios", [[0.5, 0.5], [0.25, 0.25, 0.25, 0.25], [1.5, -0.5, 0.0]])
def test_three_way_split_rejects_malformed_ratios(id_records, ratios) -> None:
    """Exactly three fractions in [0, 1] are required."""
    with pytest.raises(StrataInvalidArgumentError):
        three_way_split(id_records, ratios=ratios)


def test_three_way_split_third_part_absorbs_rounding() -> None:
    """The last part should take what the first two leave."""
    train, validation, test = three_way_split(
        list(range(7)), ratios=[0.5, 0.25, 0.25], shuffle=False
    )

    assert (len(train), len(validation), len(test)) == (4, 2, 1)


def test_three_way_split_clamps_second_part() -> None:
    """Rounding both leading parts up must not overdraw the total."""
    train, validation, test = three_way_split([{"id": 1}], ratios=[0.5, 0.5, 0.0], shuffle=False)

    assert (len(train), len(validation), len(test)) == (1, 0, 0)


def test_k_fold_example_slices() -> None:
    """Five folds of ids 1..50 should test on consecutive blocks of ten."""
    records = [{"id": index} for index in range(1, 51)]

    folds = k_fold(records, k=5, shuffle=False)

    assert (
        _ids(folds[0][1]) == list(range(1, 11))
        and _ids(folds[4][1]) == list(range(41, 51))
        and _ids(folds[0][0]) == list(range(11, 51))
    )


@pytest.mark.parametrize("total,k", [(50, 5), (11, 3), (7, 7), (10, 1), (23, 4)])
def test_k_fold_test_slices_partition_input(total, k) -> None:
    """Concatenated test slices should reproduce the input exactly."""
    records = list(range(total))

    folds = k_fold(records, k=k, shuffle=False)
    concatenated = [item for _, test in folds for item in test]

    assert len(folds) == k and concatenated == records


def test_k_fold_train_is_complement_of_test() -> None:
    """Each fold's train set should be everything outside its test slice."""
    records = list(range(11))

    folds = k_fold(records, k=3, seed=8)

    assert all(sorted(train + test) == records for train, test in folds)


def test_k_fold_last_fold_absorbs_remainder() -> None:
    """The last test slice should extend to the end of the collection."""
    folds = k_fold(list(range(11)), k=3, shuffle=False)

    assert [len(test) for _, test in folds] == [3, 3, 5]


def test_k_fold_shuffled_folds_cover_each_item_once(id_records) -> None:
    """Every record should land in exactly one shuffled test fold."""
    folds = k_fold(id_records, k=4, seed=21)
    tested = [record["id"] for _, test in folds for record in test]

    assert sorted(tested) == list(range(1, 101))


@pytest.mark.parametrize("k", [0, -1, 101, True, 2.0])
def test_k_fold_rejects_invalid_fold_count(id_records, k) -> None:
    """Fold counts must be positive ints no larger than the collection."""
    with pytest.raises(StrataInvalidArgumentError):
        k_fold(id_records, k=k)
