"""Two-way, three-way, and k-fold record partitioning.

This module implements the size arithmetic for every split shape.
All functions return new lists and never mutate the input sequence.
Sizes use round-half-up (``floor(x + 0.5)``) rather than Python's
banker's rounding so ``round_half_up(2.5) == 3``.
"""

from __future__ import annotations

import math
from typing import Sequence, TypeVar

from core.constants import (
    DEFAULT_FOLD_COUNT,
    DEFAULT_SPLIT_RATIO,
    DEFAULT_THREE_WAY_RATIOS,
    RATIO_SUM_TOLERANCE,
)
from core.errors import StrataInvalidArgumentError
from split.seeded_generator import SeededGenerator, resolve_generator

T = TypeVar("T")


def round_half_up(value: float) -> int:
    """Round a non-negative size to the nearest integer, halves up."""
    return int(math.floor(value + 0.5))


def two_way_split(
    records: Sequence[T],
    ratio: float = DEFAULT_SPLIT_RATIO,
    seed: int | None = None,
    shuffle: bool = True,
    generator: SeededGenerator | None = None,
) -> tuple[list[T], list[T]]:
    """Split records into a leading and trailing part.

    Args:
        records: Input records.
        ratio: Fraction assigned to the first part, in (0, 1].
        seed: Optional shuffle seed.
        shuffle: Whether to shuffle before splitting.
        generator: Optional caller-owned generator, instead of seed.

    Returns:
        Pair of first and second record lists.

    Raises:
        StrataInvalidArgumentError: If ratio is outside (0, 1].
    """
    _validate_ratio(ratio, "ratio", allow_zero=False)
    ordered = _ordered_records(records, seed, shuffle, generator)
    split_point = round_half_up(len(ordered) * ratio)
    return ordered[:split_point], ordered[split_point:]


def three_way_split(
    records: Sequence[T],
    ratios: Sequence[float] = DEFAULT_THREE_WAY_RATIOS,
    seed: int | None = None,
    shuffle: bool = True,
    generator: SeededGenerator | None = None,
) -> tuple[list[T], list[T], list[T]]:
    """Split records into train, validation, and test parts.

    The third part absorbs all rounding error so the total is preserved.

    Args:
        records: Input records.
        ratios: Three fractions summing to 1.0.
        seed: Optional shuffle seed.
        shuffle: Whether to shuffle before splitting.
        generator: Optional caller-owned generator, instead of seed.

    Returns:
        Triple of record lists.

    Raises:
        StrataInvalidArgumentError: If ratios are malformed or do not sum to 1.0.
    """
    first_ratio, second_ratio = _validate_three_way_ratios(ratios)
    ordered = _ordered_records(records, seed, shuffle, generator)
    total = len(ordered)
    first_size = round_half_up(total * first_ratio)
    second_size = min(round_half_up(total * second_ratio), total - first_size)
    second_end = first_size + second_size
    return ordered[:first_size], ordered[first_size:second_end], ordered[second_end:]


def k_fold(
    records: Sequence[T],
    k: int = DEFAULT_FOLD_COUNT,
    seed: int | None = None,
    shuffle: bool = True,
    generator: SeededGenerator | None = None,
) -> list[tuple[list[T], list[T]]]:
    """Build k cross-validation folds.

    Fold ``i`` tests on ``[i * fold_size, (i + 1) * fold_size)``; the last
    fold extends to the end and absorbs the remainder.

    Args:
        records: Input records.
        k: Number of folds, between 1 and the record count.
        seed: Optional shuffle seed.
        shuffle: Whether to shuffle before folding.
        generator: Optional caller-owned generator, instead of seed.

    Returns:
        Ordered list of (train, test) pairs.

    Raises:
        StrataInvalidArgumentError: If k is not a positive int within size.
    """
    total = len(records)
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise StrataInvalidArgumentError(
            f"Invalid fold count {k!r}: expected a positive integer."
        )
    if k > total:
        raise StrataInvalidArgumentError(
            f"Fold count {k} exceeds collection size {total}. "
            "Use at most one fold per record."
        )
    ordered = _ordered_records(records, seed, shuffle, generator)
    fold_size = total // k
    folds: list[tuple[list[T], list[T]]] = []
    for fold_index in range(k):
        start = fold_index * fold_size
        end = total if fold_index == k - 1 else start + fold_size
        folds.append((ordered[:start] + ordered[end:], ordered[start:end]))
    return folds


def _ordered_records(
    records: Sequence[T],
    seed: int | None,
    shuffle: bool,
    generator: SeededGenerator | None,
) -> list[T]:
    """Return a new list, shuffled when requested."""
    if not shuffle:
        return list(records)
    return resolve_generator(seed, generator).shuffle(records)


def _validate_ratio(ratio: float, field_name: str, allow_zero: bool) -> float:
    """Validate one split fraction.

    Args:
        ratio: Candidate fraction.
        field_name: Name used in error messages.
        allow_zero: Whether 0.0 is acceptable.

    Returns:
        The ratio as float.

    Raises:
        StrataInvalidArgumentError: If the fraction is out of range.
    """
    if isinstance(ratio, bool) or not isinstance(ratio, (int, float)):
        raise StrataInvalidArgumentError(
            f"Invalid {field_name} {ratio!r}: expected a number."
        )
    value = float(ratio)
    lower_ok = value >= 0.0 if allow_zero else value > 0.0
    if not math.isfinite(value) or not lower_ok or value > 1.0:
        interval = "[0, 1]" if allow_zero else "(0, 1]"
        raise StrataInvalidArgumentError(
            f"Invalid {field_name} {ratio!r}: expected a value in {interval}."
        )
    return value


def _validate_three_way_ratios(ratios: Sequence[float]) -> tuple[float, float]:
    """Validate three-way ratios and return the first two.

    Raises:
        StrataInvalidArgumentError: If ratios are malformed or do not sum to 1.0.
    """
    if isinstance(ratios, (str, bytes)) or len(ratios) != 3:
        raise StrataInvalidArgumentError(
            f"Invalid ratios {ratios!r}: expected exactly three fractions."
        )
    values = [
        _validate_ratio(ratio, f"ratios[{index}]", allow_zero=True)
        for index, ratio in enumerate(ratios)
    ]
    ratio_sum = math.fsum(values)
    if abs(ratio_sum - 1.0) > RATIO_SUM_TOLERANCE:
        raise StrataInvalidArgumentError(
            f"Ratios {list(ratios)} sum to {ratio_sum}, expected 1.0."
        )
    return values[0], values[1]
