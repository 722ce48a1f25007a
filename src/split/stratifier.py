"""Label-stratified train/test splitting.

This module splits each label group independently so per-label
proportions in the outputs track the source distribution.
"""

from __future__ import annotations

from typing import Hashable, Sequence

from core.constants import DEFAULT_LABEL_KEY, DEFAULT_SPLIT_RATIO
from core.errors import StrataInvalidArgumentError
from core.types import Record
from split.partitioner import two_way_split
from split.seeded_generator import SeededGenerator, resolve_generator


def stratified_two_way_split(
    records: Sequence[Record],
    label_key: str = DEFAULT_LABEL_KEY,
    ratio: float = DEFAULT_SPLIT_RATIO,
    seed: int | None = None,
    generator: SeededGenerator | None = None,
) -> tuple[list[Record], list[Record]]:
    """Split records per label group and concatenate the parts.

    Every group is shuffled by a generator restarted at the same seed, so
    group shuffles move in lock-step rather than independently.

    Args:
        records: Input records.
        label_key: Record key holding the class label.
        ratio: Train fraction per group, in (0, 1].
        seed: Optional shuffle seed.
        generator: Optional caller-owned generator, instead of seed.

    Returns:
        Pair of train and test record lists.

    Raises:
        StrataInvalidArgumentError: If a record lacks the label or ratio is invalid.
    """
    base_generator = resolve_generator(seed, generator)
    train: list[Record] = []
    test: list[Record] = []
    for _, group in group_by_label(records, label_key):
        group_train, group_test = two_way_split(
            group,
            ratio=ratio,
            generator=base_generator.fork(),
        )
        train.extend(group_train)
        test.extend(group_test)
    return train, test


def group_by_label(
    records: Sequence[Record],
    label_key: str,
) -> list[tuple[Hashable, list[Record]]]:
    """Group records by label in first-appearance order.

    Boolean labels form their own groups: ``True`` never shares a group
    with ``1`` or ``1.0``. Equal numbers of other types do share one.

    Args:
        records: Input records.
        label_key: Record key holding the class label.

    Returns:
        Ordered ``(label, records)`` pairs, labelled by first appearance.

    Raises:
        StrataInvalidArgumentError: If a record lacks the label or it is unhashable.
    """
    groups: dict[tuple[bool, Hashable], tuple[Hashable, list[Record]]] = {}
    for index, record in enumerate(records):
        if label_key not in record:
            raise StrataInvalidArgumentError(
                f"Record at index {index} has no stratification key '{label_key}'. "
                "Add the label to every record or choose another label_key."
            )
        label = record[label_key]
        try:
            group_key = (isinstance(label, bool), label)
            groups.setdefault(group_key, (label, []))[1].append(record)  # type: ignore[arg-type]
        except TypeError as error:
            raise StrataInvalidArgumentError(
                f"Record at index {index} has unhashable label {label!r} "
                f"under '{label_key}'. Use scalar labels for stratification."
            ) from error
    return list(groups.values())


def label_distribution(
    records: Sequence[Record],
    label_key: str = DEFAULT_LABEL_KEY,
) -> list[tuple[Hashable, float]]:
    """Return the share of each label among records.

    Args:
        records: Input records.
        label_key: Record key holding the class label.

    Returns:
        Ordered ``(label, fraction)`` pairs, empty for an empty collection.
    """
    total = len(records)
    if total == 0:
        return []
    return [(label, len(group) / total) for label, group in group_by_label(records, label_key)]
