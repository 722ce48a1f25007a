"""Dataset-level split operations.

This module adapts the record partitioners to ``Dataset`` values.
Datasets with named splits are flattened before partitioning, and
every output is a new flat dataset with cleared identity fields.
"""

from __future__ import annotations

from typing import Sequence

from core.constants import (
    DEFAULT_FOLD_COUNT,
    DEFAULT_LABEL_KEY,
    DEFAULT_SPLIT_RATIO,
    DEFAULT_THREE_WAY_RATIOS,
)
from core.logging_config import get_logger
from core.types import Dataset
from split.partitioner import k_fold, three_way_split, two_way_split
from split.seeded_generator import SeededGenerator
from split.stratifier import stratified_two_way_split
from store.dataset_identity import all_records, derive_dataset

_LOGGER = get_logger(__name__)


def split_dataset(
    dataset: Dataset,
    ratio: float = DEFAULT_SPLIT_RATIO,
    seed: int | None = None,
    shuffle: bool = True,
    generator: SeededGenerator | None = None,
) -> tuple[Dataset, Dataset]:
    """Split a dataset into train and test datasets.

    Args:
        dataset: Source dataset.
        ratio: Train fraction in (0, 1].
        seed: Optional shuffle seed.
        shuffle: Whether to shuffle before splitting.
        generator: Optional caller-owned generator, instead of seed.

    Returns:
        Pair of derived datasets.
    """
    train, test = two_way_split(
        all_records(dataset),
        ratio=ratio,
        seed=seed,
        shuffle=shuffle,
        generator=generator,
    )
    _LOGGER.info(
        "dataset_split",
        dataset_name=dataset.name,
        shape="two_way",
        sizes=[len(train), len(test)],
        seed=seed,
    )
    return derive_dataset(dataset, train), derive_dataset(dataset, test)


def split_dataset_three(
    dataset: Dataset,
    ratios: Sequence[float] = DEFAULT_THREE_WAY_RATIOS,
    seed: int | None = None,
    shuffle: bool = True,
    generator: SeededGenerator | None = None,
) -> tuple[Dataset, Dataset, Dataset]:
    """Split a dataset into train, validation, and test datasets."""
    train, validation, test = three_way_split(
        all_records(dataset),
        ratios=ratios,
        seed=seed,
        shuffle=shuffle,
        generator=generator,
    )
    _LOGGER.info(
        "dataset_split",
        dataset_name=dataset.name,
        shape="three_way",
        sizes=[len(train), len(validation), len(test)],
        seed=seed,
    )
    return (
        derive_dataset(dataset, train),
        derive_dataset(dataset, validation),
        derive_dataset(dataset, test),
    )


def k_fold_dataset(
    dataset: Dataset,
    k: int = DEFAULT_FOLD_COUNT,
    seed: int | None = None,
    shuffle: bool = True,
    generator: SeededGenerator | None = None,
) -> list[tuple[Dataset, Dataset]]:
    """Build k cross-validation (train, test) dataset pairs."""
    folds = k_fold(all_records(dataset), k=k, seed=seed, shuffle=shuffle, generator=generator)
    _LOGGER.info(
        "dataset_split",
        dataset_name=dataset.name,
        shape="k_fold",
        sizes=[len(test) for _, test in folds],
        seed=seed,
    )
    return [(derive_dataset(dataset, train), derive_dataset(dataset, test)) for train, test in folds]


def stratified_split_dataset(
    dataset: Dataset,
    label_key: str = DEFAULT_LABEL_KEY,
    ratio: float = DEFAULT_SPLIT_RATIO,
    seed: int | None = None,
    generator: SeededGenerator | None = None,
) -> tuple[Dataset, Dataset]:
    """Split a dataset per label group into train and test datasets."""
    train, test = stratified_two_way_split(
        all_records(dataset),
        label_key=label_key,
        ratio=ratio,
        seed=seed,
        generator=generator,
    )
    _LOGGER.info(
        "dataset_stratified_split",
        dataset_name=dataset.name,
        label_key=label_key,
        sizes=[len(train), len(test)],
        seed=seed,
    )
    return derive_dataset(dataset, train), derive_dataset(dataset, test)
