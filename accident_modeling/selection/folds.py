#!/usr/bin/env python3
"""
K-Fold Index Generation

Partitions training indices into k disjoint folds, optionally stratified by
class so every fold keeps each class's proportion.

Usage:
    from accident_modeling.selection.folds import make_folds

    folds = make_folds(train_idx, k=5, labels=y_train, random_state=42)
    for fold in folds:
        ...
"""

from typing import List, Optional, Sequence, Union

import numpy as np

from .errors import InvalidConfiguration

RandomState = Union[int, np.random.Generator, None]


def as_generator(random_state: RandomState) -> np.random.Generator:
    """
    Turn a seed or Generator into a numpy Generator

    Passing a Generator shares its state with the caller; passing an int (or
    None) creates a fresh, private one.
    """
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def make_folds(
    indices: Sequence[int],
    k: int,
    labels: Optional[Sequence] = None,
    random_state: RandomState = 42
) -> List[np.ndarray]:
    """
    Split indices into k disjoint folds

    Args:
        indices: Training record indices (unique)
        k: Number of folds, 2 <= k <= len(indices)
        labels: Class labels aligned positionally with `indices`; when given,
            folds are stratified so each class's count differs by at most one
            record between any two folds
        random_state: Seed or numpy Generator used to shuffle before dealing

    Returns:
        List of k sorted index arrays whose union is `indices`

    Raises:
        InvalidConfiguration: Bad k, duplicate indices or misaligned labels
    """
    idx = np.asarray(indices)
    if idx.ndim != 1:
        raise InvalidConfiguration('indices must be one-dimensional')

    n = len(idx)
    if not isinstance(k, (int, np.integer)) or isinstance(k, bool):
        raise InvalidConfiguration(f'Number of folds must be an integer, got {k!r}')
    if k < 2:
        raise InvalidConfiguration(f'Number of folds must be at least 2, got {k}')
    if k > n:
        raise InvalidConfiguration(
            f'Number of folds ({k}) exceeds number of training records ({n})'
        )
    if len(np.unique(idx)) != n:
        raise InvalidConfiguration('indices contain duplicates')

    rng = as_generator(random_state)

    if labels is None:
        shuffled = idx[rng.permutation(n)]
        return [np.sort(part) for part in np.array_split(shuffled, k)]

    labels = np.asarray(labels)
    if len(labels) != n:
        raise InvalidConfiguration(
            f'labels ({len(labels)}) and indices ({n}) have different lengths'
        )

    # Shuffle within each class, then deal round-robin across folds. Dealing
    # continues across classes so total fold sizes also stay within one.
    assignment = [[] for _ in range(k)]
    position = 0
    for cls in np.unique(labels):
        members = idx[labels == cls]
        members = members[rng.permutation(len(members))]
        for member in members:
            assignment[position % k].append(member)
            position += 1

    return [np.sort(np.asarray(fold, dtype=idx.dtype)) for fold in assignment]


def complement(train_indices: Sequence[int], fold: Sequence[int]) -> np.ndarray:
    """Training indices not in `fold` (the fit set for that fold)"""
    return np.setdiff1d(np.asarray(train_indices), np.asarray(fold), assume_unique=True)
