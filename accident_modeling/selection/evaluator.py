#!/usr/bin/env python3
"""
Cross-Validated Evaluation of One Configuration

Fits a learner on every fold's complement, scores it on the fold and averages
the fold scores. A fit, predict or scoring failure on any fold fails the
whole configuration.

Usage:
    from accident_modeling.selection.evaluator import evaluate_config

    folds = make_folds(train_idx, k=5, labels=y.iloc[train_idx])
    mmce = evaluate_config(learner, X, y, {'lambda': 0.01}, folds, train_idx)
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

from .errors import ConfigurationInfeasible, InvalidConfiguration
from .folds import complement
from .learner import take_rows
from .metrics import misclassification_rate

Metric = Callable[[Sequence, Sequence], float]


def fold_scores(
    learner,
    X,
    y,
    config: Dict[str, Any],
    folds: Sequence[Sequence[int]],
    train_indices: Optional[Sequence[int]] = None,
    metric: Metric = misclassification_rate
) -> List[float]:
    """
    Score one configuration on every fold

    Args:
        learner: Object with fit(X, y, config) -> model
        X: Feature table (DataFrame or array), indexed positionally
        y: Labels aligned with X
        config: Hyperparameter configuration
        folds: Disjoint validation folds
        train_indices: Indices the folds partition (default: union of folds)
        metric: metric(predictions, truths) -> float, lower is better

    Returns:
        One score per fold, in fold order

    Raises:
        ConfigurationInfeasible: Fitting, predicting or scoring failed on some fold
    """
    if len(folds) < 2:
        raise InvalidConfiguration(f'Need at least 2 folds, got {len(folds)}')

    if train_indices is None:
        train_indices = np.concatenate([np.asarray(f) for f in folds])

    scores = []
    for fold_number, fold in enumerate(folds, 1):
        fit_idx = complement(train_indices, fold)
        try:
            model = learner.fit(take_rows(X, fit_idx), take_rows(y, fit_idx), dict(config))
            predictions = model.predict(take_rows(X, fold))
            score = float(metric(np.asarray(predictions), np.asarray(take_rows(y, fold))))
        except Exception as exc:
            raise ConfigurationInfeasible(
                f'Configuration {config} failed on fold {fold_number}/{len(folds)}: {exc}',
                config=dict(config),
                fold=fold_number
            ) from exc

        scores.append(score)

    return scores


def evaluate_config(
    learner,
    X,
    y,
    config: Dict[str, Any],
    folds: Sequence[Sequence[int]],
    train_indices: Optional[Sequence[int]] = None,
    metric: Metric = misclassification_rate
) -> float:
    """Mean cross-validated score of one configuration (see fold_scores)"""
    scores = fold_scores(learner, X, y, config, folds, train_indices, metric)
    return float(np.mean(scores))
