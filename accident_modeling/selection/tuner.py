#!/usr/bin/env python3
"""
Exhaustive Grid Search with K-Fold Cross-Validation

Evaluates every configuration in a hyperparameter grid on the same folds and
picks the one with the lowest mean cross-validated error. Ties go to the
configuration that comes first in grid order.

Usage:
    from accident_modeling.selection.tuner import tune, finalize, predict_all

    result = tune(
        learner, X, y,
        space={'lambda': [0.1, 0.01, 0.001]},
        train_indices=train_idx,
        k=5,
        stratify=True,
        random_state=42
    )
    model = finalize(learner, result.best_config, X, y, train_idx)
    y_pred = predict_all(model, X, test_idx)
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from .errors import ConfigurationInfeasible, NoFeasibleConfiguration, TuningTimeout
from .evaluator import Metric, evaluate_config
from .folds import RandomState, make_folds
from .grid import HyperparameterGrid
from .learner import learner_name, take_rows
from .metrics import misclassification_rate


@dataclass(frozen=True)
class ConfigScore:
    position: int
    config: Dict[str, Any]
    score: float


@dataclass(frozen=True)
class ExcludedConfig:
    position: int
    config: Dict[str, Any]
    reason: str


@dataclass
class TuningResult:
    """Outcome of one grid search"""
    learner: str
    best_config: Optional[Dict[str, Any]]
    best_score: Optional[float]
    scores: List[ConfigScore] = field(default_factory=list)
    excluded: List[ExcludedConfig] = field(default_factory=list)
    n_folds: int = 0
    grid_size: int = 0

    @property
    def completed(self) -> bool:
        return len(self.scores) + len(self.excluded) == self.grid_size

    def score_table(self) -> pd.DataFrame:
        """One row per evaluated configuration, in grid order"""
        rows = [{**s.config, 'mmce': s.score, 'position': s.position} for s in self.scores]
        rows += [{**e.config, 'mmce': np.nan, 'position': e.position} for e in self.excluded]
        if not rows:
            return pd.DataFrame(columns=['position', 'mmce'])
        table = pd.DataFrame(rows).sort_values('position').reset_index(drop=True)
        return table


def _evaluate_isolated(position, learner, X, y, config, folds, train_indices, metric):
    # Failures come back as values so one configuration cannot abort the others
    try:
        score = evaluate_config(learner, X, y, config, folds, train_indices, metric)
    except ConfigurationInfeasible as exc:
        return position, config, None, str(exc)
    return position, config, score, None


def tune(
    learner,
    X,
    y,
    space: Union[Mapping[str, Sequence[Any]], HyperparameterGrid],
    train_indices: Optional[Sequence[int]] = None,
    k: int = 5,
    stratify: bool = True,
    metric: Metric = misclassification_rate,
    random_state: RandomState = 42,
    n_jobs: int = 1,
    backend: Optional[str] = None,
    timeout: Optional[float] = None,
    verbose: bool = True
) -> TuningResult:
    """
    Grid search over `space` using k-fold cross-validation on `train_indices`

    Args:
        learner: Object with fit(X, y, config) -> model
        X: Feature table, indexed positionally
        y: Labels aligned with X
        space: Mapping name -> candidate values, or a HyperparameterGrid
        train_indices: Rows available for tuning (default: all rows)
        k: Number of folds
        stratify: Preserve class proportions across folds
        metric: metric(predictions, truths), lower is better
        random_state: Seed or numpy Generator for fold assignment
        n_jobs: Configurations evaluated in parallel (joblib)
        backend: joblib backend (default: loky)
        timeout: Seconds allowed for the whole search
        verbose: Print progress

    Returns:
        TuningResult with the best configuration and the full score table

    Raises:
        InvalidConfiguration: Bad k or empty space
        NoFeasibleConfiguration: Every configuration failed
        TuningTimeout: Deadline exceeded; carries the best result so far
    """
    grid = HyperparameterGrid(space)
    if train_indices is None:
        train_indices = np.arange(len(y))
    train_indices = np.asarray(train_indices)

    labels = np.asarray(take_rows(y, train_indices)) if stratify else None
    folds = make_folds(train_indices, k, labels=labels, random_state=random_state)

    name = learner_name(learner)
    result = TuningResult(learner=name, best_config=None, best_score=None,
                          n_folds=k, grid_size=len(grid))

    if verbose:
        print(f'\n{"="*70}')
        print(f'GRID SEARCH: {name}')
        print(f'{"="*70}')
        print(f'  Configurations: {len(grid)}')
        print(f'  CV folds: {k} ({"stratified" if stratify else "unstratified"})')
        print(f'  Training records: {len(train_indices):,}\n')

    started = time.monotonic()
    parallel = Parallel(n_jobs=n_jobs, backend=backend, return_as='generator')
    outcomes = parallel(
        delayed(_evaluate_isolated)(position, learner, X, y, config, folds, train_indices, metric)
        for position, config in enumerate(grid)
    )

    for position, config, score, error in outcomes:
        if error is not None:
            result.excluded.append(ExcludedConfig(position, config, error))
            # Exclusions are reported even when verbose is off
            print(f'  ⚠️  [{position + 1}/{len(grid)}] excluded {config}: {error}')
        else:
            result.scores.append(ConfigScore(position, config, score))
            # Strictly lower only, so earlier configurations win ties
            if result.best_score is None or score < result.best_score:
                result.best_config, result.best_score = config, score
            if verbose:
                print(f'    [{position + 1}/{len(grid)}] {config}  mmce={score:.4f}')

        if timeout is not None and time.monotonic() - started > timeout:
            if not result.completed:
                raise TuningTimeout(
                    f'Grid search for {name} exceeded {timeout}s after '
                    f'{len(result.scores) + len(result.excluded)}/{len(grid)} configurations',
                    partial=result
                )

    if result.best_config is None:
        raise NoFeasibleConfiguration(
            f'All {len(grid)} configurations failed for {name}',
            excluded=result.excluded
        )

    if verbose:
        print(f'\n✓ Tuning complete!')
        print(f'  Best mmce: {result.best_score:.4f}')
        print(f'  Best params:')
        for param, value in result.best_config.items():
            print(f'    - {param}: {value}')
        if result.excluded:
            print(f'  ⚠️  {len(result.excluded)} configuration(s) excluded as infeasible')

    return result


def cross_validate_fixed(
    learner,
    X,
    y,
    config: Optional[Dict[str, Any]] = None,
    train_indices: Optional[Sequence[int]] = None,
    k: int = 5,
    stratify: bool = True,
    metric: Metric = misclassification_rate,
    random_state: RandomState = 42
) -> float:
    """Cross-validated error of a single fixed configuration (e.g. a baseline rule)"""
    if train_indices is None:
        train_indices = np.arange(len(y))
    train_indices = np.asarray(train_indices)
    labels = np.asarray(take_rows(y, train_indices)) if stratify else None
    folds = make_folds(train_indices, k, labels=labels, random_state=random_state)
    return evaluate_config(learner, X, y, config or {}, folds, train_indices, metric)


def finalize(learner, best_config: Dict[str, Any], X, y,
             train_indices: Optional[Sequence[int]] = None):
    """Fit the selected configuration on every training record"""
    if train_indices is None:
        train_indices = np.arange(len(y))
    train_indices = np.asarray(train_indices)
    return learner.fit(take_rows(X, train_indices), take_rows(y, train_indices), dict(best_config))


def predict_all(model, X, test_indices: Sequence[int]) -> np.ndarray:
    """Predictions aligned positionally with `test_indices`"""
    return np.asarray(model.predict(take_rows(X, np.asarray(test_indices))))


def best_of(results: Sequence[TuningResult]) -> Tuple[int, TuningResult]:
    """Index and result with the lowest best_score (first wins ties)"""
    best_position, best = 0, results[0]
    for position, candidate in enumerate(results[1:], 1):
        if candidate.best_score < best.best_score:
            best_position, best = position, candidate
    return best_position, best
