#!/usr/bin/env python3
"""
Model Evaluation on the Held-Out Set

Confusion matrix and derived rates for a fitted model. Rates with a zero
denominator are reported as 'undefined' rather than 0 or NaN.

Usage:
    from accident_modeling.evaluation.metrics import evaluate_classifier

    counts = evaluate_classifier(model, X, y, test_idx, positive_class='Y', name='Test Set')
"""

from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..selection.metrics import ConfusionCounts, confusion_matrix, format_metric
from ..selection.tuner import predict_all


def print_confusion(counts: ConfusionCounts, name: str = 'Dataset', positive_class='Y'):
    """Print a confusion matrix with its derived rates"""
    print(f'\nConfusion Matrix ({name}, positive class = {positive_class!r}):')
    print(f'  TN: {counts.true_negative:,}  FP: {counts.false_positive:,}')
    print(f'  FN: {counts.false_negative:,}  TP: {counts.true_positive:,}')

    print(f'\nMetrics:')
    print(f'  Accuracy:     {format_metric(counts.accuracy)}')
    print(f'  Sensitivity:  {format_metric(counts.sensitivity)}')
    print(f'  Specificity:  {format_metric(counts.specificity)}')
    print(f'  NPV:          {format_metric(counts.negative_predictive_value)}')
    print(f'  PPV:          {format_metric(counts.positive_predictive_value)}')


def evaluate_classifier(
    model,
    X,
    y,
    indices,
    positive_class='Y',
    name: str = 'Dataset',
    verbose: bool = True
) -> ConfusionCounts:
    """
    Predict `indices` and count outcomes against the true labels

    Args:
        model: Fitted model with predict(X)
        X: Features (full table)
        y: True labels (full table)
        indices: Rows to evaluate
        positive_class: Label treated as positive
        name: Dataset name for logging

    Returns:
        ConfusionCounts
    """
    y_pred = predict_all(model, X, indices)
    y_true = np.asarray(y.iloc[indices] if hasattr(y, 'iloc') else np.asarray(y)[indices])
    counts = confusion_matrix(y_pred, y_true, positive_class)

    if verbose:
        print(f'\n{"="*70}')
        print(f'EVALUATION: {name}')
        print(f'{"="*70}')
        print_confusion(counts, name, positive_class)

        pred_dist = pd.Series(y_pred).value_counts()
        true_dist = pd.Series(y_true).value_counts()
        n = len(y_true)
        print(f'\nClass Distribution:')
        print(f'  True:      {true_dist.get(positive_class, 0):,} positive of {n:,} '
              f'({true_dist.get(positive_class, 0) / n * 100:.1f}%)')
        print(f'  Predicted: {pred_dist.get(positive_class, 0):,} positive of {n:,} '
              f'({pred_dist.get(positive_class, 0) / n * 100:.1f}%)')

    return counts


def metrics_record(counts: ConfusionCounts, prefix: str = 'test_') -> Dict[str, Optional[float]]:
    """Flat dict of counts and defined rates, for artifacts and MLflow"""
    record = {f'{prefix}{k}': v for k, v in counts.as_dict().items()}
    for k, v in counts.derived().items():
        if v is not None:
            record[f'{prefix}{k}'] = v
    return record
