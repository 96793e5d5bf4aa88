#!/usr/bin/env python3
"""
Classification Error and Confusion Metrics

Misclassification rate (the tuning metric) and a binary confusion matrix whose
derived rates raise DivisionUndefined instead of returning 0 or NaN.

Usage:
    from accident_modeling.selection.metrics import confusion_matrix, format_metric

    counts = confusion_matrix(y_pred, y_true, positive_class='Y')
    print(format_metric(counts.sensitivity))    # '1.0000' or 'undefined'
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

import numpy as np

from .errors import DivisionUndefined, InvalidConfiguration


def _aligned(predictions: Sequence, truths: Sequence):
    predictions = np.asarray(predictions)
    truths = np.asarray(truths)
    if predictions.shape != truths.shape:
        raise InvalidConfiguration(
            f'predictions ({len(predictions)}) and truths ({len(truths)}) differ in length'
        )
    return predictions, truths


def misclassification_rate(predictions: Sequence, truths: Sequence) -> float:
    """Fraction of predictions not equal to the true label"""
    predictions, truths = _aligned(predictions, truths)
    if len(truths) == 0:
        raise DivisionUndefined('misclassification_rate', 'Cannot score an empty fold')
    return float(np.mean(predictions != truths))


def majority_error_rate(labels: Sequence) -> float:
    """Error of always predicting the most frequent label, from label frequencies"""
    labels = np.asarray(labels)
    if len(labels) == 0:
        raise DivisionUndefined('majority_error_rate', 'No labels given')
    _, counts = np.unique(labels, return_counts=True)
    return float(1.0 - counts.max() / len(labels))


def _ratio(metric: str, numerator: int, denominator: int) -> float:
    if denominator == 0:
        raise DivisionUndefined(metric)
    return numerator / denominator


@dataclass(frozen=True)
class ConfusionCounts:
    """Binary confusion matrix counts with on-demand derived rates"""
    true_positive: int
    false_positive: int
    true_negative: int
    false_negative: int

    @property
    def total(self) -> int:
        return self.true_positive + self.false_positive + self.true_negative + self.false_negative

    def sensitivity(self) -> float:
        """TP / (TP + FN)"""
        return _ratio('sensitivity', self.true_positive, self.true_positive + self.false_negative)

    def specificity(self) -> float:
        """TN / (TN + FP)"""
        return _ratio('specificity', self.true_negative, self.true_negative + self.false_positive)

    def negative_predictive_value(self) -> float:
        """TN / (TN + FN)"""
        return _ratio(
            'negative_predictive_value', self.true_negative, self.true_negative + self.false_negative
        )

    def positive_predictive_value(self) -> float:
        """TP / (TP + FP)"""
        return _ratio(
            'positive_predictive_value', self.true_positive, self.true_positive + self.false_positive
        )

    def accuracy(self) -> float:
        return _ratio('accuracy', self.true_positive + self.true_negative, self.total)

    def as_dict(self) -> Dict[str, int]:
        return {
            'true_positive': self.true_positive,
            'false_positive': self.false_positive,
            'true_negative': self.true_negative,
            'false_negative': self.false_negative,
        }

    def derived(self) -> Dict[str, Optional[float]]:
        """All derived rates, None where undefined"""
        out = {}
        for name in ('sensitivity', 'specificity', 'negative_predictive_value',
                     'positive_predictive_value', 'accuracy'):
            try:
                out[name] = getattr(self, name)()
            except DivisionUndefined:
                out[name] = None
        return out


def confusion_matrix(predictions: Sequence, truths: Sequence, positive_class) -> ConfusionCounts:
    """
    Count TP/FP/TN/FN for a binary problem

    Any label other than `positive_class` counts as negative.
    """
    predictions, truths = _aligned(predictions, truths)
    predicted_pos = predictions == positive_class
    actual_pos = truths == positive_class

    return ConfusionCounts(
        true_positive=int(np.sum(predicted_pos & actual_pos)),
        false_positive=int(np.sum(predicted_pos & ~actual_pos)),
        true_negative=int(np.sum(~predicted_pos & ~actual_pos)),
        false_negative=int(np.sum(~predicted_pos & actual_pos)),
    )


def format_metric(metric: Callable[[], float], digits: int = 4) -> str:
    """Evaluate a derived-rate method, rendering a zero denominator as 'undefined'"""
    try:
        return f'{metric():.{digits}f}'
    except DivisionUndefined:
        return 'undefined'
