#!/usr/bin/env python3
"""
Majority-Class Baseline

The reference rule every tuned model has to beat: always predict the most
frequent class of the training records. Its cross-validated error equals the
minority-class share of the data.

Usage:
    from accident_modeling.models.baseline import MajorityClassLearner

    model = MajorityClassLearner().fit(X_train, y_train, {})
    y_pred = model.predict(X_test)
"""

from typing import Any, Dict

import numpy as np


class MajorityClassModel:
    """Predicts one fixed label for every record"""

    def __init__(self, label, class_counts: Dict[Any, int]):
        self.label = label
        self.class_counts = class_counts

    def predict(self, X) -> np.ndarray:
        return np.full(len(X), self.label, dtype=object)

    def __repr__(self) -> str:
        return f'MajorityClassModel(label={self.label!r})'


class MajorityClassLearner:
    """Hyperparameters are accepted and ignored"""

    name = 'majority_baseline'

    def fit(self, X, y, config: Dict[str, Any]) -> MajorityClassModel:
        labels = np.asarray(y)
        if len(labels) == 0:
            raise ValueError('Cannot fit baseline on zero records')

        classes, counts = np.unique(labels, return_counts=True)
        # np.unique sorts, so argmax picks the smallest label on ties
        label = classes[int(np.argmax(counts))]
        return MajorityClassModel(label, dict(zip(classes.tolist(), counts.tolist())))
