#!/usr/bin/env python3
"""
LASSO Logistic Regression

L1-penalized logistic regression on the standardized, one-hot encoded
accident features. The penalty is given as `lambda` on the glmnet scale
(penalty per record), converted to scikit-learn's C = 1 / (lambda * n).
Large lambdas shrink every coefficient to zero and reduce the model to
the intercept, i.e. the majority-class rule. The saga solver leaves the
intercept unpenalized, which that reduction depends on.

Usage:
    from accident_modeling.models.logistic import LassoLogisticLearner

    learner = LassoLogisticLearner()
    pipeline = learner.fit(X_train, y_train, {'lambda': 0.01})
    y_pred = pipeline.predict(X_test)
"""

from typing import Any, Dict, List

import numpy as np
import sklearn
from sklearn.linear_model import LogisticRegression

from ..preprocessing.pipelines import create_accident_classifier_pipeline, get_feature_names

LASSO_PARAMS = ('lambda',)

# scikit-learn 1.8 deprecates `penalty`; l1_ratio=1 alone selects the L1 penalty
SKLEARN_VERSION = tuple(int(part) for part in sklearn.__version__.split('.')[:2])


def l1_penalty_args() -> Dict[str, Any]:
    if SKLEARN_VERSION >= (1, 8):
        return {'l1_ratio': 1.0}
    return {'penalty': 'l1'}


def require_two_classes(y):
    n_classes = len(np.unique(np.asarray(y)))
    if n_classes < 2:
        raise ValueError(
            f'Training subset has {n_classes} class(es); need both classes to fit a classifier'
        )


class LassoLogisticLearner:
    """fit(X, y, {'lambda': float}) -> fitted sklearn Pipeline"""

    name = 'lasso_logistic'

    def __init__(self, numeric_features=None, categorical_features=None,
                 category_levels=None, max_iter: int = 5000, random_state: int = 42):
        self.numeric_features = numeric_features
        self.categorical_features = categorical_features
        self.category_levels = category_levels
        self.max_iter = max_iter
        self.random_state = random_state

    def fit(self, X, y, config: Dict[str, Any]):
        unknown = set(config) - set(LASSO_PARAMS)
        if unknown:
            raise ValueError(f'Unknown LASSO hyperparameters: {sorted(unknown)}')

        penalty = float(config.get('lambda', 0.01))
        if penalty <= 0:
            raise ValueError(f'lambda must be positive, got {penalty}')
        require_two_classes(y)

        model = LogisticRegression(
            solver='saga',
            **l1_penalty_args(),
            C=1.0 / (penalty * len(y)),
            max_iter=self.max_iter,
            random_state=self.random_state
        )
        pipeline = create_accident_classifier_pipeline(
            numeric_features=self.numeric_features,
            categorical_features=self.categorical_features,
            category_levels=self.category_levels,
            model=model
        )
        pipeline.fit(X, np.asarray(y))
        return pipeline


def nonzero_coefficients(pipeline) -> Dict[str, float]:
    """Coefficients LASSO kept (non-zero), keyed by encoded feature name"""
    names: List[str] = get_feature_names(pipeline)
    coefs = pipeline.named_steps['classifier'].coef_.ravel()
    return {name: float(c) for name, c in zip(names, coefs) if c != 0.0}
