"""
ML Models Module

Learners for police attendance prediction. Each exposes
fit(X, y, config) -> model with model.predict(X), which is all the model
selector needs.
"""

from .baseline import (
    MajorityClassLearner,
    MajorityClassModel
)

from .logistic import (
    LassoLogisticLearner,
    nonzero_coefficients
)

from .boosting import (
    GradientBoostingLearner,
    BoostedTreeModel,
    to_xgboost_params
)

LEARNERS = {
    'baseline': MajorityClassLearner,
    'lasso': LassoLogisticLearner,
    'gbm': GradientBoostingLearner,
}

__all__ = [
    'MajorityClassLearner',
    'MajorityClassModel',
    'LassoLogisticLearner',
    'nonzero_coefficients',
    'GradientBoostingLearner',
    'BoostedTreeModel',
    'to_xgboost_params',
    'LEARNERS',
]
