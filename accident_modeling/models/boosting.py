#!/usr/bin/env python3
"""
Gradient Boosting Models

XGBoost gradient-boosted trees predicting police attendance. Grids may use the
classic gbm vocabulary (n_trees, shrinkage, interaction_depth,
min_obs_in_node, bag_fraction); any other key is handed to XGBClassifier
unchanged, so native xgboost grids work too.

Usage:
    from accident_modeling.models.boosting import GradientBoostingLearner

    learner = GradientBoostingLearner()
    model = learner.fit(X_train, y_train, {
        'n_trees': 300,
        'shrinkage': 0.05,
        'interaction_depth': 3
    })
    y_pred = model.predict(X_test)
"""

from typing import Any, Dict

import numpy as np
import pandas as pd
import xgboost as xgb
from sklearn.preprocessing import LabelEncoder

from ..preprocessing.pipelines import create_accident_classifier_pipeline, get_feature_names
from .logistic import require_two_classes

# gbm-style names -> XGBClassifier parameters
GBM_PARAM_ALIASES = {
    'n_trees': 'n_estimators',
    'shrinkage': 'learning_rate',
    'interaction_depth': 'max_depth',
    'min_obs_in_node': 'min_child_weight',
    'bag_fraction': 'subsample',
}


def to_xgboost_params(config: Dict[str, Any]) -> Dict[str, Any]:
    params = {}
    for key, value in config.items():
        target = GBM_PARAM_ALIASES.get(key, key)
        if target in params:
            raise ValueError(f'Hyperparameter {target} given twice (as {key})')
        params[target] = value
    return params


class BoostedTreeModel:
    """Fitted preprocessing + XGBClassifier pipeline that predicts original labels"""

    def __init__(self, pipeline, label_encoder: LabelEncoder):
        self.pipeline = pipeline
        self.label_encoder = label_encoder

    @property
    def classes_(self):
        return self.label_encoder.classes_

    def predict(self, X) -> np.ndarray:
        encoded = np.asarray(self.pipeline.predict(X)).astype(int)
        return self.label_encoder.inverse_transform(encoded)

    def predict_proba(self, X) -> np.ndarray:
        return self.pipeline.predict_proba(X)

    def feature_importances(self) -> pd.Series:
        names = get_feature_names(self.pipeline)
        importances = self.pipeline.named_steps['classifier'].feature_importances_
        return pd.Series(importances, index=names).sort_values(ascending=False)


class GradientBoostingLearner:
    """fit(X, y, config) -> BoostedTreeModel"""

    name = 'gradient_boosting'

    def __init__(self, numeric_features=None, categorical_features=None,
                 category_levels=None, balance_classes: bool = False,
                 random_state: int = 42, n_jobs: int = 1):
        self.numeric_features = numeric_features
        self.categorical_features = categorical_features
        self.category_levels = category_levels
        self.balance_classes = balance_classes
        self.random_state = random_state
        self.n_jobs = n_jobs

    def fit(self, X, y, config: Dict[str, Any]) -> BoostedTreeModel:
        require_two_classes(y)

        label_encoder = LabelEncoder()
        y_encoded = label_encoder.fit_transform(np.asarray(y))

        params = {
            'n_estimators': 100,
            'max_depth': 3,
            'learning_rate': 0.1,
            'objective': 'binary:logistic',
            'eval_metric': 'error',
            'random_state': self.random_state,
            'n_jobs': self.n_jobs,
            **to_xgboost_params(config)
        }

        if self.balance_classes:
            # Calculate scale_pos_weight for imbalance
            params['scale_pos_weight'] = (y_encoded == 0).sum() / (y_encoded == 1).sum()

        pipeline = create_accident_classifier_pipeline(
            numeric_features=self.numeric_features,
            categorical_features=self.categorical_features,
            category_levels=self.category_levels,
            model=xgb.XGBClassifier(**params),
            scale_numeric=False
        )
        pipeline.fit(X, y_encoded)
        return BoostedTreeModel(pipeline, label_encoder)
