#!/usr/bin/env python3
"""
Feature Ranking by Information Gain

Mutual information between each feature and the police attendance label, in bits.
Categorical features are treated as discrete, numeric ones are estimated with
scikit-learn's nearest-neighbour estimator.

Usage:
    from accident_modeling.evaluation.importance import rank_features

    ranking = rank_features(X_train, y_train, categorical_features=['weather', 'light'])
    print(ranking.head(10))
"""

import numpy as np
import pandas as pd
from sklearn.feature_selection import mutual_info_classif


def rank_features(X: pd.DataFrame, y, categorical_features=(), random_state: int = 42) -> pd.Series:
    """
    Rank features by information gain with the label

    Args:
        X: Feature table
        y: Labels
        categorical_features: Columns to treat as discrete
        random_state: Seed for the continuous estimator

    Returns:
        Series of feature -> information gain (bits), highest first
    """
    categorical = set(categorical_features)
    encoded = pd.DataFrame(index=X.index)
    for col in X.columns:
        if col in categorical:
            encoded[col] = pd.Categorical(X[col]).codes
        else:
            encoded[col] = pd.to_numeric(X[col])

    discrete_mask = np.array([col in categorical for col in X.columns])
    gains = mutual_info_classif(
        encoded.to_numpy(dtype=float),
        np.asarray(y),
        discrete_features=discrete_mask,
        random_state=random_state
    )

    ranking = pd.Series(gains / np.log(2), index=list(X.columns), name='information_gain')
    return ranking.sort_values(ascending=False, kind='mergesort')


def print_ranking(ranking: pd.Series, top_n: int = 10):
    print(f'\nTop {min(top_n, len(ranking))} Features by Information Gain:')
    for i, (feat, gain) in enumerate(ranking.head(top_n).items(), 1):
        print(f'  {i:2d}. {feat:30s} {gain:.4f} bits')
