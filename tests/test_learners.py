"""Baseline, LASSO and gradient boosting learners"""

import numpy as np
import pandas as pd
import pytest

from accident_modeling.models import (
    BoostedTreeModel,
    GradientBoostingLearner,
    LassoLogisticLearner,
    MajorityClassLearner,
    nonzero_coefficients,
    to_xgboost_params
)
from accident_modeling.preprocessing import (
    ACCIDENT_CATEGORICAL_FEATURES,
    ACCIDENT_NUMERIC_FEATURES,
    ACCIDENT_TARGET,
    get_feature_names
)
from accident_modeling.selection import Learner, cross_validate_fixed, tune

FEATURES = ACCIDENT_NUMERIC_FEATURES + ACCIDENT_CATEGORICAL_FEATURES


def test_majority_baseline_predicts_most_frequent(imbalanced_labels):
    model = MajorityClassLearner().fit(pd.DataFrame({'x': range(100)}), imbalanced_labels, {})

    assert model.label == 'N'
    assert model.class_counts == {'N': 85, 'Y': 15}
    assert model.predict(np.zeros((3, 1))).tolist() == ['N', 'N', 'N']


def test_majority_baseline_tie_picks_smallest_label():
    model = MajorityClassLearner().fit(None, ['Y', 'N', 'Y', 'N'], {})
    assert model.label == 'N'


def test_learners_satisfy_protocol():
    for learner in (MajorityClassLearner(), LassoLogisticLearner(), GradientBoostingLearner()):
        assert isinstance(learner, Learner)


def test_lasso_fits_and_predicts(clean_accidents):
    X, y = clean_accidents[FEATURES], clean_accidents[ACCIDENT_TARGET]

    pipeline = LassoLogisticLearner().fit(X, y, {'lambda': 0.001})
    predictions = pipeline.predict(X)

    assert len(predictions) == len(X)
    assert set(predictions) <= {'N', 'Y'}
    # Encoded width comes from declared levels, not from the data
    n_levels = sum(len(clean_accidents[c].cat.categories) for c in ACCIDENT_CATEGORICAL_FEATURES)
    assert len(get_feature_names(pipeline)) == len(ACCIDENT_NUMERIC_FEATURES) + n_levels


def test_large_lambda_drops_every_coefficient(clean_accidents):
    X, y = clean_accidents[FEATURES], clean_accidents[ACCIDENT_TARGET]

    pipeline = LassoLogisticLearner().fit(X, y, {'lambda': 100.0})

    assert nonzero_coefficients(pipeline) == {}


@pytest.fixture
def mostly_attended():
    """400 records, 85% 'Y', two pure-noise numeric features"""
    rng = np.random.default_rng(7)
    X = pd.DataFrame({'noise_a': rng.normal(size=400), 'noise_b': rng.normal(size=400)})
    y = pd.Series(['Y'] * 340 + ['N'] * 60).sample(frac=1, random_state=7).reset_index(drop=True)
    return X, y


def noise_lasso():
    return LassoLogisticLearner(numeric_features=['noise_a', 'noise_b'], categorical_features=[])


def test_large_lambda_predicts_majority_class(mostly_attended):
    X, y = mostly_attended

    pipeline = noise_lasso().fit(X, y, {'lambda': 128})

    assert nonzero_coefficients(pipeline) == {}
    assert set(pipeline.predict(X)) == {'Y'}


def test_large_lambda_tuning_matches_majority_rule(mostly_attended):
    X, y = mostly_attended

    result = tune(noise_lasso(), X, y, {'lambda': [128, 64, 32]},
                  k=5, random_state=0, verbose=False)
    baseline = cross_validate_fixed(MajorityClassLearner(), X, y, k=5, random_state=0)

    assert result.best_config == {'lambda': 128}
    assert result.best_score == pytest.approx(baseline)
    assert result.best_score == pytest.approx(0.15)


def test_lasso_rejects_bad_config(clean_accidents):
    X, y = clean_accidents[FEATURES], clean_accidents[ACCIDENT_TARGET]
    with pytest.raises(ValueError):
        LassoLogisticLearner().fit(X, y, {'lambda': 0})
    with pytest.raises(ValueError):
        LassoLogisticLearner().fit(X, y, {'alpha': 0.1})


def test_single_class_training_subset_fails(clean_accidents):
    X = clean_accidents[FEATURES]
    y = pd.Series(['N'] * len(X))
    with pytest.raises(ValueError, match='class'):
        LassoLogisticLearner().fit(X, y, {'lambda': 0.01})
    with pytest.raises(ValueError, match='class'):
        GradientBoostingLearner().fit(X, y, {})


def test_gbm_aliases_map_to_xgboost():
    params = to_xgboost_params({'n_trees': 50, 'shrinkage': 0.05, 'interaction_depth': 2,
                                'gamma': 1.0})
    assert params == {'n_estimators': 50, 'learning_rate': 0.05, 'max_depth': 2, 'gamma': 1.0}

    with pytest.raises(ValueError):
        to_xgboost_params({'n_trees': 50, 'n_estimators': 100})


def test_gbm_fits_and_predicts_original_labels(clean_accidents):
    X, y = clean_accidents[FEATURES], clean_accidents[ACCIDENT_TARGET]

    model = GradientBoostingLearner().fit(X, y, {'n_trees': 20, 'interaction_depth': 2})

    assert isinstance(model, BoostedTreeModel)
    assert list(model.classes_) == ['N', 'Y']
    assert set(model.predict(X)) <= {'N', 'Y'}
    assert model.predict_proba(X).shape == (len(X), 2)
    assert model.feature_importances().index[0] in get_feature_names(model.pipeline)


def test_lasso_tuned_end_to_end(clean_accidents):
    X, y = clean_accidents[FEATURES], clean_accidents[ACCIDENT_TARGET]

    result = tune(LassoLogisticLearner(), X, y, {'lambda': [0.01, 0.001]},
                  k=3, random_state=0, verbose=False)

    assert result.best_config['lambda'] in (0.01, 0.001)
    assert 0.0 <= result.best_score < 0.5


def test_l1_arguments_follow_sklearn_version(monkeypatch):
    from accident_modeling.models import logistic

    monkeypatch.setattr(logistic, 'SKLEARN_VERSION', (1, 7))
    assert logistic.l1_penalty_args() == {'penalty': 'l1'}
    monkeypatch.setattr(logistic, 'SKLEARN_VERSION', (1, 9))
    assert logistic.l1_penalty_args() == {'l1_ratio': 1.0}
