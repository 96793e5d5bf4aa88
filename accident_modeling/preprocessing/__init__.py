"""
ML Preprocessing Module

Provides sklearn Pipelines and the fixed feature schema for reproducible
preprocessing across cross-validation folds and train/test splits.
"""

from .pipelines import (
    create_preprocessor,
    create_accident_classifier_pipeline,
    get_feature_names
)

from .feature_lists import (
    FeatureSpec,
    ACCIDENT_FEATURES,
    ACCIDENT_NUMERIC_FEATURES,
    ACCIDENT_CATEGORICAL_FEATURES,
    ACCIDENT_CATEGORY_LEVELS,
    ACCIDENT_TARGET,
    POSITIVE_CLASS,
    NEGATIVE_CLASS,
    validate_features,
    check_for_leakage
)

__all__ = [
    'create_preprocessor',
    'create_accident_classifier_pipeline',
    'get_feature_names',
    'FeatureSpec',
    'ACCIDENT_FEATURES',
    'ACCIDENT_NUMERIC_FEATURES',
    'ACCIDENT_CATEGORICAL_FEATURES',
    'ACCIDENT_CATEGORY_LEVELS',
    'ACCIDENT_TARGET',
    'POSITIVE_CLASS',
    'NEGATIVE_CLASS',
    'validate_features',
    'check_for_leakage',
]
