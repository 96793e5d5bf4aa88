#!/usr/bin/env python3
"""
ML Pipelines for Police Attendance Prediction

Provides reproducible sklearn Pipelines that combine preprocessing and models.
One-hot encoders are built from the declared category levels, so every fold
produces the same columns even when a level is absent from that fold.

Usage:
    from accident_modeling.preprocessing.pipelines import create_accident_classifier_pipeline

    pipeline = create_accident_classifier_pipeline(
        numeric_features=['speed_limit', 'hour'],
        categorical_features=['weather'],
        category_levels={'weather': ['fine', 'rain', 'snow', 'fog', 'other']}
    )
    pipeline.set_params(classifier=LogisticRegression())
    pipeline.fit(X_train, y_train)
"""

from sklearn.pipeline import Pipeline
from sklearn.compose import ColumnTransformer
from sklearn.preprocessing import StandardScaler, OneHotEncoder

from .feature_lists import (
    ACCIDENT_NUMERIC_FEATURES,
    ACCIDENT_CATEGORICAL_FEATURES,
    ACCIDENT_CATEGORY_LEVELS
)


def create_preprocessor(numeric_features=None, categorical_features=None,
                        category_levels=None, scale_numeric=True):
    """
    Column transformer for the accident feature space

    Args:
        numeric_features: Numeric column names (default: full accident schema)
        categorical_features: Categorical column names (default: full accident schema)
        category_levels: Dict of column -> fixed levels
        scale_numeric: Standardize numeric columns (needed for penalized models)

    Returns:
        Unfitted ColumnTransformer
    """
    if numeric_features is None:
        numeric_features = list(ACCIDENT_NUMERIC_FEATURES)
    if categorical_features is None:
        categorical_features = list(ACCIDENT_CATEGORICAL_FEATURES)
    if category_levels is None:
        category_levels = ACCIDENT_CATEGORY_LEVELS

    transformers = []
    if numeric_features:
        numeric_transformer = StandardScaler() if scale_numeric else 'passthrough'
        transformers.append(('num', numeric_transformer, list(numeric_features)))

    if categorical_features:
        categories = [list(category_levels[col]) for col in categorical_features]
        categorical_transformer = OneHotEncoder(
            categories=categories,
            handle_unknown='error',
            sparse_output=False
        )
        transformers.append(('cat', categorical_transformer, list(categorical_features)))

    return ColumnTransformer(transformers=transformers, remainder='drop')


def create_accident_classifier_pipeline(numeric_features=None, categorical_features=None,
                                        category_levels=None, model=None, scale_numeric=True):
    """
    Create full preprocessing + classification pipeline

    Returns:
        sklearn Pipeline with 'preprocessor' and 'classifier' steps
    """
    return Pipeline([
        ('preprocessor', create_preprocessor(
            numeric_features, categorical_features, category_levels, scale_numeric
        )),
        ('classifier', model)  # Can be None initially, set with set_params()
    ])


def get_feature_names(pipeline):
    """
    Extract feature names from a fitted pipeline

    Args:
        pipeline: Fitted sklearn Pipeline with ColumnTransformer

    Returns:
        List of feature names after transformation
    """
    preprocessor = pipeline.named_steps['preprocessor']

    feature_names = []
    for name, transformer, columns in preprocessor.transformers_:
        if name == 'remainder':
            continue
        elif name == 'num':
            feature_names.extend(columns)
        elif name == 'cat':
            feature_names.extend(transformer.get_feature_names_out(columns))

    return list(feature_names)
