#!/usr/bin/env python3
"""
Data Quality and Schema Validation

Uses pandera to validate the clean accident dataset for:
- Schema compliance (declared categorical levels, numeric ranges, binary target)
- Data leakage detection (forbidden columns)
- Data quality checks (class balance, duplicates)

The schema is generated from the feature space declared in
accident_modeling/preprocessing/feature_lists.py, so the two cannot drift.

Usage:
    from data_engineering.utils.validation import validate_accident_dataset

    validate_accident_dataset(clean_df, 'accidents')
"""

import pandas as pd
import pandera.pandas as pa
from pandera.pandas import Column, Check
from pandera.errors import SchemaErrors

from accident_modeling.preprocessing.feature_lists import (
    ACCIDENT_FEATURES,
    ACCIDENT_FORBIDDEN_FEATURES,
    ACCIDENT_TARGET,
    TARGET_LEVELS,
    POSITIVE_CLASS
)


# ============================================================================
# ACCIDENT-LEVEL SCHEMA
# ============================================================================

def build_accident_schema() -> pa.DataFrameSchema:
    columns = {
        ACCIDENT_TARGET: Column(
            str,
            Check.isin(list(TARGET_LEVELS)),
            nullable=False,
            description='Binary target: Y if a police officer attended the scene'
        ),
    }

    for spec in ACCIDENT_FEATURES:
        if spec.is_categorical:
            # dtype left open: pandas Categorical or plain strings both pass
            columns[spec.name] = Column(
                checks=Check.isin(list(spec.levels)),
                nullable=False
            )
        else:
            columns[spec.name] = Column(
                int,
                Check.in_range(spec.min_value, spec.max_value),
                nullable=False,
                coerce=True
            )

    return pa.DataFrameSchema(
        columns,
        strict=False,  # Allow extra columns not defined here
        description='Accident-level ML dataset schema'
    )


accident_level_schema = build_accident_schema()


# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

def validate_accident_dataset(df: pd.DataFrame, split_name: str = 'dataset',
                              verbose: bool = True) -> bool:
    """
    Validate the clean accident dataset

    Args:
        df: DataFrame to validate
        split_name: Name of dataset for logging

    Returns:
        True if validation passes

    Raises:
        ValueError: If data leakage detected
        SchemaErrors: If schema validation fails
    """
    if verbose:
        print(f'\n{"="*70}')
        print(f'Validating {split_name} dataset (accident-level)')
        print(f'{"="*70}')

    leakage = set(ACCIDENT_FORBIDDEN_FEATURES) & set(df.columns)
    if leakage:
        raise ValueError(
            f'❌ DATA LEAKAGE DETECTED in {split_name}: {sorted(leakage)}\n'
            f'   These columns must be removed before training.'
        )
    if verbose:
        print(f'  ✓ No data leakage detected')

    try:
        accident_level_schema.validate(df, lazy=True)
        if verbose:
            print(f'  ✓ Schema validation passed')
    except SchemaErrors as err:
        print(f'  ❌ Schema validation failed for {split_name}:')
        print(err.failure_cases)
        raise

    if verbose:
        check_data_quality(df, split_name)
        print(f'  ✓ All validations passed for {split_name}\n')
    return True


def check_data_quality(df: pd.DataFrame, split_name: str):
    """
    Perform data quality checks beyond schema validation

    Checks:
    - Exact duplicate rows
    - Target distribution / class imbalance
    """
    dup_count = df.duplicated().sum()
    if dup_count > 0:
        print(f'  ⚠️  {dup_count:,} duplicate rows in {split_name} (identical feature values)')

    if ACCIDENT_TARGET in df.columns and len(df):
        target_dist = df[ACCIDENT_TARGET].value_counts(normalize=True) * 100
        positive_pct = target_dist.get(POSITIVE_CLASS, 0)
        print(f'  Target distribution:')
        print(f'    - Not attended (N):    {100 - positive_pct:.1f}%')
        print(f'    - Police attended (Y): {positive_pct:.1f}%')
        if positive_pct < 5 or positive_pct > 95:
            print(f'  ⚠️  Severe class imbalance detected!')
