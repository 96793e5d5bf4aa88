#!/usr/bin/env python3
"""
Feature Schema Definitions

Declares the fixed feature space for the accident-level dataset (one row per
STATS19 accident record). Categorical levels are fixed here; cleaning maps raw
codes onto these levels and the encoders are built from them, so no record
can introduce a new level after cleaning.

These lists should be updated whenever the recoding in
data_engineering/datasets/build_accident_dataset.py changes.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

NUMERIC = 'numeric'
CATEGORICAL = 'categorical'


@dataclass(frozen=True)
class FeatureSpec:
    name: str
    kind: str
    levels: Optional[Tuple[str, ...]] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    def __post_init__(self):
        if self.kind not in (NUMERIC, CATEGORICAL):
            raise ValueError(f'Unknown feature kind for {self.name}: {self.kind}')
        if self.kind == CATEGORICAL and not self.levels:
            raise ValueError(f'Categorical feature {self.name} needs fixed levels')

    @property
    def is_categorical(self) -> bool:
        return self.kind == CATEGORICAL


# ============================================================================
# ACCIDENT-LEVEL FEATURES
# ============================================================================

ACCIDENT_FEATURES = [
    # Counts
    FeatureSpec('number_of_vehicles', NUMERIC, min_value=1, max_value=100),
    FeatureSpec('number_of_casualties', NUMERIC, min_value=1, max_value=100),

    # Road
    FeatureSpec('speed_limit', NUMERIC, min_value=10, max_value=70),
    FeatureSpec('road_type', CATEGORICAL, levels=(
        'roundabout', 'one_way', 'dual_carriageway', 'single_carriageway', 'slip_road'
    )),
    FeatureSpec('junction', CATEGORICAL, levels=(
        'none', 'roundabout', 't_junction', 'crossroads', 'other'
    )),
    FeatureSpec('area', CATEGORICAL, levels=('urban', 'rural')),

    # Temporal
    FeatureSpec('hour', NUMERIC, min_value=0, max_value=23),
    FeatureSpec('day_of_week', CATEGORICAL, levels=(
        'sunday', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday'
    )),

    # Conditions
    FeatureSpec('light', CATEGORICAL, levels=('daylight', 'dark_lit', 'dark_unlit')),
    FeatureSpec('weather', CATEGORICAL, levels=('fine', 'rain', 'snow', 'fog', 'other')),
    FeatureSpec('road_surface', CATEGORICAL, levels=('dry', 'wet', 'icy', 'flood')),

    # Outcome
    FeatureSpec('accident_severity', CATEGORICAL, levels=('fatal', 'serious', 'slight')),
]

ACCIDENT_NUMERIC_FEATURES = [f.name for f in ACCIDENT_FEATURES if not f.is_categorical]
ACCIDENT_CATEGORICAL_FEATURES = [f.name for f in ACCIDENT_FEATURES if f.is_categorical]
ACCIDENT_CATEGORY_LEVELS = {f.name: list(f.levels) for f in ACCIDENT_FEATURES if f.is_categorical}

# 'Y' = a police officer attended the scene, 'N' = did not attend
ACCIDENT_TARGET = 'did_police_officer_attend_scene_of_accident'
POSITIVE_CLASS = 'Y'
NEGATIVE_CLASS = 'N'
TARGET_LEVELS = (NEGATIVE_CLASS, POSITIVE_CLASS)

# Features that should NEVER be used (data leakage)
ACCIDENT_FORBIDDEN_FEATURES = [
    'accident_index',                 # Identifier
]


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def validate_features(df, feature_list, verbose: bool = True) -> Tuple[List[str], List[str]]:
    """
    Validate that expected features exist in DataFrame

    Args:
        df: pandas DataFrame
        feature_list: List of expected feature names

    Returns:
        Tuple of (available_features, missing_features)
    """
    available = [f for f in feature_list if f in df.columns]
    missing = [f for f in feature_list if f not in df.columns]

    if verbose:
        print(f'\nACCIDENT Features Validation:')
        print(f'  Available: {len(available)}/{len(feature_list)}')
        if missing:
            print(f'  Missing: {missing}')

    return available, missing


def check_for_leakage(df, verbose: bool = True):
    """
    Check if DataFrame contains forbidden features

    Raises:
        ValueError if leakage features detected
    """
    leakage = set(ACCIDENT_FORBIDDEN_FEATURES) & set(df.columns)

    if leakage:
        raise ValueError(
            f'DATA LEAKAGE DETECTED in accident dataset: {sorted(leakage)}\n'
            f'These features must be removed before training.'
        )

    if verbose:
        print(f'  ✓ No data leakage detected in accident dataset')
