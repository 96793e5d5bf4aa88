"""Shared fixtures: synthetic STATS19 extracts and clean accident datasets"""

import numpy as np
import pandas as pd
import pytest

from accident_modeling.preprocessing.feature_lists import (
    ACCIDENT_FEATURES,
    ACCIDENT_TARGET
)


def make_raw_accidents(n=400, seed=0):
    """Raw STATS19-style extract (original column names, integer codes)"""
    rng = np.random.default_rng(seed)
    speed = rng.choice([20, 30, 40, 50, 60, 70], size=n)
    area = np.where(speed >= 50, 2, rng.choice([1, 2], size=n, p=[0.8, 0.2]))
    light = rng.choice([1, 4, 5], size=n, p=[0.7, 0.2, 0.1])

    severity = rng.choice([1, 2, 3], size=n, p=[0.02, 0.18, 0.8])

    # Police attend most serious accidents, fewer slight ones on quiet rural roads
    attend = 0.75 + 0.2 * (severity <= 2) - 0.2 * (area == 2) - 0.1 * (light == 5)
    attended = rng.random(n) < attend
    police = np.where(attended, 1, rng.choice([2, 3], size=n, p=[0.7, 0.3]))

    return pd.DataFrame({
        'Accident_Index': [f'2019{i:08d}' for i in range(n)],
        'Accident_Severity': severity,
        'Did_Police_Officer_Attend_Scene_of_Accident': police,
        'Number_of_Vehicles': rng.integers(1, 4, size=n),
        'Number_of_Casualties': rng.integers(1, 3, size=n),
        'Day_of_Week': rng.integers(1, 8, size=n),
        'Time': [f'{h:02d}:{m:02d}' for h, m in zip(rng.integers(0, 24, size=n),
                                                    rng.integers(0, 60, size=n))],
        'Road_Type': rng.choice([1, 2, 3, 6, 7], size=n, p=[0.1, 0.05, 0.15, 0.65, 0.05]),
        'Speed_limit': speed,
        'Junction_Detail': rng.choice([0, 1, 3, 6, 9], size=n),
        'Light_Conditions': light,
        'Weather_Conditions': rng.choice([1, 2, 3, 7, 8], size=n, p=[0.75, 0.15, 0.03, 0.02, 0.05]),
        'Road_Surface_Conditions': rng.choice([1, 2, 3, 5], size=n, p=[0.7, 0.25, 0.04, 0.01]),
        'Urban_or_Rural_Area': area,
    })


def make_clean_accidents(n=300, seed=0):
    """Clean accident dataset in the fixed feature space"""
    rng = np.random.default_rng(seed)
    data = {}
    for spec in ACCIDENT_FEATURES:
        if spec.is_categorical:
            data[spec.name] = pd.Categorical(
                rng.choice(list(spec.levels), size=n), categories=list(spec.levels)
            )
        else:
            data[spec.name] = rng.integers(int(spec.min_value), int(spec.max_value) + 1, size=n)

    df = pd.DataFrame(data)
    attend = (0.85 - 0.35 * (df['speed_limit'] >= 50) - 0.2 * (df['light'] == 'dark_unlit')
              + 0.1 * (df['accident_severity'] != 'slight'))
    df[ACCIDENT_TARGET] = np.where(rng.random(n) < attend, 'Y', 'N')
    return df


@pytest.fixture
def raw_accidents():
    return make_raw_accidents()


@pytest.fixture
def raw_accidents_csv(tmp_path, raw_accidents):
    path = tmp_path / 'accidents.csv'
    raw_accidents.to_csv(path, index=False)
    return path


@pytest.fixture
def clean_accidents():
    return make_clean_accidents()


@pytest.fixture
def imbalanced_labels():
    """100 records, 85 'N' and 15 'Y'"""
    return pd.Series(['N'] * 85 + ['Y'] * 15)
