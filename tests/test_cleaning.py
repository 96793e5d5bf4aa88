"""STATS19 cleaning, quarantine and schema validation"""

import pandas as pd
import pytest
from pandera.errors import SchemaErrors

from accident_modeling.preprocessing.feature_lists import (
    ACCIDENT_CATEGORICAL_FEATURES,
    ACCIDENT_CATEGORY_LEVELS,
    ACCIDENT_TARGET,
    check_for_leakage
)
from data_engineering.datasets.build_accident_dataset import (
    build_accident_dataset,
    clean_accidents,
    normalize_columns,
    read_clean_dataset,
    split_indices
)
from data_engineering.utils.validation import validate_accident_dataset


def raw_row(**overrides):
    row = {
        'Did_Police_Officer_Attend_Scene_of_Accident': 1,
        'Accident_Severity': 3,
        'Number_of_Vehicles': 2,
        'Number_of_Casualties': 1,
        'Day_of_Week': 2,
        'Time': '17:42',
        'Road_Type': 6,
        'Speed_limit': 30,
        'Junction_Detail': 3,
        'Light_Conditions': 1,
        'Weather_Conditions': 1,
        'Road_Surface_Conditions': 1,
        'Urban_or_Rural_Area': 1,
    }
    row.update(overrides)
    return row


def test_valid_row_is_recoded():
    raw = normalize_columns(pd.DataFrame([raw_row(Accident_Severity=2, Light_Conditions=5)]))

    result = clean_accidents(raw, verbose=False)

    record = result.clean.iloc[0]
    assert record[ACCIDENT_TARGET] == 'Y'
    assert record['accident_severity'] == 'serious'
    assert record['hour'] == 17
    assert record['day_of_week'] == 'monday'
    assert record['road_type'] == 'single_carriageway'
    assert record['junction'] == 't_junction'
    assert record['light'] == 'dark_unlit'
    assert record['area'] == 'urban'
    assert list(result.clean['weather'].cat.categories) == ACCIDENT_CATEGORY_LEVELS['weather']


def test_police_attendance_codes():
    raw = normalize_columns(pd.DataFrame([
        raw_row(Did_Police_Officer_Attend_Scene_of_Accident=1),
        raw_row(Did_Police_Officer_Attend_Scene_of_Accident=2),
        raw_row(Did_Police_Officer_Attend_Scene_of_Accident=3),   # self-completion form
    ]))

    result = clean_accidents(raw, verbose=False)

    assert result.clean[ACCIDENT_TARGET].tolist() == ['Y', 'N', 'N']


def test_missing_dropped_and_undeclared_quarantined():
    raw = normalize_columns(pd.DataFrame([
        raw_row(),
        raw_row(Weather_Conditions=-1),        # missing
        raw_row(Light_Conditions=7),           # 'unknown' code counts as missing
        raw_row(Time=''),                      # missing
        raw_row(Road_Type=4),                  # no declared level
        raw_row(Speed_limit=150),              # out of range
        raw_row(Did_Police_Officer_Attend_Scene_of_Accident=9),   # unknown target code
        raw_row(Accident_Severity=9),          # no declared level
        raw_row(Did_Police_Officer_Attend_Scene_of_Accident=-1),  # missing target
    ]))

    result = clean_accidents(raw, verbose=False)

    assert result.n_raw == 9
    assert len(result.clean) == 1
    assert result.n_missing_dropped == 4
    assert result.n_quarantined == 4
    assert result.quarantine['quarantine_reason'].tolist() == [
        'road_type: undeclared level',
        'speed_limit: out of range',
        'did_police_officer_attend_scene_of_accident: unknown code',
        'accident_severity: undeclared level',
    ]


def test_missing_required_column():
    raw = normalize_columns(pd.DataFrame([raw_row()])).drop(columns=['weather'])
    with pytest.raises(ValueError, match='weather'):
        clean_accidents(raw, verbose=False)


def test_build_and_reload(tmp_path, raw_accidents_csv):
    output = tmp_path / 'gold' / 'accidents.csv'
    quarantine = tmp_path / 'silver' / 'quarantine.csv'

    result = build_accident_dataset(raw_accidents_csv, output_file=output, quarantine_file=quarantine)
    reloaded = read_clean_dataset(output)

    assert len(reloaded) == len(result.clean) > 0
    assert 'accident_index' not in reloaded.columns
    assert str(reloaded['road_type'].dtype) == 'category'
    assert set(reloaded[ACCIDENT_TARGET]) == {'N', 'Y'}


def test_schema_rejects_undeclared_level(clean_accidents):
    bad = clean_accidents.copy()
    bad['weather'] = bad['weather'].astype(str)
    bad.loc[0, 'weather'] = 'hail'

    with pytest.raises(SchemaErrors):
        validate_accident_dataset(bad, 'bad', verbose=False)


def test_schema_rejects_leakage(clean_accidents):
    leaky = clean_accidents.assign(accident_index='201900000001')
    with pytest.raises(ValueError, match='LEAKAGE'):
        validate_accident_dataset(leaky, 'leaky', verbose=False)


def test_clean_dataset_passes_schema(clean_accidents):
    assert validate_accident_dataset(clean_accidents, 'synthetic', verbose=False)


def test_severity_is_a_feature_not_leakage(clean_accidents):
    assert 'accident_severity' in ACCIDENT_CATEGORICAL_FEATURES
    assert ACCIDENT_TARGET == 'did_police_officer_attend_scene_of_accident'
    check_for_leakage(clean_accidents, verbose=False)


def test_split_is_stratified_and_disjoint(clean_accidents):
    train_idx, test_idx = split_indices(clean_accidents, test_fraction=0.25,
                                        random_state=0, verbose=False)

    assert len(set(train_idx) & set(test_idx)) == 0
    assert len(train_idx) + len(test_idx) == len(clean_accidents)
    y = clean_accidents[ACCIDENT_TARGET]
    train_share = (y.iloc[train_idx] == 'Y').mean()
    test_share = (y.iloc[test_idx] == 'Y').mean()
    assert abs(train_share - test_share) < 0.05

    with pytest.raises(ValueError):
        split_indices(clean_accidents, test_fraction=1.5, verbose=False)


def test_build_main_prepares_directories(monkeypatch, tmp_path, raw_accidents_csv):
    from data_engineering.datasets import build_accident_dataset as builder

    calls = []
    monkeypatch.setattr(builder, 'ensure_directories', lambda: calls.append(True))
    output = tmp_path / 'clean.csv'
    monkeypatch.setattr('sys.argv', [
        'accident-build',
        '--input', str(raw_accidents_csv),
        '--output', str(output),
        '--quarantine', str(tmp_path / 'quarantine.csv'),
    ])

    builder.main()

    assert calls == [True]
    assert output.exists()
