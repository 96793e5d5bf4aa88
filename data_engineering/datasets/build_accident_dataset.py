#!/usr/bin/env python3
"""
Accident-Level ML Dataset Builder

Turns a raw STATS19 accident extract into the fixed accident feature space:
- Normalizes column names and renames coded columns to feature names
- Derives the binary target (did_police_officer_attend_scene_of_accident:
  Y = attended, N = not attended or self-reported)
- Recodes STATS19 integer codes onto the declared categorical levels
- Drops records with missing values (code -1, blanks, 'unknown' codes)
- Quarantines records whose codes map to no declared level, or whose
  numeric values are out of range, instead of guessing
- Validates the result against the pandera schema

Output:
  - data/gold/ml_datasets/accident_level/accidents_latest.csv
  - data/silver/uk/accidents_quarantine.csv

Usage:
  python -m data_engineering.datasets.build_accident_dataset
  python -m data_engineering.datasets.build_accident_dataset --input raw.csv --sample 20000
"""

import argparse
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from accident_modeling.preprocessing.feature_lists import (
    ACCIDENT_FEATURES,
    ACCIDENT_TARGET,
    POSITIVE_CLASS,
    NEGATIVE_CLASS
)
from config.paths import (
    UK_BRONZE_ACCIDENTS,
    UK_SILVER_QUARANTINE,
    ACCIDENT_LEVEL_DATASET,
    ensure_directories
)
from data_engineering.utils.validation import validate_accident_dataset

# Normalized raw name -> feature name
COLUMN_RENAME = {
    'junction_detail': 'junction',
    'light_conditions': 'light',
    'weather_conditions': 'weather',
    'road_surface_conditions': 'road_surface',
    'urban_or_rural_area': 'area',
}

REQUIRED_RAW_COLUMNS = [
    ACCIDENT_TARGET,
    'accident_severity',
    'number_of_vehicles',
    'number_of_casualties',
    'day_of_week',
    'time',
    'road_type',
    'speed_limit',
    'junction',
    'light',
    'weather',
    'road_surface',
    'area',
]

# STATS19 code used for "data missing or out of range"
MISSING_CODE = -1

# Codes meaning "unknown" in a specific column; treated as missing
UNKNOWN_CODES = {
    'road_type': [9],
    'junction': [99],
    'light': [7],
    'weather': [9],
    'road_surface': [9],
    'area': [3],
}

# STATS19 code -> declared level
CATEGORY_RECODES = {
    'day_of_week': {
        1: 'sunday', 2: 'monday', 3: 'tuesday', 4: 'wednesday',
        5: 'thursday', 6: 'friday', 7: 'saturday',
    },
    'road_type': {
        1: 'roundabout', 2: 'one_way', 3: 'dual_carriageway',
        6: 'single_carriageway', 7: 'slip_road', 12: 'one_way',
    },
    'junction': {
        0: 'none', 1: 'roundabout', 2: 'roundabout', 3: 't_junction',
        5: 'other', 6: 'crossroads', 7: 'other', 8: 'other', 9: 'other',
    },
    'light': {1: 'daylight', 4: 'dark_lit', 5: 'dark_unlit', 6: 'dark_unlit'},
    'weather': {
        1: 'fine', 2: 'rain', 3: 'snow', 4: 'fine',
        5: 'rain', 6: 'snow', 7: 'fog', 8: 'other',
    },
    'road_surface': {1: 'dry', 2: 'wet', 3: 'icy', 4: 'icy', 5: 'flood'},
    'area': {1: 'urban', 2: 'rural'},
    'accident_severity': {1: 'fatal', 2: 'serious', 3: 'slight'},
}

# Did_Police_Officer_Attend_Scene_of_Accident: 1 yes, 2 no,
# 3 no (accident reported using a self-completion form)
POLICE_ATTENDANCE_RECODE = {1: POSITIVE_CLASS, 2: NEGATIVE_CLASS, 3: NEGATIVE_CLASS}


@dataclass
class CleaningResult:
    clean: pd.DataFrame
    quarantine: pd.DataFrame
    n_raw: int
    n_missing_dropped: int

    @property
    def n_quarantined(self) -> int:
        return len(self.quarantine)


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Normalize column names (strip, lower, replace spaces with underscores)"""
    out = df.copy()
    out.columns = [str(c).strip().lower().replace(' ', '_') for c in out.columns]
    return out.rename(columns=COLUMN_RENAME)


def load_raw_accidents(path, sample_size=None, random_state=42) -> pd.DataFrame:
    """Load a raw STATS19 CSV and normalize its column names"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Accident file not found: {path}')

    print(f'\nReading {path}...')
    df = pd.read_csv(path, low_memory=False)
    print(f'  Total accidents in file: {len(df):,}')

    if sample_size and sample_size < len(df):
        df = df.sample(n=sample_size, random_state=random_state)
        print(f'  After sampling: {len(df):,}')

    return normalize_columns(df)


def _as_codes(series: pd.Series) -> pd.Series:
    """Numeric codes; blanks become NaN, non-numeric text becomes NaN"""
    if series.dtype == object:
        series = series.astype(str).str.strip().replace({'': np.nan, 'nan': np.nan})
    return pd.to_numeric(series, errors='coerce')


def _missing_mask(raw: pd.Series, codes: pd.Series, column: str) -> pd.Series:
    blank = raw.isna() | (raw.astype(str).str.strip() == '')
    unknown = codes.isin([MISSING_CODE] + UNKNOWN_CODES.get(column, []))
    return blank | unknown


def parse_hour(time_values: pd.Series) -> pd.Series:
    """'HH:MM' -> hour (float, NaN when unparseable)"""
    parsed = pd.to_datetime(time_values.astype(str).str.strip(), format='%H:%M', errors='coerce')
    return parsed.dt.hour.astype(float)


def clean_accidents(raw: pd.DataFrame, verbose: bool = True) -> CleaningResult:
    """
    Recode a normalized raw frame into the accident feature space

    Args:
        raw: Raw frame with normalized column names (see normalize_columns)

    Returns:
        CleaningResult with the clean frame (features + target only) and the
        quarantined raw rows with a 'quarantine_reason' column

    Raises:
        ValueError: Required raw columns are absent
    """
    missing_cols = [c for c in REQUIRED_RAW_COLUMNS if c not in raw.columns]
    if missing_cols:
        raise ValueError(f'Raw accident data is missing columns: {missing_cols}')

    raw = raw.reset_index(drop=True)
    out = pd.DataFrame(index=raw.index)
    missing = pd.Series(False, index=raw.index)
    reasons = pd.Series('', index=raw.index, dtype=object)

    def flag(mask, reason):
        nonlocal reasons
        mask = mask & (reasons == '')
        reasons = reasons.mask(mask, reason)

    # Target
    target_codes = _as_codes(raw[ACCIDENT_TARGET])
    missing |= _missing_mask(raw[ACCIDENT_TARGET], target_codes, ACCIDENT_TARGET)
    out[ACCIDENT_TARGET] = target_codes.map(POLICE_ATTENDANCE_RECODE)
    flag(~missing & out[ACCIDENT_TARGET].isna(), f'{ACCIDENT_TARGET}: unknown code')

    # Hour from HH:MM
    blank_time = raw['time'].isna() | (raw['time'].astype(str).str.strip() == '')
    missing |= blank_time
    out['hour'] = parse_hour(raw['time'])
    flag(~blank_time & out['hour'].isna(), 'time: unparseable')

    for spec in ACCIDENT_FEATURES:
        if spec.name == 'hour':
            continue
        codes = _as_codes(raw[spec.name])
        col_missing = _missing_mask(raw[spec.name], codes, spec.name)
        missing |= col_missing

        if spec.is_categorical:
            out[spec.name] = codes.map(CATEGORY_RECODES[spec.name])
            flag(~col_missing & out[spec.name].isna(), f'{spec.name}: undeclared level')
        else:
            out[spec.name] = codes
            out_of_range = codes.isna()
            if spec.min_value is not None:
                out_of_range |= codes < spec.min_value
            if spec.max_value is not None:
                out_of_range |= codes > spec.max_value
            flag(~col_missing & out_of_range, f'{spec.name}: out of range')

    quarantined = (reasons != '') & ~missing
    keep = ~missing & ~quarantined

    quarantine = raw.loc[quarantined].copy()
    quarantine['quarantine_reason'] = reasons[quarantined]

    feature_order = [spec.name for spec in ACCIDENT_FEATURES]
    clean = out.loc[keep, feature_order + [ACCIDENT_TARGET]].reset_index(drop=True)
    for spec in ACCIDENT_FEATURES:
        if spec.is_categorical:
            clean[spec.name] = pd.Categorical(clean[spec.name], categories=list(spec.levels))
        else:
            clean[spec.name] = clean[spec.name].astype(int)
    clean[ACCIDENT_TARGET] = clean[ACCIDENT_TARGET].astype(str)

    result = CleaningResult(
        clean=clean,
        quarantine=quarantine.reset_index(drop=True),
        n_raw=len(raw),
        n_missing_dropped=int(missing.sum())
    )

    if verbose:
        print(f'\n{"="*70}')
        print('CLEANING AND RECODING')
        print(f'{"="*70}')
        print(f'  Raw records:           {result.n_raw:,}')
        print(f'  Dropped (missing):     {result.n_missing_dropped:,}')
        print(f'  Quarantined (invalid): {result.n_quarantined:,}')
        print(f'  ✓ Clean records:       {len(clean):,}')
        if result.n_quarantined:
            print(f'  ⚠️  Quarantine reasons:')
            for reason, count in quarantine['quarantine_reason'].value_counts().items():
                print(f'     - {reason}: {count:,}')

    return result


def build_accident_dataset(input_file, output_file=None, quarantine_file=None,
                           sample_size=None, random_state=42) -> CleaningResult:
    """Load, clean, validate and (optionally) save the accident dataset"""
    raw = load_raw_accidents(input_file, sample_size=sample_size, random_state=random_state)
    result = clean_accidents(raw)
    validate_accident_dataset(result.clean, 'accidents')

    if output_file is not None:
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        result.clean.to_csv(output_file, index=False)
        print(f'✓ Saved {len(result.clean):,} records to {output_file}')

    if quarantine_file is not None and result.n_quarantined:
        quarantine_file = Path(quarantine_file)
        quarantine_file.parent.mkdir(parents=True, exist_ok=True)
        result.quarantine.to_csv(quarantine_file, index=False)
        print(f'✓ Saved {result.n_quarantined:,} quarantined records to {quarantine_file}')

    return result


def read_clean_dataset(path) -> pd.DataFrame:
    """Read a saved clean dataset, restoring the fixed categorical levels"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Clean dataset not found: {path}')

    df = pd.read_csv(path, low_memory=False)
    for spec in ACCIDENT_FEATURES:
        if spec.is_categorical:
            df[spec.name] = pd.Categorical(df[spec.name], categories=list(spec.levels))
    df[ACCIDENT_TARGET] = df[ACCIDENT_TARGET].astype(str)
    return df


def split_indices(df: pd.DataFrame, test_fraction=0.25, random_state=42, verbose=True):
    """
    Stratified train/test split of row positions

    Args:
        df: Clean dataset (must contain the target column)
        test_fraction: Share of records held out for testing
        random_state: Split seed

    Returns:
        Tuple of (train_indices, test_indices), each sorted
    """
    if not 0 < test_fraction < 1:
        raise ValueError(f'test_fraction must be between 0 and 1, got {test_fraction}')

    positions = np.arange(len(df))
    train_idx, test_idx = train_test_split(
        positions,
        test_size=test_fraction,
        random_state=random_state,
        stratify=df[ACCIDENT_TARGET].to_numpy()
    )
    train_idx, test_idx = np.sort(train_idx), np.sort(test_idx)

    if verbose:
        print(f'\nTrain/test split (stratified on {ACCIDENT_TARGET}):')
        print(f'  Train: {len(train_idx):,} records')
        print(f'  Test:  {len(test_idx):,} records')

    return train_idx, test_idx


def main():
    parser = argparse.ArgumentParser(description='Build the accident-level ML dataset')
    parser.add_argument('--input', type=str, default=str(UK_BRONZE_ACCIDENTS),
                        help='Raw STATS19 accident CSV')
    parser.add_argument('--output', type=str, default=str(ACCIDENT_LEVEL_DATASET),
                        help='Clean dataset output CSV')
    parser.add_argument('--quarantine', type=str, default=str(UK_SILVER_QUARANTINE),
                        help='Quarantined rows output CSV')
    parser.add_argument('--sample', type=int, default=None,
                        help='Sample size for testing (default: use all data)')
    parser.add_argument('--seed', type=int, default=42, help='Sampling seed')

    args = parser.parse_args()
    ensure_directories()

    build_accident_dataset(
        args.input,
        output_file=args.output,
        quarantine_file=args.quarantine,
        sample_size=args.sample,
        random_state=args.seed
    )


if __name__ == '__main__':
    main()
