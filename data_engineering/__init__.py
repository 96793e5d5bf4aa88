"""
Data Engineering Module for UK Police Attendance Modeling

Pipeline stages:
1. datasets/ - Raw STATS19 extract -> clean, recoded, accident-level dataset
2. utils/ - Schema validation and data quality checks

Usage:
    from data_engineering.datasets.build_accident_dataset import build_accident_dataset
    from data_engineering.utils.validation import validate_accident_dataset
"""

__version__ = "1.0.0"
