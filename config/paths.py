"""
Project Path Configuration

Centralized path definitions for data, models, and outputs
Using Medallion Architecture: Bronze (raw) → Silver (cleaned) → Gold (ML-ready)
"""

from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# ==============================================================================
# MEDALLION ARCHITECTURE (Bronze / Silver / Gold)
# ==============================================================================

DATA_ROOT = PROJECT_ROOT / "data"

# Bronze Layer: Raw STATS19 extracts (as downloaded)
BRONZE = DATA_ROOT / "bronze"
UK_BRONZE_ACCIDENTS = BRONZE / "uk" / "accidents.csv"

# Silver Layer: Rows rejected during cleaning, kept for inspection
SILVER = DATA_ROOT / "silver"
UK_SILVER_QUARANTINE = SILVER / "uk" / "accidents_quarantine.csv"

# Gold Layer: Cleaned, recoded, schema-validated
GOLD = DATA_ROOT / "gold"
ACCIDENT_LEVEL_ML = GOLD / "ml_datasets" / "accident_level"
ACCIDENT_LEVEL_DATASET = ACCIDENT_LEVEL_ML / "accidents_latest.csv"

# ==============================================================================
# OUTPUTS
# ==============================================================================

MODEL_ARTIFACTS = PROJECT_ROOT / "models" / "artifacts"
REPORT_FIGURES = PROJECT_ROOT / "analysis" / "reports" / "figures"


def ensure_directories():
    """Create every data/output directory used by the pipeline"""
    for directory in [
        UK_BRONZE_ACCIDENTS.parent,
        UK_SILVER_QUARANTINE.parent,
        ACCIDENT_LEVEL_ML,
        MODEL_ARTIFACTS,
        REPORT_FIGURES,
    ]:
        directory.mkdir(parents=True, exist_ok=True)
