"""Data and output directory layout"""

from config import paths


def test_ensure_directories_creates_every_layer(monkeypatch, tmp_path):
    monkeypatch.setattr(paths, 'UK_BRONZE_ACCIDENTS', tmp_path / 'bronze' / 'uk' / 'accidents.csv')
    monkeypatch.setattr(paths, 'UK_SILVER_QUARANTINE', tmp_path / 'silver' / 'uk' / 'q.csv')
    monkeypatch.setattr(paths, 'ACCIDENT_LEVEL_ML', tmp_path / 'gold' / 'accident_level')
    monkeypatch.setattr(paths, 'MODEL_ARTIFACTS', tmp_path / 'models' / 'artifacts')
    monkeypatch.setattr(paths, 'REPORT_FIGURES', tmp_path / 'figures')

    paths.ensure_directories()
    paths.ensure_directories()

    for directory in ('bronze/uk', 'silver/uk', 'gold/accident_level', 'models/artifacts', 'figures'):
        assert (tmp_path / directory).is_dir()
