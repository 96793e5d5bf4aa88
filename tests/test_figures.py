"""Report figures render to PNG"""

import pandas as pd

from accident_modeling.selection import ConfusionCounts
from accident_modeling.selection.tuner import ConfigScore, ExcludedConfig, TuningResult
from analysis.reports.tuning_figures import (
    plot_confusion,
    plot_feature_ranking,
    plot_tuning_curve
)


def make_result():
    scores = [
        ConfigScore(0, {'n_trees': 100, 'shrinkage': 0.1}, 0.21),
        ConfigScore(1, {'n_trees': 100, 'shrinkage': 0.05}, 0.22),
        ConfigScore(2, {'n_trees': 300, 'shrinkage': 0.1}, 0.20),
    ]
    excluded = [ExcludedConfig(3, {'n_trees': 300, 'shrinkage': 0.05}, 'failed')]
    return TuningResult('gradient_boosting', scores[2].config, 0.20, scores, excluded,
                        n_folds=5, grid_size=4)


def test_tuning_curve(tmp_path):
    path = plot_tuning_curve(make_result(), 'n_trees', tmp_path / 'figs' / 'gbm.png',
                             hue_param='shrinkage', baseline_error=0.27)
    assert path.exists() and path.stat().st_size > 0


def test_confusion_heatmap(tmp_path):
    counts = ConfusionCounts(true_positive=5, false_positive=3, true_negative=80, false_negative=12)
    path = plot_confusion(counts, 'LASSO', tmp_path / 'confusion.png')
    assert path.exists()


def test_feature_ranking_chart(tmp_path):
    ranking = pd.Series({'speed_limit': 0.04, 'area': 0.02, 'hour': 0.001})
    path = plot_feature_ranking(ranking, tmp_path / 'ranking.png')
    assert path.exists()
