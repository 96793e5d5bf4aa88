"""MLflow logging of a grid search"""

import mlflow
import numpy as np
import pandas as pd

from accident_modeling.models import MajorityClassLearner
from accident_modeling.selection import tune
from accident_modeling.utils import log_tuning_run


def test_log_tuning_run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    tracking_uri = f'sqlite:///{tmp_path / "mlflow.db"}'

    X = pd.DataFrame({'x': np.arange(20)})
    y = pd.Series(['N'] * 16 + ['Y'] * 4)
    result = tune(MajorityClassLearner(), X, y, {'lambda': [1.0, 0.1]}, k=2, verbose=False)

    run_id = log_tuning_run(
        experiment_name='unit_test',
        run_name='majority_baseline',
        result=result,
        metrics={'test_specificity': 1.0},
        tags={'dataset': 'synthetic'},
        tracking_uri=tracking_uri,
        verbose=False
    )

    run = mlflow.get_run(run_id)
    assert run.data.params['lambda'] == '1.0'
    assert run.data.params['grid_size'] == '2'
    assert run.data.metrics['cv_mmce'] == result.best_score
    assert run.data.metrics['test_specificity'] == 1.0
    assert run.data.tags['learner'] == 'majority_baseline'
    assert run.data.tags['dataset'] == 'synthetic'
