#!/usr/bin/env python3
"""
MLflow Experiment Tracking Utilities

Logs each tuned model as an MLflow run: the selected configuration as params,
the cross-validated error and held-out metrics as metrics, and the full grid
score table as a CSV artifact.

Usage:
    from accident_modeling.utils.tracking import start_experiment, log_tuning_run

    start_experiment('police_attendance_selection')
    log_tuning_run(
        experiment_name='police_attendance_selection',
        run_name='lasso_logistic',
        result=tuning_result,
        metrics={'test_sensitivity': 0.21},
        tags={'dataset': 'stats19'}
    )
"""

import tempfile
from pathlib import Path
from typing import Dict, Optional

import mlflow


def start_experiment(experiment_name: str, tracking_uri: Optional[str] = None,
                     verbose: bool = True) -> str:
    """
    Initialize or get existing MLflow experiment

    Args:
        experiment_name: Name of the experiment
        tracking_uri: MLflow tracking server URI (default: local ./mlruns)

    Returns:
        Experiment ID
    """
    if tracking_uri:
        mlflow.set_tracking_uri(tracking_uri)
    else:
        mlruns_dir = Path('mlruns').absolute()
        mlruns_dir.mkdir(exist_ok=True)
        mlflow.set_tracking_uri(mlruns_dir.as_uri())

    experiment = mlflow.get_experiment_by_name(experiment_name)
    if experiment is None:
        experiment_id = mlflow.create_experiment(experiment_name)
        if verbose:
            print(f'✓ Created new MLflow experiment: {experiment_name} (ID: {experiment_id})')
    else:
        experiment_id = experiment.experiment_id
        if verbose:
            print(f'✓ Using existing MLflow experiment: {experiment_name} (ID: {experiment_id})')

    mlflow.set_experiment(experiment_name)

    return experiment_id


def log_tuning_run(
    experiment_name: str,
    run_name: str,
    result,
    metrics: Dict[str, float],
    tags: Optional[Dict[str, str]] = None,
    tracking_uri: Optional[str] = None,
    verbose: bool = True
) -> str:
    """
    Log one grid search and its held-out evaluation to MLflow

    Args:
        experiment_name: Name of the experiment
        run_name: Name for this run (usually the learner name)
        result: TuningResult from accident_modeling.selection.tune
        metrics: Held-out metrics
        tags: Additional tags

    Returns:
        Run ID
    """
    start_experiment(experiment_name, tracking_uri=tracking_uri, verbose=verbose)

    with mlflow.start_run(run_name=run_name) as run:
        mlflow.log_params({k: v for k, v in result.best_config.items()})
        mlflow.log_param('cv_folds', result.n_folds)
        mlflow.log_param('grid_size', result.grid_size)

        mlflow.log_metric('cv_mmce', result.best_score)
        mlflow.log_metric('excluded_configs', len(result.excluded))
        for metric_name, metric_value in metrics.items():
            mlflow.log_metric(metric_name, metric_value)

        mlflow.set_tag('learner', result.learner)
        for tag_name, tag_value in (tags or {}).items():
            mlflow.set_tag(tag_name, tag_value)

        with tempfile.TemporaryDirectory() as tmp:
            table_path = Path(tmp) / f'{run_name}_grid_scores.csv'
            result.score_table().to_csv(table_path, index=False)
            mlflow.log_artifact(str(table_path))

        run_id = run.info.run_id

    if verbose:
        print(f'\n✓ Logged run to MLflow:')
        print(f'  Experiment: {experiment_name}')
        print(f'  Run: {run_name}')
        print(f'  Run ID: {run_id}')

    return run_id
