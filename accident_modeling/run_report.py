#!/usr/bin/env python3
"""
Police Attendance Model Selection Report

Runs the complete report on the clean STATS19 accident dataset:
- Stratified train/test split
- Information-gain feature ranking
- Majority-class baseline (cross-validated and on the test set)
- LASSO logistic regression tuned by k-fold CV over a lambda grid
- Gradient boosting tuned by k-fold CV over a tree grid
- Test-set confusion matrices, derived rates, and conclusions
- Optional model artifacts, MLflow runs and figures

Usage:
    python -m accident_modeling.run_report
    python -m accident_modeling.run_report --raw data/bronze/uk/accidents.csv --sample 20000
    python -m accident_modeling.run_report --lasso-grid "lambda=0.01,0.001" --gbm-grid "n_trees=100;shrinkage=0.1"
    python -m accident_modeling.run_report --grid-file grids.json --n-jobs 4 --timeout 600 --mlflow
"""

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from config.modeling import (
    CV_FOLDS,
    EXPERIMENT_NAME,
    GBM_SEARCH_SPACE,
    LASSO_SEARCH_SPACE,
    N_JOBS,
    RANDOM_STATE,
    STRATIFY_FOLDS,
    TEST_FRACTION,
    TUNING_TIMEOUT_SECONDS
)
from config.paths import (
    ACCIDENT_LEVEL_DATASET,
    MODEL_ARTIFACTS,
    REPORT_FIGURES,
    ensure_directories
)
from data_engineering.datasets.build_accident_dataset import (
    build_accident_dataset,
    read_clean_dataset,
    split_indices
)

from accident_modeling.preprocessing import (
    ACCIDENT_CATEGORICAL_FEATURES,
    ACCIDENT_NUMERIC_FEATURES,
    ACCIDENT_TARGET,
    POSITIVE_CLASS,
    check_for_leakage,
    validate_features
)
from accident_modeling.selection import (
    ConfusionCounts,
    DivisionUndefined,
    NoFeasibleConfiguration,
    TuningResult,
    TuningTimeout,
    cross_validate_fixed,
    finalize,
    load_grid_file,
    majority_error_rate,
    parse_grid_spec,
    tune
)
from accident_modeling.models import LEARNERS, nonzero_coefficients
from accident_modeling.evaluation import (
    evaluate_classifier,
    metrics_record,
    print_ranking,
    rank_features
)
from accident_modeling.utils import log_tuning_run, save_model_artifact
from analysis.reports.tuning_figures import (
    plot_confusion,
    plot_feature_ranking,
    plot_tuning_curve
)


MODEL_LABELS = {
    'lasso': 'LASSO logistic regression',
    'gbm': 'Gradient boosting',
}


@dataclass
class ModelOutcome:
    """What happened to one tuned model"""
    key: str
    label: str
    tuning: Optional[TuningResult] = None
    model: Any = None
    test_counts: Optional[ConfusionCounts] = None
    error: Optional[str] = None
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return self.model is not None


@dataclass
class AccidentReport:
    n_records: int
    n_train: int
    n_test: int
    majority_error: float
    baseline_cv_error: float
    baseline_test_counts: ConfusionCounts
    ranking: pd.Series
    majority_class: str = POSITIVE_CLASS
    outcomes: Dict[str, ModelOutcome] = field(default_factory=dict)
    conclusions: List[str] = field(default_factory=list)

    def best_outcome(self) -> Optional[ModelOutcome]:
        """Succeeded model with the lowest CV error (first in run order wins ties)"""
        best = None
        for outcome in self.outcomes.values():
            if not outcome.succeeded:
                continue
            if best is None or outcome.tuning.best_score < best.tuning.best_score:
                best = outcome
        return best


# ============================================================================
# INPUTS
# ============================================================================

def resolve_grids(lasso_grid=None, gbm_grid=None, grid_file=None) -> Dict[str, Dict[str, list]]:
    """
    Search spaces for each tuned model

    Precedence: command-line grid > grid file > config/modeling.py default
    """
    grids = {'lasso': dict(LASSO_SEARCH_SPACE), 'gbm': dict(GBM_SEARCH_SPACE)}

    if grid_file:
        from_file = load_grid_file(grid_file)
        unknown = set(from_file) - set(grids)
        if unknown:
            raise ValueError(f'Unknown models in {grid_file}: {sorted(unknown)} '
                             f'(expected {sorted(grids)})')
        grids.update(from_file)

    if lasso_grid:
        grids['lasso'] = parse_grid_spec(lasso_grid)
    if gbm_grid:
        grids['gbm'] = parse_grid_spec(gbm_grid)

    return grids


def load_report_data(dataset=None, raw=None, sample_size=None,
                     random_state: int = RANDOM_STATE) -> pd.DataFrame:
    """Clean dataset from disk, or cleaned on the fly from a raw STATS19 CSV"""
    print(f'\n{"#"*70}')
    print(f'# LOADING DATA')
    print(f'{"#"*70}')

    if raw is not None:
        df = build_accident_dataset(raw, sample_size=sample_size, random_state=random_state).clean
    else:
        df = read_clean_dataset(dataset or ACCIDENT_LEVEL_DATASET)
        if sample_size and sample_size < len(df):
            df = df.sample(n=sample_size, random_state=random_state).reset_index(drop=True)
        print(f'✓ Loaded {len(df):,} clean records')

    return df


# ============================================================================
# MODELS
# ============================================================================

def tune_and_test(key: str, learner, X, y, space: Mapping[str, Sequence[Any]],
                  train_idx, test_idx, folds: int, seed: int, n_jobs: int,
                  timeout: Optional[float]) -> ModelOutcome:
    """
    Tune one learner, refit the winner on all training records and score it
    on the test set. Search failures are recorded on the outcome.
    """
    label = MODEL_LABELS.get(key, key)
    outcome = ModelOutcome(key=key, label=label)

    print(f'\n{"#"*70}')
    print(f'# {label.upper()}')
    print(f'{"#"*70}')

    try:
        outcome.tuning = tune(
            learner, X, y, space,
            train_indices=train_idx,
            k=folds,
            stratify=STRATIFY_FOLDS,
            random_state=seed,
            n_jobs=n_jobs,
            timeout=timeout
        )
    except NoFeasibleConfiguration as exc:
        outcome.error = str(exc)
        print(f'  ⚠️  {exc}')
        for excluded in exc.excluded:
            print(f'     - {excluded.config}: {excluded.reason}')
        return outcome
    except TuningTimeout as exc:
        outcome.timed_out = True
        partial = exc.partial
        if partial is None or partial.best_config is None:
            outcome.error = f'{exc} (no configuration finished)'
            print(f'  ⚠️  {outcome.error}')
            return outcome
        outcome.tuning = partial
        print(f'  ⚠️  {exc}')
        print(f'  Using best configuration so far: {partial.best_config} '
              f'(mmce={partial.best_score:.4f})')

    outcome.model = finalize(learner, outcome.tuning.best_config, X, y, train_idx)
    outcome.test_counts = evaluate_classifier(
        outcome.model, X, y, test_idx,
        positive_class=POSITIVE_CLASS,
        name=f'{label} (test set)'
    )

    if key == 'lasso':
        kept = nonzero_coefficients(outcome.model)
        print(f'\n  LASSO kept {len(kept)} non-zero coefficient(s)')
        for name, coef in sorted(kept.items(), key=lambda item: -abs(item[1]))[:10]:
            print(f'    {name:40s} {coef:+.4f}')

    return outcome


# ============================================================================
# CONCLUSIONS
# ============================================================================

def _rate(counts: ConfusionCounts, metric_name: str) -> Optional[float]:
    try:
        return getattr(counts, metric_name)()
    except DivisionUndefined:
        return None


def summarize_conclusions(report: AccidentReport, top_n: int = 3) -> List[str]:
    """Plain-language conclusions drawn from the report's numbers"""
    lines = []
    lines.append(
        f'Always predicting the majority class misclassifies '
        f'{report.majority_error:.1%} of records '
        f'(cross-validated baseline error {report.baseline_cv_error:.4f}).'
    )

    for outcome in report.outcomes.values():
        if not outcome.succeeded:
            lines.append(f'{outcome.label} could not be selected: {outcome.error}')
            continue

        score = outcome.tuning.best_score
        gain = report.baseline_cv_error - score
        partial = ' on a partial grid' if outcome.timed_out else ''
        if gain > 0:
            verdict = f'beats the baseline by {gain:.4f}'
        else:
            verdict = 'does not beat the majority-class baseline'
        lines.append(
            f'{outcome.label}{partial} selected {outcome.tuning.best_config} '
            f'with CV error {score:.4f} and {verdict}.'
        )

        # Low error can come from the majority class alone; check the minority rate
        if report.majority_class == POSITIVE_CLASS:
            rate_name, group = 'specificity', 'accidents without police attendance'
        else:
            rate_name, group = 'sensitivity', 'police-attended accidents'
        rate = _rate(outcome.test_counts, rate_name)
        if rate is None:
            lines.append(f'  Its test {rate_name} is undefined (no {group} in the test set).')
        elif rate < 0.5:
            lines.append(
                f'  It identifies only {rate:.1%} of {group} on the test set; '
                f'low error is driven by the majority class.'
            )
        else:
            lines.append(f'  It identifies {rate:.1%} of {group} on the test set.')

    best = report.best_outcome()
    if best is not None:
        lines.append(f'Lowest cross-validated error: {best.label} ({best.tuning.best_score:.4f}).')

    top = list(report.ranking.head(top_n).index)
    if top:
        lines.append(f'Most informative features: {", ".join(top)}.')

    return lines


# ============================================================================
# PIPELINE
# ============================================================================

def run_report(
    df: pd.DataFrame,
    grids: Optional[Dict[str, Dict[str, list]]] = None,
    folds: int = CV_FOLDS,
    seed: int = RANDOM_STATE,
    test_fraction: float = TEST_FRACTION,
    n_jobs: int = N_JOBS,
    timeout: Optional[float] = TUNING_TIMEOUT_SECONDS,
    save_artifacts: bool = False,
    artifacts_dir=MODEL_ARTIFACTS,
    use_mlflow: bool = False,
    figures_dir=None
) -> AccidentReport:
    """
    Run the full model selection report on a clean accident dataset

    Args:
        df: Clean dataset (features + did_police_officer_attend_scene_of_accident)
        grids: {'lasso': space, 'gbm': space}; missing keys use the defaults
        folds: Number of CV folds
        seed: Seed for the split, the folds and the learners
        test_fraction: Share of records held out
        n_jobs: Configurations evaluated in parallel
        timeout: Seconds allowed per grid search
        save_artifacts: Save each final model with joblib
        use_mlflow: Log each grid search as an MLflow run
        figures_dir: Write tuning and confusion figures here when given

    Returns:
        AccidentReport
    """
    grids = {**resolve_grids(), **(grids or {})}
    feature_cols = ACCIDENT_NUMERIC_FEATURES + ACCIDENT_CATEGORICAL_FEATURES

    check_for_leakage(df)
    _, missing = validate_features(df, feature_cols)
    if missing:
        raise ValueError(f'Dataset is missing features: {missing}')

    X = df[feature_cols].reset_index(drop=True)
    y = df[ACCIDENT_TARGET].reset_index(drop=True)

    train_idx, test_idx = split_indices(df, test_fraction=test_fraction, random_state=seed)

    # Feature ranking on training records only
    ranking = rank_features(
        X.iloc[train_idx], y.iloc[train_idx],
        categorical_features=ACCIDENT_CATEGORICAL_FEATURES,
        random_state=seed
    )
    print_ranking(ranking)

    print(f'\n{"#"*70}')
    print(f'# MAJORITY-CLASS BASELINE')
    print(f'{"#"*70}')
    baseline = LEARNERS['baseline']()
    majority_error = majority_error_rate(y.iloc[train_idx])
    baseline_cv_error = cross_validate_fixed(
        baseline, X, y,
        train_indices=train_idx,
        k=folds,
        stratify=STRATIFY_FOLDS,
        random_state=seed
    )
    print(f'  Majority-class error (training records): {majority_error:.4f}')
    print(f'  Cross-validated baseline mmce:           {baseline_cv_error:.4f}')
    baseline_model = finalize(baseline, {}, X, y, train_idx)
    baseline_counts = evaluate_classifier(
        baseline_model, X, y, test_idx,
        positive_class=POSITIVE_CLASS,
        name='Majority baseline (test set)'
    )

    report = AccidentReport(
        n_records=len(df),
        n_train=len(train_idx),
        n_test=len(test_idx),
        majority_error=majority_error,
        baseline_cv_error=baseline_cv_error,
        baseline_test_counts=baseline_counts,
        ranking=ranking,
        majority_class=str(baseline_model.label)
    )

    for key in MODEL_LABELS:
        learner = LEARNERS[key](random_state=seed)
        report.outcomes[key] = tune_and_test(
            key, learner, X, y, grids[key], train_idx, test_idx,
            folds=folds, seed=seed, n_jobs=n_jobs, timeout=timeout
        )

    report.conclusions = summarize_conclusions(report)

    print(f'\n{"#"*70}')
    print(f'# CONCLUSIONS')
    print(f'{"#"*70}\n')
    for line in report.conclusions:
        print(f'  {line}')

    for outcome in report.outcomes.values():
        if not outcome.succeeded:
            continue
        metrics = metrics_record(outcome.test_counts)
        if save_artifacts:
            save_model_artifact(
                model=outcome.model,
                feature_cols=feature_cols,
                config=outcome.tuning.best_config,
                cv_score=outcome.tuning.best_score,
                metrics=metrics,
                model_name=outcome.tuning.learner,
                output_dir=artifacts_dir
            )
        if use_mlflow:
            log_tuning_run(
                experiment_name=EXPERIMENT_NAME,
                run_name=outcome.tuning.learner,
                result=outcome.tuning,
                metrics=metrics,
                tags={'partial_grid': str(outcome.timed_out), 'cv_folds': str(folds)}
            )

    if figures_dir is not None:
        write_figures(report, figures_dir)

    return report


def write_figures(report: AccidentReport, figures_dir) -> List[Path]:
    """Tuning curves, confusion heatmaps and feature ranking as PNGs"""
    figures_dir = Path(figures_dir)
    written = [plot_feature_ranking(report.ranking, figures_dir / 'feature_ranking.png')]

    for key, outcome in report.outcomes.items():
        if not outcome.succeeded:
            continue
        params = list(outcome.tuning.best_config)
        written.append(plot_tuning_curve(
            outcome.tuning,
            params[0],
            figures_dir / f'{key}_tuning.png',
            hue_param=params[1] if len(params) > 1 else None,
            baseline_error=report.baseline_cv_error
        ))
        written.append(plot_confusion(
            outcome.test_counts, outcome.label, figures_dir / f'{key}_confusion.png'
        ))

    print(f'\n✓ Saved {len(written)} figure(s) to {figures_dir}/')
    return written


def main():
    parser = argparse.ArgumentParser(description='Police attendance model selection report')
    parser.add_argument('--dataset', type=str, default=str(ACCIDENT_LEVEL_DATASET),
                        help='Clean accident dataset CSV')
    parser.add_argument('--raw', type=str, default=None,
                        help='Raw STATS19 CSV to clean on the fly (overrides --dataset)')
    parser.add_argument('--sample', type=int, default=None,
                        help='Sample size for testing (default: use all data)')
    parser.add_argument('--lasso-grid', action='append', default=None,
                        help='LASSO grid, e.g. "lambda=0.1,0.01,0.001"')
    parser.add_argument('--gbm-grid', action='append', default=None,
                        help='Boosting grid, e.g. "n_trees=100,300;shrinkage=0.1"')
    parser.add_argument('--grid-file', type=str, default=None,
                        help='JSON file: {"lasso": {...}, "gbm": {...}}')
    parser.add_argument('--folds', type=int, default=CV_FOLDS, help='Number of CV folds')
    parser.add_argument('--seed', type=int, default=RANDOM_STATE, help='Random seed')
    parser.add_argument('--test-fraction', type=float, default=TEST_FRACTION,
                        help='Share of records held out for testing')
    parser.add_argument('--n-jobs', type=int, default=N_JOBS,
                        help='Configurations evaluated in parallel')
    parser.add_argument('--timeout', type=float, default=TUNING_TIMEOUT_SECONDS,
                        help='Seconds allowed per grid search')
    parser.add_argument('--save-artifacts', action='store_true',
                        help='Save final models to models/artifacts/')
    parser.add_argument('--mlflow', action='store_true',
                        help='Log grid searches to MLflow')
    parser.add_argument('--figures', action='store_true',
                        help=f'Write figures to {REPORT_FIGURES}')

    args = parser.parse_args()
    ensure_directories()

    grids = resolve_grids(args.lasso_grid, args.gbm_grid, args.grid_file)
    df = load_report_data(args.dataset, raw=args.raw, sample_size=args.sample,
                          random_state=args.seed)

    run_report(
        df,
        grids=grids,
        folds=args.folds,
        seed=args.seed,
        test_fraction=args.test_fraction,
        n_jobs=args.n_jobs,
        timeout=args.timeout,
        save_artifacts=args.save_artifacts,
        use_mlflow=args.mlflow,
        figures_dir=REPORT_FIGURES if args.figures else None
    )

    print(f'\n{"#"*70}')
    print('# REPORT COMPLETE!')
    print(f'{"#"*70}\n')
    if args.mlflow:
        print('View results in MLflow:')
        print('  mlflow ui')
        print('')


if __name__ == '__main__':
    main()
