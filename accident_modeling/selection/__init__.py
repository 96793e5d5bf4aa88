"""
Model Selection Module

Fold generation, grid enumeration, cross-validated evaluation, grid-search
tuning and confusion-matrix metrics
"""

from .errors import (
    ModelSelectionError,
    InvalidConfiguration,
    ConfigurationInfeasible,
    NoFeasibleConfiguration,
    DivisionUndefined,
    TuningTimeout
)

from .folds import make_folds

from .grid import (
    HyperparameterGrid,
    parse_grid_spec,
    load_grid_file
)

from .metrics import (
    ConfusionCounts,
    confusion_matrix,
    misclassification_rate,
    majority_error_rate,
    format_metric
)

from .learner import Learner, TrainedModel

from .evaluator import evaluate_config, fold_scores

from .tuner import (
    TuningResult,
    tune,
    cross_validate_fixed,
    finalize,
    predict_all,
    best_of
)

__all__ = [
    'ModelSelectionError',
    'InvalidConfiguration',
    'ConfigurationInfeasible',
    'NoFeasibleConfiguration',
    'DivisionUndefined',
    'TuningTimeout',
    'make_folds',
    'HyperparameterGrid',
    'parse_grid_spec',
    'load_grid_file',
    'ConfusionCounts',
    'confusion_matrix',
    'misclassification_rate',
    'majority_error_rate',
    'format_metric',
    'Learner',
    'TrainedModel',
    'evaluate_config',
    'fold_scores',
    'TuningResult',
    'tune',
    'cross_validate_fixed',
    'finalize',
    'predict_all',
    'best_of',
]
