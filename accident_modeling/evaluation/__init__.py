"""
Model Evaluation Module

Held-out confusion matrices, derived rates and feature ranking
"""

from .metrics import (
    evaluate_classifier,
    print_confusion,
    metrics_record
)

from .importance import (
    rank_features,
    print_ranking
)

__all__ = [
    'evaluate_classifier',
    'print_confusion',
    'metrics_record',
    'rank_features',
    'print_ranking',
]
