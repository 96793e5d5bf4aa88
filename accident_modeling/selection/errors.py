#!/usr/bin/env python3
"""
Model Selection Errors

Exception types raised by fold generation, grid enumeration, cross-validated
evaluation, tuning and confusion-matrix metrics.

Each error also derives from the closest builtin so callers that only know
about ValueError / RuntimeError / ZeroDivisionError / TimeoutError keep working.
"""

from typing import Any, Dict, List, Optional


class ModelSelectionError(Exception):
    """Base class for all model selection errors"""


class InvalidConfiguration(ModelSelectionError, ValueError):
    """Malformed fold count, empty hyperparameter space, mismatched inputs"""


class ConfigurationInfeasible(ModelSelectionError, RuntimeError):
    """A hyperparameter configuration could not be fit on some fold"""

    def __init__(self, message: str, config: Optional[Dict[str, Any]] = None,
                 fold: Optional[int] = None):
        super().__init__(message)
        self.config = config
        self.fold = fold


class NoFeasibleConfiguration(ModelSelectionError, RuntimeError):
    """Every configuration in the grid failed"""

    def __init__(self, message: str, excluded: Optional[List] = None):
        super().__init__(message)
        self.excluded = excluded or []


class DivisionUndefined(ModelSelectionError, ZeroDivisionError):
    """A derived metric has a zero denominator"""

    def __init__(self, metric: str, message: Optional[str] = None):
        super().__init__(message or f'{metric} is undefined (zero denominator)')
        self.metric = metric


class TuningTimeout(ModelSelectionError, TimeoutError):
    """
    Grid search exceeded its deadline

    Carries the best configuration found before the deadline (None when no
    configuration finished) and the partial TuningResult.
    """

    def __init__(self, message: str, partial=None):
        super().__init__(message)
        self.partial = partial

    @property
    def best_config(self) -> Optional[Dict[str, Any]]:
        return self.partial.best_config if self.partial is not None else None

    @property
    def best_score(self) -> Optional[float]:
        return self.partial.best_score if self.partial is not None else None
