"""
Learner interface consumed by the model selector.

Anything with `fit(X, y, config) -> model` whose model has `predict(X)` can be
tuned; no base class is required.
"""

from typing import Any, Dict, Protocol, Sequence, runtime_checkable


@runtime_checkable
class TrainedModel(Protocol):
    def predict(self, X) -> Sequence: ...


@runtime_checkable
class Learner(Protocol):
    name: str

    def fit(self, X, y, config: Dict[str, Any]) -> TrainedModel: ...


def take_rows(data, indices):
    """Positional row selection for DataFrames, Series and arrays"""
    if hasattr(data, 'iloc'):
        return data.iloc[indices]
    return data[indices]


def learner_name(learner) -> str:
    return getattr(learner, 'name', type(learner).__name__)
