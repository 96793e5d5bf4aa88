#!/usr/bin/env python3
"""
Hyperparameter Grid

Exhaustive, restartable enumeration of a discrete hyperparameter space.
Configurations come out in declared parameter order and declared value order
(the last parameter varies fastest), which is the order the tuner uses to
break ties.

Usage:
    from accident_modeling.selection.grid import HyperparameterGrid, parse_grid_spec

    grid = HyperparameterGrid({'lambda': [128, 64, 32]})
    for config in grid:
        print(config)              # {'lambda': 128}, {'lambda': 64}, ...

    space = parse_grid_spec(['n_trees=100,300', 'shrinkage=0.1,0.05'])
"""

import itertools
import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Union

from .errors import InvalidConfiguration


class HyperparameterGrid:
    """Cartesian product over a mapping of name -> ordered candidate values"""

    def __init__(self, space: Mapping[str, Sequence[Any]]):
        if isinstance(space, HyperparameterGrid):
            space = space.space
        if not space:
            raise InvalidConfiguration('Hyperparameter space is empty')

        self.space: Dict[str, List[Any]] = {}
        for name, values in space.items():
            if isinstance(values, (str, bytes, Mapping)) or not hasattr(values, '__iter__'):
                raise InvalidConfiguration(
                    f'Candidates for {name!r} must be a list of values, got {values!r}'
                )
            values = list(values)
            if len(values) == 0:
                raise InvalidConfiguration(f'No candidate values for {name!r}')
            self.space[name] = values

    @property
    def names(self) -> List[str]:
        return list(self.space)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        names = self.names
        for values in itertools.product(*(self.space[n] for n in names)):
            yield dict(zip(names, values))

    def __len__(self) -> int:
        total = 1
        for values in self.space.values():
            total *= len(values)
        return total

    def __getitem__(self, position: int) -> Dict[str, Any]:
        if position < 0:
            position += len(self)
        if not 0 <= position < len(self):
            raise IndexError(f'Grid position {position} out of range')
        config = {}
        # Mixed-radix decode, last parameter fastest
        for name in reversed(self.names):
            values = self.space[name]
            position, offset = divmod(position, len(values))
            config[name] = values[offset]
        return {name: config[name] for name in self.names}

    def __repr__(self) -> str:
        return f'HyperparameterGrid({self.space!r})'


def _parse_value(text: str) -> Any:
    text = text.strip()
    lowered = text.lower()
    if lowered in ('none', 'null'):
        return None
    if lowered in ('true', 'false'):
        return lowered == 'true'
    for cast in (int, float):
        try:
            return cast(text)
        except ValueError:
            continue
    return text


def parse_grid_spec(specs: Union[str, Sequence[str]]) -> Dict[str, List[Any]]:
    """
    Parse command-line grid definitions

    Accepts 'name=v1,v2,...' entries, either as a list or a single string;
    any string may hold several entries separated by ';'. Numeric values
    become int/float.

    Raises:
        InvalidConfiguration: Malformed entry or repeated parameter
    """
    if isinstance(specs, str):
        specs = [specs]
    specs = [part for spec in specs for part in spec.split(';') if part.strip()]

    space: Dict[str, List[Any]] = {}
    for entry in specs:
        if '=' not in entry:
            raise InvalidConfiguration(f'Expected name=v1,v2,... but got {entry!r}')
        name, raw_values = entry.split('=', 1)
        name = name.strip()
        if not name:
            raise InvalidConfiguration(f'Missing parameter name in {entry!r}')
        if name in space:
            raise InvalidConfiguration(f'Parameter {name!r} given more than once')
        values = [_parse_value(v) for v in raw_values.split(',') if v.strip()]
        if not values:
            raise InvalidConfiguration(f'No candidate values for {name!r}')
        space[name] = values

    if not space:
        raise InvalidConfiguration('Hyperparameter space is empty')
    return space


def load_grid_file(path: Union[str, Path]) -> Dict[str, Dict[str, List[Any]]]:
    """
    Load search spaces from JSON

    Expected layout: {"lasso": {"lambda": [...]}, "gbm": {"n_trees": [...], ...}}
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Grid file not found: {path}')

    with open(path, 'r') as f:
        spaces = json.load(f)

    if not isinstance(spaces, dict):
        raise InvalidConfiguration(f'{path} must contain a JSON object of search spaces')

    # Validate eagerly so a bad file fails before any fitting starts
    for model_name, space in spaces.items():
        if not isinstance(space, dict):
            raise InvalidConfiguration(f'Search space for {model_name!r} must be an object')
        HyperparameterGrid(space)

    return spaces
