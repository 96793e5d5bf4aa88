"""Hyperparameter grid enumeration and grid parsing"""

import json

import numpy as np
import pytest

from accident_modeling.selection import (
    HyperparameterGrid,
    InvalidConfiguration,
    load_grid_file,
    parse_grid_spec
)


@pytest.fixture
def space():
    return {'a': [1, 2], 'b': ['x', 'y', 'z'], 'c': [0.1, 0.2, 0.3, 0.4]}


def test_grid_size_is_product(space):
    grid = HyperparameterGrid(space)
    configs = list(grid)

    assert len(grid) == 2 * 3 * 4
    assert len(configs) == 24
    unique = {tuple(sorted(c.items())) for c in configs}
    assert len(unique) == 24


def test_grid_order_last_parameter_fastest(space):
    configs = list(HyperparameterGrid(space))

    assert configs[0] == {'a': 1, 'b': 'x', 'c': 0.1}
    assert configs[1] == {'a': 1, 'b': 'x', 'c': 0.2}
    assert configs[4] == {'a': 1, 'b': 'y', 'c': 0.1}
    assert configs[-1] == {'a': 2, 'b': 'z', 'c': 0.4}


def test_grid_is_restartable_and_indexable(space):
    grid = HyperparameterGrid(space)
    first_pass = list(grid)

    assert list(grid) == first_pass
    assert [grid[i] for i in range(len(grid))] == first_pass
    assert grid[-1] == first_pass[-1]
    with pytest.raises(IndexError):
        grid[len(grid)]


def test_numpy_candidates_accepted():
    grid = HyperparameterGrid({'lambda': np.array([0.1, 0.01])})
    assert len(grid) == 2


@pytest.mark.parametrize('bad_space', [
    {},
    {'lambda': []},
    {'lambda': 'abc'},
    {'lambda': 0.1},
])
def test_invalid_spaces(bad_space):
    with pytest.raises(InvalidConfiguration):
        HyperparameterGrid(bad_space)


def test_parse_single_parameter():
    assert parse_grid_spec('lambda=0.1,0.01') == {'lambda': [0.1, 0.01]}


def test_parse_multiple_entries_and_types():
    space = parse_grid_spec(['n_trees=100,300;shrinkage=0.1', 'flag=true,none'])
    assert space == {'n_trees': [100, 300], 'shrinkage': [0.1], 'flag': [True, None]}
    assert isinstance(space['n_trees'][0], int)


@pytest.mark.parametrize('spec', ['lambda', 'lambda=', '=1,2', 'a=1;a=2', ''])
def test_parse_rejects_malformed(spec):
    with pytest.raises(InvalidConfiguration):
        parse_grid_spec(spec)


def test_load_grid_file(tmp_path):
    path = tmp_path / 'grids.json'
    path.write_text(json.dumps({'lasso': {'lambda': [0.1, 0.01]}}))
    assert load_grid_file(path) == {'lasso': {'lambda': [0.1, 0.01]}}


def test_load_grid_file_validates(tmp_path):
    path = tmp_path / 'grids.json'
    path.write_text(json.dumps({'lasso': {'lambda': []}}))
    with pytest.raises(InvalidConfiguration):
        load_grid_file(path)


def test_load_grid_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_grid_file(tmp_path / 'nope.json')
