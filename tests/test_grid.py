"""Tests for Grid and GridBuilder."""

import numpy as np
import pytest

from ndhistogram import (
    Bins,
    EmptySampleError,
    Grid,
    GridBuilder,
    ShapeMismatch,
    Sqrt,
    StrategyError,
)


@pytest.fixture
def grid():
    return Grid([Bins([0, 1, 2]), Bins([0, 10, 20, 30])])


class TestGrid:

    def test_shape(self, grid):
        assert grid.ndim == 2
        assert grid.shape == (2, 3)

    def test_projections(self, grid):
        assert grid.projections[1] == Bins([0, 10, 20, 30])

    def test_wraps_edges(self):
        assert Grid([[0, 1, 2]]) == Grid([Bins([0, 1, 2])])

    def test_index_of(self, grid):
        assert grid.index_of([1.5, 10]) == (1, 1)
        assert grid.index_of(np.array([0, 29.9])) == (0, 2)

    def test_index_of_outside(self, grid):
        assert grid.index_of([2, 10]) is None
        assert grid.index_of([0.5, -1]) is None

    def test_index_of_wrong_dimension(self, grid):
        with pytest.raises(ShapeMismatch) as excinfo:
            grid.index_of([1.0, 2.0, 3.0])
        assert excinfo.value.first_shape == (3,)
        assert excinfo.value.second_shape == (2,)

    def test_index(self, grid):
        assert grid.index((1, 2)) == ((1, 2), (20, 30))

    def test_index_wrong_dimension(self, grid):
        with pytest.raises(ShapeMismatch):
            grid.index((0,))

    def test_index_out_of_range(self, grid):
        with pytest.raises(IndexError):
            grid.index((2, 0))

    def test_needs_an_axis(self):
        with pytest.raises(ValueError):
            Grid([])

    def test_equality(self, grid):
        assert grid == Grid([Bins([0, 1, 2]), Bins([0, 10, 20, 30])])
        assert grid != Grid([Bins([0, 1, 2])])


class TestGridBuilder:

    points = np.array([[1., 0.5], [-0.5, 1.], [-1., -0.5], [0.5, -1.]])

    def test_sqrt(self):
        builder = GridBuilder.from_array(self.points, "sqrt")
        bins = Bins([-1., 0., 1., 2.])
        assert builder.build() == Grid([bins, bins])

    def test_bin_builders(self):
        builder = GridBuilder.from_array(self.points, Sqrt)
        assert len(builder.bin_builders) == 2
        assert all(isinstance(b, Sqrt) for b in builder.bin_builders)

    def test_every_point_in_grid(self, rng):
        points = rng.normal(size=(200, 3))
        grid = GridBuilder.from_array(points).build()
        assert grid.ndim == 3
        for point in points:
            assert grid.index_of(point) is not None

    def test_constant_axis(self):
        points = np.array([[1.0, 5.0], [2.0, 5.0], [3.0, 5.0]])
        with pytest.raises(StrategyError):
            GridBuilder.from_array(points, "sturges")

    def test_empty(self):
        with pytest.raises(EmptySampleError):
            GridBuilder.from_array(np.empty((0, 2)), "rice")

    def test_not_a_matrix(self):
        with pytest.raises(ShapeMismatch) as excinfo:
            GridBuilder.from_array(np.array([1.0, 2.0, 3.0]))
        assert excinfo.value.first_shape == (3,)
        assert excinfo.value.second_shape == (3,)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown strategy"):
            GridBuilder.from_array(self.points, "scott")
