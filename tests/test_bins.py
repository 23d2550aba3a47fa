"""Tests for Edges and Bins."""

import numpy as np
import pytest

from ndhistogram import Bins, Edges


class TestEdges:

    def test_sorted_and_deduplicated(self):
        edges = Edges([10, 5, 20, 5])
        np.testing.assert_array_equal(edges.as_array(), [5, 10, 20])
        assert len(edges) == 3

    def test_read_only(self):
        edges = Edges([0.0, 1.0])
        assert not edges.as_array().flags.writeable
        with pytest.raises(ValueError):
            edges.as_array()[0] = 3.0

    def test_caller_array_not_aliased(self):
        source = np.array([0.0, 1.0, 2.0])
        edges = Edges(source)
        source[0] = -5.0
        assert edges[0] == 0.0

    def test_empty(self):
        assert Edges([]).is_empty()
        assert not Edges([1]).is_empty()

    def test_iter_and_getitem(self):
        edges = Edges([3, 1, 2])
        assert list(edges) == [1, 2, 3]
        assert edges[-1] == 3

    @pytest.mark.parametrize("value, expected", [
        (0, (0, 1)),
        (0.5, (0, 1)),
        (1, (1, 2)),
        (4.999, (2, 3)),
        (-0.1, None),
        (5, None),
        (7, None),
        (float("nan"), None),
    ])
    def test_indices_of(self, value, expected):
        edges = Edges([0, 1, 2, 5])
        assert edges.indices_of(value) == expected

    def test_indices_of_single_edge(self):
        assert Edges([1.0]).indices_of(1.0) is None

    def test_rejects_nan(self):
        with pytest.raises(ValueError, match="NaN"):
            Edges([0.0, np.nan])

    def test_rejects_2d(self):
        with pytest.raises(ValueError):
            Edges([[0, 1], [2, 3]])

    def test_rejects_non_numeric(self):
        with pytest.raises(TypeError):
            Edges(["a", "b"])
        with pytest.raises(TypeError):
            Edges([True, False])

    def test_equality(self):
        assert Edges([1, 2, 3]) == Edges([3, 2, 1, 1])
        assert Edges([1, 2, 3]) != Edges([1, 2])
        assert Edges(Edges([1, 2])) == Edges([1, 2])

    def test_repr(self):
        assert repr(Edges([2, 1])) == "Edges([1, 2])"


class TestBins:

    def test_len(self):
        assert len(Bins([0, 2, 4])) == 2
        assert len(Bins([1, 2])) == 1
        assert not Bins([1, 2]).is_empty()

    @pytest.mark.parametrize("edges", [[], [1], [3, 3, 3]])
    def test_needs_two_edges(self, edges):
        with pytest.raises(ValueError, match="at least 2"):
            Bins(edges)
        with pytest.raises(ValueError):
            Bins(Edges(edges))

    def test_index_of(self):
        bins = Bins([0, 2, 4])
        assert bins.index_of(0) == 0
        assert bins.index_of(2) == 1
        assert bins.index_of(3.9) == 1
        assert bins.index_of(4) is None
        assert bins.index_of(-1) is None

    def test_range_of(self):
        bins = Bins([0, 2, 4])
        assert bins.range_of(3) == (2, 4)
        assert bins.range_of(4) is None

    def test_range_of_types(self):
        lo, hi = Bins([0.5, 1.5]).range_of(1.0)
        assert isinstance(lo, float)
        assert isinstance(hi, float)

    def test_index(self):
        bins = Bins([0, 2, 4])
        assert bins.index(0) == (0, 2)
        assert bins.index(1) == (2, 4)

    def test_index_out_of_range(self):
        bins = Bins([0, 2, 4])
        with pytest.raises(IndexError):
            bins.index(2)
        with pytest.raises(IndexError):
            bins.index(-1)

    def test_edges(self):
        edges = Edges([0, 1])
        assert Bins(edges).edges is edges

    def test_equality(self):
        assert Bins([0, 1, 2]) == Bins(Edges([2, 1, 0]))
        assert Bins([0, 1, 2]) != Bins([0, 1, 3])
