"""Histogram data structure and bulk histogram construction."""

import itertools

import numpy as _numpy
import pandas as _pandas

from ._shared import _as_points
from .errors import BinNotFound
from .grid import Grid, GridBuilder


class Histogram:
    """
    Counts of observations per cell of a :class:`Grid`.

    Counts start at zero and only change through :meth:`add_observation` and
    :meth:`add_observations`.

    Parameters
    ----------
    grid : Grid
        The cells to count into. The histogram owns it from now on.

    Examples
    --------
    >>> from ndhistogram import Bins, Grid, Histogram
    >>> bins = Bins([-1., 0., 1.])
    >>> histogram = Histogram(Grid([bins, bins]))
    >>> histogram.add_observation([0.5, 0.6])
    >>> histogram.counts
    array([[0, 0],
           [0, 1]])
    """

    def __init__(self, grid):
        if not isinstance(grid, Grid):
            raise TypeError("grid must be a Grid")
        self._grid = grid
        self._counts = _numpy.zeros(grid.shape, dtype=_numpy.int64)

    def add_observation(self, point):
        """
        Add a single observation to the histogram.

        Raises
        ------
        BinNotFound
            If ``point`` falls outside the grid; counts are left unchanged.
        ShapeMismatch
            If ``len(point) != ndim``.
        """
        index = self._grid.index_of(point)
        if index is None:
            raise BinNotFound()
        self._counts[index] += 1

    def add_observations(self, points):
        """
        Add every row of an ``(n, d)`` matrix, skipping points outside the grid.

        Returns
        -------
        int
            Number of observations counted.
        """
        points = _as_points(points, self.ndim)
        added = 0
        for point in points:
            try:
                self.add_observation(point)
            except BinNotFound:
                continue
            added += 1
        return added

    @property
    def ndim(self):
        """Number of dimensions of the space the histogram covers."""
        return self._counts.ndim

    @property
    def counts(self):
        """Read-only view of the counts, shaped like the grid."""
        view = self._counts.view()
        view.flags.writeable = False
        return view

    @property
    def grid(self):
        return self._grid

    def to_dataframe(self, names=None):
        """
        Return the counts as a DataFrame, one row per cell.

        Parameters
        ----------
        names : list of str, optional
            Column names of the axes. Defaults to ``axis_0``, ``axis_1``, ...

        Returns
        -------
        DataFrame
            One ``"[lo, hi)"`` label column per axis and an ``n`` column with
            the counts, cells in row-major order.
        """
        if names is None:
            names = [f"axis_{i}" for i in range(self.ndim)]
        names = list(names)
        if len(names) != self.ndim:
            raise ValueError(f"Expected {self.ndim} names, got {len(names)}")

        bin_labels_list = []
        for bins in self._grid.projections:
            labels = []
            for i in range(len(bins)):
                lo, hi = bins.index(i)
                labels.append(f"[{lo}, {hi})")
            bin_labels_list.append(labels)

        rows = []
        for indices in itertools.product(*[range(len(labels)) for labels in bin_labels_list]):
            row = [bin_labels_list[dim][idx] for dim, idx in enumerate(indices)]
            row.append(int(self._counts[indices]))
            rows.append(row)

        return _pandas.DataFrame(rows, columns=names + ['n'])

    def __repr__(self):
        return f"Histogram(shape={self._counts.shape}, total={int(self._counts.sum())})"


def histogram(points, grid):
    """
    Histogram of an ``(n, d)`` matrix of points over ``grid``.

    Every row is a ``d``-dimensional observation. Points outside the grid are
    ignored.

    Raises
    ------
    ShapeMismatch
        If ``d != grid.ndim``.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import Bins, Grid, histogram
    >>> points = np.array([[1., 0.5], [-0.5, 1.], [-1., -0.5], [0.5, -1.]])
    >>> bins = Bins([-1., 0., 1., 2.])
    >>> histogram(points, Grid([bins, bins])).counts
    array([[1, 0, 1],
           [1, 0, 0],
           [0, 1, 0]])
    """
    result = Histogram(grid)
    result.add_observations(points)
    return result


def histogramdd(points, strategy="auto", max_n_bins=None):
    """
    Histogram of an ``(n, d)`` matrix with a grid inferred from the points.

    Parameters
    ----------
    points : array-like
        ``(n, d)`` matrix, one observation per row.
    strategy : str or BinsBuildingStrategy subclass, default "auto"
        Strategy fitted independently to every axis.
    max_n_bins : int, optional
        Bin-count cap per axis, defaults to ``CONFIG['max_n_bins']``.

    Returns
    -------
    Histogram
        Since the grid covers every point, the counts sum to ``n``.

    Raises
    ------
    EmptySampleError
        If ``points`` has no rows.
    StrategyError
        If the strategy fails on any axis.
    """
    grid = GridBuilder.from_array(points, strategy, max_n_bins).build()
    return histogram(points, grid)
