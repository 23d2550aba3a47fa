"""Grid: the cross product of per-axis Bins, and GridBuilder."""

import numpy as _numpy

from ._shared import _as_points
from .bins import Bins
from .errors import ShapeMismatch
from .strategies import get_strategy


class Grid:
    """
    An n-dimensional partition of space into rectangular cells.

    A grid is the cross product of one :class:`Bins` per axis; its shape is
    the sequence of per-axis bin counts. Points map to cells with
    :meth:`index_of`.

    Parameters
    ----------
    projections : sequence of Bins
        One partition per axis, in axis order. Must not be empty.

    Examples
    --------
    >>> from ndhistogram import Bins, Grid
    >>> grid = Grid([Bins([0, 1, 2]), Bins([0, 10, 20, 30])])
    >>> grid.shape
    (2, 3)
    >>> grid.index_of([1.5, 10])
    (1, 1)
    >>> grid.index_of([2, 10]) is None
    True
    """

    __slots__ = ("_projections",)

    def __init__(self, projections):
        projections = tuple(p if isinstance(p, Bins) else Bins(p) for p in projections)
        if not projections:
            raise ValueError("a grid needs at least one axis")
        self._projections = projections

    @property
    def ndim(self):
        return len(self._projections)

    @property
    def shape(self):
        return tuple(len(bins) for bins in self._projections)

    @property
    def projections(self):
        return self._projections

    def _check_point(self, point):
        point = _numpy.asarray(point)
        if point.shape != (self.ndim,):
            raise ShapeMismatch(point.shape, (self.ndim,))
        return point

    def index_of(self, point):
        """
        Return the cell index holding ``point``.

        Returns ``None`` if any coordinate falls outside its axis' bins.
        Raises :class:`ShapeMismatch` if ``len(point) != ndim``.
        """
        point = self._check_point(point)
        index = []
        for value, bins in zip(point, self._projections, strict=True):
            i = bins.index_of(value)
            if i is None:
                return None
            index.append(i)
        return tuple(index)

    def index(self, index):
        """Per-axis ``(lo, hi)`` ranges of the cell at ``index``."""
        index = tuple(index)
        if len(index) != self.ndim:
            raise ShapeMismatch((len(index),), (self.ndim,))
        return tuple(bins.index(i) for i, bins in zip(index, self._projections, strict=True))

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self._projections == other._projections

    __hash__ = None

    def __repr__(self):
        return f"Grid({list(self._projections)!r})"


class GridBuilder:
    """
    Build a :class:`Grid` from observations, one strategy per axis.

    Each column of an ``(n, d)`` matrix of points is fitted independently with
    the chosen bin-building strategy.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import GridBuilder
    >>> points = np.array([[1., 0.5], [-0.5, 1.], [-1., -0.5], [0.5, -1.]])
    >>> GridBuilder.from_array(points, "sqrt").build().shape
    (3, 3)
    """

    __slots__ = ("_bin_builders",)

    def __init__(self, bin_builders):
        self._bin_builders = tuple(bin_builders)

    @classmethod
    def from_array(cls, points, strategy="auto", max_n_bins=None):
        """
        Fit one strategy per column of ``points``.

        Parameters
        ----------
        points : array-like
            ``(n, d)`` matrix, one observation per row.
        strategy : str or BinsBuildingStrategy subclass, default "auto"
            Strategy applied to every axis.
        max_n_bins : int, optional
            Bin-count cap of every axis, defaults to ``CONFIG['max_n_bins']``.

        Raises
        ------
        EmptySampleError
            If ``points`` has no rows.
        StrategyError
            If the strategy fails on any axis.
        """
        strategy = get_strategy(strategy)
        points = _as_points(points)
        bin_builders = [
            strategy.from_array(points[:, axis], max_n_bins)
            for axis in range(points.shape[1])
        ]
        return cls(bin_builders)

    @property
    def bin_builders(self):
        return self._bin_builders

    def build(self):
        return Grid([builder.build() for builder in self._bin_builders])
