"""Edges and Bins: the one-dimensional partition of an axis."""

import numpy as _numpy

from ._shared import _check_numeric, _is_integral


class Edges:
    """
    Sorted, deduplicated sequence of boundary values for one axis.

    Built from any 1-D collection of numbers; duplicates are dropped and the
    values sorted. The underlying array is read-only.

    Parameters
    ----------
    edges : array-like
        Boundary values. Must not contain NaN.

    Examples
    --------
    >>> from ndhistogram import Edges
    >>> edges = Edges([10, 5, 20, 5])
    >>> edges.as_array()
    array([ 5, 10, 20])
    >>> edges.indices_of(12)
    (1, 2)
    >>> edges.indices_of(20) is None
    True
    """

    __slots__ = ("_edges",)

    def __init__(self, edges):
        if isinstance(edges, Edges):
            self._edges = edges._edges
            return
        arr = _check_numeric(_numpy.asarray(edges), what="edges")
        if arr.ndim != 1:
            raise ValueError(f"edges must be 1-dimensional, got shape {arr.shape}")
        if not _is_integral(arr.dtype) and _numpy.isnan(arr).any():
            raise ValueError("edges must not contain NaN")
        arr = _numpy.unique(arr)
        arr.flags.writeable = False
        self._edges = arr

    def __len__(self):
        return self._edges.shape[0]

    def is_empty(self):
        return len(self) == 0

    def as_array(self):
        """Read-only view of the edges."""
        return self._edges

    def __iter__(self):
        return iter(self._edges)

    def __getitem__(self, i):
        return self._edges[i]

    def indices_of(self, value):
        """Return ``(i, i + 1)`` such that ``edges[i] <= value < edges[i + 1]``.

        Returns ``None`` if ``value`` lies before the first edge, at or after
        the last one, or is NaN.
        """
        i = int(_numpy.searchsorted(self._edges, value, side="right")) - 1
        if 0 <= i < len(self) - 1:
            return (i, i + 1)
        return None

    def __eq__(self, other):
        if not isinstance(other, Edges):
            return NotImplemented
        return _numpy.array_equal(self._edges, other._edges)

    __hash__ = None

    def __repr__(self):
        return f"Edges({self._edges.tolist()!r})"


class Bins:
    """
    Half-open intervals ``[edges[i], edges[i + 1])`` derived from Edges.

    ``n`` edges give ``n - 1`` bins. The right-most edge itself is not covered.

    Parameters
    ----------
    edges : Edges or array-like
        Bin boundaries, at least two distinct values.

    Examples
    --------
    >>> from ndhistogram import Bins
    >>> bins = Bins([0, 2, 4])
    >>> len(bins)
    2
    >>> bins.index_of(2)
    1
    >>> bins.range_of(3)
    (2, 4)
    """

    __slots__ = ("_edges",)

    def __init__(self, edges):
        edges = edges if isinstance(edges, Edges) else Edges(edges)
        if len(edges) < 2:
            raise ValueError(f"Bins need at least 2 distinct edges, got {len(edges)}")
        self._edges = edges

    @property
    def edges(self):
        return self._edges

    def __len__(self):
        return len(self._edges) - 1

    def is_empty(self):
        return len(self) == 0

    def index_of(self, value):
        """Index of the bin holding ``value``, or ``None``."""
        indices = self._edges.indices_of(value)
        return None if indices is None else indices[0]

    def range_of(self, value):
        """``(lo, hi)`` of the bin holding ``value``, or ``None``."""
        indices = self._edges.indices_of(value)
        if indices is None:
            return None
        lo, hi = indices
        return (self._edges[lo].item(), self._edges[hi].item())

    def index(self, i):
        """``(lo, hi)`` of the ``i``-th bin."""
        if not 0 <= i < len(self):
            raise IndexError(f"bin index {i} out of range for {len(self)} bins")
        return (self._edges[i].item(), self._edges[i + 1].item())

    def __eq__(self, other):
        if not isinstance(other, Bins):
            return NotImplemented
        return self._edges == other._edges

    __hash__ = None

    def __repr__(self):
        return f"Bins({self._edges.as_array().tolist()!r})"
