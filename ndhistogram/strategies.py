"""Strategies to infer bin edges from data.

Each strategy prescribes either the optimal number of bins or the optimal bin
width for a 1-dimensional sample. For those that prescribe the number of bins
``n``, the width is ``(max - min) / n``.

Bins are left-closed and right-open, so one extra bin is added when needed to
include the maximum of the data: no observation is discarded.

Strategies
----------
Auto
    Maximum of the Sturges and FreedmanDiaconis strategies. Good all-round
    performance.
FreedmanDiaconis
    Robust (resilient to outliers) strategy that takes into account data
    variability and data size.
Rice
    Ignores variability, only uses data size. Commonly overestimates the
    number of bins required.
Sqrt
    Square root of the data size, used by Excel and other programs for its
    speed and simplicity.
Sturges
    R's default strategy, only accounts for data size. Only optimal for
    gaussian data and underestimates the number of bins for large
    non-gaussian datasets.

Notes
-----
Successful inference relies on variability of the data: the observations
must be neither empty nor constant. Auto and FreedmanDiaconis additionally
need a positive interquartile range (IQR).

Arithmetic happens in the sample's numeric type: integer samples get integer
bin widths (truncating division), floating samples keep their precision.
"""

import logging as _logging
import math

import numpy as _numpy

from ._shared import (
    CONFIG,
    MAX_COUNT,
    _as_sample,
    _checkorder,
    _divide,
    _from_f64,
    _is_integral,
    _max_n_bins,
)
from .bins import Bins, Edges
from .errors import BinsBuildError, EmptySampleError, StrategyError
from .interpolate import Nearest
from .quantile import quantile_mut

_logger = _logging.getLogger(__name__)

# Smallest trim fraction still tried before widening stops
_MIN_AT = 1.0 / 512.0

# Scott's rule constant
_SCOTT_FACTOR = 3.49


def _debug(msg, *args):
    if CONFIG.get('debug'):
        _logger.debug(msg, *args)


def _to_value(value, dtype):
    """Python int for integer samples, a numpy scalar of ``dtype`` otherwise."""
    if _is_integral(dtype):
        return int(value)
    return dtype.type(value)


def _min_max(a):
    return _to_value(a.min(), a.dtype), _to_value(a.max(), a.dtype)


def _round(x):
    return int(math.floor(x + 0.5))


def _edge_dtype(dtype):
    # Integer edges are widened to int64; wider ranges are checked in _EquiSpaced
    if _is_integral(dtype) and dtype != _numpy.uint64:
        return _numpy.promote_types(dtype, _numpy.int64)
    return dtype


class _EquiSpaced:
    """Equally spaced bins of ``bin_width`` covering ``[min_val, max_val]``."""

    __slots__ = ("_bin_width", "_min", "_max", "_dtype")

    def __init__(self, bin_width, min_val, max_val, dtype):
        if not bin_width > 0 or not min_val < max_val:
            raise StrategyError()
        self._bin_width = bin_width
        self._min = min_val
        self._max = max_val
        self._dtype = _numpy.dtype(dtype)
        if _is_integral(self._dtype):
            info = _numpy.iinfo(_edge_dtype(self._dtype))
            last_edge = int(min_val) + self.n_bins() * int(bin_width)
            if last_edge > info.max:
                raise StrategyError(
                    f"The last bin edge {last_edge} does not fit in {info.dtype}"
                )

    def n_bins(self):
        # +0.5 rounds to the nearest count instead of always rounding up
        x = (float(self._max) - float(self._min)) / float(self._bin_width) + 0.5
        if not math.isfinite(x):
            return MAX_COUNT
        return min(math.ceil(x), MAX_COUNT)

    def build(self):
        n_bins = self.n_bins()
        dtype = _edge_dtype(self._dtype)
        steps = _numpy.arange(n_bins + 1, dtype=dtype)
        edges = dtype.type(self._min) + steps * dtype.type(self._bin_width)
        return Bins(Edges(edges))

    def bin_width(self):
        return self._bin_width

    def __repr__(self):
        return (f"_EquiSpaced(bin_width={self._bin_width}, "
                f"min={self._min}, max={self._max})")


class BinsBuildingStrategy:
    """
    Closed interface of the strategies building Bins from observations.

    A strategy is fitted once with :meth:`from_array` and can then be queried
    any number of times. Subclassing outside this module raises ``TypeError``.
    """

    name = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError(
                f"{cls.__name__}: bin-building strategies cannot be defined "
                f"outside {__name__}"
            )

    def __init__(self, builder):
        self._builder = builder

    @classmethod
    def from_array(cls, a, max_n_bins=None):
        """
        Fit the strategy to a 1-dimensional sample.

        Parameters
        ----------
        a : array-like
            1-D sample of integers or floats.
        max_n_bins : int, optional
            Largest acceptable number of bins. Defaults to
            ``CONFIG['max_n_bins']`` (65535).

        Returns
        -------
        BinsBuildingStrategy
            The fitted strategy.

        Raises
        ------
        EmptySampleError
            If ``a`` is empty.
        StrategyError
            If no bin width can be inferred, see each strategy.
        """
        raise NotImplementedError

    def build(self):
        """Bins according to the parameters inferred from the observations."""
        return self._builder.build()

    def n_bins(self):
        """Optimal number of bins according to the fitted parameters."""
        return self._builder.n_bins()

    def bin_width(self):
        """The bin width (or bin length) according to the fitted strategy."""
        return self._builder.bin_width()

    def __repr__(self):
        return f"{type(self).__name__}(bin_width={self.bin_width()}, n_bins={self.n_bins()})"


class _SizeBasedStrategy(BinsBuildingStrategy):
    """Strategies whose bin count depends on the sample size alone."""

    @staticmethod
    def _n_bins_for(n_elems):
        raise NotImplementedError

    @classmethod
    def from_array(cls, a, max_n_bins=None):
        max_n_bins = _max_n_bins(max_n_bins)
        a = _as_sample(a)
        n_elems = a.shape[0]
        if n_elems == 0:
            raise EmptySampleError()
        _checkorder(a)

        n_bins = cls._n_bins_for(n_elems)
        min_val, max_val = _min_max(a)
        bin_width = _divide(max_val - min_val, n_bins, a.dtype)
        builder = _EquiSpaced(bin_width, min_val, max_val, a.dtype)
        if builder.n_bins() > max_n_bins:
            raise StrategyError(
                f"{cls.__name__} needs {builder.n_bins()} bins, "
                f"more than the maximum of {max_n_bins}"
            )
        return cls(builder)


class Sqrt(_SizeBasedStrategy):
    """
    Square root (of data size) strategy.

    Let ``n`` be the number of observations: ``n_bins = sqrt(n)``.

    Requires the data to be non-empty and not constant.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import Sqrt
    >>> Sqrt.from_array(np.arange(16.0)).build().edges.as_array()
    array([ 0.  ,  3.75,  7.5 , 11.25, 15.  , 18.75])
    """

    name = "sqrt"

    @staticmethod
    def _n_bins_for(n_elems):
        return _round(math.sqrt(n_elems))


class Rice(_SizeBasedStrategy):
    """
    Rice rule: ``n_bins = 2 * n ** (1/3)``.

    Only proportional to the cube root of ``n``; tends to overestimate the
    number of bins and ignores data variability.

    Requires the data to be non-empty and not constant.
    """

    name = "rice"

    @staticmethod
    def _n_bins_for(n_elems):
        return _round(2.0 * float(n_elems) ** (1.0 / 3.0))


class Sturges(_SizeBasedStrategy):
    """
    Sturges' formula: ``n_bins = log2(n) + 1``.

    Assumes normality of the data and is too conservative for larger,
    non-normal datasets. This is the default method of R's ``hist``.

    Requires the data to be non-empty and not constant.
    """

    name = "sturges"

    @staticmethod
    def _n_bins_for(n_elems):
        return _round(math.log2(n_elems)) + 1


class FreedmanDiaconis(BinsBuildingStrategy):
    """
    Robust strategy accounting for data variability and data size.

    Let ``n`` be the number of observations and ``at = 1/4``::

        bin_width = IQR * n ** (-1/3) / (1 - 2 * at)

    The bin width is proportional to the interquartile range (IQR) from
    ``at`` to ``1 - at`` and inversely proportional to the cube root of
    ``n``. It can be too conservative for small datasets but is quite good
    for large ones, and the IQR is very robust to outliers.

    When the IQR is close to zero, ``at`` is halved and an improper IQR
    computed, as long as ``at >= 1/512``. If no IQR is found by then, Scott's
    rule, based on the standard deviation, is the last resort. There is no
    one-fit-all epsilon: closeness to zero is tested indirectly by requiring
    the number of bins not to exceed ``max_n_bins``.

    Requires the data to be non-empty, not constant and to have a positive
    IQR. An IQR of exactly zero fails with :class:`StrategyError` at once.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import FreedmanDiaconis
    >>> fd = FreedmanDiaconis.from_array(np.arange(1000.0))
    >>> fd.n_bins()
    11
    """

    name = "fd"

    @classmethod
    def from_array(cls, a, max_n_bins=None):
        max_n_bins = _max_n_bins(max_n_bins)
        a = _as_sample(a)
        n_points = a.shape[0]
        if n_points == 0:
            raise EmptySampleError()
        _checkorder(a)

        dtype = a.dtype
        n_cbrt = float(n_points) ** (1.0 / 3.0)
        min_val, max_val = _min_max(a)
        # Selection is destructive, work on a private copy
        a_copy = a.copy()

        # More bins than max_n_bins hints at an IQR close to zero: widen the
        # percentile range and try again with at of 1/8, 1/16, ...
        at = 0.5
        while at >= _MIN_AT:
            at *= 0.5
            first_quartile = _to_value(quantile_mut(a_copy, at, Nearest()), dtype)
            third_quartile = _to_value(quantile_mut(a_copy, 1.0 - at, Nearest()), dtype)
            iqr = third_quartile - first_quartile
            denom = _from_f64((1.0 - 2.0 * at) * n_cbrt, dtype)
            if denom == 0:
                _debug("FD: denominator is zero at at=%s, skipping", at)
                continue
            bin_width = _divide(iqr, denom, dtype)
            builder = _EquiSpaced(bin_width, min_val, max_val, dtype)
            if builder.n_bins() > max_n_bins:
                _debug("FD: %d bins exceed %d at at=%s, widening",
                       builder.n_bins(), max_n_bins, at)
                continue
            return cls(builder)

        _debug("FD: improper IQR still close to zero, falling back to Scott's rule")
        builder = _EquiSpaced(_scott_bin_width(a, n_cbrt), min_val, max_val, dtype)
        if builder.n_bins() > max_n_bins:
            raise StrategyError(
                f"FreedmanDiaconis needs {builder.n_bins()} bins, "
                f"more than the maximum of {max_n_bins}"
            )
        return cls(builder)


def _scott_bin_width(a, n_cbrt):
    """Scott's rule, ``3.49 * s / n ** (1/3)`` with ``s`` the sample SD."""
    n_points = a.shape[0]
    dtype = a.dtype
    if n_points < 2:
        raise StrategyError()
    if _is_integral(dtype):
        values = [int(v) for v in a.tolist()]
        m = _divide(sum(values), n_points, dtype)
        ss = sum((v - m) * (v - m) for v in values)
    else:
        m = a.sum(dtype=dtype) / dtype.type(n_points)
        d = a - m
        ss = (d * d).sum(dtype=dtype)
    s = math.sqrt(float(_divide(ss, n_points - 1, dtype)))
    return _divide(_from_f64(_SCOTT_FACTOR * s, dtype), _from_f64(n_cbrt, dtype), dtype)


class Auto(BinsBuildingStrategy):
    """
    Maximum of the Sturges and FreedmanDiaconis strategies.

    For small datasets Sturges will usually be chosen, while larger datasets
    usually default to FreedmanDiaconis. Avoids the overly conservative
    behaviour of FreedmanDiaconis and Sturges for small and large datasets
    respectively.

    When both fit, the one with the smaller bin width wins; ties go to
    FreedmanDiaconis. When both fail, the FreedmanDiaconis error is raised.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import Auto
    >>> auto = Auto.from_array(np.array([-20, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 20]))
    >>> type(auto.chosen).__name__
    'Sturges'
    """

    name = "auto"

    def __init__(self, chosen):
        super().__init__(chosen._builder)
        self._chosen = chosen

    @property
    def chosen(self):
        """The fitted Sturges or FreedmanDiaconis strategy."""
        return self._chosen

    @classmethod
    def from_array(cls, a, max_n_bins=None):
        fd_builder = fd_error = sturges_builder = None
        try:
            fd_builder = FreedmanDiaconis.from_array(a, max_n_bins)
        except BinsBuildError as err:
            fd_error = err
        try:
            sturges_builder = Sturges.from_array(a, max_n_bins)
        except BinsBuildError:
            pass

        if fd_builder is None and sturges_builder is None:
            raise fd_error
        if fd_builder is None:
            return cls(sturges_builder)
        if sturges_builder is None:
            return cls(fd_builder)
        if fd_builder.bin_width() > sturges_builder.bin_width():
            return cls(sturges_builder)
        return cls(fd_builder)


_STRATEGIES = {cls.name: cls for cls in (Auto, FreedmanDiaconis, Rice, Sqrt, Sturges)}


def get_strategy(strategy):
    """
    Resolve a bin-building strategy class.

    Parameters
    ----------
    strategy : str or BinsBuildingStrategy subclass
        One of ``"auto"``, ``"fd"``, ``"rice"``, ``"sqrt"``, ``"sturges"`` or
        a strategy class.

    Returns
    -------
    type
        The strategy class.
    """
    if isinstance(strategy, type) and issubclass(strategy, BinsBuildingStrategy):
        if strategy.name is None:
            raise TypeError(f"{strategy.__name__} is not a concrete strategy")
        return strategy
    if isinstance(strategy, str):
        try:
            return _STRATEGIES[strategy.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown strategy '{strategy}'. "
                f"Expected one of: {', '.join(sorted(_STRATEGIES))}"
            ) from None
    raise TypeError(f"Invalid bin-building strategy: {strategy!r}")


def histogram_bin_edges(a, strategy="auto", max_n_bins=None):
    """
    Compute bin edges for a 1-D sample with the given strategy.

    Parameters
    ----------
    a : array-like
        1-D sample.
    strategy : str or BinsBuildingStrategy subclass, default "auto"
        Strategy, see :func:`get_strategy`.
    max_n_bins : int, optional
        Largest acceptable number of bins, defaults to
        ``CONFIG['max_n_bins']``.

    Returns
    -------
    numpy.ndarray
        Read-only array of strictly increasing edges; the last edge is
        greater than the maximum of ``a``.

    Raises
    ------
    EmptySampleError
        If ``a`` is empty.
    StrategyError
        If the strategy cannot infer a bin width.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import histogram_bin_edges
    >>> histogram_bin_edges(np.array([0., 1., 2., 3.]), "sqrt")
    array([0. , 1.5, 3. , 4.5])
    """
    fitted = get_strategy(strategy).from_array(a, max_n_bins)
    return fitted.build().edges.as_array()
