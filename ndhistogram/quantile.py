"""Quantiles of 1-D samples and of array lanes (quantile_* functions).

Quantiles are estimated from order statistics fetched with partial selection
(:func:`select_ranks`, backed by :meth:`numpy.ndarray.partition`) and combined
by an interpolation strategy from :mod:`ndhistogram.interpolate`. Selection is
destructive: the ``*_mut`` functions leave their input in an arbitrary
permutation, so pass a copy when the original order matters.
"""

import logging as _logging
import math
import multiprocessing as _multiprocessing

import numpy as _numpy

from ._shared import _as_sample, _check_numeric, _chunk_slices, _should_parallelize
from .errors import InvalidQuantile, QuantileEmptyInput
from .interpolate import get_interpolation, higher_index, lower_index

_logger = _logging.getLogger(__name__)


def select_ranks(sample, ranks):
    """Return the order statistics of ``sample`` at ``ranks``.

    Partially sorts ``sample`` in place so that every requested rank holds the
    value it would hold in a full sort; the rest of the array ends up in an
    arbitrary order.

    Parameters
    ----------
    sample : numpy.ndarray
        1-D array, modified in place.
    ranks : sequence of int
        0-based ranks, each in ``[0, len(sample))``.

    Returns
    -------
    numpy.ndarray
        Values at ``ranks``, in the order the ranks were given.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram.quantile import select_ranks
    >>> select_ranks(np.array([5, 1, 4, 2, 3]), [0, 4])
    array([1, 5])
    """
    kth = _numpy.asarray(ranks, dtype=_numpy.intp).reshape(-1)
    if kth.size == 0:
        return sample[:0].copy()
    n = sample.shape[0]
    if kth.min() < 0 or kth.max() >= n:
        raise IndexError(f"ranks must be within [0, {n})")
    sample.partition(_numpy.unique(kth))
    return sample[kth]


def _check_quantile(q):
    if not 0.0 <= q <= 1.0:
        raise InvalidQuantile(q)
    return float(q)


def _needed_ranks(strategy, qs, n):
    ranks = set()
    for q in qs:
        if strategy.needs_lower(q, n):
            ranks.add(lower_index(q, n))
        if strategy.needs_higher(q, n):
            ranks.add(higher_index(q, n))
    return sorted(ranks)


def _interpolate_all(strategy, qs, n, values):
    """Interpolate every quantile from ``values`` (a rank -> value mapping)."""
    out = []
    for q in qs:
        lower = values[lower_index(q, n)] if strategy.needs_lower(q, n) else None
        higher = values[higher_index(q, n)] if strategy.needs_higher(q, n) else None
        out.append(strategy.interpolate(lower, higher, q, n))
    return out


def quantiles_mut(sample, qs, interpolate="linear"):
    """
    Compute several quantiles of a 1-D sample with a single selection pass.

    Parameters
    ----------
    sample : numpy.ndarray
        1-D numeric array, partially sorted in place.
    qs : sequence of float
        Quantiles, each within ``[0, 1]``.
    interpolate : str or Interpolate, default "linear"
        Interpolation strategy, see :func:`ndhistogram.interpolate.get_interpolation`.

    Returns
    -------
    numpy.ndarray
        One value per quantile.

    Raises
    ------
    QuantileEmptyInput
        If ``sample`` is empty.
    InvalidQuantile
        If a quantile is outside ``[0, 1]``.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import quantiles_mut
    >>> quantiles_mut(np.array([0., 1., 2., 3., 4.]), [0.25, 0.5])
    array([1., 2.])
    """
    sample = _as_sample(sample)
    n = sample.shape[0]
    if n == 0:
        raise QuantileEmptyInput()
    qs = [_check_quantile(q) for q in _numpy.atleast_1d(qs).tolist()]
    strategy = get_interpolation(interpolate)

    ranks = _needed_ranks(strategy, qs, n)
    values = dict(zip(ranks, select_ranks(sample, ranks), strict=True))
    return _numpy.asarray(_interpolate_all(strategy, qs, n, values))


def quantile_mut(sample, q, interpolate="linear"):
    """
    Compute the ``q``-th quantile of a 1-D sample.

    Only the order statistics the interpolation strategy needs are selected.
    ``sample`` is partially sorted in place.

    Parameters
    ----------
    sample : numpy.ndarray
        1-D numeric array.
    q : float
        Quantile within ``[0, 1]``.
    interpolate : str or Interpolate, default "linear"
        Interpolation strategy.

    Returns
    -------
    scalar
        The estimate, in the sample's numeric type.

    Raises
    ------
    QuantileEmptyInput
        If ``sample`` is empty.
    InvalidQuantile
        If ``q`` is outside ``[0, 1]``.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import quantile_mut
    >>> int(quantile_mut(np.array([3, 1, 2]), 0.5, "nearest"))
    2
    """
    sample = _as_sample(sample)
    n = sample.shape[0]
    if n == 0:
        raise QuantileEmptyInput()
    q = _check_quantile(q)
    strategy = get_interpolation(interpolate)

    ranks = _needed_ranks(strategy, [q], n)
    values = dict(zip(ranks, select_ranks(sample, ranks), strict=True))
    return _interpolate_all(strategy, [q], n, values)[0]


def _normalize_axis(axis, ndim):
    axis = int(axis)
    if not -ndim <= axis < ndim:
        raise _numpy.exceptions.AxisError(axis, ndim)
    return axis % ndim


def _worker_select_lanes(args):
    """Worker function for parallel lane selection.

    Runs in a forked subprocess on its own copy of a block of lanes.
    """
    lanes, ranks = args
    lanes.partition(ranks, axis=-1)
    return lanes[:, ranks]


def _select_lanes(lanes, ranks, allow_parallel, num_cores):
    """Select ``ranks`` from every lane (last axis) of ``lanes``."""
    n = lanes.shape[-1]
    outer_shape = lanes.shape[:-1]
    n_lanes = math.prod(outer_shape)

    do_parallel, effective_cores = _should_parallelize(
        n_lanes, n, allow_parallel, num_cores
    )
    if not do_parallel:
        lanes.partition(ranks, axis=-1)
        return lanes[..., ranks]

    _logger.info(
        "Large input detected (%s elements). "
        "Selecting %d lanes across %d processes...",
        f"{n_lanes * n:,}",
        n_lanes,
        effective_cores,
    )
    flat = lanes.reshape(n_lanes, n)
    chunk_size = -(-n_lanes // effective_cores)
    worker_args = [
        (flat[start:end], ranks)
        for start, end in _chunk_slices(n_lanes, chunk_size)
    ]
    ctx = _multiprocessing.get_context("fork")
    with ctx.Pool(processes=effective_cores) as pool:
        parts = pool.map(_worker_select_lanes, worker_args)
    return _numpy.concatenate(parts, axis=0).reshape(outer_shape + (len(ranks),))


def quantiles_axis_mut(a, axis, qs, interpolate="linear", allow_parallel=None,
                       num_cores=None):
    """
    Compute quantiles of every lane of ``a`` along ``axis``.

    All requested order statistics are selected in one pass per lane. Large
    inputs (more than ``CONFIG['max_data_size']`` elements) are split into
    blocks of lanes processed by a pool of worker processes; the result is
    identical to the sequential path.

    Parameters
    ----------
    a : numpy.ndarray
        Numeric array. On the sequential path its lanes are partially sorted
        in place; on the parallel path the workers operate on copies and
        ``a`` is left unchanged.
    axis : int
        Axis along which quantiles are computed.
    qs : sequence of float
        Quantiles, each within ``[0, 1]``.
    interpolate : str or Interpolate, default "linear"
        Interpolation strategy.
    allow_parallel : bool, optional
        Allow the multi-process path. Defaults to ``CONFIG['multitasking']``.
    num_cores : int, optional
        Number of worker processes. If ``None``, defaults to
        ``multiprocessing.cpu_count()`` capped by ``CONFIG['max_processes']``.

    Returns
    -------
    numpy.ndarray
        Array shaped like ``a`` with ``axis`` replaced by one entry per
        quantile.

    Raises
    ------
    QuantileEmptyInput
        If ``axis`` has length 0.
    InvalidQuantile
        If a quantile is outside ``[0, 1]``.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import quantiles_axis_mut
    >>> a = np.array([[0, 1, 2], [3, 4, 5]])
    >>> quantiles_axis_mut(a, 1, [0.0, 1.0], "lower")
    array([[0, 2],
           [3, 5]])
    """
    a = _check_numeric(_numpy.asarray(a))
    if a.ndim == 0:
        raise ValueError("quantiles need an array with at least one dimension")
    axis = _normalize_axis(axis, a.ndim)
    n = a.shape[axis]
    if n == 0:
        raise QuantileEmptyInput()
    qs = [_check_quantile(q) for q in _numpy.atleast_1d(qs).tolist()]
    if not qs:
        raise ValueError("at least one quantile is required")
    strategy = get_interpolation(interpolate)

    ranks = _needed_ranks(strategy, qs, n)
    lanes = _numpy.moveaxis(a, axis, -1)
    selected = _select_lanes(lanes, ranks, allow_parallel, num_cores)
    values = {rank: selected[..., j] for j, rank in enumerate(ranks)}
    results = [_numpy.asarray(v) for v in _interpolate_all(strategy, qs, n, values)]
    return _numpy.stack(results, axis=axis)


def quantile_axis_mut(a, axis, q, interpolate="linear", allow_parallel=None,
                      num_cores=None):
    """
    Compute the ``q``-th quantile of every lane of ``a`` along ``axis``.

    See :func:`quantiles_axis_mut`; the result has ``axis`` removed. A 1-D
    input yields a scalar.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import quantile_axis_mut
    >>> quantile_axis_mut(np.array([[1., 3.], [2., 6.]]), 0, 0.5, "midpoint")
    array([1.5, 4.5])
    """
    out = quantiles_axis_mut(a, axis, [q], interpolate, allow_parallel, num_cores)
    out = _numpy.take(out, 0, axis=_normalize_axis(axis, out.ndim))
    return out[()] if out.ndim == 0 else out


def quantile_axis_skipnan_mut(a, axis, q, interpolate="linear"):
    """
    Compute the ``q``-th quantile of every lane along ``axis``, ignoring NaN.

    Lanes holding only NaN yield NaN. Integer arrays cannot hold NaN and are
    handled by :func:`quantile_axis_mut`.

    Parameters
    ----------
    a : numpy.ndarray
        Numeric array. Lanes are compacted into scratch buffers, so ``a`` is
        left unchanged.
    axis : int
        Axis along which quantiles are computed.
    q : float
        Quantile within ``[0, 1]``.
    interpolate : str or Interpolate, default "linear"
        Interpolation strategy.

    Returns
    -------
    numpy.ndarray or scalar
        Array shaped like ``a`` without ``axis``.

    Examples
    --------
    >>> import numpy as np
    >>> from ndhistogram import quantile_axis_skipnan_mut
    >>> quantile_axis_skipnan_mut(np.array([[1., np.nan, 3.], [np.nan] * 3]), 1, 0.5)
    array([ 2., nan])
    """
    a = _check_numeric(_numpy.asarray(a))
    if _numpy.issubdtype(a.dtype, _numpy.integer):
        return quantile_axis_mut(a, axis, q, interpolate, allow_parallel=False)
    if a.ndim == 0:
        raise ValueError("quantiles need an array with at least one dimension")
    axis = _normalize_axis(axis, a.ndim)
    if a.shape[axis] == 0:
        raise QuantileEmptyInput()
    q = _check_quantile(q)
    strategy = get_interpolation(interpolate)

    lanes = _numpy.moveaxis(a, axis, -1)
    out = _numpy.full(lanes.shape[:-1], _numpy.nan, dtype=a.dtype)
    for index in _numpy.ndindex(*lanes.shape[:-1]):
        lane = lanes[index]
        valid = lane[~_numpy.isnan(lane)]
        if valid.size:
            out[index] = quantile_mut(valid, q, strategy)
    return out[()] if out.ndim == 0 else out
