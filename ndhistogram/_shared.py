"""
Shared globals and utilities for ndhistogram modules.

Thread-safety note:
The module-level mutable state (`CONFIG`) is process-global and not
synchronized for concurrent mutation. Histogram, Grid and strategy instances
are owned by their caller; accumulating into one Histogram from several
threads needs external locking.
"""

import multiprocessing as _multiprocessing
import sys as _sys

import numpy as _numpy

from .errors import ShapeMismatch, StrategyError

# Configuration dictionary
CONFIG = {
    'max_n_bins': 65535,            # Default bin-count cap for strategies
    'multitasking': True,           # Allow parallel quantile selection
    'min_processes': 2,             # Min workers for multitasking
    'max_processes': 20,            # Max workers for multitasking
    'max_data_size': 10000000,      # Elements above which we go parallel
    'debug': False,                 # Debug logging in strategies
}

# Saturated bin count
MAX_COUNT = _sys.maxsize


def _max_n_bins(max_n_bins):
    if max_n_bins is None:
        max_n_bins = CONFIG.get('max_n_bins', 65535)
    max_n_bins = int(max_n_bins)
    if max_n_bins < 1:
        raise ValueError("max_n_bins must be a positive integer")
    return max_n_bins


def _is_integral(dtype):
    return _numpy.issubdtype(dtype, _numpy.integer)


def _check_numeric(arr, what="sample"):
    """Reject arrays that are neither integer nor floating."""
    if arr.dtype == _numpy.bool_ or not (
        _is_integral(arr.dtype) or _numpy.issubdtype(arr.dtype, _numpy.floating)
    ):
        raise TypeError(f"{what} must have an integer or floating dtype, got {arr.dtype}")
    return arr


def _as_sample(a):
    """Validate a 1-D numeric sample and return it as an ndarray (no copy)."""
    arr = _check_numeric(_numpy.asarray(a))
    if arr.ndim != 1:
        raise ShapeMismatch(arr.shape, (arr.size,),
                            message=f"Expected a 1-dimensional sample, got shape {arr.shape}.")
    return arr


def _as_points(points, ndim=None):
    """Validate an ``(n, d)`` point matrix, optionally against ``ndim`` columns."""
    arr = _check_numeric(_numpy.asarray(points), what="points")
    if arr.ndim != 2:
        raise ShapeMismatch(arr.shape, (arr.size,) if ndim is None else (arr.size // ndim, ndim),
                            message=f"Expected an (n, d) matrix of points, got shape {arr.shape}.")
    if ndim is not None and arr.shape[1] != ndim:
        raise ShapeMismatch(arr.shape, (arr.shape[0], ndim))
    return arr


def _checkorder(arr):
    """A float sample holding NaN has no total order."""
    if not _is_integral(arr.dtype) and _numpy.isnan(arr).any():
        raise StrategyError("Undefined ordering between a tested pair of values.")


def _from_f64(value, dtype):
    """Convert a float to the value type, truncating toward zero for integers."""
    if _is_integral(dtype):
        return int(value)
    return dtype.type(value)


def _divide(a, b, dtype):
    """Value-type division: truncating for integers, true division for floats."""
    if _is_integral(dtype):
        q = abs(a) // abs(b)
        return q if (a >= 0) == (b >= 0) else -q
    return dtype.type(a) / dtype.type(b)


def _chunk_slices(n, chunk_size):
    if chunk_size is None or chunk_size <= 0 or chunk_size >= n:
        return [(0, n)]
    return [(i, min(i + chunk_size, n)) for i in range(0, n, chunk_size)]


def _should_parallelize(n_lanes, lane_len, allow_parallel, num_cores,
                        max_data_size=None):
    """Determine whether lane-wise selection should run in worker processes.

    Returns (do_parallel, effective_cores) tuple.
    """
    if allow_parallel is None:
        allow_parallel = CONFIG.get('multitasking', True)
    if not allow_parallel:
        return False, 1

    if max_data_size is None:
        max_data_size = CONFIG.get('max_data_size', 10000000)

    if n_lanes * lane_len <= max_data_size:
        return False, 1

    if n_lanes <= 1:
        return False, 1

    if num_cores is None:
        num_cores = _multiprocessing.cpu_count()
    num_cores = min(int(num_cores), CONFIG.get('max_processes', 20))
    effective_cores = max(1, min(num_cores, n_lanes))
    if effective_cores < max(2, CONFIG.get('min_processes', 2)):
        return False, 1

    return True, effective_cores
