"""Tests for the multi-process path of lane-wise quantile selection."""

import logging
import multiprocessing

import numpy as np
import pytest

from ndhistogram import CONFIG, quantile_axis_mut, quantiles_axis_mut
from ndhistogram._shared import _chunk_slices, _should_parallelize

requires_fork = pytest.mark.skipif(
    "fork" not in multiprocessing.get_all_start_methods(),
    reason="fork start method not available",
)


class TestShouldParallelize:
    """Tests for _should_parallelize."""

    def test_disabled(self):
        assert _should_parallelize(100, 1000, False, 4, max_data_size=10) == (False, 1)

    def test_small_data_stays_sequential(self):
        assert _should_parallelize(10, 10, True, 4, max_data_size=1000) == (False, 1)

    def test_single_lane_stays_sequential(self):
        assert _should_parallelize(1, 10000, True, 4, max_data_size=10) == (False, 1)

    def test_cores_capped_by_lanes(self):
        assert _should_parallelize(3, 100, True, 4, max_data_size=10) == (True, 3)

    def test_cores_capped_by_max_processes(self):
        CONFIG['max_processes'] = 2
        assert _should_parallelize(50, 100, True, 8, max_data_size=10) == (True, 2)

    def test_single_core(self):
        assert _should_parallelize(50, 100, True, 1, max_data_size=10) == (False, 1)

    def test_min_processes(self):
        CONFIG['min_processes'] = 4
        assert _should_parallelize(50, 100, True, 3, max_data_size=10) == (False, 1)

    def test_default_follows_config(self):
        CONFIG['multitasking'] = False
        assert _should_parallelize(50, 100, None, 4, max_data_size=10) == (False, 1)

    def test_default_max_data_size_from_config(self):
        CONFIG['max_data_size'] = 10
        assert _should_parallelize(50, 100, True, 4) == (True, 4)

    def test_num_cores_defaults_to_cpu_count(self):
        do_par, cores = _should_parallelize(50, 100, True, None, max_data_size=10)
        assert cores >= 1
        if do_par:
            assert cores >= 2


class TestChunkSlices:
    """Tests for _chunk_slices."""

    def test_even(self):
        assert _chunk_slices(8, 4) == [(0, 4), (4, 8)]

    def test_uneven(self):
        assert _chunk_slices(5, 2) == [(0, 2), (2, 4), (4, 5)]

    def test_single_chunk(self):
        assert _chunk_slices(3, 10) == [(0, 3)]
        assert _chunk_slices(3, None) == [(0, 3)]


@requires_fork
class TestParallelMatchesSequential:

    @pytest.fixture(autouse=True)
    def _small_threshold(self):
        CONFIG['max_data_size'] = 10

    def test_2d(self, rng):
        a = rng.normal(size=(8, 50))
        qs = [0.05, 0.5, 0.95]
        seq = quantiles_axis_mut(a.copy(), 1, qs, allow_parallel=False)
        par = quantiles_axis_mut(a.copy(), 1, qs, allow_parallel=True, num_cores=2)
        np.testing.assert_array_equal(par, seq)

    def test_3d_inner_axis(self, rng):
        a = rng.integers(-1000, 1000, size=(3, 40, 5))
        seq = quantiles_axis_mut(a.copy(), 1, [0.25, 0.75], "midpoint", allow_parallel=False)
        par = quantiles_axis_mut(a.copy(), 1, [0.25, 0.75], "midpoint",
                                 allow_parallel=True, num_cores=3)
        assert par.shape == (3, 2, 5)
        np.testing.assert_array_equal(par, seq)

    def test_single_quantile(self, rng):
        a = rng.normal(size=(6, 30))
        seq = quantile_axis_mut(a.copy(), 0, 0.3, "nearest", allow_parallel=False)
        par = quantile_axis_mut(a.copy(), 0, 0.3, "nearest", allow_parallel=True, num_cores=2)
        np.testing.assert_array_equal(par, seq)

    def test_input_left_unchanged(self, rng):
        a = rng.normal(size=(8, 50))
        original = a.copy()
        quantiles_axis_mut(a, 1, [0.5], allow_parallel=True, num_cores=2)
        np.testing.assert_array_equal(a, original)

    def test_logs_parallel_run(self, rng, caplog):
        a = rng.normal(size=(4, 20))
        with caplog.at_level(logging.INFO, logger="ndhistogram.quantile"):
            quantiles_axis_mut(a, 1, [0.5], allow_parallel=True, num_cores=2)
        assert "Large input detected" in caplog.text
