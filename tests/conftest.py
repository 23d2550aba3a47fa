import numpy as np
import pytest

from ndhistogram import _shared


@pytest.fixture(autouse=True)
def _restore_config():
    saved = dict(_shared.CONFIG)
    yield
    _shared.CONFIG.clear()
    _shared.CONFIG.update(saved)


@pytest.fixture
def rng():
    return np.random.default_rng(42)
