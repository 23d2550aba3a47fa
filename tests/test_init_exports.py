import ndhistogram
from ndhistogram import _shared


def test_all_exports_resolve():
    for name in ndhistogram.__all__:
        assert hasattr(ndhistogram, name), name


def test_config_is_shared():
    assert ndhistogram.CONFIG is _shared.CONFIG
    assert ndhistogram.CONFIG['max_n_bins'] == 65535


def test_version():
    assert ndhistogram.__version__ == '0.5.0'
