"""
ndhistogram - Histogram and quantile support for n-dimensional numpy arrays
"""

__version__ = '0.5.0'

from ._shared import CONFIG
from .bins import Bins, Edges
from .errors import (
    BinNotFound,
    BinsBuildError,
    EmptyInput,
    EmptySampleError,
    InvalidQuantile,
    MultiInputEmpty,
    MultiInputError,
    QuantileEmptyInput,
    QuantileError,
    ShapeMismatch,
    StrategyError,
)
from .grid import Grid, GridBuilder
from .histogram import Histogram, histogram, histogramdd
from .interpolate import (
    Higher,
    Interpolate,
    Linear,
    Lower,
    Midpoint,
    Nearest,
    get_interpolation,
)
from .quantile import (
    quantile_axis_mut,
    quantile_axis_skipnan_mut,
    quantile_mut,
    quantiles_axis_mut,
    quantiles_mut,
    select_ranks,
)
from .strategies import (
    Auto,
    BinsBuildingStrategy,
    FreedmanDiaconis,
    Rice,
    Sqrt,
    Sturges,
    get_strategy,
    histogram_bin_edges,
)

__all__ = [
    # Configuration
    'CONFIG',

    # Histogram model
    'Edges',
    'Bins',
    'Grid',
    'GridBuilder',
    'Histogram',
    'histogram',
    'histogramdd',

    # Bin-building strategies
    'BinsBuildingStrategy',
    'Auto',
    'FreedmanDiaconis',
    'Rice',
    'Sqrt',
    'Sturges',
    'get_strategy',
    'histogram_bin_edges',

    # Interpolation strategies
    'Interpolate',
    'Higher',
    'Lower',
    'Nearest',
    'Midpoint',
    'Linear',
    'get_interpolation',

    # Quantiles
    'select_ranks',
    'quantile_mut',
    'quantiles_mut',
    'quantile_axis_mut',
    'quantiles_axis_mut',
    'quantile_axis_skipnan_mut',

    # Errors
    'EmptyInput',
    'BinsBuildError',
    'EmptySampleError',
    'StrategyError',
    'BinNotFound',
    'MultiInputError',
    'MultiInputEmpty',
    'ShapeMismatch',
    'QuantileError',
    'QuantileEmptyInput',
    'InvalidQuantile',
]
