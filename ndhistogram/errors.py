"""Custom errors raised by ndhistogram functions and methods."""


class EmptyInput(ValueError):
    """The input array was empty."""

    def __init__(self, message="Empty input."):
        super().__init__(message)


class BinsBuildError(ValueError):
    """Bins could not be built from the provided observations.

    Raised by the bin-width strategies. Use :meth:`is_empty_input` and
    :meth:`is_strategy` (or the concrete subclasses) to tell the two causes
    apart.
    """

    def is_empty_input(self):
        return isinstance(self, EmptyInput)

    def is_strategy(self):
        return isinstance(self, StrategyError)


class EmptySampleError(BinsBuildError, EmptyInput):
    """The sample handed to a strategy had zero elements."""


class StrategyError(BinsBuildError):
    """The strategy failed to infer a bin width or bin count.

    Causes are constant data, a non-positive inferred width, an undefined
    ordering (NaN) or an inferred bin count above the configured maximum.
    """

    def __init__(self, message="The strategy failed to determine a non-zero bin width."):
        super().__init__(message)


class BinNotFound(LookupError):
    """An observation fell outside the grid on at least one axis."""

    def __init__(self, message="No bin has been found."):
        super().__init__(message)


class MultiInputError(ValueError):
    """An error for functions that take several non-empty array inputs."""

    def is_empty_input(self):
        return isinstance(self, EmptyInput)

    def is_shape_mismatch(self):
        return isinstance(self, ShapeMismatch)


class MultiInputEmpty(MultiInputError, EmptyInput):
    """One or more of the arrays were empty."""


class ShapeMismatch(MultiInputError):
    """Two arguments expected to share a shape do not.

    Also raised when a point's length does not match a grid's number of
    dimensions.
    """

    def __init__(self, first_shape, second_shape, message=None):
        self.first_shape = tuple(first_shape)
        self.second_shape = tuple(second_shape)
        if message is None:
            message = (f"Array shapes do not match: {list(self.first_shape)} "
                       f"and {list(self.second_shape)}.")
        super().__init__(message)


class QuantileError(ValueError):
    """An error computing a quantile."""


class QuantileEmptyInput(QuantileError, EmptyInput):
    """The input was empty."""


class InvalidQuantile(QuantileError):
    """The quantile was not between 0 and 1 (inclusive)."""

    def __init__(self, q):
        self.q = q
        super().__init__(f"{q!r} is not between 0. and 1. (inclusive).")
