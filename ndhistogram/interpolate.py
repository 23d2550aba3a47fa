"""Interpolation strategies.

An interpolation strategy turns the two order statistics surrounding a
fractional rank into a quantile estimate. For a quantile ``q`` of a sample of
``length`` values the continuous index is ``q * (length - 1)``; the values at
``floor(index)`` and ``ceil(index)`` are the *lower* and *higher* order
statistics.

Each strategy tells the caller which of the two values it needs
(:meth:`Interpolate.needs_lower`, :meth:`Interpolate.needs_higher`) so that
only those have to be selected, then combines them with
:meth:`Interpolate.interpolate`.

The set of strategies is closed: :class:`Higher`, :class:`Lower`,
:class:`Nearest`, :class:`Midpoint` and :class:`Linear`.
"""

import math

import numpy as _numpy


def _float_quantile_index(q, length):
    return q * (length - 1)


def _float_quantile_index_fraction(q, length):
    """Fraction that the quantile lies between the lower and higher indices.

    Ranges from 0, where the quantile sits exactly on the lower index, to 1,
    where it sits on the higher index.
    """
    index = _float_quantile_index(q, length)
    return index - math.floor(index)


def lower_index(q, length):
    """Index of the value on the lower side of the quantile."""
    return int(math.floor(_float_quantile_index(q, length)))


def higher_index(q, length):
    """Index of the value on the higher side of the quantile."""
    return int(math.ceil(_float_quantile_index(q, length)))


def _is_integral(value):
    return _numpy.issubdtype(_numpy.result_type(value), _numpy.integer)


def _cast_like(value, like):
    """Map a float result back to the numeric type of ``like``."""
    dtype = _numpy.result_type(like)
    if _numpy.issubdtype(dtype, _numpy.integer):
        out = _numpy.trunc(value).astype(dtype)
    else:
        out = _numpy.asarray(value).astype(dtype)
    return out[()] if out.ndim == 0 else out


class Interpolate:
    """Closed interface implemented by every interpolation strategy.

    Instances are stateless; two instances of the same strategy compare equal.
    Subclassing outside this module raises ``TypeError``.
    """

    name = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError(
                f"{cls.__name__}: interpolation strategies cannot be defined "
                f"outside {__name__}"
            )

    def needs_lower(self, q, length):
        """Return True iff the lower value is needed to interpolate."""
        raise NotImplementedError

    def needs_higher(self, q, length):
        """Return True iff the higher value is needed to interpolate."""
        raise NotImplementedError

    def interpolate(self, lower, higher, q, length):
        """Compute the interpolated value.

        Raises ``ValueError`` if ``None`` is passed for a value this strategy
        needs.
        """
        raise NotImplementedError

    def _required(self, value, side):
        if value is None:
            raise ValueError(
                f"{type(self).__name__} interpolation requires the {side} value"
            )
        return value

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return f"{type(self).__name__}()"


class Higher(Interpolate):
    """Select the higher value."""

    name = "higher"

    def needs_lower(self, q, length):
        return False

    def needs_higher(self, q, length):
        return True

    def interpolate(self, lower, higher, q, length):
        return self._required(higher, "higher")


class Lower(Interpolate):
    """Select the lower value."""

    name = "lower"

    def needs_lower(self, q, length):
        return True

    def needs_higher(self, q, length):
        return False

    def interpolate(self, lower, higher, q, length):
        return self._required(lower, "lower")


class Nearest(Interpolate):
    """Select the nearest value; an exact half goes to the higher one."""

    name = "nearest"

    def needs_lower(self, q, length):
        return _float_quantile_index_fraction(q, length) < 0.5

    def needs_higher(self, q, length):
        return not self.needs_lower(q, length)

    def interpolate(self, lower, higher, q, length):
        if self.needs_lower(q, length):
            return self._required(lower, "lower")
        return self._required(higher, "higher")


class Midpoint(Interpolate):
    """Select the midpoint of the two values, ``lower + (higher - lower) / 2``.

    Integer values use truncating division.
    """

    name = "midpoint"

    def needs_lower(self, q, length):
        return True

    def needs_higher(self, q, length):
        return True

    def interpolate(self, lower, higher, q, length):
        lower = self._required(lower, "lower")
        higher = self._required(higher, "higher")
        diff = higher - lower
        if _is_integral(diff):
            return lower + _numpy.sign(diff) * (abs(diff) // 2)
        return lower + diff / 2


class Linear(Interpolate):
    """Linearly interpolate between the two values.

    ``lower + (higher - lower) * fraction``, where ``fraction`` is the
    fractional part of the index surrounded by ``lower`` and ``higher``. The
    offset is computed in float64 and mapped back to the values' type.
    """

    name = "linear"

    def needs_lower(self, q, length):
        return True

    def needs_higher(self, q, length):
        return True

    def interpolate(self, lower, higher, q, length):
        fraction = _float_quantile_index_fraction(q, length)
        lower = self._required(lower, "lower")
        higher = self._required(higher, "higher")
        lower_f64 = _numpy.asarray(lower, dtype=_numpy.float64)
        higher_f64 = _numpy.asarray(higher, dtype=_numpy.float64)
        return lower + _cast_like(fraction * (higher_f64 - lower_f64), lower)


_STRATEGIES = {cls.name: cls for cls in (Higher, Lower, Nearest, Midpoint, Linear)}


def get_interpolation(method):
    """Resolve an interpolation strategy.

    Parameters
    ----------
    method : str, Interpolate subclass or Interpolate instance
        One of ``"higher"``, ``"lower"``, ``"nearest"``, ``"midpoint"``,
        ``"linear"``, a strategy class or an instance.

    Returns
    -------
    Interpolate
        A strategy instance.

    Examples
    --------
    >>> from ndhistogram.interpolate import get_interpolation
    >>> get_interpolation("nearest")
    Nearest()
    """
    if isinstance(method, Interpolate):
        return method
    if isinstance(method, type) and issubclass(method, Interpolate) and method is not Interpolate:
        return method()
    if isinstance(method, str):
        try:
            return _STRATEGIES[method.lower()]()
        except KeyError:
            raise ValueError(
                f"Unknown interpolation '{method}'. "
                f"Expected one of: {', '.join(sorted(_STRATEGIES))}"
            ) from None
    raise TypeError(f"Invalid interpolation strategy: {method!r}")
