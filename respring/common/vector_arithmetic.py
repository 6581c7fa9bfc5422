"""
Animatable value arithmetic.

A spring only ever needs a handful of operations on the values it animates:
an additive identity, addition, subtraction, uniform scaling and the squared
magnitude. ``VectorArithmetic`` is the interface custom value types implement;
the module-level functions apply the same operations uniformly to plain
numbers, numpy arrays and ``VectorArithmetic`` instances.
"""

from __future__ import annotations

import numbers
from abc import ABC, abstractmethod
from functools import singledispatch
from typing import Any, TypeVar

import numpy as np

V = TypeVar("V")


class VectorArithmetic(ABC):
    """
    A type that can serve as the animatable data of an animatable type.

    Subclasses provide the additive group operations, in-place scaling and
    the squared magnitude. Everything else is derived from those.
    """

    @abstractmethod
    def zero_like(self) -> VectorArithmetic:
        """Return the additive identity with the same shape as this value."""
        pass

    @abstractmethod
    def copy(self) -> VectorArithmetic:
        pass

    @abstractmethod
    def __add__(self, other: VectorArithmetic) -> VectorArithmetic:
        pass

    @abstractmethod
    def __sub__(self, other: VectorArithmetic) -> VectorArithmetic:
        pass

    @abstractmethod
    def scale_by(self, scalar: float) -> None:
        """Multiply each component of this value by ``scalar`` in place."""
        pass

    @abstractmethod
    def magnitude_squared(self) -> float:
        """Return the dot product of this value with itself."""
        pass

    def __iadd__(self, other: VectorArithmetic) -> VectorArithmetic:
        return self + other

    def __isub__(self, other: VectorArithmetic) -> VectorArithmetic:
        return self - other

    def __neg__(self) -> VectorArithmetic:
        return self.zero_like() - self

    def scaled_by(self, scalar: float) -> VectorArithmetic:
        """Return a copy of this value with each component multiplied by ``scalar``."""
        result = self.copy()
        result.scale_by(scalar)
        return result

    def interpolate(self, towards: VectorArithmetic, amount: float) -> VectorArithmetic:
        """
        Interpolate this value with ``towards`` by ``amount``.

        Equivalent to ``self = self + (towards - self) * amount``. Mutable
        subclasses update in place; the result is returned either way.
        """
        result = self
        result += (towards - self).scaled_by(amount)
        return result

    def interpolated(self, towards: VectorArithmetic, amount: float) -> VectorArithmetic:
        """Return ``self + (towards - self) * amount``."""
        return self + (towards - self).scaled_by(amount)


# =============================================================================
# Uniform operations over supported value types
# =============================================================================


def _unsupported(operation: str, value: Any) -> TypeError:
    return TypeError(
        f"{operation} is not supported for values of type {type(value).__name__}; "
        "use a real number, a numpy array or a VectorArithmetic subclass"
    )


@singledispatch
def zero_like(value: Any) -> Any:
    """Additive identity shaped like ``value``."""
    raise _unsupported("zero_like", value)


@zero_like.register(numbers.Real)
def _(value: numbers.Real) -> float:
    return 0.0


@zero_like.register(np.ndarray)
def _(value: np.ndarray) -> np.ndarray:
    return np.zeros_like(value, dtype=float)


@zero_like.register(VectorArithmetic)
def _(value: VectorArithmetic) -> VectorArithmetic:
    return value.zero_like()


@singledispatch
def scaled_by(value: Any, scalar: float) -> Any:
    """Return ``value`` with every component multiplied by ``scalar``."""
    raise _unsupported("scaled_by", value)


@scaled_by.register(numbers.Real)
def _(value: numbers.Real, scalar: float) -> float:
    return float(value) * scalar


@scaled_by.register(np.ndarray)
def _(value: np.ndarray, scalar: float) -> np.ndarray:
    return value * scalar


@scaled_by.register(VectorArithmetic)
def _(value: VectorArithmetic, scalar: float) -> VectorArithmetic:
    return value.scaled_by(scalar)


@singledispatch
def magnitude_squared(value: Any) -> float:
    """Sum of squared components of ``value``."""
    raise _unsupported("magnitude_squared", value)


@magnitude_squared.register(numbers.Real)
def _(value: numbers.Real) -> float:
    return float(value) * float(value)


@magnitude_squared.register(np.ndarray)
def _(value: np.ndarray) -> float:
    return float(np.vdot(value, value))


@magnitude_squared.register(VectorArithmetic)
def _(value: VectorArithmetic) -> float:
    return value.magnitude_squared()


def interpolated(value: V, towards: V, amount: float) -> V:
    """Return ``value + (towards - value) * amount`` for any supported type."""
    return value + scaled_by(towards - value, amount)


def is_animatable(value: Any) -> bool:
    """Whether ``value`` satisfies the arithmetic a spring needs."""
    return isinstance(value, (numbers.Real, np.ndarray, VectorArithmetic))
