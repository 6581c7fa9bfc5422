"""
Multi-component animatable vector backed by a numpy array.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Union

import numpy as np

from .vector_arithmetic import VectorArithmetic


class AnimatableVector(VectorArithmetic):
    """
    Fixed-length vector of float64 components.

    Addition, subtraction and scaling act component-wise, and the squared
    magnitude is the dot product of the vector with itself. Useful for
    animating points, sizes, colors and similar compound values.

    Attributes:
        components: The underlying 1-D float array
    """

    __hash__ = None

    def __init__(self, components: Union[Iterable[float], np.ndarray]):
        self.components = np.array(components, dtype=float).reshape(-1)

    @classmethod
    def zeros(cls, dimension: int) -> AnimatableVector:
        """Zero vector with ``dimension`` components."""
        return cls(np.zeros(dimension))

    def zero_like(self) -> AnimatableVector:
        return AnimatableVector(np.zeros_like(self.components))

    def copy(self) -> AnimatableVector:
        return AnimatableVector(self.components.copy())

    def _check_dimension(self, other: AnimatableVector) -> None:
        if len(other) != len(self):
            raise ValueError(
                f"Vector dimension {len(other)} must match dimension {len(self)}"
            )

    def __add__(self, other: AnimatableVector) -> AnimatableVector:
        if not isinstance(other, AnimatableVector):
            return NotImplemented
        self._check_dimension(other)
        return AnimatableVector(self.components + other.components)

    def __sub__(self, other: AnimatableVector) -> AnimatableVector:
        if not isinstance(other, AnimatableVector):
            return NotImplemented
        self._check_dimension(other)
        return AnimatableVector(self.components - other.components)

    def __iadd__(self, other: AnimatableVector) -> AnimatableVector:
        if not isinstance(other, AnimatableVector):
            return NotImplemented
        self._check_dimension(other)
        self.components += other.components
        return self

    def __isub__(self, other: AnimatableVector) -> AnimatableVector:
        if not isinstance(other, AnimatableVector):
            return NotImplemented
        self._check_dimension(other)
        self.components -= other.components
        return self

    def scale_by(self, scalar: float) -> None:
        self.components *= scalar

    def magnitude_squared(self) -> float:
        return float(np.dot(self.components, self.components))

    def to_array(self) -> np.ndarray:
        """Copy of the components as a numpy array."""
        return self.components.copy()

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        if dtype is None:
            return self.components.copy()
        return self.components.astype(dtype)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnimatableVector):
            return NotImplemented
        return bool(np.array_equal(self.components, other.components))

    def __len__(self) -> int:
        return len(self.components)

    def __getitem__(self, index: int) -> float:
        return float(self.components[index])

    def __iter__(self) -> Iterator[float]:
        return (float(c) for c in self.components)

    def __repr__(self) -> str:
        values = ", ".join(f"{c:.6g}" for c in self.components)
        return f"AnimatableVector([{values}])"
