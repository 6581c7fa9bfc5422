"""
Shared building blocks.

This module contains:
- The arithmetic contract for animatable values
- A numpy-backed multi-component vector
- IEEE-754 style scalar math
- Parameter schema base class
"""

from .schema_utils import SchemaClass
from .vector import AnimatableVector
from .vector_arithmetic import (
    VectorArithmetic,
    interpolated,
    is_animatable,
    magnitude_squared,
    scaled_by,
    zero_like,
)

__all__ = [
    "AnimatableVector",
    "SchemaClass",
    "VectorArithmetic",
    "interpolated",
    "is_animatable",
    "magnitude_squared",
    "scaled_by",
    "zero_like",
]
