"""
Respring: damped harmonic oscillators for animation.

Converts human-facing tuning (duration and bounce, response and damping
ratio, mass/stiffness/damping, settling duration) into a canonical spring and
evaluates its closed-form motion at arbitrary times.
"""

__version__ = "0.1.0"

# Value arithmetic
from .common import (
    AnimatableVector,
    VectorArithmetic,
    magnitude_squared,
    scaled_by,
    zero_like,
)

# Dynamics
from .dynamics import (
    Spring,
    SpringAnimation,
    SpringState,
    analyze_motion,
    regime,
    sample_motion,
)

# Configuration
from .config import (
    load_spring_config,
    spring_from_dict,
)

__all__ = [
    # Value arithmetic
    "AnimatableVector",
    "VectorArithmetic",
    "magnitude_squared",
    "scaled_by",
    "zero_like",
    # Dynamics
    "Spring",
    "SpringAnimation",
    "SpringState",
    "analyze_motion",
    "regime",
    "sample_motion",
    # Configuration
    "load_spring_config",
    "spring_from_dict",
]
