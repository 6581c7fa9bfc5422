"""
Sampling and summarising spring motion.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from respring.common.constants import DEFAULT_EPSILON
from respring.common.vector_arithmetic import zero_like

from .spring import Spring

UNDERDAMPED = "underdamped"
CRITICAL = "critical"
OVERDAMPED = "overdamped"


def regime(spring: Spring) -> str:
    """Damping regime encoded by the sign of the angular frequency."""
    if spring.angular_frequency > 0.0:
        return UNDERDAMPED
    if spring.angular_frequency < 0.0:
        return OVERDAMPED
    return CRITICAL


def sample_motion(
    spring: Spring,
    target: Any,
    initial_velocity: Any,
    times: Sequence[float],
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Evaluate value and velocity at each of ``times``.

    Returns:
        Tuple of (values, velocities), shape (T,) for scalar targets or
        (T, n) for n-component targets
    """
    values = np.array(
        [np.asarray(spring.value(target, initial_velocity, t), dtype=float) for t in times]
    )
    velocities = np.array(
        [np.asarray(spring.velocity(target, initial_velocity, t), dtype=float) for t in times]
    )
    return values, velocities


def analyze_motion(
    spring: Spring,
    target: Any = 1.0,
    initial_velocity: Optional[Any] = None,
    duration: Optional[float] = None,
    num_samples: int = 256,
    epsilon: float = DEFAULT_EPSILON,
) -> Dict[str, Any]:
    """
    Summarise the motion of a spring animating ``target``.

    Args:
        spring: Spring to analyze
        target: Amount of change being animated
        initial_velocity: Velocity at the start of the motion, zero when None
        duration: Time span to sample; defaults to the settling duration
        num_samples: Number of evenly spaced samples
        epsilon: Settling threshold

    Returns:
        Dictionary with analysis metrics including:
        - regime: underdamped, critical or overdamped
        - settling_duration: Estimated settling time
        - horizon: Time span sampled
        - peak_overshoot: Largest travel past the target along its direction
        - zero_crossings: Times the value crossed the target
        - final_distance: Distance to target at the end of the horizon
        - max_speed: Largest sampled speed
    """
    if initial_velocity is None:
        initial_velocity = zero_like(target)

    settling = spring.settling_duration_with_velocity(target, initial_velocity, epsilon)

    horizon = duration
    if horizon is None:
        horizon = settling if math.isfinite(settling) and settling > 0.0 else 1.0

    times = np.linspace(0.0, horizon, num_samples)
    values, velocities = sample_motion(spring, target, initial_velocity, times)

    target_array = np.asarray(target, dtype=float)
    displacement = (values - target_array).reshape(num_samples, -1)
    direction = target_array.reshape(-1)
    direction_norm = np.linalg.norm(direction)

    if direction_norm > 0.0:
        along_target = displacement @ (direction / direction_norm)
    else:
        along_target = np.zeros(num_samples)

    signs = np.sign(along_target)
    signs = signs[signs != 0]
    zero_crossings = int(np.count_nonzero(np.diff(signs))) if len(signs) > 1 else 0

    distances = np.linalg.norm(displacement, axis=1)
    speeds = np.linalg.norm(velocities.reshape(num_samples, -1), axis=1)

    return {
        "regime": regime(spring),
        "settling_duration": float(settling),
        "horizon": float(horizon),
        "peak_overshoot": float(max(0.0, np.max(along_target))),
        "zero_crossings": zero_crossings,
        "final_distance": float(distances[-1]),
        "max_speed": float(np.max(speeds)),
    }
