"""
Newton root finding for settling-duration tuning.

There is no closed form for the spring that settles within ``epsilon`` after
a given duration, so the angular frequency is found numerically from one of
two response functions, chosen by damping regime.
"""

from __future__ import annotations

import logging
import math
import sys
from typing import Callable, Tuple

from respring.common import numeric
from respring.common.constants import (
    DEFAULT_EPSILON,
    MAX_SETTLING_DURATION,
    MIN_SETTLING_DURATION,
)

logger = logging.getLogger(__name__)

ScalarFunction = Callable[[float], float]

FIRST_PASS_GUESS = 5.0
FIRST_PASS_ITERATIONS = 12
REFINE_PASS_GUESS = 1.0
REFINE_PASS_ITERATIONS = 20

# Maximum previous-step size, in units of epsilon, for a converged run to count
CONVERGENCE_TOLERANCE_FACTOR = 1e5


def find_root(
    initial_guess: float,
    max_iterations: int,
    response: ScalarFunction,
    derivative: ScalarFunction,
    duration: float,
    epsilon: float,
) -> Tuple[bool, float]:
    """
    Run a safeguarded Newton iteration on ``response``.

    The guess is first rescaled by ``1 / duration``. Iteration stops as soon
    as an iterate is non-finite (failure), when two successive iterates from
    the third step on differ by at most ``epsilon`` (success only if the step
    before that was at most ``epsilon * 1e5``), or when the iteration budget
    runs out (success).

    Args:
        initial_guess: Starting point before rescaling
        max_iterations: Maximum number of Newton steps
        response: Function whose root is sought
        derivative: Derivative of ``response``
        duration: Settling duration used to rescale the guess
        epsilon: Settling threshold, also the step-size tolerance

    Returns:
        Tuple of (converged, last iterate). The iterate is returned even on
        failure and may be non-finite.
    """
    x = initial_guess * numeric.divide(1.0, duration)
    difference = 0.0

    for step in range(max(max_iterations, 1)):
        next_x = x - numeric.divide(response(x), derivative(x))
        if not math.isfinite(next_x):
            return False, next_x

        if step >= 2 and abs(next_x - x) <= epsilon:
            return difference <= epsilon * CONVERGENCE_TOLERANCE_FACTOR, next_x

        if step >= 1:
            difference = x - next_x
        x = next_x

    return True, x


def settling_response_functions(
    duration: float, damping_ratio: float, epsilon: float
) -> Tuple[ScalarFunction, ScalarFunction]:
    """
    Build the (response, derivative) pair for a damping regime.

    Critically damped (``damping_ratio >= 1``) uses the envelope
    ``exp(-d x) (d x + 1)`` shifted by epsilon; underdamped uses the decaying
    amplitude ``k exp(-d ζ x)`` with ``k = ζ / sqrt(1 - ζ²)``.
    """
    if damping_ratio >= 1.0:

        def critical_response(x: float) -> float:
            threshold = -epsilon if x < 0.0 else epsilon
            scaled = duration * x
            return numeric.exp(-scaled) * (scaled + 1.0) - threshold

        def critical_derivative(x: float) -> float:
            return numeric.divide(-duration * duration * x, numeric.exp(duration * x))

        return critical_response, critical_derivative

    damping_squared_duration = damping_ratio * damping_ratio * duration
    natural_frequency = numeric.sqrt(1.0 - damping_ratio * damping_ratio)
    damping_frequency_ratio = numeric.divide(damping_ratio, natural_frequency)
    damped_time = duration * damping_ratio

    def damped_oscillation(x: float) -> float:
        return epsilon - abs(damping_frequency_ratio * numeric.exp(-damped_time * x))

    def damped_derivative(x: float) -> float:
        squared_x = x * x
        return numeric.divide(
            squared_x * damping_squared_duration,
            numeric.exp(damped_time * x) * squared_x * natural_frequency,
        )

    return damped_oscillation, damped_derivative


def solve_settling_parameters(
    settling_duration: float,
    damping_ratio: float,
    epsilon: float = DEFAULT_EPSILON,
) -> Tuple[float, float]:
    """
    Find spring parameters that settle within ``epsilon`` by a given time.

    ``damping_ratio`` is clamped to ``[sys.float_info.epsilon, 1]`` and the
    duration to ``[0.01, 10]`` seconds.

    Args:
        settling_duration: Time for a unit step to settle
        damping_ratio: Fraction of critical damping
        epsilon: Settling threshold

    Returns:
        Tuple of (angular_frequency, decay_constant) for a unit-mass spring
    """
    damping_ratio = numeric.clamp(damping_ratio, sys.float_info.epsilon, 1.0)
    duration = numeric.clamp(settling_duration, MIN_SETTLING_DURATION, MAX_SETTLING_DURATION)

    response, derivative = settling_response_functions(duration, damping_ratio, epsilon)

    converged, root = find_root(
        FIRST_PASS_GUESS, FIRST_PASS_ITERATIONS, response, derivative, duration, epsilon
    )
    if converged:
        refined, root = find_root(
            REFINE_PASS_GUESS, REFINE_PASS_ITERATIONS, response, derivative, duration, epsilon
        )
        logger.debug(
            f"Settling root for duration={duration:.4g}, damping_ratio={damping_ratio:.4g}: "
            f"{root:.6g} (refine converged={refined})"
        )
    else:
        logger.debug(
            f"Settling root search diverged for duration={duration:.4g}, "
            f"damping_ratio={damping_ratio:.4g}; using last iterate {root}"
        )

    omega_squared = root * root
    half_omega = root * 2.0 * damping_ratio / 2.0

    if root >= half_omega:
        decay_constant = half_omega
    else:
        decay_constant = root

    if root < half_omega:
        angular_frequency = 0.0
    else:
        angular_frequency = numeric.sqrt(abs(omega_squared - half_omega * half_omega))

    return angular_frequency, decay_constant
