"""
Damped harmonic oscillator for animating values toward a target.

A ``Spring`` is stored in a canonical physical form (angular frequency, decay
constant, mass). Every higher-level tuning vocabulary, whether
duration/bounce, response/damping ratio, mass/stiffness/damping or settling
duration, converts into that form, and the closed-form motion equations are
evaluated from it.

The sign of ``angular_frequency`` tags the damping regime:

- positive: underdamped, the value oscillates around the target
- zero: critically damped
- negative: overdamped, its magnitude is the spread of the two real decay rates

All operations are total over floating point: degenerate inputs produce
``inf`` or ``nan`` rather than raising.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple, TypeVar

from respring.common import numeric
from respring.common.constants import (
    BOUNCY_BOUNCE,
    DEFAULT_DURATION,
    DEFAULT_EPSILON,
    SETTLING_CONFIRMATION_WINDOW,
    SETTLING_SEARCH_MAX_STEPS,
    SETTLING_SEARCH_STEP,
    SMOOTH_BOUNCE,
    SNAPPY_BOUNCE,
)
from respring.common.numeric import TAU
from respring.common.vector_arithmetic import magnitude_squared, scaled_by, zero_like

from .root_finding import solve_settling_parameters

logger = logging.getLogger(__name__)

V = TypeVar("V")

# Canonical parameters of ``with_duration_bounce(0.5, 0.0)``
_SMOOTH_DECAY_CONSTANT = TAU / DEFAULT_DURATION


@dataclass(frozen=True)
class Spring:
    """
    A representation of a spring's motion.

    Attributes:
        angular_frequency: Oscillation rate; its sign encodes the regime
        decay_constant: Exponential decay rate of the motion envelope
        mass: Mass of the attached object, only affecting force and stiffness
    """

    angular_frequency: float = 0.0
    decay_constant: float = _SMOOTH_DECAY_CONSTANT
    mass: float = 1.0

    @classmethod
    def new(cls, angular_frequency: float, decay_constant: float, mass: float) -> Spring:
        """Create a spring directly from its canonical parameters, unchecked."""
        return cls(
            angular_frequency=angular_frequency,
            decay_constant=decay_constant,
            mass=mass,
        )

    # =========================================================================
    # Duration and bounce
    # =========================================================================

    @classmethod
    def with_duration(cls, duration: float) -> Spring:
        """Critically damped spring with the given perceptual duration."""
        return cls.with_duration_bounce(duration, 0.0)

    @classmethod
    def with_duration_bounce(cls, duration: float, bounce: float) -> Spring:
        """
        Create a spring with the specified duration and bounce.

        Args:
            duration: Pace of the spring. Approximately the settling duration,
                but for very bouncy springs it is the period of oscillation.
            bounce: 0 gives no bounce (critical damping), positive values up
                to 1.0 add bounciness (1.0 is undamped oscillation), negative
                values down to -1.0 overdamp the spring. Values outside
                ``[-1, 1]`` are extrapolated, not clamped.

        Returns:
            Unit-mass spring
        """
        angular_velocity_factor = -TAU
        damping_ratio = math.inf

        if bounce > -1.0:
            if bounce < 0.0:
                damping_ratio = 1.0 / (bounce + 1.0)
            elif bounce == 0.0:
                damping_ratio = 1.0
            elif bounce <= 1.0:
                damping_ratio = 1.0 - bounce
            else:
                damping_ratio = 0.0

            if damping_ratio <= 1.0:
                angular_velocity_factor = TAU

        angular_frequency = numeric.divide(
            numeric.sqrt(abs(1.0 - damping_ratio * damping_ratio)) * angular_velocity_factor,
            duration,
        )
        decay_constant = numeric.divide(damping_ratio * TAU, duration)
        return cls(angular_frequency=angular_frequency, decay_constant=decay_constant, mass=1.0)

    @property
    def duration(self) -> float:
        """The perceptual duration, which defines the pace of the spring."""
        omega = self.angular_frequency
        decay = self.decay_constant
        return numeric.divide(TAU, numeric.sqrt(decay * decay + omega * abs(omega)))

    @property
    def bounce(self) -> float:
        """
        How bouncy the spring is.

        Uses the same convention as the ``bounce`` argument of
        ``with_duration_bounce`` and is its exact inverse.
        """
        half_decay = self.decay_constant / 2.0
        decay_squared = self.decay_constant * self.decay_constant
        frequency_squared = self.angular_frequency * self.angular_frequency

        if self.angular_frequency >= 0.0:
            oscillation_period = numeric.divide(
                -TAU, numeric.sqrt(frequency_squared + decay_squared)
            )
            return (oscillation_period * half_decay) / math.pi + 1.0

        decay_period = numeric.divide(TAU, numeric.sqrt(decay_squared - frequency_squared))
        return numeric.divide(1.0, (decay_period * half_decay) / math.pi) - 1.0

    # =========================================================================
    # Mass, stiffness and damping
    # =========================================================================

    @classmethod
    def with_mass_stiffness_damping(
        cls,
        mass: float,
        stiffness: float,
        damping: float,
        allow_over_damping: bool = False,
    ) -> Spring:
        """
        Create a spring from physical coefficients.

        Args:
            mass: Mass of the object attached to the end of the spring
            stiffness: The spring coefficient
            damping: Friction coefficient damping the motion
            allow_over_damping: When False, inputs that would overdamp the
                spring produce a critically damped spring instead

        Returns:
            Spring with the given mass
        """
        natural_frequency = numeric.sqrt(numeric.divide(stiffness, mass))
        damping_ratio = numeric.divide(damping, 2.0 * mass)

        if damping_ratio > natural_frequency and not allow_over_damping:
            return cls(angular_frequency=0.0, decay_constant=natural_frequency, mass=mass)

        oscillation = numeric.sqrt(
            abs(numeric.divide(stiffness, mass) - damping_ratio * damping_ratio)
        )
        if damping_ratio > natural_frequency:
            angular_frequency = -oscillation
        else:
            angular_frequency = oscillation
        return cls(angular_frequency=angular_frequency, decay_constant=damping_ratio, mass=mass)

    @property
    def stiffness(self) -> float:
        """
        The spring stiffness coefficient.

        Higher stiffness means fewer oscillations and a shorter settling
        duration.
        """
        return self.mass * (
            self.angular_frequency * self.angular_frequency
            + self.decay_constant * self.decay_constant
        )

    @property
    def damping(self) -> float:
        """Friction coefficient damping the spring's motion."""
        return self.decay_constant * 2.0 * self.mass

    # =========================================================================
    # Response and damping ratio
    # =========================================================================

    @classmethod
    def with_response_damping_ratio(cls, response: float, damping_ratio: float) -> Spring:
        """
        Create a spring with the specified response and damping ratio.

        Args:
            response: Stiffness of the spring as an approximate duration in seconds
            damping_ratio: Drag as a fraction of the amount needed for critical
                damping

        Returns:
            Unit-mass spring
        """
        tau_factor = -TAU if damping_ratio > 1.0 else TAU
        frequency_component = numeric.sqrt(abs(1.0 - damping_ratio * damping_ratio))
        return cls(
            angular_frequency=numeric.divide(tau_factor * frequency_component, response),
            decay_constant=numeric.divide(TAU * damping_ratio, response),
            mass=1.0,
        )

    @property
    def response(self) -> float:
        """The stiffness of the spring, as an approximate duration in seconds."""
        damping_squared = self.decay_constant * self.decay_constant
        response_term = self.angular_frequency * abs(self.angular_frequency)
        return numeric.divide(TAU, numeric.sqrt(damping_squared + response_term))

    @property
    def damping_ratio(self) -> float:
        """
        Drag as a fraction of the amount needed for critical damping.

        At 1 the spring decelerates smoothly onto its target; below 1 it
        oscillates before coming to rest.
        """
        return self.decay_constant * self.response / TAU

    # =========================================================================
    # Settling duration
    # =========================================================================

    @classmethod
    def with_settling_duration_damping_ratio(
        cls,
        settling_duration: float,
        damping_ratio: float,
        epsilon: float = DEFAULT_EPSILON,
    ) -> Spring:
        """
        Create a spring that comes to rest after roughly ``settling_duration``.

        Args:
            settling_duration: Approximate time for the spring to come to rest,
                clamped to ``[0.01, 10]`` seconds
            damping_ratio: Drag as a fraction of critical damping, clamped to
                ``(0, 1]``
            epsilon: How close all subsequent values must stay to the target
                for the spring to count as settled

        Returns:
            Unit-mass spring
        """
        angular_frequency, decay_constant = solve_settling_parameters(
            settling_duration, damping_ratio, epsilon
        )
        return cls(angular_frequency=angular_frequency, decay_constant=decay_constant, mass=1.0)

    def settling_duration(self) -> float:
        """
        Estimated time for the spring to come to rest.

        Uses a target of 1.0, no initial velocity and an epsilon of 0.001.
        """
        return self.settling_duration_with_velocity(1.0, 0.0, DEFAULT_EPSILON)

    def settling_duration_with_velocity(
        self, target: V, initial_velocity: Optional[V], epsilon: float = DEFAULT_EPSILON
    ) -> float:
        """
        Estimated time for the spring to come to rest.

        Underdamped springs have a closed-form bound. Critically damped and
        overdamped springs are searched numerically in 0.1 s steps: settling
        is confirmed once the distance stays below ``epsilon`` for a full
        second, and the time it first dropped below is returned.

        Args:
            target: Amount of change being animated
            initial_velocity: Velocity at the start of the motion, zero when None
            epsilon: How close all subsequent values must stay to the target

        Returns:
            Settling time in seconds; ``inf`` for an undamped spring and 0.0
            when the search cannot confirm settling
        """
        if initial_velocity is None:
            initial_velocity = zero_like(target)

        if self.decay_constant == 0.0:
            return math.inf

        if self.angular_frequency <= 0.0:
            return self._search_settling_duration(target, initial_velocity, epsilon)

        magnitude = numeric.sqrt(
            magnitude_squared(scaled_by(target, self.decay_constant) - initial_velocity)
        ) + numeric.sqrt(magnitude_squared(target))
        settling_time = numeric.divide(
            -numeric.log(numeric.divide(epsilon, magnitude)), self.decay_constant
        )
        return max(0.0, settling_time)

    def _search_settling_duration(self, target: V, initial_velocity: V, epsilon: float) -> float:
        best_time = -1.0
        best_distance = math.inf
        time = 0.0

        for _ in range(SETTLING_SEARCH_MAX_STEPS):
            current = self.value(target, initial_velocity, time)
            distance = numeric.sqrt(magnitude_squared(current - target))
            if not math.isfinite(distance):
                logger.debug(f"Settling search hit non-finite distance at t={time:.3g}")
                return 0.0

            if best_distance >= epsilon:
                if distance < best_distance:
                    best_time = time
                    best_distance = distance
            elif distance >= epsilon:
                best_distance = math.inf
            elif time - best_time > SETTLING_CONFIRMATION_WINDOW:
                return best_time

            time += SETTLING_SEARCH_STEP

        logger.debug(
            f"Settling search exhausted {SETTLING_SEARCH_MAX_STEPS} steps for {self!r}"
        )
        return 0.0

    # =========================================================================
    # Motion
    # =========================================================================

    def value(self, target: V, initial_velocity: Optional[V], time: float) -> V:
        """
        Value of the spring at ``time`` given a target amount of change.

        The motion starts at zero with ``initial_velocity`` (zero when None)
        and approaches ``target``.
        """
        if initial_velocity is None:
            initial_velocity = zero_like(target)

        omega = self.angular_frequency
        decay = self.decay_constant

        if omega > 0.0:
            angle = omega * time
            displacement = scaled_by(
                scaled_by(target, decay) - initial_velocity, numeric.sin(angle) / omega
            ) + scaled_by(target, numeric.cos(angle))
            return target - scaled_by(displacement, numeric.exp(-decay * time))

        if omega < 0.0:
            fast_rate = -omega - decay
            exp_fast = numeric.exp(fast_rate * time)
            exp_slow = numeric.exp((omega - decay) * time)

            damping_factor = (decay - omega) * exp_fast + fast_rate * exp_slow
            scale_factor = damping_factor / (omega * 2.0) + 1.0
            velocity_factor = (exp_fast - exp_slow) / (omega * 2.0)
            return scaled_by(target, scale_factor) - scaled_by(initial_velocity, velocity_factor)

        displacement = target + scaled_by(scaled_by(target, decay) - initial_velocity, time)
        return target - scaled_by(displacement, numeric.exp(-decay * time))

    def velocity(self, target: V, initial_velocity: Optional[V], time: float) -> V:
        """
        Velocity of the spring at ``time`` given a target amount of change.

        This is the analytic time derivative of ``value``.
        """
        if initial_velocity is None:
            initial_velocity = zero_like(target)

        omega = self.angular_frequency
        decay = self.decay_constant

        if omega > 0.0:
            damping_term = numeric.exp(-decay * time)
            angle = omega * time
            sin_value = numeric.sin(angle)
            cos_value = numeric.cos(angle)

            target_term = scaled_by(
                target, (omega * sin_value + decay * cos_value) * damping_term
            )
            displacement_factor = (decay * sin_value - omega * cos_value) * damping_term / omega
            velocity_term = scaled_by(
                scaled_by(target, decay) - initial_velocity, displacement_factor
            )
            return velocity_term + target_term

        if omega < 0.0:
            fast_rate = -omega - decay
            slow_rate = omega - decay
            fast_term = fast_rate * numeric.exp(fast_rate * time)
            slow_term = slow_rate * numeric.exp(slow_rate * time)

            scale_factor = ((decay - omega) * fast_term + fast_rate * slow_term) / (omega * 2.0)
            velocity_factor = (fast_term - slow_term) / (omega * 2.0)
            return scaled_by(target, scale_factor) - scaled_by(initial_velocity, velocity_factor)

        damping_term = numeric.exp(-decay * time)
        time_factor = (decay * time - 1.0) * damping_term
        velocity_delta = scaled_by(target, decay) - initial_velocity
        return scaled_by(velocity_delta, time_factor) + scaled_by(target, decay * damping_term)

    def update(self, value: V, velocity: V, target: V, delta_time: float) -> Tuple[V, V]:
        """
        Advance a value and velocity by ``delta_time`` toward ``target``.

        The oscillator is re-based on the remaining displacement each call,
        so for a constant target the result is exact regardless of step size.

        Args:
            value: The current value of the spring
            velocity: The current velocity of the spring
            target: The target that ``value`` is moving toward
            delta_time: Time elapsed since the spring was at ``value``

        Returns:
            Tuple of (new value, new velocity)
        """
        delta = target - value
        delta_velocity = self.velocity(delta, velocity, delta_time)
        delta_value = self.value(delta, velocity, delta_time)
        return value + delta_value, delta_velocity

    def force(self, target: V, position: V, velocity: V) -> V:
        """
        Force on the spring at ``position`` moving with ``velocity``.

        In units of the value type per second squared.
        """
        damping_force = scaled_by(velocity, (-self.decay_constant * 2.0) * self.mass)
        spring_force = scaled_by(
            target - position,
            (
                self.angular_frequency * self.angular_frequency
                + self.decay_constant * self.decay_constant
            )
            * self.mass,
        )
        return spring_force + damping_force

    # =========================================================================
    # Presets
    # =========================================================================

    @classmethod
    def smooth(cls) -> Spring:
        """A smooth spring with a predefined duration and no bounce."""
        return cls.with_duration_bounce(DEFAULT_DURATION, SMOOTH_BOUNCE)

    @classmethod
    def smooth_with_duration(
        cls, duration: float = DEFAULT_DURATION, extra_bounce: float = 0.0
    ) -> Spring:
        """Smooth spring with a tunable duration and bounce added to a base of 0."""
        return cls.with_duration_bounce(duration, SMOOTH_BOUNCE + extra_bounce)

    @classmethod
    def snappy(cls) -> Spring:
        """A spring with a predefined duration and a small amount of bounce."""
        return cls.with_duration_bounce(DEFAULT_DURATION, SNAPPY_BOUNCE)

    @classmethod
    def snappy_with_duration(
        cls, duration: float = DEFAULT_DURATION, extra_bounce: float = 0.0
    ) -> Spring:
        """Snappy spring with a tunable duration and bounce added to a base of 0.15."""
        return cls.with_duration_bounce(duration, SNAPPY_BOUNCE + extra_bounce)

    @classmethod
    def bouncy(cls) -> Spring:
        """A spring with a predefined duration and a higher amount of bounce."""
        return cls.with_duration_bounce(DEFAULT_DURATION, BOUNCY_BOUNCE)

    @classmethod
    def bouncy_with_duration(
        cls, duration: float = DEFAULT_DURATION, extra_bounce: float = 0.0
    ) -> Spring:
        """Bouncy spring with a tunable duration and bounce added to a base of 0.3."""
        return cls.with_duration_bounce(duration, BOUNCY_BOUNCE + extra_bounce)
