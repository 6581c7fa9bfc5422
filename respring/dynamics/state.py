"""
Per-frame spring integration.

``Spring`` is an immutable value, so ``Spring.update`` hands back new values.
``SpringState`` holds the caller-owned value/velocity slots that a frame loop
overwrites, and ``SpringAnimation`` records the states it steps through.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np

from respring.common import numeric
from respring.common.constants import DEFAULT_EPSILON
from respring.common.vector_arithmetic import magnitude_squared, zero_like

from .spring import Spring


@dataclass
class SpringState:
    """
    Value and velocity of an animated quantity at a point in time.

    Attributes:
        value: Current value
        velocity: Current velocity, zero of the value's shape when omitted
        time: Total time stepped so far
    """

    value: Any
    velocity: Any = None
    time: float = 0.0

    def __post_init__(self):
        if self.velocity is None:
            self.velocity = zero_like(self.value)

    def step(self, spring: Spring, target: Any, delta_time: float) -> SpringState:
        """Advance this state in place by ``delta_time`` and return it."""
        self.value, self.velocity = spring.update(self.value, self.velocity, target, delta_time)
        self.time += delta_time
        return self

    def force(self, spring: Spring, target: Any) -> Any:
        """Instantaneous force acting on this state."""
        return spring.force(target, self.value, self.velocity)

    def distance_to(self, target: Any) -> float:
        return numeric.sqrt(magnitude_squared(self.value - target))

    def speed(self) -> float:
        return numeric.sqrt(magnitude_squared(self.velocity))

    def is_settled(self, target: Any, epsilon: float = DEFAULT_EPSILON) -> bool:
        """Whether both the distance to ``target`` and the speed are below ``epsilon``."""
        return self.distance_to(target) < epsilon and self.speed() < epsilon

    def snapshot(self) -> SpringState:
        return SpringState(
            value=copy.deepcopy(self.value),
            velocity=copy.deepcopy(self.velocity),
            time=self.time,
        )

    def __repr__(self) -> str:
        return f"SpringState(t={self.time:.3f}, value={self.value!r}, velocity={self.velocity!r})"


class SpringAnimation:
    """
    Drives a value toward a target with a spring, one frame at a time.

    The caller supplies the elapsed time of every frame; the animation never
    schedules itself. Every state it passes through is recorded so the motion
    can be inspected afterwards.
    """

    def __init__(
        self,
        spring: Spring,
        value: Any,
        target: Any,
        velocity: Optional[Any] = None,
    ):
        """
        Initialize animation.

        Args:
            spring: Spring driving the motion
            value: Starting value (copied)
            target: Value to move toward
            velocity: Starting velocity, zero when omitted
        """
        self.spring = spring
        self.target = target
        self.state = SpringState(
            value=copy.deepcopy(value),
            velocity=copy.deepcopy(velocity),
        )
        self.states: List[SpringState] = [self.state.snapshot()]

    def advance(self, delta_time: float) -> SpringState:
        """Step the animation by one frame of ``delta_time`` seconds."""
        self.state.step(self.spring, self.target, delta_time)
        self.states.append(self.state.snapshot())
        return self.state

    def run(self, delta_time: float, num_steps: int) -> SpringState:
        """Advance ``num_steps`` frames of equal length."""
        for _ in range(num_steps):
            self.advance(delta_time)
        return self.state

    def retarget(self, target: Any) -> None:
        """Redirect the animation; position and velocity carry over."""
        self.target = target

    def force(self) -> Any:
        return self.state.force(self.spring, self.target)

    def is_settled(self, epsilon: float = DEFAULT_EPSILON) -> bool:
        return self.state.is_settled(self.target, epsilon)

    def get_evolution(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Recorded motion as arrays.

        Returns:
            Tuple of (times, values, velocities). ``times`` has shape (T,);
            values and velocities have shape (T,) for scalars or (T, n) for
            n-component values.
        """
        times = np.array([s.time for s in self.states])
        values = np.array([np.asarray(s.value, dtype=float) for s in self.states])
        velocities = np.array([np.asarray(s.velocity, dtype=float) for s in self.states])
        return times, values, velocities

    def __len__(self) -> int:
        """Number of recorded states."""
        return len(self.states)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self.states)} states, t={self.state.time:.3f})"
