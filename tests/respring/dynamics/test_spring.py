"""
Tests for the spring model.

Tests for respring/dynamics/spring.py
"""

from __future__ import annotations

import dataclasses
import math

import numpy as np
import pytest

from respring.common import AnimatableVector
from respring.dynamics.spring import Spring

TAU = 2 * math.pi


class TestCanonicalConstruction:
    """Test direct construction and the duration/bounce constructor."""

    def test_new_sets_fields(self):
        """Test new stores parameters unchanged."""
        spring = Spring.new(1.5, 2.5, 3.0)

        assert spring.angular_frequency == 1.5
        assert spring.decay_constant == 2.5
        assert spring.mass == 3.0

    def test_default_is_smooth(self):
        """Test default spring matches the smooth preset."""
        assert Spring() == Spring.smooth()

    def test_critical_duration_bounce(self):
        """Test zero bounce gives a critically damped spring."""
        spring = Spring.with_duration_bounce(1.0, 0.0)

        assert spring.angular_frequency == 0.0
        assert spring.decay_constant == pytest.approx(TAU)
        assert spring.mass == 1.0

    def test_positive_bounce_is_underdamped(self):
        """Test positive bounce gives positive angular frequency."""
        spring = Spring.with_duration_bounce(0.7, 0.2)

        assert spring.angular_frequency == pytest.approx(math.sqrt(1 - 0.8**2) * TAU / 0.7)
        assert spring.decay_constant == pytest.approx(0.8 * TAU / 0.7)

    def test_negative_bounce_is_overdamped(self):
        """Test negative bounce gives negative angular frequency."""
        spring = Spring.with_duration_bounce(0.7, -0.2)
        damping_ratio = 1 / 0.8

        assert spring.angular_frequency == pytest.approx(
            -math.sqrt(damping_ratio**2 - 1) * TAU / 0.7
        )
        assert spring.decay_constant == pytest.approx(damping_ratio * TAU / 0.7)

    def test_bounce_above_one_is_undamped(self):
        """Test bounce past 1 behaves as undamped oscillation."""
        spring = Spring.with_duration_bounce(0.3, 1.2)

        assert spring.decay_constant == 0.0
        assert spring.angular_frequency == pytest.approx(TAU / 0.3)
        assert spring.bounce == pytest.approx(1.0)

    def test_bounce_below_minus_one_is_degenerate(self):
        """Test infinite damping ratio produces non-finite accessors."""
        spring = Spring.with_duration_bounce(0.7, -1.2)

        assert spring.angular_frequency == -math.inf
        assert spring.decay_constant == math.inf
        assert math.isnan(spring.bounce)
        assert math.isnan(spring.duration)

    def test_zero_duration_does_not_raise(self):
        """Test zero duration propagates infinities."""
        spring = Spring.with_duration_bounce(0.0, 0.2)

        assert math.isinf(spring.angular_frequency)
        assert math.isinf(spring.decay_constant)

    def test_with_duration(self):
        """Test with_duration is zero bounce."""
        assert Spring.with_duration(0.4) == Spring.with_duration_bounce(0.4, 0.0)


class TestDurationBounceRoundTrip:
    """Test duration and bounce accessors invert the constructor."""

    @pytest.mark.parametrize(
        "duration,bounce",
        [
            (0.7, 0.2),
            (0.3, 0.9),
            (1.5, 1.0),
            (0.5, 0.0),
            (0.7, -0.2),
            (2.0, -0.8),
        ],
    )
    def test_round_trip(self, duration, bounce):
        """Test round trip within tight tolerance."""
        spring = Spring.with_duration_bounce(duration, bounce)

        assert spring.duration == pytest.approx(duration, rel=1e-9)
        assert spring.bounce == pytest.approx(bounce, rel=1e-9, abs=1e-12)


class TestResponseDampingRatio:
    """Test response/damping ratio constructor and accessors."""

    @pytest.mark.parametrize(
        "response,damping_ratio",
        [(0.4, 0.8), (0.2, 1.8), (1.0, 1.0), (0.5, 0.3), (1.3, -0.1)],
    )
    def test_round_trip(self, response, damping_ratio):
        """Test response and damping ratio survive a round trip."""
        spring = Spring.with_response_damping_ratio(response, damping_ratio)

        assert spring.response == pytest.approx(response, rel=1e-9)
        assert spring.damping_ratio == pytest.approx(damping_ratio, rel=1e-9)

    def test_regime_sign(self):
        """Test overdamped ratios give negative angular frequency."""
        assert Spring.with_response_damping_ratio(0.5, 0.5).angular_frequency > 0
        assert Spring.with_response_damping_ratio(0.5, 1.0).angular_frequency == 0
        assert Spring.with_response_damping_ratio(0.5, 1.5).angular_frequency < 0

    def test_unit_mass(self):
        """Test response constructor produces unit mass."""
        assert Spring.with_response_damping_ratio(0.4, 0.8).mass == 1.0


class TestMassStiffnessDamping:
    """Test mass/stiffness/damping constructor and accessors."""

    @pytest.mark.parametrize(
        "mass,stiffness,damping", [(1.0, 0.5, 0.7), (0.6, 120.0, 1.1), (2.0, 300.0, 20.0)]
    )
    @pytest.mark.parametrize("allow_over_damping", [False, True])
    def test_underdamped_round_trip(self, mass, stiffness, damping, allow_over_damping):
        """Test stiffness and damping survive a round trip."""
        spring = Spring.with_mass_stiffness_damping(mass, stiffness, damping, allow_over_damping)

        assert spring.mass == mass
        assert spring.stiffness == pytest.approx(stiffness, rel=1e-9)
        assert spring.damping == pytest.approx(damping, rel=1e-9)

    def test_overdamping_disallowed_is_critical(self):
        """Test overdamped inputs fall back to critical damping."""
        spring = Spring.with_mass_stiffness_damping(0.6, 0.1, 10.0)

        assert spring.angular_frequency == 0.0
        assert spring.decay_constant == pytest.approx(math.sqrt(0.1 / 0.6))

    def test_overdamping_allowed(self):
        """Test overdamped inputs keep their damping when allowed."""
        spring = Spring.with_mass_stiffness_damping(0.6, 0.1, 10.0, allow_over_damping=True)

        assert spring.angular_frequency < 0.0
        assert spring.decay_constant == pytest.approx(10.0 / 1.2)
        assert spring.damping == pytest.approx(10.0)

    def test_zero_mass_is_nan(self):
        """Test zero mass yields NaN accessors instead of raising."""
        spring = Spring.with_mass_stiffness_damping(0.0, 50.0, 0.4)

        assert math.isnan(spring.stiffness)
        assert math.isnan(spring.damping)

    def test_accessors_from_duration(self):
        """Test stiffness and damping of a critical unit spring."""
        spring = Spring.with_duration_bounce(1.0, 0.0)

        assert spring.stiffness == pytest.approx(TAU**2)
        assert spring.damping == pytest.approx(2 * TAU)


class TestSettlingDurationConstructor:
    """Test the settling-duration constructor."""

    def test_critical_settles_at_duration(self):
        """Test a critically damped spring reaches epsilon at the duration."""
        spring = Spring.with_settling_duration_damping_ratio(0.5, 1.0)

        assert spring.angular_frequency == 0.0
        assert spring.mass == 1.0
        distance = abs(1.0 - spring.value(1.0, 0.0, 0.5))
        assert distance == pytest.approx(0.001, rel=0.1)

    def test_underdamped_keeps_damping_ratio(self):
        """Test underdamped solution has the requested damping ratio."""
        spring = Spring.with_settling_duration_damping_ratio(1.0, 0.5)

        assert spring.angular_frequency > 0.0
        assert spring.damping_ratio == pytest.approx(0.5, rel=1e-9)

    def test_duration_is_clamped(self):
        """Test durations beyond 10 seconds are clamped."""
        assert Spring.with_settling_duration_damping_ratio(
            100.0, 1.0
        ) == Spring.with_settling_duration_damping_ratio(10.0, 1.0)

    def test_damping_ratio_is_clamped(self):
        """Test damping ratios above 1 are clamped."""
        assert Spring.with_settling_duration_damping_ratio(
            0.5, 2.0
        ) == Spring.with_settling_duration_damping_ratio(0.5, 1.0)

    def test_zero_damping_ratio_does_not_raise(self):
        """Test degenerate damping ratio returns a spring."""
        spring = Spring.with_settling_duration_damping_ratio(0.5, 0.0)

        assert spring.mass == 1.0

    def test_longer_duration_is_slower(self):
        """Test longer settling durations decay more slowly."""
        fast = Spring.with_settling_duration_damping_ratio(0.3, 1.0)
        slow = Spring.with_settling_duration_damping_ratio(1.2, 1.0)

        assert slow.decay_constant < fast.decay_constant


class TestMotion:
    """Test value and velocity evaluation."""

    def test_value_starts_at_zero(self, any_spring):
        """Test the motion starts at zero displacement."""
        assert any_spring.value(1.0, 0.0, 0.0) == pytest.approx(0.0, abs=1e-12)

    def test_velocity_starts_at_initial_velocity(self, any_spring):
        """Test velocity at time zero is the initial velocity."""
        assert any_spring.velocity(1.0, 2.5, 0.0) == pytest.approx(2.5, abs=1e-9)

    def test_value_reaches_target(self, any_spring):
        """Test the value approaches the target."""
        assert any_spring.value(1.0, 0.0, 20.0) == pytest.approx(1.0, abs=1e-9)
        assert any_spring.velocity(1.0, 0.0, 20.0) == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("time", [0.05, 0.3, 1.0])
    def test_velocity_is_derivative_of_value(self, any_spring, numerical_derivative, time):
        """Test velocity matches a finite difference of value."""

        def position(t):
            return any_spring.value(1.0, 2.0, t)

        expected = numerical_derivative(position, time)
        assert any_spring.velocity(1.0, 2.0, time) == pytest.approx(expected, rel=1e-5, abs=1e-6)

    def test_concrete_scenario(self):
        """Test explicit canonical spring from rest."""
        spring = Spring.new(TAU, TAU, 1.0)

        assert spring.value(1.0, 0.0, 0.0) == 0.0
        assert spring.value(1.0, 0.0, 50.0) == pytest.approx(1.0)

    @pytest.mark.parametrize("duration", [0.3, 0.5, 1.0])
    def test_with_duration_converges_by_duration(self, duration):
        """Test a duration-tuned spring is close to target after its duration."""
        spring = Spring.with_duration(duration)

        assert abs(spring.value(1.0, 0.0, duration) - 1.0) < 0.02

    def test_underdamped_overshoots(self, underdamped_spring):
        """Test a bouncy spring passes its target."""
        times = np.linspace(0.0, 2.0, 400)
        values = [underdamped_spring.value(1.0, 0.0, t) for t in times]

        assert max(values) > 1.0

    @pytest.mark.parametrize("bounce", [0.0, -0.3, -0.7])
    def test_monotonic_envelope_without_oscillation(self, bounce):
        """Test distance to target never grows for non-oscillating springs."""
        spring = Spring.with_duration_bounce(0.6, bounce)
        times = np.linspace(0.0, 3.0, 301)
        distances = np.array([abs(spring.value(1.0, 0.0, t) - 1.0) for t in times])

        assert np.all(np.diff(distances) <= 1e-12)

    def test_negative_time_is_defined(self, any_spring):
        """Test negative times evaluate without error."""
        assert math.isfinite(any_spring.value(1.0, 0.0, -0.5))
        assert math.isfinite(any_spring.velocity(1.0, 0.0, -0.5))

    def test_missing_initial_velocity_is_zero(self, any_spring):
        """Test None initial velocity behaves as zero."""
        assert any_spring.value(1.0, None, 0.2) == any_spring.value(1.0, 0.0, 0.2)
        assert any_spring.velocity(1.0, None, 0.2) == any_spring.velocity(1.0, 0.0, 0.2)

    def test_vector_matches_components(self, any_spring, vector_target, assert_array_close):
        """Test vector motion is component-wise scalar motion."""
        result = any_spring.value(vector_target, None, 0.15)
        expected = [any_spring.value(c, 0.0, 0.15) for c in vector_target]

        assert isinstance(result, AnimatableVector)
        assert_array_close(result, expected)

    def test_numpy_target(self, any_spring, assert_array_close):
        """Test numpy arrays animate component-wise."""
        target = np.array([2.0, -1.0])
        velocity = np.array([0.5, 0.0])

        result = any_spring.velocity(target, velocity, 0.1)
        expected = [
            any_spring.velocity(2.0, 0.5, 0.1),
            any_spring.velocity(-1.0, 0.0, 0.1),
        ]
        assert_array_close(result, expected)


class TestUpdate:
    """Test incremental per-frame updates."""

    def test_update_matches_closed_form(self, any_spring):
        """Test one update from rest equals value/velocity at that time."""
        value, velocity = any_spring.update(0.0, 0.0, 1.0, 0.25)

        assert value == pytest.approx(any_spring.value(1.0, 0.0, 0.25))
        assert velocity == pytest.approx(any_spring.velocity(1.0, 0.0, 0.25))

    def test_step_size_independent(self, any_spring):
        """Test two half steps equal one full step for a constant target."""
        full_value, full_velocity = any_spring.update(0.2, 1.0, 1.0, 0.3)

        value, velocity = any_spring.update(0.2, 1.0, 1.0, 0.15)
        value, velocity = any_spring.update(value, velocity, 1.0, 0.15)

        assert value == pytest.approx(full_value, rel=1e-9, abs=1e-12)
        assert velocity == pytest.approx(full_velocity, rel=1e-9, abs=1e-12)

    def test_update_does_not_mutate_inputs(self, critical_spring):
        """Test array inputs are left untouched."""
        value = np.array([0.0, 0.0])
        velocity = np.array([0.0, 0.0])

        new_value, new_velocity = critical_spring.update(value, velocity, np.array([1.0, 2.0]), 0.1)

        np.testing.assert_array_equal(value, [0.0, 0.0])
        np.testing.assert_array_equal(velocity, [0.0, 0.0])
        assert new_value[1] > new_value[0] > 0.0

    def test_frame_loop_converges(self, any_spring):
        """Test sixty-hertz frames reach the target."""
        value, velocity = 0.0, 0.0
        for _ in range(600):
            value, velocity = any_spring.update(value, velocity, 3.0, 1 / 60)

        assert value == pytest.approx(3.0, abs=1e-6)


class TestForce:
    """Test force computation."""

    def test_force_at_rest_is_zero(self, any_spring, vector_target):
        """Test no displacement and no velocity gives no force."""
        assert any_spring.force(1.7, 1.7, 0.0) == 0.0

        force = any_spring.force(vector_target, vector_target, vector_target.zero_like())
        assert force.magnitude_squared() == 0.0

    def test_spring_force_is_stiffness(self, any_spring):
        """Test unit displacement at rest gives stiffness."""
        assert any_spring.force(1.0, 0.0, 0.0) == pytest.approx(any_spring.stiffness)

    def test_damping_force_opposes_velocity(self, any_spring):
        """Test unit velocity at target gives negative damping."""
        assert any_spring.force(0.0, 0.0, 1.0) == pytest.approx(-any_spring.damping)

    def test_mass_scales_force(self):
        """Test force grows linearly with mass."""
        light = Spring.new(3.0, 2.0, 1.0)
        heavy = Spring.new(3.0, 2.0, 4.0)

        assert heavy.force(1.0, 0.0, 0.5) == pytest.approx(4.0 * light.force(1.0, 0.0, 0.5))

    @pytest.mark.parametrize("bounce", [0.3, 0.0])
    def test_force_is_acceleration(self, bounce, numerical_derivative):
        """Test force equals the acceleration of a unit-mass motion."""
        spring = Spring.with_duration_bounce(0.8, bounce)
        time = 0.2

        position = spring.value(1.0, 0.0, time)
        velocity = spring.velocity(1.0, 0.0, time)
        acceleration = numerical_derivative(lambda t: spring.velocity(1.0, 0.0, t), time)

        assert spring.force(1.0, position, velocity) == pytest.approx(
            acceleration, rel=1e-5, abs=1e-5
        )


class TestSettlingDuration:
    """Test settling duration estimation."""

    def test_smooth_settling_duration(self):
        """Test smooth preset settles shortly after its duration."""
        settling = Spring.smooth().settling_duration()

        assert math.isfinite(settling)
        assert 0.5 <= settling <= 1.0

    def test_undamped_never_settles(self):
        """Test zero decay never settles."""
        assert Spring.with_duration_bounce(0.5, 1.0).settling_duration() == math.inf

    def test_underdamped_closed_form(self, underdamped_spring):
        """Test underdamped settling uses the envelope bound."""
        decay = underdamped_spring.decay_constant
        magnitude = abs(2.0 * decay - 0.5) + 2.0
        expected = -math.log(0.001 / magnitude) / decay

        assert underdamped_spring.settling_duration_with_velocity(
            2.0, 0.5, 0.001
        ) == pytest.approx(expected)

    def test_underdamped_zero_target_is_zero(self, underdamped_spring):
        """Test nothing to animate settles immediately."""
        assert underdamped_spring.settling_duration_with_velocity(0.0, 0.0, 0.001) == 0.0

    def test_search_result_stays_settled(self, critical_spring):
        """Test the value stays within epsilon after the searched time."""
        settling = critical_spring.settling_duration()

        for t in np.linspace(settling, settling + 2.0, 50):
            assert abs(critical_spring.value(1.0, 0.0, t) - 1.0) < 0.001

    def test_search_is_on_grid(self, overdamped_spring):
        """Test the numerical search reports a multiple of its step."""
        settling = overdamped_spring.settling_duration()

        assert settling > 0.0
        assert settling / 0.1 == pytest.approx(round(settling / 0.1), abs=1e-6)

    def test_search_exhausted_returns_zero(self):
        """Test a spring too slow to confirm settling returns 0."""
        assert Spring.new(0.0, 0.001, 1.0).settling_duration() == 0.0

    def test_non_finite_motion_returns_zero(self):
        """Test NaN distances abort the search."""
        assert Spring.new(0.0, math.inf, 1.0).settling_duration() == 0.0

    def test_vector_settling(self, critical_spring, vector_target):
        """Test vector targets settle no sooner than unit scalars."""
        scalar = critical_spring.settling_duration()
        vector = critical_spring.settling_duration_with_velocity(
            vector_target, vector_target.zero_like(), 0.001
        )

        assert vector >= scalar


class TestPresets:
    """Test named presets."""

    @pytest.mark.parametrize(
        "factory,bounce",
        [(Spring.smooth, 0.0), (Spring.snappy, 0.15), (Spring.bouncy, 0.3)],
    )
    def test_fixed_presets(self, factory, bounce):
        """Test presets use half-second duration and base bounce."""
        spring = factory()

        assert spring.duration == pytest.approx(0.5)
        assert spring.bounce == pytest.approx(bounce, abs=1e-12)

    @pytest.mark.parametrize(
        "factory,base",
        [
            (Spring.smooth_with_duration, 0.0),
            (Spring.snappy_with_duration, 0.15),
            (Spring.bouncy_with_duration, 0.3),
        ],
    )
    def test_tunable_presets(self, factory, base):
        """Test extra bounce adds to the base bounce."""
        spring = factory(0.8, 0.1)

        assert spring == Spring.with_duration_bounce(0.8, base + 0.1)
        assert spring.duration == pytest.approx(0.8)

    def test_tunable_defaults(self):
        """Test tunable presets default to the fixed presets."""
        assert Spring.snappy_with_duration() == Spring.snappy()


class TestValueSemantics:
    """Test Spring behaves as an immutable value."""

    def test_frozen(self):
        """Test fields cannot be reassigned."""
        spring = Spring.smooth()

        with pytest.raises(dataclasses.FrozenInstanceError):
            spring.mass = 2.0

    def test_hashable(self):
        """Test equal springs hash equally."""
        assert len({Spring(), Spring.smooth(), Spring.snappy()}) == 2
