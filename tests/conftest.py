"""
Pytest configuration and shared fixtures for respring tests.

Provides springs in each damping regime and numeric comparison helpers.
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from respring.common import AnimatableVector
from respring.dynamics.spring import Spring

# =============================================================================
# Spring Fixtures
# =============================================================================


@pytest.fixture
def underdamped_spring() -> Spring:
    """Bouncy spring (positive angular frequency)."""
    return Spring.with_duration_bounce(0.7, 0.3)


@pytest.fixture
def critical_spring() -> Spring:
    """Critically damped spring (zero angular frequency)."""
    return Spring.with_duration_bounce(1.0, 0.0)


@pytest.fixture
def overdamped_spring() -> Spring:
    """Overdamped spring (negative angular frequency)."""
    return Spring.with_duration_bounce(0.7, -0.4)


@pytest.fixture(params=["underdamped", "critical", "overdamped"])
def any_spring(request) -> Spring:
    """Spring in each damping regime."""
    return {
        "underdamped": Spring.with_duration_bounce(0.7, 0.3),
        "critical": Spring.with_duration_bounce(1.0, 0.0),
        "overdamped": Spring.with_duration_bounce(0.7, -0.4),
    }[request.param]


# =============================================================================
# Value Fixtures
# =============================================================================


@pytest.fixture
def vector_target() -> AnimatableVector:
    """Three-component target."""
    return AnimatableVector([1.0, -2.0, 0.5])


# =============================================================================
# Numeric Test Utilities
# =============================================================================


@pytest.fixture
def assert_array_close():
    """Fixture for array comparison with tolerance."""

    def _assert_close(actual, expected, rtol=1e-9, atol=1e-12):
        np.testing.assert_allclose(
            np.asarray(actual, dtype=float), np.asarray(expected, dtype=float), rtol=rtol, atol=atol
        )

    return _assert_close


@pytest.fixture
def numerical_derivative():
    """Central difference of a scalar function of time."""

    def _derivative(fn, t, h=1e-6):
        return (fn(t + h) - fn(t - h)) / (2 * h)

    return _derivative


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
