"""
Spring dynamics.

The canonical spring model, its motion equations, settling-duration tuning
and frame-by-frame integration.
"""

from .spring import Spring
from .root_finding import find_root, solve_settling_parameters
from .state import SpringAnimation, SpringState
from .analysis import analyze_motion, regime, sample_motion

__all__ = [
    'Spring',
    'SpringAnimation',
    'SpringState',
    'analyze_motion',
    'find_root',
    'regime',
    'sample_motion',
    'solve_settling_parameters',
]
