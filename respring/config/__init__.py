"""
Spring configuration.

Parameter schemas for each way of tuning a spring, and JSON config loading.
"""

from .params import (
    PARAMS_BY_KIND,
    PRESETS,
    DurationBounceParams,
    MassStiffnessDampingParams,
    PresetParams,
    ResponseDampingRatioParams,
    SettlingDurationParams,
    SpringParams,
    load_spring_config,
    params_from_dict,
    spring_from_dict,
)

__all__ = [
    "PARAMS_BY_KIND",
    "PRESETS",
    "DurationBounceParams",
    "MassStiffnessDampingParams",
    "PresetParams",
    "ResponseDampingRatioParams",
    "SettlingDurationParams",
    "SpringParams",
    "load_spring_config",
    "params_from_dict",
    "spring_from_dict",
]
