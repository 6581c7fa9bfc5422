"""
Spring parameter schemas and config loading.

Each schema mirrors one ``Spring`` constructor. Config files are JSON, either
a single spring object or a mapping of named springs:

    {"springs": {"menu": {"kind": "preset", "name": "snappy"},
                 "drawer": {"kind": "duration_bounce", "duration": 0.4, "bounce": 0.1}}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Callable, ClassVar, Dict, Mapping, Type, Union

from respring.common.constants import DEFAULT_DURATION, DEFAULT_EPSILON
from respring.common.schema_utils import SchemaClass
from respring.dynamics.spring import Spring

logger = logging.getLogger(__name__)


@dataclass
class SpringParams(SchemaClass):
    kind: ClassVar[str] = ""

    def build(self) -> Spring:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **super().to_dict()}


@dataclass
class DurationBounceParams(SpringParams):
    kind: ClassVar[str] = "duration_bounce"

    duration: float = DEFAULT_DURATION
    bounce: float = 0.0

    def build(self) -> Spring:
        return Spring.with_duration_bounce(self.duration, self.bounce)


@dataclass
class ResponseDampingRatioParams(SpringParams):
    kind: ClassVar[str] = "response_damping_ratio"

    response: float = DEFAULT_DURATION
    damping_ratio: float = 1.0

    def build(self) -> Spring:
        return Spring.with_response_damping_ratio(self.response, self.damping_ratio)


@dataclass
class MassStiffnessDampingParams(SpringParams):
    kind: ClassVar[str] = "mass_stiffness_damping"

    mass: float = 1.0
    stiffness: float = 100.0
    damping: float = 10.0
    allow_over_damping: bool = False

    def build(self) -> Spring:
        return Spring.with_mass_stiffness_damping(
            self.mass, self.stiffness, self.damping, self.allow_over_damping
        )


@dataclass
class SettlingDurationParams(SpringParams):
    kind: ClassVar[str] = "settling_duration"

    settling_duration: float = DEFAULT_DURATION
    damping_ratio: float = 1.0
    epsilon: float = DEFAULT_EPSILON

    def build(self) -> Spring:
        return Spring.with_settling_duration_damping_ratio(
            self.settling_duration, self.damping_ratio, self.epsilon
        )


PRESETS: Dict[str, Callable[[float, float], Spring]] = {
    "smooth": Spring.smooth_with_duration,
    "snappy": Spring.snappy_with_duration,
    "bouncy": Spring.bouncy_with_duration,
}


@dataclass
class PresetParams(SpringParams):
    kind: ClassVar[str] = "preset"

    name: str = "smooth"
    duration: float = DEFAULT_DURATION
    extra_bounce: float = 0.0

    def build(self) -> Spring:
        if self.name not in PRESETS:
            raise ValueError(
                f"Unknown spring preset: {self.name!r} (expected one of {sorted(PRESETS)})"
            )
        return PRESETS[self.name](self.duration, self.extra_bounce)


PARAMS_BY_KIND: Dict[str, Type[SpringParams]] = {
    cls.kind: cls
    for cls in (
        DurationBounceParams,
        ResponseDampingRatioParams,
        MassStiffnessDampingParams,
        SettlingDurationParams,
        PresetParams,
    )
}


def params_from_dict(data: Mapping[str, Any]) -> SpringParams:
    """
    Parse a parameter schema from a mapping with a ``kind`` key.

    Raises:
        ValueError: If the kind is missing or unknown, or a field is not
            accepted by that kind
    """
    values = dict(data)
    kind = values.pop("kind", None)
    if kind is None:
        raise ValueError(f"Spring config is missing 'kind' (one of {sorted(PARAMS_BY_KIND)})")
    if kind not in PARAMS_BY_KIND:
        raise ValueError(f"Unknown spring kind: {kind!r} (expected one of {sorted(PARAMS_BY_KIND)})")

    params_cls = PARAMS_BY_KIND[kind]
    accepted = {f.name for f in fields(params_cls)}
    unknown = sorted(set(values) - accepted)
    if unknown:
        raise ValueError(f"Unknown field(s) for {kind!r} spring: {', '.join(unknown)}")

    return params_cls(**values)


def spring_from_dict(data: Mapping[str, Any]) -> Spring:
    """Build a ``Spring`` from a config mapping."""
    return params_from_dict(data).build()


def load_spring_config(path: Union[str, Path]) -> Dict[str, Spring]:
    """
    Load springs from a JSON config file.

    Args:
        path: File holding a single spring object or ``{"springs": {...}}``

    Returns:
        Mapping of spring name to ``Spring``; a single-object file yields
        the name ``"default"``
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Spring config {path} must contain a JSON object")

    if "springs" in data:
        entries = data["springs"]
        if not isinstance(entries, dict):
            raise ValueError(f"'springs' in {path} must map names to spring objects")
    else:
        entries = {"default": data}

    springs = {name: spring_from_dict(entry) for name, entry in entries.items()}
    logger.info(f"Loaded {len(springs)} spring(s) from {path}")
    return springs
