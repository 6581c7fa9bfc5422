"""
Dataclass schemas with stable identities.

Parameter sets are plain dataclasses; ``SchemaClass`` gives them a
deterministic content id, a JSON rendering and copy-on-assign semantics.
"""

import copy
import hashlib
import json
import math
from dataclasses import asdict, dataclass, fields, is_dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any, Dict


def _qfloat(x: float, places: int = 8) -> float:
    # stable decimal rounding: converts via str -> Decimal -> quantize
    q = Decimal(1) / (Decimal(10) ** places)
    d = Decimal(str(x)).quantize(q, rounding=ROUND_HALF_EVEN)
    # normalize -0.0 to 0.0
    f = float(d)
    return 0.0 if f == 0.0 else f


def _canon(obj: Any, places: int = 8):
    if isinstance(obj, float):
        if math.isnan(obj):
            return "NaN"
        if math.isinf(obj):
            return "Infinity" if obj > 0 else "-Infinity"
        return _qfloat(obj, places)
    if is_dataclass(obj):
        return _canon(asdict(obj), places)
    if isinstance(obj, dict):
        return {k: _canon(v, places) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_canon(v, places) for v in obj]
    return obj


def deterministic_id_from_dataclass(
    data_class_obj: Any, places: int = 8, digest_bytes: int = 16
) -> str:
    canonical = _canon(data_class_obj, places)
    payload = json.dumps(
        canonical,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    h = hashlib.blake2b(payload.encode("utf-8"), digest_size=digest_bytes)
    return h.hexdigest()


@dataclass
class SchemaClass:
    # Equal values always share an id
    def get_id(self) -> str:
        return deterministic_id_from_dataclass(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        return json.dumps(_canon(self.to_dict()), indent=4)

    # Schemas own their values; callers mutating what they passed in
    # must not leak into a stored parameter set
    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, copy.deepcopy(getattr(self, f.name)))

    def __copy__(self):
        return self.__deepcopy__({})

    def __deepcopy__(self, memo):
        cls = self.__class__
        kwargs = {
            f.name: copy.deepcopy(getattr(self, f.name), memo) for f in fields(self)
        }
        return cls(**kwargs)

    def __setattr__(self, name, value):
        super().__setattr__(name, copy.deepcopy(value))
