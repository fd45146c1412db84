"""Node definition types for the SDF catalog."""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Union

ParamValue = Union[float, int, bool, tuple[float, ...]]

# Node categories
SHAPE_2D = "shape-2d"
SHAPE_3D = "shape-3d"
OPERATION = "operation"
DOMAIN_TRANSFORM = "domain-transform"
FIELD = "field"

CATEGORIES = (SHAPE_2D, SHAPE_3D, OPERATION, DOMAIN_TRANSFORM, FIELD)

COORD_SPACES = ("2d", "3d", "both")

COST_TIERS = ("LOW", "MED", "HIGH")

# Parameter semantic type -> GLSL uniform type
PARAM_GLSL_TYPES: dict[str, str] = {
    "float": "float",
    "angle": "float",
    "int": "int",
    "bool": "bool",
    "vec2": "vec2",
    "vec3": "vec3",
    "color": "vec4",
}

# GLSL type -> component count
GLSL_ARITY: dict[str, int] = {
    "float": 1, "int": 1, "bool": 1,
    "vec2": 2, "vec3": 3, "vec4": 4,
}


@dataclass(frozen=True)
class Parameter:
    id: str
    name: str
    type: str
    default: ParamValue
    min: float | None = None
    max: float | None = None
    step: float | None = None
    modulatable: bool = True
    tooltip: str = ""

    @property
    def glsl_type(self) -> str:
        return PARAM_GLSL_TYPES[self.type]

    @property
    def arity(self) -> int:
        return GLSL_ARITY[self.glsl_type]


@dataclass(frozen=True)
class ModTarget:
    parameter_id: str
    min_range: float = 0.0
    max_range: float = 1.0
    bipolar: bool = False
    curve: str = "linear"


@dataclass(frozen=True)
class GlslCode:
    signature: str       # e.g. "float sdCircle(vec2 p, float r)"
    body: str            # without braces
    requires: tuple[str, ...] = ()


@dataclass(frozen=True)
class NodeDefinition:
    id: str
    name: str
    category: str
    coord_space: str
    glsl: GlslCode
    parameters: tuple[Parameter, ...] = ()
    mod_targets: tuple[ModTarget, ...] = ()
    cost_tier: str = "LOW"
    inputs: int = 0
    version: str = "1.0.0"
    description: str = ""
    tags: tuple[str, ...] = ()
    deterministic: bool = True
    _param_index: dict[str, Parameter] = field(
        default_factory=dict, init=False, repr=False, compare=False,
    )

    def __post_init__(self):
        # frozen: populate the lookup table through object.__setattr__
        object.__setattr__(self, "_param_index", {p.id: p for p in self.parameters})

    def parameter(self, param_id: str) -> Parameter | None:
        return self._param_index.get(param_id)

    def defaults(self) -> dict[str, ParamValue]:
        return {p.id: p.default for p in self.parameters}


# ---------------------------------------------------------------------------
# Parameter factories
# ---------------------------------------------------------------------------

def float_param(id: str, name: str, default: float, min: float, max: float,
                **options) -> Parameter:
    options.setdefault("step", (max - min) / 100)
    return Parameter(id, name, "float", float(default), min=min, max=max, **options)


def angle_param(id: str, name: str, default: float = 0.0, **options) -> Parameter:
    options.setdefault("step", 0.01)
    return Parameter(id, name, "angle", float(default), min=0.0, max=math.tau, **options)


def int_param(id: str, name: str, default: int, min: int, max: int,
              **options) -> Parameter:
    return Parameter(id, name, "int", int(default), min=min, max=max, step=1, **options)


def bool_param(id: str, name: str, default: bool, **options) -> Parameter:
    return Parameter(id, name, "bool", bool(default), modulatable=False, **options)


def vec2_param(id: str, name: str, default: tuple[float, float], **options) -> Parameter:
    return Parameter(id, name, "vec2", tuple(float(v) for v in default), **options)


def vec3_param(id: str, name: str, default: tuple[float, float, float],
               **options) -> Parameter:
    return Parameter(id, name, "vec3", tuple(float(v) for v in default), **options)


def color_param(id: str, name: str, default: tuple[float, float, float, float],
                **options) -> Parameter:
    return Parameter(id, name, "color", tuple(float(v) for v in default),
                     min=0.0, max=1.0, **options)
