"""Boolean and distance-modifying operations."""

from sdfgraph.catalog.types import (
    NodeDefinition, GlslCode, ModTarget, OPERATION, float_param,
)


def _binary(id, name, signature, body, description, parameters=(), mod_targets=(), tags=()):
    return NodeDefinition(
        id=id,
        name=name,
        category=OPERATION,
        coord_space="both",
        inputs=2,
        description=description,
        tags=tags,
        parameters=parameters,
        mod_targets=mod_targets,
        glsl=GlslCode(signature, body),
    )


def _smoothness():
    return (float_param("k", "Smoothness", 0.1, 0.01, 1.0),), (ModTarget("k", 0.01, 1.0),)


union = _binary(
    "union", "Union",
    "float opUnion(float d1, float d2)",
    "return min(d1, d2);",
    "Combine two shapes (A + B)",
    tags=("combine", "add"),
)

subtract = _binary(
    "subtract", "Subtract",
    "float opSubtract(float d1, float d2)",
    "return max(d1, -d2);",
    "Subtract shape B from A",
    tags=("difference", "cut"),
)

intersect = _binary(
    "intersect", "Intersect",
    "float opIntersect(float d1, float d2)",
    "return max(d1, d2);",
    "Intersection of A and B",
)

xor = _binary(
    "xor", "XOR",
    "float opXor(float d1, float d2)",
    "return max(min(d1, d2), -max(d1, d2));",
    "Exclusive OR - keeps non-overlapping parts",
    tags=("exclusive", "symmetric difference"),
)

smooth_union = _binary(
    "smooth-union", "Smooth Union",
    "float opSmoothUnion(float d1, float d2, float k)",
    "float h = clamp(0.5 + 0.5 * (d2 - d1) / k, 0.0, 1.0);\n"
    "return mix(d2, d1, h) - k * h * (1.0 - h);",
    "Smoothly combine two shapes",
    *_smoothness(),
    tags=("blend", "combine"),
)

smooth_subtract = _binary(
    "smooth-subtract", "Smooth Subtract",
    "float opSmoothSubtract(float d1, float d2, float k)",
    "float h = clamp(0.5 - 0.5 * (d2 + d1) / k, 0.0, 1.0);\n"
    "return mix(d1, -d2, h) + k * h * (1.0 - h);",
    "Smoothly subtract B from A",
    *_smoothness(),
)

smooth_intersect = _binary(
    "smooth-intersect", "Smooth Intersect",
    "float opSmoothIntersect(float d1, float d2, float k)",
    "float h = clamp(0.5 - 0.5 * (d2 - d1) / k, 0.0, 1.0);\n"
    "return mix(d2, d1, h) + k * h * (1.0 - h);",
    "Smoothly intersect A and B",
    *_smoothness(),
)

onion = NodeDefinition(
    id="onion",
    name="Onion / Shell",
    category=OPERATION,
    coord_space="both",
    inputs=1,
    description="Creates a hollow shell from any shape",
    tags=("shell", "hollow"),
    parameters=(float_param("thickness", "Thickness", 0.05, 0.001, 0.5),),
    mod_targets=(ModTarget("thickness", 0.001, 0.5),),
    glsl=GlslCode(
        "float opOnion(float d, float thickness)",
        "return abs(d) - thickness;",
    ),
)

round_ = NodeDefinition(
    id="round",
    name="Round",
    category=OPERATION,
    coord_space="both",
    inputs=1,
    description="Adds rounding to any shape",
    tags=("bevel", "fillet"),
    parameters=(float_param("radius", "Radius", 0.05, 0.0, 0.5),),
    mod_targets=(ModTarget("radius", 0.0, 0.5),),
    glsl=GlslCode(
        "float opRound(float d, float r)",
        "return d - r;",
    ),
)

ALL_OPERATIONS = (
    union, subtract, intersect, xor,
    smooth_union, smooth_subtract, smooth_intersect,
    onion, round_,
)
