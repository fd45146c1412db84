"""3D primitive shapes."""

from sdfgraph.catalog.types import (
    NodeDefinition, GlslCode, ModTarget, SHAPE_3D,
    float_param, vec2_param, vec3_param,
)

sphere = NodeDefinition(
    id="sphere",
    name="Sphere",
    category=SHAPE_3D,
    coord_space="3d",
    description="A simple sphere",
    parameters=(float_param("radius", "Radius", 0.5, 0.0, 2.0),),
    mod_targets=(ModTarget("radius", 0.0, 2.0),),
    glsl=GlslCode(
        "float sdSphere(vec3 p, float s)",
        "return length(p) - s;",
    ),
)

box3d = NodeDefinition(
    id="box3d",
    name="Box",
    category=SHAPE_3D,
    coord_space="3d",
    description="A 3D box",
    parameters=(vec3_param("size", "Size", (0.5, 0.5, 0.5), min=0.0, max=2.0),),
    mod_targets=(ModTarget("size", 0.0, 2.0),),
    glsl=GlslCode(
        "float sdBox3D(vec3 p, vec3 b)",
        "vec3 q = abs(p) - b;\n"
        "return length(max(q, 0.0)) + min(max(q.x, max(q.y, q.z)), 0.0);",
    ),
)

torus = NodeDefinition(
    id="torus",
    name="Torus",
    category=SHAPE_3D,
    coord_space="3d",
    description="A doughnut shape",
    parameters=(
        vec2_param("size", "Size", (0.5, 0.2), min=0.0, max=2.0,
                   tooltip="x: radius, y: thickness"),
    ),
    mod_targets=(ModTarget("size", 0.0, 2.0),),
    glsl=GlslCode(
        "float sdTorus(vec3 p, vec2 t)",
        "vec2 q = vec2(length(p.xz) - t.x, p.y);\n"
        "return length(q) - t.y;",
    ),
)

cylinder = NodeDefinition(
    id="cylinder",
    name="Cylinder",
    category=SHAPE_3D,
    coord_space="3d",
    description="Capped cylinder",
    parameters=(
        float_param("height", "Height", 0.5, 0.0, 2.0),
        float_param("radius", "Radius", 0.25, 0.0, 2.0),
    ),
    mod_targets=(ModTarget("height", 0.0, 2.0), ModTarget("radius", 0.0, 2.0)),
    glsl=GlslCode(
        "float sdCappedCylinder(vec3 p, float h, float r)",
        "vec2 d = abs(vec2(length(p.xz), p.y)) - vec2(r, h);\n"
        "return min(max(d.x, d.y), 0.0) + length(max(d, 0.0));",
    ),
)

capsule = NodeDefinition(
    id="capsule",
    name="Capsule",
    category=SHAPE_3D,
    coord_space="3d",
    description="Vertical capsule",
    parameters=(
        float_param("height", "Height", 0.5, 0.0, 2.0),
        float_param("radius", "Radius", 0.2, 0.0, 1.0),
    ),
    mod_targets=(ModTarget("height", 0.0, 2.0), ModTarget("radius", 0.0, 1.0)),
    glsl=GlslCode(
        "float sdCapsule(vec3 p, float h, float r)",
        "p.y -= clamp(p.y, -h, h);\n"
        "return length(p) - r;",
    ),
)

ALL_SHAPES_3D = (sphere, box3d, torus, cylinder, capsule)
