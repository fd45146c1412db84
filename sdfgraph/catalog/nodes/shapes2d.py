"""2D primitive shapes."""

from sdfgraph.catalog.types import (
    NodeDefinition, GlslCode, ModTarget, SHAPE_2D,
    float_param, vec2_param,
)

circle = NodeDefinition(
    id="circle",
    name="Circle",
    category=SHAPE_2D,
    coord_space="2d",
    description="A simple circle/disk primitive",
    tags=("disk", "round"),
    parameters=(float_param("radius", "Radius", 0.5, 0.0, 2.0),),
    mod_targets=(ModTarget("radius", 0.0, 2.0),),
    glsl=GlslCode(
        "float sdCircle(vec2 p, float r)",
        "return length(p) - r;",
    ),
)

rect = NodeDefinition(
    id="rect",
    name="Rectangle",
    category=SHAPE_2D,
    coord_space="2d",
    description="A box/rectangle with half-extents",
    tags=("box", "square"),
    parameters=(vec2_param("size", "Size", (0.5, 0.3), min=0.0, max=2.0),),
    mod_targets=(ModTarget("size", 0.0, 2.0),),
    glsl=GlslCode(
        "float sdBox(vec2 p, vec2 b)",
        "vec2 d = abs(p) - b;\n"
        "return length(max(d, 0.0)) + min(max(d.x, d.y), 0.0);",
    ),
)

rounded_rect = NodeDefinition(
    id="rounded-rect",
    name="Rounded Rectangle",
    category=SHAPE_2D,
    coord_space="2d",
    description="A rectangle with rounded corners",
    tags=("box", "round"),
    parameters=(
        vec2_param("size", "Size", (0.5, 0.3), min=0.0, max=2.0),
        float_param("radius", "Corner Radius", 0.1, 0.0, 1.0),
    ),
    mod_targets=(ModTarget("size", 0.0, 2.0), ModTarget("radius", 0.0, 1.0)),
    glsl=GlslCode(
        "float sdRoundedBox(vec2 p, vec2 b, float r)",
        "vec2 q = abs(p) - b + r;\n"
        "return length(max(q, 0.0)) + min(max(q.x, q.y), 0.0) - r;",
    ),
)

segment = NodeDefinition(
    id="segment",
    name="Line Segment",
    category=SHAPE_2D,
    coord_space="2d",
    description="A line segment with rounded caps (capsule)",
    tags=("line", "capsule"),
    parameters=(
        vec2_param("a", "Point A", (-0.4, -0.4), min=-1.0, max=1.0),
        vec2_param("b", "Point B", (0.4, 0.4), min=-1.0, max=1.0),
        float_param("thickness", "Thickness", 0.05, 0.0, 0.5),
    ),
    mod_targets=(ModTarget("thickness", 0.0, 0.5),),
    glsl=GlslCode(
        "float sdSegment(vec2 p, vec2 a, vec2 b, float th)",
        "vec2 pa = p - a, ba = b - a;\n"
        "float h = clamp(dot(pa, ba) / dot(ba, ba), 0.0, 1.0);\n"
        "return length(pa - ba * h) - th;",
    ),
)

hexagon = NodeDefinition(
    id="hexagon",
    name="Hexagon",
    category=SHAPE_2D,
    coord_space="2d",
    description="A regular hexagon",
    parameters=(float_param("radius", "Radius", 0.4, 0.0, 2.0),),
    mod_targets=(ModTarget("radius", 0.0, 2.0),),
    glsl=GlslCode(
        "float sdHexagon(vec2 p, float r)",
        "const vec3 k = vec3(-0.866025404, 0.5, 0.577350269);\n"
        "p = abs(p);\n"
        "p -= 2.0 * min(dot(k.xy, p), 0.0) * k.xy;\n"
        "p -= vec2(clamp(p.x, -k.z * r, k.z * r), r);\n"
        "return length(p) * sign(p.y);",
    ),
)

triangle = NodeDefinition(
    id="triangle",
    name="Triangle",
    category=SHAPE_2D,
    coord_space="2d",
    description="Equilateral triangle",
    parameters=(float_param("radius", "Radius", 0.5, 0.0, 2.0),),
    mod_targets=(ModTarget("radius", 0.0, 2.0),),
    glsl=GlslCode(
        "float sdTriangle(vec2 p, float r)",
        "const float k = 1.7320508;\n"
        "p.x = abs(p.x) - r;\n"
        "p.y = p.y + r / k;\n"
        "if (p.x + k * p.y > 0.0) p = vec2(p.x - k * p.y, -k * p.x - p.y) / 2.0;\n"
        "p.x -= clamp(p.x, -2.0 * r, 0.0);\n"
        "return -length(p) * sign(p.y);",
    ),
)

ring = NodeDefinition(
    id="ring",
    name="Ring",
    category=SHAPE_2D,
    coord_space="2d",
    description="An annulus with radius and band width",
    tags=("annulus", "donut"),
    parameters=(
        float_param("radius", "Radius", 0.5, 0.0, 2.0),
        float_param("width", "Width", 0.05, 0.0, 0.5),
    ),
    mod_targets=(ModTarget("radius", 0.0, 2.0), ModTarget("width", 0.0, 0.5)),
    glsl=GlslCode(
        "float sdRing(vec2 p, float r, float w)",
        "return abs(length(p) - r) - w;",
    ),
)

ALL_SHAPES_2D = (circle, rect, rounded_rect, segment, hexagon, triangle, ring)
