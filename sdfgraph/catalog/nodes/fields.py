"""Procedural distance fields."""

from sdfgraph.catalog.types import (
    NodeDefinition, GlslCode, ModTarget, FIELD, float_param,
)

voronoi_2d = NodeDefinition(
    id="voronoi-2d",
    name="Voronoi 2D",
    category=FIELD,
    coord_space="2d",
    cost_tier="MED",
    description="Voronoi cell pattern as distance field",
    tags=("cells", "pattern", "organic"),
    parameters=(
        float_param("scale", "Scale", 5.0, 1.0, 30.0),
        float_param("thickness", "Edge Thickness", 0.02, 0.001, 0.2),
        float_param("jitter", "Jitter", 1.0, 0.0, 1.0),
        float_param("seed", "Seed", 0.0, 0.0, 100.0),
    ),
    mod_targets=(
        ModTarget("scale", 1.0, 30.0),
        ModTarget("thickness", 0.001, 0.2),
        ModTarget("jitter", 0.0, 1.0),
    ),
    glsl=GlslCode(
        "float fieldVoronoi2D(vec2 p, float scale, float thickness, float jitter, float seed)",
        """p *= scale;
vec2 n = floor(p);
vec2 f = fract(p);
float md = 8.0;
for (int j = -1; j <= 1; j++) {
  for (int i = -1; i <= 1; i++) {
    vec2 g = vec2(float(i), float(j));
    vec2 o = vec2(hash21(n + g + seed), hash21(n + g + seed + 13.7)) * jitter;
    vec2 r = g + o - f;
    md = min(md, dot(r, r));
  }
}
return sqrt(md) / scale - thickness;""",
        requires=("hash21",),
    ),
)

gyroid = NodeDefinition(
    id="gyroid",
    name="Gyroid",
    category=FIELD,
    coord_space="3d",
    description="Gyroid minimal surface",
    tags=("lattice", "minimal surface", "periodic"),
    parameters=(
        float_param("scale", "Scale", 4.0, 0.5, 15.0),
        float_param("thickness", "Thickness", 0.1, 0.01, 0.5),
    ),
    mod_targets=(ModTarget("scale", 0.5, 15.0), ModTarget("thickness", 0.01, 0.5)),
    glsl=GlslCode(
        "float fieldGyroid(vec3 p, float scale, float thickness)",
        "p *= scale;\n"
        "float g = sin(p.x) * cos(p.y) + sin(p.y) * cos(p.z) + sin(p.z) * cos(p.x);\n"
        "return abs(g) / scale - thickness;",
    ),
)

ALL_FIELDS = (voronoi_2d, gyroid)
