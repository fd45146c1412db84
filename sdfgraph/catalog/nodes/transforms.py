"""Domain transforms: nodes that rewrite the coordinate seen by their child."""

from sdfgraph.catalog.types import (
    NodeDefinition, GlslCode, ModTarget, DOMAIN_TRANSFORM,
    angle_param, float_param, vec2_param, vec3_param,
)


def _transform(id, name, coord_space, signature, body, description,
               parameters=(), mod_targets=(), requires=(), tags=()):
    return NodeDefinition(
        id=id,
        name=name,
        category=DOMAIN_TRANSFORM,
        coord_space=coord_space,
        inputs=1,
        description=description,
        tags=tags,
        parameters=parameters,
        mod_targets=mod_targets,
        glsl=GlslCode(signature, body, requires),
    )


translate = _transform(
    "translate", "Translate", "both",
    "vec3 opTranslate(vec3 p, vec3 offset)",
    "return p - offset;",
    "Move space",
    parameters=(vec3_param("offset", "Offset", (0.0, 0.0, 0.0), min=-5.0, max=5.0),),
    mod_targets=(ModTarget("offset", -5.0, 5.0, bipolar=True),),
    tags=("move", "offset"),
)

translate_2d = _transform(
    "translate-2d", "Translate 2D", "2d",
    "vec2 domTranslate2D(vec2 p, vec2 offset)",
    "return p - offset;",
    "Move 2D space",
    parameters=(vec2_param("offset", "Offset", (0.0, 0.0), min=-5.0, max=5.0),),
    mod_targets=(ModTarget("offset", -5.0, 5.0, bipolar=True),),
    tags=("move", "offset"),
)

rotate_2d = _transform(
    "rotate-2d", "Rotate", "2d",
    "vec2 domRotate2D(vec2 p, float angle)",
    "return rotate2d(p, -angle);",
    "Rotate 2D space",
    parameters=(angle_param("angle", "Angle"),),
    mod_targets=(ModTarget("angle", 0.0, 6.28),),
    requires=("rotate2d",),
)

rotate_3d = _transform(
    "rotate-3d", "Rotate 3D", "3d",
    "vec3 domRotate3D(vec3 p, vec3 ang)",
    "vec3 c = cos(ang); vec3 s = sin(ang);\n"
    "mat3 rx = mat3(1, 0, 0, 0, c.x, -s.x, 0, s.x, c.x);\n"
    "mat3 ry = mat3(c.y, 0, s.y, 0, 1, 0, -s.y, 0, c.y);\n"
    "mat3 rz = mat3(c.z, -s.z, 0, s.z, c.z, 0, 0, 0, 1);\n"
    "return rz * ry * rx * p;",
    "Rotate 3D space",
    parameters=(vec3_param("angles", "Angles", (0.0, 0.0, 0.0), min=0.0, max=6.28),),
    mod_targets=(ModTarget("angles", 0.0, 6.28),),
)

scale_2d = _transform(
    "scale-2d", "Scale 2D", "2d",
    "vec2 domScale2D(vec2 p, vec2 s)",
    "return p / s;",
    "Stretch 2D space; distances are not rescaled",
    parameters=(vec2_param("scale", "Scale", (1.0, 1.0), min=0.1, max=5.0),),
    mod_targets=(ModTarget("scale", 0.1, 5.0),),
    tags=("size", "zoom", "stretch"),
)

repeat = _transform(
    "repeat", "Repeat (Grid)", "both",
    "vec3 opRepeat(vec3 p, vec3 c)",
    "return mod(p + 0.5 * c, c) - 0.5 * c;",
    "Infinite grid repetition",
    parameters=(vec3_param("period", "Spacing", (2.0, 2.0, 2.0), min=0.1, max=10.0),),
    mod_targets=(ModTarget("period", 0.1, 10.0),),
    tags=("tile", "grid"),
)

repeat_2d = _transform(
    "repeat-2d", "Repeat 2D", "2d",
    "vec2 domRepeat2D(vec2 p, vec2 c)",
    "return mod(p + 0.5 * c, c) - 0.5 * c;",
    "Infinite 2D grid repetition",
    parameters=(vec2_param("period", "Spacing", (1.0, 1.0), min=0.1, max=10.0),),
    mod_targets=(ModTarget("period", 0.1, 10.0),),
    tags=("tile", "grid"),
)

mirror = _transform(
    "mirror", "Mirror", "both",
    "vec3 opMirror(vec3 p, vec3 axis)",
    "return p - 2.0 * min(0.0, dot(p, axis)) * axis;",
    "Mirror across a plane through the origin",
    parameters=(vec3_param("axis", "Axis (XYZ)", (1.0, 0.0, 0.0), min=0.0, max=1.0,
                           modulatable=False),),
    tags=("symmetry", "reflect"),
)

twist_3d = _transform(
    "twist-3d", "Twist 3D", "3d",
    "vec3 domTwist3D(vec3 p, float k)",
    "float c = cos(k * p.y);\n"
    "float s = sin(k * p.y);\n"
    "return vec3(c * p.x - s * p.z, p.y, s * p.x + c * p.z);",
    "Twists the shape around the Y axis",
    parameters=(float_param("strength", "Strength", 3.0, -10.0, 10.0),),
    mod_targets=(ModTarget("strength", -10.0, 10.0, bipolar=True),),
    tags=("spiral", "warp"),
)

ALL_TRANSFORMS = (
    translate, translate_2d, rotate_2d, rotate_3d, scale_2d,
    repeat, repeat_2d, mirror, twist_3d,
)
