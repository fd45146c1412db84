"""Fixed fragment shader template around the generated ``map`` function."""

from __future__ import annotations

from sdfgraph.config import CompileOptions

# Keeps the closer child's material when an operation merges two distances.
PICK_MATERIAL_GLSL = """vec2 sdfPickMaterial(float d, vec2 a, vec2 b) {
  return abs(a.x - d) <= abs(b.x - d) ? a : b;
}"""


def _vec3(rgb) -> str:
    return "vec3({:.3f}, {:.3f}, {:.3f})".format(*rgb)


def map_signature(mode: str, materials: bool) -> str:
    ret = "vec2" if materials else "float"
    coord = "vec3" if mode == "3d" else "vec2"
    return f"{ret} map({coord} p)"


def material_color_function(materials, options: CompileOptions) -> str:
    """``sdfMaterialColor(id)``: colour uniform of a 1-based material id."""
    lines = ["vec3 sdfMaterialColor(float id) {"]
    for mat in materials:
        lines.append(f"  if (abs(id - {mat.material_id}.0) < 0.5) return {mat.uniform};")
    lines.append(f"  return {_vec3(options.inside_color)};")
    lines.append("}")
    return "\n".join(lines)


def _main(mode: str, materials: bool, options: CompileOptions) -> str:
    if mode == "3d":
        # slice through the volume, drifting along z
        sample = "map(vec3(p, 0.5 * sin(time * 0.5)))"
    else:
        sample = "map(p)"

    lines = [
        "void main() {",
        "  vec2 p = (gl_FragCoord.xy * 2.0 - resolution) / min(resolution.x, resolution.y);",
    ]
    if materials:
        lines += [
            f"  vec2 m = {sample};",
            "  float d = m.x;",
            f"  vec3 col = d < 0.0 ? sdfMaterialColor(m.y) : {_vec3(options.outside_color)};",
        ]
    else:
        lines += [
            f"  float d = {sample};",
            f"  vec3 col = d < 0.0 ? {_vec3(options.inside_color)} : {_vec3(options.outside_color)};",
        ]
    lines += [
        "  col *= 1.0 - exp(-6.0 * abs(d));",
        "  col *= 0.8 + 0.2 * cos(150.0 * d);",
        f"  col = mix(col, vec3(1.0), 1.0 - smoothstep(0.0, {options.edge_width:.4f}, abs(d)));",
        "  fragColor = vec4(col, 1.0);",
        "}",
    ]
    return "\n".join(lines)


def render_fragment(mode: str, uniforms, functions_code: str, map_body: str,
                    materials=(), options: CompileOptions | None = None) -> str:
    options = options or CompileOptions()
    use_materials = bool(materials)

    parts = [
        f"#version {options.glsl_version}",
        "precision highp float;",
        "",
        "uniform float time;",
        "uniform vec2 resolution;",
    ]
    if uniforms:
        parts.append("")
        parts += [f"uniform {u.glsl_type} {u.name};" for u in uniforms]
    parts += [
        "",
        "in vec2 v_uv;",
        "out vec4 fragColor;",
        "",
    ]
    if functions_code:
        parts += [functions_code, ""]
    if use_materials:
        parts += [PICK_MATERIAL_GLSL, "", material_color_function(materials, options), ""]

    body = "\n".join("  " + line for line in map_body.splitlines())
    parts += [
        map_signature(mode, use_materials) + " {",
        body,
        "}",
        "",
        _main(mode, use_materials, options),
        "",
    ]
    return "\n".join(parts)
