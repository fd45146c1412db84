"""Engine-wide constants and option records."""

from __future__ import annotations
from dataclasses import dataclass

# Distance returned for "nothing here"; must stay a valid GLSL float literal.
FAR_DISTANCE = "1e10"

GLSL_VERSION = "330 core"

RENDER_MODES = ("2d", "3d")

COST_ESTIMATES = {
    "LOW": 0.1,
    "MED": 1.0,
    "HIGH": 5.0,
}

# Fullscreen quad, drawn as a 4-vertex triangle strip
FULLSCREEN_VERTEX_SHADER = """#version 330 core
in vec2 in_vert;
out vec2 v_uv;
void main() {
    v_uv = in_vert * 0.5 + 0.5;
    gl_Position = vec4(in_vert, 0.0, 1.0);
}
"""


@dataclass
class CompileOptions:
    glsl_version: str = GLSL_VERSION
    far_distance: str = FAR_DISTANCE
    edge_width: float = 0.01
    inside_color: tuple[float, float, float] = (0.65, 0.85, 1.0)
    outside_color: tuple[float, float, float] = (0.9, 0.6, 0.3)
    cost_warning_threshold: float = 10.0
    max_uniforms: int = 256


@dataclass
class RuntimeConfig:
    vertex_shader: str = FULLSCREEN_VERTEX_SHADER
    skip_unchanged_uniforms: bool = True
