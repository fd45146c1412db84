"""Reflection metadata emitter.

Describes the uniforms of a compiled shader so a host without GL
introspection can lay out a std140 uniform buffer or build an editor panel
without re-running the compiler.
"""

from __future__ import annotations

import json

from sdfgraph.codegen.glsl_builder import CompiledShader

REFLECTION_VERSION = 1

# (size, alignment) in bytes for std140 layout
_STD140 = {
    "float": (4, 4),
    "int": (4, 4),
    "bool": (4, 4),
    "vec2": (8, 8),
    "vec3": (12, 16),   # vec3 aligns like vec4
    "vec4": (16, 16),
}


def _align_up(offset: int, alignment: int) -> int:
    return (offset + alignment - 1) & ~(alignment - 1)


def compute_std140_offsets(glsl_types: list[str]) -> list[int]:
    offsets = []
    current = 0
    for type_name in glsl_types:
        size, align = _STD140.get(type_name, (4, 4))
        current = _align_up(current, align)
        offsets.append(current)
        current += size
    return offsets


def _block_size(glsl_types: list[str], offsets: list[int]) -> int:
    if not glsl_types:
        return 0
    total = offsets[-1] + _STD140.get(glsl_types[-1], (4, 4))[0]
    return _align_up(total, 16)


def generate_reflection(compiled: CompiledShader, source_name: str = "") -> dict:
    """Generate the reflection dict for one compiled shader."""
    types = [u.glsl_type for u in compiled.uniforms]
    offsets = compute_std140_offsets(types)

    return {
        "version": REFLECTION_VERSION,
        "source": source_name,
        "mode": compiled.mode,
        "uniforms": [
            {
                "name": u.name,
                "instance": u.instance_id,
                "parameter": u.parameter_id,
                "type": u.glsl_type,
                "kind": u.kind,
                "offset": offsets[i],
                "size": _STD140.get(u.glsl_type, (4, 4))[0],
            }
            for i, u in enumerate(compiled.uniforms)
        ],
        "block_size": _block_size(types, offsets),
        "materials": [
            {
                "id": m.material_id,
                "instance": m.instance_id,
                "uniform": m.uniform,
                "color": list(m.color),
            }
            for m in compiled.materials
        ],
        "node_order": list(compiled.node_order),
        "total_cost": compiled.total_cost,
        "errors": list(compiled.errors),
        "warnings": list(compiled.warnings),
    }


def emit_reflection_json(reflection: dict) -> str:
    """Serialize reflection metadata to a JSON string."""
    return json.dumps(reflection, indent=2, sort_keys=False) + "\n"
