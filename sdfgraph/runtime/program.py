"""GPU program ownership and per-frame uniform upload."""

from __future__ import annotations
import logging

import moderngl
import numpy as np

from sdfgraph.catalog.types import GLSL_ARITY
from sdfgraph.config import RuntimeConfig
from sdfgraph.modulation.matrix import group_rules, modulate_value

log = logging.getLogger(__name__)

# Fullscreen quad as a triangle strip
_QUAD = np.array([
    -1.0, -1.0,
     1.0, -1.0,
    -1.0,  1.0,
     1.0,  1.0,
], dtype="f4")


class ShaderRuntime:
    """Keeps one linked program in sync with the latest compiled shader.

    A new program is built completely before it replaces the current one, so
    a failed link leaves the previous program rendering.
    """

    def __init__(self, ctx: moderngl.Context, catalog=None,
                 config: RuntimeConfig | None = None):
        self.ctx = ctx
        self.catalog = catalog
        self.config = config or RuntimeConfig()

        self.program = None
        self.vao = None
        self.compiled = None
        self.source: str | None = None
        self.link_count = 0
        self.last_error: str | None = None

        self._vbo = ctx.buffer(_QUAD.tobytes())
        self._uniforms = {}
        self._last_values = {}

    @property
    def has_program(self) -> bool:
        return self.program is not None

    # --- Program management ---

    def update_shader(self, compiled) -> bool:
        """Link ``compiled`` if its source changed. True when a new program went live."""
        source = compiled.fragment_source
        if source == self.source:
            return False

        program = None
        try:
            program = self.ctx.program(
                vertex_shader=self.config.vertex_shader,
                fragment_shader=source)
            vao = self.ctx.vertex_array(program, [(self._vbo, "2f", "in_vert")])
        except moderngl.Error as e:
            self.last_error = str(e)
            log.error("Shader link failed, keeping previous program: %s\n%s", e, source)
            if program is not None:
                program.release()
            return False

        old_program, old_vao = self.program, self.vao
        self.program, self.vao = program, vao
        self.compiled = compiled
        self.source = source
        self.link_count += 1
        self.last_error = None

        names = ["time", "resolution"] + [u.name for u in compiled.uniforms]
        self._uniforms = {}
        for name in names:
            uniform = program.get(name, None)
            if uniform is not None:
                self._uniforms[name] = uniform
        self._last_values.clear()

        if old_vao is not None:
            old_vao.release()
        if old_program is not None:
            old_program.release()

        log.info("Shader program swapped (link #%d, %d uniforms active)",
                 self.link_count, len(self._uniforms))
        return True

    def release(self) -> None:
        if self.vao is not None:
            self.vao.release()
            self.vao = None
        if self.program is not None:
            self.program.release()
            self.program = None
        if self._vbo is not None:
            self._vbo.release()
            self._vbo = None
        self._uniforms = {}
        self._last_values.clear()
        self.source = None

    # --- Per frame ---

    def _upload(self, name: str, glsl_type: str, value) -> None:
        uniform = self._uniforms.get(name)
        if uniform is None:
            return

        arity = GLSL_ARITY.get(glsl_type, 1)
        if arity == 1:
            if isinstance(value, (tuple, list)):
                value = value[0]
            if glsl_type == "int":
                if value != value:
                    # NaN has no integer form; keep the last uploaded value
                    return
                value = int(round(value))
            elif glsl_type == "bool":
                value = bool(value >= 0.5)
            else:
                value = float(value)
            key = value
        else:
            components = list(value) if isinstance(value, (tuple, list)) else [value]
            # colours without alpha
            components = (components + [1.0] * arity)[:arity]
            key = tuple(float(c) for c in components)

        if self.config.skip_unchanged_uniforms and self._last_values.get(name) == key:
            return
        self._last_values[name] = key

        if arity == 1:
            uniform.value = value
        else:
            uniform.write(np.asarray(key, dtype="f4").tobytes())

    def _param_value(self, inst, param_id):
        value = inst.params.get(param_id)
        if value is None and self.catalog is not None:
            node = self.catalog.get(inst.node_id)
            param = node.parameter(param_id) if node is not None else None
            if param is not None:
                value = param.default
        return value

    def render(self, width: int, height: int, time: float, instances,
               sources=None, rules=None) -> bool:
        """Upload modulated uniforms and draw. False when no program is live."""
        if self.program is None:
            return False

        self.ctx.viewport = (0, 0, width, height)
        self._upload("time", "float", time)
        self._upload("resolution", "vec2", (float(width), float(height)))

        by_id = {inst.instance_id: inst for inst in instances}
        sources = sources or {}
        grouped = group_rules(rules) if rules and not isinstance(rules, dict) else (rules or {})

        for binding in self.compiled.uniforms:
            inst = by_id.get(binding.instance_id)
            if inst is None:
                continue
            if binding.kind == "instance-color":
                value = inst.color if inst.color is not None else (1.0, 1.0, 1.0)
            else:
                value = self._param_value(inst, binding.parameter_id)
                if value is None:
                    continue
                if grouped:
                    value = modulate_value(value, binding.instance_id,
                                           binding.parameter_id, sources, grouped)
            self._upload(binding.name, binding.glsl_type, value)

        self.vao.render(moderngl.TRIANGLE_STRIP)
        return True
