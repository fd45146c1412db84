"""GLSL generation from a validated scene graph.

The last instance is the root. Emission walks from the root towards the
leaves carrying the current coordinate expression: a domain transform wraps
the coordinate for its child, an operation hands the same coordinate to all
its children and combines their distances, and a shape or field is a leaf
call on the coordinate.

Without coloured shapes ``map`` is a nested expression returning a float
distance, with instances read by several slots bound to ``float``
temporaries. When any emitted shape carries a colour, ``map`` returns
``vec2(distance, materialId)`` and is emitted as a list of temporaries so an
operation can look at both of its children's material ids.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field

from sdfgraph.catalog.signature import parse_signature
from sdfgraph.catalog.types import (
    SHAPE_2D, SHAPE_3D, OPERATION, DOMAIN_TRANSFORM, FIELD,
)
from sdfgraph.codegen.templates import render_fragment
from sdfgraph.config import CompileOptions, COST_ESTIMATES
from sdfgraph.graph.validate import validate_graph

log = logging.getLogger(__name__)

_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9]")
# GLSL reserves identifiers containing "__"
_UNDERSCORES_RE = re.compile(r"_{2,}")

_COORD_TYPES = {"vec2": 2, "vec3": 3}


@dataclass
class UniformBinding:
    name: str
    instance_id: str
    parameter_id: str
    glsl_type: str
    kind: str = "parameter"     # "parameter" or "instance-color"


@dataclass
class MaterialSlot:
    material_id: int
    instance_id: str
    uniform: str
    color: tuple[float, float, float]


@dataclass
class CompiledShader:
    fragment_source: str = ""
    functions_code: str = ""
    map_body: str = ""
    uniforms: list[UniformBinding] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    mode: str = "2d"
    total_cost: float = 0.0
    materials: list[MaterialSlot] = field(default_factory=list)
    node_order: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class CompileFailure(Exception):
    """Raised inside emission; turned into an error entry at the boundary."""


def sanitize(identifier: str) -> str:
    return _UNSAFE_RE.sub("_", identifier)


def uniform_name(instance_id: str, param_id: str) -> str:
    return _UNDERSCORES_RE.sub("_", f"u_{sanitize(instance_id)}_{sanitize(param_id)}")


def material_uniform_name(instance_id: str) -> str:
    return _UNDERSCORES_RE.sub("_", f"m_{sanitize(instance_id)}_color")


def adapt_coord(coord: str, have: int, want: int) -> str:
    if have == want:
        return coord
    if have == 3 and want == 2:
        return f"{coord}.xy"
    return f"vec3({coord}, 0.0)"


# ---------------------------------------------------------------------------
# Emitter
# ---------------------------------------------------------------------------

class GraphEmitter:
    """One emission pass over a validated graph."""

    def __init__(self, instances, connections, mode: str, catalog,
                 options: CompileOptions, materials: bool = False):
        self.catalog = catalog
        self.mode = mode
        self.options = options
        self.use_materials = materials
        self.far = options.far_distance

        self.instances = {inst.instance_id: inst for inst in instances}
        self.root = instances[-1].instance_id
        # (target, slot) -> source; the last connection into a slot wins
        self.inputs: dict[str, dict[int, str]] = {}
        for conn in connections:
            self.inputs.setdefault(conn.target, {})[conn.slot] = conn.source
        # number of slots reading each instance
        self.uses: dict[str, int] = {}
        for slots in self.inputs.values():
            for source in slots.values():
                self.uses[source] = self.uses.get(source, 0) + 1

        self.functions: dict[tuple[str, str], str] = {}
        self.function_names: dict[str, tuple[str, str]] = {}
        self.utilities: list[str] = []
        self.uniforms: list[UniformBinding] = []
        self.uniform_owner: dict[str, str] = {}
        self.materials: list[MaterialSlot] = []
        self.material_ids: dict[str, int] = {}
        self.statements: list[str] = []
        self.warnings: list[str] = []
        self.node_order: list[str] = []
        self.visited: set[str] = set()
        self.emitted: dict[tuple[str, str, int], str] = {}
        self.colored_leaves: list[str] = []
        self.total_cost = 0.0
        self._stack: set[str] = set()
        self._temp = 0

    # --- Helpers ---

    def _warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)

    def _far(self) -> str:
        if self.use_materials:
            return self._store(f"vec2({self.far}, 0.0)")
        return self.far

    def _store(self, expr: str) -> str:
        """Material mode only: bind an expression to a fresh temporary."""
        name = f"m{self._temp}"
        self._temp += 1
        self.statements.append(f"vec2 {name} = {expr};")
        return name

    def _add_function(self, node) -> str:
        sig = node.glsl.signature.strip()
        body = node.glsl.body.strip()
        name = parse_signature(sig).name
        key = (sig, body)
        existing = self.function_names.get(name)
        if existing is not None and existing != key:
            raise CompileFailure(
                f"GLSL function '{name}' of node '{node.id}' clashes with a different "
                f"definition of the same name"
            )
        if key not in self.functions:
            self.function_names[name] = key
            indented = "\n".join("  " + line for line in body.splitlines())
            self.functions[key] = f"// {node.name}\n{sig} {{\n{indented}\n}}"
        for util in node.glsl.requires:
            if util not in self.utilities:
                self.utilities.append(util)
        return name

    def _param_args(self, inst, node) -> list[str]:
        return [uniform_name(inst.instance_id, p.id) for p in node.parameters]

    def _register(self, inst, node) -> None:
        if inst.instance_id in self.node_order:
            return
        self.node_order.append(inst.instance_id)
        self.total_cost += COST_ESTIMATES[node.cost_tier]
        for param in node.parameters:
            self._bind(UniformBinding(
                uniform_name(inst.instance_id, param.id),
                inst.instance_id, param.id, param.glsl_type,
            ))

    def _bind(self, binding: UniformBinding) -> None:
        owner = self.uniform_owner.get(binding.name)
        if owner is not None:
            if owner != binding.instance_id:
                raise CompileFailure(
                    f"Instances '{owner}' and '{binding.instance_id}' map to the same "
                    f"uniform name '{binding.name}'"
                )
            return
        self.uniform_owner[binding.name] = binding.instance_id
        self.uniforms.append(binding)

    def _material_of(self, inst) -> float:
        if inst.instance_id not in self.material_ids:
            mat_id = len(self.materials) + 1
            uniform = material_uniform_name(inst.instance_id)
            self.material_ids[inst.instance_id] = mat_id
            self.materials.append(MaterialSlot(mat_id, inst.instance_id, uniform, tuple(inst.color)))
            self._bind(UniformBinding(uniform, inst.instance_id, "color", "vec3", kind="instance-color"))
        return self.material_ids[inst.instance_id]

    # --- Emission ---

    def emit(self, instance_id: str, coord: str, dim: int) -> str:
        """Expression (or temporary) for the distance of ``instance_id``.

        An instance read by more than one slot is bound to a temporary the
        first time it is reached with a given coordinate and reused after.
        """
        key = (instance_id, coord, dim)
        if key in self.emitted:
            return self.emitted[key]
        if instance_id in self._stack:
            raise CompileFailure(f"Cycle detected at instance '{instance_id}'")
        inst = self.instances.get(instance_id)
        if inst is None:
            raise CompileFailure(f"Connection references unknown instance '{instance_id}'")
        node = self.catalog.get(inst.node_id)
        if node is None:
            raise CompileFailure(f"Unknown node type: '{inst.node_id}'")

        self.visited.add(instance_id)
        self._stack.add(instance_id)
        try:
            category = node.category
            if category == DOMAIN_TRANSFORM:
                result = self._emit_transform(inst, node, coord, dim)
            elif category == OPERATION:
                result = self._emit_operation(inst, node, coord, dim)
            elif category in (SHAPE_2D, SHAPE_3D, FIELD):
                result = self._emit_leaf(inst, node, coord, dim)
            else:
                raise CompileFailure(f"Node '{node.id}' has unsupported category '{category}'")
        finally:
            self._stack.discard(instance_id)

        # material results are already temporaries
        if self.uses.get(instance_id, 0) > 1 and not self.use_materials and result != self.far:
            name = f"s{self._temp}"
            self._temp += 1
            self.statements.append(f"float {name} = {result};")
            result = name
        self.emitted[key] = result
        return result

    def _emit_transform(self, inst, node, coord, dim):
        child = self.inputs.get(inst.instance_id, {}).get(0)
        if not inst.enabled:
            if child is None:
                return self._far()
            return self.emit(child, coord, dim)

        if child is None:
            self._warn(f"Transform '{inst.instance_id}' has no input; it contributes nothing")
            return self._far()

        sig = parse_signature(node.glsl.signature)
        fn = self._add_function(node)
        want = _COORD_TYPES[sig.param_types[0]]
        args = [adapt_coord(coord, dim, want)] + self._param_args(inst, node)
        new_coord = f"{fn}({', '.join(args)})"
        result = self.emit(child, new_coord, _COORD_TYPES[sig.return_type])
        self._register(inst, node)
        return result

    def _emit_operation(self, inst, node, coord, dim):
        slots = self.inputs.get(inst.instance_id, {})
        if not inst.enabled:
            if 0 not in slots:
                return self._far()
            return self.emit(slots[0], coord, dim)

        children = []
        for slot in range(node.inputs):
            source = slots.get(slot)
            if source is None:
                self._warn(f"Operation '{inst.instance_id}' has no input in slot {slot}")
                children.append(self._far())
            else:
                children.append(self.emit(source, coord, dim))

        fn = self._add_function(node)
        params = self._param_args(inst, node)
        self._register(inst, node)

        if not self.use_materials:
            return f"{fn}({', '.join(children + params)})"

        distance = f"{fn}({', '.join([c + '.x' for c in children] + params)})"
        d_name = f"d{self._temp}"
        self.statements.append(f"float {d_name} = {distance};")
        pick = children[0]
        for other in children[1:]:
            pick = f"sdfPickMaterial({d_name}, {pick}, {other})"
        return self._store(f"vec2({d_name}, {pick}.y)")

    def _emit_leaf(self, inst, node, coord, dim):
        if not inst.enabled:
            return self._far()

        sig = parse_signature(node.glsl.signature)
        fn = self._add_function(node)
        want = _COORD_TYPES[sig.param_types[0]]
        args = [adapt_coord(coord, dim, want)] + self._param_args(inst, node)
        self._register(inst, node)
        call = f"{fn}({', '.join(args)})"

        colored = inst.color is not None and node.category != FIELD
        if colored:
            self.colored_leaves.append(inst.instance_id)
        if not self.use_materials:
            return call
        mat_id = self._material_of(inst) if colored else 0
        return self._store(f"vec2({call}, {mat_id}.0)")

    # --- Assembly ---

    def run(self) -> str:
        dim = 3 if self.mode == "3d" else 2
        result = self.emit(self.root, "p", dim)
        self.statements.append(f"return {result};")

        for inst_id in self.instances:
            if inst_id not in self.visited:
                self._warn(f"Instance '{inst_id}' is not connected to the output and was skipped")
        return "\n".join(self.statements)

    def functions_code(self) -> str:
        parts = [self.catalog.utility(name) for name in self.utilities]
        parts += list(self.functions.values())
        return "\n\n".join(parts)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _stub(mode: str, options: CompileOptions, errors=(), warnings=()) -> CompiledShader:
    safe_mode = mode if mode in ("2d", "3d") else "2d"
    body = f"return {options.far_distance};"
    return CompiledShader(
        fragment_source=render_fragment(safe_mode, [], "", body, options=options),
        map_body=body,
        errors=list(errors),
        warnings=list(warnings),
        mode=safe_mode,
    )


def compile_graph(instances, connections, mode: str, catalog,
                  options: CompileOptions | None = None) -> CompiledShader:
    """Compile a scene graph into a fragment shader.

    Never raises: validation problems and internal failures come back as a
    stub shader with a non-empty ``errors`` list.
    """
    options = options or CompileOptions()
    instances = list(instances)
    connections = list(connections)

    if not instances:
        return _stub(mode, options)

    validation = validate_graph(instances, connections, mode, catalog)
    if validation.errors:
        log.warning("graph validation failed: %s", "; ".join(validation.errors))
        return _stub(mode, options, validation.errors, validation.warnings)

    try:
        emitter = GraphEmitter(instances, connections, mode, catalog, options)
        map_body = emitter.run()
        if emitter.colored_leaves:
            emitter = GraphEmitter(instances, connections, mode, catalog, options, materials=True)
            map_body = emitter.run()
        functions_code = emitter.functions_code()
        fragment = render_fragment(
            mode, emitter.uniforms, functions_code, map_body,
            materials=emitter.materials, options=options,
        )
    except RecursionError:
        message = "Graph is nested too deeply to compile"
        log.warning(message)
        return _stub(mode, options, [message], validation.warnings)
    except Exception as e:
        log.warning("shader compilation failed: %s", e, exc_info=not isinstance(e, CompileFailure))
        return _stub(mode, options, [str(e) or type(e).__name__], validation.warnings)

    warnings = list(validation.warnings) + emitter.warnings
    if emitter.total_cost > options.cost_warning_threshold:
        warnings.append(
            f"Estimated GPU cost {emitter.total_cost:.1f} exceeds {options.cost_warning_threshold:.1f}"
        )
    if len(emitter.uniforms) > options.max_uniforms:
        warnings.append(
            f"Shader declares {len(emitter.uniforms)} uniforms (limit {options.max_uniforms})"
        )

    return CompiledShader(
        fragment_source=fragment,
        functions_code=functions_code,
        map_body=map_body,
        uniforms=emitter.uniforms,
        warnings=warnings,
        mode=mode,
        total_cost=round(emitter.total_cost, 4),
        materials=emitter.materials,
        node_order=emitter.node_order,
    )
