"""Pre-compilation graph validation.

Everything found here is reported, never raised. Errors make the graph
uncompilable; warnings are passed through to the compiled shader.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from sdfgraph.config import RENDER_MODES


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_graph(instances, connections, mode, catalog) -> ValidationResult:
    result = ValidationResult()

    if mode not in RENDER_MODES:
        result.errors.append(f"Invalid render mode '{mode}' (expected one of {', '.join(RENDER_MODES)})")

    by_id = {}
    for inst in instances:
        if inst.instance_id in by_id:
            result.errors.append(f"Duplicate instance ID: '{inst.instance_id}'")
            continue
        by_id[inst.instance_id] = inst
        if "." in inst.instance_id:
            result.warnings.append(
                f"Instance ID '{inst.instance_id}' contains '.', modulation targets "
                f"for it cannot be addressed"
            )

        node = catalog.get(inst.node_id)
        if node is None:
            result.errors.append(f"Unknown node type: '{inst.node_id}' (instance '{inst.instance_id}')")
            continue

        if mode == "2d" and node.coord_space == "3d":
            result.warnings.append(f"Node '{node.name}' ({inst.instance_id}) is 3D-only but scene is 2D")
        elif mode == "3d" and node.coord_space == "2d":
            result.warnings.append(f"Node '{node.name}' ({inst.instance_id}) is 2D-only but scene is 3D")

        _check_params(inst, node, result)

    seen_slots = set()
    for conn in connections:
        if conn.source not in by_id:
            result.errors.append(f"Connection from unknown instance: '{conn.source}'")
        if conn.target not in by_id:
            result.errors.append(f"Connection to unknown instance: '{conn.target}'")
            continue
        if conn.source == conn.target:
            result.errors.append(f"Self-referencing connection on '{conn.source}'")
            continue

        target_node = catalog.get(by_id[conn.target].node_id)
        if target_node is not None and not 0 <= conn.slot < target_node.inputs:
            result.errors.append(
                f"Connection into slot {conn.slot} of '{conn.target}' but node "
                f"'{target_node.id}' has {target_node.inputs} input slot(s)"
            )

        key = (conn.target, conn.slot)
        if key in seen_slots:
            result.warnings.append(
                f"Multiple connections into slot {conn.slot} of '{conn.target}'; the last one wins"
            )
        seen_slots.add(key)

    cycle = find_cycle(connections)
    if cycle:
        result.errors.append(f"Cycle detected: {' -> '.join(cycle)}")

    return result


def _check_params(inst, node, result: ValidationResult) -> None:
    for key, value in inst.params.items():
        param = node.parameter(key)
        if param is None:
            result.warnings.append(f"Unknown parameter '{key}' on '{inst.instance_id}' ({node.id})")
            continue
        if param.type == "bool":
            continue
        components = value if isinstance(value, (tuple, list)) else (value,)
        if len(components) != param.arity:
            result.warnings.append(
                f"Parameter '{key}' on '{inst.instance_id}' expects {param.arity} "
                f"component(s), got {len(components)}"
            )
            continue
        for v in components:
            if not isinstance(v, (int, float)):
                result.warnings.append(f"Parameter '{key}' on '{inst.instance_id}' is not numeric")
                break
            if (param.min is not None and v < param.min) or (param.max is not None and v > param.max):
                result.warnings.append(
                    f"Parameter '{key}' on '{inst.instance_id}' value {v} outside "
                    f"[{param.min}, {param.max}]"
                )
                break


def find_cycle(connections) -> list[str] | None:
    """Return one cycle as a list of instance ids, or None.

    Iterative depth-first walk over target -> source edges; does not depend on
    instance ordering.
    """
    children: dict[str, list[str]] = {}
    for conn in connections:
        children.setdefault(conn.target, []).append(conn.source)

    WHITE, GREY, BLACK = 0, 1, 2
    color: dict[str, int] = {}

    for start in children:
        if color.get(start, WHITE) != WHITE:
            continue
        path = [start]
        stack = [iter(children.get(start, ()))]
        color[start] = GREY
        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                color[path.pop()] = BLACK
                stack.pop()
                continue
            state = color.get(nxt, WHITE)
            if state == GREY:
                return path[path.index(nxt):] + [nxt]
            if state == WHITE:
                color[nxt] = GREY
                path.append(nxt)
                stack.append(iter(children.get(nxt, ())))
    return None
