"""Scene document <-> SceneGraph conversion.

Document layout::

    {
      "mode": "2d",
      "nodes": [{"instanceId": "c1", "nodeId": "circle", "params": {...},
                 "enabled": true, "label": "", "color": [1, 0, 0]}],
      "connections": [{"from": "c1", "to": "u1", "slot": 0}],
      "modulation": [{"id": "m1", "source": "audio.rms", "target": "c1.radius", ...}]
    }
"""

from __future__ import annotations
import json
from pathlib import Path

from sdfgraph.errors import SceneFormatError, GraphError, ModulationError
from sdfgraph.graph.model import SceneGraph, NodeInstance, Connection


def _param_value(value):
    if isinstance(value, list):
        return tuple(float(v) for v in value)
    return value


def _color(value, where: str):
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise SceneFormatError(f"{where}: color must be a list of 3 numbers")
    try:
        return tuple(float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise SceneFormatError(f"{where}: color must be a list of 3 numbers") from e


def node_from_dict(data: dict, index: int = 0) -> NodeInstance:
    where = f"nodes[{index}]"
    if not isinstance(data, dict):
        raise SceneFormatError(f"{where}: expected an object")
    try:
        instance_id = data["instanceId"]
        node_id = data["nodeId"]
    except KeyError as e:
        raise SceneFormatError(f"{where}: missing field {e.args[0]!r}") from e
    params = data.get("params") or {}
    if not isinstance(params, dict):
        raise SceneFormatError(f"{where}: params must be an object")
    return NodeInstance(
        instance_id=str(instance_id),
        node_id=str(node_id),
        params={k: _param_value(v) for k, v in params.items()},
        enabled=bool(data.get("enabled", True)),
        label=str(data.get("label") or ""),
        color=_color(data.get("color"), where),
    )


def connection_from_dict(data: dict, index: int = 0) -> Connection:
    where = f"connections[{index}]"
    if not isinstance(data, dict):
        raise SceneFormatError(f"{where}: expected an object")
    try:
        return Connection(str(data["from"]), str(data["to"]), int(data.get("slot", 0)))
    except KeyError as e:
        raise SceneFormatError(f"{where}: missing field {e.args[0]!r}") from e
    except (TypeError, ValueError) as e:
        raise SceneFormatError(f"{where}: slot must be an integer") from e


def scene_from_dict(data: dict, catalog=None) -> SceneGraph:
    """Build a graph from a scene document.

    Instances and connections are taken as-is; structural problems are left
    for validation so that a broken preset still reports every issue.
    """
    if not isinstance(data, dict):
        raise SceneFormatError("Scene document must be an object")
    nodes = data.get("nodes", [])
    connections = data.get("connections", [])
    if not isinstance(nodes, list) or not isinstance(connections, list):
        raise SceneFormatError("'nodes' and 'connections' must be lists")
    try:
        return SceneGraph(
            catalog=catalog,
            mode=data.get("mode", "2d"),
            instances=[node_from_dict(n, i) for i, n in enumerate(nodes)],
            connections=[connection_from_dict(c, i) for i, c in enumerate(connections)],
        )
    except GraphError as e:
        raise SceneFormatError(str(e)) from e


def scene_to_dict(graph, rules=()) -> dict:
    data = {
        "mode": graph.mode,
        "nodes": [
            {
                "instanceId": inst.instance_id,
                "nodeId": inst.node_id,
                "params": {
                    k: list(v) if isinstance(v, tuple) else v
                    for k, v in inst.params.items()
                },
                "enabled": inst.enabled,
                "label": inst.label,
                **({"color": list(inst.color)} if inst.color is not None else {}),
            }
            for inst in graph.instances
        ],
        "connections": [
            {"from": c.source, "to": c.target, "slot": c.slot}
            for c in graph.connections
        ],
    }
    if rules:
        data["modulation"] = [rule.to_dict() for rule in rules]
    return data


def rules_from_list(items) -> list:
    from sdfgraph.modulation.matrix import ModulationRule

    if items is None:
        return []
    if not isinstance(items, list):
        raise SceneFormatError("'modulation' must be a list")
    rules = []
    for i, item in enumerate(items):
        try:
            rules.append(ModulationRule.from_dict(item))
        except ModulationError as e:
            raise SceneFormatError(f"modulation[{i}]: {e}") from e
    return rules


def load_scene(path: Path, catalog=None):
    """Read a scene document. Returns ``(graph, rules)``."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SceneFormatError(f"{path}: invalid JSON: {e}") from e
    graph = scene_from_dict(data, catalog)
    return graph, rules_from_list(data.get("modulation"))
