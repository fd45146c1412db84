"""Scene graph data model and the mutation API used by the editor."""

from __future__ import annotations
import copy
from dataclasses import dataclass, field

from sdfgraph.catalog.types import ParamValue
from sdfgraph.config import RENDER_MODES
from sdfgraph.errors import GraphError


@dataclass
class NodeInstance:
    instance_id: str
    node_id: str
    params: dict[str, ParamValue] = field(default_factory=dict)
    enabled: bool = True
    label: str = ""
    color: tuple[float, float, float] | None = None


@dataclass(frozen=True)
class Connection:
    source: str     # instance feeding a distance (or coordinate-transformed child)
    target: str     # instance consuming it
    slot: int = 0


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable copy of a graph, safe to hand to another thread."""
    instances: tuple[NodeInstance, ...]
    connections: tuple[Connection, ...]
    mode: str
    version: int


class SceneGraph:
    """Ordered node instances plus the connections between them.

    The last instance is the root of the compiled expression. Every mutation
    bumps ``version``, which the compile scheduler uses to recognise stale
    results.
    """

    def __init__(self, catalog=None, mode: str = "2d",
                 instances=(), connections=()):
        if mode not in RENDER_MODES:
            raise GraphError(f"Unknown render mode '{mode}'")
        self.catalog = catalog
        self.mode = mode
        self.instances: list[NodeInstance] = list(instances)
        self.connections: list[Connection] = list(connections)
        self.version = 0

    # --- Lookup ---

    def find(self, instance_id: str) -> NodeInstance | None:
        for inst in self.instances:
            if inst.instance_id == instance_id:
                return inst
        return None

    def _require(self, instance_id: str) -> NodeInstance:
        inst = self.find(instance_id)
        if inst is None:
            raise GraphError(f"Unknown instance '{instance_id}'")
        return inst

    def inputs_of(self, instance_id: str) -> list[Connection]:
        return sorted(
            (c for c in self.connections if c.target == instance_id),
            key=lambda c: c.slot,
        )

    def _bump(self) -> None:
        self.version += 1

    # --- Mutations ---

    def add_node(self, instance: NodeInstance, index: int | None = None) -> NodeInstance:
        if not instance.instance_id:
            raise GraphError("Instance ID must not be empty")
        if self.find(instance.instance_id) is not None:
            raise GraphError(f"Instance '{instance.instance_id}' already exists")
        if self.catalog is not None:
            node = self.catalog.get(instance.node_id)
            if node is None:
                raise GraphError(f"Unknown node type '{instance.node_id}'")
            # fill unset parameters from the definition
            for key, value in node.defaults().items():
                instance.params.setdefault(key, value)
        if index is None:
            self.instances.append(instance)
        else:
            self.instances.insert(index, instance)
        self._bump()
        return instance

    def remove_node(self, instance_id: str) -> NodeInstance:
        inst = self._require(instance_id)
        self.instances.remove(inst)
        self.connections = [
            c for c in self.connections
            if c.source != instance_id and c.target != instance_id
        ]
        self._bump()
        return inst

    def connect(self, source: str, target: str, slot: int = 0) -> Connection:
        """Feed ``source`` into ``slot`` of ``target``, replacing any previous input."""
        self._require(source)
        target_inst = self._require(target)
        if source == target:
            raise GraphError(f"Cannot connect instance '{source}' to itself")
        if slot < 0:
            raise GraphError(f"Slot must be non-negative, got {slot}")
        if self.catalog is not None:
            node = self.catalog.get(target_inst.node_id)
            if node is not None and slot >= node.inputs:
                raise GraphError(
                    f"Node '{node.id}' has {node.inputs} input slot(s); "
                    f"cannot connect to slot {slot}"
                )

        conn = Connection(source, target, slot)
        self.connections = [
            c for c in self.connections if not (c.target == target and c.slot == slot)
        ]
        self.connections.append(conn)
        self._bump()
        return conn

    def disconnect(self, target: str, slot: int = 0) -> Connection:
        for conn in self.connections:
            if conn.target == target and conn.slot == slot:
                self.connections.remove(conn)
                self._bump()
                return conn
        raise GraphError(f"No connection into slot {slot} of '{target}'")

    def set_param(self, instance_id: str, param_id: str, value: ParamValue) -> None:
        inst = self._require(instance_id)
        if self.catalog is not None:
            node = self.catalog.get(inst.node_id)
            if node is not None and node.parameter(param_id) is None:
                raise GraphError(f"Node '{node.id}' has no parameter '{param_id}'")
        if isinstance(value, list):
            value = tuple(value)
        inst.params[param_id] = value
        self._bump()

    def set_enabled(self, instance_id: str, enabled: bool) -> None:
        self._require(instance_id).enabled = bool(enabled)
        self._bump()

    def set_mode(self, mode: str) -> None:
        if mode not in RENDER_MODES:
            raise GraphError(f"Unknown render mode '{mode}'")
        self.mode = mode
        self._bump()

    # --- Snapshots ---

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(
            instances=tuple(copy.deepcopy(inst) for inst in self.instances),
            connections=tuple(self.connections),
            mode=self.mode,
            version=self.version,
        )

    def __len__(self) -> int:
        return len(self.instances)
