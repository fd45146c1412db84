"""Node definition catalog.

An explicitly constructed registry of node kinds. Definitions are registered
once at startup; the first query freezes the catalog, after which it is
read-only and can be shared between compilations without locking.
"""

from __future__ import annotations
import logging
import re

from sdfgraph.catalog.signature import parse_signature, SignatureError
from sdfgraph.catalog.types import (
    NodeDefinition, CATEGORIES, COORD_SPACES, COST_TIERS,
    OPERATION, DOMAIN_TRANSFORM,
)
from sdfgraph.config import COST_ESTIMATES
from sdfgraph.errors import CatalogError

log = logging.getLogger(__name__)

_NODE_ID_RE = re.compile(r"^[a-z][a-z0-9_-]*$")
_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


class NodeCatalog:
    def __init__(self, utilities: dict[str, str] | None = None):
        self._nodes: dict[str, NodeDefinition] = {}
        self._by_category: dict[str, list[str]] = {}
        self._by_coord_space: dict[str, list[str]] = {}
        self._utilities: dict[str, str] = dict(utilities or {})
        self._frozen = False

    # --- Registration ---

    def register(self, definitions) -> None:
        """Append node definitions. Only allowed before the first query."""
        if self._frozen:
            raise CatalogError(
                "Node catalog is read-only once queried; register all "
                "definitions at startup"
            )
        for node in definitions:
            self._validate(node)
            self._nodes[node.id] = node
            self._by_category.setdefault(node.category, []).append(node.id)
            spaces = ("2d", "3d") if node.coord_space == "both" else (node.coord_space,)
            for space in spaces:
                self._by_coord_space.setdefault(space, []).append(node.id)
            log.debug("registered node '%s' (%s)", node.id, node.category)

    def utility(self, name: str) -> str:
        self._frozen = True
        return self._utilities[name]

    # --- Queries ---

    def get(self, node_id: str) -> NodeDefinition | None:
        self._frozen = True
        return self._nodes.get(node_id)

    def has(self, node_id: str) -> bool:
        self._frozen = True
        return node_id in self._nodes

    def get_all(self) -> list[NodeDefinition]:
        self._frozen = True
        return list(self._nodes.values())

    def get_by_category(self, category: str) -> list[NodeDefinition]:
        self._frozen = True
        ids = self._by_category.get(category, [])
        return sorted((self._nodes[i] for i in ids), key=lambda n: n.name)

    def get_by_coord_space(self, space: str) -> list[NodeDefinition]:
        self._frozen = True
        ids = self._by_coord_space.get(space, [])
        return sorted((self._nodes[i] for i in ids), key=lambda n: n.name)

    def search(self, query: str) -> list[NodeDefinition]:
        """Rank nodes by how well id, name, tags and description match."""
        self._frozen = True
        q = query.lower().strip()
        if not q:
            return self.get_all()

        scored = []
        for node in self._nodes.values():
            score = 0
            if node.id == q:
                score += 100
            if node.id.startswith(q):
                score += 50
            name = node.name.lower()
            if q in name:
                score += 30
                if name.startswith(q):
                    score += 20
            if any(q in tag.lower() for tag in node.tags):
                score += 15
            if q in node.description.lower():
                score += 5
            if score > 0:
                scored.append((score, node))

        scored.sort(key=lambda item: -item[0])
        return [node for _, node in scored]

    def stats(self) -> dict:
        self._frozen = True
        by_tier = {tier: 0 for tier in COST_TIERS}
        for node in self._nodes.values():
            by_tier[node.cost_tier] += 1
        return {
            "total": len(self._nodes),
            "by_category": {c: len(ids) for c, ids in self._by_category.items()},
            "by_coord_space": {s: len(ids) for s, ids in self._by_coord_space.items()},
            "by_cost_tier": by_tier,
        }

    @staticmethod
    def cost_of(node: NodeDefinition) -> float:
        return COST_ESTIMATES[node.cost_tier]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return self.has(node_id)

    # --- Validation ---

    def _validate(self, node: NodeDefinition) -> None:
        if not _NODE_ID_RE.match(node.id or ""):
            raise CatalogError(
                f"Invalid node ID: '{node.id}'. Must be lowercase alphanumeric "
                f"with underscores/dashes."
            )
        if node.id in self._nodes:
            raise CatalogError(f"Node '{node.id}' is already registered")
        if not node.name:
            raise CatalogError(f"Node '{node.id}' must have a name")
        if not _VERSION_RE.match(node.version or ""):
            raise CatalogError(f"Node '{node.id}' must have a semver version, got '{node.version}'")
        if node.category not in CATEGORIES:
            raise CatalogError(f"Node '{node.id}' has unknown category '{node.category}'")
        if node.coord_space not in COORD_SPACES:
            raise CatalogError(f"Node '{node.id}' has unknown coordinate space '{node.coord_space}'")
        if node.cost_tier not in COST_TIERS:
            raise CatalogError(f"Node '{node.id}' has unknown cost tier '{node.cost_tier}'")
        if not node.glsl.signature.strip() or not node.glsl.body.strip():
            raise CatalogError(f"Node '{node.id}' must have GLSL code with signature and body")

        param_ids = set()
        for param in node.parameters:
            if param.id in param_ids:
                raise CatalogError(f"Node '{node.id}' has duplicate parameter ID: '{param.id}'")
            param_ids.add(param.id)
            if param.min is not None and param.max is not None and param.min > param.max:
                raise CatalogError(
                    f"Node '{node.id}' parameter '{param.id}': min ({param.min}) > max ({param.max})"
                )

        for target in node.mod_targets:
            if target.parameter_id not in param_ids:
                raise CatalogError(
                    f"Node '{node.id}' mod target references unknown parameter: "
                    f"'{target.parameter_id}'"
                )
            if not node.parameter(target.parameter_id).modulatable:
                log.warning("node '%s' mod target '%s' references a non-modulatable parameter",
                            node.id, target.parameter_id)

        for name in node.glsl.requires:
            if name not in self._utilities:
                raise CatalogError(f"Node '{node.id}' requires unknown GLSL utility '{name}'")

        self._validate_signature(node)

    def _validate_signature(self, node: NodeDefinition) -> None:
        try:
            sig = parse_signature(node.glsl.signature)
        except SignatureError as e:
            raise CatalogError(f"Node '{node.id}': {e}") from e

        types = sig.param_types
        lead = node.inputs if node.category == OPERATION else 1
        if node.category == OPERATION:
            if node.inputs < 1:
                raise CatalogError(f"Operation '{node.id}' must declare at least one input")
            if any(t != "float" for t in types[:lead]) or sig.return_type != "float":
                raise CatalogError(
                    f"Operation '{node.id}' must take {lead} leading float distances "
                    f"and return float"
                )
        else:
            if not types or types[0] not in ("vec2", "vec3"):
                raise CatalogError(f"Node '{node.id}' must take a vec2 or vec3 coordinate first")
            if node.category == DOMAIN_TRANSFORM:
                if sig.return_type not in ("vec2", "vec3"):
                    raise CatalogError(f"Transform '{node.id}' must return a coordinate")
                if node.inputs != 1:
                    raise CatalogError(f"Transform '{node.id}' must declare exactly one input")
            elif sig.return_type != "float":
                raise CatalogError(f"Node '{node.id}' must return a float distance")
            elif node.inputs != 0:
                raise CatalogError(f"Leaf node '{node.id}' cannot declare inputs")

        expected = tuple(p.glsl_type for p in node.parameters)
        if types[lead:] != expected:
            raise CatalogError(
                f"Node '{node.id}' signature parameters {types[lead:]} do not match "
                f"declared parameters {expected}"
            )
