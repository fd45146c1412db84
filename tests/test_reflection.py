"""Tests for the reflection metadata emitter."""

import json

from sdfgraph.catalog import build_default_catalog
from sdfgraph.codegen import compile_graph
from sdfgraph.codegen.reflection import (
    generate_reflection, emit_reflection_json, compute_std140_offsets,
)
from sdfgraph.graph import NodeInstance, Connection

CATALOG = build_default_catalog()


def _reflect(instances, connections=(), mode="2d"):
    compiled = compile_graph(instances, list(connections), mode, CATALOG)
    return generate_reflection(compiled, source_name="scene.json")


class TestStd140:
    def test_scalar_then_vec2(self):
        assert compute_std140_offsets(["float", "vec2"]) == [0, 8]

    def test_vec3_aligns_to_16(self):
        assert compute_std140_offsets(["float", "vec3", "float"]) == [0, 16, 28]

    def test_vec4(self):
        assert compute_std140_offsets(["vec2", "vec4"]) == [0, 16]


class TestReflection:
    def test_header(self):
        r = _reflect([NodeInstance("c1", "circle")])
        assert r["version"] == 1
        assert r["source"] == "scene.json"
        assert r["mode"] == "2d"
        assert r["errors"] == []

    def test_uniform_layout(self):
        instances = [
            NodeInstance("c1", "circle"),
            NodeInstance("r1", "rect"),
            NodeInstance("u1", "union"),
        ]
        r = _reflect(instances, [Connection("c1", "u1", 0), Connection("r1", "u1", 1)])
        radius, size = r["uniforms"]
        assert radius == {
            "name": "u_c1_radius", "instance": "c1", "parameter": "radius",
            "type": "float", "kind": "parameter", "offset": 0, "size": 4,
        }
        assert size["offset"] == 8
        assert size["size"] == 8
        assert r["block_size"] == 16
        assert r["node_order"] == ["c1", "r1", "u1"]
        assert abs(r["total_cost"] - 0.3) < 1e-9

    def test_materials(self):
        r = _reflect([NodeInstance("c1", "circle", color=(1.0, 0.0, 0.0))])
        assert r["materials"] == [
            {"id": 1, "instance": "c1", "uniform": "m_c1_color", "color": [1.0, 0.0, 0.0]},
        ]
        assert r["uniforms"][-1]["kind"] == "instance-color"
        assert r["uniforms"][-1]["offset"] == 16

    def test_errors_reported(self):
        r = _reflect([NodeInstance("x", "missing-node")])
        assert r["errors"]
        assert r["uniforms"] == []
        assert r["block_size"] == 0

    def test_json_round_trip(self):
        r = _reflect([NodeInstance("s1", "sphere")], mode="3d")
        text = emit_reflection_json(r)
        assert text.endswith("\n")
        assert json.loads(text) == r
