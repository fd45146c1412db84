"""Tests for scene document parsing."""

import json

import pytest

from sdfgraph.catalog import build_default_catalog
from sdfgraph.errors import SceneFormatError
from sdfgraph.graph import Connection
from sdfgraph.graph.serialization import (
    scene_from_dict, scene_to_dict, rules_from_list, load_scene,
)

CATALOG = build_default_catalog()

SCENE = {
    "mode": "2d",
    "nodes": [
        {"instanceId": "c1", "nodeId": "circle", "params": {"radius": 0.3}, "color": [1, 0, 0]},
        {"instanceId": "r1", "nodeId": "rect", "params": {"size": [0.4, 0.2]}, "enabled": False},
        {"instanceId": "u1", "nodeId": "union", "label": "Both"},
    ],
    "connections": [
        {"from": "c1", "to": "u1", "slot": 0},
        {"from": "r1", "to": "u1", "slot": 1},
    ],
    "modulation": [
        {"id": "m1", "source": "audio.rms", "target": "c1.radius", "amount": 0.4, "curve": "exp"},
    ],
}


class TestSceneFromDict:
    def test_nodes(self):
        graph = scene_from_dict(SCENE, CATALOG)
        c1, r1, u1 = graph.instances
        assert c1.params == {"radius": 0.3}
        assert c1.color == (1.0, 0.0, 0.0)
        assert r1.params["size"] == (0.4, 0.2)
        assert r1.enabled is False
        assert u1.enabled is True
        assert u1.label == "Both"
        assert u1.params == {}

    def test_connections(self):
        graph = scene_from_dict(SCENE)
        assert graph.connections == [Connection("c1", "u1", 0), Connection("r1", "u1", 1)]

    def test_defaults(self):
        graph = scene_from_dict({"nodes": [{"instanceId": "a", "nodeId": "circle"}]})
        assert graph.mode == "2d"
        assert graph.connections == []
        assert graph.instances[0].color is None

    def test_connection_slot_defaults_to_zero(self):
        graph = scene_from_dict({"nodes": [], "connections": [{"from": "a", "to": "b"}]})
        assert graph.connections[0].slot == 0

    def test_missing_instance_id(self):
        with pytest.raises(SceneFormatError, match="instanceId"):
            scene_from_dict({"nodes": [{"nodeId": "circle"}]})

    def test_missing_connection_end(self):
        with pytest.raises(SceneFormatError, match="connections\\[0\\]"):
            scene_from_dict({"nodes": [], "connections": [{"from": "a"}]})

    def test_bad_slot(self):
        with pytest.raises(SceneFormatError, match="slot"):
            scene_from_dict({"connections": [{"from": "a", "to": "b", "slot": "first"}]})

    def test_bad_color(self):
        with pytest.raises(SceneFormatError, match="color"):
            scene_from_dict({"nodes": [{"instanceId": "a", "nodeId": "circle", "color": [1, 0]}]})

    def test_bad_mode(self):
        with pytest.raises(SceneFormatError, match="render mode"):
            scene_from_dict({"mode": "4d"})

    def test_not_an_object(self):
        with pytest.raises(SceneFormatError):
            scene_from_dict([])

    def test_nodes_not_a_list(self):
        with pytest.raises(SceneFormatError):
            scene_from_dict({"nodes": {"a": 1}})


class TestRules:
    def test_parse(self):
        rules = rules_from_list(SCENE["modulation"])
        assert len(rules) == 1
        assert rules[0].curve == "exp"
        assert rules[0].amount == 0.4

    def test_none(self):
        assert rules_from_list(None) == []

    def test_bad_rule_is_a_format_error(self):
        with pytest.raises(SceneFormatError, match="modulation\\[0\\]"):
            rules_from_list([{"source": "a", "target": "b", "curve": "wobbly"}])


class TestSceneToDict:
    def test_round_trip(self):
        graph = scene_from_dict(SCENE)
        rules = rules_from_list(SCENE["modulation"])
        data = scene_to_dict(graph, rules)
        again = scene_from_dict(data)
        assert again.instances == graph.instances
        assert again.connections == graph.connections
        assert rules_from_list(data["modulation"]) == rules
        assert data["nodes"][1]["params"]["size"] == [0.4, 0.2]
        assert "color" not in data["nodes"][2]


class TestLoadScene:
    def test_load(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(SCENE), encoding="utf-8")
        graph, rules = load_scene(path, CATALOG)
        assert len(graph) == 3
        assert rules[0].target == "c1.radius"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SceneFormatError, match="invalid JSON"):
            load_scene(path)
