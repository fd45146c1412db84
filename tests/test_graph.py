"""Tests for the scene graph mutation API."""

import pytest

from sdfgraph.catalog import build_default_catalog
from sdfgraph.errors import GraphError
from sdfgraph.graph import SceneGraph, NodeInstance, Connection


def _graph(mode="2d"):
    graph = SceneGraph(build_default_catalog(), mode=mode)
    graph.add_node(NodeInstance("c1", "circle"))
    graph.add_node(NodeInstance("r1", "rect"))
    graph.add_node(NodeInstance("u1", "union"))
    return graph


class TestAddRemove:
    def test_add_fills_defaults(self):
        graph = _graph()
        assert graph.find("c1").params == {"radius": 0.5}
        assert graph.find("r1").params["size"] == (0.5, 0.3)

    def test_explicit_params_kept(self):
        graph = SceneGraph(build_default_catalog())
        graph.add_node(NodeInstance("c1", "circle", {"radius": 0.9}))
        assert graph.find("c1").params["radius"] == 0.9

    def test_add_at_index(self):
        graph = _graph()
        graph.add_node(NodeInstance("c0", "circle"), index=0)
        assert [i.instance_id for i in graph.instances] == ["c0", "c1", "r1", "u1"]

    def test_duplicate_instance(self):
        graph = _graph()
        with pytest.raises(GraphError, match="already exists"):
            graph.add_node(NodeInstance("c1", "circle"))

    def test_unknown_node_type(self):
        graph = _graph()
        with pytest.raises(GraphError, match="Unknown node type"):
            graph.add_node(NodeInstance("x1", "no-such-node"))

    def test_remove_drops_connections(self):
        graph = _graph()
        graph.connect("c1", "u1", 0)
        graph.connect("r1", "u1", 1)
        graph.remove_node("c1")
        assert graph.find("c1") is None
        assert graph.connections == [Connection("r1", "u1", 1)]

    def test_remove_unknown(self):
        with pytest.raises(GraphError):
            _graph().remove_node("zz")


class TestConnections:
    def test_connect_replaces_slot(self):
        graph = _graph()
        graph.add_node(NodeInstance("c2", "circle"))
        graph.connect("c1", "u1", 0)
        graph.connect("c2", "u1", 0)
        assert graph.inputs_of("u1") == [Connection("c2", "u1", 0)]

    def test_inputs_sorted_by_slot(self):
        graph = _graph()
        graph.connect("r1", "u1", 1)
        graph.connect("c1", "u1", 0)
        assert [c.slot for c in graph.inputs_of("u1")] == [0, 1]

    def test_slot_beyond_inputs(self):
        graph = _graph()
        with pytest.raises(GraphError, match="input slot"):
            graph.connect("c1", "u1", 2)

    def test_leaf_has_no_slots(self):
        graph = _graph()
        with pytest.raises(GraphError):
            graph.connect("c1", "r1", 0)

    def test_negative_slot(self):
        graph = _graph()
        with pytest.raises(GraphError):
            graph.connect("c1", "u1", -1)

    def test_self_connection(self):
        graph = _graph()
        with pytest.raises(GraphError, match="itself"):
            graph.connect("u1", "u1", 0)

    def test_unknown_endpoint(self):
        graph = _graph()
        with pytest.raises(GraphError, match="Unknown instance"):
            graph.connect("ghost", "u1", 0)

    def test_disconnect(self):
        graph = _graph()
        graph.connect("c1", "u1", 0)
        removed = graph.disconnect("u1", 0)
        assert removed == Connection("c1", "u1", 0)
        assert graph.connections == []

    def test_disconnect_empty_slot(self):
        with pytest.raises(GraphError):
            _graph().disconnect("u1", 1)


class TestParamsAndVersion:
    def test_set_param(self):
        graph = _graph()
        graph.set_param("r1", "size", [0.2, 0.4])
        assert graph.find("r1").params["size"] == (0.2, 0.4)

    def test_set_unknown_param(self):
        with pytest.raises(GraphError, match="no parameter"):
            _graph().set_param("c1", "width", 1.0)

    def test_set_enabled_and_mode(self):
        graph = _graph()
        graph.set_enabled("c1", False)
        graph.set_mode("3d")
        assert graph.find("c1").enabled is False
        assert graph.mode == "3d"

    def test_invalid_mode(self):
        with pytest.raises(GraphError):
            _graph().set_mode("4d")
        with pytest.raises(GraphError):
            SceneGraph(mode="2.5d")

    def test_every_mutation_bumps_version(self):
        graph = _graph()
        v = graph.version
        assert v == 3
        graph.connect("c1", "u1", 0)
        graph.set_param("c1", "radius", 0.3)
        graph.set_enabled("c1", True)
        graph.disconnect("u1", 0)
        graph.remove_node("r1")
        assert graph.version == v + 5

    def test_failed_mutation_keeps_version(self):
        graph = _graph()
        v = graph.version
        with pytest.raises(GraphError):
            graph.connect("u1", "u1", 0)
        assert graph.version == v

    def test_snapshot_is_detached(self):
        graph = _graph()
        snap = graph.snapshot()
        graph.set_param("c1", "radius", 1.5)
        graph.add_node(NodeInstance("c9", "circle"))
        assert snap.instances[0].params["radius"] == 0.5
        assert len(snap.instances) == 3
        assert snap.version == 3
        assert snap.mode == "2d"

    def test_without_catalog(self):
        graph = SceneGraph()
        graph.add_node(NodeInstance("a", "anything"))
        graph.add_node(NodeInstance("b", "anything"))
        graph.connect("a", "b", 5)
        assert len(graph) == 2
