"""Tests for pre-compilation graph validation."""

from sdfgraph.catalog import build_default_catalog
from sdfgraph.graph import NodeInstance, Connection, validate_graph
from sdfgraph.graph.validate import find_cycle

CATALOG = build_default_catalog()


def _validate(instances, connections=(), mode="2d"):
    return validate_graph(instances, list(connections), mode, CATALOG)


def _union_scene():
    return [
        NodeInstance("c1", "circle", {"radius": 0.5}),
        NodeInstance("r1", "rect", {"size": (0.5, 0.3)}),
        NodeInstance("u1", "union"),
    ]


class TestErrors:
    def test_valid_graph(self):
        result = _validate(_union_scene(), [Connection("c1", "u1", 0), Connection("r1", "u1", 1)])
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_duplicate_instance_id(self):
        result = _validate([NodeInstance("a", "circle"), NodeInstance("a", "rect")])
        assert any("Duplicate instance ID" in e for e in result.errors)

    def test_unknown_node(self):
        result = _validate([NodeInstance("a", "does-not-exist")])
        assert not result.valid
        assert "does-not-exist" in result.errors[0]

    def test_connection_to_missing_instance(self):
        result = _validate(_union_scene(), [Connection("c1", "ghost", 0)])
        assert any("unknown instance: 'ghost'" in e for e in result.errors)

    def test_connection_from_missing_instance(self):
        result = _validate(_union_scene(), [Connection("ghost", "u1", 0)])
        assert any("unknown instance: 'ghost'" in e for e in result.errors)

    def test_slot_out_of_range(self):
        result = _validate(_union_scene(), [Connection("c1", "u1", 2)])
        assert any("slot 2" in e for e in result.errors)

    def test_self_connection(self):
        result = _validate(_union_scene(), [Connection("u1", "u1", 0)])
        assert any("Self-referencing" in e for e in result.errors)

    def test_cycle_regardless_of_ordering(self):
        instances = [NodeInstance("a", "union"), NodeInstance("b", "union")]
        result = _validate(instances, [Connection("a", "b", 0), Connection("b", "a", 0)])
        assert any("Cycle detected" in e for e in result.errors)

    def test_invalid_mode(self):
        result = _validate(_union_scene(), mode="4d")
        assert any("render mode" in e for e in result.errors)

    def test_connection_into_leaf(self):
        result = _validate(_union_scene(), [Connection("c1", "r1", 0)])
        assert not result.valid
        assert any("slot 0 of 'r1'" in e and "0 input slot" in e for e in result.errors)


class TestWarnings:
    def test_3d_node_in_2d_scene(self):
        result = _validate([NodeInstance("s1", "sphere")])
        assert result.valid
        assert any("3D-only" in w for w in result.warnings)

    def test_2d_node_in_3d_scene(self):
        result = _validate([NodeInstance("c1", "circle")], mode="3d")
        assert any("2D-only" in w for w in result.warnings)

    def test_both_space_node_is_fine(self):
        result = _validate([NodeInstance("t1", "translate")], mode="3d")
        assert result.warnings == []

    def test_param_out_of_range(self):
        result = _validate([NodeInstance("c1", "circle", {"radius": 5.0})])
        assert result.valid
        assert any("outside" in w for w in result.warnings)

    def test_vector_component_out_of_range(self):
        result = _validate([NodeInstance("r1", "rect", {"size": (0.5, 9.0)})])
        assert any("outside" in w for w in result.warnings)

    def test_wrong_component_count(self):
        result = _validate([NodeInstance("r1", "rect", {"size": (0.5, 0.5, 0.5)})])
        assert any("component" in w for w in result.warnings)

    def test_unknown_param(self):
        result = _validate([NodeInstance("c1", "circle", {"radius": 0.5, "wobble": 1.0})])
        assert any("Unknown parameter 'wobble'" in w for w in result.warnings)

    def test_duplicate_slot(self):
        instances = _union_scene()
        result = _validate(instances, [Connection("c1", "u1", 0), Connection("r1", "u1", 0)])
        assert result.valid
        assert any("last one wins" in w for w in result.warnings)

    def test_dot_in_instance_id(self):
        result = _validate([NodeInstance("shape.1", "circle")])
        assert any("contains '.'" in w for w in result.warnings)


class TestFindCycle:
    def test_no_cycle(self):
        assert find_cycle([Connection("a", "b", 0), Connection("b", "c", 0)]) is None

    def test_reports_path(self):
        cycle = find_cycle([
            Connection("a", "b", 0),
            Connection("b", "c", 0),
            Connection("c", "a", 0),
        ])
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"a", "b", "c"}

    def test_self_loop(self):
        assert find_cycle([Connection("x", "x", 0)]) == ["x", "x"]

    def test_long_chain_is_iterative(self):
        chain = [Connection(f"n{i + 1}", f"n{i}", 0) for i in range(5000)]
        assert find_cycle(chain) is None
