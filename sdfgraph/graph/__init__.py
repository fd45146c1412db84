from sdfgraph.graph.model import SceneGraph, NodeInstance, Connection, GraphSnapshot
from sdfgraph.graph.validate import validate_graph, ValidationResult
