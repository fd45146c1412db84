"""sdfgraph: node-graph SDF shader compiler, GL runtime and modulation matrix."""

__version__ = "0.1.0"
