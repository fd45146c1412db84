"""Node definition catalog."""

from sdfgraph.catalog.registry import NodeCatalog
from sdfgraph.catalog.nodes import build_default_catalog

__all__ = ["NodeCatalog", "build_default_catalog"]
