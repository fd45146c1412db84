"""Built-in node definitions."""

from sdfgraph.catalog.nodes.shapes2d import ALL_SHAPES_2D
from sdfgraph.catalog.nodes.shapes3d import ALL_SHAPES_3D
from sdfgraph.catalog.nodes.ops import ALL_OPERATIONS
from sdfgraph.catalog.nodes.transforms import ALL_TRANSFORMS
from sdfgraph.catalog.nodes.fields import ALL_FIELDS
from sdfgraph.catalog.nodes.utils import GLSL_UTILITIES

ALL_NODES = ALL_SHAPES_2D + ALL_SHAPES_3D + ALL_OPERATIONS + ALL_TRANSFORMS + ALL_FIELDS


def build_default_catalog():
    """Create a catalog holding every built-in node."""
    from sdfgraph.catalog.registry import NodeCatalog
    catalog = NodeCatalog(utilities=GLSL_UTILITIES)
    catalog.register(ALL_NODES)
    return catalog
