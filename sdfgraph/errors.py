"""Exception types raised on API misuse.

Graph and shader problems found while compiling are never raised; they are
collected into the ``errors`` list of the result instead.
"""


class SdfGraphError(Exception):
    pass


class CatalogError(SdfGraphError):
    """Invalid node definition or registration after the catalog was frozen."""


class GraphError(SdfGraphError):
    """Rejected scene graph mutation."""


class SceneFormatError(SdfGraphError):
    """Malformed scene document."""


class ModulationError(SdfGraphError):
    """Malformed modulation rule."""
