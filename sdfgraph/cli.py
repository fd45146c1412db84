"""Command-line interface for the SDF graph compiler."""

import argparse
import logging
import sys
from pathlib import Path

from sdfgraph import __version__
from sdfgraph.config import RENDER_MODES
from sdfgraph.errors import SdfGraphError


def _list_nodes(catalog, category: str) -> int:
    from sdfgraph.catalog.types import CATEGORIES

    if category and category not in CATEGORIES:
        print(f"Error: unknown category '{category}' (expected one of {', '.join(CATEGORIES)})",
              file=sys.stderr)
        return 1
    nodes = catalog.get_by_category(category) if category else catalog.get_all()
    for node in nodes:
        print(f"  {node.id:<18} {node.category:<17} {node.coord_space:<5} {node.description}")
    return 0


def _validate_only(input_path: Path, catalog, mode) -> int:
    from sdfgraph.graph.serialization import load_scene
    from sdfgraph.graph.validate import validate_graph

    graph, _rules = load_scene(input_path, catalog)
    result = validate_graph(graph.instances, graph.connections, mode or graph.mode, catalog)
    for w in result.warnings:
        print(f"  Warning: {w}", file=sys.stderr)
    for e in result.errors:
        print(f"Error: {e}", file=sys.stderr)
    if result.errors:
        return 1
    print(f"{input_path.name}: OK ({len(graph.instances)} nodes)")
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="sdfgraph",
        description="SDF node graph compiler: compiles scene documents to GLSL",
    )
    parser.add_argument("input", nargs="?", help="Input scene .json file")
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=None,
        help="Output directory (default: same as input file)",
    )
    parser.add_argument(
        "--mode", choices=RENDER_MODES, default=None,
        help="Override the scene's render mode",
    )
    parser.add_argument(
        "--no-reflection",
        action="store_true",
        help="Skip .json reflection metadata emission",
    )
    parser.add_argument(
        "--validate-only", action="store_true",
        help="Validate the scene graph and exit",
    )
    parser.add_argument(
        "--list-nodes", nargs="?", const="", default=None, metavar="CATEGORY",
        help="List catalog nodes (optionally of one category) and exit",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging",
    )
    parser.add_argument(
        "--version", action="version", version=f"sdfgraph {__version__}"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from sdfgraph.catalog import build_default_catalog
    catalog = build_default_catalog()

    if args.list_nodes is not None:
        sys.exit(_list_nodes(catalog, args.list_nodes))

    if args.input is None:
        parser.print_help()
        sys.exit(0)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.validate_only:
            sys.exit(_validate_only(input_path, catalog, args.mode))

        from sdfgraph.compiler import compile_document
        compiled = compile_document(
            input_path, args.output_dir, catalog,
            mode=args.mode,
            emit_reflection=not args.no_reflection,
        )
    except (SdfGraphError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for w in compiled.warnings:
        print(f"  Warning: {w}", file=sys.stderr)
    if compiled.errors:
        for e in compiled.errors:
            print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
