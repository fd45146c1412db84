"""Top-level compiler orchestration."""

from __future__ import annotations
import logging
from pathlib import Path

from sdfgraph.codegen.glsl_builder import compile_graph, CompiledShader
from sdfgraph.codegen.reflection import generate_reflection, emit_reflection_json
from sdfgraph.config import CompileOptions
from sdfgraph.graph.serialization import load_scene

log = logging.getLogger(__name__)


def compile_scene(graph, catalog, options: CompileOptions | None = None) -> CompiledShader:
    """Compile a ``SceneGraph`` or a ``GraphSnapshot``."""
    return compile_graph(graph.instances, graph.connections, graph.mode, catalog, options)


def compile_document(
    input_path: Path,
    output_dir: Path | None,
    catalog,
    mode: str | None = None,
    emit_reflection: bool = True,
    options: CompileOptions | None = None,
) -> CompiledShader:
    """Compile a scene document to ``<stem>.frag`` (+ ``<stem>.json`` reflection).

    Nothing is written when the graph fails to compile.
    """
    input_path = Path(input_path)
    output_dir = Path(output_dir) if output_dir is not None else input_path.parent

    graph, _rules = load_scene(input_path, catalog)
    if mode is not None:
        graph.set_mode(mode)

    compiled = compile_scene(graph, catalog, options)
    if compiled.errors:
        return compiled

    output_dir.mkdir(parents=True, exist_ok=True)
    stem = input_path.stem

    frag_path = output_dir / f"{stem}.frag"
    frag_path.write_text(compiled.fragment_source, encoding="utf-8")
    print(f"Wrote {frag_path}")

    if emit_reflection:
        reflection = generate_reflection(compiled, source_name=input_path.name)
        json_path = output_dir / f"{stem}.json"
        json_path.write_text(emit_reflection_json(reflection), encoding="utf-8")
        print(f"Wrote {json_path}")

    log.debug("compiled %s: %d uniforms, cost %.2f",
              input_path.name, len(compiled.uniforms), compiled.total_cost)
    return compiled
