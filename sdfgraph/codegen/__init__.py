from sdfgraph.codegen.glsl_builder import (
    compile_graph, CompiledShader, UniformBinding, MaterialSlot,
)
