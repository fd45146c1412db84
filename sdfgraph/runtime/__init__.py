from sdfgraph.runtime.program import ShaderRuntime
from sdfgraph.runtime.scheduler import CompileScheduler, CompileResult
