"""Off-tick compilation with version stamps."""

from __future__ import annotations
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from sdfgraph.codegen.glsl_builder import CompiledShader
from sdfgraph.compiler import compile_scene

log = logging.getLogger(__name__)


@dataclass
class CompileResult:
    version: int
    compiled: CompiledShader


class CompileScheduler:
    """Compiles graph snapshots on a worker thread.

    ``poll`` only hands back a result whose version matches the graph the
    caller currently has; anything older is dropped.
    """

    def __init__(self, catalog, options=None, max_workers: int = 1, executor=None):
        self.catalog = catalog
        self.options = options
        self._own_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="sdfgraph-compile")
        self._pending: list[tuple[int, Future]] = []

    def submit(self, graph) -> Future:
        snapshot = graph.snapshot()
        future = self._executor.submit(compile_scene, snapshot, self.catalog, self.options)
        self._pending.append((snapshot.version, future))
        log.debug("queued compile for graph version %d", snapshot.version)
        return future

    @property
    def pending(self) -> int:
        return len(self._pending)

    def poll(self, current_version: int) -> CompileResult | None:
        newest = None
        keep = []
        for version, future in self._pending:
            if version != current_version:
                if future.done() or future.cancel():
                    log.debug("discarding stale compile (version %d, current %d)",
                              version, current_version)
                    continue
                keep.append((version, future))
            elif future.done():
                newest = CompileResult(version, future.result())
            else:
                keep.append((version, future))
        self._pending = keep
        return newest

    def shutdown(self, wait: bool = True) -> None:
        for _, future in self._pending:
            future.cancel()
        self._pending = []
        if self._own_executor:
            self._executor.shutdown(wait=wait)
