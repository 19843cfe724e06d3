from __future__ import annotations

import threading
from typing import TypeVar

from indent_print.adapters.char_sinks import SINK_KIND
from indent_print.adapters.logging import LOG_KIND
from indent_print.adapters.registry import AdapterRegistry, default_registry
from indent_print.config.models import AdapterDecl, AppConfig
from indent_print.ports.char_sink import CharSink
from indent_print.ports.log_sink import LogSink
from indent_print.writer import IndentingWriter

T = TypeVar("T")


def build_writer(
    config: AppConfig,
    *,
    registry: AdapterRegistry | None = None,
    interrupted: threading.Event | None = None,
) -> IndentingWriter:
    # Composition root: resolve sink and log adapters by name, then wire the writer.
    if registry is None:
        registry = default_registry()

    sink = _build_checked(registry, SINK_KIND, config.sink, CharSink)

    log_sink: LogSink | None = None
    if config.logging is not None:
        log_sink = _build_checked(registry, LOG_KIND, config.logging, LogSink)

    return IndentingWriter(
        sink,
        config.writer.resolved_line_separator(),
        log_sink=log_sink,
        interrupted=interrupted,
    )


def _build_checked(registry: AdapterRegistry, kind: str, decl: AdapterDecl, port: type[T]) -> T:
    # The product must satisfy the port and, when declared, the adapter's own `provides` contract.
    built = registry.build(kind, decl.name, dict(decl.settings))
    if not isinstance(built, port):
        raise TypeError(f"Adapter {decl.name} did not produce a {port.__name__}")
    meta = registry.get_meta(kind, decl.name)
    if meta is not None and meta.provides and not isinstance(built, meta.provides):
        declared = ", ".join(t.__name__ for t in meta.provides)
        raise TypeError(f"Adapter {decl.name} produced {type(built).__name__}, declared {declared}")
    return built
