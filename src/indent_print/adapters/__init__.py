from .char_sinks import FileCharSink, MemoryCharSink, TextIOCharSink, as_char_sink
from .logging import JsonlLogSink, MemoryLogSink, StdoutLogSink
from .registry import AdapterRegistry, AdapterRegistryError, default_registry

__all__ = [
    "TextIOCharSink",
    "FileCharSink",
    "MemoryCharSink",
    "as_char_sink",
    "StdoutLogSink",
    "JsonlLogSink",
    "MemoryLogSink",
    "AdapterRegistry",
    "AdapterRegistryError",
    "default_registry",
]
