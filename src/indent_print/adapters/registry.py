from __future__ import annotations

from collections.abc import Iterable
from types import ModuleType
from typing import Callable

from indent_print.adapters.contracts import AdapterMeta, get_adapter_meta


class AdapterRegistryError(ValueError):
    # Raised when adapter lookup/build fails.
    pass


class AdapterRegistry:
    # Registry of adapter factories keyed by kind + name.
    def __init__(self) -> None:
        self._factories: dict[tuple[str, str], Callable[[dict[str, object]], object]] = {}
        self._meta: dict[tuple[str, str], AdapterMeta | None] = {}

    def register(self, kind: str, name: str, factory: Callable[[dict[str, object]], object]) -> None:
        key = (kind, name)
        if key in self._factories:
            raise AdapterRegistryError(f"Duplicate adapter registration: {kind}/{name}")
        self._factories[key] = factory
        self._meta[key] = get_adapter_meta(factory)

    def register_module(self, module: ModuleType) -> None:
        # Register every @adapter-decorated factory exposed by a module.
        for value in vars(module).values():
            meta = get_adapter_meta(value)
            if meta is None or meta.kind is None:
                continue
            self.register(meta.kind, meta.name, value)

    def build(self, kind: str, name: str, settings: dict[str, object] | None = None) -> object:
        if settings is None:
            settings = {}
        if not isinstance(settings, dict):
            raise AdapterRegistryError("Adapter settings must be a mapping")
        key = (kind, name)
        if key not in self._factories:
            known = sorted(n for k, n in self._factories if k == kind)
            raise AdapterRegistryError(f"Unknown {kind} adapter: {name} (known: {known})")
        return self._factories[key](settings)

    def names(self, kind: str) -> list[str]:
        return sorted(n for k, n in self._factories if k == kind)

    def get_meta(self, kind: str, name: str) -> AdapterMeta | None:
        return self._meta.get((kind, name))


def default_registry(modules: Iterable[ModuleType] | None = None) -> AdapterRegistry:
    # Registry pre-populated with the framework-owned sink and log adapters.
    from indent_print.adapters import char_sinks, logging

    registry = AdapterRegistry()
    for module in modules if modules is not None else (char_sinks, logging):
        registry.register_module(module)
    return registry
