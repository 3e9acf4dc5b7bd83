"""Name-to-adapter lookup used by ingestion configs.

Built-in sources (wide per-prefecture ratio CSVs and long observation CSVs)
are always present; configs may add more through ``plugins`` entries naming
a module and an ``ObservationAdapter`` subclass.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from lineagehub.adapters import (
    LongObservationCsvAdapter,
    ObservationAdapter,
    WideRatioCsvAdapter,
)
from lineagehub.errors import UnknownAdapterError

AdapterFactory = Callable[..., ObservationAdapter]

BUILTIN_ADAPTERS: tuple[type[ObservationAdapter], ...] = (
    WideRatioCsvAdapter,
    LongObservationCsvAdapter,
)


def _adapter_key(name: str) -> str:
    key = name.strip().lower()
    if not key:
        raise ValueError("Adapter name cannot be empty")
    return key


@dataclass(frozen=True)
class AdapterPluginSpec:
    """``plugins`` entry of an ingestion config."""

    name: str
    module: str
    class_name: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> AdapterPluginSpec:
        return cls(name=raw["name"], module=raw["module"], class_name=raw["class_name"])


class AdapterRegistry:
    """Maps case-insensitive source names to observation adapter factories."""

    def __init__(self) -> None:
        self._factories: dict[str, AdapterFactory] = {}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._factories

    def register(self, name: str, factory: AdapterFactory) -> None:
        key = _adapter_key(name)
        if key in self._factories:
            raise ValueError(f"Adapter already registered: {name}")
        self._factories[key] = factory

    def register_plugin(self, plugin: AdapterPluginSpec) -> None:
        """Import ``plugin.module`` and register its adapter class.

        Raises ``TypeError`` when the named attribute is not an
        ``ObservationAdapter`` subclass, so a typo in a config fails at
        startup rather than on the first ``read()``.
        """

        module = importlib.import_module(plugin.module)
        adapter_cls = getattr(module, plugin.class_name)
        if not (isinstance(adapter_cls, type) and issubclass(adapter_cls, ObservationAdapter)):
            raise TypeError(
                f"Plugin {plugin.name!r}: {plugin.module}.{plugin.class_name} "
                "is not an ObservationAdapter"
            )
        self.register(plugin.name, adapter_cls)

    def register_plugins(self, entries: Iterable[Mapping[str, Any] | AdapterPluginSpec]) -> None:
        for entry in entries:
            plugin = entry if isinstance(entry, AdapterPluginSpec) else AdapterPluginSpec.from_mapping(entry)
            self.register_plugin(plugin)

    def create(self, name: str, **kwargs: Any) -> ObservationAdapter:
        key = _adapter_key(name)
        if key not in self._factories:
            raise UnknownAdapterError(
                f"Unknown adapter '{name}'. Available: {', '.join(self.available())}"
            )
        return self._factories[key](**kwargs)

    def create_all(self, entries: Iterable[Mapping[str, Any]]) -> list[ObservationAdapter]:
        """Build one adapter per ``{"name": ..., "params": {...}}`` config entry."""

        return [self.create(entry["name"], **dict(entry.get("params", {}))) for entry in entries]

    def available(self) -> list[str]:
        return sorted(self._factories)


def build_default_adapter_registry(
    plugins: Iterable[Mapping[str, Any] | AdapterPluginSpec] = (),
) -> AdapterRegistry:
    """Registry with the built-in adapters plus any configured ``plugins``."""

    registry = AdapterRegistry()
    for adapter_cls in BUILTIN_ADAPTERS:
        registry.register(adapter_cls.name, adapter_cls)
    registry.register_plugins(plugins)
    return registry
