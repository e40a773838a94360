from __future__ import annotations

import importlib
import logging
import threading
from typing import Any, Callable, Dict, Optional, Type

"""Name -> adapter class registry.

Adapter packages register their classes at import time with
`@registry.register("name")`; `load_adapters()` imports them.
"""

log = logging.getLogger(__name__)

ADAPTER_MODULES = ("cryptobench_classic", "cryptobench_liboqs")


class Registry:
    def __init__(self) -> None:
        self._items: Dict[str, Type[Any]] = {}

    def register(self, name: str) -> Callable[[Type[Any]], Type[Any]]:
        def deco(cls: Type[Any]) -> Type[Any]:
            self._items[name] = cls
            return cls
        return deco

    def get(self, name: str) -> Type[Any]:
        try:
            return self._items[name]
        except KeyError:
            raise KeyError(f"Unknown algorithm: {name!r}") from None

    def list(self) -> Dict[str, Type[Any]]:
        return dict(self._items)


registry = Registry()

_ADAPTER_INSTANCE_CACHE: Dict[str, Any] = {}
_CACHE_LOCK = threading.Lock()


def load_adapters() -> None:
    """Import the adapter packages so they register themselves."""
    for mod in ADAPTER_MODULES:
        try:
            importlib.import_module(mod)
        except ImportError as exc:
            log.warning("adapter package %s unavailable: %s", mod, exc)


def get_adapter(name: str) -> Any:
    """Return the shared instance for `name`, constructing it on first use."""
    with _CACHE_LOCK:
        adapter = _ADAPTER_INSTANCE_CACHE.get(name)
        if adapter is None:
            adapter = registry.get(name)()
            _ADAPTER_INSTANCE_CACHE[name] = adapter
        return adapter


def reset_adapter_cache(name: Optional[str] = None) -> None:
    """Drop cached adapter instances so env-driven overrides take effect."""
    with _CACHE_LOCK:
        if name is None:
            _ADAPTER_INSTANCE_CACHE.clear()
            return
        _ADAPTER_INSTANCE_CACHE.pop(name, None)
