from __future__ import annotations

import logging
from typing import Dict, Optional

from .config import AppSettings, LoaderSettings
from .exceptions import InstanceNotFoundError
from .loader import Loader

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE = "default"


class LoaderRegistry:
    """
    Named loader instances, e.g. one for plugins and one for themes.

    `forge` creates on first use and returns the same object afterwards;
    `destroy` detaches the instance's import hook before dropping it.
    """

    def __init__(self, loader_cls: type[Loader] = Loader) -> None:
        self._loader_cls = loader_cls
        self._instances: Dict[str, Loader] = {}

    def forge(self, name: str = DEFAULT_INSTANCE, prepend: bool = False) -> Loader:
        loader = self._instances.get(name)
        if loader is None:
            loader = self._loader_cls(prepend=prepend)
            self._instances[name] = loader
            logger.debug("Forged loader instance %r (prepend=%s)", name, prepend)
        return loader

    def get(self, name: str = DEFAULT_INSTANCE) -> Loader:
        try:
            return self._instances[name]
        except KeyError as e:
            raise InstanceNotFoundError(f"No loader instance named '{name}'") from e

    def destroy(self, name: str = DEFAULT_INSTANCE) -> None:
        loader = self.get(name)
        loader.unregister()
        del self._instances[name]
        logger.debug("Destroyed loader instance %r", name)

    def clear(self) -> None:
        for name in list(self._instances):
            self.destroy(name)

    def names(self) -> tuple[str, ...]:
        return tuple(self._instances)

    def __contains__(self, name: object) -> bool:
        return name in self._instances

    def __len__(self) -> int:
        return len(self._instances)


_default_registry: Optional[LoaderRegistry] = None


def get_registry() -> LoaderRegistry:
    """Process-wide registry, created on first access."""
    global _default_registry
    if _default_registry is None:
        _default_registry = LoaderRegistry()
    return _default_registry


def reset_registry() -> None:
    """Destroy every instance of the process-wide registry and drop it."""
    global _default_registry
    if _default_registry is not None:
        _default_registry.clear()
    _default_registry = None


def forge(name: str = DEFAULT_INSTANCE, prepend: bool = False) -> Loader:
    return get_registry().forge(name, prepend)


def destroy(name: str = DEFAULT_INSTANCE) -> None:
    get_registry().destroy(name)


def forge_from_settings(
    settings: AppSettings | LoaderSettings,
    registry: Optional[LoaderRegistry] = None,
) -> Loader:
    """Forge the configured instance and register its dirs and classes."""
    if isinstance(settings, AppSettings):
        settings = settings.loader
    registry = registry if registry is not None else get_registry()

    loader = registry.forge(settings.instance, settings.prepend)
    for dir_name, path in settings.dirs.items():
        loader.add_dir(dir_name, path)
    for symbol, path in settings.classes.items():
        loader.add_class(symbol, path)
    return loader
