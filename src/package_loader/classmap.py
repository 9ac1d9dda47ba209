"""Explicit module-name → source-file registry and the import hook that consults it."""

from __future__ import annotations

import importlib.util
import logging
import sys
from importlib.abc import MetaPathFinder
from importlib.machinery import ModuleSpec, SourceFileLoader
from pathlib import Path
from types import ModuleType
from typing import Iterator, Optional, Sequence

from .exceptions import ClassLoadError, ClassNotFoundError

logger = logging.getLogger(__name__)


class ClassMap:
    """Plain mapping of dotted module names to file paths. No import machinery involved."""

    def __init__(self) -> None:
        self._paths: dict[str, str] = {}

    def add(self, symbol: str, path: str | Path) -> None:
        self._paths[symbol] = str(path)

    def remove(self, symbol: str) -> None:
        self._paths.pop(symbol, None)

    def path(self, symbol: str) -> str:
        try:
            return self._paths[symbol]
        except KeyError as e:
            raise ClassNotFoundError(f"Class '{symbol}' has not been declared") from e

    def lookup(self, symbol: str) -> Optional[str]:
        return self._paths.get(symbol)

    def is_parent(self, name: str) -> bool:
        """True when `name` is a dotted prefix of some mapped symbol, e.g. `foolz` for `foolz.plugin.fu`."""
        prefix = name + "."
        return any(symbol.startswith(prefix) for symbol in self._paths)

    def symbols(self) -> tuple[str, ...]:
        return tuple(self._paths)

    def as_dict(self) -> dict[str, str]:
        return dict(self._paths)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)


class ClassMapFinder(MetaPathFinder):
    """
    `sys.meta_path` hook resolving names registered in a `ClassMap`.

    Parents of mapped dotted names resolve to empty namespace packages so the
    import can reach the mapped leaf. Unknown names yield None and the import
    system moves on to the next finder.
    """

    def __init__(self, class_map: ClassMap) -> None:
        self._class_map = class_map

    def find_spec(
        self,
        fullname: str,
        path: Optional[Sequence[str]] = None,
        target: Optional[ModuleType] = None,
    ) -> Optional[ModuleSpec]:
        file_path = self._class_map.lookup(fullname)
        if file_path is not None:
            return _file_spec(fullname, file_path)
        if self._class_map.is_parent(fullname):
            return ModuleSpec(fullname, None, is_package=True)
        return None

    @property
    def installed(self) -> bool:
        return any(finder is self for finder in sys.meta_path)

    def install(self, prepend: bool = False) -> None:
        if self.installed:
            return
        if prepend:
            sys.meta_path.insert(0, self)
        else:
            sys.meta_path.append(self)

    def uninstall(self) -> None:
        # identity, not equality: two finders over equal maps are still distinct hooks
        sys.meta_path[:] = [finder for finder in sys.meta_path if finder is not self]


def _file_spec(symbol: str, file_path: str) -> Optional[ModuleSpec]:
    # explicit loader: mapped files need not end in .py
    return importlib.util.spec_from_file_location(
        symbol, file_path, loader=SourceFileLoader(symbol, file_path)
    )


def load_module_from_file(symbol: str, file_path: str) -> ModuleType:
    """Execute `file_path` as module `symbol` and register it in `sys.modules`."""
    spec = _file_spec(symbol, file_path)
    if spec is None or spec.loader is None:
        raise ClassLoadError(f"Cannot load '{symbol}' from '{file_path}'", name=symbol, path=file_path)

    module = importlib.util.module_from_spec(spec)
    sys.modules[symbol] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(symbol, None)
        raise ClassLoadError(
            f"Failed to load '{symbol}' from '{file_path}': {e}", name=symbol, path=file_path
        ) from e
    logger.debug("Loaded %s from %s", symbol, file_path)
    return module
