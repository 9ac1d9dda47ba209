from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .classmap import ClassMap, ClassMapFinder, load_module_from_file
from .enumerator import find_dirs, strip_separators
from .exceptions import (
    DirectoryNotFoundError,
    DiscoveryError,
    PackageNotFoundError,
    UnknownDirectoryError,
)
from .package import DescriptorFactory, Package

logger = logging.getLogger(__name__)


def _normalize_dir(path: str | Path) -> str:
    return strip_separators(path) + os.sep


class Loader:
    """
    Finds packages laid out as ``<root>/<vendor>/<package>`` under named roots.

    Subclasses change what gets built per package by overriding `type_class`
    (and `type_name` for display); a `descriptor_factory` passed at
    construction takes precedence over `type_class`.

    Each instance owns a `ClassMapFinder` on `sys.meta_path` from construction
    until `unregister()`.
    """

    type_name: str = "package"
    type_class: DescriptorFactory = Package

    def __init__(
        self,
        descriptor_factory: Optional[DescriptorFactory] = None,
        *,
        prepend: bool = False,
        type_name: Optional[str] = None,
    ) -> None:
        if descriptor_factory is not None:
            self.type_class = descriptor_factory
        if type_name is not None:
            self.type_name = type_name

        self._dirs: Dict[str, str] = {}
        self._class_map = ClassMap()
        self._finder = ClassMapFinder(self._class_map)
        self._packages: Optional[Dict[str, Dict[str, Any]]] = None
        self._dirty = True

        self.register(prepend)

    # -----------------------------
    # Import hook
    # -----------------------------

    def register(self, prepend: bool = False) -> None:
        """Install the class hook. `prepend` lets mapped modules shadow importable ones."""
        self._finder.install(prepend=prepend)

    def unregister(self) -> None:
        self._finder.uninstall()

    @property
    def finder(self) -> ClassMapFinder:
        return self._finder

    def load_class(self, symbol: str) -> bool:
        """Load a mapped module right away. Returns False when `symbol` is not mapped."""
        file_path = self._class_map.lookup(symbol)
        if file_path is None:
            return False
        load_module_from_file(symbol, file_path)
        return True

    # -----------------------------
    # Class registry
    # -----------------------------

    def add_class(self, symbol: str, path: str | Path) -> "Loader":
        self._class_map.add(symbol, path)
        return self

    def get_class_path(self, symbol: str) -> str:
        return self._class_map.path(symbol)

    def remove_class(self, symbol: str) -> "Loader":
        self._class_map.remove(symbol)
        return self

    @property
    def classes(self) -> Dict[str, str]:
        return self._class_map.as_dict()

    # -----------------------------
    # Root registry
    # -----------------------------

    def add_dir(self, dir_name: str, path: str | Path | None = None) -> "Loader":
        """
        Register a root to search. With `path` omitted, `dir_name` is used as both
        the logical name and the path.
        """
        if path is None:
            path = dir_name

        if not os.path.isdir(path):
            raise DirectoryNotFoundError(f"Directory not found: {path}")

        self._dirs[dir_name] = _normalize_dir(path)
        self._dirty = True
        logger.debug("Added %s dir %r -> %s", self.type_name, dir_name, self._dirs[dir_name])
        return self

    def remove_dir(self, dir_name: str) -> "Loader":
        """Forget a root together with every package discovered under it."""
        self._dirs.pop(dir_name, None)
        if self._packages is not None:
            self._packages.pop(dir_name, None)
        return self

    @property
    def dirs(self) -> Dict[str, str]:
        return dict(self._dirs)

    @property
    def dirty(self) -> bool:
        return self._dirty

    # -----------------------------
    # Discovery
    # -----------------------------

    def find(self) -> None:
        """
        Scan every root and build descriptors for packages not seen before.

        Already cached slugs are kept as-is. If any root cannot be read the call
        raises `DiscoveryError`; what was found for earlier roots stays cached
        and the loader remains dirty. Errors raised by descriptors propagate as-is.
        """
        self._discover()

    def _discover(self) -> Dict[str, Dict[str, Any]]:
        if self._packages is None:
            self._packages = {}
        packages = self._packages

        created = 0
        for dir_name, root in self._dirs.items():
            bucket = packages.setdefault(dir_name, {})

            for slug, package_path in self._scan(dir_name, root):
                if slug in bucket:
                    continue
                package = self.type_class(package_path)
                package.set_loader(self)
                package.set_dir_name(dir_name)
                bucket[slug] = package
                created += 1

        self._dirty = False
        logger.info(
            "Discovered %d new %s(s) across %d dir(s)", created, self.type_name, len(self._dirs)
        )
        return packages

    def _scan(self, dir_name: str, root: str) -> list[tuple[str, str]]:
        """``(slug, package_path)`` for every ``<vendor>/<package>`` dir under `root`."""
        found: list[tuple[str, str]] = []
        try:
            for vendor_name, vendor_path in find_dirs(root).items():
                for package_name, package_path in find_dirs(vendor_path).items():
                    found.append((f"{vendor_name}/{package_name}", package_path))
        except OSError as e:
            raise DiscoveryError(f"Failed to scan {self.type_name} dir '{dir_name}' ({root}): {e}") from e
        return found

    def get_all(self, dir_name: Optional[str] = None) -> Dict[str, Any]:
        """
        All packages as ``{dir_name: {slug: package}}``, or ``{slug: package}`` for
        one root. Runs discovery first when a root was added since the last scan.
        """
        packages = self._packages
        if self._dirty or packages is None:
            packages = self._discover()

        if dir_name is None:
            return {name: dict(bucket) for name, bucket in packages.items()}

        if dir_name not in packages:
            raise UnknownDirectoryError(f"There is no such a directory: '{dir_name}'")

        return dict(packages[dir_name])

    def get(self, dir_name: str, slug: str) -> Any:
        packages = self.get_all()

        try:
            package = packages[dir_name][slug]
        except KeyError as e:
            raise PackageNotFoundError(f"There is no such a package: '{slug}' in '{dir_name}'") from e

        package.set_dir_name(dir_name)
        return package

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type_name={self.type_name!r}, dirs={sorted(self._dirs)!r})"
