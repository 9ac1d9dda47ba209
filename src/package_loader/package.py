from __future__ import annotations

import weakref
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Protocol, Self

if TYPE_CHECKING:
    from .loader import Loader


class Descriptor(Protocol):
    """What the loader requires from an object built for a discovered package."""

    def set_loader(self, loader: "Loader") -> Any: ...

    def set_dir_name(self, dir_name: str) -> Any: ...


class DescriptorFactory(Protocol):
    """Builds a descriptor from the path of a package directory. Classes qualify."""

    def __call__(self, path: str) -> Descriptor: ...


class Package:
    """
    Default descriptor for a discovered package directory.

    The loader reference is held weakly: a package never keeps its loader alive.
    Interpreting the directory contents is left to subclasses.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._loader_ref: Optional[weakref.ReferenceType["Loader"]] = None
        self._dir_name: Optional[str] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def slug(self) -> str:
        return f"{self._path.parent.name}/{self._path.name}"

    @property
    def loader(self) -> Optional["Loader"]:
        if self._loader_ref is None:
            return None
        return self._loader_ref()

    @property
    def dir_name(self) -> Optional[str]:
        return self._dir_name

    def set_loader(self, loader: "Loader") -> Self:
        self._loader_ref = weakref.ref(loader)
        return self

    def set_dir_name(self, dir_name: str) -> Self:
        self._dir_name = dir_name
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}(slug={self.slug!r}, dir_name={self._dir_name!r}, path={str(self._path)!r})"
