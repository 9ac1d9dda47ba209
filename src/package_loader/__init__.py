try:
    from ._version import version as __version__  # populated by setuptools-scm
except ModuleNotFoundError:
    __version__ = "0.0.0"

from .classmap import ClassMap, ClassMapFinder
from .enumerator import find_dirs
from .exceptions import (
    ClassLoadError,
    ClassNotFoundError,
    ConfigError,
    DirectoryNotFoundError,
    DiscoveryError,
    InstanceNotFoundError,
    PackageLoaderError,
    PackageNotFoundError,
    UnknownDirectoryError,
)
from .loader import Loader
from .package import Descriptor, DescriptorFactory, Package
from .registry import LoaderRegistry, destroy, forge, forge_from_settings, get_registry, reset_registry

__all__ = [
    "__version__",
    # core
    "Loader",
    "LoaderRegistry",
    "Package",
    "Descriptor",
    "DescriptorFactory",
    "ClassMap",
    "ClassMapFinder",
    "find_dirs",
    # registry helpers
    "forge",
    "destroy",
    "forge_from_settings",
    "get_registry",
    "reset_registry",
    # errors
    "PackageLoaderError",
    "ConfigError",
    "DirectoryNotFoundError",
    "UnknownDirectoryError",
    "PackageNotFoundError",
    "ClassNotFoundError",
    "InstanceNotFoundError",
    "DiscoveryError",
    "ClassLoadError",
]
