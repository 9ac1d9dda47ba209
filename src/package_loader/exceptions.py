from __future__ import annotations


class PackageLoaderError(Exception):
    pass


class ConfigError(PackageLoaderError, RuntimeError):
    """Configuration-related error."""


class DirectoryNotFoundError(PackageLoaderError, NotADirectoryError):
    """Raised when a root being registered is not an existing directory."""


class UnknownDirectoryError(PackageLoaderError, LookupError):
    """Raised when a root name was never registered (or was removed)."""


class PackageNotFoundError(PackageLoaderError, LookupError):
    """Raised when no package with the requested slug was discovered under a root."""


class ClassNotFoundError(PackageLoaderError, LookupError):
    """Raised when a symbol has no entry in the class map."""


class InstanceNotFoundError(PackageLoaderError, LookupError):
    """Raised when a named loader instance does not exist."""


class DiscoveryError(PackageLoaderError, RuntimeError):
    """Raised when a registered root cannot be scanned."""


class ClassLoadError(PackageLoaderError, ImportError):
    """Raised when a mapped source file fails to execute."""
