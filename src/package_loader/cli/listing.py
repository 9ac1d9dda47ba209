from __future__ import annotations

import sys
from pathlib import Path
from typing import Literal, Optional, TextIO

from pydantic import BaseModel, Field

from package_loader.exceptions import PackageLoaderError


class ListCommand(BaseModel):
    dirs: Optional[list[str]] = Field(
        None, description="Dirs to search, as NAME=PATH or PATH (the path doubles as the name)."
    )
    root: Optional[str] = Field(None, description="Only list packages found under this dir name.")
    instance: Optional[str] = Field(None, description="Loader instance name.")
    config_file: Optional[str] = Field(None, description="Optional config file (toml/yaml).")
    loglevel: Optional[
        Literal[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
            "critical",
            "error",
            "warning",
            "info",
            "debug",
        ]
    ] = Field(None, description="Logging level override.")


def parse_dir_arg(value: str) -> tuple[str, str]:
    """Split ``NAME=PATH``; a bare ``PATH`` is used as its own name."""
    name, sep, path = value.partition("=")
    if not sep:
        return value, value
    if not name or not path:
        raise PackageLoaderError(f"Invalid dir argument '{value}'. Expected NAME=PATH or PATH.")
    return name, path


def handle_list(command: ListCommand, out: TextIO | None = None) -> int:
    from package_loader.config import configure_logging, get_settings
    from package_loader.registry import LoaderRegistry, forge_from_settings

    out = out if out is not None else sys.stdout

    overrides: dict[str, object] = {}
    if command.loglevel is not None:
        overrides["logging"] = {"level": command.loglevel.upper()}

    settings = get_settings(config_file=command.config_file, **overrides)
    configure_logging(settings.logging)

    dirs = dict(settings.loader.dirs)
    for value in command.dirs or []:
        name, path = parse_dir_arg(value)
        dirs[name] = Path(path)

    update: dict[str, object] = {"dirs": dirs}
    if command.instance is not None:
        update["instance"] = command.instance
    loader_settings = settings.loader.model_copy(update=update)

    registry = LoaderRegistry()
    try:
        loader = forge_from_settings(loader_settings, registry)
        if command.root is not None:
            found = {command.root: loader.get_all(command.root)}
        else:
            found = loader.get_all()

        for dir_name in sorted(found):
            for slug in sorted(found[dir_name]):
                package = found[dir_name][slug]
                out.write(f"{dir_name}\t{slug}\t{getattr(package, 'path', '')}\n")
    finally:
        registry.clear()
    return 0

