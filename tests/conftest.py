"""
Every Loader installs a finder on sys.meta_path and the class-map tests import
modules from temporary files. Both are process-wide, so each test gets them
restored afterwards; settings are cached per process and are cleared too.
"""
from __future__ import annotations

import logging
import sys
import textwrap
from pathlib import Path
from typing import Iterable

import pytest

from package_loader.config import clear_settings_cache
from package_loader.registry import LoaderRegistry, reset_registry


@pytest.fixture(autouse=True)
def _restore_import_state():
    meta_path = list(sys.meta_path)
    modules = set(sys.modules)
    yield
    sys.meta_path[:] = meta_path
    # modules built from temp files are all named pl_*
    for name in set(sys.modules) - modules:
        if name.startswith("pl_"):
            sys.modules.pop(name, None)


@pytest.fixture(autouse=True)
def _fresh_process_state():
    clear_settings_cache()
    reset_registry()
    yield
    reset_registry()
    clear_settings_cache()
    logger = logging.getLogger("package_loader")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def registry() -> LoaderRegistry:
    reg = LoaderRegistry()
    yield reg
    reg.clear()


def make_tree(root: Path, dirs: Iterable[str] = (), files: Iterable[str] = ()) -> Path:
    """Create directories and empty files (paths relative to `root`)."""
    root.mkdir(parents=True, exist_ok=True)
    for d in dirs:
        (root / d).mkdir(parents=True, exist_ok=True)
    for f in files:
        p = root / f
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("", encoding="utf-8")
    return root


def write_py(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


@pytest.fixture(name="make_tree")
def _make_tree_fixture():
    return make_tree


@pytest.fixture(name="write_py")
def _write_py_fixture():
    return write_py
