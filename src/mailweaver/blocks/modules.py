"""Pluggable loaders that map a block name to its capability module."""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from mailweaver.errors import ModuleLoadError


class ModuleLoader(Protocol):
    """Resolve a block name to a module-like object exposing ``decorate``."""

    async def load(self, block_name: str) -> Any: ...


class FileModuleLoader:
    """Load ``<root>/<blocks_path>/<name>/<name>.py`` from a code-base directory."""

    def __init__(self, root: str | Path, blocks_path: str = "/blocks") -> None:
        self.root = Path(root).resolve()
        self.blocks_dir = self.root / blocks_path.strip("/")

    def module_path(self, block_name: str) -> Path:
        return self.blocks_dir / block_name / f"{block_name}.py"

    async def load(self, block_name: str) -> Any:
        module_path = self.module_path(block_name)
        if not module_path.is_file():
            raise ModuleLoadError(f"No module at {module_path}", block_name=block_name)

        # stable per path so reloading the same block reuses its name
        path_hash = hashlib.sha1(str(module_path).encode("utf-8")).hexdigest()[:12]
        module_name = f"mailweaver_block_{block_name.replace('-', '_')}_{path_hash}"
        if module_name in sys.modules:
            return sys.modules[module_name]

        spec = importlib.util.spec_from_file_location(module_name, str(module_path))
        if spec is None or spec.loader is None:
            raise ModuleLoadError(f"Cannot create module spec for {module_path}", block_name=block_name)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            sys.modules.pop(module_name, None)
            raise ModuleLoadError(
                f"Importing {module_path} failed: {exc}", block_name=block_name, cause=exc
            ) from exc
        return module


class PackageModuleLoader:
    """Import blocks as submodules of an installed package (``pkg.hero_banner``)."""

    def __init__(self, package: str) -> None:
        self.package = package

    async def load(self, block_name: str) -> Any:
        qualname = f"{self.package}.{block_name.replace('-', '_')}"
        try:
            return importlib.import_module(qualname)
        except Exception as exc:
            raise ModuleLoadError(
                f"Importing {qualname} failed: {exc}", block_name=block_name, cause=exc
            ) from exc


class MappingModuleLoader:
    """Serve pre-built module objects from a mapping."""

    def __init__(self, modules: Mapping[str, Any]) -> None:
        self._modules = dict(modules)

    async def load(self, block_name: str) -> Any:
        try:
            return self._modules[block_name]
        except KeyError:
            raise ModuleLoadError(f"Unknown block {block_name!r}", block_name=block_name) from None
