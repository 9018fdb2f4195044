from mailweaver.blocks.modules import (
    FileModuleLoader,
    MappingModuleLoader,
    ModuleLoader,
    PackageModuleLoader,
)
from mailweaver.blocks.resolver import BlockDecorator, BlockResolver, Resolution

__all__ = [
    "BlockDecorator",
    "BlockResolver",
    "Resolution",
    "FileModuleLoader",
    "MappingModuleLoader",
    "ModuleLoader",
    "PackageModuleLoader",
]
