# modproxy/mods/__init__.py
from .manifest import ModDescriptor, ReplaceRule
from .registry import ModRegistry, ModRegistryProvider, loadMods

__all__ = [
    "ModDescriptor",
    "ReplaceRule",
    "ModRegistry",
    "ModRegistryProvider",
    "loadMods",
]
