# modproxy/semver/__init__.py
from .semver import UpdateLevel, VersionTag, compareVersion, parseVersionTag

__all__ = ["UpdateLevel", "VersionTag", "compareVersion", "parseVersionTag"]
