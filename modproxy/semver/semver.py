# modproxy/semver/semver.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

__all__ = ["UpdateLevel", "VersionTag", "parseVersionTag", "compareVersion", "PRERELEASE_PRIORITY"]



class UpdateLevel(IntEnum):
    """How big a step the newer tag is. NONE also covers "not newer"."""
    NONE = 0
    # New dependencies or similar, needs a complete download
    MAJOR = 1
    # New small features
    MINOR = 2
    # Bug fixes
    PATCH = 3
    # Prerelease-only update (alpha/beta/rc)
    DEV = 4



# Unknown labels rank lowest
PRERELEASE_PRIORITY: dict[str, int] = {"alpha": 1, "beta": 2, "rc": 3}

_INT_PREFIX_RE = re.compile(r"\s*([+-]?\d+)")



def _intPrefix(text: str) -> int | None:
    """Leading integer of `text` ("12abc" -> 12), None when there is none."""
    mtch = _INT_PREFIX_RE.match(text)
    return int(mtch.group(1)) if mtch else None



@dataclass(frozen=True)
class VersionTag:
    raw: str
    # None marks a missing/unparsable component; it never decides a comparison
    core: tuple[int | None, int | None, int | None]
    prerelease: str | None = None

    @property
    def isPrerelease(self) -> bool:
        return self.prerelease is not None

    @property
    def prereleaseKey(self) -> tuple[int, int | None]:
        """(label priority, numeric index) of the prerelease suffix."""
        if self.prerelease is None:
            return (0, None)
        labels = self.prerelease.split(".")
        priority = PRERELEASE_PRIORITY.get(labels[0], 0)
        index = _intPrefix(labels[1]) if len(labels) > 1 else None
        return (priority, index)

    def __str__(self) -> str:
        return self.raw



def parseVersionTag(tag: str) -> VersionTag:
    """
    Structural parse of "vMAJOR.MINOR.PATCH[-PRERELEASE[.N]]".

    Lenient on purpose: tags come from release names, so a missing or garbled
    component is kept as None instead of raising.

        parseVersionTag("v1.2.3-beta.2") -> core=(1, 2, 3), prerelease="beta.2"
    """
    if not isinstance(tag, str):
        raise TypeError(f"Version tag must be a string, got {type(tag).__name__}")

    body = tag.strip()
    if body[:1] in ("v", "V"):
        body = body[1:]

    parts = body.split("-")
    main = parts[0].split(".")
    core = tuple(_intPrefix(main[idx]) if idx < len(main) else None for idx in range(3))
    prerelease = parts[1] if len(parts) > 1 else None
    return VersionTag(raw=tag, core=core, prerelease=prerelease)  # type: ignore[arg-type]



def _firstDifference(left, right) -> int:
    """1 / -1 at the first decidable component where left > / < right, else 0."""
    for a, b in zip(left, right):
        if a is None or b is None:
            continue
        if a > b:
            return 1
        if a < b:
            return -1
    return 0



def compareVersion(tagA: str, tagB: str) -> UpdateLevel | bool:
    """
    Classify how much newer `tagA` is than `tagB`.

    Returns:
        UpdateLevel.MAJOR / MINOR / PATCH - first numeric component where A > B
        UpdateLevel.DEV - same core, both prereleases, A's label/index is later
        UpdateLevel.NONE - same version, or A is older at the first difference
        True  - same core, A is a release and B a prerelease of it
        False - same core, A is a prerelease and B the release

    The two bool results are not ranks. `True == 1` in Python, so callers that
    care must check `isinstance(result, bool)` before treating the value as an
    UpdateLevel.
    """
    a = parseVersionTag(tagA)
    b = parseVersionTag(tagB)

    for idx, (left, right) in enumerate(zip(a.core, b.core)):
        if left is None or right is None:
            continue
        if left > right:
            return UpdateLevel(idx + 1)
        if left < right:
            return UpdateLevel.NONE

    if b.isPrerelease and not a.isPrerelease:
        return True
    if a.isPrerelease and not b.isPrerelease:
        return False
    if a.isPrerelease and b.isPrerelease:
        diff = _firstDifference(a.prereleaseKey, b.prereleaseKey)
        return UpdateLevel.DEV if diff > 0 else UpdateLevel.NONE
    return UpdateLevel.NONE
