# modproxy/mods/manifest.py
from __future__ import annotations
import re
from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel, Field, ConfigDict, PrivateAttr, field_validator

__all__ = ["ReplaceRule", "ModDescriptor", "translateJsPattern", "expandJsReplacement"]

DEFAULT_FILES_SUBDIR = "files"

# Mod configs are shared with the JavaScript tooling, so rules use JS regex flavour
_JS_NAMED_GROUP_RE = re.compile(r"\(\?<(?![=!])")
_JS_NAMED_BACKREF_RE = re.compile(r"\\k<([A-Za-z_][A-Za-z0-9_]*)>")
_DIGITS = "0123456789"



def translateJsPattern(pattern: str) -> str:
    """Rewrite JS-only named group syntax into Python's (?P<name>...) / (?P=name)."""
    pattern = _JS_NAMED_GROUP_RE.sub("(?P<", pattern)
    return _JS_NAMED_BACKREF_RE.sub(r"(?P=\1)", pattern)



def expandJsReplacement(template: str, match: re.Match[str]) -> str:
    """
    Expand a JS String.prototype.replace template against `match`.

    Supported: $$, $&, $`, $', $1..$99 and $<name>. Anything that does not
    form a valid token is copied literally; unmatched groups expand to "".
    """
    out: list[str] = []
    groupCount = match.re.groups
    i = 0
    n = len(template)
    while i < n:
        ch = template[i]
        if ch != "$" or i + 1 >= n:
            out.append(ch)
            i += 1
            continue

        nxt = template[i + 1]
        if nxt == "$":
            out.append("$")
            i += 2
            continue
        if nxt == "&":
            out.append(match.group(0))
            i += 2
            continue
        if nxt == "`":
            out.append(match.string[:match.start()])
            i += 2
            continue
        if nxt == "'":
            out.append(match.string[match.end():])
            i += 2
            continue
        if nxt in _DIGITS:
            two = template[i + 1:i + 3]
            if len(two) == 2 and two[1] in _DIGITS and 1 <= int(two) <= groupCount:
                out.append(match.group(int(two)) or "")
                i += 3
                continue
            if 1 <= int(nxt) <= groupCount:
                out.append(match.group(int(nxt)) or "")
                i += 2
                continue
        if nxt == "<" and match.re.groupindex:
            end = template.find(">", i + 2)
            if end != -1:
                out.append(match.groupdict().get(template[i + 2:end]) or "")
                i = end + 1
                continue

        out.append(ch)
        i += 1
    return "".join(out)



class ReplaceRule(BaseModel):
    """Path rewrite: the first match of `from` in the request path is replaced by `to`."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")
    to: str

    _pattern: re.Pattern[str] = PrivateAttr()

    @field_validator("from_")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(translateJsPattern(value))
        except re.error as err:
            raise ValueError(f"invalid regular expression {value!r}: {err}") from err
        return value

    def model_post_init(self, __context) -> None:
        self._pattern = re.compile(translateJsPattern(self.from_))

    @property
    def pattern(self) -> re.Pattern[str]:
        return self._pattern

    def matches(self, url: str) -> bool:
        return self._pattern.search(url) is not None

    def apply(self, url: str) -> str:
        return self._pattern.sub(lambda mtch: expandJsReplacement(self.to, mtch), url, count=1)



class ModDescriptor(BaseModel):
    """One entry of the mods config file."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str | None = None
    # Sub-directory under filesDir holding the resource tree ("files" if unset)
    dir: str | None = None
    filesDir: str
    replace: list[ReplaceRule] = Field(default_factory=list)

    @property
    def displayName(self) -> str:
        return self.name or Path(self.filesDir).name or self.filesDir

    @property
    def filesRoot(self) -> Path:
        subDir = self.dir.strip("/\\") if self.dir else DEFAULT_FILES_SUBDIR
        return Path(self.filesDir) / subDir if subDir else Path(self.filesDir)

    def rewrites(self, url: str) -> Iterator[str]:
        """Rewritten URLs for every rule matching `url`, in rule order."""
        for rule in self.replace:
            if rule.matches(url):
                yield rule.apply(url)
