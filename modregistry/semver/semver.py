# modregistry/semver/semver.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Literal

logger = logging.getLogger(__name__)

__all__ = [
    "HostVersion", "parseHostVersion", "VersionBound", "SupportRange",
    "parseSupportRange", "rangeAllows", "isVersionSupported",
]



_NUMERIC_RE = re.compile(r"0|[1-9]\d*")
_IDENT_RE = re.compile(r"[0-9A-Za-z-]+")
_HYPHEN_RANGE_RE = re.compile(r"^(?P<low>\S+)\s+-\s+(?P<high>\S+)$")

Operator = Literal["<", "<=", ">", ">=", "=="]



@total_ordering
@dataclass(frozen=True)
class HostVersion:
    """
    A semantic version as reported by the host or declared by a package.
    Build metadata is kept for display but ignored for ordering and equality.
    """
    major: int
    minor: int = 0
    patch: int = 0
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def _orderKey(self) -> tuple:
        # A release sorts after any of its prereleases; numeric prerelease
        # identifiers sort before alphanumeric ones.
        pre = tuple((0, int(ident), "") if ident.isdigit() else (1, 0, ident) for ident in self.prerelease)
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, pre)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HostVersion):
            return NotImplemented
        return self._orderKey() == other._orderKey()

    def __hash__(self) -> int:
        return hash(self._orderKey())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, HostVersion):
            return NotImplemented
        return self._orderKey() < other._orderKey()



def _splitIdents(raw: str, text: str, label: str) -> tuple[str, ...]:
    idents = tuple(text.split("."))
    for ident in idents:
        if not _IDENT_RE.fullmatch(ident):
            raise ValueError(f"Invalid {label} identifier {ident!r} in version {raw!r}")
    return idents



def _parseCounted(raw: str) -> tuple[HostVersion, int]:
    """parseHostVersion() plus the number of numeric components actually written (1-3)."""
    if not isinstance(raw, str):
        raise TypeError(f"Version must be a string, got {type(raw).__name__}")

    text = raw.strip()
    if text[:1] == "v" and text[1:2].isdigit():
        text = text[1:]
    if not text:
        raise ValueError("Version string cannot be empty or whitespace only")

    text, buildSep, build = text.partition("+")
    core, preSep, prerelease = text.partition("-")

    parts = core.split(".")
    if len(parts) > 3:
        raise ValueError(f"Too many numeric components in version {raw!r}")
    for part in parts:
        if not _NUMERIC_RE.fullmatch(part):
            raise ValueError(f"Invalid numeric component {part!r} in version {raw!r}")
    numbers = [int(part) for part in parts] + [0] * (3 - len(parts))

    version = HostVersion(
        major=numbers[0],
        minor=numbers[1],
        patch=numbers[2],
        prerelease=_splitIdents(raw, prerelease, "prerelease") if preSep else (),
        build=_splitIdents(raw, build, "build") if buildSep else (),
    )
    return version, len(parts)



def parseHostVersion(raw: str) -> HostVersion:
    """
    Parse a version string. Missing minor/patch components default to zero.

        "1"             -> 1.0.0
        "1.5"           -> 1.5.0
        "v2.0.1"        -> 2.0.1
        "1.0.3-beta.2"  -> 1.0.3-beta.2
        "1.0.3+ci.7"    -> 1.0.3 (build kept, not compared)

    Rejected: "", "1.", ".1", "1..2", "1.2.3.4", "01.2".
    """
    return _parseCounted(raw)[0]



@dataclass(frozen=True)
class VersionBound:
    operator: Operator
    version: HostVersion

    def allows(self, candidate: HostVersion) -> bool:
        if self.operator == "==":
            return candidate == self.version
        if self.operator == ">=":
            return candidate >= self.version
        if self.operator == "<=":
            return candidate <= self.version
        if self.operator == ">":
            return candidate > self.version
        return candidate < self.version



@dataclass(frozen=True)
class SupportRange:
    """A package's `Supported` marker once parsed. Bounds are AND-ed; no bounds means any version."""
    bounds: tuple[VersionBound, ...] = ()

    @property
    def isAny(self) -> bool:
        return not self.bounds



def _caretBounds(version: HostVersion, written: int) -> tuple[VersionBound, VersionBound]:
    # ^1.2.3 -> <2.0.0, ^0.2.3 -> <0.3.0, ^0.0.3 -> <0.0.4
    # Omitted components widen the range: ^0 -> <1.0.0, ^0.0 -> <0.1.0
    if version.major > 0 or written == 1:
        upper = HostVersion(version.major + 1)
    elif version.minor > 0 or written == 2:
        upper = HostVersion(0, version.minor + 1)
    else:
        upper = HostVersion(0, 0, version.patch + 1)
    return VersionBound(">=", version), VersionBound("<", upper)



def _tildeBounds(version: HostVersion, written: int) -> tuple[VersionBound, VersionBound]:
    # ~1.2.3 -> <1.3.0, ~1.0 -> <1.1.0, ~1 -> <2.0.0
    if written == 1:
        upper = HostVersion(version.major + 1)
    else:
        upper = HostVersion(version.major, version.minor + 1)
    return VersionBound(">=", version), VersionBound("<", upper)



def parseSupportRange(raw: str | None) -> SupportRange:
    """
    Parse a `Supported` marker.

        None, "", "*"      -> any version
        "1.0"              -> == 1.0.0
        "^1.0.3"           -> >=1.0.3 <2.0.0
        "~1.2"             -> >=1.2.0 <1.3.0
        "~1"               -> >=1.0.0 <2.0.0
        "^0.0"             -> >=0.0.0 <0.1.0
        ">=1.2 <2"         -> both bounds
        "1.0 - 2.0"        -> >=1.0.0 <=2.0.0
    """
    if raw is None:
        return SupportRange()
    if not isinstance(raw, str):
        raise TypeError(f"Support range must be a string or None, got {type(raw).__name__}")

    text = raw.strip()
    if not text or text == "*":
        return SupportRange()

    mtch = _HYPHEN_RANGE_RE.match(text)
    if mtch:
        low = parseHostVersion(mtch.group("low"))
        high = parseHostVersion(mtch.group("high"))
        if high < low:
            raise ValueError(f"Invalid range {raw!r}: upper bound is below lower bound")
        return SupportRange((VersionBound(">=", low), VersionBound("<=", high)))

    bounds: list[VersionBound] = []
    for token in text.split():
        if token[0] in "^~":
            if len(token) == 1:
                raise ValueError(f"Missing version after {token!r} in range {raw!r}")
            version, written = _parseCounted(token[1:])
            bounds.extend(_caretBounds(version, written) if token[0] == "^" else _tildeBounds(version, written))
            continue

        for op in ("<=", ">=", "==", "<", ">", "="):
            if token.startswith(op):
                rest = token[len(op):]
                if not rest:
                    raise ValueError(f"Missing version after {op!r} in range {raw!r}")
                bounds.append(VersionBound("==" if op == "=" else op, parseHostVersion(rest)))
                break
        else:
            bounds.append(VersionBound("==", parseHostVersion(token)))

    return SupportRange(tuple(bounds))



def rangeAllows(supportRange: SupportRange, version: HostVersion) -> bool:
    return all(bound.allows(version) for bound in supportRange.bounds)



def isVersionSupported(hostVersion: str, supported: str) -> bool:
    """
    Compatibility predicate suitable for ModRegistry: True when `hostVersion`
    falls inside the package's `supported` range.

    Unparsable input never raises here; it is logged and counts as incompatible.
    """
    try:
        version = parseHostVersion(hostVersion)
        supportRange = parseSupportRange(supported)
    except (TypeError, ValueError) as err:
        logger.warning("Treating package as incompatible (host=%r, supported=%r): %s", hostVersion, supported, err)
        return False
    return rangeAllows(supportRange, version)
