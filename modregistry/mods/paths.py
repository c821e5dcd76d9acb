# modregistry/mods/paths.py
from __future__ import annotations
import os
from os import PathLike
from pathlib import Path

from modregistry.core.errors import PathResolutionError, ResolutionFailure

__all__ = ["canonicalPath", "isPathPartOf", "joinUnder", "existingFileUnder"]



def canonicalPath(path: str | PathLike[str]) -> Path:
    """
    Absolute, normalised path ('..' and '.' collapsed) without touching the
    filesystem, so symlinked roots keep the spelling the host gave them.
    """
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))



def isPathPartOf(basePath: str | PathLike[str], fullPath: str | PathLike[str]) -> bool:
    """
    True when `fullPath` is `basePath` or lies below it. Compared component-wise
    and case-insensitively, so "/mods" does not claim "/mods-old/file".
    """
    baseParts = [part.casefold() for part in canonicalPath(basePath).parts]
    fullParts = [part.casefold() for part in canonicalPath(fullPath).parts]
    return fullParts[:len(baseParts)] == baseParts



def joinUnder(root: Path, requested: str | PathLike[str]) -> Path:
    """
    `root / requested`. An absolute `requested` replaces the root entirely (and is
    returned untouched); a relative one must not climb out of `root`.
    """
    requestedPath = Path(requested)
    if requestedPath.is_absolute():
        return requestedPath

    joined = root / requestedPath
    if not isPathPartOf(root, joined):
        raise PathResolutionError(
            f"Requested path '{requested}' points outside of '{root}'",
            requestedPath=requested,
            reason=ResolutionFailure.ESCAPES_ROOT,
        )
    return joined



def existingFileUnder(root: Path, requested: str | PathLike[str]) -> Path | None:
    """`joinUnder(root, requested)` if that is an existing regular file, else None."""
    candidate = joinUnder(root, requested)
    return candidate if candidate.is_file() else None
