# modregistry/core/errors.py
from __future__ import annotations
from enum import Enum
from os import PathLike
from pathlib import Path

__all__ = [
    "ModRegistryError", "ConfigurationError", "MalformedPackageError",
    "ResolutionFailure", "PathResolutionError",
]



class ModRegistryError(Exception):
    """Base class for everything the mod registry raises on purpose."""
    pass



class ConfigurationError(ModRegistryError):
    """Raised at construction when the registry cannot be set up (e.g. fallback root missing)."""
    pass



class MalformedPackageError(ModRegistryError):
    """
    Raised at construction when a mod directory does not hold exactly one readable manifest.

    Discovery is all-or-nothing, so this aborts the whole registry.
    """
    def __init__(self, message: str, *, directory: str | PathLike[str] | None = None, files: tuple[str, ...] = ()):
        super().__init__(message)
        self.directory = Path(directory) if directory is not None else None
        self.files = tuple(files)



class ResolutionFailure(Enum):
    OUTSIDE_ROOTS = "outsideRoots"
    NOT_FOUND = "notFound"
    ESCAPES_ROOT = "escapesRoot"



class PathResolutionError(ModRegistryError):
    """
    Raised by ModRegistry.resolvePath() when a requested path cannot be served.

    Recoverable: the registry state is untouched and stays usable.
    """
    def __init__(self, message: str, *, requestedPath: str | PathLike[str], reason: ResolutionFailure):
        super().__init__(message)
        self.requestedPath = str(requestedPath)
        self.reason = reason
