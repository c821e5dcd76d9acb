# modregistry/mods/discover.py
from __future__ import annotations
import logging
from os import PathLike
from pathlib import Path
from typing import TypeAlias

from modregistry.core.errors import MalformedPackageError
from modregistry.core.logging import logContext
from .constants import DEFAULT_MANIFEST_GLOB
from .manifest import PackageManifest, readManifest

logger = logging.getLogger(__name__)

__all__ = ["LoadResult", "listPackageDirs", "findManifests", "loadPackages"]

LoadResult: TypeAlias = tuple[tuple[PackageManifest, ...], tuple[str, ...]]



def listPackageDirs(modsRoot: Path) -> list[Path]:
    """
    Immediate subdirectories of `modsRoot`, ordered by folder name
    (case-insensitive, then exact name for determinism).
    """
    dirs = [entry for entry in modsRoot.iterdir() if entry.is_dir()]
    dirs.sort(key=lambda entry: (entry.name.lower(), entry.name))
    return dirs



def findManifests(packageDir: Path, manifestGlob: str) -> list[Path]:
    return sorted(path for path in packageDir.glob(manifestGlob) if path.is_file())



def loadPackages(modsRoot: str | PathLike[str], *, manifestGlob: str | None = None) -> LoadResult:
    """
    Reads one manifest per immediate subdirectory of `modsRoot`.

    Returns (manifests, directoryNames), aligned by index, in scan order.

    - No manifest in a subdirectory: the subdirectory is skipped.
    - More than one manifest, or one that does not parse: MalformedPackageError.
      Nothing is returned in that case; the load is all-or-nothing.
    - Missing `modsRoot`: two empty tuples.
    """
    root = Path(modsRoot)
    pattern = manifestGlob or DEFAULT_MANIFEST_GLOB
    if not root.is_dir():
        logger.debug("Mods root '%s' does not exist; no packages loaded", root)
        return (), ()

    manifests: list[PackageManifest] = []
    directoryNames: list[str] = []

    for packageDir in listPackageDirs(root):
        with logContext(packageDir=packageDir.name):
            manifestPaths = findManifests(packageDir, pattern)

            if not manifestPaths:
                logger.debug("Skipping '%s': no file matches '%s'", packageDir, pattern)
                continue

            if len(manifestPaths) > 1:
                names = tuple(path.name for path in manifestPaths)
                logger.error("Mod package '%s' holds %d manifests: %s", packageDir, len(names), ", ".join(names))
                raise MalformedPackageError(
                    f"Each mod package should contain only one manifest file: '{packageDir}' has {len(names)} ({', '.join(names)})",
                    directory=packageDir,
                    files=names,
                )

            manifestPath = manifestPaths[0]
            try:
                manifest = readManifest(manifestPath)
            except ValueError as err:
                logger.error("Unreadable manifest '%s': %s", manifestPath, err)
                raise MalformedPackageError(
                    f"Manifest '{manifestPath}' is not a valid package manifest: {err}",
                    directory=packageDir,
                    files=(manifestPath.name,),
                ) from err

            manifests.append(manifest)
            directoryNames.append(packageDir.name)
            logger.debug("Registered package '%s' (%s %s)", packageDir.name, manifest.name, manifest.version)

    logger.info("Mod packages discovered: %d (root=%s)", len(manifests), root)
    return tuple(manifests), tuple(directoryNames)
