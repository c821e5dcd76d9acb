# modregistry/mods/registry.py
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from modregistry.app.settings import settings, settingsBool
from modregistry.core.errors import ConfigurationError, PathResolutionError, ResolutionFailure
from modregistry.core.logging import logContext
from .compat import CompatibilityPredicate, HostCompatibility, VersionSupplier, classifyPackages
from .constants import DEFAULT_MANIFEST_GLOB, NO_ACTIVE_INDEX
from .discover import loadPackages
from .manifest import PackageManifest
from .paths import canonicalPath, existingFileUnder, isPathPartOf

logger = logging.getLogger(__name__)

__all__ = ["PackageEntry", "ModRegistry"]



@dataclass(frozen=True, slots=True)
class PackageEntry:
    """One discovered package: the folder it lives in and its manifest."""
    directoryName: str
    manifest: PackageManifest



class ModRegistry:
    """
    Discovers mod packages under `modsRoot`, classifies them against the host
    version, tracks at most one active package and routes asset lookups.

    Everything is scanned and classified once, in the constructor. Afterwards
    only the active index changes, through toggle().

    Lookups prefer the active package's copy of a file and fall back to the
    monitored `fallbackRoot` tree, so a package only has to ship the files it
    overrides.

    Not thread-safe: callers serialize toggle() against concurrent lookups.
    """

    def __init__(
        self,
        fallbackRoot: str | PathLike[str],
        modsRoot: str | PathLike[str],
        versionSupplier: VersionSupplier,
        compatPredicate: CompatibilityPredicate,
        *,
        manifestGlob: str | None = None,
        createModsRoot: bool = True,
    ) -> None:
        if not Path(fallbackRoot).is_dir():
            logger.error("Fallback root '%s' does not exist", fallbackRoot)
            raise ConfigurationError(f"The monitored (fallback) folder '{fallbackRoot}' doesn't exist.")

        self._fallbackRoot = canonicalPath(fallbackRoot)
        self._modsRoot = canonicalPath(modsRoot)
        if createModsRoot and not self._modsRoot.is_dir():
            self._modsRoot.mkdir(parents=True, exist_ok=True)
            logger.info("Created mods root '%s'", self._modsRoot)

        manifests, directoryNames = loadPackages(self._modsRoot, manifestGlob=manifestGlob)
        self._entries: tuple[PackageEntry, ...] = tuple(
            PackageEntry(directoryName=name, manifest=manifest)
            for name, manifest in zip(directoryNames, manifests, strict=True)
        )

        compatible, incompatible = classifyPackages(manifests, versionSupplier, compatPredicate)
        self._compatible: tuple[int, ...] = compatible
        self._incompatible: tuple[int, ...] = incompatible
        self._compatibleSet: frozenset[int] = frozenset(compatible)
        self._activeIndex: int = NO_ACTIVE_INDEX

        logger.info(
            "Mod registry ready: %d packages (%d compatible, %d incompatible), fallback=%s",
            len(self._entries), len(compatible), len(incompatible), self._fallbackRoot,
        )

    @classmethod
    def forHost(
        cls,
        fallbackRoot: str | PathLike[str],
        modsRoot: str | PathLike[str],
        host: HostCompatibility,
        **kwargs,
    ) -> ModRegistry:
        """Builds a registry from a host object carrying both collaborators."""
        return cls(fallbackRoot, modsRoot, host.currentVersion, host.isCompatible, **kwargs)

    @classmethod
    def fromSettings(cls, versionSupplier: VersionSupplier, compatPredicate: CompatibilityPredicate) -> ModRegistry:
        """
        Builds a registry from the `mods.*` settings:
          mods.fallbackRoot, mods.modsRoot (required)
          mods.manifestGlob, mods.createModsRoot (optional)
        """
        fallbackRoot = settings("mods.fallbackRoot")
        modsRoot = settings("mods.modsRoot")
        missing = [key for key, value in (("mods.fallbackRoot", fallbackRoot), ("mods.modsRoot", modsRoot)) if not value]
        if missing:
            raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")

        return cls(
            Path(str(fallbackRoot)).expanduser(),
            Path(str(modsRoot)).expanduser(),
            versionSupplier,
            compatPredicate,
            manifestGlob=str(settings("mods.manifestGlob", DEFAULT_MANIFEST_GLOB)),
            createModsRoot=settingsBool("mods.createModsRoot", True),
        )

    # ----- Roots -----

    @property
    def modsRoot(self) -> Path:
        return self._modsRoot

    @property
    def fallbackRoot(self) -> Path:
        return self._fallbackRoot

    # ----- Activation -----

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"ModRegistry(modsRoot={str(self._modsRoot)!r}, fallbackRoot={str(self._fallbackRoot)!r}, "
            f"packages={len(self._entries)}, activeIndex={self._activeIndex})"
        )

    def _clamp(self, index: int) -> int:
        # Out-of-range indices are pulled to the nearest end instead of raising.
        return max(0, min(int(index), len(self._entries) - 1))

    @property
    def activeIndex(self) -> int:
        """Index of the active package, or -1 when none is active."""
        return self._activeIndex

    def toggle(self, index: int) -> bool:
        """
        Activates the package at `index` (clamped into range).

        Returns True if the package is now active. Returns False when it is not
        compatible (nothing changes) or when it was already active, in which
        case it is deactivated. Activating another package replaces the current one.
        """
        if not self._entries:
            return False

        clamped = self._clamp(index)
        if clamped not in self._compatibleSet:
            logger.debug("Toggle #%d ignored: package is not compatible", clamped)
            return False

        if clamped == self._activeIndex:
            self._activeIndex = NO_ACTIVE_INDEX
            logger.info("Deactivated package #%d '%s'", clamped, self._entries[clamped].directoryName)
            return False

        self._activeIndex = clamped
        logger.info("Activated package #%d '%s'", clamped, self._entries[clamped].directoryName)
        return True

    @property
    def activePackage(self) -> PackageManifest | None:
        if self._activeIndex == NO_ACTIVE_INDEX:
            return None
        return self._entries[self._activeIndex].manifest

    @property
    def activeDirectory(self) -> Path | None:
        if self._activeIndex == NO_ACTIVE_INDEX:
            return None
        return self._modsRoot / self._entries[self._activeIndex].directoryName

    # ----- Snapshots -----

    def allPackages(self) -> tuple[PackageManifest, ...]:
        return tuple(entry.manifest for entry in self._entries)

    def compatiblePackages(self) -> tuple[PackageManifest, ...]:
        return tuple(self._entries[index].manifest for index in self._compatible)

    def incompatiblePackages(self) -> tuple[PackageManifest, ...]:
        return tuple(self._entries[index].manifest for index in self._incompatible)

    @property
    def compatibleIndices(self) -> tuple[int, ...]:
        return self._compatible

    @property
    def incompatibleIndices(self) -> tuple[int, ...]:
        return self._incompatible

    def directoryNames(self) -> tuple[str, ...]:
        return tuple(entry.directoryName for entry in self._entries)

    def entries(self) -> tuple[PackageEntry, ...]:
        return self._entries

    def isCompatible(self, index: int) -> bool:
        """Checks the exact index, without clamping; out-of-range indices are never compatible."""
        return index in self._compatibleSet

    def getPackage(self, index: int) -> PackageManifest:
        """Manifest at `index`, clamped into range. IndexError when the registry is empty."""
        if not self._entries:
            raise IndexError("The mod registry holds no packages")
        return self._entries[self._clamp(index)].manifest

    def packageDirectory(self, index: int) -> Path:
        """Folder of the package at `index`, clamped into range. IndexError when the registry is empty."""
        if not self._entries:
            raise IndexError("The mod registry holds no packages")
        return self._modsRoot / self._entries[self._clamp(index)].directoryName

    def indexOf(self, directoryName: str) -> int:
        """Index of the package living in `directoryName`, or -1."""
        for index, entry in enumerate(self._entries):
            if entry.directoryName == directoryName:
                return index
        return NO_ACTIVE_INDEX

    # ----- Path resolution -----

    def _fromFallback(self, requested: str) -> Path:
        found = existingFileUnder(self._fallbackRoot, requested)
        if found is None:
            logger.debug("'%s' is not present in the fallback folder", requested)
            raise PathResolutionError(
                f"Path '{requested}' is not present in the monitored folder '{self._fallbackRoot}'.",
                requestedPath=requested,
                reason=ResolutionFailure.NOT_FOUND,
            )
        return found

    def resolvePath(self, requestedPath: str | PathLike[str]) -> Path:
        """
        Maps a requested asset path to the file that should be used.

        - Absolute paths must lie under the mods root or the fallback root,
          and are then served as given (no override search).
        - With no active package, relative paths are looked up in the fallback root.
        - With an active package, its folder is tried first, then the fallback root.

        Raises PathResolutionError when the path is outside both roots, climbs out
        of the root it is joined to, or exists in neither location.
        """
        requested = os.fspath(requestedPath)
        with logContext(requestedPath=requested):
            if os.path.isabs(requested.strip()):
                requested = requested.strip()
                if not isPathPartOf(self._modsRoot, requested) and not isPathPartOf(self._fallbackRoot, requested):
                    logger.debug("Rejected '%s': outside managed roots", requested)
                    raise PathResolutionError(
                        f"Path '{requested}' is not pointing to either the monitored or the mods folder.",
                        requestedPath=requested,
                        reason=ResolutionFailure.OUTSIDE_ROOTS,
                    )

            activeDirectory = self.activeDirectory
            if activeDirectory is None:
                return self._fromFallback(requested)

            override = existingFileUnder(activeDirectory, requested)
            if override is not None:
                return override
            return self._fromFallback(requested)
