# modregistry/mods/compat.py
from __future__ import annotations
import logging
from collections.abc import Callable, Sequence
from typing import Protocol, TypeAlias, runtime_checkable

from .manifest import PackageManifest

logger = logging.getLogger(__name__)

__all__ = [
    "VersionSupplier", "CompatibilityPredicate", "HostCompatibility",
    "ClassifyResult", "classifyPackages",
]

# Host collaborators. The registry never looks inside the version strings.
VersionSupplier: TypeAlias = Callable[[], str]
CompatibilityPredicate: TypeAlias = Callable[[str, str], bool]

ClassifyResult: TypeAlias = tuple[tuple[int, ...], tuple[int, ...]]



@runtime_checkable
class HostCompatibility(Protocol):
    """Both collaborators bundled on a single host object."""
    def currentVersion(self) -> str: ...
    def isCompatible(self, hostVersion: str, supported: str) -> bool: ...



def classifyPackages(
    manifests: Sequence[PackageManifest],
    versionSupplier: VersionSupplier,
    compatPredicate: CompatibilityPredicate,
) -> ClassifyResult:
    """
    Splits package indices into (compatible, incompatible).

    The predicate is asked `compatPredicate(versionSupplier(), manifest.supported)`
    once per package; every index ends up in exactly one of the two tuples.
    Exceptions from either collaborator propagate.
    """
    compatible: list[int] = []
    incompatible: list[int] = []

    for index, manifest in enumerate(manifests):
        if compatPredicate(versionSupplier(), manifest.supported):
            compatible.append(index)
        else:
            incompatible.append(index)
            logger.info("Package #%d '%s' is not compatible (supported=%r)", index, manifest.name, manifest.supported)

    logger.debug("Classified %d packages: %d compatible, %d incompatible", len(manifests), len(compatible), len(incompatible))
    return tuple(compatible), tuple(incompatible)
