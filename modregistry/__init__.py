from .core.errors import (
    ModRegistryError,
    ConfigurationError,
    MalformedPackageError,
    PathResolutionError,
    ResolutionFailure,
)
from .mods.compat import CompatibilityPredicate, HostCompatibility, VersionSupplier, classifyPackages
from .mods.discover import loadPackages
from .mods.manifest import PackageManifest, readManifest, writeManifest
from .mods.registry import ModRegistry, PackageEntry
from .semver.semver import isVersionSupported

__all__ = [
    "ModRegistry",
    "PackageEntry",
    "PackageManifest",
    "readManifest",
    "writeManifest",
    "loadPackages",
    "classifyPackages",
    "VersionSupplier",
    "CompatibilityPredicate",
    "HostCompatibility",
    "isVersionSupported",
    "ModRegistryError",
    "ConfigurationError",
    "MalformedPackageError",
    "PathResolutionError",
    "ResolutionFailure",
]
