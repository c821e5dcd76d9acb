# modregistry/mods/constants.py
from __future__ import annotations

__all__ = [
    "DEFAULT_MANIFEST_GLOB", "DEFAULT_MANIFEST_FILE_NAME", "MANIFEST_FIELDS", "NO_ACTIVE_INDEX",
]



# Exactly one file matching this pattern is expected per mod directory.
DEFAULT_MANIFEST_GLOB = "*.json"
DEFAULT_MANIFEST_FILE_NAME = "manifest.json"

# On-disk key for each PackageManifest field.
MANIFEST_FIELDS: dict[str, str] = {
    "name": "Name",
    "description": "Description",
    "author": "Author",
    "version": "Version",
    "supported": "Supported",
}

NO_ACTIVE_INDEX = -1
