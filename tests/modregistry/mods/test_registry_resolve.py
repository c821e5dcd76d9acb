from __future__ import annotations

import json
from pathlib import Path

import pytest

from modregistry.core.errors import ConfigurationError, PathResolutionError, ResolutionFailure
from modregistry.mods.registry import ModRegistry


def _write(path: Path, text: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture()
def setup(roots, makePackage):
    fallback, mods = roots
    modDir = makePackage("M", supported="1.0")
    _write(fallback / "foo.txt", "fallback foo")
    _write(fallback / "bar.txt", "fallback bar")
    _write(fallback / "baz.txt", "fallback baz")
    _write(fallback / "sub" / "deep.txt", "fallback deep")
    _write(modDir / "bar.txt", "mod bar")
    _write(modDir / "only-in-mod.txt", "mod only")
    registry = ModRegistry(fallback, mods, lambda: "1.0", lambda host, sup: host == sup)
    return registry, fallback, mods, modDir


def test_no_active_mod_uses_fallback(setup):
    registry, fallback, _mods, _modDir = setup
    assert registry.resolvePath("foo.txt") == fallback / "foo.txt"
    assert registry.resolvePath(Path("sub") / "deep.txt") == fallback / "sub" / "deep.txt"


def test_no_active_mod_missing_file_fails(setup):
    registry, _fallback, _mods, _modDir = setup
    with pytest.raises(PathResolutionError) as excInfo:
        registry.resolvePath("missing.txt")
    assert excInfo.value.reason is ResolutionFailure.NOT_FOUND
    assert excInfo.value.requestedPath == "missing.txt"


def test_no_active_mod_ignores_mod_only_files(setup):
    registry, _fallback, _mods, _modDir = setup
    with pytest.raises(PathResolutionError):
        registry.resolvePath("only-in-mod.txt")


def test_active_mod_override_wins(setup):
    registry, _fallback, _mods, modDir = setup
    registry.toggle(0)
    resolved = registry.resolvePath("bar.txt")
    assert resolved == modDir / "bar.txt"
    assert resolved.read_text(encoding="utf-8") == "mod bar"


def test_active_mod_falls_back_when_file_missing(setup):
    registry, fallback, _mods, _modDir = setup
    registry.toggle(0)
    assert registry.resolvePath("baz.txt") == fallback / "baz.txt"
    assert registry.resolvePath("only-in-mod.txt").name == "only-in-mod.txt"


def test_active_mod_missing_everywhere_fails(setup):
    registry, _fallback, _mods, _modDir = setup
    registry.toggle(0)
    with pytest.raises(PathResolutionError):
        registry.resolvePath("nowhere.txt")


def test_deactivating_restores_fallback(setup):
    registry, fallback, _mods, _modDir = setup
    registry.toggle(0)
    registry.toggle(0)
    assert registry.resolvePath("bar.txt") == fallback / "bar.txt"


def test_directories_do_not_count_as_files(setup):
    registry, _fallback, _mods, _modDir = setup
    with pytest.raises(PathResolutionError):
        registry.resolvePath("sub")


def test_absolute_path_outside_roots_rejected(setup, tmp_path):
    registry, _fallback, _mods, _modDir = setup
    outside = _write(tmp_path / "elsewhere" / "foo.txt")
    with pytest.raises(PathResolutionError) as excInfo:
        registry.resolvePath(str(outside))
    assert excInfo.value.reason is ResolutionFailure.OUTSIDE_ROOTS


def test_absolute_path_sibling_with_shared_prefix_rejected(setup, tmp_path):
    registry, fallback, _mods, _modDir = setup
    sibling = _write(tmp_path / (fallback.name + "-old") / "foo.txt")
    with pytest.raises(PathResolutionError) as excInfo:
        registry.resolvePath(sibling)
    assert excInfo.value.reason is ResolutionFailure.OUTSIDE_ROOTS


def test_absolute_path_under_fallback_is_returned_as_given(setup):
    registry, fallback, _mods, _modDir = setup
    absolute = fallback / "foo.txt"
    assert registry.resolvePath(f"  {absolute}  ") == absolute


def test_absolute_path_under_fallback_bypasses_override_search(setup):
    registry, fallback, _mods, modDir = setup
    registry.toggle(0)
    absolute = fallback / "bar.txt"
    # The mod ships bar.txt too, but an absolute request is trusted verbatim.
    assert registry.resolvePath(absolute) == absolute
    assert registry.resolvePath(modDir / "bar.txt") == modDir / "bar.txt"


def test_absolute_path_into_other_package_is_served_while_mod_active(setup):
    registry, _fallback, mods, modDir = setup
    other = _write(mods / "Other" / "x.txt", "other x")
    registry.toggle(0)
    assert registry.activeDirectory == modDir

    # Absolute paths under the mods root are not redirected to the active package.
    assert registry.resolvePath(str(other)) == other
    with pytest.raises(PathResolutionError) as excInfo:
        registry.resolvePath(mods / "Other" / "missing.txt")
    assert excInfo.value.reason is ResolutionFailure.NOT_FOUND


def test_absolute_path_under_root_but_missing_fails(setup):
    registry, fallback, _mods, _modDir = setup
    with pytest.raises(PathResolutionError) as excInfo:
        registry.resolvePath(fallback / "ghost.txt")
    assert excInfo.value.reason is ResolutionFailure.NOT_FOUND


def test_relative_traversal_is_rejected(setup):
    registry, _fallback, _mods, _modDir = setup
    with pytest.raises(PathResolutionError) as excInfo:
        registry.resolvePath("../mods/M/manifest.json")
    assert excInfo.value.reason is ResolutionFailure.ESCAPES_ROOT


def test_failed_resolution_keeps_registry_usable(setup):
    registry, fallback, _mods, _modDir = setup
    registry.toggle(0)
    with pytest.raises(PathResolutionError):
        registry.resolvePath("nowhere.txt")
    assert registry.activeIndex == 0
    assert registry.resolvePath("foo.txt") == fallback / "foo.txt"


def test_fromSettings_reads_roots(isolatedSettings, roots, makePackage):
    fallback, mods = roots
    makePackage("a", supported="1.0")
    isolatedSettings.write_text(
        json.dumps({"mods": {"fallbackRoot": str(fallback), "modsRoot": str(mods)}}),
        encoding="utf-8",
    )

    registry = ModRegistry.fromSettings(lambda: "1.0", lambda host, sup: host == sup)

    assert registry.fallbackRoot == fallback
    assert registry.modsRoot == mods
    assert registry.compatibleIndices == (0,)


def test_fromSettings_requires_roots():
    with pytest.raises(ConfigurationError, match="mods.fallbackRoot"):
        ModRegistry.fromSettings(lambda: "1.0", lambda host, sup: True)
