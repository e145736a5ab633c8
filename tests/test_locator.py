from __future__ import annotations

import sys
from pathlib import Path

import pytest

from localcast_host.local.supervisor import locator
from localcast_host.local.supervisor.errors import BackendNotFoundError
from localcast_host.local.supervisor.process_utils import get_executable_path

BACKEND = get_executable_path(Path("localcast")).name
posix_only = pytest.mark.skipif(sys.platform == "win32", reason="relies on POSIX exec bits")


def _nested(root: Path, depth: int) -> Path:
    path = root
    for i in range(depth):
        path = path / f"d{i}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def test_packaged_binary_wins_over_development_builds(tmp_path, settings, make_executable, make_marker):
    make_marker(tmp_path)
    make_executable(tmp_path / "target" / "release" / BACKEND)
    app = tmp_path / "build" / "LocalCast.app"
    packaged = make_executable(app / "Contents" / "Helpers" / BACKEND)

    assert locator.locate_backend_binary(app, settings) == packaged


def test_packaged_hit_does_not_probe_parent_directories(tmp_path, settings, make_executable, monkeypatch):
    app = tmp_path / "App"
    packaged = make_executable(app / "Contents" / "Helpers" / BACKEND)

    probed = []
    monkeypatch.setattr(locator, "is_marker_file", lambda p: probed.append(p) or False)

    assert locator.locate_backend_binary(app, settings) == packaged
    assert probed == []


def test_release_build_preferred_over_debug(tmp_path, settings, make_executable, make_marker):
    proj = tmp_path / "proj"
    make_marker(proj)
    release = make_executable(proj / "target" / "release" / BACKEND)
    make_executable(proj / "target" / "debug" / BACKEND)
    install_root = _nested(proj / "flutter_app" / "build", 3)

    assert locator.locate_backend_binary(install_root, settings) == release


def test_debug_build_used_when_no_release(tmp_path, settings, make_executable, make_marker):
    proj = tmp_path / "proj"
    make_marker(proj)
    debug = make_executable(proj / "target" / "debug" / BACKEND)
    install_root = _nested(proj / "build", 2)

    assert locator.locate_backend_binary(install_root, settings) == debug


def test_development_layout_end_to_end(tmp_path, settings, make_executable, make_marker):
    proj = tmp_path / "proj"
    make_marker(proj)
    release = make_executable(proj / "target" / "release" / BACKEND)
    install_root = proj / "build" / "Out"
    install_root.mkdir(parents=True)

    assert locator.locate_backend_binary(install_root, settings) == release
    assert not (proj / "target" / "debug" / BACKEND).exists()


def test_search_stops_at_first_marker_without_builds(tmp_path, settings, make_executable, make_marker):
    # An outer project with a usable build must not be picked up.
    make_marker(tmp_path)
    make_executable(tmp_path / "target" / "release" / BACKEND)
    inner = tmp_path / "inner"
    make_marker(inner)
    install_root = _nested(inner / "build", 2)

    assert locator.locate_backend_binary(install_root, settings) is None


def test_marker_exactly_at_depth_limit_is_found(tmp_path, settings, make_executable, make_marker):
    make_marker(tmp_path)
    release = make_executable(tmp_path / "target" / "release" / BACKEND)
    install_root = _nested(tmp_path, 10)

    assert locator.locate_backend_binary(install_root, settings) == release


def test_marker_beyond_depth_limit_is_ignored(tmp_path, settings, make_executable, make_marker):
    make_marker(tmp_path)
    make_executable(tmp_path / "target" / "release" / BACKEND)
    install_root = _nested(tmp_path, 11)

    assert locator.locate_backend_binary(install_root, settings) is None


def test_install_root_itself_is_not_a_project_root(tmp_path, settings, make_executable, make_marker):
    make_marker(tmp_path)
    make_executable(tmp_path / "target" / "release" / BACKEND)

    assert locator.locate_backend_binary(tmp_path, settings) is None


@posix_only
def test_non_executable_files_are_skipped(tmp_path, settings, make_executable, make_marker):
    app = tmp_path / "proj" / "App"
    packaged = app / "Contents" / "Helpers" / BACKEND
    packaged.parent.mkdir(parents=True)
    packaged.write_text("not a program")
    packaged.chmod(0o644)
    make_marker(tmp_path / "proj")
    release = tmp_path / "proj" / "target" / "release" / BACKEND
    release.parent.mkdir(parents=True)
    release.write_text("not a program")
    release.chmod(0o644)
    debug = make_executable(tmp_path / "proj" / "target" / "debug" / BACKEND)

    assert locator.locate_backend_binary(app, settings) == debug


def test_directory_named_like_backend_is_not_executable_file(tmp_path, settings):
    app = tmp_path / "App"
    (app / "Contents" / "Helpers" / BACKEND).mkdir(parents=True)

    assert locator.locate_backend_binary(app, settings) is None


def test_candidates_are_yielded_in_priority_order(tmp_path, settings, make_marker):
    proj = tmp_path / "proj"
    make_marker(proj)
    install_root = proj / "App"
    install_root.mkdir()

    candidates = list(locator.iter_search_candidates(install_root, settings))

    assert candidates == [
        locator.SearchCandidate(install_root / "Contents" / "Helpers" / BACKEND, locator.PACKAGED),
        locator.SearchCandidate(proj / "target" / "release" / BACKEND, locator.DEVELOPMENT, "release"),
        locator.SearchCandidate(proj / "target" / "debug" / BACKEND, locator.DEVELOPMENT, "debug"),
    ]


def test_require_backend_binary_lists_searched_paths(tmp_path, settings):
    install_root = tmp_path / "App"
    install_root.mkdir()

    with pytest.raises(BackendNotFoundError) as excinfo:
        locator.require_backend_binary(install_root, settings)

    assert excinfo.value.install_root == install_root
    assert excinfo.value.searched == [install_root / "Contents" / "Helpers" / BACKEND]


def test_resolve_install_root_prefers_configured_root(tmp_path, settings):
    settings.INSTALL_ROOT = str(tmp_path)

    assert locator.resolve_install_root(settings) == tmp_path.resolve()


def test_resolve_install_root_lifts_frozen_mac_executable_to_bundle(tmp_path, settings, monkeypatch):
    macos_dir = tmp_path / "LocalCast.app" / "Contents" / "MacOS"
    macos_dir.mkdir(parents=True)
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "executable", str(macos_dir / "LocalCast"))

    assert locator.resolve_install_root(settings) == (tmp_path / "LocalCast.app").resolve()


def test_resolve_install_root_uses_frozen_executable_directory(tmp_path, settings, monkeypatch):
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "executable", str(tmp_path / "LocalCast.exe"))

    assert locator.resolve_install_root(settings) == tmp_path.resolve()


def test_relative_install_root_walks_from_working_directory(tmp_path, settings, make_executable, make_marker, monkeypatch):
    proj = tmp_path / "proj"
    make_marker(proj)
    release = make_executable(proj / "target" / "release" / BACKEND)
    out = proj / "build" / "Out"
    out.mkdir(parents=True)
    monkeypatch.chdir(out)

    found = locator.locate_backend_binary(Path("."), settings)

    assert found is not None
    assert found.resolve() == release.resolve()


def test_unprobeable_paths_count_as_missing(tmp_path, settings):
    install_root = tmp_path / ("x" * 300)

    assert locator.locate_backend_binary(install_root, settings) is None
    with pytest.raises(BackendNotFoundError):
        locator.require_backend_binary(install_root, settings)
