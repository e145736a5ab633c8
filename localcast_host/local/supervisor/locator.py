import os
import sys
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, NamedTuple, Optional

from localcast_host.local.supervisor.errors import BackendNotFoundError
from localcast_host.local.supervisor.process_utils import get_executable_path

if TYPE_CHECKING:
    from localcast_host.local.config import MergedSettings

log = logging.getLogger(__name__)

PACKAGED = "packaged"
DEVELOPMENT = "development"


class SearchCandidate(NamedTuple):
    """A path the locator probes, in the order it probes them."""
    path: Path
    kind: str
    profile: Optional[str] = None


#* --- Filesystem Probes ---
def is_executable_file(path: Path) -> bool:
    """True when `path` is a regular file the current user may execute."""
    try:
        return path.is_file() and os.access(path, os.X_OK)
    except OSError as e:
        log.debug(f"Cannot probe {path}: {e}")
        return False

def is_marker_file(path: Path) -> bool:
    """A wrapper for Path.is_file that treats unreadable paths as absent."""
    try:
        return path.is_file()
    except OSError as e:
        log.debug(f"Cannot probe {path}: {e}")
        return False


def _settings(config: Optional["MergedSettings"]) -> "MergedSettings":
    if config is None:
        from localcast_host.local.config import effective_settings
        return effective_settings
    return config


#* --- Install Context ---
def resolve_install_root(config: Optional["MergedSettings"] = None) -> Path:
    """
    Determines the installation root of the running host.

    Precedence: the `INSTALL_ROOT` setting, then the directory of a frozen
    executable (lifted to the `.app` bundle when running from
    `X.app/Contents/MacOS`), then the directory of the launching script.

    :param config: Settings to read; defaults to the effective settings.
    :return: The resolved install root.
    """
    config = _settings(config)
    if config.INSTALL_ROOT:
        return Path(config.INSTALL_ROOT).expanduser().resolve()

    if getattr(sys, "frozen", False):
        exe_dir = Path(sys.executable).resolve().parent
        contents = exe_dir.parent
        if exe_dir.name == "MacOS" and contents.name == "Contents" and contents.parent.suffix == ".app":
            return contents.parent
        return exe_dir

    return Path(sys.argv[0] or ".").resolve().parent


#* --- Candidate Generation ---
def iter_search_candidates(install_root: Path, config: Optional["MergedSettings"] = None) -> Iterator[SearchCandidate]:
    """
    Yields the backend candidates for `install_root` in priority order.

    The packaged location comes first. The generator then walks up to
    `MAX_SEARCH_DEPTH` parent directories looking for the project marker; the
    first directory holding it yields one candidate per build profile and ends
    the walk, whether or not those candidates exist.

    The generator is lazy: a caller that stops at the packaged candidate never
    causes the parent directories to be touched.

    :param install_root: The host's installation root.
    :param config: Settings to read; defaults to the effective settings.
    """
    config = _settings(config)
    install_root = Path(install_root).absolute()
    backend_name = get_executable_path(Path(config.BACKEND_NAME)).name

    yield SearchCandidate(install_root / config.PACKAGED_HELPERS_SUBPATH / backend_name, PACKAGED)

    directory = install_root
    for _ in range(config.MAX_SEARCH_DEPTH):
        parent = directory.parent
        if parent == directory:
            break  # filesystem root
        directory = parent

        if not is_marker_file(directory / config.MARKER_FILENAME):
            continue

        log.debug(f"Found project marker '{config.MARKER_FILENAME}' in {directory}")
        for profile in config.BUILD_PROFILES:
            yield SearchCandidate(directory / config.BUILD_OUTPUT_SUBPATH / profile / backend_name, DEVELOPMENT, profile)
        return


#* --- Locator ---
def locate_backend_binary(install_root: Path, config: Optional["MergedSettings"] = None) -> Optional[Path]:
    """
    Selects the backend executable to run for `install_root`.

    The first executable candidate wins. Missing files are never an error:
    when no candidate qualifies the result is None.

    :param install_root: The host's installation root.
    :param config: Settings to read; defaults to the effective settings.
    :return: The executable's path, or None when none was found.
    """
    for candidate in iter_search_candidates(install_root, config):
        if is_executable_file(candidate.path):
            label = candidate.kind if candidate.profile is None else f"{candidate.kind}/{candidate.profile}"
            log.info(f"Using {label} backend binary at {candidate.path}")
            return candidate.path
        log.debug(f"No executable backend at {candidate.path}")
    return None


def require_backend_binary(install_root: Path, config: Optional["MergedSettings"] = None) -> Path:
    """Like `locate_backend_binary`, but raises BackendNotFoundError listing every probed path."""
    searched: List[Path] = []
    for candidate in iter_search_candidates(install_root, config):
        searched.append(candidate.path)
        if is_executable_file(candidate.path):
            return candidate.path
    raise BackendNotFoundError(Path(install_root), searched)
