from pathlib import Path
from typing import Iterable


class BackendError(Exception):
    """Base class for every failure raised by the backend supervisor package."""


class BackendNotFoundError(BackendError):
    """No executable backend candidate exists for the install root."""

    def __init__(self, install_root: Path, searched: Iterable[Path] = ()) -> None:
        self.install_root = install_root
        self.searched = list(searched)
        super().__init__(f"No backend executable found for install root '{install_root}'")


class SpawnError(BackendError):
    """The OS refused to create the backend process."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to start backend '{path}': {cause}")


class SupervisorStateError(BackendError):
    """A lifecycle call arrived in a state that does not allow it (e.g. a second start)."""
