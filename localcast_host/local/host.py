import atexit
import signal
import logging
from pathlib import Path
from typing import Optional

from localcast_host.local.supervisor import (
    BackendError,
    BackendProcessHandle,
    BackendSupervisor,
    locate_backend_binary,
    resolve_install_root,
)

log = logging.getLogger(__name__)


class BackendHost:
    """
    The two lifecycle hooks a host front-end calls: `on_start` once it has
    launched and `on_shutdown` when it is about to terminate.

    Failures never escape these hooks. A missing or unstartable backend is
    logged and the host carries on without it.

    Can also be used as a context manager, which guarantees `on_shutdown`
    runs however the block exits.
    """

    def __init__(self, config=None, supervisor: Optional[BackendSupervisor] = None) -> None:
        if config is None:
            from localcast_host.local.config import effective_settings as config
        self.config = config
        self.supervisor = supervisor or BackendSupervisor(config)
        self._started = False
        self._exit_hooks_installed = False

    def on_start(self, install_root: Optional[Path] = None) -> Optional[BackendProcessHandle]:
        """
        Locates the backend and starts it.

        :param install_root: The host's installation root; resolved from the environment if omitted.
        :return: The backend's handle, or None if no backend is running.
        """
        if self._started:
            log.warning("on_start called more than once; ignoring.")
            return self.supervisor.handle
        self._started = True

        try:
            root = Path(install_root) if install_root is not None else resolve_install_root(self.config)
            binary = locate_backend_binary(root, self.config)
            if binary is None:
                log.warning(f"Backend binary not found (install root: {root}). Continuing without a backend.")
                return None
            return self.supervisor.start(binary)
        except BackendError as e:
            log.error(f"{e}. Continuing without a backend.")
        except OSError as e:
            log.error(f"Could not resolve the backend location: {e}. Continuing without a backend.")
        return None

    def on_shutdown(self) -> None:
        """Stops the backend if it is running. Safe to call any number of times."""
        try:
            self.supervisor.stop()
        except Exception as e:
            log.error(f"Error while stopping the backend: {e}", exc_info=True)

    def install_exit_hooks(self) -> None:
        """
        Releases the backend on abnormal host exits too.

        Registers `on_shutdown` with atexit and turns SIGTERM (and SIGHUP where
        it exists) into SystemExit so the interpreter unwinds normally. Must be
        called from the main thread.
        """
        if self._exit_hooks_installed:
            return
        atexit.register(self.on_shutdown)
        for name in ("SIGTERM", "SIGHUP"):
            signum = getattr(signal, name, None)
            if signum is not None:
                signal.signal(signum, _raise_system_exit)
        self._exit_hooks_installed = True
        log.debug("Backend exit hooks installed.")

    def __enter__(self) -> "BackendHost":
        self.on_start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.on_shutdown()


def _raise_system_exit(signum, frame) -> None:
    log.info(f"Received signal {signum}. Shutting down.")
    raise SystemExit(128 + signum)
