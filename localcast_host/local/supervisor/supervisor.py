import time
import psutil
import logging
import threading
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence

from localcast_host.local.supervisor import process_utils, shutdown
from localcast_host.local.supervisor.errors import SpawnError, SupervisorStateError

if TYPE_CHECKING:
    from localcast_host.local.config import MergedSettings

log = logging.getLogger(__name__)

UNSTARTED = "unstarted"
RUNNING = "running"
TERMINATED = "terminated"


class BackendProcessHandle:
    """A live or exited backend process, owned by a BackendSupervisor."""

    def __init__(self, executable_path: Path, process: psutil.Popen) -> None:
        self.executable_path = executable_path
        self.process = process
        self.pid: int = process.pid
        self.state = RUNNING
        self.returncode: Optional[int] = None
        self.started_at = time.time()

    def poll(self) -> Optional[int]:
        """Checks whether the process has exited; marks the handle terminated if so."""
        if self.state == TERMINATED:
            return self.returncode
        returncode = self.process.poll()
        if returncode is not None:
            self.mark_terminated(returncode)
        return returncode

    def mark_terminated(self, returncode: Optional[int]) -> None:
        self.state = TERMINATED
        self.returncode = returncode

    def __repr__(self) -> str:
        return f"<BackendProcessHandle pid={self.pid} state={self.state} path='{self.executable_path}'>"


class BackendSupervisor:
    """
    Owns the lifecycle of at most one backend process.

    State moves `unstarted -> running -> terminated` and never back; a
    supervisor whose backend has terminated refuses to start another one.
    `start` and `stop` are serialized by a lock so they may be called from
    different threads.
    """

    def __init__(self, config: Optional["MergedSettings"] = None) -> None:
        if config is None:
            from localcast_host.local.config import effective_settings as config
        self.config = config
        self._lock = threading.Lock()
        self._handle: Optional[BackendProcessHandle] = None
        self._state = UNSTARTED

    @property
    def handle(self) -> Optional[BackendProcessHandle]:
        """The current handle, or None once no backend is running."""
        self._refresh()
        return self._handle

    @property
    def state(self) -> str:
        self._refresh()
        return self._state

    def is_running(self) -> bool:
        return self.state == RUNNING

    def _refresh(self) -> None:
        """Notices a backend that exited on its own. It is reported, never restarted."""
        with self._lock:
            handle = self._handle
            if handle is None or handle.poll() is None:
                return
            log.warning(f"Backend (PID {handle.pid}) exited on its own with code {handle.returncode}.")
            self._release(handle)

    def _release(self, handle: BackendProcessHandle) -> None:
        self._handle = None
        self._state = TERMINATED
        log.info(f"Backend (PID {handle.pid}) released after {time.time() - handle.started_at:.1f}s.")

    def start(self, path: Path, args: Optional[Sequence[str]] = None) -> BackendProcessHandle:
        """
        Starts the backend executable at `path`.

        :param path: The located backend executable.
        :param args: Argument list; defaults to `BACKEND_ARGS` (the API server flag).
        :return: The handle of the started process.
        :raises SupervisorStateError: If a backend was already started by this supervisor.
        :raises SpawnError: If the OS refused to create the process.
        """
        args = list(self.config.BACKEND_ARGS if args is None else args)
        path = Path(path)

        with self._lock:
            if self._state != UNSTARTED:
                raise SupervisorStateError(
                    f"Backend already {self._state}; this supervisor starts at most one backend."
                )

            log.info(f"Starting backend: {path} {' '.join(args)}".rstrip())
            try:
                process = process_utils.spawn_process(path, args)
            except (OSError, subprocess.SubprocessError, psutil.Error, ValueError) as e:
                raise SpawnError(path, e) from e

            self._handle = BackendProcessHandle(path, process)
            self._state = RUNNING
            log.info(f"Backend started (pid {process.pid}) from {path}")
            return self._handle

    def stop(self) -> None:
        """
        Stops the backend if one is running, waiting for it to exit.

        Graceful termination is requested first and escalated to a kill once
        `GRACEFUL_SHUTDOWN_TIMEOUT` expires. The handle is cleared in every
        case. Calling this without a running backend does nothing.
        """
        with self._lock:
            handle = self._handle
            if handle is None:
                return

            try:
                if handle.poll() is not None:
                    log.info(f"Backend (PID {handle.pid}) had already exited with code {handle.returncode}.")
                    return

                log.info(f"Stopping backend (PID {handle.pid})...")
                returncode = shutdown.graceful_shutdown_sequence(
                    handle.process,
                    timeout=self.config.GRACEFUL_SHUTDOWN_TIMEOUT,
                    kill_timeout=self.config.FORCE_KILL_TIMEOUT,
                )
                if returncode is None:
                    returncode = handle.process.poll()
                handle.mark_terminated(returncode)
                log.info(f"Backend (PID {handle.pid}) stopped with code {returncode}.")
            finally:
                handle.state = TERMINATED
                self._release(handle)
