import psutil
import logging
from typing import List, Optional
from localcast_host.local.supervisor.process_utils import get_proc_status_string

log = logging.getLogger(__name__)


def _terminate(proc: psutil.Process) -> bool:
    """Sends SIGTERM (TerminateProcess on Windows). Returns False if the process is already gone."""
    try:
        log.debug(f"Sending SIGTERM to PID {proc.pid}")
        proc.terminate()
        return True
    except psutil.NoSuchProcess:
        log.debug(f"Process {proc.pid} no longer exists, skipping termination.")
        return False


def _wait(procs: List[psutil.Process], timeout: float) -> List[psutil.Process]:
    """Waits up to `timeout` seconds and returns the processes still alive."""
    try:
        _, alive = psutil.wait_procs(procs, timeout=timeout)
    except psutil.NoSuchProcess:
        alive = []
    return alive


def _forceful_kill(proc: psutil.Process) -> None:
    """Forcefully kills a process that didn't terminate gracefully."""
    try:
        log.warning(f"Backend (PID {proc.pid}) did not terminate gracefully. Killing it.")
        proc.kill()
    except psutil.NoSuchProcess:
        log.debug(f"Process {proc.pid} no longer exists, skipping forceful kill.")


def graceful_shutdown_sequence(proc: psutil.Process, timeout: float, kill_timeout: float) -> Optional[int]:
    """
    Runs the full graceful shutdown sequence for one process.

    Requests termination, waits up to `timeout` seconds, then escalates to a
    kill and waits up to `kill_timeout` more. A process that survives the kill
    is reported, not waited on forever.

    :param proc: The process to shut down.
    :param timeout: Seconds to wait after the termination request.
    :param kill_timeout: Seconds to wait after the kill.
    :return: The exit code if it could be collected, else None.
    """
    if _terminate(proc):
        alive = _wait([proc], timeout)
        if alive:
            _forceful_kill(proc)
            alive = _wait([proc], kill_timeout)
        if alive:
            log.error(
                f"Backend (PID {proc.pid}) is still {get_proc_status_string(proc)} {timeout + kill_timeout:.0f}s after "
                "the termination request. Giving up on it."
            )
            return None
    return getattr(proc, "returncode", None)
