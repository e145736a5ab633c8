import sys
import psutil
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

log = logging.getLogger(__name__)


#* --- Process Status ---
def get_proc_status_string(proc: psutil.Process) -> str:
    """Gets a string representation of a process status."""
    try:
        if proc.status() == psutil.STATUS_ZOMBIE:
            return "zombie"
        return "running"
    except psutil.NoSuchProcess:
        return "stopped"
    except psutil.Error:
        return "unknown"


#* --- Process Creation ---
def get_executable_path(base_path: Path) -> Path:
    """Returns the platform-specific full path for an executable."""
    return base_path.with_suffix(".exe") if sys.platform == "win32" else base_path

def _get_popen_creation_flags() -> Dict[str, Any]:
    """Returns platform-specific creation flags for subprocess.Popen."""
    if sys.platform == "win32":
        # The backend is a console program; keep it from opening a console window.
        return {"creationflags": subprocess.CREATE_NO_WINDOW}
    return {}

def spawn_process(path: Path, args: Sequence[str], cwd: Optional[Path] = None) -> psutil.Popen:
    """
    Launches `path` with `args` and returns the psutil-wrapped Popen object.

    Standard input is bound to the null device. Standard output and error are
    inherited from the host, as is the environment.

    :param path: Executable to run.
    :param args: Arguments passed after the executable.
    :param cwd: Working directory; defaults to the host's.
    :raises OSError: When the OS refuses to create the process.
    """
    argv = [str(path), *args]
    log.debug(f"Spawning: {argv}")
    return psutil.Popen(
        argv,
        stdin=subprocess.DEVNULL,
        cwd=str(cwd) if cwd else None,
        **_get_popen_creation_flags(),
    )
