"""
The Supervisor package.
Locates the LocalCast backend executable and manages the lifecycle of its process.

This package contains the BackendSupervisor class and its helper modules,
which together handle the discovery, starting and stopping of the backend.
"""
from .errors import BackendError, BackendNotFoundError, SpawnError, SupervisorStateError
from .locator import SearchCandidate, iter_search_candidates, locate_backend_binary, require_backend_binary, resolve_install_root
from .supervisor import BackendProcessHandle, BackendSupervisor, RUNNING, TERMINATED, UNSTARTED

__all__ = [
    'BackendError', 'BackendNotFoundError', 'SpawnError', 'SupervisorStateError',
    'SearchCandidate', 'iter_search_candidates', 'locate_backend_binary', 'require_backend_binary',
    'resolve_install_root',
    'BackendProcessHandle', 'BackendSupervisor', 'RUNNING', 'TERMINATED', 'UNSTARTED',
]
