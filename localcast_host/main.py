import sys
import time
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

import setproctitle

# Basic console logger for messages BEFORE full setup is complete.
# This logger will be replaced by the full setup later.
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)-8s - [console] - %(message)s',
    stream=sys.stdout
)
log = logging.getLogger("console")

from localcast_host.log import setup_logging, level_from_name
from localcast_host.local import BackendHost, effective_settings as config
from localcast_host.local.supervisor import BackendNotFoundError, iter_search_candidates, require_backend_binary, resolve_install_root

VERBOSE_LOGGING = False


def _install_root_from_args(args: List[str]) -> Path:
    return Path(args[0]).resolve() if args else resolve_install_root(config)


def locate_command(args: List[str]) -> int:
    """Prints the backend executable the host would start."""
    install_root = _install_root_from_args(args)
    if VERBOSE_LOGGING:
        print(f"Install root: {install_root}")
        print("Search order:")
        for candidate in iter_search_candidates(install_root, config):
            label = candidate.kind if candidate.profile is None else f"{candidate.kind}/{candidate.profile}"
            print(f"  [{label}] {candidate.path}")

    try:
        binary = require_backend_binary(install_root, config)
    except BackendNotFoundError as e:
        log.error(str(e))
        return 1
    print(binary)
    return 0


def run_command(args: List[str]) -> int:
    """Starts the backend and keeps it running until the host is interrupted."""
    setproctitle.setproctitle(config.PROCESS_TITLE)
    install_root = Path(args[0]).resolve() if args else None

    host = BackendHost(config)
    host.install_exit_hooks()
    try:
        handle = host.on_start(install_root)
        if handle is None:
            log.warning("Running without a backend.")
        log.info("Host running. Press Ctrl+C to stop.")
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        log.info("Interrupted by user.")
    finally:
        host.on_shutdown()
    return 0


def print_help(args: Optional[List[str]] = None) -> int:
    print(
        "Usage: python -m localcast_host <command> [install-root] [--verbose]\n"
        "\n"
        "Commands:\n"
        "  locate   Print the backend executable that would be started.\n"
        "  run      Start the backend and stop it again when interrupted.\n"
        "  help     Show this message."
    )
    return 0


COMMANDS: Dict[str, Callable[[List[str]], int]] = {
    "locate": locate_command,
    "run": run_command,
    "help": print_help,
}


def execute_command(command: str, args: List[str]) -> int:
    """
    Executes a single console command.

    :param command: The command name (e.g., 'locate', 'run').
    :param args: The remaining arguments.
    :return int: The process exit status.
    """
    log.debug(f"Executing command: {command}, args: {args}")
    handler = COMMANDS.get(command)
    if handler is None:
        log.info(f"Unknown command: '{command}'. Type 'help' for a list of commands.")
        return 2
    return handler(args)


def main(argv: Optional[List[str]] = None) -> None:
    """The main entry point for the console application."""
    global VERBOSE_LOGGING
    argv = list(sys.argv[1:] if argv is None else argv)

    if "--verbose" in argv:
        VERBOSE_LOGGING = True
        argv.remove("--verbose")

    console_level = logging.DEBUG if VERBOSE_LOGGING else level_from_name(config.LOG_LEVEL)
    setup_logging(console_level)

    if not argv:
        print_help()
        sys.exit(0)

    command, args = argv[0].lower(), argv[1:]
    sys.exit(execute_command(command, args))


if __name__ == "__main__":
    main()
