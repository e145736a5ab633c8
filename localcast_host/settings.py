"""
This module contains the configuration defaults for the LocalCast host component.
It defines where the backend executable is expected, how it is invoked, and how
long shutdown may take. Values can be overridden through environment variables
(or a `.env` file) and, for the modifiable subset, through a JSON overrides file.
"""

import os
import sys
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=True)

#* --- Core Paths ---
BASE_DIR = pathlib.Path(__file__).resolve().parent.parent  # Project Root
# Empty means "derive from the running executable" (see locator.resolve_install_root).
INSTALL_ROOT = os.getenv("LOCALCAST_INSTALL_ROOT", "")
OVERRIDES_JSON_PATH = pathlib.Path(os.getenv("LOCALCAST_CONFIG_FILE", str(BASE_DIR / "overrides.json")))

#* --- Backend Executable ---
BACKEND_NAME = os.getenv("LOCALCAST_BACKEND_NAME", "localcast")
BACKEND_ARGS = ["--api"]

# Packaged builds: macOS keeps the backend in Contents/Helpers/ because the
# bundle's own executable in Contents/MacOS/ has the same name on a
# case-insensitive filesystem. Windows installs it next to the host executable.
PACKAGED_HELPERS_SUBPATH = "." if sys.platform == "win32" else "Contents/Helpers"

#* --- Development Build Discovery ---
MARKER_FILENAME = "Cargo.toml"
BUILD_OUTPUT_SUBPATH = "target"
BUILD_PROFILES = ("release", "debug")
MAX_SEARCH_DEPTH = 10

#* --- Supervisor Settings ---
GRACEFUL_SHUTDOWN_TIMEOUT = float(os.getenv("LOCALCAST_SHUTDOWN_TIMEOUT", "5"))  # seconds before force-killing
FORCE_KILL_TIMEOUT = 5.0  # seconds to wait for the kill to take effect
PROCESS_TITLE = "LocalCast - Host"

#* --- Logging ---
LOG_LEVEL = os.getenv("LOCALCAST_LOG_LEVEL", "INFO").upper()
_log_file = os.getenv("LOCALCAST_LOG_FILE", "")
LOG_FILE_PATH = pathlib.Path(_log_file) if _log_file else None

#* --- MODIFIABLE SETTINGS (Changeable through the overrides file) ---
MODIFIABLE_SETTINGS = {
    "INSTALL_ROOT",
    "BACKEND_NAME",
    "MAX_SEARCH_DEPTH",
    "GRACEFUL_SHUTDOWN_TIMEOUT",
    "FORCE_KILL_TIMEOUT",
    "LOG_LEVEL",
}
