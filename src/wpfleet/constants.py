"""Constants for wpfleet."""

import signal

# Lock acquisition (seconds)
DEFAULT_LOCK_TIMEOUT = 30
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_LOCK_DIR = "/tmp/wpfleet-locks"
LOCK_SUFFIX = ".lock"
PID_FILE = "pid"

# Cleanup command timeout (seconds)
CLEANUP_COMMAND_TIMEOUT = 30

CONFIG_FILE = "wpfleet.toml"

# Signals that trigger a cleanup drain (SIGHUP is missing on Windows)
SHUTDOWN_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGINT", "SIGHUP") if hasattr(signal, name)
)

# Exit codes
EXIT_LOCK_BUSY = 1
EXIT_LOCK_STALE = 2
EXIT_COMMAND_NOT_FOUND = 127
