"""Console logging for the traceability tools.

Lines look like ``[14:03:21] [INFO] message``. They go to stderr so stdout stays
reserved for the summary a CI log or a caller parses. When a log file is set,
every line is mirrored there as well.
"""

from __future__ import annotations

import sys
from datetime import datetime

LOG_FILE = None
VERBOSE = False


def configure(verbose: bool = False, log_file: str | None = None):
    global LOG_FILE, VERBOSE
    VERBOSE = verbose
    LOG_FILE = log_file


def log(msg: str, level: str = "INFO"):
    timestamp = datetime.now().strftime("%H:%M:%S")
    line = f"[{timestamp}] [{level}] {msg}"
    print(line, file=sys.stderr, flush=True)
    if LOG_FILE:
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(line + "\n")


def debug(msg: str):
    """Log only when verbose output was requested."""
    if VERBOSE:
        log(msg, "DEBUG")
