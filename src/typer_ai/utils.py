"""
Utility functions for Typer AI.

Includes logging, clipboard access, and helper functions.
"""

import subprocess
import sys
from datetime import datetime

# Console colors
C_RESET = "\033[0m"
C_BOLD = "\033[1m"
C_DIM = "\033[2m"
C_RED = "\033[91m"
C_GREEN = "\033[92m"
C_YELLOW = "\033[93m"
C_CYAN = "\033[96m"
C_MAGENTA = "\033[95m"
C_BG_GREEN = "\033[42m\033[30m"

# Log level styles
LOG_STYLES = {
    "INFO": (C_DIM, "›"),
    "OK": (C_GREEN, "✓"),
    "WARN": (C_YELLOW, "⚠"),
    "ERR": (C_RED, "✗"),
    "AI": (C_MAGENTA, "✦"),
    "APP": (C_CYAN, "◆"),
}

# Timeout values (seconds)
CLIPBOARD_TIMEOUT = 5
SUBPROCESS_TIMEOUT = 10

# Display truncation
LOG_TRUNCATE = 60

# Set by the CLI; log lines are hidden unless verbose output was requested
VERBOSE = True


def log(msg: str, level: str = "INFO"):
    """Print a timestamped, colored log message."""
    if not VERBOSE and level in ("INFO", "OK", "AI"):
        return
    ts = datetime.now().strftime("%H:%M:%S")
    color, sym = LOG_STYLES.get(level, (C_DIM, "›"))
    print(f"  {C_DIM}{ts}{C_RESET}  {color}{sym}{C_RESET}  {msg}", file=sys.stderr)


def truncate(text: str, length: int = LOG_TRUNCATE) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) > length:
        return text[:length] + "..."
    return text


def copy_to_clipboard(text: str) -> bool:
    """Put text on the macOS pasteboard. Returns False if pbcopy failed."""
    try:
        subprocess.run(['pbcopy'], input=text.encode(), check=True, timeout=CLIPBOARD_TIMEOUT)
        return True
    except (OSError, subprocess.SubprocessError) as e:
        log(f"Clipboard copy failed: {e}", "ERR")
        return False
