"""
Unified Logging Configuration for CaseBundler

This module provides a centralized logging system that combines:
- Console output with timestamps (DEBUG mode only)
- File output to logs/processing.log
- A debug trail in logs/debug_flow.txt recording every message
- Performance timing via Timer context manager

All modules should import logging functions from this module:
    from case_bundler.logging_config import debug_log, info, warning, error, Timer

The module respects DEBUG_MODE from config:
- DEBUG_MODE=True: All messages shown on console, verbose timing
- DEBUG_MODE=False: Console stays quiet; files still record everything

Log Levels:
- debug_log(): Always writes to the debug trail; console only in DEBUG_MODE
- info(): Standard information messages
- warning(): Skipped sources, replaced archive entries
- error(): Failures with optional exception info
"""

import logging
import sys
import time
from datetime import datetime

from case_bundler.config import DEBUG_FLOW_FILE, DEBUG_MODE, LOG_DATE_FORMAT, LOG_FILE, LOG_FORMAT

# =============================================================================
# Debug Trail Setup (debug_flow.txt)
# =============================================================================

class _DebugFileLogger:
    """
    Manages the debug_flow.txt file for detailed debugging output.

    Singleton; the file is opened lazily on first write so importing the
    package has no file side effects beyond directory creation.
    """

    _instance = None
    _log_file = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _open(self):
        try:
            self._log_file = open(DEBUG_FLOW_FILE, 'a', encoding='utf-8')
        except OSError:
            return False
        self._log_file.write(f"=== CaseBundler Debug Log ({datetime.now().isoformat()}) ===\n")
        return True

    def write(self, message: str):
        """Write message to the debug trail."""
        if self._log_file is None and not self._open():
            return
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        self._log_file.write(f"[{timestamp}] {message}\n")
        self._log_file.flush()

    def close(self):
        """Close the debug trail gracefully."""
        if self._log_file:
            self._log_file.write(f"Ended: {datetime.now().isoformat()}\n\n")
            self._log_file.close()
            self._log_file = None


_debug_file_logger = _DebugFileLogger()


# =============================================================================
# Standard Python Logging Setup
# =============================================================================

def _setup_standard_logging() -> logging.Logger:
    """
    Configure the standard Python logging framework.

    Returns:
        Configured logger instance for CaseBundler
    """
    logger = logging.getLogger('CaseBundler')
    logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    try:
        file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(file_handler)
    except OSError:
        logger.addHandler(logging.NullHandler())

    if DEBUG_MODE:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(console_handler)

    return logger


_logger = _setup_standard_logging()


# =============================================================================
# Timer Context Manager
# =============================================================================

class Timer:
    """
    Context manager for timing code blocks with automatic logging.

    Usage:
        with Timer("Packaging batch 1/3"):
            archive.to_bytes()

    Attributes:
        operation_name: Name of the operation being timed
        duration_ms: Duration in milliseconds (available after exit)
    """

    def __init__(self, operation_name: str, auto_log: bool = True):
        self.operation_name = operation_name
        self.auto_log = auto_log
        self.start_time: float | None = None
        self.duration_ms: float | None = None

    def __enter__(self):
        if self.auto_log:
            debug_log(f"Starting {self.operation_name}...")
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.time() - self.start_time) * 1000
        if self.auto_log:
            debug_timing(self.operation_name, self.duration_ms / 1000)
        return False  # Don't suppress exceptions


# =============================================================================
# Public Logging Functions
# =============================================================================

def debug_log(message: str):
    """
    Log a debug message to the debug trail and console (if DEBUG_MODE).

    Args:
        message: The message to log (prefix with [COMPONENT] for clarity)

    Example:
        debug_log("[SLICER] Copied 3 pages from volume 2")
    """
    _debug_file_logger.write(message)
    _logger.debug(message)


def info(message: str):
    """Log an informational message."""
    _debug_file_logger.write(f"[INFO] {message}")
    _logger.info(message)


def warning(message: str):
    """Log a warning message (always recorded)."""
    _debug_file_logger.write(f"[WARNING] {message}")
    _logger.warning(message)


def error(message: str, exc_info: bool = False):
    """
    Log an error message with optional exception traceback.

    Args:
        message: The error message to log
        exc_info: If True, include exception traceback (only in DEBUG_MODE)
    """
    _debug_file_logger.write(f"[ERROR] {message}")
    _logger.error(message, exc_info=exc_info and DEBUG_MODE)


def debug_timing(operation: str, elapsed_seconds: float):
    """
    Log operation timing information in human-readable format.

    Args:
        operation: Description of the operation that was timed
        elapsed_seconds: Elapsed time in seconds (float)
    """
    if elapsed_seconds < 1:
        time_str = f"{elapsed_seconds*1000:.0f} ms"
    elif elapsed_seconds < 60:
        time_str = f"{elapsed_seconds:.2f}s"
    else:
        time_str = f"{elapsed_seconds/60:.1f}m"
    debug_log(f"{operation} took {time_str}")


def close_debug_log():
    """Close the debug trail. Call at application shutdown."""
    _debug_file_logger.close()


__all__ = [
    'debug_log',
    'debug_timing',
    'info',
    'warning',
    'error',
    'close_debug_log',
    'Timer',
    'DEBUG_MODE',
]
