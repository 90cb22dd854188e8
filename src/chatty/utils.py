"""Utility functions for Chatty"""

import logging
import os

import psutil


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Lines each inner worker pulls from the shared file iterator at a time
DEFAULT_LINE_BATCH_SIZE = 256


def get_int_env(key: str) -> int:
    """Get integer value from environment variable, return 0 if not set or invalid."""
    val = os.getenv(key)
    if val is None:
        return 0
    try:
        return int(val)
    except ValueError:
        return 0


def get_str_env(key: str, default: str) -> str:
    """
    Get string from environment variable, return default if not set.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        String value or default
    """
    return os.getenv(key, default)


def default_worker_count() -> int:
    """Number of logical CPUs, never less than 1."""
    return psutil.cpu_count(logical=True) or 1


def get_outer_workers() -> int:
    """Outer (per-file) pool size: CHATTY_WORKERS or the CPU count."""
    return get_int_env('CHATTY_WORKERS') or default_worker_count()


def get_inner_workers() -> int:
    """Inner (per-line) pool size: CHATTY_INNER_WORKERS or the CPU count."""
    return get_int_env('CHATTY_INNER_WORKERS') or default_worker_count()


def get_line_batch_size() -> int:
    """Lines pulled per inner batch: CHATTY_LINE_BATCH_SIZE or 256."""
    size = get_int_env('CHATTY_LINE_BATCH_SIZE')
    return size if size > 0 else DEFAULT_LINE_BATCH_SIZE


def setup_logging() -> None:
    """Configure root logging to stderr at CHATTY_LOG_LEVEL (default WARNING)."""
    log_level_name = get_str_env('CHATTY_LOG_LEVEL', 'WARNING').upper()
    log_level = getattr(logging, log_level_name, logging.WARNING)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
