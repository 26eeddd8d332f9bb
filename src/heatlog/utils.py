"""Utility functions for heatlog"""

import logging
import os
import sys


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Lines handed to a single worker task
DEFAULT_CHUNK_LINES = 10_000


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


def get_bool_env(key: str, default: bool) -> bool:
    """
    Get boolean from environment variable, return default if not set.

    Recognizes: true/false, yes/no, 1/0 (case-insensitive)

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Boolean value or default
    """
    val = os.getenv(key)
    if val is None:
        return default
    val_lower = val.lower()
    if val_lower in ('true', 'yes', '1'):
        return True
    elif val_lower in ('false', 'no', '0'):
        return False
    return default


def get_default_workers() -> int:
    """Worker thread count: HEATLOG_WORKERS if set to a positive value, else the executor default."""
    workers = get_int_env('HEATLOG_WORKERS')
    if workers > 0:
        return workers
    return min(32, (os.cpu_count() or 1) + 4)


def get_chunk_lines() -> int:
    """Lines per worker task: HEATLOG_CHUNK_LINES if set to a positive value."""
    chunk_lines = get_int_env('HEATLOG_CHUNK_LINES')
    if chunk_lines > 0:
        return chunk_lines
    return DEFAULT_CHUNK_LINES


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the root logger for CLI usage.

    Logs always go to stderr so they never interleave with annotated lines on stdout.
    The level comes from HEATLOG_LOG_LEVEL (default WARNING); --verbose lowers it to INFO.
    """
    log_level_name = get_str_env('HEATLOG_LOG_LEVEL', 'WARNING').upper()
    log_level = getattr(logging, log_level_name, logging.WARNING)
    if verbose:
        log_level = min(log_level, logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(log_level)


def resolve_color(mode: str, is_tty: bool) -> bool:
    """
    Decide whether output should carry ANSI styling.

    Args:
        mode: 'always', 'never' or 'auto'
        is_tty: Whether stdout is attached to a terminal

    Returns:
        True when styling should be emitted
    """
    if mode == 'always':
        return True
    if mode == 'never':
        return False
    if get_bool_env('HEATLOG_FORCE_COLOR', False):
        return True
    return is_tty
