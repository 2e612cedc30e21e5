"""
Module: bot/utils.py

Provides utility functions for logging, parsing intervals and reading
environment flags.
"""
import inspect, os, re
from datetime import datetime, timedelta, UTC
from colorama import init, Fore, Style

init(autoreset=True)

def log_message(message, level="info"):
    """
    Print a timestamped, colored log message with the caller's relative source path.

    Parameters:
    - message: The log message string.
    - level: One of "info", "debug", "warning", or "error" for coloring.
    """

    frame    = inspect.currentframe().f_back
    fullpath = frame.f_code.co_filename
    cwd      = os.getcwd()
    if fullpath.startswith(cwd + os.sep):
        filename = fullpath[len(cwd)+1:]
    else:
        filename = fullpath
    lineno   = frame.f_lineno

    timestamp = datetime.now(UTC).strftime('%Y-%m-%d %H:%M:%S')
    color_map = {
        "info": Fore.GREEN,
        "debug": Fore.BLUE,
        "warning": Fore.YELLOW,
        "error": Fore.RED
    }
    level_prefix = f"{level.upper():<7}"
    level_color = color_map.get(level.lower(), Fore.WHITE)

    prefix = f"[{timestamp}] {filename}({lineno}):"
    print(f"{prefix} {level_color}{level_prefix} {message}{Style.RESET_ALL}")


def parse_interval(interval_str):
    """
    Parse an interval string into a (value, unit) tuple.

    Supported formats: digits + unit, where unit is one of
    s, m, h, d, w, optionally with suffixes like "min", "hours", "days".

    Returns (int(value), str(unit)) if valid, otherwise (None, None).
    """
    if not interval_str:
        return None, None
    pattern = r'^(\d+)\s*([smhdw])(?:ec(?:ond)?|in(?:ute)?|our|ay|(?:ee)?k)?s?$'
    match = re.match(pattern, interval_str.strip(), re.IGNORECASE)
    if not match:
        return None, None
    return int(match.group(1)), match.group(2).lower()


def interval_to_timedelta(value, unit):
    """
    Convert an interval value and unit into a timedelta.

    Supported units:
      s - seconds
      m - minutes
      h - hours
      d - days
      w - weeks

    Returns a datetime.timedelta or None if the unit is invalid or the
    value is not positive.
    """
    if value is None or unit is None or value <= 0:
        return None

    delta_map = {
        's': timedelta(seconds=value),
        'm': timedelta(minutes=value),
        'h': timedelta(hours=value),
        'd': timedelta(days=value),
        'w': timedelta(weeks=value)
    }
    return delta_map.get(unit)


def env_interval(name, default):
    """
    Read an interval environment variable (e.g. "5min") as a timedelta.

    Falls back to `default` (itself an interval string) when the variable
    is unset or malformed, logging a warning for the malformed case.
    """
    raw = os.getenv(name, default)
    delta = interval_to_timedelta(*parse_interval(raw))
    if delta is None:
        log_message(f"Invalid interval for {name}: {raw!r}, using {default}", "warning")
        delta = interval_to_timedelta(*parse_interval(default))
    return delta


def env_flag(name, default=False):
    """Read a boolean environment variable ("1", "true", "yes", "on")."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def env_id(name):
    """Read a Discord snowflake from the environment, or None when unset/zero."""
    raw = os.getenv(name, "0").strip()
    return int(raw) if raw.isdigit() and int(raw) else None
