"""
Utility functions and helpers for the vet scheduling package.
"""

from .config import (
    ConfigError,
    DatabaseURLValidator,
    EnvironmentConfig,
    LoggingConfigurator,
    LogLevel,
    SchedulingSettings,
    parse_clock_time,
)
from .datetime_utils import (
    day_bounds,
    ensure_utc,
    format_slot,
    get_current_utc,
    intervals_overlap,
    iter_slot_windows,
    to_utc,
)

__all__ = [
    # Configuration
    "ConfigError",
    "DatabaseURLValidator",
    "EnvironmentConfig",
    "LoggingConfigurator",
    "LogLevel",
    "SchedulingSettings",
    "parse_clock_time",
    # Datetime helpers
    "day_bounds",
    "ensure_utc",
    "format_slot",
    "get_current_utc",
    "intervals_overlap",
    "iter_slot_windows",
    "to_utc",
]
