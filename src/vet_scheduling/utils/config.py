"""
Configuration management utilities.

This module provides environment variable handling with type conversion,
database URL validation, logging configuration utilities, and the settings
object the scheduling service is built from.
"""

import logging
import logging.config
import os
from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import parse_qs, urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class LogLevel(Enum):
    """Enumeration for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentConfig:
    """Utility class for handling environment variables with type conversion."""

    @staticmethod
    def get_str(
        key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Get a string environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            String value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set")

        return value

    @staticmethod
    def get_int(
        key: str, default: Optional[int] = None, required: bool = False
    ) -> Optional[int]:
        """
        Get an integer environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            Integer value or default

        Raises:
            ConfigError: If required variable is missing or invalid
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"Environment variable '{key}' must be an integer, got: {value}"
            )

    @staticmethod
    def get_bool(
        key: str, default: Optional[bool] = None, required: bool = False
    ) -> Optional[bool]:
        """
        Get a boolean environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            Boolean value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        return value.lower() in ("true", "1", "yes", "on", "enabled")

    @staticmethod
    def get_list(
        key: str,
        separator: str = ",",
        default: Optional[List[str]] = None,
        required: bool = False,
    ) -> Optional[List[str]]:
        """
        Get a list environment variable.

        Args:
            key: Environment variable key
            separator: Separator character for list items
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            List of strings or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default or []

        return [item.strip() for item in value.split(separator) if item.strip()]

    @staticmethod
    def get_time(key: str, default: Optional[time] = None) -> Optional[time]:
        """
        Get a wall-clock time environment variable formatted as HH:MM.

        Raises:
            ConfigError: If the value is not a valid HH:MM time
        """
        value = os.getenv(key)

        if value is None:
            return default

        return parse_clock_time(value, key)


def parse_clock_time(value: str, key: str = "time") -> time:
    """Parse an ``HH:MM`` string, raising ConfigError on malformed input."""
    try:
        hours, minutes = value.strip().split(":")
        return time(int(hours), int(minutes))
    except ValueError:
        raise ConfigError(f"'{key}' must be a time formatted as HH:MM, got: {value}")


class DatabaseURLValidator:
    """Utility class for validating database URLs."""

    SUPPORTED_DRIVERS = {
        "postgresql": ["postgresql", "postgresql+asyncpg"],
        "sqlite": ["sqlite", "sqlite+aiosqlite"],
    }

    @classmethod
    def validate_url(cls, url: str) -> Dict[str, Any]:
        """
        Validate a database URL and return parsed components.

        Args:
            url: Database URL to validate

        Returns:
            Dictionary with validation results and parsed components

        Raises:
            ConfigError: If URL is invalid
        """
        if not url:
            raise ConfigError("Database URL cannot be empty")

        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ConfigError(f"Invalid URL format: {e}")

        if not parsed.scheme:
            raise ConfigError(
                "Database URL must include a scheme (e.g., postgresql+asyncpg://)"
            )

        supported_list = [
            driver for drivers in cls.SUPPORTED_DRIVERS.values() for driver in drivers
        ]
        if parsed.scheme not in supported_list:
            raise ConfigError(
                f"Unsupported database driver '{parsed.scheme}'. Supported: {', '.join(supported_list)}"
            )

        is_sqlite = parsed.scheme.startswith("sqlite")

        if not is_sqlite and not parsed.hostname:
            raise ConfigError("Database URL must include a hostname")

        if not is_sqlite and not parsed.path.lstrip("/"):
            raise ConfigError("Database URL must include a database name")

        return {
            "valid": True,
            "scheme": parsed.scheme,
            "is_sqlite": is_sqlite,
            "hostname": parsed.hostname,
            "port": parsed.port,
            "database": parsed.path.lstrip("/") if parsed.path else "",
            "username": parsed.username,
            "password": parsed.password,
            "query": dict(parse_qs(parsed.query)),
        }

    @staticmethod
    def to_async_url(url: str) -> str:
        """Convert a plain driver URL to its async driver equivalent."""
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if url.startswith("sqlite://"):
            return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return url


class LoggingConfigurator:
    """Utility class for configuring logging."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def configure_structured_logging(
        level: Union[str, LogLevel] = LogLevel.INFO,
        config_dict: Optional[Dict[str, Any]] = None,
        config_file: Optional[str] = None,
    ) -> None:
        """
        Configure structured logging using a dictionary or file.

        Args:
            level: Level for the package logger when the default layout is used
            config_dict: Logging configuration dictionary
            config_file: Path to logging configuration file
        """
        if isinstance(level, LogLevel):
            level = level.value

        if config_file and Path(config_file).exists():
            logging.config.fileConfig(config_file)
        elif config_dict:
            logging.config.dictConfig(config_dict)
        else:
            default_config = {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "standard": {"format": LoggingConfigurator.DEFAULT_FORMAT},
                    "detailed": {
                        "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(message)s"
                    },
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "standard",
                        "stream": "ext://sys.stdout",
                    }
                },
                "loggers": {
                    "vet_scheduling": {
                        "level": level,
                        "handlers": ["console"],
                        "propagate": False,
                    }
                },
                "root": {"level": "WARNING", "handlers": ["console"]},
            }
            logging.config.dictConfig(default_config)


def _default_database_url() -> str:
    """Build a database URL from the individual DB_* variables."""
    host = EnvironmentConfig.get_str("DB_HOST", "localhost")
    port = EnvironmentConfig.get_int("DB_PORT", 5432)
    database = EnvironmentConfig.get_str("DB_NAME", "vet_scheduling")
    username = EnvironmentConfig.get_str("DB_USER", "postgres")
    password = EnvironmentConfig.get_str("DB_PASSWORD", "")

    if password:
        return f"postgresql+asyncpg://{username}:{password}@{host}:{port}/{database}"
    return f"postgresql+asyncpg://{username}@{host}:{port}/{database}"


@dataclass
class SchedulingSettings:
    """Runtime settings for the scheduling service."""

    database_url: str
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_echo: bool = False
    workday_start: time = time(9, 0)
    workday_end: time = time(18, 0)
    slot_minutes: int = 30
    request_duration_minutes: int = 30
    timezone: str = "UTC"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    create_tables_on_startup: bool = False

    def __post_init__(self) -> None:
        DatabaseURLValidator.validate_url(self.database_url)

        if self.workday_start >= self.workday_end:
            raise ConfigError("WORKDAY_START must be earlier than WORKDAY_END")
        if self.slot_minutes <= 0:
            raise ConfigError("SLOT_MINUTES must be a positive integer")
        if self.request_duration_minutes <= 0:
            raise ConfigError("REQUEST_DURATION_MINUTES must be a positive integer")

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigError(f"Unknown SCHEDULING_TIMEZONE: {self.timezone}")

        if self.log_level.upper() not in LogLevel.__members__:
            raise ConfigError(f"Invalid LOG_LEVEL: {self.log_level}")

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @classmethod
    def from_environment(cls, env_file: Optional[str] = None) -> "SchedulingSettings":
        """
        Build settings from environment variables.

        A ``.env`` file is loaded first when present; variables already set in
        the process environment take precedence over it.

        Raises:
            ConfigError: If a variable is missing or malformed
        """
        load_dotenv(env_file)

        database_url = EnvironmentConfig.get_str("DATABASE_URL") or _default_database_url()

        return cls(
            database_url=DatabaseURLValidator.to_async_url(database_url),
            jwt_secret_key=EnvironmentConfig.get_str("JWT_SECRET_KEY", required=True),
            jwt_algorithm=EnvironmentConfig.get_str("JWT_ALGORITHM", "HS256"),
            db_pool_size=EnvironmentConfig.get_int("DB_POOL_SIZE", 10),
            db_max_overflow=EnvironmentConfig.get_int("DB_MAX_OVERFLOW", 20),
            db_echo=EnvironmentConfig.get_bool("DB_ECHO", False),
            workday_start=EnvironmentConfig.get_time("WORKDAY_START", time(9, 0)),
            workday_end=EnvironmentConfig.get_time("WORKDAY_END", time(18, 0)),
            slot_minutes=EnvironmentConfig.get_int("SLOT_MINUTES", 30),
            request_duration_minutes=EnvironmentConfig.get_int(
                "REQUEST_DURATION_MINUTES", 30
            ),
            timezone=EnvironmentConfig.get_str("SCHEDULING_TIMEZONE", "UTC"),
            log_level=EnvironmentConfig.get_str("LOG_LEVEL", "INFO").upper(),
            cors_origins=EnvironmentConfig.get_list("CORS_ORIGINS", default=["*"]),
            create_tables_on_startup=EnvironmentConfig.get_bool(
                "CREATE_TABLES_ON_STARTUP", False
            ),
        )
