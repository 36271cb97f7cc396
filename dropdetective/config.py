"""
Drop Detective Configuration Module
===================================

Centralized configuration management using environment variables.
Supports both .env files and system environment variables.

Environment Variables:
    GOOGLE_API_KEY: Google Sheets API key (required to fetch sheets)
    SHEETS_RANGE: A1 range read from the sheet (default: Sheet1!A:C)
    SHEETS_NAME_COLUMN: Zero-based column holding the product name (default: 0)
    SHEETS_LINK_COLUMN: Zero-based column holding the creative folder link (default: 1)
    SHEETS_PRODUCT_LINK_COLUMN: Zero-based product link column, -1 disables (default: 2)
    SHEETS_REQUEST_TIMEOUT: Sheets API timeout in seconds (default: 30)

    ANALYSIS_SERVICE_URL: Video analysis endpoint (default: empty = in-process analysis)
    ANALYSIS_BATCH_SIZE: Concurrent analysis calls per batch (default: 5)
    ANALYSIS_REQUEST_TIMEOUT: Per-call timeout in seconds (default: 30.0)

    DATABASE_HOST: PostgreSQL host (default: localhost)
    DATABASE_PORT: PostgreSQL port (default: 5432)
    DATABASE_NAME: Database name (default: dropdetective)
    DATABASE_USER: Database user (default: dropdetective_app)
    DATABASE_PASSWORD: Database password (results are kept in memory when unset)
    DATABASE_POOL_MIN: Minimum pool connections (default: 1)
    DATABASE_POOL_MAX: Maximum pool connections (default: 5)

    LOG_LEVEL / LOG_FILE / LOG_JSON: Logging options
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv


# Load environment variables from the project root .env file if present
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Get environment variable with optional default and required validation.

    Args:
        key: Environment variable name
        default: Default value if not set
        required: If True, raises ValueError when not set

    Returns:
        Environment variable value or default

    Raises:
        ValueError: If required=True and variable is not set
    """
    value = os.getenv(key, default)
    if required and value is None:
        raise ValueError(f"Required environment variable '{key}' is not set")
    return value


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be an integer, got: {value}")


def get_env_float(key: str, default: float) -> float:
    """Get environment variable as float."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be a float, got: {value}")


def get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


@dataclass
class SheetsConfig:
    """Google Sheets fetch configuration."""

    api_key: str = field(default_factory=lambda: get_env("GOOGLE_API_KEY", ""))
    value_range: str = field(default_factory=lambda: get_env("SHEETS_RANGE", "Sheet1!A:C"))

    # Column mapping (zero-based). Column A = name, column B = creative link.
    name_column: int = field(default_factory=lambda: get_env_int("SHEETS_NAME_COLUMN", 0))
    link_column: int = field(default_factory=lambda: get_env_int("SHEETS_LINK_COLUMN", 1))
    product_link_column: int = field(default_factory=lambda: get_env_int("SHEETS_PRODUCT_LINK_COLUMN", 2))

    request_timeout: int = field(default_factory=lambda: get_env_int("SHEETS_REQUEST_TIMEOUT", 30))

    def __post_init__(self):
        """Validate configuration."""
        if self.name_column < 0 or self.link_column < 0:
            raise ValueError("name_column and link_column must be non-negative")
        if self.name_column == self.link_column:
            raise ValueError("name_column and link_column must differ")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")


@dataclass
class AnalysisConfig:
    """Video analysis configuration."""

    # Empty = analyze in-process with the local analysis service
    service_url: str = field(default_factory=lambda: get_env("ANALYSIS_SERVICE_URL", ""))

    # Concurrent calls in flight per batch
    batch_size: int = field(default_factory=lambda: get_env_int("ANALYSIS_BATCH_SIZE", 5))

    request_timeout: float = field(default_factory=lambda: get_env_float("ANALYSIS_REQUEST_TIMEOUT", 30.0))

    def __post_init__(self):
        """Validate configuration."""
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")


@dataclass
class DatabaseConfig:
    """PostgreSQL database configuration."""

    host: str = field(default_factory=lambda: get_env("DATABASE_HOST", "localhost"))
    port: int = field(default_factory=lambda: get_env_int("DATABASE_PORT", 5432))
    name: str = field(default_factory=lambda: get_env("DATABASE_NAME", "dropdetective"))
    user: str = field(default_factory=lambda: get_env("DATABASE_USER", "dropdetective_app"))
    password: str = field(default_factory=lambda: get_env("DATABASE_PASSWORD", ""))

    # Connection pool settings
    pool_min_size: int = field(default_factory=lambda: get_env_int("DATABASE_POOL_MIN", 1))
    pool_max_size: int = field(default_factory=lambda: get_env_int("DATABASE_POOL_MAX", 5))

    connect_timeout: int = field(default_factory=lambda: get_env_int("DATABASE_CONNECT_TIMEOUT", 10))

    # SSL mode: disable, allow, prefer, require, verify-ca, verify-full
    ssl_mode: str = field(default_factory=lambda: get_env("DATABASE_SSL_MODE", "prefer"))

    @property
    def enabled(self) -> bool:
        """Database persistence is used only when credentials are configured."""
        return bool(self.password)

    @property
    def connection_dict(self) -> dict:
        """Connection parameters as dictionary for psycopg2."""
        return {
            "host": self.host,
            "port": self.port,
            "dbname": self.name,
            "user": self.user,
            "password": self.password,
            "sslmode": self.ssl_mode,
            "connect_timeout": self.connect_timeout,
        }

    def __post_init__(self):
        """Validate configuration."""
        if self.pool_min_size > self.pool_max_size:
            raise ValueError("pool_min_size cannot exceed pool_max_size")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE"))

    # Structured logging
    json_logs: bool = field(default_factory=lambda: get_env_bool("LOG_JSON", False))


@dataclass
class Settings:
    """Main application settings container."""

    sheets: SheetsConfig = field(default_factory=SheetsConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    app_name: str = "dropdetective"
    app_version: str = "0.1.0"
    environment: str = field(default_factory=lambda: get_env("ENVIRONMENT", "development"))

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() in ("production", "prod")


def load_settings() -> Settings:
    """
    Load and validate all application settings.

    Raises:
        ValueError: If configuration is invalid
    """
    return Settings()


# Global settings instance (lazy-loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings():
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy class for lazy settings access."""

    def __getattr__(self, name):
        return getattr(get_settings(), name)


settings = _SettingsProxy()
