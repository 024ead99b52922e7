"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Storage
# - 'file' (default): one JSON file per record under DATA_PATH
# - 'memory': process-local, nothing survives a restart
# - 'redis': shared store at REDIS_URL, keys prefixed with REDIS_NAMESPACE
STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "file").lower()
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
REDIS_NAMESPACE: str = os.getenv("REDIS_NAMESPACE", "studytrack")

# Local calendar used for "today" (IANA name, e.g. "Europe/Berlin").
# Empty means the host's local time zone.
USER_TIMEZONE: str = os.getenv("USER_TIMEZONE", "")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Sentry
ENABLE_SENTRY: bool = os.getenv("ENABLE_SENTRY", "false").lower() == "true"
SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")
SENTRY_ENVIRONMENT: str = os.getenv("SENTRY_ENVIRONMENT", "development")
SENTRY_TRACES_SAMPLE_RATE: float = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0"))

# Prometheus
ENABLE_PROMETHEUS: bool = os.getenv("ENABLE_PROMETHEUS", "true").lower() == "true"

VALID_STORAGE_BACKENDS = ("file", "memory", "redis")


# Validation
def validate_config() -> None:
    """Validate configuration"""
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

    from studytrack.exceptions import ConfigurationError

    if STORAGE_BACKEND not in VALID_STORAGE_BACKENDS:
        raise ConfigurationError(
            f"STORAGE_BACKEND must be one of {', '.join(VALID_STORAGE_BACKENDS)}, got '{STORAGE_BACKEND}'",
            config_key="STORAGE_BACKEND",
        )
    if STORAGE_BACKEND == "redis" and not REDIS_URL:
        raise ConfigurationError("REDIS_URL is required for the redis backend", config_key="REDIS_URL")
    if USER_TIMEZONE:
        try:
            ZoneInfo(USER_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigurationError(
                f"Unknown timezone '{USER_TIMEZONE}'",
                config_key="USER_TIMEZONE",
            )
