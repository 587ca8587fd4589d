"""Runtime settings for flipkit.

Values are read from the environment (``FLIPKIT_`` prefix) or a local
``.env`` file.
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    SERVICE_NAME: str = "flipkit"
    ENVIRONMENT: str = "production"

    # Zone used by office-hour strategies that do not name one
    DEFAULT_TIMEZONE: str = "UTC"
    # Create missing features (disabled) on first check
    AUTO_CREATE: bool = False

    model_config = {
        "env_prefix": "FLIPKIT_",
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


_settings_cache: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = Settings()
    return _settings_cache


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings_cache
    _settings_cache = None
