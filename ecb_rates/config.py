"""Client configuration classes."""

from __future__ import annotations

import os
import re

DEFAULT_BASE_URL = "https://data-api.ecb.europa.eu/service"
DEFAULT_BASE_CURRENCY = "EUR"
DEFAULT_LOOKBACK_DAYS = 10
DEFAULT_TIMEOUT_SECONDS = 30.0

_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


def normalize_currency(code: str) -> str:
    """Return an upper-cased, whitespace-trimmed currency code."""

    return str(code).strip().upper()


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "ecb-rates"
    ECB_API_BASE_URL = _get_env("ECB_API_BASE_URL", DEFAULT_BASE_URL)
    ECB_DEFAULT_BASE_CURRENCY = normalize_currency(
        _get_env("ECB_DEFAULT_BASE_CURRENCY", DEFAULT_BASE_CURRENCY)
    )
    ECB_LOOKBACK_DAYS = int(_get_env("ECB_LOOKBACK_DAYS", str(DEFAULT_LOOKBACK_DAYS)))
    REQUEST_TIMEOUT_SECONDS = float(
        _get_env("REQUEST_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
    )
    LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")
    LOG_JSON_ENABLED = _get_env("LOG_JSON_ENABLED", "false").lower() == "true"
    LOG_FORMAT = _get_env("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")


class DevelopmentConfig(BaseConfig):
    """Configuration for local development."""

    LOG_LEVEL = _get_env("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    """Configuration for production deployments."""


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
}


def get_config(config_name: str | None = None) -> type[BaseConfig]:
    """Return the config class for the requested environment.

    Args:
        config_name: Optional explicit config identifier. If omitted, the
            APP_ENV environment variable is consulted.

    Raises:
        KeyError: If the requested configuration is not defined.
        ValueError: If the configured values are unusable.
    """

    env_candidate = config_name if config_name is not None else os.getenv("APP_ENV", "production")
    env_name = (env_candidate or "production").lower()
    try:
        config_cls = CONFIG_BY_ENV[env_name]
    except KeyError as exc:
        raise KeyError(f"Unknown APP_ENV '{env_name}'") from exc

    _validate(config_cls)
    return config_cls


def _validate(config_cls: type[BaseConfig]) -> None:
    if not _CURRENCY_PATTERN.match(normalize_currency(config_cls.ECB_DEFAULT_BASE_CURRENCY)):
        raise ValueError(
            f"Unsupported ECB_DEFAULT_BASE_CURRENCY '{config_cls.ECB_DEFAULT_BASE_CURRENCY}'. "
            "Expected a 3-letter ISO 4217 code."
        )
    if config_cls.REQUEST_TIMEOUT_SECONDS <= 0:
        raise ValueError("REQUEST_TIMEOUT_SECONDS must be positive")
    if config_cls.ECB_LOOKBACK_DAYS < 0:
        raise ValueError("ECB_LOOKBACK_DAYS must not be negative")
