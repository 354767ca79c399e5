"""Logging helpers and structured JSON formatter for the ECB rates client."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

PACKAGE_LOGGER = "ecb_rates"

RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "asctime",
    "taskName",
}


class JSONLogFormatter(logging.Formatter):
    """Format LogRecord instances into structured JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        extras = _extract_extras(record.__dict__)
        if extras:
            payload.update(extras)

        return json.dumps(_json_safe(payload), separators=(",", ":"))


def setup_logging(config: Any) -> logging.Logger:
    """Attach a plain or JSON handler to the package logger.

    ``config`` is a config class (see :mod:`ecb_rates.config`) or any object
    exposing ``LOG_LEVEL``, ``LOG_JSON_ENABLED`` and ``LOG_FORMAT``. Only the
    ``ecb_rates`` logger is touched so that host applications keep control of
    the root logger.
    """

    level = _resolve_level(getattr(config, "LOG_LEVEL", "INFO"))
    json_enabled = _to_bool(getattr(config, "LOG_JSON_ENABLED", False))
    format_string = getattr(
        config,
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    handler = logging.StreamHandler()
    handler.setLevel(level)
    if json_enabled:
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(format_string))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    _replace_handlers(package_logger, [handler])
    package_logger.setLevel(level)
    package_logger.propagate = False
    return package_logger


def fetch_log_extra(
    *,
    url: str,
    status: str,
    duration_ms: float | None,
    error: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "event": "ecb.fetch",
        "url": url,
        "status": status,
        "duration_ms": round(duration_ms, 3) if duration_ms is not None else None,
        "source": "ecb",
    }
    if error:
        payload["error"] = error
    return {key: value for key, value in payload.items() if value is not None}


def _extract_extras(record_dict: dict[str, Any]) -> dict[str, Any]:
    extras: dict[str, Any] = {}
    for key, value in record_dict.items():
        if key in RESERVED_ATTRS or key.startswith("_"):
            continue
        extras[key] = _json_safe(value)
    return extras


def _json_safe(value: Any) -> Any:
    if isinstance(value, str | int | float | bool) or value is None:
        return value
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set):
        return [_json_safe(item) for item in value]
    return str(value)


def _resolve_level(level_name: Any) -> int:
    if isinstance(level_name, int):
        return level_name
    if not level_name:
        return logging.INFO
    candidate = str(level_name).upper()
    return getattr(logging, candidate, logging.INFO)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _replace_handlers(logger: logging.Logger, handlers: Iterable[logging.Handler]) -> None:
    for existing in logger.handlers[:]:
        logger.removeHandler(existing)
    for handler in handlers:
        logger.addHandler(handler)
