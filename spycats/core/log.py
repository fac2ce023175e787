from __future__ import annotations

import contextvars
import datetime as dt
import json
import logging
import os
from typing import Any

# Context variables
request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)


class ContextFilter(logging.Filter):
    """Injecte les contextvars dans chaque LogRecord."""
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = request_id_var.get()
        return True


class JsonFormatter(logging.Formatter):
    """Formateur JSON pour logs structurés avec stacktrace."""

    # Champs additionnels éventuels (middleware d'accès, services)
    EXTRA_KEYS = (
        "method",
        "path",
        "status_code",
        "duration_ms",
        "cat_id",
        "mission_id",
        "target_id",
        "breed",
        "error_code",
    )

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        ts = dt.datetime.now(dt.timezone.utc).isoformat()
        name = record.name or ""
        payload: dict[str, Any] = {
            "timestamp": ts,
            "level": record.levelname.lower(),
            "logger": name,
            "message": record.getMessage(),
            "service": "api" if name.startswith("api.") else "spycats",
            "request_id": getattr(record, "request_id", None),
        }
        for key in self.EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            try:
                payload["stacktrace"] = self.formatException(record.exc_info)
            except Exception:
                payload["stacktrace"] = "<unavailable>"
        return json.dumps(payload, ensure_ascii=False)


def configure_logging() -> None:
    level_name = (os.getenv("LOG_LEVEL") or "INFO").upper()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(ContextFilter())
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    root.handlers = [handler]


# Configure au chargement du module
configure_logging()
