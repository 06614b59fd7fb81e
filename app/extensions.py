"""
Modulo che contiene le estensioni Flask condivise (db e logging JSON).
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List

from flask import Flask
from flask_sqlalchemy import SQLAlchemy

# Istanza globale di SQLAlchemy, sarà inizializzata in create_app()
db = SQLAlchemy()

# Attributi standard del LogRecord da non ripetere nella sezione "extra"
_STANDARD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "taskName", "message", "asctime",
}


class JsonFormatter(logging.Formatter):
    """
    Formatter che produce una riga JSON per record.

    Campi principali:
    - timestamp: ISO 8601 in UTC
    - level, logger, module, message
    - exc_info: stacktrace, se presente
    - extra: campi passati con extra={...} (es. action, invoice_id, movement_id)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if extra_fields:
            log_record["extra"] = extra_fields

        # Decimal e date degli eventi di business vengono serializzati come stringa
        return json.dumps(log_record, ensure_ascii=False, default=str)


def init_extensions(app: Flask) -> None:
    """
    Inizializza tutte le estensioni collegate all'app Flask.

    Questa funzione viene chiamata da create_app().
    """
    db.init_app(app)
    _init_logging(app)


def _init_logging(app: Flask) -> None:
    """
    Configura il logging applicativo sul root logger:

    - handler su console (stream), sempre attivo
    - handler su file rotante, se LOG_TO_FILE è attivo
    - formatter JSON strutturato

    Gli eventi di business (movement_created, movement_status_synced,
    invoice_imported, ...) passano da app.services.logging.
    """
    log_level_name = app.config.get("LOG_LEVEL", "INFO")
    log_level = getattr(logging, str(log_level_name).upper(), logging.INFO)
    json_formatter = JsonFormatter()

    handlers: List[logging.Handler] = []
    log_path = None

    if app.config.get("LOG_TO_FILE", True):
        log_dir = app.config.get("LOG_DIR")
        log_file_name = app.config.get("LOG_FILE_NAME", "app.log")
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, log_file_name)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(json_formatter)
        handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(json_formatter)
    handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # create_app può essere chiamata più volte (es. nei test): handler una sola volta
    if not getattr(root_logger, "_json_logging_configured", False):
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        for handler in handlers:
            root_logger.addHandler(handler)
        root_logger._json_logging_configured = True  # type: ignore[attr-defined]

    app.logger.setLevel(log_level)

    app.logger.info(
        "Logging JSON inizializzato.",
        extra={
            "component": "logging",
            "log_path": log_path,
            "level": log_level_name,
        },
    )
