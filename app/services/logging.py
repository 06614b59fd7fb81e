"""Helper per logging strutturato JSON nei servizi applicativi."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

EVENTS_LOGGER = "app.events"

# Chiavi che LogRecord non accetta in ``extra`` (KeyError in makeRecord)
_RESERVED_KEYS = frozenset(
    set(logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__) | {"message", "asctime"}
)


def log_structured_event(
    action: str,
    *,
    message: Optional[str] = None,
    level: str = "info",
    **fields: Any,
) -> None:
    """Registra un evento di business (es. ``movement_created``).

    Il formatter JSON del root logger (``app.extensions``) riporta ``action`` e i
    campi keyword nella sezione ``extra`` del record. I campi con nomi riservati
    da ``logging`` vengono rinominati con prefisso ``field_``.
    """
    logger = logging.getLogger(EVENTS_LOGGER)
    log_method = getattr(logger, level.lower(), logger.info)

    payload: Dict[str, Any] = {"action": action}
    for key, value in fields.items():
        payload[f"field_{key}" if key in _RESERVED_KEYS else key] = value

    log_method(message or f"Evento {action}", extra=payload)
