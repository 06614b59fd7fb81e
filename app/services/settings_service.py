"""
Servizi per la gestione delle impostazioni applicative.

Le impostazioni vivono nella configurazione Flask (``config.py`` + variabili
d'ambiente). Da qui si costruiscono le regole del motore di sincronizzazione
per il tenant corrente.
"""

import json
from typing import Any, Mapping, Optional

from flask import current_app

from app.services.invoice_sync import SyncRules, build_rules


def get_setting(key: str, default: Any = "") -> Any:
    return current_app.config.get(key, default)


def set_setting(key: str, value: Any) -> None:
    current_app.config[key] = value
    # Le regole dipendono dalla configurazione: vanno ricalcolate
    current_app.extensions.pop("invoice_sync_rules", None)


def _parse_status_candidates(raw: Any) -> Optional[Mapping[str, Any]]:
    """Accetta un dict oppure una stringa JSON (da variabile d'ambiente)."""
    if not raw:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            current_app.logger.warning(
                "MOVEMENT_STATUS_CANDIDATES non è JSON valido: uso le etichette predefinite",
                extra={"component": "settings"},
            )
            return None
    if not isinstance(raw, Mapping):
        return None
    return {status: list(labels) for status, labels in raw.items()}


def get_sync_rules() -> SyncRules:
    """Regole del motore per l'app corrente (calcolate una volta e riusate)."""
    rules = current_app.extensions.get("invoice_sync_rules")
    if rules is None:
        overrides = _parse_status_candidates(get_setting("MOVEMENT_STATUS_CANDIDATES", None))
        rules = build_rules(overrides)
        current_app.extensions["invoice_sync_rules"] = rules
    return rules
