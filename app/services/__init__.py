"""
Pacchetto per i servizi (logica di business) dell'applicazione.

I servizi orchestrano:
- repository (accesso al DB) tramite UnitOfWork
- il motore puro di sincronizzazione fattura -> movimento (invoice_sync)
- parser (XML FatturaPA)
- logging strutturato
"""

from .movement_sync_service import (
    create_movement_from_invoice,
    sync_movement_status,
    update_invoice_status,
    get_movement,
)
from .import_service import import_invoice_xml
from .catalog_service import seed_default_catalogs
from .settings_service import get_setting, set_setting, get_sync_rules

__all__ = [
    # Movimenti da fattura
    "create_movement_from_invoice",
    "sync_movement_status",
    "update_invoice_status",
    "get_movement",
    # Import
    "import_invoice_xml",
    # Cataloghi
    "seed_default_catalogs",
    # Settings
    "get_setting",
    "set_setting",
    "get_sync_rules",
]
