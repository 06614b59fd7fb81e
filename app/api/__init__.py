"""
Pacchetto per le API JSON.

Contiene:
- api_invoices_bp  -> generazione movimento, stato fattura, import XML
- api_movements_bp -> consultazione movimenti
"""

from .api_invoices import api_invoices_bp
from .api_movements import api_movements_bp

__all__ = [
    "api_invoices_bp",
    "api_movements_bp",
]
