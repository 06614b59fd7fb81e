"""
Pacchetto per i modelli SQLAlchemy.

Qui vengono esportate le classi modello principali.
"""

from .company import Company, Iban
from .supplier import Supplier, Customer
from .invoice import Invoice
from .movement import Movement, MovementReason, MovementStatus

__all__ = [
    "Company",
    "Iban",
    "Supplier",
    "Customer",
    "Invoice",
    "Movement",
    "MovementReason",
    "MovementStatus",
]
