"""
Package repositories.
Espone i Repository per l'accesso ai dati.
"""

from .company_repo import CompanyRepository
from .invoice_repo import InvoiceRepository
from .movement_repo import (
    MovementReasonRepository,
    MovementRepository,
    MovementStatusRepository,
    invoice_link_key,
)
from .supplier_repo import CustomerRepository, SupplierRepository

__all__ = [
    "CompanyRepository",
    "InvoiceRepository",
    "MovementRepository",
    "MovementStatusRepository",
    "MovementReasonRepository",
    "SupplierRepository",
    "CustomerRepository",
    "invoice_link_key",
]
