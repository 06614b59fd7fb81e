"""Controlli preliminari sulla fattura prima di generare un movimento."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import List

from .types import InvoiceDirection, InvoiceSnapshot, InvoiceStatus, ValidationResult


def validate_invoice(invoice: InvoiceSnapshot) -> ValidationResult:
    """
    Esegue tutti i controlli (senza fermarsi al primo) e restituisce
    l'elenco completo delle violazioni.
    """
    errors: List[str] = []

    if invoice.company_id in (None, ""):
        errors.append("Ragione sociale (companyId) mancante")

    if invoice.total_amount is None:
        errors.append("Importo totale mancante")
    else:
        try:
            if Decimal(invoice.total_amount) <= 0:
                errors.append("L'importo totale deve essere maggiore di zero")
        except (InvalidOperation, TypeError):
            errors.append("Importo totale non valido")

    if invoice.issue_date is None:
        errors.append("Data di emissione mancante")

    if invoice.payment_terms_days is not None and invoice.payment_terms_days < 0:
        errors.append("I giorni di pagamento non possono essere negativi")

    if invoice.direction is InvoiceDirection.OUTGOING and invoice.customer_id in (None, ""):
        errors.append("Cliente obbligatorio per le fatture emesse")
    if invoice.direction is InvoiceDirection.INCOMING and invoice.supplier_id in (None, ""):
        errors.append("Fornitore obbligatorio per le fatture ricevute")

    if invoice.status is InvoiceStatus.CANCELLED:
        errors.append("Non è possibile generare movimenti da una fattura annullata")

    return ValidationResult(is_valid=not errors, errors=tuple(errors))
