"""
Eccezioni specifiche della sincronizzazione fattura -> movimento.

Ogni tipo è distinguibile dal chiamante (API/UI), ad esempio per proporre la
creazione forzata solo in caso di AlreadyLinkedError.
"""

from __future__ import annotations

from typing import Any, Iterable, List


class SyncError(Exception):
    """Errore generico del motore di sincronizzazione."""

    code = "sync_error"


class ValidationError(SyncError):
    code = "validation_error"

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__("Fattura non valida per la generazione del movimento: " + "; ".join(self.errors))


class AlreadyLinkedError(SyncError):
    code = "already_linked"
    hint = "Use forceCreate: true to create anyway"

    def __init__(self, existing_movement_id: Any, matched_rule: int | None = None):
        self.existing_movement_id = existing_movement_id
        self.matched_rule = matched_rule
        super().__init__(
            f"Esiste già un movimento collegato a questa fattura (id={existing_movement_id})"
        )


class ExcludedTypeError(SyncError):
    code = "excluded_type"

    def __init__(self, type_code: str):
        self.type_code = type_code
        super().__init__(
            f"Il tipo documento {type_code} è escluso dalla generazione automatica dei movimenti"
        )


class StatusMappingUnresolvedError(SyncError):
    code = "status_mapping_unresolved"

    def __init__(self, invoice_status: Any, candidates: Iterable[str] = ()):
        self.invoice_status = getattr(invoice_status, "value", invoice_status)
        self.candidates = tuple(candidates)
        super().__init__(
            f"Nessuno stato movimento configurato per lo stato fattura '{self.invoice_status}' "
            f"(etichette cercate: {', '.join(self.candidates) or 'nessuna'})"
        )


class PersistenceError(SyncError):
    """Errore dello storage; l'eccezione originale resta in __cause__."""

    code = "persistence_error"


class InvoiceNotFoundError(SyncError):
    code = "invoice_not_found"

    def __init__(self, invoice_id: Any):
        self.invoice_id = invoice_id
        super().__init__(f"Fattura con id {invoice_id} non trovata")
