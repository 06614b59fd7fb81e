"""
Traduzione dello stato fattura nello stato movimento del tenant.

Ogni stato canonico della fattura ha una lista ordinata di etichette candidate
(es. paid -> "Saldato", "Paid", "Completed"); vince la prima presente nel
catalogo stati del tenant. Se nessuna etichetta è a catalogo si solleva
StatusMappingUnresolvedError: non esiste uno stato di ripiego silenzioso.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional

from .errors import StatusMappingUnresolvedError
from .rules import DEFAULT_RULES, SyncRules
from .types import InvoiceStatus, StatusTranslation

VERIFIED = "verified"


def _normalize_label(label: str) -> str:
    return " ".join(label.split()).casefold()


class StatusTranslator:
    def __init__(self, rules: Optional[SyncRules] = None):
        self.rules = rules or DEFAULT_RULES

    def translate(
        self,
        invoice_status: InvoiceStatus | str,
        payment_date: Optional[date],
        status_catalog: Mapping[str, Any],
    ) -> StatusTranslation:
        """
        :param status_catalog: etichetta stato movimento -> id (catalogo del tenant)
        """
        status = (
            invoice_status
            if isinstance(invoice_status, InvoiceStatus)
            else InvoiceStatus(str(invoice_status).strip().lower())
        )
        candidates = self.rules.candidates_for(status)

        # Confronto tollerante a maiuscole/spazi: le etichette arrivano dalla UI
        lookup = {_normalize_label(name): (name, status_id) for name, status_id in status_catalog.items()}

        for label in candidates:
            hit = lookup.get(_normalize_label(label))
            if hit is not None:
                name, status_id = hit
                return StatusTranslation(
                    status_id=status_id,
                    canonical_status=status,
                    matched_label=name,
                    verification_patch=verification_patch_for(status, payment_date),
                )

        raise StatusMappingUnresolvedError(status, candidates)


def verification_patch_for(status: InvoiceStatus, payment_date: Optional[date]) -> Dict[str, Any]:
    """Patch di verifica proposta: solo per fatture pagate con data pagamento."""
    if status is not InvoiceStatus.PAID or payment_date is None:
        return {}
    return {
        "is_verified": True,
        "verification_status": VERIFIED,
        "last_verification_date": payment_date,
    }
