"""Classificazione del TipoDocumento FatturaPA."""

from __future__ import annotations

from typing import Optional

from .rules import DEFAULT_RULES, SyncRules
from .types import InvoiceClassification, normalize_type_code


class InvoiceTypeClassifier:
    """
    Lookup puro: codice tipo documento -> segno importo, esclusione, causale.

    I codici non a catalogo non generano errori: ricadono sul default (non
    negativo, non escluso, causale di default), così un nuovo TipoDocumento
    non blocca la generazione dei movimenti.
    """

    def __init__(self, rules: Optional[SyncRules] = None):
        self.rules = rules or DEFAULT_RULES

    def classify(self, type_code: Optional[str]) -> InvoiceClassification:
        code = normalize_type_code(type_code)
        return InvoiceClassification(
            is_negative_amount=code in self.rules.negative_type_codes,
            is_excluded=code in self.rules.excluded_type_codes,
            suggested_reason_code=self.rules.reason_codes.get(
                code, self.rules.default_reason_code
            ),
        )
