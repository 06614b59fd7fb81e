"""Calcolo dell'importo con segno del movimento."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from .types import InvoiceClassification, InvoiceSnapshot


class AmountResolver(ABC):
    """
    Punto di estensione per il calcolo dell'importo.

    Contratto: abs(risultato) == importo di riferimento e risultato < 0 se e
    solo se la classificazione indica un documento a importo negativo.
    Un resolver a livello di riga fattura può sostituire quello sul totale
    ricevendo l'intera fattura tramite ``invoice``.
    """

    @abstractmethod
    def resolve(
        self,
        total_amount: Decimal,
        classification: InvoiceClassification,
        invoice: Optional[InvoiceSnapshot] = None,
    ) -> Decimal:
        raise NotImplementedError


class TotalAmountResolver(AmountResolver):
    """Usa il totale documento (ImportoTotaleDocumento)."""

    def resolve(
        self,
        total_amount: Decimal,
        classification: InvoiceClassification,
        invoice: Optional[InvoiceSnapshot] = None,
    ) -> Decimal:
        magnitude = abs(Decimal(total_amount))
        return -magnitude if classification.is_negative_amount else magnitude
