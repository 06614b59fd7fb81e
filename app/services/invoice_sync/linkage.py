"""
Riconoscimento del movimento già generato da una fattura.

Il collegamento fattura/movimento non è una foreign key: è dedotto dal
contenuto del movimento con regole ordinate, la prima che corrisponde vince.

1. invoice_number uguale a "{numero}/{anno}"
2. document_number che contiene il numero fattura
3. xml_data identico a xml_content della fattura (fallback legacy, il più
   costoso e il meno selettivo: per questo è valutato per ultimo)
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .types import InvoiceSnapshot, LinkageResult, MovementSnapshot

logger = logging.getLogger(__name__)

RULE_INVOICE_NUMBER = 1
RULE_DOCUMENT_NUMBER = 2
RULE_XML_CONTENT = 3

NOT_LINKED = LinkageResult(linked=False)


class LinkageResolver:
    def resolve(
        self, invoice: InvoiceSnapshot, candidates: Iterable[MovementSnapshot]
    ) -> LinkageResult:
        candidates = list(candidates)

        for rule, matcher in (
            (RULE_INVOICE_NUMBER, _match_invoice_number),
            (RULE_DOCUMENT_NUMBER, _match_document_number),
            (RULE_XML_CONTENT, _match_xml_content),
        ):
            for movement in candidates:
                if matcher(invoice, movement):
                    logger.debug(
                        "Movimento collegato trovato",
                        extra={"invoice_id": invoice.id, "movement_id": movement.id, "rule": rule},
                    )
                    return LinkageResult(linked=True, matched_rule=rule, movement_id=movement.id)

        return NOT_LINKED


def _match_invoice_number(invoice: InvoiceSnapshot, movement: MovementSnapshot) -> bool:
    return movement.invoice_number == invoice.link_number


def _match_document_number(invoice: InvoiceSnapshot, movement: MovementSnapshot) -> bool:
    number = _clean(invoice.number)
    if not number or not movement.document_number:
        return False
    return number in movement.document_number


def _match_xml_content(invoice: InvoiceSnapshot, movement: MovementSnapshot) -> bool:
    if not movement.xml_data or not invoice.xml_content:
        return False
    return movement.xml_data == invoice.xml_content


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()
