"""
Servizi per i cataloghi del tenant: stati movimento e causali.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Tuple

from app.models import MovementReason, MovementStatus
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_STATUSES: Tuple[Tuple[str, str], ...] = (
    ("Da Saldare", "Movimento atteso, non ancora incassato/pagato"),
    ("In Lavorazione", "Documento inviato, in attesa di pagamento"),
    ("Saldato", "Movimento incassato/pagato"),
    ("Scaduto", "Scadenza superata senza pagamento"),
    ("Annullato", "Movimento annullato"),
)

DEFAULT_REASONS: Tuple[Tuple[str, str, str], ...] = (
    ("FATT_ATT", "Fattura", "both"),
    ("FATT_ACC", "Acconto su fattura", "both"),
    ("FATT_SEMPL", "Fattura semplificata", "both"),
    ("NOTA_CR", "Nota di credito", "both"),
    ("NOTA_DB", "Nota di debito", "both"),
)


def seed_default_catalogs(
    statuses: Optional[Iterable[Tuple[str, str]]] = None,
    reasons: Optional[Iterable[Tuple[str, str, str]]] = None,
) -> Dict[str, int]:
    """Crea gli stati e le causali predefiniti mancanti. Idempotente."""
    created = {"statuses": 0, "reasons": 0}

    with UnitOfWork() as uow:
        for name, description in statuses or DEFAULT_STATUSES:
            if uow.movement_statuses.get_by_name(name) is None:
                uow.movement_statuses.add(MovementStatus(name=name, description=description))
                created["statuses"] += 1

        for code, name, reason_type in reasons or DEFAULT_REASONS:
            if uow.movement_reasons.get_by_id(code) is None:
                uow.movement_reasons.add(MovementReason(id=code, name=name, type=reason_type))
                created["reasons"] += 1

        uow.commit()

    logger.info("Cataloghi movimenti inizializzati: %s", created)
    return created
