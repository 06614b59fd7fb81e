"""
Repository specifico per Movement e per i cataloghi stati/causali.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import or_

from app.models import Invoice, Movement, MovementReason, MovementStatus
from app.repositories.base import SqlAlchemyRepository


def invoice_link_key(invoice: Invoice) -> str:
    """Chiave univoca del primo movimento generato da una fattura."""
    return f"{invoice.company_id}:{invoice.link_number}"


class MovementRepository(SqlAlchemyRepository[Movement]):
    def __init__(self, session):
        super().__init__(session, Movement)

    def list_candidates_for_invoice(self, invoice: Invoice) -> List[Movement]:
        """
        Pre-filtro SQL dei movimenti che potrebbero essere collegati alla fattura.

        La decisione finale spetta al LinkageResolver: qui si restringe solo il
        campo (stessa azienda, numero fattura/documento compatibile o XML presente).
        """
        conditions = [Movement.invoice_number == invoice.link_number]
        if invoice.number:
            conditions.append(Movement.document_number.contains(invoice.number, autoescape=True))
        if invoice.xml_content:
            conditions.append(Movement.xml_data.isnot(None))

        query = self.session.query(Movement).filter(or_(*conditions))
        if invoice.company_id is not None:
            query = query.filter(Movement.company_id == invoice.company_id)
        return query.order_by(Movement.id.asc()).all()

    def get_by_link_key(self, link_key: str) -> Optional[Movement]:
        return self.find_one_by(invoice_link_key=link_key)


class MovementStatusRepository(SqlAlchemyRepository[MovementStatus]):
    def __init__(self, session):
        super().__init__(session, MovementStatus)

    def get_catalog(self) -> Dict[str, int]:
        """Catalogo stati attivi del tenant: nome -> id."""
        rows = (
            self.session.query(MovementStatus.name, MovementStatus.id)
            .filter(MovementStatus.is_active.is_(True))
            .order_by(MovementStatus.id.asc())
            .all()
        )
        return {name: status_id for name, status_id in rows}

    def get_by_name(self, name: str) -> Optional[MovementStatus]:
        return self.find_one_by(name=name)


class MovementReasonRepository(SqlAlchemyRepository[MovementReason]):
    def __init__(self, session):
        super().__init__(session, MovementReason)
