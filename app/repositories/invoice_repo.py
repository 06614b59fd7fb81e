"""
Repository specifico per Invoice.
Eredita le funzioni base (add, get_by_id, find_one_by) da SqlAlchemyRepository.
"""
from typing import Optional

from app.models import Invoice
from app.repositories.base import SqlAlchemyRepository


class InvoiceRepository(SqlAlchemyRepository[Invoice]):
    def __init__(self, session):
        super().__init__(session, Invoice)

    def get_by_number(self, company_id: int, number: str, year: int) -> Optional[Invoice]:
        """Cerca una fattura per azienda, numero e anno."""
        if not number or year is None:
            return None
        return (
            self.session.query(Invoice)
            .filter_by(company_id=company_id, number=number, year=year)
            .first()
        )
