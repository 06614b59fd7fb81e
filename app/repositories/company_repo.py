"""
Repository specifico per Company e per i conti IBAN aziendali.
"""
from typing import Optional
import logging

from app.models import Company, Iban
from app.repositories.base import SqlAlchemyRepository

logger = logging.getLogger(__name__)


class CompanyRepository(SqlAlchemyRepository[Company]):
    def __init__(self, session):
        super().__init__(session, Company)

    def find_iban_for_payment_method(
        self, company_id: int, payment_method_code: Optional[str]
    ) -> Optional[Iban]:
        """
        Conto su cui è atteso il pagamento.

        Ordine di ricerca:
        1. conto associato alla modalità di pagamento della fattura
        2. conto predefinito dell'azienda
        """
        if company_id is None:
            return None

        base_query = self.session.query(Iban).filter(
            Iban.company_id == company_id,
            Iban.is_active.is_(True),
        )

        if payment_method_code:
            iban = (
                base_query.filter(Iban.payment_method_code == payment_method_code)
                .order_by(Iban.is_default.desc(), Iban.id.asc())
                .first()
            )
            if iban:
                return iban

        iban = base_query.filter(Iban.is_default.is_(True)).order_by(Iban.id.asc()).first()
        if iban is None:
            logger.debug(
                "Nessun IBAN per l'azienda",
                extra={"company_id": company_id, "payment_method_code": payment_method_code},
            )
        return iban
