"""
Repository per le controparti delle fatture: Supplier e Customer.

Le due anagrafiche si cercano allo stesso modo (P.IVA, poi codice fiscale) e
vengono create al volo durante l'import XML se non ancora presenti.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar
import logging

from app.models import Customer, Supplier
from app.repositories.base import SqlAlchemyRepository

logger = logging.getLogger(__name__)

C = TypeVar("C", Supplier, Customer)


def _party_fields(data: Any) -> Dict[str, Optional[str]]:
    """Estrae nome, P.IVA e CF da un dict o da un PartyDTO."""
    if isinstance(data, dict):
        get = data.get
    else:
        def get(name):
            return getattr(data, name, None)
    return {
        "name": get("name"),
        "vat_number": get("vat_number"),
        "fiscal_code": get("fiscal_code"),
    }


class _CounterpartyRepository(SqlAlchemyRepository[C], ABC):
    def get_by_vat_number(self, vat_number: str) -> Optional[C]:
        return self.find_one_by(vat_number=vat_number)

    def get_by_fiscal_code(self, fiscal_code: str) -> Optional[C]:
        return self.find_one_by(fiscal_code=fiscal_code)

    @abstractmethod
    def _new_entity(self, fields: Dict[str, Optional[str]]) -> C:
        """Istanzia la nuova anagrafica (non ancora aggiunta alla sessione)."""

    def get_or_create_from_dto(self, data: Any) -> C:
        """
        Cerca la controparte per P.IVA o CF; se non esiste la crea.
        Esegue flush per avere subito l'id nella transazione corrente.
        """
        fields = _party_fields(data)
        entity = self.get_by_vat_number(fields["vat_number"]) or self.get_by_fiscal_code(
            fields["fiscal_code"]
        )
        if entity is not None:
            return entity

        if not fields["name"]:
            fields["name"] = f"P.IVA {fields['vat_number'] or fields['fiscal_code']}"
        entity = self._new_entity(fields)
        logger.info("%s non trovato, creazione: %s", self.model_cls.__name__, fields["name"])
        self.add(entity)
        self.session.flush()
        return entity


class SupplierRepository(_CounterpartyRepository[Supplier]):
    def __init__(self, session):
        super().__init__(session, Supplier)

    def _new_entity(self, fields: Dict[str, Optional[str]]) -> Supplier:
        return Supplier(is_active=True, **fields)


class CustomerRepository(_CounterpartyRepository[Customer]):
    def __init__(self, session):
        super().__init__(session, Customer)

    def _new_entity(self, fields: Dict[str, Optional[str]]) -> Customer:
        return Customer(
            type="business" if fields["vat_number"] else "private",
            is_active=True,
            **fields,
        )
