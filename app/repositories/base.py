"""
Generic Repository Pattern.
Operazioni comuni a tutti i repository: inserimento, lettura per chiave
primaria e ricerca del primo record per uguaglianza di colonne.
"""
from typing import Any, Generic, Optional, Type, TypeVar

from app.extensions import db

# Tipo generico T: un modello SQLAlchemy
T = TypeVar("T", bound=db.Model)


class SqlAlchemyRepository(Generic[T]):
    def __init__(self, session, model_cls: Type[T]):
        self.session = session
        self.model_cls = model_cls

    def add(self, entity: T) -> T:
        """Aggiunge l'entità alla sessione (il commit è della UnitOfWork)."""
        self.session.add(entity)
        return entity

    def get_by_id(self, id: Any) -> Optional[T]:
        if id is None:
            return None
        return self.session.get(self.model_cls, id)

    def find_one_by(self, **filters: Any) -> Optional[T]:
        """
        Primo record (per id) con le colonne indicate uguali ai valori dati.
        Un valore vuoto non è una chiave di ricerca valida: restituisce None.
        """
        if not filters or any(value in (None, "") for value in filters.values()):
            return None
        return (
            self.session.query(self.model_cls)
            .filter_by(**filters)
            .order_by(self.model_cls.id.asc())
            .first()
        )
