"""
Unit of Work Pattern.
Gestisce la transazione del database atomica e l'accesso ai repository.
"""
from typing import Optional
from app.extensions import db

# Import Repositories
from app.repositories.company_repo import CompanyRepository
from app.repositories.invoice_repo import InvoiceRepository
from app.repositories.movement_repo import (
    MovementReasonRepository,
    MovementRepository,
    MovementStatusRepository,
)
from app.repositories.supplier_repo import CustomerRepository, SupplierRepository

class UnitOfWork:
    def __init__(self):
        self.session = db.session
        self._companies: Optional[CompanyRepository] = None
        self._invoices: Optional[InvoiceRepository] = None
        self._movements: Optional[MovementRepository] = None
        self._movement_statuses: Optional[MovementStatusRepository] = None
        self._movement_reasons: Optional[MovementReasonRepository] = None
        self._suppliers: Optional[SupplierRepository] = None
        self._customers: Optional[CustomerRepository] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.rollback()
            return False
        # Flask gestisce la chiusura della sessione, non chiudere qui

    @property
    def companies(self) -> CompanyRepository:
        if self._companies is None:
            self._companies = CompanyRepository(self.session)
        return self._companies

    @property
    def invoices(self) -> InvoiceRepository:
        if self._invoices is None:
            self._invoices = InvoiceRepository(self.session)
        return self._invoices

    @property
    def movements(self) -> MovementRepository:
        if self._movements is None:
            self._movements = MovementRepository(self.session)
        return self._movements

    @property
    def movement_statuses(self) -> MovementStatusRepository:
        if self._movement_statuses is None:
            self._movement_statuses = MovementStatusRepository(self.session)
        return self._movement_statuses

    @property
    def movement_reasons(self) -> MovementReasonRepository:
        if self._movement_reasons is None:
            self._movement_reasons = MovementReasonRepository(self.session)
        return self._movement_reasons

    @property
    def suppliers(self) -> SupplierRepository:
        if self._suppliers is None:
            self._suppliers = SupplierRepository(self.session)
        return self._suppliers

    @property
    def customers(self) -> CustomerRepository:
        if self._customers is None:
            self._customers = CustomerRepository(self.session)
        return self._customers

    def commit(self):
        try:
            self.session.commit()
        except Exception:
            self.rollback()
            raise

    def rollback(self):
        self.session.rollback()
