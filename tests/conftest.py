"""
Fixture condivise per i test.

- I test del motore puro (invoice_sync) usano solo ``make_snapshot`` e
  ``status_catalog``: niente Flask, niente DB.
- I test di servizi e API usano ``app`` (TestConfig, SQLite in memoria) con i
  cataloghi stati/causali già inseriti.
"""

from datetime import date
from decimal import Decimal

import pytest

from app import create_app
from app.extensions import db
from app.models import Company, Customer, Iban, Invoice, Supplier
from app.services import seed_default_catalogs
from app.services.invoice_sync import InvoiceSnapshot
from config import TestConfig

STATUS_CATALOG = {
    "Da Saldare": 1,
    "In Lavorazione": 2,
    "Saldato": 3,
    "Scaduto": 4,
    "Annullato": 5,
}


# ---------------------------------------------------------------------
# Motore puro
# ---------------------------------------------------------------------
def build_snapshot(**overrides) -> InvoiceSnapshot:
    values = dict(
        id=1,
        direction="outgoing",
        invoice_type_code="TD01",
        status="draft",
        number="FT-12",
        year=2025,
        company_id=1,
        total_amount=Decimal("1200.00"),
        total_tax_amount=Decimal("216.39"),
        total_taxable_amount=Decimal("983.61"),
        issue_date=date(2025, 1, 15),
        payment_terms_days=None,
        payment_date=None,
        customer_id=10,
        supplier_id=None,
    )
    values.update(overrides)
    return InvoiceSnapshot(**values)


@pytest.fixture
def make_snapshot():
    return build_snapshot


@pytest.fixture
def status_catalog():
    return dict(STATUS_CATALOG)


# ---------------------------------------------------------------------
# Applicazione Flask + DB
# ---------------------------------------------------------------------
@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        seed_default_catalogs()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def company(app):
    company = Company(name="Acme S.r.l.", vat_number="01234567890")
    db.session.add(company)
    db.session.commit()
    return company


@pytest.fixture
def customer(app):
    customer = Customer(name="Cliente Uno S.p.A.", vat_number="09876543210")
    db.session.add(customer)
    db.session.commit()
    return customer


@pytest.fixture
def supplier(app):
    supplier = Supplier(name="Fornitore Due S.r.l.", vat_number="11122233344")
    db.session.add(supplier)
    db.session.commit()
    return supplier


@pytest.fixture
def bank_account(company):
    iban = Iban(
        company_id=company.id,
        iban="IT60X0542811101000000123456",
        bank_name="Banca Test",
        payment_method_code="MP05",
        is_default=True,
    )
    db.session.add(iban)
    db.session.commit()
    return iban


@pytest.fixture
def make_invoice(company, customer, supplier):
    """Crea e salva una Invoice; emessa verso ``customer`` se non diversamente indicato."""

    def _make(**overrides) -> Invoice:
        values = dict(
            company_id=company.id,
            direction="outgoing",
            invoice_type_code="TD01",
            number="FT-12",
            year=2025,
            issue_date=date(2025, 1, 15),
            total_amount=Decimal("1200.00"),
            total_tax_amount=Decimal("216.39"),
            total_taxable_amount=Decimal("983.61"),
            status="draft",
        )
        values.update(overrides)
        if values["direction"] == "outgoing":
            values.setdefault("customer_id", customer.id)
        else:
            values.setdefault("supplier_id", supplier.id)
        invoice = Invoice(**values)
        db.session.add(invoice)
        db.session.commit()
        return invoice

    return _make
