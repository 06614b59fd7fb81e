"""
Test dell'import XML FatturaPA e dell'endpoint /api/invoices/import-xml.
"""

from decimal import Decimal

import pytest

from app.extensions import db
from app.models import Customer, Invoice, Supplier
from app.services import create_movement_from_invoice, import_invoice_xml
from app.services.invoice_sync import AlreadyLinkedError, MovementCreationOptions, ValidationError

from .fixtures import (
    FATTURA_TD01,
    FATTURA_TERMINI_NEGATIVI,
    LOTTO_DUE_FATTURE,
    NOTA_CREDITO_SENZA_TOTALE,
)


class TestImportInvoiceXml:
    def test_outgoing_invoice_creates_customer(self, company):
        summary = import_invoice_xml(FATTURA_TD01, company.id, "outgoing")

        [invoice_id] = summary["imported"]
        invoice = db.session.get(Invoice, invoice_id)
        assert invoice.direction == "outgoing"
        assert invoice.number == "FT-12"
        assert invoice.year == 2025
        assert invoice.total_amount == Decimal("1220.00")
        assert invoice.payment_terms_days == 30
        assert invoice.payment_method_code == "MP05"
        assert invoice.xml_content == FATTURA_TD01
        assert invoice.customer.vat_number == "55566677788"

    def test_incoming_invoice_creates_supplier(self, company):
        summary = import_invoice_xml(FATTURA_TD01, company.id, "incoming")
        invoice = db.session.get(Invoice, summary["imported"][0])
        supplier = db.session.query(Supplier).filter_by(vat_number="01234567890").one()
        assert invoice.supplier_id == supplier.id
        assert invoice.customer_id is None

    def test_explicit_counterparty_is_used(self, company, customer):
        summary = import_invoice_xml(FATTURA_TD01, company.id, "outgoing", customer_id=customer.id)
        invoice = db.session.get(Invoice, summary["imported"][0])
        assert invoice.customer_id == customer.id
        assert db.session.query(Customer).count() == 1

    def test_reimport_is_skipped(self, company):
        import_invoice_xml(FATTURA_TD01, company.id, "outgoing")
        summary = import_invoice_xml(FATTURA_TD01, company.id, "outgoing")
        assert summary["imported"] == []
        assert summary["skipped"][0]["reason"] == "già presente"

    def test_invalid_direction(self, company):
        with pytest.raises(ValidationError):
            import_invoice_xml(FATTURA_TD01, company.id, "sideways")

    def test_unknown_company(self, app):
        with pytest.raises(ValidationError):
            import_invoice_xml(FATTURA_TD01, 999, "outgoing")

    def test_malformed_xml(self, company):
        with pytest.raises(ValidationError):
            import_invoice_xml("<rotto", company.id, "outgoing")

    def test_imported_credit_note_generates_negative_movement(self, company):
        summary = import_invoice_xml(NOTA_CREDITO_SENZA_TOTALE, company.id, "incoming")
        invoice = db.session.get(Invoice, summary["imported"][0])

        # Senza controparte nell'XML il fornitore va indicato a mano
        supplier = Supplier(name="Fornitore senza P.IVA")
        db.session.add(supplier)
        db.session.flush()
        invoice.supplier_id = supplier.id
        db.session.commit()

        result = create_movement_from_invoice(invoice.id, MovementCreationOptions(core_id="c"))["result"]
        assert result.draft.amount_as_string == "-177.00"
        assert result.draft.reason_id == "NOTA_CR"

    def test_xml_match_links_legacy_movement(self, company):
        """Un movimento con lo stesso XML ma senza numero viene riconosciuto (regola 3)."""
        summary = import_invoice_xml(FATTURA_TD01, company.id, "outgoing")
        invoice_id = summary["imported"][0]
        first = create_movement_from_invoice(invoice_id, MovementCreationOptions(core_id="c"))["movement"]
        first.invoice_number = None
        first.document_number = None
        db.session.commit()

        with pytest.raises(AlreadyLinkedError) as excinfo:
            create_movement_from_invoice(invoice_id, MovementCreationOptions(core_id="c"))
        assert excinfo.value.matched_rule == 3

    def test_batch_invoices_are_linked_independently(self, company):
        """Le fatture dello stesso file non si bloccano a vicenda."""
        first_id, second_id = import_invoice_xml(LOTTO_DUE_FATTURE, company.id, "outgoing")["imported"]
        first = db.session.get(Invoice, first_id)
        second = db.session.get(Invoice, second_id)
        assert first.xml_content != second.xml_content

        create_movement_from_invoice(first_id, MovementCreationOptions(core_id="c"))
        movement = create_movement_from_invoice(second_id, MovementCreationOptions(core_id="c"))["movement"]

        assert movement.invoice_number == "B-200/2025"
        assert movement.amount == Decimal("200.00")

    def test_negative_payment_terms_are_ignored(self, company):
        summary = import_invoice_xml(FATTURA_TERMINI_NEGATIVI, company.id, "outgoing")
        invoice = db.session.get(Invoice, summary["imported"][0])
        assert invoice.payment_terms_days is None
        assert any("negativo" in w for w in summary["warnings"])

        movement = create_movement_from_invoice(invoice.id, MovementCreationOptions(core_id="c"))["movement"]
        assert movement.flow_date == invoice.issue_date


class TestImportEndpoint:
    def test_import_xml(self, client, company):
        response = client.post(
            "/api/invoices/import-xml",
            json={"companyId": company.id, "direction": "outgoing", "xmlContent": FATTURA_TD01},
        )
        assert response.status_code == 201
        assert len(response.get_json()["payload"]["imported"]) == 1

    def test_missing_fields(self, client, app):
        response = client.post("/api/invoices/import-xml", json={"direction": "outgoing"})
        assert response.status_code == 400
        assert response.get_json()["errors"] == ["companyId è obbligatorio", "xmlContent è obbligatorio"]
