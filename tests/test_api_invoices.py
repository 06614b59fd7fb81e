"""
Test delle API JSON fatture/movimenti tramite il test client Flask.
"""

from decimal import Decimal

from app.extensions import db
from app.models import Movement


def _create(client, invoice_id, **body):
    body.setdefault("coreId", "core-1")
    return client.post(f"/api/invoices/{invoice_id}/create-movement", json=body)


class TestCreateMovementEndpoint:
    def test_success_response(self, client, make_invoice):
        invoice = make_invoice()

        response = _create(client, invoice.id)

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["invoiceId"] == invoice.id
        assert isinstance(data["movementId"], int)
        assert data["mapping"]["amount"] == "1200.00"
        assert data["mapping"]["movementType"] == "income"
        assert data["mapping"]["isNegativeAmount"] is False
        assert data["mapping"]["autoGeneratedNotes"].startswith("Movimento generato da fattura TD01")
        assert data["payload"]["movement"]["reasonId"] == "FATT_ATT"

    def test_credit_note_amount_is_negative(self, client, make_invoice):
        invoice = make_invoice(invoice_type_code="TD04", number="NC-3", total_amount=Decimal("300.00"))
        data = _create(client, invoice.id).get_json()
        assert data["mapping"]["amount"] == "-300.00"
        assert data["mapping"]["isNegativeAmount"] is True

    def test_conflict_on_second_request(self, client, make_invoice):
        invoice = make_invoice()
        first = _create(client, invoice.id).get_json()

        response = _create(client, invoice.id)

        assert response.status_code == 409
        data = response.get_json()
        assert data["existingMovementId"] == first["movementId"]
        assert data["hint"] == "Use forceCreate: true to create anyway"
        assert data["message"]

    def test_force_create_after_conflict(self, client, make_invoice):
        invoice = make_invoice()
        _create(client, invoice.id)
        response = _create(client, invoice.id, forceCreate=True)
        assert response.status_code == 200
        assert db.session.query(Movement).count() == 2

    def test_excluded_type_is_unprocessable(self, client, make_invoice):
        invoice = make_invoice(invoice_type_code="TD21")
        response = _create(client, invoice.id)
        assert response.status_code == 422
        assert response.get_json()["error"] == "excluded_type"
        assert db.session.query(Movement).count() == 0

    def test_missing_core_id_is_bad_request(self, client, make_invoice):
        invoice = make_invoice()
        response = client.post(f"/api/invoices/{invoice.id}/create-movement", json={})
        assert response.status_code == 400
        assert response.get_json()["errors"] == ["coreId è obbligatorio"]

    def test_negative_payment_terms_is_bad_request(self, client, make_invoice):
        invoice = make_invoice()
        response = _create(client, invoice.id, paymentTermsDays=-5)
        assert response.status_code == 400

    def test_stored_negative_payment_terms_is_bad_request(self, client, make_invoice):
        invoice = make_invoice(payment_terms_days=-5)
        response = _create(client, invoice.id)
        assert response.status_code == 400
        assert response.get_json()["errors"] == ["I giorni di pagamento non possono essere negativi"]

    def test_validation_errors_are_listed(self, client, make_invoice):
        invoice = make_invoice(customer_id=None)
        response = _create(client, invoice.id)
        assert response.status_code == 400
        assert "Cliente obbligatorio per le fatture emesse" in response.get_json()["errors"]

    def test_unknown_invoice(self, client, app):
        response = _create(client, 12345)
        assert response.status_code == 404
        assert response.get_json()["success"] is False


class TestInvoiceStatusEndpoints:
    def test_status_change_syncs_movement(self, client, make_invoice):
        invoice = make_invoice()
        movement_id = _create(client, invoice.id).get_json()["movementId"]

        response = client.post(
            f"/api/invoices/{invoice.id}/status",
            json={"status": "paid", "paymentDate": "2025-02-01"},
        )

        assert response.status_code == 200
        sync = response.get_json()["payload"]["movement_sync"]
        assert sync["movement_id"] == movement_id
        assert sync["changed"] is True
        assert sync["patch"]["is_verified"] is True
        assert sync["patch"]["verification_status"] == "verified"
        assert sync["patch"]["last_verification_date"] == "2025-02-01"

    def test_invalid_payment_date(self, client, make_invoice):
        invoice = make_invoice()
        response = client.post(
            f"/api/invoices/{invoice.id}/status",
            json={"status": "paid", "paymentDate": "01/02/2025"},
        )
        assert response.status_code == 400

    def test_explicit_sync_without_movement(self, client, make_invoice):
        invoice = make_invoice()
        response = client.post(f"/api/invoices/{invoice.id}/sync-movement-status")
        assert response.status_code == 200
        assert response.get_json()["payload"] is None


class TestMovementEndpoint:
    def test_get_movement(self, client, make_invoice):
        invoice = make_invoice()
        movement_id = _create(client, invoice.id).get_json()["movementId"]

        response = client.get(f"/api/movements/{movement_id}")

        assert response.status_code == 200
        payload = response.get_json()["payload"]
        assert payload["amount"] == "1200.00"
        assert payload["status"] == "Da Saldare"
        assert payload["invoiceNumber"] == "FT-12/2025"

    def test_missing_movement(self, client, app):
        assert client.get("/api/movements/999").status_code == 404


def test_healthcheck(client):
    assert client.get("/health").get_json() == {"status": "ok"}
