"""
API JSON per i movimenti di cassa (sola lettura).
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from app.models import Movement
from app.services import get_movement
from app.services.invoice_sync import format_amount

api_movements_bp = Blueprint("api_movements", __name__)


def movement_to_dict(movement: Movement) -> dict:
    return {
        "id": movement.id,
        "type": movement.type,
        "amount": format_amount(movement.amount),
        "vatAmount": format_amount(movement.vat_amount),
        "netAmount": format_amount(movement.net_amount),
        "flowDate": movement.flow_date.isoformat() if movement.flow_date else None,
        "insertDate": movement.insert_date.isoformat() if movement.insert_date else None,
        "companyId": movement.company_id,
        "coreId": movement.core_id,
        "statusId": movement.status_id,
        "status": movement.status.name if movement.status else None,
        "reasonId": movement.reason_id,
        "ibanId": movement.iban_id,
        "customerId": movement.customer_id,
        "supplierId": movement.supplier_id,
        "invoiceNumber": movement.invoice_number,
        "documentNumber": movement.document_number,
        "notes": movement.notes,
        "isVerified": movement.is_verified,
        "verificationStatus": movement.verification_status,
        "lastVerificationDate": (
            movement.last_verification_date.isoformat() if movement.last_verification_date else None
        ),
    }


@api_movements_bp.route("/<int:movement_id>", methods=["GET"])
def api_get_movement(movement_id: int):
    movement = get_movement(movement_id)
    if movement is None:
        return jsonify(
            {
                "success": False,
                "message": "Movimento non trovato.",
                "payload": None,
            }
        ), 404

    return jsonify({"success": True, "message": "", "payload": movement_to_dict(movement)})
