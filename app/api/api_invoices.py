"""
API JSON per le fatture: generazione del movimento, cambio stato con
sincronizzazione inversa e import XML FatturaPA.

Gli errori del motore (ValidationError, AlreadyLinkedError, ...) non vengono
gestiti qui: li traduce in risposta HTTP l'error handler registrato in
app.create_app().
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from flask import Blueprint, request, jsonify

from app.services import (
    create_movement_from_invoice,
    import_invoice_xml,
    sync_movement_status,
    update_invoice_status,
)
from app.services.invoice_sync import MovementCreationOptions, ValidationError

api_invoices_bp = Blueprint("api_invoices", __name__)


def _parse_date(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError([f"Data non valida (atteso YYYY-MM-DD): {value!r}"])


def _parse_optional_int(data: Dict[str, Any], key: str, *, minimum: Optional[int] = None) -> Optional[int]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError([f"{key} deve essere un intero"])
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError([f"{key} deve essere un intero"])
    if minimum is not None and number < minimum:
        raise ValidationError([f"{key} deve essere >= {minimum}"])
    return number


def _parse_bool(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "1", "yes"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"false", "0", "no", ""}:
        return False
    if value is None:
        return False
    raise ValidationError([f"{key} deve essere un booleano"])


def _options_from_body(data: Dict[str, Any]) -> MovementCreationOptions:
    core_id = data.get("coreId")
    if core_id in (None, ""):
        raise ValidationError(["coreId è obbligatorio"])

    return MovementCreationOptions(
        core_id=core_id,
        force_create=_parse_bool(data, "forceCreate"),
        status_id=_parse_optional_int(data, "statusId"),
        reason_id=data.get("reasonId") or None,
        payment_terms_days=_parse_optional_int(data, "paymentTermsDays", minimum=0),
        additional_notes=data.get("additionalNotes") or None,
    )


@api_invoices_bp.route("/<int:invoice_id>/create-movement", methods=["POST"])
def api_create_movement(invoice_id: int):
    """
    Genera il movimento di cassa della fattura.

    Body: {coreId, forceCreate?, statusId?, reasonId?, paymentTermsDays?, additionalNotes?}
    """
    data = request.get_json(silent=True) or {}
    options = _options_from_body(data)

    outcome = create_movement_from_invoice(invoice_id, options)
    movement = outcome["movement"]
    result = outcome["result"]

    mapping = {
        "amount": result.mapping["amount"],
        "movementType": result.mapping["movement_type"],
        "isNegativeAmount": result.mapping["is_negative_amount"],
        "autoGeneratedNotes": result.mapping["auto_generated_notes"],
    }

    return jsonify(
        {
            "success": True,
            "message": "Movimento generato con successo.",
            "movementId": movement.id,
            "invoiceId": invoice_id,
            "mapping": mapping,
            "payload": {
                "movement": result.draft.to_dict(),
                "reason_code": result.mapping["reason_code"],
                "flow_date": result.mapping["flow_date"],
                "forced": result.mapping["forced"],
            },
        }
    )


@api_invoices_bp.route("/<int:invoice_id>/status", methods=["POST"])
def api_update_invoice_status(invoice_id: int):
    """
    Aggiorna lo stato della fattura e sincronizza il movimento collegato.
    Le due modifiche sono salvate insieme: con un 422 non cambia nulla.

    Body: {status, paymentDate?}
    """
    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if not status:
        raise ValidationError(["status è obbligatorio"])
    payment_date = _parse_date(data.get("paymentDate"))

    outcome = update_invoice_status(invoice_id, status, payment_date)

    return jsonify(
        {
            "success": True,
            "message": "Stato fattura aggiornato con successo.",
            "payload": {
                "invoice_id": outcome["invoice_id"],
                "previous_status": outcome["previous_status"],
                "status": outcome["status"],
                "movement_sync": _sync_payload(outcome["movement_sync"]),
            },
        }
    )


@api_invoices_bp.route("/<int:invoice_id>/sync-movement-status", methods=["POST"])
def api_sync_movement_status(invoice_id: int):
    """Riallinea lo stato del movimento collegato allo stato attuale della fattura."""
    sync = sync_movement_status(invoice_id)
    message = (
        "Stato movimento sincronizzato."
        if sync is not None
        else "Nessun movimento collegato alla fattura."
    )
    return jsonify({"success": True, "message": message, "payload": _sync_payload(sync)})


@api_invoices_bp.route("/import-xml", methods=["POST"])
def api_import_xml():
    """
    Importa una fattura elettronica XML.

    Body: {companyId, direction, xmlContent, customerId?, supplierId?}
    """
    data = request.get_json(silent=True) or {}
    errors = [
        f"{key} è obbligatorio"
        for key in ("companyId", "direction", "xmlContent")
        if data.get(key) in (None, "")
    ]
    if errors:
        raise ValidationError(errors)

    company_id = _parse_optional_int(data, "companyId")
    summary = import_invoice_xml(
        data["xmlContent"],
        company_id,
        data["direction"],
        customer_id=_parse_optional_int(data, "customerId"),
        supplier_id=_parse_optional_int(data, "supplierId"),
    )

    imported = len(summary["imported"])
    return jsonify(
        {
            "success": imported > 0,
            "message": f"Fatture importate: {imported}, saltate: {len(summary['skipped'])}.",
            "payload": summary,
        }
    ), (201 if imported else 200)


def _sync_payload(sync: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if sync is None:
        return None
    patch = dict(sync["patch"])
    if patch.get("last_verification_date") is not None:
        patch["last_verification_date"] = patch["last_verification_date"].isoformat()
    return {
        "movement_id": sync["movement_id"],
        "patch": patch,
        "changed": sync["changed"],
    }
