"""
Servizio di import delle fatture elettroniche XML (FatturaPA).

Crea le Invoice a partire dal contenuto XML, conservando il sorgente in
``Invoice.xml_content`` (usato anche per riconoscere i movimenti già generati).
Da un file con più body ogni fattura conserva solo header e body propri.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.models import Invoice
from app.parsers.fatturapa_parser import FatturaPAParseError, InvoiceDTO, parse_invoice_xml
from app.services.invoice_sync import InvoiceDirection, InvoiceStatus, PersistenceError, ValidationError
from app.services.logging import log_structured_event
from app.services.unit_of_work import UnitOfWork


def import_invoice_xml(
    xml_content: str,
    company_id: int,
    direction: str,
    *,
    customer_id: Optional[int] = None,
    supplier_id: Optional[int] = None,
    status: str = "draft",
) -> Dict:
    """
    Importa uno o più documenti da un XML FatturaPA.

    Se la controparte non è indicata viene cercata (o creata) per P.IVA:
    il fornitore è il CedentePrestatore, il cliente il CessionarioCommittente.
    Le fatture già presenti (stessa azienda, numero e anno) vengono saltate.
    """
    try:
        invoice_direction = InvoiceDirection(str(direction).strip().lower())
    except ValueError:
        raise ValidationError([f"Verso fattura non valido: {direction!r}"])
    try:
        status = InvoiceStatus(str(status).strip().lower()).value
    except ValueError:
        raise ValidationError([f"Stato fattura non valido: {status!r}"])

    try:
        dtos = parse_invoice_xml(xml_content)
    except FatturaPAParseError as exc:
        log_structured_event(
            "invoice_import_failed",
            message="Parsing XML FatturaPA fallito",
            level="warning",
            company_id=company_id,
            error=str(exc),
        )
        raise ValidationError([str(exc)]) from exc

    summary = {"imported": [], "skipped": [], "warnings": []}

    with UnitOfWork() as uow:
        if uow.companies.get_by_id(company_id) is None:
            raise ValidationError([f"Azienda con id {company_id} non trovata"])

        created: List[Invoice] = []
        for dto in dtos:
            if not dto.invoice_number or dto.year is None:
                summary["skipped"].append({"number": dto.invoice_number, "reason": "numero o data mancanti"})
                continue

            existing = uow.invoices.get_by_number(company_id, dto.invoice_number, dto.year)
            if existing is not None:
                summary["skipped"].append(
                    {"number": dto.invoice_number, "reason": "già presente", "invoice_id": existing.id}
                )
                continue

            invoice = _invoice_from_dto(
                dto, company_id, invoice_direction, status, dto.xml_content or xml_content
            )
            if invoice_direction is InvoiceDirection.OUTGOING:
                invoice.customer_id = customer_id or (
                    uow.customers.get_or_create_from_dto(dto.customer).id
                    if dto.customer.vat_number or dto.customer.fiscal_code
                    else None
                )
            else:
                invoice.supplier_id = supplier_id or (
                    uow.suppliers.get_or_create_from_dto(dto.supplier).id
                    if dto.supplier.vat_number or dto.supplier.fiscal_code
                    else None
                )

            uow.invoices.add(invoice)
            created.append(invoice)
            summary["warnings"].extend(dto.warnings)

        try:
            uow.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Salvataggio fatture importate fallito: {exc}") from exc

        summary["imported"] = [inv.id for inv in created]

    log_structured_event(
        "invoice_imported",
        message="Import XML FatturaPA completato",
        company_id=company_id,
        direction=invoice_direction.value,
        imported=len(summary["imported"]),
        skipped=len(summary["skipped"]),
    )
    return summary


def _invoice_from_dto(
    dto: InvoiceDTO,
    company_id: int,
    direction: InvoiceDirection,
    status: str,
    xml_content: str,
) -> Invoice:
    return Invoice(
        company_id=company_id,
        direction=direction.value,
        invoice_type_code=dto.document_type,
        number=dto.invoice_number,
        year=dto.year,
        issue_date=dto.invoice_date,
        payment_terms_days=dto.payment_terms_days,
        payment_method_code=dto.payment_method,
        total_taxable_amount=dto.total_taxable_amount,
        total_tax_amount=dto.total_vat_amount,
        total_amount=dto.total_gross_amount,
        currency=dto.currency,
        status=status,
        xml_content=xml_content,
        notes=dto.description,
    )
