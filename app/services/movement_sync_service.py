"""
Servizio di generazione e sincronizzazione dei movimenti da fattura.
Usa il Pattern Unit of Work attorno al motore puro ``invoice_sync``.

Funzioni principali:
- create_movement_from_invoice(invoice_id, options) -> crea e persiste il movimento
- sync_movement_status(invoice_id)                 -> riallinea stato/verifica del movimento
- update_invoice_status(invoice_id, status, ...)   -> cambio stato fattura + sync inverso
"""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.models import Invoice, Movement
from app.repositories.movement_repo import invoice_link_key
from app.services.invoice_sync import (
    AlreadyLinkedError,
    InvoiceNotFoundError,
    InvoiceSnapshot,
    InvoiceStatus,
    MovementCreationOptions,
    MovementCreationResult,
    MovementSnapshot,
    PersistenceError,
    SyncError,
    SyncOrchestrator,
    ValidationError,
    apply_patch,
    patch_is_noop,
)
from app.services.logging import log_structured_event
from app.services.settings_service import get_sync_rules
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def _build_orchestrator() -> SyncOrchestrator:
    return SyncOrchestrator(get_sync_rules())


def invoice_to_snapshot(invoice: Invoice) -> InvoiceSnapshot:
    return InvoiceSnapshot(
        id=invoice.id,
        direction=invoice.direction,
        invoice_type_code=invoice.invoice_type_code,
        status=invoice.status,
        number=invoice.number,
        year=invoice.year,
        company_id=invoice.company_id,
        total_amount=invoice.total_amount,
        total_tax_amount=invoice.total_tax_amount,
        total_taxable_amount=invoice.total_taxable_amount,
        issue_date=invoice.issue_date,
        payment_terms_days=invoice.payment_terms_days,
        payment_date=invoice.payment_date,
        customer_id=invoice.customer_id,
        supplier_id=invoice.supplier_id,
        xml_content=invoice.xml_content,
        notes=invoice.notes,
        payment_method_code=invoice.payment_method_code,
    )


def movement_to_snapshot(movement: Movement) -> MovementSnapshot:
    return MovementSnapshot(
        id=movement.id,
        invoice_number=movement.invoice_number,
        document_number=movement.document_number,
        xml_data=movement.xml_data,
        status_id=movement.status_id,
        is_verified=movement.is_verified,
        verification_status=movement.verification_status,
        last_verification_date=movement.last_verification_date,
    )


def _get_invoice_or_raise(uow: UnitOfWork, invoice_id: int) -> Invoice:
    invoice = uow.invoices.get_by_id(invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)
    return invoice


def _complete_options(
    uow: UnitOfWork, invoice: Invoice, options: MovementCreationOptions
) -> MovementCreationOptions:
    """
    Completa le opzioni con i dati di anagrafica:
    - conto atteso per la modalità di pagamento della fattura
    - giorni di pagamento standard del fornitore, se la fattura non li riporta
    """
    if options.iban_id is None:
        iban = uow.companies.find_iban_for_payment_method(
            invoice.company_id, invoice.payment_method_code
        )
        if iban is not None:
            options = replace(options, iban_id=iban.id, iban_label=iban.label)

    if (
        options.payment_terms_days is None
        and invoice.payment_terms_days is None
        and not invoice.is_outgoing
        and invoice.supplier is not None
        and invoice.supplier.payment_terms_days is not None
    ):
        options = replace(options, payment_terms_days=invoice.supplier.payment_terms_days)

    return options


def create_movement_from_invoice(
    invoice_id: int, options: MovementCreationOptions
) -> Dict[str, Any]:
    """
    Genera il movimento finanziario di una fattura e lo salva.

    Solleva le eccezioni del motore (ValidationError, AlreadyLinkedError,
    ExcludedTypeError, StatusMappingUnresolvedError) senza scrivere nulla;
    PersistenceError se il salvataggio fallisce.
    """
    orchestrator = _build_orchestrator()

    with UnitOfWork() as uow:
        invoice = _get_invoice_or_raise(uow, invoice_id)
        snapshot = invoice_to_snapshot(invoice)
        candidates = [
            movement_to_snapshot(m) for m in uow.movements.list_candidates_for_invoice(invoice)
        ]
        catalog = uow.movement_statuses.get_catalog()
        options = _complete_options(uow, invoice, options)

        try:
            result: MovementCreationResult = orchestrator.create_movement_from_invoice(
                snapshot, candidates, options, catalog
            )
        except SyncError as exc:
            log_structured_event(
                "movement_creation_refused",
                message="Generazione movimento rifiutata",
                level="warning",
                invoice_id=invoice_id,
                error_code=exc.code,
                reason=str(exc),
            )
            raise

        draft = result.draft
        link_key = None if result.mapping["forced"] else invoice_link_key(invoice)

        movement = Movement(
            type=draft.type.value,
            amount=draft.amount,
            vat_amount=draft.vat_amount,
            net_amount=draft.net_amount,
            flow_date=draft.flow_date,
            insert_date=draft.insert_date,
            company_id=draft.company_id,
            core_id=str(draft.core_id),
            status_id=draft.status_id,
            reason_id=draft.reason_id,
            iban_id=draft.iban_id,
            customer_id=draft.customer_id,
            supplier_id=draft.supplier_id,
            invoice_number=draft.invoice_number,
            document_number=draft.document_number,
            xml_data=draft.xml_data,
            invoice_link_key=link_key,
            notes=draft.notes,
            is_verified=draft.is_verified,
            verification_status=draft.verification_status,
            last_verification_date=draft.last_verification_date,
        )

        try:
            uow.movements.add(movement)
            uow.commit()
        except IntegrityError as exc:
            # Richiesta concorrente per la stessa fattura arrivata prima
            existing = uow.movements.get_by_link_key(link_key) if link_key else None
            if existing is not None:
                log_structured_event(
                    "movement_already_linked",
                    message="Movimento già creato da una richiesta concorrente",
                    level="warning",
                    invoice_id=invoice_id,
                    existing_movement_id=existing.id,
                )
                raise AlreadyLinkedError(existing.id) from exc
            raise PersistenceError(f"Salvataggio movimento fallito: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            logger.exception("Errore DB durante il salvataggio del movimento")
            raise PersistenceError(f"Salvataggio movimento fallito: {exc}") from exc

        log_structured_event(
            "movement_created",
            message="Movimento generato da fattura",
            invoice_id=invoice_id,
            movement_id=movement.id,
            movement_type=draft.type.value,
            amount=result.mapping["amount"],
            forced=result.mapping["forced"],
        )

        return {"movement": movement, "result": result}


def _find_own_movement(uow: UnitOfWork, invoice: Invoice) -> Optional[Movement]:
    """
    Movimento su cui scrivere il sync inverso.

    Prima quello creato dalla fattura (chiave di collegamento), poi uno con lo
    stesso "{numero}/{anno}". Le corrispondenze per document_number o XML
    bloccano i duplicati ma non autorizzano a modificare il movimento.
    """
    movement = uow.movements.get_by_link_key(invoice_link_key(invoice))
    if movement is not None:
        return movement
    return uow.movements.find_one_by(
        company_id=invoice.company_id, invoice_number=invoice.link_number
    )


def _sync_own_movement(
    uow: UnitOfWork, orchestrator: SyncOrchestrator, invoice: Invoice
) -> Optional[Dict[str, Any]]:
    """Calcola e applica (senza commit) la patch di stato del movimento della fattura."""
    movement = _find_own_movement(uow, invoice)
    if movement is None:
        return None

    patch = orchestrator.sync_movement_status_from_invoice_change(
        invoice_to_snapshot(invoice),
        movement_to_snapshot(movement),
        uow.movement_statuses.get_catalog(),
    )
    changed = not patch_is_noop(movement, patch)
    if changed:
        apply_patch(movement, patch)
    return {"movement_id": movement.id, "patch": patch, "changed": changed}


def _log_movement_sync(invoice: Invoice, sync: Dict[str, Any]) -> None:
    log_structured_event(
        "movement_status_synced",
        message="Stato movimento sincronizzato dalla fattura",
        invoice_id=invoice.id,
        movement_id=sync["movement_id"],
        invoice_status=invoice.status,
        changed=sync["changed"],
    )


def sync_movement_status(invoice_id: int) -> Optional[Dict[str, Any]]:
    """
    Riallinea stato e verifica del movimento collegato alla fattura.

    Restituisce None se la fattura non ha un movimento proprio. La patch è
    idempotente: se il movimento è già allineato non viene scritto nulla.
    """
    orchestrator = _build_orchestrator()

    with UnitOfWork() as uow:
        invoice = _get_invoice_or_raise(uow, invoice_id)
        sync = _sync_own_movement(uow, orchestrator, invoice)
        if sync is None:
            logger.info(
                "Nessun movimento collegato alla fattura %s: sync stato saltato", invoice_id
            )
            return None

        if sync["changed"]:
            try:
                uow.commit()
            except SQLAlchemyError as exc:
                raise PersistenceError(f"Aggiornamento stato movimento fallito: {exc}") from exc

        _log_movement_sync(invoice, sync)
        return sync


def update_invoice_status(
    invoice_id: int, status: str, payment_date: Optional[date] = None
) -> Dict[str, Any]:
    """
    Aggiorna lo stato della fattura e propaga il cambio al movimento collegato.

    Fattura e movimento sono salvati nella stessa transazione: se lo stato non
    è traducibile per il movimento (StatusMappingUnresolvedError) non viene
    salvato neanche il nuovo stato della fattura.
    Il passaggio a ``paid`` senza data pagamento usa la data odierna.
    """
    try:
        new_status = InvoiceStatus(str(status).strip().lower())
    except ValueError:
        raise ValidationError([f"Stato fattura non valido: {status!r}"])

    orchestrator = _build_orchestrator()

    with UnitOfWork() as uow:
        invoice = _get_invoice_or_raise(uow, invoice_id)
        previous_status = invoice.status

        invoice.status = new_status.value
        if new_status is InvoiceStatus.PAID:
            invoice.payment_date = payment_date or invoice.payment_date or date.today()
        elif payment_date is not None:
            invoice.payment_date = payment_date

        sync = _sync_own_movement(uow, orchestrator, invoice)

        try:
            uow.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Aggiornamento stato fattura fallito: {exc}") from exc

        log_structured_event(
            "invoice_status_changed",
            message="Stato fattura aggiornato",
            invoice_id=invoice_id,
            previous_status=previous_status,
            status=new_status.value,
        )
        if sync is not None:
            _log_movement_sync(invoice, sync)

    return {
        "invoice_id": invoice_id,
        "previous_status": previous_status,
        "status": new_status.value,
        "movement_sync": sync,
    }


def get_movement(movement_id: int) -> Optional[Movement]:
    with UnitOfWork() as uow:
        return uow.movements.get_by_id(movement_id)
