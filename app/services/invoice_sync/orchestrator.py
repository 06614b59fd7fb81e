"""
Orchestratore della sincronizzazione fattura -> movimento.

Compone classificatore, resolver di importo e data, traduttore di stato,
riconoscimento del collegamento e validazione nelle due operazioni pubbliche:

- create_movement_from_invoice(...)             -> MovementCreationResult
- sync_movement_status_from_invoice_change(...) -> patch parziale

Nessuna operazione scrive sullo storage: la bozza e la patch vengono
restituite al chiamante, che le persiste tramite i repository.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .amounts import AmountResolver, TotalAmountResolver
from .classifier import InvoiceTypeClassifier
from .dates import resolve_flow_date
from .errors import AlreadyLinkedError, ExcludedTypeError, ValidationError
from .linkage import LinkageResolver
from .rules import DEFAULT_RULES, SyncRules
from .status_translator import StatusTranslator, verification_patch_for
from .types import (
    InvoiceClassification,
    InvoiceDirection,
    InvoiceSnapshot,
    MovementCreationOptions,
    MovementCreationResult,
    MovementDraft,
    MovementSnapshot,
    MovementType,
    format_amount,
    normalize_type_code,
)
from .validation import validate_invoice

logger = logging.getLogger(__name__)

PENDING = "pending"

# Campi che la sincronizzazione inversa può modificare: importo, data e tipo
# del movimento restano quelli fissati alla creazione.
PATCHABLE_FIELDS = frozenset(
    {"status_id", "is_verified", "verification_status", "last_verification_date"}
)


class SyncOrchestrator:
    def __init__(
        self,
        rules: Optional[SyncRules] = None,
        *,
        amount_resolver: Optional[AmountResolver] = None,
        linkage_resolver: Optional[LinkageResolver] = None,
        today: Callable[[], date] = date.today,
    ):
        self.rules = rules or DEFAULT_RULES
        self.classifier = InvoiceTypeClassifier(self.rules)
        self.status_translator = StatusTranslator(self.rules)
        self.amount_resolver = amount_resolver or TotalAmountResolver()
        self.linkage_resolver = linkage_resolver or LinkageResolver()
        self._today = today

    # ------------------------------------------------------------------
    # Creazione movimento
    # ------------------------------------------------------------------
    def create_movement_from_invoice(
        self,
        invoice: InvoiceSnapshot,
        candidate_movements: Iterable[MovementSnapshot],
        options: MovementCreationOptions,
        status_catalog: Mapping[str, Any],
    ) -> MovementCreationResult:
        # 1. Validazione
        validation = validate_invoice(invoice)
        if not validation.is_valid:
            raise ValidationError(validation.errors)

        # 2. Duplicati
        linkage = self.linkage_resolver.resolve(invoice, candidate_movements)
        if linkage.linked and not options.force_create:
            raise AlreadyLinkedError(linkage.movement_id, linkage.matched_rule)

        # 3. Tipo documento
        type_code = normalize_type_code(invoice.invoice_type_code)
        classification = self.classifier.classify(type_code)
        if classification.is_excluded:
            raise ExcludedTypeError(type_code)

        # 4. Importo e data flusso
        amount = self.amount_resolver.resolve(invoice.total_amount, classification, invoice)
        payment_terms_days = _first_not_none(
            options.payment_terms_days, invoice.payment_terms_days, 0
        )
        if payment_terms_days < 0:
            raise ValidationError(["I giorni di pagamento non possono essere negativi"])
        flow_date = resolve_flow_date(invoice.issue_date, payment_terms_days)

        # 5. Tipo movimento: dipende solo dal verso, non dal segno
        movement_type = MovementType.for_direction(invoice.direction)

        # 6. Stato iniziale + patch di verifica
        if options.status_id is not None:
            status_id = options.status_id
            verification = verification_patch_for(invoice.status, invoice.payment_date)
        else:
            translation = self.status_translator.translate(
                invoice.status, invoice.payment_date, status_catalog
            )
            status_id = translation.status_id
            verification = translation.verification_patch

        # 7. Composizione bozza
        reason_id = (
            options.reason_id if options.reason_id is not None
            else classification.suggested_reason_code
        )
        auto_notes = self._auto_generated_notes(invoice, type_code, classification, options)
        terms_note = _payment_terms_note(payment_terms_days, flow_date)
        notes = "\n".join(
            part for part in (auto_notes, terms_note, invoice.notes, options.additional_notes)
            if part
        )

        is_outgoing = invoice.direction is InvoiceDirection.OUTGOING
        draft = MovementDraft(
            type=movement_type,
            amount=amount,
            vat_amount=_signed(invoice.total_tax_amount, classification),
            net_amount=_signed(invoice.total_taxable_amount, classification),
            flow_date=flow_date,
            insert_date=self._today(),
            company_id=invoice.company_id,
            core_id=options.core_id,
            status_id=status_id,
            reason_id=reason_id,
            customer_id=invoice.customer_id if is_outgoing else None,
            supplier_id=None if is_outgoing else invoice.supplier_id,
            invoice_number=invoice.link_number,
            document_number=f"{type_code}-{invoice.number}",
            xml_data=invoice.xml_content,
            iban_id=options.iban_id,
            notes=notes,
            is_verified=bool(verification.get("is_verified", False)),
            verification_status=verification.get("verification_status", PENDING),
            last_verification_date=verification.get("last_verification_date"),
        )

        mapping = {
            "amount": format_amount(amount),
            "movement_type": movement_type.value,
            "is_negative_amount": classification.is_negative_amount,
            "auto_generated_notes": "\n".join(p for p in (auto_notes, terms_note) if p),
            "reason_code": classification.suggested_reason_code,
            "flow_date": flow_date.isoformat(),
            "payment_terms_days": payment_terms_days,
            "forced": bool(linkage.linked and options.force_create),
            "linked_movement_id": linkage.movement_id,
            "matched_rule": linkage.matched_rule,
        }

        logger.debug(
            "Bozza movimento composta",
            extra={"invoice_id": invoice.id, "movement_type": movement_type.value, "amount": mapping["amount"]},
        )
        return MovementCreationResult(draft=draft, mapping=mapping)

    # ------------------------------------------------------------------
    # Sincronizzazione inversa dello stato
    # ------------------------------------------------------------------
    def sync_movement_status_from_invoice_change(
        self,
        invoice: InvoiceSnapshot,
        linked_movement: MovementSnapshot,
        status_catalog: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """
        Patch parziale (solo stato/verifica) da applicare al movimento collegato.

        La patch è funzione pura dello stato corrente della fattura: applicarla
        due volte non cambia nulla.
        """
        translation = self.status_translator.translate(
            invoice.status, invoice.payment_date, status_catalog
        )
        patch: Dict[str, Any] = {"status_id": translation.status_id}
        patch.update(translation.verification_patch)
        return patch

    # ------------------------------------------------------------------
    def _auto_generated_notes(
        self,
        invoice: InvoiceSnapshot,
        type_code: str,
        classification: InvoiceClassification,
        options: MovementCreationOptions,
    ) -> str:
        issue = invoice.issue_date.strftime("%d/%m/%Y")
        parts: List[str] = [
            f"Movimento generato da fattura {type_code} n. {invoice.link_number} del {issue}"
        ]
        if invoice.total_taxable_amount:
            parts.append(f"Imponibile: € {format_amount(invoice.total_taxable_amount)}")
        if invoice.total_tax_amount:
            parts.append(f"IVA: € {format_amount(invoice.total_tax_amount)}")
        if classification.is_negative_amount:
            parts.append("Documento a storno: importo registrato in negativo")
        if options.iban_label:
            parts.append(f"IBAN: {options.iban_label}")
        return "\n".join(parts)


def apply_patch(movement: Any, patch: Mapping[str, Any]) -> bool:
    """
    Applica la patch all'oggetto movimento (modello o dict) e restituisce
    True se almeno un campo è cambiato. Ignora i campi non modificabili.
    """
    changed = False
    for field_name, value in patch.items():
        if field_name not in PATCHABLE_FIELDS:
            continue
        if isinstance(movement, dict):
            if movement.get(field_name) != value:
                movement[field_name] = value
                changed = True
        elif getattr(movement, field_name, None) != value:
            setattr(movement, field_name, value)
            changed = True
    return changed


def patch_is_noop(movement: Any, patch: Mapping[str, Any]) -> bool:
    for field_name, value in patch.items():
        current = movement.get(field_name) if isinstance(movement, dict) else getattr(movement, field_name, None)
        if current != value:
            return False
    return True


def _payment_terms_note(days: int, flow_date: date) -> str:
    if days <= 0:
        return "Pagamento a vista"
    return f"Pagamento a {days} giorni (scadenza {flow_date.strftime('%d/%m/%Y')})"


def _signed(value, classification: InvoiceClassification):
    if value is None:
        return None
    return -abs(value) if classification.is_negative_amount else abs(value)


def _first_not_none(*values):
    for value in values:
        if value is not None:
            return value
    return None
