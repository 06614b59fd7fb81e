"""
Tipi del motore di sincronizzazione fattura -> movimento.

Contiene solo value object immutabili (dataclass frozen) ed enum: nessuna
dipendenza da Flask o SQLAlchemy, così il motore resta testabile in isolamento.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class InvoiceDirection(str, Enum):
    """Verso della fattura rispetto al tenant."""

    OUTGOING = "outgoing"  # emessa (ciclo attivo)
    INCOMING = "incoming"  # ricevuta (ciclo passivo)


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class MovementType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def for_direction(cls, direction: InvoiceDirection) -> "MovementType":
        if direction is InvoiceDirection.OUTGOING:
            return cls.INCOME
        if direction is InvoiceDirection.INCOMING:
            return cls.EXPENSE
        raise ValueError(f"Verso fattura non gestito: {direction!r}")


class InvoiceTypeCode(str, Enum):
    """Catalogo TipoDocumento FatturaPA (TD01...TD22)."""

    TD01 = "TD01"  # fattura
    TD02 = "TD02"  # acconto/anticipo su fattura
    TD03 = "TD03"  # acconto/anticipo su parcella
    TD04 = "TD04"  # nota di credito
    TD05 = "TD05"  # nota di debito
    TD06 = "TD06"  # parcella
    TD07 = "TD07"  # fattura semplificata
    TD08 = "TD08"  # nota di credito semplificata
    TD09 = "TD09"  # nota di debito semplificata
    TD10 = "TD10"  # acquisto intracomunitario di beni
    TD11 = "TD11"  # acquisto intracomunitario di beni strumentali
    TD12 = "TD12"  # documento riepilogativo
    TD16 = "TD16"  # integrazione reverse charge interno
    TD17 = "TD17"  # integrazione/autofattura servizi dall'estero
    TD18 = "TD18"  # integrazione beni intracomunitari
    TD19 = "TD19"  # integrazione/autofattura beni ex art.17 c.2
    TD20 = "TD20"  # autofattura per regolarizzazione
    TD21 = "TD21"  # autofattura per splafonamento
    TD22 = "TD22"  # estrazione beni da deposito IVA

    @classmethod
    def parse(cls, code: Optional[str]) -> Optional["InvoiceTypeCode"]:
        """Restituisce l'enum corrispondente oppure None se il codice non è a catalogo."""
        normalized = normalize_type_code(code)
        try:
            return cls(normalized)
        except ValueError:
            return None


def normalize_type_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def _coerce_enum(enum_cls, value):
    if value is None or isinstance(value, enum_cls):
        return value
    return enum_cls(str(value).strip().lower())


@dataclass(frozen=True)
class InvoiceSnapshot:
    """Vista immutabile di una fattura, così come la passa il chiamante."""

    id: Any
    direction: InvoiceDirection
    invoice_type_code: str
    status: InvoiceStatus
    number: str
    year: int
    company_id: Any = None
    total_amount: Optional[Decimal] = None
    total_tax_amount: Optional[Decimal] = None
    total_taxable_amount: Optional[Decimal] = None
    issue_date: Optional[date] = None
    payment_terms_days: Optional[int] = None
    payment_date: Optional[date] = None
    customer_id: Any = None
    supplier_id: Any = None
    xml_content: Optional[str] = None
    notes: Optional[str] = None
    payment_method_code: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", _coerce_enum(InvoiceDirection, self.direction))
        object.__setattr__(self, "status", _coerce_enum(InvoiceStatus, self.status))

    @property
    def link_number(self) -> str:
        """Numero nel formato usato dai movimenti: "{numero}/{anno}"."""
        return f"{self.number}/{self.year}"


@dataclass(frozen=True)
class MovementSnapshot:
    """Movimento candidato (o collegato) letto dallo storage."""

    id: Any
    invoice_number: Optional[str] = None
    document_number: Optional[str] = None
    xml_data: Optional[str] = None
    status_id: Any = None
    is_verified: bool = False
    verification_status: Optional[str] = None
    last_verification_date: Optional[date] = None


@dataclass(frozen=True)
class InvoiceClassification:
    is_negative_amount: bool
    is_excluded: bool
    suggested_reason_code: str


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LinkageResult:
    linked: bool
    matched_rule: Optional[int] = None
    movement_id: Any = None


@dataclass(frozen=True)
class StatusTranslation:
    status_id: Any
    canonical_status: InvoiceStatus
    matched_label: str
    verification_patch: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MovementCreationOptions:
    core_id: Any
    force_create: bool = False
    status_id: Any = None
    reason_id: Any = None
    payment_terms_days: Optional[int] = None
    additional_notes: Optional[str] = None
    iban_id: Any = None
    iban_label: Optional[str] = None

    def __post_init__(self) -> None:
        if self.core_id in (None, ""):
            raise ValueError("core_id è obbligatorio per generare un movimento")


@dataclass(frozen=True)
class MovementDraft:
    """Movimento pronto per essere persistito dal chiamante."""

    type: MovementType
    amount: Decimal
    flow_date: date
    insert_date: date
    company_id: Any
    core_id: Any
    status_id: Any
    reason_id: Any
    invoice_number: str
    document_number: str
    notes: str
    vat_amount: Optional[Decimal] = None
    net_amount: Optional[Decimal] = None
    customer_id: Any = None
    supplier_id: Any = None
    xml_data: Optional[str] = None
    iban_id: Any = None
    is_verified: bool = False
    verification_status: str = "pending"
    last_verification_date: Optional[date] = None

    @property
    def amount_as_string(self) -> str:
        return format_amount(self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "amount": self.amount_as_string,
            "vatAmount": format_amount(self.vat_amount),
            "netAmount": format_amount(self.net_amount),
            "flowDate": self.flow_date.isoformat(),
            "insertDate": self.insert_date.isoformat(),
            "companyId": self.company_id,
            "coreId": self.core_id,
            "statusId": self.status_id,
            "reasonId": self.reason_id,
            "customerId": self.customer_id,
            "supplierId": self.supplier_id,
            "ibanId": self.iban_id,
            "invoiceNumber": self.invoice_number,
            "documentNumber": self.document_number,
            "notes": self.notes,
            "isVerified": self.is_verified,
            "verificationStatus": self.verification_status,
            "lastVerificationDate": (
                self.last_verification_date.isoformat() if self.last_verification_date else None
            ),
        }


@dataclass(frozen=True)
class MovementCreationResult:
    draft: MovementDraft
    mapping: Dict[str, Any]


_CENTS = Decimal("0.01")


def format_amount(value: Optional[Decimal]) -> Optional[str]:
    """Importo serializzato come stringa a due decimali (es. "-300.00")."""
    if value is None:
        return None
    return str(Decimal(value).quantize(_CENTS))
