"""
Motore di sincronizzazione fattura elettronica -> movimento finanziario.

Logica pura e deterministica: nessun accesso a DB, Flask o rete. I dati
(fattura, movimenti candidati, catalogo stati del tenant) vengono letti dal
chiamante e passati come value object; il risultato viene persistito dal
chiamante (vedi app.services.movement_sync_service).
"""

from .amounts import AmountResolver, TotalAmountResolver
from .classifier import InvoiceTypeClassifier
from .dates import resolve_flow_date
from .errors import (
    AlreadyLinkedError,
    ExcludedTypeError,
    InvoiceNotFoundError,
    PersistenceError,
    StatusMappingUnresolvedError,
    SyncError,
    ValidationError,
)
from .linkage import LinkageResolver
from .orchestrator import SyncOrchestrator, apply_patch, patch_is_noop
from .rules import DEFAULT_RULES, SyncRules, build_rules
from .status_translator import StatusTranslator
from .types import (
    InvoiceClassification,
    InvoiceDirection,
    InvoiceSnapshot,
    InvoiceStatus,
    InvoiceTypeCode,
    LinkageResult,
    MovementCreationOptions,
    MovementCreationResult,
    MovementDraft,
    MovementSnapshot,
    MovementType,
    StatusTranslation,
    ValidationResult,
    format_amount,
)
from .validation import validate_invoice

__all__ = [
    # Componenti
    "AmountResolver",
    "TotalAmountResolver",
    "InvoiceTypeClassifier",
    "resolve_flow_date",
    "LinkageResolver",
    "StatusTranslator",
    "SyncOrchestrator",
    "validate_invoice",
    "apply_patch",
    "patch_is_noop",
    # Regole
    "SyncRules",
    "DEFAULT_RULES",
    "build_rules",
    # Tipi
    "InvoiceClassification",
    "InvoiceDirection",
    "InvoiceSnapshot",
    "InvoiceStatus",
    "InvoiceTypeCode",
    "LinkageResult",
    "MovementCreationOptions",
    "MovementCreationResult",
    "MovementDraft",
    "MovementSnapshot",
    "MovementType",
    "StatusTranslation",
    "ValidationResult",
    "format_amount",
    # Errori
    "SyncError",
    "ValidationError",
    "AlreadyLinkedError",
    "ExcludedTypeError",
    "StatusMappingUnresolvedError",
    "PersistenceError",
    "InvoiceNotFoundError",
]
