"""
Tabelle di regole del motore di sincronizzazione.

Le regole sono un oggetto immutabile iniettato nei componenti al momento della
costruzione: ogni tenant può avere la propria istanza (es. etichette di stato
diverse) senza toccare stato globale.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from .types import InvoiceStatus, normalize_type_code

DEFAULT_REASON_CODE = "FATT_ATT"

NEGATIVE_TYPE_CODES: FrozenSet[str] = frozenset({"TD04", "TD08"})
EXCLUDED_TYPE_CODES: FrozenSet[str] = frozenset({"TD20", "TD21", "TD22"})

REASON_CODES: Mapping[str, str] = MappingProxyType(
    {
        "TD01": "FATT_ATT",
        "TD02": "FATT_ACC",
        "TD04": "NOTA_CR",
        "TD05": "NOTA_DB",
        "TD06": "FATT_ATT",
        "TD07": "FATT_SEMPL",
        "TD08": "NOTA_CR",
    }
)

STATUS_CANDIDATES: Mapping[InvoiceStatus, Tuple[str, ...]] = MappingProxyType(
    {
        InvoiceStatus.DRAFT: ("Da Saldare", "Pending"),
        InvoiceStatus.SENT: ("In Lavorazione", "Processing", "Sent"),
        InvoiceStatus.PAID: ("Saldato", "Paid", "Completed"),
        InvoiceStatus.OVERDUE: ("Scaduto", "Overdue"),
        InvoiceStatus.CANCELLED: ("Annullato", "Cancelled"),
    }
)


def _freeze_status_candidates(
    candidates: Mapping[object, Sequence[str]],
) -> Mapping[InvoiceStatus, Tuple[str, ...]]:
    frozen: Dict[InvoiceStatus, Tuple[str, ...]] = {}
    for status, labels in candidates.items():
        key = status if isinstance(status, InvoiceStatus) else InvoiceStatus(str(status).lower())
        frozen[key] = tuple(label for label in labels if label)
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class SyncRules:
    negative_type_codes: FrozenSet[str] = NEGATIVE_TYPE_CODES
    excluded_type_codes: FrozenSet[str] = EXCLUDED_TYPE_CODES
    reason_codes: Mapping[str, str] = field(default_factory=lambda: REASON_CODES)
    default_reason_code: str = DEFAULT_REASON_CODE
    status_candidates: Mapping[InvoiceStatus, Tuple[str, ...]] = field(
        default_factory=lambda: STATUS_CANDIDATES
    )

    def __post_init__(self) -> None:
        # Normalizzazione: codici maiuscoli, mapping in sola lettura
        object.__setattr__(
            self,
            "negative_type_codes",
            frozenset(normalize_type_code(c) for c in self.negative_type_codes),
        )
        object.__setattr__(
            self,
            "excluded_type_codes",
            frozenset(normalize_type_code(c) for c in self.excluded_type_codes),
        )
        object.__setattr__(
            self,
            "reason_codes",
            MappingProxyType(
                {normalize_type_code(k): v for k, v in self.reason_codes.items()}
            ),
        )
        object.__setattr__(
            self, "status_candidates", _freeze_status_candidates(self.status_candidates)
        )

    def candidates_for(self, status: InvoiceStatus) -> Tuple[str, ...]:
        return self.status_candidates.get(status, ())

    def with_status_candidates(
        self, overrides: Mapping[object, Iterable[str]]
    ) -> "SyncRules":
        """Nuova istanza con le etichette di stato sovrascritte (per tenant)."""
        merged: Dict[object, Sequence[str]] = dict(self.status_candidates)
        for status, labels in overrides.items():
            key = status if isinstance(status, InvoiceStatus) else InvoiceStatus(str(status).lower())
            merged[key] = tuple(labels)
        return replace(self, status_candidates=merged)


DEFAULT_RULES = SyncRules()


def build_rules(status_overrides: Optional[Mapping[object, Iterable[str]]] = None) -> SyncRules:
    if not status_overrides:
        return DEFAULT_RULES
    return DEFAULT_RULES.with_status_candidates(status_overrides)
