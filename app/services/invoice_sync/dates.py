"""Calcolo della data flusso del movimento."""

from __future__ import annotations

from datetime import date, timedelta


def resolve_flow_date(issue_date: date, payment_terms_days: int) -> date:
    """
    Data flusso = data emissione + giorni di pagamento (giorni di calendario).

    Il default (0 giorni) è responsabilità del chiamante.
    """
    if payment_terms_days < 0:
        raise ValueError(f"Giorni di pagamento non validi: {payment_terms_days}")
    return issue_date + timedelta(days=int(payment_terms_days))
