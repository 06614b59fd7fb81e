"""
Modello Invoice (tabella: invoices).

Fattura elettronica FatturaPA, emessa (direction=outgoing) o ricevuta
(direction=incoming). È gestita dal sottosistema di fatturazione; qui viene
solo letta per generare il movimento e aggiornata nello stato.

Valori ammessi per ``status``:
- ``draft``: bozza, non ancora inviata
- ``sent``: inviata/registrata, in attesa di pagamento
- ``paid``: pagata (``payment_date`` valorizzata)
- ``overdue``: scaduta e non pagata
- ``cancelled``: annullata, non genera movimenti
"""

from datetime import datetime

from app.extensions import db


class Invoice(db.Model):
    __tablename__ = "invoices"
    __table_args__ = (
        db.Index("ix_invoices_company_number_year", "company_id", "number", "year"),
    )

    id = db.Column(db.Integer, primary_key=True)

    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    # Cliente (fatture emesse) oppure fornitore (fatture ricevute)
    customer_id = db.Column(
        db.Integer,
        db.ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    supplier_id = db.Column(
        db.Integer,
        db.ForeignKey("suppliers.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    # outgoing | incoming
    direction = db.Column(db.String(16), nullable=False, index=True)
    # TipoDocumento FatturaPA (TD01, TD04, ...)
    invoice_type_code = db.Column(db.String(8), nullable=False, default="TD01")

    # Numerazione
    number = db.Column(db.String(64), nullable=False)
    year = db.Column(db.Integer, nullable=False)

    # Date
    issue_date = db.Column(db.Date, nullable=True, index=True)
    payment_terms_days = db.Column(db.Integer, nullable=True)
    payment_method_code = db.Column(db.String(8), nullable=True)  # ModalitaPagamento (MP05, ...)
    payment_date = db.Column(db.Date, nullable=True)

    # Importi
    total_taxable_amount = db.Column(db.Numeric(15, 2), nullable=True)
    total_tax_amount = db.Column(db.Numeric(15, 2), nullable=True)
    total_amount = db.Column(db.Numeric(15, 2), nullable=True)
    currency = db.Column(db.String(8), nullable=False, default="EUR")

    status = db.Column(db.String(16), nullable=False, default="draft", index=True)

    xml_content = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    company = db.relationship("Company", backref="invoices")
    customer = db.relationship("Customer", backref="invoices")
    supplier = db.relationship("Supplier", backref="invoices")

    @property
    def is_outgoing(self) -> bool:
        return self.direction == "outgoing"

    @property
    def link_number(self) -> str:
        return f"{self.number}/{self.year}"

    def __repr__(self) -> str:
        return (
            f"<Invoice id={self.id} number={self.number!r} year={self.year} "
            f"direction={self.direction!r} status={self.status!r}>"
        )
