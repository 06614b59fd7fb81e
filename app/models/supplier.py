"""
Modelli Supplier (tabella: suppliers) e Customer (tabella: customers).

Controparti delle fatture: il fornitore per le fatture ricevute, il cliente
per le fatture emesse. I movimenti generati riportano l'una o l'altra.
"""

from datetime import datetime

from app.extensions import db


class Supplier(db.Model):
    __tablename__ = "suppliers"

    id = db.Column(db.Integer, primary_key=True)

    # Dati anagrafici base
    name = db.Column(db.String(255), nullable=False, index=True)
    vat_number = db.Column(db.String(32), nullable=True, unique=True, index=True)  # Partita IVA
    fiscal_code = db.Column(db.String(32), nullable=True)  # Codice fiscale
    sdi_code = db.Column(db.String(16), nullable=True)  # Codice destinatario/SDI
    pec_email = db.Column(db.String(255), nullable=True)

    # Condizioni di pagamento standard (giorni), usate se la fattura non le riporta
    payment_terms_days = db.Column(db.Integer, nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Supplier id={self.id} name={self.name!r}>"


class Customer(db.Model):
    __tablename__ = "customers"

    id = db.Column(db.Integer, primary_key=True)

    # 'private' | 'business'
    type = db.Column(db.String(16), nullable=False, default="business")
    name = db.Column(db.String(255), nullable=False, index=True)
    vat_number = db.Column(db.String(32), nullable=True, index=True)
    fiscal_code = db.Column(db.String(32), nullable=True)
    sdi_code = db.Column(db.String(16), nullable=True)
    pec_email = db.Column(db.String(255), nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name!r}>"
