"""
Modelli Movement (tabella: movements), MovementStatus e MovementReason.

Il movimento è una registrazione di cassa (entrata/uscita) indipendente dal
sottosistema di fatturazione. Il collegamento con la fattura che lo ha
generato non è una foreign key: viene dedotto dal contenuto
(invoice_number, document_number, xml_data).

``invoice_link_key`` è valorizzata solo sul primo movimento generato da una
fattura (non su quelli creati con forceCreate): il vincolo di unicità chiude
la race tra due richieste concorrenti per la stessa fattura.
"""

from datetime import date, datetime

from app.extensions import db


class MovementStatus(db.Model):
    """Catalogo stati movimento del tenant (es. "Saldato", "Da Saldare")."""

    __tablename__ = "movement_statuses"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False, unique=True)
    description = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<MovementStatus id={self.id} name={self.name!r}>"


class MovementReason(db.Model):
    """Causali movimento, identificate dal codice (FATT_ATT, NOTA_CR, ...)."""

    __tablename__ = "movement_reasons"

    id = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    # income | expense | both
    type = db.Column(db.String(16), nullable=False, default="both")
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<MovementReason id={self.id!r} name={self.name!r}>"


class Movement(db.Model):
    __tablename__ = "movements"

    id = db.Column(db.Integer, primary_key=True)

    # income | expense
    type = db.Column(db.String(16), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    vat_amount = db.Column(db.Numeric(12, 2), nullable=True)
    net_amount = db.Column(db.Numeric(12, 2), nullable=True)

    flow_date = db.Column(db.Date, nullable=False, index=True)
    insert_date = db.Column(db.Date, nullable=False, default=date.today)

    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    core_id = db.Column(db.String(64), nullable=False)
    status_id = db.Column(
        db.Integer,
        db.ForeignKey("movement_statuses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    reason_id = db.Column(
        db.String(32),
        db.ForeignKey("movement_reasons.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    iban_id = db.Column(
        db.Integer,
        db.ForeignKey("ibans.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Controparte: una sola delle due è valorizzata
    customer_id = db.Column(
        db.Integer,
        db.ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    supplier_id = db.Column(
        db.Integer,
        db.ForeignKey("suppliers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Riferimenti alla fattura di origine
    invoice_number = db.Column(db.String(80), nullable=True, index=True)  # "{numero}/{anno}"
    document_number = db.Column(db.String(96), nullable=True, index=True)  # "{TD}-{numero}"
    xml_data = db.Column(db.Text, nullable=True)
    invoice_link_key = db.Column(db.String(128), nullable=True, unique=True)

    notes = db.Column(db.Text, nullable=True)

    # Verifica (aggiornata dalla sincronizzazione dello stato fattura)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    verification_status = db.Column(db.String(32), nullable=True, default="pending")
    last_verification_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    status = db.relationship("MovementStatus")
    reason = db.relationship("MovementReason")
    iban = db.relationship("Iban")

    def __repr__(self) -> str:
        return (
            f"<Movement id={self.id} type={self.type!r} amount={self.amount} "
            f"invoice_number={self.invoice_number!r}>"
        )
