"""
Modelli Company (tabella: companies) e Iban (tabella: ibans).

Company è la ragione sociale del tenant che emette/riceve le fatture.
Ogni azienda può avere più conti correnti; un conto può essere associato a una
modalità di pagamento FatturaPA (MP05 bonifico, MP12 RIBA, ...) così che il
movimento generato da una fattura riporti l'IBAN corretto.
"""

from datetime import datetime

from app.extensions import db


class Company(db.Model):
    __tablename__ = "companies"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    vat_number = db.Column(db.String(32), unique=True, nullable=True, index=True)
    fiscal_code = db.Column(db.String(32), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    ibans = db.relationship(
        "Iban",
        back_populates="company",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Company id={self.id} name={self.name!r}>"


class Iban(db.Model):
    __tablename__ = "ibans"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    iban = db.Column(db.String(34), nullable=False)
    bank_name = db.Column(db.String(255), nullable=True)
    # es. MP05 (bonifico); NULL = conto generico
    payment_method_code = db.Column(db.String(8), nullable=True, index=True)
    is_default = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    company = db.relationship("Company", back_populates="ibans")

    @property
    def label(self) -> str:
        return f"{self.iban} ({self.bank_name})" if self.bank_name else self.iban

    def __repr__(self) -> str:
        return f"<Iban id={self.id} company_id={self.company_id} iban={self.iban!r}>"
