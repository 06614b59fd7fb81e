"""
Parser per contenuti XML FatturaPA.

Questo modulo fornisce:
- DTO (Data Transfer Object) per rappresentare in modo neutro i dati estratti
- una funzione principale `parse_invoice_xml(xml)` che restituisce una lista di
  `InvoiceDTO` (uno per ogni FatturaElettronicaBody)

Obiettivo:
- leggere i nodi che servono a generare il movimento (TipoDocumento, Numero,
  Data, ImportoTotaleDocumento, DatiRiepilogo, DatiPagamento, controparti)
- restituire una struttura pronta per app.services.import_service, che la
  mappa sul modello Invoice conservando l'XML originale

Il parser è pensato per essere:
- tollerante ai campi mancanti (ritorna None dove appropriato)
- indipendente dai namespace (uso di local-name() negli XPath)
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Union

from lxml import etree


# =========================
#  DTO (Data Transfer Objects)
# =========================


@dataclass
class PartyDTO:
    """Dati essenziali di una controparte (CedentePrestatore / CessionarioCommittente)."""

    name: Optional[str] = None
    vat_number: Optional[str] = None
    fiscal_code: Optional[str] = None


@dataclass
class InvoiceDTO:
    """
    DTO principale con i dati della fattura.

    Non contiene logica di persistenza: sarà il servizio di import a trasformarlo
    nel modello Invoice.
    """

    supplier: PartyDTO
    customer: PartyDTO

    document_type: str = "TD01"
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    currency: str = "EUR"

    total_taxable_amount: Optional[Decimal] = None
    total_vat_amount: Optional[Decimal] = None
    total_gross_amount: Optional[Decimal] = None

    due_date: Optional[date] = None
    payment_terms_days: Optional[int] = None
    payment_method: Optional[str] = None

    description: Optional[str] = None
    # XML del solo documento (header + questo body), valorizzato se il file ha più body
    xml_content: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def year(self) -> Optional[int]:
        return self.invoice_date.year if self.invoice_date else None


# =========================
#  Eccezioni specifiche
# =========================


class FatturaPAParseError(Exception):
    """Errore generico durante il parsing di una fattura XML."""


# =========================
#  Funzione principale di parsing
# =========================


def parse_invoice_xml(xml: Union[str, bytes]) -> List[InvoiceDTO]:
    """
    Parsea un contenuto XML FatturaPA e restituisce una lista di InvoiceDTO.

    :raises FatturaPAParseError: XML non valido, root non FatturaElettronica o
                                 DatiGeneraliDocumento assente.
    """
    if not xml:
        raise FatturaPAParseError("Contenuto XML vuoto")

    xml_bytes = xml.encode("utf-8") if isinstance(xml, str) else xml
    parser = etree.XMLParser(recover=False, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xml_bytes, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise FatturaPAParseError(f"XML non valido: {exc}") from exc

    if _localname(root.tag).lower() not in {"fatturaelettronica", "fatturaelettronicabody"}:
        raise FatturaPAParseError(
            f"Documento non riconosciuto come fattura: root={_localname(root.tag)}"
        )

    supplier = _parse_party(root, "CedentePrestatore")
    customer = _parse_party(root, "CessionarioCommittente")

    bodies = root.xpath(".//*[local-name()='FatturaElettronicaBody']") or [root]
    invoices: List[InvoiceDTO] = []

    for idx, body in enumerate(bodies, start=1):
        warnings: List[str] = []
        dto = _parse_body(body, supplier, customer, warnings)
        if len(bodies) > 1:
            warnings.append(f"Body multipli nel file: body_index={idx}/{len(bodies)}")
            dto.xml_content = _single_body_xml(root, idx - 1)
        invoices.append(dto)

    return invoices


def _parse_body(body, supplier: PartyDTO, customer: PartyDTO, warnings: List[str]) -> InvoiceDTO:
    dg_node = _first(body, ".//*[local-name()='DatiGeneraliDocumento']")
    if dg_node is None:
        raise FatturaPAParseError("DatiGeneraliDocumento assente: XML non valido come fattura")

    document_type = _get_text(dg_node, "./*[local-name()='TipoDocumento']") or "TD01"
    invoice_number = _get_text(dg_node, "./*[local-name()='Numero']")
    invoice_date = _to_date(_get_text(dg_node, "./*[local-name()='Data']"))
    currency = _get_text(dg_node, "./*[local-name()='Divisa']") or "EUR"
    total_gross = _to_decimal(_get_text(dg_node, "./*[local-name()='ImportoTotaleDocumento']"))
    rounding = _to_decimal(_get_text(dg_node, "./*[local-name()='Arrotondamento']"))

    causali = [
        (node.text or "").strip()
        for node in dg_node.xpath("./*[local-name()='Causale']")
        if node.text and node.text.strip()
    ]

    total_taxable, total_vat = _parse_vat_totals(body)

    # Calcolo totale con fallback dal riepilogo IVA
    if total_gross is None and total_taxable is not None and total_vat is not None:
        total_gross = total_taxable + total_vat + (rounding or Decimal("0"))
        warnings.append("ImportoTotaleDocumento assente: ricostruito da DatiRiepilogo")

    due_date, terms_days, payment_method = _parse_payment(body, invoice_date, warnings)

    if invoice_number is None:
        warnings.append("Numero documento assente")

    return InvoiceDTO(
        supplier=supplier,
        customer=customer,
        document_type=document_type.upper(),
        invoice_number=invoice_number,
        invoice_date=invoice_date,
        currency=currency,
        total_taxable_amount=total_taxable,
        total_vat_amount=total_vat,
        total_gross_amount=total_gross,
        due_date=due_date,
        payment_terms_days=terms_days,
        payment_method=payment_method,
        description=" ".join(causali) or None,
        warnings=warnings,
    )


# =========================
#  Funzioni di supporto (private)
# =========================


def _localname(tag) -> str:
    """Restituisce il local-name di un tag con/without namespace."""
    if not isinstance(tag, str):
        return ""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _first(node, xpath: str):
    """Restituisce il primo nodo che soddisfa l'XPath, oppure None."""
    res = node.xpath(xpath)
    return res[0] if res else None


def _get_text(node, xpath: str) -> Optional[str]:
    """Restituisce il testo del primo nodo trovato, ripulito, oppure None."""
    if node is None:
        return None
    target = _first(node, xpath)
    if target is None or target.text is None:
        return None
    text = target.text.strip()
    return text or None


def _to_decimal(value: Optional[str]) -> Optional[Decimal]:
    """Converte una stringa in Decimal, restituendo None se vuota o non valida."""
    if not value:
        return None
    try:
        return Decimal(value.replace(",", "."))
    except (InvalidOperation, AttributeError):
        return None


def _to_int(value: Optional[str]) -> Optional[int]:
    """Converte una stringa in int, restituendo None in caso di errore."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _to_date(value: Optional[str]) -> Optional[date]:
    """Converte una stringa 'YYYY-MM-DD' in date, restituendo None se non valida."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _parse_party(root, tag: str) -> PartyDTO:
    node = _first(root, f".//*[local-name()='{tag}']")
    if node is None:
        return PartyDTO()

    denominazione = _get_text(node, ".//*[local-name()='Denominazione']")
    nome = _get_text(node, ".//*[local-name()='Nome']")
    cognome = _get_text(node, ".//*[local-name()='Cognome']")
    name = denominazione or " ".join(filter(None, [nome, cognome])).strip() or None

    vat_number = _get_text(node, ".//*[local-name()='IdFiscaleIVA']/*[local-name()='IdCodice']")
    fiscal_code = _get_text(node, ".//*[local-name()='CodiceFiscale']")

    return PartyDTO(name=name, vat_number=vat_number, fiscal_code=fiscal_code)


def _parse_vat_totals(body) -> tuple[Optional[Decimal], Optional[Decimal]]:
    """Somma imponibili e imposte di DatiRiepilogo."""
    nodes = body.xpath(".//*[local-name()='DatiRiepilogo']")
    if not nodes:
        return None, None

    taxable = Decimal("0")
    vat = Decimal("0")
    for node in nodes:
        taxable += _to_decimal(_get_text(node, "./*[local-name()='ImponibileImporto']")) or Decimal("0")
        vat += _to_decimal(_get_text(node, "./*[local-name()='Imposta']")) or Decimal("0")
    return taxable, vat


def _parse_payment(
    body, invoice_date: Optional[date], warnings: List[str]
) -> tuple[Optional[date], Optional[int], Optional[str]]:
    """
    Estrae dal primo DettaglioPagamento:
    - data di scadenza (DataScadenzaPagamento)
    - giorni di pagamento (GiorniTerminiPagamento, altrimenti scadenza - data fattura)
    - modalità di pagamento (ModalitaPagamento, es. MP05)
    """
    p_node = _first(body, ".//*[local-name()='DettaglioPagamento']")
    if p_node is None:
        return None, None, None

    due_date = _to_date(_get_text(p_node, "./*[local-name()='DataScadenzaPagamento']"))
    terms_days = _to_int(_get_text(p_node, "./*[local-name()='GiorniTerminiPagamento']"))
    method = _get_text(p_node, "./*[local-name()='ModalitaPagamento']")

    if terms_days is not None and terms_days < 0:
        warnings.append(f"GiorniTerminiPagamento negativo ({terms_days}): ignorato")
        terms_days = None

    if terms_days is None and due_date and invoice_date and due_date >= invoice_date:
        terms_days = (due_date - invoice_date).days

    return due_date, terms_days, method


def _single_body_xml(root, body_position: int) -> str:
    """
    Serializza il file tenendo l'header e il solo body in posizione ``body_position``.

    Ogni documento di un lotto ha così un XML proprio, distinto da quello
    degli altri documenti dello stesso file.
    """
    doc = copy.deepcopy(root)
    for position, body in enumerate(doc.xpath(".//*[local-name()='FatturaElettronicaBody']")):
        if position != body_position:
            body.getparent().remove(body)
    return etree.tostring(doc, encoding="unicode")
