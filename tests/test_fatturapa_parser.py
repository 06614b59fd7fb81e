"""
Test del parser XML FatturaPA.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.parsers.fatturapa_parser import FatturaPAParseError, parse_invoice_xml

from .fixtures import (
    FATTURA_TD01,
    FATTURA_TERMINI_NEGATIVI,
    LOTTO_DUE_FATTURE,
    NOTA_CREDITO_SENZA_TOTALE,
)


class TestParseInvoiceXml:
    def test_general_data(self):
        [dto] = parse_invoice_xml(FATTURA_TD01)
        assert dto.document_type == "TD01"
        assert dto.invoice_number == "FT-12"
        assert dto.invoice_date == date(2025, 1, 15)
        assert dto.year == 2025
        assert dto.currency == "EUR"
        assert dto.description == "Consulenza gennaio"

    def test_totals(self):
        [dto] = parse_invoice_xml(FATTURA_TD01)
        assert dto.total_gross_amount == Decimal("1220.00")
        assert dto.total_taxable_amount == Decimal("1000.00")
        assert dto.total_vat_amount == Decimal("220.00")

    def test_payment_terms_from_due_date(self):
        [dto] = parse_invoice_xml(FATTURA_TD01)
        assert dto.due_date == date(2025, 2, 14)
        assert dto.payment_terms_days == 30
        assert dto.payment_method == "MP05"

    def test_parties(self):
        [dto] = parse_invoice_xml(FATTURA_TD01.encode("utf-8"))
        assert dto.supplier.vat_number == "01234567890"
        assert dto.supplier.name == "Acme S.r.l."
        assert dto.customer.vat_number == "55566677788"
        assert dto.customer.name == "Mario Rossi"

    def test_total_rebuilt_from_summary(self):
        [dto] = parse_invoice_xml(NOTA_CREDITO_SENZA_TOTALE)
        assert dto.document_type == "TD04"
        assert dto.total_gross_amount == Decimal("177.00")
        assert dto.payment_terms_days == 30
        assert any("ImportoTotaleDocumento" in w for w in dto.warnings)

    @pytest.mark.parametrize(
        "xml",
        ["", "<non-chiuso>", "<Ordine><Numero>1</Numero></Ordine>"],
    )
    def test_invalid_documents(self, xml):
        with pytest.raises(FatturaPAParseError):
            parse_invoice_xml(xml)

    def test_body_without_general_data(self):
        with pytest.raises(FatturaPAParseError):
            parse_invoice_xml("<FatturaElettronica><FatturaElettronicaBody/></FatturaElettronica>")

    def test_negative_payment_terms_are_dropped(self):
        [dto] = parse_invoice_xml(FATTURA_TERMINI_NEGATIVI)
        assert dto.payment_terms_days is None
        assert any("GiorniTerminiPagamento negativo" in w for w in dto.warnings)

    def test_batch_file_gives_each_invoice_its_own_xml(self):
        first, second = parse_invoice_xml(LOTTO_DUE_FATTURE)
        assert (first.invoice_number, second.invoice_number) == ("A-100", "B-200")

        assert "A-100" in first.xml_content and "B-200" not in first.xml_content
        assert "B-200" in second.xml_content and "A-100" not in second.xml_content
        # L'header comune resta in entrambi
        assert "Acme S.r.l." in first.xml_content
        assert "Acme S.r.l." in second.xml_content
        assert parse_invoice_xml(first.xml_content)[0].total_gross_amount == Decimal("100.00")

    def test_single_body_keeps_no_separate_xml(self):
        [dto] = parse_invoice_xml(FATTURA_TD01)
        assert dto.xml_content is None
