"""
Test di classificazione TipoDocumento, importo con segno e data flusso.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.services.invoice_sync import (
    DEFAULT_RULES,
    InvoiceTypeClassifier,
    InvoiceTypeCode,
    SyncRules,
    TotalAmountResolver,
    build_rules,
    resolve_flow_date,
)


class TestInvoiceTypeClassifier:
    """Lookup TipoDocumento -> segno, esclusione, causale."""

    def setup_method(self):
        self.classifier = InvoiceTypeClassifier()

    @pytest.mark.parametrize("code", ["TD04", "TD08"])
    def test_credit_notes_are_negative(self, code):
        assert self.classifier.classify(code).is_negative_amount is True

    @pytest.mark.parametrize("code", ["TD20", "TD21", "TD22"])
    def test_self_invoices_are_excluded(self, code):
        classification = self.classifier.classify(code)
        assert classification.is_excluded is True
        assert classification.is_negative_amount is False

    @pytest.mark.parametrize(
        "code, reason",
        [
            ("TD01", "FATT_ATT"),
            ("TD02", "FATT_ACC"),
            ("TD04", "NOTA_CR"),
            ("TD05", "NOTA_DB"),
            ("TD06", "FATT_ATT"),
            ("TD07", "FATT_SEMPL"),
            ("TD08", "NOTA_CR"),
        ],
    )
    def test_reason_codes(self, code, reason):
        assert self.classifier.classify(code).suggested_reason_code == reason

    def test_unknown_code_falls_back_to_default(self):
        classification = self.classifier.classify("TD99")
        assert classification.is_negative_amount is False
        assert classification.is_excluded is False
        assert classification.suggested_reason_code == "FATT_ATT"

    def test_code_is_normalized(self):
        assert self.classifier.classify(" td04 ").suggested_reason_code == "NOTA_CR"

    def test_every_catalog_code_is_classified(self):
        for code in InvoiceTypeCode:
            classification = self.classifier.classify(code.value)
            assert classification.suggested_reason_code

    def test_parse_unknown_code_returns_none(self):
        assert InvoiceTypeCode.parse("TD13") is None
        assert InvoiceTypeCode.parse("td16") is InvoiceTypeCode.TD16


class TestSyncRules:
    def test_default_rules_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_RULES.reason_codes["TD01"] = "ALTRO"  # type: ignore[index]

    def test_custom_rules_per_tenant(self):
        rules = SyncRules(negative_type_codes={"td04", "TD08", "TD09"})
        classifier = InvoiceTypeClassifier(rules)
        assert classifier.classify("TD09").is_negative_amount is True
        # Le regole di default restano invariate
        assert InvoiceTypeClassifier().classify("TD09").is_negative_amount is False

    def test_status_candidates_override(self):
        rules = build_rules({"paid": ["Incassato"]})
        assert rules.candidates_for("paid") == ("Incassato",)
        assert rules.candidates_for("draft") == DEFAULT_RULES.candidates_for("draft")

    def test_build_rules_without_overrides_returns_defaults(self):
        assert build_rules(None) is DEFAULT_RULES


class TestTotalAmountResolver:
    def setup_method(self):
        self.resolver = TotalAmountResolver()
        self.classifier = InvoiceTypeClassifier()

    @pytest.mark.parametrize("code", ["TD04", "TD08"])
    @pytest.mark.parametrize("amount", ["0.01", "300.00", "98765.43"])
    def test_negative_codes_produce_negative_amount(self, code, amount):
        result = self.resolver.resolve(Decimal(amount), self.classifier.classify(code))
        assert result < 0
        assert abs(result) == Decimal(amount)

    def test_positive_codes_keep_amount(self):
        result = self.resolver.resolve(Decimal("1200.00"), self.classifier.classify("TD01"))
        assert result == Decimal("1200.00")

    def test_sign_comes_only_from_classification(self):
        """Un totale già negativo su una fattura TD01 viene registrato in positivo."""
        result = self.resolver.resolve(Decimal("-50.00"), self.classifier.classify("TD01"))
        assert result == Decimal("50.00")


class TestResolveFlowDate:
    def test_zero_days_returns_issue_date(self):
        assert resolve_flow_date(date(2025, 1, 15), 0) == date(2025, 1, 15)

    def test_calendar_days_across_month_end(self):
        assert resolve_flow_date(date(2025, 1, 31), 30) == date(2025, 3, 2)

    def test_non_decreasing_in_days(self):
        issue = date(2024, 2, 10)
        dates = [resolve_flow_date(issue, days) for days in (0, 1, 30, 60, 90, 365)]
        assert dates == sorted(dates)

    def test_negative_days_rejected(self):
        with pytest.raises(ValueError):
            resolve_flow_date(date(2025, 1, 15), -1)
