"""
Tests for the rule banks, receipt structure analyzer and heuristic parser.
"""

from decimal import Decimal

from expense_scanner.parsing import (
    AMOUNT_RULES,
    DATE_RULES,
    MERCHANT_RULES,
    RECEIPT_VOCABULARY,
    HeuristicParser,
    ReceiptAnalyzer,
    collect,
)
from conftest import COFFEE_RECEIPT_TEXT, DOLLAR_INVOICE_TEXT, FIELDLESS_TEXT

PAIRED_TEXT = "ALPHA STORE\n01/02/2024 €10.00\nBETA MARKET\n05/02/2024 €20.00"


class TestRuleBanks:
    """Rules run in priority order, overlapping matches are dropped."""

    def test_total_with_currency_yields_one_candidate(self):
        candidates = collect(AMOUNT_RULES, "Total: €4.50")

        assert [c.value for c in candidates] == ["4.50"]
        assert candidates[0].rule == "euro_prefix"

    def test_dollar_amount_after_label(self):
        candidates = collect(AMOUNT_RULES, DOLLAR_INVOICE_TEXT)

        assert [c.value for c in candidates] == ["85.00"]
        assert candidates[0].rule == "dollar_prefix"

    def test_label_without_currency(self):
        candidates = collect(AMOUNT_RULES, "Sum: 12,30")

        assert [(c.value, c.rule) for c in candidates] == [("12,30", "sum_label")]

    def test_candidates_in_document_order(self):
        candidates = collect(AMOUNT_RULES, "Fuel 20,00 EUR\nParking €5.00")

        assert [c.value for c in candidates] == ["20,00", "5.00"]
        assert [c.rule for c in candidates] == ["eur_code_suffix", "euro_prefix"]

    def test_amount_tokens_ignore_dates_and_long_numbers(self):
        assert collect(AMOUNT_RULES, "Date 12.01.2024 Ref 123456") == []

    def test_thousands_separator(self):
        candidates = collect(AMOUNT_RULES, "Total: $1,234.56")
        assert [c.value for c in candidates] == ["1,234.56"]

    def test_date_rules(self):
        text = "Issued 12/01/2024, due Feb 3, 2024; paid 2024-02-10 and 7 March 2024"
        candidates = collect(DATE_RULES, text)

        assert [c.value for c in candidates] == [
            "12/01/2024", "Feb 3, 2024", "2024-02-10", "7 March 2024"
        ]
        assert [c.rule for c in candidates] == [
            "day_first", "month_name_day", "year_first", "day_month_name"
        ]

    def test_month_rule_needs_real_month_name(self):
        assert collect(DATE_RULES, "Market 12, 2024") == []

    def test_merchant_rules(self):
        text = "ACME SUPPLIES LTD\nInvoice 7\nOK\nVendor: Bright Paper Co\n"
        candidates = collect(MERCHANT_RULES, text)

        assert [c.value for c in candidates] == ["ACME SUPPLIES LTD", "Bright Paper Co"]
        assert [c.rule for c in candidates] == ["all_caps_line", "labeled_line"]


class TestReceiptAnalyzer:
    """Vocabulary detection and positional merchant/total reading."""

    def test_detects_receipt(self):
        signal = ReceiptAnalyzer().detect_receipt(COFFEE_RECEIPT_TEXT)

        assert signal.is_receipt
        assert set(signal.matched_terms) == {"total", "thank you", "€"}
        assert signal.confidence == len(signal.matched_terms) / len(RECEIPT_VOCABULARY)

    def test_invoice_line_is_not_receipt(self):
        signal = ReceiptAnalyzer().detect_receipt(DOLLAR_INVOICE_TEXT)

        assert not signal.is_receipt
        assert 0.0 <= signal.confidence <= 1.0

    def test_terms_count_once(self):
        signal = ReceiptAnalyzer().detect_receipt("total total total TOTAL")

        assert signal.matched_terms == ["total"]
        assert not signal.is_receipt

    def test_empty_text(self):
        signal = ReceiptAnalyzer().detect_receipt("")

        assert not signal.is_receipt
        assert signal.confidence == 0.0

    def test_labeled_total(self):
        text = (
            "CORNER SHOP LIMITED\nItem A 2.00\nItem B 3.50\n"
            "Subtotal 5.50\nTax 0.50\nTotal 6.00\nCard"
        )
        structure = ReceiptAnalyzer().parse_structure(text)

        assert structure.merchant == "CORNER SHOP LIMITED"
        assert structure.amount == Decimal("6.00")
        assert structure.amount_rule == "labeled_total"

    def test_largest_amount_without_label(self):
        text = "CORNER SHOP\nMilk 1.20\nBread 2.45\nEggs 3.10\nCash"
        structure = ReceiptAnalyzer().parse_structure(text)

        assert structure.amount == Decimal("3.10")
        assert structure.amount_rule == "largest_amount"

    def test_implausible_total_is_discarded(self):
        structure = ReceiptAnalyzer().parse_structure("Total 25000.00\nItem 12.00")

        assert structure.amount == Decimal("12.00")
        assert structure.amount_rule == "largest_amount"

    def test_amount_due_and_balance_labels(self):
        text = "Receipt\nItem 3.00\nSubtotal 9.00\nBalance due 0.00\nAmount due 9.00\nCard"
        structure = ReceiptAnalyzer().parse_structure(text)

        assert structure.amount == Decimal("9.00")
        assert structure.amount_rule == "labeled_total"

    def test_balance_label_used_when_last(self):
        structure = ReceiptAnalyzer().parse_structure("SHOP\nItem 2.00\nItem 5.00\nBalance 4.20")

        assert structure.amount == Decimal("4.20")
        assert structure.amount_rule == "labeled_total"

    def test_implausible_label_falls_back_to_earlier_label(self):
        text = "SHOP\nTotal 7.00\nBalance 0.00\nCash"
        structure = ReceiptAnalyzer().parse_structure(text)

        assert structure.amount == Decimal("7.00")
        assert structure.amount_rule == "labeled_total"

    def test_explicit_zero_keyword_threshold(self):
        analyzer = ReceiptAnalyzer(min_keywords=0)

        assert analyzer.min_keywords == 0
        assert analyzer.detect_receipt("no vocabulary here").is_receipt

    def test_merchant_is_longest_leading_line(self):
        text = "12/01/2024\nAB\nBIG STORE LONDON\nTel 0123\nTotal 5.00"
        structure = ReceiptAnalyzer().parse_structure(text)

        assert structure.merchant == "BIG STORE LONDON"

    def test_merchant_only_from_first_five_lines(self):
        text = "1\n2\n3\n4\n5\nA MUCH LONGER MERCHANT NAME"
        assert ReceiptAnalyzer().parse_structure(text).merchant is None

    def test_no_amount(self):
        structure = ReceiptAnalyzer().parse_structure("Thank you for your purchase")

        assert structure.amount is None
        assert structure.amount_rule is None


class TestHeuristicParser:
    """Whole-text parsing with sanity filtering and positional pairing."""

    def test_dollar_invoice_line(self):
        result = HeuristicParser().parse(DOLLAR_INVOICE_TEXT)

        assert result.values == [Decimal("85.00")]
        assert result.dates == []
        assert result.merchants == []

    def test_amounts_outside_sanity_range_discarded(self):
        text = "Call $12345.00 or pay $0.00 now, fee $15.00"
        amounts = HeuristicParser().find_amounts(text)

        assert [c.value for c in amounts] == ["15.00"]

    def test_positional_pairing(self):
        result = HeuristicParser().parse(PAIRED_TEXT)
        pairs = [(value, d.value, m.value) for value, d, m in result.paired()]

        assert pairs == [
            (Decimal("10.00"), "01/02/2024", "ALPHA STORE"),
            (Decimal("20.00"), "05/02/2024", "BETA MARKET"),
        ]

    def test_pairing_with_fewer_dates(self):
        result = HeuristicParser().parse("€10.00 and €20.00 on 01/02/2024")
        pairs = list(result.paired())

        assert pairs[0][1].value == "01/02/2024"
        assert pairs[1][1] is None
        assert pairs[1][2] is None

    def test_nothing_found(self):
        result = HeuristicParser().parse(FIELDLESS_TEXT)

        assert result.is_empty
        assert list(result.paired()) == []

    def test_residual_amount(self):
        parser = HeuristicParser()

        assert parser.residual_amount("reference 42.50 please check") == Decimal("42.50")
        assert parser.residual_amount("Ref 99999.99 then 7.25") == Decimal("7.25")
        assert parser.residual_amount(FIELDLESS_TEXT) is None

    def test_residual_skips_rule_matches(self):
        assert HeuristicParser().residual_amount("$5.00 and 3.00") == Decimal("3.00")
