"""Tests for the regex field extractor."""

from app.document_extractor.fields import (
    ExtractedFields,
    detect_currency,
    detect_invoice_type,
    extract_fields,
    extract_invoice_date,
    extract_invoice_number,
    extract_tax_amount,
    extract_total_amount,
    extract_vendor_name,
    parse_amount,
)
from app.schemas.extraction import Currency, InvoiceType
from tests.samples import SAMPLE_INVOICE_TEXT


class TestParseAmount:
    def test_thousands_separator(self):
        assert parse_amount("1,200.00") == 1200.0

    def test_garbage_is_none(self):
        assert parse_amount("abc") is None
        assert parse_amount("") is None
        assert parse_amount(None) is None

    def test_non_finite_is_none(self):
        assert parse_amount("inf") is None
        assert parse_amount("nan") is None


class TestInvoiceNumber:
    def test_hash_label(self):
        assert extract_invoice_number("INVOICE #INV-2024-001") == "INV-2024-001"

    def test_number_label(self):
        assert extract_invoice_number("Invoice Number: 88231") == "88231"

    def test_no_label(self):
        assert extract_invoice_number("Invoice No. A-77/2024") == "A-77/2024"

    def test_bare_inv_token(self):
        assert extract_invoice_number("Ref INV-0042 attached") == "INV-0042"

    def test_notes_are_not_a_number_label(self):
        assert extract_invoice_number("Invoice notes: none") is None

    def test_label_in_prose_needs_a_digit(self):
        assert extract_invoice_number("Please quote the invoice number on your payment") is None

    def test_prose_label_before_real_number(self):
        text = "Quote the invoice number on payment.\nInvoice Number: 88231"
        assert extract_invoice_number(text) == "88231"

    def test_absent(self):
        assert extract_invoice_number("Hello world") is None


class TestInvoiceDate:
    def test_iso(self):
        assert extract_invoice_date("Date: 2024-03-15") == "2024-03-15"

    def test_day_first_is_normalized(self):
        assert extract_invoice_date("Issued 5/3/2024") == "2024-03-05"

    def test_iso_wins_over_day_first(self):
        assert extract_invoice_date("Due 01.04.2024, issued 2024/03/15") == "2024-03-15"

    def test_absent(self):
        assert extract_invoice_date("no date here") is None


class TestAmounts:
    def test_total_labeled(self):
        assert extract_total_amount("Total: $1,200.00") == 1200.0

    def test_amount_due(self):
        assert extract_total_amount("Amount due 350.50") == 350.5

    def test_subtotal_is_not_total(self):
        assert extract_total_amount("Subtotal 100\nGrand Total: 120.00") == 120.0

    def test_currency_prefixed_fallback(self):
        assert extract_total_amount("Charged €42.10 today") == 42.1

    def test_total_absent(self):
        assert extract_total_amount("nothing to see") is None

    def test_comma_after_total_label_falls_back(self):
        assert extract_total_amount("Total, $500.00") == 500.0
        assert extract_total_amount("Total, including VAT: $1,190.00") == 1190.0
        assert extract_fields("Total, $500.00").total_amount == 500.0

    def test_tax_labeled(self):
        assert extract_tax_amount("VAT: $96.00") == 96.0

    def test_tax_with_rate_in_label(self):
        assert extract_tax_amount("VAT (19%): €190.00") == 190.0

    def test_tax_rate_alone_is_not_an_amount(self):
        assert extract_tax_amount("VAT 19%") is None


class TestVendorName:
    def test_vendor_label(self):
        assert extract_vendor_name("Vendor: Ryanair DAC\nTotal: 10") == "Ryanair DAC"

    def test_from_label(self):
        assert extract_vendor_name("From: Globex Corp") == "Globex Corp"

    def test_letterhead_fallback(self):
        assert extract_vendor_name("\n  \nAcme Supplies Ltd\nTotal: 10") == "Acme Supplies Ltd"

    def test_long_first_line_is_rejected(self):
        assert extract_vendor_name("x" * 80) is None

    def test_empty(self):
        assert extract_vendor_name("") is None


class TestCurrencyAndType:
    def test_euro_beats_dollar(self):
        assert detect_currency("€10 or $12") == Currency.EUR

    def test_pound(self):
        assert detect_currency("£5.00") == Currency.GBP

    def test_default_usd(self):
        assert detect_currency("10.00") == Currency.USD

    def test_services(self):
        assert detect_invoice_type("Consulting fee") == InvoiceType.SERVICES

    def test_goods(self):
        assert detect_invoice_type("Item  Qty  Price") == InvoiceType.GOODS

    def test_other(self):
        assert detect_invoice_type("Hello") == InvoiceType.OTHER


class TestExtractFields:
    def test_sample_invoice(self):
        fields = extract_fields(SAMPLE_INVOICE_TEXT)
        assert fields.vendor_name == "Acme Supplies Ltd"
        assert fields.invoice_number == "INV-2024-001"
        assert fields.invoice_date == "2024-03-15"
        assert fields.total_amount == 1200.0
        assert fields.tax_amount == 96.0
        assert fields.currency == Currency.USD
        assert fields.invoice_type == InvoiceType.SERVICES

    def test_empty_text_gives_defaults(self):
        assert extract_fields("") == ExtractedFields()

    def test_to_dict_uses_plain_values(self):
        data = extract_fields(SAMPLE_INVOICE_TEXT).to_dict()
        assert data["currency"] == "USD"
        assert data["invoice_type"] == "services"
        assert data["language"] == "en"
