"""
Unit tests for identifier classification
"""
import pytest

from consulta.domain.identifier import (
    IdentifierKind,
    canonical_tax_id,
    classify,
    format_tax_id,
)


class TestClassify:
    """Structured CNPJ vs free text"""

    @pytest.mark.parametrize("value", [
        "12345678000190",
        "12.345.678/0001-90",
        "12.345.678.0001.90",
        "12-345-678-0001-90",
        "12.345.6780001-90",
        "  12.345.678/0001-90  ",
    ])
    def test_punctuation_variants_share_canonical_form(self, value):
        result = classify(value)

        assert result.kind is IdentifierKind.STRUCTURED_ID
        assert result.is_structured
        assert result.canonical == "12345678000190"

    @pytest.mark.parametrize("value", [
        "1234567800019",        # 13 digits
        "123456780001901",      # 15 digits
        "12.345.678/0001",      # incomplete mask
        "12 345 678 0001 90",   # spaces are not separators
        "Acme",
        "PED001",
    ])
    def test_other_input_is_free_text(self, value):
        result = classify(value)

        assert result.kind is IdentifierKind.FREE_TEXT
        assert result.canonical == value.strip()

    def test_free_text_is_trimmed(self):
        assert classify("  Acme Ltda ").canonical == "Acme Ltda"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_blank_input_is_rejected(self, value):
        with pytest.raises(ValueError):
            classify(value)


def test_canonical_tax_id_strips_everything_but_digits():
    assert canonical_tax_id("12.345.678/0001-90") == "12345678000190"
    assert canonical_tax_id("") == ""
    assert canonical_tax_id(None) == ""


def test_canonical_forms_of_stored_and_typed_values_are_equal():
    assert classify("12.345.678/0001-90").canonical == canonical_tax_id("12345678000190")


def test_format_tax_id():
    assert format_tax_id("12345678000190") == "12.345.678/0001-90"
    assert format_tax_id("123") == "123"
