"""
Validator Tests
===============

Tests for username, amount and title validation.
"""

from decimal import Decimal

import pytest

from lifeos.core.errors import ValidationError
from lifeos.utils.validators import parse_amount, validate_title, validate_username


class TestValidateUsername:
    """Tests for validate_username"""

    def test_lowercases(self):
        assert validate_username("  Jane_Doe42 ", is_public=True) == "jane_doe42"

    def test_blank_private_profile_is_none(self):
        assert validate_username("   ", is_public=False) is None
        assert validate_username(None, is_public=False) is None

    @pytest.mark.parametrize(
        "username, is_public, message",
        [
            ("", True, "Username is required for public profiles"),
            ("ab", False, "Username must be at least 3 characters"),
            ("jane.doe", True, "Only lowercase letters, numbers, and underscores allowed"),
            ("jane doe", False, "Only lowercase letters, numbers, and underscores allowed"),
        ],
    )
    def test_rejects(self, username, is_public, message):
        with pytest.raises(ValidationError) as exc_info:
            validate_username(username, is_public)

        assert exc_info.value.field == "username"
        assert exc_info.value.detail["message"] == message


class TestParseAmount:
    """Tests for parse_amount"""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("12.50", Decimal("12.50")),
            (12.5, Decimal("12.50")),
            (" 3 ", Decimal("3.00")),
        ],
    )
    def test_parses(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "0", "-4", "0.001", "NaN", "Infinity", None])
    def test_rejects(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_amount(raw)

        assert exc_info.value.field == "amount"

    def test_largest_column_value(self):
        assert parse_amount("9999999999.99") == Decimal("9999999999.99")

    @pytest.mark.parametrize("raw", ["1e30", "99999999999999", "10000000000", "9999999999.995"])
    def test_rejects_too_large(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_amount(raw)

        assert exc_info.value.field == "amount"
        assert exc_info.value.detail["message"] == "Amount is too large"


def test_validate_title():
    assert validate_title("  Read a book ") == "Read a book"

    with pytest.raises(ValidationError) as exc_info:
        validate_title("   ", field="question")

    assert exc_info.value.detail["message"] == "Question is required"
