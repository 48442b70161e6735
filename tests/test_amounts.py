"""Tests for token amount formatting and parsing."""

import pytest

from arkade_wallet.amounts import format_token_amount, parse_token_amount
from arkade_wallet.exceptions import InvalidAmountError


class TestFormatTokenAmount:
    """Tests for format_token_amount()."""

    @pytest.mark.parametrize(
        ("amount", "decimals", "expected"),
        [
            (150_000_000, 8, "1.5"),
            (1, 8, "0.00000001"),
            (100, 2, "1"),
            (12345, 0, "12345"),
            ("2500", 3, "2.5"),
            (0, 8, "0"),
        ],
    )
    def test_defaults(self, amount: int | str, decimals: int, expected: str) -> None:
        assert format_token_amount(amount, decimals) == expected

    def test_keep_trailing_zeros(self) -> None:
        assert format_token_amount(150, 3, trim_trailing_zeros=False) == "0.150"

    def test_always_show_decimals(self) -> None:
        assert format_token_amount(100, 2, always_show_decimals=True) == "1.00"


class TestParseTokenAmount:
    """Tests for parse_token_amount()."""

    @pytest.mark.parametrize(
        ("text", "decimals", "expected"),
        [
            ("1.5", 8, 150_000_000),
            ("  42 ", 0, 42),
            ("0.01", 2, 1),
            ("7", 3, 7000),
        ],
    )
    def test_valid(self, text: str, decimals: int, expected: int) -> None:
        assert parse_token_amount(text, decimals) == expected

    def test_empty(self) -> None:
        with pytest.raises(InvalidAmountError, match="required"):
            parse_token_amount("   ", 2)

    @pytest.mark.parametrize("text", ["-1", "1e5", "+3"])
    def test_signs_and_exponents(self, text: str) -> None:
        with pytest.raises(InvalidAmountError, match="plain number"):
            parse_token_amount(text, 2)

    def test_decimals_on_integer_token(self) -> None:
        with pytest.raises(InvalidAmountError, match="does not support decimals"):
            parse_token_amount("1.5", 0)

    def test_too_many_places(self) -> None:
        with pytest.raises(InvalidAmountError, match="max 2"):
            parse_token_amount("1.234", 2)

    @pytest.mark.parametrize("text", ["abc", "1.", ".5", "1.2.3"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(InvalidAmountError):
            parse_token_amount(text, 8)
