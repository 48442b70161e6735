"""Token amount formatting and parsing in integer base units."""

import re

from arkade_wallet.exceptions import InvalidAmountError

_INTEGER_RE = re.compile(r"^[0-9]+$")
_DECIMAL_RE = re.compile(r"^[0-9]+(\.[0-9]+)?$")


def format_token_amount(
    amount: int | str,
    decimals: int,
    trim_trailing_zeros: bool = True,
    always_show_decimals: bool = False,
) -> str:
    """Render a base-unit amount as a decimal string.

    Examples:
        format_token_amount(150000000, 8) -> "1.5"
        format_token_amount(100, 2, always_show_decimals=True) -> "1.00"
    """
    value = int(amount)
    if decimals <= 0:
        return str(value)

    whole, fraction = divmod(value, 10**decimals)

    if fraction == 0:
        if not always_show_decimals:
            return str(whole)
        return f"{whole}.{'0' * decimals}"

    fraction_str = str(fraction).rjust(decimals, "0")
    if trim_trailing_zeros:
        fraction_str = fraction_str.rstrip("0")
    return f"{whole}.{fraction_str}"


def parse_token_amount(text: str, decimals: int) -> int:
    """Parse a user-entered decimal string into base units.

    Raises:
        InvalidAmountError: On empty input, signs or exponents, malformed
            numbers, or more fractional digits than ``decimals``.
    """
    raw = (text or "").strip()
    if not raw:
        raise InvalidAmountError("Amount is required")

    if re.search(r"[eE+-]", raw):
        raise InvalidAmountError("Amount must be a plain number")

    if decimals <= 0:
        if "." in raw:
            raise InvalidAmountError("This token does not support decimals")
        if not _INTEGER_RE.match(raw):
            raise InvalidAmountError("Invalid amount")
        return int(raw)

    if not _DECIMAL_RE.match(raw):
        raise InvalidAmountError("Invalid amount")

    whole, _, fraction = raw.partition(".")
    if len(fraction) > decimals:
        raise InvalidAmountError(f"Too many decimal places (max {decimals})")

    return int(whole + fraction.ljust(decimals, "0"))
