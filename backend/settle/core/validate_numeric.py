"""Numeric Bounds Validation — prices and amounts as unbounded ints capped at 2^128.

Invariants:
    - Accepted values satisfy 0 <= v < MAX_ASSET_AMOUNT (2^128)
    - Only ASCII decimal digits are accepted; no sign, whitespace or `_` separators
    - Digit strings longer than any in-bound value are rejected before int()
      conversion (leading zeros are allowed and ignored)
    - Fail fast: the first violation raises, nothing is aggregated

Design Decisions:
    - Python int over Decimal: exact, no precision loss at 2^128
    - Explicit regex before int(): int() would also accept " 5", "+5" and "1_000"
"""

import re

from settle.core.domain_types import MAX_ASSET_AMOUNT, Price
from settle.core.errors import AmountInvalidError, PriceInvalidError


PRICE_PATTERN = re.compile(r"^([0-9]+)/([0-9]+)$")
_DIGITS = re.compile(r"^[0-9]+$")

# 2^128 - 1 has 39 decimal digits
_MAX_SIGNIFICANT_DIGITS: int = len(str(MAX_ASSET_AMOUNT - 1))


def _parse_bounded(digits: str) -> int | None:
    """Parse a decimal digit string into [0, 2^128), or None when out of range."""
    if not _DIGITS.fullmatch(digits):
        return None
    significant = digits.lstrip("0") or "0"
    if len(significant) > _MAX_SIGNIFICANT_DIGITS:
        return None
    value = int(significant, 10)
    if value < 0 or value >= MAX_ASSET_AMOUNT:
        return None
    return value


def validate_price(raw: str) -> Price:
    """Validate a price of the form pB/pQ. Raises PriceInvalidError."""
    m = PRICE_PATTERN.fullmatch(raw) if isinstance(raw, str) else None
    if m is None:
        raise PriceInvalidError(str(raw))

    base = _parse_bounded(m.group(1))
    if base is None:
        raise PriceInvalidError(m.group(1), side="base")

    quote = _parse_bounded(m.group(2))
    if quote is None:
        raise PriceInvalidError(m.group(2), side="quote")

    return Price(base=base, quote=quote)


def validate_amount(raw: str) -> int:
    """Validate an asset amount. Raises AmountInvalidError."""
    value = _parse_bounded(raw) if isinstance(raw, str) else None
    if value is None:
        raise AmountInvalidError(str(raw))
    return value
