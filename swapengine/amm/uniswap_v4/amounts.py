"""Conversion between human-decimal amounts and raw token base units.

All conversions run under a high-precision Decimal context so uint256-sized
values never pick up rounding artifacts.
"""

from __future__ import annotations

import decimal
import re
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

import structlog

from swapengine.errors import MalformedAmount

logger = structlog.get_logger()

# 78 digits of precision: enough for uint256 values (up to ~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)

_DECIMAL_PATTERN = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def parse_units(value: str, decimals: int) -> int:
    """Parse a human-decimal string (e.g. "1.5") into raw base units.

    Digits beyond the token's precision are rounded half-up.

    Raises:
        MalformedAmount: If value is not a non-negative decimal number
    """
    text = value.strip() if isinstance(value, str) else ""
    if not _DECIMAL_PATTERN.match(text):
        raise MalformedAmount(f"Not a decimal amount: {value!r}")

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        scaled = Decimal(text).scaleb(decimals)
        return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_units(raw: int, decimals: int) -> str:
    """Format raw base units as a minimal decimal string (e.g. "1.5")."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        text = format(Decimal(raw).scaleb(-decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def to_decimal(raw: int, decimals: int) -> Decimal:
    """Raw base units as an exact Decimal in human units."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return Decimal(raw).scaleb(-decimals)


def parse_amount(value: str, decimals: int, *, strict: bool = False) -> int:
    """Parse an amount given either as a human decimal or as raw units.

    Tries a decimal string first (scaled by decimals), then a raw integer
    literal (``int(value, 0)``, so "0x10" works). Anything else is coerced
    to zero with a warning unless strict is set.

    Args:
        value: Amount string supplied by the caller
        decimals: Decimal count of the token the amount is denominated in
        strict: Raise instead of coercing unparsable input to zero

    Raises:
        MalformedAmount: If strict and the value cannot be parsed
    """
    try:
        return parse_units(value, decimals)
    except MalformedAmount:
        pass

    try:
        raw = int(value.strip(), 0)
        if raw >= 0:
            return raw
    except (AttributeError, ValueError):
        pass

    if strict:
        raise MalformedAmount(f"Unparsable amount: {value!r}")

    logger.warning("amount_parse_failed_defaulting_to_zero", value=value, decimals=decimals)
    return 0


def format_token_amount(raw: int, decimals: int, max_decimals: int = 6) -> str:
    """Format raw units for display, truncated to max_decimals places."""
    if raw == 0:
        return "0"
    amount = to_decimal(raw, decimals)
    smallest = Decimal(1).scaleb(-max_decimals)
    if amount < smallest:
        return f"<{format(smallest, 'f')}"
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        text = format(amount.quantize(smallest, rounding=ROUND_DOWN), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_usd(amount: float) -> str:
    """Compact USD display ("$1.2K", "$3.4M", "<$0.01")."""
    if amount == 0:
        return "$0"
    if amount < 0.01:
        return "<$0.01"
    if amount >= 1_000_000:
        return f"${amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"${amount / 1_000:.1f}K"
    return f"${amount:.2f}"


__all__ = [
    "DECIMAL_HIGH_PREC_CONTEXT",
    "parse_units",
    "format_units",
    "to_decimal",
    "parse_amount",
    "format_token_amount",
    "format_usd",
]
