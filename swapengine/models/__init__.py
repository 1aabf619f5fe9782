"""Data models for tokens, quotes and limit orders."""

from swapengine.models.orders import (
    CreateLimitOrderParams,
    ExpirySelector,
    LimitOrder,
    OrderStats,
    OrderStatus,
    PriceSelector,
)
from swapengine.models.quote import Quote, QuoteSource
from swapengine.models.token import Token
from swapengine.models.types import Address, normalize_address

__all__ = [
    # Types
    "Address",
    "normalize_address",
    # Token
    "Token",
    # Quotes
    "Quote",
    "QuoteSource",
    # Limit orders
    "CreateLimitOrderParams",
    "ExpirySelector",
    "LimitOrder",
    "OrderStats",
    "OrderStatus",
    "PriceSelector",
]
