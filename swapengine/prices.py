"""USD price feed client.

Fetches token prices from a price service exposing

    GET <base_url>/api/prices?symbols=ETH,WLD
    -> {"ETH": {"usd": 4300.0, "last_updated": "..."}, ...}

and caches each symbol for two minutes.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from swapengine.cache import TTLCache

logger = structlog.get_logger()

PRICES_PATH = "/api/prices"
PRICE_CACHE_TTL = 2 * 60.0


class TokenPrice(BaseModel):
    """USD price of one token."""

    usd: float
    last_updated: str = ""


class PriceFeedClient:
    """Client for the USD price service."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        cache_ttl: float = PRICE_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self.cache: TTLCache[TokenPrice] = TTLCache(cache_ttl, clock)

    async def get_prices(self, symbols: list[str]) -> dict[str, TokenPrice]:
        """Prices for the requested symbols.

        Symbols the service does not know are omitted. On a request failure
        the error is logged and only still-cached prices are returned.
        """
        prices: dict[str, TokenPrice] = {}
        missing = []
        for symbol in symbols:
            cached = self.cache.get(symbol)
            if cached is not None:
                prices[symbol] = cached
            elif symbol not in missing:
                missing.append(symbol)

        if not missing:
            return prices

        try:
            data = await self._fetch(missing)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("price_feed_request_failed", symbols=missing, error=str(e))
            return prices

        for symbol in missing:
            entry = data.get(symbol)
            if entry is None:
                continue
            try:
                price = TokenPrice.model_validate(entry)
            except ValidationError as e:
                logger.warning("price_feed_invalid_entry", symbol=symbol, error=str(e))
                continue
            self.cache.set(symbol, price)
            prices[symbol] = price

        logger.debug("price_feed_fetched", requested=len(missing), received=len(prices))
        return prices

    async def get_price(self, symbol: str) -> float | None:
        """USD price of a single symbol, or None if unavailable."""
        prices = await self.get_prices([symbol])
        price = prices.get(symbol)
        return price.usd if price is not None else None

    async def _fetch(self, symbols: list[str]) -> dict:
        url = f"{self.base_url}{PRICES_PATH}"
        params = {"symbols": ",".join(symbols)}
        if self._client is not None:
            response = await self._client.get(url, params=params, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected price response: {type(data).__name__}")
        return data


__all__ = ["TokenPrice", "PriceFeedClient", "PRICE_CACHE_TTL"]
