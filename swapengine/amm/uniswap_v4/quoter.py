"""UniswapV4 quote engine.

Quotes are computed locally from StateView pool state. A failed read is
replaced by a documented default; when no state can be read at all the
engine falls back to a 1:1 simulation so callers always get a best-effort
quote. Simulated quotes are flagged with QuoteSource.SIMULATED.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

import structlog

from swapengine.cache import TTLCache
from swapengine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from swapengine.errors import StateUnavailable
from swapengine.models.quote import Quote, QuoteSource, apply_slippage
from swapengine.models.token import Token
from swapengine.tokens import DEFAULT_REGISTRY, TokenRegistry

from .amounts import parse_amount, to_decimal
from .constants import DEFAULT_LIQUIDITY, FEE_DENOMINATOR, V4_SWAP_GAS_ESTIMATE
from .pool_key import PoolKey, build_pool_key, pool_identifier
from .state import DEFAULT_SLOT0, PoolState, StateReader
from .swap_math import fee_amount, linear_amount_out, price_impact_percent, single_tick_swap

logger = structlog.get_logger()


class QuoteEngine:
    """Computes exact-input swap quotes for V4 pools.

    Results are cached by (token_in, token_out, amount_in, fee) for
    config.quote_cache_ttl seconds. Simulated quotes are never cached so a
    recovered RPC is picked up on the next request.
    """

    def __init__(
        self,
        state_reader: StateReader | None = None,
        registry: TokenRegistry = DEFAULT_REGISTRY,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the quote engine.

        Args:
            state_reader: Pool state source. If None, every quote is simulated.
            registry: Token and pool registry used to build pool keys
            config: Engine configuration (TTL, timeouts, behavior flags)
            clock: Monotonic clock for the cache
        """
        self.state_reader = state_reader
        self.registry = registry
        self.config = config
        self.cache: TTLCache[Quote] = TTLCache(config.quote_cache_ttl, clock)

    async def get_quote(
        self,
        token_in: Token,
        token_out: Token,
        amount_in: str,
        fee: int | None = None,
    ) -> Quote | None:
        """Quote selling amount_in of token_in for token_out.

        Args:
            token_in: Token being sold
            token_out: Token being bought
            amount_in: Human-decimal or raw integer amount string
            fee: Pin the pool fee tier (None = configured pool or 3000)

        Returns:
            Quote, or None if the tokens are identical

        Raises:
            ConfigNotFound: If require_known_pool is set and the pair has no pool
            MalformedAmount: If reject_malformed_amounts is set and amount_in is unparsable
        """
        if token_in == token_out:
            logger.warning("quote_identical_tokens", token=token_in.symbol)
            return None

        cache_key = (token_in.key, token_out.key, amount_in, fee)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        if self.config.require_known_pool:
            self.registry.require_pool_config(token_in.address, token_out.address, fee)

        pool_key = build_pool_key(token_in, token_out, fee, self.registry)
        pool_id = pool_identifier(pool_key)
        amount_raw = parse_amount(
            amount_in, token_in.decimals, strict=self.config.reject_malformed_amounts
        )

        state, source = await self._read_state(pool_id)
        if state is None:
            logger.warning(
                "v4_quote_falling_back_to_simulation",
                pool_id=pool_id,
                token_in=token_in.symbol,
                token_out=token_out.symbol,
            )
            return self._simulate(token_in, token_out, amount_raw, pool_key.fee)

        quote = self._quote_from_state(token_in, token_out, amount_raw, pool_key, state, source)
        self.cache.set(cache_key, quote)

        logger.debug(
            "v4_quote_computed",
            pool_id=pool_id,
            amount_in=amount_raw,
            amount_out=quote.amount_out,
            price_impact=quote.price_impact_percent,
            source=source.value,
        )
        return quote

    async def get_market_price(self, token_in: Token, token_out: Token) -> float:
        """Spot price as token_out received for one whole token_in.

        Raises:
            StateUnavailable: If no quote can be produced or the quote was
                not computed entirely from live pool state (simulated or
                defaulted reads).
        """
        quote = await self.get_quote(token_in, token_out, "1")
        if quote is None:
            raise StateUnavailable(
                f"Failed to get market price for {token_in.symbol}/{token_out.symbol}: "
                "no quote available"
            )
        if quote.source != QuoteSource.ONCHAIN:
            raise StateUnavailable(
                f"Failed to get market price for {token_in.symbol}/{token_out.symbol}: "
                f"pool state incomplete ({quote.source.value})"
            )
        return float(to_decimal(quote.amount_out, token_out.decimals))

    def clear_cache(self) -> None:
        self.cache.clear()

    def invalidate_pair(self, token_a: Token, token_b: Token) -> int:
        """Drop cached quotes for the pair in either direction."""
        pair = {token_a.key, token_b.key}
        return self.cache.discard_where(lambda key: {key[0], key[1]} == pair)

    async def _read_state(self, pool_id: str) -> tuple[PoolState | None, QuoteSource]:
        """Read slot0 and liquidity concurrently, substituting defaults per read.

        Returns (None, SIMULATED) when neither read succeeds.
        """
        if self.state_reader is None:
            return None, QuoteSource.SIMULATED

        timeout = self.config.rpc_timeout
        slot0_result, liquidity_result = await asyncio.gather(
            asyncio.wait_for(self.state_reader.get_slot0(pool_id), timeout=timeout),
            asyncio.wait_for(self.state_reader.get_liquidity(pool_id), timeout=timeout),
            return_exceptions=True,
        )

        slot0_failed = isinstance(slot0_result, BaseException)
        liquidity_failed = isinstance(liquidity_result, BaseException)
        if slot0_failed and liquidity_failed:
            logger.warning(
                "v4_state_unreachable",
                pool_id=pool_id,
                slot0_error=str(slot0_result),
                liquidity_error=str(liquidity_result),
            )
            return None, QuoteSource.SIMULATED

        source = QuoteSource.ONCHAIN
        if slot0_failed:
            logger.warning("v4_slot0_defaulted", pool_id=pool_id, error=str(slot0_result))
            slot0_result = DEFAULT_SLOT0
            source = QuoteSource.DEFAULT_STATE
        if liquidity_failed:
            logger.warning("v4_liquidity_defaulted", pool_id=pool_id, error=str(liquidity_result))
            liquidity_result = DEFAULT_LIQUIDITY
            source = QuoteSource.DEFAULT_STATE

        return PoolState.from_reads(slot0_result, liquidity_result), source

    def _quote_from_state(
        self,
        token_in: Token,
        token_out: Token,
        amount_in: int,
        pool_key: PoolKey,
        state: PoolState,
        source: QuoteSource,
    ) -> Quote:
        zero_for_one = pool_key.zero_for_one(token_in.address)
        amount_out = linear_amount_out(amount_in, state.sqrt_price_x96, zero_for_one, pool_key.fee)
        depth_out, sqrt_after = single_tick_swap(
            amount_in, state.sqrt_price_x96, state.liquidity, zero_for_one, pool_key.fee
        )
        return Quote(
            amount_in=amount_in,
            amount_out=amount_out,
            price_impact_percent=price_impact_percent(amount_out, depth_out),
            minimum_received=apply_slippage(amount_out, self.config.default_slippage_percent),
            fee_amount=fee_amount(amount_in, pool_key.fee),
            route=(token_in.symbol, token_out.symbol),
            gas_estimate=V4_SWAP_GAS_ESTIMATE,
            sqrt_price_x96_after=sqrt_after,
            source=source,
        )

    def _simulate(self, token_in: Token, token_out: Token, amount_in: int, fee: int) -> Quote:
        """1:1 nominal price in human units with the pool fee applied."""
        amount_out = (
            amount_in
            * 10**token_out.decimals
            * (FEE_DENOMINATOR - fee)
            // (10**token_in.decimals * FEE_DENOMINATOR)
        )
        return Quote(
            amount_in=amount_in,
            amount_out=amount_out,
            price_impact_percent=0.0,
            minimum_received=apply_slippage(amount_out, self.config.default_slippage_percent),
            fee_amount=fee_amount(amount_in, fee),
            route=(token_in.symbol, token_out.symbol),
            gas_estimate=V4_SWAP_GAS_ESTIMATE,
            sqrt_price_x96_after=0,
            source=QuoteSource.SIMULATED,
        )


__all__ = ["QuoteEngine"]
