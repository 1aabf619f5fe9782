"""Swap execution facade.

Ties the quote engine, the action-plan encoder and the signer together:
quote a swap, then validate, encode and submit it through the Universal
Router.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from swapengine.amm.uniswap_v4.amounts import parse_amount
from swapengine.amm.uniswap_v4.constants import DEFAULT_ACTION_CODES, PERIPHERY_ACTION_CODES
from swapengine.amm.uniswap_v4.encoding import (
    SwapEncodingParams,
    build_router_envelope,
    encode_execute_calldata,
    encode_swap,
)
from swapengine.amm.uniswap_v4.pool_key import build_pool_key
from swapengine.amm.uniswap_v4.quoter import QuoteEngine
from swapengine.cache import TTLCache
from swapengine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from swapengine.errors import (
    EngineError,
    InvalidSwapParams,
    MalformedAmount,
    NotConnected,
    StateUnavailable,
    SwapExecutionFailed,
)
from swapengine.models.quote import Quote
from swapengine.models.token import Token
from swapengine.models.types import UINT128_MAX
from swapengine.tokens import DEFAULT_REGISTRY, TokenRegistry

from .signer import TransactionRequest, TransactionSigner

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapParams:
    """A user's swap request.

    Attributes:
        token_in: Token being sold
        token_out: Token being bought
        amount_in: Human-decimal amount of token_in
        slippage_tolerance: Accepted slippage in percent (0.5 = 0.5%)
        deadline: Unix deadline override (None = now + deadline window)
    """

    token_in: Token
    token_out: Token
    amount_in: str
    slippage_tolerance: float = 0.5
    deadline: int | None = None


class SwapExecutor:
    """Quotes and submits single-hop V4 swaps."""

    def __init__(
        self,
        quote_engine: QuoteEngine,
        signer: TransactionSigner,
        registry: TokenRegistry = DEFAULT_REGISTRY,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        clock: Callable[[], float] = time.time,
        cache_clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the executor.

        Args:
            quote_engine: Source of quotes
            signer: Wallet collaborator that signs and broadcasts
            registry: Token and pool registry
            config: Engine configuration
            clock: Wall clock used for swap deadlines
            cache_clock: Monotonic clock for the quote cache
        """
        self.quote_engine = quote_engine
        self.signer = signer
        self.registry = registry
        self.config = config
        self._clock = clock
        self.cache: TTLCache[Quote] = TTLCache(config.quote_cache_ttl, cache_clock)
        self.action_codes = (
            PERIPHERY_ACTION_CODES if config.use_periphery_action_codes else DEFAULT_ACTION_CODES
        )

    async def get_quote(self, params: SwapParams) -> Quote:
        """Quote a swap with the caller's slippage tolerance applied.

        Raises:
            StateUnavailable: If the quote engine produces no quote
        """
        key = (params.token_in.key, params.token_out.key, params.amount_in)
        quote = self.cache.get(key)
        if quote is None:
            quote = await self.quote_engine.get_quote(
                params.token_in, params.token_out, params.amount_in
            )
            if quote is None:
                raise StateUnavailable(
                    f"No quote available for {params.token_in.symbol}/{params.token_out.symbol}"
                )
            if not quote.is_simulated:
                self.cache.set(key, quote)
        return quote.with_slippage(params.slippage_tolerance)

    def invalidate_pair(self, token_a: Token, token_b: Token) -> int:
        pair = {token_a.key, token_b.key}
        return self.cache.discard_where(lambda key: {key[0], key[1]} == pair)

    async def execute_swap(self, params: SwapParams, quote: Quote, signer_address: str) -> str:
        """Validate, encode and submit a swap.

        Args:
            params: The swap request
            quote: Quote whose minimum_received becomes the on-chain floor
            signer_address: Wallet submitting the swap

        Returns:
            Transaction id reported by the signer

        Raises:
            NotConnected: If signer_address is empty
            InvalidSwapParams: If token_in and token_out are the same
            MalformedAmount: If amount_in does not parse to a positive
                amount or the quote's minimum_received is not positive
            StateUnavailable: If the quote is a simulation rather than a
                live price
            ConfigNotFound: If the pair has no configured pool
            SwapExecutionFailed: If the signer reports an error or times out
        """
        if not signer_address:
            raise NotConnected("No wallet connected")
        if params.token_in == params.token_out:
            raise InvalidSwapParams(
                f"Cannot swap {params.token_in.symbol} for itself"
            )

        amount_in = parse_amount(params.amount_in, params.token_in.decimals, strict=True)
        if amount_in <= 0 or amount_in > UINT128_MAX:
            raise MalformedAmount(f"Swap amount must be positive: {params.amount_in!r}")
        if quote.minimum_received <= 0:
            raise MalformedAmount(
                f"Minimum received must be positive, got {quote.minimum_received}"
            )
        if quote.is_simulated:
            raise StateUnavailable(
                f"Refusing to submit a simulated quote for "
                f"{params.token_in.symbol}/{params.token_out.symbol}"
            )

        pool_config = self.registry.require_pool_config(
            params.token_in.address, params.token_out.address
        )
        pool_key = build_pool_key(
            params.token_in, params.token_out, pool_config.fee, self.registry
        )
        encoded = encode_swap(
            SwapEncodingParams(
                pool_key=pool_key,
                zero_for_one=pool_key.zero_for_one(params.token_in.address),
                amount_in=amount_in,
                min_amount_out=min(quote.minimum_received, UINT128_MAX),
            ),
            self.action_codes,
        )
        commands, inputs = build_router_envelope(encoded)
        deadline = (
            params.deadline
            if params.deadline is not None
            else int(self._clock()) + self.config.deadline_window
        )
        request = TransactionRequest(
            to=self.config.universal_router_address,
            data=encode_execute_calldata(commands, inputs, deadline),
            from_address=signer_address,
            chain_id=self.config.chain_id,
            args=(commands, tuple(inputs), deadline),
        )

        logger.info(
            "swap_submitting",
            token_in=params.token_in.symbol,
            token_out=params.token_out.symbol,
            amount_in=amount_in,
            min_amount_out=quote.minimum_received,
            fee=pool_key.fee,
            deadline=deadline,
        )

        try:
            result = await asyncio.wait_for(
                self.signer.send_transaction(request), timeout=self.config.signer_timeout
            )
        except asyncio.TimeoutError as e:
            logger.warning("swap_signer_timeout", timeout=self.config.signer_timeout)
            raise SwapExecutionFailed(
                f"signer did not respond within {self.config.signer_timeout}s"
            ) from e
        except EngineError:
            raise
        except Exception as e:
            logger.warning("swap_signer_error", error=str(e))
            raise SwapExecutionFailed(str(e)) from e

        if not result.succeeded:
            reason = result.error or f"signer returned status {result.status!r}"
            logger.warning("swap_rejected", reason=reason)
            raise SwapExecutionFailed(reason)

        # Balances moved, so cached prices for this pair are stale
        self.invalidate_pair(params.token_in, params.token_out)
        self.quote_engine.invalidate_pair(params.token_in, params.token_out)

        logger.info(
            "swap_submitted",
            transaction_id=result.transaction_id,
            token_in=params.token_in.symbol,
            token_out=params.token_out.symbol,
        )
        return result.transaction_id


__all__ = ["SwapParams", "SwapExecutor"]
