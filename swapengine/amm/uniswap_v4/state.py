"""UniswapV4 pool state readers.

Readers fetch slot0 and liquidity from the StateView contract keyed by pool
identifier. Failures surface as StateUnavailable so the quote engine can
substitute documented defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import structlog

from swapengine.constants import STATE_VIEW
from swapengine.errors import StateUnavailable

from .constants import DEFAULT_LIQUIDITY, DEFAULT_SQRT_PRICE_X96, STATE_VIEW_ABI, V4_FEE_MEDIUM

logger = structlog.get_logger()


@dataclass(frozen=True)
class Slot0:
    """Price slot of a V4 pool."""

    sqrt_price_x96: int  # Current sqrt(price) * 2^96
    tick: int
    protocol_fee: int
    lp_fee: int


DEFAULT_SLOT0 = Slot0(
    sqrt_price_x96=DEFAULT_SQRT_PRICE_X96,
    tick=0,
    protocol_fee=0,
    lp_fee=V4_FEE_MEDIUM,
)


@dataclass(frozen=True)
class PoolState:
    """Live snapshot of a pool's price and active liquidity."""

    sqrt_price_x96: int
    tick: int
    protocol_fee: int
    lp_fee: int
    liquidity: int

    @classmethod
    def from_reads(cls, slot0: Slot0, liquidity: int) -> PoolState:
        return cls(
            sqrt_price_x96=slot0.sqrt_price_x96,
            tick=slot0.tick,
            protocol_fee=slot0.protocol_fee,
            lp_fee=slot0.lp_fee,
            liquidity=liquidity,
        )


class StateReader(Protocol):
    """Protocol for V4 pool state readers.

    This allows swapping between the real RPC-based reader and a mock for testing.
    """

    async def get_slot0(self, pool_id: str) -> Slot0:
        """Read the pool's price slot.

        Raises:
            StateUnavailable: If the call reverts or the RPC is unreachable
        """
        ...

    async def get_liquidity(self, pool_id: str) -> int:
        """Read the pool's active liquidity.

        Raises:
            StateUnavailable: If the call reverts or the RPC is unreachable
        """
        ...


class MockStateReader:
    """Mock reader for testing without RPC calls.

    Configure per-pool state, or a default state for any pool. Set
    fail_slot0 / fail_liquidity to simulate reverted reads, and track calls
    for assertions.
    """

    def __init__(
        self,
        states: dict[str, PoolState] | None = None,
        default_state: PoolState | None = None,
        fail_slot0: bool = False,
        fail_liquidity: bool = False,
    ):
        self.states = {pool_id.lower(): state for pool_id, state in (states or {}).items()}
        self.default_state = default_state
        self.fail_slot0 = fail_slot0
        self.fail_liquidity = fail_liquidity
        self.calls: list[tuple[str, str]] = []  # (method, pool_id)

    def _state_for(self, pool_id: str) -> PoolState:
        state = self.states.get(pool_id.lower(), self.default_state)
        if state is None:
            raise StateUnavailable(f"No state configured for pool {pool_id}")
        return state

    async def get_slot0(self, pool_id: str) -> Slot0:
        self.calls.append(("get_slot0", pool_id))
        if self.fail_slot0:
            raise StateUnavailable("slot0 read reverted")
        state = self._state_for(pool_id)
        return Slot0(
            sqrt_price_x96=state.sqrt_price_x96,
            tick=state.tick,
            protocol_fee=state.protocol_fee,
            lp_fee=state.lp_fee,
        )

    async def get_liquidity(self, pool_id: str) -> int:
        self.calls.append(("get_liquidity", pool_id))
        if self.fail_liquidity:
            raise StateUnavailable("liquidity read reverted")
        return self._state_for(pool_id).liquidity


class Web3StateReader:
    """Real reader that calls the StateView contract via RPC.

    This makes actual eth_call requests through an AsyncWeb3 HTTP provider.
    """

    def __init__(
        self,
        web3_provider: str,
        state_view_address: str = STATE_VIEW,
        request_timeout: float = 10.0,
    ):
        """Initialize reader with web3 provider.

        Args:
            web3_provider: HTTP RPC URL
            state_view_address: StateView contract address
            request_timeout: Per-request HTTP timeout in seconds
        """
        from web3 import AsyncHTTPProvider, AsyncWeb3

        self.w3 = AsyncWeb3(
            AsyncHTTPProvider(web3_provider, request_kwargs={"timeout": request_timeout})
        )
        self.state_view = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(state_view_address),
            abi=STATE_VIEW_ABI,
        )

    async def get_slot0(self, pool_id: str) -> Slot0:
        """Read slot0 via RPC call."""
        try:
            result = await self.state_view.functions.getSlot0(pool_id).call()
        except Exception as e:
            logger.warning("v4_slot0_read_failed", pool_id=pool_id, error=str(e))
            raise StateUnavailable(f"getSlot0 failed for {pool_id}: {e}") from e

        # Result is (sqrtPriceX96, tick, protocolFee, lpFee)
        return Slot0(
            sqrt_price_x96=int(result[0]),
            tick=int(result[1]),
            protocol_fee=int(result[2]),
            lp_fee=int(result[3]),
        )

    async def get_liquidity(self, pool_id: str) -> int:
        """Read liquidity via RPC call."""
        try:
            result = await self.state_view.functions.getLiquidity(pool_id).call()
        except Exception as e:
            logger.warning("v4_liquidity_read_failed", pool_id=pool_id, error=str(e))
            raise StateUnavailable(f"getLiquidity failed for {pool_id}: {e}") from e
        return int(result)


__all__ = [
    "DEFAULT_LIQUIDITY",
    "DEFAULT_SLOT0",
    "Slot0",
    "PoolState",
    "StateReader",
    "MockStateReader",
    "Web3StateReader",
]
