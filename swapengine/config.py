"""Runtime configuration for the trading engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from swapengine.constants import DEFAULT_RPC_URL, STATE_VIEW, UNIVERSAL_ROUTER, WORLD_CHAIN_ID


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class EngineConfig:
    """Centralized configuration for quoting, execution and order monitoring.

    Attributes:
        rpc_url: JSON-RPC endpoint used for pool state and balance reads
        chain_id: Target chain (World Chain by default)
        state_view_address: V4 StateView contract
        universal_router_address: Router receiving the encoded swap
        quote_cache_ttl: Seconds a cached quote stays valid (both caches)
        rpc_timeout: Seconds allowed for a single chain read
        signer_timeout: Seconds allowed for the signer/broadcast call
        http_timeout: Seconds allowed for backend and price feed requests
        deadline_window: Seconds added to submission time for the swap deadline
        default_slippage_percent: Slippage applied when the caller gives none
        poll_interval: Seconds between limit order monitor ticks
        orders_path: JSON file backing the order store (None = in-memory)
        backend_url: Base URL of the order mirror backend (None = disabled)
        price_feed_url: Base URL of the USD price feed (None = disabled)
        reject_malformed_amounts: If True, quoting raises MalformedAmount on
            unparsable input. If False, the amount is treated as zero.
        require_known_pool: If True, quoting raises ConfigNotFound for pairs
            without a configured pool. If False, a default pool key is used.
        use_periphery_action_codes: If True, encode with the deployed
            v4-periphery action table instead of the default one.
    """

    rpc_url: str = DEFAULT_RPC_URL
    chain_id: int = WORLD_CHAIN_ID
    state_view_address: str = STATE_VIEW
    universal_router_address: str = UNIVERSAL_ROUTER

    quote_cache_ttl: float = 30.0
    rpc_timeout: float = 10.0
    signer_timeout: float = 120.0
    http_timeout: float = 10.0
    deadline_window: int = 30 * 60
    default_slippage_percent: float = 0.5

    poll_interval: float = 30.0
    orders_path: Path | None = None
    backend_url: str | None = None
    price_feed_url: str | None = None

    # Behavior flags
    reject_malformed_amounts: bool = False
    require_known_pool: bool = False
    use_periphery_action_codes: bool = False

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Build a config from SWAPENGINE_* environment variables.

        Unset variables keep their dataclass defaults.
        """
        defaults = cls()
        orders_path = os.environ.get("SWAPENGINE_ORDERS_PATH")
        return cls(
            rpc_url=os.environ.get("SWAPENGINE_RPC_URL", defaults.rpc_url),
            chain_id=int(os.environ.get("SWAPENGINE_CHAIN_ID", str(defaults.chain_id))),
            quote_cache_ttl=float(
                os.environ.get("SWAPENGINE_QUOTE_CACHE_TTL", str(defaults.quote_cache_ttl))
            ),
            rpc_timeout=float(os.environ.get("SWAPENGINE_RPC_TIMEOUT", str(defaults.rpc_timeout))),
            signer_timeout=float(
                os.environ.get("SWAPENGINE_SIGNER_TIMEOUT", str(defaults.signer_timeout))
            ),
            poll_interval=float(
                os.environ.get("SWAPENGINE_POLL_INTERVAL", str(defaults.poll_interval))
            ),
            orders_path=Path(orders_path) if orders_path else None,
            backend_url=os.environ.get("SWAPENGINE_BACKEND_URL") or None,
            price_feed_url=os.environ.get("SWAPENGINE_PRICE_FEED_URL") or None,
            reject_malformed_amounts=_env_bool(
                "SWAPENGINE_REJECT_MALFORMED_AMOUNTS", defaults.reject_malformed_amounts
            ),
            require_known_pool=_env_bool(
                "SWAPENGINE_REQUIRE_KNOWN_POOL", defaults.require_known_pool
            ),
            use_periphery_action_codes=_env_bool(
                "SWAPENGINE_PERIPHERY_ACTIONS", defaults.use_periphery_action_codes
            ),
        )


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
