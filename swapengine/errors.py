"""Engine error classes.

Quote, execution and order-management failures surface as subclasses of
EngineError so callers can catch the whole family in one place.
"""


class EngineError(Exception):
    """Base error for trading engine operations."""

    pass


class ConfigNotFound(EngineError):
    """No pool configuration exists for the requested token pair and fee."""

    pass


class StateUnavailable(EngineError):
    """Pool state could not be read and no live price is available."""

    pass


class MalformedAmount(EngineError):
    """An amount string could not be parsed into token base units."""

    pass


class NotConnected(EngineError):
    """No signer address is available for the execution path."""

    pass


class InvalidSwapParams(EngineError):
    """Swap parameters are inconsistent (e.g. identical input and output token)."""

    pass


class SwapExecutionFailed(EngineError):
    """The signing/broadcast collaborator reported a failure."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Swap execution failed: {reason}")
        self.reason = reason


class OrderCreationFailed(EngineError):
    """A limit order could not be created (e.g. market price unavailable)."""

    pass
