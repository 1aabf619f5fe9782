"""Token model."""

from pydantic import BaseModel, ConfigDict, Field

from swapengine.models.types import Address, normalize_address


class Token(BaseModel):
    """An ERC20 asset tradable through the engine.

    Identity is the address, compared case-insensitively, so two Token
    instances with differently-cased addresses are equal.
    """

    model_config = ConfigDict(frozen=True)

    chain_id: int
    address: Address
    decimals: int = Field(ge=0, le=255)
    symbol: str
    name: str = ""

    @property
    def key(self) -> str:
        """Lowercase address used for lookups."""
        return normalize_address(self.address)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return False
        return self.chain_id == other.chain_id and self.key == other.key

    def __hash__(self) -> int:
        return hash((self.chain_id, self.key))

    def __str__(self) -> str:
        return self.symbol
