"""Token-related Pydantic models.

Field names are snake_case in Python and camelCase on the wire. Models are
frozen: pipeline stages derive new tokens with ``model_copy(update=...)``
instead of mutating the ones they received.
"""

from pydantic import BaseModel, ConfigDict, Field

from deployerhunter.constants.pipeline import (
    UNKNOWN_ADDRESS,
    UNKNOWN_NAME,
    UNKNOWN_SYMBOL,
)


class Token(BaseModel):
    """Canonical token record produced by the normalizer.

    Attributes:
        mint: Token mint address, unique within one ranked list.
        name: Display name.
        symbol: Ticker symbol.
        uri: Display/reference URI.
        market_cap: Market capitalization in USD.
        deployer: Address credited with launching the token.
        holders: Holder count, or a transaction-count proxy for DEX sources.
        created_at: Creation time in Unix epoch milliseconds.
        bonding_rate: Deployer bonding rate percentage, set by enrichment.
        rank: 1-based position, set only on the final ranked list.

    Example:
        token = Token(mint="Mint111", symbol="DOG", holders=120, marketCap=8000)
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    mint: str = UNKNOWN_ADDRESS
    name: str = UNKNOWN_NAME
    symbol: str = UNKNOWN_SYMBOL
    uri: str = ""
    market_cap: float = Field(default=0.0, ge=0, alias="marketCap")
    deployer: str = UNKNOWN_ADDRESS
    holders: int = Field(default=0, ge=0)
    created_at: int = Field(default=0, alias="createdAt")
    bonding_rate: float = Field(default=0.0, ge=0, le=100, alias="bondingRate")
    rank: int = 0

    # Optional DEX market fields
    price_usd: float = Field(default=0.0, alias="priceUsd")
    volume_1h: float = Field(default=0.0, alias="volume1h")
    volume_24h: float = Field(default=0.0, alias="volume24h")
    price_change_1h: float = Field(default=0.0, alias="priceChange1h")
    price_change_24h: float = Field(default=0.0, alias="priceChange24h")
    txns_1h: int = Field(default=0, alias="txns1h")
    buys_1h: int = Field(default=0, alias="buys1h")
    sells_1h: int = Field(default=0, alias="sells1h")
    pair_address: str = Field(default="", alias="pairAddress")
    url: str = ""


class TrendingToken(BaseModel):
    """Projection of a Token served by the trending and volume views."""

    model_config = ConfigDict(populate_by_name=True)

    rank: int
    symbol: str
    name: str
    volume_1h: float = Field(alias="volume1h")
    volume_24h: float = Field(alias="volume24h")
    price_usd: float = Field(alias="priceUsd")
    price_change_1h: float = Field(alias="priceChange1h")
    price_change_24h: float = Field(alias="priceChange24h")
    market_cap: float = Field(alias="marketCap")
    txns_1h: int = Field(alias="txns1h")
    buys_1h: int = Field(alias="buys1h")
    sells_1h: int = Field(alias="sells1h")
    url: str
    pair_address: str = Field(alias="pairAddress")

    @classmethod
    def from_token(cls, token: Token) -> "TrendingToken":
        """Build the trending projection of a ranked token."""
        return cls(
            rank=token.rank,
            symbol=token.symbol,
            name=token.name,
            volume_1h=token.volume_1h,
            volume_24h=token.volume_24h,
            price_usd=token.price_usd,
            price_change_1h=token.price_change_1h,
            price_change_24h=token.price_change_24h,
            market_cap=token.market_cap,
            txns_1h=token.txns_1h,
            buys_1h=token.buys_1h,
            sells_1h=token.sells_1h,
            url=token.url,
            pair_address=token.pair_address,
        )


class DeployerStats(BaseModel):
    """Reputation statistic for one deployer address.

    Recomputed every pipeline run and never stored.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    address: str
    total_tokens: int = Field(ge=0, alias="totalTokens")
    bonded_tokens: int = Field(ge=0, alias="bondedTokens")
    bonding_rate: float = Field(ge=0, le=100, alias="bondingRate")

    @classmethod
    def from_counts(cls, address: str, total_tokens: int, bonded_tokens: int) -> "DeployerStats":
        """Build stats from raw counts, with a 0% rate when nothing was launched."""
        rate = bonded_tokens / total_tokens * 100 if total_tokens > 0 else 0.0
        return cls(
            address=address,
            total_tokens=total_tokens,
            bonded_tokens=bonded_tokens,
            bonding_rate=rate,
        )


class CacheEntry(BaseModel):
    """Last computed ranked list of one view and when it was computed."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tokens: tuple[Token, ...] = ()
    fetched_at_ms: int = Field(alias="fetchedAtEpochMs")
