"""Normalizer: map provider-specific raw records onto the canonical Token.

Each field is read from a fixed precedence of alternate keys so one function
covers the launch-platform, DEX-pair, DAS-asset and backend record shapes.
Missing or unparseable values fall back to defaults; normalization never
raises and has no hidden state.
"""

from typing import Any

from deployerhunter.constants.pipeline import (
    EPOCH_MS_THRESHOLD,
    UNKNOWN_ADDRESS,
    UNKNOWN_NAME,
    UNKNOWN_SYMBOL,
)
from deployerhunter.core.records import dig, to_number
from deployerhunter.models.token import Token

MINT_KEYS = ("mint", "baseToken.address", "id", "address")
NAME_KEYS = ("name", "baseToken.name", "content.metadata.name")
SYMBOL_KEYS = ("symbol", "baseToken.symbol", "content.metadata.symbol")
URI_KEYS = ("uri", "url", "image_uri", "content.json_uri")
MARKET_CAP_KEYS = (
    "fdv",
    "marketCap",
    "usd_market_cap",
    "market_cap",
    "token_info.price_info.total_price",
    "liquidity.usd",
)
DEPLOYER_KEYS = ("deployer", "creator", "pairAddress", "authorities.0.address")
HOLDER_KEYS = ("holders", "holder_count", "holderCount")
CREATED_AT_KEYS = ("createdAt", "created_timestamp", "pairCreatedAt")


def _first_text(record: dict[str, Any], keys: tuple[str, ...], default: str) -> str:
    for key in keys:
        value = dig(record, key)
        if isinstance(value, str) and value.strip():
            return value
    return default


def _first_number(record: dict[str, Any], keys: tuple[str, ...]) -> float | None:
    for key in keys:
        number = to_number(dig(record, key))
        if number is not None:
            return number
    return None


def _first_positive(record: dict[str, Any], keys: tuple[str, ...]) -> float:
    """First strictly positive value; zero or negative values fall through to the next key."""
    for key in keys:
        number = to_number(dig(record, key))
        if number is not None and number > 0:
            return number
    return 0.0


def _number(record: dict[str, Any], path: str) -> float:
    return to_number(dig(record, path)) or 0.0


def _count(record: dict[str, Any], path: str) -> int:
    return max(0, int(_number(record, path)))


def _holders(record: dict[str, Any]) -> int:
    holders = _first_number(record, HOLDER_KEYS)
    if holders is not None:
        return max(0, int(holders))
    # DEX pairs carry no holder count; 24h transactions stand in for it
    if isinstance(dig(record, "txns.h24"), dict):
        return _count(record, "txns.h24.buys") + _count(record, "txns.h24.sells")
    return 0


def _created_at_ms(record: dict[str, Any]) -> int:
    created = _first_number(record, CREATED_AT_KEYS)
    if created is None or created <= 0:
        return 0
    if created < EPOCH_MS_THRESHOLD:
        created *= 1000
    return int(created)


def normalize(record: dict[str, Any]) -> Token:
    """Map one raw record onto a Token with ``bonding_rate`` and ``rank`` unset.

    Args:
        record: Raw record from any source fetcher.

    Returns:
        Canonical token with defaults for every missing field.
    """
    if not isinstance(record, dict):
        return Token()

    buys_1h = _count(record, "txns.h1.buys")
    sells_1h = _count(record, "txns.h1.sells")

    return Token(
        mint=_first_text(record, MINT_KEYS, UNKNOWN_ADDRESS),
        name=_first_text(record, NAME_KEYS, UNKNOWN_NAME),
        symbol=_first_text(record, SYMBOL_KEYS, UNKNOWN_SYMBOL),
        uri=_first_text(record, URI_KEYS, ""),
        market_cap=_first_positive(record, MARKET_CAP_KEYS),
        deployer=_first_text(record, DEPLOYER_KEYS, UNKNOWN_ADDRESS),
        holders=_holders(record),
        created_at=_created_at_ms(record),
        price_usd=_number(record, "priceUsd"),
        volume_1h=max(0.0, _number(record, "volume.h1")),
        volume_24h=max(0.0, _number(record, "volume.h24")),
        price_change_1h=_number(record, "priceChange.h1"),
        price_change_24h=_number(record, "priceChange.h24"),
        txns_1h=buys_1h + sells_1h,
        buys_1h=buys_1h,
        sells_1h=sells_1h,
        pair_address=_first_text(record, ("pairAddress",), ""),
        url=_first_text(record, ("url",), ""),
    )


def normalize_all(records: list[dict[str, Any]]) -> list[Token]:
    """Normalize a batch of raw records, preserving order."""
    return [normalize(record) for record in records]
