"""Ranking pipeline constants."""

from typing import Final

# Upstream endpoints
DEXSCREENER_BASE_URL: Final[str] = "https://api.dexscreener.com"
PUMPFUN_BASE_URL: Final[str] = "https://frontend-api.pump.fun"
SOLANA_CHAIN_ID: Final[str] = "solana"

# pump.fun mints share this update authority
PUMPFUN_UPDATE_AUTHORITY: Final[str] = "TSLvdd1pWpHVjahSpsvCXUbgwsL3JAcvokwaKt1eokM"
TOKEN_PROGRAM_ID: Final[str] = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_ACCOUNT_SIZE: Final[int] = 165

# Upstream fetches are a single attempt; failures degrade to "no data"
UPSTREAM_MAX_ATTEMPTS: Final[int] = 1

# Synthetic deployer reputation
SYNTHETIC_MIN_TOTAL_TOKENS: Final[int] = 5
SYNTHETIC_TOTAL_TOKENS_SPAN: Final[int] = 15
SYNTHETIC_MIN_BONDING_RATE: Final[int] = 50
SYNTHETIC_BONDING_RATE_SPAN: Final[int] = 40

# Live reputation lookups
LIVE_REPUTATION_PAGE_SIZE: Final[int] = 50

# Canonical placeholders
UNKNOWN_ADDRESS: Final[str] = "unknown"
UNKNOWN_NAME: Final[str] = "Unknown Token"
UNKNOWN_SYMBOL: Final[str] = "UNKNOWN"

# Epoch values below this are treated as seconds and promoted to milliseconds
EPOCH_MS_THRESHOLD: Final[int] = 10**11

EMPTY_RESULT_MESSAGE: Final[str] = "No tokens found matching criteria"
FETCH_FAILED_ERROR: Final[str] = "Failed to fetch tokens"
