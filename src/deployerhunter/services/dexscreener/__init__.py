"""DexScreener API client."""

from deployerhunter.services.dexscreener.client import DexScreenerClient

__all__ = ["DexScreenerClient"]
