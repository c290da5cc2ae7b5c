"""Pydantic models for DexScreener API responses.

Pairs are kept as open dictionaries: the normalizer reads them with
alternate-key precedence, so only the envelope is validated here.

API Documentation: https://docs.dexscreener.com/api/reference
"""

from typing import Any

from pydantic import BaseModel


class PairsResponse(BaseModel):
    """Envelope of the search and token-pairs endpoints.

    Attributes:
        pairs: Raw pair records, None when the upstream found nothing.
    """

    pairs: list[dict[str, Any]] | None = None
