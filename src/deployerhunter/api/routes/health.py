"""Health check endpoint with per-view cache status."""

from typing import Any

from fastapi import APIRouter

from deployerhunter.api.dependencies import SettingsDep, TokenBoardDep

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: SettingsDep, board: TokenBoardDep) -> dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        dict with status, version, active token source and cache state per view.
    """
    return {
        "status": "ok",
        "version": settings.app_version,
        "tokenSource": settings.token_source,
        "views": board.get_stats(),
    }
