"""Ranked token list endpoint."""

from typing import Any

import structlog
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from deployerhunter.api.dependencies import TokenBoardDep
from deployerhunter.constants.pipeline import EMPTY_RESULT_MESSAGE, FETCH_FAILED_ERROR
from deployerhunter.models.pipeline import TokenView, ViewResult
from deployerhunter.models.token import TrendingToken

log = structlog.get_logger(__name__)

router = APIRouter(tags=["tokens"])


def _serialize_tokens(result: ViewResult) -> list[dict[str, Any]]:
    if result.view == TokenView.DEFAULT:
        return [
            token.model_dump(
                by_alias=True,
                include={
                    "mint", "name", "symbol", "uri", "market_cap", "deployer",
                    "holders", "created_at", "bonding_rate", "rank",
                },
            )
            for token in result.tokens
        ]
    return [TrendingToken.from_token(token).model_dump(by_alias=True) for token in result.tokens]


def _failure(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "tokens": [],
            "error": FETCH_FAILED_ERROR,
            "message": message,
        },
    )


@router.get("/tokens")
async def get_tokens(
    board: TokenBoardDep,
    view: TokenView = Query(default=TokenView.DEFAULT, alias="type"),
) -> JSONResponse:
    """
    Ranked tokens of a view, served from cache while fresh.

    Returns:
        {success, tokens, lastUpdated, nextUpdate, message?}; HTTP 500 with
        {success: false, tokens: [], error, message} when the pipeline fails.
    """
    try:
        result = await board.get_view(view)
    except Exception as e:
        log.error("tokens_endpoint_failed", view=view.value, error=str(e), exc_info=True)
        return _failure(str(e))

    if not result.success:
        return _failure(result.error or "Unknown error")

    content: dict[str, Any] = {
        "success": True,
        "tokens": _serialize_tokens(result),
        "lastUpdated": result.last_updated,
        "nextUpdate": result.next_update,
    }
    if not result.tokens:
        content["message"] = EMPTY_RESULT_MESSAGE
    return JSONResponse(content=content)
