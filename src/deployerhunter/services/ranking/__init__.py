"""Token ranking pipeline."""

from deployerhunter.services.ranking.board import TokenBoard, get_token_board, reset_token_board
from deployerhunter.services.ranking.cache import ResultCache
from deployerhunter.services.ranking.pipeline import RankingPipeline

__all__ = [
    "RankingPipeline",
    "ResultCache",
    "TokenBoard",
    "get_token_board",
    "reset_token_board",
]
