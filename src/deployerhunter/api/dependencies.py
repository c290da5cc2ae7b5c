"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends

from deployerhunter.config.settings import Settings, get_settings
from deployerhunter.services.ranking.board import TokenBoard, get_token_board

SettingsDep = Annotated[Settings, Depends(get_settings)]
TokenBoardDep = Annotated[TokenBoard, Depends(get_token_board)]
