"""HTTP routes. Thin layer: parse the request, hand it to the service, map errors onto status codes."""

from contextlib import asynccontextmanager
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.models import (
    BoardResponse,
    CommentResponse,
    CreateCommentRequest,
    CreateGameRequest,
    GameResponse,
    PBNPreviewRequest,
    PBNPreviewResponse,
    UpdateBoardRequest,
)
from src.core.config import get_settings
from src.core.exceptions import InvalidRequestError, NotFoundError, TableTalkError
from src.core.log_config import configure_logging, get_logger
from src.db.database import get_db, init_db
from src.db.sql_repository import (
    SQLBoardRepository,
    SQLCommentRepository,
    SQLGameRepository,
)
from src.services.tabletalk_service import PUBLIC_GAMES_LIMIT, TableTalkService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Set up logging and the database tables before serving requests."""
    configure_logging(get_settings().log_level)
    init_db()
    yield


app = FastAPI(title="TableTalk", version="0.1.0", lifespan=lifespan)


def get_service(db: Annotated[Session, Depends(get_db)]) -> TableTalkService:
    return TableTalkService(
        games=SQLGameRepository(db),
        boards=SQLBoardRepository(db),
        comments=SQLCommentRepository(db),
    )


Service = Annotated[TableTalkService, Depends(get_service)]


# -- Error mapping --
@app.exception_handler(NotFoundError)
async def not_found_handler(_: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)})


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(_: Request, exc: InvalidRequestError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


@app.exception_handler(TableTalkError)
async def application_error_handler(request: Request, exc: TableTalkError) -> JSONResponse:
    logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal error"},
    )


# -- Routes --
@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/pbn/parse")
def parse_pbn(request: PBNPreviewRequest, service: Service) -> PBNPreviewResponse:
    return service.preview_pbn(request)


@app.post("/api/games")
def create_game(request: CreateGameRequest, service: Service) -> GameResponse:
    return service.create_game(request)


@app.get("/api/games")
def list_games(
    user_id: Annotated[str, Query(min_length=1)], service: Service
) -> list[GameResponse]:
    return service.list_games(user_id)


@app.get("/api/games/public")
def list_public_games(
    service: Service,
    limit: Annotated[int, Query(ge=1, le=100)] = PUBLIC_GAMES_LIMIT,
) -> list[GameResponse]:
    return service.list_public_games(limit)


@app.get("/api/games/search")
def search_games(
    service: Service,
    q: Annotated[Optional[str], Query()] = None,
    user_id: Annotated[Optional[str], Query()] = None,
) -> list[GameResponse]:
    return service.search_games(q, user_id)


@app.get("/api/games/{game_id}")
def get_game(game_id: UUID, service: Service) -> GameResponse:
    return service.get_game(game_id)


@app.get("/api/games/{game_id}/boards")
def list_boards(game_id: UUID, service: Service) -> list[BoardResponse]:
    return service.list_boards(game_id)


@app.get("/api/boards/{board_id}")
def get_board(board_id: UUID, service: Service) -> BoardResponse:
    return service.get_board(board_id)


@app.put("/api/boards/{board_id}")
def update_board(
    board_id: UUID, request: UpdateBoardRequest, service: Service
) -> BoardResponse:
    return service.record_result(board_id, request)


@app.get("/api/boards/{board_id}/comments")
def list_comments(
    board_id: UUID,
    service: Service,
    viewer_id: Annotated[Optional[str], Query()] = None,
) -> list[CommentResponse]:
    return service.list_comments(board_id, viewer_id)


@app.post("/api/boards/{board_id}/comments")
def add_comment(
    board_id: UUID, request: CreateCommentRequest, service: Service
) -> CommentResponse:
    return service.add_comment(board_id, request)
