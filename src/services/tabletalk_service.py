"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

from typing import Optional
from uuid import UUID

from src.api.models import (
    BoardResponse,
    CommentResponse,
    CreateCommentRequest,
    CreateGameRequest,
    GameResponse,
    PBNPreviewRequest,
    PBNPreviewResponse,
    PBNWarning,
    PreviewBoard,
    UpdateBoardRequest,
)
from src.bridge.hands import hands_to_dict, validate_deck
from src.bridge.pbn import decode_with_diagnostics
from src.core.exceptions import InvalidRequestError, NotFoundError
from src.core.log_config import get_logger
from src.core.models import BoardModel, BoardResultModel, CommentModel, GameModel
from src.db.repository import BoardRepository, CommentRepository, GameRepository
from src.services.ingestion import BoardIngestion

logger = get_logger(__name__)

PUBLIC_GAMES_LIMIT = 20


class TableTalkService:
    """Orchestration of layers for recording games, their boards and the discussion about them."""

    def __init__(
        self,
        games: GameRepository,
        boards: BoardRepository,
        comments: CommentRepository,
    ) -> None:
        self.games = games
        self.boards = boards
        self.comments = comments
        self.ingestion = BoardIngestion(boards=boards, games=games)

    # -- API routes logic ---
    def preview_pbn(self, request: PBNPreviewRequest) -> PBNPreviewResponse:
        """
        Decode an uploaded PBN file without storing anything.
        ----
        Lets the user check what will be imported before creating the game.
        Boards that hold an impossible deal are still listed, with the problems attached.
        """
        decoded = decode_with_diagnostics(request.pbn_content)
        boards = [
            PreviewBoard(
                board_number=record.board_number,
                dealer=record.dealer,
                vulnerability=record.vulnerability,
                hands=hands_to_dict(record.hands),
                deck_problems=[
                    violation.message for violation in validate_deck(record.hands)
                ],
            )
            for record in decoded.boards
        ]
        warnings = [
            PBNWarning(
                line_number=warning.line_number,
                line=warning.line,
                message=warning.message,
            )
            for warning in decoded.warnings
        ]
        return PBNPreviewResponse(boards=boards, count=len(boards), warnings=warnings)

    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """Create a new game, and set up its boards if a PBN file came with the request."""

        new_game = GameModel(
            name=request.name,
            creator_id=request.creator_id,
            description=request.description,
            partner_id=request.partner_id,
            visibility=request.visibility.value,
            event_id=request.event_id,
        )
        stored_game, game_id = self.games.create_game(new_game)
        logger.info("Created game %s (%r)", game_id, stored_game.name)

        if request.pbn_content:
            # never fails: a game without (all of) its boards is still a valid game
            self.ingestion.ingest(game_id, request.pbn_content)
            stored_game = self._fetch_game(game_id)

        return self._create_game_response(game_id, stored_game)

    def get_game(self, game_id: UUID) -> GameResponse:
        return self._create_game_response(game_id, self._fetch_game(game_id))

    def list_games(self, user_id: str) -> list[GameResponse]:
        """The games a user created or plays in, most recently updated first."""
        return [
            self._create_game_response(game_id, game)
            for game_id, game in self.games.list_games_of_user(user_id)
        ]

    def list_public_games(self, limit: int = PUBLIC_GAMES_LIMIT) -> list[GameResponse]:
        return [
            self._create_game_response(game_id, game)
            for game_id, game in self.games.list_public_games(limit)
        ]

    def search_games(
        self, query: Optional[str], user_id: Optional[str] = None
    ) -> list[GameResponse]:
        """Search game names. Searches the user's own games if a user is given, the public games otherwise."""
        query = (query or "").strip()
        if not query:
            raise InvalidRequestError("Search query required")
        return [
            self._create_game_response(game_id, game)
            for game_id, game in self.games.search_games(query, user_id)
        ]

    def list_boards(self, game_id: UUID) -> list[BoardResponse]:
        """All boards of a game, by board number."""
        self._fetch_game(game_id)
        return [
            self._create_board_response(board_id, board)
            for board_id, board in self.boards.list_boards(game_id)
        ]

    def get_board(self, board_id: UUID) -> BoardResponse:
        return self._create_board_response(board_id, self._fetch_board(board_id))

    def record_result(
        self, board_id: UUID, request: UpdateBoardRequest
    ) -> BoardResponse:
        """Store the auction / contract / result the players entered for a board."""
        update = BoardResultModel(
            bidding_sequence=request.bidding_sequence,
            contract=request.contract,
            declarer=request.declarer.value if request.declarer else None,
            result=request.result,
            lead_card=request.lead_card,
            notes=request.notes,
        )
        updated = self.boards.update_board(board_id, update)
        if updated is None:
            raise NotFoundError(f"Board with {board_id=} not found.")
        return self._create_board_response(board_id, updated)

    def add_comment(
        self, board_id: UUID, request: CreateCommentRequest
    ) -> CommentResponse:
        self._fetch_board(board_id)
        comment = CommentModel(
            board_id=board_id,
            author_id=request.author_id,
            content=request.content,
            is_private=request.is_private,
        )
        stored, comment_id = self.comments.add_comment(comment)
        return self._create_comment_response(comment_id, stored)

    def list_comments(
        self, board_id: UUID, viewer_id: Optional[str] = None
    ) -> list[CommentResponse]:
        """Comments on a board. Private comments are only shown to their author."""
        self._fetch_board(board_id)
        return [
            self._create_comment_response(comment_id, comment)
            for comment_id, comment in self.comments.list_comments(board_id)
            if not comment.is_private or comment.author_id == viewer_id
        ]

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        return GameResponse(
            game_id=game_id,
            name=model.name,
            description=model.description,
            creator_id=model.creator_id,
            partner_id=model.partner_id,
            visibility=model.visibility,
            event_id=model.event_id,
            total_boards=model.total_boards,
            created_at=model.created_at,
        )

    def _create_board_response(self, board_id: UUID, model: BoardModel) -> BoardResponse:
        return BoardResponse(
            board_id=board_id,
            game_id=model.game_id,
            board_number=model.board_number,
            dealer=model.dealer,
            vulnerability=model.vulnerability,
            hands=model.hands,
            bidding_sequence=model.bidding_sequence,
            contract=model.contract,
            declarer=model.declarer,
            result=model.result,
            lead_card=model.lead_card,
            notes=model.notes,
        )

    def _create_comment_response(
        self, comment_id: UUID, model: CommentModel
    ) -> CommentResponse:
        return CommentResponse(
            comment_id=comment_id,
            board_id=model.board_id,
            author_id=model.author_id,
            content=model.content,
            is_private=model.is_private,
            created_at=model.created_at,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.games.get_game(game_id)
        if game_model is None:
            raise NotFoundError(f"Game with {game_id=} not found.")
        return game_model

    def _fetch_board(self, board_id: UUID) -> BoardModel:
        board_model = self.boards.get_board(board_id)
        if board_model is None:
            raise NotFoundError(f"Board with {board_id=} not found.")
        return board_model
