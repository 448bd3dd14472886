"""
In-memory stand-ins for the repositories, shared by the service tests.
Fixtures defined here are only visible to the tests in this directory.
"""

from dataclasses import fields, replace
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest

from src.core.exceptions import DuplicateBoardError, RepositoryError
from src.core.models import BoardModel, BoardResultModel, CommentModel, GameModel
class MockGameRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def get_game(self, game_id: UUID) -> GameModel | None:
        return self._games.get(game_id)

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_id = uuid4()
        self._games[game_id] = replace(game, created_at=datetime.now(timezone.utc))
        return self._games[game_id], game_id

    def set_total_boards(self, game_id: UUID, total_boards: int) -> GameModel | None:
        if game_id not in self._games:
            return None
        self._games[game_id] = replace(self._games[game_id], total_boards=total_boards)
        return self._games[game_id]

    def list_games_of_user(self, user_id: str) -> list[tuple[UUID, GameModel]]:
        return [
            (game_id, game)
            for game_id, game in self._newest_first()
            if user_id in (game.creator_id, game.partner_id)
        ]

    def list_public_games(self, limit: int) -> list[tuple[UUID, GameModel]]:
        return [
            (game_id, game)
            for game_id, game in self._newest_first()
            if game.visibility == "public"
        ][:limit]

    def search_games(
        self, query: str, user_id: str | None = None
    ) -> list[tuple[UUID, GameModel]]:
        candidates = (
            self.list_games_of_user(user_id)
            if user_id
            else self.list_public_games(len(self._games))
        )
        return [
            (game_id, game)
            for game_id, game in candidates
            if query.lower() in game.name.lower()
        ]

    def _newest_first(self) -> list[tuple[UUID, GameModel]]:
        # dicts keep insertion order, the last one stored is the newest
        return list(reversed(self._games.items()))


class MockBoardRepository:
    """Mock the BoardRepository. Enforces unique board numbers per game, like the real table does."""

    def __init__(self) -> None:
        self._boards: dict[UUID, BoardModel] = {}
        self.create_calls: list[BoardModel] = []
        # board numbers for which create_board fails with a generic storage error
        self.failing_board_numbers: set[int] = set()

    def get_board(self, board_id: UUID) -> BoardModel | None:
        return self._boards.get(board_id)

    def list_boards(self, game_id: UUID) -> list[tuple[UUID, BoardModel]]:
        return sorted(
            (
                (board_id, board)
                for board_id, board in self._boards.items()
                if board.game_id == game_id
            ),
            key=lambda item: item[1].board_number,
        )

    def create_board(self, board: BoardModel) -> tuple[BoardModel, UUID]:
        self.create_calls.append(board)
        if board.board_number in self.failing_board_numbers:
            raise RepositoryError("connection lost")
        if any(
            stored.game_id == board.game_id and stored.board_number == board.board_number
            for stored in self._boards.values()
        ):
            raise DuplicateBoardError(f"Board {board.board_number} already exists.")
        board_id = uuid4()
        self._boards[board_id] = board
        return board, board_id

    def update_board(
        self, board_id: UUID, update: BoardResultModel
    ) -> BoardModel | None:
        if board_id not in self._boards:
            return None
        changes = {
            result_field.name: getattr(update, result_field.name)
            for result_field in fields(update)
            if getattr(update, result_field.name) is not None
        }
        self._boards[board_id] = replace(self._boards[board_id], **changes)
        return self._boards[board_id]


class MockCommentRepository:
    def __init__(self) -> None:
        self._comments: dict[UUID, CommentModel] = {}

    def add_comment(self, comment: CommentModel) -> tuple[CommentModel, UUID]:
        comment_id = uuid4()
        self._comments[comment_id] = replace(
            comment, created_at=datetime.now(timezone.utc)
        )
        return self._comments[comment_id], comment_id

    def list_comments(self, board_id: UUID) -> list[tuple[UUID, CommentModel]]:
        return [
            (comment_id, comment)
            for comment_id, comment in self._comments.items()
            if comment.board_id == board_id
        ]


@pytest.fixture
def game_repo() -> MockGameRepository:
    return MockGameRepository()


@pytest.fixture
def board_repo() -> MockBoardRepository:
    return MockBoardRepository()


@pytest.fixture
def comment_repo() -> MockCommentRepository:
    return MockCommentRepository()
