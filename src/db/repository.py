"""Protocol repositories (can implement later for other storage backends than SQL Alchemy)"""

from typing import Protocol
from uuid import UUID

from src.core.models import BoardModel, BoardResultModel, CommentModel, GameModel


class GameRepository(Protocol):
    """Persistence of games."""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def set_total_boards(self, game_id: UUID, total_boards: int) -> GameModel | None:
        """Update the board count summary of a game."""
        ...

    def list_games_of_user(self, user_id: str) -> list[tuple[UUID, GameModel]]:
        """Games the user created or plays in as partner (paired with their IDs), most recently updated first."""
        ...

    def list_public_games(self, limit: int) -> list[tuple[UUID, GameModel]]:
        """At most `limit` public games, most recently updated first."""
        ...

    def search_games(
        self, query: str, user_id: str | None = None
    ) -> list[tuple[UUID, GameModel]]:
        """Games whose name contains the query (ignoring case). Only the user's own games if a user is given, public games otherwise."""
        ...


class BoardRepository(Protocol):
    """Persistence of the boards belonging to a game."""

    def get_board(self, board_id: UUID) -> BoardModel | None:
        """Get board by ID, if record exists."""
        ...

    def list_boards(self, game_id: UUID) -> list[tuple[UUID, BoardModel]]:
        """All boards of a game (paired with their IDs), by board number."""
        ...

    def create_board(self, board: BoardModel) -> tuple[BoardModel, UUID]:
        """Store new board. Raises DuplicateBoardError if the game already has a board with that number."""
        ...

    def update_board(
        self, board_id: UUID, update: BoardResultModel
    ) -> BoardModel | None:
        """Write the result fields that are set in the update."""
        ...


class CommentRepository(Protocol):
    """Persistence of comments on boards."""

    def add_comment(self, comment: CommentModel) -> tuple[CommentModel, UUID]:
        """Store new comment and return the stored data + newly created comment ID."""
        ...

    def list_comments(self, board_id: UUID) -> list[tuple[UUID, CommentModel]]:
        """All comments on a board, oldest first."""
        ...
