"""Implementation of the repositories using SQLAlchemy"""

from dataclasses import fields
from uuid import UUID, uuid4

from sqlalchemy import ColumnElement, Select, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import DuplicateBoardError, RepositoryError
from src.core.models import BoardModel, BoardResultModel, CommentModel, GameModel
from src.core.shared_types import Visibility
from src.db.schema import DBBoard, DBComment, DBGame


class SQLGameRepository:
    """Games stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            name=game.name,
            description=game.description,
            creator_id=game.creator_id,
            partner_id=game.partner_id,
            visibility=game.visibility,
            event_id=game.event_id,
            total_boards=game.total_boards,
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def set_total_boards(self, game_id: UUID, total_boards: int) -> GameModel | None:
        """Update the board count summary of a game."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_db.total_boards = total_boards
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Could not update game {game_id}.") from e
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def list_games_of_user(self, user_id: str) -> list[tuple[UUID, GameModel]]:
        """Games the user created or plays in as partner (paired with their IDs), most recently updated first."""
        query = select(DBGame).where(self._played_by(user_id))
        return self._list(query)

    def list_public_games(self, limit: int) -> list[tuple[UUID, GameModel]]:
        """At most `limit` public games, most recently updated first."""
        query = select(DBGame).where(DBGame.visibility == Visibility.PUBLIC.value)
        return self._list(query, limit=limit)

    def search_games(
        self, query: str, user_id: str | None = None
    ) -> list[tuple[UUID, GameModel]]:
        """Games whose name contains the query (ignoring case). Only the user's own games if a user is given, public games otherwise."""
        scope = (
            self._played_by(user_id)
            if user_id
            else DBGame.visibility == Visibility.PUBLIC.value
        )
        statement = select(DBGame).where(
            scope, DBGame.name.icontains(query, autoescape=True)
        )
        return self._list(statement)

    def _list(
        self, query: Select[tuple[DBGame]], limit: int | None = None
    ) -> list[tuple[UUID, GameModel]]:
        query = query.order_by(DBGame.updated_at.desc(), DBGame.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return [(game_db.id, self._to_model(game_db)) for game_db in self.db.scalars(query)]

    @staticmethod
    def _played_by(user_id: str) -> ColumnElement[bool]:
        return or_(DBGame.creator_id == user_id, DBGame.partner_id == user_id)

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            name=game_db.name,
            creator_id=game_db.creator_id,
            description=game_db.description,
            partner_id=game_db.partner_id,
            visibility=game_db.visibility,
            event_id=game_db.event_id,
            total_boards=game_db.total_boards,
            created_at=game_db.created_at,
        )


class SQLBoardRepository:
    """Boards stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_board(self, board_id: UUID) -> BoardModel | None:
        """Get board by ID, if record exists."""
        board_db = self._fetch_board(board_id)
        if board_db:
            return self._to_model(board_db)
        return None

    def list_boards(self, game_id: UUID) -> list[tuple[UUID, BoardModel]]:
        """All boards of a game (paired with their IDs), by board number."""
        query = (
            select(DBBoard)
            .where(DBBoard.game_id == game_id)
            .order_by(DBBoard.board_number)
        )
        return [(board_db.id, self._to_model(board_db)) for board_db in self.db.scalars(query)]

    def create_board(self, board: BoardModel) -> tuple[BoardModel, UUID]:
        """Store new board. Raises DuplicateBoardError if the game already has a board with that number."""
        new_id = uuid4()
        board_db = DBBoard(
            id=new_id,
            game_id=board.game_id,
            board_number=board.board_number,
            dealer=board.dealer,
            vulnerability=board.vulnerability,
            hands=board.hands,
            bidding_sequence=board.bidding_sequence,
            contract=board.contract,
            declarer=board.declarer,
            result=board.result,
            lead_card=board.lead_card,
            notes=board.notes,
        )
        self.db.add(board_db)
        try:
            self.db.commit()
        except IntegrityError as e:
            # leave the session usable for the next insert
            self.db.rollback()
            raise DuplicateBoardError(
                f"Board {board.board_number} already exists for game {board.game_id}."
            ) from e
        except (SQLAlchemyError, OverflowError, ValueError) as e:
            # the DBAPI raises some errors unwrapped, e.g. OverflowError for integers beyond the column range
            self.db.rollback()
            raise RepositoryError(
                f"Could not store board {board.board_number} for game {board.game_id}."
            ) from e
        self.db.refresh(board_db)
        return self._to_model(board_db), new_id

    def update_board(
        self, board_id: UUID, update: BoardResultModel
    ) -> BoardModel | None:
        """Write the result fields that are set in the update."""
        board_db = self._fetch_board(board_id)
        if not board_db:
            return None
        for result_field in fields(update):
            value = getattr(update, result_field.name)
            if value is not None:
                setattr(board_db, result_field.name, value)
        self.db.commit()
        self.db.refresh(board_db)
        return self._to_model(board_db)

    def _fetch_board(self, board_id: UUID) -> DBBoard | None:
        query = select(DBBoard).where(DBBoard.id == board_id)
        return self.db.scalar(query)

    def _to_model(self, board_db: DBBoard) -> BoardModel:
        """Convert SQLAlchemy model to data transfer model."""
        return BoardModel(
            game_id=board_db.game_id,
            board_number=board_db.board_number,
            dealer=board_db.dealer,
            vulnerability=board_db.vulnerability,
            hands=board_db.hands,
            bidding_sequence=list(board_db.bidding_sequence or []),
            contract=board_db.contract,
            declarer=board_db.declarer,
            result=board_db.result,
            lead_card=board_db.lead_card,
            notes=board_db.notes,
        )


class SQLCommentRepository:
    """Comments stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def add_comment(self, comment: CommentModel) -> tuple[CommentModel, UUID]:
        """Store new comment and return the stored data + newly created comment ID."""
        new_id = uuid4()
        comment_db = DBComment(
            id=new_id,
            board_id=comment.board_id,
            author_id=comment.author_id,
            content=comment.content,
            is_private=comment.is_private,
        )
        self.db.add(comment_db)
        self.db.commit()
        self.db.refresh(comment_db)
        return self._to_model(comment_db), new_id

    def list_comments(self, board_id: UUID) -> list[tuple[UUID, CommentModel]]:
        """All comments on a board, oldest first."""
        query = (
            select(DBComment)
            .where(DBComment.board_id == board_id)
            .order_by(DBComment.created_at)
        )
        return [
            (comment_db.id, self._to_model(comment_db))
            for comment_db in self.db.scalars(query)
        ]

    def _to_model(self, comment_db: DBComment) -> CommentModel:
        return CommentModel(
            board_id=comment_db.board_id,
            author_id=comment_db.author_id,
            content=comment_db.content,
            is_private=comment_db.is_private,
            created_at=comment_db.created_at,
        )
