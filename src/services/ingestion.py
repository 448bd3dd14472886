"""Turn an uploaded PBN file into the boards of a game."""

from uuid import UUID

from src.bridge.hands import BoardRecord, hands_to_dict
from src.bridge.pbn import decode_with_diagnostics
from src.core.exceptions import RepositoryError
from src.core.log_config import get_logger
from src.core.models import BoardModel
from src.db.repository import BoardRepository, GameRepository

logger = get_logger(__name__)


def to_board_model(game_id: UUID, record: BoardRecord) -> BoardModel:
    """Decoded board -> transport model owned by the given game."""
    return BoardModel(
        game_id=game_id,
        board_number=record.board_number,
        dealer=record.dealer.value,
        vulnerability=record.vulnerability.value,
        hands=hands_to_dict(record.hands),
    )


class BoardIngestion:
    """
    Store the boards decoded from a PBN file under a game.
    ----

    A board that cannot be stored is logged and skipped, the remaining boards are still stored.
    Nothing in here raises because of bad input or a failing insert: the game the boards belong to has been created already
    and stays valid (possibly with fewer, or zero, boards).
    """

    def __init__(self, boards: BoardRepository, games: GameRepository) -> None:
        self.boards = boards
        self.games = games

    def ingest(self, game_id: UUID, pbn_text: str) -> int:
        """Decode the PBN text, store each board and update the game's board count. Returns the number of boards stored."""
        decoded = decode_with_diagnostics(pbn_text)
        for warning in decoded.warnings:
            logger.debug(
                "PBN upload for game %s, line %d: %s",
                game_id,
                warning.line_number,
                warning.message,
            )
        records = decoded.boards
        if not records:
            logger.info("No complete boards found in PBN upload for game %s", game_id)

        num_stored = 0
        for record in records:
            try:
                self.boards.create_board(to_board_model(game_id, record))
            except RepositoryError as e:
                logger.warning(
                    "Skipping board %d of game %s: %s", record.board_number, game_id, e
                )
                continue
            num_stored += 1

        # the summary counts what the file contained, not what made it into storage
        try:
            updated = self.games.set_total_boards(game_id, len(records))
        except RepositoryError:
            logger.exception("Could not update board count of game %s", game_id)
        else:
            if updated is None:
                logger.error("Game %s disappeared during board ingestion", game_id)

        logger.info(
            "Ingested %d of %d decoded board(s) for game %s",
            num_stored,
            len(records),
            game_id,
        )
        return num_stored
