"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and db layer (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer or API layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID

# Type aliases to make the models easier to read
SeatCode = str
SuitCode = str
HandsData = dict[SeatCode, dict[SuitCode, str]]


@dataclass
class GameModel:
    """Transport-safe representation of a recorded game (session of boards)."""

    name: str
    creator_id: str
    description: Optional[str] = None
    partner_id: Optional[str] = None
    visibility: str = "public"
    event_id: Optional[str] = None
    total_boards: int = 0
    created_at: Optional[datetime] = None


@dataclass
class BoardModel:
    """One dealt board of a game, plus whatever result the players entered for it."""

    game_id: UUID
    board_number: int
    dealer: str
    vulnerability: str
    hands: HandsData
    bidding_sequence: list[str] = field(default_factory=list)
    contract: Optional[str] = None
    declarer: Optional[str] = None
    result: Optional[int] = None
    lead_card: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class BoardResultModel:
    """Partial update of a board. Fields left at None are not touched."""

    bidding_sequence: Optional[list[str]] = None
    contract: Optional[str] = None
    declarer: Optional[str] = None
    result: Optional[int] = None
    lead_card: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class CommentModel:
    board_id: UUID
    author_id: str
    content: str
    is_private: bool = False
    created_at: Optional[datetime] = None
