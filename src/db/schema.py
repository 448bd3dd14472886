"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    name: Mapped[str]
    description: Mapped[Optional[str]]
    creator_id: Mapped[str]
    partner_id: Mapped[Optional[str]]
    visibility: Mapped[str] = mapped_column(default="public")
    event_id: Mapped[Optional[str]]
    total_boards: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

    boards: Mapped[list["DBBoard"]] = relationship(
        back_populates="game", cascade="all, delete-orphan"
    )


class DBBoard(Base):
    __tablename__ = "boards"
    # one row per board number within a game: concurrent or repeated ingestion cannot duplicate boards
    __table_args__ = (
        UniqueConstraint("game_id", "board_number", name="uq_boards_game_board_number"),
    )
    id: Mapped[UUID] = mapped_column(primary_key=True)
    game_id: Mapped[UUID] = mapped_column(ForeignKey("games.id"))
    board_number: Mapped[int]
    dealer: Mapped[str]
    vulnerability: Mapped[str]
    hands: Mapped[dict[str, dict[str, str]]] = mapped_column(JSON)
    bidding_sequence: Mapped[list[str]] = mapped_column(JSON, default=list)
    contract: Mapped[Optional[str]]
    declarer: Mapped[Optional[str]]
    result: Mapped[Optional[int]]
    lead_card: Mapped[Optional[str]]
    notes: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

    game: Mapped[DBGame] = relationship(back_populates="boards")
    comments: Mapped[list["DBComment"]] = relationship(
        back_populates="board", cascade="all, delete-orphan"
    )


class DBComment(Base):
    __tablename__ = "comments"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    board_id: Mapped[UUID] = mapped_column(ForeignKey("boards.id"))
    author_id: Mapped[str]
    content: Mapped[str]
    is_private: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

    board: Mapped[DBBoard] = relationship(back_populates="comments")
