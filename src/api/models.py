"""Requests and Response models"""

import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Seat, Visibility, Vulnerability

SeatCode = str
SuitCode = str

CONTRACT_PATTERN = re.compile(r"^[1-7](C|D|H|S|NT)(X|XX)?$")
CALL_PATTERN = re.compile(r"^([1-7](C|D|H|S|NT)|P|X|XX)$")
CARD_PATTERN = re.compile(r"^[SHDC][AKQJT98765432]$")
MAX_TRICKS = 13


def _require_text(value: str, what: str) -> str:
    if not value or not value.strip():
        raise InvalidRequestError(f"{what} required")
    return value


# --- REQUEST MODELS ---
class PBNPreviewRequest(BaseModel):
    pbn_content: str

    @field_validator("pbn_content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        return _require_text(value, "PBN content")


class CreateGameRequest(BaseModel):
    name: str
    creator_id: str
    description: Optional[str] = None
    partner_id: Optional[str] = None
    visibility: Visibility = Visibility.PUBLIC
    event_id: Optional[str] = None
    pbn_content: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _require_text(value, "Game name").strip()


class UpdateBoardRequest(BaseModel):
    """Result entry for a board. Only the supplied fields get updated."""

    bidding_sequence: Optional[list[str]] = None
    contract: Optional[str] = None
    declarer: Optional[Seat] = None
    result: Optional[int] = None
    lead_card: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("bidding_sequence")
    @classmethod
    def validate_bidding(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return value

        calls = []
        for call in value:
            normalized = call.strip().upper()
            if normalized == "PASS":
                normalized = "P"
            if not CALL_PATTERN.match(normalized):
                raise InvalidRequestError(f"Cannot interpret {call!r} as a call.")
            calls.append(normalized)
        return calls

    @field_validator("contract")
    @classmethod
    def validate_contract(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        # a passed-out board has no level / strain
        contract = value.strip().upper()
        if contract in {"P", "PASS", "AP"}:
            return "Pass"
        if not CONTRACT_PATTERN.match(contract):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a contract.")
        return contract

    @field_validator("result")
    @classmethod
    def validate_result(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and not (0 <= value <= MAX_TRICKS):
            raise InvalidRequestError(
                f"Tricks taken should be between 0 and {MAX_TRICKS}, got {value}."
            )
        return value

    @field_validator("lead_card")
    @classmethod
    def validate_lead(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        card = value.strip().upper()
        if not CARD_PATTERN.match(card):
            raise InvalidRequestError(
                f"Cannot interpret lead: {value!r} as a card (suit + rank, e.g. 'SQ')."
            )
        return card


class CreateCommentRequest(BaseModel):
    author_id: str
    content: str
    is_private: bool = False

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        return _require_text(value, "Comment").strip()


# --- RESPONSE MODELS ---
class PreviewBoard(BaseModel):
    board_number: int
    dealer: Seat
    vulnerability: Vulnerability
    hands: dict[SeatCode, dict[SuitCode, str]]
    deck_problems: list[str]


class PBNWarning(BaseModel):
    line_number: int
    line: str
    message: str


class PBNPreviewResponse(BaseModel):
    boards: list[PreviewBoard]
    count: int
    warnings: list[PBNWarning]


class GameResponse(BaseModel):
    game_id: UUID
    name: str
    description: Optional[str]
    creator_id: str
    partner_id: Optional[str]
    visibility: str
    event_id: Optional[str]
    total_boards: int
    created_at: Optional[datetime]


class BoardResponse(BaseModel):
    board_id: UUID
    game_id: UUID
    board_number: int
    dealer: str
    vulnerability: str
    hands: dict[SeatCode, dict[SuitCode, str]]
    bidding_sequence: list[str]
    contract: Optional[str]
    declarer: Optional[str]
    result: Optional[int]
    lead_card: Optional[str]
    notes: Optional[str]


class CommentResponse(BaseModel):
    comment_id: UUID
    board_id: UUID
    author_id: str
    content: str
    is_private: bool
    created_at: Optional[datetime]
