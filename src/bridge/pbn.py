"""
Decoder for the subset of PBN (Portable Bridge Notation) needed to set up boards for a game.
----

A PBN file is a sequence of tag pairs, one per line, e.g.

    [Board "1"]
    [Dealer "N"]
    [Vulnerable "None"]
    [Deal "N:AKQ.234.AKQ.2345 .AKQJ.234.AKQJ98 2345.567.567.67 J98765.8.J98.T"]

Only the Board, Dealer, Vulnerable and Deal tags are used, everything else is skipped.
A board ends up in the result only once all four of them were seen (in any order) before the next [Board] tag or the end of the file.

Decoding never raises. Anything that cannot be used is skipped and reported as a DecodeWarning,
for callers that want to tell the user why a board went missing.
"""

import re
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Any, Callable, Mapping, Optional

from src.bridge.hands import BoardRecord, Hand, empty_hands
from src.core.log_config import get_logger
from src.core.shared_types import Seat, Vulnerability

logger = get_logger(__name__)

BOARD_TAG = re.compile(r'\[Board "(\d+)"\]')
DEALER_TAG = re.compile(r'\[Dealer "([NESW])"\]')
VULNERABLE_TAG = re.compile(r'\[Vulnerable "([^"]+)"\]')
DEAL_TAG = re.compile(r'\[Deal "([NESW]):([^"]+)"\]')

# fits a 32-bit INTEGER column on every supported database
MAX_BOARD_NUMBER = 999_999_999

PBN_TO_VULNERABILITY: dict[str, Vulnerability] = {
    "None": Vulnerability.NONE,
    "NS": Vulnerability.NS,
    "EW": Vulnerability.EW,
    "All": Vulnerability.BOTH,
}


@dataclass(frozen=True)
class DecodeWarning:
    line_number: int
    line: str
    message: str


@dataclass
class DecodeResult:
    boards: list[BoardRecord] = field(default_factory=list)
    warnings: list[DecodeWarning] = field(default_factory=list)


@dataclass(frozen=True)
class _BoardDraft:
    """The board currently being read. Every tag replaces the draft, it is never mutated."""

    board_number: Optional[int] = None
    dealer: Optional[Seat] = None
    vulnerability: Optional[Vulnerability] = None
    hands: Optional[Mapping[Seat, Hand]] = None
    # line of the [Board] tag that opened the draft (0: no header seen yet)
    header_line: int = 0
    header: str = ""

    def is_blank(self) -> bool:
        return self == _BoardDraft()

    def missing_fields(self) -> list[str]:
        # board numbers start at 1, a "0" counts as missing
        missing = [] if self.board_number else ["board number"]
        if self.dealer is None:
            missing.append("dealer")
        if self.vulnerability is None:
            missing.append("vulnerability")
        if self.hands is None:
            missing.append("deal")
        return missing

    def to_record(self) -> Optional[BoardRecord]:
        if self.missing_fields():
            return None
        return BoardRecord(
            board_number=self.board_number,
            dealer=self.dealer,
            vulnerability=self.vulnerability,
            hands=self.hands,
        )


# Persistent stack of (newest item, rest). Pushing shares the rest instead of copying it.
_Stack = Optional[tuple[Any, "_Stack"]]


def _push(stack: _Stack, item: Any) -> _Stack:
    return (item, stack)


def _to_list(stack: _Stack) -> list:
    """Items of the stack, oldest first."""
    items = []
    while stack is not None:
        item, stack = stack
        items.append(item)
    items.reverse()
    return items


@dataclass(frozen=True)
class _ScanState:
    draft: _BoardDraft = _BoardDraft()
    boards: _Stack = None
    warnings: _Stack = None

    def warn(self, line_number: int, line: str, message: str) -> "_ScanState":
        return replace(
            self, warnings=_push(self.warnings, DecodeWarning(line_number, line, message))
        )

    def flush(self) -> "_ScanState":
        """Move the draft into the output if complete, drop it otherwise. Leaves a blank draft."""
        record = self.draft.to_record()
        if record is not None:
            return replace(self, draft=_BoardDraft(), boards=_push(self.boards, record))

        if self.draft.is_blank():
            return self

        label = (
            f"Board {self.draft.board_number}"
            if self.draft.board_number is not None
            else "Board without a number"
        )
        missing = ", ".join(self.draft.missing_fields())
        logger.debug("%s dropped, missing: %s", label, missing)
        dropped = self.warn(
            self.draft.header_line,
            self.draft.header,
            f"{label} skipped: missing {missing}.",
        )
        return replace(dropped, draft=_BoardDraft())


# -- Deal string --
def decode_deal(deal: str, first_seat: Seat) -> dict[Seat, Hand]:
    """
    Decode the value of a Deal tag (without the 'N:' prefix) into the four hands.

    The first group of cards belongs to `first_seat`, the next ones go clockwise from there.
    A group that does not split into exactly four suits is left as an empty hand.
    """
    hands, _ = _decode_deal(deal, first_seat)
    return hands


def _decode_deal(deal: str, first_seat: Seat) -> tuple[dict[Seat, Hand], list[str]]:
    """decode_deal + a description of every group that had to be left empty."""
    hands = empty_hands()
    problems: list[str] = []

    groups = deal.split()
    if len(groups) < len(Seat):
        problems.append(f"Deal lists {len(groups)} hands instead of 4.")
    elif len(groups) > len(Seat):
        problems.append(
            f"Deal lists {len(groups)} hands instead of 4, ignoring the extra ones."
        )

    for i, group in enumerate(groups[: len(Seat)]):
        seat = first_seat.rotate(i)
        hand = Hand.from_pbn(group)
        if hand is None:
            problems.append(
                f"Hand {group!r} for seat {seat.value} does not have 4 suits, left empty."
            )
            continue
        hands[seat] = hand
    return hands, problems


# -- Tag handlers --
def _parse_board_number(digits: str) -> Optional[int]:
    """Board number from the digits of a Board tag, None when it does not fit MAX_BOARD_NUMBER."""
    significant = digits.lstrip("0")
    if len(significant) > len(str(MAX_BOARD_NUMBER)):
        return None
    number = int(significant or "0")
    return number if number <= MAX_BOARD_NUMBER else None


def _on_board(state: _ScanState, line_number: int, line: str) -> _ScanState:
    state = state.flush()
    match = BOARD_TAG.match(line)
    board_number = _parse_board_number(match.group(1)) if match else None
    if board_number is None:
        # still counts as the start of a new board, so its tags are not mixed into the previous one
        message = (
            f"Board number is larger than {MAX_BOARD_NUMBER}."
            if match
            else "Board number is not a number."
        )
        state = state.warn(line_number, line, message)
        return replace(state, draft=_BoardDraft(header_line=line_number, header=line))
    return replace(
        state,
        draft=_BoardDraft(
            board_number=board_number, header_line=line_number, header=line
        ),
    )


def _on_dealer(state: _ScanState, line_number: int, line: str) -> _ScanState:
    match = DEALER_TAG.match(line)
    if not match:
        return state.warn(line_number, line, "Dealer should be one of N, E, S, W.")
    return replace(state, draft=replace(state.draft, dealer=Seat(match.group(1))))


def _on_vulnerable(state: _ScanState, line_number: int, line: str) -> _ScanState:
    match = VULNERABLE_TAG.match(line)
    vulnerability = PBN_TO_VULNERABILITY.get(match.group(1)) if match else None
    if vulnerability is None:
        return state.warn(
            line_number, line, "Vulnerable should be one of None, NS, EW, All."
        )
    return replace(state, draft=replace(state.draft, vulnerability=vulnerability))


def _on_deal(state: _ScanState, line_number: int, line: str) -> _ScanState:
    match = DEAL_TAG.match(line)
    if not match:
        return state.warn(
            line_number, line, "Deal should look like \"N:<hand> <hand> <hand> <hand>\"."
        )
    first_seat, deal = match.groups()
    hands, problems = _decode_deal(deal, Seat(first_seat))
    for problem in problems:
        state = state.warn(line_number, line, problem)
    return replace(state, draft=replace(state.draft, hands=hands))


TAG_HANDLERS: dict[str, Callable[[_ScanState, int, str], _ScanState]] = {
    "[Board ": _on_board,
    "[Dealer ": _on_dealer,
    "[Vulnerable ": _on_vulnerable,
    "[Deal ": _on_deal,
}


def _step(state: _ScanState, numbered_line: tuple[int, str]) -> _ScanState:
    line_number, line = numbered_line
    for prefix, handler in TAG_HANDLERS.items():
        if line.startswith(prefix):
            return handler(state, line_number, line)
    return state


# -- Public API --
def decode_with_diagnostics(document: str) -> DecodeResult:
    """Decode all complete boards in the document, and collect a warning for everything that got skipped."""
    numbered_lines = (
        (line_number, line.strip())
        for line_number, line in enumerate(document.splitlines(), start=1)
        if line.strip()
    )
    final_state = reduce(_step, numbered_lines, _ScanState()).flush()
    result = DecodeResult(_to_list(final_state.boards), _to_list(final_state.warnings))
    logger.debug(
        "Decoded %d board(s) with %d warning(s)",
        len(result.boards),
        len(result.warnings),
    )
    return result


def decode(document: str) -> list[BoardRecord]:
    """Decode all complete boards in the document, in the order they appear."""
    return decode_with_diagnostics(document).boards
