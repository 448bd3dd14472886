"""
Hands and boards as produced by the PBN decoder, plus an (optional) integrity check of a full deal.

A hand holds one string of rank characters per suit, e.g. "AKQ" or "" for a void.
Ranks are written the PBN way: A K Q J T 9 8 7 6 5 4 3 2.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Mapping, Optional, Self

from src.core.shared_types import Seat, Suit, Vulnerability

RANKS = "AKQJT98765432"
CARDS_PER_HAND = 13
FULL_DECK: frozenset[tuple[Suit, str]] = frozenset(
    (suit, rank) for suit in Suit for rank in RANKS
)


@dataclass(frozen=True)
class Hand:
    spades: str = ""
    hearts: str = ""
    diamonds: str = ""
    clubs: str = ""

    @classmethod
    def from_pbn(cls, holding: str) -> Optional[Self]:
        """'AKQ.234.AKQ.2345' -> Hand. None if the holding does not have exactly 4 dot-separated suits."""
        suits = holding.split(".")
        if len(suits) != len(Suit):
            return None
        spades, hearts, diamonds, clubs = suits
        return cls(spades, hearts, diamonds, clubs)

    def suit(self, suit: Suit) -> str:
        return {
            Suit.SPADES: self.spades,
            Suit.HEARTS: self.hearts,
            Suit.DIAMONDS: self.diamonds,
            Suit.CLUBS: self.clubs,
        }[suit]

    def to_dict(self) -> dict[str, str]:
        return {suit.value: self.suit(suit) for suit in Suit}

    def num_cards(self) -> int:
        return sum(len(self.suit(suit)) for suit in Suit)


def empty_hands() -> dict[Seat, Hand]:
    return {seat: Hand() for seat in Seat}


@dataclass(frozen=True)
class BoardRecord:
    """A fully specified board: number, dealer, vulnerability and all four hands."""

    board_number: int
    dealer: Seat
    vulnerability: Vulnerability
    hands: Mapping[Seat, Hand]


def hands_to_dict(hands: Mapping[Seat, Hand]) -> dict[str, dict[str, str]]:
    return {seat.value: hands[seat].to_dict() for seat in Seat if seat in hands}


@dataclass(frozen=True)
class DeckViolation:
    """A single problem found in a deal. `seat` is None for problems concerning the whole deck."""

    seat: Optional[Seat]
    message: str


def validate_deck(hands: Mapping[Seat, Hand]) -> list[DeckViolation]:
    """
    Check that the four hands together hold each of the 52 cards exactly once.
    ----

    Not part of decoding: the decoder accepts whatever the file says, callers that care run this afterwards.
    An empty list means the deal is valid.
    """
    violations: list[DeckViolation] = []
    seen: Counter[tuple[Suit, str]] = Counter()

    for seat in Seat:
        hand = hands.get(seat)
        if hand is None:
            violations.append(DeckViolation(seat, f"No hand for seat {seat.value}."))
            continue

        if hand.num_cards() != CARDS_PER_HAND:
            violations.append(
                DeckViolation(
                    seat,
                    f"Hand holds {hand.num_cards()} cards instead of {CARDS_PER_HAND}.",
                )
            )

        for suit in Suit:
            for rank in hand.suit(suit).upper():
                if rank not in RANKS:
                    violations.append(
                        DeckViolation(
                            seat, f"Unknown rank {rank!r} in suit {suit.value}."
                        )
                    )
                    continue
                seen[(suit, rank)] += 1

    for (suit, rank), count in sorted(seen.items()):
        if count > 1:
            violations.append(
                DeckViolation(None, f"Card {suit.value}{rank} dealt {count} times.")
            )

    missing = FULL_DECK - set(seen)
    if missing:
        # list them in deck order: suit by suit, high to low
        missing_cards = [
            f"{suit.value}{rank}"
            for suit in Suit
            for rank in RANKS
            if (suit, rank) in missing
        ]
        violations.append(
            DeckViolation(None, f"Cards missing from the deal: {' '.join(missing_cards)}.")
        )
    return violations
