"""
Type definitions used across layers
"""

from enum import StrEnum


class Seat(StrEnum):
    """Compass seats, declared in clockwise order."""

    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"

    def rotate(self, steps: int) -> "Seat":
        """Seat found `steps` places further clockwise."""
        seats = list(Seat)
        return seats[(seats.index(self) + steps) % len(seats)]

    def next(self) -> "Seat":
        return self.rotate(1)

    def partner(self) -> "Seat":
        return self.rotate(2)


class Vulnerability(StrEnum):
    NONE = "None"
    NS = "NS"
    EW = "EW"
    BOTH = "Both"


class Suit(StrEnum):
    """Suits in the order a PBN hand lists them."""

    SPADES = "S"
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"


class Visibility(StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"
    CLUB = "club"
