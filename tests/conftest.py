"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# The example from the PBN standard, reused across layers
SAMPLE_DEAL = "N:AKQ.234.AKQ.2345 .AKQJ.234.AKQJ98 2345.567.567.67 J98765.8.J98.T"


def _pbn_board(
    number: int | str,
    dealer: str = "N",
    vulnerable: str = "None",
    deal: str = SAMPLE_DEAL,
) -> str:
    return "\n".join(
        [
            f'[Board "{number}"]',
            f'[Dealer "{dealer}"]',
            f'[Vulnerable "{vulnerable}"]',
            f'[Deal "{deal}"]',
        ]
    )


@pytest.fixture
def sample_deal() -> str:
    return SAMPLE_DEAL


@pytest.fixture
def sample_hands() -> dict[str, dict[str, str]]:
    """The sample deal the way it is stored: seat -> suit -> holding."""
    return {
        "N": {"S": "AKQ", "H": "234", "D": "AKQ", "C": "2345"},
        "E": {"S": "", "H": "AKQJ", "D": "234", "C": "AKQJ98"},
        "S": {"S": "2345", "H": "567", "D": "567", "C": "67"},
        "W": {"S": "J98765", "H": "8", "D": "J98", "C": "T"},
    }


@pytest.fixture
def pbn_board() -> Callable[..., str]:
    """Builds the text of one PBN board section, holding the sample deal unless told otherwise."""
    return _pbn_board


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
