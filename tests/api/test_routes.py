"""HTTP level tests for src/api/routes.py, backed by the in-memory test database."""

from typing import Callable, Generator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from src.api.routes import app
from src.db.database import get_db

PBNBoard = Callable[..., str]


@pytest.fixture
def client(db_session_repo: Session) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_db] = lambda: db_session_repo
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def create_game(client: TestClient, **extra: object) -> dict:
    response = client.post(
        "/api/games", json={"name": "Tuesday pairs", "creator_id": "user-1", **extra}
    )
    assert response.status_code == 200
    return response.json()


def test_health(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}


# -- PBN preview --
def test_parse_pbn(
    client: TestClient, pbn_board: PBNBoard, sample_hands: dict
) -> None:
    document = "\n".join([pbn_board(1), pbn_board(2, dealer="E"), '[Board "3"]'])
    response = client.post("/api/pbn/parse", json={"pbn_content": document})

    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 2
    assert payload["boards"][0]["board_number"] == 1
    assert payload["boards"][0]["dealer"] == "N"
    assert payload["boards"][0]["vulnerability"] == "None"
    assert payload["boards"][0]["hands"] == sample_hands
    assert payload["boards"][1]["dealer"] == "E"
    assert [warning["line_number"] for warning in payload["warnings"]] == [9]


def test_parse_pbn_without_content(client: TestClient) -> None:
    response = client.post("/api/pbn/parse", json={"pbn_content": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "PBN content required"}


def test_parse_pbn_missing_field(client: TestClient) -> None:
    response = client.post("/api/pbn/parse", json={})
    assert response.status_code == 422


# -- Games --
def test_create_game_with_boards(client: TestClient, pbn_board: PBNBoard) -> None:
    document = "\n".join(pbn_board(number) for number in [1, 2])
    game = create_game(client, pbn_content=document)
    assert game["total_boards"] == 2

    fetched = client.get(f"/api/games/{game['game_id']}")
    assert fetched.status_code == 200
    assert fetched.json() == game

    boards = client.get(f"/api/games/{game['game_id']}/boards").json()
    assert [board["board_number"] for board in boards] == [1, 2]


def test_create_game_with_duplicate_boards(
    client: TestClient, pbn_board: PBNBoard
) -> None:
    """The duplicate is not stored, the game is still created."""
    document = "\n".join([pbn_board(1), pbn_board(1, dealer="W"), pbn_board(2)])
    game = create_game(client, pbn_content=document)
    assert game["total_boards"] == 3

    boards = client.get(f"/api/games/{game['game_id']}/boards").json()
    assert [board["board_number"] for board in boards] == [1, 2]
    assert boards[0]["dealer"] == "N"


def test_create_game_invalid_visibility(client: TestClient) -> None:
    response = client.post(
        "/api/games",
        json={"name": "Tuesday pairs", "creator_id": "user-1", "visibility": "secret"},
    )
    assert response.status_code == 422


def test_create_game_with_board_number_out_of_range(
    client: TestClient, pbn_board: PBNBoard
) -> None:
    """A board number the database cannot hold is left out, the game and its other boards are stored."""
    document = "\n".join([pbn_board(1), pbn_board("99999999999999999999"), pbn_board(2)])
    game = create_game(client, pbn_content=document)
    assert game["total_boards"] == 2

    boards = client.get(f"/api/games/{game['game_id']}/boards").json()
    assert [board["board_number"] for board in boards] == [1, 2]


def test_list_games_of_user(client: TestClient) -> None:
    own = create_game(client, name="Own game")
    partnered = create_game(
        client, name="Partnered", creator_id="user-2", partner_id="user-1"
    )
    create_game(client, name="Someone else's", creator_id="user-3")

    response = client.get("/api/games", params={"user_id": "user-1"})
    assert response.status_code == 200
    assert {game["game_id"] for game in response.json()} == {
        own["game_id"],
        partnered["game_id"],
    }
    assert client.get("/api/games").status_code == 422


def test_list_public_games(client: TestClient) -> None:
    create_game(client, name="Open")
    create_game(client, name="Hidden", visibility="private")

    response = client.get("/api/games/public")
    assert response.status_code == 200
    assert [game["name"] for game in response.json()] == ["Open"]
    assert client.get("/api/games/public", params={"limit": 0}).status_code == 422


def test_search_games(client: TestClient) -> None:
    create_game(client, name="Tuesday pairs")
    create_game(client, name="Tuesday teams", visibility="private")

    public = client.get("/api/games/search", params={"q": "tuesday"}).json()
    assert [game["name"] for game in public] == ["Tuesday pairs"]

    own = client.get(
        "/api/games/search", params={"q": "TEAMS", "user_id": "user-1"}
    ).json()
    assert [game["name"] for game in own] == ["Tuesday teams"]


def test_search_games_without_query(client: TestClient) -> None:
    response = client.get("/api/games/search")
    assert response.status_code == 400
    assert response.json() == {"error": "Search query required"}


def test_unknown_game(client: TestClient) -> None:
    assert client.get(f"/api/games/{uuid4()}").status_code == 404
    assert client.get(f"/api/games/{uuid4()}/boards").status_code == 404


# -- Boards --
def test_update_board(client: TestClient, pbn_board: PBNBoard) -> None:
    game = create_game(client, pbn_content=pbn_board(1))
    (board,) = client.get(f"/api/games/{game['game_id']}/boards").json()

    response = client.put(
        f"/api/boards/{board['board_id']}",
        json={"contract": "4s", "declarer": "E", "result": 11, "lead_card": "DA"},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["contract"] == "4S"
    assert updated["declarer"] == "E"
    assert updated["result"] == 11

    assert client.get(f"/api/boards/{board['board_id']}").json() == updated


def test_update_board_invalid_contract(
    client: TestClient, pbn_board: PBNBoard
) -> None:
    game = create_game(client, pbn_content=pbn_board(1))
    (board,) = client.get(f"/api/games/{game['game_id']}/boards").json()

    response = client.put(f"/api/boards/{board['board_id']}", json={"contract": "9NT"})
    assert response.status_code == 400


def test_unknown_board(client: TestClient) -> None:
    assert client.get(f"/api/boards/{uuid4()}").status_code == 404
    response = client.put(f"/api/boards/{uuid4()}", json={"result": 7})
    assert response.status_code == 404


# -- Comments --
def test_comments(client: TestClient, pbn_board: PBNBoard) -> None:
    game = create_game(client, pbn_content=pbn_board(1))
    (board,) = client.get(f"/api/games/{game['game_id']}/boards").json()
    url = f"/api/boards/{board['board_id']}/comments"

    assert client.post(url, json={"author_id": "user-1", "content": "Lead?"}).status_code == 200
    client.post(url, json={"author_id": "user-2", "content": "psst", "is_private": True})

    assert [c["content"] for c in client.get(url).json()] == ["Lead?"]
    assert [c["content"] for c in client.get(url, params={"viewer_id": "user-2"}).json()] == [
        "Lead?",
        "psst",
    ]


def test_comment_on_unknown_board(client: TestClient) -> None:
    response = client.post(
        f"/api/boards/{uuid4()}/comments", json={"author_id": "user-1", "content": "?"}
    )
    assert response.status_code == 404
