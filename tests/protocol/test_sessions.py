from __future__ import annotations

from fastapi.testclient import TestClient

from gbchess.engine.board import STARTPOS
from gbchess.protocol.http.app import create_app


def _client() -> TestClient:
    return TestClient(create_app())


def _new_game(client: TestClient) -> str:
    r = client.post("/api/games")
    assert r.status_code == 200
    return r.json()["game_id"]


def test_create_game_and_get_state() -> None:
    client = _client()
    r = client.post("/api/games")
    assert r.status_code == 200
    body = r.json()
    assert isinstance(body["game_id"], str) and body["game_id"]
    assert body["board"] == "\n".join(STARTPOS)

    state = client.get(f"/api/games/{body['game_id']}/state").json()
    assert state["game_id"] == body["game_id"]
    assert state["board_flat"] == "".join(STARTPOS)
    assert state["side_to_move"] == "white"
    assert state["move_count"] == 0
    assert len(state["legal_moves"]) == 20
    assert state["castling"]["white_king_side"] is True
    assert state["in_check"] is False
    assert state["game_over"] is False


def test_get_state_unknown_id_404() -> None:
    r = _client().get("/api/games/does-not-exist/state")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "game_not_found"


def test_move_legal_then_illegal() -> None:
    client = _client()
    game_id = _new_game(client)

    r = client.post(
        f"/api/games/{game_id}/move",
        json={"from_row": 6, "from_col": 4, "to_row": 4, "to_col": 4},
    )
    assert r.status_code == 200
    state = r.json()
    assert state["side_to_move"] == "black"
    assert state["move_count"] == 1
    assert "e7e5" in state["legal_moves"]

    # White again: not its turn.
    r2 = client.post(
        f"/api/games/{game_id}/move",
        json={"from_row": 6, "from_col": 3, "to_row": 4, "to_col": 3},
    )
    assert r2.status_code == 400
    assert r2.json()["error"]["code"] == "illegal_move"

    # Rejected move leaves the session untouched.
    after = client.get(f"/api/games/{game_id}/state").json()
    assert after["board_flat"] == state["board_flat"]
    assert after["move_count"] == 1


def test_off_board_move_is_illegal_not_invalid() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(
        f"/api/games/{game_id}/move",
        json={"from_row": 6, "from_col": 4, "to_row": -1, "to_col": 4},
    )
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "illegal_move"


def test_move_missing_field_is_422() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/move", json={"from_row": 6})
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "unprocessable_entity"
    assert err["field_errors"]


def test_move_unknown_game_404() -> None:
    r = _client().post(
        "/api/games/missing/move",
        json={"from_row": 6, "from_col": 4, "to_row": 4, "to_col": 4},
    )
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "game_not_found"


def test_clone_is_independent_session() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/clone")
    assert r.status_code == 200
    clone_id = r.json()["game_id"]
    assert clone_id != game_id

    client.post(
        f"/api/games/{clone_id}/move",
        json={"from_row": 7, "from_col": 6, "to_row": 5, "to_col": 5},
    )
    original = client.get(f"/api/games/{game_id}/state").json()
    cloned = client.get(f"/api/games/{clone_id}/state").json()
    assert original["move_count"] == 0
    assert cloned["move_count"] == 1


def test_delete_game() -> None:
    client = _client()
    game_id = _new_game(client)
    assert client.delete(f"/api/games/{game_id}").json() == {"status": "deleted"}
    assert client.get(f"/api/games/{game_id}/state").status_code == 404
    assert client.delete(f"/api/games/{game_id}").status_code == 404
