"""
Feature: Board REST API
  As the board client
  I want to list, load, save and rename boards over HTTP
  So that the board is shared through the server

Scenario: Save a new board and inspect its history
  Given a board "demo" named "Demo" with a 2-column row prefixed "S-"
  When it is saved for the first time
  Then GET /board-data/demo returns it and there is no history yet
  When it is saved a second time
  Then the history holds exactly one backup

Scenario: Rename a board
  Given a saved board
  When PATCH /board-info/{id} changes its id
  Then the board moves to the new id together with its backups

Scenario: Error mapping
  Given malformed ids, invalid payloads or occupied rename targets
  When the endpoints are called
  Then 400, 404 and 409 are returned with a detail message
"""

import itertools

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from main import app
from apis.boards import (
    get_board_data, get_board_store, get_history_manager, save_board_data, update_board_info,
)
from models.aggregate import BoardAggregate
from models.boards import dump_entity
from storage.board_store import BoardStore
from storage.history import HistoryManager


def counting_clock():
    counter = itertools.count()
    return lambda: f"2025-01-01T10-00-{next(counter):02d}"


@pytest.fixture(name="store")
def store_fixture(tmp_path):
    return BoardStore(tmp_path / "board-data")


@pytest.fixture(name="history")
def history_fixture(store):
    return HistoryManager(store, clock=counting_clock())


@pytest.fixture(name="client")
def client_fixture(store, history):
    app.dependency_overrides[get_board_store] = lambda: store
    app.dependency_overrides[get_history_manager] = lambda: history
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def demo_payload(board_id="demo", name="Demo"):
    board = BoardAggregate.new_board(board_id, name)
    board.create_row("Sprints", 2, "S-")
    return dump_entity(board.board_data)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"message": "Sprint Board API is running"}


def test_save_then_history_end_to_end(client):
    payload = demo_payload()

    response = client.post("/board-data/demo", json=payload)
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

    response = client.get("/board-data/demo")
    assert response.status_code == 200
    assert response.json() == payload
    assert [h["title"] for h in response.json()["rows"][0]["headers"]] == ["S-01", "S-02"]

    # first save had nothing to back up
    assert client.get("/board-data/demo/history").status_code == 404

    assert client.post("/board-data/demo", json=payload).status_code == 200

    response = client.get("/board-data/demo/history")
    assert response.status_code == 200
    assert response.json() == ["board-2025-01-01T10-00-00.json"]

    response = client.get("/board-data/demo/history/board-2025-01-01T10-00-00.json")
    assert response.status_code == 200
    assert response.json() == payload


def test_list_board_infos_sorted_by_name(client):
    client.post("/board-data/zeta", json=demo_payload("zeta", "Zeta"))
    client.post("/board-data/alpha", json=demo_payload("alpha", "Alpha"))

    response = client.get("/board-infos/")

    assert response.status_code == 200
    assert response.json() == [
        {"type": "BoardInfo", "id": "alpha", "name": "Alpha"},
        {"type": "BoardInfo", "id": "zeta", "name": "Zeta"},
    ]


def test_list_board_infos_empty(client):
    response = client.get("/board-infos/")

    assert response.status_code == 200
    assert response.json() == []


def test_get_missing_board_returns_404(client):
    response = client.get("/board-data/nothing")

    assert response.status_code == 404
    assert "nothing" in response.json()["detail"]


def test_get_corrupt_board_returns_404(client, store):
    store.board_dir("broken").mkdir(parents=True)
    store.board_file("broken").write_text("{", encoding="utf-8")

    assert client.get("/board-data/broken").status_code == 404


def test_board_with_invalid_utf8_is_404_and_hidden_from_list(client, store):
    client.post("/board-data/alpha", json=demo_payload("alpha", "Alpha"))
    store.board_dir("bad").mkdir(parents=True)
    store.board_file("bad").write_bytes(b'{"type": "\xff\xfe"}')

    assert client.get("/board-data/bad").status_code == 404

    response = client.get("/board-infos/")
    assert response.status_code == 200
    assert [info["id"] for info in response.json()] == ["alpha"]


def test_invalid_board_id_returns_400(client):
    assert client.get("/board-data/bad.id").status_code == 400
    assert client.post("/board-data/bad.id", json=demo_payload()).status_code == 400


def test_save_invalid_payload_returns_400(client, store):
    payload = demo_payload()
    payload["rows"][0]["numOfCols"] = "two"

    response = client.post("/board-data/demo", json=payload)

    assert response.status_code == 400
    assert "numOfCols" in response.json()["detail"]
    assert not store.exists("demo")


def test_save_mismatched_board_id_returns_400(client, store):
    response = client.post("/board-data/other", json=demo_payload("demo"))

    assert response.status_code == 400
    assert not store.exists("other")


def test_patch_board_info_renames(client, store):
    client.post("/board-data/demo", json=demo_payload())

    response = client.patch("/board-info/demo", json={"type": "BoardInfo", "id": "sprints", "name": "Sprints"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert client.get("/board-data/demo").status_code == 404
    board = client.get("/board-data/sprints").json()
    assert board["boardInfo"] == {"type": "BoardInfo", "id": "sprints", "name": "Sprints"}
    assert client.get("/board-data/sprints/history").json() == ["board-2025-01-01T10-00-00.json"]


def test_patch_board_info_no_changes(client):
    client.post("/board-data/demo", json=demo_payload())

    response = client.patch("/board-info/demo", json={"type": "BoardInfo", "id": "demo", "name": "Demo"})

    assert response.status_code == 200
    assert response.json() == {"status": "no changes"}
    assert client.get("/board-data/demo/history").status_code == 404


def test_patch_board_info_conflict_returns_409(client, store):
    client.post("/board-data/demo", json=demo_payload())
    client.post("/board-data/taken", json=demo_payload("taken", "Taken"))

    response = client.patch("/board-info/demo", json={"type": "BoardInfo", "id": "taken", "name": "Demo"})

    assert response.status_code == 409
    assert store.read("demo").board_info.id == "demo"
    assert store.read("taken").board_info.name == "Taken"


def test_patch_missing_board_returns_404(client):
    response = client.patch("/board-info/nothing", json={"type": "BoardInfo", "id": "nothing", "name": "X"})

    assert response.status_code == 404


def test_patch_invalid_board_info_returns_400(client):
    client.post("/board-data/demo", json=demo_payload())

    response = client.patch("/board-info/demo", json={"type": "BoardInfo", "id": "../x", "name": "X"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_save_board_data_direct_call(store, history):
    # When the route coroutine is called directly
    result = await save_board_data(board_id="demo", payload=demo_payload(), store=store, history=history)

    # Then the board is written
    assert result.status == "ok"
    board = await get_board_data(board_id="demo", store=store)
    assert board["boardInfo"]["name"] == "Demo"


@pytest.mark.asyncio
async def test_update_board_info_direct_call_missing_board(store, history):
    try:
        await update_board_info(
            board_id="nothing",
            payload={"type": "BoardInfo", "id": "nothing", "name": "X"},
            store=store,
            history=history
        )
        assert False, "Should have raised a not found error"
    except HTTPException as e:
        assert e.status_code == 404
