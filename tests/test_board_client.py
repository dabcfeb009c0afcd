"""
Feature: Board API client
  As a planner working on a local board aggregate
  I want to create, load and save boards through the API
  So that my edits reach the server and the dirty flag reflects it

Scenario: Save the current board
  Given an aggregate with unsaved changes
  When it is saved
  Then the dirty flag is cleared

Scenario: Save a different snapshot
  Given an aggregate with unsaved changes
  When another document is saved through it
  Then the dirty flag stays set

Scenario: Server error
  Given the server rejects a request
  When the client calls it
  Then BoardApiError carries the raw response text
"""

import itertools

import pytest
from fastapi.testclient import TestClient
from main import app
from apis.boards import get_board_store, get_history_manager
from clients.board_api import BoardApiClient, BoardApiError, confirm_leave
from models.aggregate import BoardAggregate, empty_board
from models.boards import BoardInfo
from models.errors import ConflictError
from storage.board_store import BoardStore
from storage.history import HistoryManager


@pytest.fixture(name="store")
def store_fixture(tmp_path):
    return BoardStore(tmp_path / "board-data")


@pytest.fixture(name="api")
def api_fixture(store):
    counter = itertools.count()
    history = HistoryManager(store, clock=lambda: f"2025-01-01T10-00-{next(counter):02d}")
    app.dependency_overrides[get_board_store] = lambda: store
    app.dependency_overrides[get_history_manager] = lambda: history
    yield BoardApiClient(http_client=TestClient(app))
    app.dependency_overrides.clear()


def test_create_board_then_fetch(api):
    aggregate = BoardAggregate()

    created = api.create_board(aggregate, BoardInfo(type="BoardInfo", id="demo", name="Demo"))

    assert created.rows == []
    assert api.fetch("demo") == created
    assert [info.id for info in api.fetch_available_board_infos()] == ["demo"]


def test_create_board_with_taken_id_fails(api):
    info = BoardInfo(type="BoardInfo", id="demo", name="Demo")
    api.create_board(BoardAggregate(), info)

    with pytest.raises(ConflictError):
        api.create_board(BoardAggregate(), info)


def test_save_clears_dirty_flag_for_current_snapshot(api):
    aggregate = BoardAggregate.new_board("demo", "Demo")
    aggregate.create_row("Sprints", 2, "S-")
    assert not confirm_leave(aggregate)

    api.save(aggregate)

    assert not aggregate.has_unsaved_changes
    assert confirm_leave(aggregate)
    assert api.fetch("demo") == aggregate.board_data


def test_save_other_snapshot_keeps_dirty_flag(api):
    aggregate = BoardAggregate.new_board("demo", "Demo")
    aggregate.create_row("Sprints")

    api.save(aggregate, empty_board("other", "Other"))

    assert aggregate.has_unsaved_changes


def test_load_initializes_aggregate(api):
    source = BoardAggregate.new_board("demo", "Demo")
    source.create_row("Sprints", 3, "S-")
    api.save(source)

    aggregate = BoardAggregate()
    api.load(aggregate, "demo")

    assert aggregate.board_id == "demo"
    assert len(aggregate.rows[0].headers) == 3
    assert not aggregate.has_unsaved_changes


def test_update_board_info_and_history(api):
    aggregate = BoardAggregate.new_board("demo", "Demo")
    api.save(aggregate)

    api.update_board_info("demo", BoardInfo(type="BoardInfo", id="renamed", name="Renamed"))

    assert api.fetch("renamed").board_info.name == "Renamed"
    assert api.fetch_history("renamed") == ["board-2025-01-01T10-00-00.json"]


def test_fetch_missing_board_raises_api_error(api):
    with pytest.raises(BoardApiError) as exc:
        api.fetch("nothing")

    assert exc.value.status_code == 404
    assert "nothing" in exc.value.text
