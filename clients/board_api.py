"""
HTTP client for the board API.

Pairs a BoardAggregate with the server: fetches documents to initialize it,
flushes it back on save and clears its dirty flag only when the snapshot it
sent is still the one the aggregate holds. Failed calls raise BoardApiError
carrying the raw server response text; nothing is retried.
"""

from typing import List, Optional

import httpx

import settings
from settings import logger
from models.aggregate import BoardAggregate, empty_board
from models.boards import BoardData, BoardInfo, dump_entity
from models.errors import BoardError, ConflictError
from models.validation import assert_board_data, assert_board_info, validate_board_id


class BoardApiError(BoardError):
    """Non-2xx response from the board API."""

    def __init__(self, status_code: int, text: str):
        self.status_code = status_code
        self.text = text
        super().__init__(text)


class BoardApiClient:
    """Thin synchronous wrapper over the REST endpoints."""

    def __init__(self, base_url: Optional[str] = None, http_client: Optional[httpx.Client] = None):
        self.http = http_client or httpx.Client(base_url=base_url or settings.API_BASE_URL)

    def close(self) -> None:
        self.http.close()

    def _check(self, response: httpx.Response) -> httpx.Response:
        if response.is_error:
            raise BoardApiError(response.status_code, response.text)
        return response

    def fetch_available_board_infos(self) -> List[BoardInfo]:
        logger.debug("Fetching available board infos")
        response = self._check(self.http.get("/board-infos/"))
        return [assert_board_info(raw) for raw in response.json()]

    def fetch(self, board_id: str) -> BoardData:
        logger.debug("Fetching board data", extra={"board_id": board_id})
        response = self._check(self.http.get(f"/board-data/{validate_board_id(board_id)}"))
        return assert_board_data(response.json())

    def fetch_history(self, board_id: str) -> List[str]:
        response = self._check(self.http.get(f"/board-data/{validate_board_id(board_id)}/history"))
        return response.json()

    def update_board_info(self, board_id_before_update: str, new_board_info: BoardInfo) -> None:
        self._check(self.http.patch(
            f"/board-info/{validate_board_id(board_id_before_update)}",
            json=dump_entity(new_board_info),
        ))
        logger.debug("Updated board info", extra={
            "old_board_id": board_id_before_update,
            "board_id": new_board_info.id
        })

    def save(self, aggregate: BoardAggregate, board_data: Optional[BoardData] = None) -> None:
        """Post `board_data` (default: the aggregate's current document)."""
        board_data_to_save = board_data if board_data is not None else aggregate.board_data
        board_id = validate_board_id(board_data_to_save.board_info.id)
        self._check(self.http.post(f"/board-data/{board_id}", json=dump_entity(board_data_to_save)))
        aggregate.mark_saved(board_data_to_save)
        logger.debug("Saved board data", extra={"board_id": board_id})

    def create_board(self, aggregate: BoardAggregate, new_board_info: BoardInfo) -> BoardData:
        """Save an empty board under a fresh id; ConflictError if the id is already listed."""
        existing = self.fetch_available_board_infos()
        if any(info.id == new_board_info.id for info in existing):
            raise ConflictError(f"Board with ID '{new_board_info.id}' already exists.")

        new_board_data = empty_board(validate_board_id(new_board_info.id), new_board_info.name)
        self.save(aggregate, new_board_data)
        logger.info("Created board", extra={"board_id": new_board_info.id})
        return new_board_data

    def load(self, aggregate: BoardAggregate, board_id: str) -> None:
        """Fetch a board and make it the aggregate's document."""
        aggregate.init(self.fetch(board_id))


def confirm_leave(aggregate: BoardAggregate) -> bool:
    """Advisory navigation guard: False while there are unsaved changes."""
    return not aggregate.has_unsaved_changes
