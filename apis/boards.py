from fastapi import APIRouter, Body, Depends, HTTPException, status
from typing import Any, Dict, List

import settings
from settings import logger
from models.boards import dump_entity
from models.errors import (
    BoardError, ConflictError, InvalidIdentifierError, NotFoundError, ValidationFailure,
)
from models.validation import validate_board_data, validate_board_id, validate_board_info
from storage.board_store import BoardStore
from storage.history import HistoryManager, change_board_info
from .schemas.boards import StatusResponse

router = APIRouter(tags=["boards"])


def get_board_store() -> BoardStore:
    """Store rooted at the configured BOARD_DATA_PATH."""
    return BoardStore(settings.BOARD_DATA_PATH)


def get_history_manager(store: BoardStore = Depends(get_board_store)) -> HistoryManager:
    return HistoryManager(store)


def _http_error(exc: BoardError, message: str) -> HTTPException:
    """Log the failure and translate it into an HTTPException."""
    if isinstance(exc, (InvalidIdentifierError, ValidationFailure)):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ConflictError):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    logger.error(message, extra={
        "error_type": type(exc).__name__,
        "error": str(exc),
        "status_code": status_code
    })
    return HTTPException(status_code=status_code, detail=f"{message}: {exc}")


@router.get("/board-infos/")
async def list_board_infos(
    store: BoardStore = Depends(get_board_store)
) -> List[Dict[str, Any]]:
    """List every readable board, sorted by name."""
    try:
        board_infos = store.list_all()
    except BoardError as e:
        raise _http_error(e, "Failed to retrieve list of available board infos")
    return [dump_entity(info) for info in board_infos]


@router.get("/board-data/{board_id}")
async def get_board_data(
    board_id: str,
    store: BoardStore = Depends(get_board_store)
) -> Dict[str, Any]:
    """Get the canonical document of one board."""
    try:
        board_data = store.read(validate_board_id(board_id))
    except BoardError as e:
        raise _http_error(e, f"Failed to read board with board-id '{board_id}'")
    return dump_entity(board_data)


@router.post("/board-data/{board_id}", response_model=StatusResponse)
async def save_board_data(
    board_id: str,
    payload: Any = Body(...),
    store: BoardStore = Depends(get_board_store),
    history: HistoryManager = Depends(get_history_manager)
) -> StatusResponse:
    """Back up the current document, then overwrite it with the payload."""
    message = f"Failed to save board with board-id '{board_id}'"
    try:
        validate_board_id(board_id)
        board_data = validate_board_data(payload).unwrap()
        if board_data.board_info.id != board_id:
            raise ValidationFailure(
                f"Board id '{board_data.board_info.id}' does not match the target board id",
                "boardInfo.id",
            )
        history.snapshot(board_id)
        store.write(board_id, board_data)
    except BoardError as e:
        raise _http_error(e, message)

    logger.info("Saved board data", extra={"board_id": board_id})
    return StatusResponse(status="ok")


@router.patch("/board-info/{board_id}", response_model=StatusResponse)
async def update_board_info(
    board_id: str,
    payload: Any = Body(...),
    store: BoardStore = Depends(get_board_store),
    history: HistoryManager = Depends(get_history_manager)
) -> StatusResponse:
    """Rename and/or relabel a board.

    Changing the id moves the board directory, backups included.
    """
    message = f"Failed to update board info for board-id '{board_id}'"
    try:
        old_board_id = validate_board_id(board_id)
        new_board_info = validate_board_info(payload).unwrap()
        if not change_board_info(store, history, old_board_id, new_board_info):
            return StatusResponse(status="no changes")
    except BoardError as e:
        raise _http_error(e, message)

    logger.info("Updated board info", extra={
        "old_board_id": old_board_id,
        "board_id": new_board_info.id
    })
    return StatusResponse(status="ok")


@router.get("/board-data/{board_id}/history")
async def list_board_history(
    board_id: str,
    history: HistoryManager = Depends(get_history_manager)
) -> List[str]:
    """Backup filenames of a board, latest first."""
    try:
        return history.list_history(validate_board_id(board_id))
    except BoardError as e:
        raise _http_error(e, f"Failed to read history for board-id '{board_id}'")


@router.get("/board-data/{board_id}/history/{filename}")
async def get_board_history_file(
    board_id: str,
    filename: str,
    history: HistoryManager = Depends(get_history_manager)
) -> Dict[str, Any]:
    """Content of one backup."""
    try:
        board_data = history.read_history(validate_board_id(board_id), filename)
    except BoardError as e:
        raise _http_error(e, f"Failed to read history file '{filename}' for board-id '{board_id}'")
    return dump_entity(board_data)
