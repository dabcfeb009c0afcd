#!/usr/bin/env python3
"""
Management commands for the Sprint Board service.

Usage:
    python manage.py list_boards
    python manage.py history <board_id>
    python manage.py rename <old_board_id> <new_board_id>
    python manage.py init_board <board_id> <name> [--scaffold]
    python manage.py delete_board <board_id>
    python manage.py runserver
"""

import sys

import settings
from settings import logger
from models.aggregate import BoardAggregate
from models.boards import BoardInfo, EntityType
from models.errors import BoardError, ConflictError
from models.validation import validate_board_id
from storage.board_store import BoardStore
from storage.history import HistoryManager, change_board_info


def _store() -> BoardStore:
    return BoardStore(settings.BOARD_DATA_PATH)


def list_boards():
    """Print id and name of every readable board."""
    for info in _store().list_all():
        print(f"{info.id}\t{info.name}")


def history(board_id: str):
    """Print backup filenames of a board, latest first."""
    store = _store()
    for filename in HistoryManager(store).list_history(board_id):
        print(filename)


def rename(old_board_id: str, new_board_id: str):
    """Move a board to a new id, keeping its name."""
    store = _store()
    board_info = store.read(old_board_id).board_info
    new_info = BoardInfo(type=EntityType.BOARD_INFO.value, id=validate_board_id(new_board_id), name=board_info.name)
    if change_board_info(store, HistoryManager(store), old_board_id, new_info):
        logger.info(f"Board '{old_board_id}' renamed to '{new_board_id}'")
    else:
        logger.info("No changes")


def init_board(board_id: str, name: str, scaffold: bool = False):
    """Create a new board, empty or from the default scaffold."""
    store = _store()
    if store.exists(board_id):
        raise ConflictError(f"Board with ID '{board_id}' already exists.")

    if scaffold:
        aggregate = BoardAggregate()
        aggregate.init()
        aggregate.board_data.board_info = BoardInfo(
            type=EntityType.BOARD_INFO.value, id=validate_board_id(board_id), name=name
        )
    else:
        aggregate = BoardAggregate.new_board(board_id, name)

    store.write(board_id, aggregate.board_data)
    aggregate.mark_saved(aggregate.board_data)
    logger.info(f"Board '{board_id}' created with {len(aggregate.rows)} rows")


def delete_board(board_id: str):
    """Remove a board directory together with its backups."""
    _store().delete(board_id)
    logger.info(f"Board '{board_id}' deleted")


def runserver():
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.SERVER_PORT)


def main():
    if len(sys.argv) < 2:
        print("Usage: python manage.py <command> [args]")
        print("Commands:")
        print("  list_boards                       - List all readable boards")
        print("  history <board_id>                - List backups of a board")
        print("  rename <old_id> <new_id>          - Move a board to a new id")
        print("  init_board <id> <name> [--scaffold] - Create a board")
        print("  delete_board <board_id>           - Delete a board and its backups")
        print("  runserver                         - Start the API server")
        sys.exit(1)

    command = sys.argv[1]
    args = sys.argv[2:]

    try:
        if command == "list_boards":
            list_boards()
        elif command == "history" and len(args) == 1:
            history(args[0])
        elif command == "rename" and len(args) == 2:
            rename(args[0], args[1])
        elif command == "init_board" and len(args) in (2, 3):
            init_board(args[0], args[1], scaffold="--scaffold" in args[2:])
        elif command == "delete_board" and len(args) == 1:
            delete_board(args[0])
        elif command == "runserver":
            runserver()
        else:
            print(f"Unknown command or wrong arguments: {' '.join(sys.argv[1:])}")
            print("Run 'python manage.py' to see available commands")
            sys.exit(1)
    except BoardError as e:
        logger.error(f"Command '{command}' failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
