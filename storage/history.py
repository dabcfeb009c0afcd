"""
Backups and board renames.

A snapshot copies the canonical board.json byte for byte into the board's
backups directory under a second-resolution, lexicographically sortable
timestamp. Snapshots are never pruned.
"""

import os
import re
from datetime import datetime
from typing import Callable, List, Optional

from models.boards import BoardData, BoardInfo
from models.errors import ConflictError, IOFailure, NotFoundError
from settings import logger
from storage.board_store import BoardStore, parse_board_document

TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"
HISTORY_FILE_PATTERN = re.compile(r"board-(\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2})\.json")


def make_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


class HistoryManager:
    """Snapshots, history listing and directory renames for one BoardStore."""

    def __init__(self, store: BoardStore, clock: Callable[[], str] = make_timestamp):
        self.store = store
        self.clock = clock

    def snapshot(self, board_id: str) -> Optional[str]:
        """Back up the canonical file; return the backup filename, or None if there was nothing to copy.

        Two snapshots within the same second share a filename, the later one wins.
        """
        source = self.store.board_file(board_id)
        try:
            content = source.read_bytes()
        except FileNotFoundError:
            logger.debug("Did not write history, board file does not exist", extra={
                "board_id": board_id,
                "path": str(source)
            })
            return None
        except OSError as e:
            raise IOFailure(f"Failed to write history for board '{board_id}' at '{source}': {e}") from e

        target = self.store.history_file(board_id, self.clock())
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            raise IOFailure(f"Failed to write history for board '{board_id}' at '{target}': {e}") from e

        logger.debug("Created history", extra={"board_id": board_id, "history_file": target.name})
        return target.name

    def list_history(self, board_id: str) -> List[str]:
        """Backup filenames, most recent first."""
        history_dir = self.store.history_dir(board_id)
        try:
            files = os.listdir(history_dir)
        except FileNotFoundError as e:
            raise NotFoundError(f"No history for board '{board_id}'") from e
        except OSError as e:
            raise IOFailure(f"Failed to read history directory '{history_dir}': {e}") from e
        return sorted(files, reverse=True)

    def read_history(self, board_id: str, filename: str) -> BoardData:
        """Load one backup, validated like the canonical document."""
        match = HISTORY_FILE_PATTERN.fullmatch(filename)
        if match is None:
            raise NotFoundError(f"'{filename}' is not a history file name")
        file_path = self.store.history_file(board_id, match.group(1))
        logger.debug("Reading history data", extra={"board_id": board_id, "path": str(file_path)})
        try:
            raw_bytes = file_path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"History file '{filename}' of board '{board_id}' does not exist") from e
        except OSError as e:
            raise IOFailure(f"Failed to read history file '{file_path}': {e}") from e
        return parse_board_document(raw_bytes, file_path)

    def rename(self, old_board_id: str, new_board_id: str) -> None:
        """Move the whole board directory, backups included, to a new identifier.

        The caller snapshots the old board before calling this.
        """
        if self.store.exists(new_board_id):
            raise ConflictError(
                f"Cannot move board data directory - Target board id '{new_board_id}' is already in use."
            )

        old_dir = self.store.board_dir(old_board_id)
        new_dir = self.store.board_dir(new_board_id)
        try:
            os.rename(old_dir, new_dir)
        except FileNotFoundError as e:
            raise NotFoundError(f"Board '{old_board_id}' does not exist") from e
        except OSError as e:
            raise IOFailure(f"Failed to move board data directory from '{old_dir}' to '{new_dir}': {e}") from e

        logger.info("Moved board data directory", extra={
            "old_board_id": old_board_id,
            "new_board_id": new_board_id
        })


def change_board_info(store: BoardStore, history: HistoryManager, old_board_id: str, new_board_info: BoardInfo) -> bool:
    """Apply new board metadata; return False when neither id nor name differ.

    Order: snapshot the old board, move its directory if the id changed,
    then rewrite the document under the new id.
    """
    board_data = store.read(old_board_id)

    id_changed = old_board_id != new_board_info.id
    name_changed = board_data.board_info.name != new_board_info.name
    if not id_changed and not name_changed:
        return False

    history.snapshot(old_board_id)
    if id_changed:
        history.rename(old_board_id, new_board_info.id)

    board_data.board_info = new_board_info
    store.write(new_board_info.id, board_data)
    return True
