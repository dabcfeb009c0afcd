"""
File-system persistence for board documents.

Layout under the data root:

    <data_root>/<board_id>/board.json                      canonical document
    <data_root>/<board_id>/backups/board-<timestamp>.json  history snapshots
"""

import json
import locale
import shutil
from pathlib import Path
from typing import List, Union

from models.boards import BoardData, BoardInfo, dump_entity
from models.errors import BoardError, CorruptDataError, IOFailure, NotFoundError
from models.validation import validate_board_data, validate_board_id
from settings import logger

BOARD_FILE_NAME = "board.json"
HISTORY_DIR_NAME = "backups"


def name_sort_key(name: str) -> tuple:
    """Case-insensitive collation key; case only breaks ties.

    Uses the process LC_COLLATE through strxfrm, so accented names follow the
    host locale once one is set. In the C locale the casefold step still keeps
    "alpha" ahead of "Zeta".
    """
    return locale.strxfrm(name.casefold()), locale.strxfrm(name)


def parse_board_document(raw_bytes: bytes, source: Path) -> BoardData:
    """Decode, parse and validate a board document read from `source`."""
    try:
        payload = json.loads(raw_bytes.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CorruptDataError(f"Board file '{source}' is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"Board file '{source}' is not valid JSON: {e}") from e
    result = validate_board_data(payload)
    if not result.ok:
        raise CorruptDataError(f"Board file '{source}' failed validation: {result.error}") from result.error
    return result.value


class BoardStore:
    """Maps board identifiers to directories below a data root."""

    def __init__(self, data_root: Union[str, Path]):
        self.data_root = Path(data_root).resolve()

    def board_dir(self, board_id: str) -> Path:
        return self.data_root / validate_board_id(board_id)

    def board_file(self, board_id: str) -> Path:
        return self.board_dir(board_id) / BOARD_FILE_NAME

    def history_dir(self, board_id: str) -> Path:
        return self.board_dir(board_id) / HISTORY_DIR_NAME

    def history_file(self, board_id: str, timestamp: str) -> Path:
        return self.history_dir(board_id) / f"board-{timestamp}.json"

    def exists(self, board_id: str) -> bool:
        """True iff the canonical file is present; other I/O errors are raised."""
        file_path = self.board_file(board_id)
        try:
            file_path.stat()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise IOFailure(f"Failed to check existence of board file '{file_path}': {e}") from e
        return True

    def read(self, board_id: str) -> BoardData:
        file_path = self.board_file(board_id)
        logger.debug("Reading board data", extra={"board_id": board_id, "path": str(file_path)})
        try:
            raw_bytes = file_path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"Board '{board_id}' does not exist") from e
        except OSError as e:
            raise IOFailure(f"Failed to read board file '{file_path}': {e}") from e
        return parse_board_document(raw_bytes, file_path)

    def write(self, board_id: str, board_data: BoardData) -> None:
        """Overwrite the canonical file with pretty-printed JSON."""
        file_path = self.board_file(board_id)
        logger.debug("Writing board data", extra={"board_id": board_id, "path": str(file_path)})
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(json.dumps(dump_entity(board_data), indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise IOFailure(f"Failed to write board file '{file_path}': {e}") from e

    def delete(self, board_id: str) -> None:
        """Remove the whole board directory, backups included."""
        board_dir = self.board_dir(board_id)
        try:
            shutil.rmtree(board_dir)
        except FileNotFoundError as e:
            raise NotFoundError(f"Board '{board_id}' does not exist") from e
        except OSError as e:
            raise IOFailure(f"Failed to delete board directory '{board_dir}': {e}") from e
        logger.info("Deleted board directory", extra={"board_id": board_id})

    def list_all(self) -> List[BoardInfo]:
        """Board infos of every readable board, sorted by name.

        Directories without a valid board.json are skipped with a warning.
        """
        try:
            self.data_root.mkdir(parents=True, exist_ok=True)
            board_dirs = sorted(p for p in self.data_root.iterdir() if p.is_dir())
        except OSError as e:
            raise IOFailure(f"Failed to list board directory '{self.data_root}': {e}") from e

        board_infos: List[BoardInfo] = []
        for board_dir in board_dirs:
            board_id = board_dir.name
            try:
                board_infos.append(self.read(board_id).board_info)
            except BoardError as e:
                logger.warning("Skipping invalid board data", extra={
                    "board_id": board_id,
                    "error": str(e)
                })

        return sorted(board_infos, key=lambda info: name_sort_key(info.name))
