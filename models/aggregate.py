"""
In-memory board aggregate.

Holds one board's row/header/body/footer tree and applies every edit to it,
keeping each row's headers and footers aligned with its numOfCols. Any
successful change sets `has_unsaved_changes`; only `mark_saved` with the
exact snapshot that was persisted clears it.
"""

from typing import Any, Dict, List, Optional, TypeVar

from models.boards import (
    BoardData, BoardInfo, BodyData, EntityType, FooterData, HeaderData, RowData,
)
from models.errors import AlignmentError, EntityNotFoundError
from models.helper import new_entity_id, pad2
from models.patches import BodyPatch, FooterPatch, HeaderPatch, RowPatch
from models.validation import validate_board_id
from settings import logger

T = TypeVar("T")

DEFAULT_BOARD_ID = "Tools-Team-Sprint-Planner"
DEFAULT_BOARD_NAME = "Tools Team Sprint Planner"


def assert_entity(entity: Optional[T], entity_type: EntityType, entity_id: str) -> T:
    """Return the entity or raise EntityNotFoundError if the lookup missed."""
    if entity is None:
        raise EntityNotFoundError(entity_type.value, entity_id)
    return entity


def does_change_entity(entity: Any, changes: Dict[str, Any]) -> bool:
    """True if any key in `changes` differs from the entity's current value."""
    return any(getattr(entity, key) != value for key, value in changes.items())


def empty_board(board_id: str, name: str) -> BoardData:
    return BoardData(
        type=EntityType.BOARD_DATA.value,
        board_info=BoardInfo(type=EntityType.BOARD_INFO.value, id=board_id, name=name),
        rows=[],
    )


class BoardAggregate:
    """One board's entity tree plus its dirty flag."""

    def __init__(self, board_data: Optional[BoardData] = None):
        self.board_data: BoardData = empty_board("", "")
        self.has_unsaved_changes = False
        if board_data is not None:
            self.init(board_data)

    # Lifecycle

    def init(self, board_data: Optional[BoardData] = None) -> None:
        """Adopt a fetched document, or build the default scaffold when none is given."""
        if board_data is not None:
            self.board_data = board_data
            self.has_unsaved_changes = False
            logger.debug("Initialized board data", extra={"board_id": board_data.board_info.id})
            return

        logger.debug("Initializing default board data")
        self.board_data = empty_board(DEFAULT_BOARD_ID, DEFAULT_BOARD_NAME)

        row_one = self.create_row("2025 Sprints", 12, "2025-")
        row_two = self.create_row("Unassigned Sprints")
        row_three = self.create_row("2026 Sprints", 12, "2026-")

        self.create_body(row_one.id, "Old Approach")
        self.create_body(row_one.id, "Old Approach")
        self.create_body(row_one.id, "FGC Test Manager", "EPIC 1, EPIC 2")
        self.create_body(row_one.id, "FGC Test Manager", "EPIC 3, EPIC 4")
        self.create_body(row_one.id, "FGC Commander", "EPIC A, EPIC B")

        for index, description in (
            (5, "Vasile: Paternity Leave"),
            (6, "Recruitment"),
            (7, "Vasile leaves"),
            (9, "Newcomer"),
            (10, "Benjamin: Paternity Leave"),
            (11, "Benjamin: Paternity Leave"),
        ):
            self.update_footer(row_one.footers[index].id, FooterPatch(description=description))

        for title, description in (
            ("Barcode Manager", "Migrate Vue + Python"),
            ("Device Status", "Migrate Vue + Python"),
            ("FGC Commander", "Hardening I"),
            ("FGC Commander", "Command Sequences, New Features"),
            ("EPC Admin Dashboard", ""),
            ("PowerSpy Refactoring", "Replace flot and jQuery"),
            ("PowerSpy Hardening", "Mainly bugfixes"),
            ("PowerSpy Features", "Add new requested features"),
            ("Device Manager [1]", ""),
            ("Device Manager [2]", ""),
            ("Device Manager [3]", ""),
            ("FGC Configurator [1]", ""),
            ("FGC Configurator [2]", ""),
            ("FGC Configurator [3]", ""),
        ):
            self.create_body(row_two.id, title, description)

        for title in ("FRESCO v3 [1]", "FRESCO v3 [2]", "FRESCO v3 [3]"):
            self.create_body(row_three.id, title)

    @classmethod
    def new_board(cls, board_id: str, name: str) -> "BoardAggregate":
        """Aggregate for a brand-new, empty board."""
        return cls(empty_board(validate_board_id(board_id), name))

    def mark_saved(self, snapshot: BoardData) -> None:
        """Clear the dirty flag if `snapshot` is the document currently held."""
        if self.has_unsaved_changes and snapshot is self.board_data:
            self.has_unsaved_changes = False

    # Getters

    @property
    def board_id(self) -> str:
        return self.board_data.board_info.id

    @property
    def board_name(self) -> str:
        return self.board_data.board_info.name

    @property
    def rows(self) -> List[RowData]:
        return self.board_data.rows

    def row_by_id(self, row_id: str) -> Optional[RowData]:
        return next((r for r in self.rows if r.id == row_id), None)

    def row_by_header_id(self, header_id: str) -> Optional[RowData]:
        return next((r for r in self.rows if any(h.id == header_id for h in r.headers)), None)

    def row_by_body_id(self, body_id: str) -> Optional[RowData]:
        return next((r for r in self.rows if any(b.id == body_id for b in r.bodies)), None)

    def row_by_footer_id(self, footer_id: str) -> Optional[RowData]:
        return next((r for r in self.rows if any(f.id == footer_id for f in r.footers)), None)

    def header_by_id(self, header_id: str) -> Optional[HeaderData]:
        return next((h for r in self.rows for h in r.headers if h.id == header_id), None)

    def body_by_id(self, body_id: str) -> Optional[BodyData]:
        return next((b for r in self.rows for b in r.bodies if b.id == body_id), None)

    def footer_by_id(self, footer_id: str) -> Optional[FooterData]:
        return next((f for r in self.rows for f in r.footers if f.id == footer_id), None)

    def check_alignment(self, row: RowData) -> None:
        """Raise AlignmentError unless headers and footers both match numOfCols."""
        if len(row.headers) != row.num_of_cols or len(row.footers) != row.num_of_cols:
            raise AlignmentError(
                f"Row '{row.id}' has {len(row.headers)} headers and {len(row.footers)} footers "
                f"but numOfCols is {row.num_of_cols}"
            )

    # Create

    def create_row(self, title: str = "New Row", num_of_cols: int = 0, header_prefix: str = "") -> RowData:
        row = RowData(
            type=EntityType.ROW_DATA.value,
            id=new_entity_id(),
            title=title,
            num_of_cols=num_of_cols,
            header_prefix=header_prefix,
            headers=[],
            bodies=[],
            footers=[],
        )
        self.rows.append(row)

        for i in range(num_of_cols):
            self.create_header(row.id, f"{header_prefix}{pad2(i + 1)}")
            self.create_footer(row.id)

        self.check_alignment(row)
        self.has_unsaved_changes = True
        logger.debug("Created row", extra={"row_id": row.id, "num_of_cols": num_of_cols})
        return row

    def create_header(self, row_id: str, title: str = "New Header Card") -> HeaderData:
        row = assert_entity(self.row_by_id(row_id), EntityType.ROW_DATA, row_id)
        header = HeaderData(type=EntityType.HEADER_DATA.value, id=new_entity_id(), title=title)
        row.headers.append(header)
        self.has_unsaved_changes = True
        logger.debug("Created header", extra={"row_id": row_id, "header_id": header.id})
        return header

    def create_body(self, row_id: str, title: str = "New Body Card", description: str = "", note: str = "") -> BodyData:
        row = assert_entity(self.row_by_id(row_id), EntityType.ROW_DATA, row_id)
        body = BodyData(
            type=EntityType.BODY_DATA.value,
            id=new_entity_id(),
            title=title,
            description=description,
            note=note,
        )
        row.bodies.append(body)
        self.has_unsaved_changes = True
        logger.debug("Created body", extra={"row_id": row_id, "body_id": body.id})
        return body

    def create_footer(self, row_id: str, description: str = "") -> FooterData:
        row = assert_entity(self.row_by_id(row_id), EntityType.ROW_DATA, row_id)
        footer = FooterData(type=EntityType.FOOTER_DATA.value, id=new_entity_id(), description=description)
        row.footers.append(footer)
        self.has_unsaved_changes = True
        logger.debug("Created footer", extra={"row_id": row_id, "footer_id": footer.id})
        return footer

    # Update

    def update_row(self, row_id: str, patch: RowPatch) -> None:
        """Apply a row patch, then rewrite header prefixes and reconcile columns.

        The prefix rewrite is a plain first-occurrence substring replace, so an
        old prefix that also appears later in a title is replaced there when
        the title does not start with it.
        """
        row = assert_entity(self.row_by_id(row_id), EntityType.ROW_DATA, row_id)
        changes = patch.changes()
        if not does_change_entity(row, changes):
            return

        old_prefix = row.header_prefix
        for key, value in changes.items():
            setattr(row, key, value)
        self.has_unsaved_changes = True

        for header in row.headers:
            header.title = header.title.replace(old_prefix, row.header_prefix, 1)

        if row.num_of_cols > len(row.headers):
            for i in range(len(row.headers), row.num_of_cols):
                self.create_header(row.id, f"{row.header_prefix}{pad2(i + 1)}")
        elif row.num_of_cols < len(row.headers):
            del row.headers[row.num_of_cols:]

        if row.num_of_cols > len(row.footers):
            for _ in range(len(row.footers), row.num_of_cols):
                self.create_footer(row.id)
        elif row.num_of_cols < len(row.footers):
            del row.footers[row.num_of_cols:]

        self.check_alignment(row)
        logger.debug("Updated row", extra={"row_id": row_id, "fields": sorted(changes)})

    def _merge(self, entity: Any, changes: Dict[str, Any]) -> bool:
        if not does_change_entity(entity, changes):
            return False
        for key, value in changes.items():
            setattr(entity, key, value)
        self.has_unsaved_changes = True
        return True

    def update_header(self, header_id: str, patch: HeaderPatch) -> None:
        header = assert_entity(self.header_by_id(header_id), EntityType.HEADER_DATA, header_id)
        if self._merge(header, patch.changes()):
            logger.debug("Updated header", extra={"header_id": header_id})

    def update_body(self, body_id: str, patch: BodyPatch) -> None:
        body = assert_entity(self.body_by_id(body_id), EntityType.BODY_DATA, body_id)
        if self._merge(body, patch.changes()):
            logger.debug("Updated body", extra={"body_id": body_id})

    def update_footer(self, footer_id: str, patch: FooterPatch) -> None:
        footer = assert_entity(self.footer_by_id(footer_id), EntityType.FOOTER_DATA, footer_id)
        if self._merge(footer, patch.changes()):
            logger.debug("Updated footer", extra={"footer_id": footer_id})

    # Delete

    def delete_row(self, row_id: str) -> None:
        row = assert_entity(self.row_by_id(row_id), EntityType.ROW_DATA, row_id)
        self.board_data.rows = [r for r in self.rows if r.id != row.id]
        self.has_unsaved_changes = True
        logger.debug("Deleted row", extra={"row_id": row_id})

    def delete_header(self, header_id: str) -> None:
        row = assert_entity(self.row_by_header_id(header_id), EntityType.HEADER_DATA, header_id)
        row.headers = [h for h in row.headers if h.id != header_id]
        self.has_unsaved_changes = True
        logger.debug("Deleted header", extra={"header_id": header_id})

    def delete_body(self, body_id: str) -> None:
        row = assert_entity(self.row_by_body_id(body_id), EntityType.BODY_DATA, body_id)
        row.bodies = [b for b in row.bodies if b.id != body_id]
        self.has_unsaved_changes = True
        logger.debug("Deleted body", extra={"body_id": body_id})

    def delete_footer(self, footer_id: str) -> None:
        row = assert_entity(self.row_by_footer_id(footer_id), EntityType.FOOTER_DATA, footer_id)
        row.footers = [f for f in row.footers if f.id != footer_id]
        self.has_unsaved_changes = True
        logger.debug("Deleted footer", extra={"footer_id": footer_id})
