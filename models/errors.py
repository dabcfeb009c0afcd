from typing import Optional


class BoardError(Exception):
    """Base class for all board service failures."""


class InvalidIdentifierError(BoardError):
    """Board identifier is empty or contains characters outside [A-Za-z0-9_-]."""

    def __init__(self, board_id: object):
        self.board_id = board_id
        super().__init__(f"Invalid board ID: '{board_id}'")


class ValidationFailure(BoardError):
    """Payload does not match the expected entity shape."""

    def __init__(self, message: str, location: Optional[str] = None):
        self.message = message
        self.location = location
        if location:
            super().__init__(f"{location}: {message}")
        else:
            super().__init__(message)


class NotFoundError(BoardError):
    """A board file, board directory or history directory is absent."""


class CorruptDataError(NotFoundError):
    """Canonical or history file exists but cannot be parsed or validated."""


class ConflictError(BoardError):
    """Target board identifier is already in use."""


class IOFailure(BoardError):
    """Unexpected file-system error."""


class EntityNotFoundError(BoardError):
    """In-memory lookup miss during a board mutation."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found: {entity_id}")


class AlignmentError(BoardError):
    """A row's header or footer count drifted from its numOfCols."""
