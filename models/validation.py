"""
Validation of untyped board payloads.

Validators return a ValidationResult instead of raising so the HTTP layer can
pick a status code from the failure kind. `unwrap()` turns a failed result
back into an exception for callers that want to fail fast.
"""

import re
from dataclasses import dataclass
from typing import Any, Generic, Optional, Type, TypeVar, Union

from pydantic import ValidationError

from models.boards import BoardData, BoardEntity, BoardInfo
from models.errors import InvalidIdentifierError, ValidationFailure
from settings import logger

BOARD_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

T = TypeVar("T", bound=BoardEntity)


@dataclass
class ValidationResult(Generic[T]):
    """Either a validated value or the first failure found."""
    value: Optional[T] = None
    error: Optional[Union[ValidationFailure, InvalidIdentifierError]] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value


def validate_board_id(raw: Any) -> str:
    """Return `raw` if it is a safe board identifier, raise InvalidIdentifierError otherwise.

    The identifier is used as a directory name, so anything outside
    [A-Za-z0-9_-] (path separators, dots, whitespace) is rejected.
    """
    if not isinstance(raw, str) or not BOARD_ID_PATTERN.fullmatch(raw):
        raise InvalidIdentifierError(raw)
    return raw


def _first_failure(exc: ValidationError) -> ValidationFailure:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return ValidationFailure(error.get("msg", "invalid value"), location or None)


def _validate(model: Type[T], raw: Any) -> ValidationResult[T]:
    try:
        value = model.model_validate(raw)
    except ValidationError as exc:
        failure = _first_failure(exc)
        logger.debug("Payload failed validation", extra={
            "entity": model.__name__,
            "error": str(failure)
        })
        return ValidationResult(error=failure)
    return ValidationResult(value=value)


def validate_board_data(raw: Any) -> ValidationResult[BoardData]:
    """Validate a full board document, including the embedded board id."""
    result = _validate(BoardData, raw)
    if not result.ok:
        return result
    try:
        validate_board_id(result.value.board_info.id)
    except InvalidIdentifierError as exc:
        return ValidationResult(error=exc)
    logger.debug("Validated board data", extra={"board_id": result.value.board_info.id})
    return result


def validate_board_info(raw: Any) -> ValidationResult[BoardInfo]:
    """Validate board metadata, including its id."""
    result = _validate(BoardInfo, raw)
    if not result.ok:
        return result
    try:
        validate_board_id(result.value.id)
    except InvalidIdentifierError as exc:
        return ValidationResult(error=exc)
    logger.debug("Validated board info", extra={"board_id": result.value.id})
    return result


def assert_board_data(raw: Any) -> BoardData:
    return validate_board_data(raw).unwrap()


def assert_board_info(raw: Any) -> BoardInfo:
    return validate_board_info(raw).unwrap()
