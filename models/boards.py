from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel


class EntityType(str, Enum):
    """Discriminator tags carried in the `type` field of every entity."""
    BOARD_DATA = "BoardData"
    BOARD_INFO = "BoardInfo"
    ROW_DATA = "RowData"
    HEADER_DATA = "HeaderData"
    BODY_DATA = "BodyData"
    FOOTER_DATA = "FooterData"


class BoardEntity(BaseModel):
    """Common config: camelCase on the wire, snake_case in Python, unknown keys dropped."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class HeaderData(BoardEntity):
    """Column label; headers[i] pairs with footers[i] of the same row."""
    type: Literal["HeaderData"]
    id: StrictStr
    title: StrictStr


class FooterData(BoardEntity):
    """Column note, positionally aligned with the header of the same index."""
    type: Literal["FooterData"]
    id: StrictStr
    description: StrictStr


class BodyData(BoardEntity):
    """Free-floating card within a row."""
    type: Literal["BodyData"]
    id: StrictStr
    title: StrictStr
    description: StrictStr
    note: Optional[StrictStr] = None


class RowData(BoardEntity):
    """Horizontal lane of sprint columns."""
    type: Literal["RowData"]
    id: StrictStr
    title: StrictStr
    num_of_cols: StrictInt = Field(..., ge=0)
    header_prefix: StrictStr
    headers: List[HeaderData]
    bodies: List[BodyData]
    footers: List[FooterData]


class BoardInfo(BoardEntity):
    """Board metadata; `id` doubles as the storage key."""
    type: Literal["BoardInfo"]
    id: StrictStr
    name: StrictStr


class BoardData(BoardEntity):
    """Root aggregate persisted as board.json."""
    type: Literal["BoardData"]
    board_info: BoardInfo
    rows: List[RowData]


def dump_entity(entity: BoardEntity) -> Dict[str, Any]:
    """Serialize an entity to its JSON document shape (camelCase keys, absent note omitted)."""
    return entity.model_dump(mode="json", by_alias=True, exclude_none=True)
