"""
Partial updates for board entities.

A field counts as present when it was passed explicitly and is not None.
Ids and type tags are not part of any patch, so they can never be edited.
"""

from typing import Any, Dict, Optional

from pydantic import Field, StrictInt, StrictStr

from models.boards import BoardEntity


class EntityPatch(BoardEntity):
    """Base for per-entity patches."""

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly set on this patch, keyed by Python attribute name."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }


class RowPatch(EntityPatch):
    title: Optional[StrictStr] = None
    num_of_cols: Optional[StrictInt] = Field(default=None, ge=0)
    header_prefix: Optional[StrictStr] = None


class HeaderPatch(EntityPatch):
    title: Optional[StrictStr] = None


class BodyPatch(EntityPatch):
    title: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    note: Optional[StrictStr] = None


class FooterPatch(EntityPatch):
    description: Optional[StrictStr] = None
