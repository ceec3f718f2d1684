"""Common Pydantic base classes."""

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class DocumentSchema(BaseSchema):
    """A stored MongoDB document. `_id` is exposed as a hex string."""

    id: Optional[str] = Field(default=None, alias="_id")
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v

    def to_json(self) -> dict[str, Any]:
        """JSON-safe representation using store field names."""
        return self.model_dump(by_alias=True, mode="json")
