"""Shared base for records persisted in MongoDB."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T", bound="MongoModel")


class CamelModel(BaseModel):
    """snake_case attributes, camelCase on the wire and in storage."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )


class MongoModel(CamelModel):
    id: Optional[str] = None

    @classmethod
    def from_mongo(cls: Type[T], raw: Optional[Mapping[str, Any]]) -> Optional[T]:
        if not raw:
            return None
        data = {k: (str(v) if isinstance(v, ObjectId) else v) for k, v in raw.items()}
        if "_id" in data:
            data["id"] = data.pop("_id")
        return cls.model_validate(data)

    def to_mongo(self) -> Dict[str, Any]:
        """Storage representation (no id; Mongo assigns _id)."""
        return self.model_dump(by_alias=True, exclude={"id"})

    def public(self) -> Dict[str, Any]:
        """JSON-safe representation for API responses."""
        return self.model_dump(by_alias=True, mode="json")
