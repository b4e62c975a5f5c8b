from datetime import datetime, timezone

from bson import ObjectId
from pydantic import BaseModel, Field, ConfigDict


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a stable string document id."""
    return str(ObjectId())


class MongoModel(BaseModel):
    """Flat document with a string `_id`, as stored in the trip collections."""
    id: str = Field(default_factory=new_id, alias="_id")

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True
    )

    @classmethod
    def from_doc(cls, doc: dict):
        """Build a model from a raw Mongo document."""
        doc = dict(doc)
        if "_id" in doc:
            doc["_id"] = str(doc["_id"])
        return cls.model_validate(doc)

    def to_doc(self) -> dict:
        """Serialize for storage, keeping `_id` as the key."""
        return self.model_dump(by_alias=True, mode="python")
