"""Roster schemas."""
from typing import Optional

from pydantic import BaseModel, Field


class MemberUpdate(BaseModel):
    """Rename a member or change their avatar."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar: Optional[str] = None
    color: Optional[str] = None


class MemberResponse(BaseModel):
    """Member of the trip."""
    id: str = Field(validation_alias="_id", serialization_alias="id")
    name: str
    color: str
    avatar: str

    model_config = {"from_attributes": True, "populate_by_name": True}
