# schemas_park.py — request/response bodies for the /admin park routes
from __future__ import annotations
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# ---------------------------------------------------------------------
# Requests (upserts)
# ---------------------------------------------------------------------
class ParkUpsert(BaseModel):
    name: str
    slug: str
    is_active: bool = True

    @field_validator("name", "slug")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_required(value)


class PrefixUpsert(BaseModel):
    park_id: uuid.UUID
    path_prefix: str
    is_active: bool = True

    @field_validator("path_prefix")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_required(value)


class AttractionUpsert(BaseModel):
    park_id: uuid.UUID
    slug: str
    name: str
    is_active: bool = True

    @field_validator("name", "slug")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_required(value)


class CameraUpsert(BaseModel):
    park_id: uuid.UUID
    customer_code: str = Field(..., pattern=r"^[0-9]{4}$", description="4-digit code embedded in file names")
    camera_name: Optional[str] = None
    attraction_id: Optional[uuid.UUID] = None
    is_active: bool = True


class UpsertResult(BaseModel):
    id: uuid.UUID


# ---------------------------------------------------------------------
# Responses (list views)
# ---------------------------------------------------------------------
class ParkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    is_active: bool


class PrefixRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    park_id: uuid.UUID
    path_prefix: str
    is_active: bool


class AttractionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    park_id: uuid.UUID
    slug: str
    name: str
    is_active: bool


class CameraRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    park_id: uuid.UUID
    customer_code: str
    camera_name: Optional[str] = None
    attraction_id: Optional[uuid.UUID] = None
    is_active: bool
