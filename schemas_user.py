# schemas_user.py
from __future__ import annotations
from typing import Optional
import uuid
from fastapi_users import schemas

class UserRead(schemas.BaseUser[uuid.UUID]):
    display_name: Optional[str] = None

class UserCreate(schemas.BaseUserCreate):
    display_name: Optional[str] = None

class UserUpdate(schemas.BaseUserUpdate):
    display_name: Optional[str] = None
