# models_user.py — dashboard operators; admins are superusers
from __future__ import annotations
from typing import Optional
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from fastapi_users_db_sqlalchemy import SQLAlchemyBaseUserTableUUID
from db_async import Base

class User(SQLAlchemyBaseUserTableUUID, Base):
    __tablename__ = "users"
    display_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
