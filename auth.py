# auth.py (FastAPI-Users v14 wiring; admins are superusers)
from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import AsyncGenerator, Optional, Union

from dotenv import load_dotenv
from fastapi import Depends, Request
from fastapi_users import FastAPIUsers, InvalidPasswordException
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, JWTStrategy
from fastapi_users.manager import BaseUserManager
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from db_async import get_async_session
from models_user import User
from schemas_user import UserCreate

# -----------------------------------------------------------------------------
# ENV / SECRETS
# -----------------------------------------------------------------------------
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

SECRET = os.getenv("SECRET_KEY")
if not SECRET:
    raise RuntimeError("Missing SECRET_KEY in environment (.env)")

MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", "8"))

# -----------------------------------------------------------------------------
# Authentication (JWT over Bearer)
# -----------------------------------------------------------------------------
bearer_transport = BearerTransport(tokenUrl="/auth/jwt/login")

def get_jwt_strategy() -> JWTStrategy:
    lifetime_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
    return JWTStrategy(secret=SECRET, lifetime_seconds=lifetime_minutes * 60)

auth_backend = AuthenticationBackend(
    name="jwt-bearer",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

# -----------------------------------------------------------------------------
# Database adapter (async SQLAlchemy)
# -----------------------------------------------------------------------------
async def get_user_db(
    session: AsyncSession = Depends(get_async_session),
) -> AsyncGenerator[SQLAlchemyUserDatabase, None]:
    yield SQLAlchemyUserDatabase(session, User)

# -----------------------------------------------------------------------------
# User manager
# -----------------------------------------------------------------------------
class UserManager(BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = SECRET
    verification_token_secret = SECRET

    # v14 needs this to parse JWT "sub" -> UUID
    def parse_id(self, user_id: str) -> uuid.UUID:
        return uuid.UUID(user_id)

    async def validate_password(self, password: str, user: Union[UserCreate, User]) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidPasswordException(
                reason=f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
            )

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        # new accounts are plain operators until promoted (promote_superuser.py)
        logging.info(f"Registered dashboard user {user.email}")

async def get_user_manager(
    user_db=Depends(get_user_db),
) -> AsyncGenerator[UserManager, None]:
    yield UserManager(user_db)

# -----------------------------------------------------------------------------
# FastAPI-Users instance
# -----------------------------------------------------------------------------
fastapi_users = FastAPIUsers[User, uuid.UUID](
    get_user_manager,
    [auth_backend],
)

# -----------------------------------------------------------------------------
# Dependencies for routes
# -----------------------------------------------------------------------------
current_user = fastapi_users.current_user(active=True)
current_superuser = fastapi_users.current_user(active=True, superuser=True)
