# main.py — Photo-park Admin API + FastAPI-Users v14.x
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

# --- FastAPI Core ---
from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# --- Auth / admin routes ---
from auth import auth_backend, current_superuser, current_user, fastapi_users
from models_user import User as DBUser
from parks_routes import router as parks_router
from schemas_user import UserCreate, UserRead, UserUpdate

# ---------------------------------------------------------------------
# CONFIG / ENV
# ---------------------------------------------------------------------
ROOT_DIR = Path(__file__).resolve().parent
load_dotenv(dotenv_path=ROOT_DIR / ".env")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------
# APP + LOGGING + CORS
# ---------------------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

app = FastAPI(title="Photo-park Admin API", version="1.0")

_origins_env = os.getenv("CORS_ALLOW_ORIGINS", "")
origins = [o.strip() for o in _origins_env.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["http://127.0.0.1:3000", "http://localhost:3000", "http://127.0.0.1:5173", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------
# FASTAPI-USERS ROUTERS (v14 compliant)
# ---------------------------------------------------------------------
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"])
app.include_router(fastapi_users.get_register_router(UserRead, UserCreate), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_reset_password_router(), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_users_router(UserRead, UserUpdate), prefix="/users", tags=["users"])
app.include_router(parks_router)

# ---------------------------------------------------------------------
# MODELS / TYPES
# ---------------------------------------------------------------------
class APICurrentUser(BaseModel):
    id: str
    email: str
    display_name: Optional[str] = None
    is_superuser: bool
    is_active: bool

# ---------------------------------------------------------------------
# ROUTES
# ---------------------------------------------------------------------
@app.get("/health")
async def health():
    return {"ok": True}

@app.get("/me", response_model=APICurrentUser)
async def who_am_i(user: DBUser = Depends(current_user)):
    return APICurrentUser(
        id=str(user.id),
        email=user.email,
        display_name=user.display_name,
        is_superuser=user.is_superuser,
        is_active=user.is_active,
    )

@app.get("/admin/ping")
async def admin_ping(_: DBUser = Depends(current_superuser)):
    return {"ok": True}
