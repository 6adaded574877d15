# models_park.py — parks and the routing tables used to place ingested photos
from __future__ import annotations
import uuid
from typing import List, Optional

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db_async import Base


class Park(Base):
    __tablename__ = "parks"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())

    prefixes: Mapped[List["ParkPathPrefix"]] = relationship(back_populates="park")
    attractions: Mapped[List["Attraction"]] = relationship(back_populates="park")
    cameras: Mapped[List["ParkCamera"]] = relationship(back_populates="park")


class ParkPathPrefix(Base):
    """First storage path segment that routes an upload to a park."""

    __tablename__ = "park_path_prefixes"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    park_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("parks.id"), nullable=False, index=True)
    # exact, case-sensitive match against the parsed prefix
    path_prefix: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())

    park: Mapped[Park] = relationship(back_populates="prefixes")


class Attraction(Base):
    __tablename__ = "attractions"
    __table_args__ = (UniqueConstraint("park_id", "slug", name="uq_attractions_park_id_slug"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    park_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("parks.id"), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())

    park: Mapped[Park] = relationship(back_populates="attractions")


class ParkCamera(Base):
    """Maps a 4-digit customer code inside one park to an (optional) attraction."""

    __tablename__ = "park_cameras"
    __table_args__ = (
        UniqueConstraint("park_id", "customer_code", name="uq_park_cameras_park_id_customer_code"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    park_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("parks.id"), nullable=False, index=True)
    customer_code: Mapped[str] = mapped_column(String(4), nullable=False)
    camera_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    attraction_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("attractions.id"), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())

    park: Mapped[Park] = relationship(back_populates="cameras")
    attraction: Mapped[Optional[Attraction]] = relationship()
