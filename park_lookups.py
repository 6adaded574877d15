# park_lookups.py — SQLAlchemy implementation of the resolver's PathLookups
from __future__ import annotations

import logging
import uuid
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models_park import Attraction, Park, ParkCamera, ParkPathPrefix
from path_resolver import AttractionMatch, CameraMatch, LookupFailedError, PrefixMatch

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class SqlPathLookups:
    """Read-only lookups against the park tables, one SELECT per call."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fetch(self, stmt, model: Type[M], what: str) -> Optional[M]:
        try:
            row = (await self.session.execute(stmt)).one_or_none()
        except SQLAlchemyError as e:
            logger.debug(f"{what} lookup failed: {e}")
            raise LookupFailedError(f"{what} lookup failed: {e}") from e
        if row is None:
            return None
        try:
            return model.model_validate(dict(row._mapping))
        except ValidationError as e:
            raise LookupFailedError(f"{what} lookup returned an invalid row: {e}") from e

    async def find_active_prefix(self, path_prefix: str) -> Optional[PrefixMatch]:
        stmt = (
            select(ParkPathPrefix.park_id.label("park_id"), Park.name.label("park_name"))
            .select_from(ParkPathPrefix)
            .join(Park, Park.id == ParkPathPrefix.park_id)
            .where(
                ParkPathPrefix.path_prefix == path_prefix,
                ParkPathPrefix.is_active.is_(True),
            )
        )
        return await self._fetch(stmt, PrefixMatch, "prefix")

    async def find_active_camera(self, park_id: uuid.UUID, customer_code: str) -> Optional[CameraMatch]:
        stmt = select(ParkCamera.attraction_id.label("attraction_id")).where(
            ParkCamera.park_id == park_id,
            ParkCamera.customer_code == customer_code,
            ParkCamera.is_active.is_(True),
        )
        return await self._fetch(stmt, CameraMatch, "camera")

    async def find_attraction(self, attraction_id: uuid.UUID) -> Optional[AttractionMatch]:
        stmt = select(Attraction.name.label("name")).where(Attraction.id == attraction_id)
        return await self._fetch(stmt, AttractionMatch, "attraction")
