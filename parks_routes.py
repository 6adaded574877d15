# parks_routes.py — admin endpoints for parks, routing tables and path preview
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth import current_superuser
from db_async import get_async_session
from models_park import Attraction, Park, ParkCamera, ParkPathPrefix
from models_user import User
from park_lookups import SqlPathLookups
from path_resolver import LookupFailedError, PathLookups, PathPreview, preview_path
from schemas_park import (
    AttractionRead,
    AttractionUpsert,
    CameraRead,
    CameraUpsert,
    ParkRead,
    ParkUpsert,
    PrefixRead,
    PrefixUpsert,
    UpsertResult,
)

router = APIRouter(prefix="/admin", tags=["admin"])


def get_path_lookups(session: AsyncSession = Depends(get_async_session)) -> PathLookups:
    return SqlPathLookups(session)


async def _write_or_conflict(session: AsyncSession, detail: str, commit: bool = True) -> None:
    """Flush or commit pending rows; a unique/FK violation becomes 409."""
    try:
        if commit:
            await session.commit()
        else:
            await session.flush()
    except IntegrityError as e:
        await session.rollback()
        logging.warning(f"{detail} ({e.orig})")
        raise HTTPException(status.HTTP_409_CONFLICT, detail)


async def _require_park(session: AsyncSession, park_id: UUID) -> Park:
    park = await session.get(Park, park_id)
    if park is None:
        raise HTTPException(404, f"Unknown park id: {park_id}")
    return park


async def _delete_by_id(session: AsyncSession, model, row_id: UUID, label: str, conflict: str) -> None:
    try:
        res = await session.execute(delete(model).where(model.id == row_id))
        if res.rowcount == 0:
            raise HTTPException(404, f"Unknown {label} id: {row_id}")
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logging.warning(f"Delete of {label} {row_id} blocked: {e.orig}")
        raise HTTPException(status.HTTP_409_CONFLICT, conflict)
    logging.info(f"Deleted {label} {row_id}")


# --- Ingestion path preview (parse + resolve) ---
@router.get("/preview-parse", response_model=PathPreview)
async def preview_parse(
    path: str = Query("", description="Storage path of an ingested photo"),
    _: User = Depends(current_superuser),
    lookups: PathLookups = Depends(get_path_lookups),
):
    if not path.strip():
        raise HTTPException(400, "Missing ?path=")
    try:
        return await preview_path(path, lookups)
    except LookupFailedError as e:
        logging.error(f"Preview for {path!r} failed: {e}")
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, f"Lookup failed: {e}")


# --- Parks ---
@router.get("/parks", response_model=List[ParkRead])
async def list_parks(
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    res = await session.execute(select(Park).order_by(Park.name))
    return res.scalars().all()

@router.post("/parks", response_model=UpsertResult)
async def upsert_park(
    body: ParkUpsert,
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    park = (await session.execute(select(Park).where(Park.slug == body.slug))).scalar_one_or_none()
    if park is None:
        park = Park(name=body.name, slug=body.slug, is_active=body.is_active)
        session.add(park)
        await _write_or_conflict(session, f"Park slug {body.slug!r} conflicts with an existing row", commit=False)
    else:
        park.name = body.name
        park.is_active = body.is_active

    # every park is routable by its slug
    prefix = (
        await session.execute(select(ParkPathPrefix).where(ParkPathPrefix.path_prefix == body.slug))
    ).scalar_one_or_none()
    if prefix is None:
        session.add(ParkPathPrefix(park_id=park.id, path_prefix=body.slug, is_active=True))
    else:
        prefix.park_id = park.id
        prefix.is_active = True

    park_id = park.id
    await _write_or_conflict(session, f"Park slug {body.slug!r} conflicts with an existing row")
    logging.info(f"Upserted park {body.slug} ({park_id})")
    return UpsertResult(id=park_id)

@router.delete("/parks/{park_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_park(
    park_id: UUID,
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    await _delete_by_id(
        session, Park, park_id, "park",
        "Park cannot be deleted while dependent rows exist (prefixes, attractions, cameras).",
    )


# --- Path prefixes ---
@router.get("/park-prefixes", response_model=List[PrefixRead])
async def list_prefixes(
    park_id: Optional[UUID] = Query(None),
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    stmt = select(ParkPathPrefix)
    if park_id is not None:
        stmt = stmt.where(ParkPathPrefix.park_id == park_id)
    res = await session.execute(stmt.order_by(ParkPathPrefix.path_prefix))
    return res.scalars().all()

@router.post("/park-prefixes", response_model=UpsertResult)
async def upsert_prefix(
    body: PrefixUpsert,
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    await _require_park(session, body.park_id)
    prefix = (
        await session.execute(select(ParkPathPrefix).where(ParkPathPrefix.path_prefix == body.path_prefix))
    ).scalar_one_or_none()
    if prefix is None:
        prefix = ParkPathPrefix(park_id=body.park_id, path_prefix=body.path_prefix, is_active=body.is_active)
        session.add(prefix)
        await _write_or_conflict(session, f"Prefix {body.path_prefix!r} conflicts with an existing row", commit=False)
    else:
        prefix.park_id = body.park_id
        prefix.is_active = body.is_active

    prefix_id = prefix.id
    await _write_or_conflict(session, f"Prefix {body.path_prefix!r} conflicts with an existing row")
    logging.info(f"Upserted prefix {body.path_prefix} -> park {body.park_id}")
    return UpsertResult(id=prefix_id)

@router.delete("/park-prefixes/{prefix_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prefix(
    prefix_id: UUID,
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    await _delete_by_id(
        session, ParkPathPrefix, prefix_id, "prefix",
        "Prefix cannot be deleted while dependent rows exist.",
    )


# --- Attractions ---
@router.get("/attractions", response_model=List[AttractionRead])
async def list_attractions(
    park_id: Optional[UUID] = Query(None),
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    stmt = select(Attraction)
    if park_id is not None:
        stmt = stmt.where(Attraction.park_id == park_id)
    res = await session.execute(stmt.order_by(Attraction.name))
    return res.scalars().all()

@router.post("/attractions", response_model=UpsertResult)
async def upsert_attraction(
    body: AttractionUpsert,
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    await _require_park(session, body.park_id)
    attraction = (
        await session.execute(
            select(Attraction).where(Attraction.park_id == body.park_id, Attraction.slug == body.slug)
        )
    ).scalar_one_or_none()
    if attraction is None:
        attraction = Attraction(park_id=body.park_id, slug=body.slug, name=body.name, is_active=body.is_active)
        session.add(attraction)
        await _write_or_conflict(session, f"Attraction {body.slug!r} conflicts with an existing row", commit=False)
    else:
        attraction.name = body.name
        attraction.is_active = body.is_active

    attraction_id = attraction.id
    await _write_or_conflict(session, f"Attraction {body.slug!r} conflicts with an existing row")
    logging.info(f"Upserted attraction {body.slug} in park {body.park_id}")
    return UpsertResult(id=attraction_id)

@router.delete("/attractions/{attraction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attraction(
    attraction_id: UUID,
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    await _delete_by_id(
        session, Attraction, attraction_id, "attraction",
        "Attraction cannot be deleted while it is still in use (e.g. by camera mappings).",
    )


# --- Camera mappings ---
@router.get("/park-cameras", response_model=List[CameraRead])
async def list_cameras(
    park_id: Optional[UUID] = Query(None),
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    stmt = select(ParkCamera)
    if park_id is not None:
        stmt = stmt.where(ParkCamera.park_id == park_id)
    res = await session.execute(stmt.order_by(ParkCamera.customer_code))
    return res.scalars().all()

@router.post("/park-cameras", response_model=UpsertResult)
async def upsert_camera(
    body: CameraUpsert,
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    await _require_park(session, body.park_id)
    if body.attraction_id is not None:
        attraction = await session.get(Attraction, body.attraction_id)
        if attraction is None or attraction.park_id != body.park_id:
            raise HTTPException(400, "attraction_id must reference an attraction of the same park")

    camera = (
        await session.execute(
            select(ParkCamera).where(
                ParkCamera.park_id == body.park_id,
                ParkCamera.customer_code == body.customer_code,
            )
        )
    ).scalar_one_or_none()
    if camera is None:
        camera = ParkCamera(
            park_id=body.park_id,
            customer_code=body.customer_code,
            camera_name=body.camera_name,
            attraction_id=body.attraction_id,
            is_active=body.is_active,
        )
        session.add(camera)
        await _write_or_conflict(session, f"Camera code {body.customer_code} conflicts with an existing row", commit=False)
    else:
        camera.camera_name = body.camera_name
        camera.attraction_id = body.attraction_id
        camera.is_active = body.is_active

    camera_id = camera.id
    await _write_or_conflict(session, f"Camera code {body.customer_code} conflicts with an existing row")
    logging.info(f"Upserted camera {body.customer_code} in park {body.park_id}")
    return UpsertResult(id=camera_id)

@router.delete("/park-cameras/{camera_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_camera(
    camera_id: UUID,
    _: User = Depends(current_superuser),
    session: AsyncSession = Depends(get_async_session),
):
    await _delete_by_id(
        session, ParkCamera, camera_id, "camera",
        "Camera cannot be deleted while it is still referenced.",
    )
