# path_resolver.py — ParsedPath -> park / camera code / attraction
from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Protocol

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from filename_parser import ParsedPath, parse_filename

logger = logging.getLogger(__name__)


class LookupFailedError(RuntimeError):
    """A lookup collaborator failed (I/O, bad row). Distinct from 'not found'."""


# ---------------------------------------------------------------------
# Collaborator records + interface
# ---------------------------------------------------------------------
class PrefixMatch(BaseModel):
    park_id: uuid.UUID
    park_name: Optional[str] = None


class CameraMatch(BaseModel):
    attraction_id: Optional[uuid.UUID] = None


class AttractionMatch(BaseModel):
    name: Optional[str] = None


class PathLookups(Protocol):
    async def find_active_prefix(self, path_prefix: str) -> Optional[PrefixMatch]: ...

    async def find_active_camera(self, park_id: uuid.UUID, customer_code: str) -> Optional[CameraMatch]: ...

    async def find_attraction(self, attraction_id: uuid.UUID) -> Optional[AttractionMatch]: ...


# ---------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------
class ResolutionResult(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    matched_park_id: Optional[uuid.UUID] = None
    matched_park_name: Optional[str] = None
    matched_customer_code: Optional[str] = None
    matched_attraction_id: Optional[uuid.UUID] = None
    matched_attraction_name: Optional[str] = None


class PathPreview(ParsedPath, ResolutionResult):
    """Parser output and resolution flattened into one record."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------
def customer_code_candidates(parsed: ParsedPath) -> List[str]:
    """Codes to try, in order: current convention first, then legacy."""
    candidates: List[str] = []
    for code in (parsed.customer_code, parsed.legacy_customer_code):
        if code and code not in candidates:
            candidates.append(code)
    return candidates


async def resolve_path(parsed: ParsedPath, lookups: PathLookups) -> ResolutionResult:
    """Run the prefix -> camera -> attraction lookups for a parsed path.

    "No match" at any stage is a normal, partially null result.
    LookupFailedError from a collaborator propagates and aborts the remaining stages.
    """
    if not parsed.prefix:
        return ResolutionResult()

    park = await lookups.find_active_prefix(parsed.prefix)
    if park is None:
        logger.debug("No active prefix row for %r", parsed.prefix)
        return ResolutionResult()

    matched_code: Optional[str] = None
    attraction_id: Optional[uuid.UUID] = None
    for code in customer_code_candidates(parsed):
        camera = await lookups.find_active_camera(park.park_id, code)
        # a mapping without an attraction does not end the search
        if camera is None or camera.attraction_id is None:
            continue
        matched_code = code
        attraction_id = camera.attraction_id
        break

    attraction_name: Optional[str] = None
    if attraction_id is not None:
        attraction = await lookups.find_attraction(attraction_id)
        attraction_name = (attraction.name or None) if attraction else None

    return ResolutionResult(
        matched_park_id=park.park_id,
        matched_park_name=park.park_name or None,
        matched_customer_code=matched_code,
        matched_attraction_id=attraction_id,
        matched_attraction_name=attraction_name,
    )


async def preview_path(path: str, lookups: PathLookups) -> PathPreview:
    parsed = parse_filename(path)
    result = await resolve_path(parsed, lookups)
    return PathPreview(**parsed.model_dump(), **result.model_dump())
