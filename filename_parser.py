# filename_parser.py — storage path -> routing tokens (pure, never raises)
"""Extract routing tokens from an ingested photo's storage path.

Two naming conventions are live at the same time:

- current:  <prefix>/<...>/IMG_2201.jpg, 2201_20240715_143502.jpg
  The customer code is a standalone 4-digit run in the file name.
- legacy:   <prefix>/221/IMG_0001.jpg
  Older uploads sat in a per-camera folder named by the unpadded code.

Examples:
    >>> parse_filename("plose-plosebob/IMG_2201.jpg").customer_code
    '2201'
    >>> parse_filename("plose-plosebob/221/IMG_2201.jpg").legacy_customer_code
    '0221'
    >>> parse_filename("IMG_2201.jpg").prefix is None
    True
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

CUSTOMER_CODE_LENGTH = 4

# exactly four digits, not part of a longer digit run
_CUSTOMER_CODE_RE = re.compile(r"(?<!\d)(\d{4})(?!\d)")
_LEGACY_FOLDER_RE = re.compile(r"^\d{1,4}$")
_CAPTURED_AT_RE = re.compile(r"(?<!\d)(\d{8})[_-]?(\d{6})(?!\d)")


class ParsedPath(BaseModel):
    """Tokens recognised in a storage path. Unrecognised parts stay None."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    prefix: Optional[str] = None
    file_name: Optional[str] = None
    extension: Optional[str] = None
    customer_code: Optional[str] = None
    legacy_customer_code: Optional[str] = None
    captured_at: Optional[str] = None


def _segments(path: str) -> List[str]:
    return [s for s in path.strip().replace("\\", "/").split("/") if s]


def _split_extension(file_name: str):
    stem, dot, ext = file_name.rpartition(".")
    if not dot or not stem:
        return file_name, None
    return stem, ext.lower() or None


def _customer_code(stem: str) -> Optional[str]:
    m = _CUSTOMER_CODE_RE.search(stem)
    return m.group(1) if m else None


def _legacy_customer_code(folders: List[str]) -> Optional[str]:
    # nearest folder to the file wins
    for folder in reversed(folders):
        if _LEGACY_FOLDER_RE.match(folder):
            return folder.zfill(CUSTOMER_CODE_LENGTH)
    return None


def _captured_at(stem: str) -> Optional[str]:
    m = _CAPTURED_AT_RE.search(stem)
    if not m:
        return None
    try:
        ts = datetime.strptime(m.group(1) + m.group(2), "%Y%m%d%H%M%S")
    except ValueError:
        return None
    return ts.isoformat()


def parse_filename(path: Any) -> ParsedPath:
    """Parse a storage path into a ParsedPath.

    Never raises: empty, malformed or non-string input yields an all-None result.
    """
    if not isinstance(path, str):
        return ParsedPath()

    segments = _segments(path)
    if not segments:
        return ParsedPath()

    ends_with_dir = path.strip().replace("\\", "/").endswith("/")
    prefix = segments[0] if len(segments) >= 2 or ends_with_dir else None
    file_name = None if ends_with_dir else segments[-1]
    folders = segments[1:] if ends_with_dir else segments[1:-1]

    extension = None
    customer_code = None
    captured_at = None
    if file_name is not None:
        stem, extension = _split_extension(file_name)
        customer_code = _customer_code(stem)
        captured_at = _captured_at(stem)

    return ParsedPath(
        prefix=prefix,
        file_name=file_name,
        extension=extension,
        customer_code=customer_code,
        legacy_customer_code=_legacy_customer_code(folders),
        captured_at=captured_at,
    )
