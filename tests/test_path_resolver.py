import asyncio
import uuid

import pytest

from filename_parser import ParsedPath, parse_filename
from path_resolver import (
    AttractionMatch,
    CameraMatch,
    LookupFailedError,
    PrefixMatch,
    ResolutionResult,
    customer_code_candidates,
    preview_path,
    resolve_path,
)

PARK = uuid.UUID("00000000-0000-0000-0000-0000000000a1")
OTHER_PARK = uuid.UUID("00000000-0000-0000-0000-0000000000a2")
BOB = uuid.UUID("00000000-0000-0000-0000-0000000000b1")
COASTER = uuid.UUID("00000000-0000-0000-0000-0000000000b2")


class FakeLookups:
    """In-memory PathLookups that records every call."""

    def __init__(self, prefixes=(), cameras=(), attractions=None, fail_on=None):
        self.prefixes = list(prefixes)
        self.cameras = list(cameras)
        self.attractions = attractions or {}
        self.fail_on = fail_on
        self.calls = []

    def _maybe_fail(self, stage):
        if self.fail_on == stage:
            raise LookupFailedError(f"{stage} lookup failed: connection reset")

    async def find_active_prefix(self, path_prefix):
        self.calls.append(("prefix", path_prefix))
        self._maybe_fail("prefix")
        for row in self.prefixes:
            if row["path_prefix"] == path_prefix and row["is_active"]:
                return PrefixMatch(park_id=row["park_id"], park_name=row.get("park_name"))
        return None

    async def find_active_camera(self, park_id, customer_code):
        self.calls.append(("camera", customer_code))
        self._maybe_fail("camera")
        for row in self.cameras:
            if row["park_id"] == park_id and row["customer_code"] == customer_code and row["is_active"]:
                return CameraMatch(attraction_id=row.get("attraction_id"))
        return None

    async def find_attraction(self, attraction_id):
        self.calls.append(("attraction", attraction_id))
        self._maybe_fail("attraction")
        name = self.attractions.get(attraction_id)
        return AttractionMatch(name=name) if name is not None else None


def plose_prefix(is_active=True):
    return {"path_prefix": "plose-plosebob", "park_id": PARK, "park_name": "Plose", "is_active": is_active}


def camera(code, attraction_id=None, is_active=True, park_id=PARK):
    return {"park_id": park_id, "customer_code": code, "attraction_id": attraction_id, "is_active": is_active}


def preview(path, lookups):
    return asyncio.run(preview_path(path, lookups))


def test_park_only_when_no_camera_mapping():
    lookups = FakeLookups(prefixes=[plose_prefix()])
    result = preview("plose-plosebob/IMG_2201.jpg", lookups)
    assert result.matched_park_id == PARK
    assert result.matched_park_name == "Plose"
    assert result.matched_customer_code is None
    assert result.matched_attraction_id is None
    assert result.matched_attraction_name is None


def test_full_match_on_primary_code():
    lookups = FakeLookups(
        prefixes=[plose_prefix()],
        cameras=[camera("2201", BOB)],
        attractions={BOB: "Plose Bob"},
    )
    result = preview("plose-plosebob/IMG_2201.jpg", lookups)
    assert result.matched_customer_code == "2201"
    assert result.matched_attraction_id == BOB
    assert result.matched_attraction_name == "Plose Bob"


def test_mapping_without_attraction_falls_through_to_legacy_code():
    lookups = FakeLookups(
        prefixes=[plose_prefix()],
        cameras=[camera("2201", None), camera("0221", BOB)],
        attractions={BOB: "Plose Bob"},
    )
    result = preview("plose-plosebob/221/IMG_2201.jpg", lookups)
    assert result.matched_customer_code == "0221"
    assert result.matched_attraction_id == BOB
    assert [c for c in lookups.calls if c[0] == "camera"] == [("camera", "2201"), ("camera", "0221")]


def test_inactive_primary_mapping_is_skipped():
    lookups = FakeLookups(
        prefixes=[plose_prefix()],
        cameras=[camera("2201", COASTER, is_active=False), camera("0221", BOB)],
        attractions={BOB: "Plose Bob", COASTER: "Coaster"},
    )
    result = preview("plose-plosebob/221/IMG_2201.jpg", lookups)
    assert result.matched_customer_code == "0221"
    assert result.matched_attraction_id == BOB


def test_inactive_row_is_invisible_next_to_active_row_with_same_key():
    lookups = FakeLookups(
        prefixes=[
            {"path_prefix": "plose-plosebob", "park_id": OTHER_PARK, "park_name": "Old", "is_active": False},
            plose_prefix(),
        ],
        cameras=[camera("2201", COASTER, is_active=False), camera("2201", BOB)],
        attractions={BOB: "Plose Bob", COASTER: "Coaster"},
    )
    result = preview("plose-plosebob/IMG_2201.jpg", lookups)
    assert result.matched_park_id == PARK
    assert result.matched_customer_code == "2201"
    assert result.matched_attraction_id == BOB
    assert result.matched_attraction_name == "Plose Bob"


def test_primary_code_wins_when_both_match():
    lookups = FakeLookups(
        prefixes=[plose_prefix()],
        cameras=[camera("2201", COASTER), camera("0221", BOB)],
        attractions={BOB: "Plose Bob", COASTER: "Coaster"},
    )
    result = preview("plose-plosebob/221/IMG_2201.jpg", lookups)
    assert result.matched_customer_code == "2201"
    assert result.matched_attraction_name == "Coaster"
    assert ("camera", "0221") not in lookups.calls


def test_camera_of_another_park_is_not_matched():
    lookups = FakeLookups(prefixes=[plose_prefix()], cameras=[camera("2201", BOB, park_id=OTHER_PARK)])
    result = preview("plose-plosebob/IMG_2201.jpg", lookups)
    assert result.matched_park_id == PARK
    assert result.matched_customer_code is None


def test_inactive_prefix_resolves_nothing():
    lookups = FakeLookups(prefixes=[plose_prefix(is_active=False)], cameras=[camera("2201", BOB)])
    result = preview("plose-plosebob/IMG_2201.jpg", lookups)
    assert result.model_dump(include=set(ResolutionResult.model_fields)) == ResolutionResult().model_dump()
    assert lookups.calls == [("prefix", "plose-plosebob")]


def test_prefix_match_is_case_sensitive():
    lookups = FakeLookups(prefixes=[plose_prefix()])
    result = preview("Plose-PloseBob/IMG_2201.jpg", lookups)
    assert result.matched_park_id is None


def test_empty_path_short_circuits():
    lookups = FakeLookups(prefixes=[plose_prefix()])
    result = preview("", lookups)
    assert result.prefix is None
    assert result.matched_park_id is None
    assert lookups.calls == []


def test_codes_without_prefix_are_not_looked_up():
    lookups = FakeLookups(prefixes=[plose_prefix()], cameras=[camera("2201", BOB)])
    result = preview("IMG_2201.jpg", lookups)
    assert result.customer_code == "2201"
    assert result.matched_customer_code is None
    assert lookups.calls == []


def test_missing_attraction_row_keeps_id():
    lookups = FakeLookups(prefixes=[plose_prefix()], cameras=[camera("2201", BOB)])
    result = preview("plose-plosebob/IMG_2201.jpg", lookups)
    assert result.matched_attraction_id == BOB
    assert result.matched_attraction_name is None


def test_empty_park_name_becomes_none():
    row = dict(plose_prefix(), park_name="")
    result = preview("plose-plosebob/x.jpg", FakeLookups(prefixes=[row]))
    assert result.matched_park_id == PARK
    assert result.matched_park_name is None


def test_prefix_failure_is_an_error_not_a_null_result():
    lookups = FakeLookups(prefixes=[plose_prefix()], fail_on="prefix")
    with pytest.raises(LookupFailedError):
        preview("plose-plosebob/IMG_2201.jpg", lookups)


def test_camera_failure_aborts_remaining_stages():
    lookups = FakeLookups(
        prefixes=[plose_prefix()],
        cameras=[camera("0221", BOB)],
        attractions={BOB: "Plose Bob"},
        fail_on="camera",
    )
    with pytest.raises(LookupFailedError):
        preview("plose-plosebob/221/IMG_2201.jpg", lookups)
    assert lookups.calls == [("prefix", "plose-plosebob"), ("camera", "2201")]


def test_duplicate_codes_are_tried_once():
    lookups = FakeLookups(prefixes=[plose_prefix()])
    asyncio.run(resolve_path(parse_filename("plose-plosebob/2201/IMG_2201.jpg"), lookups))
    assert [c for c in lookups.calls if c[0] == "camera"] == [("camera", "2201")]


@pytest.mark.parametrize(
    "primary, legacy, expected",
    [
        ("2201", "0221", ["2201", "0221"]),
        ("2201", "2201", ["2201"]),
        (None, "0221", ["0221"]),
        ("2201", None, ["2201"]),
        (None, None, []),
    ],
)
def test_customer_code_candidates(primary, legacy, expected):
    parsed = ParsedPath(customer_code=primary, legacy_customer_code=legacy)
    assert customer_code_candidates(parsed) == expected


def test_preview_flattens_both_records():
    lookups = FakeLookups(prefixes=[plose_prefix()])
    data = preview("plose-plosebob/IMG_2201.jpg", lookups).model_dump(by_alias=True, mode="json")
    assert data["prefix"] == "plose-plosebob"
    assert data["customerCode"] == "2201"
    assert data["matchedParkId"] == str(PARK)
    assert data["matchedParkName"] == "Plose"
    assert data["matchedCustomerCode"] is None
