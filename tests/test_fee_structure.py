import logging
from datetime import date
from typing import Dict

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.api.v1.fees.defaults import DEFAULT_FEE_STRUCTURE
from admission_portal.api.v1.fees.schemas import FeeHead, FeeStructureSave
from admission_portal.api.v1.fees.service import (
    migrate_fee_heads,
    resolve_fee_structure,
    save_fee_structure,
    session_for_date,
)
from admission_portal.core.enums import FundType


CANONICAL_IDS = [head.id for head in DEFAULT_FEE_STRUCTURE]


class _UnreachableStore:
    """Session stand-in whose every read fails at the connection level."""

    async def get(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, ConnectionError("connection refused"))


def test_migrate_reorders_and_completes_partial_structure() -> None:
    stored = [
        {"id": 7, "name_en": "Late Fine", "name_hi": "x", "class9": 5, "class10": 5},
        {"id": 2, "name_en": "Renamed Tuition", "name_hi": "y", "class9": 300},
        {"id": 99, "name_en": "Unknown", "name_hi": "z", "class9": 1000},
    ]
    heads = migrate_fee_heads(stored)

    assert [h.id for h in heads] == CANONICAL_IDS
    tuition = heads[1]
    assert tuition.class9 == 300
    assert tuition.name_en == "Tuition Fee"
    assert tuition.fund_type == FundType.STUDENT_FUND
    assert heads[6].class9 == 5
    # Heads that were not stored keep their default amounts.
    assert heads[0] == DEFAULT_FEE_STRUCTURE[0]


def test_migrate_fills_six_buckets_from_legacy_two_bucket_heads() -> None:
    heads = migrate_fee_heads([{"id": 5, "name_en": "Science Fee", "name_hi": "x", "class9": 10, "class11": 30}])
    science = heads[4]
    assert science.class9 == 10
    assert science.class10 == 10
    assert science.class11ac == 30
    assert science.class11s == 30
    assert science.class12ac == 30
    assert science.class12s == 30


def test_migrate_empty_gives_canonical_table() -> None:
    assert migrate_fee_heads([]) == DEFAULT_FEE_STRUCTURE
    assert migrate_fee_heads(None) == DEFAULT_FEE_STRUCTURE


def test_session_for_date() -> None:
    assert session_for_date(date(2025, 4, 1)) == "2025-2026"
    assert session_for_date(date(2024, 12, 31)) == "2024-2025"


@pytest.mark.asyncio
async def test_resolve_without_stored_structure_returns_default(db_session: AsyncSession, school: Dict) -> None:
    heads = await resolve_fee_structure(db_session, school["udise"], "2025-2026")
    assert heads == DEFAULT_FEE_STRUCTURE


@pytest.mark.asyncio
async def test_resolve_falls_back_to_school_default_session(db_session: AsyncSession, school: Dict) -> None:
    heads = [h.model_copy() for h in DEFAULT_FEE_STRUCTURE]
    heads[0] = heads[0].model_copy(update={"class9": 75})
    await save_fee_structure(db_session, school["udise"], FeeStructureSave(session="default", heads=heads))

    resolved = await resolve_fee_structure(db_session, school["udise"], "2025-2026")
    assert resolved[0].class9 == 75

    session_heads = [h.model_copy() for h in DEFAULT_FEE_STRUCTURE]
    session_heads[0] = session_heads[0].model_copy(update={"class9": 90})
    await save_fee_structure(db_session, school["udise"], FeeStructureSave(session="2025-2026", heads=session_heads))

    assert (await resolve_fee_structure(db_session, school["udise"], "2025-2026"))[0].class9 == 90
    assert (await resolve_fee_structure(db_session, school["udise"], "2024-2025"))[0].class9 == 75


@pytest.mark.asyncio
async def test_resolve_on_store_failure_returns_default() -> None:
    heads = await resolve_fee_structure(_UnreachableStore(), "10150600101", "2025-2026")
    assert heads == DEFAULT_FEE_STRUCTURE


@pytest.mark.asyncio
async def test_store_failure_is_logged_once_as_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="admission_portal"):
        heads = await resolve_fee_structure(_UnreachableStore(), "10150600101", "2025-2026")

    assert heads == DEFAULT_FEE_STRUCTURE
    records = [r for r in caplog.records if r.name.startswith("admission_portal")]
    assert [r.levelno for r in records] == [logging.WARNING]
    assert "Falling back to default fee structure" in records[0].getMessage()


@pytest.mark.asyncio
async def test_save_and_read_structure_over_http(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    payload = {
        "session": "2025-2026",
        "heads": [
            {"id": 2, "name_en": "Tuition", "name_hi": "शिक्षण", "class9": 260, "class10": 260,
             "class11ac": 300, "class11s": 300, "class12ac": 300, "class12s": 300},
        ],
    }
    saved = await client.put("/api/v1/fees/structure", json=payload, headers=auth_headers)
    assert saved.status_code == 200, saved.text
    assert [h["id"] for h in saved.json()["heads"]] == CANONICAL_IDS

    read = await client.get("/api/v1/fees/structure", params={"session": "2025-2026"}, headers=auth_headers)
    assert read.status_code == 200
    tuition = read.json()["heads"][1]
    assert tuition["class9"] == 260
    assert tuition["name_en"] == "Tuition Fee"

    calc = await client.get(
        "/api/v1/fees/calculate",
        params={"class_selection": "9", "caste": "gen", "session": "2025-2026"},
        headers=auth_headers,
    )
    assert calc.status_code == 200
    assert calc.json()["total_fee"] == 1140 + 20


@pytest.mark.asyncio
async def test_save_structure_rejects_bad_session(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    payload = {"session": "2025", "heads": [{"id": 1, "name_en": "A", "name_hi": "B"}]}
    response = await client.put("/api/v1/fees/structure", json=payload, headers=auth_headers)
    assert response.status_code == 422


def test_fee_head_rejects_negative_amount() -> None:
    with pytest.raises(ValueError):
        FeeHead(id=1, name_en="Admission Fee", name_hi="प्रवेश शुल्क", class9=-1)
