from datetime import date
from typing import Dict, List, Sequence

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.api.v1.admissions.numbering import generate_admission_number
from admission_portal.api.v1.maintenance.service import (
    _delete_chunk,
    delete_all_admissions_for_school,
    plan_admission_numbers,
    repair_duplicate_admission_numbers,
)
from admission_portal.core.exceptions import PartialBatchFailure, ServiceError
from admission_portal.core.models import Admission
from admission_portal.db.batch import chunked, commit_in_batches


def _admission(school_code: str, number, admission_date, status: str = "approved") -> Admission:
    return Admission(
        school_code=school_code,
        admission_number=number,
        admission_date=admission_date,
        class_selection="10",
        status=status,
        student_details={"name_en": f"Student {number}", "caste": "gen"},
    )


async def _count(db: AsyncSession, school_code: str) -> int:
    return (await db.execute(
        select(func.count(Admission.id)).where(Admission.school_code == school_code)
    )).scalar_one()


def test_chunked_sizes() -> None:
    assert [len(c) for c in chunked(list(range(1200)), 500)] == [500, 500, 200]
    assert [len(c) for c in chunked(list(range(500)), 500)] == [500]
    assert list(chunked([], 500)) == []


def test_plan_orders_by_admission_date_within_year() -> None:
    a = _admission("S", "ADM/24/0003", date(2024, 3, 1))
    b = _admission("S", "ADM/24/0001", date(2024, 1, 1))
    c = _admission("S", "ADM/24/0099", date(2024, 2, 1))
    undated = _admission("S", "X", None)

    changes, last_serials = plan_admission_numbers([a, b, c, undated])

    assert changes == [(c, "ADM/24/0002")]
    assert last_serials == {2024: 3}


@pytest.mark.asyncio
async def test_repair_renumbers_by_date(db_session: AsyncSession, school: Dict) -> None:
    udise = school["udise"]
    a = _admission(udise, "ADM/24/0003", date(2024, 3, 1))
    b = _admission(udise, "ADM/24/0001", date(2024, 1, 1))
    c = _admission(udise, "ADM/24/0099", date(2024, 2, 1))
    pending = _admission(udise, None, None, status="pending")
    db_session.add_all([a, b, c, pending])
    await db_session.commit()

    result = await repair_duplicate_admission_numbers(db_session, udise)

    assert result.success is True
    assert result.updated_count == 1
    assert (b.admission_number, c.admission_number, a.admission_number) == (
        "ADM/24/0001",
        "ADM/24/0002",
        "ADM/24/0003",
    )
    assert pending.admission_number is None

    again = await repair_duplicate_admission_numbers(db_session, udise)
    assert again.updated_count == 0
    assert again.message == "No duplicate admission numbers found. Everything looks correct."


@pytest.mark.asyncio
async def test_repair_fixes_duplicates_and_resets_counter(db_session: AsyncSession, school: Dict) -> None:
    udise = school["udise"]
    records = [
        _admission(udise, "ADM/25/0001", date(2025, 4, 1)),
        _admission(udise, "ADM/25/0001", date(2025, 4, 2)),
        _admission(udise, "ADM/25/0001", date(2025, 4, 3)),
        _admission(udise, "ADM/24/0005", date(2024, 6, 1)),
    ]
    db_session.add_all(records)
    await db_session.commit()

    result = await repair_duplicate_admission_numbers(db_session, udise, batch_limit=2)

    assert result.updated_count == 3
    assert result.batches == [2, 1]
    assert [r.admission_number for r in records] == ["ADM/25/0001", "ADM/25/0002", "ADM/25/0003", "ADM/24/0001"]

    # The next approval continues after the repaired sequence.
    assert await generate_admission_number(db_session, udise, 2025) == "ADM/25/0004"
    assert await generate_admission_number(db_session, udise, 2024) == "ADM/24/0002"


@pytest.mark.asyncio
async def test_delete_in_batches(db_session: AsyncSession, school: Dict) -> None:
    udise = school["udise"]
    db_session.add_all([_admission(udise, None, None, status="pending") for _ in range(1200)])
    db_session.add(_admission("10150600999", "ADM/25/0001", date(2025, 4, 1)))
    await db_session.commit()

    result = await delete_all_admissions_for_school(db_session, udise, batch_limit=500)

    assert result.success is True
    assert result.deleted_count == 1200
    assert result.batches == [500, 500, 200]
    assert await _count(db_session, udise) == 0
    assert await _count(db_session, "10150600999") == 1


@pytest.mark.asyncio
async def test_delete_with_no_records(db_session: AsyncSession, school: Dict) -> None:
    result = await delete_all_admissions_for_school(db_session, school["udise"])
    assert result.deleted_count == 0
    assert result.batches == []
    assert result.message == "No admission records found for this school to delete."


@pytest.mark.asyncio
async def test_delete_requires_valid_udise(db_session: AsyncSession) -> None:
    with pytest.raises(ServiceError) as exc_info:
        await delete_all_admissions_for_school(db_session, "1234")
    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
async def test_failed_batch_keeps_earlier_batches(db_session: AsyncSession, school: Dict) -> None:
    udise = school["udise"]
    db_session.add_all([_admission(udise, None, None, status="pending") for _ in range(25)])
    await db_session.commit()
    ids: List[str] = [row[0] for row in (await db_session.execute(select(Admission.id))).all()]

    calls = {"n": 0}

    async def flaky_delete(db: AsyncSession, chunk: Sequence[str]) -> None:
        calls["n"] += 1
        if calls["n"] == 3:
            raise OperationalError("DELETE", {}, ConnectionError("connection reset"))
        await _delete_chunk(db, chunk)

    with pytest.raises(PartialBatchFailure) as exc_info:
        await commit_in_batches(db_session, ids, flaky_delete, batch_limit=10, action="delete admission records")

    assert exc_info.value.deleted_count == 20
    assert "20 of 25" in exc_info.value.message
    assert await _count(db_session, udise) == 5


@pytest.mark.asyncio
async def test_clear_admissions_endpoint(
    client: AsyncClient, db_session: AsyncSession, school: Dict, auth_headers: Dict[str, str]
) -> None:
    udise = school["udise"]
    db_session.add_all([_admission(udise, None, None, status="pending") for _ in range(3)])
    await db_session.commit()

    mismatch = await client.post(
        "/api/v1/maintenance/clear-admissions", json={"udise": "10150600999"}, headers=auth_headers
    )
    assert mismatch.status_code == 400
    assert await _count(db_session, udise) == 3

    response = await client.post(
        "/api/v1/maintenance/clear-admissions", json={"udise": udise}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["deleted_count"] == 3
    assert await _count(db_session, udise) == 0


@pytest.mark.asyncio
async def test_repair_endpoint(
    client: AsyncClient, db_session: AsyncSession, school: Dict, auth_headers: Dict[str, str]
) -> None:
    udise = school["udise"]
    db_session.add_all([
        _admission(udise, "ADM/25/0002", date(2025, 4, 1)),
        _admission(udise, "ADM/25/0001", date(2025, 4, 2)),
    ])
    await db_session.commit()

    response = await client.post("/api/v1/maintenance/repair-admission-numbers", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["updated_count"] == 2
    assert body["message"] == "Successfully fixed 2 duplicate or incorrect admission number(s)."
