from datetime import date
from typing import Dict

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.api.v1.fees.defaults import DEFAULT_FEE_STRUCTURE
from admission_portal.api.v1.fees.schemas import FeeStructureSave
from admission_portal.api.v1.fees.service import save_fee_structure
from admission_portal.api.v1.reports.service import get_filtered_admissions
from admission_portal.core.models import Admission


def _approved(school_code: str, number: str, admission_date: date, class_selection: str, caste: str) -> Admission:
    return Admission(
        school_code=school_code,
        admission_number=number,
        roll_number="1",
        admission_date=admission_date,
        class_selection=class_selection,
        status="approved",
        student_details={"name_en": f"Student {number}", "name_hi": "छात्र", "father_name_en": "Father", "caste": caste},
    )


@pytest.fixture()
async def admissions(db_session: AsyncSession, school: Dict) -> Dict[str, Admission]:
    udise = school["udise"]
    records = {
        "gen9": _approved(udise, "ADM/25/0001", date(2025, 4, 1), "9", "gen"),
        "sc9": _approved(udise, "ADM/25/0002", date(2025, 4, 1), "9", "sc"),
        "bc11s": _approved(udise, "ADM/25/0003", date(2025, 4, 2), "11-science", "bc"),
        "old": _approved(udise, "ADM/24/0001", date(2024, 4, 1), "10", "gen"),
    }
    db_session.add_all(records.values())
    db_session.add(
        Admission(
            school_code=udise,
            class_selection="9",
            status="pending",
            student_details={"name_en": "Waiting", "caste": "gen"},
        )
    )
    await db_session.commit()
    return records


@pytest.mark.asyncio
async def test_daily_register_totals(
    client: AsyncClient, auth_headers: Dict[str, str], admissions: Dict[str, Admission]
) -> None:
    response = await client.get("/api/v1/reports/daily", params={"date": "2025-04-01"}, headers=auth_headers)
    assert response.status_code == 200, response.text
    body = response.json()

    totals_by_number = {row["admission_number"]: row["fees"]["total_fee"] for row in body["rows"]}
    assert totals_by_number == {"ADM/25/0001": 1140, "ADM/25/0002": 420}
    assert body["totals"] == {"student_fund": 870 + 150, "development_fund": 270 + 270, "grand_total": 1560}


@pytest.mark.asyncio
async def test_filtered_report_by_range_class_and_caste(
    db_session: AsyncSession, school: Dict, admissions: Dict[str, Admission]
) -> None:
    udise = school["udise"]
    everything = await get_filtered_admissions(db_session, udise, date(2024, 1, 1), date(2025, 12, 31))
    assert len(everything.rows) == 4

    only_2025 = await get_filtered_admissions(db_session, udise, date(2025, 1, 1), date(2025, 12, 31))
    assert {row.admission_number for row in only_2025.rows} == {"ADM/25/0001", "ADM/25/0002", "ADM/25/0003"}

    science = await get_filtered_admissions(
        db_session, udise, date(2025, 1, 1), date(2025, 12, 31), class_selection="11-science"
    )
    assert [row.admission_number for row in science.rows] == ["ADM/25/0003"]
    assert science.totals.grand_total == 1160

    sc_only = await get_filtered_admissions(db_session, udise, date(2025, 1, 1), date(2025, 12, 31), caste="sc")
    assert [row.caste for row in sc_only.rows] == ["sc"]
    assert sc_only.rows[0].fees.is_exempt is True


@pytest.mark.asyncio
async def test_each_admission_uses_its_session_structure(
    db_session: AsyncSession, school: Dict, admissions: Dict[str, Admission]
) -> None:
    udise = school["udise"]
    heads = [h.model_copy() for h in DEFAULT_FEE_STRUCTURE]
    heads[0] = heads[0].model_copy(update={"class10": 150})
    await save_fee_structure(db_session, udise, FeeStructureSave(session="2024-2025", heads=heads))

    report = await get_filtered_admissions(db_session, udise, date(2024, 1, 1), date(2025, 12, 31))
    by_number = {row.admission_number: row for row in report.rows}

    assert by_number["ADM/24/0001"].session == "2024-2025"
    assert by_number["ADM/24/0001"].fees.total_fee == 1140 + 100
    assert by_number["ADM/25/0001"].fees.total_fee == 1140
    assert report.totals.grand_total == sum(row.fees.total_fee for row in report.rows)


@pytest.mark.asyncio
async def test_report_rejects_reversed_range(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await client.get(
        "/api/v1/reports/admissions",
        params={"start_date": "2025-05-01", "end_date": "2025-04-01"},
        headers=auth_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_fee_receipt(
    client: AsyncClient, auth_headers: Dict[str, str], admissions: Dict[str, Admission]
) -> None:
    admission = admissions["sc9"]
    response = await client.get(f"/api/v1/reports/receipt/{admission.id}", headers=auth_headers)
    assert response.status_code == 200, response.text
    receipt = response.json()

    assert receipt["school"]["udise"] == "10150600101"
    assert receipt["admission"]["admission_number"] == "ADM/25/0002"
    assert receipt["total_fee"] == 420
    assert receipt["amount_in_words"] == "रुपये चार सौ बीस मात्र"

    student_fund = receipt["student_fund_particulars"]
    assert [p["serial"] for p in student_fund] == [1, 2, 3, 4]
    assert student_fund[1]["name_hi"] == "शिक्षण शुल्क (छूट)"
    assert student_fund[1]["amount"] == 0
    assert student_fund[0]["name_hi"] == "प्रवेश शुल्क"
    assert receipt["development_fund_particulars"][0]["serial"] == 5


@pytest.mark.asyncio
async def test_receipt_for_unknown_admission(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await client.get("/api/v1/reports/receipt/missing", headers=auth_headers)
    assert response.status_code == 404
