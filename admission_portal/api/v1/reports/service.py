"""
Reports over approved admissions: fee-annotated lists, the daily collection
register and printable fee receipt data.

Each admission is charged by the fee structure of the session its admission
date falls in. Structures are resolved once per session per report.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.core.enums import AdmissionStatus
from admission_portal.core.exceptions import ServiceError
from admission_portal.core.models import Admission
from admission_portal.db.errors import translate_store_errors

from admission_portal.api.v1.admissions import service as admissions_service
from admission_portal.api.v1.fees.calculator import calculate_fees
from admission_portal.api.v1.fees.schemas import FeeHead, FeeItem
from admission_portal.api.v1.fees.service import resolve_fee_structure, session_for_date
from admission_portal.api.v1.schools import service as schools_service

from .amount_words import to_words_hindi
from .schemas import (
    AdmissionFeeRow,
    AdmissionReport,
    DailyCollectionRegister,
    FeeReceipt,
    ReceiptParticular,
    ReceiptSchool,
    ReportTotals,
)

logger = logging.getLogger(__name__)

EXEMPTED_MARKER = "(छूट)"


class FeeStructureCache:
    """Resolved fee heads per session for one school, loaded on first use."""

    def __init__(self, db: AsyncSession, school_code: str):
        self.db = db
        self.school_code = school_code
        self._heads: Dict[str, List[FeeHead]] = {}

    async def heads_for(self, session: str) -> List[FeeHead]:
        if session not in self._heads:
            self._heads[session] = await resolve_fee_structure(self.db, self.school_code, session)
        return self._heads[session]


async def annotate_with_fees(
    admission: Admission,
    cache: FeeStructureCache,
) -> AdmissionFeeRow:
    session = session_for_date(admission.admission_date or date.today())
    heads = await cache.heads_for(session)
    student = admission.student_details or {}
    return AdmissionFeeRow(
        id=admission.id,
        admission_number=admission.admission_number,
        roll_number=admission.roll_number,
        admission_date=admission.admission_date,
        class_selection=admission.class_selection,
        name_en=student.get("name_en", ""),
        name_hi=student.get("name_hi", ""),
        father_name_en=student.get("father_name_en", ""),
        caste=student.get("caste"),
        session=session,
        fees=calculate_fees(admission.class_selection, admission.caste, heads),
    )


def summarize(rows: Iterable[AdmissionFeeRow]) -> ReportTotals:
    totals = ReportTotals()
    for row in rows:
        totals.student_fund += row.fees.student_fund_total
        totals.development_fund += row.fees.development_fund_total
        totals.grand_total += row.fees.total_fee
    return totals


async def _approved_between(
    db: AsyncSession,
    school_code: str,
    start_date: date,
    end_date: date,
) -> List[Admission]:
    stmt = (
        select(Admission)
        .where(
            Admission.school_code == school_code,
            Admission.status == AdmissionStatus.APPROVED.value,
            Admission.admission_date.is_not(None),
            Admission.admission_date >= start_date,
            Admission.admission_date <= end_date,
        )
        .order_by(Admission.admission_date, Admission.submitted_at, Admission.id)
    )
    with translate_store_errors("load admissions for the report"):
        return list((await db.execute(stmt)).scalars().all())


async def get_filtered_admissions(
    db: AsyncSession,
    school_code: str,
    start_date: date,
    end_date: date,
    class_selection: Optional[str] = None,
    caste: Optional[str] = None,
) -> AdmissionReport:
    """Approved admissions dated within [start_date, end_date], optionally one class and/or caste."""
    if start_date > end_date:
        raise ServiceError("Start date must not be after end date", status.HTTP_422_UNPROCESSABLE_ENTITY)

    admissions = await _approved_between(db, school_code, start_date, end_date)
    if class_selection:
        admissions = [a for a in admissions if a.class_selection == class_selection]
    if caste:
        admissions = [a for a in admissions if a.caste == caste]

    cache = FeeStructureCache(db, school_code)
    rows = [await annotate_with_fees(a, cache) for a in admissions]
    return AdmissionReport(
        start_date=start_date,
        end_date=end_date,
        class_selection=class_selection,
        caste=caste,
        rows=rows,
        totals=summarize(rows),
    )


async def get_admissions_by_date(db: AsyncSession, school_code: str, day: date) -> DailyCollectionRegister:
    admissions = await _approved_between(db, school_code, day, day)
    cache = FeeStructureCache(db, school_code)
    rows = [await annotate_with_fees(a, cache) for a in admissions]
    logger.debug("Daily register for %s on %s: %d admission(s)", school_code, day, len(rows))
    return DailyCollectionRegister(date=day, rows=rows, totals=summarize(rows))


def _particulars(items: List[FeeItem], start: int = 1) -> List[ReceiptParticular]:
    particulars = []
    for serial, item in enumerate(items, start=start):
        name_hi = f"{item.name_hi} {EXEMPTED_MARKER}" if item.is_exempted else item.name_hi
        particulars.append(
            ReceiptParticular(
                serial=serial,
                name_hi=name_hi,
                name_en=item.name_en,
                amount=item.amount,
                is_exempted=item.is_exempted,
            )
        )
    return particulars


async def get_fee_receipt(db: AsyncSession, school_code: str, admission_id: str) -> FeeReceipt:
    """Data for the printed fee receipt, amounts per fund and the total in Hindi words."""
    school = await schools_service.require_school(db, school_code)
    admission = await admissions_service.require_admission(db, school_code, admission_id)
    if admission.status != AdmissionStatus.APPROVED.value:
        raise ServiceError("A fee receipt is only available for approved admissions", status.HTTP_400_BAD_REQUEST)

    row = await annotate_with_fees(admission, FeeStructureCache(db, school_code))
    fees = row.fees
    student_particulars = _particulars(fees.student_fund_items)
    return FeeReceipt(
        school=ReceiptSchool(udise=school.udise, name=school.name, address=school.address, mobile=school.mobile),
        admission=row,
        student_fund_particulars=student_particulars,
        development_fund_particulars=_particulars(
            fees.development_fund_items, start=len(student_particulars) + 1
        ),
        total_fee=fees.total_fee,
        amount_in_words=to_words_hindi(fees.total_fee),
    )
