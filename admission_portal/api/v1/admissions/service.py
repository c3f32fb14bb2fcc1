"""
Admission records for a school: submission, quick entry, edit, approve/reject, queries.

Status: pending -> approved | rejected. Approval needs an admission date and assigns
the admission number and roll number. Quick entries are approved on creation.
"""

from datetime import date, datetime, timezone
from typing import List, Optional

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.core.enums import AdmissionStatus
from admission_portal.core.exceptions import DuplicateError, NotFoundError, ServiceError
from admission_portal.core.models import Admission
from admission_portal.db.errors import translate_store_errors

from . import numbering
from .schemas import (
    AdmissionApprove,
    AdmissionCreate,
    AdmissionDetails,
    AdmissionResponse,
    AdmissionUpdate,
    QuickAdmissionCreate,
    QuickAdmissionResponse,
)

AADHAR_IN_USE_MESSAGE = "This Aadhar number is already registered for another student in this school."

# Filled in for fields the quick entry form does not collect.
QUICK_ENTRY_STUDENT_DEFAULTS = {
    "mother_name_en": "N/A",
    "mother_name_hi": "लागू नहीं",
    "dob": "2000-01-01",
    "gender": "male",
    "nationality": "indian",
    "is_differently_abled": False,
    "disability_details": "",
    "religion": "hindu",
    "marital_status": "unmarried",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_response(a: Admission) -> AdmissionResponse:
    return AdmissionResponse(
        id=a.id,
        admission_details=AdmissionDetails(
            admission_number=a.admission_number,
            roll_number=a.roll_number,
            admission_date=a.admission_date,
            class_selection=a.class_selection,
            udise=a.school_code,
            status=a.status,
            submitted_at=a.submitted_at,
        ),
        student_details=a.student_details or {},
        contact_details=a.contact_details or {},
        address_details=a.address_details or {},
        bank_details=a.bank_details or {},
        other_details=a.other_details or {},
        prev_school_details=a.prev_school_details or {},
        subject_details=a.subject_details or {},
        updated_at=a.updated_at,
    )


async def _ensure_aadhar_available(
    db: AsyncSession,
    school_code: str,
    aadhar_number: Optional[str],
    exclude_id: Optional[str] = None,
) -> None:
    if not aadhar_number:
        return
    stmt = select(Admission.id).where(
        Admission.school_code == school_code,
        Admission.contact_details["aadhar_number"].as_string() == aadhar_number,
    )
    if exclude_id:
        stmt = stmt.where(Admission.id != exclude_id)
    with translate_store_errors("check Aadhar number"):
        if (await db.execute(stmt.limit(1))).first():
            raise DuplicateError(AADHAR_IN_USE_MESSAGE, aadhar_number)


# ----- Reads -----

async def get_admission(db: AsyncSession, school_code: str, admission_id: str) -> Optional[Admission]:
    with translate_store_errors("load admission"):
        return (await db.execute(
            select(Admission).where(
                Admission.id == admission_id,
                Admission.school_code == school_code,
            )
        )).scalar_one_or_none()


async def require_admission(db: AsyncSession, school_code: str, admission_id: str) -> Admission:
    admission = await get_admission(db, school_code, admission_id)
    if not admission:
        raise NotFoundError(f"No admission record found for ID: {admission_id}")
    return admission


def _sort_key_date(a: Admission, status_filter: Optional[str]):
    if status_filter in (AdmissionStatus.PENDING.value, AdmissionStatus.REJECTED.value):
        return a.submitted_at
    return a.admission_date


async def list_admissions(
    db: AsyncSession,
    school_code: str,
    status_filter: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Admission]:
    """
    Newest first: pending/rejected by submission time, otherwise by admission date.
    Records without the date go last, ordered by student name.
    """
    stmt = select(Admission).where(Admission.school_code == school_code)
    if status_filter:
        stmt = stmt.where(Admission.status == status_filter)
    with translate_store_errors("load admissions"):
        rows = list((await db.execute(stmt)).scalars().all())

    dated = [a for a in rows if _sort_key_date(a, status_filter) is not None]
    undated = [a for a in rows if _sort_key_date(a, status_filter) is None]
    dated.sort(key=lambda a: _sort_key_date(a, status_filter), reverse=True)
    undated.sort(key=lambda a: (a.student_details or {}).get("name_en", ""))
    ordered = dated + undated
    return ordered[:limit] if limit else ordered


async def list_approved_admissions(db: AsyncSession, school_code: str) -> List[Admission]:
    """Approved records in stable store order (submission time, then id)."""
    stmt = (
        select(Admission)
        .where(
            Admission.school_code == school_code,
            Admission.status == AdmissionStatus.APPROVED.value,
        )
        .order_by(Admission.submitted_at, Admission.id)
    )
    with translate_store_errors("load approved admissions"):
        return list((await db.execute(stmt)).scalars().all())


async def get_class_admission_count(db: AsyncSession, school_code: str, class_selection: str) -> int:
    stmt = select(func.count(Admission.id)).where(
        Admission.school_code == school_code,
        Admission.class_selection == class_selection,
        Admission.status == AdmissionStatus.APPROVED.value,
    )
    with translate_store_errors("count class admissions"):
        return (await db.execute(stmt)).scalar_one()


async def get_all_admission_ids_for_school(db: AsyncSession, school_code: str) -> List[str]:
    with translate_store_errors("retrieve admission records for deletion"):
        result = await db.execute(
            select(Admission.id).where(Admission.school_code == school_code).order_by(Admission.id)
        )
        return [row[0] for row in result.all()]


# ----- Writes -----

async def create_admission(
    db: AsyncSession,
    school_code: str,
    payload: AdmissionCreate,
) -> AdmissionResponse:
    """Save a submitted form as pending."""
    await _ensure_aadhar_available(db, school_code, payload.contact_details.aadhar_number)
    admission = Admission(
        school_code=school_code,
        class_selection=payload.class_selection.value,
        status=AdmissionStatus.PENDING.value,
        submitted_at=_utcnow(),
        student_details=payload.student_details.model_dump(mode="json"),
        contact_details=payload.contact_details.model_dump(mode="json", exclude_none=True),
        address_details=payload.address_details.model_dump(mode="json", exclude_none=True),
        bank_details=payload.bank_details.model_dump(mode="json", exclude_none=True),
        other_details=payload.other_details,
        prev_school_details=payload.prev_school_details,
        subject_details=payload.subject_details,
    )
    with translate_store_errors("save admission data"):
        db.add(admission)
        await db.commit()
        await db.refresh(admission)
    return to_response(admission)


async def create_quick_admission(
    db: AsyncSession,
    school_code: str,
    payload: QuickAdmissionCreate,
) -> QuickAdmissionResponse:
    """Create an approved record straight away, numbering it for the admission year."""
    admission_date = payload.admission_date or date.today()
    admission_number = await numbering.generate_admission_number(
        db, school_code, admission_date.year, manual_number=payload.admission_number
    )
    admission = Admission(
        school_code=school_code,
        admission_number=admission_number,
        roll_number=payload.roll_number,
        admission_date=admission_date,
        class_selection=payload.class_selection.value,
        status=AdmissionStatus.APPROVED.value,
        submitted_at=_utcnow(),
        student_details={
            **QUICK_ENTRY_STUDENT_DEFAULTS,
            "name_en": payload.name_en.strip(),
            "name_hi": payload.name_hi.strip(),
            "father_name_en": payload.father_name_en.strip(),
            "father_name_hi": payload.father_name_hi.strip(),
            "caste": payload.caste.value,
        },
        contact_details={"mobile_number": payload.mobile_number},
        address_details={},
        bank_details={},
        other_details={"identification_mark_1": "N/A"},
        prev_school_details={},
        subject_details={},
    )
    with translate_store_errors("create the admission record"):
        db.add(admission)
        await db.commit()
        await db.refresh(admission)
    return QuickAdmissionResponse(id=admission.id, admission_number=admission.admission_number)


async def update_admission(
    db: AsyncSession,
    school_code: str,
    admission_id: str,
    payload: AdmissionUpdate,
) -> AdmissionResponse:
    admission = await require_admission(db, school_code, admission_id)
    if payload.contact_details is not None:
        await _ensure_aadhar_available(
            db, school_code, payload.contact_details.aadhar_number, exclude_id=admission.id
        )
    if payload.admission_number is not None and payload.admission_number.strip() != admission.admission_number:
        await numbering.ensure_admission_number_available(
            db, school_code, payload.admission_number.strip(), exclude_id=admission.id
        )
        admission.admission_number = payload.admission_number.strip()

    if payload.class_selection is not None:
        admission.class_selection = payload.class_selection.value
    if payload.roll_number is not None:
        admission.roll_number = payload.roll_number
    for section in ("student_details", "contact_details", "address_details", "bank_details"):
        value = getattr(payload, section)
        if value is not None:
            setattr(admission, section, value.model_dump(mode="json", exclude_none=True))
    for section in ("other_details", "prev_school_details", "subject_details"):
        value = getattr(payload, section)
        if value is not None:
            setattr(admission, section, value)

    with translate_store_errors("update admission data"):
        await db.commit()
        await db.refresh(admission)
    return to_response(admission)


async def approve_admission(
    db: AsyncSession,
    school_code: str,
    admission_id: str,
    payload: AdmissionApprove,
) -> AdmissionResponse:
    """pending -> approved: set admission date, next admission number and roll number for the class."""
    admission = await require_admission(db, school_code, admission_id)
    if admission.status != AdmissionStatus.PENDING.value:
        raise ServiceError(
            f"Invalid status transition: only pending admissions can be approved (current: {admission.status})",
            status.HTTP_400_BAD_REQUEST,
        )

    admission_number = await numbering.generate_admission_number(
        db, school_code, payload.admission_date.year
    )
    approved_in_class = await get_class_admission_count(db, school_code, admission.class_selection)

    admission.status = AdmissionStatus.APPROVED.value
    admission.admission_date = payload.admission_date
    admission.admission_number = admission_number
    admission.roll_number = str(approved_in_class + 1)
    with translate_store_errors("approve admission"):
        await db.commit()
        await db.refresh(admission)
    return to_response(admission)


async def reject_admission(
    db: AsyncSession,
    school_code: str,
    admission_id: str,
) -> AdmissionResponse:
    """pending -> rejected."""
    admission = await require_admission(db, school_code, admission_id)
    if admission.status != AdmissionStatus.PENDING.value:
        raise ServiceError(
            f"Invalid status transition: only pending admissions can be rejected (current: {admission.status})",
            status.HTTP_400_BAD_REQUEST,
        )
    admission.status = AdmissionStatus.REJECTED.value
    with translate_store_errors("reject admission"):
        await db.commit()
        await db.refresh(admission)
    return to_response(admission)
