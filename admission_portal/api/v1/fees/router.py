"""Fees router: fee settings per session, resolved structure, calculator."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.auth.dependencies import get_current_school
from admission_portal.auth.schemas import CurrentSchool
from admission_portal.core.enums import Caste, ClassSelection
from admission_portal.core.exceptions import ServiceError
from admission_portal.db.session import get_db

from .schemas import SESSION_PATTERN, FeeBreakdown, FeeStructureResponse, FeeStructureSave
from . import service

router = APIRouter(prefix="/api/v1/fees", tags=["fees"])


def _session_or_current(session: Optional[str]) -> str:
    return session or service.session_for_date(date.today())


@router.get("/structure", response_model=FeeStructureResponse)
async def read_fee_structure(
    session: Optional[str] = Query(None, pattern=SESSION_PATTERN, description="Defaults to the current session"),
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> FeeStructureResponse:
    """Fee heads that apply for the session (saved, school default, or built-in table)."""
    return await service.get_resolved_fee_structure(db, current_school.udise, _session_or_current(session))


@router.put("/structure", response_model=FeeStructureResponse)
async def save_fee_structure(
    payload: FeeStructureSave,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> FeeStructureResponse:
    try:
        return await service.save_fee_structure(db, current_school.udise, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/calculate", response_model=FeeBreakdown)
async def calculate_fees(
    class_selection: ClassSelection,
    caste: Caste,
    session: Optional[str] = Query(None, pattern=SESSION_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> FeeBreakdown:
    return await service.calculate_student_fees(
        db,
        current_school.udise,
        class_selection.value,
        caste.value,
        _session_or_current(session),
    )
