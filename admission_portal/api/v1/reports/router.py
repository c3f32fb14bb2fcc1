from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.auth.dependencies import get_current_school
from admission_portal.auth.schemas import CurrentSchool
from admission_portal.core.enums import Caste, ClassSelection
from admission_portal.core.exceptions import ServiceError
from admission_portal.db.session import get_db

from .schemas import AdmissionReport, DailyCollectionRegister, FeeReceipt
from . import service

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/admissions", response_model=AdmissionReport)
async def admissions_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    class_selection: Optional[ClassSelection] = Query(None),
    caste: Optional[Caste] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> AdmissionReport:
    """Approved admissions in a date range (inclusive) with fees and fund totals."""
    try:
        return await service.get_filtered_admissions(
            db,
            current_school.udise,
            start_date,
            end_date,
            class_selection=class_selection.value if class_selection else None,
            caste=caste.value if caste else None,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/daily", response_model=DailyCollectionRegister)
async def daily_collection_register(
    day: Optional[date] = Query(None, alias="date", description="Defaults to today"),
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> DailyCollectionRegister:
    try:
        return await service.get_admissions_by_date(db, current_school.udise, day or date.today())
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/receipt/{admission_id}", response_model=FeeReceipt)
async def fee_receipt(
    admission_id: str,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> FeeReceipt:
    try:
        return await service.get_fee_receipt(db, current_school.udise, admission_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
