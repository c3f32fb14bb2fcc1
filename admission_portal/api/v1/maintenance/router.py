"""Maintenance router: admission number repair and clearing a school's admissions."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.auth.dependencies import get_current_school
from admission_portal.auth.schemas import CurrentSchool
from admission_portal.core.exceptions import PartialBatchFailure, ServiceError
from admission_portal.db.session import get_db

from .schemas import ClearSchoolDataRequest, DeleteResult, RepairResult
from . import service

router = APIRouter(prefix="/api/v1/maintenance", tags=["maintenance"])


@router.post("/repair-admission-numbers", response_model=RepairResult)
async def repair_admission_numbers(
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> RepairResult:
    """Reassign approved admission numbers per year in admission-date order."""
    try:
        return await service.repair_duplicate_admission_numbers(db, current_school.udise)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/clear-admissions", response_model=DeleteResult)
async def clear_admissions(
    payload: ClearSchoolDataRequest,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> DeleteResult:
    """Delete all admission records of the current school. Not reversible."""
    if payload.udise.upper() != current_school.udise:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="UDISE code does not match the logged-in school",
        )
    try:
        return await service.delete_all_admissions_for_school(db, current_school.udise)
    except PartialBatchFailure as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"message": e.message, "deleted_count": e.deleted_count},
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
