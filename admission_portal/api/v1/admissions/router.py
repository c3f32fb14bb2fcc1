from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.auth.dependencies import get_current_school
from admission_portal.auth.schemas import CurrentSchool
from admission_portal.core.enums import AdmissionStatus, ClassSelection
from admission_portal.core.exceptions import ServiceError
from admission_portal.db.session import get_db

from .schemas import (
    AdmissionApprove,
    AdmissionCreate,
    AdmissionResponse,
    AdmissionUpdate,
    ClassCountResponse,
    QuickAdmissionCreate,
    QuickAdmissionResponse,
)
from . import service

router = APIRouter(prefix="/api/v1/admissions", tags=["admissions"])


@router.post(
    "",
    response_model=AdmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_admission(
    payload: AdmissionCreate,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> AdmissionResponse:
    """Submit a full admission form. Saved as pending until the school approves it."""
    try:
        return await service.create_admission(db, current_school.udise, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/quick",
    response_model=QuickAdmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def quick_admission(
    payload: QuickAdmissionCreate,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> QuickAdmissionResponse:
    """Quick entry for an existing student: approved immediately, number generated unless given."""
    try:
        return await service.create_quick_admission(db, current_school.udise, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[AdmissionResponse])
async def list_admissions(
    status_filter: Optional[AdmissionStatus] = Query(None, alias="status", description="pending, approved or rejected"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> List[AdmissionResponse]:
    try:
        rows = await service.list_admissions(
            db,
            current_school.udise,
            status_filter=status_filter.value if status_filter else None,
            limit=limit,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return [service.to_response(a) for a in rows]


@router.get("/class-count", response_model=ClassCountResponse)
async def class_admission_count(
    class_selection: ClassSelection,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> ClassCountResponse:
    """Approved admissions in one class/stream."""
    try:
        count = await service.get_class_admission_count(db, current_school.udise, class_selection.value)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ClassCountResponse(class_selection=class_selection.value, approved_count=count)


@router.get("/{admission_id}", response_model=AdmissionResponse)
async def get_admission(
    admission_id: str,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> AdmissionResponse:
    try:
        admission = await service.require_admission(db, current_school.udise, admission_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return service.to_response(admission)


@router.put("/{admission_id}", response_model=AdmissionResponse)
async def update_admission(
    admission_id: str,
    payload: AdmissionUpdate,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> AdmissionResponse:
    try:
        return await service.update_admission(db, current_school.udise, admission_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{admission_id}/approve", response_model=AdmissionResponse)
async def approve_admission(
    admission_id: str,
    payload: AdmissionApprove,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> AdmissionResponse:
    """Approve a pending admission; assigns admission and roll numbers."""
    try:
        return await service.approve_admission(db, current_school.udise, admission_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{admission_id}/reject", response_model=AdmissionResponse)
async def reject_admission(
    admission_id: str,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> AdmissionResponse:
    try:
        return await service.reject_admission(db, current_school.udise, admission_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
