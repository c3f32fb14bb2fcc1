from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.auth.dependencies import get_current_school
from admission_portal.auth.schemas import CurrentSchool
from admission_portal.core.exceptions import ServiceError
from admission_portal.db.session import get_db

from .schemas import SchoolPublicInfo, SchoolResponse, SchoolUpdate
from . import service

router = APIRouter(prefix="/api/v1/schools", tags=["schools"])


@router.get("/lookup/{udise}", response_model=SchoolPublicInfo)
async def lookup_school(
    udise: str,
    db: AsyncSession = Depends(get_db),
) -> SchoolPublicInfo:
    """Public details for a registered UDISE code; 404 lets the client fall back to manual entry."""
    try:
        school = await service.require_school(db, udise)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return SchoolPublicInfo.model_validate(school)


@router.get("/me", response_model=SchoolResponse)
async def get_my_school(
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> SchoolResponse:
    try:
        school = await service.require_school(db, current_school.udise)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return SchoolResponse.model_validate(school)


@router.put("/me", response_model=SchoolResponse)
async def update_my_school(
    payload: SchoolUpdate,
    db: AsyncSession = Depends(get_db),
    current_school: CurrentSchool = Depends(get_current_school),
) -> SchoolResponse:
    try:
        school = await service.save_school(db, current_school.udise, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return SchoolResponse.model_validate(school)
