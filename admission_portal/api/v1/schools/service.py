"""School records: lookup by UDISE or email, merge-update of the profile."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.core.exceptions import DuplicateError, NotFoundError
from admission_portal.core.models import School
from admission_portal.db.errors import translate_store_errors

from .schemas import SchoolUpdate


async def get_school_by_udise(db: AsyncSession, udise: str) -> Optional[School]:
    if not udise:
        return None
    with translate_store_errors("load school data"):
        return await db.get(School, udise.upper())


async def get_school_by_email(db: AsyncSession, email: str) -> Optional[School]:
    if not email:
        return None
    with translate_store_errors("load school data"):
        result = await db.execute(select(School).where(School.email == email.lower()).limit(1))
        return result.scalar_one_or_none()


async def require_school(db: AsyncSession, udise: str) -> School:
    school = await get_school_by_udise(db, udise)
    if not school:
        raise NotFoundError(f"School with UDISE {udise} not found")
    return school


async def save_school(db: AsyncSession, udise: str, payload: SchoolUpdate) -> School:
    """Merge supplied fields into the school's record."""
    school = await require_school(db, udise)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("email"):
        changes["email"] = changes["email"].lower()
        other = await get_school_by_email(db, changes["email"])
        if other and other.udise != school.udise:
            raise DuplicateError("Email is already in use", changes["email"])

    with translate_store_errors("save school details to the database"):
        for field, value in changes.items():
            setattr(school, field, value.strip() if isinstance(value, str) else value)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise DuplicateError("Email is already in use", changes.get("email") or "")
        await db.refresh(school)
    return school
