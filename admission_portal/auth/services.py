from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.auth.schemas import LoginRequest, LoginResponse, SchoolInfo, SignupRequest
from admission_portal.auth.security import create_access_token, hash_password, verify_password
from admission_portal.core.exceptions import DuplicateError, ServiceError
from admission_portal.core.models import School
from admission_portal.db.errors import translate_store_errors


async def signup_school(db: AsyncSession, payload: SignupRequest) -> SchoolInfo:
    """Create a school account. One account per UDISE code; email unique when given."""
    udise = payload.udise.upper()
    email = payload.email.lower() if payload.email else None

    with translate_store_errors("save school details to the database"):
        if await db.get(School, udise):
            raise DuplicateError("A school with this UDISE code is already registered", udise)
        if email:
            existing = await db.execute(select(School).where(School.email == email))
            if existing.scalar_one_or_none():
                raise DuplicateError("Email is already in use", email)

        school = School(
            udise=udise,
            name=payload.name.strip(),
            address=payload.address.strip(),
            mobile=payload.mobile,
            email=email,
            password_hash=hash_password(payload.password),
        )
        db.add(school)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise DuplicateError("A school with this UDISE code or email is already registered", udise)
        await db.refresh(school)
    return SchoolInfo.model_validate(school)


async def login_school(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    login = payload.login.strip()
    with translate_store_errors("log in"):
        if "@" in login:
            result = await db.execute(select(School).where(School.email == login.lower()))
            school = result.scalar_one_or_none()
        else:
            school = await db.get(School, login.upper())

    if not school or not verify_password(payload.password, school.password_hash):
        raise ServiceError("Invalid UDISE/email or password", status.HTTP_401_UNAUTHORIZED)

    access_token = create_access_token(subject={"sub": school.udise, "udise": school.udise})
    return LoginResponse(access_token=access_token, school=SchoolInfo.model_validate(school))
