from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.auth.schemas import CurrentSchool
from admission_portal.auth.security import decode_access_token
from admission_portal.core.exceptions import ServiceError
from admission_portal.core.models import School
from admission_portal.db.session import get_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login-oauth")


async def get_current_school(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentSchool:
    """Resolve the school account behind the access token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise credentials_exception
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    udise = payload.get("udise") or payload.get("sub")
    if not udise:
        raise credentials_exception

    school = await db.get(School, udise)
    if not school:
        raise credentials_exception

    return CurrentSchool(udise=school.udise, name=school.name)
