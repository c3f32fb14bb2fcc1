from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
from jose import jwt

from admission_portal.core.config import settings
from admission_portal.core.exceptions import ConfigurationError


def hash_password(plain_password: str) -> str:
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # In case the stored hash is invalid/corrupted
        return False


def require_jwt_secret() -> str:
    if not settings.jwt_secret_key:
        raise ConfigurationError("Authentication is not configured. Set JWT_SECRET_KEY and restart the server.")
    return settings.jwt_secret_key


def create_access_token(
    *, subject: Dict, expires_minutes: Optional[int] = None
) -> str:
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes

    to_encode = subject.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, require_jwt_secret(), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict:
    """Raises jose.JWTError on a bad or expired token."""
    return jwt.decode(token, require_jwt_secret(), algorithms=[settings.jwt_algorithm])
