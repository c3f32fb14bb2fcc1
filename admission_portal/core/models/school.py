"""School account. The 11-character UDISE code is the primary key and the login id."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from admission_portal.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class School(Base):
    __tablename__ = "schools"

    udise = Column(String(11), primary_key=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    mobile = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
