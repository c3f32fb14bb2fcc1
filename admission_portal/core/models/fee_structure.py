"""Fee structure per school per academic session ("2025-2026") or the school's "default"."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint

from admission_portal.core.models.types import DocumentType
from admission_portal.db.session import Base

DEFAULT_SESSION = "default"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def fee_structure_id(school_code: str, session: str) -> str:
    return f"{school_code}_{session}"


class FeeStructure(Base):
    __tablename__ = "fee_structures"
    __table_args__ = (
        UniqueConstraint("school_code", "session", name="uq_fee_structure_school_session"),
    )

    id = Column(String(64), primary_key=True)  # "{udise}_{session}"
    school_code = Column(String(11), ForeignKey("schools.udise", ondelete="CASCADE"), nullable=False, index=True)
    session = Column(String(20), nullable=False)
    heads = Column(DocumentType, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
