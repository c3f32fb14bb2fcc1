"""
Admission record. Admission details that are filtered or sorted on live in columns;
the remaining form sections are nested documents.
Status: pending -> approved | rejected (both terminal).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String

from admission_portal.core.enums import AdmissionStatus
from admission_portal.core.models.types import DocumentType
from admission_portal.db.session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Admission(Base):
    __tablename__ = "admissions"
    __table_args__ = (
        Index("ix_admissions_school_status", "school_code", "status"),
        Index("ix_admissions_school_number", "school_code", "admission_number"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    school_code = Column(String(11), ForeignKey("schools.udise", ondelete="CASCADE"), nullable=False, index=True)
    admission_number = Column(String(50), nullable=True)
    roll_number = Column(String(20), nullable=True)
    admission_date = Column(Date, nullable=True)
    class_selection = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=AdmissionStatus.PENDING.value)
    submitted_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    student_details = Column(DocumentType, nullable=False, default=dict)
    contact_details = Column(DocumentType, nullable=False, default=dict)
    address_details = Column(DocumentType, nullable=False, default=dict)
    bank_details = Column(DocumentType, nullable=False, default=dict)
    other_details = Column(DocumentType, nullable=False, default=dict)
    prev_school_details = Column(DocumentType, nullable=False, default=dict)
    subject_details = Column(DocumentType, nullable=False, default=dict)

    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    @property
    def caste(self) -> str:
        return (self.student_details or {}).get("caste", "")

    @property
    def aadhar_number(self) -> str:
        return (self.contact_details or {}).get("aadhar_number", "")
