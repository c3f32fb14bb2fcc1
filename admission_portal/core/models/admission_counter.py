"""Last admission serial handed out per school per calendar year."""

from sqlalchemy import Column, ForeignKey, Integer, String

from admission_portal.db.session import Base


class AdmissionCounter(Base):
    __tablename__ = "admission_counters"

    school_code = Column(String(11), ForeignKey("schools.udise", ondelete="CASCADE"), primary_key=True)
    year = Column(Integer, primary_key=True)
    last_serial = Column(Integer, nullable=False, default=0)
