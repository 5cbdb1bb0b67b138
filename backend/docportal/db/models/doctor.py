# docportal/db/models/doctor.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship
from docportal.db.base import Base, utcnow


class DoctorProfileModel(Base):
    __tablename__ = "doctor_profiles"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer,
                        ForeignKey("accounts.id", ondelete="CASCADE"),
                        nullable=False, index=True)

    doctor_id      = Column(String(64), unique=True, nullable=False)
    department     = Column(String(100), nullable=False)
    specialization = Column(String(100), nullable=False)
    courses        = Column(JSON, nullable=False, default=list)
    # [{"day": "Monday", "startTime": "10:00", "endTime": "12:00"}, ...]
    office_hours   = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    account = relationship("AccountModel", back_populates="doctor_profile")
