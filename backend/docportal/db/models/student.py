# docportal/db/models/student.py
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship
from docportal.db.base import Base, utcnow


class StudentProfileModel(Base):
    __tablename__ = "student_profiles"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer,
                        ForeignKey("accounts.id", ondelete="CASCADE"),
                        nullable=False, index=True)

    student_id = Column(String(64), unique=True, nullable=False)
    department = Column(String(100), nullable=False)
    year       = Column(Integer, nullable=False)
    semester   = Column(Integer, nullable=False)
    gpa        = Column(Float, nullable=False, default=0)
    courses    = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    account = relationship("AccountModel", back_populates="student_profile")
