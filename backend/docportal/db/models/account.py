# docportal/db/models/account.py
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import relationship
from docportal.db.base import Base, utcnow


class AccountModel(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    role = Column(String(16), nullable=False)  # 'student' | 'doctor'
    courses = Column(JSON, nullable=False, default=list)
    profile_pic = Column(String, nullable=True)
    profile_pic_public_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # one-to-one links
    student_profile = relationship(
        "StudentProfileModel",
        back_populates="account",
        uselist=False,
        cascade="all, delete-orphan",
    )
    doctor_profile = relationship(
        "DoctorProfileModel",
        back_populates="account",
        uselist=False,
        cascade="all, delete-orphan",
    )

    documents = relationship(
        "DocumentModel",
        back_populates="owner",
        foreign_keys="DocumentModel.owner_id",
        cascade="all, delete-orphan",
    )
