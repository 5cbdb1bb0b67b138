# docportal/db/models/document.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from docportal.db.base import Base, utcnow


class DocumentModel(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    type = Column(String(32), nullable=False, default="other")
    description = Column(Text, nullable=False)
    course = Column(String(64), nullable=False, index=True)

    # URL into blob storage and the handle used to delete it
    file = Column(String, nullable=True)
    file_public_id = Column(String, nullable=True)

    status = Column(
        String(16), default="draft", nullable=False, index=True
    )  # draft, submitted, approved, rejected

    owner_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewed_by_id = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship(
        "AccountModel", foreign_keys=[owner_id], back_populates="documents"
    )
    reviewed_by = relationship("AccountModel", foreign_keys=[reviewed_by_id])
