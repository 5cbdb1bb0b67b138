# docportal/schemas/document.py
from datetime import datetime
from typing import Dict, List, Optional

from docportal.config.constants import DocumentStatus, DocumentType
from docportal.schemas.shared import AccountSummary, CamelModel


class DocumentOut(CamelModel):
    id: int
    title: str
    type: DocumentType
    description: str
    course: str
    file: Optional[str] = None
    status: DocumentStatus
    owner_id: int
    reviewed_by_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class DocumentWithOwner(DocumentOut):
    """Doctor-facing view: the document plus who submitted it."""
    owner: AccountSummary


class DocumentResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    document: DocumentOut


class DocumentListResponse(CamelModel):
    success: bool = True
    documents: List[DocumentOut]


class DocumentCounts(CamelModel):
    total: int = 0
    draft: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class DocumentCountsResponse(CamelModel):
    success: bool = True
    counts: DocumentCounts


class CourseDocumentsResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    documents: List[DocumentWithOwner]
    documents_by_course: Dict[str, List[DocumentWithOwner]] = {}


class ReviewResponse(CamelModel):
    success: bool = True
    message: str
    document: DocumentWithOwner
