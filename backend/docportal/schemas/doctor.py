# docportal/schemas/doctor.py
from typing import List

from docportal.schemas.document import DocumentWithOwner
from docportal.schemas.shared import CamelModel


class CourseStats(CamelModel):
    course: str
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class DoctorStats(CamelModel):
    total_documents: int = 0
    pending_documents: int = 0
    approved_documents: int = 0
    rejected_documents: int = 0
    total_students: int = 0
    total_courses: int = 0
    courses: List[CourseStats] = []
    recent_documents: List[DocumentWithOwner] = []


class DoctorStatsResponse(CamelModel):
    success: bool = True
    stats: DoctorStats


class DoctorDirectoryEntry(CamelModel):
    id: int
    user_id: str
    first_name: str
    last_name: str


class DoctorDirectoryResponse(CamelModel):
    success: bool = True
    doctors: List[DoctorDirectoryEntry]
