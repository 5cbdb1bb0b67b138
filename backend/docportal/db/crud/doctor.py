# docportal/db/crud/doctor.py
import logging
from collections import Counter
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from docportal.config.constants import RECENT_DOCUMENTS_LIMIT, DocumentStatus, Role
from docportal.db.models import AccountModel, DocumentModel
from docportal.schemas.doctor import CourseStats, DoctorStats
from docportal.schemas.document import DocumentWithOwner
from docportal.schemas.shared import DoctorPrincipal

logger = logging.getLogger(__name__)


async def find_course_documents(
    db: AsyncSession,
    courses: List[str],
    status: Optional[DocumentStatus] = None,
) -> List[DocumentModel]:
    """
    Documents whose course is one of ``courses``, newest first, with the
    owning account loaded for display.

    Args:
        db: Database session
        courses: Course codes the caller is assigned to (exact match)
        status: Restrict to a single status (optional)

    Returns:
        List of DocumentModel objects; empty when ``courses`` is empty
    """
    if not courses:
        return []

    query = (
        select(DocumentModel)
        .options(selectinload(DocumentModel.owner))
        .where(DocumentModel.course.in_(courses))
    )
    if status is not None:
        query = query.where(DocumentModel.status == status.value)
    query = query.order_by(DocumentModel.created_at.desc(), DocumentModel.id.desc())

    result = await db.execute(query)
    documents = list(result.scalars().all())
    logger.debug(f"Found {len(documents)} documents for courses {courses} (status={status})")
    return documents


def group_by_course(
    courses: List[str], documents: List[DocumentWithOwner]
) -> Dict[str, List[DocumentWithOwner]]:
    grouped: Dict[str, List[DocumentWithOwner]] = {course: [] for course in courses}
    for document in documents:
        grouped.setdefault(document.course, []).append(document)
    return grouped


async def get_doctor_documents(
    db: AsyncSession, doctor: DoctorPrincipal, pending_only: bool = False
) -> List[DocumentWithOwner]:
    status = DocumentStatus.SUBMITTED if pending_only else None
    documents = await find_course_documents(db, doctor.courses, status)
    return [DocumentWithOwner.model_validate(d) for d in documents]


async def count_students_in_courses(db: AsyncSession, courses: List[str]) -> int:
    """
    Distinct student accounts enrolled in any of ``courses``, counting both
    the account's own course list and its student profile's enrollment list.
    Course lists are JSON, so the overlap test runs in Python.
    """
    if not courses:
        return 0
    wanted = set(courses)
    result = await db.execute(
        select(AccountModel)
        .options(selectinload(AccountModel.student_profile))
        .where(AccountModel.role == Role.STUDENT.value)
    )
    enrolled = 0
    for account in result.scalars().all():
        taken = set(account.courses or [])
        if account.student_profile:
            taken.update(account.student_profile.courses or [])
        if taken & wanted:
            enrolled += 1
    return enrolled


async def get_doctor_stats(db: AsyncSession, doctor: DoctorPrincipal) -> DoctorStats:
    """Counts scoped to the doctor's courses; all zeros when none are assigned."""
    if not doctor.courses:
        logger.info(f"Doctor {doctor.id} has no assigned courses, returning empty stats")
        return DoctorStats()

    documents = await find_course_documents(db, doctor.courses)
    by_status = Counter(d.status for d in documents)

    per_course: Dict[str, CourseStats] = {c: CourseStats(course=c) for c in doctor.courses}
    for document in documents:
        row = per_course[document.course]
        row.total += 1
        if document.status == DocumentStatus.SUBMITTED.value:
            row.pending += 1
        elif document.status == DocumentStatus.APPROVED.value:
            row.approved += 1
        elif document.status == DocumentStatus.REJECTED.value:
            row.rejected += 1

    stats = DoctorStats(
        total_documents=len(documents),
        pending_documents=by_status[DocumentStatus.SUBMITTED.value],
        approved_documents=by_status[DocumentStatus.APPROVED.value],
        rejected_documents=by_status[DocumentStatus.REJECTED.value],
        total_students=await count_students_in_courses(db, doctor.courses),
        total_courses=len(doctor.courses),
        courses=list(per_course.values()),
        recent_documents=[
            DocumentWithOwner.model_validate(d) for d in documents[:RECENT_DOCUMENTS_LIMIT]
        ],
    )
    logger.info(f"Stats for doctor {doctor.id}: {stats.total_documents} documents, {stats.total_students} students")
    return stats


async def list_all_doctors(db: AsyncSession) -> List[AccountModel]:
    """Every doctor account, for the message recipient picker."""
    result = await db.execute(
        select(AccountModel)
        .where(AccountModel.role == Role.DOCTOR.value)
        .order_by(AccountModel.last_name, AccountModel.first_name)
    )
    return list(result.scalars().all())
