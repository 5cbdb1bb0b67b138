# docportal/db/crud/document.py
"""
Document lifecycle: drafts, submissions, reviews and the file bytes behind them.

Every owner-scoped lookup goes through ``_owned_document`` so that "does not
exist", "belongs to someone else" and "not in the expected status" all come
back as the same ``None`` and surface as the same 404.

File handling follows one order everywhere: upload the new blob, commit the
row, and only then delete whatever blob the row pointed at before. If the
commit fails the freshly uploaded blob is deleted again.
"""
import logging
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from docportal.config.constants import (
    DOCUMENT_MIME_PREFIXES,
    DOCUMENT_MIME_TYPES,
    REVIEW_DECISIONS,
    DocumentStatus,
    DocumentType,
)
from docportal.config.settings import settings
from docportal.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from docportal.core.storage import StoredBlob, delete_blob_quietly, store_upload
from docportal.db.base import utcnow
from docportal.db.models import DocumentModel
from docportal.schemas.document import DocumentCounts
from docportal.schemas.shared import DoctorPrincipal

logger = logging.getLogger(__name__)


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


def _required(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise BadRequestError(f"{field} is required")
    return value


async def _store_document_file(storage, upload: UploadFile) -> StoredBlob:
    return await store_upload(
        storage,
        upload,
        max_size=settings.max_document_size,
        allowed_types=DOCUMENT_MIME_TYPES,
        allowed_prefixes=DOCUMENT_MIME_PREFIXES,
        folder=f"{settings.cloudinary_folder}/documents",
    )


async def _commit_or_compensate(db: AsyncSession, storage, stored: Optional[StoredBlob]) -> None:
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        if stored:
            logger.warning(f"Commit failed, removing freshly uploaded blob {stored.public_id}")
            await delete_blob_quietly(storage, stored.public_id)
        raise


async def _owned_document(
    db: AsyncSession,
    document_id: int,
    owner_id: int,
    status: Optional[DocumentStatus] = None,
) -> Optional[DocumentModel]:
    query = select(DocumentModel).where(
        DocumentModel.id == document_id,
        DocumentModel.owner_id == owner_id,
    )
    if status is not None:
        query = query.where(DocumentModel.status == status.value)
    return await db.scalar(query)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
async def list_documents(
    db: AsyncSession, owner_id: int, status: Optional[DocumentStatus] = None
) -> List[DocumentModel]:
    query = select(DocumentModel).where(DocumentModel.owner_id == owner_id)
    if status is not None:
        query = query.where(DocumentModel.status == status.value)
    query = query.order_by(DocumentModel.created_at.desc(), DocumentModel.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_document(db: AsyncSession, document_id: int, owner_id: int) -> DocumentModel:
    document = await _owned_document(db, document_id, owner_id)
    if not document:
        raise NotFoundError("Document not found")
    return document


async def count_documents(db: AsyncSession, owner_id: int) -> DocumentCounts:
    result = await db.execute(
        select(DocumentModel.status, func.count(DocumentModel.id))
        .where(DocumentModel.owner_id == owner_id)
        .group_by(DocumentModel.status)
    )
    by_status = {status: count for status, count in result.all()}
    return DocumentCounts(
        total=sum(by_status.values()),
        draft=by_status.get(DocumentStatus.DRAFT.value, 0),
        pending=by_status.get(DocumentStatus.SUBMITTED.value, 0),
        approved=by_status.get(DocumentStatus.APPROVED.value, 0),
        rejected=by_status.get(DocumentStatus.REJECTED.value, 0),
    )


# ---------------------------------------------------------------------------
# Student-driven transitions
# ---------------------------------------------------------------------------
async def create_document(
    db: AsyncSession,
    storage,
    owner_id: int,
    *,
    title: Optional[str],
    doc_type: DocumentType,
    description: Optional[str],
    course: Optional[str],
    upload: Optional[UploadFile],
    status: DocumentStatus,
) -> DocumentModel:
    """
    Create a document either as a draft (file optional) or directly as
    submitted (file required). No row is written unless the upload succeeded.
    """
    if status not in (DocumentStatus.DRAFT, DocumentStatus.SUBMITTED):
        raise ValueError(f"Documents cannot be created as {status.value}")
    if status == DocumentStatus.SUBMITTED and not _has_file(upload):
        raise BadRequestError("Please upload a file")

    title = _required(title, "title")
    description = _required(description, "description")
    course = _required(course, "course")

    stored = await _store_document_file(storage, upload) if _has_file(upload) else None

    document = DocumentModel(
        title=title,
        type=doc_type.value,
        description=description,
        course=course,
        file=stored.url if stored else None,
        file_public_id=stored.public_id if stored else None,
        status=status.value,
        owner_id=owner_id,
    )
    db.add(document)
    await _commit_or_compensate(db, storage, stored)

    logger.info(f"Account {owner_id} created document id={document.id} as {document.status}")
    return document


async def update_draft(
    db: AsyncSession,
    storage,
    document_id: int,
    owner_id: int,
    *,
    title: Optional[str] = None,
    doc_type: Optional[DocumentType] = None,
    description: Optional[str] = None,
    course: Optional[str] = None,
    upload: Optional[UploadFile] = None,
) -> DocumentModel:
    document = await _owned_document(db, document_id, owner_id, DocumentStatus.DRAFT)
    if not document:
        raise NotFoundError("Draft document not found")

    # upload before touching the row so a failed relay leaves it as it was
    stored = await _store_document_file(storage, upload) if _has_file(upload) else None
    previous_blob = document.file_public_id

    if title and title.strip():
        document.title = title.strip()
    if doc_type is not None:
        document.type = doc_type.value
    if description and description.strip():
        document.description = description.strip()
    if course and course.strip():
        document.course = course.strip()
    if stored:
        document.file = stored.url
        document.file_public_id = stored.public_id

    await _commit_or_compensate(db, storage, stored)

    if stored and previous_blob:
        await delete_blob_quietly(storage, previous_blob)

    logger.info(f"Account {owner_id} updated draft id={document.id} (file replaced: {bool(stored)})")
    return document


async def submit_draft(db: AsyncSession, document_id: int, owner_id: int) -> DocumentModel:
    document = await _owned_document(db, document_id, owner_id, DocumentStatus.DRAFT)
    if not document:
        raise NotFoundError("Draft document not found")
    if settings.require_file_on_submit and not document.file:
        raise BadRequestError("Please upload a file before submitting")

    document.status = DocumentStatus.SUBMITTED.value
    await db.commit()
    logger.info(f"Account {owner_id} submitted document id={document.id}")
    return document


async def delete_document(db: AsyncSession, storage, document_id: int, owner_id: int) -> None:
    document = await _owned_document(db, document_id, owner_id)
    if not document:
        raise NotFoundError("Document not found or you do not have permission to delete it")

    blob = document.file_public_id
    await db.delete(document)
    await db.commit()
    await delete_blob_quietly(storage, blob)
    logger.info(f"Account {owner_id} deleted document id={document_id}")


# ---------------------------------------------------------------------------
# Doctor review
# ---------------------------------------------------------------------------
async def review_document(
    db: AsyncSession,
    document_id: int,
    doctor: DoctorPrincipal,
    decision: DocumentStatus,
) -> DocumentModel:
    """Approve or reject a submitted document in one of the doctor's courses."""
    if decision not in REVIEW_DECISIONS:
        raise ValueError(f"{decision.value} is not a review decision")

    document = await db.scalar(
        select(DocumentModel)
        .options(selectinload(DocumentModel.owner))
        .where(DocumentModel.id == document_id)
    )
    if not document:
        raise NotFoundError("Document not found")
    if not doctor.can_review(document.course):
        logger.warning(
            f"Doctor {doctor.id} tried to review document {document_id} outside their courses"
        )
        raise ForbiddenError("You are not assigned to this document's course")
    if document.status == DocumentStatus.DRAFT.value:
        raise ConflictError("Draft documents cannot be reviewed")
    if not settings.allow_re_review and document.status != DocumentStatus.SUBMITTED.value:
        raise ConflictError(f"Document has already been {document.status}")

    previous = document.status
    document.status = decision.value
    document.reviewed_by_id = doctor.id
    document.reviewed_at = utcnow()
    await db.commit()

    logger.info(
        f"Doctor {doctor.id} moved document id={document.id} from {previous} to {document.status}"
    )
    return document
