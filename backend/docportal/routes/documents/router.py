from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from docportal.config.constants import DocumentStatus, DocumentType
from docportal.core.middleware import get_db, require_student
from docportal.core.storage import get_blob_storage
from docportal.db.crud import document as crud
from docportal.schemas.document import (
    DocumentCountsResponse,
    DocumentListResponse,
    DocumentOut,
    DocumentResponse,
)
from docportal.schemas.shared import MessageResponse, StudentPrincipal

router = APIRouter(prefix="/api/documents", tags=["documents"])


def _envelope(document, message: Optional[str] = None) -> DocumentResponse:
    return DocumentResponse(message=message, document=DocumentOut.model_validate(document))


def _listing(documents) -> DocumentListResponse:
    return DocumentListResponse(documents=[DocumentOut.model_validate(d) for d in documents])


@router.get("", response_model=DocumentListResponse)
async def get_user_documents(
    db: AsyncSession = Depends(get_db),
    student: StudentPrincipal = Depends(require_student),
):
    """All of the caller's documents, newest first."""
    return _listing(await crud.list_documents(db, student.id))


@router.get("/drafts", response_model=DocumentListResponse)
async def get_draft_documents(
    db: AsyncSession = Depends(get_db),
    student: StudentPrincipal = Depends(require_student),
):
    return _listing(await crud.list_documents(db, student.id, DocumentStatus.DRAFT))


@router.get("/approved", response_model=DocumentListResponse)
async def get_approved_documents(
    db: AsyncSession = Depends(get_db),
    student: StudentPrincipal = Depends(require_student),
):
    return _listing(await crud.list_documents(db, student.id, DocumentStatus.APPROVED))


@router.get("/counts", response_model=DocumentCountsResponse)
async def get_document_counts(
    db: AsyncSession = Depends(get_db),
    student: StudentPrincipal = Depends(require_student),
):
    return DocumentCountsResponse(counts=await crud.count_documents(db, student.id))


@router.post("/draft", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def save_as_draft(
    title: str = Form(...),
    type: DocumentType = Form(DocumentType.OTHER),
    description: str = Form(...),
    course: str = Form(...),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage=Depends(get_blob_storage),
    student: StudentPrincipal = Depends(require_student),
):
    document = await crud.create_document(
        db,
        storage,
        student.id,
        title=title,
        doc_type=type,
        description=description,
        course=course,
        upload=file,
        status=DocumentStatus.DRAFT,
    )
    return _envelope(document, "Document saved as draft successfully")


@router.post("/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    title: str = Form(...),
    type: DocumentType = Form(DocumentType.OTHER),
    description: str = Form(...),
    course: str = Form(...),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage=Depends(get_blob_storage),
    student: StudentPrincipal = Depends(require_student),
):
    document = await crud.create_document(
        db,
        storage,
        student.id,
        title=title,
        doc_type=type,
        description=description,
        course=course,
        upload=file,
        status=DocumentStatus.SUBMITTED,
    )
    return _envelope(document, "Document uploaded successfully")


@router.put("/draft/{document_id}", response_model=DocumentResponse)
async def update_draft(
    document_id: int,
    title: Optional[str] = Form(None),
    type: Optional[DocumentType] = Form(None),
    description: Optional[str] = Form(None),
    course: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage=Depends(get_blob_storage),
    student: StudentPrincipal = Depends(require_student),
):
    document = await crud.update_draft(
        db,
        storage,
        document_id,
        student.id,
        title=title,
        doc_type=type,
        description=description,
        course=course,
        upload=file,
    )
    return _envelope(document, "Draft updated successfully")


@router.put("/submit/{document_id}", response_model=DocumentResponse)
async def submit_draft(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    student: StudentPrincipal = Depends(require_student),
):
    document = await crud.submit_draft(db, document_id, student.id)
    return _envelope(document, "Document submitted successfully")


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    student: StudentPrincipal = Depends(require_student),
):
    return _envelope(await crud.get_document(db, document_id, student.id))


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    storage=Depends(get_blob_storage),
    student: StudentPrincipal = Depends(require_student),
):
    await crud.delete_document(db, storage, document_id, student.id)
    return MessageResponse(message="Document deleted successfully")
