from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from docportal.config.constants import DocumentStatus, Role
from docportal.core.middleware import (
    current_account_model,
    get_current_account,
    get_db,
    require_doctor,
)
from docportal.core.storage import get_blob_storage
from docportal.db.crud import doctor as crud
from docportal.db.crud import profile as profiles
from docportal.db.crud.document import review_document
from docportal.db.models import AccountModel
from docportal.schemas.doctor import (
    DoctorDirectoryEntry,
    DoctorDirectoryResponse,
    DoctorStatsResponse,
)
from docportal.schemas.document import (
    CourseDocumentsResponse,
    DocumentWithOwner,
    ReviewResponse,
)
from docportal.schemas.profile import DoctorProfileIn, DoctorProfileOut, DoctorProfileUpdate
from docportal.schemas.shared import DoctorPrincipal, MessageResponse, AnyPrincipal

router = APIRouter(prefix="/api/doctor", tags=["doctor"])


# ----------------------------------------------------------------- course views -----
@router.get("/all-documents", response_model=CourseDocumentsResponse)
async def get_all_documents(
    db: AsyncSession = Depends(get_db),
    doctor: DoctorPrincipal = Depends(require_doctor),
):
    """Every document in the doctor's courses, also grouped per course."""
    if not doctor.courses:
        return CourseDocumentsResponse(documents=[], message="No courses assigned to doctor")
    documents = await crud.get_doctor_documents(db, doctor)
    return CourseDocumentsResponse(
        documents=documents,
        documents_by_course=crud.group_by_course(doctor.courses, documents),
    )


@router.get("/pending-documents", response_model=CourseDocumentsResponse)
async def get_pending_documents(
    db: AsyncSession = Depends(get_db),
    doctor: DoctorPrincipal = Depends(require_doctor),
):
    documents = await crud.get_doctor_documents(db, doctor, pending_only=True)
    return CourseDocumentsResponse(
        documents=documents,
        documents_by_course=crud.group_by_course(doctor.courses, documents),
    )


@router.get("/stats", response_model=DoctorStatsResponse)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    doctor: DoctorPrincipal = Depends(require_doctor),
):
    return DoctorStatsResponse(stats=await crud.get_doctor_stats(db, doctor))


@router.get("/all", response_model=DoctorDirectoryResponse)
async def get_all_doctors(
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    """Directory of doctors, used to pick a message recipient."""
    doctors = await crud.list_all_doctors(db)
    return DoctorDirectoryResponse(
        doctors=[DoctorDirectoryEntry.model_validate(d) for d in doctors]
    )


# -------------------------------------------------------------------- reviews -------
@router.put("/approve-document/{document_id}", response_model=ReviewResponse)
async def approve_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    doctor: DoctorPrincipal = Depends(require_doctor),
):
    document = await review_document(db, document_id, doctor, DocumentStatus.APPROVED)
    return ReviewResponse(
        message="Document approved successfully",
        document=DocumentWithOwner.model_validate(document),
    )


@router.put("/reject-document/{document_id}", response_model=ReviewResponse)
async def reject_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    doctor: DoctorPrincipal = Depends(require_doctor),
):
    document = await review_document(db, document_id, doctor, DocumentStatus.REJECTED)
    return ReviewResponse(
        message="Document rejected successfully",
        document=DocumentWithOwner.model_validate(document),
    )


# -------------------------------------------------------------------- profile -------
@router.post("", response_model=DoctorProfileOut, status_code=status.HTTP_201_CREATED)
async def create_doctor(
    data: DoctorProfileIn,
    db: AsyncSession = Depends(get_db),
    doctor: DoctorPrincipal = Depends(require_doctor),
    account: AccountModel = Depends(current_account_model),
):
    profile = await profiles.create_profile(db, account, data)
    return DoctorProfileOut.model_validate(profile)


@router.get("/{account_id}", response_model=DoctorProfileOut)
async def get_doctor(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    profile = await profiles.get_profile_or_404(db, Role.DOCTOR, account_id)
    return DoctorProfileOut.model_validate(profile)


@router.put("/{account_id}", response_model=DoctorProfileOut)
async def update_doctor(
    account_id: int,
    data: DoctorProfileUpdate,
    db: AsyncSession = Depends(get_db),
    doctor: DoctorPrincipal = Depends(require_doctor),
):
    profile = await profiles.update_profile(db, Role.DOCTOR, account_id, doctor.id, data)
    return DoctorProfileOut.model_validate(profile)


@router.delete("/{account_id}", response_model=MessageResponse)
async def delete_doctor(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    storage=Depends(get_blob_storage),
    doctor: DoctorPrincipal = Depends(require_doctor),
):
    await profiles.delete_profile_and_account(db, storage, Role.DOCTOR, account_id, doctor.id)
    return MessageResponse(message="Doctor deleted successfully")
