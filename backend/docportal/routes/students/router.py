from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from docportal.config.constants import Role
from docportal.core.middleware import (
    current_account_model,
    get_current_account,
    get_db,
    require_student,
)
from docportal.core.storage import get_blob_storage
from docportal.db.crud import profile as profiles
from docportal.db.models import AccountModel
from docportal.schemas.profile import StudentProfileIn, StudentProfileOut, StudentProfileUpdate
from docportal.schemas.shared import MessageResponse, AnyPrincipal, StudentPrincipal

router = APIRouter(prefix="/api/students", tags=["students"])


@router.post("", response_model=StudentProfileOut, status_code=status.HTTP_201_CREATED)
async def create_student(
    data: StudentProfileIn,
    db: AsyncSession = Depends(get_db),
    student: StudentPrincipal = Depends(require_student),
    account: AccountModel = Depends(current_account_model),
):
    profile = await profiles.create_profile(db, account, data)
    return StudentProfileOut.model_validate(profile)


@router.get("/{account_id}", response_model=StudentProfileOut)
async def get_student(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    profile = await profiles.get_profile_or_404(db, Role.STUDENT, account_id)
    return StudentProfileOut.model_validate(profile)


@router.put("/{account_id}", response_model=StudentProfileOut)
async def update_student(
    account_id: int,
    data: StudentProfileUpdate,
    db: AsyncSession = Depends(get_db),
    student: StudentPrincipal = Depends(require_student),
):
    profile = await profiles.update_profile(db, Role.STUDENT, account_id, student.id, data)
    return StudentProfileOut.model_validate(profile)


@router.delete("/{account_id}", response_model=MessageResponse)
async def delete_student(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    storage=Depends(get_blob_storage),
    student: StudentPrincipal = Depends(require_student),
):
    await profiles.delete_profile_and_account(db, storage, Role.STUDENT, account_id, student.id)
    return MessageResponse(message="Student deleted successfully")
