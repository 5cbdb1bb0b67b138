from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from docportal.core.middleware import current_account_model, get_current_account, get_db
from docportal.core.storage import get_blob_storage
from docportal.db.crud import account as crud
from docportal.db.crud.doctor import get_doctor_stats
from docportal.db.models import AccountModel
from docportal.schemas.doctor import DoctorStats, DoctorStatsResponse
from docportal.schemas.shared import AccountOut, DoctorPrincipal, MessageResponse, AnyPrincipal
from docportal.schemas.user import ChangePasswordRequest, ProfilePicResponse, UserProfileResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/profile", response_model=UserProfileResponse)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    return UserProfileResponse(user=await crud.get_user_profile(db, principal.id))


@router.post("/profile-pic", response_model=ProfilePicResponse)
async def update_profile_pic(
    profilePic: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage=Depends(get_blob_storage),
    account: AccountModel = Depends(current_account_model),
):
    account = await crud.update_profile_pic(db, storage, account, profilePic)
    return ProfilePicResponse(
        message="Profile picture updated successfully",
        profile_pic=account.profile_pic,
        user=AccountOut.model_validate(account),
    )


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    account: AccountModel = Depends(current_account_model),
):
    await crud.change_password(db, account, payload.current_password, payload.new_password)
    return MessageResponse(message="Password changed successfully")


@router.get("/stats", response_model=DoctorStatsResponse)
async def get_user_stats(
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    """Doctor dashboard counts; students get the zeroed shape."""
    if isinstance(principal, DoctorPrincipal):
        return DoctorStatsResponse(stats=await get_doctor_stats(db, principal))
    return DoctorStatsResponse(stats=DoctorStats())
