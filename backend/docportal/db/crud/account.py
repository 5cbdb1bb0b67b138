# docportal/db/crud/account.py
import logging

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from docportal.config.constants import PROFILE_PIC_MIME_TYPES, Role
from docportal.config.settings import settings
from docportal.core.auth import get_password_hash, verify_password
from docportal.core.exceptions import BadRequestError, NotFoundError
from docportal.core.storage import delete_blob_quietly, store_upload
from docportal.db.crud.profile import get_profile
from docportal.db.models import AccountModel
from docportal.schemas.profile import DoctorProfileOut, StudentProfileOut
from docportal.schemas.user import UserProfile

logger = logging.getLogger(__name__)


async def get_account(db: AsyncSession, account_id: int) -> AccountModel:
    """
    Get an account by ID.

    Raises:
        NotFoundError: if the account does not exist
    """
    account = await db.get(AccountModel, account_id)
    if not account:
        raise NotFoundError("User not found")
    return account


async def get_user_profile(db: AsyncSession, account_id: int) -> UserProfile:
    """The public view of an account, including its student/doctor profile."""
    account = await get_account(db, account_id)
    # loaded from the profile side so profile.account comes back eagerly
    role = Role(account.role)
    record = await get_profile(db, role, account.id)
    profile = None
    if record is not None:
        out_model = StudentProfileOut if role == Role.STUDENT else DoctorProfileOut
        profile = out_model.model_validate(record)

    user = UserProfile.model_validate(account)
    user.profile = profile
    return user


async def update_profile_pic(
    db: AsyncSession, storage, account: AccountModel, upload: UploadFile
) -> AccountModel:
    if upload is None or not upload.filename:
        raise BadRequestError("No file uploaded")

    stored = await store_upload(
        storage,
        upload,
        max_size=settings.max_profile_pic_size,
        allowed_types=PROFILE_PIC_MIME_TYPES,
        folder=f"{settings.cloudinary_folder}/profile-pics",
    )
    previous_blob = account.profile_pic_public_id
    account.profile_pic = stored.url
    account.profile_pic_public_id = stored.public_id
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        await delete_blob_quietly(storage, stored.public_id)
        raise

    await delete_blob_quietly(storage, previous_blob)
    logger.info(f"Account {account.id} changed profile picture")
    return account


async def change_password(
    db: AsyncSession, account: AccountModel, current_password: str, new_password: str
) -> None:
    if not verify_password(current_password, account.password_hash):
        raise BadRequestError("Current password is incorrect")
    account.password_hash = get_password_hash(new_password)
    await db.commit()
    logger.info(f"Account {account.id} changed password")
