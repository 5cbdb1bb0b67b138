# docportal/db/crud/profile.py
"""Student and doctor profile records, 1:1 with their account."""
import logging
from typing import Optional, Union

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from docportal.config.constants import Role
from docportal.core.exceptions import ConflictError, NotFoundError
from docportal.core.storage import delete_blob_quietly
from docportal.db.models import (
    AccountModel,
    DoctorProfileModel,
    DocumentModel,
    MessageModel,
    StudentProfileModel,
)
from docportal.schemas.profile import (
    DoctorProfileIn,
    DoctorProfileUpdate,
    StudentProfileIn,
    StudentProfileUpdate,
)

logger = logging.getLogger(__name__)

ProfileModel = Union[StudentProfileModel, DoctorProfileModel]

_PROFILE_MODELS = {
    Role.STUDENT: StudentProfileModel,
    Role.DOCTOR: DoctorProfileModel,
}
_EXTERNAL_ID = {
    Role.STUDENT: ("student_id", "Student ID already exists"),
    Role.DOCTOR: ("doctor_id", "Doctor ID already exists"),
}


async def get_profile(db: AsyncSession, role: Role, account_id: int) -> Optional[ProfileModel]:
    model = _PROFILE_MODELS[role]
    return await db.scalar(
        select(model)
        .options(selectinload(model.account))
        .where(model.account_id == account_id)
        .execution_options(populate_existing=True)
    )


async def get_profile_or_404(db: AsyncSession, role: Role, account_id: int) -> ProfileModel:
    profile = await get_profile(db, role, account_id)
    if not profile:
        raise NotFoundError(f"{role.value.capitalize()} not found")
    return profile


async def _owned_profile_or_404(
    db: AsyncSession, role: Role, account_id: int, caller_id: int
) -> ProfileModel:
    # someone else's profile reads the same as a missing one
    profile = await get_profile(db, role, account_id) if account_id == caller_id else None
    if not profile:
        raise NotFoundError(f"{role.value.capitalize()} not found")
    return profile


async def create_profile(
    db: AsyncSession,
    account: AccountModel,
    data: Union[StudentProfileIn, DoctorProfileIn],
) -> ProfileModel:
    """Create the caller's own profile; the account role decides which kind."""
    role = Role(account.role)
    model = _PROFILE_MODELS[role]
    id_field, conflict_message = _EXTERNAL_ID[role]

    if await get_profile(db, role, account.id) is not None:
        raise ConflictError(f"{role.value.capitalize()} profile already exists")
    external_id = getattr(data, id_field)
    if await db.scalar(select(model.id).where(getattr(model, id_field) == external_id)) is not None:
        raise ConflictError(conflict_message)

    values = data.model_dump(mode="json", by_alias=False)
    if "courses" not in data.model_fields_set:
        values["courses"] = list(account.courses or [])
    if role == Role.DOCTOR:
        values["office_hours"] = [oh.model_dump(mode="json", by_alias=True) for oh in data.office_hours]
        if "courses" in data.model_fields_set:
            # review authorization reads the account's list
            account.courses = list(data.courses)
    profile = model(account_id=account.id, **values)
    db.add(profile)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(conflict_message)

    logger.info(f"Created {role.value} profile {external_id} for account {account.id}")
    return await get_profile_or_404(db, role, account.id)


async def update_profile(
    db: AsyncSession,
    role: Role,
    account_id: int,
    caller_id: int,
    data: Union[StudentProfileUpdate, DoctorProfileUpdate],
) -> ProfileModel:
    profile = await _owned_profile_or_404(db, role, account_id, caller_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True, mode="json", by_alias=False)
    if role == Role.DOCTOR and data.office_hours is not None:
        changes["office_hours"] = [oh.model_dump(mode="json", by_alias=True) for oh in data.office_hours]
    for field, value in changes.items():
        setattr(profile, field, value)
    if role == Role.DOCTOR and "courses" in changes:
        profile.account.courses = list(changes["courses"])

    await db.commit()
    logger.info(f"Updated {role.value} profile of account {account_id}: {sorted(changes)}")
    return profile


async def delete_profile_and_account(
    db: AsyncSession, storage, role: Role, account_id: int, caller_id: int
) -> None:
    """Remove the profile, then the account with its documents and messages."""
    await _owned_profile_or_404(db, role, account_id, caller_id)

    account = await db.scalar(
        select(AccountModel)
        .options(
            selectinload(AccountModel.documents),
            selectinload(AccountModel.student_profile),
            selectinload(AccountModel.doctor_profile),
        )
        .where(AccountModel.id == account_id)
        .execution_options(populate_existing=True)
    )
    blobs = [d.file_public_id for d in account.documents if d.file_public_id]
    if account.profile_pic_public_id:
        blobs.append(account.profile_pic_public_id)

    await db.execute(
        update(DocumentModel)
        .where(DocumentModel.reviewed_by_id == account_id)
        .values(reviewed_by_id=None)
    )
    await db.execute(
        update(MessageModel)
        .where(MessageModel.reply_to_id.in_(
            select(MessageModel.id).where(
                (MessageModel.sender_id == account_id) | (MessageModel.recipient_id == account_id)
            )
        ))
        .values(reply_to_id=None)
    )
    await db.execute(
        delete(MessageModel).where(
            (MessageModel.sender_id == account_id) | (MessageModel.recipient_id == account_id)
        )
    )
    # the profile and documents go with the account through the ORM cascade
    await db.delete(account)
    await db.commit()

    for blob in blobs:
        await delete_blob_quietly(storage, blob)
    logger.info(f"Deleted {role.value} account {account_id} with {len(account.documents)} documents")
