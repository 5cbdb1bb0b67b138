import logging
from typing import Optional

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from docportal.core.auth import (
    create_token_for_account,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from docportal.core.exceptions import ConflictError, UnauthorizedError
from docportal.db.models import AccountModel
from docportal.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from docportal.schemas.shared import AccountOut

logger = logging.getLogger(__name__)


def _auth_response(account: AccountModel) -> AuthResponse:
    return AuthResponse(
        token=create_token_for_account(account),
        user=AccountOut.model_validate(account),
    )


async def register_account(db: AsyncSession, data: RegisterRequest) -> AuthResponse:
    """Create an account and hand back a token for it."""
    existing = await db.scalar(
        select(AccountModel.id).where(
            or_(AccountModel.user_id == data.user_id, AccountModel.email == data.email)
        )
    )
    if existing is not None:
        logger.info(f"Registration rejected, userId '{data.user_id}' or email already taken")
        raise ConflictError("User already exists")

    account = AccountModel(
        user_id=data.user_id,
        email=data.email,
        password_hash=get_password_hash(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role.value,
        courses=list(data.courses),
    )
    db.add(account)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration
        await db.rollback()
        raise ConflictError("User already exists")

    logger.info(f"Registered {account.role} account id={account.id} userId='{account.user_id}'")
    return _auth_response(account)


async def authenticate_account(db: AsyncSession, data: LoginRequest) -> AuthResponse:
    account = await db.scalar(select(AccountModel).where(AccountModel.user_id == data.user_id))
    if not account or not verify_password(data.password, account.password_hash):
        raise UnauthorizedError("Invalid credentials")
    logger.info(f"Account id={account.id} logged in")
    return _auth_response(account)


async def get_account_from_token(db: AsyncSession, token: Optional[str]) -> AccountModel:
    """Resolve a bearer token to its account; every failure is a 401."""
    if not token:
        raise UnauthorizedError("Not authorized, no token")
    payload = decode_access_token(token)
    try:
        account_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token")

    account = await db.get(AccountModel, account_id)
    if not account:
        raise UnauthorizedError("User not found")
    return account
