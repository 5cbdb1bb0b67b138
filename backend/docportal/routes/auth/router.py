from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from docportal.core.middleware import get_db, get_current_account
from docportal.db.crud.account import get_user_profile
from docportal.db.crud.auth import authenticate_account, register_account
from docportal.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from docportal.schemas.shared import MessageResponse, AnyPrincipal
from docportal.schemas.user import UserProfileResponse

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    return await register_account(db, user_data)


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    return await authenticate_account(db, login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout(principal: AnyPrincipal = Depends(get_current_account)):
    # tokens are stateless; the client discards its copy
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserProfileResponse)
async def me(
    principal: AnyPrincipal = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return UserProfileResponse(user=await get_user_profile(db, principal.id))
