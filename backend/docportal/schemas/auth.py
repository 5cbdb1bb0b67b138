# docportal/schemas/auth.py
from typing import Annotated, List

from pydantic import EmailStr, Field, field_validator

from docportal.config.constants import Role
from docportal.schemas.shared import AccountOut, CamelModel, normalize_courses


class RegisterRequest(CamelModel):
    user_id: Annotated[str, Field(min_length=1, max_length=64)]
    email: EmailStr
    password: Annotated[str, Field(min_length=6, max_length=72)]
    first_name: Annotated[str, Field(min_length=1, max_length=50)]
    last_name: Annotated[str, Field(min_length=1, max_length=50)]
    role: Role
    courses: List[str] = []

    @field_validator("user_id", "first_name", "last_name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("courses")
    @classmethod
    def _courses(cls, value: List[str]) -> List[str]:
        return normalize_courses(value)


class LoginRequest(CamelModel):
    user_id: Annotated[str, Field(min_length=1)]
    password: Annotated[str, Field(min_length=1)]


class AuthResponse(CamelModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    user: AccountOut
