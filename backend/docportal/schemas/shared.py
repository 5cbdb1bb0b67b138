# docportal/schemas/shared.py
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from docportal.config.constants import Role


class CamelModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AccountSummary(CamelModel):
    id: int
    user_id: str
    first_name: str
    last_name: str
    role: Role


class AccountOut(AccountSummary):
    email: EmailStr
    courses: List[str] = []
    profile_pic: Optional[str] = None
    created_at: datetime


class MessageResponse(CamelModel):
    success: bool = True
    message: str


def normalize_courses(courses: Optional[List[str]]) -> List[str]:
    """Strip blanks and duplicates while keeping first-seen order."""
    seen: List[str] = []
    for course in courses or []:
        code = course.strip()
        if code and code not in seen:
            seen.append(code)
    return seen


# ──────────────────────────────────────────────────────────────────────────
# Authenticated caller, one variant per role
# ──────────────────────────────────────────────────────────────────────────
class _PrincipalBase(BaseModel):
    id: int
    user_id: str
    courses: List[str] = []


class StudentPrincipal(_PrincipalBase):
    role: Literal["student"] = "student"


class DoctorPrincipal(_PrincipalBase):
    role: Literal["doctor"] = "doctor"

    def can_review(self, course: str) -> bool:
        return course in self.courses


Principal = Annotated[Union[StudentPrincipal, DoctorPrincipal], Field(discriminator="role")]
# plain union for signatures; FastAPI reads Field() inside Annotated as parameter info
AnyPrincipal = Union[StudentPrincipal, DoctorPrincipal]

_principal_adapter = TypeAdapter(Principal)


def principal_for(account) -> AnyPrincipal:
    return _principal_adapter.validate_python(
        {
            "id": account.id,
            "user_id": account.user_id,
            "role": account.role,
            "courses": list(account.courses or []),
        }
    )
