# docportal/schemas/profile.py
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import EmailStr, Field, field_validator

from docportal.config.constants import Weekday
from docportal.schemas.shared import CamelModel, normalize_courses


class ProfileAccount(CamelModel):
    id: int
    user_id: str
    first_name: str
    last_name: str
    email: EmailStr


class _CoursesMixin(CamelModel):
    @field_validator("courses", check_fields=False)
    @classmethod
    def _courses(cls, value):
        return None if value is None else normalize_courses(value)


# ──────────────────────────────────────────────────────────────────────────
# Students
# ──────────────────────────────────────────────────────────────────────────
class StudentProfileIn(_CoursesMixin):
    student_id: Annotated[str, Field(min_length=1, max_length=64)]
    department: Annotated[str, Field(min_length=1, max_length=100)]
    year: Annotated[int, Field(ge=1, le=10)]
    semester: Annotated[int, Field(ge=1, le=3)]
    gpa: Annotated[float, Field(ge=0, le=4)] = 0
    courses: List[str] = []


class StudentProfileUpdate(_CoursesMixin):
    department: Optional[Annotated[str, Field(min_length=1, max_length=100)]] = None
    year: Optional[Annotated[int, Field(ge=1, le=10)]] = None
    semester: Optional[Annotated[int, Field(ge=1, le=3)]] = None
    gpa: Optional[Annotated[float, Field(ge=0, le=4)]] = None
    courses: Optional[List[str]] = None


class StudentProfileOut(CamelModel):
    id: int
    account_id: int
    student_id: str
    department: str
    year: int
    semester: int
    gpa: float
    courses: List[str] = []
    account: ProfileAccount
    created_at: datetime
    updated_at: datetime


# ──────────────────────────────────────────────────────────────────────────
# Doctors
# ──────────────────────────────────────────────────────────────────────────
class OfficeHour(CamelModel):
    day: Weekday
    start_time: Annotated[str, Field(pattern=r"^\d{1,2}:\d{2}$")]
    end_time: Annotated[str, Field(pattern=r"^\d{1,2}:\d{2}$")]


class DoctorProfileIn(_CoursesMixin):
    doctor_id: Annotated[str, Field(min_length=1, max_length=64)]
    department: Annotated[str, Field(min_length=1, max_length=100)]
    specialization: Annotated[str, Field(min_length=1, max_length=100)]
    courses: List[str] = []
    office_hours: List[OfficeHour] = []


class DoctorProfileUpdate(_CoursesMixin):
    department: Optional[Annotated[str, Field(min_length=1, max_length=100)]] = None
    specialization: Optional[Annotated[str, Field(min_length=1, max_length=100)]] = None
    courses: Optional[List[str]] = None
    office_hours: Optional[List[OfficeHour]] = None


class DoctorProfileOut(CamelModel):
    id: int
    account_id: int
    doctor_id: str
    department: str
    specialization: str
    courses: List[str] = []
    office_hours: List[OfficeHour] = []
    account: ProfileAccount
    created_at: datetime
    updated_at: datetime
