# docportal/schemas/user.py
from typing import Annotated, Optional, Union

from pydantic import Field

from docportal.schemas.profile import DoctorProfileOut, StudentProfileOut
from docportal.schemas.shared import AccountOut, CamelModel


class ChangePasswordRequest(CamelModel):
    current_password: Annotated[str, Field(min_length=1)]
    new_password: Annotated[str, Field(min_length=6, max_length=72)]


class UserProfile(AccountOut):
    profile: Optional[Union[StudentProfileOut, DoctorProfileOut]] = None


class UserProfileResponse(CamelModel):
    success: bool = True
    user: UserProfile


class ProfilePicResponse(CamelModel):
    success: bool = True
    message: str
    profile_pic: str
    user: AccountOut
