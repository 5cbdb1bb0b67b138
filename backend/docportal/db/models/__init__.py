from .account import AccountModel
from .student import StudentProfileModel
from .doctor import DoctorProfileModel
from .document import DocumentModel
from .message import MessageModel

__all__ = [
    "AccountModel",
    "StudentProfileModel",
    "DoctorProfileModel",
    "DocumentModel",
    "MessageModel",
]
