from enum import Enum


class Role(str, Enum):
    STUDENT = "student"
    DOCTOR = "doctor"


class DocumentType(str, Enum):
    HOMEWORK = "homework"
    EXCUSE_OF_ABSENCE = "excuse_of_absence"
    GRADE_REVIEW = "grade_review"
    OTHER = "other"


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


# statuses a doctor may move a document into
REVIEW_DECISIONS = (DocumentStatus.APPROVED, DocumentStatus.REJECTED)

DOCUMENT_MIME_PREFIXES = ("image/",)
DOCUMENT_MIME_TYPES = ("application/pdf",)
PROFILE_PIC_MIME_TYPES = ("image/jpeg", "image/png", "image/gif")

# multipart framing allowance on top of the file size limits
MULTIPART_OVERHEAD = 64 * 1024

RECENT_DOCUMENTS_LIMIT = 5
