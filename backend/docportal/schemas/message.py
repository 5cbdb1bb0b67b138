# docportal/schemas/message.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from docportal.schemas.shared import AccountSummary, CamelModel


class MessageCreate(CamelModel):
    # both optional here so a missing field gets the same 400 message as an empty one
    to: Optional[int] = None
    content: Optional[str] = None


class MessageReply(MessageCreate):
    reply_to: Optional[int] = None


class MessageOut(CamelModel):
    id: int
    from_: int = Field(alias="from")
    to: int
    content: str
    timestamp: datetime
    reply_to: Optional[int] = None
    sender: Optional[AccountSummary] = None


class MessageEnvelope(CamelModel):
    success: bool = True
    message: MessageOut


class MessageListResponse(CamelModel):
    success: bool = True
    messages: List[MessageOut]
