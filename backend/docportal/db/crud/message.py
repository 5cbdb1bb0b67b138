# docportal/db/crud/message.py
import logging
from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from docportal.config.constants import Role
from docportal.core.exceptions import BadRequestError, NotFoundError
from docportal.db.models import AccountModel, MessageModel
from docportal.schemas.message import MessageOut
from docportal.schemas.shared import AccountSummary

logger = logging.getLogger(__name__)


def to_message_out(message: MessageModel) -> MessageOut:
    return MessageOut(
        id=message.id,
        from_=message.sender_id,
        to=message.recipient_id,
        content=message.content,
        timestamp=message.timestamp,
        reply_to=message.reply_to_id,
        sender=AccountSummary.model_validate(message.sender) if message.sender else None,
    )


def _validated_content(to: Optional[int], content: Optional[str]) -> str:
    if not to or not content or not content.strip():
        raise BadRequestError("Recipient and content are required.")
    return content.strip()


async def _create(
    db: AsyncSession, sender_id: int, recipient_id: int, content: str, reply_to_id: Optional[int] = None
) -> MessageModel:
    message = MessageModel(
        sender_id=sender_id,
        recipient_id=recipient_id,
        content=content,
        reply_to_id=reply_to_id,
    )
    db.add(message)
    await db.commit()
    # reload with the sender for display
    return await db.scalar(
        select(MessageModel)
        .options(selectinload(MessageModel.sender))
        .where(MessageModel.id == message.id)
    )


async def send_message(
    db: AsyncSession, sender_id: int, to: Optional[int], content: Optional[str]
) -> MessageModel:
    """First contact: the recipient has to be a doctor."""
    content = _validated_content(to, content)
    recipient = await db.get(AccountModel, to)
    if not recipient:
        raise NotFoundError("Recipient user not found.")
    if recipient.role != Role.DOCTOR.value:
        raise BadRequestError("Recipient is not a doctor.")

    message = await _create(db, sender_id, recipient.id, content)
    logger.info(f"Account {sender_id} sent message id={message.id} to doctor {recipient.id}")
    return message


async def reply_to_message(
    db: AsyncSession,
    sender_id: int,
    to: Optional[int],
    content: Optional[str],
    reply_to: Optional[int] = None,
) -> MessageModel:
    """Replies may go to any account, so doctors can answer students."""
    content = _validated_content(to, content)
    recipient = await db.get(AccountModel, to)
    if not recipient:
        raise NotFoundError("Recipient user not found.")
    if reply_to is not None and await db.get(MessageModel, reply_to) is None:
        raise NotFoundError("Original message not found.")

    message = await _create(db, sender_id, recipient.id, content, reply_to)
    logger.info(f"Account {sender_id} replied to {reply_to} with message id={message.id}")
    return message


async def get_inbox(db: AsyncSession, account_id: int) -> List[MessageModel]:
    """Messages addressed to the account, newest first."""
    result = await db.execute(
        select(MessageModel)
        .options(selectinload(MessageModel.sender))
        .where(MessageModel.recipient_id == account_id)
        .order_by(MessageModel.timestamp.desc(), MessageModel.id.desc())
    )
    return list(result.scalars().all())


async def get_conversation(db: AsyncSession, account_id: int, other_id: int) -> List[MessageModel]:
    """Both directions between two accounts, oldest first."""
    result = await db.execute(
        select(MessageModel)
        .options(selectinload(MessageModel.sender))
        .where(
            or_(
                and_(MessageModel.sender_id == account_id, MessageModel.recipient_id == other_id),
                and_(MessageModel.sender_id == other_id, MessageModel.recipient_id == account_id),
            )
        )
        .order_by(MessageModel.timestamp.asc(), MessageModel.id.asc())
    )
    return list(result.scalars().all())
