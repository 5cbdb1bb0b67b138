from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from docportal.core.middleware import get_current_account, get_db
from docportal.db.crud import message as crud
from docportal.schemas.message import (
    MessageCreate,
    MessageEnvelope,
    MessageListResponse,
    MessageReply,
)
from docportal.schemas.shared import AnyPrincipal

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", response_model=MessageEnvelope, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    message = await crud.send_message(db, principal.id, payload.to, payload.content)
    return MessageEnvelope(message=crud.to_message_out(message))


@router.post("/reply", response_model=MessageEnvelope, status_code=status.HTTP_201_CREATED)
async def reply_to_message(
    payload: MessageReply,
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    message = await crud.reply_to_message(
        db, principal.id, payload.to, payload.content, payload.reply_to
    )
    return MessageEnvelope(message=crud.to_message_out(message))


@router.get("/doctor", response_model=MessageListResponse)
async def get_doctor_messages(
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    messages = await crud.get_inbox(db, principal.id)
    return MessageListResponse(messages=[crud.to_message_out(m) for m in messages])


@router.get("/student", response_model=MessageListResponse)
async def get_student_messages(
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    messages = await crud.get_inbox(db, principal.id)
    return MessageListResponse(messages=[crud.to_message_out(m) for m in messages])


@router.get("/conversation/{user_id}", response_model=MessageListResponse)
async def get_conversation(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    principal: AnyPrincipal = Depends(get_current_account),
):
    messages = await crud.get_conversation(db, principal.id, user_id)
    return MessageListResponse(messages=[crud.to_message_out(m) for m in messages])
