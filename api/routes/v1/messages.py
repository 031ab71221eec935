"""
Messaging endpoints.

A conversation is identified by the id of the application it is anchored
on. Only the two parties to that application can read or write it.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_identity
from api.schemas.communications import (
    ConversationResponse,
    MarkReadResponse,
    MessageCreate,
    MessageResponse,
    ThreadMessageResponse,
)
from api.services import messages as message_service
from core.security import Identity
from database.engine import get_db

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("", response_model=list[ConversationResponse], summary="List Conversations")
async def list_conversations(
    include: Optional[str] = Query(None, description="'all' to include conversations without messages"),
    candidate_id: Optional[str] = Query(
        None, alias="candidateId", description="Companies only: job seeker user id"
    ),
    job_id: Optional[str] = Query(None, alias="jobId"),
    application_id: Optional[str] = Query(None, alias="applicationId"),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    """The caller's conversations, most recent message first."""
    filters = message_service.ConversationFilter(
        candidate_user_id=candidate_id,
        job_id=job_id,
        application_id=application_id,
        include_all=include == "all",
    )
    return await message_service.list_conversations(db, identity, filters)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send Message",
)
async def send_message(
    body: MessageCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    return await message_service.send_message(db, identity, body)


@router.get(
    "/{conversation_id}",
    response_model=list[ThreadMessageResponse],
    summary="Get Conversation Thread",
)
async def get_thread(
    conversation_id: str = Path(..., description="Application ID anchoring the conversation"),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    return await message_service.get_thread(db, identity, conversation_id)


@router.put(
    "/{conversation_id}",
    response_model=MarkReadResponse,
    summary="Mark Conversation Read",
    description="Marks the caller's messages in this conversation and their "
    "NEW_MESSAGE notifications read, together.",
)
async def mark_conversation_read(
    conversation_id: str = Path(..., description="Application ID anchoring the conversation"),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    messages, notifications = await message_service.mark_conversation_read(
        db, identity, conversation_id
    )
    return MarkReadResponse(
        success=True, messages_updated=messages, notifications_updated=notifications
    )
