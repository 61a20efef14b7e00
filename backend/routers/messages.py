"""Messages router - direct messages between any two users."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from supabase import AsyncClient

from database import first_row
from middleware.auth import get_current_user, get_user_db
from models.message import Message
from models.user import UserProfile
from services.messaging import Conversation, build_conversations, counterpart
from services.profiles import resolve_display_names

router = APIRouter(prefix="/api/messages", tags=["messages"])

CurrentUser = Annotated[UserProfile, Depends(get_current_user)]
UserDb = Annotated[AsyncClient, Depends(get_user_db)]


# Request/Response schemas
class SendMessageRequest(BaseModel):
    receiver_id: str = Field(min_length=1)
    content: str = Field(min_length=1)


class ThreadResponse(BaseModel):
    user_id: str
    user_name: str
    messages: list[dict]


class MarkReadResponse(BaseModel):
    updated: int


@router.get("/conversations", response_model=list[Conversation])
async def list_conversations(current_user: CurrentUser, db: UserDb):
    """One entry per counterpart, most recent conversation first."""
    response = await (
        db.table("messages")
        .select("id, sender_id, receiver_id, content, created_at, is_read")
        .or_(f"sender_id.eq.{current_user.id},receiver_id.eq.{current_user.id}")
        .order("created_at", desc=True)
        .execute()
    )
    messages = response.data or []

    other_ids = list({counterpart(m, current_user.id) for m in messages})
    names = await resolve_display_names(db, other_ids)
    return build_conversations(messages, current_user.id, names)


@router.get("/{user_id}", response_model=ThreadResponse)
async def get_thread(user_id: uuid.UUID, current_user: CurrentUser, db: UserDb):
    """All messages with one user, oldest first."""
    me = current_user.id
    other = str(user_id)
    response = await (
        db.table("messages")
        .select("*")
        .or_(
            f"and(sender_id.eq.{me},receiver_id.eq.{other}),"
            f"and(sender_id.eq.{other},receiver_id.eq.{me})"
        )
        .order("created_at")
        .execute()
    )
    names = await resolve_display_names(db, [other])
    return ThreadResponse(
        user_id=other,
        user_name=names.get(other, "Unknown User"),
        messages=response.data or [],
    )


@router.post("", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message(data: SendMessageRequest, current_user: CurrentUser, db: UserDb):
    if data.receiver_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot send a message to yourself",
        )

    response = await db.table("messages").insert({
        "sender_id": current_user.id,
        "receiver_id": data.receiver_id,
        "content": data.content,
    }).execute()
    return first_row(response)


@router.post("/{user_id}/read", response_model=MarkReadResponse)
async def mark_read(user_id: uuid.UUID, current_user: CurrentUser, db: UserDb):
    """Mark every unread message from ``user_id`` to the caller as read."""
    response = await (
        db.table("messages")
        .update({"is_read": True})
        .eq("sender_id", str(user_id))
        .eq("receiver_id", current_user.id)
        .eq("is_read", False)
        .execute()
    )
    return MarkReadResponse(updated=len(response.data or []))
