"""Group direct messages into conversations."""

from pydantic import BaseModel


class Conversation(BaseModel):
    user_id: str
    user_name: str
    last_message: str
    last_message_time: str | None = None
    unread_count: int = 0


def counterpart(message: dict, user_id: str) -> str:
    """The other participant of a message, from ``user_id``'s point of view."""
    if message["sender_id"] == user_id:
        return message["receiver_id"]
    return message["sender_id"]


def build_conversations(
    messages: list[dict],
    user_id: str,
    names: dict[str, str],
) -> list[Conversation]:
    """One conversation per counterpart.

    ``messages`` must be ordered newest first so the first message seen for a
    counterpart is the latest one.
    """
    conversations: dict[str, Conversation] = {}
    for message in messages:
        other = counterpart(message, user_id)
        unread = message["receiver_id"] == user_id and not message.get("is_read")

        conversation = conversations.get(other)
        if conversation is None:
            conversations[other] = Conversation(
                user_id=other,
                user_name=names.get(other, "Unknown User"),
                last_message=message.get("content") or "",
                last_message_time=message.get("created_at"),
                unread_count=1 if unread else 0,
            )
        elif unread:
            conversation.unread_count += 1

    return list(conversations.values())
