"""Direct message model."""

from datetime import datetime

from models.base import Row


class Message(Row):
    sender_id: str
    receiver_id: str
    content: str
    is_read: bool = False
    created_at: datetime | None = None
