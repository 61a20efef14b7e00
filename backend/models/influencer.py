"""Influencer profile model."""

import enum
from datetime import datetime

from pydantic import BaseModel

from models.base import Row


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SocialMediaHandles(BaseModel):
    instagram: str | None = None
    youtube: str | None = None
    facebook: str | None = None


class Influencer(Row):
    """Influencer profile. Only approved influencers can be assigned work."""

    user_id: str | None = None
    full_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    district: str | None = None
    state: str | None = None
    social_media_handles: SocialMediaHandles | None = None
    follower_count: int | None = None
    id_proof_type: str | None = None
    id_proof_url: str | None = None
    upi_id: str | None = None
    video_rate: float | None = None
    approval_status: str | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None
    created_at: datetime | None = None
