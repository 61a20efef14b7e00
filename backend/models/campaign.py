"""Brand, campaign and campaign application models."""

import enum
from datetime import datetime

from models.base import Row, RowId


class CampaignStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Brand(Row):
    """Brand profile owned by a marketing user."""

    user_id: str | None = None
    company_name: str | None = None
    website: str | None = None
    industry: str | None = None
    contact_person: str | None = None
    phone_number: str | None = None
    description: str | None = None
    location: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None


class Campaign(Row):
    """Brand-authored opportunity influencers can apply to."""

    brand_id: RowId | None = None
    title: str
    description: str | None = None
    requirements: str | None = None
    budget: float | None = None
    deadline: datetime | None = None
    status: str | None = None
    created_at: datetime | None = None


class CampaignApplication(Row):
    campaign_id: RowId
    influencer_id: RowId
    bid_amount: float | None = None
    cover_message: str | None = None
    status: str
    applied_at: datetime | None = None
