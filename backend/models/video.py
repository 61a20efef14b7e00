"""Video submission model."""

from datetime import datetime

from models.base import Row, RowId


class VideoSubmission(Row):
    """Proof-of-work video submitted by an influencer."""

    influencer_id: RowId
    campaign_id: RowId | None = None
    title: str | None = None
    description: str | None = None
    video_url: str | None = None
    status: str | None = None
    approval_status: str | None = None
    submitted_at: datetime | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None
