"""Payment and revenue share models."""

import enum
from datetime import datetime

from models.base import Row, RowId

# Performance share paid on revenue generated from an influencer's leads.
REVENUE_SHARE_RATE = 0.05


class PaymentType(str, enum.Enum):
    FIXED = "fixed"
    REVENUE_SHARE = "revenue_share"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


class Payment(Row):
    influencer_id: RowId
    amount: float
    payment_type: str | None = None
    payment_status: str | None = None
    upi_transaction_id: str | None = None
    notes: str | None = None
    video_submission_id: RowId | None = None
    paid_at: datetime | None = None
    paid_by: str | None = None
    created_at: datetime | None = None


class RevenueShare(Row):
    """Monthly performance share computed from lead revenue."""

    influencer_id: RowId
    month: str
    year: int
    revenue_from_leads: float
    performance_share_amount: float
    total_earning: float
    payment_status: str | None = None
