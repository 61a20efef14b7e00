"""Dashboard statistics computed from already-fetched rows."""

from collections import Counter
from datetime import date
from typing import Iterable

from pydantic import BaseModel

from models.influencer import ApprovalStatus
from models.payment import PaymentStatus

# Minimum approved posts in a month to qualify for a revenue share.
REVENUE_SHARE_MIN_POSTS = 2


class DistrictCoverage(BaseModel):
    district: str | None
    state: str | None
    count: int


class AdminDashboardStats(BaseModel):
    total_influencers: int
    pending_approvals: int
    pending_influencers: int
    pending_task_applications: int
    approved_influencers: int
    rejected_influencers: int
    total_videos_submitted: int
    pending_video_reviews: int
    total_payments_made: float
    pending_payments: float
    district_coverage: list[DistrictCoverage]


class InfluencerStats(BaseModel):
    total_videos_submitted: int
    approved_videos: int
    rejected_videos: int
    pending_videos: int
    total_earnings: float
    pending_payments: float
    this_month_posts: int
    eligible_for_revenue_share: bool


class PaymentTotals(BaseModel):
    total: float
    pending: float
    paid: float


def _count(rows: Iterable[dict], key: str, value: str) -> int:
    return sum(1 for row in rows if row.get(key) == value)


def sum_payments(payments: Iterable[dict], status: str | None = None) -> float:
    """Sum payment amounts, optionally only those with a given status."""
    return float(sum(
        p.get("amount") or 0
        for p in payments
        if status is None or p.get("payment_status") == status
    ))


def district_coverage(influencers: list[dict], limit: int = 10) -> list[DistrictCoverage]:
    """Influencer counts per (district, state), largest first."""
    counts = Counter((inf.get("district"), inf.get("state")) for inf in influencers)
    return [
        DistrictCoverage(district=district, state=state, count=count)
        for (district, state), count in counts.most_common(limit)
    ]


def admin_dashboard_stats(
    influencers: list[dict],
    videos: list[dict],
    payments: list[dict],
    pending_task_applications: int,
) -> AdminDashboardStats:
    pending_influencers = _count(influencers, "approval_status", ApprovalStatus.PENDING.value)
    return AdminDashboardStats(
        total_influencers=len(influencers),
        pending_approvals=pending_influencers + pending_task_applications,
        pending_influencers=pending_influencers,
        pending_task_applications=pending_task_applications,
        approved_influencers=_count(influencers, "approval_status", ApprovalStatus.APPROVED.value),
        rejected_influencers=_count(influencers, "approval_status", ApprovalStatus.REJECTED.value),
        total_videos_submitted=len(videos),
        pending_video_reviews=_count(videos, "approval_status", "pending"),
        total_payments_made=sum_payments(payments, PaymentStatus.PAID.value),
        pending_payments=sum_payments(payments, PaymentStatus.PENDING.value),
        district_coverage=district_coverage(influencers),
    )


def influencer_stats(
    videos: list[dict],
    payments: list[dict],
    today: date | None = None,
) -> InfluencerStats:
    """Per-influencer counters; a month with enough approved posts earns a share."""
    this_month = (today or date.today()).isoformat()[:7]
    this_month_posts = sum(
        1
        for v in videos
        if (v.get("submitted_at") or "").startswith(this_month)
        and v.get("approval_status") == "approved"
    )
    return InfluencerStats(
        total_videos_submitted=len(videos),
        approved_videos=_count(videos, "approval_status", "approved"),
        rejected_videos=_count(videos, "approval_status", "rejected"),
        pending_videos=_count(videos, "approval_status", "pending"),
        total_earnings=sum_payments(payments, PaymentStatus.PAID.value),
        pending_payments=sum_payments(payments, PaymentStatus.PENDING.value),
        this_month_posts=this_month_posts,
        eligible_for_revenue_share=this_month_posts >= REVENUE_SHARE_MIN_POSTS,
    )


def payment_totals(payments: list[dict]) -> PaymentTotals:
    return PaymentTotals(
        total=sum_payments(payments),
        pending=sum_payments(payments, PaymentStatus.PENDING.value),
        paid=sum_payments(payments, PaymentStatus.PAID.value),
    )
