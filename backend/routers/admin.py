"""Admin router - influencer review, tasks, assignments, videos, payments, projects.

All endpoints require the admin role and run as the caller, so the
platform's row-level security still applies.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from postgrest.exceptions import APIError
from pydantic import BaseModel, Field
from supabase import AsyncClient

from database import first_row
from middleware.auth import get_user_db, require_roles
from models.campaign import ApplicationStatus
from models.influencer import ApprovalStatus, Influencer
from models.payment import REVENUE_SHARE_RATE, Payment, PaymentStatus, PaymentType, RevenueShare
from models.project import Project
from models.task import AssignmentStatus, Task, TaskAssignment, TaskApplication
from models.video import VideoSubmission
from models.user import UserProfile, UserRole
from services.listings import current_period
from services.stats import AdminDashboardStats, admin_dashboard_stats

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)

AdminUser = Annotated[UserProfile, Depends(require_roles(UserRole.ADMIN))]
UserDb = Annotated[AsyncClient, Depends(get_user_db)]

# Tables sampled by the debug-schema endpoint.
DEBUG_TABLES = ("video_submissions", "influencers", "task_assignments")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# Request/Response schemas
class TaskCreateRequest(BaseModel):
    title: str
    description: str | None = None
    topic: str | None = None
    guidelines: str | None = None
    reward: float = 0
    month: str | None = None
    year: int | None = None
    is_default: bool = False
    project_id: str | None = None


class AssignmentCreateRequest(BaseModel):
    # Empty strings are accepted so the missing-selection error can be reported.
    influencer_id: str | None = None
    task_id: str | None = None


class AssignmentOptions(BaseModel):
    influencers: list[dict]
    tasks: list[dict]


class ApplicationDecisionRequest(BaseModel):
    status: AssignmentStatus


class PaymentCreateRequest(BaseModel):
    influencer_id: str
    amount: float = Field(gt=0)
    payment_type: PaymentType = PaymentType.FIXED
    upi_transaction_id: str | None = None
    notes: str | None = None


class MarkPaidRequest(BaseModel):
    upi_transaction_id: str


class RevenueShareRequest(BaseModel):
    influencer_id: str
    month: str
    year: int
    total_revenue: float = Field(gt=0)


class ProjectCreateRequest(BaseModel):
    title: str
    description: str | None = None
    objectives: list[str] = []
    target_audience: list[str] = []
    deliverables: list[str] = []
    guidelines: str | None = None
    sample_script: str | None = None


class RevenueShareResult(BaseModel):
    revenue_share: RevenueShare
    payment: Payment


def _updated_or_404(response, what: str) -> dict:
    row = first_row(response)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{what} not found",
        )
    return row


# Dashboard
@router.get("/dashboard", response_model=AdminDashboardStats)
async def dashboard(current_user: AdminUser, db: UserDb):
    """Platform totals, pending work and district coverage."""
    influencers = await db.table("influencers").select("*").execute()
    videos = await db.table("video_submissions").select("*").execute()
    payments = await db.table("payments").select("*").execute()
    pending_tasks = await (
        db.table("influencer_tasks")
        .select("*", count="exact", head=True)
        .eq("status", AssignmentStatus.PENDING_APPROVAL.value)
        .execute()
    )

    return admin_dashboard_stats(
        influencers.data or [],
        videos.data or [],
        payments.data or [],
        pending_tasks.count or 0,
    )


# Influencers
@router.get("/influencers")
async def list_influencers(
    current_user: AdminUser,
    db: UserDb,
    status_filter: Annotated[ApprovalStatus | None, Query(alias="status")] = None,
):
    """List influencers newest first, optionally by approval status."""
    query = db.table("influencers").select("*").order("created_at", desc=True)
    if status_filter is not None:
        query = query.eq("approval_status", status_filter.value)
    response = await query.execute()
    return response.data or []


@router.post("/influencers/{influencer_id}/approve", response_model=Influencer)
async def approve_influencer(influencer_id: str, current_user: AdminUser, db: UserDb):
    response = await db.table("influencers").update({
        "approval_status": ApprovalStatus.APPROVED.value,
        "approved_at": _now(),
        "approved_by": current_user.id,
    }).eq("id", influencer_id).execute()
    logger.info(f"Influencer {influencer_id} approved by {current_user.id}")
    return _updated_or_404(response, "Influencer")


@router.post("/influencers/{influencer_id}/reject", response_model=Influencer)
async def reject_influencer(influencer_id: str, current_user: AdminUser, db: UserDb):
    response = await db.table("influencers").update({
        "approval_status": ApprovalStatus.REJECTED.value,
    }).eq("id", influencer_id).execute()
    logger.info(f"Influencer {influencer_id} rejected by {current_user.id}")
    return _updated_or_404(response, "Influencer")


# Tasks
@router.get("/tasks", response_model=list[Task])
async def list_tasks(current_user: AdminUser, db: UserDb):
    """List tasks, newest first."""
    response = await db.table("tasks").select("*").order("created_at", desc=True).execute()
    return response.data or []


@router.post("/tasks", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskCreateRequest, current_user: AdminUser, db: UserDb):
    """Create a task. Backend errors come back verbatim."""
    try:
        response = await db.table("tasks").insert(data.model_dump()).execute()
    except APIError as e:
        logger.error(f"Task creation failed: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to create task: {e.message}",
        )
    return first_row(response)


# Task assignments
@router.get("/task-assignments/options", response_model=AssignmentOptions)
async def assignment_options(current_user: AdminUser, db: UserDb):
    """Approved influencers and tasks to pick from."""
    influencers = await (
        db.table("influencers")
        .select("id, full_name, email")
        .eq("approval_status", ApprovalStatus.APPROVED.value)
        .execute()
    )
    tasks = await db.table("tasks").select("id, title, reward").execute()
    return AssignmentOptions(
        influencers=influencers.data or [],
        tasks=tasks.data or [],
    )


@router.post("/task-assignments", response_model=TaskAssignment, status_code=status.HTTP_201_CREATED)
async def create_assignment(data: AssignmentCreateRequest, current_user: AdminUser, db: UserDb):
    """Assign a task to an influencer for the current month.

    Duplicate assignments are not prevented.
    """
    if not data.influencer_id or not data.task_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please select both influencer and task.",
        )

    month, year = current_period()
    response = await db.table("task_assignments").insert({
        "influencer_id": data.influencer_id,
        "task_id": data.task_id,
        "status": AssignmentStatus.ASSIGNED.value,
        "assigned_month": month,
        "assigned_year": year,
        "created_by": current_user.id,
    }).execute()

    logger.info(f"Task {data.task_id} assigned to influencer {data.influencer_id}")
    return first_row(response)


# Task applications
@router.get("/applications")
async def list_applications(current_user: AdminUser, db: UserDb):
    """Task applications waiting for a decision."""
    response = await (
        db.table("influencer_tasks")
        .select("*, tasks(title, reward), influencers(user_id, full_name, email)")
        .eq("status", AssignmentStatus.PENDING_APPROVAL.value)
        .order("created_at", desc=True)
        .execute()
    )
    return response.data or []


@router.post("/applications/{application_id}/decision", response_model=TaskApplication)
async def decide_application(
    application_id: str,
    data: ApplicationDecisionRequest,
    current_user: AdminUser,
    db: UserDb,
):
    """Approve (``assigned``) or reject a task application."""
    if data.status not in (AssignmentStatus.ASSIGNED, AssignmentStatus.REJECTED):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Status must be assigned or rejected",
        )

    response = await (
        db.table("influencer_tasks")
        .update({"status": data.status.value})
        .eq("id", application_id)
        .execute()
    )
    return _updated_or_404(response, "Application")


# Videos
@router.get("/videos")
async def list_videos(current_user: AdminUser, db: UserDb):
    """Submitted videos with their influencer, newest first."""
    response = await (
        db.table("video_submissions")
        .select("*, influencer:influencers(*)")
        .eq("status", "submitted")
        .order("created_at", desc=True)
        .execute()
    )
    return response.data or []


async def _review_video(db: AsyncClient, video_id: str, decision: ApplicationStatus) -> dict:
    response = await db.table("video_submissions").update({
        "approval_status": decision.value,
        "reviewed_at": _now(),
    }).eq("id", video_id).execute()
    return _updated_or_404(response, "Video")


@router.post("/videos/{video_id}/approve", response_model=VideoSubmission)
async def approve_video(video_id: str, current_user: AdminUser, db: UserDb):
    return await _review_video(db, video_id, ApplicationStatus.APPROVED)


@router.post("/videos/{video_id}/reject", response_model=VideoSubmission)
async def reject_video(video_id: str, current_user: AdminUser, db: UserDb):
    return await _review_video(db, video_id, ApplicationStatus.REJECTED)


# Payments
@router.get("/payments")
async def list_payments(current_user: AdminUser, db: UserDb):
    """All payments with their influencer, newest first."""
    response = await (
        db.table("payments")
        .select("*, influencer:influencers(*)")
        .order("created_at", desc=True)
        .execute()
    )
    return response.data or []


@router.post("/payments", response_model=Payment, status_code=status.HTTP_201_CREATED)
async def create_payment(data: PaymentCreateRequest, current_user: AdminUser, db: UserDb):
    response = await db.table("payments").insert({
        "influencer_id": data.influencer_id,
        "amount": data.amount,
        "payment_type": data.payment_type.value,
        "payment_status": PaymentStatus.PENDING.value,
        "upi_transaction_id": data.upi_transaction_id or None,
        "notes": data.notes or None,
    }).execute()
    return first_row(response)


@router.post("/payments/{payment_id}/mark-paid", response_model=Payment)
async def mark_payment_paid(
    payment_id: str,
    data: MarkPaidRequest,
    current_user: AdminUser,
    db: UserDb,
):
    if not data.upi_transaction_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter UPI transaction ID",
        )

    response = await db.table("payments").update({
        "payment_status": PaymentStatus.PAID.value,
        "upi_transaction_id": data.upi_transaction_id,
        "paid_at": _now(),
        "paid_by": current_user.id,
    }).eq("id", payment_id).execute()
    logger.info(f"Payment {payment_id} marked paid by {current_user.id}")
    return _updated_or_404(response, "Payment")


@router.post("/payments/revenue-share", response_model=RevenueShareResult, status_code=status.HTTP_201_CREATED)
async def create_revenue_share(data: RevenueShareRequest, current_user: AdminUser, db: UserDb):
    """Record a month's lead revenue and a pending payment for its 5% share."""
    share = data.total_revenue * REVENUE_SHARE_RATE

    revenue_share = await db.table("revenue_shares").insert({
        "influencer_id": data.influencer_id,
        "month": data.month,
        "year": data.year,
        "revenue_from_leads": data.total_revenue,
        "performance_share_amount": share,
        "total_earning": share,
        "payment_status": PaymentStatus.PENDING.value,
    }).execute()

    payment = await db.table("payments").insert({
        "influencer_id": data.influencer_id,
        "amount": share,
        "payment_type": PaymentType.REVENUE_SHARE.value,
        "payment_status": PaymentStatus.PENDING.value,
        "notes": (
            f"5% Revenue Share for {data.month} {data.year} "
            f"(Revenue: ₹{data.total_revenue:g})"
        ),
    }).execute()

    return RevenueShareResult(
        revenue_share=first_row(revenue_share),
        payment=first_row(payment),
    )


# Projects
@router.get("/projects", response_model=list[Project])
async def list_projects(current_user: AdminUser, db: UserDb):
    response = await db.table("projects").select("*").order("created_at", desc=True).execute()
    return response.data or []


@router.post("/projects", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(data: ProjectCreateRequest, current_user: AdminUser, db: UserDb):
    response = await db.table("projects").insert({
        **data.model_dump(),
        "created_by": current_user.id,
        "is_active": True,
    }).execute()
    return first_row(response)


@router.get("/projects/{project_id}", response_model=Project)
async def get_project(project_id: str, current_user: AdminUser, db: UserDb):
    response = await db.table("projects").select("*").eq("id", project_id).limit(1).execute()
    project = first_row(response)
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return project


# Diagnostics
@router.get("/debug-schema")
async def debug_schema(current_user: AdminUser, db: UserDb):
    """One sample row per table, or the error the query produced."""
    result = {}
    for table in DEBUG_TABLES:
        try:
            response = await db.table(table).select("*").limit(1).execute()
            result[table] = {"sample": first_row(response), "error": None}
        except APIError as e:
            result[table] = {"sample": None, "error": e.message}
    return result
