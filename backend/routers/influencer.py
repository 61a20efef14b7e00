"""Influencer router - dashboard, profile, opportunities, tasks, videos, revenue."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from supabase import AsyncClient

from database import first_row
from middleware.auth import get_current_influencer, get_user_db, require_roles
from models.campaign import ApplicationStatus, CampaignApplication, CampaignStatus
from models.influencer import ApprovalStatus, Influencer, SocialMediaHandles
from models.task import AssignmentStatus, TaskApplication
from models.video import VideoSubmission
from models.user import UserProfile, UserRole
from services.listings import build_task_board, current_period, merge_opportunities
from services.stats import InfluencerStats, PaymentTotals, influencer_stats, payment_totals

router = APIRouter(prefix="/api/influencer", tags=["influencer"])
logger = logging.getLogger(__name__)

InfluencerUser = Annotated[UserProfile, Depends(require_roles(UserRole.INFLUENCER))]
CurrentInfluencer = Annotated[dict, Depends(get_current_influencer)]
UserDb = Annotated[AsyncClient, Depends(get_user_db)]

CAMPAIGN_WITH_BRAND = "*, brands(company_name, logo_url, location)"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# Request/Response schemas
class InfluencerDashboard(BaseModel):
    influencer: dict
    videos: list[dict]
    payments: list[dict]
    stats: InfluencerStats


class InfluencerProfileUpdate(BaseModel):
    full_name: str | None = None
    phone_number: str | None = None
    district: str | None = None
    state: str | None = None
    bio: str | None = None
    social_media_handles: SocialMediaHandles | None = None
    upi_id: str | None = None


class CampaignApplyRequest(BaseModel):
    bid_amount: float = Field(default=0, ge=0)
    cover_message: str | None = None


class CampaignDetail(BaseModel):
    campaign: dict
    application_status: str | None = None


class TaskApplyRequest(BaseModel):
    pitch: str | None = None
    requested_rate: float = Field(default=0, ge=0)


class TaskDetail(BaseModel):
    task: dict
    application: dict | None = None


class TaskBoard(BaseModel):
    approval_status: str | None
    tasks: list[dict]


class VideoSubmitRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    video_url: str = Field(min_length=1)
    campaign_id: str | None = None


class RevenueSummary(BaseModel):
    payments: list[dict]
    totals: PaymentTotals


async def _list_for(db: AsyncClient, table: str, influencer_id, columns: str = "*") -> list[dict]:
    response = await (
        db.table(table)
        .select(columns)
        .eq("influencer_id", influencer_id)
        .order("created_at", desc=True)
        .execute()
    )
    return response.data or []


# Dashboard & profile
@router.get("/dashboard", response_model=InfluencerDashboard)
async def dashboard(influencer: CurrentInfluencer, db: UserDb):
    videos = await _list_for(db, "video_submissions", influencer["id"])
    payments = await _list_for(db, "payments", influencer["id"])
    return InfluencerDashboard(
        influencer=influencer,
        videos=videos,
        payments=payments,
        stats=influencer_stats(videos, payments),
    )


@router.get("/profile", response_model=Influencer)
async def get_profile(influencer: CurrentInfluencer):
    return influencer


@router.put("/profile", response_model=Influencer)
async def update_profile(
    data: InfluencerProfileUpdate,
    current_user: InfluencerUser,
    db: UserDb,
):
    """Update the editable profile fields. Approval state is untouched."""
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )

    response = await (
        db.table("influencers")
        .update(updates)
        .eq("user_id", current_user.id)
        .execute()
    )
    influencer = first_row(response)
    if influencer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Influencer profile not found",
        )
    return influencer


# Opportunities
@router.get("/campaigns")
async def list_opportunities(current_user: InfluencerUser, db: UserDb):
    """Active brand campaigns and platform tasks, newest first."""
    campaigns = await (
        db.table("campaigns")
        .select(CAMPAIGN_WITH_BRAND)
        .eq("status", CampaignStatus.ACTIVE.value)
        .order("created_at", desc=True)
        .execute()
    )
    tasks = await db.table("tasks").select("*").order("created_at", desc=True).execute()
    return merge_opportunities(campaigns.data or [], tasks.data or [])


@router.get("/campaigns/{campaign_id}", response_model=CampaignDetail)
async def get_campaign(campaign_id: str, influencer: CurrentInfluencer, db: UserDb):
    """Campaign with the caller's application status, if any."""
    response = await (
        db.table("campaigns")
        .select(CAMPAIGN_WITH_BRAND)
        .eq("id", campaign_id)
        .limit(1)
        .execute()
    )
    campaign = first_row(response)
    if campaign is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Campaign not found",
        )

    application = await (
        db.table("campaign_applications")
        .select("status")
        .eq("campaign_id", campaign_id)
        .eq("influencer_id", influencer["id"])
        .limit(1)
        .execute()
    )
    application = first_row(application)
    return CampaignDetail(
        campaign=campaign,
        application_status=application["status"] if application else None,
    )


@router.post("/campaigns/{campaign_id}/apply", response_model=CampaignApplication, status_code=status.HTTP_201_CREATED)
async def apply_to_campaign(
    campaign_id: str,
    data: CampaignApplyRequest,
    influencer: CurrentInfluencer,
    db: UserDb,
):
    response = await db.table("campaign_applications").insert({
        "campaign_id": campaign_id,
        "influencer_id": influencer["id"],
        "bid_amount": data.bid_amount,
        "cover_message": data.cover_message,
        "status": ApplicationStatus.PENDING.value,
    }).execute()
    logger.info(f"Influencer {influencer['id']} applied to campaign {campaign_id}")
    return first_row(response)


# Tasks
@router.get("/tasks", response_model=TaskBoard)
async def my_tasks(influencer: CurrentInfluencer, db: UserDb):
    """Assignments, approved campaigns and approved task applications.

    Only approved influencers see work; anyone else gets an empty board.
    """
    approval_status = influencer.get("approval_status")
    if approval_status != ApprovalStatus.APPROVED.value:
        return TaskBoard(approval_status=approval_status, tasks=[])

    influencer_id = influencer["id"]
    assignments = await _list_for(db, "task_assignments", influencer_id, "*, tasks(*)")
    campaigns = await (
        db.table("campaign_applications")
        .select("*, campaigns(*)")
        .eq("influencer_id", influencer_id)
        .eq("status", ApplicationStatus.APPROVED.value)
        .order("updated_at", desc=True)
        .execute()
    )
    submissions = await _list_for(db, "video_submissions", influencer_id)
    task_applications = await (
        db.table("influencer_tasks")
        .select("*, tasks(*)")
        .eq("influencer_id", influencer_id)
        .eq("status", AssignmentStatus.ASSIGNED.value)
        .execute()
    )

    return TaskBoard(
        approval_status=approval_status,
        tasks=build_task_board(
            assignments,
            campaigns.data or [],
            submissions,
            task_applications.data or [],
        ),
    )


@router.get("/tasks/{task_id}", response_model=TaskDetail)
async def get_task(task_id: str, influencer: CurrentInfluencer, db: UserDb):
    """Task with the caller's existing application, if any."""
    response = await db.table("tasks").select("*").eq("id", task_id).limit(1).execute()
    task = first_row(response)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )

    application = await (
        db.table("influencer_tasks")
        .select("*")
        .eq("task_id", task_id)
        .eq("influencer_id", influencer["id"])
        .limit(1)
        .execute()
    )
    return TaskDetail(task=task, application=first_row(application))


@router.post("/tasks/{task_id}/apply", response_model=TaskApplication, status_code=status.HTTP_201_CREATED)
async def apply_to_task(
    task_id: str,
    data: TaskApplyRequest,
    influencer: CurrentInfluencer,
    db: UserDb,
):
    """Ask for a task; an admin sets it to assigned or rejected."""
    month, year = current_period()
    response = await db.table("influencer_tasks").insert({
        "task_id": task_id,
        "influencer_id": influencer["id"],
        "status": AssignmentStatus.PENDING_APPROVAL.value,
        "pitch": data.pitch,
        "requested_rate": data.requested_rate,
        "assigned_month": month,
        "assigned_year": year,
    }).execute()
    logger.info(f"Influencer {influencer['id']} applied for task {task_id}")
    return first_row(response)


# Videos
@router.get("/videos", response_model=list[VideoSubmission])
async def list_videos(
    influencer: CurrentInfluencer,
    db: UserDb,
    approval_status: ApplicationStatus | None = None,
):
    videos = await _list_for(db, "video_submissions", influencer["id"], "*, campaigns(title)")
    if approval_status is not None:
        videos = [v for v in videos if v.get("approval_status") == approval_status.value]
    return videos


@router.post("/videos", response_model=VideoSubmission, status_code=status.HTTP_201_CREATED)
async def submit_video(data: VideoSubmitRequest, influencer: CurrentInfluencer, db: UserDb):
    """Submit a video for review, optionally against a campaign."""
    payload = {
        "influencer_id": influencer["id"],
        "title": data.title,
        "description": data.description,
        "video_url": data.video_url,
        "status": "submitted",
        "approval_status": ApplicationStatus.PENDING.value,
        "submitted_at": _now(),
    }
    if data.campaign_id:
        payload["campaign_id"] = data.campaign_id

    response = await db.table("video_submissions").insert(payload).execute()
    return first_row(response)


# Revenue
@router.get("/revenue", response_model=RevenueSummary)
async def revenue(influencer: CurrentInfluencer, db: UserDb):
    payments = await _list_for(db, "payments", influencer["id"])
    return RevenueSummary(payments=payments, totals=payment_totals(payments))
