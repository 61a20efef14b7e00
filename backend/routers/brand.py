"""Brand router - profile, campaigns, applications, video approval, influencer search."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from postgrest.exceptions import APIError
from pydantic import BaseModel, Field
from supabase import AsyncClient

from database import first_row
from middleware.auth import get_current_brand, get_user_db, require_roles
from models.campaign import ApplicationStatus, Brand, Campaign, CampaignStatus
from models.influencer import ApprovalStatus
from models.payment import PaymentStatus, PaymentType
from models.user import UserProfile, UserRole
from services.profiles import get_brand_for_user

router = APIRouter(prefix="/api/brand", tags=["brand"])
logger = logging.getLogger(__name__)

BrandUser = Annotated[UserProfile, Depends(require_roles(UserRole.MARKETING))]
CurrentBrand = Annotated[dict, Depends(get_current_brand)]
UserDb = Annotated[AsyncClient, Depends(get_user_db)]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# Request/Response schemas
class BrandDashboard(BaseModel):
    brand: dict
    active_campaigns: int
    pending_applications: int


class BrandProfileUpdate(BaseModel):
    company_name: str | None = None
    website: str | None = None
    industry: str | None = None
    contact_person: str | None = None
    phone_number: str | None = None


class CampaignCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    requirements: str | None = None
    budget: float = Field(ge=0)
    deadline: datetime | None = None


class CampaignDetail(BaseModel):
    campaign: dict
    applications: list[dict]
    videos: list[dict]


async def _campaign_ids(db: AsyncClient, brand_id) -> list:
    response = await db.table("campaigns").select("id").eq("brand_id", brand_id).execute()
    return [row["id"] for row in response.data or []]


async def _get_owned_campaign(db: AsyncClient, brand: dict, campaign_id: str) -> dict:
    response = await (
        db.table("campaigns")
        .select("*")
        .eq("id", campaign_id)
        .eq("brand_id", brand["id"])
        .limit(1)
        .execute()
    )
    campaign = first_row(response)
    if campaign is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Campaign not found",
        )
    return campaign


# Dashboard & profile
@router.get("/dashboard", response_model=BrandDashboard)
async def dashboard(brand: CurrentBrand, db: UserDb):
    """Brand profile with active campaign and pending application counts."""
    active = await (
        db.table("campaigns")
        .select("*", count="exact", head=True)
        .eq("brand_id", brand["id"])
        .eq("status", CampaignStatus.ACTIVE.value)
        .execute()
    )

    pending = 0
    campaign_ids = await _campaign_ids(db, brand["id"])
    if campaign_ids:
        applications = await (
            db.table("campaign_applications")
            .select("*", count="exact", head=True)
            .in_("campaign_id", campaign_ids)
            .eq("status", ApplicationStatus.PENDING.value)
            .execute()
        )
        pending = applications.count or 0

    return BrandDashboard(
        brand=brand,
        active_campaigns=active.count or 0,
        pending_applications=pending,
    )


@router.get("/profile", response_model=Brand)
async def get_profile(brand: CurrentBrand):
    return brand


@router.put("/profile", response_model=Brand)
async def update_profile(
    data: BrandProfileUpdate,
    current_user: BrandUser,
    db: UserDb,
):
    """Update only the fields present in the request body."""
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )

    response = await (
        db.table("brands")
        .update({**updates, "updated_at": _now()})
        .eq("user_id", current_user.id)
        .execute()
    )
    brand = first_row(response)
    if brand is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Brand profile not found",
        )
    return brand


# Campaigns
@router.get("/campaigns")
async def list_campaigns(brand: CurrentBrand, db: UserDb):
    """The brand's campaigns, newest first, each with its application count."""
    response = await (
        db.table("campaigns")
        .select("*")
        .eq("brand_id", brand["id"])
        .order("created_at", desc=True)
        .execute()
    )

    campaigns = []
    for campaign in response.data or []:
        applications = await (
            db.table("campaign_applications")
            .select("*", count="exact", head=True)
            .eq("campaign_id", campaign["id"])
            .execute()
        )
        campaigns.append({**campaign, "applications_count": applications.count or 0})
    return campaigns


@router.post("/campaigns", response_model=Campaign, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    data: CampaignCreateRequest,
    current_user: BrandUser,
    db: UserDb,
):
    """Create an active campaign, creating the brand profile first if needed."""
    brand = await get_brand_for_user(db, current_user.id, "id")
    if brand is None:
        logger.info(f"No brand for user {current_user.id}. Auto-creating brand...")
        brand = {"id": str(uuid.uuid4())}
        await db.table("brands").insert({
            "id": brand["id"],
            "user_id": current_user.id,
            "company_name": (current_user.email or "").split("@")[0] or "My Brand",
            "created_at": _now(),
            "updated_at": _now(),
        }).execute()

    response = await db.table("campaigns").insert({
        "brand_id": brand["id"],
        "title": data.title,
        "description": data.description,
        "requirements": data.requirements,
        "budget": data.budget,
        "deadline": data.deadline.isoformat() if data.deadline else None,
        "status": CampaignStatus.ACTIVE.value,
    }).execute()

    campaign = first_row(response)
    logger.info(f"Campaign created for brand {brand['id']}")
    return campaign


@router.get("/campaigns/{campaign_id}", response_model=CampaignDetail)
async def get_campaign(campaign_id: str, brand: CurrentBrand, db: UserDb):
    """Campaign with its applications and related videos.

    Videos are those linked to the campaign, plus unlinked videos from
    influencers whose application was approved.
    """
    campaign = await _get_owned_campaign(db, brand, campaign_id)

    applications = await (
        db.table("campaign_applications")
        .select("*, influencer:influencers(*)")
        .eq("campaign_id", campaign_id)
        .execute()
    )
    applications = applications.data or []

    approved_ids = [
        str(app["influencer_id"])
        for app in applications
        if app.get("status") == ApplicationStatus.APPROVED.value
    ]
    query = (
        db.table("video_submissions")
        .select("*, influencer:influencers(*)")
        .order("created_at", desc=True)
    )
    if approved_ids:
        query = query.or_(
            f"campaign_id.eq.{campaign_id},"
            f"and(campaign_id.is.null,influencer_id.in.({','.join(approved_ids)}))"
        )
    else:
        query = query.eq("campaign_id", campaign_id)
    videos = await query.execute()

    return CampaignDetail(
        campaign=campaign,
        applications=applications,
        videos=videos.data or [],
    )


# Applications
@router.get("/applications")
async def list_pending_applications(brand: CurrentBrand, db: UserDb):
    """Pending applications across all of the brand's campaigns."""
    campaign_ids = await _campaign_ids(db, brand["id"])
    if not campaign_ids:
        return []

    response = await (
        db.table("campaign_applications")
        .select("*, influencer:influencers(*), campaign:campaigns(*)")
        .in_("campaign_id", campaign_ids)
        .eq("status", ApplicationStatus.PENDING.value)
        .order("applied_at", desc=True)
        .execute()
    )
    return response.data or []


async def _decide_application(
    db: AsyncClient,
    brand: dict,
    application_id: str,
    decision: ApplicationStatus,
) -> dict:
    campaign_ids = await _campaign_ids(db, brand["id"])
    if not campaign_ids:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found",
        )

    response = await (
        db.table("campaign_applications")
        .update({"status": decision.value})
        .eq("id", application_id)
        .in_("campaign_id", campaign_ids)
        .execute()
    )
    application = first_row(response)
    if application is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found",
        )
    return application


@router.post("/applications/{application_id}/approve")
async def approve_application(application_id: str, brand: CurrentBrand, db: UserDb):
    return await _decide_application(db, brand, application_id, ApplicationStatus.APPROVED)


@router.post("/applications/{application_id}/reject")
async def reject_application(application_id: str, brand: CurrentBrand, db: UserDb):
    return await _decide_application(db, brand, application_id, ApplicationStatus.REJECTED)


# Videos
@router.post("/videos/{video_id}/approve")
async def approve_video(video_id: str, brand: CurrentBrand, db: UserDb):
    """Approve a video and queue the influencer's fixed per-video payment.

    A failed payment insert is logged and does not undo the approval.
    """
    response = await (
        db.table("video_submissions")
        .select("*, influencer:influencers(*)")
        .eq("id", video_id)
        .limit(1)
        .execute()
    )
    video = first_row(response)
    if video is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Video not found",
        )
    if video.get("approval_status") == ApplicationStatus.APPROVED.value:
        return {"video": video, "payment": None}

    response = await db.table("video_submissions").update({
        "approval_status": ApplicationStatus.APPROVED.value,
        "reviewed_at": _now(),
    }).eq("id", video_id).execute()
    video = {**video, **(first_row(response) or {})}

    payment = None
    rate = (video.get("influencer") or {}).get("video_rate") or 0
    if rate > 0:
        try:
            payment_response = await db.table("payments").insert({
                "influencer_id": video["influencer_id"],
                "video_submission_id": video["id"],
                "amount": rate,
                "payment_type": PaymentType.FIXED.value,
                "payment_status": PaymentStatus.PENDING.value,
                "notes": f"Fixed payment for video: {video.get('title')} (Brand Approved)",
            }).execute()
            payment = first_row(payment_response)
        except APIError as e:
            logger.error(f"Video {video_id} approved but payment creation failed: {e.message}")

    return {"video": video, "payment": payment}


# Search
@router.get("/search")
async def search_influencers(
    current_user: BrandUser,
    db: UserDb,
    name: str | None = None,
    state: str | None = None,
    min_followers: Annotated[int | None, Query(ge=0)] = None,
):
    """Approved influencers filtered by name substring, state and follower floor."""
    query = (
        db.table("influencers")
        .select("*")
        .eq("approval_status", ApprovalStatus.APPROVED.value)
    )
    if name:
        query = query.ilike("full_name", f"%{name}%")
    if state:
        query = query.eq("state", state)
    if min_followers is not None:
        query = query.gte("follower_count", min_followers)

    response = await query.execute()
    return response.data or []
