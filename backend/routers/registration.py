"""Registration router - influencer and brand sign-up."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from postgrest.exceptions import APIError
from pydantic import BaseModel, EmailStr, Field
from supabase import AsyncClient

from database import get_db
from middleware.rate_limit import limiter
from models.influencer import ApprovalStatus, SocialMediaHandles
from models.user import UserRole
from services.auth_service import AuthFailure, AuthService

router = APIRouter(prefix="/api/register", tags=["registration"])
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


# Request/Response schemas
class InfluencerRegistration(BaseModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    full_name: str = Field(min_length=1)
    phone_number: str | None = None
    district: str | None = None
    state: str | None = None
    social_media_handles: SocialMediaHandles = SocialMediaHandles()
    follower_count: int | None = Field(default=None, ge=0)
    id_proof_type: str | None = None
    id_proof_url: str | None = None
    upi_id: str | None = None


class BrandRegistration(BaseModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    company_name: str = Field(min_length=1)
    website: str | None = None
    industry: str | None = None
    description: str | None = None
    location: str | None = None


class RegistrationResponse(BaseModel):
    user_id: str
    role: str
    message: str


async def _sign_up(db: AsyncClient, email: str, password: str, role: UserRole) -> str:
    try:
        return await AuthService.sign_up(db, email, password, role)
    except AuthFailure as e:
        if e.already_registered:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="This email is already registered. Please sign in.",
            )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.post("/influencer", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def register_influencer(
    request: Request,
    data: InfluencerRegistration,
    db: Annotated[AsyncClient, Depends(get_db)],
):
    """Create an influencer account. The profile starts pending admin approval."""
    user_id = await _sign_up(db, data.email, data.password, UserRole.INFLUENCER)

    try:
        await db.table("influencers").insert({
            "user_id": user_id,
            "full_name": data.full_name,
            "phone_number": data.phone_number,
            "email": data.email,
            "district": data.district,
            "state": data.state,
            "social_media_handles": data.social_media_handles.model_dump(),
            "follower_count": data.follower_count,
            "id_proof_type": data.id_proof_type,
            "id_proof_url": data.id_proof_url,
            "upi_id": data.upi_id,
            "approval_status": ApprovalStatus.PENDING.value,
        }).execute()
    except APIError as e:
        logger.error(f"Influencers insert error: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to create influencer profile: {e.message}",
        )

    logger.info(f"Influencer registered: {user_id}")
    return RegistrationResponse(
        user_id=user_id,
        role=UserRole.INFLUENCER.value,
        message="Registration successful! Your profile is pending approval.",
    )


@router.post("/brand", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def register_brand(
    request: Request,
    data: BrandRegistration,
    db: Annotated[AsyncClient, Depends(get_db)],
):
    """Create a brand (marketing) account and its brand profile."""
    user_id = await _sign_up(db, data.email, data.password, UserRole.MARKETING)

    try:
        await db.table("brands").insert({
            "user_id": user_id,
            "company_name": data.company_name,
            "website": data.website,
            "industry": data.industry,
            "description": data.description,
            "location": data.location,
        }).execute()
    except APIError as e:
        logger.error(f"Brands insert error: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to create brand profile: {e.message}",
        )

    logger.info(f"Brand registered: {user_id}")
    return RegistrationResponse(
        user_id=user_id,
        role=UserRole.MARKETING.value,
        message="Registration successful!",
    )
