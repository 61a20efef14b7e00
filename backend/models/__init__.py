"""Row models for the tables owned by the platform."""

from models.base import Row

# Accounts
from models.user import UserProfile, UserRole, VALID_ROLES
from models.influencer import ApprovalStatus, Influencer, SocialMediaHandles
from models.campaign import (
    ApplicationStatus,
    Brand,
    Campaign,
    CampaignApplication,
    CampaignStatus,
)

# Work
from models.task import AssignmentStatus, Task, TaskApplication, TaskAssignment
from models.project import Project
from models.video import VideoSubmission

# Money
from models.payment import (
    REVENUE_SHARE_RATE,
    Payment,
    PaymentStatus,
    PaymentType,
    RevenueShare,
)

from models.message import Message

__all__ = [
    "Row",
    # Accounts
    "UserProfile",
    "UserRole",
    "VALID_ROLES",
    "ApprovalStatus",
    "Influencer",
    "SocialMediaHandles",
    "Brand",
    "Campaign",
    "CampaignApplication",
    "CampaignStatus",
    "ApplicationStatus",
    # Work
    "AssignmentStatus",
    "Task",
    "TaskAssignment",
    "TaskApplication",
    "Project",
    "VideoSubmission",
    # Money
    "REVENUE_SHARE_RATE",
    "Payment",
    "PaymentStatus",
    "PaymentType",
    "RevenueShare",
    "Message",
]
