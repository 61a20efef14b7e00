"""Task, task assignment and task application models."""

import enum
from datetime import datetime

from models.base import Row, RowId


class AssignmentStatus(str, enum.Enum):
    """Status shared by admin assignments and influencer task applications."""
    PENDING_APPROVAL = "pending_approval"  # Influencer applied, admin hasn't decided
    ASSIGNED = "assigned"
    REJECTED = "rejected"
    COMPLETED = "completed"


class Task(Row):
    """Admin-authored unit of work with a fixed reward."""

    title: str
    description: str | None = None
    topic: str | None = None
    guidelines: str | None = None
    reward: float | None = None
    month: str | None = None
    year: int | None = None
    is_default: bool | None = None
    project_id: RowId | None = None
    created_at: datetime | None = None


class TaskAssignment(Row):
    """Links one influencer to one task for a month/year."""

    influencer_id: RowId
    task_id: RowId
    status: str
    assigned_month: str | None = None
    assigned_year: int | None = None
    created_by: str | None = None
    created_at: datetime | None = None


class TaskApplication(Row):
    """An influencer's request to take on a task (influencer_tasks)."""

    influencer_id: RowId
    task_id: RowId
    status: str
    pitch: str | None = None
    requested_rate: float | None = None
    assigned_month: str | None = None
    assigned_year: int | None = None
    created_at: datetime | None = None
