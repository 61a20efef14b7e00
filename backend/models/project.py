"""Marketing project model."""

from datetime import datetime

from models.base import Row


class Project(Row):
    """Admin-authored brief that tasks can be grouped under."""

    title: str
    description: str | None = None
    objectives: list[str] | None = None
    target_audience: list[str] | None = None
    deliverables: list[str] | None = None
    guidelines: str | None = None
    sample_script: str | None = None
    is_active: bool | None = None
    created_by: str | None = None
    created_at: datetime | None = None
