"""Shape task, campaign and assignment rows into the lists influencers browse."""

from datetime import date, datetime

PLATFORM_TASK_BRAND = {
    "company_name": "Platform Task",
    "logo_url": None,
    "location": "Remote",
}


def current_period(today: date | None = None) -> tuple[str, int]:
    """(full month name, year) used to group assignments, e.g. ("March", 2026)."""
    today = today or date.today()
    return today.strftime("%B"), today.year


def _period_of(timestamp: str | None) -> tuple[str | None, int | None]:
    if not timestamp:
        return None, None
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None, None
    return moment.strftime("%B"), moment.year


def task_as_campaign(task: dict) -> dict:
    """Present an admin task alongside brand campaigns; reward becomes budget."""
    return {
        "id": task.get("id"),
        "title": task.get("title"),
        "description": task.get("description"),
        "budget": task.get("reward"),
        "deadline": None,
        "created_at": task.get("created_at"),
        "type": "task",
        "brands": dict(PLATFORM_TASK_BRAND),
    }


def merge_opportunities(campaigns: list[dict], tasks: list[dict]) -> list[dict]:
    """Active campaigns and platform tasks in one list, newest first."""
    merged = [{**c, "type": "campaign"} for c in campaigns]
    merged.extend(task_as_campaign(t) for t in tasks)
    merged.sort(key=lambda item: item.get("created_at") or "", reverse=True)
    return merged


def _submission_status(submission: dict | None) -> str:
    if submission is None:
        return "assigned"
    if submission.get("approval_status") == "approved":
        return "completed"
    return "submitted"


def build_task_board(
    assignments: list[dict],
    campaign_applications: list[dict],
    submissions: list[dict],
    task_applications: list[dict],
) -> list[dict]:
    """Flatten an influencer's work into one list, newest first.

    Admin assignments and approved task applications are both shown as
    assignments. An approved campaign application is "assigned" until a video
    is submitted for the campaign, then "submitted", then "completed" once
    that video is approved.
    """
    by_campaign = {}
    for submission in submissions:
        campaign_id = submission.get("campaign_id")
        if campaign_id is not None and campaign_id not in by_campaign:
            by_campaign[campaign_id] = submission

    board = []
    for a in assignments:
        task = a.get("tasks") or {}
        board.append({
            "id": a.get("id"),
            "type": "assignment",
            "title": task.get("title") or "Untitled Task",
            "description": task.get("description"),
            "topic": task.get("topic"),
            "guidelines": task.get("guidelines"),
            "status": a.get("status"),
            "created_at": a.get("created_at"),
            "assigned_month": a.get("assigned_month"),
            "assigned_year": a.get("assigned_year"),
        })

    for c in campaign_applications:
        campaign = c.get("campaigns") or {}
        month, year = _period_of(c.get("updated_at"))
        board.append({
            "id": c.get("id"),
            "type": "campaign",
            "title": campaign.get("title") or "Campaign Task",
            "description": f"Campaign: {campaign.get('title')}",
            "campaign_id": c.get("campaign_id"),
            "status": _submission_status(by_campaign.get(c.get("campaign_id"))),
            "created_at": c.get("updated_at"),
            "assigned_month": month,
            "assigned_year": year,
        })

    for app in task_applications:
        task = app.get("tasks") or {}
        board.append({
            "id": app.get("id"),
            "type": "assignment",
            "title": task.get("title") or "Approved Task",
            "description": task.get("description"),
            "topic": task.get("topic"),
            "guidelines": task.get("guidelines"),
            "status": app.get("status"),
            "created_at": app.get("created_at"),
            "assigned_month": app.get("assigned_month"),
            "assigned_year": app.get("assigned_year"),
        })

    board.sort(key=lambda item: item.get("created_at") or "", reverse=True)
    return board
