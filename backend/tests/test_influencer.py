import pytest

from services.listings import current_period


def _influencer(fake_db, approval_status="approved"):
    fake_db.tables["influencers"] = [{
        "id": "inf-1",
        "user_id": "user-i",
        "full_name": "Asha",
        "approval_status": approval_status,
    }]


@pytest.fixture()
def influencer_user(login_as):
    return login_as("influencer", user_id="user-i", email="asha@example.com")


def test_profile_missing_returns_404(api_client, influencer_user):
    assert api_client.get("/api/influencer/profile").status_code == 404


def test_profile_update_keeps_unsent_fields(api_client, influencer_user, fake_db):
    _influencer(fake_db, approval_status="pending")
    fake_db.tables["influencers"][0]["district"] = "Pune"

    response = api_client.put("/api/influencer/profile", json={"bio": "Food and travel"})

    assert response.status_code == 200
    row = fake_db.tables["influencers"][0]
    assert row["bio"] == "Food and travel"
    assert row["full_name"] == "Asha"
    assert row["district"] == "Pune"
    assert row["approval_status"] == "pending"
    assert "upi_id" not in row


def test_profile_update_requires_a_field(api_client, influencer_user, fake_db):
    _influencer(fake_db)

    assert api_client.put("/api/influencer/profile", json={}).status_code == 400
    assert fake_db.ops("influencers", "update") == []


def test_task_board_hidden_until_approved(api_client, influencer_user, fake_db):
    _influencer(fake_db, "pending")
    fake_db.tables["task_assignments"] = [{"id": "ta-1", "influencer_id": "inf-1", "status": "assigned"}]

    body = api_client.get("/api/influencer/tasks").json()

    assert body == {"approval_status": "pending", "tasks": []}
    assert fake_db.ops("task_assignments") == []


def test_task_board_for_approved_influencer(api_client, influencer_user, fake_db):
    _influencer(fake_db)
    fake_db.tables["task_assignments"] = [{
        "id": "ta-1",
        "influencer_id": "inf-1",
        "status": "assigned",
        "created_at": "2026-03-02T00:00:00+00:00",
        "tasks": {"title": "Reel"},
    }]
    fake_db.tables["campaign_applications"] = [{
        "id": "ca-1",
        "influencer_id": "inf-1",
        "campaign_id": "c1",
        "status": "approved",
        "updated_at": "2026-03-05T00:00:00+00:00",
        "campaigns": {"title": "Launch"},
    }]
    fake_db.tables["video_submissions"] = [{"id": "v1", "influencer_id": "inf-1", "campaign_id": "c1", "approval_status": "pending"}]

    tasks = api_client.get("/api/influencer/tasks").json()["tasks"]

    assert [(t["id"], t["status"]) for t in tasks] == [("ca-1", "submitted"), ("ta-1", "assigned")]


def test_apply_to_task(api_client, influencer_user, fake_db):
    _influencer(fake_db)

    response = api_client.post(
        "/api/influencer/tasks/task-1/apply",
        json={"pitch": "I cover local food", "requested_rate": 800},
    )

    assert response.status_code == 201
    month, year = current_period()
    row = fake_db.tables["influencer_tasks"][0]
    assert row["status"] == "pending_approval"
    assert row["influencer_id"] == "inf-1"
    assert row["requested_rate"] == 800
    assert (row["assigned_month"], row["assigned_year"]) == (month, year)


def test_apply_to_campaign_and_see_status(api_client, influencer_user, fake_db):
    _influencer(fake_db)
    fake_db.tables["campaigns"] = [{"id": "c1", "title": "Launch", "status": "active"}]

    before = api_client.get("/api/influencer/campaigns/c1").json()
    assert before["application_status"] is None

    applied = api_client.post("/api/influencer/campaigns/c1/apply", json={"bid_amount": 1200, "cover_message": "Hi"})
    assert applied.status_code == 201

    after = api_client.get("/api/influencer/campaigns/c1").json()
    assert after["application_status"] == "pending"


def test_opportunities_merge_campaigns_and_tasks(api_client, influencer_user, fake_db):
    fake_db.tables["campaigns"] = [
        {"id": "c1", "title": "Launch", "status": "active", "created_at": "2026-03-01"},
        {"id": "c2", "title": "Old", "status": "completed", "created_at": "2026-03-09"},
    ]
    fake_db.tables["tasks"] = [{"id": "t1", "title": "Reel", "reward": 500, "created_at": "2026-03-03"}]

    items = api_client.get("/api/influencer/campaigns").json()

    assert [(i["id"], i["type"]) for i in items] == [("t1", "task"), ("c1", "campaign")]
    assert items[0]["budget"] == 500
    assert items[0]["brands"]["company_name"] == "Platform Task"


def test_submit_video(api_client, influencer_user, fake_db):
    _influencer(fake_db)

    response = api_client.post(
        "/api/influencer/videos",
        json={"title": "Unboxing", "video_url": "https://youtu.be/x", "campaign_id": "c1"},
    )

    assert response.status_code == 201
    row = fake_db.tables["video_submissions"][0]
    assert row["approval_status"] == "pending"
    assert row["status"] == "submitted"
    assert row["campaign_id"] == "c1"


def test_revenue_totals(api_client, influencer_user, fake_db):
    _influencer(fake_db)
    fake_db.tables["payments"] = [
        {"id": "p1", "influencer_id": "inf-1", "amount": 500, "payment_status": "paid"},
        {"id": "p2", "influencer_id": "inf-1", "amount": 250, "payment_status": "pending"},
        {"id": "p3", "influencer_id": "inf-2", "amount": 999, "payment_status": "paid"},
    ]

    totals = api_client.get("/api/influencer/revenue").json()["totals"]

    assert totals == {"total": 750, "pending": 250, "paid": 500}
