import pytest

from services.listings import current_period


@pytest.fixture()
def admin(login_as):
    return login_as("admin", user_id="admin-1", email="admin@example.com")


def test_assignment_requires_both_ids(api_client, admin, fake_db):
    for payload in ({}, {"influencer_id": "inf-1", "task_id": ""}, {"influencer_id": "", "task_id": "task-1"}):
        response = api_client.post("/api/admin/task-assignments", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Please select both influencer and task."

    assert fake_db.calls == []


def test_assignment_created_for_current_month(api_client, admin, fake_db):
    response = api_client.post(
        "/api/admin/task-assignments",
        json={"influencer_id": "inf-1", "task_id": "task-1"},
    )

    assert response.status_code == 201
    month, year = current_period()
    row = fake_db.tables["task_assignments"][0]
    assert row["influencer_id"] == "inf-1"
    assert row["task_id"] == "task-1"
    assert row["status"] == "assigned"
    assert row["assigned_month"] == month
    assert row["assigned_year"] == year
    assert row["created_by"] == "admin-1"


def test_assignment_has_no_duplicate_guard(api_client, admin, fake_db):
    payload = {"influencer_id": "inf-1", "task_id": "task-1"}
    api_client.post("/api/admin/task-assignments", json=payload)
    api_client.post("/api/admin/task-assignments", json=payload)

    assert len(fake_db.tables["task_assignments"]) == 2


def test_assignment_options_only_approved_influencers(api_client, admin, fake_db):
    fake_db.tables["influencers"] = [
        {"id": "inf-1", "full_name": "Asha", "email": "a@example.com", "approval_status": "approved"},
        {"id": "inf-2", "full_name": "Ravi", "email": "r@example.com", "approval_status": "pending"},
    ]
    fake_db.tables["tasks"] = [{"id": "task-1", "title": "Reel", "reward": 500}]

    response = api_client.get("/api/admin/task-assignments/options")

    assert response.status_code == 200
    body = response.json()
    assert [i["id"] for i in body["influencers"]] == ["inf-1"]
    assert body["tasks"][0]["title"] == "Reel"


def test_create_task_reports_backend_error(api_client, admin, fake_db):
    fake_db.fail("tasks", "insert", 'null value in column "title"')

    response = api_client.post("/api/admin/tasks", json={"title": ""})

    assert response.status_code == 400
    assert response.json()["detail"] == 'Failed to create task: null value in column "title"'


def test_list_tasks_newest_first(api_client, admin, fake_db):
    fake_db.tables["tasks"] = [
        {"id": "t1", "title": "Old", "created_at": "2026-01-01T00:00:00+00:00"},
        {"id": "t2", "title": "New", "created_at": "2026-03-01T00:00:00+00:00"},
    ]

    response = api_client.get("/api/admin/tasks")

    assert [t["id"] for t in response.json()] == ["t2", "t1"]


def test_approve_and_reject_influencer(api_client, admin, fake_db):
    fake_db.tables["influencers"] = [
        {"id": "inf-1", "approval_status": "pending"},
        {"id": "inf-2", "approval_status": "pending"},
    ]

    approved = api_client.post("/api/admin/influencers/inf-1/approve").json()
    assert approved["approval_status"] == "approved"
    assert approved["approved_by"] == "admin-1"
    assert approved["approved_at"]

    rejected = api_client.post("/api/admin/influencers/inf-2/reject").json()
    assert rejected["approval_status"] == "rejected"

    missing = api_client.post("/api/admin/influencers/nope/approve")
    assert missing.status_code == 404


def test_list_influencers_status_filter(api_client, admin, fake_db):
    fake_db.tables["influencers"] = [
        {"id": "inf-1", "approval_status": "pending"},
        {"id": "inf-2", "approval_status": "approved"},
    ]

    response = api_client.get("/api/admin/influencers", params={"status": "pending"})

    assert [i["id"] for i in response.json()] == ["inf-1"]


def test_application_decision(api_client, admin, fake_db):
    fake_db.tables["influencer_tasks"] = [
        {"id": "app-1", "influencer_id": "inf-1", "task_id": "task-1", "status": "pending_approval"},
    ]

    response = api_client.post("/api/admin/applications/app-1/decision", json={"status": "assigned"})
    assert response.json()["status"] == "assigned"

    invalid = api_client.post("/api/admin/applications/app-1/decision", json={"status": "completed"})
    assert invalid.status_code == 400


def test_revenue_share_creates_share_and_payment(api_client, admin, fake_db):
    response = api_client.post(
        "/api/admin/payments/revenue-share",
        json={"influencer_id": "inf-1", "month": "March", "year": 2026, "total_revenue": 20000},
    )

    assert response.status_code == 201
    share = fake_db.tables["revenue_shares"][0]
    assert share["performance_share_amount"] == 1000
    assert share["payment_status"] == "pending"

    payment = fake_db.tables["payments"][0]
    assert payment["amount"] == 1000
    assert payment["payment_type"] == "revenue_share"
    assert payment["notes"] == "5% Revenue Share for March 2026 (Revenue: ₹20000)"


def test_mark_paid(api_client, admin, fake_db):
    fake_db.tables["payments"] = [
        {"id": "pay-1", "influencer_id": "inf-1", "amount": 500, "payment_status": "pending"},
    ]

    blank = api_client.post("/api/admin/payments/pay-1/mark-paid", json={"upi_transaction_id": "  "})
    assert blank.status_code == 400

    response = api_client.post("/api/admin/payments/pay-1/mark-paid", json={"upi_transaction_id": "UPI123"})
    body = response.json()
    assert body["payment_status"] == "paid"
    assert body["upi_transaction_id"] == "UPI123"
    assert body["paid_by"] == "admin-1"


def test_dashboard_stats(api_client, admin, fake_db):
    fake_db.tables["influencers"] = [
        {"id": "1", "approval_status": "pending", "district": "Pune", "state": "MH"},
        {"id": "2", "approval_status": "approved", "district": "Pune", "state": "MH"},
        {"id": "3", "approval_status": "rejected", "district": "Kochi", "state": "KL"},
    ]
    fake_db.tables["video_submissions"] = [{"id": "v1", "approval_status": "pending"}]
    fake_db.tables["payments"] = [
        {"id": "p1", "amount": 100, "payment_status": "paid"},
        {"id": "p2", "amount": 40, "payment_status": "pending"},
    ]
    fake_db.tables["influencer_tasks"] = [{"id": "a1", "status": "pending_approval"}]

    stats = api_client.get("/api/admin/dashboard").json()

    assert stats["total_influencers"] == 3
    assert stats["pending_approvals"] == 2
    assert stats["total_payments_made"] == 100
    assert stats["pending_payments"] == 40
    assert stats["district_coverage"][0] == {"district": "Pune", "state": "MH", "count": 2}


def test_projects(api_client, admin, fake_db):
    created = api_client.post(
        "/api/admin/projects",
        json={"title": "Monsoon drive", "objectives": ["reach"], "deliverables": ["2 reels"]},
    )
    assert created.status_code == 201
    project_id = created.json()["id"]
    assert fake_db.tables["projects"][0]["created_by"] == "admin-1"

    detail = api_client.get(f"/api/admin/projects/{project_id}")
    assert detail.json()["title"] == "Monsoon drive"

    assert api_client.get("/api/admin/projects/missing").status_code == 404


def test_debug_schema_reports_errors_per_table(api_client, admin, fake_db):
    fake_db.tables["influencers"] = [{"id": "inf-1"}]
    fake_db.fail("task_assignments", "select", "permission denied")

    body = api_client.get("/api/admin/debug-schema").json()

    assert body["influencers"] == {"sample": {"id": "inf-1"}, "error": None}
    assert body["video_submissions"] == {"sample": None, "error": None}
    assert body["task_assignments"] == {"sample": None, "error": "permission denied"}
