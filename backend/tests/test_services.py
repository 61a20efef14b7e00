from datetime import date

from services.listings import build_task_board, current_period, merge_opportunities
from services.stats import district_coverage, influencer_stats, payment_totals


def test_current_period():
    assert current_period(date(2026, 3, 14)) == ("March", 2026)


def test_influencer_stats_revenue_share_eligibility():
    videos = [
        {"approval_status": "approved", "submitted_at": "2026-03-02T10:00:00+00:00"},
        {"approval_status": "approved", "submitted_at": "2026-03-20T10:00:00+00:00"},
        {"approval_status": "approved", "submitted_at": "2026-02-27T10:00:00+00:00"},
        {"approval_status": "pending", "submitted_at": "2026-03-21T10:00:00+00:00"},
        {"approval_status": "rejected", "submitted_at": None},
    ]
    payments = [
        {"amount": 300, "payment_status": "paid"},
        {"amount": 200, "payment_status": "pending"},
    ]

    stats = influencer_stats(videos, payments, today=date(2026, 3, 25))

    assert stats.total_videos_submitted == 5
    assert stats.approved_videos == 3
    assert stats.pending_videos == 1
    assert stats.rejected_videos == 1
    assert stats.this_month_posts == 2
    assert stats.eligible_for_revenue_share
    assert stats.total_earnings == 300
    assert stats.pending_payments == 200

    assert not influencer_stats(videos, payments, today=date(2026, 2, 28)).eligible_for_revenue_share


def test_district_coverage_top_ten():
    influencers = [{"district": f"D{i}", "state": "S"} for i in range(12)]
    influencers += [{"district": "D5", "state": "S"}] * 3

    coverage = district_coverage(influencers)

    assert len(coverage) == 10
    assert (coverage[0].district, coverage[0].count) == ("D5", 4)


def test_payment_totals_ignores_missing_amounts():
    totals = payment_totals([
        {"amount": None, "payment_status": "paid"},
        {"amount": 40.5, "payment_status": "pending"},
    ])
    assert (totals.total, totals.pending, totals.paid) == (40.5, 40.5, 0)


def test_merge_opportunities_newest_first():
    merged = merge_opportunities(
        [{"id": 1, "created_at": "2026-01-01"}],
        [{"id": 2, "title": "Task", "reward": 100, "created_at": "2026-02-01"}],
    )
    assert [(m["id"], m["type"]) for m in merged] == [(2, "task"), (1, "campaign")]


def test_task_board_campaign_status_follows_submission():
    applications = [
        {"id": "a1", "campaign_id": "c1", "updated_at": "2026-03-01T00:00:00Z", "campaigns": {"title": "One"}},
        {"id": "a2", "campaign_id": "c2", "updated_at": "2026-03-02T00:00:00Z", "campaigns": {"title": "Two"}},
        {"id": "a3", "campaign_id": "c3", "updated_at": "2026-03-03T00:00:00Z", "campaigns": {"title": "Three"}},
    ]
    submissions = [
        {"campaign_id": "c2", "approval_status": "pending"},
        {"campaign_id": "c3", "approval_status": "approved"},
    ]

    board = build_task_board([], applications, submissions, [])

    statuses = {item["id"]: item["status"] for item in board}
    assert statuses == {"a1": "assigned", "a2": "submitted", "a3": "completed"}
    assert board[0]["assigned_month"] == "March"
    assert board[0]["assigned_year"] == 2026


def test_task_board_includes_approved_task_applications():
    board = build_task_board(
        [],
        [],
        [],
        [{"id": "it1", "status": "assigned", "created_at": "2026-03-01", "tasks": {"title": "Reel"}}],
    )
    assert board[0]["type"] == "assignment"
    assert board[0]["title"] == "Reel"
