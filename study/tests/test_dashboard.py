# study/tests/test_dashboard.py
import datetime as dt
from datetime import timedelta

import pytest

from study.dashboard import overview
from study.exceptions import InvalidRequest, NotFound
from study.markers import mark_difficult, unmark_difficult
from study.models import ReviewSession


def _session(user_id, started_at, correct=0, total=0):
    return ReviewSession.objects.create(
        user_id=user_id, started_at=started_at, correct_count=correct, total_answered=total
    )


@pytest.mark.django_db
def test_empty_dashboard(now):
    data = overview("u-empty", now=now)
    assert data == {
        "accuracy": 0.0,
        "reviews_today": 0,
        "reviews_due": 0,
        "streak_days": 0,
        "srs_today": [],
        "difficult_items": [],
    }


@pytest.mark.django_db
def test_accuracy_and_reviews_use_todays_sessions_only(now):
    uid = "u-acc"
    _session(uid, now.replace(hour=0, minute=5), correct=7, total=10)
    _session(uid, now - timedelta(hours=1), correct=1, total=2)
    _session(uid, now - timedelta(days=1), correct=0, total=5)

    data = overview(uid, now=now)
    assert data["reviews_today"] == 12
    assert data["accuracy"] == round(100.0 * 8 / 12, 2)


@pytest.mark.django_db
def test_streak_counts_consecutive_days_back_from_today(now):
    uid = "u-streak"
    # Sessions on D, D-1, D-2 (twice on D), gap on D-3, another on D-5
    for days_ago in (0, 0, 1, 2, 5):
        _session(uid, now - timedelta(days=days_ago))

    assert overview(uid, now=now)["streak_days"] == 3


@pytest.mark.django_db
def test_streak_is_zero_without_a_session_today(now):
    uid = "u-yesterday"
    for days_ago in (1, 2, 3):
        _session(uid, now - timedelta(days=days_ago))

    assert overview(uid, now=now)["streak_days"] == 0


@pytest.mark.django_db
def test_day_boundaries_follow_requested_timezone():
    uid = "u-tz"
    # 2025-10-27 16:00Z is 2025-10-28 01:00 in Tokyo
    _session(uid, dt.datetime(2025, 10, 27, 16, 0, tzinfo=dt.timezone.utc), correct=3, total=4)
    now = dt.datetime(2025, 10, 28, 2, 0, tzinfo=dt.timezone.utc)

    utc = overview(uid, now=now)
    tokyo = overview(uid, tz="Asia/Tokyo", now=now)

    assert (utc["reviews_today"], utc["streak_days"]) == (0, 0)
    assert (tokyo["reviews_today"], tokyo["streak_days"]) == (4, 1)
    assert tokyo["accuracy"] == 75.0


def test_unknown_timezone_is_invalid(now):
    with pytest.raises(InvalidRequest):
        overview("u-x", tz="Mars/Olympus", now=now)


@pytest.mark.django_db
def test_reviews_due_reports_whole_backlog_beyond_preview(now, make_item, make_progress):
    uid = "u-backlog"
    for i in range(60):
        make_progress(uid, make_item(), next_review_at=now - timedelta(minutes=i + 1))
    make_progress(uid, make_item(), next_review_at=now + timedelta(hours=1))

    data = overview(uid, now=now)
    assert data["reviews_due"] == 60
    assert len(data["srs_today"]) == 50
    # Preview keeps queue order: most overdue first
    assert data["srs_today"][0]["next_review_at"] == now - timedelta(minutes=60)


@pytest.mark.django_db
def test_due_count_and_preview_respect_skill_filter(now, make_item, make_progress):
    uid = "u-skill"
    item = make_item()
    make_progress(uid, item, skill="read")
    make_progress(uid, item, skill="listen")

    data = overview(uid, skill="listen", now=now)
    assert data["reviews_due"] == 1
    assert [e["skill"] for e in data["srs_today"]] == ["listen"]


@pytest.mark.django_db
def test_difficult_items_order_by_priority_then_item_age(now, make_item):
    uid = "u-hard"
    old = make_item(japanese="古い", created_at=now - timedelta(days=10))
    new = make_item(japanese="新しい", created_at=now - timedelta(days=1))
    top = make_item(japanese="一番", created_at=now)
    mark_difficult(uid, new.id, priority=5)
    mark_difficult(uid, old.id, priority=5, note="keeps slipping")
    mark_difficult(uid, top.id, priority=9)

    items = overview(uid, now=now)["difficult_items"]
    assert [d["japanese"] for d in items] == ["一番", "古い", "新しい"]
    assert items[1]["note"] == "keeps slipping"


@pytest.mark.django_db
def test_difficult_items_are_enriched_with_requested_skill(now, make_item, make_progress):
    uid = "u-enrich"
    item = make_item()
    make_progress(uid, item, skill="read", stage=1, next_review_at=now + timedelta(days=1))
    make_progress(uid, item, skill="write", stage=3, next_review_at=now + timedelta(days=7))
    mark_difficult(uid, item.id, priority=1)

    default = overview(uid, now=now)["difficult_items"][0]
    assert (default["skill"], default["stage"]) == ("read", 1)

    writing = overview(uid, skill="write", now=now)["difficult_items"][0]
    assert (writing["skill"], writing["stage"]) == ("write", 3)
    assert writing["next_review_at"] == now + timedelta(days=7)

    speaking = overview(uid, skill="speak", now=now)["difficult_items"][0]
    assert (speaking["stage"], speaking["next_review_at"]) == (0, None)


@pytest.mark.django_db
def test_difficult_items_are_capped_at_twenty(now, make_item):
    uid = "u-many-hard"
    for i in range(25):
        mark_difficult(uid, make_item().id, priority=i)

    items = overview(uid, now=now)["difficult_items"]
    assert len(items) == 20
    assert items[0]["priority"] == 24


@pytest.mark.django_db
def test_marking_twice_updates_and_unmark_removes(now, make_item):
    uid = "u-mark"
    item = make_item()
    mark_difficult(uid, item.id, priority=1)
    marker = mark_difficult(uid, item.id, priority=4, note="again")
    assert (marker.priority, marker.note) == (4, "again")
    assert len(overview(uid, now=now)["difficult_items"]) == 1

    unmark_difficult(uid, item.id)
    with pytest.raises(NotFound):
        unmark_difficult(uid, item.id)
    assert overview(uid, now=now)["difficult_items"] == []
