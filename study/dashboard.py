# study/dashboard.py
from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional

import pytz
from django.db.models import Sum
from django.utils import timezone

from . import store
from .conf import study_setting
from .due_queue import queue_entry
from .exceptions import InvalidRequest
from .models import DifficultItemMarker, ReviewSession, StudyProgress


def _resolve_tz(tz: str) -> dt.tzinfo:
    try:
        return pytz.timezone(tz)
    except pytz.UnknownTimeZoneError:
        raise InvalidRequest(f"invalid tz: {tz}")


def _local_midnight(day: dt.date, tz: dt.tzinfo) -> dt.datetime:
    """Start of a calendar day in the given timezone (tz-aware)."""
    return tz.localize(dt.datetime.combine(day, dt.time.min))


def _local_day(d: dt.datetime, tz: dt.tzinfo) -> dt.date:
    return d.astimezone(tz).date()


def streak_days(user_id: str, tz: dt.tzinfo, now: dt.datetime) -> int:
    """
    Consecutive calendar days, ending today, on which at least one session started.
    No session today means a streak of 0.
    """
    today = _local_day(now, tz)
    started = (
        ReviewSession.objects
        .filter(user_id=user_id, started_at__lt=_local_midnight(today + dt.timedelta(days=1), tz))
        .order_by("-started_at")
        .values_list("started_at", flat=True)
    )
    streak = 0
    expected = today
    for started_at in started.iterator():
        day = _local_day(started_at, tz)
        if day > expected:
            continue  # another session on a day already counted
        if day < expected:
            break
        streak += 1
        expected -= dt.timedelta(days=1)
    return streak


def difficult_items(user_id: str, skill: str, limit: int) -> List[Dict]:
    """User-flagged items by priority desc, then item age; enriched with progress for `skill`."""
    markers = list(
        DifficultItemMarker.objects
        .filter(user_id=user_id)
        .select_related("item")
        .order_by("-priority", "item__created_at")[:limit]
    )
    progress = {
        p.item_id: p
        for p in StudyProgress.objects.filter(
            user_id=user_id,
            skill=skill,
            item_id__in=[m.item_id for m in markers],
            kanji__isnull=True,
        )
    }
    out = []
    for m in markers:
        sp = progress.get(m.item_id)
        out.append({
            "item_id": m.item_id,
            "japanese": m.item.japanese,
            "meaning": m.item.meaning,
            "note": m.note,
            "priority": m.priority,
            "skill": skill,
            "stage": sp.stage if sp else 0,
            "next_review_at": sp.next_review_at if sp else None,
        })
    return out


def overview(
    user_id: str,
    skill: Optional[str] = None,
    tz: str = "UTC",
    now: Optional[dt.datetime] = None,
) -> Dict:
    """
    Dashboard metrics for one user.

    Rules:
      1) Today is the current calendar day in `tz`; sessions belong to the day they started.
      2) reviews_today = sum of total_answered over today's sessions;
         accuracy = 100 * correct / answered, rounded to 2 places, 0 when nothing answered.
      3) reviews_due is the size of the whole due set; srs_today previews at most
         DASHBOARD_DUE_SAMPLE entries of it.
      4) difficult_items use the requested skill, or DEFAULT_SKILL without a filter.
    """
    tzinfo = _resolve_tz(tz)
    now = now or timezone.now()
    today = _local_day(now, tzinfo)

    totals = ReviewSession.objects.filter(
        user_id=user_id,
        started_at__gte=_local_midnight(today, tzinfo),
        started_at__lt=_local_midnight(today + dt.timedelta(days=1), tzinfo),
    ).aggregate(answered=Sum("total_answered"), correct=Sum("correct_count"))
    answered = totals["answered"] or 0
    correct = totals["correct"] or 0
    accuracy = round(100.0 * correct / answered, 2) if answered else 0.0

    due = store.due_progress(user_id, skill=skill, now=now)
    srs_today = [queue_entry(p) for p in due[:study_setting("DASHBOARD_DUE_SAMPLE")]]

    return {
        "accuracy": accuracy,
        "reviews_today": answered,
        "reviews_due": due.count(),
        "streak_days": streak_days(user_id, tzinfo, now),
        "srs_today": srs_today,
        "difficult_items": difficult_items(
            user_id,
            skill or study_setting("DEFAULT_SKILL"),
            study_setting("DASHBOARD_DIFFICULT_LIMIT"),
        ),
    }
