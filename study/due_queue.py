# study/due_queue.py
from __future__ import annotations

import datetime as dt
import uuid
from typing import Dict, Iterable, List, Optional

from django.utils import timezone

from catalog import membership

from . import store
from .conf import study_setting
from .exceptions import InvalidRequest, NotFound
from .models import StudyProgress
from .units import UnitIdSet


def clamp_limit(limit) -> int:
    """Default when missing, clamp into [1, QUEUE_MAX_LIMIT] otherwise."""
    if limit is None:
        return study_setting("QUEUE_DEFAULT_LIMIT")
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        raise InvalidRequest("limit must be an integer.")
    return max(1, min(limit, study_setting("QUEUE_MAX_LIMIT")))


def queue_entry(progress: StudyProgress) -> Dict:
    """Denormalized queue row: everything needed to render the card."""
    unit = progress.unit
    if unit.is_item:
        item = progress.item
        display_text, meaning, additional_info = item.japanese, item.meaning, item.reading
    else:
        kanji = progress.kanji
        display_text = kanji.character
        meaning = kanji.meaning_vietnamese or kanji.meaning
        additional_info = f"音読み: {kanji.onyomi or ''}, 訓読み: {kanji.kunyomi or ''}"
    return {
        "unit_id": unit.id,
        "unit_type": unit.kind.value,
        "item_id": unit.item_id,
        "kanji_id": unit.kanji_id,
        "display_text": display_text,
        "meaning": meaning,
        "additional_info": additional_info,
        "skill": progress.skill,
        "stage": progress.stage,
        "next_review_at": progress.next_review_at,
    }


def build_queue(
    user_id: str,
    *,
    skill: Optional[str] = None,
    units: Optional[UnitIdSet] = None,
    limit: Optional[int] = None,
    now: Optional[dt.datetime] = None,
) -> List[Dict]:
    """Due units of a user, never-reviewed first, then by due time, capped at limit."""
    limit = clamp_limit(limit)
    if units is not None and not units:
        return []
    now = now or timezone.now()
    due = store.due_progress(user_id, skill=skill, units=units, now=now)
    return [queue_entry(p) for p in due[:limit]]


def get_queue(user_id: str, skill: Optional[str] = None, limit: Optional[int] = None,
              now: Optional[dt.datetime] = None) -> List[Dict]:
    return build_queue(user_id, skill=skill, limit=limit, now=now)


def get_queue_by_lessons(
    user_id: str,
    lesson_ids: Iterable[uuid.UUID],
    skill: Optional[str] = None,
    limit: Optional[int] = None,
    include_items: bool = True,
    include_kanjis: bool = False,
    now: Optional[dt.datetime] = None,
) -> List[Dict]:
    """Queue restricted to the items (and optionally kanjis) of the given lessons."""
    lesson_ids = list(lesson_ids or [])
    if not lesson_ids:
        raise InvalidRequest("At least one lesson id is required.")
    units = UnitIdSet(
        item_ids=frozenset(membership.lesson_item_ids(lesson_ids)) if include_items else frozenset(),
        kanji_ids=frozenset(membership.lesson_kanji_ids(lesson_ids)) if include_kanjis else frozenset(),
    )
    return build_queue(user_id, skill=skill, units=units, limit=limit, now=now)


def get_queue_by_package(
    user_id: str,
    package_id: uuid.UUID,
    lesson_ids: Optional[Iterable[uuid.UUID]] = None,
    skill: Optional[str] = None,
    limit: Optional[int] = None,
    include_items: bool = True,
    include_kanjis: bool = False,
    now: Optional[dt.datetime] = None,
) -> List[Dict]:
    """Queue over all lessons of a package, or over the given subset of them."""
    package_lessons = membership.package_lesson_ids(package_id, lesson_ids)
    if package_lessons is None:
        raise NotFound(f"Package {package_id} not found.")
    if not package_lessons:
        return []
    return get_queue_by_lessons(
        user_id,
        package_lessons,
        skill=skill,
        limit=limit,
        include_items=include_items,
        include_kanjis=include_kanjis,
        now=now,
    )
