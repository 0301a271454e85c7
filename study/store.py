# study/store.py
"""
Persistence of StudyProgress rows.

Writes are serialized per (user, unit, skill): the row is locked with
SELECT ... FOR UPDATE and a concurrent first insert of the same key loses on
the partial unique constraint, after which the write is retried against the
row the other request committed.
"""
from __future__ import annotations

import datetime as dt
from typing import Callable, Optional

from django.db import IntegrityError, transaction
from django.db.models import F, Q, QuerySet
from loguru import logger

from .conf import study_setting
from .exceptions import Conflict
from .models import StudyProgress
from .scheduling import ReviewState
from .units import UnitIdSet, UnitRef


def get_progress(user_id: str, unit: UnitRef, skill: str) -> Optional[StudyProgress]:
    return StudyProgress.objects.filter(user_id=user_id, skill=skill, **unit.lookup()).first()


def due_progress(
    user_id: str,
    *,
    skill: Optional[str] = None,
    units: Optional[UnitIdSet] = None,
    now: dt.datetime,
) -> QuerySet:
    """
    Due records of a user, most overdue first.

    Rules:
      1) Due means next_review_at IS NULL or next_review_at <= now.
      2) NULL sorts before every timestamp (never reviewed = most overdue).
      3) units, when given, restricts to those item/kanji ids.
    """
    qs = StudyProgress.objects.filter(user_id=user_id).filter(
        Q(next_review_at__isnull=True) | Q(next_review_at__lte=now)
    )
    if skill:
        qs = qs.filter(skill=skill)
    if units is not None:
        qs = qs.filter(Q(item_id__in=units.item_ids) | Q(kanji_id__in=units.kanji_ids))
    return qs.select_related("item", "kanji").order_by(
        F("next_review_at").asc(nulls_first=True), "created_at", "id"
    )


def upsert_progress(
    user_id: str,
    unit: UnitRef,
    skill: str,
    update: Callable[[ReviewState], ReviewState],
) -> StudyProgress:
    """Create the record lazily (stage 0) if absent, apply `update`, save once."""
    attempts = max(1, study_setting("ANSWER_RETRIES"))
    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                progress = (
                    StudyProgress.objects.select_for_update()
                    .filter(user_id=user_id, skill=skill, **unit.lookup())
                    .first()
                )
                if progress is None:
                    progress = StudyProgress(user_id=user_id, skill=skill, **unit.as_fields())
                progress.apply_state(update(progress.review_state))
                progress.save()
                return progress
        except IntegrityError:
            # Another request inserted the same key first; re-read it under lock.
            logger.warning(
                f"Progress write race user={user_id} {unit.kind.value}={unit.id} skill={skill} "
                f"(attempt {attempt}/{attempts})"
            )
    raise Conflict("Study progress was updated concurrently; please retry.")
