# study/sessions.py
from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone
from loguru import logger

from .exceptions import InvalidRequest, NotFound
from .models import ReviewSession


def start_session(user_id: str, now: Optional[dt.datetime] = None) -> ReviewSession:
    session = ReviewSession.objects.create(user_id=user_id, started_at=now or timezone.now())
    logger.info(f"Review session {session.id} started for user={user_id}")
    return session


def record_answer(
    session_id: uuid.UUID,
    correct: bool,
    *,
    user_id: Optional[str] = None,
    now: Optional[dt.datetime] = None,
) -> bool:
    """
    Count one answer against a session in a single UPDATE.
    Unknown (or foreign) sessions are ignored so a stale id never fails the answer.
    """
    qs = ReviewSession.objects.filter(pk=session_id)
    if user_id is not None:
        qs = qs.filter(user_id=user_id)
    updated = qs.update(
        total_answered=F("total_answered") + 1,
        correct_count=F("correct_count") + (1 if correct else 0),
        updated_at=now or timezone.now(),
    )
    if not updated:
        logger.warning(f"Ignoring answer for unknown review session {session_id}")
    return bool(updated)


def end_session(
    session_id: uuid.UUID,
    correct_count: Optional[int] = None,
    total_answered: Optional[int] = None,
    *,
    user_id: Optional[str] = None,
    now: Optional[dt.datetime] = None,
) -> ReviewSession:
    """
    Close a session.

    Rules:
      1) ended_at = now.
      2) If totals are supplied they replace the counters; increments made by
         record_answer are not merged in (the client reports the final truth).
      3) Totals come in pairs, are >= 0 and correct_count <= total_answered.
    """
    if (correct_count is None) != (total_answered is None):
        raise InvalidRequest("correct_count and total_answered must be supplied together.")
    if correct_count is not None:
        if correct_count < 0 or total_answered < 0:
            raise InvalidRequest("correct_count and total_answered must be >= 0.")
        if correct_count > total_answered:
            raise InvalidRequest("correct_count must be <= total_answered.")

    with transaction.atomic():
        qs = ReviewSession.objects.select_for_update().filter(pk=session_id)
        if user_id is not None:
            qs = qs.filter(user_id=user_id)
        session = qs.first()
        if session is None:
            raise NotFound(f"Review session {session_id} not found.")
        session.ended_at = now or timezone.now()
        fields = ["ended_at", "updated_at"]
        if correct_count is not None:
            session.correct_count = correct_count
            session.total_answered = total_answered
            fields += ["correct_count", "total_answered"]
        session.save(update_fields=fields)

    logger.info(
        f"Review session {session.id} ended: {session.correct_count}/{session.total_answered} correct"
    )
    return session
