# study/services.py
from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional

from django.db import transaction
from django.utils import timezone
from loguru import logger

from catalog import membership

from . import scheduling, sessions, store
from .exceptions import InvalidRequest, NotFound, Unauthenticated
from .models import Skill, StudyProgress
from .units import UnitRef


def require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise Unauthenticated()
    return user_id


def _unit_exists(unit: UnitRef) -> bool:
    if unit.is_item:
        return membership.item_exists(unit.id)
    return membership.kanji_exists(unit.id)


def submit_answer(
    user_id: str,
    unit: UnitRef,
    skill: str,
    is_correct: bool,
    session_id: Optional[uuid.UUID] = None,
    now: Optional[dt.datetime] = None,
) -> StudyProgress:
    """
    Apply one answer to the (user, unit, skill) progress record.

    The stage transition and the optional session increment commit together
    in one transaction, so an aborted request leaves neither behind.
    """
    require_user(user_id)
    if skill not in Skill.values:
        raise InvalidRequest(f"invalid skill: {skill}")
    if not _unit_exists(unit):
        raise NotFound(f"{unit.kind.value.capitalize()} {unit.id} not found.")
    now = now or timezone.now()

    with transaction.atomic():
        progress = store.upsert_progress(
            user_id, unit, skill, lambda state: scheduling.advance(state, is_correct, now)
        )
        if session_id is not None:
            sessions.record_answer(session_id, is_correct, user_id=user_id, now=now)

    logger.debug(
        f"user={user_id} {unit.kind.value}={unit.id} skill={skill} correct={is_correct} "
        f"-> stage {progress.stage}, next review {progress.next_review_at.isoformat()}"
    )
    return progress
