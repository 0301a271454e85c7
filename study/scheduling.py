# study/scheduling.py
"""
Fixed-ladder SRS scheduling.

A correct answer moves a unit one stage up, a wrong answer one stage down,
clamped to [0, MAX_STAGE]. The next review is always `now + interval` of the
stage reached, even when the stage did not move. No I/O happens here; callers
persist the returned state.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, replace
from typing import Optional, Tuple

SRS_SCHEDULE: Tuple[dt.timedelta, ...] = (
    dt.timedelta(hours=8),   # stage 0
    dt.timedelta(days=1),    # stage 1
    dt.timedelta(days=3),    # stage 2
    dt.timedelta(days=7),    # stage 3
    dt.timedelta(days=21),   # stage 4
    dt.timedelta(days=60),   # stage 5
)
MIN_STAGE = 0
MAX_STAGE = len(SRS_SCHEDULE) - 1


@dataclass(frozen=True)
class ReviewState:
    """SRS fields of one (user, unit, skill) progress record."""
    stage: int = MIN_STAGE
    correct_streak: int = 0
    wrong_count: int = 0
    last_reviewed_at: Optional[dt.datetime] = None
    next_review_at: Optional[dt.datetime] = None


def _check_stage(stage: int) -> int:
    if not MIN_STAGE <= stage <= MAX_STAGE:
        raise ValueError(f"stage must be in [{MIN_STAGE}, {MAX_STAGE}], got {stage}")
    return stage


def next_stage(stage: int, correct: bool) -> int:
    _check_stage(stage)
    if correct:
        return min(stage + 1, MAX_STAGE)
    return max(stage - 1, MIN_STAGE)


def interval_for(stage: int) -> dt.timedelta:
    return SRS_SCHEDULE[_check_stage(stage)]


def advance(state: ReviewState, correct: bool, now: dt.datetime) -> ReviewState:
    """
    Apply one answer to a progress state.

    Rules:
      1) correct -> stage + 1 (max MAX_STAGE), streak + 1, wrong_count unchanged.
      2) wrong   -> stage - 1 (min 0), streak reset to 0, wrong_count + 1.
      3) last_reviewed_at = now; next_review_at = now + SRS_SCHEDULE[new stage].
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    stage = next_stage(state.stage, correct)
    if correct:
        streak, wrong = state.correct_streak + 1, state.wrong_count
    else:
        streak, wrong = 0, state.wrong_count + 1
    return replace(
        state,
        stage=stage,
        correct_streak=streak,
        wrong_count=wrong,
        last_reviewed_at=now,
        next_review_at=now + interval_for(stage),
    )
