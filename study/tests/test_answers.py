# study/tests/test_answers.py
import uuid
from datetime import timedelta

import pytest
from django.db import IntegrityError, transaction

from study.exceptions import Conflict, InvalidRequest, NotFound, Unauthenticated
from study.models import StudyProgress
from study.services import submit_answer
from study.store import get_progress
from study.units import UnitRef, UnitType


def test_unit_ref_is_exactly_one_of_item_or_kanji():
    item_id, kanji_id = uuid.uuid4(), uuid.uuid4()
    assert UnitRef.from_ids(item_id=item_id) == UnitRef(UnitType.ITEM, item_id)
    assert UnitRef.from_ids(kanji_id=str(kanji_id)).kanji_id == kanji_id
    with pytest.raises(ValueError):
        UnitRef.from_ids(item_id=item_id, kanji_id=kanji_id)
    with pytest.raises(ValueError):
        UnitRef.from_ids()


@pytest.mark.django_db
def test_first_answer_creates_record_lazily(now, make_item):
    item = make_item()
    unit = UnitRef.item(item.id)
    assert get_progress("u-new", unit, "read") is None

    progress = submit_answer("u-new", unit, "read", True, now=now)

    assert StudyProgress.objects.filter(user_id="u-new").count() == 1
    assert progress.stage == 1
    assert progress.correct_streak == 1
    assert progress.wrong_count == 0
    assert progress.last_reviewed_at == now
    assert progress.next_review_at == now + timedelta(days=1)
    assert progress.kanji_id is None


@pytest.mark.django_db
def test_wrong_answer_at_stage_zero(now, make_item):
    item = make_item()
    progress = submit_answer("u-zero", UnitRef.item(item.id), "read", False, now=now)
    assert progress.stage == 0
    assert progress.next_review_at == now + timedelta(hours=8)
    assert progress.wrong_count == 1


@pytest.mark.django_db
def test_correct_answer_at_stage_three(now, make_item, make_progress):
    item = make_item()
    make_progress("u-three", item, stage=3, correct_streak=4)

    progress = submit_answer("u-three", UnitRef.item(item.id), "read", True, now=now)

    assert progress.stage == 4
    assert progress.next_review_at == now + timedelta(days=21)
    assert progress.correct_streak == 5
    assert StudyProgress.objects.filter(user_id="u-three").count() == 1


@pytest.mark.django_db
def test_progress_is_tracked_per_skill_and_unit_kind(now, make_item, make_kanji):
    item, kanji = make_item(), make_kanji()
    submit_answer("u-multi", UnitRef.item(item.id), "read", True, now=now)
    submit_answer("u-multi", UnitRef.item(item.id), "write", False, now=now)
    submit_answer("u-multi", UnitRef.kanji(kanji.id), "read", True, now=now)
    submit_answer("u-multi", UnitRef.kanji(kanji.id), "read", True, now=now + timedelta(days=1))

    assert get_progress("u-multi", UnitRef.item(item.id), "read").stage == 1
    assert get_progress("u-multi", UnitRef.item(item.id), "write").stage == 0
    kanji_progress = get_progress("u-multi", UnitRef.kanji(kanji.id), "read")
    assert kanji_progress.stage == 2
    assert kanji_progress.item_id is None
    assert kanji_progress.unit == UnitRef.kanji(kanji.id)
    assert StudyProgress.objects.filter(user_id="u-multi").count() == 3


@pytest.mark.django_db
def test_unknown_unit_is_not_found(now):
    with pytest.raises(NotFound):
        submit_answer("u-x", UnitRef.item(uuid.uuid4()), "read", True, now=now)
    with pytest.raises(NotFound):
        submit_answer("u-x", UnitRef.kanji(uuid.uuid4()), "read", True, now=now)
    assert StudyProgress.objects.count() == 0


@pytest.mark.django_db
def test_missing_user_is_unauthenticated(now, make_item):
    with pytest.raises(Unauthenticated):
        submit_answer("", UnitRef.item(make_item().id), "read", True, now=now)


@pytest.mark.django_db
def test_unknown_skill_is_rejected_before_any_write(now, make_item):
    with pytest.raises(InvalidRequest):
        submit_answer("u-skill", UnitRef.item(make_item().id), "dance", True, now=now)
    assert StudyProgress.objects.count() == 0


@pytest.mark.django_db
def test_skill_column_only_accepts_known_skills(make_item):
    with pytest.raises(IntegrityError), transaction.atomic():
        StudyProgress.objects.create(user_id="u-skill", item=make_item(), skill="dance")


# === Write races ===

@pytest.mark.django_db
def test_lost_insert_race_is_retried(now, make_item, monkeypatch):
    item = make_item()
    calls = []
    real_save = StudyProgress.save

    def flaky_save(self, *args, **kwargs):
        calls.append(self.pk)
        if len(calls) == 1:
            raise IntegrityError("duplicate key value violates unique constraint")
        return real_save(self, *args, **kwargs)

    monkeypatch.setattr(StudyProgress, "save", flaky_save)
    progress = submit_answer("u-race", UnitRef.item(item.id), "read", True, now=now)

    assert len(calls) == 2
    assert progress.stage == 1
    assert StudyProgress.objects.filter(user_id="u-race").count() == 1


@pytest.mark.django_db
def test_exhausted_retries_surface_conflict(now, make_item, monkeypatch):
    item = make_item()
    calls = []

    def failing_save(self, *args, **kwargs):
        calls.append(self.pk)
        raise IntegrityError("duplicate key value violates unique constraint")

    monkeypatch.setattr(StudyProgress, "save", failing_save)
    with pytest.raises(Conflict):
        submit_answer("u-race", UnitRef.item(item.id), "read", True, now=now)
    assert len(calls) == 3


@pytest.mark.django_db
def test_non_positive_retry_setting_still_writes_once(now, make_item, settings):
    settings.STUDY = {**settings.STUDY, "ANSWER_RETRIES": 0}
    progress = submit_answer("u-retry", UnitRef.item(make_item().id), "read", True, now=now)
    assert progress.stage == 1
    assert StudyProgress.objects.filter(user_id="u-retry").count() == 1
