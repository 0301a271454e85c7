import datetime as dt
import itertools

import pytest

from catalog.models import Item, Kanji, Lesson, Package
from study.models import StudyProgress

NOW = dt.datetime(2025, 10, 27, 9, 0, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_item():
    counter = itertools.count()

    def _make(japanese=None, meaning="meaning", reading=None, created_at=None):
        n = next(counter)
        extra = {"created_at": created_at} if created_at else {}
        return Item.objects.create(
            japanese=japanese or f"単語{n}", meaning=meaning, reading=reading, **extra
        )
    return _make


@pytest.fixture
def make_kanji():
    counter = itertools.count()

    def _make(meaning="meaning", meaning_vietnamese=None, onyomi=None, kunyomi=None):
        n = next(counter)
        return Kanji.objects.create(
            character=chr(0x4E00 + n),
            meaning=meaning,
            meaning_vietnamese=meaning_vietnamese,
            onyomi=onyomi,
            kunyomi=kunyomi,
        )
    return _make


@pytest.fixture
def make_progress():
    def _make(user_id, unit, skill="read", stage=0, next_review_at=None, **extra):
        target = {"item": unit} if isinstance(unit, Item) else {"kanji": unit}
        return StudyProgress.objects.create(
            user_id=user_id, skill=skill, stage=stage, next_review_at=next_review_at, **target, **extra
        )
    return _make


@pytest.fixture
def make_lesson():
    def _make(package=None, items=(), kanjis=(), order=0):
        package = package or Package.objects.create(title="package")
        lesson = Lesson.objects.create(package=package, title=f"lesson {order}", order=order)
        lesson.items.set(items)
        lesson.kanjis.set(kanjis)
        return lesson
    return _make
