# catalog/membership.py
from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Set

from .models import Item, Kanji, Lesson, Package


def lesson_item_ids(lesson_ids: Iterable[uuid.UUID]) -> Set[uuid.UUID]:
    """Distinct item ids attached to any of the given lessons."""
    return set(
        Lesson.items.through.objects
        .filter(lesson_id__in=list(lesson_ids))
        .values_list("item_id", flat=True)
    )


def lesson_kanji_ids(lesson_ids: Iterable[uuid.UUID]) -> Set[uuid.UUID]:
    """Distinct kanji ids attached to any of the given lessons."""
    return set(
        Lesson.kanjis.through.objects
        .filter(lesson_id__in=list(lesson_ids))
        .values_list("kanji_id", flat=True)
    )


def package_lesson_ids(
    package_id: uuid.UUID, lesson_ids: Optional[Iterable[uuid.UUID]] = None
) -> Optional[List[uuid.UUID]]:
    """
    Lesson ids of a package, or None if the package does not exist.
    When lesson_ids is non-empty only that subset of the package's lessons is kept;
    ids belonging to other packages are dropped.
    """
    if not Package.objects.filter(pk=package_id).exists():
        return None
    qs = Lesson.objects.filter(package_id=package_id)
    subset = list(lesson_ids or [])
    if subset:
        qs = qs.filter(pk__in=subset)
    return list(qs.values_list("id", flat=True))


def item_exists(item_id: uuid.UUID) -> bool:
    return Item.objects.filter(pk=item_id).exists()


def kanji_exists(kanji_id: uuid.UUID) -> bool:
    return Kanji.objects.filter(pk=kanji_id).exists()
