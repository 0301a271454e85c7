# study/markers.py
from __future__ import annotations

import uuid
from typing import Optional

from loguru import logger

from catalog import membership

from .exceptions import NotFound
from .models import DifficultItemMarker


def mark_difficult(
    user_id: str, item_id: uuid.UUID, priority: int = 0, note: Optional[str] = None
) -> DifficultItemMarker:
    """Flag an item as difficult for a user, or update the existing flag."""
    if not membership.item_exists(item_id):
        raise NotFound(f"Item {item_id} not found.")
    marker, created = DifficultItemMarker.objects.update_or_create(
        user_id=user_id,
        item_id=item_id,
        defaults={"priority": priority, "note": note},
    )
    logger.info(f"{'Marked' if created else 'Updated'} difficult item {item_id} for user={user_id}")
    return marker


def unmark_difficult(user_id: str, item_id: uuid.UUID) -> None:
    deleted, _ = DifficultItemMarker.objects.filter(user_id=user_id, item_id=item_id).delete()
    if not deleted:
        raise NotFound("Difficult item not found.")
    logger.info(f"Unmarked difficult item {item_id} for user={user_id}")
