# study/units.py
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional


class UnitType(str, enum.Enum):
    ITEM = "item"
    KANJI = "kanji"


def _as_uuid(value) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


@dataclass(frozen=True)
class UnitRef:
    """
    Reference to exactly one learnable unit: a vocabulary item or a kanji.
    Progress rows store two nullable columns; code only ever sees this value.
    """
    kind: UnitType
    id: uuid.UUID

    @classmethod
    def item(cls, item_id) -> "UnitRef":
        return cls(UnitType.ITEM, _as_uuid(item_id))

    @classmethod
    def kanji(cls, kanji_id) -> "UnitRef":
        return cls(UnitType.KANJI, _as_uuid(kanji_id))

    @classmethod
    def from_ids(cls, item_id=None, kanji_id=None) -> "UnitRef":
        if item_id is not None and kanji_id is not None:
            raise ValueError("Cannot provide both item_id and kanji_id.")
        if item_id is not None:
            return cls.item(item_id)
        if kanji_id is not None:
            return cls.kanji(kanji_id)
        raise ValueError("Either item_id or kanji_id must be provided.")

    @property
    def is_item(self) -> bool:
        return self.kind is UnitType.ITEM

    @property
    def item_id(self) -> Optional[uuid.UUID]:
        return self.id if self.is_item else None

    @property
    def kanji_id(self) -> Optional[uuid.UUID]:
        return None if self.is_item else self.id

    def as_fields(self) -> Dict[str, Optional[uuid.UUID]]:
        """Column values for a progress row."""
        return {"item_id": self.item_id, "kanji_id": self.kanji_id}

    def lookup(self) -> Dict[str, object]:
        """Filter kwargs matching the partial unique constraint for this unit."""
        if self.is_item:
            return {"item_id": self.id, "kanji__isnull": True}
        return {"kanji_id": self.id, "item__isnull": True}


@dataclass(frozen=True)
class UnitIdSet:
    """Set of units a queue is restricted to (lesson or package scope)."""
    item_ids: FrozenSet[uuid.UUID] = field(default_factory=frozenset)
    kanji_ids: FrozenSet[uuid.UUID] = field(default_factory=frozenset)

    def __bool__(self) -> bool:
        return bool(self.item_ids or self.kanji_ids)
