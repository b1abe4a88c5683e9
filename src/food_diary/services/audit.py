"""Audit trail for diary mutations."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from food_diary.domain.entries import FoodEntry

ENTITY_FOOD_ENTRY = "food_entry"


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

    def create_event(  # noqa: PLR0913
        self,
        user_id: UUID,
        entity_type: str,
        entity_id: UUID,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Create an audit event row."""


@dataclass
class AuditService:
    """Service for recording entry audit events."""

    repository: AuditRepository

    def record_entry_event(
        self,
        event_type: str,
        before: FoodEntry | None,
        after: FoodEntry | None,
    ) -> None:
        """Persist a before/after snapshot of a food entry."""
        subject = after or before
        if subject is None:
            raise ValueError("Audit event needs a before or after entry")
        self.repository.create_event(
            user_id=subject.user_id,
            entity_type=ENTITY_FOOD_ENTRY,
            entity_id=subject.id,
            event_type=event_type,
            before=entry_snapshot(before) if before else None,
            after=entry_snapshot(after) if after else None,
        )


def entry_snapshot(entry: FoodEntry) -> dict[str, object]:
    """Return a JSON-friendly snapshot of an entry."""
    return {
        "date": entry.date.isoformat(),
        "meal_type": entry.meal_type.value,
        "food_name": entry.food_name,
        "quantity": entry.quantity,
        "unit": entry.unit,
        "calories": entry.calories,
        "protein_g": entry.protein_g,
        "carbs_g": entry.carbs_g,
        "fat_g": entry.fat_g,
        "notes": entry.notes,
        "updated_at": entry.updated_at.isoformat(),
    }
