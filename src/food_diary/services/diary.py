"""Food diary application service."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from typing import Protocol, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from food_diary.domain.entries import FoodEntry, FoodEntryInput, FoodEntryPatch
from food_diary.domain.errors import (
    DiaryError,
    InvalidRangeError,
    NotFoundError,
    ValidationError,
)
from food_diary.domain.nutrition import DailyNutrition, DayView
from food_diary.services.audit import AuditService
from food_diary.services.nutrition import aggregate_day, group_by_meal, summarize_range

logger = logging.getLogger(__name__)

DEFAULT_MAX_RANGE_DAYS = 366

ModelT = TypeVar("ModelT", bound=BaseModel)


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def list_entries_for_date(self, user_id: UUID, day: date) -> list[FoodEntry]:
        """Return a user's entries for one date in creation order."""

    def list_entries_between(
        self, user_id: UUID, start: date, end: date
    ) -> list[FoodEntry]:
        """Return a user's entries dated within the inclusive range."""

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        """Return an entry by id, if present."""

    def create_entry(
        self, user_id: UUID, draft: FoodEntryInput, created_at: datetime
    ) -> FoodEntry:
        """Insert an entry and return it with its assigned id."""

    def update_entry(self, entry: FoodEntry) -> FoodEntry | None:
        """Persist an entry's fields; return None if the id is unknown."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry; return False if the id is unknown."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class DiaryService:
    """Validates diary input and derives nutrition views from stored entries."""

    repository: FoodEntryRepository
    audit_service: AuditService | None = None
    max_range_days: int = DEFAULT_MAX_RANGE_DAYS
    clock: Callable[[], datetime] = field(default=_utcnow)

    def list_entries_for_date(self, user_id: UUID, day: date) -> list[FoodEntry]:
        """Return the entries logged on a date."""
        return self.repository.list_entries_for_date(user_id, day)

    def get_day(self, user_id: UUID, day: date) -> DayView:
        """Return entries, totals and meal sections for a date."""
        entries = self.repository.list_entries_for_date(user_id, day)
        return DayView(
            date=day,
            entries=entries,
            nutrition=aggregate_day(entries, day),
            meals=group_by_meal(entries),
        )

    def add_entry(
        self, user_id: UUID, payload: Mapping[str, object] | FoodEntryInput
    ) -> FoodEntry:
        """Validate and store a new entry."""
        draft = _validate(FoodEntryInput, payload)
        entry = self.repository.create_entry(user_id, draft, created_at=self.clock())
        logger.info(
            "Added food entry",
            extra={"user_id": str(user_id), "entry_id": str(entry.id)},
        )
        self._audit("created", user_id, before=None, after=entry)
        return entry

    def update_entry(
        self,
        user_id: UUID,
        entry_id: UUID,
        payload: Mapping[str, object] | FoodEntryPatch,
    ) -> FoodEntry:
        """Apply a partial update, keeping the id and creation time."""
        current = self.repository.get_entry(user_id, entry_id)
        if current is None:
            raise NotFoundError(f"Food entry {entry_id} not found")
        changes = _validate(FoodEntryPatch, payload).model_dump(exclude_unset=True)
        new_date = changes.pop("entry_date", None)
        if new_date is not None and new_date != current.date:
            raise ValidationError("An entry cannot be moved to another date")
        draft = _validate(FoodEntryInput, {**_draft_fields(current), **changes})
        updated = replace(
            current,
            meal_type=draft.meal_type,
            food_name=draft.food_name,
            quantity=draft.quantity,
            unit=draft.unit,
            calories=draft.calories,
            protein_g=draft.protein_g,
            carbs_g=draft.carbs_g,
            fat_g=draft.fat_g,
            notes=draft.notes,
            updated_at=self.clock(),
        )
        stored = self.repository.update_entry(updated)
        if stored is None:
            raise NotFoundError(f"Food entry {entry_id} not found")
        logger.info(
            "Updated food entry",
            extra={"user_id": str(user_id), "entry_id": str(entry_id)},
        )
        self._audit("updated", user_id, before=current, after=stored)
        return stored

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete an entry; deleting an unknown or already deleted id fails."""
        current = self.repository.get_entry(user_id, entry_id)
        if current is None or not self.repository.delete_entry(user_id, entry_id):
            raise NotFoundError(f"Food entry {entry_id} not found")
        logger.info(
            "Deleted food entry",
            extra={"user_id": str(user_id), "entry_id": str(entry_id)},
        )
        self._audit("deleted", user_id, before=current, after=None)

    def summarize_range(
        self,
        user_id: UUID,
        start: date,
        end: date,
        include_entries: bool = False,
    ) -> dict[date, DailyNutrition]:
        """Return one daily summary per date from start to end inclusive."""
        if end < start:
            raise InvalidRangeError(f"End date {end} is before start date {start}")
        span = (end - start).days + 1
        if span > self.max_range_days:
            raise InvalidRangeError(
                f"Range of {span} days exceeds the {self.max_range_days} day limit"
            )
        entries = self.repository.list_entries_between(user_id, start, end)
        return summarize_range(entries, start, end, include_entries=include_entries)

    def _audit(
        self,
        event_type: str,
        user_id: UUID,
        before: FoodEntry | None,
        after: FoodEntry | None,
    ) -> None:
        # Audit failures never fail a mutation that is already stored.
        if not self.audit_service:
            return
        try:
            self.audit_service.record_entry_event(
                event_type, before=before, after=after
            )
        except DiaryError:
            subject = after or before
            logger.exception(
                "Failed to record audit event",
                extra={
                    "user_id": str(user_id),
                    "entry_id": str(subject.id) if subject else None,
                    "event_type": event_type,
                },
            )


def _validate(model: type[ModelT], payload: Mapping[str, object] | BaseModel) -> ModelT:
    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        raise ValidationError(
            "Invalid food entry: " + "; ".join(errors), errors
        ) from exc


def _draft_fields(entry: FoodEntry) -> dict[str, object]:
    return {
        "entry_date": entry.date,
        "meal_type": entry.meal_type,
        "food_name": entry.food_name,
        "quantity": entry.quantity,
        "unit": entry.unit,
        "calories": entry.calories,
        "protein_g": entry.protein_g,
        "carbs_g": entry.carbs_g,
        "fat_g": entry.fat_g,
        "notes": entry.notes,
    }
