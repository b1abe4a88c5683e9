"""Shared test fixtures."""

import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from food_diary.config import Settings
from food_diary.containers import AppContainer
from food_diary.domain.entries import FoodEntry, FoodEntryInput, MealType
from food_diary.services.audit import AuditRepository, AuditService
from food_diary.services.diary import DiaryService, FoodEntryRepository


@dataclass
class InMemoryFoodEntryRepository(FoodEntryRepository):
    """In-memory food entry repository for tests."""

    entries: dict[UUID, FoodEntry] = field(default_factory=dict)
    error: Exception | None = None

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def list_entries_for_date(self, user_id: UUID, day: date) -> list[FoodEntry]:
        self._check()
        return [
            entry
            for entry in self.entries.values()
            if entry.user_id == user_id and entry.date == day
        ]

    def list_entries_between(
        self, user_id: UUID, start: date, end: date
    ) -> list[FoodEntry]:
        self._check()
        matched = [
            entry
            for entry in self.entries.values()
            if entry.user_id == user_id and start <= entry.date <= end
        ]
        return sorted(matched, key=lambda entry: entry.date)

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        self._check()
        entry = self.entries.get(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        return entry

    def create_entry(
        self, user_id: UUID, draft: FoodEntryInput, created_at: datetime
    ) -> FoodEntry:
        self._check()
        entry = FoodEntry(
            id=uuid4(),
            user_id=user_id,
            date=draft.entry_date,
            meal_type=draft.meal_type,
            food_name=draft.food_name,
            quantity=draft.quantity,
            unit=draft.unit,
            calories=draft.calories,
            protein_g=draft.protein_g,
            carbs_g=draft.carbs_g,
            fat_g=draft.fat_g,
            notes=draft.notes,
            created_at=created_at,
            updated_at=created_at,
        )
        self.entries[entry.id] = entry
        return entry

    def update_entry(self, entry: FoodEntry) -> FoodEntry | None:
        self._check()
        if entry.id not in self.entries:
            return None
        self.entries[entry.id] = entry
        return entry

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        self._check()
        entry = self.entries.get(entry_id)
        if entry is None or entry.user_id != user_id:
            return False
        del self.entries[entry_id]
        return True


@dataclass
class BlockingFoodEntryRepository(InMemoryFoodEntryRepository):
    """Repository whose reads for one date wait until released."""

    blocked_day: date | None = None
    release: threading.Event = field(default_factory=threading.Event)

    def list_entries_for_date(self, user_id: UUID, day: date) -> list[FoodEntry]:
        if day == self.blocked_day:
            self.release.wait(timeout=5)
        return super().list_entries_for_date(user_id, day)


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """In-memory audit repository for tests."""

    events: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None

    def create_event(  # noqa: PLR0913
        self,
        user_id: UUID,
        entity_type: str,
        entity_id: UUID,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        if self.error is not None:
            raise self.error
        self.events.append(
            {
                "user_id": user_id,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "event_type": event_type,
                "before": before,
                "after": after,
            }
        )


def make_clock(start: datetime | None = None) -> Callable[[], datetime]:
    """Return a clock that advances one second per call."""
    ticks: Iterator[int] = iter(range(1_000_000))
    origin = start or datetime(2024, 3, 1, 8, 0, tzinfo=UTC)

    def clock() -> datetime:
        return origin + timedelta(seconds=next(ticks))

    return clock


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def entry_repository() -> InMemoryFoodEntryRepository:
    return InMemoryFoodEntryRepository()


@pytest.fixture
def audit_repository() -> InMemoryAuditRepository:
    return InMemoryAuditRepository()


@pytest.fixture
def diary_service(
    entry_repository: InMemoryFoodEntryRepository,
    audit_repository: InMemoryAuditRepository,
) -> DiaryService:
    return DiaryService(
        repository=entry_repository,
        audit_service=AuditService(audit_repository),
        clock=make_clock(),
    )


@pytest.fixture
def container(settings: Settings, diary_service: DiaryService) -> AppContainer:
    async def close_resources() -> None:
        return None

    assert diary_service.audit_service is not None
    return AppContainer(
        settings=settings,
        diary_service=diary_service,
        audit_service=diary_service.audit_service,
        close_resources=close_resources,
    )


def make_entry(  # noqa: PLR0913
    day: date,
    meal_type: MealType = MealType.BREAKFAST,
    calories: int = 100,
    protein_g: float | None = None,
    carbs_g: float | None = None,
    fat_g: float | None = None,
    food_name: str = "Food",
    user_id: UUID | None = None,
) -> FoodEntry:
    """Build a stored-looking entry without going through a repository."""
    stamp = datetime(day.year, day.month, day.day, 12, 0, tzinfo=UTC)
    return FoodEntry(
        id=uuid4(),
        user_id=user_id or uuid4(),
        date=day,
        meal_type=meal_type,
        food_name=food_name,
        quantity=1,
        unit="serving",
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        notes=None,
        created_at=stamp,
        updated_at=stamp,
    )
