"""Session-level orchestration for the diary and calendar views."""

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TypeVar
from uuid import UUID
from zoneinfo import ZoneInfo

from food_diary.domain.entries import FoodEntry
from food_diary.domain.errors import DiaryError
from food_diary.domain.nutrition import DailyNutrition, DayView
from food_diary.services.diary import DiaryService
from food_diary.services.nutrition import month_bounds, shift_month

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


@dataclass(frozen=True)
class Notice:
    """User-facing outcome of the last operation."""

    level: str
    message: str


@dataclass
class DiaryController:
    """Holds the selected date and month and keeps both views derived.

    Every operation is awaited before the next one starts. Fetches remember
    the key they were issued for, and a result that arrives after a newer
    request for a different key is dropped.
    """

    service: DiaryService
    user_id: UUID
    selected_date: date
    displayed_month: date | None = None
    day_view: DayView | None = None
    month_summary: dict[date, DailyNutrition] | None = None
    notice: Notice | None = None
    _day_key: date | None = field(default=None, init=False, repr=False)
    _month_key: date | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.displayed_month is None:
            self.displayed_month = self.selected_date.replace(day=1)

    @classmethod
    def for_today(
        cls, service: DiaryService, user_id: UUID, timezone_name: str
    ) -> "DiaryController":
        """Create a controller positioned on today in the given timezone."""
        today = datetime.now(tz=ZoneInfo(timezone_name)).date()
        return cls(service=service, user_id=user_id, selected_date=today)

    @property
    def month_range(self) -> tuple[date, date]:
        """First and last day of the displayed month."""
        month = self.displayed_month or self.selected_date.replace(day=1)
        return month_bounds(month.year, month.month)

    async def refresh(self) -> None:
        """Re-derive the daily log and the calendar month."""
        await self._load_day()
        await self._load_month()

    async def select_date(self, day: date) -> DayView | None:
        """Select a date and load its entries, totals and meal sections."""
        self.selected_date = day
        return await self._load_day()

    async def change_month(
        self, year: int, month: int
    ) -> dict[date, DailyNutrition] | None:
        """Display a month and load its per-day summaries."""
        self.displayed_month = date(year, month, 1)
        return await self._load_month()

    async def next_month(self) -> dict[date, DailyNutrition] | None:
        """Move the calendar one month forward."""
        target = shift_month(self.month_range[0], 1)
        return await self.change_month(target.year, target.month)

    async def previous_month(self) -> dict[date, DailyNutrition] | None:
        """Move the calendar one month back."""
        target = shift_month(self.month_range[0], -1)
        return await self.change_month(target.year, target.month)

    async def add_entry(self, payload: Mapping[str, object]) -> FoodEntry | None:
        """Add an entry, then refresh the views it may affect."""
        return await self._mutate(
            self.service.add_entry,
            self.user_id,
            payload,
            success="Food entry added successfully.",
            failure="Failed to save food entry.",
        )

    async def update_entry(
        self, entry_id: UUID, payload: Mapping[str, object]
    ) -> FoodEntry | None:
        """Update an entry, then refresh the views it may affect."""
        return await self._mutate(
            self.service.update_entry,
            self.user_id,
            entry_id,
            payload,
            success="Food entry updated successfully.",
            failure="Failed to save food entry.",
        )

    async def delete_entry(self, entry_id: UUID) -> bool:
        """Delete an entry, then refresh the views it may affect."""
        done = await self._mutate(
            _deleted(self.service.delete_entry),
            self.user_id,
            entry_id,
            success="Food entry deleted successfully.",
            failure="Failed to delete food entry.",
        )
        return bool(done)

    async def _mutate(
        self,
        operation: Callable[..., ResultT],
        *args: object,
        success: str,
        failure: str,
    ) -> ResultT | None:
        try:
            result = await asyncio.to_thread(operation, *args)
        except DiaryError as exc:
            logger.exception(failure, extra={"user_id": str(self.user_id)})
            self.notice = Notice("error", f"{failure} {exc}")
            return None
        self.notice = Notice("success", success)
        if isinstance(result, FoodEntry) and result.date != self.selected_date:
            self.selected_date = result.date
            self.displayed_month = result.date.replace(day=1)
        await self.refresh()
        return result

    async def _load_day(self) -> DayView | None:
        key = self.selected_date
        self._day_key = key
        try:
            view = await asyncio.to_thread(self.service.get_day, self.user_id, key)
        except DiaryError:
            if self._day_key != key:
                return None
            logger.exception(
                "Failed to load food entries",
                extra={"user_id": str(self.user_id), "date": key.isoformat()},
            )
            self.notice = Notice("error", "Failed to load food entries.")
            return None
        if self._day_key != key:
            logger.debug("Discarding stale day view for %s", key)
            return None
        self.day_view = view
        return view

    async def _load_month(self) -> dict[date, DailyNutrition] | None:
        start, end = self.month_range
        self._month_key = start
        try:
            summary = await asyncio.to_thread(
                self.service.summarize_range, self.user_id, start, end
            )
        except DiaryError:
            if self._month_key != start:
                return None
            logger.exception(
                "Failed to load nutrition summary",
                extra={"user_id": str(self.user_id), "month": start.isoformat()},
            )
            self.notice = Notice("error", "Failed to load nutrition data.")
            return None
        if self._month_key != start:
            logger.debug("Discarding stale month summary for %s", start)
            return None
        self.month_summary = summary
        return summary


def _deleted(delete: Callable[[UUID, UUID], None]) -> Callable[[UUID, UUID], bool]:
    def run(user_id: UUID, entry_id: UUID) -> bool:
        delete(user_id, entry_id)
        return True

    return run
