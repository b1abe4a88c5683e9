"""Pure aggregation over diary entries."""

import calendar
from collections.abc import Iterable, Iterator
from datetime import date, timedelta

from food_diary.domain.entries import FoodEntry, MealType
from food_diary.domain.errors import InvalidRangeError
from food_diary.domain.nutrition import DailyNutrition, RangeAverages


def aggregate_day(
    entries: Iterable[FoodEntry], day: date, include_entries: bool = True
) -> DailyNutrition:
    """Sum the entries logged on ``day``.

    Entries for other dates are ignored. Missing macros count as zero, but the
    entry still contributes its calories.
    """
    matched = [entry for entry in entries if entry.date == day]
    return DailyNutrition(
        date=day,
        total_calories=sum(entry.calories for entry in matched),
        total_protein_g=sum(entry.protein_g or 0.0 for entry in matched),
        total_carbs_g=sum(entry.carbs_g or 0.0 for entry in matched),
        total_fat_g=sum(entry.fat_g or 0.0 for entry in matched),
        entries=tuple(matched) if include_entries else (),
    )


def group_by_meal(entries: Iterable[FoodEntry]) -> dict[MealType, list[FoodEntry]]:
    """Partition entries into the four meal sections, keeping their order."""
    groups: dict[MealType, list[FoodEntry]] = {meal: [] for meal in MealType}
    for entry in entries:
        if not isinstance(entry.meal_type, MealType):
            raise ValueError(f"Unknown meal type: {entry.meal_type!r}")
        groups[entry.meal_type].append(entry)
    return groups


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    if end < start:
        raise InvalidRangeError(f"End date {end} is before start date {start}")
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def summarize_range(
    entries: Iterable[FoodEntry],
    start: date,
    end: date,
    include_entries: bool = False,
) -> dict[date, DailyNutrition]:
    """Return one summary per calendar day in the inclusive range."""
    days = list(iter_days(start, end))
    by_day: dict[date, list[FoodEntry]] = {day: [] for day in days}
    for entry in entries:
        bucket = by_day.get(entry.date)
        if bucket is not None:
            bucket.append(entry)
    return {
        day: aggregate_day(by_day[day], day, include_entries=include_entries)
        for day in days
    }


def range_averages(summary: dict[date, DailyNutrition]) -> RangeAverages:
    """Average the daily totals, counting empty days as zero."""
    total_days = max(len(summary), 1)
    days = summary.values()
    return RangeAverages(
        days=len(summary),
        avg_calories=sum(day.total_calories for day in days) / total_days,
        avg_protein_g=sum(day.total_protein_g for day in days) / total_days,
        avg_carbs_g=sum(day.total_carbs_g for day in days) / total_days,
        avg_fat_g=sum(day.total_fat_g for day in days) / total_days,
    )


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_month(first_day: date, months: int) -> date:
    """Return the first day of the month ``months`` away from ``first_day``."""
    index = first_day.year * 12 + first_day.month - 1 + months
    return date(index // 12, index % 12 + 1, 1)
