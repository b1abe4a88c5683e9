"""Nutrition read models derived from diary entries."""

from dataclasses import dataclass, field
from datetime import date

from food_diary.domain.entries import FoodEntry, MealType


@dataclass(frozen=True)
class DailyNutrition:
    """Summed calories and macros for one date."""

    date: date
    total_calories: int
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float
    entries: tuple[FoodEntry, ...] = ()


@dataclass(frozen=True)
class DayView:
    """Daily log read model: entries, totals and meal sections."""

    date: date
    entries: list[FoodEntry]
    nutrition: DailyNutrition
    meals: dict[MealType, list[FoodEntry]] = field(default_factory=dict)


@dataclass(frozen=True)
class RangeAverages:
    """Average daily totals across a range summary."""

    days: int
    avg_calories: float
    avg_protein_g: float
    avg_carbs_g: float
    avg_fat_g: float
