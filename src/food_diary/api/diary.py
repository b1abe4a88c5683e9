"""Food diary API endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING, Any
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Header, Path, Query, Request, status
from pydantic import BaseModel

from food_diary.services.nutrition import month_bounds, range_averages

if TYPE_CHECKING:
    from food_diary.containers import AppContainer
    from food_diary.domain.entries import FoodEntry, MealType
    from food_diary.domain.nutrition import DailyNutrition, RangeAverages

router = APIRouter(prefix="/api/food-diary", tags=["food-diary"])


class EntryRequest(BaseModel):
    """Request body wrapping a partial food entry."""

    entry: dict[str, Any]


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/nutrition-summary")
async def nutrition_summary(
    request: Request,
    x_user_id: UUID = Header(),
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
) -> dict[str, object]:
    """Return one daily summary per date in the inclusive range."""
    summary = _container(request).diary_service.summarize_range(
        x_user_id, start_date, end_date
    )
    return _serialize_range(summary)


@router.get("/calendar/{year}/{month}")
async def calendar_month(
    request: Request,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    x_user_id: UUID = Header(),
) -> dict[str, object]:
    """Return the per-day summaries for a whole calendar month."""
    start, end = month_bounds(year, month)
    summary = _container(request).diary_service.summarize_range(
        x_user_id, start, end
    )
    return {"startDate": start.isoformat(), "endDate": end.isoformat()} | (
        _serialize_range(summary)
    )


@router.get("/{entry_date}")
async def entries_for_date(
    entry_date: date, request: Request, x_user_id: UUID = Header()
) -> dict[str, object]:
    """Return a date's entries, nutrition totals and meal sections."""
    view = _container(request).diary_service.get_day(x_user_id, entry_date)
    return {
        "entries": [serialize_entry(entry) for entry in view.entries],
        "nutrition": serialize_nutrition(view.nutrition),
        "meals": _serialize_meals(view.meals),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_entry(
    body: EntryRequest, request: Request, x_user_id: UUID = Header()
) -> dict[str, object]:
    """Create a food entry."""
    entry = _container(request).diary_service.add_entry(x_user_id, body.entry)
    return {
        "entry": serialize_entry(entry),
        "message": "Food entry added successfully",
    }


@router.put("/{entry_id}")
async def update_entry(
    entry_id: UUID, body: EntryRequest, request: Request, x_user_id: UUID = Header()
) -> dict[str, object]:
    """Apply a partial update to a food entry."""
    entry = _container(request).diary_service.update_entry(
        x_user_id, entry_id, body.entry
    )
    return {
        "entry": serialize_entry(entry),
        "message": "Food entry updated successfully",
    }


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: UUID, request: Request, x_user_id: UUID = Header()
) -> dict[str, object]:
    """Delete a food entry."""
    _container(request).diary_service.delete_entry(x_user_id, entry_id)
    return {"message": "Food entry deleted successfully"}


def serialize_entry(entry: FoodEntry) -> dict[str, object]:
    """Render an entry with the camelCase field names clients expect."""
    return {
        "id": str(entry.id),
        "userId": str(entry.user_id),
        "date": entry.date.isoformat(),
        "mealType": entry.meal_type.value,
        "foodName": entry.food_name,
        "quantity": entry.quantity,
        "unit": entry.unit,
        "calories": entry.calories,
        "protein": entry.protein_g,
        "carbs": entry.carbs_g,
        "fat": entry.fat_g,
        "notes": entry.notes,
        "createdAt": entry.created_at.isoformat(),
        "updatedAt": entry.updated_at.isoformat(),
    }


def serialize_nutrition(nutrition: DailyNutrition) -> dict[str, object]:
    """Render a daily summary."""
    return {
        "date": nutrition.date.isoformat(),
        "totalCalories": nutrition.total_calories,
        "totalProtein": nutrition.total_protein_g,
        "totalCarbs": nutrition.total_carbs_g,
        "totalFat": nutrition.total_fat_g,
        "entries": [serialize_entry(entry) for entry in nutrition.entries],
    }


def _serialize_meals(
    meals: dict[MealType, list[FoodEntry]],
) -> dict[str, list[dict[str, object]]]:
    return {
        meal.value: [serialize_entry(entry) for entry in entries]
        for meal, entries in meals.items()
    }


def _serialize_averages(averages: RangeAverages) -> dict[str, object]:
    return {
        "days": averages.days,
        "avgCalories": averages.avg_calories,
        "avgProtein": averages.avg_protein_g,
        "avgCarbs": averages.avg_carbs_g,
        "avgFat": averages.avg_fat_g,
    }


def _serialize_range(summary: dict[date, DailyNutrition]) -> dict[str, object]:
    return {
        "summary": {
            day.isoformat(): serialize_nutrition(nutrition)
            for day, nutrition in summary.items()
        },
        "averages": _serialize_averages(range_averages(summary)),
    }
