"""Domain models for food diary entries."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MealType(StrEnum):
    """Fixed meal categories, in display order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class FoodEntry:
    """A single logged food item."""

    id: UUID
    user_id: UUID
    date: date
    meal_type: MealType
    food_name: str
    quantity: float
    unit: str
    calories: int
    protein_g: float | None
    carbs_g: float | None
    fat_g: float | None
    notes: str | None
    created_at: datetime
    updated_at: datetime


FoodName = Annotated[str, Field(min_length=1)]
Quantity = Annotated[float, Field(ge=0, allow_inf_nan=False)]
Calories = Annotated[int, Field(ge=0)]
Grams = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class FoodEntryInput(BaseModel):
    """Validated payload for creating an entry."""

    model_config = ConfigDict(
        populate_by_name=True, str_strip_whitespace=True, extra="ignore"
    )

    entry_date: date = Field(alias="date")
    meal_type: MealType = Field(default=MealType.BREAKFAST, alias="mealType")
    food_name: FoodName = Field(alias="foodName")
    quantity: Quantity = 1
    unit: str = "serving"
    calories: Calories = 0
    protein_g: Grams | None = Field(default=None, alias="protein")
    carbs_g: Grams | None = Field(default=None, alias="carbs")
    fat_g: Grams | None = Field(default=None, alias="fat")
    notes: str | None = None


class FoodEntryPatch(BaseModel):
    """Partial payload for updating an entry; unset fields keep their value."""

    model_config = ConfigDict(
        populate_by_name=True, str_strip_whitespace=True, extra="ignore"
    )

    entry_date: date | None = Field(default=None, alias="date")
    meal_type: MealType | None = Field(default=None, alias="mealType")
    food_name: FoodName | None = Field(default=None, alias="foodName")
    quantity: Quantity | None = None
    unit: str | None = None
    calories: Calories | None = None
    protein_g: Grams | None = Field(default=None, alias="protein")
    carbs_g: Grams | None = Field(default=None, alias="carbs")
    fat_g: Grams | None = Field(default=None, alias="fat")
    notes: str | None = None
