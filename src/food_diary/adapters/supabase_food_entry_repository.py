"""Supabase repository for food diary entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from food_diary.adapters.supabase_support import execute
from food_diary.domain.entries import FoodEntry, FoodEntryInput, MealType
from food_diary.domain.errors import TransportError
from food_diary.services.diary import FoodEntryRepository

_COLUMNS = (
    "id, user_id, entry_date, meal_type, food_name, quantity, unit, calories, "
    "protein_g, carbs_g, fat_g, notes, created_at, updated_at"
)


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for food entries."""

    client: Client
    table_name: str = "food_entries"

    def list_entries_for_date(self, user_id: UUID, day: date) -> list[FoodEntry]:
        """Return entries for a date, oldest first."""
        query = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("entry_date", day.isoformat())
            .order("created_at", desc=False)
        )
        response = execute(query, "list food entries")
        return [_parse_row(row) for row in response.data or []]

    def list_entries_between(
        self, user_id: UUID, start: date, end: date
    ) -> list[FoodEntry]:
        """Return entries dated within the inclusive range."""
        query = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("entry_date", start.isoformat())
            .lte("entry_date", end.isoformat())
            .order("entry_date", desc=False)
            .order("created_at", desc=False)
        )
        response = execute(query, "list food entries in range")
        return [_parse_row(row) for row in response.data or []]

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        """Return an entry by id."""
        query = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .limit(1)
        )
        response = execute(query, "load food entry")
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_entry(
        self, user_id: UUID, draft: FoodEntryInput, created_at: datetime
    ) -> FoodEntry:
        """Insert an entry row and return it with the database id."""
        payload = {
            "user_id": str(user_id),
            "entry_date": draft.entry_date.isoformat(),
            "meal_type": draft.meal_type.value,
            "food_name": draft.food_name,
            "quantity": draft.quantity,
            "unit": draft.unit,
            "calories": draft.calories,
            "protein_g": draft.protein_g,
            "carbs_g": draft.carbs_g,
            "fat_g": draft.fat_g,
            "notes": draft.notes,
            "created_at": created_at.isoformat(),
            "updated_at": created_at.isoformat(),
        }
        query = self.client.table(self.table_name).insert(payload)
        response = execute(query, "create food entry")
        if not response.data:
            raise TransportError("Failed to create food entry")
        return _parse_row(response.data[0])

    def update_entry(self, entry: FoodEntry) -> FoodEntry | None:
        """Write the mutable fields of an entry."""
        query = (
            self.client.table(self.table_name)
            .update(
                {
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
            )
            .eq("id", str(entry.id))
            .eq("user_id", str(entry.user_id))
        )
        response = execute(query, "update food entry")
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry row; False when nothing matched."""
        query = (
            self.client.table(self.table_name)
            .delete()
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
        )
        response = execute(query, "delete food entry")
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> FoodEntry:
    return FoodEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        date=date.fromisoformat(str(row["entry_date"])),
        meal_type=MealType(str(row["meal_type"])),
        food_name=str(row.get("food_name") or ""),
        quantity=float(row.get("quantity") or 0.0),
        unit=str(row.get("unit") or ""),
        calories=int(row.get("calories") or 0),
        protein_g=_optional_float(row.get("protein_g")),
        carbs_g=_optional_float(row.get("carbs_g")),
        fat_g=_optional_float(row.get("fat_g")),
        notes=str(row["notes"]) if row.get("notes") is not None else None,
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
    )


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str) and value:
        return float(value)
    return None
