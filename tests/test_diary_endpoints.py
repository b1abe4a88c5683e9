"""Tests for the food diary HTTP endpoints."""

from uuid import uuid4

from fastapi.testclient import TestClient

from food_diary.api.app import create_app
from food_diary.domain.errors import TransportError
from tests.conftest import InMemoryFoodEntryRepository


def _client(container) -> TestClient:
    return TestClient(create_app(container))


def _headers(user_id) -> dict[str, str]:
    return {"X-User-Id": str(user_id)}


def _entry(**overrides: object) -> dict[str, object]:
    entry: dict[str, object] = {
        "date": "2024-03-01",
        "mealType": "breakfast",
        "foodName": "Oatmeal with berries",
        "quantity": 1,
        "unit": "bowl",
        "calories": 350,
        "protein": 12,
        "carbs": 65,
        "fat": 8,
    }
    entry.update(overrides)
    return entry


def test_health(container) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_add_and_fetch_day(container, user_id) -> None:
    client = _client(container)

    created = client.post(
        "/api/food-diary", json={"entry": _entry()}, headers=_headers(user_id)
    )
    client.post(
        "/api/food-diary",
        json={
            "entry": _entry(
                mealType="lunch",
                foodName="Grilled chicken salad",
                calories=420,
                protein=35,
                carbs=15,
                fat=22,
            )
        },
        headers=_headers(user_id),
    )
    response = client.get("/api/food-diary/2024-03-01", headers=_headers(user_id))

    assert created.status_code == 201
    body = created.json()
    assert body["message"] == "Food entry added successfully"
    assert body["entry"]["foodName"] == "Oatmeal with berries"
    assert body["entry"]["userId"] == str(user_id)
    assert body["entry"]["createdAt"] == body["entry"]["updatedAt"]

    assert response.status_code == 200
    data = response.json()
    assert len(data["entries"]) == 2
    assert data["nutrition"]["totalCalories"] == 770
    assert data["nutrition"]["totalProtein"] == 47
    assert data["nutrition"]["totalCarbs"] == 80
    assert data["nutrition"]["totalFat"] == 30
    assert list(data["meals"]) == ["breakfast", "lunch", "dinner", "snack"]
    assert data["meals"]["dinner"] == []


def test_fetch_empty_day_returns_zero_totals(container, user_id) -> None:
    response = _client(container).get(
        "/api/food-diary/2024-03-05", headers=_headers(user_id)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["entries"] == []
    assert data["nutrition"]["totalCalories"] == 0
    assert data["nutrition"]["date"] == "2024-03-05"


def test_add_invalid_entry_returns_422(container, user_id) -> None:
    response = _client(container).post(
        "/api/food-diary",
        json={"entry": _entry(foodName="", calories=-5)},
        headers=_headers(user_id),
    )

    assert response.status_code == 422
    data = response.json()
    assert "error" in data
    assert len(data["details"]) == 2


def test_update_entry(container, user_id) -> None:
    client = _client(container)
    created = client.post(
        "/api/food-diary", json={"entry": _entry()}, headers=_headers(user_id)
    ).json()["entry"]

    response = client.put(
        f"/api/food-diary/{created['id']}",
        json={"entry": {"calories": 410, "notes": "Extra honey"}},
        headers=_headers(user_id),
    )

    assert response.status_code == 200
    updated = response.json()["entry"]
    assert updated["id"] == created["id"]
    assert updated["calories"] == 410
    assert updated["notes"] == "Extra honey"
    assert updated["createdAt"] == created["createdAt"]
    assert updated["updatedAt"] != created["updatedAt"]


def test_update_unknown_entry_returns_404(container, user_id) -> None:
    response = _client(container).put(
        f"/api/food-diary/{uuid4()}",
        json={"entry": {"calories": 1}},
        headers=_headers(user_id),
    )

    assert response.status_code == 404


def test_delete_entry_then_delete_again(container, user_id) -> None:
    client = _client(container)
    created = client.post(
        "/api/food-diary", json={"entry": _entry()}, headers=_headers(user_id)
    ).json()["entry"]

    first = client.delete(f"/api/food-diary/{created['id']}", headers=_headers(user_id))
    second = client.delete(
        f"/api/food-diary/{created['id']}", headers=_headers(user_id)
    )

    assert first.status_code == 200
    assert first.json() == {"message": "Food entry deleted successfully"}
    assert second.status_code == 404


def test_nutrition_summary_covers_every_day(container, user_id) -> None:
    client = _client(container)
    client.post("/api/food-diary", json={"entry": _entry()}, headers=_headers(user_id))

    response = client.get(
        "/api/food-diary/nutrition-summary",
        params={"startDate": "2024-03-01", "endDate": "2024-03-03"},
        headers=_headers(user_id),
    )

    assert response.status_code == 200
    data = response.json()
    assert list(data["summary"]) == ["2024-03-01", "2024-03-02", "2024-03-03"]
    assert data["summary"]["2024-03-01"]["totalCalories"] == 350
    assert data["summary"]["2024-03-01"]["entries"] == []
    assert data["summary"]["2024-03-02"]["totalCalories"] == 0
    assert data["summary"]["2024-03-03"]["totalFat"] == 0
    assert data["averages"]["days"] == 3


def test_nutrition_summary_rejects_reversed_range(container, user_id) -> None:
    response = _client(container).get(
        "/api/food-diary/nutrition-summary",
        params={"startDate": "2024-03-03", "endDate": "2024-03-01"},
        headers=_headers(user_id),
    )

    assert response.status_code == 400
    assert "before" in response.json()["error"]


def test_calendar_month(container, user_id) -> None:
    response = _client(container).get(
        "/api/food-diary/calendar/2024/2", headers=_headers(user_id)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["startDate"] == "2024-02-01"
    assert data["endDate"] == "2024-02-29"
    assert len(data["summary"]) == 29


def test_calendar_rejects_invalid_month(container, user_id) -> None:
    response = _client(container).get(
        "/api/food-diary/calendar/2024/13", headers=_headers(user_id)
    )

    assert response.status_code == 422


def test_user_header_is_required(container) -> None:
    response = _client(container).get("/api/food-diary/2024-03-01")

    assert response.status_code == 422


def test_store_failure_returns_502(container, user_id) -> None:
    repository = container.diary_service.repository
    assert isinstance(repository, InMemoryFoodEntryRepository)
    repository.error = TransportError("connection refused")

    response = _client(container).get(
        "/api/food-diary/2024-03-01", headers=_headers(user_id)
    )

    assert response.status_code == 502
    assert "connection refused" in response.json()["error"]


def test_add_entry_rejects_non_finite_numbers(container, user_id) -> None:
    client = _client(container)
    body = (
        '{"entry": {"date": "2024-03-01", "foodName": "Oatmeal",'
        ' "calories": 350, "protein": Infinity}}'
    )

    response = client.post(
        "/api/food-diary",
        content=body,
        headers={**_headers(user_id), "Content-Type": "application/json"},
    )
    day = client.get("/api/food-diary/2024-03-01", headers=_headers(user_id))

    assert response.status_code == 422
    assert response.json()["details"]
    assert day.json()["entries"] == []
