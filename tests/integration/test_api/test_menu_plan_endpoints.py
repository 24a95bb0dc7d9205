import pytest
from datetime import date

from menu_planner.models import MealType


@pytest.fixture
def dinner(make_menu_item, make_plan):
    item = make_menu_item("Fajitas")
    return make_plan(item, date(2024, 6, 3))


@pytest.mark.integration
class TestMenuPlanEndpoints:
    """Integration tests for /api/v1/menu-plans"""

    def test_schedule_and_list(self, client, auth_headers, test_household, make_menu_item):
        item = make_menu_item("Gumbo")

        created = client.post(
            "/api/v1/menu-plans",
            json={
                "household_id": test_household.id,
                "date": "2024-06-05",
                "meal_type": "lunch",
                "menu_item_id": item.id,
            },
            headers=auth_headers,
        )
        listed = client.get(
            "/api/v1/menu-plans",
            params={"household_id": test_household.id, "start_date": "2024-06-01", "end_date": "2024-06-07"},
            headers=auth_headers,
        )

        assert created.status_code == 201
        assert created.json()["data"]["menu_item_name"] == "Gumbo"
        assert [p["date"] for p in listed.json()["data"]] == ["2024-06-05"]

    def test_list_orders_meals_through_the_day(self, client, auth_headers, test_household, make_menu_item, make_plan):
        item = make_menu_item("Gumbo")
        make_plan(item, date(2024, 6, 5), MealType.DINNER)
        make_plan(item, date(2024, 6, 5), MealType.LUNCH)
        make_plan(item, date(2024, 6, 5), MealType.BREAKFAST)
        make_plan(item, date(2024, 6, 4), MealType.DINNER)

        listed = client.get(
            "/api/v1/menu-plans",
            params={"household_id": test_household.id, "start_date": "2024-06-01", "end_date": "2024-06-07"},
            headers=auth_headers,
        ).json()["data"]

        assert [(p["date"], p["meal_type"]) for p in listed] == [
            ("2024-06-04", "dinner"),
            ("2024-06-05", "breakfast"),
            ("2024-06-05", "lunch"),
            ("2024-06-05", "dinner"),
        ]

    def test_schedule_into_occupied_slot(self, client, auth_headers, test_household, dinner, make_menu_item):
        other = make_menu_item("Gumbo")

        response = client.post(
            "/api/v1/menu-plans",
            json={
                "household_id": test_household.id,
                "date": "2024-06-03",
                "meal_type": "dinner",
                "menu_item_id": other.id,
            },
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json()["error"]["details"] == {"plan_id": dinner.id}

    def test_move_swaps(self, client, auth_headers, dinner, make_menu_item, make_plan):
        other = make_plan(make_menu_item("Gumbo"), date(2024, 6, 4))

        response = client.post(
            f"/api/v1/menu-plans/{dinner.id}/move",
            json={"date": "2024-06-04", "meal_type": "dinner"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["moved"]["date"] == "2024-06-04"
        assert data["swapped"]["id"] == other.id
        assert data["swapped"]["date"] == "2024-06-03"

    def test_outsider_cannot_read(self, client, outsider_headers, dinner):
        response = client.get(f"/api/v1/menu-plans/{dinner.id}", headers=outsider_headers)

        assert response.status_code == 403


@pytest.mark.integration
class TestVoteEndpoints:
    """Voting through /api/v1/menu-plans/{id}/votes"""

    def test_vote_toggle_and_flip(self, client, auth_headers, dinner):
        url = f"/api/v1/menu-plans/{dinner.id}/votes"

        up = client.post(url, json={"value": 1}, headers=auth_headers).json()["data"]
        down = client.post(url, json={"value": -1}, headers=auth_headers).json()["data"]
        cleared = client.post(url, json={"value": -1}, headers=auth_headers).json()["data"]

        assert (up["score"], up["user_vote"], up["popularity_score"]) == (1, 1, 1)
        assert (down["score"], down["user_vote"], down["popularity_score"]) == (-1, -1, -1)
        assert (cleared["score"], cleared["user_vote"], cleared["popularity_score"]) == (0, None, 0)

    def test_downvotes_hide_item(self, client, auth_headers, member_headers, test_household, dinner, db_session):
        test_household.popularity_threshold = -1
        db_session.commit()
        url = f"/api/v1/menu-plans/{dinner.id}/votes"

        client.post(url, json={"value": -1}, headers=auth_headers)
        result = client.post(url, json={"value": -1}, headers=member_headers).json()["data"]

        assert result["popularity_score"] == -2
        assert result["is_hidden"] is True

        visible = client.get(
            "/api/v1/menu-items", params={"household_id": test_household.id}, headers=auth_headers
        ).json()["data"]
        assert [item["name"] for item in visible] == []

    def test_invalid_vote_value(self, client, auth_headers, dinner):
        response = client.post(f"/api/v1/menu-plans/{dinner.id}/votes", json={"value": 2}, headers=auth_headers)

        assert response.status_code == 422

    def test_outsider_cannot_vote(self, client, outsider_headers, dinner):
        response = client.post(f"/api/v1/menu-plans/{dinner.id}/votes", json={"value": 1}, headers=outsider_headers)

        assert response.status_code == 403

    def test_list_votes(self, client, auth_headers, member_headers, dinner, member_user):
        url = f"/api/v1/menu-plans/{dinner.id}/votes"
        client.post(url, json={"value": 1}, headers=member_headers)

        votes = client.get(url, headers=auth_headers).json()["data"]

        assert [(v["user_id"], v["value"]) for v in votes] == [(member_user.id, 1)]
