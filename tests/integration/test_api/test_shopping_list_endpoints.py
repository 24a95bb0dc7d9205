import pytest
from datetime import date


@pytest.fixture
def planned_week(make_menu_item, make_recipe, make_plan, make_side):
    chili = make_menu_item("Chili")
    make_recipe(chili, [("Beans", 2, "can"), ("Onion", 1, "")])
    bread = make_side("Cornbread")
    make_plan(chili, date(2024, 1, 29), side=bread)
    make_plan(chili, date(2024, 2, 2), side=bread)
    return chili


@pytest.mark.integration
class TestGenerateEndpoint:
    """Integration tests for /api/v1/shopping-lists/generate"""

    def test_generate(self, client, auth_headers, test_household, planned_week):
        response = client.post(
            "/api/v1/shopping-lists/generate",
            json={"household_id": test_household.id, "week_start": "2024-01-29"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["date_range_end"] == "2024-02-04"
        assert [(i["ingredient_name"], i["quantity"], i["unit"]) for i in data["items"]] == [
            ("Beans", 4.0, "can"),
            ("Onion", 2.0, ""),
            ("2 Cornbread", 0.0, ""),
        ]
        assert data["total_items"] == 3

    def test_missing_recipe_reported(self, client, auth_headers, test_household, make_menu_item, make_plan):
        item = make_menu_item("Mystery")
        make_plan(item, date(2024, 1, 30))

        response = client.post(
            "/api/v1/shopping-lists/generate",
            json={"household_id": test_household.id, "week_start": "2024-01-29"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["error"]["details"]["menu_item_ids"] == [item.id]

        lists = client.get(
            "/api/v1/shopping-lists", params={"household_id": test_household.id}, headers=auth_headers
        ).json()["data"]
        assert lists == []

    def test_empty_week(self, client, auth_headers, test_household):
        response = client.post(
            "/api/v1/shopping-lists/generate",
            json={"household_id": test_household.id, "week_start": "2024-01-29"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert "No menu items scheduled" in response.json()["error"]["message"]


@pytest.mark.integration
class TestListEditing:

    @pytest.fixture
    def list_id(self, client, auth_headers, test_household):
        response = client.post(
            "/api/v1/shopping-lists",
            json={"household_id": test_household.id, "date_range_start": "2024-03-01", "date_range_end": "2024-03-07"},
            headers=auth_headers,
        )
        return response.json()["data"]["id"]

    def _add(self, client, headers, list_id, name):
        return client.post(
            f"/api/v1/shopping-lists/{list_id}/items",
            json={"ingredient_name": name, "quantity": 1, "unit": "pack"},
            headers=headers,
        ).json()["data"]

    def test_add_toggle_reorder_export(self, client, auth_headers, member_headers, list_id):
        first = self._add(client, auth_headers, list_id, "Butter")
        second = self._add(client, member_headers, list_id, "Cheese")
        third = self._add(client, auth_headers, list_id, "Yogurt")
        assert [first["sort_order"], second["sort_order"], third["sort_order"]] == [0, 1, 2]

        reordered = client.post(
            f"/api/v1/shopping-lists/{list_id}/reorder",
            json={"dragged_item_id": third["id"], "target_item_id": first["id"]},
            headers=auth_headers,
        ).json()["data"]
        assert [i["ingredient_name"] for i in reordered] == ["Yogurt", "Butter", "Cheese"]

        toggled = client.post(f"/api/v1/shopping-lists/items/{second['id']}/toggle", headers=auth_headers)
        assert toggled.json()["data"]["checked"] is True

        export = client.get(f"/api/v1/shopping-lists/{list_id}/export", headers=auth_headers).json()["data"]
        assert export["content"].splitlines()[-1] == "  [x] Cheese (1 pack)"

    def test_reorder_checked_item_rejected(self, client, auth_headers, list_id):
        first = self._add(client, auth_headers, list_id, "Butter")
        second = self._add(client, auth_headers, list_id, "Cheese")
        client.post(f"/api/v1/shopping-lists/items/{first['id']}/toggle", headers=auth_headers)

        response = client.post(
            f"/api/v1/shopping-lists/{list_id}/reorder",
            json={"dragged_item_id": first["id"], "target_item_id": second["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 422

    def test_outsider_cannot_read(self, client, outsider_headers, list_id):
        response = client.get(f"/api/v1/shopping-lists/{list_id}", headers=outsider_headers)

        assert response.status_code == 403

    def test_templates(self, client, auth_headers, test_household, list_id):
        self._add(client, auth_headers, list_id, "Butter")

        saved = client.post(
            f"/api/v1/shopping-lists/{list_id}/templates", json={"name": "Dairy"}, headers=auth_headers
        )
        assert saved.status_code == 201
        template_id = saved.json()["data"]["id"]

        listed = client.get(
            "/api/v1/shopping-lists/templates", params={"household_id": test_household.id}, headers=auth_headers
        ).json()["data"]
        assert [t["name"] for t in listed] == ["Dairy"]

        loaded = client.post(
            f"/api/v1/shopping-lists/templates/{template_id}/load",
            json={"shopping_list_id": list_id},
            headers=auth_headers,
        ).json()["data"]
        assert [i["ingredient_name"] for i in loaded["items"]] == ["Butter", "Butter"]

        fresh = client.post(
            f"/api/v1/shopping-lists/templates/{template_id}/lists",
            json={"date_range_start": "2024-04-01", "date_range_end": "2024-04-07"},
            headers=auth_headers,
        )
        assert fresh.status_code == 201
        assert fresh.json()["data"]["total_items"] == 1
