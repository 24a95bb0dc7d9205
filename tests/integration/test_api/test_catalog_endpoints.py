import pytest


@pytest.mark.integration
class TestMenuItemEndpoints:
    """Integration tests for /api/v1/menu-items"""

    def test_create_and_list(self, client, auth_headers, test_household):
        created = client.post(
            "/api/v1/menu-items",
            json={"household_id": test_household.id, "name": "Pad Thai", "genre": "Asian"},
            headers=auth_headers,
        )

        assert created.status_code == 201
        data = created.json()["data"]
        assert (data["popularity_score"], data["is_hidden"], data["genre"]) == (0, False, "Asian")

        listed = client.get(
            "/api/v1/menu-items", params={"household_id": test_household.id}, headers=auth_headers
        ).json()["data"]
        assert [item["name"] for item in listed] == ["Pad Thai"]

    def test_hide_and_restore(self, client, auth_headers, test_household, make_menu_item):
        item = make_menu_item("Meatloaf")

        hidden = client.post(f"/api/v1/menu-items/{item.id}/hide", headers=auth_headers)
        default_list = client.get(
            "/api/v1/menu-items", params={"household_id": test_household.id}, headers=auth_headers
        ).json()["data"]
        full_list = client.get(
            "/api/v1/menu-items",
            params={"household_id": test_household.id, "include_hidden": True},
            headers=auth_headers,
        ).json()["data"]
        restored = client.post(f"/api/v1/menu-items/{item.id}/restore", headers=auth_headers)

        assert hidden.json()["data"]["is_hidden"] is True
        assert default_list == []
        assert [i["name"] for i in full_list] == ["Meatloaf"]
        assert restored.json()["data"]["is_hidden"] is False

    def test_permanent_delete(self, client, auth_headers, make_menu_item):
        item = make_menu_item("Meatloaf")

        deleted = client.delete(f"/api/v1/menu-items/{item.id}", headers=auth_headers)
        missing = client.get(f"/api/v1/menu-items/{item.id}", headers=auth_headers)

        assert deleted.status_code == 200
        assert missing.status_code == 404

    def test_outsider_cannot_create(self, client, outsider_headers, test_household):
        response = client.post(
            "/api/v1/menu-items",
            json={"household_id": test_household.id, "name": "Pad Thai"},
            headers=outsider_headers,
        )

        assert response.status_code == 403

    def test_side_links(self, client, auth_headers, make_menu_item, make_side):
        item = make_menu_item("Steak")
        salad = make_side("Salad")

        linked = client.post(f"/api/v1/menu-items/{item.id}/sides/{salad.id}", headers=auth_headers)
        unlinked = client.delete(f"/api/v1/menu-items/{item.id}/sides/{salad.id}", headers=auth_headers)
        again = client.delete(f"/api/v1/menu-items/{item.id}/sides/{salad.id}", headers=auth_headers)

        assert [s["name"] for s in linked.json()["data"]] == ["Salad"]
        assert unlinked.json()["data"] == []
        assert again.status_code == 404


@pytest.mark.integration
class TestRecipeEndpoints:
    """Integration tests for /api/v1/recipes"""

    def test_create_and_fetch_by_menu_item(self, client, auth_headers, make_menu_item):
        item = make_menu_item("Risotto")

        created = client.post(
            "/api/v1/recipes",
            json={
                "menu_item_id": item.id,
                "instructions": "Stir constantly.",
                "servings": 2,
                "ingredients": [{"name": "Arborio rice", "quantity": 1, "unit": "cup"}],
            },
            headers=auth_headers,
        )
        fetched = client.get(f"/api/v1/menu-items/{item.id}/recipe", headers=auth_headers)

        assert created.status_code == 201
        assert fetched.json()["data"]["ingredients"][0]["name"] == "Arborio rice"

    def test_duplicate_recipe(self, client, auth_headers, make_menu_item, make_recipe):
        item = make_menu_item("Risotto")
        make_recipe(item)

        response = client.post("/api/v1/recipes", json={"menu_item_id": item.id}, headers=auth_headers)

        assert response.status_code == 409

    def test_negative_quantity(self, client, auth_headers, make_menu_item):
        item = make_menu_item("Risotto")

        response = client.post(
            "/api/v1/recipes",
            json={"menu_item_id": item.id, "ingredients": [{"name": "Rice", "quantity": -1}]},
            headers=auth_headers,
        )

        assert response.status_code == 422


@pytest.mark.integration
class TestSideEndpoints:

    def test_create_rename_delete(self, client, auth_headers, test_household):
        created = client.post(
            "/api/v1/sides", json={"household_id": test_household.id, "name": "Slaw"}, headers=auth_headers
        ).json()["data"]

        renamed = client.put(f"/api/v1/sides/{created['id']}", json={"name": "Coleslaw"}, headers=auth_headers)
        deleted = client.delete(f"/api/v1/sides/{created['id']}", headers=auth_headers)
        listed = client.get("/api/v1/sides", params={"household_id": test_household.id}, headers=auth_headers)

        assert renamed.json()["data"]["name"] == "Coleslaw"
        assert deleted.status_code == 200
        assert listed.json()["data"] == []
