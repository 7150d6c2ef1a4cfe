"""
API tests for the estimator endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from estimator.main import create_app


@pytest.fixture
def client(catalog):
    app = create_app(catalog=catalog)
    with TestClient(app) as client:
        yield client


# ==================
# HEALTH / CATALOG
# ==================

class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["catalog_items"] == 30

    def test_root(self, client):
        assert client.get("/").json()["docs"] == "/docs"


class TestCatalogEndpoints:
    def test_list_items(self, client):
        data = client.get("/api/v1/catalog/items").json()
        assert data["count"] == 30
        assert data["version"] == "1.2.0"

    def test_filters(self, client):
        paint = client.get("/api/v1/catalog/items", params={"category": "paint"}).json()
        windows = client.get("/api/v1/catalog/items", params={"job_tag": "window_install"}).json()

        assert paint["count"] == 3
        assert windows["count"] == 4

    def test_unknown_category(self, client):
        response = client.get("/api/v1/catalog/items", params={"category": "spaceship"})
        assert response.status_code == 400
        assert "Unknown category" in response.json()["detail"]

    def test_get_item(self, client):
        data = client.get("/api/v1/catalog/items/caulk-painter").json()
        assert data["unit_price"] == 5.25
        assert data["display_category"] == "Caulk & Sealants"

    def test_missing_item(self, client):
        assert client.get("/api/v1/catalog/items/nope").status_code == 404

    def test_effective_catalog(self, client):
        data = client.post("/api/v1/catalog/effective", json={
            "owner_id": "user-1",
            "price_overrides": {"caulk-painter": 6.75},
            "product_url_overrides": {"caulk-painter": "https://example.com/caulk"},
            "removed_material_ids": ["drip-cap"],
        }).json()
        items = {item["id"]: item for item in data["items"]}

        assert data["count"] == 29
        assert "drip-cap" not in items
        assert "drip-cap" not in data["material_ids"]
        assert data["material_ids"][0] == "stud-2x4-8"
        assert items["caulk-painter"]["unit_price"] == 6.75
        assert items["caulk-painter"]["product_url"] == "https://example.com/caulk"

    def test_effective_catalog_rejects_infinite_price(self, client):
        response = client.post(
            "/api/v1/catalog/effective",
            content='{"price_overrides": {"caulk-painter": Infinity}}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422


# ==================
# ESTIMATES
# ==================

class TestEstimateEndpoints:
    def test_quantity(self, client):
        response = client.post("/api/v1/estimates/quantity", json={
            "item_id": "stud-2x4-8",
            "context": {"wall_length_ft": 20},
        })
        data = response.json()

        assert response.status_code == 200
        assert data["quantity"] == 18
        assert data["reason"] == "computed"
        assert data["path"] == "rule"
        assert data["total_cost"] == pytest.approx(71.64)

    def test_quantity_missing_input(self, client):
        data = client.post("/api/v1/estimates/quantity", json={"item_id": "stud-2x4-8"}).json()
        assert data["quantity"] == 0
        assert data["reason"] == "missing_input"

    def test_quantity_unknown_item(self, client):
        response = client.post("/api/v1/estimates/quantity", json={"item_id": "nope"})
        assert response.status_code == 404

    def test_negative_geometry_rejected(self, client):
        response = client.post("/api/v1/estimates/quantity", json={
            "item_id": "stud-2x4-8",
            "context": {"wall_length_ft": -5},
        })
        assert response.status_code == 422

    def test_job_types(self, client):
        data = client.get("/api/v1/estimates/job-types").json()
        assert len(data) == 6
        assert data[0]["material_ids"][0] == "stud-2x4-8"

    def test_generate(self, client):
        data = client.post("/api/v1/estimates/generate", json={
            "job_type": "interior_wall",
            "context": {"wall_length_ft": 10, "wall_height_ft": 8},
        }).json()

        assert data["display_name"] == "Interior Wall Build"
        assert len(data["materials"]) == 5
        assert data["total_cost"] > 0

    def test_generate_unknown_job_type(self, client):
        response = client.post("/api/v1/estimates/generate", json={"job_type": "moon_base"})
        assert response.status_code == 400
        assert "Valid types" in response.json()["detail"]

    @pytest.mark.parametrize("value", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_geometry_rejected(self, client, value):
        response = client.post(
            "/api/v1/estimates/generate",
            content='{"job_type": "interior_wall", "context": {"wall_length_ft": ' + value + "}}",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422


# ==================
# RECOMMENDATIONS
# ==================

class TestRecommendationEndpoints:
    def test_job_types(self, client):
        assert len(client.get("/api/v1/recommendations/job-types").json()) == 8

    def test_recommend(self, client):
        data = client.post("/api/v1/recommendations", json={
            "job_type": "paint_room",
            "length_ft": 12,
            "secondary_ft": 10,
            "door_count": 1,
            "window_count": 1,
        }).json()

        assert data["display_name"] == "Paint Room"
        assert [r["name"] for r in data["recommendations"]][0] == "Interior wall paint"
        assert "materials" not in data

    def test_recommend_and_resolve(self, client):
        data = client.post("/api/v1/recommendations", json={
            "job_type": "lvp_flooring",
            "length_ft": 12,
            "secondary_ft": 10,
            "resolve": True,
            "owner_id": "user-7",
        }).json()

        assert len(data["materials"]) == 3
        assert all(m["owner_id"] == "user-7" for m in data["materials"])
        assert data["total_cost"] >= 0

    def test_unknown_job_type(self, client):
        response = client.post("/api/v1/recommendations", json={"job_type": "moon_base"})
        assert response.status_code == 400

    def test_invalid_coats(self, client):
        response = client.post("/api/v1/recommendations", json={"job_type": "paint_room", "coats": 0})
        assert response.status_code == 422

    def test_infinite_height_rejected(self, client):
        response = client.post(
            "/api/v1/recommendations",
            content='{"job_type": "paint_room", "length_ft": 10, "secondary_ft": 10, "height_ft": Infinity}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

    def test_resolve_with_owner_preferences(self, client):
        data = client.post("/api/v1/recommendations", json={
            "job_type": "paint_room",
            "length_ft": 12,
            "secondary_ft": 10,
            "resolve": True,
            "preferences": {"owner_id": "user-7", "price_overrides": {"painters-tape": 9.0}},
        }).json()
        tape = next(m for m in data["materials"] if m["name"] == "Painter's tape")

        assert tape["unit_cost"] == 9.0
        assert tape["unit"] == "roll"


# ==================
# COMPARISONS / SUGGESTIONS
# ==================

class TestComparisonEndpoints:
    def test_best_matches(self, client):
        data = client.post("/api/v1/comparisons/best-matches", json={
            "name": "2x4 stud",
            "unit": "each",
            "unit_cost": 3.90,
        }).json()

        assert len(data["matches"]) == 5
        assert data["matches"][0]["catalog_item"]["id"] == "stud-2x4-8"
        assert data["matches"][0]["matched_attributes"] == ["name", "unit", "cost"]

    def test_limit(self, client):
        data = client.post("/api/v1/comparisons/best-matches", json={"name": "grout", "limit": 2}).json()
        assert len(data["matches"]) == 2


class TestSuggestionEndpoints:
    def test_keywords(self, client):
        data = client.post("/api/v1/suggestions/keywords", json={"description": "Paint the bedroom"}).json()

        assert len(data["materials"]) == 15
        assert data["total_cost"] > 0


# ==================
# USAGE
# ==================

class TestUsageEndpoints:
    @pytest.fixture
    def history(self):
        return {
            "jobs": [
                {"id": "j1", "category": "Drywall", "dateCreated": "2024-03-01T09:00:00Z",
                 "materials": [{"name": "Drywall screws", "quantity": 10}, {"name": "Joint tape"}]},
                {"id": "j2", "category": "Drywall", "dateCreated": "2024-03-02T09:00:00Z",
                 "materials": [{"name": "Drywall screws", "quantity": 30}]},
            ],
            "invoices": [
                {"id": "i1", "title": "Paint touch-up", "materials": [{"name": "Paint"}]},
            ],
        }

    def test_push_and_query(self, client, history):
        response = client.post("/api/v1/usage/history", params={"sync": True}, json=history)
        data = response.json()

        assert data["decoded"] == {"jobs": 2, "invoices": 1}
        assert data["status"] == "rebuilt"
        assert data["material_count"] == 3

        frequent = client.get("/api/v1/usage/frequent").json()
        assert frequent["materials"][0]["name"] == "Drywall screws"
        assert frequent["materials"][0]["average_quantity"] == 20

        drywall = client.get("/api/v1/usage/job-types/drywall").json()
        assert drywall["count"] == 2

        paired = client.get("/api/v1/usage/paired", params={"name": "joint tape"}).json()
        assert [m["name"] for m in paired["materials"]] == ["Drywall screws"]

    def test_scheduled_push(self, client, history):
        data = client.post("/api/v1/usage/history", json={"jobs": history["jobs"]}).json()

        assert data["status"] == "scheduled"
        assert data["decoded"] == {"jobs": 2}

    def test_non_object_entries_skipped(self, client, history):
        feed = {"jobs": [42, "oops"] + history["jobs"], "invoices": [None]}
        response = client.post("/api/v1/usage/history", params={"sync": True}, json=feed)

        assert response.status_code == 200
        assert response.json()["decoded"] == {"jobs": 2, "invoices": 0}

    def test_clear(self, client, history):
        client.post("/api/v1/usage/history", params={"sync": True}, json=history)
        assert client.delete("/api/v1/usage/history").json() == {"status": "cleared"}
        assert client.get("/api/v1/usage/frequent").json()["count"] == 0

    def test_paired_requires_name(self, client):
        assert client.get("/api/v1/usage/paired").status_code == 422
